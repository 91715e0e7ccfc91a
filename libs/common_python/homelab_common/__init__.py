"""Shared helpers used by the API service and the status-sweep job.

Keep this package dependency-light: it should only need SQLAlchemy and the
standard library so that every component can import it.
"""
