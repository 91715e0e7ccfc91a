"""Status-sweep job: periodically probes every dashboard service."""
