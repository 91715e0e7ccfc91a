"""Exceptions raised by helper modules.

Route handlers translate these into HTTP errors; helpers stay free of FastAPI.
"""


class UpstreamError(RuntimeError):
    """An external service (RSS host, CoinGecko, Glances) failed or returned garbage."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
