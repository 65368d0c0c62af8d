from __future__ import annotations


class ClusterError(RuntimeError):
    """Base class for failures talking to the cluster API."""


class ClusterConfigurationError(ClusterError):
    """Raised when credentials or the startup Setting cannot be loaded."""


class LedgerWriteError(ClusterError):
    """Raised when the cluster rejects a BillingEvent create."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
