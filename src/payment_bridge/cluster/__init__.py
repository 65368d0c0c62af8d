"""Kubernetes access for configuration reads and BillingEvent writes."""

from .client import ClusterClient, KubernetesClusterClient, load_api_client
from .exceptions import ClusterConfigurationError, ClusterError, LedgerWriteError

__all__ = [
    "ClusterClient",
    "KubernetesClusterClient",
    "load_api_client",
    "ClusterError",
    "ClusterConfigurationError",
    "LedgerWriteError",
]
