from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any, Protocol

import structlog
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.config import ConfigException
from urllib3.exceptions import HTTPError as TransportError

from payment_bridge.billing.events import BillingEvent
from payment_bridge.core.config import KubernetesSettings

from .exceptions import ClusterConfigurationError, LedgerWriteError

logger = structlog.get_logger(__name__)


class ClusterClient(Protocol):
    """Operations the bridge needs from the cluster API."""

    async def get_setting_value(self, name: str) -> str:
        """Return the ``value`` of the named cluster Setting."""

    async def create_billing_event(self, event: BillingEvent) -> str:
        """Create ``event`` and return the server-assigned name."""

    def close(self) -> None:
        """Release pooled connections."""


def load_api_client(kubeconfig: str | None) -> client.ApiClient:
    """Build an API client from ``kubeconfig`` or, when unset, in-cluster credentials."""

    if kubeconfig:
        try:
            api_client = config.new_client_from_config(config_file=kubeconfig)
        except (ConfigException, OSError) as exc:
            raise ClusterConfigurationError(
                f"cannot load kubeconfig {kubeconfig!r}: {exc}"
            ) from exc
        logger.info("cluster_credentials_loaded", source="kubeconfig", path=kubeconfig)
        return api_client

    configuration = client.Configuration()
    try:
        config.load_incluster_config(client_configuration=configuration)
    except ConfigException as exc:
        raise ClusterConfigurationError(
            f"cannot load in-cluster credentials: {exc}"
        ) from exc
    logger.info("cluster_credentials_loaded", source="in_cluster")
    return client.ApiClient(configuration)


class KubernetesClusterClient:
    """Async facade over ``CustomObjectsApi``; calls run in worker threads."""

    def __init__(self, api_client: client.ApiClient, settings: KubernetesSettings) -> None:
        self._api_client = api_client
        self._custom = client.CustomObjectsApi(api_client)
        self._settings = settings

    @classmethod
    def from_settings(cls, settings: KubernetesSettings) -> KubernetesClusterClient:
        return cls(load_api_client(settings.kubeconfig), settings)

    @property
    def billing_event_api_version(self) -> str:
        return f"{self._settings.billing_event_group}/{self._settings.billing_event_version}"

    async def get_setting_value(self, name: str) -> str:
        settings = self._settings

        def _call() -> Any:
            return self._custom.get_cluster_custom_object(
                settings.settings_group,
                settings.settings_version,
                settings.settings_plural,
                name,
                _request_timeout=settings.request_timeout_seconds,
            )

        try:
            setting = await asyncio.to_thread(_call)
        except ApiException as exc:
            raise ClusterConfigurationError(
                f"cannot read Setting {name!r}: {exc.status} {exc.reason}"
            ) from exc
        except (TransportError, OSError) as exc:
            raise ClusterConfigurationError(f"cannot read Setting {name!r}: {exc}") from exc

        value = setting.get("value") if isinstance(setting, Mapping) else None
        if not isinstance(value, str) or not value.strip():
            raise ClusterConfigurationError(f"value not found in Setting {name!r}")
        return value.strip()

    async def create_billing_event(self, event: BillingEvent) -> str:
        settings = self._settings
        body = event.to_manifest(self.billing_event_api_version)

        def _call() -> Any:
            return self._custom.create_namespaced_custom_object(
                settings.billing_event_group,
                settings.billing_event_version,
                event.namespace,
                settings.billing_event_plural,
                body,
                _request_timeout=settings.request_timeout_seconds,
            )

        try:
            created = await asyncio.to_thread(_call)
        except ApiException as exc:
            raise LedgerWriteError(
                f"BillingEvent create rejected: {exc.status} {exc.reason}",
                status=exc.status,
            ) from exc
        except (TransportError, OSError) as exc:
            raise LedgerWriteError(f"BillingEvent create failed: {exc}") from exc

        metadata = created.get("metadata") if isinstance(created, Mapping) else None
        name = metadata.get("name") if isinstance(metadata, Mapping) else None
        return name if isinstance(name, str) else ""

    def close(self) -> None:
        self._api_client.close()
