from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from functools import lru_cache

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from payment_bridge.core.constants import DEFAULT_ENV_FILE, DESCRIPTION_PREFIX, SERVICE_NAME


class Environment(StrEnum):
    """Deployment environments supported by the service."""

    DEVELOPMENT = "development"
    TEST = "test"
    STAGING = "staging"
    PRODUCTION = "production"


class YooKassaSettings(BaseSettings):
    """Credentials and call bounds for the YooKassa payment provider."""

    model_config = SettingsConfigDict(
        env_prefix="YOOKASSA__",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    shop_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "YOOKASSA_SHOP_ID", "YOOKASSA__SHOP_ID", "shop_id"
        ),
    )
    secret_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "YOOKASSA_SECRET_KEY", "YOOKASSA__SECRET_KEY", "secret_key"
        ),
    )
    timeout_seconds: float = Field(default=10.0, gt=0, le=120)
    max_attempts: int = Field(default=3, ge=1, le=10)

    @computed_field
    @property
    def configured(self) -> bool:
        return bool(self.shop_id) and self.secret_key is not None


class KubernetesSettings(BaseSettings):
    """Cluster access and resource coordinates."""

    model_config = SettingsConfigDict(
        env_prefix="KUBERNETES__",
        extra="ignore",
        case_sensitive=False,
    )

    kubeconfig: str | None = None
    request_timeout_seconds: float = Field(default=10.0, gt=0, le=120)

    settings_group: str = "management.cattle.io"
    settings_version: str = "v3"
    settings_plural: str = "settings"
    base_url_setting: str = "gorizond-install-payment-url"

    billing_event_group: str = "provisioning.gorizond.io"
    billing_event_version: str = "v1"
    billing_event_plural: str = "billingevents"

    @field_validator("kubeconfig")
    @classmethod
    def _strip_empty_path(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None


class PaymentsSettings(BaseModel):
    """Defaults applied to every payment link."""

    model_config = ConfigDict(extra="ignore")

    currency: str = Field(default="RUB", min_length=3, max_length=3)
    payment_method: str | None = "bank_card"
    capture: bool = True
    return_path: str = "/dashboard/c/_/gorizond/provisioning.gorizond.io.billing"
    description_prefix: str = DESCRIPTION_PREFIX
    dashboard_base_url: str | None = Field(
        default=None,
        description="Skips the cluster Setting lookup when provided.",
    )

    @model_validator(mode="after")
    def _normalise(self) -> PaymentsSettings:
        self.currency = self.currency.upper()
        if self.return_path and not self.return_path.startswith("/"):
            self.return_path = f"/{self.return_path}"
        if self.dashboard_base_url is not None:
            self.dashboard_base_url = self.dashboard_base_url.strip() or None
        return self


class PrometheusSettings(BaseSettings):
    """Prometheus metrics configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PROMETHEUS__",
        extra="ignore",
        case_sensitive=False,
    )

    enabled: bool = True
    metrics_path: str = "/metrics"
    excluded_handlers: list[str] = Field(default_factory=lambda: ["^/metrics$", "^/$"])


class SentrySettings(BaseSettings):
    """Sentry error tracking configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SENTRY__",
        extra="ignore",
        case_sensitive=False,
    )

    enabled: bool = True
    dsn: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("SENTRY_DSN", "SENTRY__DSN", "dsn"),
    )
    environment: str | None = None
    release: str | None = None
    traces_sample_rate: float = Field(default=0.1, ge=0.0, le=1.0)
    send_default_pii: bool = False


class Settings(BaseSettings):
    """Application settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
        case_sensitive=False,
    )

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    log_level: str = "INFO"

    project_name: str = SERVICE_NAME
    project_version: str = "0.1.0"

    host: str = "0.0.0.0"
    port: int = Field(default=80, ge=1, le=65535)

    yookassa: YooKassaSettings = Field(default_factory=YooKassaSettings)
    kubernetes: KubernetesSettings = Field(default_factory=KubernetesSettings)
    payments: PaymentsSettings = Field(default_factory=PaymentsSettings)
    prometheus: PrometheusSettings = Field(default_factory=PrometheusSettings)
    sentry: SentrySettings = Field(default_factory=SentrySettings)

    @field_validator("yookassa", mode="before")
    @classmethod
    def _merge_yookassa_env(cls, value: object) -> object:
        # Nested dicts bypass the section's own env sources, which carry the
        # single-underscore credential names.
        if isinstance(value, Mapping):
            return YooKassaSettings(**value)
        return value

    @model_validator(mode="after")
    def _normalize(self) -> Settings:
        self.log_level = self.log_level.upper()

        if self.environment in {Environment.DEVELOPMENT, Environment.TEST}:
            self.debug = True

        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached instance of the application settings."""

    return Settings()
