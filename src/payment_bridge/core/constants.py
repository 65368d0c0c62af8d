"""Global constants for the payment bridge."""

from __future__ import annotations

SERVICE_NAME = "payment-bridge"
REQUEST_ID_HEADER = "X-Request-ID"
REQUEST_ID_CTX_KEY = "request_id"
DEFAULT_ENV_FILE = ".env"

PAYMENT_SUCCEEDED_EVENT = "payment.succeeded"
DESCRIPTION_PREFIX = "Payment for "
METADATA_NAMESPACE_KEY = "namespace"
METADATA_BILLING_KEY = "billing"

BILLING_EVENT_KIND = "BillingEvent"
BILLING_EVENT_NAME_PREFIX = "payment-"
BILLING_EVENT_TYPE = "payment"
