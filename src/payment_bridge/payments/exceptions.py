from __future__ import annotations


class PaymentError(RuntimeError):
    """Base class for payment domain errors."""


class PaymentConfigurationError(PaymentError):
    """Raised when the payment integration is not properly configured."""


class ClientInputError(PaymentError):
    """Raised when a payment link request is missing or has malformed fields."""


class PaymentGatewayError(PaymentError):
    """Raised when the upstream payment provider rejects or fails a request."""


class IdentityRecoveryError(PaymentError):
    """Raised when a verified payment carries no usable billing identity or amount."""
