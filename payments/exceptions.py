"""Errors raised by the payment core.

Every error carries a ``message`` that is safe to show to a customer or to
return from an HTTP endpoint.
"""


class PaymentError(Exception):
    default_message = "Payment error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnknownProvider(PaymentError):
    default_message = "Unknown payment provider"


# --- initiation ---

class ConfigurationError(PaymentError):
    default_message = "Payment gateway is not properly configured. Please contact the store administrator."


class GatewayDisabled(ConfigurationError):
    default_message = "This payment method is currently unavailable."


class OrderStateError(PaymentError):
    default_message = "This order can no longer be paid."


class TransportError(PaymentError):
    default_message = "Could not reach the payment provider. Please try again."


class RemoteError(PaymentError):
    """Non-2xx answer from the provider. ``body`` is the decoded payload."""

    default_message = "Payment provider rejected the request."

    def __init__(self, message=None, status_code=None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ProviderDeclined(PaymentError):
    """2xx answer whose body does not report success."""

    default_message = "Payment initialization failed. Please try again."

    def __init__(self, message=None, body=None):
        super().__init__(message)
        self.body = body


# --- webhooks ---

class AuthenticationError(PaymentError):
    default_message = "Webhook authentication failed"


class TenantMismatch(AuthenticationError):
    default_message = "Invalid business ID in webhook"


class MapError(PaymentError):
    default_message = "Webhook payload could not be mapped"


class MissingField(MapError):
    def __init__(self, field):
        self.field = field
        super().__init__(f"Missing required webhook field: {field}")


class MatchError(PaymentError):
    default_message = "Order not found for webhook"


class OrderNotFound(PaymentError):
    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Invalid order ID: {order_id}")
