"""Marketplace error taxonomy.

Domain rule violations subclass Protean's exception classes and carry a
``messages`` dict (field -> list of strings). They propagate out of command
handlers, rolling back the Unit of Work. The API layer maps each class to an
HTTP status in ``marketplace.api.errors``.
"""

from protean.exceptions import InvalidOperationError, ObjectNotFoundError


class NotFoundError(ObjectNotFoundError):
    """A referenced order, order item or payment does not exist for the caller."""

    def __init__(self, messages):
        self.messages = messages
        super().__init__(messages)


class InvalidStateError(InvalidOperationError):
    """The operation is not allowed in the aggregate's current status."""

    def __init__(self, messages):
        self.messages = messages
        super().__init__(messages)


class InvalidTransitionError(InvalidStateError):
    """An order item status change other than the single legal next step."""

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition from {current} to {target}"]})


class WebhookSignatureError(Exception):
    """A webhook payload failed signature verification."""

    def __init__(self, messages):
        self.messages = messages
        super().__init__(messages)


class PaymentGatewayError(Exception):
    """The payment processor rejected a request or could not be reached.

    ``retryable`` is set for timeouts and connection failures, where the whole
    operation can be retried safely because nothing was persisted.
    """

    def __init__(self, messages, retryable=False):
        self.messages = messages
        self.retryable = retryable
        super().__init__(messages)
