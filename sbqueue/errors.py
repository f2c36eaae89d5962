"""Machine-readable error categories for Service Bus queue failures."""

import enum


class ErrorKind(enum.Enum):
    """Closed set of tags for errors classified from an HTTP status."""

    NO_MESSAGES_AVAILABLE = "no_messages_available"
    BAD_REQUEST = "bad_request"
    NOT_AUTHORIZED = "not_authorized"
    MESSAGE_NOT_FOUND = "message_not_found"
    QUEUE_NOT_FOUND = "queue_not_found"
    INTERNAL_SERVICE_ERROR = "internal_service_error"
    UNKNOWN_STATUS = "unknown_status"


class QueueError(Exception):
    """Base exception for all sbqueue errors."""


class ConfigurationError(QueueError):
    """Missing or invalid client configuration."""


class RequestCreationError(QueueError):
    """The outbound HTTP request could not be built."""


class TransportError(QueueError):
    """No response was received (network, TLS or DNS failure)."""


class BodyReadError(QueueError):
    """The response body could not be read."""


class StatusError(QueueError):
    """The service answered with a non-success HTTP status.

    Attributes:
        status_code: The HTTP status code.
        body: The response body as text.
        kind: The ``ErrorKind`` tag of this error.
    """

    kind: ErrorKind
    description = "Service Bus error"

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(self._format())

    def _format(self) -> str:
        return f"{self.description} ({self.status_code}): {self.body}"


class NoMessagesAvailableError(StatusError):
    """No message arrived before the server-side timeout (204)."""

    kind = ErrorKind.NO_MESSAGES_AVAILABLE
    description = "No messages available"


class BadRequestError(StatusError):
    """The request was malformed (400)."""

    kind = ErrorKind.BAD_REQUEST
    description = "Bad request"


class NotAuthorizedError(StatusError):
    """The shared access signature was rejected (401)."""

    kind = ErrorKind.NOT_AUTHORIZED
    description = "Not authorized"


class MessageNotFoundError(StatusError):
    """The message or its lock does not exist (404)."""

    kind = ErrorKind.MESSAGE_NOT_FOUND
    description = "Message does not exist"


class QueueNotFoundError(StatusError):
    """The queue does not exist (410)."""

    kind = ErrorKind.QUEUE_NOT_FOUND
    description = "Queue does not exist"


class InternalServiceError(StatusError):
    """The service failed internally (500)."""

    kind = ErrorKind.INTERNAL_SERVICE_ERROR
    description = "Internal error"


class UnknownStatusError(StatusError):
    """Fallback for status codes the client does not recognize."""

    kind = ErrorKind.UNKNOWN_STATUS

    def _format(self) -> str:
        return f"Unknown status {self.status_code} with body {self.body}"
