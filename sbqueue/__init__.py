"""Azure Service Bus queue client over the REST API."""

import logging

from .client import QueueClient
from .message import Message
from .properties import Properties
from .signing import SharedAccessKey, auth_header, signature
from .transport import Transport, TransportSelector
from .errors import (
    QueueError,
    ErrorKind,
    StatusError,
    NoMessagesAvailableError,
    BadRequestError,
    NotAuthorizedError,
    MessageNotFoundError,
    QueueNotFoundError,
    InternalServiceError,
    UnknownStatusError,
    RequestCreationError,
    TransportError,
    BodyReadError,
    ConfigurationError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "QueueClient",
    "Message",
    "Properties",
    "SharedAccessKey",
    "auth_header",
    "signature",
    "Transport",
    "TransportSelector",
    "QueueError",
    "ErrorKind",
    "StatusError",
    "NoMessagesAvailableError",
    "BadRequestError",
    "NotAuthorizedError",
    "MessageNotFoundError",
    "QueueNotFoundError",
    "InternalServiceError",
    "UnknownStatusError",
    "RequestCreationError",
    "TransportError",
    "BodyReadError",
    "ConfigurationError",
]
