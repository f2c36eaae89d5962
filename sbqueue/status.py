"""Classification of Service Bus HTTP status codes into typed errors."""

import logging
from typing import Optional, Union

import requests

from .codec import read_body
from .errors import (
    BadRequestError,
    BodyReadError,
    InternalServiceError,
    MessageNotFoundError,
    NoMessagesAvailableError,
    NotAuthorizedError,
    QueueNotFoundError,
    StatusError,
    UnknownStatusError,
)

_LOG = logging.getLogger(__name__)

SUCCESS_CODES = frozenset({200, 201})

_STATUS_ERRORS = {
    204: NoMessagesAvailableError,
    400: BadRequestError,
    401: NotAuthorizedError,
    404: MessageNotFoundError,
    410: QueueNotFoundError,
    500: InternalServiceError,
}


def error_for_status(
    status_code: int, body: Union[bytes, str]
) -> Optional[StatusError]:
    """Return the error for *status_code*, or ``None`` on success."""
    if status_code in SUCCESS_CODES:
        return None
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    error_cls = _STATUS_ERRORS.get(status_code, UnknownStatusError)
    return error_cls(status_code, body)


def check_response(response: requests.Response) -> None:
    """Raise the classified error unless *response* is a success.

    The body is read only for error responses. An error body that cannot be
    read is replaced by an empty one so the error keeps its kind.

    Raises:
        StatusError: For any status other than 200 or 201.
    """
    if response.status_code in SUCCESS_CODES:
        return
    try:
        body = read_body(response)
    except BodyReadError as e:
        _LOG.warning(
            "response.body_unreadable status=%s error=%s", response.status_code, e
        )
        body = b""
    error = error_for_status(response.status_code, body)
    if error is not None:
        raise error
