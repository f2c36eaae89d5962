"""Construction of signed Service Bus HTTP requests."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import requests
from requests.structures import CaseInsensitiveDict

from .codec import encode_message
from .errors import RequestCreationError
from .message import Message
from .signing import SharedAccessKey

_LOG = logging.getLogger(__name__)

QUEUE_URL = "https://{namespace}.servicebus.windows.net:443/{queue}/"


def queue_url(namespace: str, queue_name: str, path: str) -> str:
    """Full endpoint URL for *path* under the queue."""
    return QUEUE_URL.format(namespace=namespace, queue=queue_name) + path


def build_request(
    namespace: str,
    queue_name: str,
    path: str,
    method: str,
    key: SharedAccessKey,
    message: Message | None = None,
    sign_time: datetime | None = None,
) -> requests.PreparedRequest:
    """Build a signed request ready to hand to a transport.

    The signature covers the full URL, query string included.

    Args:
        namespace: Service Bus namespace, e.g. ``contoso``.
        queue_name: Name of the queue.
        path: Operation path such as ``messages/head?timeout=60``.
        method: HTTP method.
        key: The SAS policy key to sign with.
        message: Optional message whose properties and body are sent.
        sign_time: Signing time; defaults to now.

    Raises:
        RequestCreationError: If the URL or headers are invalid.
    """
    url = queue_url(namespace, queue_name, path)
    if sign_time is None:
        sign_time = datetime.now(timezone.utc)

    headers = CaseInsensitiveDict()
    body = b""
    if message is not None:
        headers, body = encode_message(message)
    headers["Authorization"] = key.authorization(url, sign_time)

    try:
        prepared = requests.Request(
            method=method, url=url, headers=headers, data=body
        ).prepare()
    except (requests.RequestException, ValueError) as e:
        raise RequestCreationError(f"Request create failed: {e}") from e

    _LOG.debug("request.built method=%s url=%s", method, url)
    return prepared
