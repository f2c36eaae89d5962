"""High-level client for Azure Service Bus queues over the REST API."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Callable

import requests

from .codec import decode_message
from .errors import ConfigurationError, TransportError
from .message import Message
from .request import build_request
from .signing import SharedAccessKey
from .status import check_response
from .transport import Transport, TransportSelector

_LOG = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QueueClient:
    """Thread-safe client for one Service Bus queue.

    Every request is signed with a Shared Access Signature derived from the
    namespace policy key. The client holds no state besides its transport,
    so one instance may be shared across threads.
    """

    def __init__(
        self,
        namespace: str,
        key_name: str,
        key_value: str,
        queue_name: str,
        timeout: int = DEFAULT_TIMEOUT,
        transport: Transport | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize the client.

        Args:
            namespace: Service Bus namespace, e.g. ``contoso`` for
                ``https://contoso.servicebus.windows.net``.
            key_name: SAS policy name, e.g. ``RootManageSharedAccessKey``.
            key_value: SAS policy key.
            queue_name: Name of the queue.
            timeout: Seconds the service waits for a message on
                ``get_message``. Passed to the server only.
            transport: Optional transport replacing the default
                ``requests.Session``.
            clock: Source of the signing time.

        Raises:
            ConfigurationError: If namespace, queue name or key is missing.
        """
        if not namespace:
            raise ConfigurationError("Service Bus namespace is required")
        if not queue_name:
            raise ConfigurationError("Queue name is required")
        self.namespace = namespace
        self.queue_name = queue_name
        self.timeout = timeout
        self._key = SharedAccessKey(key_name, key_value)
        self._transports = TransportSelector(override=transport)
        self._clock = clock

    @classmethod
    def from_env(cls, transport: Transport | None = None) -> "QueueClient":
        """Build a client from ``SBQ_*`` environment variables.

        Reads SBQ_NAMESPACE, SBQ_KEY_NAME, SBQ_KEY_VALUE and SBQ_QUEUE_NAME
        (required) and SBQ_TIMEOUT (default 60).

        Raises:
            ConfigurationError: If a required variable is missing or
                SBQ_TIMEOUT is not an integer.
        """
        required = ("SBQ_NAMESPACE", "SBQ_KEY_NAME", "SBQ_KEY_VALUE", "SBQ_QUEUE_NAME")
        missing = [name for name in required if not os.environ.get(name)]
        if missing:
            raise ConfigurationError(
                f"Missing environment variables: {', '.join(missing)}"
            )
        raw_timeout = os.environ.get("SBQ_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = int(raw_timeout)
        except ValueError as e:
            raise ConfigurationError(
                f"SBQ_TIMEOUT must be an integer, got {raw_timeout!r}"
            ) from e
        return cls(
            namespace=os.environ["SBQ_NAMESPACE"],
            key_name=os.environ["SBQ_KEY_NAME"],
            key_value=os.environ["SBQ_KEY_VALUE"],
            queue_name=os.environ["SBQ_QUEUE_NAME"],
            timeout=timeout,
            transport=transport,
        )

    @property
    def key_name(self) -> str:
        return self._key.key_name

    def get_message(self) -> Message:
        """Atomically retrieve and lock the message at the head of the queue.

        The message is not delivered to other receivers until the lock
        expires, or it is unlocked or deleted with its lock token.

        See https://docs.microsoft.com/en-us/rest/api/servicebus/peek-lock-message-non-destructive-read

        Raises:
            NoMessagesAvailableError: If the queue stayed empty for ``timeout``
                seconds.
            StatusError: For any other non-success status.
            TransportError: If no response was received.
            BodyReadError: If the message body could not be read.
        """
        response = self._send(f"messages/head?timeout={self.timeout}", "POST")
        with response:
            check_response(response)
            return decode_message(response)

    def send_message(self, message: Message) -> None:
        """Send *message* to the queue.

        Raises:
            StatusError: For any non-success status.
            TransportError: If no response was received.
        """
        self._call("messages/", "POST", message)

    def unlock_message(self, message: Message) -> None:
        """Release the lock on *message* so other receivers can take it.

        See https://docs.microsoft.com/en-us/rest/api/servicebus/unlock-message

        Raises:
            MessageNotFoundError: If the message or its lock no longer exists.
            StatusError: For any other non-success status.
            TransportError: If no response was received.
        """
        self._call(self._locked_path(message), "PUT")

    def delete_message(self, message: Message) -> None:
        """Complete processing of a locked *message* and remove it.

        Call only after the message was processed, to keep at-least-once
        delivery.

        See https://docs.microsoft.com/en-us/rest/api/servicebus/delete-message

        Raises:
            MessageNotFoundError: If the message or its lock no longer exists.
            StatusError: For any other non-success status.
            TransportError: If no response was received.
        """
        self._call(self._locked_path(message), "DELETE")

    def close(self) -> None:
        """Close the default HTTP session; an injected transport is left open."""
        self._transports.close()

    def __enter__(self) -> "QueueClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"QueueClient(namespace={self.namespace!r}, "
            f"queue_name={self.queue_name!r}, key_name={self.key_name!r})"
        )

    # -- internal helpers --

    @staticmethod
    def _locked_path(message: Message) -> str:
        return f"messages/{message.id}/{message.lock_token}"

    def _call(self, path: str, method: str, message: Message | None = None) -> None:
        response = self._send(path, method, message)
        with response:
            check_response(response)

    def _send(
        self, path: str, method: str, message: Message | None = None
    ) -> requests.Response:
        request = build_request(
            self.namespace,
            self.queue_name,
            path,
            method,
            self._key,
            message=message,
            sign_time=self._clock(),
        )
        try:
            response = self._transports.get().send(request, stream=True)
        except (requests.RequestException, OSError) as e:
            raise TransportError(f"Sending {method} request failed: {e}") from e
        _LOG.debug(
            "response.status method=%s path=%s status=%s",
            method,
            path,
            response.status_code,
        )
        return response
