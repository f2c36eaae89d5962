"""HTTP transport abstraction and per-client transport selection."""

from __future__ import annotations

import threading
from typing import Callable, Protocol

import requests


class Transport(Protocol):
    """Anything that sends one prepared request and returns its response.

    ``requests.Session`` satisfies this protocol.
    """

    def send(
        self, request: requests.PreparedRequest, **kwargs
    ) -> requests.Response:
        ...


class TransportSelector:
    """Resolve the transport a client sends through.

    An injected *override* always wins. Otherwise a default transport is
    built by *factory* on first use, exactly once, and reused afterwards.
    """

    def __init__(
        self,
        override: Transport | None = None,
        factory: Callable[[], Transport] = requests.Session,
    ):
        self._override = override
        self._factory = factory
        self._default: Transport | None = None
        self._lock = threading.Lock()

    def get(self) -> Transport:
        if self._override is not None:
            return self._override

        default = self._default
        if default is not None:
            return default

        with self._lock:
            if self._default is None:
                self._default = self._factory()
            return self._default

    def close(self) -> None:
        """Close the default transport if one was built; overrides are left open."""
        with self._lock:
            default = self._default
        close = getattr(default, "close", None)
        if close is not None:
            close()
