"""Shared Access Signature generation for Service Bus requests.

See https://docs.microsoft.com/en-us/azure/service-bus-messaging/service-bus-sas
"""

import base64
import hashlib
import hmac
import math
from datetime import datetime, timezone
from urllib.parse import quote_plus

from .errors import ConfigurationError

EXPIRE_IN_SECONDS = 300


def signature(secret: str, message: str) -> str:
    """HMAC-SHA256 of *message* keyed by *secret*, base64 then query-escaped."""
    digest = hmac.new(
        secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
    ).digest()
    encoded = base64.b64encode(digest).decode("ascii")
    return quote_plus(encoded, safe="")


def canonical_uri(resource_uri: str) -> str:
    """Query-escape the full URI and lowercase the result (``%3A`` -> ``%3a``)."""
    return quote_plus(resource_uri, safe="").lower()


def expiry(sign_time: datetime) -> int:
    """Unix seconds of *sign_time* plus the token lifetime, rounded half up."""
    if sign_time.tzinfo is None:
        sign_time = sign_time.replace(tzinfo=timezone.utc)
    return int(math.floor(sign_time.timestamp() + EXPIRE_IN_SECONDS + 0.5))


def auth_header(
    secret: str, key_name: str, resource_uri: str, sign_time: datetime
) -> str:
    """Build the ``Authorization`` header value for *resource_uri*.

    Args:
        secret: The SAS policy key.
        key_name: The SAS policy name, e.g. ``RootManageSharedAccessKey``.
        resource_uri: Full request URL, query string included.
        sign_time: Time the request is built; naive values are taken as UTC.

    Returns:
        ``SharedAccessSignature sig=...&se=...&skn=...&sr=...``
    """
    se = str(expiry(sign_time))
    sr = canonical_uri(resource_uri)
    sig = signature(secret, sr + "\n" + se)
    return f"SharedAccessSignature sig={sig}&se={se}&skn={key_name}&sr={sr}"


class SharedAccessKey:
    """A named SAS policy key used to sign every request."""

    def __init__(self, key_name: str, key_value: str):
        if not key_name:
            raise ConfigurationError("SAS key name is required")
        if not key_value:
            raise ConfigurationError("SAS key value is required")
        self.key_name = key_name
        self._key_value = key_value

    def authorization(self, resource_uri: str, sign_time: datetime) -> str:
        """Return the ``Authorization`` header value for *resource_uri*."""
        return auth_header(self._key_value, self.key_name, resource_uri, sign_time)

    def __repr__(self) -> str:
        return f"SharedAccessKey(key_name={self.key_name!r})"
