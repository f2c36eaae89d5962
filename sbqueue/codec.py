"""Message encoding to and decoding from Service Bus HTTP headers and bodies.

Broker properties travel as a single JSON document in the ``BrokerProperties``
header; every user property is its own header; timestamps use the RFC 2616
layout ``Sun, 06 Nov 1994 08:49:37 GMT``.
"""

import json
import logging
import re
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone

import requests
from requests.structures import CaseInsensitiveDict

from .errors import BodyReadError
from .message import Message
from .properties import Properties

_LOG = logging.getLogger(__name__)

BROKER_PROPERTIES_HEADER = "BrokerProperties"

_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
_HTTP_DATE_RE = re.compile(
    r"^(?:%s), (\d{2}) (%s) (\d{4}) (\d{2}):(\d{2}):(\d{2}) [A-Za-z]+$"
    % ("|".join(_DAYS), "|".join(_MONTHS))
)
_TEMPORAL_FIELDS = frozenset(
    {"locked_until_utc", "enqueued_time_utc", "scheduled_enqueue_time_utc"}
)


def format_http_date(value: datetime) -> str:
    """Format *value* as an RFC 2616 date in GMT; naive values are UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return "%s, %02d %s %04d %02d:%02d:%02d GMT" % (
        _DAYS[value.weekday()],
        value.day,
        _MONTHS[value.month - 1],
        value.year,
        value.hour,
        value.minute,
        value.second,
    )


def parse_http_date(text: str) -> datetime:
    """Parse an RFC 2616 date into an aware UTC datetime.

    The zone abbreviation is required but carries no offset.

    Raises:
        ValueError: If *text* does not match the layout or names no real date.
    """
    m = _HTTP_DATE_RE.match(text)
    if not m:
        raise ValueError(f"not an RFC 2616 date: {text!r}")
    day, month, year, hour, minute, second = m.groups()
    return datetime(
        int(year),
        _MONTHS.index(month) + 1,
        int(day),
        int(hour),
        int(minute),
        int(second),
        tzinfo=timezone.utc,
    )


def _wire(name: str, default=""):
    return field(default=default, metadata={"wire": name})


@dataclass
class BrokerProperties:
    """Wire form of the ``BrokerProperties`` header.

    Field order is the marshal order. Timestamps stay as RFC 2616 strings
    here and are converted when applied to a ``Message``.
    """

    message_id: str = _wire("MessageId")
    lock_token: str = _wire("LockToken")
    label: str = _wire("Label")
    content_type: str = _wire("ContentType")
    correlation_id: str = _wire("CorrelationId")
    session_id: str = _wire("SessionId")
    delivery_count: int = _wire("DeliveryCount", 0)
    locked_until_utc: str = _wire("LockedUntilUtc")
    enqueued_time_utc: str = _wire("EnqueuedTimeUtc")
    sequence_number: int = _wire("SequenceNumber", 0)
    time_to_live: int = _wire("TimeToLive", 0)
    to: str = _wire("To")
    reply_to: str = _wire("ReplyTo")
    scheduled_enqueue_time_utc: str = _wire("ScheduledEnqueueTimeUtc")
    reply_to_session_id: str = _wire("ReplyToSessionId")
    partition_key: str = _wire("PartitionKey")

    def to_json(self) -> str:
        """Compact JSON in field order, zero values omitted."""
        doc = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value:
                doc[f.metadata["wire"]] = value
        return json.dumps(doc, separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str) -> "BrokerProperties":
        """Parse the header value. Unknown keys are ignored, ``null`` is zero.

        Raises:
            ValueError: On invalid JSON, a non-object document or a field
                of the wrong JSON type.
        """
        doc = json.loads(text)
        if not isinstance(doc, dict):
            raise ValueError("BrokerProperties must be a JSON object")
        values = {}
        for f in fields(cls):
            raw = doc.get(f.metadata["wire"])
            if raw is None:
                continue
            values[f.name] = _coerce(f.metadata["wire"], f.type, raw)
        return cls(**values)

    @classmethod
    def from_message(cls, msg: Message) -> "BrokerProperties":
        values = {}
        for f in fields(cls):
            attr = "id" if f.name == "message_id" else f.name
            value = getattr(msg, attr)
            if f.name in _TEMPORAL_FIELDS:
                value = format_http_date(value) if value is not None else ""
            values[f.name] = value
        return cls(**values)

    def apply_to(self, msg: Message) -> None:
        """Copy every field onto *msg*; unparsable timestamps become ``None``."""
        for f in fields(self):
            attr = "id" if f.name == "message_id" else f.name
            value = getattr(self, f.name)
            if f.name in _TEMPORAL_FIELDS:
                value = _parse_optional_date(f.metadata["wire"], value)
            setattr(msg, attr, value)


def _coerce(wire_name: str, kind: type, raw):
    if kind is str:
        if not isinstance(raw, str):
            raise ValueError(f"{wire_name} must be a string, got {raw!r}")
        return raw
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"{wire_name} must be a number, got {raw!r}")
    return int(raw)


def _parse_optional_date(wire_name: str, text: str):
    if not text:
        return None
    try:
        return parse_http_date(text)
    except ValueError as e:
        _LOG.debug("broker_properties.bad_timestamp field=%s error=%s", wire_name, e)
        return None


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1]
    return value


def _first_header_values(response: requests.Response) -> list[tuple[str, str]]:
    """Header names with their first value; later duplicates are ignored."""
    raw_headers = getattr(response.raw, "headers", None)
    getlist = getattr(raw_headers, "getlist", None)
    if getlist is None:
        return list(response.headers.items())
    return [(name, getlist(name)[0]) for name in raw_headers]


def read_body(response: requests.Response) -> bytes:
    """Read the full response body.

    Raises:
        BodyReadError: If the body cannot be read.
    """
    try:
        return response.content or b""
    except (requests.RequestException, OSError) as e:
        raise BodyReadError(f"Error reading message body: {e}") from e


def encode_message(msg: Message) -> tuple[CaseInsensitiveDict, bytes]:
    """Turn *msg* into request headers and body.

    Every user property becomes a header verbatim; names and values are not
    validated here. Broker fields, when any are set, go into the
    ``BrokerProperties`` header and take precedence over a user property
    of the same name (any case).
    """
    headers = CaseInsensitiveDict()
    for key, value in msg.properties.items():
        headers[key] = value

    broker = BrokerProperties.from_message(msg).to_json()
    if broker != "{}":
        if BROKER_PROPERTIES_HEADER in headers:
            _LOG.debug(
                "request.broker_properties_overridden property=%s",
                BROKER_PROPERTIES_HEADER,
            )
        headers[BROKER_PROPERTIES_HEADER] = broker

    return headers, msg.body


def decode_message(response: requests.Response) -> Message:
    """Build a ``Message`` from a successful peek-lock response.

    Broker metadata is best effort: a malformed ``BrokerProperties`` header
    or timestamp is logged and leaves the affected fields at zero values.

    Raises:
        BodyReadError: If the body cannot be read.
    """
    _LOG.debug(
        "response.received status=%s headers=%s content_length=%s",
        response.status_code,
        response.headers,
        response.headers.get("Content-Length"),
    )

    msg = Message(properties=Properties())
    broker_header = ""
    for name, value in _first_header_values(response):
        if name.lower() == BROKER_PROPERTIES_HEADER.lower():
            broker_header = value
            continue
        msg.properties[name] = _unquote(value)

    if broker_header:
        _LOG.debug("response.broker_properties value=%s", broker_header)
        try:
            BrokerProperties.from_json(broker_header).apply_to(msg)
        except ValueError as e:
            _LOG.error("BrokerProperties header parse failed: %s", e)

    msg.body = read_body(response)
    return msg
