"""Queue message model.

See https://docs.microsoft.com/en-us/rest/api/servicebus/message-headers-and-properties
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .properties import Properties


@dataclass
class Message:
    """One queue message, either built by the caller or decoded from a response.

    String fields use ``""`` for absent values and timestamps use ``None``.
    """

    id: str = ""
    session_id: str = ""
    correlation_id: str = ""
    label: str = ""
    lock_token: str = ""
    partition_key: str = ""
    reply_to: str = ""
    reply_to_session_id: str = ""
    to: str = ""
    content_type: str = ""

    sequence_number: int = 0
    delivery_count: int = 0
    time_to_live: int = 0

    enqueued_time_utc: Optional[datetime] = None
    scheduled_enqueue_time_utc: Optional[datetime] = None
    locked_until_utc: Optional[datetime] = None

    properties: Properties = field(default_factory=Properties)
    body: bytes = b""

    def __post_init__(self):
        if not isinstance(self.properties, Properties):
            self.properties = Properties(self.properties)
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")
