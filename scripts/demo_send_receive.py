#!/usr/bin/env python3
"""Demo: send, lock and delete one message on a Service Bus queue.

Prerequisites
─────────────
1. A Service Bus namespace with a queue
2. Environment variables set:
     SBQ_NAMESPACE    – namespace name (without .servicebus.windows.net)
     SBQ_KEY_NAME     – SAS policy name, e.g. RootManageSharedAccessKey
     SBQ_KEY_VALUE    – SAS policy key
     SBQ_QUEUE_NAME   – queue name

Optional env:
     SBQ_TIMEOUT      – seconds to wait for a message (default 60)

Usage:
    python scripts/demo_send_receive.py [body]
"""

from __future__ import annotations

import logging
import sys

from sbqueue import Message, NoMessagesAvailableError, QueueClient


def main() -> None:
    body = sys.argv[1] if len(sys.argv) > 1 else "Hello!"
    logging.basicConfig(level=logging.DEBUG)
    client = QueueClient.from_env()

    print(f"namespace        = {client.namespace}")
    print(f"queue            = {client.queue_name}")
    print(f"key name         = {client.key_name}")
    print()

    # 1) send
    print("--- send ---")
    client.send_message(
        Message(
            properties={"Prop1": "Value1"},
            body=body.encode("utf-8"),
            content_type="text/plain",
        )
    )
    print("  sent")
    print()

    # 2) peek-lock
    print("--- get (peek-lock) ---")
    try:
        msg = client.get_message()
    except NoMessagesAvailableError:
        print(f"  no message within {client.timeout}s")
        return
    print(f"  id:             {msg.id}")
    print(f"  lock token:     {msg.lock_token}")
    print(f"  locked until:   {msg.locked_until_utc}")
    print(f"  delivery count: {msg.delivery_count}")
    print(f"  content type:   {msg.content_type}")
    print(f"  Prop1:          {msg.properties.get('Prop1')}")
    print(f"  body:           {msg.body!r}")
    print()

    # 3) complete
    print("--- delete ---")
    client.delete_message(msg)
    print("  deleted")


if __name__ == "__main__":
    main()
