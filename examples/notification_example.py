#!/usr/bin/env python3
"""
Catenis Python SDK - Messaging and Notifications Example

Logs a message on the Catenis sandbox, reads it back and listens for
new-message notifications for a while. Device credentials are read from
the CATENIS_DEVICE_ID and CATENIS_API_ACCESS_SECRET environment variables.
"""

import asyncio
import logging
import os
import sys

from catenis_sdk import (
    ApiError,
    AsyncCatenisClient,
    CatenisClient,
    CatenisSDKError,
    ChannelError,
    ChannelNotify,
    DeviceCredentials,
    Env,
    Environment,
    NotificationEvent,
)


def messaging_example(credentials):
    """Log a message and read it back"""
    print("=== Messaging Example ===")

    with CatenisClient(credentials, Env(Environment.SANDBOX)) as client:
        result = client.log_message("Test message", {"encoding": "utf8"})
        print(f"   Logged message: {result.message_id}")

        message = client.read_message(result.message_id, encoding="utf8")
        print(f"   Read back: {message.msg_data}")

        try:
            client.read_message("invalid-id")
        except ApiError as e:
            print(f"   Expected API error: {e.error_message()}")


def blocking_notification_example(credentials, seconds=30):
    """Print new-message notifications using the blocking channel"""
    print("\n=== Blocking Notification Example ===")

    def on_event(event):
        if isinstance(event, ChannelNotify):
            print(f"   New message from {event.message['from'].device_id}: {event.message.message_id}")
        elif isinstance(event, ChannelError):
            print(f"   Channel error: {event.error}")
        else:
            print(f"   {event}")

    with CatenisClient(credentials, Env(Environment.SANDBOX)) as client:
        with client.notification_channel(NotificationEvent.NEW_MSG_RECEIVED) as channel:
            channel.open(on_event)
            channel.wait(seconds)


async def async_notification_example(credentials, seconds=30):
    """Print new-message notifications using the asyncio channel"""
    print("\n=== Async Notification Example ===")

    async def listen(client):
        async for event in client.notification_channel(NotificationEvent.NEW_MSG_RECEIVED):
            print(f"   {event}")

    async with AsyncCatenisClient(credentials, Env(Environment.SANDBOX)) as client:
        try:
            await asyncio.wait_for(listen(client), seconds)
        except asyncio.TimeoutError:
            print("   Stopped listening")


def main():
    """Run all examples"""
    device_id = os.environ.get("CATENIS_DEVICE_ID")
    secret = os.environ.get("CATENIS_API_ACCESS_SECRET")
    if not device_id or not secret:
        print("Set CATENIS_DEVICE_ID and CATENIS_API_ACCESS_SECRET to run this example")
        return 1

    logging.basicConfig(level=logging.INFO)
    credentials = DeviceCredentials(device_id, secret)

    try:
        messaging_example(credentials)
        blocking_notification_example(credentials)
        asyncio.run(async_notification_example(credentials))
    except CatenisSDKError as e:
        print(f"\nExample failed: {type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
