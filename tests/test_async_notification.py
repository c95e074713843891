"""
Tests for the asyncio notification channel
"""

import json
from http import HTTPStatus

import pytest
from websockets.asyncio.server import serve

from catenis_sdk import (
    ApiError,
    AsyncCatenisClient,
    ChannelClosed,
    ChannelError,
    ChannelNotify,
    ChannelOpened,
    ChannelState,
    ClientError,
    DecodeError,
    Host,
    Secure,
)


def make_client(credentials, server):
    port = server.sockets[0].getsockname()[1]
    return AsyncCatenisClient(credentials, Host(f"127.0.0.1:{port}"), Secure(False))


class TestAsyncWsNotifyChannel:
    """Test the asyncio channel against a local server"""

    @pytest.mark.asyncio
    async def test_notifications_in_order(self, credentials):
        """Test iteration over a complete channel lifetime"""
        auth = []

        async def handler(connection):
            auth.append(json.loads(await connection.recv()))
            await connection.send("NOTIFICATION_CHANNEL_OPEN")
            await connection.send(json.dumps({"messageId": "first"}))
            await connection.send(json.dumps({"messageId": "second"}))

        async with serve(handler, "127.0.0.1", 0) as server:
            client = make_client(credentials, server)
            channel = client.notification_channel("new-msg-received", open_timeout=5)
            events = [event async for event in channel]
            await client.aclose()

        assert [type(event) for event in events] == [ChannelOpened, ChannelNotify, ChannelNotify, ChannelClosed]
        assert [event.message.message_id for event in events[1:3]] == ["first", "second"]
        assert events[3] == ChannelClosed(1000, "")
        assert channel.acknowledged
        assert channel.state is ChannelState.CLOSED
        assert set(auth[0]) == {"x-bcot-timestamp", "authorization"}

    @pytest.mark.asyncio
    async def test_rejected_upgrade(self, credentials):
        """Test that an HTTP error on upgrade is the only event"""
        def process_request(connection, request):
            return connection.respond(HTTPStatus.UNAUTHORIZED, '{"status":"error","message":"Not allowed"}')

        async def handler(connection):
            await connection.recv()

        async with serve(handler, "127.0.0.1", 0, process_request=process_request) as server:
            client = make_client(credentials, server)
            events = [event async for event in client.notification_channel("new-msg-received")]
            await client.aclose()

        assert len(events) == 1
        assert isinstance(events[0], ChannelError)
        assert events[0].error == ApiError(401, "Not allowed")

    @pytest.mark.asyncio
    async def test_invalid_frames(self, credentials):
        """Test that a non-JSON notification ends the channel with a decode error"""
        async def handler(connection):
            await connection.recv()
            await connection.send("not json")
            async for _ in connection:
                pass

        async with serve(handler, "127.0.0.1", 0) as server:
            client = make_client(credentials, server)
            events = [event async for event in client.notification_channel("new-msg-received")]
            await client.aclose()

        assert [type(event) for event in events] == [ChannelOpened, ChannelError]
        assert isinstance(events[1].error, DecodeError)

    @pytest.mark.asyncio
    async def test_close_stops_iteration(self, credentials):
        """Test closing the channel from the consumer"""
        async def handler(connection):
            await connection.recv()
            await connection.send(json.dumps({"messageId": "first"}))
            async for _ in connection:
                pass

        async with serve(handler, "127.0.0.1", 0) as server:
            client = make_client(credentials, server)
            received = []
            async with client.notification_channel("new-msg-received") as channel:
                async for event in channel:
                    received.append(event)
                    if isinstance(event, ChannelNotify):
                        break
            await client.aclose()

        assert [type(event) for event in received] == [ChannelOpened, ChannelNotify]
        assert channel.state is ChannelState.CLOSED

    @pytest.mark.asyncio
    async def test_iterating_twice(self, credentials):
        """Test that a channel can only be opened once"""
        async def handler(connection):
            await connection.recv()

        async with serve(handler, "127.0.0.1", 0) as server:
            client = make_client(credentials, server)
            channel = client.notification_channel("new-msg-received")
            [event async for event in channel]

            with pytest.raises(ClientError):
                [event async for event in channel]
            await client.aclose()
