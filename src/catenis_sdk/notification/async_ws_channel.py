"""
Asyncio WebSocket notification channel

Events are consumed with ``async for``; the socket is read only as fast as
the consumer iterates. Cancelling the consuming task, or leaving the loop
early, closes the socket without delivering anything further.
"""

import logging
from typing import TYPE_CHECKING, AsyncIterator, Optional, Union

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..api.models import NotificationEvent
from ..exceptions import ClientError, ErrorCodes
from .events import ChannelClosed, ChannelError, ChannelEvent, ChannelOpened, ChannelState
from .protocol import (
    CLOSE_NORMAL,
    NOTIFY_SUBPROTOCOL,
    FrameError,
    auth_frame,
    close_info,
    handshake_error,
    handshake_headers,
    parse_frame,
    socket_error,
)

if TYPE_CHECKING:
    from ..client import ClientCore


logger = logging.getLogger(__name__)


class AsyncWsNotifyChannel:
    """
    Asyncio notification channel for one Catenis notification event

    Example:
        >>> async with client.notification_channel("new-msg-received") as channel:
        ...     async for event in channel:
        ...         print(event)
    """

    def __init__(self, client: 'ClientCore', event_name: Union[NotificationEvent, str],
                 open_timeout: Optional[float] = None):
        self._client = client
        self.event_name = event_name.value if isinstance(event_name, NotificationEvent) else str(event_name)
        self.open_timeout = open_timeout
        self.state = ChannelState.UNOPENED
        self.acknowledged = False
        self._ws: Optional[ClientConnection] = None
        self._closing = False

    def __aiter__(self) -> AsyncIterator[ChannelEvent]:
        return self.events()

    async def events(self) -> AsyncIterator[ChannelEvent]:
        """
        Open the channel and yield its events in arrival order.

        The first event is ChannelOpened or ChannelError; iteration ends after
        ChannelClosed or ChannelError, or silently once the caller closed the channel.

        Raises:
            ClientError: If the channel was already opened, or the request cannot be signed
            ConfigError: If the client has no credentials
        """
        if self.state is not ChannelState.UNOPENED:
            raise ClientError(
                f"Notification channel already {self.state.value}",
                ErrorCodes.WS_UNEXPECTED_MESSAGE
            )
        self.state = ChannelState.OPENING

        try:
            request = self._client.prepare_ws_request(self.event_name)
        except Exception:
            self.state = ChannelState.CLOSED
            raise

        logger.debug(f"Opening notification channel {request.url}")
        try:
            ws = await connect(
                request.url,
                additional_headers=handshake_headers(request),
                subprotocols=[NOTIFY_SUBPROTOCOL],
                open_timeout=self.open_timeout
            )
        except (WebSocketException, OSError, TimeoutError) as e:
            self.state = ChannelState.CLOSED
            error = handshake_error(e, request.url)
            logger.error(f"Failed to open notification channel for {self.event_name}: {error}")
            yield ChannelError(error)
            return

        self._ws = ws
        try:
            try:
                await ws.send(auth_frame(request))
            except ConnectionClosed as e:
                yield ChannelError(socket_error(e))
                return

            self.state = ChannelState.OPEN
            logger.info(f"Notification channel open for {self.event_name}")
            yield ChannelOpened()

            while True:
                try:
                    data = await ws.recv()
                except ConnectionClosed as e:
                    if not self._closing:
                        code, reason = close_info(e)
                        logger.info(f"Notification channel for {self.event_name} closed by server ({code})")
                        yield ChannelClosed(code, reason)
                    return
                except (WebSocketException, OSError) as e:
                    if not self._closing:
                        logger.error(f"Notification channel for {self.event_name} failed: {e}")
                        yield ChannelError(socket_error(e))
                    return

                try:
                    event = parse_frame(data)
                except FrameError as e:
                    logger.warning(f"Unexpected frame on notification channel for {self.event_name}")
                    await ws.close(e.close_code, e.error.message)
                    if not self._closing:
                        yield ChannelError(e.error)
                    return

                if event is None:
                    self.acknowledged = True
                    logger.debug(f"Notification channel for {self.event_name} acknowledged")
                    continue

                if self._closing:
                    return
                logger.debug(f"Notification received for {self.event_name}")
                yield event
        finally:
            self.state = ChannelState.CLOSED
            await ws.close(CLOSE_NORMAL)

    async def close(self) -> None:
        """Close the channel with a normal close frame; iteration ends silently"""
        if self._closing:
            return
        self._closing = True
        if self._ws is not None:
            await self._ws.close(CLOSE_NORMAL)
            logger.info(f"Notification channel for {self.event_name} closed")
        self.state = ChannelState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state is ChannelState.OPEN

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
