"""
Blocking WebSocket notification channel

The channel upgrades a signed GET request for ``notify/ws/<event>`` and
hands every event to a caller-supplied handler, in the order frames arrive.
A reader thread calls the handler synchronously, so a slow handler holds
back the socket (blocking backpressure); nothing is dropped.
"""

import logging
import threading
from contextlib import ExitStack
from typing import TYPE_CHECKING, Callable, Optional, Union

from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.sync.client import ClientConnection, connect

from ..api.models import NotificationEvent
from ..exceptions import ClientError, ErrorCodes
from .events import (
    ChannelClosed,
    ChannelError,
    ChannelEvent,
    ChannelOpened,
    ChannelState,
)
from .protocol import (
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

EventHandler = Callable[[ChannelEvent], None]


class WsNotifyChannel:
    """
    Notification channel for one Catenis notification event

    Example:
        >>> with client.notification_channel(NotificationEvent.NEW_MSG_RECEIVED) as channel:
        ...     channel.open(print)
        ...     channel.wait(60)
    """

    def __init__(self, client: 'ClientCore', event_name: Union[NotificationEvent, str]):
        self._client = client
        self.event_name = event_name.value if isinstance(event_name, NotificationEvent) else str(event_name)
        self.state = ChannelState.UNOPENED
        self.acknowledged = False
        self._handler: Optional[EventHandler] = None
        self._ws: Optional[ClientConnection] = None
        self._stack = ExitStack()
        self._reader: Optional[threading.Thread] = None
        self._closing = False
        self._lock = threading.Lock()

    def open(self, handler: EventHandler, open_timeout: Optional[float] = None) -> None:
        """
        Open the channel.

        The upgrade is performed in the calling thread, which then receives
        ChannelOpened (or ChannelError); notifications follow on a reader thread.

        Args:
            handler: Callable receiving every channel event
            open_timeout: Optional timeout, in seconds, for the upgrade

        Raises:
            ClientError: If the channel was already opened, or the request cannot be signed
            ConfigError: If the client has no credentials
        """
        with self._lock:
            if self.state is not ChannelState.UNOPENED:
                raise ClientError(
                    f"Notification channel already {self.state.value}",
                    ErrorCodes.WS_UNEXPECTED_MESSAGE
                )
            self.state = ChannelState.OPENING
            self._handler = handler

        try:
            request = self._client.prepare_ws_request(self.event_name)
        except Exception:
            self.state = ChannelState.CLOSED
            raise

        logger.debug(f"Opening notification channel {request.url}")
        try:
            ws = self._stack.enter_context(connect(
                request.url,
                additional_headers=handshake_headers(request),
                subprotocols=[NOTIFY_SUBPROTOCOL],
                open_timeout=open_timeout
            ))
            ws.send(auth_frame(request))
        except (WebSocketException, OSError, TimeoutError) as e:
            self._release()
            self.state = ChannelState.CLOSED
            error = handshake_error(e, request.url)
            logger.error(f"Failed to open notification channel for {self.event_name}: {error}")
            self._deliver(ChannelError(error))
            return

        with self._lock:
            self._ws = ws
            closing = self._closing
            if not closing:
                self.state = ChannelState.OPEN

        if closing:
            self._release()
            self.state = ChannelState.CLOSED
            return

        logger.info(f"Notification channel open for {self.event_name}")
        self._deliver(ChannelOpened())

        self._reader = threading.Thread(
            target=self._read_loop,
            name=f"catenis-notify-{self.event_name}",
            daemon=True
        )
        self._reader.start()

    def _read_loop(self) -> None:
        ws = self._ws
        try:
            while True:
                try:
                    data = ws.recv()
                except ConnectionClosed as e:
                    if not self._closing:
                        code, reason = close_info(e)
                        logger.info(f"Notification channel for {self.event_name} closed by server ({code})")
                        self._deliver(ChannelClosed(code, reason))
                    return
                except (WebSocketException, OSError) as e:
                    if not self._closing:
                        logger.error(f"Notification channel for {self.event_name} failed: {e}")
                        self._deliver(ChannelError(socket_error(e)))
                    return

                try:
                    event = parse_frame(data)
                except FrameError as e:
                    logger.warning(f"Unexpected frame on notification channel for {self.event_name}")
                    ws.close(e.close_code, e.error.message)
                    if not self._closing:
                        self._deliver(ChannelError(e.error))
                    return

                if event is None:
                    self.acknowledged = True
                    logger.debug(f"Notification channel for {self.event_name} acknowledged")
                    continue

                logger.debug(f"Notification received for {self.event_name}")
                self._deliver(event)
        finally:
            self._release()
            self.state = ChannelState.CLOSED

    def _release(self) -> None:
        """Close the connection owned by the channel, once"""
        with self._lock:
            stack, self._stack = self._stack, ExitStack()
        stack.close()

    def _deliver(self, event: ChannelEvent) -> None:
        if self._closing:
            return
        try:
            self._handler(event)
        except Exception:
            logger.exception(f"Notification handler failed for {type(event).__name__}")

    def close(self, timeout: Optional[float] = 5.0) -> None:
        """
        Close the channel with a normal close frame; no further events are delivered.

        Args:
            timeout: Maximum time to wait for the reader thread to finish
        """
        with self._lock:
            if self._closing:
                return
            self._closing = True
            ws = self._ws

        if ws is not None:
            self._release()
            logger.info(f"Notification channel for {self.event_name} closed")

        reader = self._reader
        if reader is not None and reader is not threading.current_thread():
            reader.join(timeout)

        self.state = ChannelState.CLOSED

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the channel to close.

        Returns:
            bool: True if the channel is closed
        """
        reader = self._reader
        if reader is not None:
            reader.join(timeout)
            return not reader.is_alive()
        return self.state is ChannelState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state is ChannelState.OPEN

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
