"""
Catenis notification channels

WebSocket channels that deliver server-pushed notification events, in a
blocking (handler based) and an asyncio (``async for``) flavour.
"""

from .events import (
    ChannelClosed,
    ChannelError,
    ChannelEvent,
    ChannelNotify,
    ChannelOpened,
    ChannelState,
)
from .protocol import NOTIFICATION_CHANNEL_OPEN, NOTIFY_SUBPROTOCOL
from .ws_channel import WsNotifyChannel
from .async_ws_channel import AsyncWsNotifyChannel

__all__ = [
    'ChannelClosed',
    'ChannelError',
    'ChannelEvent',
    'ChannelNotify',
    'ChannelOpened',
    'ChannelState',
    'NOTIFICATION_CHANNEL_OPEN',
    'NOTIFY_SUBPROTOCOL',
    'WsNotifyChannel',
    'AsyncWsNotifyChannel',
]
