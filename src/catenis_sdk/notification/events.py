"""
Events delivered by notification channels
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from ..exceptions import CatenisSDKError


class ChannelState(str, Enum):
    """Lifecycle of a notification channel"""
    UNOPENED = "unopened"
    OPENING = "opening"
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class ChannelOpened:
    """The WebSocket upgrade succeeded"""


@dataclass(frozen=True)
class ChannelNotify:
    """
    A notification message

    Attributes:
        payload: Text frame exactly as received
        message: Parsed JSON object of the notification
    """
    payload: str
    message: Any


@dataclass(frozen=True)
class ChannelClosed:
    """
    The server closed the channel

    Attributes:
        code: WebSocket close code, when the peer sent one
        reason: Close reason
    """
    code: Optional[int] = None
    reason: str = ""


@dataclass(frozen=True)
class ChannelError:
    """The upgrade failed or the channel broke; the channel is closed"""
    error: CatenisSDKError


ChannelEvent = Union[ChannelOpened, ChannelNotify, ChannelClosed, ChannelError]
