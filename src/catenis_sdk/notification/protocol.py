"""
Catenis notification protocol helpers

Frame classification and error mapping shared by the blocking and asyncio
notification channels.
"""

import json
from typing import List, Optional, Tuple, Union

from websockets.exceptions import InvalidStatus, InvalidURI

from ..api.models import wrap_json
from ..exceptions import CatenisSDKError, ClientError, DecodeError, ErrorCodes, TransportError
from ..http_clients.response import api_error_from
from ..signing.types import AUTHORIZATION_HEADER, HOST_HEADER, TIMESTAMP_HEADER, SignableRequest
from .events import ChannelNotify


NOTIFY_SUBPROTOCOL = "notify.catenis.io"
NOTIFICATION_CHANNEL_OPEN = "NOTIFICATION_CHANNEL_OPEN"

CLOSE_NORMAL = 1000
CLOSE_UNSUPPORTED_DATA = 1003
CLOSE_INVALID_MESSAGE = 4000


def handshake_headers(request: SignableRequest) -> List[Tuple[str, str]]:
    """Headers for the upgrade request; the WebSocket library adds its own, identical Host"""
    return [(name, value) for name, value in request.headers.items() if name.lower() != HOST_HEADER.lower()]


def auth_frame(request: SignableRequest) -> str:
    """Authentication frame sent right after the upgrade"""
    return json.dumps({
        TIMESTAMP_HEADER: request.headers[TIMESTAMP_HEADER],
        "authorization": request.headers[AUTHORIZATION_HEADER],
    })


class FrameError(Exception):
    """A received frame the channel cannot accept"""

    def __init__(self, error: CatenisSDKError, close_code: int):
        super().__init__(error.message)
        self.error = error
        self.close_code = close_code


def parse_frame(data: Union[str, bytes]) -> Optional[ChannelNotify]:
    """
    Interpret a received frame.

    Returns:
        ChannelNotify for a notification, None for the channel-open acknowledgement

    Raises:
        FrameError: For binary frames or text that is not a JSON object
    """
    if isinstance(data, bytes):
        raise FrameError(
            ClientError("Unexpected binary frame on notification channel", ErrorCodes.WS_UNEXPECTED_MESSAGE),
            CLOSE_UNSUPPORTED_DATA
        )

    if data == NOTIFICATION_CHANNEL_OPEN:
        return None

    try:
        message = json.loads(data)
    except ValueError:
        message = None

    if not isinstance(message, dict):
        raise FrameError(
            DecodeError(
                "Notification message is not a JSON object",
                ErrorCodes.INVALID_JSON,
                {"payload": data[:200]}
            ),
            CLOSE_INVALID_MESSAGE
        )

    return ChannelNotify(payload=data, message=wrap_json(message))


def handshake_error(e: Exception, url: str) -> CatenisSDKError:
    """Map a failed WebSocket opening to an SDK error"""
    if isinstance(e, CatenisSDKError):
        return e
    if isinstance(e, InvalidStatus):
        return api_error_from(e.response.status_code, e.response.body)
    if isinstance(e, InvalidURI):
        return ClientError(f"Invalid WebSocket URL: {e}", ErrorCodes.INVALID_URL, {"url": url})
    return TransportError(
        f"WebSocket upgrade failed: {e}",
        ErrorCodes.WS_HANDSHAKE_FAILED,
        {"url": url, "original_error": str(e)}
    )


def socket_error(e: Exception) -> TransportError:
    return TransportError(
        f"Notification channel socket error: {e}",
        ErrorCodes.WS_SOCKET_ERROR,
        {"original_error": str(e)}
    )


def close_info(e: Exception) -> Tuple[Optional[int], str]:
    """Close code and reason received from the peer, if any"""
    rcvd = getattr(e, "rcvd", None)
    if rcvd is None:
        return None, ""
    return rcvd.code, rcvd.reason
