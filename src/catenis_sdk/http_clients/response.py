"""
Response decoding for the Catenis API

Every API response is wrapped in an envelope: ``{"status": "success",
"data": ...}`` on success and ``{"status": "error", "message": ...}`` on
error. Success is decided by the HTTP status class alone.
"""

import json
import logging
from typing import Any, Optional, Tuple

from ..api.models import from_json
from ..exceptions import ApiError, ClientError, DecodeError, ErrorCodes


logger = logging.getLogger(__name__)


def _decode_text(content: bytes) -> str:
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(
            f"Response body is not valid UTF-8: {e}",
            ErrorCodes.INVALID_JSON,
            {"original_error": str(e)}
        ) from e


def parse_json(content: bytes) -> Any:
    """
    Parse a UTF-8 JSON body.

    Raises:
        DecodeError: If the body is not valid UTF-8 JSON
    """
    text = _decode_text(content)
    try:
        return json.loads(text)
    except ValueError as e:
        raise DecodeError(
            f"Response body is not valid JSON: {e}",
            ErrorCodes.INVALID_JSON,
            {"original_error": str(e)}
        ) from e


def parse_error_envelope(content: Optional[bytes]) -> Tuple[Optional[str], str]:
    """
    Extract the message of an error envelope.

    Returns:
        Tuple of the envelope message (None when the body is not an error
        envelope) and the raw body text
    """
    raw = (content or b"").decode("utf-8", errors="replace")
    try:
        body = json.loads(raw) if raw else None
    except ValueError:
        body = None

    if isinstance(body, dict) and "status" in body and isinstance(body.get("message"), str):
        return body["message"], raw
    return None, raw


def api_error_from(status_code: int, content: Optional[bytes]) -> ApiError:
    """Build the ApiError for a non-2xx response"""
    api_message, raw = parse_error_envelope(content)
    if api_message is not None:
        return ApiError(status_code, api_message, api_message=api_message)
    return ApiError(status_code, raw, body_message=raw or None)


def decode_response(response: Any, result_type: Any = None) -> Any:
    """
    Decode an API response into the caller's result type.

    Args:
        response: Response exposing ``status_code`` and ``content`` (bytes)
        result_type: None for a ResultRecord, or a pydantic result model

    Returns:
        The ``data`` member of the success envelope, typed as requested

    Raises:
        ApiError: If the HTTP status is not 2xx
        ClientError: If a success body lacks the envelope's ``data`` member
        DecodeError: If the body is not UTF-8 JSON or does not match result_type
    """
    status_code = response.status_code

    if not 200 <= status_code < 300:
        error = api_error_from(status_code, response.content)
        logger.debug(f"API call failed: {error.error_message()}")
        raise error

    body = parse_json(response.content or b"")
    if not isinstance(body, dict) or "status" not in body or "data" not in body:
        raise ClientError(
            "Inconsistent Catenis API response",
            ErrorCodes.INCONSISTENT_RESPONSE,
            {"http_status": status_code}
        )

    return from_json(result_type, body["data"])
