"""
Utility functions for request signing

This module provides the hashing primitives, timestamp formatting and URL
helpers used by the CTN1 signing protocol.
"""

import hashlib
from datetime import date, datetime, timezone
from typing import Dict, Union
from urllib.parse import urlsplit

from cryptography.hazmat.primitives import hashes, hmac

from ..exceptions import ClientError, ErrorCodes


TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"
DATE_FORMAT = "%Y%m%d"

DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}

BytesLike = Union[str, bytes]


def _to_bytes(data: BytesLike) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


def sha256_hex(data: BytesLike) -> str:
    """
    Calculate the lowercase hex SHA-256 digest of data.

    Args:
        data: Text (UTF-8 encoded) or bytes

    Returns:
        str: 64 lowercase hex characters
    """
    return hashlib.sha256(_to_bytes(data)).hexdigest()


def hmac_sha256(key: BytesLike, message: BytesLike) -> bytes:
    """
    Calculate HMAC-SHA256 of a message.

    Args:
        key: HMAC key
        message: Message to authenticate

    Returns:
        bytes: 32-byte MAC
    """
    mac = hmac.HMAC(_to_bytes(key), hashes.SHA256())
    mac.update(_to_bytes(message))
    return mac.finalize()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(instant: datetime) -> datetime:
    """Normalise an instant to UTC; naive datetimes are taken as UTC"""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def format_timestamp(instant: datetime) -> str:
    """Format an instant as ``YYYYMMDDTHHMMSSZ`` in UTC"""
    return to_utc(instant).strftime(TIMESTAMP_FORMAT)


def format_date(day: Union[date, datetime]) -> str:
    """Format a calendar date as ``YYYYMMDD``"""
    if isinstance(day, datetime):
        day = to_utc(day).date()
    return day.strftime(DATE_FORMAT)


def parse_url(url: str) -> Dict[str, str]:
    """
    Parse URL to extract components needed for signing.

    Args:
        url: Absolute URL (http, https, ws or wss)

    Returns:
        dict: Dictionary with parsed URL components:
            - scheme: URL scheme
            - host: value for the Host header (port only when non-default)
            - path_with_query: path plus ``?query`` when a query is present

    Raises:
        ClientError: If the URL has no host or an invalid port
    """
    try:
        parsed = urlsplit(url)
        hostname = parsed.hostname
        port = parsed.port
    except ValueError as e:
        raise ClientError(
            f"Failed to parse URL: {e}",
            ErrorCodes.INVALID_HEADER,
            {"url": url, "original_error": str(e)}
        ) from e

    if not hostname:
        raise ClientError(f"URL has no host: {url}", ErrorCodes.MISSING_HOST, {"url": url})

    host = f"[{hostname}]" if ":" in hostname else hostname
    if port is not None and port != DEFAULT_PORTS.get(parsed.scheme):
        host = f"{host}:{port}"

    path_with_query = parsed.path or "/"
    if parsed.query:
        path_with_query = f"{path_with_query}?{parsed.query}"

    return {
        "scheme": parsed.scheme,
        "host": host,
        "path_with_query": path_with_query,
    }


def to_hex(data: bytes) -> str:
    return data.hex()
