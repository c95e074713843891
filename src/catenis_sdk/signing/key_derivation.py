"""
Signing-key derivation for the CTN1 protocol

The signing key is a pure function of the API access secret and a UTC
calendar date. SigningKeyDerivator memoises the key of the most recent date
so that consecutive requests on the same day derive it only once.
"""

import logging
import threading
from datetime import date
from typing import Optional, Tuple

from .types import CTN1_KEY_PREFIX, CTN1_SCOPE_REQUEST
from .utils import format_date, hmac_sha256


logger = logging.getLogger(__name__)


def derive_signing_key(api_access_secret: str, sign_date: date) -> bytes:
    """
    Derive the signing key for a UTC calendar date.

    The access secret is used as text, byte for byte; it is not hex-decoded.

    Args:
        api_access_secret: Device's API access secret
        sign_date: UTC date of the signing timestamp

    Returns:
        bytes: 32-byte signing key
    """
    date_key = hmac_sha256(CTN1_KEY_PREFIX + api_access_secret, format_date(sign_date))
    return hmac_sha256(date_key, CTN1_SCOPE_REQUEST)


class SigningKeyDerivator:
    """
    Thread-safe memoiser of the per-date signing key

    Each client instance owns one derivator; concurrent signed calls serialise
    on its lock only while the cache is read or refreshed.
    """

    def __init__(self, api_access_secret: str):
        self._secret = api_access_secret
        self._lock = threading.Lock()
        self._cached: Optional[Tuple[date, bytes]] = None

    def signing_key(self, sign_date: date) -> bytes:
        """
        Get the signing key for a date, deriving it when the date changed.

        Args:
            sign_date: UTC date of the signing timestamp

        Returns:
            bytes: 32-byte signing key
        """
        with self._lock:
            if self._cached is None or self._cached[0] != sign_date:
                logger.debug(f"Deriving signing key for {sign_date.isoformat()}")
                self._cached = (sign_date, derive_signing_key(self._secret, sign_date))
            return self._cached[1]

    @property
    def current_sign_date(self) -> Optional[date]:
        with self._lock:
            return self._cached[0] if self._cached else None
