"""
CTN1-HMAC-SHA256 request signer

This module provides the signer that adds the ``Host``, ``x-bcot-timestamp``
and ``Authorization`` headers the Catenis API uses to authenticate a device.
Signing never performs network I/O, so any failure here surfaces before the
request is sent.
"""

import logging
import string
from datetime import datetime
from typing import Callable, Optional

from ..config.client_config import DeviceCredentials
from ..exceptions import ClientError, ErrorCodes
from .canonical_request import build_canonical_request, build_scope, build_string_to_sign
from .key_derivation import SigningKeyDerivator
from .types import (
    AUTHORIZATION_HEADER,
    CTN1_ALGORITHM,
    HOST_HEADER,
    TIMESTAMP_HEADER,
    SignableRequest,
    SignatureResult,
)
from .utils import format_timestamp, hmac_sha256, parse_url, to_hex, to_utc, utc_now


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def validate_credentials(credentials: DeviceCredentials) -> None:
    """
    Check that credentials can be used for signing.

    Raises:
        ClientError: If the device ID is empty or the secret is not hex text
    """
    if not credentials.device_id:
        raise ClientError("Device ID cannot be empty", ErrorCodes.INVALID_CREDENTIALS)

    secret = credentials.api_access_secret
    if not secret or any(c not in string.hexdigits for c in secret):
        raise ClientError(
            "API access secret must be a non-empty hex string",
            ErrorCodes.INVALID_CREDENTIALS,
            {"device_id": credentials.device_id}
        )


def _check_header_value(name: str, value: str) -> None:
    if "\r" in value or "\n" in value:
        raise ClientError(
            f"Invalid value for header {name}",
            ErrorCodes.INVALID_HEADER,
            {"header": name}
        )


class RequestSigner:
    """
    CTN1 request signer

    Owns the signing-key memoiser of one client. The clock is injectable so
    that signatures can be reproduced for a frozen instant.
    """

    def __init__(self, credentials: DeviceCredentials, clock: Optional[Clock] = None):
        """
        Initialize the signer with device credentials.

        Args:
            credentials: Device credentials
            clock: Callable returning the current instant; defaults to UTC now

        Raises:
            ClientError: If credentials are malformed
        """
        validate_credentials(credentials)
        self.credentials = credentials
        self.clock = clock or utc_now
        self._derivator = SigningKeyDerivator(credentials.api_access_secret)

    @property
    def device_id(self) -> str:
        return self.credentials.device_id

    def sign_request(self, request: SignableRequest) -> SignatureResult:
        """
        Sign a fully constructed request, adding the authentication headers.

        Only the request's headers are modified; its method, URL and body
        must already be final.

        Args:
            request: Request to sign

        Returns:
            SignatureResult: Signing result with header values and canonical request

        Raises:
            ClientError: If the URL has no host or a header value is invalid
        """
        try:
            host = request.header(HOST_HEADER)
            if host is None:
                host = parse_url(request.url)["host"]
                request.headers[HOST_HEADER] = host
            _check_header_value(HOST_HEADER, host)

            now = to_utc(self.clock())
            timestamp = format_timestamp(now)
            request.headers[TIMESTAMP_HEADER] = timestamp

            canonical_request = build_canonical_request(request, host, timestamp)

            sign_date = now.date()
            signing_key = self._derivator.signing_key(sign_date)
            scope = build_scope(sign_date)
            string_to_sign = build_string_to_sign(timestamp, scope, canonical_request)
            signature = to_hex(hmac_sha256(signing_key, string_to_sign))

            authorization = f"{CTN1_ALGORITHM} Credential={self.device_id}/{scope},Signature={signature}"
            request.headers[AUTHORIZATION_HEADER] = authorization

            logger.debug(f"Signed {request.method.value} request for {host} at {timestamp}")

            return SignatureResult(
                timestamp=timestamp,
                scope=scope,
                signature=signature,
                authorization=authorization,
                canonical_request=canonical_request
            )

        except Exception as e:
            if isinstance(e, ClientError):
                raise

            raise ClientError(
                f"Request signing failed: {e}",
                ErrorCodes.SIGNING_FAILED,
                {"original_error": str(e)}
            ) from e
