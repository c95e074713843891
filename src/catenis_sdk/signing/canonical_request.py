"""
Canonical request construction for CTN1 signatures

This module builds the two textual documents the CTN1 signature covers:
the canonical request and the string to sign.
"""

from datetime import date

from .types import CTN1_ALGORITHM, CTN1_SCOPE_REQUEST, TIMESTAMP_HEADER, SignableRequest
from .utils import format_date, parse_url, sha256_hex


class CanonicalRequestBuilder:
    """
    Canonical request builder for CTN1 signatures

    The essential headers appear lowercase and always in the order host,
    x-bcot-timestamp, whatever their order in the request's header map.
    """

    def __init__(self, request: SignableRequest, host: str, timestamp: str):
        """
        Initialize canonical request builder.

        Args:
            request: Request to sign
            host: Value of the Host header
            timestamp: Value of the x-bcot-timestamp header
        """
        self.request = request
        self.host = host
        self.timestamp = timestamp

    def build(self) -> str:
        """
        Build the canonical request.

        Returns:
            str: Newline-terminated canonical request

        Raises:
            ClientError: If the request URL cannot be parsed
        """
        url_parts = parse_url(self.request.url)
        lines = [
            self.request.method.value,
            url_parts["path_with_query"],
            f"host:{self.host}",
            f"{TIMESTAMP_HEADER}:{self.timestamp}",
            "",
            sha256_hex(self.request.body or b""),
        ]
        return "\n".join(lines) + "\n"


def build_canonical_request(request: SignableRequest, host: str, timestamp: str) -> str:
    """Build the canonical request of a signable request"""
    return CanonicalRequestBuilder(request, host, timestamp).build()


def build_scope(sign_date: date) -> str:
    """Build the credential scope ``YYYYMMDD/ctn1_request``"""
    return f"{format_date(sign_date)}/{CTN1_SCOPE_REQUEST}"


def build_string_to_sign(timestamp: str, scope: str, canonical_request: str) -> str:
    """
    Build the string to sign.

    Args:
        timestamp: Value of the x-bcot-timestamp header
        scope: Credential scope
        canonical_request: Canonical request text

    Returns:
        str: Four newline-terminated lines: algorithm, timestamp, scope and
            the hex SHA-256 of the canonical request
    """
    return f"{CTN1_ALGORITHM}\n{timestamp}\n{scope}\n{sha256_hex(canonical_request)}\n"
