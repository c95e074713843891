"""
Type definitions for request signing functionality

This module provides the request and result types shared by the request
builder, the CTN1 signer and the transports.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from requests.structures import CaseInsensitiveDict


CTN1_ALGORITHM = "CTN1-HMAC-SHA256"
CTN1_SCOPE_REQUEST = "ctn1_request"
CTN1_KEY_PREFIX = "CTN1"
TIMESTAMP_HEADER = "x-bcot-timestamp"
AUTHORIZATION_HEADER = "Authorization"
HOST_HEADER = "Host"


class HttpMethod(str, Enum):
    """HTTP methods supported by the Catenis API"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


HeadersInput = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


@dataclass
class SignableRequest:
    """
    Fully materialised outbound request

    Headers keep the caller's field-name case; lookups are case-insensitive
    and a repeated field is combined into one comma-separated value.

    Attributes:
        method: HTTP method
        url: Absolute request URL, percent-encoded exactly as sent
        headers: Request headers
        body: Body bytes as sent on the wire (empty when no body)
    """
    method: HttpMethod
    url: str
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""

    def __post_init__(self):
        """Validate request after initialization"""
        if not self.url:
            raise ValueError("Request URL cannot be empty")

        if not isinstance(self.method, HttpMethod):
            self.method = HttpMethod(str(self.method).upper())

        if self.body is None:
            self.body = b""
        elif isinstance(self.body, str):
            self.body = self.body.encode("utf-8")

        headers = self.headers
        self.headers = CaseInsensitiveDict()
        items = headers.items() if isinstance(headers, Mapping) else headers
        for name, value in items:
            self.add_header(name, value)

    def add_header(self, name: str, value: str) -> None:
        """Add a header, combining it with an existing field of the same name"""
        if name in self.headers:
            self.headers[name] = f"{self.headers[name]}, {value}"
        else:
            self.headers[name] = value

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name)

    @property
    def is_signed(self) -> bool:
        return AUTHORIZATION_HEADER in self.headers


@dataclass(frozen=True)
class SignatureResult:
    """
    Outcome of signing a request

    Attributes:
        timestamp: Value of the ``x-bcot-timestamp`` header
        scope: Credential scope, ``YYYYMMDD/ctn1_request``
        signature: Lowercase hex HMAC-SHA256 signature
        authorization: Value of the ``Authorization`` header
        canonical_request: Canonical request the signature covers
    """
    timestamp: str
    scope: str
    signature: str
    authorization: str
    canonical_request: str

    @property
    def headers(self) -> Dict[str, str]:
        return {TIMESTAMP_HEADER: self.timestamp, AUTHORIZATION_HEADER: self.authorization}
