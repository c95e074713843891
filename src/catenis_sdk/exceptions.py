"""
Exception classes for Catenis Python SDK

Every failure surfaced by the SDK is one of the kinds below. Library
exceptions (requests, httpx, websockets, json) are always wrapped, with the
original exception chained and recorded under ``details['original_error']``.
"""

from http import HTTPStatus
from typing import Optional, Dict, Any


class CatenisSDKError(Exception):
    """Base exception for all Catenis SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigError(CatenisSDKError):
    """Exception raised for invalid client configuration or missing credentials"""

    def __init__(self, message: str, error_code: str = "CONFIG_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class ClientError(CatenisSDKError):
    """Exception raised when a request cannot be assembled or a response breaks the envelope contract"""

    def __init__(self, message: str, error_code: str = "CLIENT_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class TransportError(CatenisSDKError):
    """Exception raised for network-level failures (DNS, connection, TLS, socket)"""

    def __init__(self, message: str, error_code: str = "TRANSPORT_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class DecodeError(CatenisSDKError):
    """Exception raised when a body is not valid UTF-8 JSON or does not match the expected shape"""

    def __init__(self, message: str, error_code: str = "DECODE_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class ApiError(CatenisSDKError):
    """
    Exception raised when the Catenis API returns a non-2xx response

    Attributes:
        http_status: HTTP status code of the response
        message: Envelope message when available, else the raw body, else empty
        api_message: Message taken from the ``{status, message}`` error envelope
        body_message: Raw response body, when it is not an error envelope
    """

    def __init__(
        self,
        http_status: int,
        message: str = "",
        api_message: Optional[str] = None,
        body_message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, "API_ERROR", details)
        self.http_status = http_status
        self.api_message = api_message
        self.body_message = body_message

    @property
    def reason(self) -> Optional[str]:
        """Canonical reason phrase of the HTTP status code"""
        try:
            return HTTPStatus(self.http_status).phrase
        except ValueError:
            return None

    def error_message(self) -> str:
        """Format error as ``[<status>] - <description>``"""
        description = self.api_message or self.body_message or self.message or self.reason or ""
        return f"[{self.http_status}] - {description}"

    def __str__(self) -> str:
        return f"Catenis API error: {self.error_message()}"

    def __repr__(self) -> str:
        return f"ApiError(http_status={self.http_status}, message={self.message!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiError):
            return NotImplemented
        return self.http_status == other.http_status and self.message == other.message

    __hash__ = None  # type: ignore[assignment]


class ErrorCodes:
    """Standard error codes for SDK operations"""

    # Configuration errors
    INVALID_HOST = "INVALID_HOST"
    INVALID_URL = "INVALID_URL"
    INVALID_OPTION = "INVALID_OPTION"
    MISSING_PATH_PARAM = "MISSING_PATH_PARAM"
    MISSING_CREDENTIALS = "MISSING_CREDENTIALS"

    # Request assembly and signing errors
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    MISSING_HOST = "MISSING_HOST"
    INVALID_HEADER = "INVALID_HEADER"
    INVALID_BODY = "INVALID_BODY"
    SIGNING_FAILED = "SIGNING_FAILED"

    # Response errors
    INCONSISTENT_RESPONSE = "INCONSISTENT_RESPONSE"
    INVALID_JSON = "INVALID_JSON"
    SHAPE_MISMATCH = "SHAPE_MISMATCH"

    # Transport errors
    CONNECTION_FAILED = "CONNECTION_FAILED"
    REQUEST_TIMEOUT = "REQUEST_TIMEOUT"
    WS_HANDSHAKE_FAILED = "WS_HANDSHAKE_FAILED"
    WS_SOCKET_ERROR = "WS_SOCKET_ERROR"
    WS_UNEXPECTED_MESSAGE = "WS_UNEXPECTED_MESSAGE"
