"""
HTTP layer for the Catenis Python SDK

Request building, transports (requests and httpx) and response decoding.
"""

from .request_builder import (
    CONTENT_ENCODING_DEFLATE,
    CONTENT_TYPE_JSON,
    RequestBuilder,
    encode_json_body,
    normalize_query,
    to_ws_url,
)
from .transport import AsyncHttpTransport, HttpTransport
from .response import api_error_from, decode_response, parse_error_envelope, parse_json

__all__ = [
    'CONTENT_ENCODING_DEFLATE',
    'CONTENT_TYPE_JSON',
    'RequestBuilder',
    'encode_json_body',
    'normalize_query',
    'to_ws_url',
    'AsyncHttpTransport',
    'HttpTransport',
    'api_error_from',
    'decode_response',
    'parse_error_envelope',
    'parse_json',
]
