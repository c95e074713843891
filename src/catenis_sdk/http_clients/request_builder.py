"""
Request builder for the Catenis API

Turns an endpoint template, path parameters, query parameters and an
optional JSON body into a fully materialised request: absolute URL, headers
and the exact body bytes to send (deflate-compressed when large enough).
"""

import json
import logging
import re
import zlib
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote, urlencode

from ..config.client_config import ClientConfig
from ..exceptions import ClientError, ConfigError, ErrorCodes
from ..signing.types import HttpMethod, SignableRequest


logger = logging.getLogger(__name__)

CONTENT_TYPE_JSON = "application/json; charset=utf-8"
CONTENT_ENCODING_DEFLATE = "deflate"
NOTIFY_WS_TEMPLATE = "notify/ws/:event_name"

PATH_PARAM_PATTERN = re.compile(r"(?:(?<=/)|^):([A-Za-z_][A-Za-z0-9_]*)")

QueryParams = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def format_query_value(value: Any) -> str:
    """Render a query value the way the Catenis API expects it"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def normalize_query(query: Optional[QueryParams]) -> List[Tuple[str, str]]:
    """
    Flatten query parameters into ordered ``(key, value)`` pairs.

    Caller order is preserved, keys may repeat and None values are dropped.
    """
    if not query:
        return []
    items = query.items() if isinstance(query, Mapping) else query
    return [(str(key), format_query_value(value)) for key, value in items if value is not None]


def encode_json_body(body: Any) -> bytes:
    """
    Serialise a request body as compact UTF-8 JSON.

    Text and bytes are taken as already serialised JSON.

    Raises:
        ClientError: If the body cannot be serialised
    """
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    try:
        return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ClientError(
            f"Request body is not JSON serialisable: {e}",
            ErrorCodes.INVALID_BODY,
            {"original_error": str(e)}
        ) from e


class RequestBuilder:
    """
    Builder of outbound requests relative to a client configuration
    """

    def __init__(self, config: ClientConfig):
        self.config = config

    def resolve_path(self, template: str, path_params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Substitute ``:name`` placeholders of an endpoint template.

        Args:
            template: Endpoint template, e.g. ``assets/:asset_id/balance``
            path_params: Placeholder values

        Returns:
            str: Path relative to the base API URL, values percent-encoded

        Raises:
            ConfigError: If a placeholder has no value
        """
        params = path_params or {}

        def substitute(match: 're.Match') -> str:
            name = match.group(1)
            value = params.get(name)
            if value is None:
                raise ConfigError(
                    f"Missing value for path parameter '{name}' of endpoint '{template}'",
                    ErrorCodes.MISSING_PATH_PARAM,
                    {"template": template, "parameter": name}
                )
            return quote(format_query_value(value), safe="")

        return PATH_PARAM_PATTERN.sub(substitute, template.lstrip("/"))

    def build_url(
        self,
        template: str,
        path_params: Optional[Mapping[str, Any]] = None,
        query: Optional[QueryParams] = None
    ) -> str:
        """Build the absolute URL of an endpoint"""
        url = self.config.base_api_url + self.resolve_path(template, path_params)
        pairs = normalize_query(query)
        if pairs:
            url = f"{url}?{urlencode(pairs, quote_via=quote)}"
        return url

    def build_request(
        self,
        method: Union[HttpMethod, str],
        template: str,
        path_params: Optional[Mapping[str, Any]] = None,
        query: Optional[QueryParams] = None,
        body: Any = None
    ) -> SignableRequest:
        """
        Build a fully materialised request.

        Args:
            method: HTTP method
            template: Endpoint template relative to the base API URL
            path_params: Values of the template placeholders
            query: Query parameters, in the order they should appear
            body: JSON body (object, or already serialised text/bytes)

        Returns:
            SignableRequest: Request ready to be signed and sent

        Raises:
            ConfigError: If a path placeholder has no value
            ClientError: If the body cannot be serialised
        """
        url = self.build_url(template, path_params, query)
        request = SignableRequest(method=HttpMethod(str(getattr(method, "value", method)).upper()), url=url)

        data = encode_json_body(body) if body is not None else b""
        if data:
            request.headers["Content-Type"] = CONTENT_TYPE_JSON

            if self.config.use_compression and len(data) >= self.config.compress_threshold:
                logger.debug(f"Compressing {len(data)}-byte request body")
                data = zlib.compress(data)
                request.headers["Content-Encoding"] = CONTENT_ENCODING_DEFLATE

            request.body = data

        logger.debug(f"Built {request.method.value} {url}")
        return request

    def build_ws_request(self, event_name: str) -> SignableRequest:
        """
        Build the GET request used as a notification channel's upgrade handshake.

        The URL scheme is rewritten to ``ws``/``wss`` after construction.
        """
        request = self.build_request(HttpMethod.GET, NOTIFY_WS_TEMPLATE, {"event_name": event_name})
        request.url = to_ws_url(request.url)
        return request


def to_ws_url(url: str) -> str:
    """Rewrite an http(s) URL to the matching ws(s) scheme"""
    if url.startswith("https://"):
        return "wss://" + url[len("https://"):]
    if url.startswith("http://"):
        return "ws://" + url[len("http://"):]
    return url
