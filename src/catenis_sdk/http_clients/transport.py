"""
HTTP transports for the Catenis Python SDK

Thin adapters that send a signed request exactly once and return the
response whatever its status. ``requests`` backs the blocking client and
``httpx`` the asynchronous one; both decompress gzip responses transparently.
"""

import logging
from typing import Optional, Union

import httpx
import requests

from ..config.client_config import ClientConfig
from ..exceptions import ErrorCodes, TransportError
from ..signing.types import SignableRequest
from ..version import __version__


logger = logging.getLogger(__name__)

USER_AGENT = f"catenis-python-sdk/{__version__}"

Timeout = Optional[Union[float, tuple]]


def transport_headers(config: ClientConfig, request: SignableRequest) -> dict:
    """Headers to put on the wire for a request"""
    headers = dict(request.headers.items())
    headers["Accept-Encoding"] = "gzip" if config.use_compression else "identity"
    headers.setdefault("User-Agent", USER_AGENT)
    return headers


class HttpTransport:
    """
    Blocking transport over a shared ``requests.Session``

    The session is reused across calls of one client, so connections may be
    kept alive between requests.
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None,
                 timeout: Timeout = None, verify_ssl: bool = True):
        """
        Initialize the transport.

        Args:
            config: Client configuration
            session: Session to use; a new one is created when omitted
            timeout: Optional request timeout in seconds
            verify_ssl: Whether to verify server TLS certificates
        """
        self.config = config
        self.session = session or requests.Session()
        self.timeout = timeout
        self.verify_ssl = verify_ssl

    def send(self, request: SignableRequest) -> requests.Response:
        """
        Send a request once.

        Args:
            request: Signed (or public) request

        Returns:
            requests.Response: Response of any HTTP status

        Raises:
            TransportError: If the request could not be completed
        """
        logger.debug(f"Sending {request.method.value} {request.url}")
        try:
            response = self.session.request(
                method=request.method.value,
                url=request.url,
                headers=transport_headers(self.config, request),
                data=request.body or None,
                timeout=self.timeout,
                verify=self.verify_ssl,
                allow_redirects=False
            )
        except requests.exceptions.Timeout as e:
            raise TransportError(
                f"Request timed out: {e}",
                ErrorCodes.REQUEST_TIMEOUT,
                {"url": request.url, "original_error": str(e)}
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"Request failed: {e}",
                ErrorCodes.CONNECTION_FAILED,
                {"url": request.url, "original_error": str(e)}
            ) from e

        logger.debug(f"Received HTTP {response.status_code} from {request.url}")
        return response

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class AsyncHttpTransport:
    """
    Asynchronous transport over a shared ``httpx.AsyncClient``
    """

    def __init__(self, config: ClientConfig, client: Optional[httpx.AsyncClient] = None,
                 timeout: Timeout = None, verify_ssl: bool = True):
        self.config = config
        self.client = client or httpx.AsyncClient(timeout=timeout, verify=verify_ssl)

    async def send(self, request: SignableRequest) -> httpx.Response:
        """
        Send a request once.

        Raises:
            TransportError: If the request could not be completed
        """
        logger.debug(f"Sending {request.method.value} {request.url}")
        try:
            response = await self.client.request(
                request.method.value,
                request.url,
                headers=transport_headers(self.config, request),
                content=request.body or None,
                follow_redirects=False
            )
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request timed out: {e}",
                ErrorCodes.REQUEST_TIMEOUT,
                {"url": request.url, "original_error": str(e)}
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"Request failed: {e}",
                ErrorCodes.CONNECTION_FAILED,
                {"url": request.url, "original_error": str(e)}
            ) from e

        logger.debug(f"Received HTTP {response.status_code} from {request.url}")
        return response

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
