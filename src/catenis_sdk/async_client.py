"""
Asynchronous Catenis API client

Same surface as CatenisClient, with every service method returning an
awaitable. The only suspension points are the HTTP exchange and the
notification socket; signing runs inline and never holds a lock across
an await.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

import httpx

from .api.endpoints import Endpoint
from .api.methods import EndpointMethods
from .client import ClientCore, CredentialsInput
from .config.client_config import ClientConfig, ClientOption
from .http_clients.request_builder import QueryParams
from .http_clients.response import decode_response
from .http_clients.transport import AsyncHttpTransport
from .notification.async_ws_channel import AsyncWsNotifyChannel


logger = logging.getLogger(__name__)


class AsyncCatenisClient(ClientCore, EndpointMethods):
    """
    Asynchronous Catenis API client

    Example:
        >>> async with AsyncCatenisClient((device_id, secret)) as client:
        ...     result = await client.log_message("Test message")
    """

    def __init__(
        self,
        credentials: CredentialsInput = None,
        *options: ClientOption,
        config: Optional[ClientConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Optional[Callable[[], datetime]] = None,
        timeout: Optional[float] = None
    ):
        super().__init__(credentials, *options, config=config, clock=clock)
        self.transport = AsyncHttpTransport(self.config, client=http_client, timeout=timeout)
        logger.info(f"Async Catenis client created for {self.config.base_api_url}")

    async def call(
        self,
        endpoint: Union[Endpoint, str],
        path_params: Optional[Mapping[str, Any]] = None,
        query: Optional[QueryParams] = None,
        body: Any = None,
        result_type: Any = None
    ) -> Any:
        """
        Call an API endpoint.

        See CatenisClient.call for arguments and errors.
        """
        endpoint, request = self.prepare_request(endpoint, path_params, query, body)
        response = await self.transport.send(request)
        return decode_response(response, result_type or endpoint.result_type)

    def notification_channel(self, event_name: str, open_timeout: Optional[float] = None) -> AsyncWsNotifyChannel:
        """Create a notification channel for an event, opened by iterating it"""
        return AsyncWsNotifyChannel(self, event_name, open_timeout=open_timeout)

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
