"""
Catenis API client

CatenisClient is the blocking entry point of the SDK: it owns the device
credentials, the resolved configuration, the signing-key memoiser and a
shared HTTP transport. Every service method goes through ``call``.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Tuple, Union

import requests

from .api.endpoints import Endpoint, get_endpoint
from .api.methods import EndpointMethods
from .config.client_config import ClientConfig, ClientOption, DeviceCredentials
from .exceptions import ConfigError, ErrorCodes
from .http_clients.request_builder import QueryParams, RequestBuilder
from .http_clients.response import decode_response
from .http_clients.transport import HttpTransport
from .notification.ws_channel import WsNotifyChannel
from .signing.ctn1_signer import RequestSigner
from .signing.types import SignableRequest, SignatureResult


logger = logging.getLogger(__name__)

CredentialsInput = Optional[Union[DeviceCredentials, Tuple[str, str]]]


class ClientCore:
    """
    Request preparation shared by the blocking and asynchronous clients

    Builds and signs requests; performs no I/O.
    """

    def __init__(
        self,
        credentials: CredentialsInput = None,
        *options: ClientOption,
        config: Optional[ClientConfig] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the client core.

        Args:
            credentials: Device credentials, or a ``(device_id, api_access_secret)``
                pair; None restricts the client to public endpoints
            *options: Client options applied in order to the defaults
            config: Already resolved configuration, instead of options
            clock: Callable returning the current instant, for signing

        Raises:
            ConfigError: If both config and options are given, or an option is invalid
            ClientError: If credentials are malformed
        """
        if config is not None and options:
            raise ConfigError(
                "Pass either a resolved config or client options, not both",
                ErrorCodes.INVALID_OPTION
            )

        self.config = config if config is not None else ClientConfig.from_options(*options)

        if credentials is not None and not isinstance(credentials, DeviceCredentials):
            credentials = DeviceCredentials.from_pair(credentials)
        self.credentials = credentials

        self.builder = RequestBuilder(self.config)
        self._signer = RequestSigner(credentials, clock) if credentials is not None else None

    @property
    def device_id(self) -> Optional[str]:
        return self.credentials.device_id if self.credentials else None

    @property
    def signer(self) -> RequestSigner:
        """
        Signer of this client.

        Raises:
            ConfigError: If the client has no credentials
        """
        if self._signer is None:
            raise ConfigError(
                "Device credentials are required to call this endpoint",
                ErrorCodes.MISSING_CREDENTIALS
            )
        return self._signer

    def sign(self, request: SignableRequest) -> SignatureResult:
        return self.signer.sign_request(request)

    def prepare_request(
        self,
        endpoint: Union[Endpoint, str],
        path_params: Optional[Mapping[str, Any]] = None,
        query: Optional[QueryParams] = None,
        body: Any = None
    ) -> Tuple[Endpoint, SignableRequest]:
        """
        Build, and sign when required, the request of an endpoint call.

        Returns:
            Tuple of the resolved endpoint and the request ready to be sent
        """
        if not isinstance(endpoint, Endpoint):
            endpoint = get_endpoint(endpoint)

        signer = self.signer if endpoint.signed else None

        request = self.builder.build_request(endpoint.method, endpoint.template, path_params, query, body)

        if signer is not None:
            signer.sign_request(request)

        return endpoint, request

    def prepare_ws_request(self, event_name: str) -> SignableRequest:
        """Build and sign the upgrade request of a notification channel"""
        signer = self.signer
        request = self.builder.build_ws_request(event_name)
        signer.sign_request(request)
        return request


class CatenisClient(ClientCore, EndpointMethods):
    """
    Blocking Catenis API client

    Example:
        >>> client = CatenisClient(("drc3XdxNtzoucpw9xiRp", secret), Env(Environment.SANDBOX))
        >>> client.log_message("Test message", {"encoding": "utf8"}).message_id
    """

    def __init__(
        self,
        credentials: CredentialsInput = None,
        *options: ClientOption,
        config: Optional[ClientConfig] = None,
        session: Optional[requests.Session] = None,
        clock: Optional[Callable[[], datetime]] = None,
        timeout: Optional[float] = None
    ):
        super().__init__(credentials, *options, config=config, clock=clock)
        self.transport = HttpTransport(self.config, session=session, timeout=timeout)
        logger.info(f"Catenis client created for {self.config.base_api_url}")

    def call(
        self,
        endpoint: Union[Endpoint, str],
        path_params: Optional[Mapping[str, Any]] = None,
        query: Optional[QueryParams] = None,
        body: Any = None,
        result_type: Any = None
    ) -> Any:
        """
        Call an API endpoint.

        Args:
            endpoint: Endpoint descriptor or catalogue name
            path_params: Values of the endpoint template placeholders
            query: Query parameters, in the order they should be sent
            body: JSON body
            result_type: Pydantic result model; defaults to the endpoint's own,
                or a ResultRecord

        Returns:
            The ``data`` member of the success envelope

        Raises:
            ConfigError: Missing credentials or path parameter
            ClientError: Request cannot be assembled, or inconsistent response
            TransportError: Network failure
            ApiError: Non-2xx response
            DecodeError: Body is not JSON or does not match result_type
        """
        endpoint, request = self.prepare_request(endpoint, path_params, query, body)
        response = self.transport.send(request)
        return decode_response(response, result_type or endpoint.result_type)

    def notification_channel(self, event_name: str) -> WsNotifyChannel:
        """
        Create a notification channel for an event.

        Args:
            event_name: Notification event, e.g. ``NotificationEvent.NEW_MSG_RECEIVED``

        Returns:
            WsNotifyChannel: Channel, not yet opened
        """
        return WsNotifyChannel(self, event_name)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
