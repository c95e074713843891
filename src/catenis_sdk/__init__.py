"""
Catenis Python SDK
Authenticated client for the Catenis blockchain messaging and tokenization API
"""

from .version import __version__
from .exceptions import (
    CatenisSDKError,
    ConfigError,
    ClientError,
    TransportError,
    DecodeError,
    ApiError,
    ErrorCodes,
)
from .config import (
    ApiVersion,
    ClientConfig,
    ClientConfigBuilder,
    ClientOption,
    CompressThreshold,
    DeviceCredentials,
    Env,
    Environment,
    Host,
    Secure,
    UseCompression,
    Version,
    create_client_config,
)
from .signing import (
    HttpMethod,
    RequestSigner,
    SignableRequest,
    SignatureResult,
    SigningKeyDerivator,
    derive_signing_key,
)
from .http_clients import RequestBuilder, decode_response
from .api import (
    ENDPOINTS,
    Endpoint,
    NotificationEvent,
    ResultRecord,
)
from .notification import (
    AsyncWsNotifyChannel,
    ChannelClosed,
    ChannelError,
    ChannelNotify,
    ChannelOpened,
    ChannelState,
    WsNotifyChannel,
)
from .client import CatenisClient
from .async_client import AsyncCatenisClient

__all__ = [
    # Version
    '__version__',

    # Exceptions
    'CatenisSDKError',
    'ConfigError',
    'ClientError',
    'TransportError',
    'DecodeError',
    'ApiError',
    'ErrorCodes',

    # Configuration
    'ApiVersion',
    'ClientConfig',
    'ClientConfigBuilder',
    'ClientOption',
    'CompressThreshold',
    'DeviceCredentials',
    'Env',
    'Environment',
    'Host',
    'Secure',
    'UseCompression',
    'Version',
    'create_client_config',

    # Signing
    'HttpMethod',
    'RequestSigner',
    'SignableRequest',
    'SignatureResult',
    'SigningKeyDerivator',
    'derive_signing_key',

    # HTTP
    'RequestBuilder',
    'decode_response',

    # API
    'ENDPOINTS',
    'Endpoint',
    'NotificationEvent',
    'ResultRecord',

    # Notifications
    'AsyncWsNotifyChannel',
    'ChannelClosed',
    'ChannelError',
    'ChannelNotify',
    'ChannelOpened',
    'ChannelState',
    'WsNotifyChannel',

    # Clients
    'CatenisClient',
    'AsyncCatenisClient',
]
