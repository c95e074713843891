"""
Client configuration for the Catenis Python SDK

This module holds the device credentials and the endpoint configuration
(scheme, host, API version, compression policy) used by every request.
Configuration is resolved once, at client construction, from either the
defaults or an ordered list of client options, and is immutable afterwards.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Optional, Tuple, Union
from urllib.parse import urlsplit

from ..exceptions import ConfigError, ErrorCodes


DEFAULT_HOST = "catenis.io"
DEFAULT_SCHEME = "https"
DEFAULT_COMPRESS_THRESHOLD = 1024
SANDBOX_SUBDOMAIN = "sandbox."

DEFAULT_PORTS = {"http": 80, "https": 443}
WS_SCHEMES = {"http": "ws", "https": "wss"}


class Environment(str, Enum):
    """Catenis deployment environments"""
    PRODUCTION = "prod"
    SANDBOX = "sandbox"

    @classmethod
    def parse(cls, text: str) -> 'Environment':
        """
        Parse an environment name.

        Args:
            text: ``prod``/``production`` or ``sandbox`` (case-insensitive)

        Returns:
            Environment: Matching environment

        Raises:
            ConfigError: If the name is not recognised
        """
        value = (text or "").strip().lower()
        if value in ("prod", "production"):
            return cls.PRODUCTION
        if value == "sandbox":
            return cls.SANDBOX
        raise ConfigError(
            f"Unknown environment: {text!r}",
            ErrorCodes.INVALID_OPTION,
            {"environment": text}
        )


@dataclass(frozen=True, order=True)
class ApiVersion:
    """
    Catenis API version

    Attributes:
        major: Major version number
        minor: Minor version number
    """
    major: int
    minor: int

    def __post_init__(self):
        for name in ("major", "minor"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(
                    f"API version {name} must be a non-negative integer",
                    ErrorCodes.INVALID_OPTION,
                    {name: value}
                )

    @classmethod
    def parse(cls, text: str) -> 'ApiVersion':
        """Parse an API version from ``"<major>.<minor>"`` text"""
        parts = str(text).strip().split(".")
        if len(parts) != 2 or not all(part.isdigit() for part in parts):
            raise ConfigError(
                f"Invalid API version: {text!r}",
                ErrorCodes.INVALID_OPTION,
                {"version": text}
            )
        return cls(int(parts[0]), int(parts[1]))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


DEFAULT_API_VERSION = ApiVersion(0, 11)

VersionLike = Union[ApiVersion, str, Tuple[int, int]]


def _coerce_version(version: VersionLike) -> ApiVersion:
    if isinstance(version, ApiVersion):
        return version
    if isinstance(version, str):
        return ApiVersion.parse(version)
    if isinstance(version, tuple) and len(version) == 2:
        return ApiVersion(version[0], version[1])
    raise ConfigError(
        f"Invalid API version: {version!r}",
        ErrorCodes.INVALID_OPTION,
        {"version": repr(version)}
    )


@dataclass(frozen=True)
class DeviceCredentials:
    """
    Credentials of a Catenis virtual device

    Attributes:
        device_id: Catenis device ID
        api_access_secret: API access secret, as the 128 hex characters issued by Catenis
    """
    device_id: str
    api_access_secret: str = field(repr=False)

    def __post_init__(self):
        if not isinstance(self.device_id, str) or not isinstance(self.api_access_secret, str):
            raise ConfigError(
                "Device ID and API access secret must be strings",
                ErrorCodes.INVALID_CREDENTIALS
            )

    @classmethod
    def from_pair(cls, pair: Tuple[str, str]) -> 'DeviceCredentials':
        """Create credentials from a ``(device_id, api_access_secret)`` pair"""
        try:
            device_id, secret = pair
        except (TypeError, ValueError) as e:
            raise ConfigError(
                "Credentials must be a (device_id, api_access_secret) pair",
                ErrorCodes.INVALID_CREDENTIALS,
                {"original_error": str(e)}
            ) from e
        return cls(device_id, secret)


def parse_host(text: str) -> Tuple[str, Optional[int]]:
    """
    Split a ``host[:port]`` string.

    Args:
        text: Host name, optionally followed by ``:port``; IPv6 literals in brackets

    Returns:
        Tuple of host name and port (``None`` when not given)

    Raises:
        ConfigError: If the text is not a valid host[:port] string
    """
    if not isinstance(text, str) or not text.strip():
        raise ConfigError("Host cannot be empty", ErrorCodes.INVALID_HOST, {"host": text})

    try:
        parts = urlsplit(f"//{text.strip()}")
        host = parts.hostname
        port = parts.port
    except ValueError as e:
        raise ConfigError(
            f"Invalid host: {text!r}",
            ErrorCodes.INVALID_HOST,
            {"host": text, "original_error": str(e)}
        ) from e

    if not host or parts.path or parts.query or parts.fragment or parts.username or parts.password:
        raise ConfigError(f"Invalid host: {text!r}", ErrorCodes.INVALID_HOST, {"host": text})

    return host, port


@dataclass(frozen=True)
class ClientConfig:
    """
    Resolved endpoint configuration of a Catenis client

    Attributes:
        host: Host name of the Catenis API server
        port: Explicit port, or None to use the scheme's default
        scheme: ``https`` or ``http``
        api_version: API version used in the base path
        use_compression: Whether large request bodies are compressed
        compress_threshold: Minimum body size, in bytes, for compression to apply
        environment: Environment the host was resolved for
    """
    host: str = DEFAULT_HOST
    port: Optional[int] = None
    scheme: str = DEFAULT_SCHEME
    api_version: ApiVersion = DEFAULT_API_VERSION
    use_compression: bool = True
    compress_threshold: int = DEFAULT_COMPRESS_THRESHOLD
    environment: Environment = Environment.PRODUCTION

    def __post_init__(self):
        """Validate configuration after initialization"""
        if self.scheme not in DEFAULT_PORTS:
            raise ConfigError(
                f"Unsupported URL scheme: {self.scheme!r}",
                ErrorCodes.INVALID_URL,
                {"scheme": self.scheme}
            )

        if not self.host or any(c in self.host for c in "/?#@ \t\r\n"):
            raise ConfigError(f"Invalid host: {self.host!r}", ErrorCodes.INVALID_HOST, {"host": self.host})

        if self.port is not None and (isinstance(self.port, bool) or not isinstance(self.port, int)
                                      or not 0 < self.port < 65536):
            raise ConfigError(f"Invalid port: {self.port!r}", ErrorCodes.INVALID_HOST, {"port": self.port})

        if not isinstance(self.api_version, ApiVersion):
            raise ConfigError("api_version must be an ApiVersion", ErrorCodes.INVALID_OPTION)

        if not isinstance(self.environment, Environment):
            raise ConfigError("environment must be an Environment", ErrorCodes.INVALID_OPTION)

        if (isinstance(self.compress_threshold, bool) or not isinstance(self.compress_threshold, int)
                or self.compress_threshold < 0):
            raise ConfigError(
                "Compress threshold must be a non-negative integer",
                ErrorCodes.INVALID_OPTION,
                {"compress_threshold": self.compress_threshold}
            )

    @classmethod
    def from_options(cls, *options: 'ClientOption') -> 'ClientConfig':
        """
        Resolve a configuration by applying client options, in order, to the defaults.

        Args:
            *options: Options created by Host, Env, Secure, Version,
                UseCompression and CompressThreshold

        Returns:
            ClientConfig: Resolved configuration

        Raises:
            ConfigError: If an option is invalid for the configuration built so far
        """
        config = cls()
        for option in options:
            if not isinstance(option, ClientOption):
                raise ConfigError(
                    f"Not a client option: {option!r}",
                    ErrorCodes.INVALID_OPTION
                )
            config = option.apply(config)
        return config

    @property
    def is_secure(self) -> bool:
        return self.scheme == "https"

    @property
    def ws_scheme(self) -> str:
        """WebSocket scheme matching the REST scheme"""
        return WS_SCHEMES[self.scheme]

    @property
    def netloc(self) -> str:
        """Host with ``:port`` appended only when the port is not the scheme's default"""
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port is None or self.port == DEFAULT_PORTS[self.scheme]:
            return host
        return f"{host}:{self.port}"

    @property
    def base_api_url(self) -> str:
        """Base URL of the API, always ending in ``/api/<major>.<minor>/``"""
        return f"{self.scheme}://{self.netloc}/api/{self.api_version}/"

    @property
    def compression_threshold_str(self) -> str:
        return f"{self.compress_threshold} bytes" if self.use_compression else "disabled"


@dataclass(frozen=True)
class ClientOption:
    """
    A single client configuration option

    Attributes:
        name: Option name, for diagnostics
        value: Option value as given by the caller
    """
    name: str
    value: Any
    _apply: Callable[[ClientConfig], ClientConfig] = field(repr=False, compare=False)

    def apply(self, config: ClientConfig) -> ClientConfig:
        return self._apply(config)


def Host(host: str) -> ClientOption:
    """Option replacing the host; the port is replaced only when given as ``host:port``"""
    name, port = parse_host(host)

    def apply(config: ClientConfig) -> ClientConfig:
        if port is None:
            return replace(config, host=name)
        return replace(config, host=name, port=port)

    return ClientOption("host", host, apply)


def Env(environment: Union[Environment, str]) -> ClientOption:
    """Option selecting the environment; sandbox prepends ``sandbox.`` to the current host"""
    env = environment if isinstance(environment, Environment) else Environment.parse(environment)

    def apply(config: ClientConfig) -> ClientConfig:
        if env is Environment.SANDBOX:
            if not config.host:
                raise ConfigError(
                    "Cannot select sandbox environment without a host",
                    ErrorCodes.INVALID_HOST
                )
            return replace(config, host=SANDBOX_SUBDOMAIN + config.host, environment=env)
        return replace(config, environment=env)

    return ClientOption("environment", env, apply)


def Secure(secure: bool) -> ClientOption:
    """Option selecting https/wss (True) or http/ws (False)"""
    if not isinstance(secure, bool):
        raise ConfigError("Secure option must be a boolean", ErrorCodes.INVALID_OPTION, {"secure": secure})
    return ClientOption("secure", secure, lambda c: replace(c, scheme="https" if secure else "http"))


def Version(version: VersionLike) -> ClientOption:
    """Option selecting the API version path segment"""
    api_version = _coerce_version(version)
    return ClientOption("version", api_version, lambda c: replace(c, api_version=api_version))


def UseCompression(enabled: bool) -> ClientOption:
    """Option toggling compression of outbound request bodies"""
    return ClientOption("use_compression", bool(enabled), lambda c: replace(c, use_compression=bool(enabled)))


def CompressThreshold(threshold: int) -> ClientOption:
    """Option setting the minimum body size, in bytes, for compression"""
    return ClientOption("compress_threshold", threshold, lambda c: replace(c, compress_threshold=threshold))


def create_client_config(
    host: Optional[str] = None,
    environment: Optional[Union[Environment, str]] = None,
    secure: Optional[bool] = None,
    version: Optional[VersionLike] = None,
    use_compression: Optional[bool] = None,
    compress_threshold: Optional[int] = None
) -> ClientConfig:
    """
    Create a client configuration from keyword arguments.

    Options are applied in the order host, environment, secure, version,
    use_compression, compress_threshold; arguments left as None keep defaults.

    Returns:
        ClientConfig: Resolved configuration
    """
    options = []
    if host is not None:
        options.append(Host(host))
    if environment is not None:
        options.append(Env(environment))
    if secure is not None:
        options.append(Secure(secure))
    if version is not None:
        options.append(Version(version))
    if use_compression is not None:
        options.append(UseCompression(use_compression))
    if compress_threshold is not None:
        options.append(CompressThreshold(compress_threshold))
    return ClientConfig.from_options(*options)


class ClientConfigBuilder:
    """
    Builder for creating client configurations with fluent API
    """

    def __init__(self):
        self._options = []

    def host(self, host: str) -> 'ClientConfigBuilder':
        """
        Set API host.

        Args:
            host: Host name, optionally with ``:port``

        Returns:
            ClientConfigBuilder: Self for method chaining
        """
        self._options.append(Host(host))
        return self

    def environment(self, environment: Union[Environment, str]) -> 'ClientConfigBuilder':
        self._options.append(Env(environment))
        return self

    def sandbox(self) -> 'ClientConfigBuilder':
        """Select the sandbox environment"""
        return self.environment(Environment.SANDBOX)

    def secure(self, secure: bool = True) -> 'ClientConfigBuilder':
        self._options.append(Secure(secure))
        return self

    def insecure(self) -> 'ClientConfigBuilder':
        """Use plain http/ws"""
        return self.secure(False)

    def version(self, version: VersionLike) -> 'ClientConfigBuilder':
        self._options.append(Version(version))
        return self

    def use_compression(self, enabled: bool = True) -> 'ClientConfigBuilder':
        self._options.append(UseCompression(enabled))
        return self

    def compress_threshold(self, threshold: int) -> 'ClientConfigBuilder':
        self._options.append(CompressThreshold(threshold))
        return self

    def build(self) -> ClientConfig:
        """
        Build the client configuration.

        Returns:
            ClientConfig: Resolved configuration

        Raises:
            ConfigError: If any option is invalid
        """
        return ClientConfig.from_options(*self._options)
