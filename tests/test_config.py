"""
Unit tests for client configuration
"""

import pytest

from catenis_sdk.exceptions import ConfigError, ErrorCodes
from catenis_sdk.config import (
    ApiVersion,
    ClientConfig,
    ClientConfigBuilder,
    CompressThreshold,
    DeviceCredentials,
    Env,
    Environment,
    Host,
    Secure,
    UseCompression,
    Version,
    create_client_config,
    parse_host,
)


class TestClientConfigDefaults:
    """Test default configuration"""

    def test_defaults(self):
        """Test the production defaults"""
        config = ClientConfig()

        assert config.base_api_url == "https://catenis.io/api/0.11/"
        assert config.use_compression is True
        assert config.compress_threshold == 1024
        assert config.environment is Environment.PRODUCTION
        assert config.is_secure
        assert config.ws_scheme == "wss"
        assert ClientConfig.from_options() == config

    def test_config_is_immutable(self):
        """Test that a resolved configuration cannot change"""
        config = ClientConfig()
        with pytest.raises(AttributeError):
            config.host = "example.com"


class TestClientOptions:
    """Test client options applied in order"""

    def test_local_test_server(self, local_config):
        """Test configuration of a local plain-http server"""
        assert local_config.base_api_url == "http://localhost:3000/api/0.10/"
        assert local_config.use_compression is False
        assert local_config.ws_scheme == "ws"

    def test_sandbox_prepends_subdomain(self):
        """Test that the sandbox environment changes the host"""
        config = ClientConfig.from_options(Env(Environment.SANDBOX))
        assert config.host == "sandbox.catenis.io"
        assert config.environment is Environment.SANDBOX
        assert config.base_api_url == "https://sandbox.catenis.io/api/0.11/"

    def test_option_order_matters(self):
        """Test that options apply left to right"""
        sandbox_then_host = ClientConfig.from_options(Env("sandbox"), Host("example.com"))
        host_then_sandbox = ClientConfig.from_options(Host("example.com"), Env("sandbox"))

        assert sandbox_then_host.host == "example.com"
        assert host_then_sandbox.host == "sandbox.example.com"

        last_wins = ClientConfig.from_options(Version("0.10"), Version((0, 9)))
        assert last_wins.api_version == ApiVersion(0, 9)

    def test_production_environment_keeps_host(self):
        """Test that prod does not change the host"""
        config = ClientConfig.from_options(Env("production"))
        assert config.host == "catenis.io"

    def test_host_without_port_keeps_port(self):
        """Test that a host without :port keeps the previously set port"""
        config = ClientConfig.from_options(Host("localhost:3000"), Host("example.com"), Secure(False))
        assert config.host == "example.com"
        assert config.port == 3000
        assert config.base_api_url == "http://example.com:3000/api/0.11/"

        config = ClientConfig.from_options(Host("localhost:3000"), Host("example.com:8443"))
        assert config.port == 8443

    def test_default_port_is_omitted(self):
        """Test base URL with an explicit default port"""
        config = ClientConfig.from_options(Host("catenis.io:443"))
        assert config.base_api_url == "https://catenis.io/api/0.11/"

        config = ClientConfig.from_options(Host("catenis.io:80"), Secure(False))
        assert config.base_api_url == "http://catenis.io/api/0.11/"

    def test_ipv6_host(self):
        """Test IPv6 literals are bracketed"""
        config = ClientConfig.from_options(Host("[::1]:8080"), Secure(False))
        assert config.host == "::1"
        assert config.base_api_url == "http://[::1]:8080/api/0.11/"

    def test_compression_options(self):
        """Test compression toggles"""
        config = ClientConfig.from_options(UseCompression(False), CompressThreshold(56))
        assert config.use_compression is False
        assert config.compress_threshold == 56
        assert config.compression_threshold_str == "disabled"

        config = ClientConfig.from_options(CompressThreshold(0))
        assert config.compression_threshold_str == "0 bytes"

    @pytest.mark.parametrize("host", ["", "http://catenis.io", "catenis.io/api", "catenis.io:abc",
                                      "user@catenis.io", "catenis.io:99999"])
    def test_invalid_host(self, host):
        """Test that malformed hosts are rejected"""
        with pytest.raises(ConfigError) as exc_info:
            Host(host)
        assert exc_info.value.error_code == ErrorCodes.INVALID_HOST

    def test_invalid_options(self):
        """Test invalid option values"""
        with pytest.raises(ConfigError):
            Secure("yes")
        with pytest.raises(ConfigError):
            Version("eleven")
        with pytest.raises(ConfigError):
            Version((0, -1))
        with pytest.raises(ConfigError):
            Env("staging")
        with pytest.raises(ConfigError):
            ClientConfig.from_options(CompressThreshold(-1))
        with pytest.raises(ConfigError):
            ClientConfig.from_options("sandbox")


class TestParsing:
    """Test value parsers"""

    def test_parse_host(self):
        """Test host and port splitting"""
        assert parse_host("localhost:3000") == ("localhost", 3000)
        assert parse_host("catenis.io") == ("catenis.io", None)

    def test_api_version(self):
        """Test API version parsing and formatting"""
        assert str(ApiVersion.parse("0.10")) == "0.10"
        assert ApiVersion.parse("1.2") == ApiVersion(1, 2)
        assert ApiVersion(0, 9) < ApiVersion(0, 10)
        with pytest.raises(ConfigError):
            ApiVersion(True, 1)

    def test_environment(self):
        """Test environment name parsing"""
        assert Environment.parse("PROD") is Environment.PRODUCTION
        assert Environment.parse("Sandbox") is Environment.SANDBOX


class TestCredentials:
    """Test device credentials"""

    def test_secret_not_in_repr(self):
        """Test that the secret is hidden from repr"""
        credentials = DeviceCredentials("dev1", "abcdef")
        assert "abcdef" not in repr(credentials)

    def test_from_pair(self):
        """Test creation from a tuple"""
        assert DeviceCredentials.from_pair(("dev1", "ab")) == DeviceCredentials("dev1", "ab")
        with pytest.raises(ConfigError):
            DeviceCredentials.from_pair(("dev1",))
        with pytest.raises(ConfigError):
            DeviceCredentials(None, "ab")


class TestConfigFactories:
    """Test keyword and builder factories"""

    def test_create_client_config(self):
        """Test keyword-argument factory"""
        config = create_client_config(host="localhost:3000", secure=False, version="0.10",
                                      use_compression=False)
        assert config.base_api_url == "http://localhost:3000/api/0.10/"
        assert config.use_compression is False

    def test_builder(self):
        """Test fluent builder"""
        config = (ClientConfigBuilder()
                  .sandbox()
                  .insecure()
                  .version("0.10")
                  .compress_threshold(2048)
                  .build())

        assert config.base_api_url == "http://sandbox.catenis.io/api/0.10/"
        assert config.compress_threshold == 2048
