"""
Configuration management for Catenis Python SDK

This module provides device credentials and the endpoint configuration
resolved from defaults or an ordered list of client options.
"""

from .client_config import (
    ApiVersion,
    ClientConfig,
    ClientConfigBuilder,
    ClientOption,
    CompressThreshold,
    DEFAULT_API_VERSION,
    DEFAULT_COMPRESS_THRESHOLD,
    DEFAULT_HOST,
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

__all__ = [
    'ApiVersion',
    'ClientConfig',
    'ClientConfigBuilder',
    'ClientOption',
    'CompressThreshold',
    'DEFAULT_API_VERSION',
    'DEFAULT_COMPRESS_THRESHOLD',
    'DEFAULT_HOST',
    'DeviceCredentials',
    'Env',
    'Environment',
    'Host',
    'Secure',
    'UseCompression',
    'Version',
    'create_client_config',
    'parse_host',
]
