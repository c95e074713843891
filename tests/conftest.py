"""
Shared fixtures for Catenis SDK tests
"""

from datetime import datetime, timezone

import pytest

from catenis_sdk.config import (
    ClientConfig,
    DeviceCredentials,
    Host,
    Secure,
    UseCompression,
    Version,
)


DEVICE_ID = "drc3XdxNtzoucpw9xiRp"
API_ACCESS_SECRET = (
    "4c1749c8e86f65e0a73e5fb19f2aa9e74a716bc22d7956bf3072b4bc3fbfe2a0"
    "d138ad0d4bcfee251e4e5f54d6e92b8fd4eb36958a7aeaeeb51e8d2fcc4552c3"
)
LOG_MESSAGE_BODY = '{"message":"Test message","options":{"encoding":"utf8"}}'
SIGN_INSTANT = datetime(2020, 12, 1, 6, 0, 0, tzinfo=timezone.utc)
EXPECTED_TIMESTAMP = "20201201T060000Z"
EXPECTED_SIGNATURE = "af2b41b1786b812809cc01291fd324880f48017b96332192566006d2fd7eefb4"


@pytest.fixture
def credentials():
    return DeviceCredentials(DEVICE_ID, API_ACCESS_SECRET)


@pytest.fixture
def frozen_clock():
    return lambda: SIGN_INSTANT


@pytest.fixture
def local_config():
    """Configuration of the local test server used by the signature fixture"""
    return ClientConfig.from_options(
        Host("localhost:3000"),
        Secure(False),
        Version("0.10"),
        UseCompression(False),
    )
