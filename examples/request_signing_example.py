#!/usr/bin/env python3
"""
Catenis Python SDK - Request Signing Example

This example shows how the SDK builds and signs Catenis API requests with
the CTN1-HMAC-SHA256 scheme. Nothing is sent over the network.
"""

from datetime import datetime, timezone

from catenis_sdk import (
    CatenisClient,
    ClientConfigBuilder,
    CompressThreshold,
    ConfigError,
    DeviceCredentials,
    Env,
    Environment,
    Host,
    HttpMethod,
    Secure,
    UseCompression,
    Version,
)


DEVICE_ID = "drc3XdxNtzoucpw9xiRp"
API_ACCESS_SECRET = (
    "4c1749c8e86f65e0a73e5fb19f2aa9e74a716bc22d7956bf3072b4bc3fbfe2a0"
    "d138ad0d4bcfee251e4e5f54d6e92b8fd4eb36958a7aeaeeb51e8d2fcc4552c3"
)


def basic_signing_example():
    """Sign a log-message request at a fixed instant"""
    print("=== Basic Request Signing Example ===")

    instant = datetime(2020, 12, 1, 6, 0, 0, tzinfo=timezone.utc)
    client = CatenisClient(
        DeviceCredentials(DEVICE_ID, API_ACCESS_SECRET),
        Host("localhost:3000"),
        Secure(False),
        Version("0.10"),
        UseCompression(False),
        clock=lambda: instant
    )

    request = client.builder.build_request(
        HttpMethod.POST,
        "messages/log",
        body={"message": "Test message", "options": {"encoding": "utf8"}}
    )
    result = client.sign(request)

    print(f"   {request.method.value} {request.url}")
    for name, value in request.headers.items():
        print(f"   {name}: {value}")
    print(f"\n   Canonical request:\n{result.canonical_request}")
    client.close()


def configuration_example():
    """Resolve configurations from options and from the builder"""
    print("\n=== Configuration Example ===")

    with CatenisClient(None, Env(Environment.SANDBOX), CompressThreshold(2048)) as client:
        print(f"   Sandbox base URL: {client.config.base_api_url}")
        print(f"   Compression: {client.config.compression_threshold_str}")
        print(f"   Notification URL: {client.builder.build_ws_request('new-msg-received').url}")

    config = ClientConfigBuilder().host("localhost:3000").insecure().build()
    print(f"   Local base URL: {config.base_api_url}")


def error_handling_example():
    """Show configuration errors raised before anything is sent"""
    print("\n=== Error Handling Example ===")

    try:
        Host("http://catenis.io/api")
    except ConfigError as e:
        print(f"   Invalid host rejected: {e} ({e.error_code})")

    with CatenisClient() as client:
        try:
            client.log_message("Test message")
        except ConfigError as e:
            print(f"   Missing credentials: {e} ({e.error_code})")

        try:
            client.call("get_asset_balance")
        except ConfigError as e:
            print(f"   Missing path parameter: {e} ({e.error_code})")


def main():
    """Run all examples"""
    print("Catenis Python SDK - Request Signing Examples")
    print("=" * 50)

    basic_signing_example()
    configuration_example()
    error_handling_example()


if __name__ == "__main__":
    main()
