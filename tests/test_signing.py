"""
Test suite for CTN1 request signing

This module tests canonical request construction, the string to sign and
the headers added by the request signer, including the reference signature.
"""

import hashlib
from datetime import datetime, timedelta, timezone

import pytest

from catenis_sdk.exceptions import ClientError, ErrorCodes
from catenis_sdk.config import DeviceCredentials
from catenis_sdk.http_clients import RequestBuilder
from catenis_sdk.signing import (
    HttpMethod,
    RequestSigner,
    SignableRequest,
    build_canonical_request,
    build_scope,
    build_string_to_sign,
    format_timestamp,
    sha256_hex,
)
from catenis_sdk.signing.utils import parse_url

from .conftest import (
    DEVICE_ID,
    EXPECTED_SIGNATURE,
    EXPECTED_TIMESTAMP,
    LOG_MESSAGE_BODY,
    SIGN_INSTANT,
)


EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


class TestSigningUtilities:
    """Test utility functions"""

    def test_sha256_hex_of_empty_body(self):
        """Test digest of an empty body"""
        assert sha256_hex(b"") == EMPTY_SHA256
        assert sha256_hex("") == EMPTY_SHA256

    def test_format_timestamp(self):
        """Test x-bcot-timestamp formatting"""
        assert format_timestamp(SIGN_INSTANT) == EXPECTED_TIMESTAMP

        # Other time zones are converted to UTC
        local = SIGN_INSTANT.astimezone(timezone(timedelta(hours=-3)))
        assert format_timestamp(local) == EXPECTED_TIMESTAMP

        # Naive datetimes are taken as UTC
        assert format_timestamp(datetime(2020, 12, 1, 6, 0, 0)) == EXPECTED_TIMESTAMP

    def test_parse_url(self):
        """Test URL parsing for the Host header and signed path"""
        parsed = parse_url("http://localhost:3000/api/0.10/messages/log")
        assert parsed["host"] == "localhost:3000"
        assert parsed["path_with_query"] == "/api/0.10/messages/log"

        parsed = parse_url("https://catenis.io:443/api/0.11/messages?limit=10&skip=0")
        assert parsed["host"] == "catenis.io"
        assert parsed["path_with_query"] == "/api/0.11/messages?limit=10&skip=0"

        parsed = parse_url("wss://sandbox.catenis.io/api/0.11/notify/ws/new-msg-received")
        assert parsed["host"] == "sandbox.catenis.io"

        parsed = parse_url("ws://localhost:80/x")
        assert parsed["host"] == "localhost"

    def test_parse_url_without_host(self):
        """Test that a URL without host cannot be signed"""
        with pytest.raises(ClientError) as exc_info:
            parse_url("http:///api/0.11/messages")
        assert exc_info.value.error_code == ErrorCodes.MISSING_HOST


class TestCanonicalRequest:
    """Test canonical request and string to sign construction"""

    def test_canonical_request_grammar(self):
        """Test exact canonical request layout"""
        request = SignableRequest(
            method=HttpMethod.POST,
            url="http://localhost:3000/api/0.10/messages/log",
            body=LOG_MESSAGE_BODY
        )
        canonical = build_canonical_request(request, "localhost:3000", EXPECTED_TIMESTAMP)

        body_hash = hashlib.sha256(LOG_MESSAGE_BODY.encode()).hexdigest()
        assert canonical == (
            "POST\n"
            "/api/0.10/messages/log\n"
            "host:localhost:3000\n"
            "x-bcot-timestamp:20201201T060000Z\n"
            "\n"
            f"{body_hash}\n"
        )

    def test_canonical_request_keeps_query(self):
        """Test that the query is signed as sent"""
        request = SignableRequest(
            method=HttpMethod.GET,
            url="https://catenis.io/api/0.11/messages/abc?encoding=utf8&async=false"
        )
        canonical = build_canonical_request(request, "catenis.io", EXPECTED_TIMESTAMP)
        lines = canonical.split("\n")
        assert lines[1] == "/api/0.11/messages/abc?encoding=utf8&async=false"
        assert lines[5] == EMPTY_SHA256

    def test_canonical_header_order_is_fixed(self):
        """Test that header map order does not affect the canonical form"""
        request = SignableRequest(
            method=HttpMethod.GET,
            url="https://catenis.io/api/0.11/assets/owned",
            headers={"x-bcot-timestamp": EXPECTED_TIMESTAMP, "Host": "catenis.io"}
        )
        canonical = build_canonical_request(request, "catenis.io", EXPECTED_TIMESTAMP)
        assert canonical.split("\n")[2:4] == ["host:catenis.io", "x-bcot-timestamp:20201201T060000Z"]

    def test_scope_and_string_to_sign(self):
        """Test scope and string to sign"""
        scope = build_scope(SIGN_INSTANT.date())
        assert scope == "20201201/ctn1_request"

        string_to_sign = build_string_to_sign(EXPECTED_TIMESTAMP, scope, "canonical\n")
        assert string_to_sign == (
            "CTN1-HMAC-SHA256\n"
            "20201201T060000Z\n"
            "20201201/ctn1_request\n"
            f"{hashlib.sha256(b'canonical' + bytes([10])).hexdigest()}\n"
        )


class TestRequestSigner:
    """Test the CTN1 request signer"""

    def _log_message_request(self, config):
        return RequestBuilder(config).build_request(HttpMethod.POST, "messages/log", body=LOG_MESSAGE_BODY)

    def test_reference_signature(self, credentials, frozen_clock, local_config):
        """Test the signature of the reference log-message request"""
        request = self._log_message_request(local_config)
        signer = RequestSigner(credentials, clock=frozen_clock)

        result = signer.sign_request(request)

        assert request.headers["Host"] == "localhost:3000"
        assert request.headers["x-bcot-timestamp"] == EXPECTED_TIMESTAMP
        assert request.headers["Authorization"] == (
            f"CTN1-HMAC-SHA256 Credential={DEVICE_ID}/20201201/ctn1_request,"
            f"Signature={EXPECTED_SIGNATURE}"
        )
        assert result.signature == EXPECTED_SIGNATURE
        assert result.scope == "20201201/ctn1_request"
        assert result.headers["Authorization"] == request.headers["Authorization"]

    def test_signing_does_not_touch_body_or_url(self, credentials, frozen_clock, local_config):
        """Test that only headers are modified"""
        request = self._log_message_request(local_config)
        url, body = request.url, request.body

        RequestSigner(credentials, clock=frozen_clock).sign_request(request)

        assert request.url == url
        assert request.body == body
        assert request.is_signed

    def test_resigning_is_deterministic(self, credentials, frozen_clock, local_config):
        """Test that identical requests at the same instant sign identically"""
        signer = RequestSigner(credentials, clock=frozen_clock)
        first = signer.sign_request(self._log_message_request(local_config))
        second = signer.sign_request(self._log_message_request(local_config))
        other_signer = RequestSigner(credentials, clock=frozen_clock)
        third = other_signer.sign_request(self._log_message_request(local_config))

        assert first.authorization == second.authorization == third.authorization

    @pytest.mark.parametrize("method,url,host,body,instant", [
        ("GET", "http://localhost:3000/api/0.10/messages/log", None, LOG_MESSAGE_BODY, SIGN_INSTANT),
        ("POST", "http://localhost:3000/api/0.10/messages/send", None, LOG_MESSAGE_BODY, SIGN_INSTANT),
        ("POST", "http://localhost:3000/api/0.10/messages/log?x=1", None, LOG_MESSAGE_BODY, SIGN_INSTANT),
        ("POST", "http://localhost:3000/api/0.10/messages/log", "localhost:3001", LOG_MESSAGE_BODY, SIGN_INSTANT),
        ("POST", "http://localhost:3000/api/0.10/messages/log", None, LOG_MESSAGE_BODY.replace("T", "t"),
         SIGN_INSTANT),
        ("POST", "http://localhost:3000/api/0.10/messages/log", None, LOG_MESSAGE_BODY,
         SIGN_INSTANT + timedelta(seconds=1)),
    ])
    def test_any_mutation_changes_signature(self, credentials, method, url, host, body, instant):
        """Test that verb, path, query, host, body and timestamp are all covered"""
        headers = {"Host": host} if host else {}
        request = SignableRequest(method=HttpMethod(method), url=url, headers=headers, body=body)

        result = RequestSigner(credentials, clock=lambda: instant).sign_request(request)

        assert result.signature != EXPECTED_SIGNATURE

    def test_existing_host_header_is_used(self, credentials, frozen_clock):
        """Test that a caller-supplied Host header is kept and signed"""
        request = SignableRequest(
            method=HttpMethod.GET,
            url="https://10.0.0.1/api/0.11/assets/owned",
            headers={"host": "catenis.io"}
        )
        result = RequestSigner(credentials, clock=frozen_clock).sign_request(request)

        assert request.headers["Host"] == "catenis.io"
        assert "host:catenis.io\n" in result.canonical_request

    def test_default_port_omitted_from_host(self, credentials, frozen_clock):
        """Test Host header for default ports"""
        request = SignableRequest(method=HttpMethod.GET, url="https://catenis.io:443/api/0.11/assets/owned")
        RequestSigner(credentials, clock=frozen_clock).sign_request(request)
        assert request.headers["Host"] == "catenis.io"

    def test_missing_url_host(self, credentials, frozen_clock):
        """Test that signing fails before anything is sent when the URL has no host"""
        request = SignableRequest(method=HttpMethod.GET, url="http:///api/0.11/assets/owned")
        with pytest.raises(ClientError):
            RequestSigner(credentials, clock=frozen_clock).sign_request(request)
        assert "Authorization" not in request.headers

    def test_invalid_host_header(self, credentials, frozen_clock):
        """Test that header injection is rejected"""
        request = SignableRequest(
            method=HttpMethod.GET,
            url="https://catenis.io/api/0.11/assets/owned",
            headers={"Host": "catenis.io\r\nX-Evil: 1"}
        )
        with pytest.raises(ClientError) as exc_info:
            RequestSigner(credentials, clock=frozen_clock).sign_request(request)
        assert exc_info.value.error_code == ErrorCodes.INVALID_HEADER

    @pytest.mark.parametrize("device_id,secret", [
        ("", "abcd"),
        ("drc3XdxNtzoucpw9xiRp", ""),
        ("drc3XdxNtzoucpw9xiRp", "not-hex-secret"),
    ])
    def test_malformed_credentials(self, device_id, secret):
        """Test credential validation"""
        with pytest.raises(ClientError) as exc_info:
            RequestSigner(DeviceCredentials(device_id, secret))
        assert exc_info.value.error_code == ErrorCodes.INVALID_CREDENTIALS


class TestSignableRequest:
    """Test the outbound request type"""

    def test_headers_are_case_insensitive(self):
        """Test case-insensitive header access with preserved case"""
        request = SignableRequest(
            method=HttpMethod.GET,
            url="https://catenis.io/",
            headers={"Content-Type": "application/json"}
        )
        assert request.header("content-type") == "application/json"
        assert list(request.headers.keys()) == ["Content-Type"]

    def test_duplicate_headers_are_combined(self):
        """Test that repeated fields are joined with a comma"""
        request = SignableRequest(
            method="get",
            url="https://catenis.io/",
            headers=[("Accept", "text/plain"), ("accept", "application/json")]
        )
        assert request.method is HttpMethod.GET
        assert request.headers["Accept"] == "text/plain, application/json"

    def test_body_normalisation(self):
        """Test that bodies are bytes"""
        assert SignableRequest(method=HttpMethod.GET, url="https://x/").body == b""
        assert SignableRequest(method=HttpMethod.POST, url="https://x/", body="{}").body == b"{}"

    def test_empty_url(self):
        """Test that an empty URL is rejected"""
        with pytest.raises(ValueError):
            SignableRequest(method=HttpMethod.GET, url="")
