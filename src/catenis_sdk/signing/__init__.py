"""
CTN1 request signing for the Catenis Python SDK

This module derives the per-day signing key, builds the canonical request
and adds the CTN1-HMAC-SHA256 authentication headers to outbound requests.
"""

from .types import (
    AUTHORIZATION_HEADER,
    CTN1_ALGORITHM,
    HOST_HEADER,
    TIMESTAMP_HEADER,
    HttpMethod,
    SignableRequest,
    SignatureResult,
)
from .key_derivation import SigningKeyDerivator, derive_signing_key
from .canonical_request import (
    CanonicalRequestBuilder,
    build_canonical_request,
    build_scope,
    build_string_to_sign,
)
from .ctn1_signer import RequestSigner, validate_credentials
from .utils import format_date, format_timestamp, hmac_sha256, sha256_hex

__all__ = [
    'AUTHORIZATION_HEADER',
    'CTN1_ALGORITHM',
    'HOST_HEADER',
    'TIMESTAMP_HEADER',
    'HttpMethod',
    'SignableRequest',
    'SignatureResult',
    'SigningKeyDerivator',
    'derive_signing_key',
    'CanonicalRequestBuilder',
    'build_canonical_request',
    'build_scope',
    'build_string_to_sign',
    'RequestSigner',
    'validate_credentials',
    'format_date',
    'format_timestamp',
    'hmac_sha256',
    'sha256_hex',
]
