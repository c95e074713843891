"""
Unit tests for CTN1 signing-key derivation
"""

import hashlib
import hmac
import threading
from datetime import date
from unittest.mock import patch

from catenis_sdk.signing import SigningKeyDerivator, derive_signing_key

from .conftest import API_ACCESS_SECRET


def reference_key(secret, day):
    date_key = hmac.new(("CTN1" + secret).encode(), day.strftime("%Y%m%d").encode(), hashlib.sha256).digest()
    return hmac.new(date_key, b"ctn1_request", hashlib.sha256).digest()


class TestDeriveSigningKey:
    """Test the pure key derivation function"""

    def test_matches_two_step_hmac(self):
        """Test derivation against a direct HMAC computation"""
        day = date(2020, 12, 1)
        key = derive_signing_key(API_ACCESS_SECRET, day)

        assert len(key) == 32
        assert key == reference_key(API_ACCESS_SECRET, day)

    def test_secret_is_used_as_text(self):
        """Test that the secret is not hex-decoded"""
        day = date(2020, 12, 1)
        decoded_secret = bytes.fromhex(API_ACCESS_SECRET).decode("latin-1")
        assert derive_signing_key(API_ACCESS_SECRET, day) != derive_signing_key(decoded_secret, day)

    def test_depends_on_date(self):
        """Test that different dates give different keys"""
        first = derive_signing_key(API_ACCESS_SECRET, date(2020, 12, 1))
        second = derive_signing_key(API_ACCESS_SECRET, date(2020, 12, 2))
        assert first != second


class TestSigningKeyDerivator:
    """Test the per-date key memoiser"""

    def test_key_cached_for_same_date(self):
        """Test that a key is derived once per date"""
        derivator = SigningKeyDerivator(API_ACCESS_SECRET)
        day = date(2020, 12, 1)

        with patch("catenis_sdk.signing.key_derivation.derive_signing_key",
                   wraps=derive_signing_key) as mock_derive:
            first = derivator.signing_key(day)
            second = derivator.signing_key(day)

        assert first == second
        assert mock_derive.call_count == 1
        assert derivator.current_sign_date == day

    def test_key_refreshed_on_date_change(self):
        """Test that a new date replaces the cached key"""
        derivator = SigningKeyDerivator(API_ACCESS_SECRET)
        assert derivator.current_sign_date is None

        first = derivator.signing_key(date(2020, 12, 1))
        second = derivator.signing_key(date(2020, 12, 2))
        # Going back in time also refreshes
        third = derivator.signing_key(date(2020, 12, 1))

        assert first != second
        assert third == first
        assert derivator.current_sign_date == date(2020, 12, 1)

    def test_concurrent_access(self):
        """Test that concurrent callers always get the key of their date"""
        derivator = SigningKeyDerivator(API_ACCESS_SECRET)
        days = [date(2020, 12, 1), date(2020, 12, 2)]
        expected = {day: reference_key(API_ACCESS_SECRET, day) for day in days}
        mismatches = []

        def worker(day):
            for _ in range(50):
                if derivator.signing_key(day) != expected[day]:
                    mismatches.append(day)

        threads = [threading.Thread(target=worker, args=(days[i % 2],)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert mismatches == []
