"""Tests for webhook signatures and contacts tokens."""

import hashlib
import hmac

import pytest
from relay.errors import AuthError, ForbiddenError
from relay.security.signature import compute_signature, verify_signature
from relay.security.tokens import check_token

SECRET = "s3cret"
BODY = b'{"contact":{"phone":"79001234567"},"call":{"status":"done"}}'


class TestComputeSignature:
    """Tests for HMAC computation."""

    def test_matches_hmac_sha256_hex(self):
        expected = hmac.new(SECRET.encode(), BODY, hashlib.sha256).hexdigest()
        assert compute_signature(BODY, SECRET) == expected

    def test_is_lowercase_hex(self):
        signature = compute_signature(BODY, SECRET)
        assert len(signature) == 64
        assert all(c in "0123456789abcdef" for c in signature)


class TestVerifySignature:
    """Tests for signature verification."""

    def test_valid_signature(self):
        assert verify_signature(BODY, compute_signature(BODY, SECRET), SECRET)

    def test_surrounding_whitespace_tolerated(self):
        signature = f"  {compute_signature(BODY, SECRET)}\n"
        assert verify_signature(BODY, signature, SECRET)

    @pytest.mark.parametrize("signature", [None, ""])
    def test_missing_signature(self, signature):
        assert not verify_signature(BODY, signature, SECRET)

    def test_wrong_secret(self):
        assert not verify_signature(BODY, compute_signature(BODY, "other"), SECRET)

    def test_every_body_bit_flip_fails(self):
        """Any single-bit change of the body is detected."""
        signature = compute_signature(BODY, SECRET)
        for index in range(len(BODY)):
            for bit in range(8):
                mutated = bytearray(BODY)
                mutated[index] ^= 1 << bit
                assert not verify_signature(bytes(mutated), signature, SECRET)

    def test_every_signature_bit_flip_fails(self):
        """Any single-bit change of the signature is detected."""
        signature = compute_signature(BODY, SECRET)
        for index in range(len(signature)):
            for bit in range(8):
                chars = list(signature)
                chars[index] = chr(ord(chars[index]) ^ (1 << bit))
                assert not verify_signature(BODY, "".join(chars), SECRET)

    def test_non_ascii_signature_does_not_raise(self):
        assert not verify_signature(BODY, "подпись", SECRET)


class TestCheckToken:
    """Tests for the contacts access token."""

    def test_not_configured_allows_anything(self):
        check_token(None, "")
        check_token("whatever", "")

    def test_missing_token(self):
        with pytest.raises(AuthError):
            check_token(None, "token")

    def test_wrong_token(self):
        with pytest.raises(ForbiddenError):
            check_token("nope", "token")

    def test_matching_token(self):
        check_token("token", "token")
