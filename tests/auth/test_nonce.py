"""Tests for auth/nonce.py - Apple sign-in nonce."""

import hashlib
from itertools import chain, repeat

import pytest

from auth.nonce import NONCE_CHARSET, AppleNonce, random_nonce, sha256_hex


class TestRandomNonce:

    def test_default_length_is_32(self):
        assert len(random_nonce()) == 32

    def test_only_charset_characters(self):
        assert set(random_nonce(128)) <= set(NONCE_CHARSET)

    def test_rejects_out_of_range_bytes_instead_of_wrapping(self):
        """Bytes >= len(charset) are skipped, never reduced modulo."""
        out_of_range = bytes([255] * 16)
        in_range = bytes([0, 1, 2, 3] * 4)
        batches = chain([out_of_range], repeat(in_range))

        nonce = random_nonce(4, random_bytes=lambda n: next(batches))

        assert nonce == "0123"

    def test_byte_at_charset_size_is_rejected(self):
        boundary = bytes([len(NONCE_CHARSET)] * 8 + [len(NONCE_CHARSET) - 1] * 8)
        nonce = random_nonce(2, random_bytes=lambda n: boundary)
        assert nonce == NONCE_CHARSET[-1] * 2

    def test_rejects_non_positive_length(self):
        with pytest.raises(ValueError):
            random_nonce(0)


class TestAppleNonce:

    def test_consecutive_generations_differ(self):
        first = AppleNonce.generate()
        second = AppleNonce.generate()

        assert first.raw != second.raw
        assert first.hashed != second.hashed

    def test_hash_is_deterministic(self):
        assert sha256_hex("same-raw") == sha256_hex("same-raw")

    def test_hash_is_lowercase_sha256_hex(self):
        nonce = AppleNonce.generate()
        assert nonce.hashed == hashlib.sha256(nonce.raw.encode()).hexdigest()
        assert len(nonce.hashed) == 64

    def test_repr_hides_raw(self):
        nonce = AppleNonce.generate()
        assert nonce.raw not in repr(nonce)
