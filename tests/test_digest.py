"""Tests for tfsync.digest."""

from __future__ import annotations

from tfsync.digest import sha256_hex


class TestSha256Hex:
    def test_empty_input(self):
        assert sha256_hex(b"") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

    def test_deterministic(self):
        data = b'{"version": 4}'
        assert sha256_hex(data) == sha256_hex(data)

    def test_lowercase_hex(self):
        digest = sha256_hex(b"state")
        assert len(digest) == 64
        assert digest == digest.lower()
        int(digest, 16)

    def test_single_bit_flip_changes_digest(self):
        data = bytearray(b'{"serial": 1}')
        flipped = bytearray(data)
        flipped[0] ^= 0x01
        assert sha256_hex(bytes(data)) != sha256_hex(bytes(flipped))
