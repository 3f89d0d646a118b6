"""Tests for SHA-256 checksum helpers."""

import base64
import hashlib

from common.checksum import compute_checksum


def test_known_vector_for_empty_input():
    assert compute_checksum(b'') == '47DEQpj8HBSa+/TImW+5JCeuQeRkm5NMpJWZG3hSuFU='


def test_matches_base64_of_sha256_digest():
    data = b'hello world'

    assert compute_checksum(data) == base64.b64encode(hashlib.sha256(data).digest()).decode()


def test_keeps_padding_and_standard_alphabet():
    checksum = compute_checksum(b'hello world')

    assert checksum.endswith('=')
    assert len(checksum) == 44
    assert '-' not in checksum and '_' not in checksum


def test_is_deterministic():
    data = bytes(range(256)) * 100

    assert compute_checksum(data) == compute_checksum(bytes(data))


def test_single_bit_flip_changes_checksum():
    data = bytearray(b'\x00' * 1024)
    original = compute_checksum(bytes(data))
    data[512] ^= 0x01

    assert compute_checksum(bytes(data)) != original
