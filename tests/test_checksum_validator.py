"""Tests for checksum helpers."""

import hashlib

import pytest

from chunkstore.checksum_validator import (
    IncrementalChecksumCalculator,
    compute_checksum,
    verify_checksum,
)


def test_compute_checksum_is_sha256_hex():
    assert compute_checksum(b'hello') == hashlib.sha256(b'hello').hexdigest()


def test_verify_checksum():
    digest = compute_checksum(b'data')

    assert verify_checksum(b'data', digest)
    assert verify_checksum(b'data', digest.upper())
    assert not verify_checksum(b'date', digest)


def test_incremental_matches_one_shot():
    calculator = IncrementalChecksumCalculator()
    for window in (b'abc', b'', b'defgh', b'i' * 1000):
        calculator.update(window)

    assert calculator.bytes_seen == 1008
    assert calculator.finalize() == compute_checksum(b'abcdefgh' + b'i' * 1000)


def test_incremental_rejects_update_after_finalize():
    calculator = IncrementalChecksumCalculator()
    calculator.finalize()

    with pytest.raises(ValueError):
        calculator.update(b'late')
