"""Tests for the random sources and sample fetching."""

import pytest

from rngcheck import sources
from rngcheck.errors import RngFailed
from rngcheck.sources import OsRandom, RandomSource, SeededRandom, fetch_sample


class FixedWords(RandomSource):
    def __init__(self, words):
        self._words = iter(words)

    def next_u32(self):
        return next(self._words)


class NoOpSource(RandomSource):
    def next_u32(self):
        return 0

    def fill_bytes(self, buf):
        pass


def test_default_fill_bytes_is_little_endian():
    src = FixedWords([0x04030201, 0x08070605])
    buf = bytearray(6)
    src.fill_bytes(buf)
    assert bytes(buf) == b"\x01\x02\x03\x04\x05\x06"


def test_seeded_random_is_deterministic():
    a = SeededRandom(42)
    b = SeededRandom(42)
    words_a = [a.next_u32() for _ in range(16)]
    words_b = [b.next_u32() for _ in range(16)]
    assert words_a == words_b
    assert all(0 <= w <= 0xFFFFFFFF for w in words_a)


def test_seeded_random_fill_bytes():
    buf1 = bytearray(32)
    buf2 = bytearray(32)
    SeededRandom(7).fill_bytes(buf1)
    SeededRandom(7).fill_bytes(buf2)
    assert buf1 == buf2


def test_os_random_word_range():
    rng = OsRandom()
    for _ in range(8):
        assert 0 <= rng.next_u32() <= 0xFFFFFFFF


def test_os_random_without_entropy_source(monkeypatch):
    def _missing(n):
        raise NotImplementedError("no urandom")

    monkeypatch.setattr(sources.os, "urandom", _missing)
    with pytest.raises(RngFailed):
        OsRandom().next_u32()
    with pytest.raises(RngFailed):
        OsRandom().fill_bytes(bytearray(8))


def test_fetch_sample_returns_requested_size():
    data = fetch_sample(SeededRandom(1), 100)
    assert isinstance(data, bytes)
    assert len(data) == 100


def test_fetch_sample_detects_noop_source():
    with pytest.raises(RngFailed) as excinfo:
        fetch_sample(NoOpSource(), 100)
    assert "no-op" in str(excinfo.value)


def test_fetch_sample_minimum_size():
    with pytest.raises(ValueError):
        fetch_sample(SeededRandom(1), 3)
