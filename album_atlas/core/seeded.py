"""Deterministic string-seeded pseudo-randomness."""

_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def seeded_hash(text: str) -> int:
    """32-bit FNV-1a over UTF-16 code units, with an avalanche finalizer."""
    h = 0x811C9DC5
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = _imul(h, 0x01000193)
    h ^= h >> 16
    h = _imul(h, 0x7FEB352D)
    h ^= h >> 15
    h = _imul(h, 0x846CA68B)
    h ^= h >> 16
    return h


def seeded_random(text: str) -> float:
    """Return a reproducible number in [0, 1) derived from ``text``."""
    return seeded_hash(text) / 0x100000000
