"""Deterministic string hashing used in place of a random number generator."""

from __future__ import annotations

MAX_HASH = 0xFFFF_FFFF

_DJB2_SEED = 5381


def _utf16_units(text: str) -> list[int]:
    data = text.encode("utf-16-le", errors="surrogatepass")
    return [data[i] | (data[i + 1] << 8) for i in range(0, len(data), 2)]


def hash_string(text: str) -> int:
    """Return the 32-bit unsigned djb2 hash of ``text``.

    The hash runs over UTF-16 code units so that keys built from the same
    names hash identically wherever the layout is computed.
    """
    value = _DJB2_SEED
    for unit in _utf16_units(text):
        value = (value * 33 + unit) & MAX_HASH
    return value


def hash_unit(text: str) -> float:
    """Return ``hash_string(text)`` normalized to [0, 1]."""
    return hash_string(text) / MAX_HASH


def utf16_sort_key(text: str) -> bytes:
    """Sort key that orders strings by UTF-16 code units.

    Code point order differs once a string mixes astral characters with
    characters at U+E000 and above; keys built here must order the same way
    on every platform that computes a layout.
    """
    return text.encode("utf-16-be", errors="surrogatepass")
