"""Content fingerprints used as deduplication keys."""

from __future__ import annotations

import hashlib
from typing import Callable

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_DJB2_SEED = 5381
_MASK32 = 0xFFFFFFFF


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    chars = []
    while value:
        value, rem = divmod(value, 36)
        chars.append(_DIGITS[rem])
    return "".join(reversed(chars))


def djb2_hash(text: str) -> str:
    """
    32-bit djb2-xor hash rendered in base 36.

    Operates on UTF-16 code units so that keys match those computed by
    an in-page script over the same text.

    Args:
        text: Text to hash

    Returns:
        Base-36 string of the unsigned 32-bit hash
    """
    data = text.encode("utf-16-le", errors="surrogatepass")
    h = _DJB2_SEED
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (((h << 5) + h) ^ unit) & _MASK32
    return _to_base36(h)


def sha256_hash(text: str) -> str:
    """
    Compute SHA-256 hash of text.

    Returns:
        Hex-encoded SHA-256 hash string
    """
    return hashlib.sha256(text.encode("utf-8", errors="surrogatepass")).hexdigest()


ALGORITHMS: dict[str, Callable[[str], str]] = {
    "djb2": djb2_hash,
    "sha256": sha256_hash,
}


def get_hasher(algorithm: str = "sha256") -> Callable[[str], str]:
    """
    Look up a fingerprint function by name.

    Raises:
        ValueError: If the algorithm is unknown
    """
    try:
        return ALGORITHMS[algorithm]
    except KeyError:
        raise ValueError(
            f"Unknown fingerprint algorithm: {algorithm!r}. Choose from: {', '.join(sorted(ALGORITHMS))}"
        ) from None


def fingerprint(text: str, algorithm: str = "sha256") -> str:
    """Fingerprint ``text`` with the named algorithm."""
    return get_hasher(algorithm)(text)
