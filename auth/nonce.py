"""Apple sign-in nonce generation.

The hashed nonce goes into the Apple authorization request and is forwarded to
the backend alongside the signed identity token. The raw value never leaves
the process.
"""

import hashlib
import secrets
from dataclasses import dataclass
from typing import Callable

NONCE_CHARSET = "0123456789ABCDEFGHIJKLMNOPQRSTUVXYZabcdefghijklmnopqrstuvwxyz-._"

_BATCH_SIZE = 16


def random_nonce(
    length: int = 32,
    random_bytes: Callable[[int], bytes] = secrets.token_bytes,
) -> str:
    """
    Random string over NONCE_CHARSET.

    Bytes that do not index into the charset are discarded rather than reduced
    modulo its size, so every character is equally likely.
    """
    if length <= 0:
        raise ValueError(f"length must be > 0, got {length}")

    chars: list[str] = []
    while len(chars) < length:
        for byte in random_bytes(_BATCH_SIZE):
            if byte < len(NONCE_CHARSET):
                chars.append(NONCE_CHARSET[byte])
                if len(chars) == length:
                    break
    return "".join(chars)


def sha256_hex(value: str) -> str:
    """Lowercase hex SHA-256 digest of the UTF-8 encoding of value."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class AppleNonce:
    """Raw nonce and its hash, valid for a single sign-in attempt."""

    raw: str
    hashed: str

    @classmethod
    def generate(cls, length: int = 32) -> "AppleNonce":
        raw = random_nonce(length)
        return cls(raw=raw, hashed=sha256_hex(raw))

    def __repr__(self) -> str:
        return f"AppleNonce(hashed={self.hashed!r})"
