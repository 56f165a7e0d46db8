"""HTTP Basic credential parsing."""

import base64
import binascii
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Credentials:
    """Request-scoped identifier/secret pair. Never stored."""

    identifier: str
    secret: str

    def __repr__(self) -> str:
        return f"Credentials(identifier={self.identifier!r}, secret='***')"


def parse_basic_credentials(header: Optional[str]) -> Optional[Credentials]:
    """Decode an ``Authorization: Basic <base64(id:secret)>`` header.

    Returns None for a missing header, another scheme, or anything that
    doesn't decode cleanly. The secret may itself contain colons; only
    the first one separates it from the identifier.
    """
    if not header:
        return None

    scheme, _, payload = header.strip().partition(" ")
    if scheme.lower() != "basic" or not payload.strip():
        return None

    try:
        decoded = base64.b64decode(payload.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None

    identifier, sep, secret = decoded.partition(":")
    if not sep or not identifier:
        return None
    return Credentials(identifier=identifier, secret=secret)
