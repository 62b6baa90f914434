"""
One-way digests for shared secrets.

Digests are base64-encoded SHA-256, so every digest is 44 printable characters.
"""
import base64
import hashlib


def create_hash(value: str) -> str:
    """Return the base64 SHA-256 digest of a string."""
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")
