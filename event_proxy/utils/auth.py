"""
Webhook authentication - compares the ?auth= credential against the configured secret.

Both sides are hashed first so the comparison always runs over two digests of
the same fixed length. The loop walks every position of the expected digest
and counts mismatches; it never returns early on the first difference.
"""
import logging
from typing import Optional

from event_proxy.utils.hashing import create_hash

logger = logging.getLogger(__name__)


def _char_mismatch(expected_char: str, candidate: str, index: int) -> int:
    """Return 1 if candidate[index] differs from expected_char (or is missing), else 0."""
    if index >= len(candidate):
        return 1
    return int(expected_char != candidate[index])


def digests_match(expected: str, candidate: str) -> bool:
    """
    Compare two digests over the full length of the expected digest.

    Mismatches are summed rather than and-ed so every position is inspected
    regardless of where the first difference sits. A shorter candidate counts
    its missing positions as mismatches.
    """
    mismatches = 0
    for index, expected_char in enumerate(expected):
        mismatches += _char_mismatch(expected_char, candidate, index)
    mismatches += max(len(candidate) - len(expected), 0)
    return mismatches == 0


class Authenticator:
    """Checks caller credentials against a precomputed digest."""

    def __init__(self, expected_digest: str):
        self._expected_digest = expected_digest

    def authenticate(self, candidate: Optional[str]) -> bool:
        if not isinstance(candidate, str):
            logger.warning("Webhook request missing auth credential")
            return False
        return digests_match(self._expected_digest, create_hash(candidate))
