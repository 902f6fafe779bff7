"""Fingerprints of finalized score strings.

The token proves a result URL was produced by the quiz rather than typed in,
and doubles as the local-storage key of the moment the result was produced.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib
import hmac

DIGEST_ALGORITHM = "sha512"


def fingerprint(score_string: str) -> str:
    """Base64 SHA-512 digest of the exact (pre URL-encoding) score string."""
    digest = hashlib.new(DIGEST_ALGORITHM, score_string.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


async def fingerprint_async(score_string: str) -> str:
    return await asyncio.to_thread(fingerprint, score_string)


def normalize_token(token: str) -> str:
    """Restore '+' characters that form decoding turned into spaces."""
    return (token or "").replace(" ", "+")


def verify(score_string: str, token: str | None) -> bool:
    if not token:
        return False
    return hmac.compare_digest(fingerprint(score_string).encode("ascii"), normalize_token(token).encode("utf-8"))
