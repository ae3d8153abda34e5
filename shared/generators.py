"""
Random token generators: pure, side-effect-free functions.

All generators use the cryptographically secure ``secrets`` module.
"""

from __future__ import annotations

import secrets

TOKEN_ENTROPY_BYTES = 32


def generate_secure_token(length: int = TOKEN_ENTROPY_BYTES) -> str:
    """Generate an unpredictable hex token.

    Args:
        length: Number of random bytes (default 32). The resulting string is
            ``2 * length`` lowercase hex characters.

    Returns:
        Hex-encoded token string, safe to embed in URLs.
    """
    return secrets.token_hex(length)
