"""PKCE (Proof Key for Code Exchange) helpers."""

import secrets
from base64 import urlsafe_b64encode
from hashlib import sha256


def _b64url(data: bytes) -> str:
    return urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def create_code_challenge(code_verifier: str) -> str:
    """S256 challenge for a verifier."""
    return _b64url(sha256(code_verifier.encode("ascii")).digest())


def generate_pkce_pair() -> tuple[str, str]:
    """Generate a PKCE verifier and its S256 challenge.

    The challenge goes into the authorization request; the verifier is kept
    in the correlation cookie and sent with the token exchange.

    Returns:
        Tuple of (verifier, challenge), both base64url without padding
    """
    verifier = _b64url(secrets.token_bytes(32))
    return verifier, create_code_challenge(verifier)
