"""PKCE (Proof Key for Code Exchange) generation"""

import base64
import hashlib
import secrets
import string

from .models import PKCEPair

# RFC 7636 unreserved characters
VERIFIER_ALPHABET = string.ascii_letters + string.digits + "-._~"
VERIFIER_LENGTH = 64


def code_challenge(verifier: str) -> str:
    """Derive the S256 code challenge for a verifier

    Args:
        verifier: PKCE code verifier

    Returns:
        Base64url encoded SHA-256 digest without padding
    """
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def generate_pkce(length: int = VERIFIER_LENGTH) -> PKCEPair:
    """Generate a PKCE code verifier and challenge

    Args:
        length: Verifier length, 43 to 128 characters

    Returns:
        PKCEPair with verifier and challenge
    """
    if not 43 <= length <= 128:
        raise ValueError(f"PKCE verifier length must be between 43 and 128, got {length}")

    verifier = "".join(secrets.choice(VERIFIER_ALPHABET) for _ in range(length))
    return PKCEPair(verifier=verifier, challenge=code_challenge(verifier))
