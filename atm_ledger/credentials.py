"""
Credential Handling

Credentials (PINs) are kept as salted scrypt digests and compared in
constant time. Also rates the strength of a proposed PIN.
"""

from enum import Enum
import hashlib
import hmac
import re
import secrets

SPECIAL_CHARACTERS = re.compile(r'[!@#$%^&*()]')


class CredentialStrength(Enum):
    """Coarse strength rating for a proposed credential"""
    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"


class HashedCredential:
    """Salted digest of a secret; the clear value is never stored"""

    __slots__ = ('_salt', '_digest')

    def __init__(self, secret: str):
        if not isinstance(secret, str) or not secret:
            raise ValueError("Credential must be a non-empty string")
        self._salt = secrets.token_hex(16)
        self._digest = self._hash(secret, self._salt)

    @staticmethod
    def _hash(secret: str, salt: str) -> bytes:
        return hashlib.scrypt(secret.encode(), salt=salt.encode(), n=1024, r=8, p=1)

    def matches(self, candidate) -> bool:
        """Constant-time comparison of a candidate secret against the digest"""
        if not isinstance(candidate, str):
            return False
        return hmac.compare_digest(self._hash(candidate, self._salt), self._digest)

    def __repr__(self) -> str:
        return "HashedCredential(***)"


def credential_strength(secret: str) -> CredentialStrength:
    """
    Rate a proposed PIN.

    One point each for length >= 4, length >= 6, containing a non-digit,
    and containing a special character.
    """
    score = 0
    if len(secret) >= 4:
        score += 1
    if len(secret) >= 6:
        score += 1
    if not secret.isdigit():
        score += 1
    if SPECIAL_CHARACTERS.search(secret):
        score += 1

    if score < 2:
        return CredentialStrength.WEAK
    if score < 3:
        return CredentialStrength.MEDIUM
    return CredentialStrength.STRONG
