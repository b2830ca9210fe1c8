"""
Test suite for credential hashing and strength rating
"""

import pytest

from atm_ledger.credentials import HashedCredential, CredentialStrength, credential_strength


class TestHashedCredential:
    """Test salted credential storage"""

    def test_matches(self):
        credential = HashedCredential("1234")
        assert credential.matches("1234")
        assert not credential.matches("4321")
        assert not credential.matches("")

    def test_non_string_candidate(self):
        credential = HashedCredential("1234")
        assert not credential.matches(None)
        assert not credential.matches(1234)

    def test_clear_value_not_exposed(self):
        credential = HashedCredential("1234")
        assert "1234" not in repr(credential)
        assert not hasattr(credential, "__dict__")

    def test_salts_differ(self):
        first = HashedCredential("1234")
        second = HashedCredential("1234")
        assert first._digest != second._digest

    def test_empty_credential_rejected(self):
        with pytest.raises(ValueError):
            HashedCredential("")


class TestCredentialStrength:
    """Test PIN strength rating"""

    @pytest.mark.parametrize("pin,expected", [
        ("12", CredentialStrength.WEAK),
        ("1234", CredentialStrength.WEAK),
        ("123456", CredentialStrength.MEDIUM),
        ("12ab", CredentialStrength.MEDIUM),
        ("12ab56", CredentialStrength.STRONG),
        ("1a!", CredentialStrength.MEDIUM),
        ("ab!@cd", CredentialStrength.STRONG),
    ])
    def test_ratings(self, pin, expected):
        assert credential_strength(pin) == expected
