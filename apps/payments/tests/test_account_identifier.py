import re

import pytest

from apps.payments.services import normalize_account, is_valid_czech_account, iban_check_digits
from apps.payments.exceptions import InvalidAccountFormatError

CANONICAL_RE = re.compile(r'^CZ\d{2}\d{4}\d{6}\d{10}$')


# =============================================================================
# normalize_account Tests
# =============================================================================

class TestNormalizeAccount:
    """Tests for local account to IBAN conversion."""

    def test_account_without_prefix(self):
        """Account without prefix gets six zero prefix digits."""
        assert normalize_account('123456789/0100') == 'CZ1801000000000123456789'

    def test_account_with_prefix(self):
        """Prefix and account are padded to 6 and 10 digits."""
        assert normalize_account('19-2000145399/0800') == 'CZ6508000000192000145399'

    def test_short_bank_code_is_padded(self):
        """Bank code shorter than 4 digits is left-padded with zeros."""
        assert normalize_account('2900123456/2010') == 'CZ8620100000002900123456'
        assert normalize_account('1/300') == 'CZ2103000000000000000001'

    def test_surrounding_whitespace_ignored(self):
        """Leading and trailing whitespace does not change the result."""
        assert normalize_account('  123456789/0100 ') == 'CZ1801000000000123456789'

    @pytest.mark.parametrize('raw', [
        '123456789/0100',
        '19-2000145399/0800',
        '1/1',
        '999999-9999999999/9999',
        '000000-0000000001/0300',
    ])
    def test_output_matches_canonical_format(self, raw):
        """Every valid local account produces a 24-character IBAN."""
        iban = normalize_account(raw)

        assert CANONICAL_RE.match(iban)
        assert len(iban) == 24

    def test_deterministic(self):
        """Same input always gives the same IBAN."""
        assert normalize_account('19-2000145399/0800') == normalize_account('19-2000145399/0800')

    def test_check_digits_validate(self):
        """Generated IBANs pass their own mod-97 check."""
        iban = normalize_account('2900123456/2010')

        assert is_valid_czech_account(iban)

    def test_iban_passed_through(self):
        """Value starting with CZ is returned unchanged apart from spaces."""
        assert normalize_account('CZ65 0800 0000 1920 0014 5399') == 'CZ6508000000192000145399'

    def test_iban_not_validated(self):
        """An already-canonical value is trusted, even with a wrong checksum."""
        assert normalize_account('CZ0001000000000123456789') == 'CZ0001000000000123456789'

    def test_missing_separator_rejected(self):
        """Value without '/' and without country code fails."""
        with pytest.raises(InvalidAccountFormatError) as exc:
            normalize_account('1234567890')

        assert 'must be an IBAN' in str(exc.value)

    @pytest.mark.parametrize('raw', [
        'abc/0100',
        '12345678901/0100',
        '1234567-123/0100',
        '123/01000',
        '123/',
        '/0100',
        '1-2-3/0100',
    ])
    def test_malformed_local_account_rejected(self, raw):
        """Malformed local numbers fail instead of passing through."""
        with pytest.raises(InvalidAccountFormatError):
            normalize_account(raw)

    def test_empty_value_rejected(self):
        """Empty string is not an account."""
        with pytest.raises(InvalidAccountFormatError):
            normalize_account('')


# =============================================================================
# Check digit Tests
# =============================================================================

class TestIbanCheckDigits:
    """Tests for ISO 13616 check digit computation."""

    def test_known_iban(self):
        """Check digits of a published Czech IBAN."""
        assert iban_check_digits('08000000192000145399') == '65'

    def test_always_two_digits(self):
        """Check digits are zero-padded."""
        digits = iban_check_digits('01000000000123456789')

        assert len(digits) == 2
        assert digits == '18'


# =============================================================================
# is_valid_czech_account Tests
# =============================================================================

class TestIsValidCzechAccount:
    """Tests for strict account validation."""

    @pytest.mark.parametrize('raw', [
        '123456789/0100',
        '19-2000145399/0800',
        'CZ6508000000192000145399',
        'CZ65 0800 0000 1920 0014 5399',
    ])
    def test_valid_accounts(self, raw):
        assert is_valid_czech_account(raw) is True

    @pytest.mark.parametrize('raw', [
        '',
        None,
        '123456789',
        '123456789/100',
        'CZ6508000000192000145398',
        'CZ650800000019200014539',
        'SK3112000000198742637541',
    ])
    def test_invalid_accounts(self, raw):
        assert is_valid_czech_account(raw) is False
