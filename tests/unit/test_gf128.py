"""
Unit Tests for GF(2^128) Doubling

This module tests the doubling operator and CMAC subkey derivation
against RFC 4493.
"""

import pytest
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'python-core'))

from cfbx.cipher import AesBlockCipher
from cfbx.errors import LengthMismatchError
from cfbx.gf128 import derive_cmac_subkeys, double
from cfbx.words import CONST_RB, WordBuffer


class TestDouble:
    """Test cases for double()."""

    def test_double_without_carry(self):
        """Test that doubling with MSB 0 is a plain shift."""
        buf = WordBuffer.from_hex("00000000000000000000000000000001")

        assert double(buf).hex() == "00000000000000000000000000000002"

    def test_double_with_carry(self):
        """Test that doubling with MSB 1 folds in Rb."""
        buf = WordBuffer.from_hex("80000000000000000000000000000000")

        assert double(buf).hex() == "00000000000000000000000000000087"

    def test_double_crosses_words(self):
        """Test a carry between words."""
        buf = WordBuffer.from_hex("00000000800000008000000080000000")

        assert double(buf).hex() == "00000001000000010000000100000000"

    def test_double_mutates_and_returns(self):
        """Test that the passed buffer is returned."""
        buf = WordBuffer.from_hex("7df76b0c1ab899b33e42f047b91b546f")

        assert double(buf) is buf

    def test_rfc4493_chain(self):
        """Test the RFC 4493 subkey chain L -> K1 -> K2."""
        buf = WordBuffer.from_hex("7df76b0c1ab899b33e42f047b91b546f")

        assert double(buf).hex() == "fbeed618357133667c85e08f7236a8de"
        assert double(buf).hex() == "f7ddac306ae266ccf90bc11ee46d513b"

    def test_constant_untouched(self):
        """Test that the shared Rb constant is not modified."""
        double(WordBuffer.from_hex("ffffffffffffffffffffffffffffffff"))

        assert CONST_RB.hex() == "00000000000000000000000000000087"

    @pytest.mark.parametrize("hex_value", ["", "00", "0000000000000000", "00" * 15, "00" * 17])
    def test_double_requires_128_bits(self, hex_value):
        """Test that other widths are contract violations."""
        with pytest.raises(LengthMismatchError):
            double(WordBuffer.from_hex(hex_value))


class TestCmacSubkeys:
    """Test cases for derive_cmac_subkeys()."""

    def test_rfc4493_subkeys(self, nist_key):
        """Test subkey generation from RFC 4493 section 4."""
        k1, k2 = derive_cmac_subkeys(AesBlockCipher(nist_key))

        assert k1.hex() == "fbeed618357133667c85e08f7236a8de"
        assert k2.hex() == "f7ddac306ae266ccf90bc11ee46d513b"
