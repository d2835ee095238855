"""
CFBx Toolkit - GF(2^128) Doubling

Multiplication by x in GF(2^128) modulo x^128 + x^7 + x^2 + x + 1, with
the field element stored most significant bit first in a four-word
WordBuffer. This is the doubling step behind CMAC subkeys (NIST SP 800-38B)
and the S2V chain of SIV (RFC 5297).
"""

from typing import Tuple

from .cipher import BlockCipher
from .errors import LengthMismatchError
from .words import CONST_RB, CONST_ZERO, WordBuffer, msb, shift_left, xor

BLOCK_BYTES_128 = 16


def double(buffer: WordBuffer) -> WordBuffer:
    """
    Double a 128-bit field element in place.

    dbl(x) = x << 1           if MSB(x) = 0
             (x << 1) ^ Rb    if MSB(x) = 1

    Args:
        buffer: Exactly 128 significant bits (modified)

    Returns:
        The passed buffer

    Raises:
        LengthMismatchError: If the buffer is not 16 bytes wide
    """
    if buffer.sig_bytes != BLOCK_BYTES_128 or len(buffer.words) != BLOCK_BYTES_128 // 4:
        raise LengthMismatchError(
            f"Doubling needs a 128-bit value, got {buffer.sig_bytes * 8} bits",
            code=2101,
        )
    carry = msb(buffer)
    shift_left(buffer, 1)
    if carry == 1:
        xor(buffer, CONST_RB)
    return buffer


def derive_cmac_subkeys(cipher: BlockCipher) -> Tuple[WordBuffer, WordBuffer]:
    """
    Derive the CMAC subkeys K1 and K2 (RFC 4493, section 2.3).

    L  = E_K(0^128)
    K1 = dbl(L)
    K2 = dbl(K1)

    Args:
        cipher: 128-bit block cipher keyed with K

    Returns:
        Tuple of (K1, K2)
    """
    block = CONST_ZERO.clone()
    cipher.encrypt_block(block, 0)
    k1 = double(block.clone())
    k2 = double(k1.clone())
    return k1, k2
