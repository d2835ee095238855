"""
CFBx Toolkit - Python Core Package.

Bit-precise word buffer arithmetic and a generalized Cipher Feedback mode
that runs on any byte-granular segment size (NIST SP 800-38A).

Modules:
    words: Word buffer kernel (shift, slice, concatenate, boolean, equality)
    gf128: GF(2^128) doubling and CMAC subkey derivation
    cipher: Block cipher capability and its AES implementation
    padding: Padding policies
    mode: CFBx encryptor and decryptor sessions
    engine: Whole-buffer encryption with configuration and results
    errors: Exception hierarchy
    cli: Command line front end

Usage:
    >>> from cfbx import CfbxEngine, CfbxConfig
    >>> engine = CfbxEngine(CfbxConfig(segment_size=8))
    >>> result = engine.encrypt(b"abc", key, iv)
    >>> engine.decrypt(result.ciphertext, key, iv).plaintext
    b'abc'

    >>> from cfbx.words import WordBuffer, rightmost_bytes
    >>> rightmost_bytes(WordBuffer.from_hex("0102030405"), 2).hex()
    '0405'
"""

from .errors import CryptoError, ContractViolation, LengthMismatchError, PaddingError
from .words import (
    WordBuffer,
    CONST_ZERO,
    CONST_ONE,
    CONST_RB,
    CONST_NON_MSB,
    is_word_buffer,
    shift_left,
    leftmost_words,
    leftmost_bytes,
    rightmost_bytes,
    pop_words,
    shift_out_bytes,
    bytes_at,
    xor,
    xor_at,
    xor_tail,
    bit_and,
    equals,
    msb,
)
from .gf128 import double, derive_cmac_subkeys
from .cipher import BlockCipher, AesBlockCipher
from .padding import Padding, NoPadding, OneZeroPadding, Pkcs7Padding, get_padding
from .mode import CfbSession, CfbxEncryptor, CfbxDecryptor, SessionState
from .engine import CfbxEngine, CfbxConfig, EncryptionResult, DecryptionResult

__all__ = [
    # Errors
    "CryptoError",
    "ContractViolation",
    "LengthMismatchError",
    "PaddingError",
    # Word buffer kernel
    "WordBuffer",
    "CONST_ZERO",
    "CONST_ONE",
    "CONST_RB",
    "CONST_NON_MSB",
    "is_word_buffer",
    "shift_left",
    "leftmost_words",
    "leftmost_bytes",
    "rightmost_bytes",
    "pop_words",
    "shift_out_bytes",
    "bytes_at",
    "xor",
    "xor_at",
    "xor_tail",
    "bit_and",
    "equals",
    "msb",
    # GF(2^128)
    "double",
    "derive_cmac_subkeys",
    # Block cipher and padding
    "BlockCipher",
    "AesBlockCipher",
    "Padding",
    "NoPadding",
    "OneZeroPadding",
    "Pkcs7Padding",
    "get_padding",
    # Mode
    "CfbSession",
    "CfbxEncryptor",
    "CfbxDecryptor",
    "SessionState",
    # Engine
    "CfbxEngine",
    "CfbxConfig",
    "EncryptionResult",
    "DecryptionResult",
]

__version__ = "1.0.0"
