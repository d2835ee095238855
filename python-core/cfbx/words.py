"""
CFBx Toolkit - Word Buffer Kernel

This module provides the bit-precise binary arithmetic that the cipher
feedback mode and the GF(2^128) doubling operator are built on. Data is
held in a WordBuffer: an ordered list of unsigned 32-bit words (index 0 is
the most significant, bytes are big-endian inside a word) plus a count of
significant bytes that may be smaller than the backing storage.

Mutation Rules:
    Every kernel function either mutates its first argument and says so,
    or returns a fresh buffer and leaves its inputs alone apart from
    clamp() normalization, which never changes the significant bytes.

    Mutating:      shift_left, pop_words, shift_out_bytes, xor, xor_at
    Non-mutating:  leftmost_words, leftmost_bytes, rightmost_bytes,
                   xor_tail, bit_and, bytes_at, equals, msb

Contract Violations:
    Size mismatches and out-of-range shift amounts raise
    LengthMismatchError / ContractViolation immediately. Right shifts
    (negative shift amounts) raise NotImplementedError.

Example:
    >>> buf = WordBuffer.from_hex("0102030405")
    >>> rightmost_bytes(buf, 2).hex()
    '0405'
    >>> shift_left(buf, 8)
    1
"""

from typing import List, Optional

from .errors import ContractViolation, LengthMismatchError


# ============================================================================
# Word Geometry
# ============================================================================

WORD_BITS = 32
WORD_BYTES = 4
WORD_MASK = 0xFFFFFFFF


def _words_for(n_bytes: int) -> int:
    """Number of words needed to hold n_bytes."""
    return (n_bytes + WORD_BYTES - 1) // WORD_BYTES


# ============================================================================
# Word Buffer
# ============================================================================

class WordBuffer:
    """
    Byte-addressable buffer of 32-bit words with a significant byte count.

    Bytes past sig_bytes inside the last word are padding. They are only
    guaranteed to be zero after clamp(), which every byte-granular kernel
    operation applies before reading.

    Attributes:
        words: Backing list of unsigned 32-bit integers
        sig_bytes: Number of valid bytes counted from the start of words[0]

    Example:
        >>> buf = WordBuffer([0x61626300], 3)
        >>> buf.to_bytes()
        b'abc'
    """

    def __init__(self, words: Optional[List[int]] = None, sig_bytes: Optional[int] = None):
        self.words = [word & WORD_MASK for word in (words or [])]
        if sig_bytes is None:
            sig_bytes = len(self.words) * WORD_BYTES
        if sig_bytes < 0 or sig_bytes > len(self.words) * WORD_BYTES:
            raise LengthMismatchError(
                f"sig_bytes {sig_bytes} does not fit in {len(self.words)} words",
                code=2001,
            )
        self.sig_bytes = sig_bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> 'WordBuffer':
        """Build a buffer from raw bytes; a partial last word is zero filled."""
        data = bytes(data)
        words = [
            int.from_bytes(data[i:i + WORD_BYTES].ljust(WORD_BYTES, b'\x00'), 'big')
            for i in range(0, len(data), WORD_BYTES)
        ]
        return cls(words, len(data))

    @classmethod
    def from_hex(cls, text: str) -> 'WordBuffer':
        return cls.from_bytes(bytes.fromhex(text))

    def to_bytes(self) -> bytes:
        raw = b''.join(word.to_bytes(WORD_BYTES, 'big') for word in self.words)
        return raw[:self.sig_bytes]

    def hex(self) -> str:
        return self.to_bytes().hex()

    def clone(self) -> 'WordBuffer':
        return WordBuffer(list(self.words), self.sig_bytes)

    def clamp(self) -> 'WordBuffer':
        """
        Zero the bytes past sig_bytes and drop surplus words.

        Returns:
            This buffer (modified in place)
        """
        remainder = self.sig_bytes % WORD_BYTES
        if remainder:
            index = self.sig_bytes // WORD_BYTES
            self.words[index] &= (WORD_MASK << (WORD_BITS - remainder * 8)) & WORD_MASK
        del self.words[_words_for(self.sig_bytes):]
        return self

    def concat(self, other: 'WordBuffer') -> 'WordBuffer':
        """
        Append the significant bytes of another buffer.

        When this buffer ends on a word boundary whole words are appended,
        otherwise the bytes are written one at a time.

        Args:
            other: Buffer whose significant bytes are appended

        Returns:
            This buffer (modified in place)
        """
        if other is self:
            other = other.clone()
        self.clamp()

        if self.sig_bytes % WORD_BYTES == 0:
            self.words.extend(other.words[:_words_for(other.sig_bytes)])
            self.sig_bytes += other.sig_bytes
            return self.clamp()

        for i in range(other.sig_bytes):
            position = self.sig_bytes + i
            if position // WORD_BYTES >= len(self.words):
                self.words.append(0)
            self.set_byte(position, other.byte_at(i))
        self.sig_bytes += other.sig_bytes
        return self

    def byte_at(self, index: int) -> int:
        shift = (WORD_BYTES - 1 - index % WORD_BYTES) * 8
        return (self.words[index // WORD_BYTES] >> shift) & 0xFF

    def set_byte(self, index: int, value: int) -> None:
        shift = (WORD_BYTES - 1 - index % WORD_BYTES) * 8
        slot = index // WORD_BYTES
        self.words[slot] = (self.words[slot] & ~(0xFF << shift) & WORD_MASK) | ((value & 0xFF) << shift)

    def __len__(self) -> int:
        return self.sig_bytes

    def __eq__(self, other) -> bool:
        if not is_word_buffer(other):
            return NotImplemented
        return equals(self, other)

    # Mutable value type
    __hash__ = None

    def __repr__(self) -> str:
        words = ", ".join(f"0x{word:08x}" for word in self.words)
        return f"WordBuffer([{words}], sig_bytes={self.sig_bytes})"


def is_word_buffer(obj) -> bool:
    """Check whether an object has the word buffer shape."""
    return (
        obj is not None
        and callable(getattr(obj, "clamp", None))
        and callable(getattr(obj, "concat", None))
        and isinstance(getattr(obj, "words", None), list)
    )


# ============================================================================
# Constants
# ============================================================================

# Shared read-only values; clone before passing them as a mutated argument.
CONST_ZERO = WordBuffer([0x00000000, 0x00000000, 0x00000000, 0x00000000])
CONST_ONE = WordBuffer([0x00000000, 0x00000000, 0x00000000, 0x00000001])
CONST_RB = WordBuffer([0x00000000, 0x00000000, 0x00000000, 0x00000087])
# 1^64 || 0^1 || 1^31 || 0^1 || 1^31
CONST_NON_MSB = WordBuffer([0xFFFFFFFF, 0xFFFFFFFF, 0x7FFFFFFF, 0x7FFFFFFF])


# ============================================================================
# Shifting and Slicing
# ============================================================================

def shift_left(buffer: WordBuffer, n: int) -> int:
    """
    Shift the whole buffer left by n bits, filling with zero bits.

    Bits leaving a word are carried into the least significant bits of the
    word before it (index 0 is the most significant word).

    Args:
        buffer: Buffer to shift (modified in place)
        n: Bits to shift by, 0 <= n < 32

    Returns:
        The bits shifted out of the most significant word

    Raises:
        NotImplementedError: If n is negative (right shift)
        ContractViolation: If n is 32 or more
    """
    if n < 0:
        raise NotImplementedError("Right shifts are not supported")
    if n >= WORD_BITS:
        raise ContractViolation(f"Shift amount {n} must be below {WORD_BITS}", code=2002)
    if n == 0:
        return 0

    carry = 0
    words = buffer.words
    for i in range(len(words) - 1, -1, -1):
        word = words[i]
        words[i] = ((word << n) & WORD_MASK) | carry
        carry = word >> (WORD_BITS - n)
    return carry


def leftmost_words(buffer: WordBuffer, n: int) -> WordBuffer:
    """Return a new buffer holding the first n words."""
    return leftmost_bytes(buffer, n * WORD_BYTES)


def leftmost_bytes(buffer: WordBuffer, n: int) -> WordBuffer:
    """
    Return a new buffer holding the first n bytes.

    Args:
        buffer: Source buffer (not modified)
        n: Bytes to keep, 0 <= n <= buffer.sig_bytes

    Returns:
        New clamped buffer with sig_bytes == n
    """
    if n < 0 or n > buffer.sig_bytes:
        raise LengthMismatchError(
            f"Cannot take {n} leftmost bytes of a {buffer.sig_bytes}-byte buffer",
            code=2003,
        )
    result = buffer.clone()
    result.sig_bytes = n
    return result.clamp()


def rightmost_bytes(buffer: WordBuffer, n: int) -> WordBuffer:
    """
    Return a new buffer holding the last n bytes.

    Whole leading words are dropped directly; a remaining sub-word offset
    is removed with one bit shift so the window starts at byte 0.

    Args:
        buffer: Source buffer (clamped, otherwise not modified)
        n: Bytes to keep, 0 <= n <= buffer.sig_bytes

    Returns:
        New clamped buffer with sig_bytes == n
    """
    if n < 0 or n > buffer.sig_bytes:
        raise LengthMismatchError(
            f"Cannot take {n} rightmost bytes of a {buffer.sig_bytes}-byte buffer",
            code=2004,
        )
    buffer.clamp()
    result = buffer.clone()

    bits_to_shift = (result.sig_bytes - n) * 8
    if bits_to_shift >= WORD_BITS:
        pop_count = bits_to_shift // WORD_BITS
        bits_to_shift -= pop_count * WORD_BITS
        del result.words[:pop_count]
        result.sig_bytes -= pop_count * WORD_BYTES
    if bits_to_shift > 0:
        shift_left(result, bits_to_shift)
        result.sig_bytes -= bits_to_shift // 8
    return result.clamp()


def pop_words(buffer: WordBuffer, n: int) -> WordBuffer:
    """
    Remove the first n words from a buffer and return them.

    Args:
        buffer: Buffer holding at least n full significant words (modified)
        n: Number of words to remove

    Returns:
        New buffer with the removed words
    """
    if n < 0 or n * WORD_BYTES > buffer.sig_bytes:
        raise LengthMismatchError(
            f"Cannot pop {n} words from a {buffer.sig_bytes}-byte buffer",
            code=2005,
        )
    popped = leftmost_words(buffer, n)
    del buffer.words[:n]
    buffer.sig_bytes -= n * WORD_BYTES
    return popped


def shift_out_bytes(buffer: WordBuffer, n: int = 16) -> WordBuffer:
    """
    Remove the first n bytes from a buffer and return them.

    Whole words are moved across directly; a trailing part of a word is
    copied and then shifted out of the source with one bit shift.

    Args:
        buffer: Buffer holding at least n significant bytes (modified)
        n: Number of bytes to remove, defaults to one AES block

    Returns:
        New buffer with the removed bytes
    """
    if n <= 0 or n > buffer.sig_bytes:
        raise LengthMismatchError(
            f"Cannot shift {n} bytes out of a {buffer.sig_bytes}-byte buffer",
            code=2006,
        )
    remainder = n % WORD_BYTES
    whole = n - remainder

    shifted = WordBuffer()
    for _ in range(0, whole, WORD_BYTES):
        shifted.words.append(buffer.words.pop(0))
        shifted.sig_bytes += WORD_BYTES
        buffer.sig_bytes -= WORD_BYTES

    if remainder:
        shifted.words.append(buffer.words[0])
        shifted.sig_bytes += remainder
        shift_left(buffer, remainder * 8)
        buffer.sig_bytes -= remainder

    buffer.clamp()
    return shifted.clamp()


def bytes_at(buffer: WordBuffer, offset: int, n: int) -> WordBuffer:
    """Return a new buffer with the n bytes starting at byte offset."""
    if offset < 0 or n < 0 or offset + n > buffer.sig_bytes:
        raise LengthMismatchError(
            f"Byte window {offset}+{n} exceeds a {buffer.sig_bytes}-byte buffer",
            code=2007,
        )
    return WordBuffer.from_bytes(bytes(buffer.byte_at(i) for i in range(offset, offset + n)))


# ============================================================================
# Boolean Operations
# ============================================================================

def xor(a: WordBuffer, b: WordBuffer) -> WordBuffer:
    """
    XOR b into a word by word.

    Args:
        a: Buffer to modify
        b: Buffer with the same number of significant bytes (not modified)

    Returns:
        a, modified
    """
    if a.sig_bytes != b.sig_bytes:
        raise LengthMismatchError(
            f"XOR operands differ in length ({a.sig_bytes} != {b.sig_bytes})",
            code=2008,
        )
    a.clamp()
    for i in range(len(a.words)):
        a.words[i] ^= b.words[i]
    return a.clamp()


def xor_at(buffer: WordBuffer, other: WordBuffer, offset: int) -> WordBuffer:
    """
    XOR the significant bytes of other into buffer starting at a byte offset.

    Returns:
        buffer, modified
    """
    if offset < 0 or offset + other.sig_bytes > buffer.sig_bytes:
        raise LengthMismatchError(
            f"Cannot XOR {other.sig_bytes} bytes at offset {offset} "
            f"into a {buffer.sig_bytes}-byte buffer",
            code=2009,
        )
    for i in range(other.sig_bytes):
        position = offset + i
        buffer.set_byte(position, buffer.byte_at(position) ^ other.byte_at(i))
    return buffer


def xor_tail(a: WordBuffer, b: WordBuffer) -> WordBuffer:
    """
    XOR b onto the last b.sig_bytes bytes of a.

    The leading bytes of a are copied unchanged. Apart from clamping,
    neither input is modified.

    Args:
        a: Longer buffer
        b: Shorter buffer XORed onto the end of a

    Returns:
        New buffer of a.sig_bytes bytes
    """
    if b.sig_bytes > a.sig_bytes:
        raise LengthMismatchError(
            f"Tail of {b.sig_bytes} bytes is longer than the {a.sig_bytes}-byte buffer",
            code=2010,
        )
    head = leftmost_bytes(a, a.sig_bytes - b.sig_bytes)
    tail = xor(rightmost_bytes(a, b.sig_bytes), b)
    return head.concat(tail)


def bit_and(a: WordBuffer, b: WordBuffer) -> WordBuffer:
    """Logical AND of two equal-length buffers, as a new buffer."""
    if a.sig_bytes != b.sig_bytes:
        raise LengthMismatchError(
            f"AND operands differ in length ({a.sig_bytes} != {b.sig_bytes})",
            code=2011,
        )
    result = a.clone().clamp()
    for i in range(len(result.words)):
        result.words[i] &= b.words[i]
    return result.clamp()


# ============================================================================
# Comparison
# ============================================================================

def equals(a, b) -> bool:
    """
    Compare two word buffers.

    Buffers that lack the word buffer shape or differ in significant bytes
    are unequal. Otherwise both are clamped and every word is compared;
    the loop always runs to completion.

    Returns:
        bool: True if both buffers hold the same significant bytes
    """
    if not is_word_buffer(a) or not is_word_buffer(b) or a.sig_bytes != b.sig_bytes:
        return False
    a.clamp()
    b.clamp()

    result = 0
    for x, y in zip(a.words, b.words):
        result |= x ^ y
    return result == 0


def msb(buffer: WordBuffer) -> int:
    """Most significant bit of the first word, as 0 or 1."""
    if not buffer.words:
        raise LengthMismatchError("Empty buffer has no most significant bit", code=2012)
    return buffer.words[0] >> (WORD_BITS - 1)
