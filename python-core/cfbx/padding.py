"""
CFBx Toolkit - Padding Policies

A padding policy is a pair of operations applied to a WordBuffer before
the first block is processed and after the last one. Both mutate the
buffer they are given.

Policies:
    NoPadding: Leaves data untouched. Required for streaming use of the
        feedback mode, where output length must equal input length.
    OneZeroPadding: A 1 bit followed by zero bits up to the block
        boundary, at byte granularity (0x80 00 .. 00). Removal is not
        supported.
    Pkcs7Padding: N bytes of value N.
"""

from abc import ABC, abstractmethod

from .errors import CryptoError, PaddingError
from .words import WORD_BYTES, WordBuffer


class Padding(ABC):
    """Interface for padding policies."""

    name: str = ""

    @abstractmethod
    def pad(self, buffer: WordBuffer, block_size: int) -> None:
        """
        Pad buffer up to a multiple of block_size words.

        Args:
            buffer: Data to pad (modified)
            block_size: Block size in 32-bit words
        """

    @abstractmethod
    def unpad(self, buffer: WordBuffer) -> None:
        """Strip padding from buffer (modified)."""


class NoPadding(Padding):
    """No padding is applied. Used by stream-like modes such as CFB and CTR."""

    name = "none"

    def pad(self, buffer: WordBuffer, block_size: int) -> None:
        pass

    def unpad(self, buffer: WordBuffer) -> None:
        pass


class OneZeroPadding(Padding):
    """
    A 1 bit followed by as many 0 bits as needed to fill up the block.

    This works on bytes rather than bits, so the first padding byte is 0x80.
    At least one byte is always added.
    """

    name = "one-zero"

    def pad(self, buffer: WordBuffer, block_size: int) -> None:
        block_bytes = block_size * WORD_BYTES
        n_padding = block_bytes - buffer.sig_bytes % block_bytes
        buffer.concat(WordBuffer.from_bytes(b'\x80' + b'\x00' * (n_padding - 1)))

    def unpad(self, buffer: WordBuffer) -> None:
        raise NotImplementedError("One-zero unpadding is not supported")


class Pkcs7Padding(Padding):
    """PKCS#7 padding by byte count."""

    name = "pkcs7"

    def pad(self, buffer: WordBuffer, block_size: int) -> None:
        block_bytes = block_size * WORD_BYTES
        if block_bytes > 255:
            raise CryptoError(f"PKCS#7 cannot pad {block_bytes}-byte blocks", code=7005)
        padding_length = block_bytes - buffer.sig_bytes % block_bytes
        buffer.concat(WordBuffer.from_bytes(bytes([padding_length] * padding_length)))

    def unpad(self, buffer: WordBuffer) -> None:
        if buffer.sig_bytes == 0:
            raise PaddingError("Invalid padding: empty data", code=7001)

        padding_length = buffer.byte_at(buffer.sig_bytes - 1)
        if padding_length < 1:
            raise PaddingError(f"Invalid padding length: {padding_length}", code=7002)
        if padding_length > buffer.sig_bytes:
            raise PaddingError("Invalid padding: exceeds data length", code=7003)

        bad = 0
        for i in range(buffer.sig_bytes - padding_length, buffer.sig_bytes):
            bad |= buffer.byte_at(i) ^ padding_length
        if bad != 0:
            raise PaddingError("Invalid padding: mismatch", code=7004)

        buffer.sig_bytes -= padding_length
        buffer.clamp()


_POLICIES = {
    NoPadding.name: NoPadding,
    OneZeroPadding.name: OneZeroPadding,
    Pkcs7Padding.name: Pkcs7Padding,
}


def get_padding(name: str) -> Padding:
    """
    Look up a padding policy by name.

    Args:
        name: One of "none", "one-zero", "pkcs7"

    Returns:
        A new policy instance

    Raises:
        CryptoError: If the name is unknown
    """
    try:
        return _POLICIES[name]()
    except KeyError:
        raise CryptoError(
            f"Unsupported padding: {name}",
            code=7006,
            details={"available": sorted(_POLICIES)},
        ) from None
