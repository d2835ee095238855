"""
CFBx Toolkit - Generalized Cipher Feedback Mode

Cipher feedback as defined in NIST SP 800-38A, section 6.3, for any
segment size that is a whole number of bytes and divides the cipher's
block size. Each block of data is split into segments processed left to
right; for every segment:

    1. The feedback register is the IV for the very first segment of the
       session. Afterwards it is the previous register shifted left by one
       segment, with the newest ciphertext segment shifted in on the right.
    2. The block cipher encrypts a copy of the register; the leftmost
       segment of the result is the keystream.
    3. The keystream is XORed onto the data segment in place.

The encryptor records the ciphertext segment after XORing; the decryptor
records it before XORing. Both directions only ever call the block
cipher's encrypt operation.

Sessions are strictly sequential: blocks must be handed to process_block
in increasing offset order over one logical buffer, and a session must
not be shared between threads.

Example:
    >>> cipher = AesBlockCipher(key)
    >>> encryptor = CfbxEncryptor(cipher, WordBuffer.from_bytes(iv), segment_size=8)
    >>> data = WordBuffer.from_bytes(block)
    >>> encryptor.process_block(data, 0)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .cipher import BlockCipher
from .errors import ContractViolation, LengthMismatchError
from .words import (
    WORD_BITS,
    WORD_BYTES,
    WordBuffer,
    bytes_at,
    leftmost_bytes,
    rightmost_bytes,
    xor_at,
)

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of a feedback session."""

    AWAITING_FIRST_BLOCK = "awaiting_first_block"
    STREAMING = "streaming"


def validate_segment_size(segment_size: int, block_size: int) -> None:
    """
    Check a segment size against a cipher block size.

    Args:
        segment_size: Segment size in bits
        block_size: Cipher block size in 32-bit words

    Raises:
        ContractViolation: If the segment is not a positive whole number of
            bytes dividing the block
    """
    block_bits = block_size * WORD_BITS
    if (
        not isinstance(segment_size, int)
        or segment_size <= 0
        or segment_size % 8 != 0
        or segment_size > block_bits
        or block_bits % segment_size != 0
    ):
        raise ContractViolation(
            f"Segment size {segment_size} must be a multiple of 8 dividing {block_bits}",
            code=3001,
            details={"segment_size": segment_size, "block_bits": block_bits},
        )


@dataclass
class CfbSession:
    """
    Mutable state of one cipher feedback run.

    Attributes:
        cipher: Block cipher the keystream is drawn from
        segment_size: Segment size in bits
        iv: Initialization vector, cleared once the first segment uses it
        prev_block: Feedback register used for the latest segment
        ct: Latest ciphertext segment
    """

    cipher: BlockCipher
    segment_size: int
    iv: Optional[WordBuffer]
    prev_block: Optional[WordBuffer] = None
    ct: Optional[WordBuffer] = None

    def __post_init__(self):
        validate_segment_size(self.segment_size, self.cipher.block_size)
        if self.iv is None or self.iv.sig_bytes != self.block_bytes:
            got = None if self.iv is None else self.iv.sig_bytes
            raise LengthMismatchError(
                f"IV must be {self.block_bytes} bytes, got {got}",
                code=3002,
            )
        self.iv = self.iv.clone().clamp()

    @property
    def block_bytes(self) -> int:
        return self.cipher.block_size * WORD_BYTES

    @property
    def segment_bytes(self) -> int:
        return self.segment_size // 8

    @property
    def segments_per_block(self) -> int:
        return self.block_bytes // self.segment_bytes

    @property
    def state(self) -> SessionState:
        if self.iv is not None:
            return SessionState.AWAITING_FIRST_BLOCK
        return SessionState.STREAMING

    def next_register(self) -> WordBuffer:
        """
        Advance the feedback register by one segment.

        Returns:
            The register for the segment about to be processed
        """
        if self.iv is not None:
            register = self.iv.clone()
            self.iv = None
        else:
            register = rightmost_bytes(self.prev_block, self.block_bytes - self.segment_bytes)
            register.concat(self.ct)
        self.prev_block = register
        return register

    def keystream(self, register: WordBuffer) -> WordBuffer:
        """Encrypt a copy of the register and keep its leftmost segment."""
        block = register.clone()
        self.cipher.encrypt_block(block, 0)
        return leftmost_bytes(block, self.segment_bytes)


class _CfbxProcessor:
    """Shared driver for the encryptor and decryptor."""

    def __init__(self, cipher: BlockCipher, iv: WordBuffer, segment_size: Optional[int] = None):
        if segment_size is None:
            segment_size = cipher.block_size * WORD_BITS
        self.session = CfbSession(cipher=cipher, segment_size=segment_size, iv=iv)
        logger.debug(
            f"{type(self).__name__} created with {segment_size}-bit segments "
            f"({self.session.segments_per_block} per block)"
        )

    @property
    def state(self) -> SessionState:
        return self.session.state

    def process_block(self, words: WordBuffer, offset: int) -> None:
        """
        Transform one block of words in place.

        Args:
            words: Data buffer whose significant bytes cover the block
            offset: Word index where the block starts
        """
        session = self.session
        start = offset * WORD_BYTES
        if offset < 0 or start + session.block_bytes > words.sig_bytes:
            raise LengthMismatchError(
                f"Block at word {offset} exceeds a {words.sig_bytes}-byte buffer",
                code=3003,
            )
        for i in range(session.segments_per_block):
            position = start + i * session.segment_bytes
            keystream = session.keystream(session.next_register())
            self._apply_segment(words, position, keystream)

    def _apply_segment(self, words: WordBuffer, position: int, keystream: WordBuffer) -> None:
        raise NotImplementedError


class CfbxEncryptor(_CfbxProcessor):
    """Cipher feedback encryption."""

    def _apply_segment(self, words: WordBuffer, position: int, keystream: WordBuffer) -> None:
        xor_at(words, keystream, position)
        self.session.ct = bytes_at(words, position, self.session.segment_bytes)


class CfbxDecryptor(_CfbxProcessor):
    """Cipher feedback decryption."""

    def _apply_segment(self, words: WordBuffer, position: int, keystream: WordBuffer) -> None:
        # Capture the ciphertext before it is overwritten with plaintext.
        self.session.ct = bytes_at(words, position, self.session.segment_bytes)
        xor_at(words, keystream, position)
