"""
CFBx Toolkit - Block Cipher Capability.

The feedback mode only ever needs one thing from a block cipher: encrypt a
single block of a word buffer in place. BlockCipher captures that contract,
and AesBlockCipher fulfils it with the AES primitive of the `cryptography`
package (ECB over exactly one block per call).

Example Usage:
    >>> from cfbx.cipher import AesBlockCipher
    >>> from cfbx.words import WordBuffer
    >>> cipher = AesBlockCipher(bytes(16))
    >>> block = WordBuffer.from_bytes(bytes(16))
    >>> cipher.encrypt_block(block, 0)
    >>> block.hex()
    '66e94bd4ef8a2c3b884cfa59ca342b2e'
"""

import logging
from abc import ABC, abstractmethod

from .errors import CryptoError, LengthMismatchError
from .words import WORD_BYTES, WordBuffer

logger = logging.getLogger(__name__)

AES_KEY_SIZES = (16, 24, 32)


class BlockCipher(ABC):
    """
    Interface for a block cipher used by the feedback mode.

    Attributes:
        block_size: Block size in 32-bit words
    """

    block_size: int = 4

    @abstractmethod
    def encrypt_block(self, buffer: WordBuffer, offset: int) -> None:
        """
        Encrypt block_size words of buffer in place, starting at word offset.

        Args:
            buffer: Buffer holding at least offset + block_size words
            offset: Word index of the block
        """


class AesBlockCipher(BlockCipher):
    """
    AES single-block encryption backed by the cryptography library.

    Args:
        key: AES key of 16, 24 or 32 bytes

    Raises:
        CryptoError: If the key length is not a valid AES key length
    """

    block_size = 4

    def __init__(self, key: bytes):
        if len(key) not in AES_KEY_SIZES:
            raise CryptoError(
                f"Invalid AES key length: {len(key)} bytes",
                code=1101,
                details={"allowed": list(AES_KEY_SIZES)},
            )
        from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
        from cryptography.hazmat.backends import default_backend

        self._encryptor = Cipher(
            algorithms.AES(bytes(key)),
            modes.ECB(),
            backend=default_backend()
        ).encryptor()
        self._key_bits = len(key) * 8
        logger.debug(f"AES-{self._key_bits} block cipher ready")

    @property
    def key_bits(self) -> int:
        return self._key_bits

    def encrypt_block(self, buffer: WordBuffer, offset: int) -> None:
        end = offset + self.block_size
        if offset < 0 or end > len(buffer.words):
            raise LengthMismatchError(
                f"Block at word {offset} exceeds a {len(buffer.words)}-word buffer",
                code=1102,
            )
        plain = b''.join(word.to_bytes(WORD_BYTES, 'big') for word in buffer.words[offset:end])
        encrypted = self._encryptor.update(plain)
        buffer.words[offset:end] = [
            int.from_bytes(encrypted[i:i + WORD_BYTES], 'big')
            for i in range(0, len(encrypted), WORD_BYTES)
        ]
