"""
CFBx Toolkit - Engine

This module provides the whole-buffer interface to the generalized cipher
feedback mode. It applies the configured padding policy, feeds every block
of the data to a fresh encryptor or decryptor in increasing offset order,
and trims the result back to the data length.

A trailing partial block is processed over zero fill and the output is
clamped afterwards, so with the default NoPadding policy the ciphertext is
exactly as long as the plaintext.

Example Usage:
    >>> from cfbx.engine import CfbxEngine, CfbxConfig
    >>> engine = CfbxEngine(CfbxConfig(segment_size=8))
    >>> key = engine.generate_key()
    >>> result = engine.encrypt(b"Secret message", key)
    >>> engine.decrypt(result.ciphertext, key, result.iv).plaintext
    b'Secret message'
"""

import os
import logging
from dataclasses import dataclass, asdict
from typing import Optional, Union, Dict, Any

from .cipher import AES_KEY_SIZES, AesBlockCipher, BlockCipher
from .errors import ContractViolation, CryptoError
from .mode import CfbxDecryptor, CfbxEncryptor, validate_segment_size
from .padding import Padding, get_padding
from .words import WORD_BYTES, WordBuffer

logger = logging.getLogger(__name__)

AES_BLOCK_WORDS = 4


@dataclass
class CfbxConfig:
    """
    Configuration for the CFBx engine.

    Attributes:
        segment_size: Segment size in bits (multiple of 8 dividing 128)
        padding: Padding policy name ("none", "one-zero", "pkcs7")
        key_size: Length of generated keys in bytes
    """

    segment_size: int = 128
    padding: str = "none"
    key_size: int = 16

    @classmethod
    def default(cls) -> 'CfbxConfig':
        """Get default configuration."""
        return cls(segment_size=128, padding="none", key_size=16)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CfbxConfig':
        """Create a configuration from a dictionary, ignoring unknown keys."""
        defaults = cls.default()
        return cls(
            segment_size=int(data.get("segment_size", defaults.segment_size)),
            padding=data.get("padding", defaults.padding),
            key_size=int(data.get("key_size", defaults.key_size)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self, block_size: int = AES_BLOCK_WORDS) -> None:
        """
        Check the configuration.

        Raises:
            ContractViolation: If any value is unusable
        """
        validate_segment_size(self.segment_size, block_size)
        try:
            get_padding(self.padding)
        except CryptoError as e:
            raise ContractViolation(e.message, code=1003, details=e.details) from e
        if self.key_size not in AES_KEY_SIZES:
            raise ContractViolation(
                f"Invalid key size: {self.key_size}",
                code=1004,
                details={"allowed": list(AES_KEY_SIZES)},
            )


@dataclass
class EncryptionResult:
    """
    Result of an encryption operation.

    Attributes:
        ciphertext: The encrypted data
        iv: The initialization vector used
        segment_size: Segment size in bits
        algorithm: The algorithm used
    """

    ciphertext: bytes
    iv: bytes
    segment_size: int
    algorithm: str


@dataclass
class DecryptionResult:
    """
    Result of a decryption operation.

    Attributes:
        plaintext: The decrypted data
        algorithm: The algorithm used
    """

    plaintext: bytes
    algorithm: str


class CfbxEngine:
    """
    Whole-buffer cipher feedback encryption.

    Attributes:
        config: Engine configuration
        padding: Padding policy built from the configuration

    Example:
        >>> engine = CfbxEngine(CfbxConfig(segment_size=64))
        >>> result = engine.encrypt(b"Data", key, iv)
        >>> engine.decrypt(result.ciphertext, key, iv).plaintext
        b'Data'
    """

    def __init__(self, config: Optional[CfbxConfig] = None):
        """
        Initialize the engine.

        Args:
            config: Engine configuration, defaults to CfbxConfig.default()

        Raises:
            ContractViolation: If the configuration is invalid
        """
        self._config = config or CfbxConfig.default()
        self._config.validate()
        self._padding = get_padding(self._config.padding)
        logger.info(
            f"CFBx engine initialized with {self._config.segment_size}-bit segments "
            f"and {self._padding.name} padding"
        )

    @property
    def config(self) -> CfbxConfig:
        return self._config

    @property
    def padding(self) -> Padding:
        return self._padding

    @property
    def algorithm(self) -> str:
        return f"aes-cfb{self._config.segment_size}"

    def generate_key(self, length: Optional[int] = None) -> bytes:
        """Generate a random AES key, by default of the configured size."""
        return os.urandom(length or self._config.key_size)

    def generate_iv(self, block_size: int = AES_BLOCK_WORDS) -> bytes:
        """Generate a random IV of one block."""
        return os.urandom(block_size * WORD_BYTES)

    def encrypt_words(self, buffer: WordBuffer, cipher: BlockCipher, iv: WordBuffer) -> WordBuffer:
        """
        Encrypt a word buffer.

        Args:
            buffer: Plaintext (not modified)
            cipher: Keyed block cipher
            iv: One block initialization vector

        Returns:
            New buffer with the ciphertext
        """
        data = buffer.clone().clamp()
        self._padding.pad(data, cipher.block_size)
        encryptor = CfbxEncryptor(cipher, iv, self._config.segment_size)
        return self._process(encryptor, data, cipher.block_size)

    def decrypt_words(self, buffer: WordBuffer, cipher: BlockCipher, iv: WordBuffer) -> WordBuffer:
        """
        Decrypt a word buffer.

        Args:
            buffer: Ciphertext (not modified)
            cipher: Keyed block cipher
            iv: One block initialization vector

        Returns:
            New buffer with the plaintext
        """
        decryptor = CfbxDecryptor(cipher, iv, self._config.segment_size)
        data = self._process(decryptor, buffer.clone().clamp(), cipher.block_size)
        self._padding.unpad(data)
        return data

    @staticmethod
    def _process(processor, data: WordBuffer, block_size: int) -> WordBuffer:
        """Run every block of data through the processor, in place."""
        length = data.sig_bytes
        block_bytes = block_size * WORD_BYTES
        n_blocks = (length + block_bytes - 1) // block_bytes

        data.words.extend([0] * (n_blocks * block_size - len(data.words)))
        data.sig_bytes = n_blocks * block_bytes
        for offset in range(0, n_blocks * block_size, block_size):
            processor.process_block(data, offset)

        data.sig_bytes = length
        return data.clamp()

    def encrypt(
        self,
        plaintext: Union[bytes, str],
        key: bytes,
        iv: Optional[bytes] = None,
    ) -> EncryptionResult:
        """
        Encrypt data with AES in CFBx mode.

        Args:
            plaintext: Data to encrypt; str is encoded as UTF-8
            key: AES key (16, 24 or 32 bytes)
            iv: 16-byte IV (auto-generated if not provided)

        Returns:
            EncryptionResult containing ciphertext, IV, segment size and algorithm

        Raises:
            CryptoError: If encryption fails
        """
        if isinstance(plaintext, str):
            plaintext = plaintext.encode('utf-8')
        if iv is None:
            iv = self.generate_iv()

        try:
            cipher = AesBlockCipher(key)
            ciphertext = self.encrypt_words(
                WordBuffer.from_bytes(plaintext), cipher, WordBuffer.from_bytes(iv)
            )
            logger.debug(f"Encrypted {len(plaintext)} bytes with {self.algorithm}")

            return EncryptionResult(
                ciphertext=ciphertext.to_bytes(),
                iv=bytes(iv),
                segment_size=self._config.segment_size,
                algorithm=self.algorithm,
            )

        except (CryptoError, NotImplementedError):
            raise
        except Exception as e:
            logger.error(f"Encryption failed: {e}")
            raise CryptoError(f"Encryption operation failed: {e}", code=1201)

    def decrypt(self, ciphertext: bytes, key: bytes, iv: bytes) -> DecryptionResult:
        """
        Decrypt data with AES in CFBx mode.

        Args:
            ciphertext: Data to decrypt
            key: AES key used during encryption
            iv: IV used during encryption

        Returns:
            DecryptionResult containing plaintext and algorithm

        Raises:
            CryptoError: If decryption fails
        """
        try:
            cipher = AesBlockCipher(key)
            plaintext = self.decrypt_words(
                WordBuffer.from_bytes(ciphertext), cipher, WordBuffer.from_bytes(iv)
            )
            logger.debug(f"Decrypted {len(ciphertext)} bytes with {self.algorithm}")

            return DecryptionResult(
                plaintext=plaintext.to_bytes(),
                algorithm=self.algorithm,
            )

        except (CryptoError, NotImplementedError):
            raise
        except Exception as e:
            logger.error(f"Decryption failed: {e}")
            raise CryptoError(f"Decryption operation failed: {e}", code=1202)

    def get_backend_info(self) -> Dict[str, Any]:
        """
        Get information about the cryptographic backend.

        Returns:
            Dictionary containing backend information
        """
        import cryptography

        return {
            "backend": "cryptography",
            "backend_version": cryptography.__version__,
            "algorithm": self.algorithm,
            "padding": self._padding.name,
            "segment_size": self._config.segment_size,
            "version": "1.0.0",
        }
