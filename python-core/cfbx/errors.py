"""
CFBx Toolkit - Exception Hierarchy.

Every failure raised by the toolkit derives from CryptoError. Contract
violations (mismatched buffer lengths, unsupported segment sizes, shift
amounts outside a single word) are programmer errors and are raised
immediately instead of being returned as results. Features that are
deliberately left out raise the builtin NotImplementedError.

Error codes:
    1xxx: Engine and configuration
    2xxx: Word buffer kernel
    3xxx: Cipher feedback mode
    7xxx: Padding
"""

from typing import Optional, Dict, Any


class CryptoError(Exception):
    """
    Base exception for cryptographic errors.

    This exception is raised when cryptographic operations fail due to
    invalid inputs or backend errors.
    """

    def __init__(self, message: str, code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        base = f"CryptoError: {self.message}"
        if self.code:
            base += f" (Code: {self.code})"
        return base


class ContractViolation(CryptoError, ValueError):
    """A caller broke an operation's preconditions."""


class LengthMismatchError(ContractViolation):
    """Two buffers that must agree in size do not."""


class PaddingError(CryptoError, ValueError):
    """Padding bytes are malformed."""
