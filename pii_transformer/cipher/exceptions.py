from enum import Enum
from typing import ClassVar


class FailureKind(str, Enum):
    MISSING_PASSPHRASE = "missing_passphrase"
    UNSUPPORTED_FORMAT = "unsupported_format"
    CRYPTO_FAILURE = "crypto_failure"


class CipherError(Exception):
    """Base exception for all cipher adapter errors."""

    kind: ClassVar[FailureKind] = FailureKind.CRYPTO_FAILURE


class MissingPassphraseError(CipherError):
    """Raised when the passphrase is absent or empty."""

    kind = FailureKind.MISSING_PASSPHRASE


class UnsupportedFormatError(CipherError):
    """Raised when envelope text does not carry the supported header."""

    kind = FailureKind.UNSUPPORTED_FORMAT


class CryptoFailureError(CipherError):
    """Raised when encryption or decryption itself fails."""

    kind = FailureKind.CRYPTO_FAILURE
