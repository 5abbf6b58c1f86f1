import os
import time
from collections.abc import Callable
from typing import ClassVar

from pii_transformer.cipher.base import BaseCipher
from pii_transformer.cipher.exceptions import (
    CipherError,
    CryptoFailureError,
    MissingPassphraseError,
    UnsupportedFormatError,
)
from pii_transformer.cipher.openpgp.constants import HashAlgorithm, SymmetricAlgorithm
from pii_transformer.cipher.openpgp.message import SymmetricMessage
from pii_transformer.codec.hex_codec import HexCodec


class OpenPgpSymmetricAdapter(BaseCipher):
    """Passphrase-only OpenPGP messages carried as ``\\x`` hex envelopes.

    Decryption accepts only envelopes whose first payload byte is ``0xc3``,
    the new-format header of a symmetric session key packet.
    """

    ENVELOPE_HEADER: ClassVar[int] = 0xC3

    def __init__(
        self,
        *,
        codec: HexCodec | None = None,
        algorithm: SymmetricAlgorithm = SymmetricAlgorithm.AES256,
        s2k_hash: HashAlgorithm = HashAlgorithm.SHA256,
        s2k_count: int = 16777216,
        random_bytes: Callable[[int], bytes] = os.urandom,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._codec = codec if codec is not None else HexCodec()
        self._algorithm = algorithm
        self._s2k_hash = s2k_hash
        self._s2k_count = s2k_count
        self._random_bytes = random_bytes
        self._clock = clock

    def decrypt(self, envelope_text: str, passphrase: str | None) -> str:
        self._check_envelope(envelope_text)
        if not passphrase:
            raise MissingPassphraseError("Passphrase is required for decryption")
        try:
            message = SymmetricMessage.parse(self._codec.decode(envelope_text))
            return message.decrypt(passphrase)
        except CipherError:
            raise
        except Exception as exc:
            raise CryptoFailureError(f"PGP decryption failed: {exc}") from exc

    def encrypt(self, plaintext: str, passphrase: str | None) -> str:
        if not passphrase:
            raise MissingPassphraseError("Passphrase is required for encryption")
        try:
            message = SymmetricMessage.encrypt(
                plaintext,
                passphrase,
                algorithm=self._algorithm,
                s2k_hash=self._s2k_hash,
                s2k_count=self._s2k_count,
                random_bytes=self._random_bytes,
                timestamp=int(self._clock()),
            )
            return self._codec.encode(message.to_bytes())
        except CipherError:
            raise
        except Exception as exc:
            raise CryptoFailureError(f"PGP encryption failed: {exc}") from exc

    def _check_envelope(self, envelope_text: str) -> None:
        marker = self._codec.MARKER
        header = envelope_text[len(marker):len(marker) + 2]
        if not envelope_text.startswith(marker) or header.lower() != f"{self.ENVELOPE_HEADER:02x}":
            raise UnsupportedFormatError(
                f"Only hex format starting with {marker}{self.ENVELOPE_HEADER:02x} is supported"
            )
