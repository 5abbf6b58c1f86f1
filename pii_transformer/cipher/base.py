from abc import ABC, abstractmethod


class BaseCipher(ABC):
    """Contract for all passphrase cipher adapters."""

    @abstractmethod
    def encrypt(self, plaintext: str, passphrase: str | None) -> str:
        """Encrypt plaintext into envelope text.

        Args:
            plaintext: Text to protect.
            passphrase: Shared secret; must be non-empty.

        Returns:
            Envelope text ready for display or storage.

        Raises:
            CipherError: on any failure.
        """

    @abstractmethod
    def decrypt(self, envelope_text: str, passphrase: str | None) -> str:
        """Recover plaintext from envelope text.

        Args:
            envelope_text: Envelope produced by ``encrypt`` or a compatible tool.
            passphrase: Shared secret; must be non-empty.

        Returns:
            The exact plaintext that was encrypted. Never partial output.

        Raises:
            CipherError: on any failure.
        """
