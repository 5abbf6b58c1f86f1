class PacketError(Exception):
    """Raised when OpenPGP packet data is malformed or unsupported."""


class IntegrityError(PacketError):
    """Raised when decrypted data fails the quick check or the MDC."""
