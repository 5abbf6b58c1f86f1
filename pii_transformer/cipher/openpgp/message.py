"""Passphrase-protected OpenPGP messages: SKESK packets plus one SEIPD packet."""

from __future__ import annotations

from collections.abc import Callable

from pii_transformer.cipher.openpgp.constants import (
    HashAlgorithm,
    PacketTag,
    S2KType,
    SymmetricAlgorithm,
)
from pii_transformer.cipher.openpgp.exceptions import IntegrityError, PacketError
from pii_transformer.cipher.openpgp.packets import (
    LiteralData,
    SymmetricKeyEncryptedSessionKey,
    decompress,
    decrypt_integrity_protected,
    encrypt_integrity_protected,
    read_packets,
    write_packet,
)
from pii_transformer.cipher.openpgp.s2k import S2K, encode_count

# Packets that may accompany literal data and carry nothing we need.
_IGNORED_INNER_TAGS = frozenset({2, 4, PacketTag.MARKER})


class SymmetricMessage:
    """An encrypted message unlocked by a passphrase."""

    def __init__(
        self,
        sessions: list[SymmetricKeyEncryptedSessionKey],
        encrypted_data: bytes,
    ) -> None:
        self.sessions = sessions
        self.encrypted_data = encrypted_data

    @classmethod
    def parse(cls, data: bytes) -> SymmetricMessage:
        """Parse a binary message.

        Raises:
            PacketError: if the stream is malformed, lacks a session key or
                encrypted data packet, or uses packets this format excludes.
        """
        sessions: list[SymmetricKeyEncryptedSessionKey] = []
        encrypted_data: bytes | None = None
        for packet in read_packets(data):
            if packet.tag == PacketTag.SKESK:
                sessions.append(SymmetricKeyEncryptedSessionKey.parse(packet.body))
            elif packet.tag == PacketTag.SEIPD:
                if encrypted_data is not None:
                    raise PacketError("Message contains more than one encrypted data packet")
                encrypted_data = packet.body
            elif packet.tag == PacketTag.SED:
                raise PacketError("Encrypted data without integrity protection is not supported")
            elif packet.tag != PacketTag.MARKER:
                raise PacketError(f"Unexpected packet tag {packet.tag} in encrypted message")

        if not sessions:
            raise PacketError("Message has no symmetric session key packet")
        if encrypted_data is None:
            raise PacketError("Message has no integrity protected data packet")
        return cls(sessions, encrypted_data)

    @classmethod
    def encrypt(
        cls,
        plaintext: str,
        passphrase: str,
        *,
        algorithm: SymmetricAlgorithm,
        s2k_hash: HashAlgorithm,
        s2k_count: int,
        random_bytes: Callable[[int], bytes],
        timestamp: int,
    ) -> SymmetricMessage:
        """Encrypt *plaintext* with a key derived directly from *passphrase*."""
        s2k = S2K(
            type=S2KType.ITERATED,
            hash_algorithm=s2k_hash,
            salt=random_bytes(S2K.SALT_SIZE),
            coded_count=encode_count(s2k_count),
        )
        session = SymmetricKeyEncryptedSessionKey(algorithm=algorithm, s2k=s2k)
        key = s2k.derive_key(passphrase.encode("utf-8"), algorithm.key_size)
        literal = LiteralData.from_text(plaintext, timestamp=timestamp)
        encrypted_data = encrypt_integrity_protected(
            algorithm,
            key,
            write_packet(PacketTag.LITERAL, literal.to_bytes()),
            prefix=random_bytes(algorithm.block_size),
        )
        return cls([session], encrypted_data)

    def to_bytes(self) -> bytes:
        parts = [write_packet(PacketTag.SKESK, s.to_bytes()) for s in self.sessions]
        parts.append(write_packet(PacketTag.SEIPD, self.encrypted_data))
        return b"".join(parts)

    def decrypt(self, passphrase: str) -> str:
        """Return the literal text, trying each session key in turn.

        Raises:
            IntegrityError: if no session unlocks the data with *passphrase*.
            PacketError: if the decrypted content is malformed.
        """
        secret = passphrase.encode("utf-8")
        last_error: IntegrityError | None = None
        for session in self.sessions:
            try:
                algorithm, key = session.session_key(secret)
                inner = decrypt_integrity_protected(algorithm, key, self.encrypted_data)
            except IntegrityError as exc:
                last_error = exc
                continue
            return _literal_text(inner)
        if last_error is None:
            raise PacketError("Message has no symmetric session key packet")
        raise last_error


def _literal_text(data: bytes) -> str:
    for packet in read_packets(data):
        if packet.tag == PacketTag.LITERAL:
            return LiteralData.parse(packet.body).text()
        if packet.tag == PacketTag.COMPRESSED:
            return _literal_text(decompress(packet.body))
        if packet.tag not in _IGNORED_INNER_TAGS:
            raise PacketError(f"Unexpected packet tag {packet.tag} in decrypted data")
    raise PacketError("Decrypted data has no literal data packet")
