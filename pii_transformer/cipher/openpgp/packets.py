"""OpenPGP packet framing and the packet bodies used by passphrase messages."""

from __future__ import annotations

import bz2
import hashlib
import hmac
import zlib
from dataclasses import dataclass
from typing import ClassVar

from cryptography.hazmat.decrepit.ciphers.modes import CFB
from cryptography.hazmat.primitives.ciphers import Cipher

from pii_transformer.cipher.openpgp.constants import (
    CompressionAlgorithm,
    PacketTag,
    SymmetricAlgorithm,
)
from pii_transformer.cipher.openpgp.exceptions import IntegrityError, PacketError
from pii_transformer.cipher.openpgp.s2k import S2K


# ----------------------------------------------------------------------
# Framing
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class RawPacket:
    """A packet tag with its fully reassembled body."""

    tag: int
    body: bytes


def read_packets(data: bytes) -> list[RawPacket]:
    """Split a binary OpenPGP stream into packets.

    Accepts both header formats, including new-format partial body lengths
    and old-format indeterminate lengths.

    Raises:
        PacketError: on an invalid header or a truncated packet.
    """
    packets: list[RawPacket] = []
    offset = 0
    while offset < len(data):
        packet, offset = _read_packet(data, offset)
        packets.append(packet)
    return packets


def write_packet(tag: int, body: bytes) -> bytes:
    """Frame *body* with a new-format header using the shortest length form."""
    return bytes([0xC0 | tag]) + _encode_length(len(body)) + body


def _read_packet(data: bytes, offset: int) -> tuple[RawPacket, int]:
    ctb = data[offset]
    if not ctb & 0x80:
        raise PacketError(f"Invalid packet header 0x{ctb:02x} at offset {offset}")
    offset += 1
    if ctb & 0x40:
        tag = ctb & 0x3F
        body, offset = _read_new_format_body(data, offset)
    else:
        tag = (ctb >> 2) & 0x0F
        body, offset = _read_old_format_body(data, offset, ctb & 0x03)
    return RawPacket(tag=tag, body=body), offset


def _read_new_format_body(data: bytes, offset: int) -> tuple[bytes, int]:
    chunks: list[bytes] = []
    while True:
        first = _byte_at(data, offset)
        partial = False
        if first < 192:
            length, offset = first, offset + 1
        elif first < 224:
            length = ((first - 192) << 8) + _byte_at(data, offset + 1) + 192
            offset += 2
        elif first == 255:
            length = int.from_bytes(_take(data, offset + 1, 4), "big")
            offset += 5
        else:
            length, offset, partial = 1 << (first & 0x1F), offset + 1, True
        chunks.append(_take(data, offset, length))
        offset += length
        if not partial:
            return b"".join(chunks), offset


def _read_old_format_body(data: bytes, offset: int, length_type: int) -> tuple[bytes, int]:
    if length_type == 3:
        return data[offset:], len(data)
    size = (1, 2, 4)[length_type]
    length = int.from_bytes(_take(data, offset, size), "big")
    offset += size
    return _take(data, offset, length), offset + length


def _encode_length(length: int) -> bytes:
    if length < 192:
        return bytes([length])
    if length < 8384:
        length -= 192
        return bytes([(length >> 8) + 192, length & 0xFF])
    return b"\xff" + length.to_bytes(4, "big")


def _byte_at(data: bytes, offset: int) -> int:
    if offset >= len(data):
        raise PacketError("Truncated packet header")
    return data[offset]


def _take(data: bytes, offset: int, length: int) -> bytes:
    if offset + length > len(data):
        raise PacketError(
            f"Truncated packet: need {length} bytes at offset {offset}, "
            f"have {max(len(data) - offset, 0)}"
        )
    return data[offset:offset + length]


def _cfb(algorithm: SymmetricAlgorithm, key: bytes) -> Cipher:
    return Cipher(algorithm.primitive(key), CFB(bytes(algorithm.block_size)))


# ----------------------------------------------------------------------
# Tag 3: Symmetric-Key Encrypted Session Key
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class SymmetricKeyEncryptedSessionKey:
    VERSION: ClassVar[int] = 4

    algorithm: SymmetricAlgorithm
    s2k: S2K
    encrypted_session_key: bytes = b""

    @classmethod
    def parse(cls, body: bytes) -> SymmetricKeyEncryptedSessionKey:
        if len(body) < 2:
            raise PacketError("Truncated session key packet")
        if body[0] != cls.VERSION:
            raise PacketError(f"Unsupported session key packet version {body[0]}")
        algorithm = SymmetricAlgorithm.parse(body[1])
        s2k, offset = S2K.parse(body, 2)
        return cls(algorithm, s2k, body[offset:])

    def to_bytes(self) -> bytes:
        return (
            bytes([self.VERSION, self.algorithm])
            + self.s2k.to_bytes()
            + self.encrypted_session_key
        )

    def session_key(self, passphrase: bytes) -> tuple[SymmetricAlgorithm, bytes]:
        """Return the cipher and key protecting the encrypted data packet."""
        key = self.s2k.derive_key(passphrase, self.algorithm.key_size)
        if not self.encrypted_session_key:
            return self.algorithm, key

        decryptor = _cfb(self.algorithm, key).decryptor()
        plain = decryptor.update(self.encrypted_session_key) + decryptor.finalize()
        try:
            algorithm = SymmetricAlgorithm.parse(plain[0])
        except PacketError:
            raise IntegrityError("Session key decryption failed") from None
        session_key = plain[1:]
        if len(session_key) != algorithm.key_size:
            raise IntegrityError("Session key decryption failed")
        return algorithm, session_key


# ----------------------------------------------------------------------
# Tag 18: Symmetrically Encrypted Integrity Protected Data
# ----------------------------------------------------------------------


_SEIPD_VERSION = 1
_MDC_HEADER = bytes([0xC0 | PacketTag.MDC, 20])
_MDC_SIZE = len(_MDC_HEADER) + 20


def encrypt_integrity_protected(
    algorithm: SymmetricAlgorithm,
    key: bytes,
    packets: bytes,
    prefix: bytes,
) -> bytes:
    """Build a SEIPD v1 body: CFB over prefix, *packets* and the MDC packet.

    *prefix* must be one block of random bytes; its last two octets are
    repeated as the quick check.
    """
    if len(prefix) != algorithm.block_size:
        raise ValueError(f"Prefix must be {algorithm.block_size} bytes")
    mdc_input = prefix + prefix[-2:] + packets + _MDC_HEADER
    payload = mdc_input + hashlib.sha1(mdc_input).digest()
    encryptor = _cfb(algorithm, key).encryptor()
    return bytes([_SEIPD_VERSION]) + encryptor.update(payload) + encryptor.finalize()


def decrypt_integrity_protected(
    algorithm: SymmetricAlgorithm,
    key: bytes,
    body: bytes,
) -> bytes:
    """Decrypt a SEIPD v1 body and return the enclosed packet stream.

    Raises:
        IntegrityError: if the quick check or the MDC does not match.
        PacketError: on an unsupported version or a short body.
    """
    if not body or body[0] != _SEIPD_VERSION:
        raise PacketError("Unsupported integrity protected data packet version")
    block_size = algorithm.block_size
    if len(body) - 1 < block_size + 2 + _MDC_SIZE:
        raise PacketError("Integrity protected data packet too short")

    decryptor = _cfb(algorithm, key).decryptor()
    payload = decryptor.update(body[1:]) + decryptor.finalize()

    if payload[block_size - 2:block_size] != payload[block_size:block_size + 2]:
        raise IntegrityError("Session key quick check failed (wrong passphrase?)")
    if payload[-_MDC_SIZE:-20] != _MDC_HEADER:
        raise IntegrityError("Modification detection code packet missing")
    if not hmac.compare_digest(hashlib.sha1(payload[:-20]).digest(), payload[-20:]):
        raise IntegrityError("Modification detected")
    return payload[block_size + 2:-_MDC_SIZE]


# ----------------------------------------------------------------------
# Tag 11: Literal Data
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class LiteralData:
    TEXT_FORMATS: ClassVar[tuple[str, ...]] = ("t", "u")

    data: bytes
    format: str = "u"
    filename: bytes = b""
    timestamp: int = 0

    @classmethod
    def from_text(cls, text: str, timestamp: int = 0) -> LiteralData:
        """Wrap *text* as UTF-8 literal data with canonical CRLF line endings."""
        return cls(data=text.replace("\n", "\r\n").encode("utf-8"), timestamp=timestamp)

    @classmethod
    def parse(cls, body: bytes) -> LiteralData:
        if len(body) < 2:
            raise PacketError("Truncated literal data packet")
        name_end = 2 + body[1]
        filename = body[2:name_end]
        timestamp = _take(body, name_end, 4)
        return cls(
            data=body[name_end + 4:],
            format=chr(body[0]),
            filename=filename,
            timestamp=int.from_bytes(timestamp, "big"),
        )

    def to_bytes(self) -> bytes:
        return (
            self.format.encode("ascii")
            + bytes([len(self.filename)])
            + self.filename
            + self.timestamp.to_bytes(4, "big")
            + self.data
        )

    def text(self) -> str:
        try:
            decoded = self.data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PacketError(f"Literal data is not valid UTF-8: {exc}") from exc
        if self.format in self.TEXT_FORMATS:
            decoded = decoded.replace("\r\n", "\n")
        return decoded


# ----------------------------------------------------------------------
# Tag 8: Compressed Data
# ----------------------------------------------------------------------


def decompress(body: bytes) -> bytes:
    """Inflate a compressed data packet body into its packet stream."""
    if not body:
        raise PacketError("Empty compressed data packet")
    algorithm = CompressionAlgorithm.parse(body[0])
    payload = body[1:]
    try:
        if algorithm == CompressionAlgorithm.ZIP:
            return zlib.decompress(payload, -15)
        if algorithm == CompressionAlgorithm.ZLIB:
            return zlib.decompress(payload)
        if algorithm == CompressionAlgorithm.BZIP2:
            return bz2.decompress(payload)
    except (zlib.error, OSError, ValueError) as exc:
        raise PacketError(f"Decompression failed: {exc}") from exc
    return payload
