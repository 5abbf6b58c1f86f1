"""String-to-key specifiers (RFC 4880, section 3.7)."""

import hashlib
from dataclasses import dataclass
from typing import ClassVar

from pii_transformer.cipher.openpgp.constants import HashAlgorithm, S2KType
from pii_transformer.cipher.openpgp.exceptions import PacketError

_EXPBIAS = 6
_CHUNK_SIZE = 65536


def decode_count(coded: int) -> int:
    """Expand a one-octet coded iteration count into a byte count."""
    return (16 + (coded & 15)) << ((coded >> 4) + _EXPBIAS)


def encode_count(count: int) -> int:
    """Return the smallest coded count that hashes at least *count* bytes."""
    for coded in range(256):
        if decode_count(coded) >= count:
            return coded
    raise ValueError(f"S2K count {count} exceeds the maximum of {decode_count(255)}")


@dataclass(frozen=True)
class S2K:
    """A parsed S2K specifier that can turn a passphrase into key material."""

    SALT_SIZE: ClassVar[int] = 8

    type: S2KType
    hash_algorithm: HashAlgorithm
    salt: bytes = b""
    coded_count: int = 0

    @property
    def count(self) -> int:
        return decode_count(self.coded_count)

    @classmethod
    def parse(cls, data: bytes, offset: int = 0) -> tuple["S2K", int]:
        """Read a specifier starting at *offset*; return it and the next offset."""
        if offset + 2 > len(data):
            raise PacketError("Truncated S2K specifier")
        s2k_type = S2KType.parse(data[offset])
        hash_algorithm = HashAlgorithm.parse(data[offset + 1])
        offset += 2
        if s2k_type == S2KType.SIMPLE:
            return cls(s2k_type, hash_algorithm), offset

        salt = data[offset:offset + cls.SALT_SIZE]
        if len(salt) != cls.SALT_SIZE:
            raise PacketError("Truncated S2K salt")
        offset += cls.SALT_SIZE
        if s2k_type == S2KType.SALTED:
            return cls(s2k_type, hash_algorithm, salt), offset

        if offset >= len(data):
            raise PacketError("Truncated S2K iteration count")
        return cls(s2k_type, hash_algorithm, salt, data[offset]), offset + 1

    def to_bytes(self) -> bytes:
        out = bytes([self.type, self.hash_algorithm])
        if self.type != S2KType.SIMPLE:
            out += self.salt
        if self.type == S2KType.ITERATED:
            out += bytes([self.coded_count])
        return out

    def derive_key(self, passphrase: bytes, key_size: int) -> bytes:
        """Derive *key_size* bytes of key material from *passphrase*.

        When one digest is shorter than the key, further hash contexts are
        preloaded with one more zero octet each and their outputs appended.
        """
        key = b""
        preload = 0
        while len(key) < key_size:
            digest = hashlib.new(self.hash_algorithm.hashlib_name)
            digest.update(b"\x00" * preload)
            self._feed(digest, passphrase)
            key += digest.digest()
            preload += 1
        return key[:key_size]

    def _feed(self, digest: "hashlib._Hash", passphrase: bytes) -> None:
        if self.type == S2KType.SIMPLE:
            digest.update(passphrase)
            return
        data = self.salt + passphrase
        if self.type == S2KType.SALTED:
            digest.update(data)
            return

        # Iterated: hash the repeated salt+passphrase stream, cut at count bytes.
        remaining = max(self.count, len(data))
        chunk = data * max(1, _CHUNK_SIZE // len(data))
        while remaining >= len(chunk):
            digest.update(chunk)
            remaining -= len(chunk)
        digest.update(chunk[:remaining])
