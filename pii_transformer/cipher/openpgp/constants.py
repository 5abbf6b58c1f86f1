"""Algorithm and packet identifiers from RFC 4880."""

from enum import IntEnum

from cryptography.hazmat.decrepit.ciphers.algorithms import Camellia
from cryptography.hazmat.primitives.ciphers import CipherAlgorithm, algorithms

from pii_transformer.cipher.openpgp.exceptions import PacketError


class _Registry(IntEnum):
    @classmethod
    def parse(cls, value: int):  # type: ignore[no-untyped-def]
        try:
            return cls(value)
        except ValueError:
            raise PacketError(f"Unsupported {cls._label()} {value}") from None

    @classmethod
    def from_name(cls, name: str):  # type: ignore[no-untyped-def]
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown {cls._label()} '{name}'. "
                f"Choose from: {[m.name.lower() for m in cls]}"
            ) from None

    @classmethod
    def _label(cls) -> str:
        return cls.__name__


class PacketTag(IntEnum):
    SKESK = 3
    COMPRESSED = 8
    SED = 9
    MARKER = 10
    LITERAL = 11
    SEIPD = 18
    MDC = 19


class SymmetricAlgorithm(_Registry):
    AES128 = 7
    AES192 = 8
    AES256 = 9
    CAMELLIA128 = 11
    CAMELLIA192 = 12
    CAMELLIA256 = 13

    @classmethod
    def _label(cls) -> str:
        return "symmetric algorithm"

    @property
    def key_size(self) -> int:
        return {7: 16, 8: 24, 9: 32, 11: 16, 12: 24, 13: 32}[self.value]

    @property
    def block_size(self) -> int:
        return 16

    def primitive(self, key: bytes) -> CipherAlgorithm:
        if self.name.startswith("AES"):
            return algorithms.AES(key)
        return Camellia(key)


class HashAlgorithm(_Registry):
    MD5 = 1
    SHA1 = 2
    SHA256 = 8
    SHA384 = 9
    SHA512 = 10
    SHA224 = 11

    @classmethod
    def _label(cls) -> str:
        return "hash algorithm"

    @property
    def hashlib_name(self) -> str:
        return self.name.lower()


class S2KType(_Registry):
    SIMPLE = 0
    SALTED = 1
    ITERATED = 3

    @classmethod
    def _label(cls) -> str:
        return "S2K type"


class CompressionAlgorithm(_Registry):
    UNCOMPRESSED = 0
    ZIP = 1
    ZLIB = 2
    BZIP2 = 3

    @classmethod
    def _label(cls) -> str:
        return "compression algorithm"
