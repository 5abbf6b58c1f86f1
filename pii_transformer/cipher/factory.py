from typing import ClassVar

from pii_transformer.cipher.base import BaseCipher
from pii_transformer.cipher.openpgp.constants import HashAlgorithm, SymmetricAlgorithm
from pii_transformer.cipher.openpgp_adapter import OpenPgpSymmetricAdapter
from pii_transformer.codec.hex_codec import HexCodec
from pii_transformer.config.settings import Settings


class CipherFactory:
    """Creates the configured cipher adapter."""

    ENGINES: ClassVar[tuple[str, ...]] = ("openpgp",)

    @classmethod
    def create(cls, settings: Settings) -> BaseCipher:
        engine = settings.cipher_engine.lower()
        if engine not in cls.ENGINES:
            raise ValueError(
                f"Unknown cipher engine '{engine}'. Choose from: {list(cls.ENGINES)}"
            )
        return OpenPgpSymmetricAdapter(
            codec=HexCodec(settings.hex_odd_length_policy),
            algorithm=SymmetricAlgorithm.from_name(settings.openpgp_cipher),
            s2k_hash=HashAlgorithm.from_name(settings.openpgp_s2k_hash),
            s2k_count=settings.openpgp_s2k_count,
        )
