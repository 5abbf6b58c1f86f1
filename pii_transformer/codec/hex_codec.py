import binascii
from typing import ClassVar, Literal

from pii_transformer.codec.exceptions import HexDecodeError
from pii_transformer.logging.logger import Log

OddLengthPolicy = Literal["strict", "truncate"]


class HexCodec:
    """Converts bytes to and from ``\\x``-prefixed lowercase hex text.

    Odd-length input is rejected by default. The ``truncate`` policy drops the
    trailing nibble instead, which is how older envelopes were read.
    """

    MARKER: ClassVar[str] = "\\x"

    def __init__(self, odd_length_policy: OddLengthPolicy = "strict") -> None:
        if odd_length_policy not in ("strict", "truncate"):
            raise ValueError(
                f"Unknown odd length policy '{odd_length_policy}'. "
                "Choose from: ['strict', 'truncate']"
            )
        self._odd_length_policy = odd_length_policy

    def decode(self, text: str) -> bytes:
        """Decode hex text, with or without the marker, into bytes.

        Raises:
            HexDecodeError: on non-hex characters, or odd length under the
                strict policy.
        """
        digits = text[len(self.MARKER):] if text.startswith(self.MARKER) else text
        if len(digits) % 2:
            if self._odd_length_policy == "strict":
                raise HexDecodeError(
                    f"Hex payload has odd length ({len(digits)} digits)"
                )
            Log.warning(f"Dropping trailing digit of odd-length hex payload ({len(digits)} digits)")
            digits = digits[:-1]
        try:
            return binascii.unhexlify(digits)
        except (binascii.Error, ValueError) as exc:
            raise HexDecodeError(f"Invalid hex payload: {exc}") from exc

    def encode(self, data: bytes) -> str:
        """Encode bytes as marker-prefixed lowercase hex."""
        return self.MARKER + data.hex()
