from dataclasses import dataclass, field

from pii_transformer.cipher.exceptions import FailureKind

PGP_DECRYPTED = "PGP_DECRYPTED"
DECRYPTION_ERROR = "DECRYPTION_ERROR"
PGP_ENCRYPTED = "PGP_ENCRYPTED"
ENCRYPTION_ERROR = "ENCRYPTION_ERROR"
SHA256_HASHED = "SHA256_HASHED"


@dataclass(frozen=True)
class CipherSuccess:
    """Crypto stage produced text."""

    text: str


@dataclass(frozen=True)
class CipherFailure:
    """Crypto stage failed; *message* is the adapter's error text."""

    kind: FailureKind
    message: str


CipherOutcome = CipherSuccess | CipherFailure


@dataclass
class TransformationResult:
    """Output of one forward or backward transformation."""

    original_text: str
    transformed_text: str
    hashed_text: str | None = None
    detected_pii_types: list[str] = field(default_factory=list)
    transformation_count: int = 0
    outcome: CipherOutcome | None = None

    @property
    def succeeded(self) -> bool:
        """True unless the crypto stage ran and failed."""
        return not isinstance(self.outcome, CipherFailure)

    def to_dict(self) -> dict[str, object]:
        """Serialize with the camelCase keys used by the UI layer."""
        payload: dict[str, object] = {
            "originalText": self.original_text,
            "transformedText": self.transformed_text,
            "detectedPiiTypes": list(self.detected_pii_types),
            "transformationCount": self.transformation_count,
        }
        if self.hashed_text is not None:
            payload["hashedText"] = self.hashed_text
        return payload
