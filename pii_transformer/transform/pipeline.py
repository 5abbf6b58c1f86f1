from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from pii_transformer.transform.models import CipherOutcome, TransformationResult


@dataclass(slots=True)
class TransformContext:
    original_text: str
    passphrase: str | None = None
    transformed_text: str = ""
    hashed_text: str | None = None
    labels: list[str] = field(default_factory=list)
    stage_count: int = 0
    outcome: CipherOutcome | None = None

    def to_result(self) -> TransformationResult:
        return TransformationResult(
            original_text=self.original_text,
            transformed_text=self.transformed_text,
            hashed_text=self.hashed_text,
            detected_pii_types=list(self.labels),
            transformation_count=self.stage_count,
            outcome=self.outcome,
        )


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: TransformContext) -> TransformContext:
        raise NotImplementedError
