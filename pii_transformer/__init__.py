from pii_transformer.detection.heuristic import (
    analyze,
    available_patterns,
    matches_envelope_format,
)
from pii_transformer.transform.models import TransformationResult
from pii_transformer.transform.transformer import (
    Transformer,
    backward_transform,
    build_transformer,
    forward_transform,
)

__all__ = [
    "TransformationResult",
    "Transformer",
    "analyze",
    "available_patterns",
    "backward_transform",
    "build_transformer",
    "forward_transform",
    "matches_envelope_format",
]
