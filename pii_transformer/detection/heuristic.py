"""Advisory check for text that looks like a hex OpenPGP envelope.

Prefix only: it does not validate the hex or the message. Decryption applies
its own stricter header check.
"""

from dataclasses import dataclass, field

ENVELOPE_PREFIX = "\\xc"
SPECIFIC_HEX_PGP = "SPECIFIC_HEX_PGP"


@dataclass(frozen=True)
class PatternInfo:
    name: str
    description: str
    enabled: bool = True


@dataclass(frozen=True)
class FormatAnalysis:
    stats: dict[str, int] = field(default_factory=dict)
    total_matches: int = 0
    has_match: bool = False


AVAILABLE_PATTERNS: tuple[PatternInfo, ...] = (
    PatternInfo(
        name=SPECIFIC_HEX_PGP,
        description="Specific hex PGP format (\\xc30d04070302...)",
        enabled=True,
    ),
)


def matches_envelope_format(text: str) -> bool:
    return text.startswith(ENVELOPE_PREFIX)


def analyze(text: str) -> FormatAnalysis:
    """Count envelope matches in *text* (zero or one)."""
    matches = 1 if matches_envelope_format(text) else 0
    return FormatAnalysis(
        stats={SPECIFIC_HEX_PGP: matches},
        total_matches=matches,
        has_match=bool(matches),
    )


def available_patterns() -> list[PatternInfo]:
    return list(AVAILABLE_PATTERNS)
