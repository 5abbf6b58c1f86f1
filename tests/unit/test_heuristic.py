import pytest

from pii_transformer.detection.heuristic import (
    FormatAnalysis,
    PatternInfo,
    analyze,
    available_patterns,
    matches_envelope_format,
)


class TestMatchesEnvelopeFormat:
    @pytest.mark.parametrize("text", ["\\xc", "\\xc30d04070302", "\\xcz not hex"])
    def test_matches_marker_followed_by_c(self, text: str) -> None:
        assert matches_envelope_format(text)

    @pytest.mark.parametrize(
        "text", ["", "\\x", "\\xd3", "c30d", "\\XC3", " \\xc3", "hello"]
    )
    def test_rejects_everything_else(self, text: str) -> None:
        assert not matches_envelope_format(text)


class TestAnalyze:
    def test_reports_single_match(self) -> None:
        assert analyze("\\xc30d") == FormatAnalysis(
            stats={"SPECIFIC_HEX_PGP": 1}, total_matches=1, has_match=True
        )

    def test_reports_no_match(self) -> None:
        assert analyze("plain text") == FormatAnalysis(
            stats={"SPECIFIC_HEX_PGP": 0}, total_matches=0, has_match=False
        )


class TestAvailablePatterns:
    def test_lists_single_enabled_pattern(self) -> None:
        assert available_patterns() == [
            PatternInfo(
                name="SPECIFIC_HEX_PGP",
                description="Specific hex PGP format (\\xc30d04070302...)",
                enabled=True,
            )
        ]

    def test_returns_fresh_list(self) -> None:
        patterns = available_patterns()
        patterns.clear()
        assert len(available_patterns()) == 1
