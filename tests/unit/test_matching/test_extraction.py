"""Tests for the rule-cascade field extractor."""

from __future__ import annotations

import pytest

from gamecatalog.matching.extraction import (
    ExtractionOutcome,
    FieldExtractor,
    FieldKind,
    LabeledValueRule,
    OutcomeStatus,
    PatternRule,
    extract_labeled_value,
)

PADDING = "<!-- " + "x" * 1200 + " -->"

SCORE_RULES = (
    PatternRule("json_ld", r'"ratingValue":\s*(\d+)'),
    PatternRule("score_span", r'<span class="score">(\d+)</span>'),
)


def _score_extractor(**kwargs) -> FieldExtractor:
    return FieldExtractor(SCORE_RULES, FieldKind.SCORE, not_rated_markers=("tbd", "not yet rated"), **kwargs)


class TestExtractionOutcome:
    """Tests for the ExtractionOutcome constructors."""

    def test_found(self) -> None:
        outcome = ExtractionOutcome.found(85, source_year="2021", rule="json_ld")
        assert outcome.is_found
        assert outcome.value == 85
        assert outcome.source_year == "2021"

    @pytest.mark.parametrize(
        "outcome",
        [ExtractionOutcome.not_found(), ExtractionOutcome.ambiguous(), ExtractionOutcome.unavailable()],
    )
    def test_not_found_variants(self, outcome: ExtractionOutcome) -> None:
        assert not outcome.is_found
        assert outcome.value is None

    def test_frozen(self) -> None:
        outcome = ExtractionOutcome.not_found()
        with pytest.raises(AttributeError):
            outcome.value = 3  # type: ignore[misc]


class TestPatternRule:
    """Tests for PatternRule."""

    def test_returns_first_group_stripped(self) -> None:
        rule = PatternRule("main", r"<div>Main Story</div><div>([^<]+)</div>")
        assert rule("<div>Main Story</div><div> 12 Hours </div>") == "12 Hours"

    def test_no_match(self) -> None:
        assert PatternRule("json_ld", r'"ratingValue":(\d+)')("nothing here") is None

    def test_case_insensitive_by_default(self) -> None:
        assert PatternRule("meta", r'"metascore":\s*(\d+)')('"METASCORE": 90') == "90"


class TestScoreExtraction:
    """Tests for FieldExtractor with scores."""

    def test_first_rule_wins(self) -> None:
        content = '{"ratingValue":85}<span class="score">70</span>' + PADDING
        outcome = _score_extractor().extract(content, source_year="2021")
        assert outcome.status is OutcomeStatus.FOUND
        assert outcome.value == 85
        assert outcome.rule == "json_ld"
        assert outcome.source_year == "2021"

    def test_out_of_range_falls_through(self) -> None:
        content = '{"ratingValue":150}<span class="score">88</span>' + PADDING
        outcome = _score_extractor().extract(content)
        assert outcome.value == 88
        assert outcome.rule == "score_span"

    def test_zero_with_not_rated_marker_is_ambiguous(self) -> None:
        content = '{"ratingValue":0} Metascore: TBD' + PADDING
        assert _score_extractor().extract(content).status is OutcomeStatus.AMBIGUOUS

    def test_zero_with_marker_stops_the_cascade(self) -> None:
        content = '{"ratingValue":0}<span class="score">77</span> not yet rated' + PADDING
        outcome = _score_extractor().extract(content)
        assert outcome.status is OutcomeStatus.AMBIGUOUS
        assert outcome.value is None

    def test_zero_without_marker_is_found(self) -> None:
        outcome = _score_extractor().extract('{"ratingValue":0}' + PADDING)
        assert outcome.is_found
        assert outcome.value == 0

    def test_no_value_on_full_page_is_not_found(self) -> None:
        assert _score_extractor().extract("<html>" + PADDING + "</html>").status is OutcomeStatus.NOT_FOUND

    def test_no_value_on_tiny_page_is_unavailable(self) -> None:
        assert _score_extractor().extract("<html></html>").status is OutcomeStatus.UNAVAILABLE
        assert _score_extractor().extract(None).status is OutcomeStatus.UNAVAILABLE

    def test_value_on_tiny_page_is_found(self) -> None:
        assert _score_extractor().extract('{"ratingValue":91}').value == 91

    def test_min_content_length_configurable(self) -> None:
        extractor = _score_extractor(min_content_length=5)
        assert extractor.extract("<html></html>").status is OutcomeStatus.NOT_FOUND

    def test_failing_rule_is_skipped(self) -> None:
        def broken(content: str) -> str | None:
            raise ValueError("boom")

        extractor = FieldExtractor([broken, SCORE_RULES[0]], FieldKind.SCORE)
        assert extractor.extract('{"ratingValue":64}' + PADDING).value == 64


class TestDurationExtraction:
    """Tests for FieldExtractor with durations."""

    def test_parses_hours(self) -> None:
        extractor = FieldExtractor(
            [PatternRule("h5", r"<h5>Main Story</h5>\s*<div>([^<]+)</div>")],
            FieldKind.DURATION,
        )
        outcome = extractor.extract("<h5>Main Story</h5><div>26½ Hours</div>" + PADDING)
        assert outcome.value == pytest.approx(26.5)

    def test_unparseable_text_skips_rule(self) -> None:
        extractor = FieldExtractor(
            [
                PatternRule("h5", r"<h5>Main Story</h5>\s*<div>([^<]+)</div>"),
                PatternRule("loose", r"Main Story[\s\S]*?(\d+(?:\.5|½)?\s*Hours?)"),
            ],
            FieldKind.DURATION,
        )
        content = "<h5>Main Story</h5><div>--</div><p>12 Hours</p>" + PADDING
        outcome = extractor.extract(content)
        assert outcome.value == pytest.approx(12.0)
        assert outcome.rule == "loose"

    def test_labeled_value_rule(self) -> None:
        extractor = FieldExtractor([LabeledValueRule("labeled", ("Main Story", "Solo"))], FieldKind.DURATION)
        content = "<ul><li><h4>Solo</h4><h5>8 Hours</h5></li></ul>" + PADDING
        assert extractor.extract(content).value == pytest.approx(8.0)

    def test_out_of_range_duration_not_found(self) -> None:
        extractor = FieldExtractor([PatternRule("h5", r"<h5>Main Story</h5>\s*<div>([^<]+)</div>")], FieldKind.DURATION)
        outcome = extractor.extract("<h5>Main Story</h5><div>250 Hours</div>" + PADDING)
        assert outcome.status is OutcomeStatus.NOT_FOUND


class TestExtractLabeledValue:
    """Tests for extract_labeled_value()."""

    def test_next_sibling(self) -> None:
        html = "<div><div>Main Story</div><div>12½ Hours</div></div>"
        assert extract_labeled_value(html, ("Main Story",)) == "12½ Hours"

    def test_secondary_label(self) -> None:
        html = "<ul><li><h4>Solo</h4><h5>8 Hours</h5></li></ul>"
        assert extract_labeled_value(html, ("Main Story", "Solo")) == "8 Hours"

    def test_primary_label_preferred(self) -> None:
        html = "<div><h4>Solo</h4><h5>8 Hours</h5><h4>Main Story</h4><h5>11 Hours</h5></div>"
        assert extract_labeled_value(html, ("Main Story", "Solo")) == "11 Hours"

    def test_value_in_following_cell(self) -> None:
        html = "<table><tr><td><b>Main Story</b></td><td>10 Hours</td></tr></table>"
        assert extract_labeled_value(html, ("Main Story",)) == "10 Hours"

    def test_label_absent(self) -> None:
        assert extract_labeled_value("<div>Multiplayer</div><div>5 Hours</div>", ("Main Story",)) is None

    def test_empty_content(self) -> None:
        assert extract_labeled_value("", ("Main Story",)) is None
