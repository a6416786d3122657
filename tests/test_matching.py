import pytest

from qdacoverage.core.matching import PositionStrategy, SubstringStrategy, build_strategy
from qdacoverage.errors import (
    ConfigurationError,
    MalformedRecordError,
    PositionConsistencyError,
    SegmentNotFoundWarning,
)
from qdacoverage.models import AnnotationRecord, Position, SentenceStats


def record(segment, start=None, end=None, start_raw="", end_raw="", row_number=1):
    return AnnotationRecord(
        segment=segment,
        row_number=row_number,
        start=start,
        end=end,
        start_raw=start_raw,
        end_raw=end_raw,
    )


class TestSubstringStrategy:
    def test_build(self, interview_text):
        strategy = build_strategy("substring", interview_text)
        assert isinstance(strategy, SubstringStrategy)
        assert "\r" not in strategy.analyzer.text
        assert strategy.get_sentence_data() == SentenceStats(4, 0)

    def test_apply(self, interview_text):
        strategy = build_strategy("substring", interview_text)
        assert strategy.apply(record("agreed the plan"))
        assert strategy.get_sentence_data() == SentenceStats(4, 1)

    def test_segment_with_crlf(self, interview_text):
        strategy = build_strategy("substring", interview_text)
        assert strategy.apply(record("Monday.\r\nEveryone"))
        assert strategy.get_sentence_data() == SentenceStats(4, 2)

    def test_not_found(self, interview_text):
        strategy = build_strategy("substring", interview_text)
        with pytest.warns(SegmentNotFoundWarning):
            assert not strategy.apply(record("never said"))
        assert strategy.get_sentence_data() == SentenceStats(4, 0)

    def test_blank_segment_not_found(self, interview_text):
        strategy = build_strategy("substring", interview_text)
        with pytest.warns(SegmentNotFoundWarning):
            assert not strategy.apply(record("  "))
        assert strategy.analyzer.covered_characters == 0

    def test_repeats_match_first_occurrence_by_default(self):
        strategy = build_strategy("substring", "Yes. No. Yes.")
        strategy.apply(record("Yes"))
        strategy.apply(record("Yes"))
        assert strategy.get_sentence_data() == SentenceStats(3, 1)

    def test_track_repeats(self):
        strategy = build_strategy("substring", "Yes. No. Yes.", track_repeats=True)
        strategy.apply(record("Yes"))
        strategy.apply(record("Yes"))
        assert strategy.get_sentence_data() == SentenceStats(3, 2)

    def test_track_repeats_falls_back_to_first(self):
        strategy = build_strategy("substring", "Yes. No. Yes.", track_repeats=True)
        for _ in range(3):
            assert strategy.apply(record("Yes"))
        assert strategy.get_sentence_data() == SentenceStats(3, 2)


class TestPositionStrategy:
    def test_build(self, paginated_text):
        strategy = build_strategy("position", paginated_text)
        assert isinstance(strategy, PositionStrategy)
        assert len(strategy.document) == 2

    def test_apply_parsed_positions(self, paginated_text):
        strategy = build_strategy("position", paginated_text)
        assert strategy.apply(record("Then", start=Position(2, 64), end=Position(2, 67)))
        assert strategy.get_sentence_data() == SentenceStats(4, 1)

    def test_apply_raw_positions(self, paginated_text):
        strategy = build_strategy("position", paginated_text)
        assert strategy.apply(record("It has", start_raw="1: 23", end_raw="1: 28"))
        assert strategy.get_sentence_data() == SentenceStats(4, 1)

    def test_unparseable_position(self, paginated_text):
        strategy = build_strategy("position", paginated_text)
        with pytest.raises(MalformedRecordError) as excinfo:
            strategy.apply(record("It has", start_raw="n/a", end_raw="1: 28", row_number=7))
        assert excinfo.value.row_number == 7

    def test_page_mismatch(self, paginated_text):
        strategy = build_strategy("position", paginated_text)
        with pytest.raises(PositionConsistencyError):
            strategy.apply(record("x", start=Position(1, 40), end=Position(2, 50)))
        assert strategy.get_sentence_data() == SentenceStats(4, 0)


def test_unknown_strategy():
    with pytest.raises(ConfigurationError):
        build_strategy("fuzzy", "Text.")
