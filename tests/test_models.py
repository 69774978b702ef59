"""Tests for board data records and lenient JSON coercion."""

import logging

import pytest
from pydantic import ValidationError

from src.heatmap.models import (
    AngleData,
    BoulderInfo,
    FilterSelection,
    HoldLayoutEntry,
    QuantileCutoffs,
    angle_boulders,
    angle_holds,
    grade_count,
    parse_angle_data,
    parse_grade_counts,
    parse_hold_layout,
    parse_usage_map,
)


class TestAccessors:
    """Tests for the get-or-zero accessors."""

    def test_grade_count_present(self) -> None:
        """Present grades should return their count."""
        assert grade_count({"V3": 4}, "V3") == 4

    def test_grade_count_absent(self) -> None:
        """Absent grades should count as zero."""
        assert grade_count({"V3": 4}, "V5") == 0

    def test_grade_count_none(self) -> None:
        """Missing grade counts should count as zero."""
        assert grade_count(None, "V3") == 0

    def test_angle_holds_and_boulders_missing_angle(self) -> None:
        """Unknown angles should give empty mappings."""
        assert angle_holds({}, "40") == {}
        assert angle_boulders({}, "40") == {}


class TestRecords:
    """Tests for the record types."""

    def test_angle_data_defaults_empty(self) -> None:
        """Both sections should default to empty mappings."""
        data = AngleData()
        assert data.holds == {}
        assert data.boulders == {}

    def test_filter_selection_defaults_to_all(self) -> None:
        """Both filters should default to 'all'."""
        selection = FilterSelection()
        assert selection.angle == "all"
        assert selection.grade == "all"

    def test_filter_selection_is_frozen(self) -> None:
        """Selections should be immutable."""
        selection = FilterSelection(angle="40")
        with pytest.raises(ValidationError):
            selection.angle = "20"  # type: ignore[misc]

    def test_boulder_info_ignores_extra_fields(self) -> None:
        """Extra boulder fields should be ignored."""
        info = BoulderInfo.model_validate({"grade": "V4", "name": "Crimps"})
        assert info.grade == "V4"

    def test_quantile_cutoffs_default_zero(self) -> None:
        """Cutoffs should default to all zeros and index like a tuple."""
        cutoffs = QuantileCutoffs()
        assert cutoffs == (0, 0, 0, 0, 0)
        assert QuantileCutoffs(1, 2, 3, 4, 5)[4] == 5


class TestParseGradeCounts:
    """Tests for parse_grade_counts function."""

    def test_valid_counts(self) -> None:
        """Valid counts should be kept."""
        assert parse_grade_counts({"V3": 2, "V4": 0}) == {"V3": 2, "V4": 0}

    def test_integral_floats_coerced(self) -> None:
        """Whole-number floats should become ints."""
        assert parse_grade_counts({"V3": 2.0}) == {"V3": 2}

    @pytest.mark.parametrize("value", [-1, 1.5, "3", None, True, [1]])
    def test_invalid_counts_dropped(self, value: object) -> None:
        """Negative, fractional and non-numeric counts should be dropped."""
        assert parse_grade_counts({"V3": value, "V4": 1}) == {"V4": 1}

    def test_invalid_count_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Dropped counts should be logged as warnings."""
        with caplog.at_level(logging.WARNING, logger="src.heatmap.models"):
            parse_grade_counts({"V3": "many"})
        assert "Skipping invalid grade count" in caplog.text

    def test_non_mapping_is_empty(self) -> None:
        """Anything but an object should give no counts."""
        assert parse_grade_counts([1, 2]) == {}


class TestParseUsageMap:
    """Tests for parse_usage_map and parse_angle_data."""

    def test_parses_nested_structure(self) -> None:
        """Holds and boulders should be parsed into records."""
        usage_map = parse_usage_map(
            {
                "40": {
                    "holds": {"1133": {"V3": 2}},
                    "boulders": {"u1": {"grade": "V3", "setter": "x"}},
                }
            }
        )
        assert usage_map["40"].holds == {"1133": {"V3": 2}}
        assert usage_map["40"].boulders == {"u1": BoulderInfo(grade="V3")}

    def test_hold_ids_normalised_to_strings(self) -> None:
        """Integer hold ids should become strings."""
        data = parse_angle_data({"holds": {1133: {"V3": 1}}})
        assert list(data.holds) == ["1133"]

    def test_missing_sections_are_empty(self) -> None:
        """Angles without holds or boulders should be empty."""
        data = parse_angle_data({})
        assert data == AngleData()

    def test_malformed_sections_are_empty(self) -> None:
        """Sections of the wrong type should be treated as empty."""
        data = parse_angle_data({"holds": [1, 2], "boulders": "none"})
        assert data == AngleData()

    def test_boulder_without_grade_kept(self) -> None:
        """Boulder records lacking a string grade should be kept ungraded."""
        data = parse_angle_data({"boulders": {"u1": {"grade": 5}, "u2": "x"}})
        assert data.boulders == {"u1": BoulderInfo(), "u2": BoulderInfo()}

    def test_non_mapping_angle_is_empty(self) -> None:
        """An angle whose value is not an object should be empty."""
        assert parse_usage_map({"40": None}) == {"40": AngleData()}

    def test_non_mapping_root_is_empty(self) -> None:
        """A root that is not an object should give an empty map."""
        assert parse_usage_map([]) == {}


class TestParseHoldLayout:
    """Tests for parse_hold_layout function."""

    def test_parses_entries_in_order(self) -> None:
        """Entries should be parsed in sequence order per image."""
        layout = parse_hold_layout({"a.png": [[1, 2, 4, 8], ["H2", None, 5.5, 6]]})
        assert layout["a.png"] == [
            HoldLayoutEntry(hold_id="1", mirrored_hold_id="2", x=4.0, y=8.0),
            HoldLayoutEntry(hold_id="H2", mirrored_hold_id=None, x=5.5, y=6.0),
        ]

    def test_whole_number_float_ids_match_integer_keys(self) -> None:
        """Float ids like 1090.0 should normalise to the key "1090"."""
        layout = parse_hold_layout({"a.png": [[1090.0, 1133.0, 8, 100], [7.5, 2, 1, 1]]})
        first, second = layout["a.png"]
        assert first.hold_id == "1090"
        assert first.mirrored_hold_id == "1133"
        assert second.hold_id == "7.5"

    @pytest.mark.parametrize(
        "entry",
        [[1, 2, 3], [1, 2, "x", 4], [None, 2, 3, 4], "1,2,3,4", {"id": 1}],
    )
    def test_malformed_entries_skipped(self, entry: object) -> None:
        """Short, non-numeric and non-list entries should be skipped."""
        layout = parse_hold_layout({"a.png": [entry, [9, 10, 1, 1]]})
        assert [e.hold_id for e in layout["a.png"]] == ["9"]

    def test_non_list_image_is_empty(self) -> None:
        """An image whose entries are not a list should have no holds."""
        assert parse_hold_layout({"a.png": None}) == {"a.png": []}

    def test_non_mapping_root_is_empty(self) -> None:
        """A root that is not an object should give an empty layout."""
        assert parse_hold_layout("layout") == {}
