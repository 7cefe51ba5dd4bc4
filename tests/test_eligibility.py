"""
Unit tests for the batch eligibility evaluator.
"""

from unittest.mock import MagicMock

import pytest

from careerhub.services.eligibility import (
    batch_label,
    check_profile_eligibility,
    is_eligible,
    normalize_label,
    normalize_labels,
)


class TestBatchLabel:
    """A 3 year span is a lateral entry and starts one year earlier."""

    @pytest.mark.parametrize(
        "start, end, expected",
        [
            (2021, 2025, "2021-2025"),
            (2021, 2024, "2020-2024"),
            (2022, 2025, "2021-2025"),
            (2020, 2022, "2020-2022"),
            (2019, 2024, "2019-2024"),
        ],
    )
    def test_label(self, start, end, expected):
        assert batch_label(start, end) == expected

    def test_numeric_strings_are_accepted(self):
        assert batch_label("2021", "2025") == "2021-2025"

    def test_integral_floats_are_accepted(self):
        assert batch_label(2021.0, 2024.0) == "2020-2024"

    def test_integral_float_strings_are_accepted(self):
        assert batch_label("2021.0", "2025") == "2021-2025"
        assert batch_label(" 2021.0 ", "2024.0") == "2020-2024"

    @pytest.mark.parametrize(
        "start, end",
        [(None, 2025), (2021, None), ("abc", 2025), ("2021.5", 2025), ("", 2025), (True, 2025), (2021.5, 2025)],
    )
    def test_missing_or_bad_years_give_no_label(self, start, end):
        assert batch_label(start, end) is None


class TestNormalize:

    def test_en_dash_becomes_hyphen(self):
        assert normalize_label("2021–2025") == "2021-2025"

    def test_whitespace_is_trimmed(self):
        assert normalize_label("  2021-2025 ") == "2021-2025"

    def test_empty_list(self):
        assert normalize_labels(None) == []
        assert normalize_labels([]) == []


class TestIsEligible:

    def test_four_year_student_matches(self):
        assert is_eligible(2021, 2025, ["2021-2025"]) is True

    def test_lateral_entry_student_does_not_match_same_posting(self):
        assert is_eligible(2021, 2024, ["2021-2025"]) is False

    def test_lateral_entry_student_matches_shifted_label(self):
        assert is_eligible(2021, 2024, ["2020-2024"]) is True

    def test_en_dash_labels_match(self):
        assert is_eligible(2021, 2025, ["2020–2024", "2021–2025"]) is True

    def test_exact_match_only_no_ranges(self):
        assert is_eligible(2022, 2026, ["2021-2025"]) is False

    def test_no_eligibility_list_is_never_eligible(self):
        assert is_eligible(2021, 2025, None) is False
        assert is_eligible(2021, 2025, []) is False

    def test_missing_batch_is_not_eligible(self):
        assert is_eligible(None, None, ["2021-2025"]) is False


class TestCheckProfileEligibility:

    def test_eligible_profile(self):
        profiles = MagicMock()
        profiles.get_by_email.return_value = {"batchStart": 2021, "batchEnd": 2025}
        assert check_profile_eligibility(profiles, "a@college.edu", {"eligibility": ["2021-2025"]}) is True

    def test_missing_profile_is_not_eligible(self):
        profiles = MagicMock()
        profiles.get_by_email.return_value = None
        assert check_profile_eligibility(profiles, "a@college.edu", {"eligibility": ["2021-2025"]}) is False

    def test_fetch_failure_is_not_eligible(self):
        profiles = MagicMock()
        profiles.get_by_email.side_effect = RuntimeError("connection reset")
        assert check_profile_eligibility(profiles, "a@college.edu", {"eligibility": ["2021-2025"]}) is False
