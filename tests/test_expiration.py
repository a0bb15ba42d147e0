"""
Tests for the expiration classifier.

Tests cover:
- Boundary days (yesterday, today, threshold, threshold + 1)
- Records without a date are left untouched
- Idempotence
- Sweeps over standard and additional coverages
"""
import pytest

from coicheck.engine import (
    annotate_coverage,
    check_all_coverages_expiration,
    check_coverage_expiration,
    classify_days,
    classify_expiration,
)
from coicheck.models import ExtractedCoverage

from tests.conftest import TODAY, make_additional, make_coverage


class TestClassifyExpiration:
    """Tests for single-record classification."""

    @pytest.mark.parametrize(
        "expires_in,expired,expiring_soon",
        [
            (-1, True, False),
            (0, False, True),
            (10, False, True),
            (30, False, True),
            (31, False, False),
            (365, False, False),
        ],
    )
    def test_boundaries(self, expires_in, expired, expiring_soon):
        """Negative days expire; 0..threshold is expiring soon."""
        record = make_coverage(expires_in=expires_in)

        check = classify_expiration(record, 30, TODAY)

        assert check.expired is expired
        assert check.expiring_soon is expiring_soon
        assert check.days_until == expires_in
        assert record.expired is expired
        assert record.expiring_soon is expiring_soon

    def test_no_date_leaves_flags_unset(self):
        """Without an expiration date nothing is classified."""
        record = make_coverage()

        check = classify_expiration(record, 30, TODAY)

        assert not check.classified
        assert record.expired is None
        assert record.expiring_soon is None

    def test_absent_record(self):
        """A missing coverage line is simply not classified."""
        check = classify_expiration(None, 30, TODAY)
        assert check.classified is False
        assert check.expired is False

    def test_idempotent(self):
        """Classifying twice with the same day gives the same flags."""
        record = make_coverage(expires_in=12)

        first = classify_expiration(record, 30, TODAY)
        second = classify_expiration(record, 30, TODAY)

        assert first == second
        assert (record.expired, record.expiring_soon) == (False, True)

    def test_reclassification_clears_stale_flags(self):
        """A renewed policy loses its old expired flag."""
        record = make_coverage(expires_in=200)
        record.expired = True

        classify_expiration(record, 30, TODAY)

        assert record.expired is False
        assert record.expiring_soon is False

    def test_custom_threshold(self):
        """The threshold is a parameter, not a constant."""
        assert classify_days(45, threshold_days=60).expiring_soon is True
        assert classify_days(45, threshold_days=30).expiring_soon is False

    def test_check_does_not_mutate(self):
        """check_coverage_expiration only reports."""
        record = make_coverage(expires_in=-3)

        check = check_coverage_expiration(record, 30, TODAY)

        assert check.expired is True
        assert record.expired is None


class TestCoverageSweeps:
    """Tests for summaries over a whole certificate."""

    def test_summary_over_vendor_lines_and_additional(self):
        """GL/auto/WC/EL plus additional coverages are summarized."""
        coverage = ExtractedCoverage(
            general_liability=make_coverage(expires_in=100),
            workers_comp=make_coverage("Statutory", expires_in=20),
        )
        additional = [make_additional("Cyber Liability", expires_in=-2)]

        summary = check_all_coverages_expiration(coverage, additional, 30, TODAY)

        assert summary.has_expired is True
        assert summary.has_expiring_soon is True
        assert set(summary.details) == {"general_liability", "workers_comp", "additional_0"}
        assert coverage.general_liability.expired is None

    def test_summary_skips_other_lines(self):
        """Umbrella is not one of the summarized vendor lines."""
        coverage = ExtractedCoverage(umbrella=make_coverage(expires_in=-10))

        summary = check_all_coverages_expiration(coverage, [], 30, TODAY)

        assert summary.has_expired is False
        assert summary.details == {}

    def test_annotate_sets_flags_in_place(self):
        """annotate_coverage flags every present line and additional coverage."""
        coverage = ExtractedCoverage(
            general_liability=make_coverage(expires_in=5),
            umbrella=make_coverage(expires_in=-1),
            auto_liability=make_coverage(),
        )
        additional = [make_additional("Liquor Liability", expires_in=90)]

        summary = annotate_coverage(coverage, additional, 30, TODAY)

        assert coverage.general_liability.expiring_soon is True
        assert coverage.umbrella.expired is True
        assert coverage.auto_liability.expired is None
        assert additional[0].expired is False
        assert summary.has_expired and summary.has_expiring_soon
