"""
Tests for FieldComplianceEvaluator.

Tests cover:
- Numeric limit checks (below, missing, zero requirement, expiration)
- Boolean endorsement checks
- Statutory workers compensation
- Named custom coverages
- Currency formatting
"""
import pytest

from coicheck.engine import FieldComplianceEvaluator, find_additional_coverage, format_currency
from coicheck.models import (
    CustomCoverageRequirement,
    FieldStatus,
    IssueType,
)

from tests.conftest import TODAY, days_from_today, make_additional, make_coverage


GL_LABEL = "General Liability (Per Occurrence)"


@pytest.fixture
def evaluator():
    return FieldComplianceEvaluator(threshold_days=30, today=TODAY)


# =============================================================================
# Currency
# =============================================================================

class TestFormatCurrency:
    """Tests for whole-dollar USD formatting."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (1_000_000, "$1,000,000"),
            (500_000, "$500,000"),
            (0, "$0"),
            (999.5, "$1,000"),
            (1234.4, "$1,234"),
            (-1000, "-$1,000"),
        ],
    )
    def test_formats(self, amount, expected):
        assert format_currency(amount) == expected

    def test_absent(self):
        assert format_currency(None) == "N/A"


# =============================================================================
# Numeric Limits
# =============================================================================

class TestCheckLimit:
    """Tests for the numeric-limit mode."""

    def test_below_required(self, evaluator):
        """$500k against $1M is non-compliant with an error."""
        field = evaluator.check_limit("gl_occurrence", GL_LABEL, 1_000_000, 500_000, None)

        assert field.status == FieldStatus.NON_COMPLIANT
        assert len(evaluator.issues) == 1
        issue = evaluator.issues[0]
        assert issue.type == IssueType.ERROR
        assert issue.message == f"{GL_LABEL} $500,000 below required $1,000,000"

    def test_meets_required(self, evaluator):
        """Equal to the requirement is compliant."""
        field = evaluator.check_limit("gl_occurrence", GL_LABEL, 1_000_000, 1_000_000, None)

        assert field.status == FieldStatus.COMPLIANT
        assert evaluator.issues == []

    def test_missing_actual(self, evaluator):
        """No amount on the certificate reads as not found."""
        field = evaluator.check_limit("umbrella", "Umbrella / Excess Liability", 2_000_000, None, None)

        assert field.status == FieldStatus.NON_COMPLIANT
        assert field.actual == 0
        assert evaluator.issues[0].message == (
            "Umbrella / Excess Liability not found on COI (required $2,000,000)"
        )

    def test_non_numeric_actual_is_missing(self, evaluator):
        """Text amounts cannot satisfy a numeric limit."""
        field = evaluator.check_limit("umbrella", "Umbrella", 1_000_000, "See attached", None)

        assert field.status == FieldStatus.NON_COMPLIANT
        assert "not found on COI" in evaluator.issues[0].message

    def test_expiring_soon_not_downgraded(self, evaluator):
        """Sufficient coverage expiring in 10 days stays expiring_soon."""
        field = evaluator.check_limit(
            "gl_occurrence", GL_LABEL, 1_000_000, 1_000_000, days_from_today(10)
        )

        assert field.status == FieldStatus.EXPIRING_SOON
        assert len(evaluator.issues) == 1
        assert evaluator.issues[0].type == IssueType.WARNING
        assert evaluator.issues[0].message == f"{GL_LABEL} expiring in 10 days"

    def test_expiring_soon_then_below(self, evaluator):
        """Expiring soon does not short-circuit the amount check."""
        field = evaluator.check_limit(
            "gl_occurrence", GL_LABEL, 1_000_000, 500_000, days_from_today(10)
        )

        assert field.status == FieldStatus.NON_COMPLIANT
        assert [i.type for i in evaluator.issues] == [IssueType.WARNING, IssueType.ERROR]

    def test_expired_short_circuits(self, evaluator):
        """Expired coverage reports one critical issue and skips the amount."""
        field = evaluator.check_limit(
            "gl_occurrence", GL_LABEL, 1_000_000, 500_000, days_from_today(-5)
        )

        assert field.status == FieldStatus.EXPIRED
        assert len(evaluator.issues) == 1
        assert evaluator.issues[0].type == IssueType.CRITICAL
        assert evaluator.issues[0].message == f"{GL_LABEL} policy expired"
        assert evaluator.fields == [field]

    def test_expired_sufficient_amount(self, evaluator):
        """Scenario: $1M vs $1M, expired five days ago."""
        field = evaluator.check_limit(
            "gl_occurrence", GL_LABEL, 1_000_000, 1_000_000, days_from_today(-5)
        )

        assert field.status == FieldStatus.EXPIRED
        assert [i.type for i in evaluator.issues] == [IssueType.CRITICAL]

    def test_expires_today_is_expiring(self, evaluator):
        """Day zero is expiring soon, not expired."""
        field = evaluator.check_limit("gl_occurrence", GL_LABEL, 1, 1, TODAY)

        assert field.status == FieldStatus.EXPIRING_SOON
        assert evaluator.issues[0].message == f"{GL_LABEL} expiring in 0 days"

    @pytest.mark.parametrize("required", [None, 0, -100])
    def test_zero_requirement_never_non_compliant(self, evaluator, required):
        """A requirement of zero or less means not required."""
        field = evaluator.check_limit("umbrella", "Umbrella", required, 5_000_000, None)

        assert field.status == FieldStatus.NOT_REQUIRED
        assert field.required is None
        assert field.actual == 5_000_000
        assert evaluator.issues == []

    @pytest.mark.parametrize("required", [None, 0, -100])
    def test_zero_requirement_without_coverage_is_omitted(self, evaluator, required):
        """Nothing required, nothing found: no field at all."""
        assert evaluator.check_limit("umbrella", "Umbrella", required, None, None) is None
        assert evaluator.fields == []
        assert evaluator.issues == []

    def test_not_required_ignores_expiration(self, evaluator):
        """An expired line that isn't required produces no issue."""
        field = evaluator.check_limit("umbrella", "Umbrella", 0, 1_000_000, days_from_today(-30))

        assert field.status == FieldStatus.NOT_REQUIRED
        assert evaluator.issues == []

    def test_coverage_limit_uses_aggregate(self, evaluator):
        """Aggregate checks read the record's aggregate."""
        record = make_coverage(1_000_000, aggregate=1_000_000)

        field = evaluator.check_coverage_limit(
            "gl_aggregate", "General Liability (Aggregate)", 2_000_000, record, use_aggregate=True
        )

        assert field.actual == 1_000_000
        assert field.status == FieldStatus.NON_COMPLIANT

    def test_coverage_limit_without_record(self, evaluator):
        field = evaluator.check_coverage_limit("umbrella", "Umbrella", 1_000_000, None)
        assert field.status == FieldStatus.NON_COMPLIANT


# =============================================================================
# Boolean
# =============================================================================

class TestCheckBoolean:
    """Tests for endorsement checks."""

    def test_not_required_is_noop(self, evaluator):
        assert evaluator.check_boolean("waiver_of_subrogation", "Waiver", False, False) is None
        assert evaluator.fields == []

    def test_present(self, evaluator):
        field = evaluator.check_boolean("waiver_of_subrogation", "Waiver of Subrogation", True, True)

        assert field.status == FieldStatus.COMPLIANT
        assert field.required is True
        assert field.actual is True
        assert evaluator.issues == []

    def test_missing(self, evaluator):
        field = evaluator.check_boolean(
            "additional_insured", "Additional Insured Endorsement", True, None
        )

        assert field.status == FieldStatus.NON_COMPLIANT
        assert field.actual is False
        assert evaluator.issues[0].type == IssueType.ERROR
        assert evaluator.issues[0].message == (
            "Additional Insured Endorsement required but not found on COI"
        )


# =============================================================================
# Workers Compensation
# =============================================================================

class TestCheckWorkersComp:
    """Tests for the statutory workers compensation hybrid."""

    @pytest.mark.parametrize("amount", ["Statutory", "statutory", 1_000_000])
    def test_has_coverage(self, evaluator, amount):
        """Statutory text or any positive amount counts as coverage."""
        field = evaluator.check_workers_comp(True, make_coverage(amount))

        assert field.status == FieldStatus.COMPLIANT
        assert field.required == "Statutory"
        assert field.actual == amount

    @pytest.mark.parametrize("amount", [None, 0, "N/A"])
    def test_missing(self, evaluator, amount):
        field = evaluator.check_workers_comp(True, make_coverage(amount))

        assert field.status == FieldStatus.NON_COMPLIANT
        assert field.actual == "None"
        assert evaluator.issues[0].message == "Workers Compensation required but not found on COI"

    def test_no_record(self, evaluator):
        field = evaluator.check_workers_comp(True, None)
        assert field.status == FieldStatus.NON_COMPLIANT

    def test_expired_short_circuits(self, evaluator):
        """Expired workers comp with no amount reports only the expiration."""
        field = evaluator.check_workers_comp(True, make_coverage(None, expires_in=-1))

        assert field.status == FieldStatus.EXPIRED
        assert [i.message for i in evaluator.issues] == ["Workers Compensation policy expired"]

    def test_expiring_soon(self, evaluator):
        field = evaluator.check_workers_comp(True, make_coverage("Statutory", expires_in=7))

        assert field.status == FieldStatus.EXPIRING_SOON
        assert evaluator.issues[0].message == "Workers Compensation expiring in 7 days"

    def test_not_required(self, evaluator):
        assert evaluator.check_workers_comp(False, make_coverage("Statutory")) is None
        assert evaluator.fields == []


# =============================================================================
# Custom Coverages
# =============================================================================

class TestCustomCoverages:
    """Tests for named coverages found among additional coverages."""

    def test_match_is_case_insensitive_containment(self):
        additional = [make_additional("Cyber Liability"), make_additional("LIQUOR LIABILITY")]

        assert find_additional_coverage(additional, "liquor").type == "LIQUOR LIABILITY"
        assert find_additional_coverage(additional, "Pollution") is None

    def test_found_and_sufficient(self, evaluator):
        fields = evaluator.check_custom_coverages(
            [CustomCoverageRequirement("Liquor Liability", 1_000_000)],
            [make_additional("Liquor Liability", 2_000_000, expires_in=100)],
        )

        assert len(fields) == 1
        assert fields[0].field_name == "custom_Liquor Liability"
        assert fields[0].status == FieldStatus.COMPLIANT
        assert fields[0].expiration_date == days_from_today(100)

    def test_not_found(self, evaluator):
        """A missing named coverage falls into the not-found path."""
        fields = evaluator.check_custom_coverages(
            [CustomCoverageRequirement("Pollution", 500_000)],
            [make_additional("Cyber Liability")],
        )

        assert fields[0].status == FieldStatus.NON_COMPLIANT
        assert evaluator.issues[0].message == "Pollution not found on COI (required $500,000)"

    def test_expired_custom(self, evaluator):
        fields = evaluator.check_custom_coverages(
            [CustomCoverageRequirement("Cyber", 1_000_000)],
            [make_additional("Cyber Liability", 1_000_000, expires_in=-1)],
        )

        assert fields[0].status == FieldStatus.EXPIRED
        assert evaluator.issues[0].message == "Cyber policy expired"

    def test_zero_limit_custom_is_skipped(self, evaluator):
        fields = evaluator.check_custom_coverages(
            [CustomCoverageRequirement("Cyber", 0)],
            [],
        )
        assert fields == []


class TestFailingFieldsHaveIssues:
    """Every required failing field has a matching issue."""

    def test_invariant_across_modes(self, evaluator):
        evaluator.check_limit("a", "A", 1_000_000, 10, None)
        evaluator.check_limit("b", "B", 1_000_000, 1_000_000, days_from_today(-1))
        evaluator.check_limit("c", "C", 0, 1_000_000, None)
        evaluator.check_boolean("d", "D", True, False)
        evaluator.check_workers_comp(True, None)

        failing = [f for f in evaluator.fields if f.is_failing]
        assert len(failing) == 4
        for f in failing:
            assert any(i.message.startswith(f.label) for i in evaluator.issues)
        not_required = [f for f in evaluator.fields if f.status == FieldStatus.NOT_REQUIRED]
        assert not any(i.message.startswith("C ") for i in evaluator.issues)
        assert len(not_required) == 1
