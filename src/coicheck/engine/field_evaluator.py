"""
coicheck Field Compliance Evaluator

Evaluates one requirement against one piece of extracted coverage.

Three modes:
- Numeric limit: required amount vs. amount on the certificate, with
  expiration checked first
- Boolean: endorsement required vs. endorsement present
- Named custom coverage: looked up by name among additional coverages,
  then checked as a numeric limit

Expired coverage short-circuits the amount check; expiring-soon coverage
does not. A requirement of zero or less means "not required".

Usage:
    evaluator = FieldComplianceEvaluator(threshold_days=30, today=date(2025, 1, 1))
    evaluator.check_limit("gl_occurrence", "General Liability (Per Occurrence)",
                          1_000_000, 500_000, None)
    evaluator.fields   # [ComplianceField(status=NON_COMPLIANT, ...)]
    evaluator.issues   # [ComplianceIssue(type=ERROR, ...)]
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from ..config import DEFAULT_EXPIRING_THRESHOLD_DAYS
from ..dates import days_until
from ..models import (
    AdditionalCoverage,
    Amount,
    ComplianceField,
    ComplianceIssue,
    CoverageRecord,
    CustomCoverageRequirement,
    FieldStatus,
    STATUTORY,
    is_statutory,
    numeric_amount,
)

WORKERS_COMP_LABEL = "Workers Compensation"


def format_currency(amount: Any) -> str:
    """Whole-dollar USD, e.g. 1000000 -> "$1,000,000". Absent -> "N/A"."""
    if amount is None or isinstance(amount, bool):
        return "N/A"
    try:
        value = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        return str(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(int(value)):,}"


def _is_required_amount(required: Any) -> bool:
    value = numeric_amount(required)
    return value is not None and value > 0


@dataclass
class FieldComplianceEvaluator:
    """
    Accumulates ComplianceFields and ComplianceIssues for one evaluation.

    Create a fresh evaluator per holder; it is not meant to be shared.

    Attributes:
        threshold_days: Days before expiration that count as expiring soon
        today: Reference day (defaults to the local calendar day)
        fields: Evaluated fields, in call order
        issues: Issues produced so far
    """
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS
    today: Optional[date] = None
    fields: list[ComplianceField] = field(default_factory=list)
    issues: list[ComplianceIssue] = field(default_factory=list)

    # =========================================================================
    # Expiration
    # =========================================================================

    def _apply_expiration(self, compliance_field: ComplianceField, label: str) -> bool:
        """
        Apply expiration to a field. Returns True if the field is expired,
        in which case the caller must skip its presence/amount check.
        """
        if compliance_field.expiration_date is None:
            return False
        days = days_until(compliance_field.expiration_date, self.today)
        if days is None:
            return False
        if days < 0:
            compliance_field.status = FieldStatus.EXPIRED
            self.issues.append(ComplianceIssue.critical(f"{label} policy expired"))
            return True
        if days <= self.threshold_days:
            compliance_field.status = FieldStatus.EXPIRING_SOON
            self.issues.append(ComplianceIssue.warning(f"{label} expiring in {days} days"))
        return False

    # =========================================================================
    # Numeric Limit
    # =========================================================================

    def check_limit(
        self,
        field_name: str,
        label: str,
        required: Any,
        actual: Amount,
        expiration_date: Optional[date],
    ) -> Optional[ComplianceField]:
        """
        Check a numeric coverage limit.

        Returns the recorded field, or None when nothing was required and
        nothing was found.
        """
        actual_amount = numeric_amount(actual)

        if not _is_required_amount(required):
            if actual_amount:
                compliance_field = ComplianceField(
                    field_name=field_name,
                    label=label,
                    required=None,
                    actual=actual_amount,
                    status=FieldStatus.NOT_REQUIRED,
                    expiration_date=expiration_date,
                )
                self.fields.append(compliance_field)
                return compliance_field
            return None

        compliance_field = ComplianceField(
            field_name=field_name,
            label=label,
            required=required,
            actual=actual_amount or 0,
            status=FieldStatus.COMPLIANT,
            expiration_date=expiration_date,
        )
        self.fields.append(compliance_field)

        if self._apply_expiration(compliance_field, label):
            return compliance_field

        if actual_amount is None or actual_amount <= 0:
            compliance_field.status = FieldStatus.NON_COMPLIANT
            self.issues.append(ComplianceIssue.error(
                f"{label} not found on COI (required {format_currency(required)})"
            ))
        elif actual_amount < required:
            compliance_field.status = FieldStatus.NON_COMPLIANT
            self.issues.append(ComplianceIssue.error(
                f"{label} {format_currency(actual_amount)} below required "
                f"{format_currency(required)}"
            ))
        return compliance_field

    def check_coverage_limit(
        self,
        field_name: str,
        label: str,
        required: Any,
        record: Optional[CoverageRecord],
        use_aggregate: bool = False,
    ) -> Optional[ComplianceField]:
        """check_limit() fed from a coverage record (amount or aggregate)."""
        if record is None:
            return self.check_limit(field_name, label, required, None, None)
        actual = record.aggregate if use_aggregate else record.amount
        return self.check_limit(field_name, label, required, actual, record.expiration_date)

    # =========================================================================
    # Boolean
    # =========================================================================

    def check_boolean(
        self,
        field_name: str,
        label: str,
        required: Any,
        actual: Any,
    ) -> Optional[ComplianceField]:
        """Check a required endorsement. No-op when not required."""
        if not required:
            return None
        present = bool(actual)
        compliance_field = ComplianceField(
            field_name=field_name,
            label=label,
            required=True,
            actual=present,
            status=FieldStatus.COMPLIANT if present else FieldStatus.NON_COMPLIANT,
        )
        if not present:
            self.issues.append(ComplianceIssue.error(f"{label} required but not found on COI"))
        self.fields.append(compliance_field)
        return compliance_field

    # =========================================================================
    # Workers Compensation
    # =========================================================================

    def check_workers_comp(
        self,
        required: Any,
        record: Optional[CoverageRecord],
    ) -> Optional[ComplianceField]:
        """
        Check statutory workers compensation.

        Coverage counts as present when the amount is "Statutory" or any
        positive number. Expiration is applied exactly as for numeric limits.
        """
        if not required:
            return None
        amount = record.amount if record is not None else None
        positive = numeric_amount(amount)
        has_coverage = is_statutory(amount) or (positive is not None and positive > 0)

        compliance_field = ComplianceField(
            field_name="workers_comp",
            label=WORKERS_COMP_LABEL,
            required=STATUTORY,
            actual=amount if has_coverage else "None",
            status=FieldStatus.COMPLIANT,
            expiration_date=record.expiration_date if record is not None else None,
        )
        self.fields.append(compliance_field)

        if self._apply_expiration(compliance_field, WORKERS_COMP_LABEL):
            return compliance_field

        if not has_coverage:
            compliance_field.status = FieldStatus.NON_COMPLIANT
            self.issues.append(ComplianceIssue.error(
                f"{WORKERS_COMP_LABEL} required but not found on COI"
            ))
        return compliance_field

    # =========================================================================
    # Custom Coverages
    # =========================================================================

    def check_custom_coverages(
        self,
        requirements: Iterable[CustomCoverageRequirement],
        additional: Iterable[AdditionalCoverage],
    ) -> list[ComplianceField]:
        """Check each named coverage requirement against additional coverages."""
        available = list(additional)
        results = []
        for requirement in requirements:
            found = find_additional_coverage(available, requirement.name)
            result = self.check_limit(
                f"custom_{requirement.name}",
                requirement.name,
                requirement.limit,
                found.amount if found is not None else None,
                found.expiration_date if found is not None else None,
            )
            if result is not None:
                results.append(result)
        return results


def find_additional_coverage(
    additional: Iterable[AdditionalCoverage],
    name: str,
) -> Optional[AdditionalCoverage]:
    """First additional coverage whose type contains name (case-insensitive)."""
    for coverage in additional:
        if coverage.matches(name):
            return coverage
    return None
