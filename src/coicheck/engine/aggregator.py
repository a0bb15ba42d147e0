"""
coicheck Compliance Aggregator

Evaluates a tenant's certificate against its requirement profile and
reduces the per-field verdicts into one overall status.

Evaluation order (affects field presentation only):
1. General liability per occurrence, then aggregate
2. Property / contents
3. Umbrella / excess
4. Workers compensation (statutory)
5. Employers liability
6. Commercial auto
7. Professional liability
8. Additional insured, waiver of subrogation
9. Custom coverages

Overall status is resolved through STATUS_RULES, highest priority first:
expired > non-compliant > expiring > pending > compliant.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Iterable, Optional, TypeVar

from ..config import DEFAULT_EXPIRING_THRESHOLD_DAYS
from ..dates import days_until
from ..models import (
    STATUS_SORT_ORDER,
    ComplianceField,
    ComplianceIssue,
    ComplianceResult,
    FieldStatus,
    OverallStatus,
    RequirementProfile,
    TenantHolder,
)
from .field_evaluator import FieldComplianceEvaluator

logger = logging.getLogger(__name__)

NO_PROFILE_MESSAGE = "No requirement profile set for this tenant"

# (field name, label, profile limit, coverage line, use aggregate)
LIMIT_CHECKS_BEFORE_WC = (
    ("gl_occurrence", "General Liability (Per Occurrence)",
     "gl_occurrence_limit", "general_liability", False),
    ("gl_aggregate", "General Liability (Aggregate)",
     "gl_aggregate_limit", "general_liability", True),
    ("property_contents", "Property / Contents Insurance",
     "property_contents_limit", "property_contents", False),
    ("umbrella", "Umbrella / Excess Liability",
     "umbrella_limit", "umbrella", False),
)

LIMIT_CHECKS_AFTER_WC = (
    ("employers_liability", "Employers Liability",
     "workers_comp_employers_liability_limit", "employers_liability", False),
    ("commercial_auto", "Commercial Auto (CSL)",
     "commercial_auto_csl", "auto_liability", False),
    ("professional_liability", "Professional Liability / E&O",
     "professional_liability_limit", "professional_liability", False),
)


# =============================================================================
# Status Resolution
# =============================================================================

@dataclass(frozen=True)
class StatusFacts:
    """Everything the overall status depends on."""
    any_expired: bool = False
    any_non_compliant: bool = False
    any_expiring: bool = False
    document_expired: bool = False
    document_expiring: bool = False
    has_document: bool = True

    @classmethod
    def collect(
        cls,
        fields: Iterable[ComplianceField],
        tenant: TenantHolder,
        threshold_days: int,
        today: Optional[date],
    ) -> "StatusFacts":
        statuses = {f.status for f in fields}
        document_days = days_until(tenant.coi_expiration_date, today)
        return cls(
            any_expired=FieldStatus.EXPIRED in statuses,
            any_non_compliant=FieldStatus.NON_COMPLIANT in statuses,
            any_expiring=FieldStatus.EXPIRING_SOON in statuses,
            document_expired=document_days is not None and document_days < 0,
            document_expiring=(
                document_days is not None and 0 <= document_days <= threshold_days
            ),
            has_document=tenant.has_document,
        )


# Evaluated top-down; the first matching rule wins.
STATUS_RULES: tuple[tuple[OverallStatus, Callable[[StatusFacts], bool]], ...] = (
    (OverallStatus.EXPIRED, lambda f: f.any_expired or f.document_expired),
    (OverallStatus.NON_COMPLIANT, lambda f: f.any_non_compliant),
    (OverallStatus.EXPIRING, lambda f: f.any_expiring or f.document_expiring),
    (OverallStatus.PENDING, lambda f: not f.has_document),
    (OverallStatus.COMPLIANT, lambda f: True),
)


def resolve_overall_status(facts: StatusFacts) -> OverallStatus:
    """Apply STATUS_RULES to the collected facts."""
    for status, applies in STATUS_RULES:
        if applies(facts):
            return status
    return OverallStatus.COMPLIANT


# =============================================================================
# Aggregator
# =============================================================================

class ComplianceAggregator:
    """
    Compares a tenant's certificate with a requirement profile.

    The threshold and reference day are fixed per aggregator, so one
    instance can evaluate many tenants consistently.

    Usage:
        aggregator = ComplianceAggregator(threshold_days=30)
        result = aggregator.evaluate(tenant, profile)
        result.overall_status  # OverallStatus.NON_COMPLIANT
    """

    def __init__(
        self,
        threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS,
        today: Optional[date] = None,
    ) -> None:
        self.threshold_days = threshold_days
        self.today = today

    def evaluate(
        self,
        tenant: TenantHolder,
        profile: Optional[RequirementProfile],
    ) -> ComplianceResult:
        """Evaluate one tenant. Never raises for compliance gaps."""
        if profile is None:
            return ComplianceResult(
                overall_status=OverallStatus.PENDING,
                fields=[],
                issues=[ComplianceIssue.warning(NO_PROFILE_MESSAGE)],
            )

        evaluator = FieldComplianceEvaluator(
            threshold_days=self.threshold_days,
            today=self.today,
        )
        coverage = tenant.coi_coverage

        for field_name, label, limit_name, line, use_aggregate in LIMIT_CHECKS_BEFORE_WC:
            evaluator.check_coverage_limit(
                field_name, label, profile.limit(limit_name),
                coverage.get(line), use_aggregate,
            )

        evaluator.check_workers_comp(
            profile.value("workers_comp_statutory"),
            coverage.workers_comp,
        )

        for field_name, label, limit_name, line, use_aggregate in LIMIT_CHECKS_AFTER_WC:
            evaluator.check_coverage_limit(
                field_name, label, profile.limit(limit_name),
                coverage.get(line), use_aggregate,
            )

        evaluator.check_boolean(
            "additional_insured",
            "Additional Insured Endorsement",
            profile.requires_additional_insured,
            tenant.coi_has_additional_insured,
        )
        evaluator.check_boolean(
            "waiver_of_subrogation",
            "Waiver of Subrogation",
            profile.value("waiver_of_subrogation_required"),
            tenant.coi_has_waiver_of_subrogation,
        )

        evaluator.check_custom_coverages(
            profile.custom_coverages,
            tenant.coi_additional_coverages,
        )

        facts = StatusFacts.collect(
            evaluator.fields, tenant, self.threshold_days, self.today
        )
        overall = resolve_overall_status(facts)
        logger.debug(
            "Tenant compliance evaluated",
            extra={"holder_id": tenant.id, "overall_status": overall.value},
        )
        return ComplianceResult(
            overall_status=overall,
            fields=evaluator.fields,
            issues=evaluator.issues,
        )


def compare_tenant_coi(
    tenant: TenantHolder,
    profile: Optional[RequirementProfile],
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS,
    today: Optional[date] = None,
) -> ComplianceResult:
    """Convenience function: evaluate one tenant against its profile."""
    return ComplianceAggregator(threshold_days, today).evaluate(tenant, profile)


# =============================================================================
# Ordering
# =============================================================================

T = TypeVar("T")


def status_sort_key(status: Any) -> int:
    """Worst statuses first; unknown statuses last."""
    if isinstance(status, OverallStatus):
        status = status.value
    return STATUS_SORT_ORDER.get(status, len(STATUS_SORT_ORDER))


def sort_by_status(
    holders: Iterable[T],
    key: Callable[[T], Any] = lambda holder: getattr(holder, "status", None),
) -> list[T]:
    """Sort holders worst status first; ties keep their input order."""
    return sorted(holders, key=lambda holder: status_sort_key(key(holder)))
