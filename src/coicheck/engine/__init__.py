"""
coicheck Engine

Pure compliance evaluation. No I/O; every function takes the expiring
threshold and the reference day as explicit parameters.

Services:
- ExpirationClassifier: flag coverage lines expired / expiring soon
- FieldComplianceEvaluator: evaluate one requirement
- ComplianceAggregator: evaluate a tenant against its requirement profile
- VendorStatusClassifier: derive a vendor's status from coverage flags

Usage:
    from coicheck.engine import compare_tenant_coi, recalculate_vendor_status
"""
from __future__ import annotations

from .aggregator import (
    NO_PROFILE_MESSAGE,
    STATUS_RULES,
    ComplianceAggregator,
    StatusFacts,
    compare_tenant_coi,
    resolve_overall_status,
    sort_by_status,
    status_sort_key,
)
from .expiration import (
    ExpirationCheck,
    ExpirationSummary,
    annotate_coverage,
    check_all_coverages_expiration,
    check_coverage_expiration,
    classify_days,
    classify_expiration,
)
from .field_evaluator import (
    FieldComplianceEvaluator,
    find_additional_coverage,
    format_currency,
)
from .vendor_status import determine_vendor_status, recalculate_vendor_status

__all__ = [
    # Aggregator
    "NO_PROFILE_MESSAGE",
    "STATUS_RULES",
    "ComplianceAggregator",
    "StatusFacts",
    "compare_tenant_coi",
    "resolve_overall_status",
    "sort_by_status",
    "status_sort_key",
    # Expiration
    "ExpirationCheck",
    "ExpirationSummary",
    "annotate_coverage",
    "check_all_coverages_expiration",
    "check_coverage_expiration",
    "classify_days",
    "classify_expiration",
    # Field evaluation
    "FieldComplianceEvaluator",
    "find_additional_coverage",
    "format_currency",
    # Vendors
    "determine_vendor_status",
    "recalculate_vendor_status",
]
