"""
coicheck Domain Models

Re-exports every model so callers can write `from coicheck.models import X`.
"""
from __future__ import annotations

from .enums import (
    STATUS_SORT_ORDER,
    ConfidenceLevel,
    FieldStatus,
    IssueType,
    OverallStatus,
    RequirementSource,
)
from .compliance import (
    CRITICAL_KEYWORDS,
    ComplianceField,
    ComplianceIssue,
    ComplianceResult,
    normalize_issue,
    normalize_issues,
)
from .coverage import (
    COVERAGE_KEYS,
    STATUTORY,
    VENDOR_STATUS_COVERAGES,
    AdditionalCoverage,
    Amount,
    CoiExtraction,
    CoverageRecord,
    ExtractedCoverage,
    is_statutory,
    numeric_amount,
    parse_amount,
)
from .requirements import (
    FLAG_FIELDS,
    LIMIT_FIELDS,
    TRACKED_FIELDS,
    CustomCoverageRequirement,
    Provenance,
    RequirementProfile,
    TrackedValue,
    parse_source,
)
from .holders import TenantHolder, VendorHolder

__all__ = [
    # Enums
    "STATUS_SORT_ORDER",
    "ConfidenceLevel",
    "FieldStatus",
    "IssueType",
    "OverallStatus",
    "RequirementSource",
    # Compliance
    "CRITICAL_KEYWORDS",
    "ComplianceField",
    "ComplianceIssue",
    "ComplianceResult",
    "normalize_issue",
    "normalize_issues",
    # Coverage
    "COVERAGE_KEYS",
    "STATUTORY",
    "VENDOR_STATUS_COVERAGES",
    "AdditionalCoverage",
    "Amount",
    "CoiExtraction",
    "CoverageRecord",
    "ExtractedCoverage",
    "is_statutory",
    "numeric_amount",
    "parse_amount",
    # Requirements
    "FLAG_FIELDS",
    "LIMIT_FIELDS",
    "TRACKED_FIELDS",
    "CustomCoverageRequirement",
    "Provenance",
    "RequirementProfile",
    "TrackedValue",
    "parse_source",
    # Holders
    "TenantHolder",
    "VendorHolder",
]
