"""
coicheck - Certificate of Insurance Compliance Engine

coicheck decides whether a vendor or tenant is compliant with its insurance
requirements, based on coverage data extracted from an uploaded Certificate
of Insurance (COI).

Key Features:
- Field-by-field comparison of coverage limits, endorsements and named
  coverages against a requirement profile
- Expiration classification with an explicit threshold and reference day
- Overall status reduction: expired > non-compliant > expiring > pending > compliant
- Vendor self-upload status from coverage flags and extraction issues
- Retrying client for the remote AI extraction functions
- Pre-built requirement templates per tenant type

Quick Start:
    from coicheck import TenantHolder, RequirementProfile, compare_tenant_coi

    tenant = TenantHolder.from_record(tenant_row)
    profile = RequirementProfile.from_record(profile_row)
    result = compare_tenant_coi(tenant, profile, threshold_days=30)
    result.overall_status   # OverallStatus.NON_COMPLIANT
    result.issues           # [ComplianceIssue(type=ERROR, message="...")]

Version: 0.1.0
"""
from __future__ import annotations

__version__ = "0.1.0"

# =============================================================================
# Core Models (Re-exported for convenience)
# =============================================================================
from .models import (
    AdditionalCoverage,
    CoiExtraction,
    ComplianceField,
    ComplianceIssue,
    ComplianceResult,
    CoverageRecord,
    CustomCoverageRequirement,
    ExtractedCoverage,
    FieldStatus,
    IssueType,
    OverallStatus,
    Provenance,
    RequirementProfile,
    RequirementSource,
    TenantHolder,
    TrackedValue,
    VendorHolder,
    normalize_issues,
)

# =============================================================================
# Engine
# =============================================================================
from .engine import (
    ComplianceAggregator,
    FieldComplianceEvaluator,
    annotate_coverage,
    check_all_coverages_expiration,
    classify_expiration,
    compare_tenant_coi,
    determine_vendor_status,
    format_currency,
    recalculate_vendor_status,
    sort_by_status,
)

# =============================================================================
# Ambient
# =============================================================================
from .config import Settings
from .dates import days_until, parse_local_date
from .exceptions import CoiCheckError

__all__ = [
    "__version__",
    # Models
    "AdditionalCoverage",
    "CoiExtraction",
    "ComplianceField",
    "ComplianceIssue",
    "ComplianceResult",
    "CoverageRecord",
    "CustomCoverageRequirement",
    "ExtractedCoverage",
    "FieldStatus",
    "IssueType",
    "OverallStatus",
    "Provenance",
    "RequirementProfile",
    "RequirementSource",
    "TenantHolder",
    "TrackedValue",
    "VendorHolder",
    "normalize_issues",
    # Engine
    "ComplianceAggregator",
    "FieldComplianceEvaluator",
    "annotate_coverage",
    "check_all_coverages_expiration",
    "classify_expiration",
    "compare_tenant_coi",
    "determine_vendor_status",
    "format_currency",
    "recalculate_vendor_status",
    "sort_by_status",
    # Ambient
    "Settings",
    "days_until",
    "parse_local_date",
    "CoiCheckError",
]
