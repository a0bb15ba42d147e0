"""
coicheck Enumerations

All enumeration types used throughout the coicheck system.
Organized by domain area for clarity.

All enums inherit from (str, Enum) for JSON serialization compatibility.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


# =============================================================================
# Field Status
# =============================================================================

class FieldStatus(str, Enum):
    """Compliance status of a single evaluated requirement."""
    COMPLIANT = "compliant"
    NON_COMPLIANT = "non_compliant"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"
    NOT_REQUIRED = "not_required"      # Coverage present but nothing required


# =============================================================================
# Overall Status
# =============================================================================

class OverallStatus(str, Enum):
    """
    Overall compliance status of a holder (vendor or tenant).

    Values use hyphens because they are persisted verbatim on holder records.
    """
    COMPLIANT = "compliant"
    NON_COMPLIANT = "non-compliant"
    EXPIRING = "expiring"
    EXPIRED = "expired"
    PENDING = "pending"                # No document ever uploaded


# Worst first. Unknown statuses sort after all of these.
STATUS_SORT_ORDER: dict[str, int] = {
    OverallStatus.EXPIRED.value: 0,
    OverallStatus.NON_COMPLIANT.value: 1,
    OverallStatus.EXPIRING.value: 2,
    OverallStatus.PENDING.value: 3,
    OverallStatus.COMPLIANT.value: 4,
}


# =============================================================================
# Issues
# =============================================================================

class IssueType(str, Enum):
    """Severity of a compliance issue."""
    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"


# =============================================================================
# Requirement Provenance
# =============================================================================

class RequirementSource(str, Enum):
    """Where a requirement value came from."""
    MANUAL = "manual"                      # Entered by a property manager
    BUILDING_DEFAULT = "building_default"  # Copied from building defaults
    LEASE_EXTRACTED = "lease_extracted"    # Extracted from the lease by AI


class ConfidenceLevel(str, Enum):
    """Bucketed confidence of an AI-extracted value."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_score(cls, score: Optional[float]) -> "ConfidenceLevel":
        """Bucket a 0-100 confidence score."""
        if score is None:
            return cls.LOW
        if score >= 85:
            return cls.HIGH
        if score >= 60:
            return cls.MEDIUM
        return cls.LOW
