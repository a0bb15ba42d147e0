"""
coicheck Holder Records

Vendors and tenants whose insurance is tracked.

Holder records arrive as persisted rows (snake_case keys). from_record()
converts them into typed models once, at the boundary; issue lists are
normalized there as well.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional

from ..dates import parse_local_date
from .compliance import ComplianceIssue, normalize_issues
from .coverage import AdditionalCoverage, ExtractedCoverage
from .enums import OverallStatus


def _additional(items: Any) -> list[AdditionalCoverage]:
    if not isinstance(items, list):
        return []
    result = []
    for item in items:
        coverage = AdditionalCoverage.from_dict(item)
        if coverage is not None:
            result.append(coverage)
    return result


def _status(value: Any) -> Optional[OverallStatus]:
    try:
        return OverallStatus(value)
    except ValueError:
        return None


@dataclass
class TenantHolder:
    """
    A tenant with the data extracted from its latest certificate.

    Attributes:
        id: Tenant identifier
        name: Display name
        coi_coverage: Standard coverage lines from the certificate
        coi_additional_coverages: Named coverages from the certificate
        coi_has_additional_insured: Additional insured endorsement present
        coi_has_waiver_of_subrogation: Waiver of subrogation present
        coi_expiration_date: Earliest expiration on the certificate
        coi_document_path: Storage path of the uploaded certificate
        coi_uploaded_at: Upload timestamp (ISO string as stored)
    """
    id: Optional[str] = None
    name: Optional[str] = None
    coi_coverage: ExtractedCoverage = field(default_factory=ExtractedCoverage)
    coi_additional_coverages: list[AdditionalCoverage] = field(default_factory=list)
    coi_has_additional_insured: bool = False
    coi_has_waiver_of_subrogation: bool = False
    coi_expiration_date: Optional[date] = None
    coi_document_path: Optional[str] = None
    coi_uploaded_at: Optional[str] = None

    @property
    def has_document(self) -> bool:
        """True once any certificate has been uploaded."""
        return bool(self.coi_document_path or self.coi_uploaded_at)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "TenantHolder":
        return cls(
            id=record.get("id"),
            name=record.get("name"),
            coi_coverage=ExtractedCoverage.from_dict(record.get("coi_coverage")),
            coi_additional_coverages=_additional(record.get("coi_additional_coverages")),
            coi_has_additional_insured=bool(record.get("coi_has_additional_insured")),
            coi_has_waiver_of_subrogation=bool(record.get("coi_has_waiver_of_subrogation")),
            coi_expiration_date=parse_local_date(record.get("coi_expiration_date")),
            coi_document_path=record.get("coi_document_path"),
            coi_uploaded_at=record.get("coi_uploaded_at"),
        )


@dataclass
class VendorHolder:
    """
    A vendor that uploads certificates through the self-service portal.

    Attributes:
        id: Vendor identifier
        name: Display name
        coverage: Standard coverage lines with expiration flags
        additional_coverages: Named coverages
        issues: Normalized extraction issues
        status: Last computed status
        expiration_date: Earliest expiration on the certificate
    """
    id: Optional[str] = None
    name: Optional[str] = None
    coverage: ExtractedCoverage = field(default_factory=ExtractedCoverage)
    additional_coverages: list[AdditionalCoverage] = field(default_factory=list)
    issues: list[ComplianceIssue] = field(default_factory=list)
    status: Optional[OverallStatus] = None
    expiration_date: Optional[date] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "VendorHolder":
        additional = record.get("additional_coverages")
        if additional is None:
            additional = record.get("additionalCoverages")
        return cls(
            id=record.get("id"),
            name=record.get("name"),
            coverage=ExtractedCoverage.from_dict(record.get("coverage")),
            additional_coverages=_additional(additional),
            issues=normalize_issues(record.get("issues")),
            status=_status(record.get("status")),
            expiration_date=parse_local_date(
                record.get("expiration_date") or record.get("expirationDate")
            ),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "coverage": self.coverage.to_dict(),
            "additional_coverages": [c.to_dict() for c in self.additional_coverages],
            "issues": [i.to_dict() for i in self.issues],
            "status": self.status.value if self.status else None,
            "expiration_date": self.expiration_date.isoformat() if self.expiration_date else None,
        }
