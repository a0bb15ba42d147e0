"""
coicheck Coverage Models

Coverage data extracted from a Certificate of Insurance.

Key components:
- CoverageRecord: One coverage line (amount, aggregate, expiration)
- AdditionalCoverage: A named coverage outside the standard set
- ExtractedCoverage: The standard coverage lines of one certificate
- CoiExtraction: Everything the extraction service returned for one COI

Records are created at the input boundary and only annotated afterwards:
the expiration classifier sets `expired` / `expiring_soon` in place.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Iterator, Optional, Union

from ..dates import parse_local_date
from .compliance import ComplianceIssue

Amount = Union[int, float, str, None]

STATUTORY = "Statutory"

# Attribute name -> key used by the extraction service JSON
COVERAGE_KEYS: dict[str, str] = {
    "general_liability": "generalLiability",
    "auto_liability": "autoLiability",
    "workers_comp": "workersComp",
    "employers_liability": "employersLiability",
    "property_contents": "propertyContents",
    "umbrella": "umbrella",
    "professional_liability": "professionalLiability",
}

# Lines inspected by the vendor status classifier
VENDOR_STATUS_COVERAGES = (
    "general_liability",
    "auto_liability",
    "workers_comp",
    "employers_liability",
)


def numeric_amount(value: Amount) -> Optional[float]:
    """Return value as a number, or None for absent/non-numeric amounts."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return value
    return None


def is_statutory(value: Amount) -> bool:
    """Workers comp amounts are often the literal word "Statutory"."""
    return isinstance(value, str) and value.strip().lower() == STATUTORY.lower()


def parse_amount(value: Any) -> Amount:
    """Normalize an extracted amount: numbers stay numbers, "$1M" becomes 1000000."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        # "$1,000,000", "1M", "500k"
        cleaned = value.replace("$", "").replace(",", "").strip().upper()
        if not cleaned:
            return None
        multiplier = 1
        if cleaned.endswith("M"):
            cleaned, multiplier = cleaned[:-1], 1_000_000
        elif cleaned.endswith("K"):
            cleaned, multiplier = cleaned[:-1], 1_000
        try:
            number = float(cleaned) * multiplier
        except ValueError:
            return value.strip()
        return int(number) if number.is_integer() else number
    return None


def _optional_bool(value: Any) -> Optional[bool]:
    return None if value is None else bool(value)


def _first(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


# =============================================================================
# Coverage Record
# =============================================================================

@dataclass
class CoverageRecord:
    """
    A single coverage line on a certificate.

    Attributes:
        amount: Limit in dollars, "Statutory", or None
        aggregate: Aggregate limit where the line has one (GL)
        expiration_date: Policy expiration (calendar day)
        expired: Set by the expiration classifier
        expiring_soon: Set by the expiration classifier
    """
    amount: Amount = None
    aggregate: Optional[float] = None
    expiration_date: Optional[date] = None
    expired: Optional[bool] = None
    expiring_soon: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> Optional["CoverageRecord"]:
        """Build from extraction JSON (camelCase or snake_case keys)."""
        if not isinstance(data, dict):
            return None
        return cls(
            amount=parse_amount(data.get("amount")),
            aggregate=numeric_amount(parse_amount(data.get("aggregate"))),
            expiration_date=parse_local_date(
                _first(data, "expirationDate", "expiration_date")
            ),
            expired=_optional_bool(_first(data, "expired")),
            expiring_soon=_optional_bool(_first(data, "expiringSoon", "expiring_soon")),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"amount": self.amount}
        if self.aggregate is not None:
            result["aggregate"] = self.aggregate
        if self.expiration_date is not None:
            result["expirationDate"] = self.expiration_date.isoformat()
        if self.expired is not None:
            result["expired"] = self.expired
        if self.expiring_soon is not None:
            result["expiringSoon"] = self.expiring_soon
        return result


@dataclass
class AdditionalCoverage(CoverageRecord):
    """A named coverage outside the standard lines (e.g. "Liquor Liability")."""
    type: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> Optional["AdditionalCoverage"]:
        base = CoverageRecord.from_dict(data)
        if base is None:
            return None
        return cls(
            amount=base.amount,
            aggregate=base.aggregate,
            expiration_date=base.expiration_date,
            expired=base.expired,
            expiring_soon=base.expiring_soon,
            type=str(data.get("type") or ""),
        )

    def matches(self, name: str) -> bool:
        """Case-insensitive containment match against a requirement name."""
        if not self.type or not name:
            return False
        return name.lower() in self.type.lower()

    def to_dict(self) -> dict[str, Any]:
        result = {"type": self.type}
        result.update(super().to_dict())
        return result


# =============================================================================
# Extracted Coverage
# =============================================================================

@dataclass
class ExtractedCoverage:
    """The standard coverage lines found on one certificate."""
    general_liability: Optional[CoverageRecord] = None
    auto_liability: Optional[CoverageRecord] = None
    workers_comp: Optional[CoverageRecord] = None
    employers_liability: Optional[CoverageRecord] = None
    property_contents: Optional[CoverageRecord] = None
    umbrella: Optional[CoverageRecord] = None
    professional_liability: Optional[CoverageRecord] = None

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "ExtractedCoverage":
        data = data if isinstance(data, dict) else {}
        values = {}
        for attr, key in COVERAGE_KEYS.items():
            values[attr] = CoverageRecord.from_dict(_first(data, key, attr))
        return cls(**values)

    def get(self, name: str) -> Optional[CoverageRecord]:
        return getattr(self, name, None)

    def items(self) -> Iterator[tuple[str, CoverageRecord]]:
        """Present coverage lines as (attribute name, record) pairs."""
        for f in fields(self):
            record = getattr(self, f.name)
            if record is not None:
                yield f.name, record

    def to_dict(self) -> dict[str, Any]:
        return {COVERAGE_KEYS[name]: record.to_dict() for name, record in self.items()}


# =============================================================================
# COI Extraction
# =============================================================================

@dataclass
class CoiExtraction:
    """
    Structured result of one certificate extraction.

    Issues are already normalized into ComplianceIssue objects.
    """
    coverage: ExtractedCoverage = field(default_factory=ExtractedCoverage)
    additional_coverages: list[AdditionalCoverage] = field(default_factory=list)
    has_additional_insured: bool = False
    has_waiver_of_subrogation: bool = False
    issues: list[ComplianceIssue] = field(default_factory=list)

    # Certificate metadata
    company_name: Optional[str] = None
    insurance_company: Optional[str] = None
    certificate_holder: Optional[str] = None
    expiration_date: Optional[date] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "coverage": self.coverage.to_dict(),
            "additionalCoverages": [c.to_dict() for c in self.additional_coverages],
            "hasAdditionalInsured": self.has_additional_insured,
            "hasWaiverOfSubrogation": self.has_waiver_of_subrogation,
            "issues": [i.to_dict() for i in self.issues],
            "companyName": self.company_name,
            "insuranceCompany": self.insurance_company,
            "certificateHolder": self.certificate_holder,
            "expirationDate": self.expiration_date.isoformat() if self.expiration_date else None,
        }
