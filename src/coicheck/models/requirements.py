"""
coicheck Requirement Profile

The coverage minimums and endorsements a holder must satisfy.

Key components:
- Provenance: Where a requirement value came from and how confident we are
- TrackedValue: A requirement value plus optional provenance
- CustomCoverageRequirement: A named coverage with a minimum limit
- RequirementProfile: The full, explicit set of optional requirements

Profiles are persisted flat: each tracked field `x` may be accompanied by
`x_source`, `x_confidence` and `x_lease_ref` columns. from_record() reads
that form (or nested {value, source, confidence} objects) and to_record()
writes it back. The engine never mutates a profile.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional

from ..dates import parse_local_date
from .coverage import numeric_amount, parse_amount
from .enums import ConfidenceLevel, RequirementSource


# Numeric coverage limits, in evaluation order
LIMIT_FIELDS = (
    "gl_occurrence_limit",
    "gl_aggregate_limit",
    "property_contents_limit",
    "umbrella_limit",
    "workers_comp_employers_liability_limit",
    "commercial_auto_csl",
    "professional_liability_limit",
)

FLAG_FIELDS = (
    "workers_comp_statutory",
    "waiver_of_subrogation_required",
    "business_interruption_required",
)

TRACKED_FIELDS = LIMIT_FIELDS + FLAG_FIELDS + (
    "additional_insured_entities",
    "loss_payee_entities",
    "certificate_holder_name",
    "cancellation_notice_days",
)

# Persisted provenance columns that don't follow the `<field>_source` pattern
PROVENANCE_PREFIX = {
    "additional_insured_entities": "additional_insured",
    "loss_payee_entities": "loss_payee",
    "certificate_holder_name": "certificate_holder",
}

LIST_FIELDS = {"additional_insured_entities", "loss_payee_entities"}


def parse_source(value: Any) -> Optional[RequirementSource]:
    """Parse a persisted source string; unknown values become None."""
    if isinstance(value, RequirementSource):
        return value
    try:
        return RequirementSource(value)
    except ValueError:
        return None


def _confidence(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError):
        return None
    return max(0, min(100, score))


def _as_tuple(value: Any) -> tuple:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


# =============================================================================
# Provenance
# =============================================================================

@dataclass(frozen=True)
class Provenance:
    """
    Origin of a requirement value.

    Attributes:
        source: manual, building_default or lease_extracted
        confidence: 0-100 for AI-extracted values
        lease_ref: Section/page reference in the lease
    """
    source: Optional[RequirementSource] = None
    confidence: Optional[int] = None
    lease_ref: Optional[str] = None

    @property
    def confidence_level(self) -> Optional[ConfidenceLevel]:
        if self.confidence is None:
            return None
        return ConfidenceLevel.from_score(self.confidence)

    @property
    def is_empty(self) -> bool:
        return self.source is None and self.confidence is None and self.lease_ref is None


@dataclass(frozen=True)
class TrackedValue:
    """A requirement value with optional provenance."""
    value: Any
    provenance: Optional[Provenance] = None

    @property
    def source(self) -> Optional[RequirementSource]:
        return self.provenance.source if self.provenance else None

    @property
    def confidence(self) -> Optional[int]:
        return self.provenance.confidence if self.provenance else None


@dataclass(frozen=True)
class CustomCoverageRequirement:
    """A named coverage (e.g. "Liquor Liability") with a minimum limit."""
    name: str
    limit: Optional[float] = None
    provenance: Optional[Provenance] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CustomCoverageRequirement":
        provenance = Provenance(
            source=parse_source(data.get("source")),
            confidence=_confidence(data.get("confidence")),
            lease_ref=data.get("leaseRef") or data.get("lease_ref"),
        )
        return cls(
            name=str(data.get("name") or ""),
            limit=numeric_amount(parse_amount(data.get("limit"))),
            provenance=None if provenance.is_empty else provenance,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "limit": self.limit}
        if self.provenance is not None:
            if self.provenance.source is not None:
                result["source"] = self.provenance.source.value
            if self.provenance.confidence is not None:
                result["confidence"] = self.provenance.confidence
            if self.provenance.lease_ref is not None:
                result["leaseRef"] = self.provenance.lease_ref
        return result


# =============================================================================
# Requirement Profile
# =============================================================================

@dataclass(frozen=True)
class RequirementProfile:
    """
    Insurance requirements for one holder.

    Tracked fields hold a TrackedValue (or None when unset). A limit of zero
    or less means "not required".
    """
    # Coverage limits
    gl_occurrence_limit: Optional[TrackedValue] = None
    gl_aggregate_limit: Optional[TrackedValue] = None
    property_contents_limit: Optional[TrackedValue] = None
    umbrella_limit: Optional[TrackedValue] = None
    workers_comp_employers_liability_limit: Optional[TrackedValue] = None
    commercial_auto_csl: Optional[TrackedValue] = None
    professional_liability_limit: Optional[TrackedValue] = None

    # Flags
    workers_comp_statutory: Optional[TrackedValue] = None
    waiver_of_subrogation_required: Optional[TrackedValue] = None
    business_interruption_required: Optional[TrackedValue] = None

    # Endorsements and certificate holder
    additional_insured_entities: Optional[TrackedValue] = None
    loss_payee_entities: Optional[TrackedValue] = None
    certificate_holder_name: Optional[TrackedValue] = None
    cancellation_notice_days: Optional[TrackedValue] = None

    # Untracked values
    business_interruption_duration: Optional[str] = None
    additional_insured_language: Optional[str] = None
    waiver_of_subrogation_coverages: tuple[str, ...] = ()
    certificate_holder_address: Optional[str] = None
    special_endorsements: tuple[str, ...] = ()
    custom_coverages: tuple[CustomCoverageRequirement, ...] = ()

    # Lease metadata
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None
    lease_renewal_date: Optional[date] = None

    creation_method: Optional[RequirementSource] = None
    property_id: Optional[str] = None

    def value(self, name: str) -> Any:
        """Bare value of a tracked field, or None."""
        tracked = getattr(self, name)
        return tracked.value if tracked is not None else None

    def limit(self, name: str) -> Optional[float]:
        """Numeric value of a limit field; non-numeric values read as None."""
        return numeric_amount(parse_amount(self.value(name)))

    @property
    def requires_additional_insured(self) -> bool:
        return len(self.value("additional_insured_entities") or ()) > 0

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "RequirementProfile":
        """Build a profile from a persisted (flat or nested) record."""
        values: dict[str, Any] = {}
        for name in TRACKED_FIELDS:
            tracked = _read_tracked(record, name)
            if tracked is not None:
                values[name] = tracked

        custom = record.get("custom_coverages") or []
        values["custom_coverages"] = tuple(
            CustomCoverageRequirement.from_dict(c) for c in custom if isinstance(c, Mapping)
        )
        values["special_endorsements"] = _as_tuple(record.get("special_endorsements"))
        values["waiver_of_subrogation_coverages"] = _as_tuple(
            record.get("waiver_of_subrogation_coverages")
        )
        for name in (
            "business_interruption_duration",
            "additional_insured_language",
            "certificate_holder_address",
            "property_id",
        ):
            if record.get(name) is not None:
                values[name] = record[name]
        for name in ("lease_start_date", "lease_end_date", "lease_renewal_date"):
            values[name] = parse_local_date(record.get(name))
        values["creation_method"] = parse_source(record.get("creation_method"))
        return cls(**values)

    def to_record(self) -> dict[str, Any]:
        """Flat persisted form with `<field>_source` style provenance columns."""
        record: dict[str, Any] = {}
        for name in TRACKED_FIELDS:
            tracked = getattr(self, name)
            if tracked is None:
                continue
            value = tracked.value
            record[name] = list(value) if isinstance(value, tuple) else value
            prov = tracked.provenance
            if prov is None:
                continue
            prefix = PROVENANCE_PREFIX.get(name, name)
            if prov.source is not None:
                record[f"{prefix}_source"] = prov.source.value
            if prov.confidence is not None:
                record[f"{prefix}_confidence"] = prov.confidence
            if prov.lease_ref is not None:
                record[f"{prefix}_lease_ref"] = prov.lease_ref

        if self.custom_coverages:
            record["custom_coverages"] = [c.to_dict() for c in self.custom_coverages]
        if self.special_endorsements:
            record["special_endorsements"] = list(self.special_endorsements)
        if self.waiver_of_subrogation_coverages:
            record["waiver_of_subrogation_coverages"] = list(self.waiver_of_subrogation_coverages)
        for name in (
            "business_interruption_duration",
            "additional_insured_language",
            "certificate_holder_address",
            "property_id",
        ):
            if getattr(self, name) is not None:
                record[name] = getattr(self, name)
        for name in ("lease_start_date", "lease_end_date", "lease_renewal_date"):
            if getattr(self, name) is not None:
                record[name] = getattr(self, name).isoformat()
        if self.creation_method is not None:
            record["creation_method"] = self.creation_method.value
        return record


def _read_tracked(record: Mapping[str, Any], name: str) -> Optional[TrackedValue]:
    raw = record.get(name)
    if isinstance(raw, Mapping) and "value" in raw:
        value = raw.get("value")
        provenance = Provenance(
            source=parse_source(raw.get("source")),
            confidence=_confidence(raw.get("confidence")),
            lease_ref=raw.get("leaseRef") or raw.get("lease_ref"),
        )
    else:
        value = raw
        prefix = PROVENANCE_PREFIX.get(name, name)
        provenance = Provenance(
            source=parse_source(record.get(f"{prefix}_source")),
            confidence=_confidence(record.get(f"{prefix}_confidence")),
            lease_ref=record.get(f"{prefix}_lease_ref"),
        )

    if value is None:
        return None
    if name in LIST_FIELDS:
        value = _as_tuple(value)
    return TrackedValue(value=value, provenance=None if provenance.is_empty else provenance)
