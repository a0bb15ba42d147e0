"""
coicheck Requirement Profile Builders

Turns lease extractions and building defaults into RequirementProfiles.

- extraction_to_profile: every extracted value is tagged lease_extracted
  with its confidence (0 when the model gave none) and lease reference
- building_defaults_to_profile: every copied value is tagged
  building_default
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional, Union

from ..dates import parse_local_date
from ..models import (
    CustomCoverageRequirement,
    Provenance,
    RequirementProfile,
    RequirementSource,
    TrackedValue,
)
from ..models.requirements import LIST_FIELDS
from .parser import validate_lease_payload
from .schema import ExtractedFieldSchema, LeaseExtractionSchema

# Lease requirement fields copied with provenance
LEASE_TRACKED_FIELDS = (
    "gl_occurrence_limit",
    "gl_aggregate_limit",
    "property_contents_limit",
    "umbrella_limit",
    "workers_comp_statutory",
    "workers_comp_employers_liability_limit",
    "commercial_auto_csl",
    "professional_liability_limit",
    "business_interruption_required",
    "additional_insured_entities",
    "loss_payee_entities",
    "waiver_of_subrogation_required",
    "certificate_holder_name",
    "cancellation_notice_days",
)

# Building default fields copied with provenance
DEFAULT_TRACKED_FIELDS = (
    "gl_occurrence_limit",
    "gl_aggregate_limit",
    "property_contents_limit",
    "umbrella_limit",
    "workers_comp_statutory",
    "workers_comp_employers_liability_limit",
    "commercial_auto_csl",
    "professional_liability_limit",
    "business_interruption_required",
    "cancellation_notice_days",
    "waiver_of_subrogation_required",
    "additional_insured_entities",
    "loss_payee_entities",
    "certificate_holder_name",
)


def _tuple(value: Any) -> tuple:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


def _is_present(name: str, value: Any) -> bool:
    if value is None:
        return False
    if name in LIST_FIELDS:
        return len(_tuple(value)) > 0
    return True


def _lease_tracked(name: str, extracted: Optional[ExtractedFieldSchema]) -> Optional[TrackedValue]:
    if extracted is None or not _is_present(name, extracted.value):
        return None
    value = _tuple(extracted.value) if name in LIST_FIELDS else extracted.value
    return TrackedValue(
        value=value,
        provenance=Provenance(
            source=RequirementSource.LEASE_EXTRACTED,
            confidence=int(round(extracted.confidence or 0)),
            lease_ref=extracted.lease_ref,
        ),
    )


def _field_value(extracted: Optional[ExtractedFieldSchema]) -> Any:
    return extracted.value if extracted is not None else None


def extraction_to_profile(
    extraction: Union[LeaseExtractionSchema, Mapping[str, Any]],
    property_id: Optional[str] = None,
) -> RequirementProfile:
    """
    Build a profile from a lease requirement extraction.

    Raises:
        ExtractionParseError: If a raw mapping fails validation
    """
    if not isinstance(extraction, LeaseExtractionSchema):
        extraction = validate_lease_payload(dict(extraction))
    reqs = extraction.requirements

    values: dict[str, Any] = {}
    for name in LEASE_TRACKED_FIELDS:
        tracked = _lease_tracked(name, getattr(reqs, name))
        if tracked is not None:
            values[name] = tracked

    for name in ("business_interruption_duration", "additional_insured_language",
                 "certificate_holder_address"):
        value = _field_value(getattr(reqs, name))
        if value:
            values[name] = str(value)

    values["waiver_of_subrogation_coverages"] = _tuple(
        _field_value(reqs.waiver_of_subrogation_coverages)
    )
    values["special_endorsements"] = _tuple(_field_value(reqs.special_endorsements))
    values["custom_coverages"] = tuple(
        CustomCoverageRequirement(
            name=cc.name,
            limit=cc.limit,
            provenance=Provenance(
                source=RequirementSource.LEASE_EXTRACTED,
                confidence=int(round(cc.confidence or 0)),
                lease_ref=cc.lease_ref,
            ),
        )
        for cc in reqs.custom_coverages
    )

    values["lease_start_date"] = parse_local_date(_field_value(extraction.lease_start_date))
    values["lease_end_date"] = parse_local_date(_field_value(extraction.lease_end_date))
    values["lease_renewal_date"] = parse_local_date(_field_value(extraction.lease_renewal_date))

    return RequirementProfile(
        creation_method=RequirementSource.LEASE_EXTRACTED,
        property_id=property_id,
        **values,
    )


def building_defaults_to_profile(defaults: Mapping[str, Any]) -> RequirementProfile:
    """Build a profile from a property's default tenant requirements."""
    source = Provenance(source=RequirementSource.BUILDING_DEFAULT)

    values: dict[str, Any] = {}
    for name in DEFAULT_TRACKED_FIELDS:
        value = defaults.get(name)
        if not _is_present(name, value):
            continue
        if name in LIST_FIELDS:
            value = _tuple(value)
        values[name] = TrackedValue(value=value, provenance=source)

    for name in ("business_interruption_duration", "additional_insured_language",
                 "certificate_holder_address"):
        if defaults.get(name):
            values[name] = defaults[name]

    values["waiver_of_subrogation_coverages"] = _tuple(
        defaults.get("waiver_of_subrogation_coverages")
    )
    values["special_endorsements"] = _tuple(defaults.get("special_endorsements"))

    custom = []
    for item in defaults.get("custom_coverages") or []:
        if not isinstance(item, Mapping):
            continue
        requirement = CustomCoverageRequirement.from_dict(item)
        custom.append(replace(requirement, provenance=replace(
            requirement.provenance or Provenance(),
            source=RequirementSource.BUILDING_DEFAULT,
        )))
    values["custom_coverages"] = tuple(custom)

    return RequirementProfile(
        creation_method=RequirementSource.BUILDING_DEFAULT,
        property_id=defaults.get("property_id"),
        **values,
    )

