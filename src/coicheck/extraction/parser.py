"""
coicheck Extraction Parser

Converts validated extraction payloads into domain models. This is the
input boundary: issue lists are normalized here and never re-shaped
further down.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from ..dates import parse_local_date
from ..exceptions import ExtractionParseError
from ..models import (
    COVERAGE_KEYS,
    AdditionalCoverage,
    CoiExtraction,
    CoverageRecord,
    ExtractedCoverage,
    normalize_issues,
)
from .schema import (
    CoiPayloadSchema,
    CoverageLineSchema,
    LeaseExtractionSchema,
)


def _validation_details(exc: ValidationError) -> dict[str, Any]:
    return {
        "errors": [
            {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
            for err in exc.errors()
        ]
    }


def validate_coi_payload(data: Any) -> CoiPayloadSchema:
    """
    Validate an extract-coi payload.

    Raises:
        ExtractionParseError: If the payload does not match the schema
    """
    if not isinstance(data, dict):
        raise ExtractionParseError(
            message=f"Invalid COI extraction payload: expected object, got {type(data).__name__}"
        )
    try:
        return CoiPayloadSchema.model_validate(data)
    except ValidationError as e:
        raise ExtractionParseError(
            message="Invalid COI extraction payload",
            details=_validation_details(e),
        ) from e


def validate_lease_payload(data: Any) -> LeaseExtractionSchema:
    """
    Validate an extract-lease-requirements payload.

    Raises:
        ExtractionParseError: If the payload does not match the schema
    """
    if not isinstance(data, dict):
        raise ExtractionParseError(
            message=f"Invalid lease extraction payload: expected object, got {type(data).__name__}"
        )
    try:
        return LeaseExtractionSchema.model_validate(data)
    except ValidationError as e:
        raise ExtractionParseError(
            message="Invalid lease extraction payload",
            details=_validation_details(e),
        ) from e


def _coverage_record(line: Optional[CoverageLineSchema]) -> Optional[CoverageRecord]:
    if line is None:
        return None
    return CoverageRecord(
        amount=line.amount,
        aggregate=line.aggregate,
        expiration_date=parse_local_date(line.expiration_date),
        expired=line.expired,
        expiring_soon=line.expiring_soon,
    )


def coi_from_schema(payload: CoiPayloadSchema) -> CoiExtraction:
    """Convert a validated COI payload into a CoiExtraction."""
    coverage = ExtractedCoverage(**{
        attr: _coverage_record(getattr(payload.coverage, attr))
        for attr in COVERAGE_KEYS
    })
    additional = [
        AdditionalCoverage(
            type=item.type,
            amount=item.amount,
            aggregate=item.aggregate,
            expiration_date=parse_local_date(item.expiration_date),
            expired=item.expired,
            expiring_soon=item.expiring_soon,
        )
        for item in payload.additional_coverages
    ]
    return CoiExtraction(
        coverage=coverage,
        additional_coverages=additional,
        has_additional_insured=payload.has_additional_insured,
        has_waiver_of_subrogation=payload.has_waiver_of_subrogation,
        issues=normalize_issues(payload.issues),
        company_name=payload.company_name,
        insurance_company=payload.insurance_company,
        certificate_holder=payload.certificate_holder,
        expiration_date=parse_local_date(payload.expiration_date),
    )


def parse_coi_extraction(data: Any) -> CoiExtraction:
    """Validate and convert an extract-coi payload in one step."""
    return coi_from_schema(validate_coi_payload(data))
