"""
coicheck Extraction Payload Schemas

Pydantic models for validating what the remote extraction functions return.

Two payloads:
- COI extraction: coverage lines, additional coverages, endorsements, issues
- Lease requirement extraction: per-field {value, confidence, leaseRef}

The AI output is loosely typed. Amounts may arrive as numbers, "Statutory"
or "$1,000,000"; endorsements as booleans or "yes"/"no" text. Schemas
accept those variants and unknown keys are ignored.
"""
from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models.coverage import COVERAGE_KEYS, parse_amount

LOOSE_CONFIG = ConfigDict(extra="ignore", populate_by_name=True)

NEGATIVE_ANSWERS = {"", "no", "none", "n/a", "false", "not indicated"}


def yes_no(value: Any) -> bool:
    """Interpret an endorsement answer ("yes", a list of names, True...)."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() not in NEGATIVE_ANSWERS
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return bool(value)


# =============================================================================
# COI Extraction
# =============================================================================

class CoverageLineSchema(BaseModel):
    """One coverage line as returned by extract-coi."""
    model_config = LOOSE_CONFIG

    amount: Optional[Union[int, float, str]] = Field(None, description="Limit or 'Statutory'")
    each_occurrence: Optional[Union[int, float]] = Field(None, alias="eachOccurrence")
    aggregate: Optional[Union[int, float]] = Field(None, description="Aggregate limit")
    expiration_date: Optional[str] = Field(None, alias="expirationDate")
    expired: Optional[bool] = None
    expiring_soon: Optional[bool] = Field(None, alias="expiringSoon")

    @field_validator("amount", mode="before")
    @classmethod
    def normalize_amount(cls, v: Any) -> Any:
        return parse_amount(v)

    @field_validator("each_occurrence", "aggregate", mode="before")
    @classmethod
    def normalize_limit(cls, v: Any) -> Any:
        parsed = parse_amount(v)
        return parsed if isinstance(parsed, (int, float)) else None

    @model_validator(mode="after")
    def fill_amount(self) -> "CoverageLineSchema":
        """Older payloads only carry eachOccurrence for GL."""
        if self.amount is None and self.each_occurrence is not None:
            self.amount = self.each_occurrence
        return self


class AdditionalCoverageSchema(CoverageLineSchema):
    """A named coverage beyond the standard lines."""
    type: str = Field("", description="Coverage name, e.g. 'Cyber Liability'")

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> str:
        return "" if v is None else str(v)


class CoverageSchema(BaseModel):
    """Standard coverage lines."""
    model_config = LOOSE_CONFIG

    general_liability: Optional[CoverageLineSchema] = Field(None, alias="generalLiability")
    auto_liability: Optional[CoverageLineSchema] = Field(None, alias="autoLiability")
    workers_comp: Optional[CoverageLineSchema] = Field(None, alias="workersComp")
    employers_liability: Optional[CoverageLineSchema] = Field(None, alias="employersLiability")
    property_contents: Optional[CoverageLineSchema] = Field(None, alias="propertyContents")
    umbrella: Optional[CoverageLineSchema] = None
    professional_liability: Optional[CoverageLineSchema] = Field(
        None, alias="professionalLiability"
    )


class CoiPayloadSchema(BaseModel):
    """
    The `data` object of a successful extract-coi call.

    Accepts both the processed shape ({coverage: {...}}) and the raw AI
    shape with coverage lines at the top level.
    """
    model_config = LOOSE_CONFIG

    company_name: Optional[str] = Field(None, alias="name")
    dba: Optional[str] = None
    expiration_date: Optional[str] = Field(None, alias="expirationDate")
    coverage: CoverageSchema = Field(default_factory=CoverageSchema)
    additional_coverages: list[AdditionalCoverageSchema] = Field(
        default_factory=list, alias="additionalCoverages"
    )
    has_additional_insured: bool = Field(False, alias="hasAdditionalInsured")
    has_waiver_of_subrogation: bool = Field(False, alias="hasWaiverOfSubrogation")
    insurance_company: Optional[str] = Field(None, alias="insuranceCompany")
    certificate_holder: Optional[str] = Field(None, alias="certificateHolder")
    issues: list[Any] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def lift_raw_shape(cls, data: Any) -> Any:
        """Normalize raw AI output into the processed shape."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        raw = data.get("rawData") if isinstance(data.get("rawData"), dict) else {}

        if not isinstance(data.get("coverage"), dict):
            data["coverage"] = {
                key: data[key] for key in COVERAGE_KEYS.values() if key in data
            }
        if data.get("name") is None:
            data["name"] = data.get("companyName") or raw.get("companyName")
        for key in ("insuranceCompany", "certificateHolder"):
            if data.get(key) is None and raw.get(key) is not None:
                data[key] = raw[key]

        if "hasAdditionalInsured" not in data:
            data["hasAdditionalInsured"] = yes_no(
                data.get("additionalInsured", raw.get("additionalInsured"))
            )
        if "hasWaiverOfSubrogation" not in data:
            data["hasWaiverOfSubrogation"] = yes_no(
                data.get("waiverOfSubrogation", raw.get("waiverOfSubrogation"))
            )
        if data.get("additionalCoverages") is None:
            data["additionalCoverages"] = []
        if not isinstance(data.get("issues"), list):
            data["issues"] = []
        return data

    @field_validator("has_additional_insured", "has_waiver_of_subrogation", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        return yes_no(v)


# =============================================================================
# Lease Requirement Extraction
# =============================================================================

class ExtractedFieldSchema(BaseModel):
    """A single lease value with confidence and location."""
    model_config = LOOSE_CONFIG

    value: Any = None
    confidence: Optional[float] = Field(None, ge=0, le=100)
    lease_ref: Optional[str] = Field(None, alias="leaseRef")

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return max(0, min(100, v))
        return v


class CustomCoverageSchema(BaseModel):
    """A named coverage requirement found in the lease."""
    model_config = LOOSE_CONFIG

    name: str
    limit: Optional[Union[int, float]] = None
    confidence: Optional[float] = Field(None, ge=0, le=100)
    lease_ref: Optional[str] = Field(None, alias="leaseRef")

    @field_validator("limit", mode="before")
    @classmethod
    def normalize_limit(cls, v: Any) -> Any:
        parsed = parse_amount(v)
        return parsed if isinstance(parsed, (int, float)) else None


class LeaseRequirementsSchema(BaseModel):
    """The `requirements` block of a lease extraction."""
    model_config = LOOSE_CONFIG

    gl_occurrence_limit: Optional[ExtractedFieldSchema] = Field(None, alias="glOccurrenceLimit")
    gl_aggregate_limit: Optional[ExtractedFieldSchema] = Field(None, alias="glAggregateLimit")
    property_contents_limit: Optional[ExtractedFieldSchema] = Field(
        None, alias="propertyContentsLimit"
    )
    umbrella_limit: Optional[ExtractedFieldSchema] = Field(None, alias="umbrellaLimit")
    workers_comp_statutory: Optional[ExtractedFieldSchema] = Field(
        None, alias="workersCompStatutory"
    )
    workers_comp_employers_liability_limit: Optional[ExtractedFieldSchema] = Field(
        None, alias="workersCompEmployersLiabilityLimit"
    )
    commercial_auto_csl: Optional[ExtractedFieldSchema] = Field(None, alias="commercialAutoCsl")
    professional_liability_limit: Optional[ExtractedFieldSchema] = Field(
        None, alias="professionalLiabilityLimit"
    )
    business_interruption_required: Optional[ExtractedFieldSchema] = Field(
        None, alias="businessInterruptionRequired"
    )
    business_interruption_duration: Optional[ExtractedFieldSchema] = Field(
        None, alias="businessInterruptionDuration"
    )
    additional_insured_entities: Optional[ExtractedFieldSchema] = Field(
        None, alias="additionalInsuredEntities"
    )
    additional_insured_language: Optional[ExtractedFieldSchema] = Field(
        None, alias="additionalInsuredLanguage"
    )
    loss_payee_entities: Optional[ExtractedFieldSchema] = Field(None, alias="lossPayeeEntities")
    waiver_of_subrogation_required: Optional[ExtractedFieldSchema] = Field(
        None, alias="waiverOfSubrogationRequired"
    )
    waiver_of_subrogation_coverages: Optional[ExtractedFieldSchema] = Field(
        None, alias="waiverOfSubrogationCoverages"
    )
    certificate_holder_name: Optional[ExtractedFieldSchema] = Field(
        None, alias="certificateHolderName"
    )
    certificate_holder_address: Optional[ExtractedFieldSchema] = Field(
        None, alias="certificateHolderAddress"
    )
    cancellation_notice_days: Optional[ExtractedFieldSchema] = Field(
        None, alias="cancellationNoticeDays"
    )
    special_endorsements: Optional[ExtractedFieldSchema] = Field(
        None, alias="specialEndorsements"
    )
    custom_coverages: list[CustomCoverageSchema] = Field(
        default_factory=list, alias="customCoverages"
    )

    @field_validator("custom_coverages", mode="before")
    @classmethod
    def default_custom(cls, v: Any) -> Any:
        return [] if v is None else v


class LeaseExtractionSchema(BaseModel):
    """The `data` object of a successful extract-lease-requirements call."""
    model_config = LOOSE_CONFIG

    document_type: Optional[str] = Field(None, alias="documentType")
    document_type_confidence: Optional[float] = Field(None, alias="documentTypeConfidence")
    tenant_name: Optional[ExtractedFieldSchema] = Field(None, alias="tenantName")
    property_address: Optional[ExtractedFieldSchema] = Field(None, alias="propertyAddress")
    suite_unit: Optional[ExtractedFieldSchema] = Field(None, alias="suiteUnit")
    lease_start_date: Optional[ExtractedFieldSchema] = Field(None, alias="leaseStartDate")
    lease_end_date: Optional[ExtractedFieldSchema] = Field(None, alias="leaseEndDate")
    lease_renewal_date: Optional[ExtractedFieldSchema] = Field(None, alias="leaseRenewalDate")
    requirements: LeaseRequirementsSchema = Field(default_factory=LeaseRequirementsSchema)
    extraction_notes: Optional[str] = Field(None, alias="extractionNotes")
    references_external_documents: bool = Field(False, alias="referencesExternalDocuments")
    external_document_references: list[str] = Field(
        default_factory=list, alias="externalDocumentReferences"
    )

    @field_validator("requirements", mode="before")
    @classmethod
    def default_requirements(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("references_external_documents", mode="before")
    @classmethod
    def coerce_references(cls, v: Any) -> bool:
        return bool(v)

    @field_validator("external_document_references", mode="before")
    @classmethod
    def default_references(cls, v: Any) -> Any:
        return [] if v is None else v
