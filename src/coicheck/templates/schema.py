"""
coicheck Requirement Template Schemas

Pydantic models for validating requirement template YAML/JSON files.

A template is a pre-built starting point for a tenant type (office, retail,
restaurant...). Property managers review it and turn it into building
defaults or a tenant requirement profile.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders check major-version compatibility
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"

PropertyValuationValue = Literal["replacement_cost", "specific_amount"]

Limit = Optional[int]


def _non_negative(value: Optional[int]) -> Optional[int]:
    if value is not None and value < 0:
        raise ValueError("limit must be >= 0")
    return value


# =============================================================================
# Coverage Sections
# =============================================================================

class GeneralLiabilitySchema(BaseModel):
    """General liability minimums."""
    per_occurrence: Limit = Field(None, description="Per-occurrence limit in dollars")
    aggregate: Limit = Field(None, description="General aggregate limit in dollars")
    occurrence_basis: bool = Field(False, description="Must be written on an occurrence basis")

    @field_validator("per_occurrence", "aggregate")
    @classmethod
    def validate_limits(cls, v: Optional[int]) -> Optional[int]:
        return _non_negative(v)

    @model_validator(mode="after")
    def validate_aggregate(self) -> "GeneralLiabilitySchema":
        if (
            self.per_occurrence is not None
            and self.aggregate is not None
            and self.aggregate < self.per_occurrence
        ):
            raise ValueError("aggregate must be >= per_occurrence")
        return self

    model_config = {"extra": "forbid"}


class AutoLiabilitySchema(BaseModel):
    """Commercial auto minimums."""
    limit: Limit = Field(None, description="Combined single limit")
    includes_hired_non_owned: bool = False

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v: Optional[int]) -> Optional[int]:
        return _non_negative(v)

    model_config = {"extra": "forbid"}


class WorkersCompSchema(BaseModel):
    """Workers compensation and employers liability."""
    required: bool = False
    employers_liability: Limit = None

    @field_validator("employers_liability")
    @classmethod
    def validate_limit(cls, v: Optional[int]) -> Optional[int]:
        return _non_negative(v)

    model_config = {"extra": "forbid"}


class PropertySchema(BaseModel):
    """Tenant property / improvements insurance."""
    required: bool = False
    valuation: Optional[PropertyValuationValue] = None
    amount: Limit = None
    includes_tenant_improvements: bool = False

    @model_validator(mode="after")
    def validate_amount(self) -> "PropertySchema":
        if self.valuation == "specific_amount" and not self.amount:
            raise ValueError("specific_amount valuation requires an amount")
        return self

    model_config = {"extra": "forbid"}


class BusinessInterruptionSchema(BaseModel):
    """Business interruption requirement."""
    required: bool = False
    minimum: Optional[str] = Field(None, description="e.g. 'annual_rent'")

    model_config = {"extra": "forbid"}


class SpecialtySchema(BaseModel):
    """Specialty coverage minimums."""
    professional_liability: Limit = None
    liquor_liability: Limit = None
    pollution_liability: Limit = None
    cyber_liability: Limit = None
    product_liability: Limit = None

    @field_validator(
        "professional_liability",
        "liquor_liability",
        "pollution_liability",
        "cyber_liability",
        "product_liability",
    )
    @classmethod
    def validate_limits(cls, v: Optional[int]) -> Optional[int]:
        return _non_negative(v)

    model_config = {"extra": "forbid"}


class EndorsementsSchema(BaseModel):
    """Required endorsements."""
    additional_insured: bool = False
    waiver_of_subrogation: bool = False
    loss_payee: bool = False

    model_config = {"extra": "forbid"}


# =============================================================================
# Template
# =============================================================================

class RequirementTemplateSchema(BaseModel):
    """
    Complete requirement template.

    This is the top-level schema for template files.
    """
    schema_version: str = Field(SCHEMA_VERSION, description="Schema version")
    key: str = Field(..., description="Unique template key (e.g. 'office')")
    name: str = Field(..., description="Display name")
    description: str = Field("", description="Tenant types this template fits")
    icon: Optional[str] = Field(None, description="UI icon name")

    general_liability: GeneralLiabilitySchema = Field(default_factory=GeneralLiabilitySchema)
    auto_liability: AutoLiabilitySchema = Field(default_factory=AutoLiabilitySchema)
    workers_comp: WorkersCompSchema = Field(default_factory=WorkersCompSchema)
    umbrella_liability: Limit = None
    property_insurance: PropertySchema = Field(default_factory=PropertySchema)
    business_interruption: BusinessInterruptionSchema = Field(
        default_factory=BusinessInterruptionSchema
    )
    specialty: SpecialtySchema = Field(default_factory=SpecialtySchema)
    endorsements: EndorsementsSchema = Field(default_factory=EndorsementsSchema)

    insurer_rating_minimum: Optional[str] = None
    cancellation_notice_days: Optional[int] = Field(None, ge=0)
    renewal_proof_days_before_expiry: Optional[int] = Field(None, ge=0)

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys are lowercase identifiers."""
        key = v.strip().lower()
        if not key or not key.replace("_", "").replace("-", "").isalnum():
            raise ValueError(f"invalid template key: {v!r}")
        return key

    @field_validator("umbrella_liability")
    @classmethod
    def validate_umbrella(cls, v: Optional[int]) -> Optional[int]:
        return _non_negative(v)

    model_config = {
        "extra": "forbid",  # Reject unknown fields
    }


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_template(data: dict[str, Any]) -> RequirementTemplateSchema:
    """
    Validate a template dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return RequirementTemplateSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """True if the template's major schema version matches ours."""
    template_version = str(data.get("schema_version", SCHEMA_VERSION))
    return template_version.split(".")[0] == SCHEMA_VERSION.split(".")[0]
