"""
coicheck Requirement Template Loader

Loads and validates requirement templates from YAML or JSON files, and
turns them into building defaults or requirement profiles.

Packaged templates live in `coicheck/templates/packs/`; a different
directory can be supplied (COICHECK_TEMPLATES_DIR).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import TemplateLoadError, TemplateNotFoundError, TemplateValidationError
from ..extraction.profiles import building_defaults_to_profile
from ..models import RequirementProfile
from .schema import (
    SCHEMA_VERSION,
    RequirementTemplateSchema,
    check_schema_version,
    validate_template,
)

logger = logging.getLogger(__name__)

PACKS_DIR = Path(__file__).parent / "packs"

TEMPLATE_SUFFIXES = {".yaml", ".yml", ".json"}

# Specialty limits that become named custom coverages
SPECIALTY_COVERAGES = (
    ("liquor_liability", "Liquor Liability"),
    ("pollution_liability", "Pollution Liability"),
    ("cyber_liability", "Cyber Liability"),
    ("product_liability", "Product Liability"),
)


class TemplateLoader:
    """
    Loads requirement templates and caches them by key.

    Usage:
        loader = TemplateLoader()
        loader.load_directory()
        office = loader.get("office")
    """

    def __init__(self, strict_version: bool = True):
        self.strict_version = strict_version
        self._templates: dict[str, RequirementTemplateSchema] = {}

    def load(self, path: Union[str, Path]) -> RequirementTemplateSchema:
        """
        Load one template file.

        Raises:
            TemplateLoadError: If the file cannot be read or parsed
            TemplateValidationError: If validation or the version check fails
        """
        path = Path(path)

        try:
            data = self._load_file(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise TemplateLoadError(
                message=f"Failed to load template: {e}",
                details={"path": str(path), "error": str(e)},
            ) from e

        if not isinstance(data, dict):
            raise TemplateLoadError(
                message="Template file must contain a mapping",
                details={"path": str(path)},
            )

        if self.strict_version and not check_schema_version(data):
            template_version = data.get("schema_version", "unknown")
            raise TemplateValidationError(
                message=(
                    f"Schema version mismatch: template has {template_version}, "
                    f"expected {SCHEMA_VERSION}"
                ),
                details={
                    "path": str(path),
                    "template_version": template_version,
                    "expected_version": SCHEMA_VERSION,
                },
            )

        try:
            template = validate_template(data)
        except ValidationError as e:
            raise TemplateValidationError(
                message=f"Template validation failed: {e.error_count()} errors",
                details={"errors": e.errors(), "path": str(path)},
            ) from e

        self._templates[template.key] = template
        return template

    def load_directory(self, directory: Union[str, Path, None] = None) -> list[RequirementTemplateSchema]:
        """Load every template file in a directory (packaged templates by default)."""
        directory = Path(directory) if directory is not None else PACKS_DIR
        if not directory.is_dir():
            raise TemplateLoadError(
                message=f"Template directory not found: {directory}",
                details={"path": str(directory)},
            )
        loaded = []
        for path in sorted(directory.iterdir()):
            if path.suffix.lower() in TEMPLATE_SUFFIXES:
                loaded.append(self.load(path))
        logger.debug("Loaded %d templates from %s", len(loaded), directory)
        return loaded

    def _load_file(self, path: Path) -> Any:
        """Load data from YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)

    def get(self, key: str) -> Optional[RequirementTemplateSchema]:
        """Get a cached template by key."""
        return self._templates.get(key.lower())

    def list_keys(self) -> list[str]:
        """Keys of all loaded templates, in load order."""
        return list(self._templates.keys())


# =============================================================================
# Convenience Functions
# =============================================================================

def load_template(path: Union[str, Path]) -> RequirementTemplateSchema:
    """Load a single template file."""
    return TemplateLoader().load(path)


def load_templates(directory: Union[str, Path, None] = None) -> dict[str, RequirementTemplateSchema]:
    """Load all templates in a directory, keyed by template key."""
    loader = TemplateLoader()
    return {t.key: t for t in loader.load_directory(directory)}


def get_template(key: str, directory: Union[str, Path, None] = None) -> RequirementTemplateSchema:
    """
    Look up one template by key.

    Raises:
        TemplateNotFoundError: If no template has that key
    """
    templates = load_templates(directory)
    template = templates.get(key.strip().lower())
    if template is None:
        raise TemplateNotFoundError(
            message=f"Template not found: {key}",
            details={"available": sorted(templates)},
        )
    return template


# =============================================================================
# Conversion
# =============================================================================

def _special_endorsements(template: RequirementTemplateSchema) -> list[str]:
    endorsements = []
    if template.general_liability.occurrence_basis:
        endorsements.append("General liability written on an occurrence basis")
    if template.auto_liability.includes_hired_non_owned:
        endorsements.append("Hired and non-owned auto liability")
    if template.property_insurance.includes_tenant_improvements:
        endorsements.append("Property coverage includes tenant improvements")
    if template.endorsements.loss_payee:
        endorsements.append("Landlord named as loss payee")
    if template.insurer_rating_minimum:
        endorsements.append(f"Insurer rated {template.insurer_rating_minimum} or better")
    return endorsements


def template_to_defaults(
    template: RequirementTemplateSchema,
    additional_insured_entities: Iterable[str] = (),
    property_id: Optional[str] = None,
) -> dict[str, Any]:
    """
    Convert a template into a building-defaults record.

    Additional insured entities are property specific, so they are passed
    in; they are only used when the template requires the endorsement.
    """
    specialty = template.specialty
    property_insurance = template.property_insurance
    defaults: dict[str, Any] = {
        "property_id": property_id,
        "gl_occurrence_limit": template.general_liability.per_occurrence,
        "gl_aggregate_limit": template.general_liability.aggregate,
        "commercial_auto_csl": template.auto_liability.limit,
        "workers_comp_statutory": template.workers_comp.required,
        "workers_comp_employers_liability_limit": template.workers_comp.employers_liability,
        "umbrella_limit": template.umbrella_liability,
        "property_contents_limit": (
            property_insurance.amount
            if property_insurance.valuation == "specific_amount"
            else None
        ),
        "business_interruption_required": template.business_interruption.required,
        "business_interruption_duration": template.business_interruption.minimum,
        "professional_liability_limit": specialty.professional_liability,
        "waiver_of_subrogation_required": template.endorsements.waiver_of_subrogation,
        "cancellation_notice_days": template.cancellation_notice_days,
        "special_endorsements": _special_endorsements(template),
        "custom_coverages": [
            {"name": label, "limit": getattr(specialty, attr)}
            for attr, label in SPECIALTY_COVERAGES
            if getattr(specialty, attr)
        ],
    }
    entities = list(additional_insured_entities)
    if template.endorsements.additional_insured and entities:
        defaults["additional_insured_entities"] = entities
    return {k: v for k, v in defaults.items() if v is not None}


def template_to_profile(
    template: RequirementTemplateSchema,
    additional_insured_entities: Iterable[str] = (),
    property_id: Optional[str] = None,
) -> RequirementProfile:
    """Template -> building defaults -> requirement profile."""
    return building_defaults_to_profile(
        template_to_defaults(template, additional_insured_entities, property_id)
    )


def _millions(amount: int) -> str:
    value = amount / 1_000_000
    if value.is_integer():
        return f"${int(value)}M"
    return f"${value:.1f}M"


def summarize_template(template: RequirementTemplateSchema) -> str:
    """One-line coverage summary, e.g. "GL: $1M/$2M, WC: Statutory, Umbrella: $2M"."""
    parts = []
    gl = template.general_liability
    if gl.per_occurrence:
        aggregate = _millions(gl.aggregate) if gl.aggregate else "N/A"
        parts.append(f"GL: {_millions(gl.per_occurrence)}/{aggregate}")
    if template.workers_comp.required:
        parts.append("WC: Statutory")
    if template.umbrella_liability:
        parts.append(f"Umbrella: {_millions(template.umbrella_liability)}")
    if template.auto_liability.limit:
        parts.append(f"Auto: {_millions(template.auto_liability.limit)}")
    specialty = template.specialty
    if specialty.professional_liability:
        parts.append(f"Prof: {_millions(specialty.professional_liability)}")
    for attr, label in SPECIALTY_COVERAGES:
        amount = getattr(specialty, attr)
        if amount:
            parts.append(f"{label.split()[0]}: {_millions(amount)}")
    return ", ".join(parts)
