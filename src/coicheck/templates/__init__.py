"""
coicheck Requirement Templates

Pre-built requirement templates per tenant type, stored as YAML.

Usage:
    from coicheck.templates import get_template, summarize_template

    office = get_template("office")
    summarize_template(office)  # "GL: $1M/$2M, WC: Statutory"
"""
from __future__ import annotations

from .loader import (
    PACKS_DIR,
    SPECIALTY_COVERAGES,
    TemplateLoader,
    get_template,
    load_template,
    load_templates,
    summarize_template,
    template_to_defaults,
    template_to_profile,
)
from .schema import (
    SCHEMA_VERSION,
    RequirementTemplateSchema,
    check_schema_version,
    validate_template,
)

__all__ = [
    "PACKS_DIR",
    "SPECIALTY_COVERAGES",
    "TemplateLoader",
    "get_template",
    "load_template",
    "load_templates",
    "summarize_template",
    "template_to_defaults",
    "template_to_profile",
    "SCHEMA_VERSION",
    "RequirementTemplateSchema",
    "check_schema_version",
    "validate_template",
]
