"""
Pytest configuration and fixtures for coicheck tests.

Provides helper factories and a fixed reference day so expiration math
never depends on the machine clock.
"""
import logging

import pytest
from datetime import date, timedelta

from coicheck.models import (
    AdditionalCoverage,
    ComplianceIssue,
    CoverageRecord,
    ExtractedCoverage,
    OverallStatus,
    RequirementProfile,
    TenantHolder,
    VendorHolder,
)


TODAY = date(2025, 3, 1)


def days_from_today(days: int) -> date:
    """A calendar day relative to TODAY (negative for the past)."""
    return TODAY + timedelta(days=days)


# =============================================================================
# Factory Helpers
# =============================================================================

def make_coverage(
    amount=1_000_000,
    aggregate=None,
    expires_in: int = None,
    expiration_date: date = None,
) -> CoverageRecord:
    """Create a CoverageRecord; expires_in is relative to TODAY."""
    if expiration_date is None and expires_in is not None:
        expiration_date = days_from_today(expires_in)
    return CoverageRecord(
        amount=amount,
        aggregate=aggregate,
        expiration_date=expiration_date,
    )


def make_additional(
    type: str,
    amount=1_000_000,
    expires_in: int = None,
) -> AdditionalCoverage:
    """Create an AdditionalCoverage."""
    return AdditionalCoverage(
        type=type,
        amount=amount,
        expiration_date=days_from_today(expires_in) if expires_in is not None else None,
    )


def make_profile(**fields) -> RequirementProfile:
    """Create a RequirementProfile from flat record fields."""
    return RequirementProfile.from_record(fields)


def make_tenant(
    id: str = "tenant-001",
    coverage: dict = None,
    additional: list = None,
    has_additional_insured: bool = False,
    has_waiver_of_subrogation: bool = False,
    expires_in: int = None,
    uploaded: bool = True,
) -> TenantHolder:
    """Create a TenantHolder; coverage maps line name -> CoverageRecord."""
    return TenantHolder(
        id=id,
        name="Test Tenant LLC",
        coi_coverage=ExtractedCoverage(**(coverage or {})),
        coi_additional_coverages=additional or [],
        coi_has_additional_insured=has_additional_insured,
        coi_has_waiver_of_subrogation=has_waiver_of_subrogation,
        coi_expiration_date=days_from_today(expires_in) if expires_in is not None else None,
        coi_document_path="tenant-001/coi.pdf" if uploaded else None,
        coi_uploaded_at="2025-01-15T10:00:00Z" if uploaded else None,
    )


def make_vendor(
    id: str = "vendor-001",
    coverage: dict = None,
    additional: list = None,
    issues: list = None,
    status: OverallStatus = None,
) -> VendorHolder:
    """Create a VendorHolder; issues may be raw strings or ComplianceIssues."""
    return VendorHolder(
        id=id,
        name="Test Vendor Inc",
        coverage=ExtractedCoverage(**(coverage or {})),
        additional_coverages=additional or [],
        issues=[
            i if isinstance(i, ComplianceIssue) else ComplianceIssue.critical(i)
            for i in (issues or [])
        ],
        status=status,
    )


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def standard_profile():
    """A typical office profile: GL 1M/2M, WC, EL 500k, AI and waiver."""
    return make_profile(
        gl_occurrence_limit=1_000_000,
        gl_aggregate_limit=2_000_000,
        workers_comp_statutory=True,
        workers_comp_employers_liability_limit=500_000,
        additional_insured_entities=["Landlord LLC"],
        waiver_of_subrogation_required=True,
    )


@pytest.fixture
def compliant_tenant():
    """Tenant that satisfies standard_profile with nothing expiring."""
    return make_tenant(
        coverage={
            "general_liability": make_coverage(1_000_000, aggregate=2_000_000, expires_in=200),
            "workers_comp": make_coverage("Statutory", expires_in=200),
            "employers_liability": make_coverage(500_000, expires_in=200),
        },
        has_additional_insured=True,
        has_waiver_of_subrogation=True,
        expires_in=200,
    )


@pytest.fixture
def reset_logging():
    """Remove handlers configure_logging() attached during a test."""
    logger = logging.getLogger("coicheck")
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if getattr(handler, "_coicheck_handler", False):
            logger.removeHandler(handler)
    logger.setLevel(level)
