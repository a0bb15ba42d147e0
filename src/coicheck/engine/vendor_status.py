"""
coicheck Vendor Status Classifier

Status for vendor self-service uploads, where no requirement profile is
consulted. The status comes straight from the coverage flags and the
extraction issues:

    expired        any of GL / auto / WC / EL flagged expired
    expiring       any of the same lines flagged expiring soon
    non-compliant  extraction reported issues
    compliant      otherwise

The holder-level expiration date is not consulted here, unlike the tenant
aggregator.
"""
from __future__ import annotations

import copy
import logging
from datetime import date
from typing import Optional

from ..config import DEFAULT_EXPIRING_THRESHOLD_DAYS
from ..models import (
    VENDOR_STATUS_COVERAGES,
    OverallStatus,
    VendorHolder,
    normalize_issues,
)
from .expiration import annotate_coverage

logger = logging.getLogger(__name__)


def determine_vendor_status(vendor: VendorHolder) -> OverallStatus:
    """Classify a vendor from its (already annotated) coverage flags."""
    records = [
        vendor.coverage.get(name)
        for name in VENDOR_STATUS_COVERAGES
        if vendor.coverage.get(name) is not None
    ]
    if any(record.expired for record in records):
        return OverallStatus.EXPIRED
    if any(record.expiring_soon for record in records):
        return OverallStatus.EXPIRING
    if vendor.issues:
        return OverallStatus.NON_COMPLIANT
    return OverallStatus.COMPLIANT


def recalculate_vendor_status(
    vendor: VendorHolder,
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS,
    today: Optional[date] = None,
) -> VendorHolder:
    """
    Re-annotate coverage flags against today and recompute the status.

    Returns a new VendorHolder; the input is left untouched. The status may
    improve as well as worsen (e.g. after a renewed policy date).
    """
    updated = copy.deepcopy(vendor)
    annotate_coverage(
        updated.coverage,
        updated.additional_coverages,
        threshold_days=threshold_days,
        today=today,
    )
    updated.issues = normalize_issues(updated.issues)
    previous = vendor.status
    updated.status = determine_vendor_status(updated)
    if previous is not None and previous != updated.status:
        logger.info(
            "Vendor status changed from %s to %s",
            previous.value,
            updated.status.value,
            extra={"holder_id": vendor.id, "overall_status": updated.status.value},
        )
    return updated
