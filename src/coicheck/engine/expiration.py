"""
coicheck Expiration Classifier

Classifies coverage lines as expired, expiring soon, or current.

Key features:
- Explicit threshold and reference day on every call
- In-place annotation of CoverageRecord flags
- Idempotent: re-running with the same day yields the same flags
- Summary sweep over all standard and additional coverages
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from ..config import DEFAULT_EXPIRING_THRESHOLD_DAYS
from ..dates import days_until
from ..models import VENDOR_STATUS_COVERAGES, CoverageRecord, ExtractedCoverage


@dataclass(frozen=True)
class ExpirationCheck:
    """Result of classifying one coverage line."""
    expired: bool = False
    expiring_soon: bool = False
    days_until: Optional[int] = None

    @property
    def classified(self) -> bool:
        """False when the record had no usable expiration date."""
        return self.days_until is not None


@dataclass
class ExpirationSummary:
    """Aggregate expiration state across a certificate's coverages."""
    has_expired: bool = False
    has_expiring_soon: bool = False
    details: dict[str, ExpirationCheck] = field(default_factory=dict)


def classify_days(
    days: Optional[int],
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS,
) -> ExpirationCheck:
    """Classify a days-until value against the threshold."""
    if days is None:
        return ExpirationCheck()
    return ExpirationCheck(
        expired=days < 0,
        expiring_soon=0 <= days <= threshold_days,
        days_until=days,
    )


def check_coverage_expiration(
    record: Optional[CoverageRecord],
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS,
    today: Optional[date] = None,
) -> ExpirationCheck:
    """Classify a coverage record without modifying it."""
    if record is None or record.expiration_date is None:
        return ExpirationCheck()
    return classify_days(days_until(record.expiration_date, today), threshold_days)


def classify_expiration(
    record: Optional[CoverageRecord],
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS,
    today: Optional[date] = None,
) -> ExpirationCheck:
    """
    Classify a coverage record and set its flags in place.

    Records without an expiration date are left untouched. Otherwise both
    `expired` and `expiring_soon` are set explicitly, so a record that was
    expiring yesterday and expired today loses its expiring flag.
    """
    check = check_coverage_expiration(record, threshold_days, today)
    if record is not None and check.classified:
        record.expired = check.expired
        record.expiring_soon = check.expiring_soon
    return check


def _sweep(
    coverage: ExtractedCoverage,
    additional: Iterable[CoverageRecord],
    threshold_days: int,
    today: Optional[date],
    annotate: bool,
    coverage_names: Iterable[str],
) -> ExpirationSummary:
    summary = ExpirationSummary()
    classify = classify_expiration if annotate else check_coverage_expiration

    def record_check(key: str, record: CoverageRecord) -> None:
        check = classify(record, threshold_days, today)
        summary.details[key] = check
        summary.has_expired = summary.has_expired or check.expired
        summary.has_expiring_soon = summary.has_expiring_soon or check.expiring_soon

    for name in coverage_names:
        record = coverage.get(name)
        if record is not None:
            record_check(name, record)
    for index, record in enumerate(additional):
        record_check(f"additional_{index}", record)
    return summary


def check_all_coverages_expiration(
    coverage: ExtractedCoverage,
    additional: Iterable[CoverageRecord] = (),
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS,
    today: Optional[date] = None,
) -> ExpirationSummary:
    """Summarize GL, auto, workers comp, employers liability and additional coverages."""
    return _sweep(
        coverage, additional, threshold_days, today,
        annotate=False, coverage_names=VENDOR_STATUS_COVERAGES,
    )


def annotate_coverage(
    coverage: ExtractedCoverage,
    additional: Iterable[CoverageRecord] = (),
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS,
    today: Optional[date] = None,
) -> ExpirationSummary:
    """Classify every present coverage line in place and summarize."""
    names = [name for name, _ in coverage.items()]
    return _sweep(
        coverage, additional, threshold_days, today,
        annotate=True, coverage_names=names,
    )
