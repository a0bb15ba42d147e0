"""
coicheck Compliance Result Models

The output of one compliance evaluation.

Key components:
- ComplianceIssue: A human-readable problem with a severity
- ComplianceField: The verdict for one evaluated requirement
- ComplianceResult: Overall status plus every field and issue

Results are recomputed on every evaluation and never mutated afterwards by
the engine. `to_dict()` produces the camelCase shape stored on holder
records and rendered by the UI.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from .enums import FieldStatus, IssueType, OverallStatus


@dataclass(frozen=True)
class ComplianceIssue:
    """
    A compliance issue shown to the user verbatim.

    Attributes:
        type: Severity (critical, error, warning)
        message: Human-readable description
    """
    type: IssueType
    message: str

    @classmethod
    def critical(cls, message: str) -> "ComplianceIssue":
        return cls(IssueType.CRITICAL, message)

    @classmethod
    def error(cls, message: str) -> "ComplianceIssue":
        return cls(IssueType.ERROR, message)

    @classmethod
    def warning(cls, message: str) -> "ComplianceIssue":
        return cls(IssueType.WARNING, message)

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type.value, "message": self.message}


# Words that make a plain-string extraction issue critical
CRITICAL_KEYWORDS = ("expired", "missing", "below", "required")


def normalize_issue(raw: Any) -> ComplianceIssue:
    """
    Normalize one extraction issue into a ComplianceIssue.

    The extraction service returns plain strings, {message} objects or
    {description} objects. Strings are critical when they mention
    expiration, missing coverage, a shortfall or a requirement; objects
    keep their own type when it is valid and default to warning.
    """
    if isinstance(raw, ComplianceIssue):
        return raw
    if isinstance(raw, str):
        lowered = raw.lower()
        is_critical = any(word in lowered for word in CRITICAL_KEYWORDS)
        return ComplianceIssue(IssueType.CRITICAL if is_critical else IssueType.WARNING, raw)
    if isinstance(raw, dict):
        try:
            issue_type = IssueType(raw.get("type"))
        except ValueError:
            issue_type = IssueType.WARNING
        message = raw.get("message") or raw.get("description") or str(raw)
        return ComplianceIssue(issue_type, str(message))
    return ComplianceIssue(IssueType.WARNING, str(raw))


def normalize_issues(raw: Any) -> list[ComplianceIssue]:
    """Normalize an issues list; anything that is not a list yields []."""
    if not isinstance(raw, (list, tuple)):
        return []
    return [normalize_issue(item) for item in raw]


@dataclass
class ComplianceField:
    """
    The evaluation of one requirement.

    Attributes:
        field_name: Stable identifier (e.g. "gl_occurrence", "custom_Liquor")
        label: User-facing label used in issue messages
        required: Required value (amount, True, "Statutory") or None if not required
        actual: Value found on the certificate
        status: Field verdict
        expiration_date: Expiration of the coverage line, if known
    """
    field_name: str
    label: str
    required: Any
    actual: Any
    status: FieldStatus = FieldStatus.COMPLIANT
    expiration_date: Optional[date] = None

    @property
    def is_required(self) -> bool:
        return bool(self.required)

    @property
    def is_failing(self) -> bool:
        """Required and either non-compliant or expired."""
        return self.is_required and self.status in {
            FieldStatus.NON_COMPLIANT,
            FieldStatus.EXPIRED,
        }

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "fieldName": self.field_name,
            "label": self.label,
            "required": self.required,
            "actual": self.actual,
            "status": self.status.value,
        }
        if self.expiration_date is not None:
            result["expirationDate"] = self.expiration_date.isoformat()
        return result


@dataclass
class ComplianceResult:
    """
    Overall compliance verdict for a holder.

    Attributes:
        overall_status: Reduced status (see engine.aggregator)
        fields: Per-requirement verdicts in evaluation order
        issues: Issues accumulated across all fields and checks
    """
    overall_status: OverallStatus
    fields: list[ComplianceField] = field(default_factory=list)
    issues: list[ComplianceIssue] = field(default_factory=list)

    def field_by_name(self, field_name: str) -> Optional[ComplianceField]:
        for f in self.fields:
            if f.field_name == field_name:
                return f
        return None

    def issues_of_type(self, issue_type: IssueType) -> list[ComplianceIssue]:
        return [i for i in self.issues if i.type == issue_type]

    def to_dict(self) -> dict[str, Any]:
        return {
            "overallStatus": self.overall_status.value,
            "fields": [f.to_dict() for f in self.fields],
            "issues": [i.to_dict() for i in self.issues],
        }
