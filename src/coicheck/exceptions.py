"""
coicheck Exception Hierarchy

Domain-specific exceptions for certificate-of-insurance compliance.
All exceptions include error codes for tracking and logging.

Exception codes follow the pattern: CC_<CATEGORY>_<SPECIFIC>

Note: compliance gaps (coverage below requirement, missing profile) are
never raised. They are reported as statuses and issues on the result.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class CoiCheckError(Exception):
    """
    Base exception for all coicheck errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (CC_*)
        details: Additional context about the error
        holder_id: Associated vendor/tenant ID if applicable
    """
    message: str
    code: str = "CC_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    holder_id: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.holder_id:
            parts.append(f"(holder: {self.holder_id})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/CLI output."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.holder_id:
            result["holder_id"] = self.holder_id
        return result


# =============================================================================
# Extraction Errors
# =============================================================================

@dataclass
class ExtractionError(CoiCheckError):
    """Extraction call failed."""
    code: str = "CC_EXTRACTION_ERROR"


@dataclass
class ExtractionNotConfiguredError(ExtractionError):
    """Extraction service endpoint or credentials are not configured."""
    code: str = "CC_EXTRACTION_NOT_CONFIGURED"


@dataclass
class ExtractionServiceError(ExtractionError):
    """Remote function returned an error payload."""
    code: str = "CC_EXTRACTION_SERVICE_ERROR"
    status_code: Optional[int] = None


@dataclass
class ExtractionParseError(ExtractionError):
    """Extraction payload did not match the expected shape."""
    code: str = "CC_EXTRACTION_PARSE_ERROR"


# =============================================================================
# Template Errors
# =============================================================================

@dataclass
class TemplateLoadError(CoiCheckError):
    """Failed to read requirement template file."""
    code: str = "CC_TEMPLATE_LOAD_ERROR"


@dataclass
class TemplateValidationError(CoiCheckError):
    """Requirement template failed schema validation."""
    code: str = "CC_TEMPLATE_VALIDATION_ERROR"


@dataclass
class TemplateNotFoundError(CoiCheckError):
    """Requested requirement template not found."""
    code: str = "CC_TEMPLATE_NOT_FOUND"


# =============================================================================
# Holder Record Errors
# =============================================================================

@dataclass
class HolderRecordError(CoiCheckError):
    """Holder record could not be read."""
    code: str = "CC_HOLDER_RECORD_ERROR"
