"""
coicheck Extraction

Everything between a PDF and the engine's input models:

- RetryableInvoker: bounded exponential-backoff retry for remote calls
- FunctionsClient: httpx client for the remote extraction functions
- Schemas and parser: validate AI payloads, convert to domain models
- ExtractionService: COI and lease extraction flows
- Profile builders: lease extraction / building defaults -> RequirementProfile
"""
from __future__ import annotations

from .client import FunctionsClient
from .parser import (
    coi_from_schema,
    parse_coi_extraction,
    validate_coi_payload,
    validate_lease_payload,
)
from .profiles import building_defaults_to_profile, extraction_to_profile
from .retry import (
    NON_RETRIABLE_MARKERS,
    RetryableInvoker,
    RetryPolicy,
    RetryStats,
    invoke_with_retry,
)
from .schema import CoiPayloadSchema, LeaseExtractionSchema
from .service import (
    EXTRACT_COI_FUNCTION,
    EXTRACT_LEASE_FUNCTION,
    ExtractionOutcome,
    ExtractionService,
    file_to_base64,
)

__all__ = [
    "FunctionsClient",
    "coi_from_schema",
    "parse_coi_extraction",
    "validate_coi_payload",
    "validate_lease_payload",
    "building_defaults_to_profile",
    "extraction_to_profile",
    "NON_RETRIABLE_MARKERS",
    "RetryableInvoker",
    "RetryPolicy",
    "RetryStats",
    "invoke_with_retry",
    "CoiPayloadSchema",
    "LeaseExtractionSchema",
    "EXTRACT_COI_FUNCTION",
    "EXTRACT_LEASE_FUNCTION",
    "ExtractionOutcome",
    "ExtractionService",
    "file_to_base64",
]
