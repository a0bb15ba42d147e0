"""
coicheck Extraction Service

COI and lease-requirement extraction over the remote functions, with retry.

Both flows follow the same steps:
1. Encode the PDF as base64
2. Invoke the remote function through RetryableInvoker
3. Require `data.success` in the response
4. Validate and convert the payload

Failures never escape as exceptions: they are logged and returned as
ExtractionOutcome(success=False, error=...). RetryableInvoker itself still
raises; this is the layer that absorbs it.
"""
from __future__ import annotations

import asyncio
import base64
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Union

import httpx

from ..config import Settings
from ..exceptions import CoiCheckError, ExtractionError
from .client import FunctionsClient
from .parser import parse_coi_extraction, validate_lease_payload
from .retry import RetryableInvoker, RetryPolicy, RetryStats, SleepFn

logger = logging.getLogger(__name__)

EXTRACT_COI_FUNCTION = "extract-coi"
EXTRACT_LEASE_FUNCTION = "extract-lease-requirements"


def file_to_base64(path: Union[str, Path]) -> str:
    """Read a file and return its contents as a base64 string."""
    return base64.b64encode(Path(path).read_bytes()).decode("ascii")


@dataclass
class ExtractionOutcome:
    """
    Result of one extraction flow.

    Attributes:
        success: True if the payload was extracted and parsed
        data: CoiExtraction or LeaseExtractionSchema on success
        error: Human-readable failure message
        attempts: Remote calls made (including retries)
        raw: Raw payload returned by the remote function
    """
    success: bool
    data: Any = None
    error: Optional[str] = None
    attempts: int = 0
    raw: Optional[dict[str, Any]] = None


class ExtractionService:
    """
    Runs extraction flows against the remote functions.

    Usage:
        service = ExtractionService.from_settings(Settings.from_env())
        outcome = await service.extract_coi(file_to_base64("coi.pdf"))
        if outcome.success:
            extraction = outcome.data
    """

    def __init__(
        self,
        client: FunctionsClient,
        invoker: Optional[RetryableInvoker] = None,
    ) -> None:
        self.client = client
        self.invoker = invoker or RetryableInvoker()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> "ExtractionService":
        return cls(
            client=FunctionsClient.from_settings(settings, transport=transport),
            invoker=RetryableInvoker(RetryPolicy.from_settings(settings), sleep=sleep),
        )

    async def _call(
        self,
        function_name: str,
        pdf_base64: str,
        stats: RetryStats,
    ) -> dict[str, Any]:
        """Invoke a function and return the `data.data` payload."""
        if not pdf_base64:
            raise ExtractionError(message="No PDF data provided")

        result = await self.invoker.invoke(
            lambda: self.client.invoke(function_name, {"pdfBase64": pdf_base64}),
            label=function_name,
            stats=stats,
        )
        body = result.get("data") if isinstance(result, dict) else None
        if not isinstance(body, dict):
            raise ExtractionError(message=f"Empty response from {function_name}")
        if not body.get("success"):
            raise ExtractionError(message=str(body.get("error") or "Extraction failed"))
        payload = body.get("data")
        if not isinstance(payload, dict):
            raise ExtractionError(message=f"{function_name} returned no data")
        return payload

    async def _run(
        self,
        function_name: str,
        pdf_base64: str,
        parse: Callable[[dict[str, Any]], Any],
    ) -> ExtractionOutcome:
        stats = RetryStats()
        try:
            payload = await self._call(function_name, pdf_base64, stats)
            data = parse(payload)
        except (CoiCheckError, httpx.HTTPError) as e:
            message = e.message if isinstance(e, CoiCheckError) else str(e)
            logger.warning(
                "%s failed: %s",
                function_name,
                message,
                extra={
                    "function": function_name,
                    "attempt": stats.attempts,
                    "error": message,
                },
            )
            return ExtractionOutcome(
                success=False,
                error=message,
                attempts=stats.attempts,
            )

        logger.info(
            "%s succeeded",
            function_name,
            extra={"function": function_name, "attempt": stats.attempts},
        )
        return ExtractionOutcome(
            success=True,
            data=data,
            attempts=stats.attempts,
            raw=payload,
        )

    async def extract_coi(self, pdf_base64: str) -> ExtractionOutcome:
        """Extract coverage data from a COI PDF; data is a CoiExtraction."""
        return await self._run(EXTRACT_COI_FUNCTION, pdf_base64, parse_coi_extraction)

    async def extract_lease_requirements(self, pdf_base64: str) -> ExtractionOutcome:
        """Extract insurance requirements from a lease; data is a LeaseExtractionSchema."""
        return await self._run(EXTRACT_LEASE_FUNCTION, pdf_base64, validate_lease_payload)

