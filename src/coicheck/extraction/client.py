"""
coicheck Remote Functions Client

Calls the managed backend's extraction functions over HTTP.

Every call resolves to a {"data": ..., "error": ...} dict, the same shape
the backend SDK returns, so RetryableInvoker can triage it:

- 2xx with JSON body        -> {"data": body, "error": None}
- 401 / 403                 -> error "Unauthorized" (permanent)
- 400 / 422                 -> error "Invalid request: ..." (permanent)
- 5xx, timeouts, network    -> error describing the failure (retriable)
- 2xx with a non-JSON body  -> "Malformed response" (retriable)

A missing or unparseable base URL raises ExtractionNotConfiguredError
before any request.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..config import DEFAULT_REQUEST_TIMEOUT_SECONDS, Settings
from ..exceptions import ExtractionNotConfiguredError

logger = logging.getLogger(__name__)

FunctionResult = dict[str, Any]


def _error(message: str, status: Optional[int] = None) -> FunctionResult:
    return {"data": None, "error": {"message": message, "status": status}}


def _response_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()[:200]
    if isinstance(body, dict):
        return str(body.get("error") or body.get("message") or body.get("detail") or "")
    return str(body)


class FunctionsClient:
    """
    Thin async client for `<base_url>/<function_name>` endpoints.

    Usage:
        client = FunctionsClient("https://example.functions.dev/v1", api_key="...")
        result = await client.invoke("extract-coi", {"pdfBase64": data})
        if result["error"]:
            ...
    """

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") if base_url else None
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "FunctionsClient":
        return cls(
            base_url=settings.functions_url,
            api_key=settings.functions_key,
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def invoke(self, function_name: str, body: dict[str, Any]) -> FunctionResult:
        """
        POST `body` to the named function.

        Raises:
            ExtractionNotConfiguredError: If no base URL is configured
        """
        if not self.base_url:
            raise ExtractionNotConfiguredError(
                message="Extraction service not configured (set COICHECK_FUNCTIONS_URL)",
                details={"function": function_name},
            )

        try:
            url = httpx.URL(f"{self.base_url}/{function_name}")
        except httpx.InvalidURL as e:
            raise ExtractionNotConfiguredError(
                message=f"Extraction service not configured: bad COICHECK_FUNCTIONS_URL ({e})",
                details={"function": function_name},
            ) from e
        logger.debug("Invoking remote function", extra={"function": function_name})

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(url, json=body, headers=self._headers())
            except httpx.TimeoutException:
                return _error(f"{function_name} timed out after {self.timeout}s")
            except httpx.RequestError as e:
                return _error(f"Failed to reach {function_name}: {e}")

        status = response.status_code
        if status in (401, 403):
            return _error("Unauthorized", status)
        if status in (400, 422):
            detail = _response_detail(response)
            message = f"Invalid request: {detail}" if detail else "Invalid request"
            return _error(message, status)
        if status >= 400:
            return _error(f"{function_name} failed with HTTP {status}", status)

        try:
            data = response.json()
        except ValueError:
            return _error(f"Malformed response from {function_name} (expected JSON)", status)
        return {"data": data, "error": None}
