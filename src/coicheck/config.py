"""
coicheck Configuration

Settings are read from COICHECK_* environment variables once and then
passed explicitly to the components that need them. Engine functions never
read configuration themselves.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_EXPIRING_THRESHOLD_DAYS = 30
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_BASE_DELAY_MS = 1000
DEFAULT_REQUEST_TIMEOUT_SECONDS = 120.0
DEFAULT_LOG_LEVEL = "INFO"


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _float_env(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings.

    Attributes:
        expiring_threshold_days: Days before expiration that count as "expiring"
        max_retries: Additional attempts after the first extraction call
        retry_base_delay_ms: Base backoff delay, doubled per attempt
        log_level: Level for the coicheck logger
        functions_url: Base URL of the remote extraction functions
        functions_key: Bearer key for the remote extraction functions
        request_timeout_seconds: Per-request timeout for remote calls
        templates_dir: Optional directory overriding packaged templates
    """
    expiring_threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_base_delay_ms: int = DEFAULT_RETRY_BASE_DELAY_MS
    log_level: str = DEFAULT_LOG_LEVEL
    functions_url: Optional[str] = None
    functions_key: Optional[str] = None
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    templates_dir: Optional[Path] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables (os.environ by default)."""
        env = os.environ if env is None else env
        templates_dir = env.get("COICHECK_TEMPLATES_DIR")
        return cls(
            expiring_threshold_days=_int_env(
                env, "COICHECK_EXPIRING_THRESHOLD_DAYS", DEFAULT_EXPIRING_THRESHOLD_DAYS
            ),
            max_retries=_int_env(env, "COICHECK_MAX_RETRIES", DEFAULT_MAX_RETRIES),
            retry_base_delay_ms=_int_env(
                env, "COICHECK_RETRY_BASE_DELAY_MS", DEFAULT_RETRY_BASE_DELAY_MS
            ),
            log_level=env.get("COICHECK_LOG_LEVEL", DEFAULT_LOG_LEVEL),
            functions_url=env.get("COICHECK_FUNCTIONS_URL") or None,
            functions_key=env.get("COICHECK_FUNCTIONS_KEY") or None,
            request_timeout_seconds=_float_env(
                env, "COICHECK_REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS
            ),
            templates_dir=Path(templates_dir) if templates_dir else None,
        )
