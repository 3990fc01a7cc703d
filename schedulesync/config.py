"""
Client configuration.

The base URL and timeout come from (in increasing priority):
- the defaults below
- the environment (SCHEDULESYNC_API_URL, SCHEDULESYNC_TIMEOUT)
- explicit arguments (CLI flags or code)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_BASE_URL = "http://localhost:8000/api"
DEFAULT_TIMEOUT_SECONDS = 30.0

BASE_URL_ENV = "SCHEDULESYNC_API_URL"
TIMEOUT_ENV = "SCHEDULESYNC_TIMEOUT"


def _default_headers() -> Dict[str, str]:
    return {"Content-Type": "application/json"}


@dataclass
class ClientConfig:
    """Settings owned by one ScheduleService instance."""

    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    default_headers: Dict[str, str] = field(default_factory=_default_headers)

    def url(self, path: str) -> str:
        return self.base_url.rstrip("/") + "/" + path.lstrip("/")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        env = os.environ if environ is None else environ

        base_url = env.get(BASE_URL_ENV, "").strip() or DEFAULT_BASE_URL

        timeout_raw = env.get(TIMEOUT_ENV, "").strip()
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_SECONDS
        except ValueError:
            raise ValueError(f"{TIMEOUT_ENV} must be a number, got {timeout_raw!r}") from None

        return cls(base_url=base_url, timeout_seconds=timeout)
