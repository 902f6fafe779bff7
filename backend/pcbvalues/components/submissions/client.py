"""HTTP client for the score submission endpoint."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ...shared.errors import NetworkFailure, NetworkTimeout
from .payload import SubmissionPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmitResponse:
    success: bool
    status_code: int
    error: Optional[str] = None
    needs_override: bool = False
    existing: Optional[Dict[str, Any]] = None


class ScoreApiClient:
    """POSTs submission payloads; every call is capped at ``timeout`` seconds overall."""

    def __init__(self, submit_url: str, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self.submit_url = submit_url
        self.timeout = timeout
        self._transport = transport

    async def _post(self, body: str, override: bool) -> httpx.Response:
        params = {"override": "true"} if override else None
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.post(
                self.submit_url,
                content=body,
                params=params,
                headers={"Content-Type": "application/json"},
            )

    async def submit(self, payload: SubmissionPayload, override: bool = False) -> SubmitResponse:
        body = payload.model_dump_json()
        try:
            resp = await asyncio.wait_for(self._post(body, override), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("Score submission timed out after %.1fs (url=%s)", self.timeout, self.submit_url)
            raise NetworkTimeout() from exc
        except httpx.HTTPError as exc:
            logger.warning("Score submission transport error (url=%s): %s", self.submit_url, exc)
            raise NetworkFailure(f"Failed to submit scores: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if data.get("needs_override"):
            return SubmitResponse(
                success=False,
                status_code=resp.status_code,
                error=data.get("error"),
                needs_override=True,
                existing=data.get("score"),
            )

        if resp.status_code > 299 or data.get("success") is not True:
            error = data.get("error") or data.get("detail") or f"HTTP {resp.status_code}"
            logger.warning("Score submission rejected status=%d error=%s", resp.status_code, error)
            raise NetworkFailure(f"Failed to submit scores: {error}")

        return SubmitResponse(success=True, status_code=resp.status_code)
