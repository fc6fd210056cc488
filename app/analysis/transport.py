from __future__ import annotations

import asyncio
import contextlib
import logging

import httpx

from app.analysis.cancellation import CancellationToken, TimeoutToken, any_of
from app.analysis.errors import AnalysisCancelled, TransportError
from app.core.config import settings

logger = logging.getLogger(__name__)

ANALYSIS_TIMEOUT_MS = 60_000
ANALYZE_PATH = "/cv/analyze"


class AnalysisTransport:
    """Single-attempt JSON POST to the analysis backend.

    Every call is bounded by an internal timer and, optionally, by a caller
    token. Whichever fires first aborts the request and the call raises
    ``AnalysisCancelled``; no retry is ever made.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout_s: float = ANALYSIS_TIMEOUT_MS / 1000,
        client: httpx.AsyncClient | None = None,
    ):
        self._base_url = (base_url or settings.analysis_api_url).rstrip("/")
        self._timeout_s = timeout_s
        self._client = client
        self._owns_client = client is None

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}{ANALYZE_PATH}"

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            # The timer below owns the deadline, so httpx gets none of its own.
            self._client = httpx.AsyncClient(timeout=None, headers={"Accept": "application/json"})
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "AnalysisTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def send(
        self,
        prompt: str,
        *,
        cv_text: str = "",
        additional_skills: str = "",
        token: CancellationToken | None = None,
    ) -> str:
        body = {"cvText": cv_text, "additionalSkills": additional_skills, "prompt": prompt}
        timer = TimeoutToken(self._timeout_s)
        effective = any_of(timer, token)
        try:
            if effective.cancelled:
                logger.info("analysis_transport_cancelled reason=%s stage=before_send", effective.reason)
                raise AnalysisCancelled(effective.reason or "cancelled")

            timer.start()
            request_task = asyncio.create_task(self._post(body))
            waiter = asyncio.create_task(effective.wait())
            try:
                await asyncio.wait({request_task, waiter}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                waiter.cancel()
                if not request_task.done():
                    request_task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await request_task

            if request_task.cancelled():
                logger.info("analysis_transport_cancelled reason=%s stage=in_flight", effective.reason)
                raise AnalysisCancelled(effective.reason or "cancelled")
            return request_task.result()
        finally:
            timer.release()
            effective.close()

    async def _post(self, body: dict[str, str]) -> str:
        try:
            response = await self._http().post(self.endpoint, json=body)
        except httpx.TimeoutException as exc:
            raise AnalysisCancelled("timeout") from exc
        except httpx.HTTPError as exc:
            logger.warning("analysis_transport_failed endpoint=%s: %s", self.endpoint, exc)
            raise TransportError(f"Analysis request failed: {exc}") from exc
        except Exception as exc:  # noqa: BLE001 - malformed URL, client misuse
            logger.warning("analysis_transport_error endpoint=%s: %r", self.endpoint, exc)
            raise TransportError(f"Analysis request could not be sent: {exc}") from exc

        if not response.is_success:
            logger.warning(
                "analysis_transport_status status=%s reason=%s", response.status_code, response.reason_phrase
            )
            raise TransportError(
                f"Analysis request failed with status {response.status_code} {response.reason_phrase}".strip(),
                status_code=response.status_code,
                status_text=response.reason_phrase,
            )
        return response.text
