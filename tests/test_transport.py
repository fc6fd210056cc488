import asyncio
import json
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

import httpx

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.analysis.cancellation import CancellationToken, TimeoutToken, any_of  # noqa: E402
from app.analysis.errors import AnalysisCancelled, TransportError  # noqa: E402
from app.analysis.transport import ANALYSIS_TIMEOUT_MS, AnalysisTransport  # noqa: E402

BASE_URL = "http://analysis.test/v1"


def _transport(handler, timeout_s: float = 5.0) -> AnalysisTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AnalysisTransport(BASE_URL, timeout_s=timeout_s, client=client)


class CancellationTokenTests(unittest.IsolatedAsyncioTestCase):
    async def test_composite_fires_when_any_source_fires(self):
        first, second = CancellationToken(), CancellationToken()
        composite = any_of(first, second)
        self.assertFalse(composite.cancelled)

        second.cancel("user")
        self.assertTrue(composite.cancelled)
        self.assertEqual(composite.reason, "user")

        first.cancel("later")
        self.assertEqual(composite.reason, "user")

    async def test_composite_of_already_cancelled_source_starts_cancelled(self):
        source = CancellationToken()
        source.cancel()
        self.assertTrue(any_of(source, None).cancelled)

    async def test_closed_composite_ignores_sources(self):
        source = CancellationToken()
        composite = any_of(source)
        composite.close()
        source.cancel()
        self.assertFalse(composite.cancelled)

    async def test_timeout_token_fires_and_release_stops_timer(self):
        fired = TimeoutToken(0.01)
        fired.start()
        await asyncio.wait_for(fired.wait(), timeout=1)
        self.assertEqual(fired.reason, "timeout")

        released = TimeoutToken(0.01)
        released.start()
        released.release()
        await asyncio.sleep(0.05)
        self.assertFalse(released.cancelled)


class AnalysisTransportTests(unittest.IsolatedAsyncioTestCase):
    async def test_default_timeout_is_sixty_seconds(self):
        self.assertEqual(ANALYSIS_TIMEOUT_MS, 60_000)
        transport = AnalysisTransport(BASE_URL)
        self.assertEqual(transport._timeout_s, 60.0)
        self.assertEqual(transport.endpoint, "http://analysis.test/v1/cv/analyze")

    async def test_posts_json_body_and_returns_raw_text(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="not even json")

        async with _transport(handler) as transport:
            raw = await transport.send("PROMPT", cv_text="cv", additional_skills="SQL")

        self.assertEqual(raw, "not even json")
        self.assertEqual(len(seen), 1)
        self.assertEqual(seen[0].method, "POST")
        self.assertEqual(str(seen[0].url), "http://analysis.test/v1/cv/analyze")
        self.assertEqual(
            json.loads(seen[0].content),
            {"cvText": "cv", "additionalSkills": "SQL", "prompt": "PROMPT"},
        )

    async def test_error_status_raises_transport_error_without_body(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500, text="stack trace")

        async with _transport(handler) as transport:
            with self.assertRaises(TransportError) as ctx:
                await transport.send("PROMPT")

        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.status_text, "Internal Server Error")
        self.assertNotIn("stack trace", str(ctx.exception))
        self.assertEqual(len(calls), 1)

    async def test_network_failure_is_a_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _transport(handler) as transport:
            with self.assertRaises(TransportError) as ctx:
                await transport.send("PROMPT")
        self.assertIsNone(ctx.exception.status_code)

    async def test_pre_cancelled_token_fails_before_any_request(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, text="{}")

        token = CancellationToken()
        token.cancel()
        async with _transport(handler) as transport:
            with self.assertRaises(AnalysisCancelled) as ctx:
                await transport.send("PROMPT", token=token)

        self.assertEqual(ctx.exception.reason, "cancelled")
        self.assertEqual(calls, [])

    async def test_slow_engine_hits_timeout(self):
        finished = []

        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            finished.append(request)
            return httpx.Response(200, text="{}")

        async with _transport(handler, timeout_s=0.05) as transport:
            with self.assertRaises(AnalysisCancelled) as ctx:
                await transport.send("PROMPT")

        self.assertEqual(ctx.exception.reason, "timeout")
        self.assertEqual(ctx.exception.code, "timeout")
        self.assertEqual(finished, [])

    async def test_caller_cancel_aborts_in_flight_request(self):
        finished = []

        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            finished.append(request)
            return httpx.Response(200, text="{}")

        token = CancellationToken()
        asyncio.get_running_loop().call_later(0.05, token.cancel)
        async with _transport(handler) as transport:
            with self.assertRaises(AnalysisCancelled) as ctx:
                await transport.send("PROMPT", token=token)

        self.assertEqual(ctx.exception.reason, "cancelled")
        self.assertEqual(finished, [])

    async def test_completed_call_releases_timer(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="{}")

        original_release = TimeoutToken.release
        with patch.object(TimeoutToken, "release", autospec=True, side_effect=original_release) as release:
            async with _transport(handler, timeout_s=0.05) as transport:
                await transport.send("PROMPT")

        self.assertTrue(release.called)


if __name__ == "__main__":
    unittest.main()
