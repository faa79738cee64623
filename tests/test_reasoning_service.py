import asyncio
import sys
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

import httpx
import openai
from pydantic import BaseModel

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from atsmatch.ai.parsing import parse_json_payload  # noqa: E402
from atsmatch.ai.providers.openai_provider import classify_openai_error  # noqa: E402
from atsmatch.core.concurrency import call_with_retry, run_settled_batches  # noqa: E402
from atsmatch.core.errors import MalformedResponse, QuotaExceeded, ServiceUnavailable  # noqa: E402
from tests.fakes import FakeAIClient, make_service  # noqa: E402


class _Verdict(BaseModel):
    score: int
    rationale: str = ""


class JsonParsingTests(unittest.TestCase):
    def test_strict_json_is_parsed(self):
        self.assertEqual(parse_json_payload('{"score": 4}'), {"score": 4})

    def test_embedded_object_is_recovered(self):
        text = 'Sure! Here you go:\n```json\n{"score": 7, "rationale": "ok"}\n```\nAnything else?'
        self.assertEqual(parse_json_payload(text), {"score": 7, "rationale": "ok"})
        self.assertEqual(parse_json_payload('Result: {"score": 2} done'), {"score": 2})

    def test_unrecoverable_text_is_malformed(self):
        for text in ("", "no braces here", "{not json}", "[1, 2]"):
            with self.assertRaises(MalformedResponse):
                parse_json_payload(text)


class RetryTests(unittest.IsolatedAsyncioTestCase):
    async def test_backoff_delays_and_substitute_model(self):
        models: list[str] = []

        async def operation(model: str) -> str:
            models.append(model)
            if len(models) < 3:
                raise ServiceUnavailable("down")
            return "ok"

        with patch("atsmatch.core.concurrency.asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await call_with_retry(operation, model="primary", substitute_model="cheap")

        self.assertEqual(result, "ok")
        self.assertEqual(models, ["primary", "cheap", "cheap"])
        delays = [call.args[0] for call in sleep.await_args_list]
        self.assertEqual(len(delays), 2)
        self.assertAlmostEqual(delays[0], 0.3)
        self.assertAlmostEqual(delays[1], 0.9)

    async def test_quota_errors_are_not_retried(self):
        operation = AsyncMock(side_effect=QuotaExceeded("quota"))
        with patch("atsmatch.core.concurrency.asyncio.sleep", new_callable=AsyncMock) as sleep:
            with self.assertRaises(QuotaExceeded):
                await call_with_retry(operation, model="primary", substitute_model="cheap")
        self.assertEqual(operation.await_count, 1)
        sleep.assert_not_awaited()

    async def test_last_transient_error_propagates(self):
        operation = AsyncMock(side_effect=MalformedResponse("bad"))
        with patch("atsmatch.core.concurrency.asyncio.sleep", new_callable=AsyncMock):
            with self.assertRaises(MalformedResponse):
                await call_with_retry(operation, model="primary", substitute_model=None)
        self.assertEqual([call.args[0] for call in operation.await_args_list], ["primary"] * 3)


class SettledBatchTests(unittest.IsolatedAsyncioTestCase):
    async def test_failures_stay_in_place_and_order_is_kept(self):
        async def worker(value: int) -> int:
            await asyncio.sleep(0.001 * (5 - value))
            if value == 2:
                raise ValueError("boom")
            return value * 10

        results = await run_settled_batches([0, 1, 2, 3, 4], worker, batch_size=2)
        self.assertEqual(results[:2], [0, 10])
        self.assertIsInstance(results[2], ValueError)
        self.assertEqual(results[3:], [30, 40])

    async def test_batch_size_must_be_positive(self):
        with self.assertRaises(ValueError):
            await run_settled_batches([1], AsyncMock(), batch_size=0)


class ReasoningServiceTests(unittest.IsolatedAsyncioTestCase):
    async def test_schema_valid_response(self):
        client = FakeAIClient([{"score": 9, "rationale": "good"}])
        result = await make_service(client).request_json(
            system_prompt="Rate it.", user_prompt="text", schema=_Verdict, purpose="test"
        )
        self.assertEqual(result.score, 9)
        self.assertIn("untrusted", client.system_prompts[0])

    async def test_schema_mismatch_is_retried_on_substitute_model(self):
        client = FakeAIClient([{"unexpected": True}, '{"score": 3}'])
        result = await make_service(client).request_json(
            system_prompt="Rate it.", user_prompt="text", schema=_Verdict
        )
        self.assertEqual(result.score, 3)
        self.assertEqual(client.models, ["primary-model", "cheap-model"])

    async def test_timeout_maps_to_service_unavailable(self):
        class SlowClient:
            async def complete_json(self, messages, *, model, temperature, max_output_tokens):
                await asyncio.sleep(1)
                return "{}"

        service = make_service(SlowClient(), timeout_s=0.01, max_attempts=1)
        with self.assertRaises(ServiceUnavailable) as ctx:
            await service.request_json(system_prompt="x", user_prompt="y", schema=_Verdict)
        self.assertEqual(ctx.exception.code, "llm_timeout")

    async def test_disabled_service_raises_unavailable(self):
        service = make_service(None)
        self.assertFalse(service.enabled)
        with self.assertRaises(ServiceUnavailable) as ctx:
            await service.request_json(system_prompt="x", user_prompt="y", schema=_Verdict)
        self.assertEqual(ctx.exception.code, "llm_disabled")


class OpenAIErrorClassificationTests(unittest.TestCase):
    def setUp(self):
        self.request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")

    def test_rate_limit_is_quota(self):
        response = httpx.Response(429, request=self.request)
        exc = openai.RateLimitError("slow down", response=response, body=None)
        self.assertIsInstance(classify_openai_error(exc), QuotaExceeded)

    def test_timeouts_and_server_errors_are_unavailable(self):
        timeout = classify_openai_error(openai.APITimeoutError(request=self.request))
        self.assertIsInstance(timeout, ServiceUnavailable)
        self.assertEqual(timeout.code, "llm_timeout")

        connection = classify_openai_error(openai.APIConnectionError(request=self.request))
        self.assertIsInstance(connection, ServiceUnavailable)

        response = httpx.Response(503, request=self.request)
        server = classify_openai_error(openai.InternalServerError("down", response=response, body=None))
        self.assertIsInstance(server, ServiceUnavailable)


if __name__ == "__main__":
    unittest.main()
