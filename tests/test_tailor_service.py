import os
import sys
import unittest
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("ANALYTICS_ENABLED", "0")

from resumeos.ai.errors import ErrorCode, TailorError  # noqa: E402
from resumeos.core.config import settings  # noqa: E402
from resumeos.core.store import InMemoryStateStore  # noqa: E402
from resumeos.normalize.ai_response import ParseError  # noqa: E402
from resumeos.schemas.settings import UserSettings  # noqa: E402
from resumeos.services.memory_service import update_preference_summary  # noqa: E402
from resumeos.services.settings_service import save_settings  # noqa: E402
from resumeos.services.tailor_service import rebuild_preference_summary, tailor_resume  # noqa: E402

BASE_RESUME = "Ada Lovelace\nSoftware Engineer at Acme\n- Built a payments API in Python\n- Reduced latency by 30%"
TAILORED = '{"n":"Ada Lovelace","x":[{"c":"Acme","b":["Built a payments API",{"tx":"Led Kubernetes rollout","f":1}]}]}'


def _disable_analytics(test_case):
    patcher = patch("resumeos.analytics.db.settings", replace(settings, analytics_enabled=False))
    patcher.start()
    test_case.addCleanup(patcher.stop)


class FakeClient:
    model = "fake-model"

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def generate(self, *, system_prompt, user_prompt, max_output_tokens, temperature):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "max_output_tokens": max_output_tokens,
                "temperature": temperature,
            }
        )
        if self.error is not None:
            raise self.error
        return self.response


class TailorResumeTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = InMemoryStateStore()
        _disable_analytics(self)
        self.keys = []

    def _factory(self, client):
        def factory(api_key):
            self.keys.append(api_key)
            return client

        return factory

    async def _configure(self, api_key="key-123", resume=BASE_RESUME):
        await save_settings(self.store, UserSettings(api_key=api_key, base_resume_text=resume))

    async def test_missing_key(self):
        client = FakeClient(response=TAILORED)
        with self.assertRaises(TailorError) as ctx:
            await tailor_resume(self.store, "Backend role", client_factory=self._factory(client))
        self.assertEqual(ctx.exception.code, ErrorCode.NO_KEY)
        self.assertEqual(self.keys, [])

    async def test_missing_resume(self):
        await self._configure(resume="")
        client = FakeClient(response=TAILORED)
        with self.assertRaises(TailorError) as ctx:
            await tailor_resume(self.store, "Backend role", client_factory=self._factory(client))
        self.assertEqual(ctx.exception.code, ErrorCode.NO_RESUME)
        self.assertEqual(client.calls, [])

    async def test_success_uses_preference_summary(self):
        await self._configure()
        await update_preference_summary(self.store, "User targets backend roles.")
        client = FakeClient(response=TAILORED)

        resume = await tailor_resume(self.store, "Kubernetes backend role", client_factory=self._factory(client))

        self.assertEqual(self.keys, ["key-123"])
        self.assertEqual(resume.name, "Ada Lovelace")
        self.assertEqual(resume.flagged_bullet_count(), 1)
        call = client.calls[0]
        self.assertIn("User targets backend roles.", call["system_prompt"])
        self.assertIn("Kubernetes backend role", call["user_prompt"])
        self.assertIn("Built a payments API in Python", call["user_prompt"])
        self.assertEqual(call["max_output_tokens"], 1500)
        self.assertEqual(call["temperature"], 0.3)

    async def test_user_prompt_carries_skill_gap(self):
        await self._configure()
        client = FakeClient(response=TAILORED)

        await tailor_resume(self.store, "Python and Kubernetes backend role", client_factory=self._factory(client))

        user_prompt = client.calls[0]["user_prompt"]
        self.assertIn("Technologies/tools: Python, Kubernetes", user_prompt)
        self.assertIn("SKILLS IN THE JD NOT DETECTED IN THE BASE RESUME:\nKubernetes\n", user_prompt)

    async def test_no_missing_section_when_resume_covers_job(self):
        await self._configure()
        client = FakeClient(response=TAILORED)

        await tailor_resume(self.store, "Python role", client_factory=self._factory(client))

        user_prompt = client.calls[0]["user_prompt"]
        self.assertIn("Technologies/tools: Python", user_prompt)
        self.assertNotIn("NOT DETECTED", user_prompt)

    async def test_collaborator_failure_is_classified(self):
        await self._configure()
        client = FakeClient(error=RuntimeError("429 RESOURCE_EXHAUSTED retryDelay: 12s"))
        with self.assertRaises(TailorError) as ctx:
            await tailor_resume(self.store, "Backend role", client_factory=self._factory(client))
        self.assertEqual(ctx.exception.code, ErrorCode.RATE_LIMIT)
        self.assertEqual(ctx.exception.error.retry_after, 12)

    async def test_unparseable_response(self):
        await self._configure()
        client = FakeClient(response="I'm sorry, I can't do that.")
        with self.assertRaises(ParseError):
            await tailor_resume(self.store, "Backend role", client_factory=self._factory(client))


class RebuildPreferenceSummaryTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        _disable_analytics(self)

    async def test_summary_is_stripped(self):
        client = FakeClient(response="  User targets backend roles.\n")
        summary = await rebuild_preference_summary(client, [])
        self.assertEqual(summary, "User targets backend roles.")
        self.assertIsNone(client.calls[0]["system_prompt"])
        self.assertEqual(client.calls[0]["max_output_tokens"], 200)

    async def test_errors_propagate(self):
        client = FakeClient(error=RuntimeError("500 INTERNAL"))
        with self.assertRaises(RuntimeError):
            await rebuild_preference_summary(client, [])


if __name__ == "__main__":
    unittest.main()
