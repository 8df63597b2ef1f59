import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resumeos.ai.errors import (  # noqa: E402
    ErrorCode,
    TailorError,
    classify_failure,
    extract_retry_after,
    no_key_error,
)


class ClassifyFailureTests(unittest.TestCase):
    def test_rate_limit_with_retry_delay(self):
        error = classify_failure("429 RESOURCE_EXHAUSTED ... retryDelay: 30s")
        self.assertEqual(error.code, ErrorCode.RATE_LIMIT)
        self.assertEqual(error.retry_after, 30)
        self.assertIn("30 seconds", error.message)
        self.assertTrue(error.retryable)

    def test_daily_quota_has_no_retry_after(self):
        error = classify_failure(
            "429 RESOURCE_EXHAUSTED quotaId: GenerateRequestsPerDayPerProjectPerModel-FreeTier"
        )
        self.assertEqual(error.code, ErrorCode.DAILY_LIMIT)
        self.assertIsNone(error.retry_after)
        self.assertFalse(error.retryable)

    def test_structured_retry_delay_rounds_up(self):
        error = classify_failure('RESOURCE_EXHAUSTED {"retryDelay": "53.809189902s"}')
        self.assertEqual(error.code, ErrorCode.RATE_LIMIT)
        self.assertEqual(error.retry_after, 54)

    def test_quota_without_delay_defaults_to_sixty_seconds(self):
        error = classify_failure("You exceeded your current quota")
        self.assertEqual(error.code, ErrorCode.RATE_LIMIT)
        self.assertEqual(error.retry_after, 60)

    def test_invalid_key_variants(self):
        for signal in (
            "401 Unauthorized",
            "400 API_KEY_INVALID",
            "API key not valid. Please pass a valid API key.",
            "Invalid API Key provided",
        ):
            with self.subTest(signal=signal):
                self.assertEqual(classify_failure(signal).code, ErrorCode.INVALID_KEY)

    def test_permission_and_server_errors(self):
        self.assertEqual(classify_failure("403 PERMISSION_DENIED").code, ErrorCode.PERMISSION)
        self.assertEqual(classify_failure("500 INTERNAL").code, ErrorCode.SERVER_ERROR)

    def test_quota_rules_take_precedence(self):
        self.assertEqual(classify_failure("429 quota exceeded (upstream 500)").code, ErrorCode.RATE_LIMIT)

    def test_unknown_keeps_a_short_excerpt(self):
        signal = "x" * 300
        error = classify_failure(signal)
        self.assertEqual(error.code, ErrorCode.UNKNOWN)
        self.assertEqual(error.message, "AI error: " + "x" * 120)
        self.assertIsNone(error.retry_after)

    def test_exceptions_are_classified_by_message(self):
        self.assertEqual(classify_failure(RuntimeError("403 PERMISSION_DENIED")).code, ErrorCode.PERMISSION)
        error = classify_failure(TimeoutError())
        self.assertEqual(error.code, ErrorCode.UNKNOWN)
        self.assertEqual(error.message, "AI error: TimeoutError")

    def test_none_is_unknown(self):
        self.assertEqual(classify_failure(None).code, ErrorCode.UNKNOWN)

    def test_as_dict(self):
        payload = classify_failure("429 retryDelay: 7s").as_dict()
        self.assertEqual(payload["code"], "RATE_LIMIT")
        self.assertEqual(payload["retry_after"], 7)
        self.assertTrue(payload["retryable"])


class HelperTests(unittest.TestCase):
    def test_extract_retry_after(self):
        self.assertEqual(extract_retry_after("Please retry in 20.5s."), 21)
        self.assertEqual(extract_retry_after("no hint here"), 60)

    def test_tailor_error_carries_code(self):
        error = no_key_error()
        self.assertIsInstance(error, TailorError)
        self.assertEqual(error.code, ErrorCode.NO_KEY)
        self.assertEqual(str(error), error.error.message)


if __name__ == "__main__":
    unittest.main()
