"""Classification of generative-text failures into a closed error taxonomy.

Rules are evaluated in order and the first match wins. Quota rules come
first because quota responses also embed status-like numbers that would
otherwise hit the generic code checks.
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable

UNKNOWN_EXCERPT_CHARS = 120
DEFAULT_RETRY_AFTER_S = 60

_RETRY_PHRASE_RE = re.compile(r"retry[^0-9]*(\d+(?:\.\d+)?)s", re.IGNORECASE)
_RETRY_FIELD_RE = re.compile(r'"retryDelay"\s*:\s*"(\d+(?:\.\d+)?)s"', re.IGNORECASE)

_QUOTA_MARKERS = ("429", "RESOURCE_EXHAUSTED", "quota")
_DAILY_MARKERS = ("PerDay", "per_day", "RPD", "per day")
_INVALID_KEY_MARKERS = ("401", "API_KEY_INVALID")
_INVALID_KEY_PHRASES = ("invalid api key", "api key not valid")
_PERMISSION_MARKERS = ("403", "PERMISSION_DENIED")
_SERVER_MARKERS = ("500", "INTERNAL")


class ErrorCode(str, Enum):
    DAILY_LIMIT = "DAILY_LIMIT"
    RATE_LIMIT = "RATE_LIMIT"
    INVALID_KEY = "INVALID_KEY"
    PERMISSION = "PERMISSION"
    SERVER_ERROR = "SERVER_ERROR"
    UNKNOWN = "UNKNOWN"
    NO_KEY = "NO_KEY"
    NO_RESUME = "NO_RESUME"


@dataclass(frozen=True)
class ClassifiedError:
    code: ErrorCode
    message: str
    retry_after: int | None = None

    @property
    def retryable(self) -> bool:
        # The daily quota only resets with the next cycle.
        return self.code is not ErrorCode.DAILY_LIMIT

    def as_dict(self) -> dict[str, object]:
        payload = asdict(self)
        payload["code"] = self.code.value
        payload["retryable"] = self.retryable
        return payload


class TailorError(RuntimeError):
    def __init__(self, error: ClassifiedError):
        super().__init__(error.message)
        self.error = error

    @property
    def code(self) -> ErrorCode:
        return self.error.code


def no_key_error() -> TailorError:
    return TailorError(
        ClassifiedError(ErrorCode.NO_KEY, "No API key found. Complete setup in Settings.")
    )


def no_resume_error() -> TailorError:
    return TailorError(
        ClassifiedError(ErrorCode.NO_RESUME, "No base resume found. Upload your resume in Settings.")
    )


def _contains_any(signal: str, markers: tuple[str, ...]) -> bool:
    return any(marker in signal for marker in markers)


def _is_quota(signal: str) -> bool:
    return _contains_any(signal, _QUOTA_MARKERS)


def _is_daily_quota(signal: str) -> bool:
    return _is_quota(signal) and _contains_any(signal, _DAILY_MARKERS)


def _is_invalid_key(signal: str) -> bool:
    lowered = signal.lower()
    return _contains_any(signal, _INVALID_KEY_MARKERS) or _contains_any(lowered, _INVALID_KEY_PHRASES)


def extract_retry_after(signal: str) -> int:
    match = _RETRY_PHRASE_RE.search(signal) or _RETRY_FIELD_RE.search(signal)
    if not match:
        return DEFAULT_RETRY_AFTER_S
    return math.ceil(float(match.group(1)))


def _daily_limit(_: str) -> ClassifiedError:
    return ClassifiedError(
        ErrorCode.DAILY_LIMIT,
        "You've used all your free Gemini requests for today. Your quota resets at midnight "
        "Pacific Time. You can also enable billing on your Google AI project for higher limits.",
        None,
    )


def _rate_limit(signal: str) -> ClassifiedError:
    retry_after = extract_retry_after(signal)
    return ClassifiedError(
        ErrorCode.RATE_LIMIT,
        f"Gemini rate limit hit. Wait {retry_after} seconds and try again.",
        retry_after,
    )


def _invalid_key(_: str) -> ClassifiedError:
    return ClassifiedError(ErrorCode.INVALID_KEY, "Invalid API key. Check your key in Settings.")


def _permission(_: str) -> ClassifiedError:
    return ClassifiedError(
        ErrorCode.PERMISSION,
        "API key doesn't have Gemini access. Make sure you've enabled the Generative Language "
        "API in your Google Cloud project.",
    )


def _server_error(_: str) -> ClassifiedError:
    return ClassifiedError(ErrorCode.SERVER_ERROR, "Gemini server error. Try again in a moment.")


def _unknown(signal: str) -> ClassifiedError:
    return ClassifiedError(ErrorCode.UNKNOWN, f"AI error: {signal[:UNKNOWN_EXCERPT_CHARS]}")


Rule = tuple[Callable[[str], bool], Callable[[str], ClassifiedError]]

RULES: tuple[Rule, ...] = (
    (_is_daily_quota, _daily_limit),
    (_is_quota, _rate_limit),
    (_is_invalid_key, _invalid_key),
    (lambda signal: _contains_any(signal, _PERMISSION_MARKERS), _permission),
    (lambda signal: _contains_any(signal, _SERVER_MARKERS), _server_error),
)


def _signal_text(signal: object) -> str:
    if isinstance(signal, BaseException):
        return str(signal) or type(signal).__name__
    if signal is None:
        return ""
    return str(signal)


def classify_failure(signal: object) -> ClassifiedError:
    """Map a raw failure (message text or exception) onto the taxonomy."""
    text = _signal_text(signal)
    for predicate, build in RULES:
        if predicate(text):
            return build(text)
    return _unknown(text)
