from __future__ import annotations

from resumeos.core.store import StateStore
from resumeos.schemas.settings import UserSettings

NAME_KEY = "ros_name"
API_KEY_KEY = "ros_api_key"
BASE_RESUME_KEY = "ros_base_resume"
ONBOARDING_KEY = "ros_onboarding_done"

SETTINGS_KEYS = (NAME_KEY, API_KEY_KEY, BASE_RESUME_KEY, ONBOARDING_KEY)

MIN_RESUME_CHARS = 100


async def get_settings(store: StateStore) -> UserSettings:
    stored = await store.get(SETTINGS_KEYS)
    return UserSettings(
        name=stored.get(NAME_KEY) or "",
        api_key=stored.get(API_KEY_KEY) or "",
        base_resume_text=stored.get(BASE_RESUME_KEY) or "",
        onboarding_done=bool(stored.get(ONBOARDING_KEY) or False),
    )


async def save_settings(store: StateStore, user_settings: UserSettings) -> None:
    await store.set(
        {
            NAME_KEY: user_settings.name,
            API_KEY_KEY: user_settings.api_key.strip(),
            BASE_RESUME_KEY: user_settings.base_resume_text,
            ONBOARDING_KEY: user_settings.onboarding_done,
        }
    )


def validate_resume_text(text: str | None) -> str:
    """Return cleaned pasted resume text or raise ValueError with a user-facing message."""
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValueError("Please enter or paste your resume text.")
    if len(cleaned) < MIN_RESUME_CHARS:
        raise ValueError("The pasted text seems too short to be a resume.")
    return cleaned
