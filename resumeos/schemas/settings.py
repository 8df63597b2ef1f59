from __future__ import annotations

from pydantic import BaseModel


class UserSettings(BaseModel):
    name: str = ""
    api_key: str = ""
    base_resume_text: str = ""
    onboarding_done: bool = False

    def masked(self) -> "UserSettings":
        key = self.api_key
        masked_key = f"{'*' * max(0, len(key) - 4)}{key[-4:]}" if key else ""
        return self.model_copy(update={"api_key": masked_key})
