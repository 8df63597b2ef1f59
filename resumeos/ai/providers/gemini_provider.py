from __future__ import annotations

from google import genai
from google.genai import types


class GeminiProvider:
    def __init__(self, model: str, api_key: str, timeout_s: float = 60.0):
        key = (api_key or "").strip()
        if not key:
            raise RuntimeError("Gemini API key is missing")

        self.model = model
        self._client = genai.Client(
            api_key=key,
            http_options=types.HttpOptions(timeout=int(timeout_s * 1000)),
        )

    async def generate(
        self,
        *,
        system_prompt: str | None,
        user_prompt: str,
        max_output_tokens: int,
        temperature: float,
    ) -> str:
        config = types.GenerateContentConfig(
            system_instruction=system_prompt or None,
            max_output_tokens=max_output_tokens,
            temperature=temperature,
        )
        response = await self._client.aio.models.generate_content(
            model=self.model,
            contents=user_prompt,
            config=config,
        )
        return response.text or ""
