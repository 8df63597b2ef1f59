from typing import Callable, Protocol


class AIClient(Protocol):
    model: str

    async def generate(
        self,
        *,
        system_prompt: str | None,
        user_prompt: str,
        max_output_tokens: int,
        temperature: float,
    ) -> str: ...


AIClientFactory = Callable[[str], AIClient]
