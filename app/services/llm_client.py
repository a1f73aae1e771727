"""Thin async wrapper around the OpenAI chat completions API."""
import logging
from typing import Optional

import openai

from app.config import settings
from app.exceptions import LLMConfigurationError

logger = logging.getLogger(__name__)


class CompletionClient:
    """Requests JSON-formatted chat completions."""

    def __init__(self, api_key: str, model: str = "gpt-4o", client: Optional[openai.AsyncOpenAI] = None):
        """Initialize with an API key, or an already configured SDK client."""
        self.model = model
        self.client = client or openai.AsyncOpenAI(api_key=api_key)

    async def complete(self, system_prompt: str, user_prompt: str, temperature: float) -> str:
        """
        Run one completion and return the raw message text.

        Args:
            system_prompt: Instructions describing the required JSON shape
            user_prompt: Goal-specific request
            temperature: Sampling temperature

        Returns:
            Message content, or an empty string when the model returned none
        """
        logger.debug("Requesting completion from %s (temperature=%s)", self.model, temperature)
        completion = await self.client.chat.completions.create(
            model=self.model,
            temperature=temperature,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""


def get_completion_client() -> CompletionClient:
    """Dependency returning a completion client built from settings."""
    if not settings.openai_api_key:
        raise LLMConfigurationError("OpenAI configuration is missing.")
    return CompletionClient(api_key=settings.openai_api_key, model=settings.openai_model)
