"""OpenAI-compatible provider using openai SDK with native async.

Serves OpenAI itself plus any upstream exposing the same chat completions API
through ``base_url`` (OpenRouter, Mistral).
"""

import logging
import os

from openai import AsyncOpenAI

from config.config_loader import ProviderConfig
from model_panel.models import Completion
from model_panel.providers.base import AIProvider, ProviderError

logger = logging.getLogger(__name__)

TRANSPORT_MAX_RETRIES = 2


class OpenAIProvider(AIProvider):
    """OpenAI-compatible chat completions via openai SDK."""

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise ProviderError(config.name.value, f"Missing API key: {config.api_key_env}")
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=config.base_url,
            max_retries=TRANSPORT_MAX_RETRIES,
        )

    def name(self) -> str:
        return self._config.name.value

    async def generate(self, model: str, prompt: str, system_prompt: str | None = None) -> Completion:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=messages,
                max_tokens=self._config.max_tokens,
            )
        except Exception as exc:
            raise ProviderError(self.name(), f"API call failed: {exc}") from exc

        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message.content:
            raise ProviderError(self.name(), "Empty response content")

        actual_model = response.model if response.model and response.model != model else None
        if actual_model:
            logger.debug("%s routed %s to %s", self.name(), model, actual_model)

        return Completion(text=choice.message.content, actual_model=actual_model)
