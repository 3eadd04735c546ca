"""Anthropic Claude provider using anthropic SDK with native async."""

import logging
import os

import anthropic as anthropic_sdk

from config.config_loader import ProviderConfig
from model_panel.models import Completion
from model_panel.providers.base import AIProvider, ProviderError

logger = logging.getLogger(__name__)

TRANSPORT_MAX_RETRIES = 2


class AnthropicProvider(AIProvider):
    """Anthropic Claude provider via anthropic SDK."""

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise ProviderError(config.name.value, f"Missing API key: {config.api_key_env}")
        self._client = anthropic_sdk.AsyncAnthropic(api_key=api_key, max_retries=TRANSPORT_MAX_RETRIES)

    def name(self) -> str:
        return self._config.name.value

    async def generate(self, model: str, prompt: str, system_prompt: str | None = None) -> Completion:
        kwargs = {}
        if system_prompt:
            kwargs["system"] = system_prompt

        try:
            response = await self._client.messages.create(
                model=model,
                max_tokens=self._config.max_tokens,
                messages=[{"role": "user", "content": prompt}],
                **kwargs,
            )
        except Exception as exc:
            raise ProviderError(self.name(), f"API call failed: {exc}") from exc

        if not response.content:
            raise ProviderError(self.name(), "Empty response content")

        text_blocks = [b.text for b in response.content if b.type == "text"]
        if not text_blocks:
            raise ProviderError(self.name(), "No text blocks in response")

        if response.usage:
            logger.debug(
                "Anthropic %s: %s tokens",
                model,
                response.usage.input_tokens + response.usage.output_tokens,
            )

        return Completion(text="\n".join(text_blocks))
