"""Google Gemini provider using google-genai SDK with native async."""

import logging
import os

from google import genai
from google.genai import types as genai_types

from config.config_loader import ProviderConfig
from model_panel.models import Completion
from model_panel.providers.base import AIProvider, ProviderError

logger = logging.getLogger(__name__)

TRANSPORT_MAX_RETRIES = 2


class GeminiProvider(AIProvider):
    """Google Gemini provider via google-genai SDK."""

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise ProviderError(config.name.value, f"Missing API key: {config.api_key_env}")
        self._client = genai.Client(
            api_key=api_key,
            http_options=genai_types.HttpOptions(
                retry_options=genai_types.HttpRetryOptions(attempts=TRANSPORT_MAX_RETRIES + 1),
            ),
        )

    def name(self) -> str:
        return self._config.name.value

    async def generate(self, model: str, prompt: str, system_prompt: str | None = None) -> Completion:
        try:
            response = await self._client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=genai_types.GenerateContentConfig(
                    max_output_tokens=self._config.max_tokens,
                    system_instruction=system_prompt,
                ),
            )
        except Exception as exc:
            raise ProviderError(self.name(), f"API call failed: {exc}") from exc

        if not response.text:
            raise ProviderError(self.name(), "Empty response text")

        if response.usage_metadata:
            logger.debug("Gemini %s: %s tokens", model, response.usage_metadata.total_token_count)

        return Completion(text=response.text)
