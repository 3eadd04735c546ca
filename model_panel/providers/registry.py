"""Map each Provider to the adapter class that talks to it."""

from typing import assert_never

from config.config_loader import ProviderConfig
from model_panel.models import Provider
from model_panel.providers.anthropic import AnthropicProvider
from model_panel.providers.base import AIProvider
from model_panel.providers.gemini import GeminiProvider
from model_panel.providers.openai_provider import OpenAIProvider


def build_provider(config: ProviderConfig) -> AIProvider:
    """Instantiate the adapter for ``config.name``.

    Raises ProviderError if the provider's API key is missing.
    """
    match config.name:
        case Provider.OPENROUTER | Provider.OPENAI | Provider.MISTRAL:
            return OpenAIProvider(config)
        case Provider.ANTHROPIC:
            return AnthropicProvider(config)
        case Provider.GOOGLE:
            return GeminiProvider(config)
        case _:
            assert_never(config.name)
