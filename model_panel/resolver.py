"""Model identifier resolution: prefix routing plus OpenRouter fallback.

Two ways to reach a model:

* Direct mode: ``openai/gpt-4o``, ``anthropic/claude-sonnet-4-20250514`` etc.
  call the vendor's own API when its key is set.
* Router mode: ``openrouter/<vendor>/<model>`` (or any unprefixed identifier
  when OpenRouter is configured) goes through OpenRouter's namespace.

A direct identifier whose vendor key is missing is rerouted through
OpenRouter when that key is present. Fallback is decided from configuration
only; a direct call that fails at request time is not retried elsewhere.
"""

import logging
from collections.abc import Callable, Collection
from dataclasses import dataclass

from model_panel.models import Completion, ParsedModel, Provider
from model_panel.providers.base import AIProvider

logger = logging.getLogger(__name__)

ROUTER = Provider.OPENROUTER

PROVIDER_PREFIXES: dict[Provider, str] = {
    Provider.OPENROUTER: "openrouter/",
    Provider.OPENAI: "openai/",
    Provider.ANTHROPIC: "anthropic/",
    Provider.GOOGLE: "google/",
    Provider.MISTRAL: "mistral/",
}

DEFAULT_API_KEY_ENVS: dict[Provider, str] = {
    Provider.OPENROUTER: "OPENROUTER_API_KEY",
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
    Provider.GOOGLE: "GOOGLE_GENERATIVE_AI_API_KEY",
    Provider.MISTRAL: "MISTRAL_API_KEY",
}

# Vendor namespaces under OpenRouter; Mistral's differs from its own prefix.
DEFAULT_ROUTER_NAMESPACES: dict[Provider, str] = {
    Provider.OPENAI: "openai",
    Provider.ANTHROPIC: "anthropic",
    Provider.GOOGLE: "google",
    Provider.MISTRAL: "mistralai",
}

_DISPLAY_NAMES: dict[Provider, str] = {
    Provider.OPENROUTER: "OpenRouter",
    Provider.OPENAI: "OpenAI",
    Provider.ANTHROPIC: "Anthropic",
    Provider.GOOGLE: "Google",
    Provider.MISTRAL: "Mistral",
}


class ResolutionError(Exception):
    """Raised when a model identifier cannot be bound to a usable provider."""

    def __init__(self, model_id: str, message: str) -> None:
        self.model_id = model_id
        super().__init__(message)


@dataclass(frozen=True)
class ResolvedModel:
    """A model bound to the provider client that will serve it."""

    model_id: str
    provider: AIProvider
    model: str
    via_router: bool = False

    async def generate(self, prompt: str, system_prompt: str | None = None) -> Completion:
        return await self.provider.generate(self.model, prompt, system_prompt)


def parse_model_string(model_id: str, configured: Collection[Provider]) -> ParsedModel:
    """Split a model identifier into provider and provider-relative model name.

    Examples:
        "openrouter/anthropic/claude-sonnet-4" -> (openrouter, "anthropic/claude-sonnet-4")
        "openai/gpt-4o" -> (openai, "gpt-4o")
        "meta-llama/llama-3.3-70b-instruct" -> (openrouter, same) if OpenRouter is configured

    Raises:
        ResolutionError: No prefix matches and OpenRouter is not configured,
            or the prefix is not followed by a model name.
    """
    # openrouter/ first: its remainder may itself start with another vendor prefix
    ordered = [ROUTER] + [p for p in PROVIDER_PREFIXES if p is not ROUTER]
    for provider in ordered:
        prefix = PROVIDER_PREFIXES[provider]
        if model_id.startswith(prefix):
            model = model_id[len(prefix):]
            if not model:
                raise ResolutionError(model_id, f"Missing model name after '{prefix}' in: {model_id}")
            return ParsedModel(provider=provider, model=model)

    if ROUTER in configured and model_id:
        return ParsedModel(provider=ROUTER, model=model_id)

    raise ResolutionError(
        model_id,
        f"Cannot determine provider for model: {model_id}. Use a provider prefix (e.g., openai/gpt-4o).",
    )


class ModelResolver:
    """Resolve identifiers against a fixed set of configured providers.

    Provider clients are created on first use and cached for the life of the
    resolver. Creation is synchronous, so concurrent coroutines on one event
    loop can never build the same client twice.
    """

    def __init__(
        self,
        configured: Collection[Provider],
        provider_factory: Callable[[Provider], AIProvider],
        api_key_envs: dict[Provider, str] | None = None,
        router_namespaces: dict[Provider, str] | None = None,
    ) -> None:
        self._configured = frozenset(configured)
        self._factory = provider_factory
        self._api_key_envs = {**DEFAULT_API_KEY_ENVS, **(api_key_envs or {})}
        self._router_namespaces = {**DEFAULT_ROUTER_NAMESPACES, **(router_namespaces or {})}
        self._clients: dict[Provider, AIProvider] = {}

    @property
    def configured(self) -> frozenset[Provider]:
        return self._configured

    def is_configured(self, provider: Provider) -> bool:
        return provider in self._configured

    def client(self, provider: Provider) -> AIProvider:
        """Return the cached client for ``provider``, building it on first use."""
        cached = self._clients.get(provider)
        if cached is None:
            logger.debug("Creating %s client", provider.value)
            cached = self._factory(provider)
            self._clients[provider] = cached
        return cached

    def resolve(self, model_id: str) -> ResolvedModel:
        """Bind ``model_id`` to a client, preferring the direct provider.

        Raises:
            ResolutionError: The identifier is unparseable or neither the
                direct provider nor OpenRouter is configured.
        """
        parsed = parse_model_string(model_id, self._configured)
        router_env = self._api_key_envs[ROUTER]

        if parsed.provider is ROUTER:
            if not self.is_configured(ROUTER):
                raise ResolutionError(
                    model_id,
                    f"OpenRouter API key not configured. Set {router_env} environment variable.",
                )
            return ResolvedModel(model_id, self.client(ROUTER), parsed.model, via_router=True)

        if self.is_configured(parsed.provider):
            return ResolvedModel(model_id, self.client(parsed.provider), parsed.model)

        router_path = f"{self._router_namespaces[parsed.provider]}/{parsed.model}"
        if self.is_configured(ROUTER):
            logger.debug(
                "%s not configured, routing %s through OpenRouter as %s",
                parsed.provider.value, model_id, router_path,
            )
            return ResolvedModel(model_id, self.client(ROUTER), router_path, via_router=True)

        raise ResolutionError(
            model_id,
            f"{_DISPLAY_NAMES[parsed.provider]} API key not configured. "
            f"Set {self._api_key_envs[parsed.provider]} or {router_env} "
            f"(OpenRouter fallback '{router_path}' unavailable).",
        )
