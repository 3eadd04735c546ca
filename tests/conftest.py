"""Shared pytest fixtures."""

import asyncio
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import pytest

from config.config_loader import PromptsConfig
from model_panel.context import PanelContext
from model_panel.gate import ConcurrencyGate
from model_panel.models import Completion, Provider
from model_panel.providers.base import AIProvider
from model_panel.resolver import ModelResolver


class MockProvider(AIProvider):
    """Test double AIProvider."""

    def __init__(self, provider_name: str = "mock", response_content: str = "Mock response") -> None:
        self._name = provider_name
        self._response_content = response_content
        # Shadow the class method with an AsyncMock at the instance level.
        # ABC check passes because generate is defined in the class body below.
        self.generate = AsyncMock(return_value=Completion(text=response_content))  # type: ignore[assignment]

    def name(self) -> str:
        return self._name

    async def generate(self, model: str, prompt: str, system_prompt: str | None = None) -> Completion:  # type: ignore[override]
        """Default implementation; replaced by AsyncMock in __init__."""
        return Completion(text=self._response_content)


class ScriptedProvider(AIProvider):
    """Provider whose answer depends on the requested model.

    ``script`` maps a model name to a string (the reply), an exception
    instance (raised) or an async callable taking the prompt. Unknown models
    answer ``"Response from <model>"``. Every call is recorded, and the peak
    number of simultaneous calls is tracked.
    """

    def __init__(self, provider_name: str = "scripted", script: dict[str, Any] | None = None,
                 delay: float = 0.0) -> None:
        self._name = provider_name
        self.script = script or {}
        self.delay = delay
        self.calls: list[tuple[str, str, str | None]] = []
        self.active = 0
        self.peak = 0

    def name(self) -> str:
        return self._name

    async def generate(self, model: str, prompt: str, system_prompt: str | None = None) -> Completion:
        self.calls.append((model, prompt, system_prompt))
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            action = self.script.get(model, f"Response from {model}")
            if isinstance(action, BaseException):
                raise action
            if callable(action):
                action = await action(prompt)
            if isinstance(action, Completion):
                return action
            return Completion(text=action)
        finally:
            self.active -= 1


async def hang(prompt: str) -> str:
    await asyncio.sleep(9999)
    return "never"


@pytest.fixture
def sample_prompts_config() -> PromptsConfig:
    return PromptsConfig(
        debate_affirmative_opening="FOR: {topic} (round {round} of {rounds})",
        debate_affirmative_rebuttal="FOR: {topic} (round {round} of {rounds})\nSo far:\n{transcript}",
        debate_negative="AGAINST: {topic} (round {round} of {rounds})\nSo far:\n{transcript}",
        critique="Critique.\nPrompt: {original_prompt}\nResponse: {response}{aspects_clause}",
        challenge="Challenge: {proposed_thought}{context_clause}\nTypes:\n{challenge_types}\nOne of: {type_names}",
    )


@pytest.fixture
def make_context(sample_prompts_config: PromptsConfig) -> Callable[..., PanelContext]:
    """Build an isolated PanelContext over the given provider doubles."""

    def _make(
        providers: dict[Provider, AIProvider],
        permits: int = 5,
        timeout_ms: int = 1000,
        default_models: list[str] | None = None,
        **kwargs: Any,
    ) -> PanelContext:
        resolver = ModelResolver(configured=set(providers), provider_factory=providers.__getitem__)
        return PanelContext(
            resolver=resolver,
            gate=ConcurrencyGate(permits),
            prompts=sample_prompts_config,
            default_models=default_models or ["openai/a", "openai/b"],
            default_challengers=kwargs.pop("default_challengers", default_models or ["openai/a", "openai/b"]),
            request_timeout_ms=timeout_ms,
            **kwargs,
        )

    return _make


@pytest.fixture
def scripted() -> ScriptedProvider:
    return ScriptedProvider("openai")


@pytest.fixture
def openai_context(make_context, scripted: ScriptedProvider) -> PanelContext:
    return make_context({Provider.OPENAI: scripted})
