"""Orchestration context shared by every panel operation."""

import logging
from dataclasses import dataclass, field

from config.config_loader import AppConfig, PromptsConfig
from model_panel.gate import ConcurrencyGate
from model_panel.models import Provider
from model_panel.providers.registry import build_provider
from model_panel.resolver import ModelResolver

logger = logging.getLogger(__name__)


@dataclass
class PanelContext:
    """Everything an operation needs: the gate, the resolver and the limits.

    One context owns one gate and one client cache; operations sharing a
    context share both. Independent contexts never affect each other.
    """

    resolver: ModelResolver
    gate: ConcurrencyGate
    prompts: PromptsConfig
    default_models: list[str]
    default_challengers: list[str] = field(default_factory=list)
    request_timeout_ms: int = 60_000
    default_debate_rounds: int = 2
    max_debate_rounds: int = 5
    known_models: dict[Provider, list[str]] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: AppConfig) -> "PanelContext":
        resolver = ModelResolver(
            configured=config.configured_providers,
            provider_factory=lambda provider: build_provider(config.providers[provider]),
            api_key_envs={p: c.api_key_env for p, c in config.providers.items()},
            router_namespaces={
                p: c.router_namespace for p, c in config.providers.items() if c.router_namespace
            },
        )
        defaults = config.defaults
        logger.debug(
            "Panel context: %d permits, %dms timeout, providers=%s",
            defaults.max_concurrent,
            defaults.request_timeout_ms,
            sorted(p.value for p in config.configured_providers),
        )
        return cls(
            resolver=resolver,
            gate=ConcurrencyGate(defaults.max_concurrent),
            prompts=config.prompts,
            default_models=list(defaults.default_models),
            default_challengers=list(defaults.default_challengers or defaults.default_models),
            request_timeout_ms=defaults.request_timeout_ms,
            default_debate_rounds=defaults.debate_rounds,
            max_debate_rounds=defaults.max_debate_rounds,
            known_models={p: list(c.models) for p, c in config.providers.items()},
        )
