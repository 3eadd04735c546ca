"""Load settings.yaml into typed dataclasses. Detects configured providers at startup."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from model_panel.models import Provider

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"

DEFAULT_MAX_CONCURRENT = 5
DEFAULT_REQUEST_TIMEOUT_MS = 60_000

ENV_DEFAULT_MODELS = "PANEL_DEFAULT_MODELS"
ENV_DEFAULT_CHALLENGERS = "PANEL_DEFAULT_CHALLENGERS"
ENV_MAX_CONCURRENT = "PANEL_MAX_CONCURRENT"
ENV_REQUEST_TIMEOUT = "PANEL_REQUEST_TIMEOUT_MS"


@dataclass
class ProviderConfig:
    name: Provider
    api_key_env: str
    max_tokens: int
    base_url: str | None = None
    router_namespace: str | None = None   # path prefix under the router, e.g. "mistralai"
    models: list[str] = field(default_factory=list)


@dataclass
class PromptsConfig:
    debate_affirmative_opening: str
    debate_affirmative_rebuttal: str
    debate_negative: str
    critique: str
    challenge: str


@dataclass
class DefaultsConfig:
    max_concurrent: int = DEFAULT_MAX_CONCURRENT
    request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS
    debate_rounds: int = 2
    max_debate_rounds: int = 5
    default_models: list[str] = field(default_factory=list)
    default_challengers: list[str] = field(default_factory=list)


@dataclass
class AppConfig:
    defaults: DefaultsConfig
    providers: dict[Provider, ProviderConfig]
    prompts: PromptsConfig
    configured_providers: set[Provider] = field(default_factory=set)


def _positive_int_from_env(name: str, default: int) -> int:
    """Read a positive integer override; anything else keeps the default."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive", name, raw)
        return default
    return value


def _list_from_env(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name)
    if raw is None:
        return default
    items = [m.strip() for m in raw.split(",") if m.strip()]
    return items or default


def is_key_present(api_key_env: str) -> bool:
    return bool(os.environ.get(api_key_env, "").strip())


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing, ValueError if no
    default models are configured.
    Logs which providers have API keys but does not raise for missing ones;
    callers check configured_providers.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    defaults_raw = raw["defaults"]
    default_models = _list_from_env(ENV_DEFAULT_MODELS, list(defaults_raw["default_models"]))
    if not default_models:
        raise ValueError("defaults.default_models must list at least one model")

    defaults = DefaultsConfig(
        max_concurrent=_positive_int_from_env(
            ENV_MAX_CONCURRENT, int(defaults_raw.get("max_concurrent", DEFAULT_MAX_CONCURRENT))
        ),
        request_timeout_ms=_positive_int_from_env(
            ENV_REQUEST_TIMEOUT, int(defaults_raw.get("request_timeout_ms", DEFAULT_REQUEST_TIMEOUT_MS))
        ),
        debate_rounds=int(defaults_raw.get("debate_rounds", 2)),
        max_debate_rounds=int(defaults_raw.get("max_debate_rounds", 5)),
        default_models=default_models,
        default_challengers=_list_from_env(
            ENV_DEFAULT_CHALLENGERS,
            list(defaults_raw.get("default_challengers") or default_models),
        ),
    )

    prompts_raw = raw["prompts"]
    prompts = PromptsConfig(
        debate_affirmative_opening=prompts_raw["debate_affirmative_opening"],
        debate_affirmative_rebuttal=prompts_raw["debate_affirmative_rebuttal"],
        debate_negative=prompts_raw["debate_negative"],
        critique=prompts_raw["critique"],
        challenge=prompts_raw["challenge"],
    )

    providers: dict[Provider, ProviderConfig] = {}
    configured: set[Provider] = set()

    for provider_name, provider_raw in raw["providers"].items():
        try:
            provider = Provider(provider_name)
        except ValueError:
            logger.warning("Provider '%s' unknown, skipping", provider_name)
            continue

        providers[provider] = ProviderConfig(
            name=provider,
            api_key_env=str(provider_raw["api_key_env"]),
            max_tokens=int(provider_raw.get("max_tokens", 4096)),
            base_url=provider_raw.get("base_url"),
            router_namespace=provider_raw.get("router_namespace"),
            models=list(provider_raw.get("models") or []),
        )

        if is_key_present(provider_raw["api_key_env"]):
            configured.add(provider)
            logger.info("Provider available: %s", provider.value)
        else:
            logger.info(
                "Provider not configured (no API key): %s, set %s in .env",
                provider.value,
                provider_raw["api_key_env"],
            )

    return AppConfig(
        defaults=defaults,
        providers=providers,
        prompts=prompts,
        configured_providers=configured,
    )
