"""Pure dataclasses for the model panel. No logic, no deps."""

from dataclasses import dataclass, field
from enum import Enum


class Provider(str, Enum):
    OPENROUTER = "openrouter"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    MISTRAL = "mistral"


class ChallengeType(str, Enum):
    LOGICAL = "logical"
    FACTUAL = "factual"
    COMPLETENESS = "completeness"
    EDGE_CASES = "edge_cases"
    ALTERNATIVES = "alternatives"


class Severity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    SIGNIFICANT = "significant"


@dataclass(frozen=True)
class ParsedModel:
    provider: Provider
    model: str             # model name with the provider prefix stripped


@dataclass
class Completion:
    text: str
    actual_model: str | None = None   # set when the upstream routed elsewhere


@dataclass
class ModelResponse:
    model: str             # identifier as requested
    text: str
    latency_ms: int
    actual_model: str | None = None


@dataclass
class ModelError:
    model: str
    error: str


QueryResult = ModelResponse | ModelError


@dataclass
class CouncilResult:
    successes: list[ModelResponse] = field(default_factory=list)
    failures: list[ModelError] = field(default_factory=list)
    total_latency_ms: int = 0
    success_count: int = 0

    @property
    def failed_models(self) -> list[str]:
        return [f.model for f in self.failures]


@dataclass
class DebateRound:
    round_number: int
    affirmative: str
    negative: str


@dataclass
class DebateResult:
    topic: str
    affirmative_model: str
    negative_model: str
    rounds: list[DebateRound]
    total_exchanges: int
    total_latency_ms: int


@dataclass
class Critique:
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    overall_assessment: str = ""


@dataclass
class CritiqueResult:
    critique: Critique
    critic_model: str
    latency_ms: int
    actual_model: str | None = None
    error: str | None = None


@dataclass
class Challenge:
    model: str
    challenge_type: ChallengeType
    challenge: str
    severity: Severity
    reasoning: str
    latency_ms: int
    actual_model: str | None = None


@dataclass
class ChallengeSummary:
    total_challenges: int
    by_severity: dict[str, int]
    by_type: dict[str, int]


@dataclass
class ChallengeResult:
    proposed_thought: str
    context: str | None
    challenges: list[Challenge]
    errors: list[ModelError]
    summary: ChallengeSummary
    total_latency_ms: int
    success_count: int
    challenger_models: list[str]


@dataclass
class ProviderHealth:
    provider: Provider
    status: str            # "healthy", "unhealthy", "unconfigured"
    latency_ms: int | None = None
    error: str | None = None


@dataclass
class HealthCheckResult:
    status: str            # "healthy", "degraded", "unhealthy"
    providers: list[ProviderHealth]
    timestamp: str
