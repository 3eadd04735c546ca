"""Tests for model_panel/models.py dataclasses."""

from model_panel.models import (
    ChallengeType,
    CouncilResult,
    Critique,
    ModelError,
    ModelResponse,
    ParsedModel,
    Provider,
    Severity,
)


def test_provider_values_are_prefixes():
    assert [p.value for p in Provider] == ["openrouter", "openai", "anthropic", "google", "mistral"]
    assert Provider("google") is Provider.GOOGLE


def test_enums_compare_as_strings():
    assert ChallengeType.EDGE_CASES == "edge_cases"
    assert Severity.SIGNIFICANT == "significant"


def test_parsed_model_is_hashable():
    assert len({ParsedModel(Provider.OPENAI, "gpt-4o"), ParsedModel(Provider.OPENAI, "gpt-4o")}) == 1


def test_model_response_optional_actual_model():
    r = ModelResponse(model="openrouter/free", text="hi", latency_ms=10)
    assert r.actual_model is None


def test_council_result_defaults():
    result = CouncilResult()
    assert result.successes == []
    assert result.failures == []
    assert result.success_count == 0
    assert result.failed_models == []


def test_council_result_failed_models():
    result = CouncilResult(failures=[ModelError("openai/a", "x"), ModelError("google/b", "y")])
    assert result.failed_models == ["openai/a", "google/b"]


def test_critique_defaults_not_shared():
    a, b = Critique(), Critique()
    a.strengths.append("x")
    assert b.strengths == []
