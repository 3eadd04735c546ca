"""Tests for model_panel/query.py."""

from model_panel.models import Completion, ModelError, ModelResponse, Provider
from model_panel.providers.base import ProviderError
from model_panel.query import query_model
from model_panel.resolver import ModelResolver
from tests.conftest import ScriptedProvider, hang


async def test_query_success(openai_context, scripted):
    result = await query_model(openai_context, "openai/gpt-4o", "Hello?", "Be brief.")

    assert isinstance(result, ModelResponse)
    assert result.model == "openai/gpt-4o"
    assert result.text == "Response from gpt-4o"
    assert result.latency_ms >= 0
    assert result.actual_model is None
    assert scripted.calls == [("gpt-4o", "Hello?", "Be brief.")]


async def test_query_reports_actual_model(make_context):
    router = ScriptedProvider(
        "openrouter", {"openrouter/free": Completion(text="hi", actual_model="qwen/qwen-2.5-72b")}
    )
    ctx = make_context({Provider.OPENROUTER: router})

    result = await query_model(ctx, "openrouter/openrouter/free", "Hello?")

    assert isinstance(result, ModelResponse)
    assert result.actual_model == "qwen/qwen-2.5-72b"


async def test_unresolvable_model_returns_error_without_call(openai_context, scripted):
    result = await query_model(openai_context, "deepseek/deepseek-chat", "Hello?")

    assert isinstance(result, ModelError)
    assert result.model == "deepseek/deepseek-chat"
    assert "Cannot determine provider" in result.error
    assert scripted.calls == []
    assert openai_context.gate.available == openai_context.gate.limit


async def test_missing_credential_returns_error(openai_context):
    result = await query_model(openai_context, "anthropic/claude-sonnet-4-20250514", "Hello?")

    assert isinstance(result, ModelError)
    assert "ANTHROPIC_API_KEY" in result.error


async def test_provider_error_becomes_model_error(make_context):
    provider = ScriptedProvider("openai", {"gpt-4o": ProviderError("openai", "API call failed: 500")})
    ctx = make_context({Provider.OPENAI: provider})

    result = await query_model(ctx, "openai/gpt-4o", "Hello?")

    assert isinstance(result, ModelError)
    assert "500" in result.error
    assert ctx.gate.available == ctx.gate.limit


async def test_unexpected_exception_becomes_model_error(make_context):
    provider = ScriptedProvider("openai", {"gpt-4o": RuntimeError("socket closed")})
    ctx = make_context({Provider.OPENAI: provider})

    result = await query_model(ctx, "openai/gpt-4o", "Hello?")

    assert isinstance(result, ModelError)
    assert result.error == "socket closed"


async def test_timeout_becomes_model_error(make_context):
    provider = ScriptedProvider("openai", {"slow": hang})
    ctx = make_context({Provider.OPENAI: provider}, timeout_ms=50)

    result = await query_model(ctx, "openai/slow", "Hello?")

    assert isinstance(result, ModelError)
    assert result.error == "Request timed out after 50ms"
    assert ctx.gate.available == ctx.gate.limit


async def test_result_is_never_both_variants(openai_context):
    ok = await query_model(openai_context, "openai/gpt-4o", "Hello?")
    bad = await query_model(openai_context, "nope", "Hello?")

    assert not hasattr(ok, "error")
    assert not hasattr(bad, "text")


async def test_client_construction_failure_becomes_model_error(make_context):
    def broken_factory(provider):
        raise ProviderError("openai", "Missing API key: OPENAI_API_KEY")

    ctx = make_context({})
    ctx.resolver = ModelResolver(configured={Provider.OPENAI}, provider_factory=broken_factory)

    result = await query_model(ctx, "openai/gpt-4o", "Hello?")

    assert isinstance(result, ModelError)
    assert "Missing API key" in result.error
    assert ctx.gate.available == ctx.gate.limit
