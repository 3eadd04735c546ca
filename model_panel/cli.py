"""Click CLI: load config, build the panel context, run one workflow, render it."""

import asyncio
import logging
import sys
from collections.abc import Callable
from typing import Any, NoReturn

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from config.config_loader import load_config
from model_panel.catalog import list_models
from model_panel.challenge import run_challenge
from model_panel.context import PanelContext
from model_panel.council import query_models
from model_panel.critique import run_critique
from model_panel.debate import DebateError, run_debate
from model_panel.healthcheck import run_health_checks
from model_panel.models import DebateRound, Provider
from model_panel.output import (
    console,
    print_challenge,
    print_council,
    print_critique,
    print_debate,
    print_health,
    print_models,
    print_query_result,
    to_json,
)
from model_panel.query import query_model

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False, console=Console(stderr=True))],
    )


def _split_csv(value: str | None) -> list[str] | None:
    """Comma-separated option -> list, or None when the option was not given."""
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def _fail(message: str) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {message}")
    sys.exit(1)


def _emit(result: Any, as_json: bool, printer: Callable[[Any], None]) -> None:
    if as_json:
        click.echo(to_json(result))
    else:
        printer(result)


@click.group()
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
@click.pass_context
def main(click_ctx: click.Context, verbose: bool) -> None:
    """Model Panel -- query, debate, critique and challenge across LLM providers.

    \b
    Examples:
      panel query openai/gpt-4o "Explain CRDTs in two sentences"
      panel council "REST or GraphQL for a public API?"
      panel debate "Monorepos beat polyrepos" -a openai/gpt-4o -n anthropic/claude-sonnet-4-20250514
      panel challenge "We should cache everything in Redis" --types logical,edge_cases
    """
    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config()
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)

    if not config.configured_providers:
        logger.warning("No provider API keys found; queries will fail. Check .env.")

    click_ctx.obj = PanelContext.from_config(config)


@main.command()
@click.argument("model")
@click.argument("prompt")
@click.option("--system", "system_prompt", default=None, help="Optional system prompt")
@click.option("--json", "as_json", is_flag=True, help="Print the raw result as JSON")
@click.pass_obj
def query(ctx: PanelContext, model: str, prompt: str, system_prompt: str | None, as_json: bool) -> None:
    """Query a single MODEL directly."""
    result = asyncio.run(query_model(ctx, model, prompt, system_prompt))
    _emit(result, as_json, print_query_result)


@main.command()
@click.argument("prompt")
@click.option("--models", default=None, help="Comma-separated model list (default: from config)")
@click.option("--system", "system_prompt", default=None, help="Optional shared system prompt")
@click.option("--json", "as_json", is_flag=True, help="Print the raw result as JSON")
@click.pass_obj
def council(ctx: PanelContext, prompt: str, models: str | None, system_prompt: str | None, as_json: bool) -> None:
    """Send PROMPT to several models in parallel."""
    try:
        result = asyncio.run(query_models(ctx, _split_csv(models), prompt, system_prompt))
    except ValueError as exc:
        _fail(str(exc))
    _emit(result, as_json, print_council)


@main.command()
@click.argument("topic")
@click.option("-a", "--affirmative", required=True, help="Model arguing FOR the proposition")
@click.option("-n", "--negative", required=True, help="Model arguing AGAINST the proposition")
@click.option("--rounds", default=None, type=int, help="Number of debate rounds (default: from config)")
@click.option("--json", "as_json", is_flag=True, help="Print the raw result as JSON")
@click.pass_obj
def debate(
    ctx: PanelContext,
    topic: str,
    affirmative: str,
    negative: str,
    rounds: int | None,
    as_json: bool,
) -> None:
    """Run a structured debate on TOPIC between two models."""

    def on_round_complete(rnd: DebateRound) -> None:
        logger.info("Round %d complete", rnd.round_number)

    try:
        result = asyncio.run(
            run_debate(ctx, topic, affirmative, negative, rounds, on_round_complete=on_round_complete)
        )
    except (DebateError, ValueError) as exc:
        _fail(str(exc))
    _emit(result, as_json, print_debate)


@main.command()
@click.option("--prompt", "original_prompt", required=True, help="The prompt that produced the response")
@click.option("--response", "response_text", required=True, help="The response to critique")
@click.option("--critic", required=True, help="Model that performs the critique")
@click.option("--aspects", default=None, help="Comma-separated aspects to focus on")
@click.option("--json", "as_json", is_flag=True, help="Print the raw result as JSON")
@click.pass_obj
def critique(
    ctx: PanelContext,
    original_prompt: str,
    response_text: str,
    critic: str,
    aspects: str | None,
    as_json: bool,
) -> None:
    """Have a model critique a response."""
    result = asyncio.run(run_critique(ctx, original_prompt, response_text, critic, _split_csv(aspects)))
    _emit(result, as_json, print_critique)


@main.command()
@click.argument("thought")
@click.option("--context", "thought_context", default=None, help="Background for the proposed thought")
@click.option("--models", default=None, help="Comma-separated challenger models (default: from config)")
@click.option("--types", "challenge_types", default=None,
              help="Comma-separated challenge types (logical, factual, completeness, edge_cases, alternatives)")
@click.option("--json", "as_json", is_flag=True, help="Print the raw result as JSON")
@click.pass_obj
def challenge(
    ctx: PanelContext,
    thought: str,
    thought_context: str | None,
    models: str | None,
    challenge_types: str | None,
    as_json: bool,
) -> None:
    """Stress-test THOUGHT with several adversarial models."""
    try:
        result = asyncio.run(
            run_challenge(ctx, thought, thought_context, _split_csv(models), _split_csv(challenge_types))
        )
    except ValueError as exc:
        _fail(str(exc))
    _emit(result, as_json, print_challenge)


@main.command()
@click.option("--provider", type=click.Choice([p.value for p in Provider]), default=None,
              help="Only list this provider")
@click.option("--json", "as_json", is_flag=True, help="Print the raw result as JSON")
@click.pass_obj
def models(ctx: PanelContext, provider: str | None, as_json: bool) -> None:
    """List known models per provider."""
    listing = list_models(ctx, Provider(provider) if provider else None)
    _emit(listing, as_json, print_models)


@main.command()
@click.option("--ping", is_flag=True, help="Send a tiny request to each configured provider")
@click.option("--json", "as_json", is_flag=True, help="Print the raw result as JSON")
@click.pass_obj
def health(ctx: PanelContext, ping: bool, as_json: bool) -> None:
    """Show which providers are configured (and reachable with --ping)."""
    result = asyncio.run(run_health_checks(ctx, ping=ping))
    _emit(result, as_json, print_health)


if __name__ == "__main__":
    main()
