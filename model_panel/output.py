"""Rich console rendering and plain-JSON serialization of panel results."""

import dataclasses
import json
from enum import Enum
from typing import Any

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from model_panel.models import (
    ChallengeResult,
    CouncilResult,
    CritiqueResult,
    DebateResult,
    HealthCheckResult,
    ModelError,
    ModelResponse,
    QueryResult,
)


console = Console(legacy_windows=False)

_SEVERITY_STYLES = {"minor": "dim", "moderate": "yellow", "significant": "bold red"}
_HEALTH_STYLES = {"healthy": "green", "degraded": "yellow", "unhealthy": "red", "unconfigured": "dim"}


def to_plain(value: Any) -> Any:
    """Convert result dataclasses into nested dicts/lists of JSON-ready values."""
    if isinstance(value, CouncilResult):
        plain = to_plain(dataclasses.asdict(value))
        plain["failed_models"] = value.failed_models
        return plain
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_plain(dataclasses.asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {to_plain(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def to_json(value: Any) -> str:
    return json.dumps(to_plain(value), indent=2, ensure_ascii=False)


def _model_title(response: ModelResponse) -> str:
    title = f"[bold]{response.model}[/bold]"
    if response.actual_model:
        title += f" -> {response.actual_model}"
    return title


def print_query_result(result: QueryResult) -> None:
    if isinstance(result, ModelError):
        console.print(Panel(result.error, title=f"[bold red]{result.model}[/bold red]", border_style="red"))
        return
    console.print(
        Panel(
            Markdown(result.text),
            title=_model_title(result),
            subtitle=f"{result.latency_ms}ms",
            border_style="dim",
        )
    )


def print_council(result: CouncilResult) -> None:
    total = result.success_count + len(result.failures)
    console.print(Rule(f"[bold cyan]Council: {result.success_count}/{total} responded[/bold cyan]"))
    for response in result.successes:
        print_query_result(response)
    for failure in result.failures:
        print_query_result(failure)
    console.print(Text(f"Total: {result.total_latency_ms}ms", style="dim"))


def print_debate(result: DebateResult) -> None:
    console.print(Rule(f"[bold cyan]Debate: {result.topic[:80]}[/bold cyan]"))
    for rnd in result.rounds:
        console.print(
            Panel(
                Markdown(rnd.affirmative),
                title=f"Round {rnd.round_number} - [bold green]FOR[/bold green] ({result.affirmative_model})",
                border_style="green",
            )
        )
        console.print(
            Panel(
                Markdown(rnd.negative),
                title=f"Round {rnd.round_number} - [bold red]AGAINST[/bold red] ({result.negative_model})",
                border_style="red",
            )
        )
    console.print(
        Text(
            f"Exchanges: {result.total_exchanges} | Duration: {result.total_latency_ms / 1000:.1f}s",
            style="dim",
        )
    )


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items) if items else "_none_"


def print_critique(result: CritiqueResult) -> None:
    console.print(Rule(f"[bold cyan]Critique by {result.critic_model}[/bold cyan]"))
    if result.error:
        console.print(f"[bold red]Critique failed:[/bold red] {result.error}")
        return
    critique = result.critique
    body = (
        f"### Strengths\n{_bullets(critique.strengths)}\n\n"
        f"### Weaknesses\n{_bullets(critique.weaknesses)}\n\n"
        f"### Suggestions\n{_bullets(critique.suggestions)}\n\n"
        f"### Overall\n{critique.overall_assessment}"
    )
    console.print(Markdown(body))
    console.print(Text(f"{result.latency_ms}ms", style="dim"))


def print_challenge(result: ChallengeResult) -> None:
    summary = result.summary
    console.print(Rule(f"[bold cyan]{summary.total_challenges} challenges[/bold cyan]"))
    table = Table(show_lines=True)
    table.add_column("Severity")
    table.add_column("Type")
    table.add_column("Challenge")
    table.add_column("Model", style="dim")
    for c in result.challenges:
        severity = c.severity.value
        table.add_row(
            Text(severity, style=_SEVERITY_STYLES[severity]),
            c.challenge_type.value,
            f"{c.challenge}\n[dim]{c.reasoning}[/dim]" if c.reasoning else c.challenge,
            c.model,
        )
    console.print(table)
    for failure in result.errors:
        console.print(f"[red]FAIL[/red] {failure.model}: {failure.error}")
    counts = ", ".join(f"{k}={v}" for k, v in summary.by_severity.items())
    console.print(
        Text(
            f"{result.success_count}/{len(result.challenger_models)} models | {counts} | "
            f"{result.total_latency_ms}ms",
            style="dim",
        )
    )


def print_health(result: HealthCheckResult) -> None:
    style = _HEALTH_STYLES[result.status]
    console.print(f"\n[bold]Status:[/bold] [{style}]{result.status}[/{style}]")
    for health in result.providers:
        style = _HEALTH_STYLES[health.status]
        line = f"  [{style}]{health.status:<12}[/{style}] {health.provider.value}"
        if health.latency_ms is not None:
            line += f" ({health.latency_ms}ms)"
        if health.error:
            line += f": {health.error.splitlines()[0][:120]}"
        console.print(line)


def print_models(listing: dict) -> None:
    for name, info in listing["providers"].items():
        mark = "[green]configured[/green]" if info["configured"] else "[dim]not configured[/dim]"
        console.print(f"[bold]{name}[/bold] {mark}")
        for model in info["models"]:
            console.print(f"  {model}")
    console.print(Text(listing["openrouter_note"], style="dim"))
