"""Provider health checks, optionally pinging each configured API."""

import asyncio
import logging
import time
from datetime import datetime, timezone

from model_panel.context import PanelContext
from model_panel.models import HealthCheckResult, Provider, ProviderHealth
from model_panel.query import elapsed_ms

logger = logging.getLogger(__name__)

_PING_PROMPT = "Reply with the word OK only."
_TIMEOUT_SEC = 15.0


async def _check_one(ctx: PanelContext, provider: Provider, ping: bool) -> ProviderHealth:
    """Check a single provider. Never raises."""
    if not ctx.resolver.is_configured(provider):
        return ProviderHealth(provider=provider, status="unconfigured")

    models = ctx.known_models.get(provider) or []
    if not ping or not models:
        return ProviderHealth(provider=provider, status="healthy")

    start = time.monotonic()
    try:
        client = ctx.resolver.client(provider)
        async with ctx.gate.permit():
            await asyncio.wait_for(client.generate(models[0], _PING_PROMPT), timeout=_TIMEOUT_SEC)
    except Exception as exc:
        logger.warning("Health check failed for %s: %s", provider.value, exc)
        return ProviderHealth(provider=provider, status="unhealthy", error=str(exc) or type(exc).__name__)
    return ProviderHealth(provider=provider, status="healthy", latency_ms=elapsed_ms(start))


def _overall_status(providers: list[ProviderHealth]) -> str:
    configured = [p for p in providers if p.status != "unconfigured"]
    healthy = [p for p in configured if p.status == "healthy"]
    if configured and len(healthy) == len(configured):
        return "healthy"
    if healthy:
        return "degraded"
    return "unhealthy"


async def run_health_checks(ctx: PanelContext, ping: bool = False) -> HealthCheckResult:
    """Report every provider's status; pings run in parallel when requested.

    Overall status is "healthy" when every configured provider is healthy,
    "degraded" when only some are, and "unhealthy" when none are.
    """
    results = await asyncio.gather(*(_check_one(ctx, p, ping) for p in Provider))
    providers = list(results)
    return HealthCheckResult(
        status=_overall_status(providers),
        providers=providers,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
