"""Known-model listing per provider."""

from model_panel.context import PanelContext
from model_panel.models import Provider

ROUTER_NOTE = "OpenRouter supports 300+ models. Use openrouter/{provider}/{model} format."


def list_models(ctx: PanelContext, provider: Provider | None = None) -> dict:
    """Return configured flag and known models for one or all providers.

    Unconfigured providers list no models.
    """
    selected = [provider] if provider is not None else list(Provider)
    listing = {}
    for p in selected:
        configured = ctx.resolver.is_configured(p)
        listing[p.value] = {
            "configured": configured,
            "models": list(ctx.known_models.get(p, [])) if configured else [],
        }
    return {"providers": listing, "openrouter_note": ROUTER_NOTE}
