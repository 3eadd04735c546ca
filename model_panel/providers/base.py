"""Abstract base for all upstream model providers."""

from abc import ABC, abstractmethod

from model_panel.models import Completion


class ProviderError(Exception):
    """Raised when a provider call fails."""

    def __init__(self, provider_name: str, message: str) -> None:
        self.provider_name = provider_name
        super().__init__(f"[{provider_name}] {message}")


class AIProvider(ABC):
    """One client per upstream service, shared by every model it serves."""

    @abstractmethod
    def name(self) -> str:
        """Return the short provider name (e.g. 'openai', 'openrouter')."""
        ...

    @abstractmethod
    async def generate(self, model: str, prompt: str, system_prompt: str | None = None) -> Completion:
        """Generate a completion for the given prompt.

        Args:
            model: Provider-relative model name (prefix already stripped).
            prompt: The full prompt text to send.
            system_prompt: Optional system instruction.

        Returns:
            Completion with the response text and, when the upstream reports
            a different model than requested, the model that actually ran.

        Raises:
            ProviderError: On API failure or an empty response.
        """
        ...
