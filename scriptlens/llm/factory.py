from typing import ClassVar

from scriptlens.config.settings import Settings
from scriptlens.llm.client_base import BaseGenerationClient
from scriptlens.llm.example_client_adapter import ExampleGenerationClient
from scriptlens.llm.openai_client_adapter import OpenAIGenerationClient


class GenerationClientFactory:
    """Creates the configured generation client adapter."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseGenerationClient:
        """Create a configured client from application settings."""
        provider = settings.llm_provider.lower()
        if provider == "example":
            return ExampleGenerationClient()
        return OpenAIGenerationClient(
            api_key=settings.llm_api_key,
            timeout_seconds=settings.llm_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str:
        override = settings.llm_base_url.strip()
        if provider == "openai_compatible":
            if not override:
                raise ValueError(
                    "llm_base_url is required for llm_provider=openai_compatible"
                )
            return override
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return override or default_base_url
        supported = ["example", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]
        raise ValueError(f"Unknown LLM provider '{provider}'. Choose from: {supported}")
