from typing import ClassVar

from portfolio_review.config.settings import Settings
from portfolio_review.interpretation.base import BaseInterpreter
from portfolio_review.interpretation.client_base import BaseInterpretationClient
from portfolio_review.interpretation.example_client_adapter import ExampleClientAdapter
from portfolio_review.interpretation.interpreter import Interpreter
from portfolio_review.interpretation.openai_client_adapter import (
    AzureOpenAIClientAdapter,
    OpenAIClientAdapter,
)
from portfolio_review.logging.logger import Log


class InterpreterFactory:
    """Creates the configured interpreter.

    A provider without an API key falls back to the example client so that
    local environments work without credentials.
    """

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }
    # Local servers accept any key.
    KEYLESS_PROVIDERS: ClassVar[frozenset[str]] = frozenset({"ollama"})

    @classmethod
    def create(cls, settings: Settings) -> BaseInterpreter:
        """Create a configured interpreter from application settings."""
        provider = settings.interpretation_provider.strip().lower()
        client, model = cls._create_client(provider, settings)
        return Interpreter(
            client=client,
            model=model,
            temperature=settings.interpretation_temperature,
            max_input_chars=settings.interpretation_max_input_chars,
        )

    @classmethod
    def supported_providers(cls) -> list[str]:
        return [
            "example",
            "openai",
            "azure",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]

    @classmethod
    def _create_client(
        cls, provider: str, settings: Settings
    ) -> tuple[BaseInterpretationClient, str]:
        if provider == "example":
            return ExampleClientAdapter(), "example"

        if provider == "azure":
            if not settings.azure_openai_api_key or not settings.azure_openai_endpoint:
                return cls._fallback(provider)
            client: BaseInterpretationClient = AzureOpenAIClientAdapter(
                api_key=settings.azure_openai_api_key,
                endpoint=settings.azure_openai_endpoint,
                api_version=settings.azure_openai_api_version,
                timeout_seconds=settings.interpretation_timeout_seconds,
            )
            return client, settings.azure_openai_deployment

        base_url = cls._resolve_base_url(provider, settings)
        api_key = settings.interpretation_api_key
        if not api_key:
            if provider not in cls.KEYLESS_PROVIDERS:
                return cls._fallback(provider)
            api_key = provider
        client = OpenAIClientAdapter(
            api_key=api_key,
            timeout_seconds=settings.interpretation_timeout_seconds,
            base_url=base_url,
        )
        return client, settings.interpretation_model_name

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        override = settings.interpretation_base_url.strip()
        if provider == "openai":
            return override or None
        if provider == "openai_compatible":
            if not override:
                raise ValueError(
                    "interpretation_base_url is required for "
                    "interpretation_provider=openai_compatible"
                )
            return override
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return override or default_base_url
        raise ValueError(
            f"Unknown interpretation provider '{provider}'. "
            f"Choose from: {cls.supported_providers()}"
        )

    @staticmethod
    def _fallback(provider: str) -> tuple[BaseInterpretationClient, str]:
        Log.warning(f"No credentials configured for provider '{provider}', using example client")
        return ExampleClientAdapter(), "example"
