"""
AI Provider Manager
Texify - Multi-Provider Support

Resolves a provider name and API key into a ready provider instance.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Type

from config.constants import MSG_MISSING_API_KEY
from config.logging_config import get_logger
from core.exceptions import MissingAPIKeyError, UnknownModelError, UnknownProviderError

from .base import AIConfig, AIProviderType, BaseAIProvider
from .claude_provider import ClaudeProvider
from .gemini_provider import GeminiProvider
from .openai_provider import OpenAIProvider

logger = get_logger(__name__)


@dataclass
class ProviderInfo:
    """Information about an AI provider"""
    type: AIProviderType
    name: str
    description: str
    models: Dict[str, str]
    default_model: str
    env_key: str  # Environment variable name for API key


# Registry of all available providers
PROVIDER_REGISTRY: Dict[AIProviderType, Type[BaseAIProvider]] = {
    AIProviderType.GEMINI: GeminiProvider,
    AIProviderType.CLAUDE: ClaudeProvider,
    AIProviderType.OPENAI: OpenAIProvider,
}

PROVIDER_INFO: Dict[AIProviderType, ProviderInfo] = {
    AIProviderType.GEMINI: ProviderInfo(
        type=AIProviderType.GEMINI,
        name="Google Gemini",
        description="Gemini - Fast, multimodal AI from Google with native PDF input",
        models=GeminiProvider.MODELS,
        default_model=GeminiProvider.DEFAULT_MODEL,
        env_key="GOOGLE_API_KEY"
    ),
    AIProviderType.CLAUDE: ProviderInfo(
        type=AIProviderType.CLAUDE,
        name="Anthropic Claude",
        description="Claude - Careful structure and LaTeX output",
        models=ClaudeProvider.MODELS,
        default_model=ClaudeProvider.DEFAULT_MODEL,
        env_key="ANTHROPIC_API_KEY"
    ),
    AIProviderType.OPENAI: ProviderInfo(
        type=AIProviderType.OPENAI,
        name="OpenAI GPT",
        description="GPT-4o - Versatile, multimodal AI",
        models=OpenAIProvider.MODELS,
        default_model=OpenAIProvider.DEFAULT_MODEL,
        env_key="OPENAI_API_KEY"
    ),
}

PROVIDER_ALIASES = {
    "gemini": AIProviderType.GEMINI,
    "google": AIProviderType.GEMINI,
    "claude": AIProviderType.CLAUDE,
    "anthropic": AIProviderType.CLAUDE,
    "openai": AIProviderType.OPENAI,
    "gpt": AIProviderType.OPENAI,
}


def resolve_provider_type(name: str) -> AIProviderType:
    """Map a provider name or alias to its enum"""
    ptype = PROVIDER_ALIASES.get((name or "").lower())
    if not ptype:
        raise UnknownProviderError(
            f"Unknown provider: {name}. Supported: {', '.join(p.value for p in AIProviderType)}"
        )
    return ptype


def validate_model(name: str, model: str) -> str:
    """Check that a requested model id is one the provider offers"""
    info = PROVIDER_INFO[resolve_provider_type(name)]
    if model not in info.models:
        raise UnknownModelError(
            f"Unknown model for {info.type.value}: {model}. Supported: {', '.join(info.models)}"
        )
    return model


def list_providers() -> List[ProviderInfo]:
    """List all available providers"""
    return list(PROVIDER_INFO.values())


def create_provider(
    provider: str,
    api_key: str,
    model: Optional[str] = None,
    max_tokens: int = 8192,
    temperature: float = 0.2,
    timeout: int = 300,
    base_url: Optional[str] = None,
) -> BaseAIProvider:
    """
    Create a provider instance.

    Args:
        provider: Provider name ("gemini", "claude", "openai" or an alias)
        api_key: API key for the provider
        model: Model id; the provider default if None

    Raises:
        MissingAPIKeyError: If api_key is empty
        UnknownProviderError: If the provider is unknown
    """
    ptype = resolve_provider_type(provider)
    if not api_key:
        raise MissingAPIKeyError(MSG_MISSING_API_KEY)

    info = PROVIDER_INFO[ptype]
    config = AIConfig(
        api_key=api_key,
        model=model or info.default_model,
        max_tokens=max_tokens,
        temperature=temperature,
        timeout=timeout,
        base_url=base_url,
    )
    logger.info(f"Creating {info.name} provider with model={config.model}")
    return PROVIDER_REGISTRY[ptype](config)


def create_provider_from_settings(
    settings,
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> BaseAIProvider:
    """
    Create a provider from application settings, with optional overrides.

    The configured model only applies to the configured provider; switching
    provider without naming a model uses that provider's default. A model
    passed here must be listed for the provider; the configured one is
    trusted as-is.

    Raises:
        UnknownProviderError: If the provider name is not recognised
        UnknownModelError: If the requested model is not offered by the provider
        MissingAPIKeyError: If the provider has no API key configured
    """
    name = provider or settings.provider
    if model is not None:
        validate_model(name, model)
    elif resolve_provider_type(name) == resolve_provider_type(settings.provider):
        model = settings.model
    return create_provider(
        name,
        api_key=settings.get_api_key(name),
        model=model,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        timeout=settings.request_timeout,
        base_url=settings.base_url,
    )
