"""
AI Providers Package
Texify - Multi-Provider Support

Supports:
- Google Gemini (gemini-2.5-flash, gemini-2.5-pro, etc.)
- Anthropic Claude (claude-sonnet-4, claude-3.5-haiku, etc.)
- OpenAI GPT (gpt-4o, gpt-4o-mini, etc.)

Usage:
    from ai_providers import create_provider, ContentPart

    provider = create_provider("gemini", api_key="...")
    response = await provider.generate([
        ContentPart.from_text("Convert this document to LaTeX."),
        ContentPart.from_bytes(pdf_bytes, "application/pdf"),
    ])
    print(response.content)
"""

from .base import (
    BaseAIProvider,
    AIProviderType,
    AIResponse,
    AIConfig,
    ContentPart,
    ProviderError,
)

from .claude_provider import ClaudeProvider
from .openai_provider import OpenAIProvider
from .gemini_provider import GeminiProvider

from .manager import (
    ProviderInfo,
    PROVIDER_REGISTRY,
    PROVIDER_INFO,
    create_provider,
    create_provider_from_settings,
    list_providers,
    resolve_provider_type,
    validate_model,
)

__all__ = [
    # Base classes
    "BaseAIProvider",
    "AIProviderType",
    "AIResponse",
    "AIConfig",
    "ContentPart",
    "ProviderError",

    # Providers
    "GeminiProvider",
    "ClaudeProvider",
    "OpenAIProvider",

    # Manager
    "ProviderInfo",
    "PROVIDER_REGISTRY",
    "PROVIDER_INFO",
    "create_provider",
    "create_provider_from_settings",
    "list_providers",
    "resolve_provider_type",
    "validate_model",
]
