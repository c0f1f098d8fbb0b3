"""
Base AI Provider - Abstract Interface
Texify - Multi-Provider Support
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from config.logging_config import get_logger

logger = get_logger(__name__)


class AIProviderType(Enum):
    """Supported AI Providers"""
    GEMINI = "gemini"
    CLAUDE = "claude"
    OPENAI = "openai"


@dataclass
class ContentPart:
    """One part of a request: either text or inline binary data"""
    text: Optional[str] = None
    mime_type: Optional[str] = None
    data: Optional[bytes] = None  # raw bytes for inline data

    @classmethod
    def from_text(cls, text: str) -> "ContentPart":
        return cls(text=text)

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "ContentPart":
        return cls(mime_type=mime_type, data=data)

    @property
    def is_inline_data(self) -> bool:
        return self.data is not None


@dataclass
class AIResponse:
    """Unified response format"""
    content: str
    model: str
    provider: AIProviderType
    usage: Optional[Dict[str, int]] = None  # tokens used
    finish_reason: Optional[str] = None
    raw_response: Optional[Any] = None

    @property
    def total_tokens(self) -> Optional[int]:
        if not self.usage:
            return None
        return sum(v for v in self.usage.values() if v)


@dataclass
class AIConfig:
    """Provider configuration"""
    api_key: str
    model: str
    max_tokens: int = 8192
    temperature: float = 0.2
    timeout: int = 300
    base_url: Optional[str] = None  # For custom endpoints


class ProviderError(Exception):
    """A provider SDK call failed"""

    def __init__(self, message: str, provider: Optional[AIProviderType] = None):
        super().__init__(message)
        self.message = message
        self.provider = provider


class BaseAIProvider(ABC):
    """
    Abstract base class for AI providers.
    All providers must implement these methods.
    """

    def __init__(self, config: AIConfig):
        self.config = config
        self._client = None

    @property
    @abstractmethod
    def provider_type(self) -> AIProviderType:
        """Return the provider type"""
        pass

    @property
    @abstractmethod
    def supported_models(self) -> List[str]:
        """Return list of supported models"""
        pass

    @property
    def supports_documents(self) -> bool:
        """Whether PDF files can be attached as inline data"""
        return True

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the client connection"""
        pass

    @abstractmethod
    async def _generate(self, parts: List[ContentPart], **kwargs) -> AIResponse:
        """Provider-specific request; SDK errors propagate"""
        pass

    async def generate(self, parts: List[ContentPart], **kwargs) -> AIResponse:
        """
        Send the parts as a single user turn and return the model's text.

        Args:
            parts: Prompt text and attachments, in order
            **kwargs: temperature / max_tokens overrides

        Returns:
            AIResponse with the generated content

        Raises:
            ProviderError: If the SDK call fails
        """
        if not self._client:
            await self.initialize()

        start = time.time()
        try:
            response = await self._generate(parts, **kwargs)
        except ProviderError:
            raise
        except Exception as e:
            logger.error(f"{self.provider_type.value} API error: {e}")
            raise ProviderError(str(e), self.provider_type) from e

        logger.debug(
            f"{self.provider_type.value} responded in {time.time() - start:.2f}s "
            f"(finish_reason={response.finish_reason})"
        )
        return response

    async def health_check(self) -> bool:
        """Check if the provider is available"""
        try:
            response = await self.generate([ContentPart.from_text("Hi")], max_tokens=5)
            return response.content is not None
        except ProviderError:
            return False

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} model={self.config.model}>"
