"""
Claude AI Provider - Anthropic
Texify - Multi-Provider Support
"""

import base64
from typing import Any, Dict, List

import anthropic

from .base import (
    AIProviderType,
    AIResponse,
    BaseAIProvider,
    ContentPart,
)


class ClaudeProvider(BaseAIProvider):
    """
    Anthropic Claude AI Provider

    Supports:
    - Claude Sonnet 4 (recommended)
    - Claude 3.5 Haiku (fast, cost-effective)
    - PDF input as base64 document blocks
    """

    MODELS = {
        "claude-sonnet-4-20250514": "Claude Sonnet 4 (Latest)",
        "claude-3-7-sonnet-20250219": "Claude 3.7 Sonnet",
        "claude-3-5-haiku-20241022": "Claude 3.5 Haiku",
    }

    DEFAULT_MODEL = "claude-sonnet-4-20250514"

    @property
    def provider_type(self) -> AIProviderType:
        return AIProviderType.CLAUDE

    @property
    def supported_models(self) -> List[str]:
        return list(self.MODELS.keys())

    async def initialize(self) -> None:
        """Initialize Anthropic client"""
        self._client = anthropic.AsyncAnthropic(
            api_key=self.config.api_key,
            base_url=self.config.base_url,
            timeout=self.config.timeout,
        )

    def _convert_parts(self, parts: List[ContentPart]) -> List[Dict[str, Any]]:
        """Convert ContentPart to Anthropic content blocks"""
        content = []
        for part in parts:
            if part.is_inline_data:
                block_type = "image" if part.mime_type.startswith("image/") else "document"
                content.append({
                    "type": block_type,
                    "source": {
                        "type": "base64",
                        "media_type": part.mime_type,
                        "data": base64.b64encode(part.data).decode()
                    }
                })
            else:
                content.append({"type": "text", "text": part.text or ""})
        return content

    async def _generate(self, parts: List[ContentPart], **kwargs) -> AIResponse:
        """Generate content using Claude"""
        response = await self._client.messages.create(
            model=self.config.model,
            max_tokens=kwargs.get("max_tokens", self.config.max_tokens),
            temperature=kwargs.get("temperature", self.config.temperature),
            messages=[{"role": "user", "content": self._convert_parts(parts)}]
        )

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )

        return AIResponse(
            content=text,
            model=response.model,
            provider=self.provider_type,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens
            },
            finish_reason=response.stop_reason,
            raw_response=response
        )
