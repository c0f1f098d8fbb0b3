"""
OpenAI GPT Provider
Texify - Multi-Provider Support
"""

import base64
from typing import Any, Dict, List

from openai import AsyncOpenAI

from .base import (
    AIProviderType,
    AIResponse,
    BaseAIProvider,
    ContentPart,
)


class OpenAIProvider(BaseAIProvider):
    """
    OpenAI GPT Provider

    Supports:
    - GPT-4o (multimodal)
    - GPT-4o Mini (fast, cost-effective)
    - PDF input as base64 file parts
    """

    MODELS = {
        "gpt-4o": "GPT-4o (Recommended)",
        "gpt-4o-mini": "GPT-4o Mini (Fast)",
        "gpt-4.1": "GPT-4.1",
        "gpt-4.1-mini": "GPT-4.1 Mini",
    }

    DEFAULT_MODEL = "gpt-4o"

    @property
    def provider_type(self) -> AIProviderType:
        return AIProviderType.OPENAI

    @property
    def supported_models(self) -> List[str]:
        return list(self.MODELS.keys())

    async def initialize(self) -> None:
        """Initialize OpenAI client"""
        self._client = AsyncOpenAI(
            api_key=self.config.api_key,
            base_url=self.config.base_url,
            timeout=self.config.timeout,
        )

    def _convert_parts(self, parts: List[ContentPart]) -> List[Dict[str, Any]]:
        """Convert ContentPart to OpenAI chat content parts"""
        content = []
        for part in parts:
            if part.is_inline_data:
                encoded = base64.b64encode(part.data).decode()
                data_url = f"data:{part.mime_type};base64,{encoded}"
                if part.mime_type.startswith("image/"):
                    content.append({"type": "image_url", "image_url": {"url": data_url}})
                else:
                    content.append({
                        "type": "file",
                        "file": {"filename": "document.pdf", "file_data": data_url}
                    })
            else:
                content.append({"type": "text", "text": part.text or ""})
        return content

    async def _generate(self, parts: List[ContentPart], **kwargs) -> AIResponse:
        """Generate content using OpenAI"""
        response = await self._client.chat.completions.create(
            model=self.config.model,
            max_tokens=kwargs.get("max_tokens", self.config.max_tokens),
            temperature=kwargs.get("temperature", self.config.temperature),
            messages=[{"role": "user", "content": self._convert_parts(parts)}]
        )

        choice = response.choices[0]
        usage = None
        if response.usage:
            usage = {
                "input_tokens": response.usage.prompt_tokens,
                "output_tokens": response.usage.completion_tokens
            }

        return AIResponse(
            content=choice.message.content or "",
            model=response.model,
            provider=self.provider_type,
            usage=usage,
            finish_reason=choice.finish_reason,
            raw_response=response
        )
