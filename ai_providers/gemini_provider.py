"""
Google Gemini Provider
Texify - Multi-Provider Support
"""

from typing import Any, List, Union

import google.generativeai as genai
from google.generativeai.types import HarmBlockThreshold, HarmCategory

from .base import (
    AIProviderType,
    AIResponse,
    BaseAIProvider,
    ContentPart,
)


class GeminiProvider(BaseAIProvider):
    """
    Google Gemini AI Provider

    Supports:
    - Gemini 2.5 Flash (default, fast multimodal)
    - Gemini 2.5 Pro (high capability)
    - Native PDF input as inline data
    """

    MODELS = {
        "gemini-2.5-flash": "Gemini 2.5 Flash (Default)",
        "gemini-2.5-pro": "Gemini 2.5 Pro",
        "gemini-2.0-flash": "Gemini 2.0 Flash",
        "gemini-1.5-pro": "Gemini 1.5 Pro",
    }

    DEFAULT_MODEL = "gemini-2.5-flash"

    @property
    def provider_type(self) -> AIProviderType:
        return AIProviderType.GEMINI

    @property
    def supported_models(self) -> List[str]:
        return list(self.MODELS.keys())

    async def initialize(self) -> None:
        """Initialize Gemini client"""
        genai.configure(api_key=self.config.api_key)

        # No content filtering on converted documents
        self._safety_settings = {
            HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_NONE,
        }

        self._client = genai.GenerativeModel(
            model_name=self.config.model,
            safety_settings=self._safety_settings,
        )

    def _convert_parts(self, parts: List[ContentPart]) -> List[Union[str, dict]]:
        """Convert ContentPart to Gemini format"""
        converted = []
        for part in parts:
            if part.is_inline_data:
                converted.append({"mime_type": part.mime_type, "data": part.data})
            else:
                converted.append(part.text or "")
        return converted

    @staticmethod
    def _response_text(response: Any) -> str:
        # .text raises when the candidate has no parts (blocked or empty)
        try:
            return response.text or ""
        except ValueError:
            return ""

    async def _generate(self, parts: List[ContentPart], **kwargs) -> AIResponse:
        """Generate content using Gemini"""
        response = await self._client.generate_content_async(
            [{"role": "user", "parts": self._convert_parts(parts)}],
            generation_config={
                "temperature": kwargs.get("temperature", self.config.temperature),
                "max_output_tokens": kwargs.get("max_tokens", self.config.max_tokens),
            },
            request_options={"timeout": self.config.timeout},
        )

        usage = None
        if getattr(response, "usage_metadata", None):
            usage = {
                "input_tokens": response.usage_metadata.prompt_token_count,
                "output_tokens": response.usage_metadata.candidates_token_count
            }

        return AIResponse(
            content=self._response_text(response),
            model=self.config.model,
            provider=self.provider_type,
            usage=usage,
            finish_reason=response.candidates[0].finish_reason.name if response.candidates else None,
            raw_response=response
        )
