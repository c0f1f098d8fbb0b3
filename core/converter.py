#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Document Converter - builds the prompt for each direction, attaches the
input and returns the text the model produces.
"""

import time
from typing import List, Optional

from ai_providers import BaseAIProvider, ContentPart, ProviderError
from config.constants import (
    DOCX_MIME_TYPE,
    EMPTY_DOC_OUTPUT,
    EMPTY_LATEX_OUTPUT,
    MSG_DOC_TO_LATEX_FAILED,
    MSG_LATEX_TO_DOC_FAILED,
    MSG_UNSUPPORTED_TYPE,
    PDF_MIME_TYPE,
)
from config.logging_config import get_logger, log_conversion
from core.docx_extractor import parse_docx_to_html
from core.exceptions import ConversionError, UnsupportedFileError
from core.file_utils import FileData, decode_base64
from core.prompts import (
    build_doc_to_latex_prompt,
    build_docx_content_text,
    build_latex_to_doc_prompt,
    strip_code_fences,
    type_instructions,
)

logger = get_logger(__name__)


class DocumentConverter:
    """
    Converts documents to LaTeX and LaTeX to HTML documents through a
    hosted model.

    Usage:
        converter = DocumentConverter(create_provider_from_settings(settings))
        latex = await converter.convert_doc_to_latex(load_file_data("paper.pdf"))
        html = await converter.convert_latex_to_doc(latex)
    """

    def __init__(self, provider: BaseAIProvider, strip_fences: bool = True):
        self.provider = provider
        self.strip_fences = strip_fences

    def build_document_part(self, file: FileData) -> ContentPart:
        """Attach a PDF as inline data, or a DOCX as its extracted HTML"""
        if file.type == PDF_MIME_TYPE:
            return ContentPart.from_bytes(decode_base64(file.base64), file.type)
        elif file.type == DOCX_MIME_TYPE:
            html = parse_docx_to_html(file.base64)
            return ContentPart.from_text(build_docx_content_text(html))
        raise UnsupportedFileError(MSG_UNSUPPORTED_TYPE)

    async def convert_doc_to_latex(self, file: FileData, style_sample: Optional[str] = None) -> str:
        """
        Convert a PDF or DOCX file to LaTeX source.

        Args:
            file: The document to convert
            style_sample: Optional .tex source to imitate

        Returns:
            LaTeX source, or a LaTeX comment if the model returned nothing

        Raises:
            UnsupportedFileError: If the file is neither PDF nor DOCX
            DocxExtractionError: If a DOCX file cannot be read
            ConversionError: If the model call fails
        """
        instructions = type_instructions(file.type)
        content_part = self.build_document_part(file)
        prompt = build_doc_to_latex_prompt(instructions, style_sample)

        logger.info(
            f"Converting {file.name!r} ({file.type}) to LaTeX"
            f"{' with style sample' if style_sample else ''}"
        )
        text = await self._run(
            [ContentPart.from_text(prompt), content_part],
            direction="doc_to_latex",
            failure_message=MSG_DOC_TO_LATEX_FAILED,
        )
        return text or EMPTY_LATEX_OUTPUT

    async def convert_latex_to_doc(self, latex_code: str) -> str:
        """
        Convert LaTeX source to a standalone HTML5 document.

        Raises:
            ConversionError: If the model call fails
        """
        logger.info(f"Converting {len(latex_code)} characters of LaTeX to HTML")
        text = await self._run(
            [ContentPart.from_text(build_latex_to_doc_prompt(latex_code))],
            direction="latex_to_doc",
            failure_message=MSG_LATEX_TO_DOC_FAILED,
        )
        return text or EMPTY_DOC_OUTPUT

    async def _run(self, parts: List[ContentPart], direction: str, failure_message: str) -> str:
        start = time.time()
        try:
            response = await self.provider.generate(parts)
        except ProviderError as e:
            duration_ms = (time.time() - start) * 1000
            logger.error(f"Model API error during {direction}: {e}")
            log_conversion(direction, "failed", duration_ms=duration_ms)
            raise ConversionError(
                e.message or failure_message,
                provider=e.provider.value if e.provider else None,
            ) from e

        duration_ms = (time.time() - start) * 1000
        log_conversion(
            direction,
            "completed",
            duration_ms=duration_ms,
            tokens_used=response.total_tokens,
        )

        text = response.content or ""
        if self.strip_fences:
            text = strip_code_fences(text)
        return text
