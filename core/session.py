#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Converter Session - state of the two-pane editor.

The session holds the conversion mode, the inputs of the input pane, the
status of the current conversion and the result shown in the output pane.
Status moves IDLE -> (UPLOADING ->) PROCESSING -> SUCCESS | ERROR.
"""

import asyncio
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from config.constants import MSG_UNEXPECTED_ERROR
from config.logging_config import get_logger
from core.converter import DocumentConverter
from core.exceptions import TexifyError
from core.file_utils import (
    FileData,
    detect_mime_type,
    file_to_base64,
    format_file_size,
    read_text_file,
    validate_document,
    validate_style_file,
)
from core.result_viewer import ResultType, ResultView

logger = get_logger(__name__)


class ConversionMode(str, Enum):
    DOC_TO_LATEX = "DOC_TO_LATEX"
    LATEX_TO_DOC = "LATEX_TO_DOC"


class Status(str, Enum):
    IDLE = "IDLE"
    UPLOADING = "UPLOADING"
    PROCESSING = "PROCESSING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


@dataclass
class ConversionResult:
    """Converted text and how to present it"""
    content: str
    type: ResultType


@dataclass
class SelectedFile:
    """A file picked in the input pane, held as raw bytes until conversion"""
    name: str
    type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def size_label(self) -> str:
        return format_file_size(self.size)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "size": self.size,
            "size_label": self.size_label,
        }


@dataclass
class ConverterSession:
    """
    Editor state for one user.

    Usage:
        session = ConverterSession()
        session.select_file("paper.pdf", pdf_bytes, "application/pdf")
        await session.convert(converter)
        print(session.status, session.result)
    """
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    mode: ConversionMode = ConversionMode.DOC_TO_LATEX
    status: Status = Status.IDLE
    error: Optional[str] = None
    selected_file: Optional[SelectedFile] = None
    style_file: Optional[SelectedFile] = None
    latex_input: str = ""
    result: str = ""
    view: ResultView = field(default_factory=ResultView)
    created_at: float = field(default_factory=time.time)
    last_activity: float = field(default_factory=time.time)

    def touch(self) -> None:
        self.last_activity = time.time()

    # ------------------------------------------------------------------
    # Mode
    # ------------------------------------------------------------------

    def set_mode(self, mode: ConversionMode) -> None:
        """Switch direction; clears status, result and error"""
        self.mode = ConversionMode(mode)
        self.status = Status.IDLE
        self.result = ""
        self.error = None
        self.view = ResultView(type=self.output_type)
        self.touch()

    @property
    def output_type(self) -> ResultType:
        if self.mode == ConversionMode.DOC_TO_LATEX:
            return ResultType.LATEX
        return ResultType.HTML

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def select_file(self, name: str, content: bytes, declared_type: Optional[str] = None) -> bool:
        """
        Pick the document to convert.

        An invalid type records the error and keeps the previous file.

        Returns:
            True if the file was accepted
        """
        self.touch()
        mime_type = detect_mime_type(name, declared_type)
        try:
            validate_document(name, mime_type)
        except TexifyError as e:
            self.error = e.message
            return False

        self.selected_file = SelectedFile(name=name, type=mime_type, content=content)
        self.error = None
        self.status = Status.IDLE
        logger.debug(f"Session {self.session_id}: selected {name} ({self.selected_file.size_label})")
        return True

    def select_style_file(self, name: str, content: bytes) -> bool:
        """Pick the optional .tex style sample"""
        self.touch()
        try:
            validate_style_file(name)
        except TexifyError as e:
            self.error = e.message
            return False

        self.style_file = SelectedFile(name=name, type=detect_mime_type(name), content=content)
        self.error = None
        return True

    def remove_style_file(self) -> None:
        self.style_file = None
        self.touch()

    def set_latex_input(self, text: str) -> None:
        self.latex_input = text or ""
        self.touch()

    # ------------------------------------------------------------------
    # Derived view state
    # ------------------------------------------------------------------

    @property
    def is_processing(self) -> bool:
        return self.status == Status.PROCESSING

    @property
    def can_convert(self) -> bool:
        """Whether the action button is enabled"""
        if self.is_processing:
            return False
        if self.mode == ConversionMode.DOC_TO_LATEX:
            return self.selected_file is not None
        return bool(self.latex_input)

    @property
    def input_title(self) -> str:
        if self.mode == ConversionMode.DOC_TO_LATEX:
            return "Input Document"
        return "Input LaTeX Code"

    @property
    def action_label(self) -> str:
        if self.is_processing:
            return "Thinking..."
        if self.mode == ConversionMode.DOC_TO_LATEX:
            return "Convert to LaTeX"
        return "Convert to Document"

    @property
    def footer_note(self) -> str:
        note = "Supports PDF and DOCX inputs."
        if self.mode == ConversionMode.LATEX_TO_DOC:
            note += " Generates HTML documents compatible with Word and PDF printers."
        return note

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    async def convert(self, converter: DocumentConverter) -> Optional[ConversionResult]:
        """
        Run the conversion for the current mode.

        Returns:
            The result on success; None if there was nothing to convert or
            the conversion failed (see status and error)
        """
        self.touch()
        if self.mode == ConversionMode.DOC_TO_LATEX:
            return await self._convert_doc_to_latex(converter)
        return await self._convert_latex_to_doc(converter)

    async def _convert_doc_to_latex(self, converter: DocumentConverter) -> Optional[ConversionResult]:
        if not self.selected_file:
            return None

        self.status = Status.UPLOADING
        self.error = None
        try:
            file_data = FileData(
                name=self.selected_file.name,
                type=self.selected_file.type,
                base64=file_to_base64(self.selected_file.content),
            )

            style_content = None
            if self.style_file:
                style_content = read_text_file(self.style_file.content)

            self.status = Status.PROCESSING
            latex = await converter.convert_doc_to_latex(file_data, style_content)
        except asyncio.CancelledError:
            self._cancelled()
            raise
        except Exception as e:
            self.fail(e)
            return None

        return self._succeed(latex)

    async def _convert_latex_to_doc(self, converter: DocumentConverter) -> Optional[ConversionResult]:
        if not self.latex_input.strip():
            return None

        self.status = Status.PROCESSING
        self.error = None
        try:
            document_html = await converter.convert_latex_to_doc(self.latex_input)
        except asyncio.CancelledError:
            self._cancelled()
            raise
        except Exception as e:
            self.fail(e)
            return None

        return self._succeed(document_html)

    def _cancelled(self) -> None:
        self.status = Status.IDLE
        self.touch()
        logger.info(f"Session {self.session_id}: {self.mode.value} cancelled")

    def _succeed(self, content: str) -> ConversionResult:
        self.result = content
        self.view.content = content
        self.status = Status.SUCCESS
        self.touch()
        logger.info(f"Session {self.session_id}: {self.mode.value} succeeded ({len(content)} chars)")
        return ConversionResult(content=content, type=self.output_type)

    def fail(self, error: Exception) -> None:
        """Record a failed conversion"""
        self.error = str(error) or MSG_UNEXPECTED_ERROR
        self.status = Status.ERROR
        self.touch()
        if isinstance(error, TexifyError):
            logger.warning(f"Session {self.session_id}: {self.mode.value} failed: {self.error}")
        else:
            logger.exception(f"Session {self.session_id}: unexpected error during {self.mode.value}")

    def snapshot(self) -> Dict[str, Any]:
        """Serialisable view of the session for the HTTP layer"""
        return {
            "session_id": self.session_id,
            "mode": self.mode.value,
            "status": self.status.value,
            "error": self.error,
            "selected_file": self.selected_file.to_dict() if self.selected_file else None,
            "style_file": self.style_file.to_dict() if self.style_file else None,
            "latex_input": self.latex_input,
            "result": self.result,
            "output_type": self.output_type.value,
            "can_convert": self.can_convert,
            "input_title": self.input_title,
            "action_label": self.action_label,
            "footer_note": self.footer_note,
            "view": self.view.to_dict(),
        }
