"""
Result viewer: presentation of converted text as raw code or, for HTML
output, as a sandboxed preview, plus copy and download payloads.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from config.constants import (
    DOWNLOAD_BASENAME,
    HTML_HEADER_LABEL,
    HTML_MIME_TYPE,
    LATEX_HEADER_LABEL,
    PREVIEW_SANDBOX,
    TEX_MIME_TYPE,
)
from config.logging_config import get_logger

logger = get_logger(__name__)


class ResultType(str, Enum):
    LATEX = "latex"
    HTML = "html"


class ViewMode(str, Enum):
    CODE = "code"
    PREVIEW = "preview"


_EXTENSIONS = {ResultType.LATEX: "tex", ResultType.HTML: "html"}
_MEDIA_TYPES = {ResultType.LATEX: TEX_MIME_TYPE, ResultType.HTML: HTML_MIME_TYPE}
_HEADER_LABELS = {ResultType.LATEX: LATEX_HEADER_LABEL, ResultType.HTML: HTML_HEADER_LABEL}


@dataclass
class ResultView:
    """Output pane state for one result type"""
    content: str = ""
    type: ResultType = ResultType.LATEX
    view_mode: ViewMode = ViewMode.CODE

    def __post_init__(self):
        self.type = ResultType(self.type)
        self.view_mode = self.default_view_mode(self.type)

    @staticmethod
    def default_view_mode(result_type: ResultType) -> ViewMode:
        """HTML opens in preview, LaTeX as code"""
        return ViewMode.PREVIEW if result_type == ResultType.HTML else ViewMode.CODE

    @property
    def can_preview(self) -> bool:
        return self.type == ResultType.HTML

    @property
    def is_preview(self) -> bool:
        return self.can_preview and self.view_mode == ViewMode.PREVIEW

    def set_view_mode(self, mode: Union[ViewMode, str]) -> ViewMode:
        """Toggle code/preview; LaTeX results always show code"""
        mode = ViewMode(mode)
        if mode == ViewMode.PREVIEW and not self.can_preview:
            raise ValueError("Preview is only available for HTML output")
        self.view_mode = mode
        return self.view_mode

    @property
    def header_label(self) -> str:
        return _HEADER_LABELS[self.type]

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self.type]

    @property
    def download_filename(self) -> str:
        return f"{DOWNLOAD_BASENAME}.{self.extension}"

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self.type]

    @property
    def preview_sandbox(self) -> str:
        return PREVIEW_SANDBOX

    def copy_text(self) -> str:
        """Text placed on the clipboard"""
        return self.content

    def download_bytes(self) -> bytes:
        return self.content.encode("utf-8")

    def save(self, directory: Union[str, Path], filename: Optional[str] = None) -> Path:
        """Write the result to directory under its download name"""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / (filename or self.download_filename)
        path.write_bytes(self.download_bytes())
        logger.info(f"Saved {self.type.value} result to {path}")
        return path

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "view_mode": self.view_mode.value,
            "header_label": self.header_label,
            "download_filename": self.download_filename,
            "can_preview": self.can_preview,
            "preview_sandbox": self.preview_sandbox,
        }
