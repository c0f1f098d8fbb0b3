#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
File Utilities - ingestion and encoding of uploaded files for transport
to the model.
"""

import base64
import binascii
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union

from config.constants import (
    DEFAULT_MIME_TYPE,
    EXTENSION_MIME_TYPES,
    MSG_INVALID_DOCUMENT,
    MSG_INVALID_STYLE_FILE,
    STYLE_FILE_EXTENSION,
    SUPPORTED_DOCUMENT_TYPES,
)
from config.logging_config import get_logger
from core.exceptions import FileReadError, FileTooLargeError, UnsupportedFileError

logger = get_logger(__name__)

FileSource = Union[str, Path, bytes, bytearray, BinaryIO]

# Browsers and curl report these for files they cannot classify
_GENERIC_MIME_TYPES = {"", DEFAULT_MIME_TYPE, "binary/octet-stream"}


@dataclass
class FileData:
    """A file ready for transport: name, MIME type and base64 payload"""
    name: str
    type: str
    base64: str

    @property
    def size(self) -> int:
        """Decoded size in bytes"""
        return len(decode_base64(self.base64))


def _read_bytes(source: FileSource) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, (str, Path)):
        path = Path(source)
        try:
            return path.read_bytes()
        except OSError as e:
            raise FileReadError(f"Cannot read file {path}: {e}")
    return source.read()


def file_to_base64(source: FileSource) -> str:
    """
    Encode a file as a plain base64 string (no data-URL prefix).

    Args:
        source: Path, raw bytes or binary file object

    Returns:
        Base64 payload as ASCII text
    """
    return base64.b64encode(_read_bytes(source)).decode("ascii")


def read_text_file(source: FileSource) -> str:
    """Read a file as UTF-8 text"""
    data = _read_bytes(source)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FileReadError(f"File is not valid UTF-8 text: {e}")


def decode_base64(payload: str) -> bytes:
    """Decode a base64 payload, rejecting malformed input"""
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FileReadError(f"Invalid base64 payload: {e}")


def detect_mime_type(filename: str, declared: Optional[str] = None) -> str:
    """
    Resolve the MIME type of an upload.

    The declared type wins unless it is empty or generic, in which case the
    file extension decides.
    """
    if declared and declared.lower() not in _GENERIC_MIME_TYPES:
        return declared.lower()
    suffix = Path(filename or "").suffix.lower()
    return EXTENSION_MIME_TYPES.get(suffix, DEFAULT_MIME_TYPE)


def validate_document(filename: str, mime_type: str) -> None:
    """Accept only PDF and DOCX documents"""
    if mime_type not in SUPPORTED_DOCUMENT_TYPES:
        logger.info(f"Rejected document {filename!r} with type {mime_type!r}")
        raise UnsupportedFileError(MSG_INVALID_DOCUMENT)


def validate_style_file(filename: str) -> None:
    """Style samples must be .tex files"""
    if not (filename or "").endswith(STYLE_FILE_EXTENSION):
        logger.info(f"Rejected style file {filename!r}")
        raise UnsupportedFileError(MSG_INVALID_STYLE_FILE)


def check_file_size(size: int, max_mb: int) -> None:
    """Raise if an upload exceeds max_mb megabytes"""
    if size > max_mb * 1024 * 1024:
        raise FileTooLargeError(f"File too large (max {max_mb}MB)")


def format_file_size(num_bytes: int) -> str:
    """Size in megabytes with two decimals, e.g. '1.50 MB'"""
    return f"{num_bytes / 1024 / 1024:.2f} MB"


def make_file_data(name: str, content: bytes, declared_type: Optional[str] = None) -> FileData:
    """Build FileData from in-memory content"""
    return FileData(
        name=name,
        type=detect_mime_type(name, declared_type),
        base64=file_to_base64(content),
    )


def load_file_data(path: Union[str, Path], declared_type: Optional[str] = None) -> FileData:
    """Build FileData from a file on disk"""
    path = Path(path)
    return make_file_data(path.name, _read_bytes(path), declared_type)
