"""
DOCX to HTML pre-extraction.

The model reads DOCX input as HTML produced by mammoth, which keeps
headings, emphasis, lists and tables visible to the prompt.
"""

import io

from config.constants import MSG_MAMMOTH_MISSING
from config.logging_config import get_logger
from core.exceptions import DocxExtractionError, FileReadError
from core.file_utils import decode_base64

logger = get_logger(__name__)


def docx_bytes_to_html(content: bytes) -> str:
    """Convert raw DOCX bytes to HTML markup."""
    try:
        import mammoth
    except ImportError as e:
        raise DocxExtractionError(MSG_MAMMOTH_MISSING) from e

    try:
        result = mammoth.convert_to_html(io.BytesIO(content))
    except Exception as e:
        logger.error(f"mammoth failed to convert DOCX: {e}")
        raise DocxExtractionError(f"Could not read DOCX file: {e}") from e

    for message in result.messages:
        logger.warning(f"mammoth: {message.message}")

    logger.debug(f"Extracted {len(result.value)} characters of HTML from DOCX")
    return result.value


def parse_docx_to_html(base64_payload: str) -> str:
    """
    Decode a base64 DOCX payload and convert it to HTML.

    Args:
        base64_payload: DOCX file encoded as base64

    Returns:
        HTML markup of the document body

    Raises:
        DocxExtractionError: If the payload is not a readable DOCX file
    """
    try:
        content = decode_base64(base64_payload)
    except FileReadError as e:
        raise DocxExtractionError(str(e)) from e
    return docx_bytes_to_html(content)
