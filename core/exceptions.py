"""
Exceptions raised by the conversion core.
"""

from typing import Optional


class TexifyError(Exception):
    """Base exception for conversion errors"""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnsupportedFileError(TexifyError):
    """File type is not accepted for this input"""
    pass


class FileTooLargeError(TexifyError):
    """Upload exceeds the configured size limit"""
    pass


class FileReadError(TexifyError):
    """File could not be read or decoded"""
    pass


class DocxExtractionError(TexifyError):
    """DOCX could not be converted to HTML"""
    pass


class ConversionError(TexifyError):
    """The model call behind a conversion failed"""

    def __init__(self, message: str, provider: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, details)
        self.provider = provider


class MissingAPIKeyError(TexifyError):
    """No API key configured for the selected provider"""
    pass


class UnknownProviderError(TexifyError, ValueError):
    """Provider name is not one of gemini, claude or openai"""
    pass


class UnknownModelError(TexifyError, ValueError):
    """Requested model is not offered by the provider"""
    pass
