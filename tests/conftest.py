"""
Pytest configuration and shared fixtures for Texify tests.
"""
import io
import sys
import pytest
from pathlib import Path
from typing import List, Optional

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from ai_providers import AIConfig, AIProviderType, AIResponse, BaseAIProvider, ContentPart
from config.settings import Settings
from core.converter import DocumentConverter


# ============================================================================
# Fake provider
# ============================================================================

class FakeProvider(BaseAIProvider):
    """Records every request and answers with a canned reply (or error)."""

    def __init__(self, reply: str = "\\documentclass{article}", error: Optional[Exception] = None):
        super().__init__(AIConfig(api_key="test-key", model="fake-model"))
        self.reply = reply
        self.error = error
        self.calls: List[List[ContentPart]] = []

    @property
    def provider_type(self) -> AIProviderType:
        return AIProviderType.GEMINI

    @property
    def supported_models(self) -> List[str]:
        return ["fake-model"]

    async def initialize(self) -> None:
        self._client = object()

    async def _generate(self, parts: List[ContentPart], **kwargs) -> AIResponse:
        self.calls.append(parts)
        if self.error:
            raise self.error
        return AIResponse(
            content=self.reply,
            model=self.config.model,
            provider=self.provider_type,
            usage={"input_tokens": 120, "output_tokens": 40},
            finish_reason="STOP",
        )


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def converter(fake_provider) -> DocumentConverter:
    return DocumentConverter(fake_provider)


# ============================================================================
# Fixtures: Configuration & Settings
# ============================================================================

@pytest.fixture
def test_settings(tmp_path):
    """Settings with test API keys and temporary directories."""
    return Settings(
        _env_file=None,
        google_api_key="test_google_key",
        anthropic_api_key="test_anthropic_key",
        openai_api_key="",
        provider="gemini",
        model="gemini-2.5-flash",
        output_dir=tmp_path / "output",
        logs_dir=tmp_path / "logs",
    )


# ============================================================================
# Fixtures: Sample Files
# ============================================================================

@pytest.fixture
def pdf_bytes() -> bytes:
    """Minimal PDF payload; PDFs are sent to the model as-is."""
    return (
        b"%PDF-1.4\n1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj\n"
        b"2 0 obj << /Type /Pages /Kids [] /Count 0 >> endobj\n"
        b"trailer << /Root 1 0 R >>\n%%EOF\n"
    )


@pytest.fixture
def docx_bytes() -> bytes:
    """DOCX with a heading, bold text, a list and a table."""
    from docx import Document

    document = Document()
    document.add_heading("Quarterly Report", level=1)
    paragraph = document.add_paragraph("Revenue grew ")
    paragraph.add_run("strongly").bold = True
    paragraph.add_run(" this quarter.")
    document.add_paragraph("First point", style="List Bullet")

    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Region"
    table.cell(0, 1).text = "Sales"
    table.cell(1, 0).text = "North"
    table.cell(1, 1).text = "42"

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def style_tex() -> str:
    return (
        "\\documentclass[11pt]{report}\n"
        "\\usepackage{amsmath}\n"
        "\\usepackage[margin=1in]{geometry}\n"
    )


@pytest.fixture
def sample_latex() -> str:
    return (
        "\\documentclass{article}\n"
        "\\begin{document}\n"
        "\\section{Introduction}\n"
        "Energy is $E = mc^2$.\n"
        "\\end{document}\n"
    )


@pytest.fixture
def make_provider():
    """Factory for providers with a custom reply or error."""
    return FakeProvider
