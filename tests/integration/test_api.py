"""
Integration tests for API endpoints (api/main.py)
"""
import pytest
from fastapi.testclient import TestClient

from api.main import _converter_cache, app, build_converter, limiter
from api.session_store import SessionStore
from config.logging_config import setup_logger
from config.settings import settings
from core.converter import DocumentConverter
from core.exceptions import MissingAPIKeyError
from core.session import ConversionMode, Status


@pytest.fixture
def provider(make_provider):
    return make_provider()


@pytest.fixture
def client(provider):
    """Test client whose conversions go to the fake provider."""
    original_factory = app.state.converter_factory
    app.state.converter_factory = lambda **kwargs: DocumentConverter(provider)
    app.state.sessions = SessionStore()
    limiter.enabled = False
    yield TestClient(app)
    app.state.converter_factory = original_factory
    limiter.enabled = True


@pytest.fixture
def session_id(client):
    response = client.post("/api/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]


class TestAPIBasics:

    def test_root_serves_page(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers.get("content-type", "")
        assert "Texify" in response.text

    def test_ui_static(self, client):
        response = client.get("/ui/index.html")
        assert response.status_code == 200

    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "ok"
        assert "api_key_configured" in data

    def test_providers(self, client):
        providers = client.get("/api/providers").json()
        assert {p["id"] for p in providers} == {"gemini", "claude", "openai"}
        gemini = next(p for p in providers if p["id"] == "gemini")
        assert gemini["default_model"] == "gemini-2.5-flash"


class TestSessionLifecycle:

    def test_create_defaults(self, client):
        data = client.post("/api/sessions").json()
        assert data["mode"] == "DOC_TO_LATEX"
        assert data["status"] == "IDLE"
        assert data["can_convert"] is False
        assert data["action_label"] == "Convert to LaTeX"

    def test_unknown_session(self, client):
        assert client.get("/api/sessions/nope").status_code == 404

    def test_delete(self, client, session_id):
        assert client.delete(f"/api/sessions/{session_id}").status_code == 200
        assert client.get(f"/api/sessions/{session_id}").status_code == 404
        assert client.delete(f"/api/sessions/{session_id}").status_code == 404

    def test_switch_mode(self, client, session_id):
        data = client.put(f"/api/sessions/{session_id}/mode", json={"mode": "LATEX_TO_DOC"}).json()
        assert data["mode"] == "LATEX_TO_DOC"
        assert data["input_title"] == "Input LaTeX Code"
        assert data["output_type"] == "html"
        assert data["view"]["view_mode"] == "preview"

    def test_invalid_mode(self, client, session_id):
        response = client.put(f"/api/sessions/{session_id}/mode", json={"mode": "SIDEWAYS"})
        assert response.status_code == 422


class TestDocToLatexSession:

    def test_upload_and_convert(self, client, session_id, provider, pdf_bytes, style_tex):
        data = client.post(
            f"/api/sessions/{session_id}/file",
            files={"file": ("paper.pdf", pdf_bytes, "application/pdf")},
        ).json()
        assert data["selected_file"]["name"] == "paper.pdf"
        assert data["can_convert"] is True

        data = client.post(
            f"/api/sessions/{session_id}/style",
            files={"file": ("template.tex", style_tex.encode(), "application/x-tex")},
        ).json()
        assert data["style_file"]["name"] == "template.tex"

        data = client.post(f"/api/sessions/{session_id}/convert").json()
        assert data["status"] == "SUCCESS"
        assert data["result"] == "\\documentclass{article}"
        assert style_tex in provider.calls[0][0].text

        result = client.get(f"/api/sessions/{session_id}/result").json()
        assert result["content"] == "\\documentclass{article}"
        assert result["header_label"] == "main.tex"

    def test_invalid_file_reported_in_session(self, client, session_id):
        data = client.post(
            f"/api/sessions/{session_id}/file",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        ).json()
        assert data["error"] == "Please upload a valid PDF or DOCX file."
        assert data["selected_file"] is None

    def test_invalid_style_file(self, client, session_id):
        data = client.post(
            f"/api/sessions/{session_id}/style",
            files={"file": ("template.sty", b"x", "text/plain")},
        ).json()
        assert data["error"] == "Style file must be a .tex file."

    def test_remove_style(self, client, session_id, style_tex):
        client.post(
            f"/api/sessions/{session_id}/style",
            files={"file": ("template.tex", style_tex.encode(), "application/x-tex")},
        )
        data = client.delete(f"/api/sessions/{session_id}/style").json()
        assert data["style_file"] is None

    def test_docx_upload_with_generic_type(self, client, session_id, provider, docx_bytes):
        client.post(
            f"/api/sessions/{session_id}/file",
            files={"file": ("report.docx", docx_bytes, "application/octet-stream")},
        )
        data = client.post(f"/api/sessions/{session_id}/convert").json()
        assert data["status"] == "SUCCESS"
        assert "<h1>Quarterly Report</h1>" in provider.calls[0][1].text

    def test_convert_without_file_is_noop(self, client, session_id, provider):
        data = client.post(f"/api/sessions/{session_id}/convert").json()
        assert data["status"] == "IDLE"
        assert provider.calls == []

    def test_download(self, client, session_id, pdf_bytes):
        client.post(
            f"/api/sessions/{session_id}/file",
            files={"file": ("paper.pdf", pdf_bytes, "application/pdf")},
        )
        client.post(f"/api/sessions/{session_id}/convert")

        response = client.get(f"/api/sessions/{session_id}/result/download")
        assert response.status_code == 200
        assert response.content == b"\\documentclass{article}"
        assert 'filename="converted_output.tex"' in response.headers["content-disposition"]
        assert response.headers["content-type"].startswith("application/x-tex")

    def test_download_without_result(self, client, session_id):
        assert client.get(f"/api/sessions/{session_id}/result/download").status_code == 404

    def test_latex_has_no_preview(self, client, session_id):
        assert client.put(f"/api/sessions/{session_id}/view", json={"view_mode": "preview"}).status_code == 400
        assert client.get(f"/api/sessions/{session_id}/result/preview").status_code == 409


class TestLatexToDocSession:

    @pytest.fixture
    def provider(self, make_provider):
        return make_provider(reply="<html><body><h1>Introduction</h1></body></html>")

    def test_convert_preview_and_toggle(self, client, session_id, sample_latex):
        client.put(f"/api/sessions/{session_id}/mode", json={"mode": "LATEX_TO_DOC"})
        data = client.put(f"/api/sessions/{session_id}/latex", json={"latex": sample_latex}).json()
        assert data["can_convert"] is True

        data = client.post(f"/api/sessions/{session_id}/convert").json()
        assert data["status"] == "SUCCESS"

        preview = client.get(f"/api/sessions/{session_id}/result/preview")
        assert preview.status_code == 200
        assert preview.headers["content-security-policy"] == "sandbox allow-same-origin"
        assert "<h1>Introduction</h1>" in preview.text

        data = client.put(f"/api/sessions/{session_id}/view", json={"view_mode": "code"}).json()
        assert data["view"]["view_mode"] == "code"

        download = client.get(f"/api/sessions/{session_id}/result/download")
        assert 'filename="converted_output.html"' in download.headers["content-disposition"]


class TestConversionErrors:

    @pytest.fixture
    def provider(self, make_provider):
        return make_provider(error=RuntimeError("quota exceeded"))

    def test_model_error_sets_session_error(self, client, session_id, pdf_bytes):
        client.post(
            f"/api/sessions/{session_id}/file",
            files={"file": ("paper.pdf", pdf_bytes, "application/pdf")},
        )
        data = client.post(f"/api/sessions/{session_id}/convert").json()
        assert data["status"] == "ERROR"
        assert data["error"] == "quota exceeded"

    def test_model_error_one_shot(self, client, sample_latex):
        response = client.post("/api/convert/latex-to-doc", json={"latex": sample_latex})
        assert response.status_code == 502
        assert response.json()["detail"] == "quota exceeded"

    def test_missing_api_key(self, client, session_id, pdf_bytes):
        def no_key(**kwargs):
            raise MissingAPIKeyError("API Key is missing. Please check your environment variables.")

        app.state.converter_factory = no_key
        client.post(
            f"/api/sessions/{session_id}/file",
            files={"file": ("paper.pdf", pdf_bytes, "application/pdf")},
        )
        data = client.post(f"/api/sessions/{session_id}/convert").json()
        assert data["status"] == "ERROR"
        assert data["error"] == "API Key is missing. Please check your environment variables."

        response = client.post(
            "/api/convert/doc-to-latex",
            files={"file": ("paper.pdf", pdf_bytes, "application/pdf")},
        )
        assert response.status_code == 503


class TestOneShotConversions:

    def test_doc_to_latex(self, client, provider, pdf_bytes, style_tex):
        response = client.post(
            "/api/convert/doc-to-latex",
            files={
                "file": ("paper.pdf", pdf_bytes, "application/pdf"),
                "style_file": ("template.tex", style_tex.encode(), "application/x-tex"),
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["content"] == "\\documentclass{article}"
        assert data["type"] == "latex"
        assert data["filename"] == "converted_output.tex"
        assert style_tex in provider.calls[0][0].text

    def test_doc_to_latex_rejects_other_types(self, client, provider):
        response = client.post(
            "/api/convert/doc-to-latex",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Please upload a valid PDF or DOCX file."
        assert provider.calls == []

    def test_doc_to_latex_rejects_bad_style(self, client, pdf_bytes):
        response = client.post(
            "/api/convert/doc-to-latex",
            files={
                "file": ("paper.pdf", pdf_bytes, "application/pdf"),
                "style_file": ("template.sty", b"x", "text/plain"),
            },
        )
        assert response.status_code == 400

    def test_latex_to_doc(self, client, sample_latex):
        response = client.post("/api/convert/latex-to-doc", json={"latex": sample_latex})
        assert response.status_code == 200
        assert response.json()["filename"] == "converted_output.html"

    def test_latex_to_doc_blank(self, client):
        response = client.post("/api/convert/latex-to-doc", json={"latex": "   "})
        assert response.status_code == 400

    def test_upload_too_large(self, client, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_size_mb", 0)
        response = client.post(
            "/api/convert/doc-to-latex",
            files={"file": ("paper.pdf", b"%PDF-1.4", "application/pdf")},
        )
        assert response.status_code == 413

    def test_unknown_provider_is_bad_request(self, client, sample_latex):
        app.state.converter_factory = build_converter
        response = client.post(
            "/api/convert/latex-to-doc",
            json={"latex": sample_latex, "provider": "mistral"},
        )
        assert response.status_code == 400
        assert "Unknown provider: mistral" in response.json()["detail"]

    def test_unknown_provider_doc_to_latex(self, client, pdf_bytes):
        app.state.converter_factory = build_converter
        response = client.post(
            "/api/convert/doc-to-latex",
            files={"file": ("paper.pdf", pdf_bytes, "application/pdf")},
            data={"provider": "mistral"},
        )
        assert response.status_code == 400

    def test_unknown_model_is_rejected_before_caching(self, client, sample_latex):
        app.state.converter_factory = build_converter
        for model in ("not-a-model", "another-made-up-model"):
            response = client.post(
                "/api/convert/latex-to-doc",
                json={"latex": sample_latex, "provider": "gemini", "model": model},
            )
            assert response.status_code == 400
            assert "Unknown model for gemini" in response.json()["detail"]
        assert not any(key[1] in ("not-a-model", "another-made-up-model") for key in _converter_cache)


class TestInputsDuringConversion:

    @pytest.fixture
    def busy_session(self, client, session_id):
        session = app.state.sessions.get(session_id)
        session.status = Status.PROCESSING
        return session

    def test_mode_switch_conflicts(self, client, busy_session):
        response = client.put(f"/api/sessions/{busy_session.session_id}/mode", json={"mode": "LATEX_TO_DOC"})
        assert response.status_code == 409
        assert busy_session.status == Status.PROCESSING
        assert busy_session.mode == ConversionMode.DOC_TO_LATEX

    def test_file_selection_conflicts(self, client, busy_session, pdf_bytes):
        response = client.post(
            f"/api/sessions/{busy_session.session_id}/file",
            files={"file": ("paper.pdf", pdf_bytes, "application/pdf")},
        )
        assert response.status_code == 409
        assert busy_session.selected_file is None
        assert busy_session.status == Status.PROCESSING

    def test_style_and_latex_conflict(self, client, busy_session, style_tex):
        sid = busy_session.session_id
        assert client.post(
            f"/api/sessions/{sid}/style",
            files={"file": ("template.tex", style_tex.encode(), "application/x-tex")},
        ).status_code == 409
        assert client.delete(f"/api/sessions/{sid}/style").status_code == 409
        assert client.put(f"/api/sessions/{sid}/latex", json={"latex": "\\section{A}"}).status_code == 409

    def test_second_convert_conflicts(self, client, busy_session, provider):
        assert client.post(f"/api/sessions/{busy_session.session_id}/convert").status_code == 409
        assert provider.calls == []

    def test_reads_still_allowed(self, client, busy_session):
        response = client.get(f"/api/sessions/{busy_session.session_id}")
        assert response.status_code == 200
        assert response.json()["status"] == "PROCESSING"


class TestSessionProviderErrors:

    def test_unknown_provider_sets_session_error(self, client, session_id, pdf_bytes):
        app.state.converter_factory = build_converter
        client.post(
            f"/api/sessions/{session_id}/file",
            files={"file": ("paper.pdf", pdf_bytes, "application/pdf")},
        )
        data = client.post(f"/api/sessions/{session_id}/convert", json={"provider": "mistral"}).json()
        assert data["status"] == "ERROR"
        assert "Unknown provider: mistral" in data["error"]


def test_lifespan_prepares_directories(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "output_dir", tmp_path / "output")
    monkeypatch.setattr(settings, "logs_dir", tmp_path / "logs")
    monkeypatch.setattr(settings, "log_to_file", True)
    monkeypatch.setattr(settings, "log_json", False)
    try:
        with TestClient(app) as started:
            assert started.get("/health").status_code == 200
            assert (tmp_path / "output").is_dir()
            assert (tmp_path / "logs" / "texify.log").exists()
    finally:
        setup_logger("texify", log_to_console=False)
