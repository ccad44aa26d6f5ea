import base64

import pytest
import requests

from latexdesk import config
from latexdesk.db.models.project_file_orm import FileKind
from latexdesk.models.file_tree import FileRecord, build_file_tree
from latexdesk.services import latex_compiler
from latexdesk.services.latex_compiler import (
    PDF_DATA_PREFIX, CompilationResult, LatexCompileError, compile_latex, decode_content,
    find_main_file, parse_log_errors, project_support_files, write_support_files,
)

DOC = "\\begin{document}\\section{Intro}Hi\\end{document}"


class _FakeResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload or {}
        self.text = text

    def json(self):
        return self._payload


@pytest.fixture
def no_toolchain(monkeypatch):
    monkeypatch.setattr(config, "USE_PDFLATEX", False)
    monkeypatch.setattr(config, "LATEX_SERVER_URL", "")


def test_falls_back_to_html_preview(no_toolchain):
    result = compile_latex(DOC)
    assert result.success is True
    assert result.pdf_data is None
    assert "Intro" in result.html_preview
    assert result.message == "Using browser rendering (no LaTeX toolchain configured)"


def test_response_uses_camel_case_keys(no_toolchain):
    body = compile_latex(DOC).to_response()
    assert body["success"] is True
    assert "htmlPreview" in body
    assert "pdfData" not in body
    assert "errors" not in body


def test_pdflatex_result_is_data_url(monkeypatch):
    monkeypatch.setattr(latex_compiler, "pdflatex_available", lambda: True)
    monkeypatch.setattr(latex_compiler, "run_pdflatex", lambda latex, files=None: b"%PDF-1.4")

    result = compile_latex(DOC)
    assert result.pdf_data == PDF_DATA_PREFIX + base64.b64encode(b"%PDF-1.4").decode("ascii")
    assert result.html_preview is None


def test_pdflatex_failure_falls_back_with_errors(monkeypatch):
    def fail(latex, files=None):
        raise LatexCompileError("pdflatex produced no PDF", errors=["! Undefined control sequence."])

    monkeypatch.setattr(latex_compiler, "pdflatex_available", lambda: True)
    monkeypatch.setattr(latex_compiler, "run_pdflatex", fail)

    result = compile_latex(DOC)
    assert result.success is True
    assert result.html_preview
    assert result.errors == ["! Undefined control sequence."]
    assert "pdflatex produced no PDF" in result.message


def test_render_server(monkeypatch):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json))
        return _FakeResponse(200, {"format": "pdf", "data": "QUJD"})

    monkeypatch.setattr(config, "USE_PDFLATEX", False)
    monkeypatch.setattr(config, "LATEX_SERVER_URL", "http://render")
    monkeypatch.setattr(latex_compiler.requests, "post", fake_post)

    result = compile_latex(DOC, {"figures/a.png": "data:image/png;base64,AAAA", "refs.bib": "@x"})
    assert result.pdf_data == PDF_DATA_PREFIX + "QUJD"
    url, payload = calls[0]
    assert url == "http://render/render"
    assert payload["format"] == "pdf"
    assert [img["name"] for img in payload["images"]] == ["figures/a.png"]


def test_render_server_unreachable(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(config, "USE_PDFLATEX", False)
    monkeypatch.setattr(config, "LATEX_SERVER_URL", "http://render")
    monkeypatch.setattr(latex_compiler.requests, "post", fake_post)

    result = compile_latex(DOC)
    assert result.success is True
    assert result.message == "Using browser rendering (server connection failed)"


def test_render_server_error_status(monkeypatch):
    monkeypatch.setattr(config, "USE_PDFLATEX", False)
    monkeypatch.setattr(config, "LATEX_SERVER_URL", "http://render")
    monkeypatch.setattr(latex_compiler.requests, "post", lambda *a, **k: _FakeResponse(502, text="bad"))

    result = compile_latex(DOC)
    assert "LaTeX server returned 502" in result.message


def test_result_accepts_aliases():
    result = CompilationResult.model_validate({"success": True, "pdfData": "x"})
    assert result.pdf_data == "x"


def test_parse_log_errors():
    log = "This is pdfTeX\n! Undefined control sequence.\nl.3 \\foo\n! Emergency stop.\n"
    assert parse_log_errors(log) == ["! Undefined control sequence.", "! Emergency stop."]


def test_decode_content():
    assert decode_content("plain") == "plain"
    assert decode_content(None) == ""
    assert decode_content("data:image/png;base64,QUJD") == b"ABC"


def test_write_support_files(tmp_path):
    write_support_files(tmp_path, {"sections/intro.tex": "hi", "figures/a.png": "data:image/png;base64,QUJD"})
    assert (tmp_path / "sections" / "intro.tex").read_text(encoding="utf-8") == "hi"
    assert (tmp_path / "figures" / "a.png").read_bytes() == b"ABC"


def _rec(id, name, folder=False, parent=None, content=""):
    return FileRecord(
        id=id, project_id="p1", name=name, parent_id=parent,
        kind=FileKind.FOLDER if folder else FileKind.FILE,
        content=None if folder else content,
    )


def test_main_file_and_support_files():
    nodes = build_file_tree([
        _rec("1", "appendix.tex"),
        _rec("2", "main.tex", content="MAIN"),
        _rec("3", "sections", folder=True),
        _rec("4", "intro.tex", parent="3", content="INTRO"),
    ])
    main = find_main_file(nodes)
    assert main.path == "main.tex"
    assert project_support_files(nodes, main.path) == {"appendix.tex": "", "sections/intro.tex": "INTRO"}


def test_main_file_falls_back_to_first_root_tex():
    nodes = build_file_tree([_rec("1", "paper.tex"), _rec("2", "notes.txt")])
    assert find_main_file(nodes).path == "paper.tex"
    assert find_main_file(build_file_tree([_rec("1", "notes.txt")])) is None


def test_preview_only_built_on_fallback(monkeypatch):
    calls = []

    def fake_preview(latex):
        calls.append(latex)
        return "<div>preview</div>"

    monkeypatch.setattr(latex_compiler, "create_html_preview", fake_preview)
    monkeypatch.setattr(latex_compiler, "pdflatex_available", lambda: True)
    monkeypatch.setattr(latex_compiler, "run_pdflatex", lambda latex, files=None: b"%PDF-1.4")
    compile_latex(DOC)
    assert calls == []

    monkeypatch.setattr(latex_compiler, "pdflatex_available", lambda: False)
    monkeypatch.setattr(config, "LATEX_SERVER_URL", "")
    assert compile_latex(DOC).html_preview == "<div>preview</div>"
    assert calls == [DOC]
