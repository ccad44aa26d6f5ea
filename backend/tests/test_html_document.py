from datetime import date

from latexdesk.renderers.html_document import create_html_preview, wrap
from latexdesk.renderers.latex_metadata import DocumentMetadata, MetadataMode

DOC = r"""\documentclass{article}
\title{My Paper}
\author{Grace Hopper}
\date{\today}
\begin{document}
\maketitle
\section{Intro}
Hello \textbf{world}.
\end{document}
"""


def test_wrap_omits_empty_author_and_date():
    html = wrap(DocumentMetadata(title="T"), "<p>x</p>")
    assert '<h1 class="text-3xl font-bold mb-2 text-black">T</h1>' in html
    assert "text-xl mb-1 text-gray-700" not in html
    assert "text-gray-500" not in html
    assert "<p>x</p>" in html
    assert "Preview Mode" in html


def test_wrap_shows_author_and_date():
    html = wrap(DocumentMetadata(title="T", author="A", date="D"), "")
    assert '<p class="text-xl mb-1 text-gray-700">A</p>' in html
    assert '<p class="text-gray-500">D</p>' in html


def test_metadata_is_escaped():
    html = wrap(DocumentMetadata(title="A < B"), "")
    assert "A &lt; B" in html


def test_full_preview():
    html = create_html_preview(DOC, today=date(2026, 10, 19))
    assert "My Paper" in html
    assert "Grace Hopper" in html
    assert "October 19, 2026" in html
    assert "<strong>world</strong>" in html
    assert "\\maketitle" not in html
    assert "\\documentclass" not in html
    assert html.startswith('<div class="latex-preview font-serif">')


def test_mock_mode_defaults():
    html = create_html_preview("plain body", mode=MetadataMode.mock)
    assert "Untitled Document" in html
    assert "Unknown Author" in html
    assert "configure a render server" in html


def test_preview_accepts_mode_string():
    assert "Unknown Author" in create_html_preview("x", mode="mock")
