# latexdesk/renderers/html_document.py
from datetime import date
from html import escape
from typing import Optional

from latexdesk.renderers.latex_metadata import DocumentMetadata, MetadataMode, extract_metadata
from latexdesk.renderers.latex_to_html import extract_document_body, rewrite

_BANNERS = {
    MetadataMode.preview: (
        "<strong>Preview Mode:</strong> Using client-side rendering for math expressions. "
        "For full PDF rendering, please install LaTeX on your server."
    ),
    MetadataMode.mock: (
        "<strong>Preview Mode:</strong> This is a client-side rendering of your LaTeX document. "
        "For full PDF compilation, please install LaTeX or configure a render server."
    ),
}


def _title_block(metadata: DocumentMetadata) -> str:
    lines = [f'<h1 class="text-3xl font-bold mb-2 text-black">{escape(metadata.title, quote=False)}</h1>']
    if metadata.author:
        lines.append(f'<p class="text-xl mb-1 text-gray-700">{escape(metadata.author, quote=False)}</p>')
    if metadata.date:
        lines.append(f'<p class="text-gray-500">{escape(metadata.date, quote=False)}</p>')
    inner = "\n    ".join(lines)
    return f'<div class="mb-6 text-center">\n    {inner}\n  </div>'


def wrap(metadata: DocumentMetadata, rendered_body: str, mode: MetadataMode = MetadataMode.preview) -> str:
    banner = _BANNERS[MetadataMode(mode)]
    return (
        '<div class="latex-preview font-serif">\n'
        '<div class="bg-blue-50 border border-blue-200 rounded-lg p-4 mb-6">\n'
        f'  <p class="text-blue-700">{banner}</p>\n'
        '</div>\n'
        '<div class="max-w-4xl mx-auto bg-white shadow-lg rounded-lg overflow-hidden p-8">\n'
        f'  {_title_block(metadata)}\n'
        '  <div class="latex-content prose prose-lg max-w-none text-black">\n'
        f'{rendered_body}\n'
        '  </div>\n'
        '</div>\n'
        '</div>\n'
    )


def create_html_preview(
    source: str,
    mode: MetadataMode = MetadataMode.preview,
    today: Optional[date] = None,
) -> str:
    """Full fallback preview: metadata + rewritten body inside the fixed shell."""
    source = source if isinstance(source, str) else str(source or "")
    metadata = extract_metadata(source, mode=mode, today=today)
    body = rewrite(extract_document_body(source))
    return wrap(metadata, body, mode=mode)
