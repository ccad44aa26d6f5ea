# latexdesk/renderers/latex_to_html.py
from __future__ import annotations
import logging
import re
from typing import Callable, List, NamedTuple, Optional, Union

logger = logging.getLogger(__name__)

# --- Style classes (closed mapping, one per construct) ---

HEADING_STYLES = {
    "chapter": ("h1", "text-3xl font-bold mt-8 mb-4 text-black"),
    "section": ("h2", "text-2xl font-bold mt-6 mb-3 pb-1 border-b border-gray-300 text-black"),
    "subsection": ("h3", "text-xl font-semibold mt-5 mb-2 text-black"),
    "subsubsection": ("h4", "text-lg font-semibold mt-4 mb-2 text-black"),
}

LIST_STYLES = {
    "itemize": ("ul", "list-disc pl-8 my-4 text-black"),
    "enumerate": ("ol", "list-decimal pl-8 my-4 text-black"),
}
ITEM_CLASS = "mb-2"

INLINE_TAGS = {
    "textbf": "strong",
    "textit": "em",
    "emph": "em",
    "underline": "u",
}

REF_CLASS = "text-blue-600"
TABLE_CLASS = "border-collapse border border-gray-300 mx-auto my-4"
CELL_CLASS = "border border-gray-300 px-3 py-2"
PARAGRAPH_CLASS = "my-3 text-black"

# --- Shared patterns ---

_DOCUMENT_RE = re.compile(r"\\begin\{document\}([\s\S]*?)(?:\\end\{document\}|\Z)")
_BLANK_LINE_RE = re.compile(r"\n[ \t]*\n\s*")
# $$...$$, \(...\) and \[...\]; a \\ line break is never the start of one
_MATH_SEGMENT_RE = re.compile(
    r"(\$\$[\s\S]*?\$\$|(?<!\\)\\\([\s\S]*?\\\)|(?<!\\)\\\[[\s\S]*?\\\])"
)
_BLOCK_START_RE = re.compile(r"<(?:/|h[1-6]\b|p\b|ul\b|ol\b|table\b|div\b)")


def extract_document_body(source: str) -> str:
    """Text between \\begin{document} and \\end{document}, or the whole source."""
    m = _DOCUMENT_RE.search(source)
    return m.group(1) if m else source


def _outside_math(text: str, fn: Callable[[str], str]) -> str:
    parts = _MATH_SEGMENT_RE.split(text)
    # split() with one capture group puts math at odd indices
    return "".join(p if i % 2 else fn(p) for i, p in enumerate(parts))


def _collapse_blank_lines(s: str) -> str:
    return _BLANK_LINE_RE.sub("\n", s).strip()


# --- Rule callables ---

def _escape_angle_brackets(text: str) -> str:
    return text.replace("<", "&lt;").replace(">", "&gt;")


_ARRAY_RE = re.compile(r"\\begin\{array\}([\s\S]*?)\\end\{array\}")


def _convert_arrays(text: str) -> str:
    # arrays already inside an equation/align block keep their delimiters
    return _outside_math(
        text, lambda s: _ARRAY_RE.sub(lambda m: f"$$\\begin{{array}}{m.group(1)}\\end{{array}}$$", s)
    )


def _heading(m: re.Match) -> str:
    tag, cls = HEADING_STYLES[m.group(1)]
    return f'\n\n<{tag} class="{cls}">{m.group(2).strip()}</{tag}>\n\n'


_LIST_RE = re.compile(
    r"\\begin\{(itemize|enumerate)\}(?:\[[^\]]*\])?"
    r"((?:(?!\\begin\{(?:itemize|enumerate)\})[\s\S])*?)"
    r"\\end\{\1\}"
)
_ITEM_RE = re.compile(r"\\item\b(?:\[([^\]]*)\])?\s*")


def _render_list(m: re.Match) -> str:
    tag, cls = LIST_STYLES[m.group(1)]
    parts = _ITEM_RE.split(m.group(2))
    # parts = [before-first-item, label1, text1, label2, text2, ...]
    items = []
    for label, text in zip(parts[1::2], parts[2::2]):
        body = _collapse_blank_lines(text)
        if label:
            body = f"<strong>{label.strip()}</strong> {body}".rstrip()
        items.append(f'<li class="{ITEM_CLASS}">{body}</li>')
    inner = "\n".join(items)
    return f'\n\n<{tag} class="{cls}">\n{inner}\n</{tag}>\n\n'


def _convert_lists(text: str) -> str:
    # innermost environments first; each pass consumes at least one \begin
    while True:
        converted = _LIST_RE.sub(_render_list, text)
        if converted == text:
            return converted
        text = converted


_INLINE_RE = re.compile(r"\\(" + "|".join(INLINE_TAGS) + r")\{([^{}]*)\}")


def _convert_inline_styles(text: str) -> str:
    def _tag(m: re.Match) -> str:
        tag = INLINE_TAGS[m.group(1)]
        return f"<{tag}>{m.group(2)}</{tag}>"

    while True:
        converted = _INLINE_RE.sub(_tag, text)
        if converted == text:
            return converted
        text = converted


_TABULAR_RE = re.compile(
    r"\\begin\{tabular\}(?:\[[^\]]*\])?\{((?:[^{}]|\{[^{}]*\})*)\}([\s\S]*?)\\end\{tabular\}"
)
_ROW_SEP_RE = re.compile(r"\\\\(?:\[[^\]]*\])?")
_CELL_SEP_RE = re.compile(r"(?<!\\)&(?!(?:lt|gt|amp);)")
_RULE_LINE_RE = re.compile(r"\\(?:hline|toprule|midrule|bottomrule)\b|\\cline\{[^}]*\}")
_TABLE_ENV_RE = re.compile(r"\\begin\{table\*?\}(?:\[[^\]]*\])?([\s\S]*?)\\end\{table\*?\}")
_CAPTION_RE = re.compile(r"\\caption\{([^}]*)\}")


def parse_tabular(body: str) -> List[List[str]]:
    """Rows on \\\\, cells on unescaped &. Rule lines and empty rows are dropped."""
    rows: List[List[str]] = []
    for raw_row in _ROW_SEP_RE.split(body):
        row = _RULE_LINE_RE.sub("", raw_row).strip()
        if not row:
            continue
        rows.append([_collapse_blank_lines(cell) for cell in _CELL_SEP_RE.split(row)])
    return rows


def _render_tabular(m: re.Match) -> str:
    # column spec (group 1) is accepted and ignored
    rows = parse_tabular(m.group(2))
    html_rows = []
    for row in rows:
        cells = "".join(f'<td class="{CELL_CLASS}">{cell}</td>' for cell in row)
        html_rows.append(f"<tr>{cells}</tr>")
    body = "\n".join(html_rows)
    return f'\n\n<table class="{TABLE_CLASS}"><tbody>\n{body}\n</tbody></table>\n\n'


def _render_table_env(m: re.Match) -> str:
    inner = m.group(1).replace("\\centering", "")
    inner = _CAPTION_RE.sub(r'\n\n<p class="text-center text-sm text-gray-600 mt-2">\1</p>\n\n', inner)
    return f'\n\n<div class="table-container my-4">\n{inner.strip()}\n</div>\n\n'


def _convert_tables(text: str) -> str:
    text = _TABULAR_RE.sub(_render_tabular, text)
    return _TABLE_ENV_RE.sub(_render_table_env, text)


def _convert_line_breaks(text: str) -> str:
    return _outside_math(text, lambda s: _ROW_SEP_RE.sub("<br>", s))


def _split_blocks(text: str) -> List[str]:
    """Split on blank lines, never inside a math segment."""
    blocks: List[str] = [""]
    for i, part in enumerate(_MATH_SEGMENT_RE.split(text)):
        if i % 2:
            blocks[-1] += part
            continue
        pieces = _BLANK_LINE_RE.split(part)
        blocks[-1] += pieces[0]
        blocks.extend(pieces[1:])
    return blocks


def _convert_paragraphs(text: str) -> str:
    out = []
    for block in _split_blocks(text):
        block = block.strip()
        if not block:
            continue
        if _BLOCK_START_RE.match(block) or block.startswith("$$"):
            out.append(block)
        else:
            out.append(f'<p class="{PARAGRAPH_CLASS}">{block}</p>')
    return "\n".join(out)


# --- Rule table ---

Replacement = Union[str, Callable[[re.Match], str], Callable[[str], str]]


class RewriteRule(NamedTuple):
    name: str
    pattern: Optional[re.Pattern]
    replacement: Replacement

    def apply(self, text: str) -> str:
        if self.pattern is None:
            return self.replacement(text)
        return self.pattern.sub(self.replacement, text)


def _rule(name: str, pattern: Optional[str], replacement: Replacement) -> RewriteRule:
    return RewriteRule(name, re.compile(pattern) if pattern is not None else None, replacement)


REWRITE_RULES = (
    # housekeeping
    _rule("comments", r"(?<!\\)%[^\n]*", ""),
    _rule("labels", r"\\label\{[^}]*\}", ""),
    _rule("escape", None, _escape_angle_brackets),
    # 1. the wrapper renders its own title block
    _rule("maketitle", r"\\maketitle\b", ""),
    # 2. sectioning
    _rule("headings", r"\\(chapter|section|subsection|subsubsection)\*?(?:\[[^\]]*\])?\{([^}]+)\}", _heading),
    # 3. display math -> $$...$$ (delimiter swap only, content untouched)
    _rule("equation", r"\\begin\{equation\*?\}([\s\S]*?)\\end\{equation\*?\}", lambda m: f"$${m.group(1)}$$"),
    _rule("align", r"\\begin\{align\*?\}([\s\S]*?)\\end\{align\*?\}",
          lambda m: f"$$\\begin{{aligned}}{m.group(1)}\\end{{aligned}}$$"),
    # 4. inline math -> \( ... \)
    _rule("inline_math", r"(?<![\\$])\$(?!\$)((?:\\.|[^$\\])+?)\$(?!\$)", lambda m: f"\\({m.group(1)}\\)"),
    # after inline math so an array inside $...$ is already a protected segment
    _rule("array", None, _convert_arrays),
    # 5. lists
    _rule("lists", None, _convert_lists),
    # 6. character styling
    _rule("inline_styles", None, _convert_inline_styles),
    # 7. references, display only
    _rule("ref", r"\\(?:eq)?ref\{([^}]+)\}", rf'<span class="{REF_CLASS}">[ref:\1]</span>'),
    _rule("cite", r"\\cite(?:\[[^\]]*\])?\{([^}]+)\}", rf'<span class="{REF_CLASS}">[citation:\1]</span>'),
    # 8. tables (needs raw \\ and & markers, so before line breaks)
    _rule("tables", None, _convert_tables),
    # 9. leftover \\ outside math
    _rule("line_breaks", None, _convert_line_breaks),
    # 10. paragraphs last, once every block-level element exists
    _rule("paragraphs", None, _convert_paragraphs),
)


def rewrite(body: str) -> str:
    """
    Best-effort LaTeX -> HTML for the preview pane. Never raises: a rule that
    blows up is skipped and its input passed on unchanged.
    """
    if not isinstance(body, str):
        body = "" if body is None else str(body)

    text = body
    for rule in REWRITE_RULES:
        try:
            text = rule.apply(text)
        except Exception:
            logger.exception(f"[rewrite] rule '{rule.name}' failed; left as-is")
    return text
