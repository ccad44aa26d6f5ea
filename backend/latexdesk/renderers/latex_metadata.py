# latexdesk/renderers/latex_metadata.py
import re
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class MetadataMode(str, Enum):
    preview = "preview"
    mock = "mock"


_DEFAULT_AUTHOR = {
    MetadataMode.preview: "",
    MetadataMode.mock: "Unknown Author",
}

_TITLE_RE = re.compile(r"\\title\{([^}]+)\}")
_AUTHOR_RE = re.compile(r"\\author\{([^}]+)\}")
_DATE_RE = re.compile(r"\\date\{([^}]+)\}")
_TODAY_RE = re.compile(r"\\today\b")


class DocumentMetadata(BaseModel):
    title: str = Field("Untitled Document", description="\\title{...} or the default")
    author: str = Field("", description="\\author{...} or the mode's default")
    date: str = Field("", description="\\date{...}; \\today becomes the render date")


def format_today(today: Optional[date] = None) -> str:
    """Same shape as LaTeX's \\today, e.g. 'October 19, 2026'."""
    d = today or date.today()
    return f"{d:%B} {d.day}, {d.year}"


def _first(pattern: re.Pattern, source: str) -> Optional[str]:
    m = pattern.search(source)
    if not m:
        return None
    value = m.group(1).strip()
    return value or None


def extract_metadata(
    source: str,
    mode: MetadataMode = MetadataMode.preview,
    today: Optional[date] = None,
) -> DocumentMetadata:
    """
    Pull title/author/date out of a LaTeX source. Each field falls back to its
    default on its own. When \\today is involved the result depends on the
    wall clock unless `today` is given.
    """
    source = source if isinstance(source, str) else str(source or "")

    title = _first(_TITLE_RE, source) or "Untitled Document"
    author = _first(_AUTHOR_RE, source) or _DEFAULT_AUTHOR[MetadataMode(mode)]

    raw_date = _first(_DATE_RE, source)
    if raw_date is not None:
        doc_date = _TODAY_RE.sub(lambda _m: format_today(today), raw_date)
    elif _TODAY_RE.search(source):
        doc_date = format_today(today)
    else:
        doc_date = ""

    return DocumentMetadata(title=title, author=author, date=doc_date)
