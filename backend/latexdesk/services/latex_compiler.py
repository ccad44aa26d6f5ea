# latexdesk/services/latex_compiler.py
from __future__ import annotations
import base64
import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import requests
from pydantic import BaseModel, ConfigDict, Field

from latexdesk import config
from latexdesk.models.file_tree import TreeNode, file_paths
from latexdesk.renderers.html_document import create_html_preview

logger = logging.getLogger(__name__)

PDF_DATA_PREFIX = "data:application/pdf;base64,"
MAIN_FILE = "main.tex"


class LatexCompileError(Exception):
    def __init__(self, message: str, log: str = "", errors: Optional[List[str]] = None):
        super().__init__(message)
        self.log = log
        self.errors = errors or []


class CompilationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    pdf_data: Optional[str] = Field(None, alias="pdfData")
    html_preview: Optional[str] = Field(None, alias="htmlPreview")
    message: Optional[str] = None
    log: Optional[str] = None
    errors: List[str] = Field(default_factory=list)

    def to_response(self) -> dict:
        out = self.model_dump(by_alias=True, exclude_none=True)
        if not out.get("errors"):
            out.pop("errors", None)
        return out


# --- Project materialisation ---

def decode_content(content: Optional[str]) -> Union[str, bytes]:
    """Binary uploads are stored as data: URLs; everything else is text."""
    content = content or ""
    if content.startswith("data:") and ";base64," in content:
        return base64.b64decode(content.split(";base64,", 1)[1])
    return content


def write_support_files(dest_dir: Union[str, Path], files: Dict[str, str]) -> List[Path]:
    dest = Path(dest_dir)
    written: List[Path] = []
    for rel_path, content in files.items():
        target = dest / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        data = decode_content(content)
        if isinstance(data, bytes):
            target.write_bytes(data)
        else:
            target.write_text(data, encoding="utf-8")
        written.append(target)
    return written


def find_main_file(nodes: Sequence[TreeNode]) -> Optional[TreeNode]:
    roots = [n for n in nodes if not n.record.is_folder]
    for n in roots:
        if n.record.name == MAIN_FILE:
            return n
    return next((n for n in roots if n.record.name.lower().endswith(".tex")), None)


def project_support_files(nodes: Sequence[TreeNode], main_path: str) -> Dict[str, str]:
    return {p: (r.content or "") for p, r in file_paths(nodes).items() if p != main_path}


# --- Toolchains ---

def parse_log_errors(log: str, limit: int = 20) -> List[str]:
    # TeX reports errors on lines starting with "!"
    return [line.strip() for line in log.splitlines() if line.startswith("!")][:limit]


def pdflatex_available() -> bool:
    return config.USE_PDFLATEX and shutil.which(config.PDFLATEX_BIN) is not None


def run_pdflatex(latex: str, support_files: Optional[Dict[str, str]] = None) -> bytes:
    with tempfile.TemporaryDirectory() as tmp:
        work = Path(tmp)
        write_support_files(work, support_files or {})
        (work / MAIN_FILE).write_text(latex, encoding="utf-8")

        cmd = [config.PDFLATEX_BIN, "-interaction=nonstopmode", "-halt-on-error", MAIN_FILE]
        # second pass resolves \ref and the table of contents
        for _ in range(2):
            try:
                subprocess.run(cmd, cwd=tmp, capture_output=True, timeout=config.COMPILE_TIMEOUT, check=False)
            except subprocess.TimeoutExpired:
                raise LatexCompileError(f"pdflatex timed out after {config.COMPILE_TIMEOUT}s")

        log_path = work / "main.log"
        log = log_path.read_text(encoding="utf-8", errors="ignore") if log_path.exists() else ""
        pdf_path = work / "main.pdf"
        if not pdf_path.exists():
            raise LatexCompileError("pdflatex produced no PDF", log=log, errors=parse_log_errors(log))
        return pdf_path.read_bytes()


def render_remote(latex: str, support_files: Optional[Dict[str, str]] = None) -> str:
    """POST to the render server; returns base64 PDF data."""
    images = [
        {"name": name, "data": content}
        for name, content in (support_files or {}).items()
        if (content or "").startswith("data:")
    ]
    res = requests.post(
        f"{config.LATEX_SERVER_URL}/render",
        json={"latex": latex, "format": "pdf", "images": images},
        timeout=config.COMPILE_TIMEOUT,
    )
    if res.status_code != 200:
        raise LatexCompileError(f"LaTeX server returned {res.status_code}", log=res.text)

    data = res.json()
    if data.get("format") != "pdf" or not data.get("data"):
        raise LatexCompileError("LaTeX server did not return PDF")
    return data["data"]


def compile_latex(latex: str, support_files: Optional[Dict[str, str]] = None) -> CompilationResult:
    """
    Try a real toolchain (local pdflatex, then the render server); on any
    failure return the HTML preview instead. Only the preview path is
    guaranteed, so the result is always success=True.
    """
    try:
        if pdflatex_available():
            pdf = run_pdflatex(latex, support_files)
            logger.info(f"✅ pdflatex compiled {len(pdf)} bytes")
            return CompilationResult(
                success=True,
                pdf_data=PDF_DATA_PREFIX + base64.b64encode(pdf).decode("ascii"),
                log="Successfully compiled with pdflatex",
            )
        if config.LATEX_SERVER_URL:
            data = render_remote(latex, support_files)
            logger.info("✅ render server compiled document")
            return CompilationResult(
                success=True,
                pdf_data=PDF_DATA_PREFIX + data,
                log="Successfully compiled with server",
            )
        reason = "no LaTeX toolchain configured"
        errors: List[str] = []
    except LatexCompileError as e:
        logger.warning(f"[compile_latex] falling back to HTML preview: {e}")
        reason, errors = str(e), e.errors
    except requests.RequestException as e:
        logger.warning(f"[compile_latex] render server unreachable: {e}")
        reason, errors = "server connection failed", []

    return CompilationResult(
        success=True,
        html_preview=create_html_preview(latex),
        message=f"Using browser rendering ({reason})",
        errors=errors,
    )
