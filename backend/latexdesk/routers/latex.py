import logging

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from latexdesk.renderers.html_document import create_html_preview
from latexdesk.renderers.latex_metadata import MetadataMode
from latexdesk.services.latex_compiler import compile_latex

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_latex(request: Request):
    """(latex, payload) or a ready JSONResponse for the 400/500 cases."""
    try:
        payload = await request.json()
    except Exception as e:
        logger.exception("[compile-latex] request body is not JSON")
        return None, JSONResponse(
            status_code=500,
            content={"success": False, "error": "Compilation failed", "message": str(e)},
        )

    latex = payload.get("latex") if isinstance(payload, dict) else None
    if not isinstance(latex, str) or not latex:
        return None, JSONResponse(
            status_code=400,
            content={"success": False, "error": "LaTeX content is required"},
        )
    return latex, payload


@router.get("/compile-latex")
def compile_status():
    return {"status": "ok", "message": "LaTeX API route is working"}


@router.post("/compile-latex")
async def compile_route(request: Request):
    latex, payload = await _read_latex(request)
    if latex is None:
        return payload

    try:
        result = await run_in_threadpool(compile_latex, latex)
    except Exception as e:
        logger.exception("[compile-latex] compilation crashed")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Compilation failed", "message": str(e)},
        )
    return result.to_response()


@router.post("/compile-latex/preview")
async def preview_route(request: Request):
    latex, payload = await _read_latex(request)
    if latex is None:
        return payload

    try:
        mode = MetadataMode(payload.get("mode") or MetadataMode.preview)
    except ValueError:
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": f"Unknown preview mode: {payload.get('mode')}"},
        )

    return {"success": True, "htmlPreview": create_html_preview(latex, mode=mode)}
