# latexdesk/utils/router_utils.py
import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from latexdesk.models.file_tree import TreeNode
from latexdesk.models.project import Project
from latexdesk.repositories.errors import RecordNotFoundError
from latexdesk.repositories.project_repo import ProjectRepository

logger = logging.getLogger(__name__)


def http_error(e: Exception) -> HTTPException:
    if isinstance(e, HTTPException):
        return e
    if isinstance(e, RecordNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ValueError):
        return HTTPException(status_code=400, detail=str(e))
    logger.exception("unexpected error")
    return HTTPException(status_code=500, detail=str(e))


def get_project_or_404(db: Session, project_id: str, user_id: str) -> Project:
    try:
        return ProjectRepository(db).get(project_id, user_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Project not found")


def serialize_node(node: TreeNode) -> dict:
    r = node.record
    out = {
        "id": r.id,
        "name": r.name,
        "kind": r.kind.value,
        "parent_id": r.parent_id,
        "path": node.path,
        "modified_at": r.modified_at.isoformat() if r.modified_at else None,
    }
    if r.is_folder:
        out["children"] = [serialize_node(c) for c in node.children]
    return out
