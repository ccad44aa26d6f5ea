from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from latexdesk.db.db import get_db
from latexdesk.repositories.project_file_repo import ProjectFileRepository
from latexdesk.schemas import (
    FileCreateRequest, FolderCreateRequest, RenameRequest, ContentUpdateRequest, MoveRequest,
)
from latexdesk.utils.router_utils import http_error, get_project_or_404, serialize_node

router = APIRouter()


@router.get("/projects/{project_id}/files")
def list_files(project_id: str, x_user_id: str = Header(...), db: Session = Depends(get_db)):
    get_project_or_404(db, project_id, x_user_id)
    records = ProjectFileRepository(db).list_records(project_id)
    return {"files": [r.model_dump(mode="json", exclude={"content"}) for r in records]}


@router.get("/projects/{project_id}/files/tree")
def get_file_tree(project_id: str, x_user_id: str = Header(...), db: Session = Depends(get_db)):
    get_project_or_404(db, project_id, x_user_id)
    nodes = ProjectFileRepository(db).load_tree(project_id)
    return {"project_id": project_id, "tree": [serialize_node(n) for n in nodes]}


@router.post("/projects/{project_id}/files")
def create_file(project_id: str, request: FileCreateRequest,
                x_user_id: str = Header(...),
                db: Session = Depends(get_db)):
    get_project_or_404(db, project_id, x_user_id)
    try:
        record = ProjectFileRepository(db).create_file(
            project_id, x_user_id, request.name, request.parent_id, request.content
        )
    except Exception as e:
        db.rollback()
        raise http_error(e)
    return record.model_dump(mode="json")


@router.post("/projects/{project_id}/folders")
def create_folder(project_id: str, request: FolderCreateRequest,
                  x_user_id: str = Header(...),
                  db: Session = Depends(get_db)):
    get_project_or_404(db, project_id, x_user_id)
    try:
        record = ProjectFileRepository(db).create_folder(project_id, x_user_id, request.name, request.parent_id)
    except Exception as e:
        db.rollback()
        raise http_error(e)
    return record.model_dump(mode="json")


@router.get("/projects/{project_id}/files/{file_id}")
def get_file(project_id: str, file_id: str, x_user_id: str = Header(...), db: Session = Depends(get_db)):
    get_project_or_404(db, project_id, x_user_id)
    try:
        record = ProjectFileRepository(db).get(project_id, file_id)
    except Exception as e:
        raise http_error(e)
    return record.model_dump(mode="json")


@router.patch("/projects/{project_id}/files/{file_id}")
def rename_file(project_id: str, file_id: str, request: RenameRequest,
                x_user_id: str = Header(...),
                db: Session = Depends(get_db)):
    get_project_or_404(db, project_id, x_user_id)
    try:
        record = ProjectFileRepository(db).rename(project_id, file_id, request.name)
    except Exception as e:
        db.rollback()
        raise http_error(e)
    return record.model_dump(mode="json", exclude={"content"})


@router.put("/projects/{project_id}/files/{file_id}/content")
def update_file_content(project_id: str, file_id: str, request: ContentUpdateRequest,
                        x_user_id: str = Header(...),
                        db: Session = Depends(get_db)):
    get_project_or_404(db, project_id, x_user_id)
    try:
        record = ProjectFileRepository(db).update_content(project_id, file_id, request.content)
    except Exception as e:
        db.rollback()
        raise http_error(e)
    return {"id": record.id, "modified_at": record.modified_at.isoformat() if record.modified_at else None}


@router.post("/projects/{project_id}/files/{file_id}/move")
def move_file(project_id: str, file_id: str, request: MoveRequest,
              x_user_id: str = Header(...),
              db: Session = Depends(get_db)):
    get_project_or_404(db, project_id, x_user_id)
    repo = ProjectFileRepository(db)
    try:
        moved = repo.move(project_id, file_id, request.target_id)
    except Exception as e:
        db.rollback()
        raise http_error(e)

    # rebuilt from a fresh snapshot, never patched in place
    nodes = repo.load_tree(project_id)
    return {"moved": moved, "file_id": file_id, "target_id": request.target_id,
            "tree": [serialize_node(n) for n in nodes]}


@router.delete("/projects/{project_id}/files/{file_id}")
def delete_file(project_id: str, file_id: str, x_user_id: str = Header(...), db: Session = Depends(get_db)):
    get_project_or_404(db, project_id, x_user_id)
    try:
        deleted = ProjectFileRepository(db).delete(project_id, file_id)
    except Exception as e:
        db.rollback()
        raise http_error(e)
    return {"deleted": deleted}
