from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from latexdesk.db.db import get_db
from latexdesk.repositories.project_repo import ProjectRepository
from latexdesk.repositories.project_file_repo import ProjectFileRepository
from latexdesk.schemas import ProjectCreateRequest, ProjectUpdateRequest
from latexdesk.services.latex_compiler import compile_latex, find_main_file, project_support_files
from latexdesk.utils.router_utils import http_error, get_project_or_404

router = APIRouter()


@router.post("/projects")
def create_project(request: ProjectCreateRequest,
                   x_user_id: str = Header(...),
                   db: Session = Depends(get_db)):
    try:
        project = ProjectRepository(db).create(request.name, x_user_id, request.description)
    except Exception as e:
        db.rollback()
        raise http_error(e)
    return project.model_dump(mode="json")


@router.get("/projects")
def list_projects(x_user_id: str = Header(...), db: Session = Depends(get_db)):
    projects = ProjectRepository(db).list_for_owner(x_user_id)
    return {"projects": [p.model_dump(mode="json") for p in projects]}


@router.get("/projects/{project_id}")
def get_project(project_id: str, x_user_id: str = Header(...), db: Session = Depends(get_db)):
    return get_project_or_404(db, project_id, x_user_id).model_dump(mode="json")


@router.patch("/projects/{project_id}")
def update_project(project_id: str, request: ProjectUpdateRequest,
                   x_user_id: str = Header(...),
                   db: Session = Depends(get_db)):
    try:
        project = ProjectRepository(db).rename(project_id, x_user_id, request.name, request.description)
    except Exception as e:
        db.rollback()
        raise http_error(e)
    return project.model_dump(mode="json")


@router.delete("/projects/{project_id}")
def delete_project(project_id: str, x_user_id: str = Header(...), db: Session = Depends(get_db)):
    try:
        ProjectRepository(db).delete(project_id, x_user_id)
    except Exception as e:
        db.rollback()
        raise http_error(e)
    return {"status": "deleted", "project_id": project_id}


@router.post("/projects/{project_id}/compile")
def compile_project(project_id: str, x_user_id: str = Header(...), db: Session = Depends(get_db)):
    get_project_or_404(db, project_id, x_user_id)

    nodes = ProjectFileRepository(db).load_tree(project_id)
    main = find_main_file(nodes)
    if main is None:
        raise HTTPException(status_code=400, detail="Project has no main .tex file")

    try:
        result = compile_latex(main.record.content or "", project_support_files(nodes, main.path))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"main_file": main.path, **result.to_response()}
