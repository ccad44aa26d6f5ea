# latexdesk/repositories/project_repo.py
from __future__ import annotations
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from latexdesk.db.models.project_orm import ProjectORM
from latexdesk.db.models.project_file_orm import ProjectFileORM, utcnow
from latexdesk.models.project import Project
from latexdesk.repositories.errors import RecordNotFoundError, InvalidNameError
from latexdesk.repositories.project_file_repo import ProjectFileRepository

logger = logging.getLogger(__name__)


def starter_document(title: str) -> str:
    return (
        "\\documentclass{article}\n"
        "\\usepackage[utf8]{inputenc}\n"
        "\\usepackage{amsmath}\n"
        "\n"
        f"\\title{{{title}}}\n"
        "\\author{}\n"
        "\\date{\\today}\n"
        "\n"
        "\\begin{document}\n"
        "\\maketitle\n"
        "\n"
        "% Start your LaTeX document here\n"
        "\n"
        "\\end{document}\n"
    )


class ProjectRepository:
    def __init__(self, db: Session):
        self.db = db

    def _get_orm(self, project_id: str, owner_id: str) -> ProjectORM:
        row = (
            self.db.query(ProjectORM)
            .filter(ProjectORM.id == project_id,
                    ProjectORM.owner_id == owner_id,
                    ProjectORM.deleted == False)  # noqa: E712
            .first()
        )
        if row is None:
            raise RecordNotFoundError("Project not found")
        return row

    def create(self, name: str, owner_id: str, description: Optional[str] = None) -> Project:
        name = (name or "").strip()
        if not name:
            raise InvalidNameError("Project name is required")

        row = ProjectORM(name=name, owner_id=owner_id, description=description)
        self.db.add(row)
        self.db.flush()

        ProjectFileRepository(self.db).init_default_structure(row.id, owner_id, starter_document(name))
        self.db.commit()
        logger.info(f"[project] created {row.id} for {owner_id}")
        return Project.model_validate(row)

    def list_for_owner(self, owner_id: str) -> List[Project]:
        rows = (
            self.db.query(ProjectORM)
            .filter(ProjectORM.owner_id == owner_id, ProjectORM.deleted == False)  # noqa: E712
            .order_by(ProjectORM.modified_at.desc(), ProjectORM.id)
            .all()
        )
        return [Project.model_validate(r) for r in rows]

    def get(self, project_id: str, owner_id: str) -> Project:
        return Project.model_validate(self._get_orm(project_id, owner_id))

    def rename(self, project_id: str, owner_id: str, name: str,
               description: Optional[str] = None) -> Project:
        row = self._get_orm(project_id, owner_id)
        name = (name or "").strip()
        if not name:
            raise InvalidNameError("Project name is required")
        row.name = name
        if description is not None:
            row.description = description
        row.modified_at = utcnow()
        self.db.commit()
        return Project.model_validate(row)

    def delete(self, project_id: str, owner_id: str) -> None:
        row = self._get_orm(project_id, owner_id)
        row.deleted = True
        row.modified_at = utcnow()
        (self.db.query(ProjectFileORM)
            .filter(ProjectFileORM.project_id == project_id)
            .update({ProjectFileORM.deleted: True}, synchronize_session=False))
        self.db.commit()
        logger.info(f"[project] soft-deleted {project_id}")
