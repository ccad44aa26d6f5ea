# latexdesk/repositories/project_file_repo.py
from __future__ import annotations
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from latexdesk.db.models.project_file_orm import ProjectFileORM, FileKind, utcnow
from latexdesk.models.file_tree import FileRecord, TreeNode, build_file_tree
from latexdesk.repositories.errors import (
    RecordNotFoundError, InvalidNameError, InvalidParentError, InvalidMoveError, NotAFileError,
)
from latexdesk.utils.move_guard import can_move, is_noop_move, descendant_ids

logger = logging.getLogger(__name__)

DEFAULT_BIB = (
    "@article{example,\n"
    "  author = {Author Name},\n"
    "  title = {Article Title},\n"
    "  journal = {Journal Name},\n"
    "  year = {2023}\n"
    "}\n"
)
DEFAULT_INTRODUCTION = (
    "% Introduction section\n"
    "\\section{Introduction}\n"
    "This is the introduction of my document.\n"
)


def validate_name(name: str) -> str:
    name = (name or "").strip()
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise InvalidNameError(f"Invalid file name: {name!r}")
    return name


class ProjectFileRepository:
    def __init__(self, db: Session):
        self.db = db

    # ---------- READ ----------
    def _live(self, project_id: str):
        return self.db.query(ProjectFileORM).filter(
            ProjectFileORM.project_id == project_id,
            ProjectFileORM.deleted == False,  # noqa: E712
        )

    def _get_orm(self, project_id: str, file_id: str) -> ProjectFileORM:
        row = self._live(project_id).filter(ProjectFileORM.id == file_id).first()
        if row is None:
            raise RecordNotFoundError("File not found")
        return row

    def list_records(self, project_id: str, lock: bool = False) -> List[FileRecord]:
        """
        One consistent snapshot of the project's live records. With lock=True the
        rows stay locked until commit (SELECT ... FOR UPDATE; a no-op on SQLite).
        """
        query = self._live(project_id).order_by(ProjectFileORM.created_at, ProjectFileORM.id)
        if lock:
            query = query.with_for_update()
        rows = query.all()
        return [FileRecord.from_orm_model(r) for r in rows]

    def load_tree(self, project_id: str) -> List[TreeNode]:
        return build_file_tree(self.list_records(project_id))

    def get(self, project_id: str, file_id: str) -> FileRecord:
        return FileRecord.from_orm_model(self._get_orm(project_id, file_id))

    # ---------- CREATE ----------
    def _check_parent(self, project_id: str, parent_id: Optional[str]) -> None:
        if parent_id is None:
            return
        parent = self._live(project_id).filter(ProjectFileORM.id == parent_id).first()
        if parent is None or parent.kind != FileKind.FOLDER:
            raise InvalidParentError("Destination folder not found")

    def _create(self, project_id: str, owner_id: str, name: str, kind: FileKind,
                parent_id: Optional[str], content: Optional[str], commit: bool = True) -> FileRecord:
        name = validate_name(name)
        self._check_parent(project_id, parent_id)
        row = ProjectFileORM(
            project_id=project_id,
            owner_id=owner_id,
            name=name,
            kind=kind,
            parent_id=parent_id,
            content=content if kind == FileKind.FILE else None,
        )
        self.db.add(row)
        self.db.flush()
        if commit:
            self.db.commit()
        return FileRecord.from_orm_model(row)

    def create_file(self, project_id: str, owner_id: str, name: str,
                    parent_id: Optional[str] = None, content: str = "") -> FileRecord:
        return self._create(project_id, owner_id, name, FileKind.FILE, parent_id, content or "")

    def create_folder(self, project_id: str, owner_id: str, name: str,
                      parent_id: Optional[str] = None) -> FileRecord:
        return self._create(project_id, owner_id, name, FileKind.FOLDER, parent_id, None)

    def init_default_structure(self, project_id: str, owner_id: str, main_content: str) -> List[FileRecord]:
        """main.tex, references.bib, figures/, sections/introduction.tex. No commit."""
        created = [
            self._create(project_id, owner_id, "main.tex", FileKind.FILE, None, main_content, commit=False),
            self._create(project_id, owner_id, "references.bib", FileKind.FILE, None, DEFAULT_BIB, commit=False),
            self._create(project_id, owner_id, "figures", FileKind.FOLDER, None, None, commit=False),
        ]
        sections = self._create(project_id, owner_id, "sections", FileKind.FOLDER, None, None, commit=False)
        created.append(sections)
        created.append(self._create(project_id, owner_id, "introduction.tex", FileKind.FILE,
                                    sections.id, DEFAULT_INTRODUCTION, commit=False))
        return created

    # ---------- UPDATE ----------
    def rename(self, project_id: str, file_id: str, name: str) -> FileRecord:
        row = self._get_orm(project_id, file_id)
        row.name = validate_name(name)
        row.modified_at = utcnow()
        self.db.commit()
        return FileRecord.from_orm_model(row)

    def update_content(self, project_id: str, file_id: str, content: str) -> FileRecord:
        row = self._get_orm(project_id, file_id)
        if row.kind != FileKind.FILE:
            raise NotAFileError("Folders have no content")
        row.content = content
        row.modified_at = utcnow()
        self.db.commit()
        return FileRecord.from_orm_model(row)

    def move(self, project_id: str, file_id: str, target_id: Optional[str]) -> bool:
        """
        Re-parent file_id under target_id (None = root).
        Returns False for a no-op (already there); nothing is written then.
        Raises InvalidParentError for a missing or non-folder target and
        InvalidMoveError for a folder into its own subtree, before any write.
        """
        # rows stay locked from the guard check through the commit
        records = self.list_records(project_id, lock=True)
        if not any(r.id == file_id for r in records):
            raise RecordNotFoundError("File not found")

        if not can_move(records, file_id, target_id):
            target = next((r for r in records if r.id == target_id), None)
            if target_id is not None and target_id != file_id and (target is None or not target.is_folder):
                raise InvalidParentError("Destination folder not found")
            logger.warning(f"[move] refused {file_id} -> {target_id or 'root'} in project {project_id}")
            raise InvalidMoveError("Cannot move a folder inside itself or its children")

        if is_noop_move(records, file_id, target_id):
            logger.info(f"[move] {file_id} already under {target_id or 'root'}; nothing to do")
            return False

        row = self._get_orm(project_id, file_id)
        row.parent_id = target_id
        row.modified_at = utcnow()
        self.db.commit()
        logger.info(f"[move] {file_id} -> {target_id or 'root'}")
        return True

    # ---------- DELETE ----------
    def delete(self, project_id: str, file_id: str) -> List[str]:
        """Soft delete of the record and everything below it, in one commit."""
        records = self.list_records(project_id)
        if not any(r.id == file_id for r in records):
            raise RecordNotFoundError("File not found")

        ids = {file_id} | descendant_ids(records, file_id)
        (self.db.query(ProjectFileORM)
            .filter(ProjectFileORM.id.in_(list(ids)))
            .update({ProjectFileORM.deleted: True, ProjectFileORM.modified_at: utcnow()},
                    synchronize_session=False))
        self.db.commit()
        logger.info(f"[delete] soft-deleted {len(ids)} record(s) under {file_id}")
        return sorted(ids)
