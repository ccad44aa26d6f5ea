# latexdesk/db/models/project_file_orm.py
import enum
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, String, Text, ForeignKey, Boolean, Enum, TIMESTAMP
from sqlalchemy.orm import relationship

from latexdesk.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FileKind(str, enum.Enum):
    FILE = "file"
    FOLDER = "folder"


class ProjectFileORM(Base):
    __tablename__ = "project_files"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    project_id = Column(String(36), ForeignKey("projects.id"), index=True, nullable=False)
    owner_id = Column(String, nullable=False)
    name = Column(String, nullable=False)
    kind = Column(Enum(FileKind), nullable=False, default=FileKind.FILE)
    parent_id = Column(String(36), ForeignKey("project_files.id"), nullable=True)
    content = Column(Text, nullable=True)  # files only; binaries as data: URLs
    deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), default=utcnow)
    modified_at = Column(TIMESTAMP(timezone=True), default=utcnow)

    parent = relationship(
        "ProjectFileORM",
        remote_side="ProjectFileORM.id",
        back_populates="children",
    )

    # no delete-orphan cascade: deletes are soft, see ProjectFileRepository.delete
    children = relationship(
        "ProjectFileORM",
        back_populates="parent",
    )
