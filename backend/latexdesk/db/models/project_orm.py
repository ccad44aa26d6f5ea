# latexdesk/db/models/project_orm.py
from uuid import uuid4

from sqlalchemy import Column, String, Text, Boolean, TIMESTAMP

from latexdesk.db.base import Base
from latexdesk.db.models.project_file_orm import utcnow


class ProjectORM(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name = Column(String, nullable=False)
    owner_id = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=True)
    deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), default=utcnow)
    modified_at = Column(TIMESTAMP(timezone=True), default=utcnow)
