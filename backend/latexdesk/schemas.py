# latexdesk/schemas.py
from pydantic import BaseModel
from typing import Optional


class ProjectCreateRequest(BaseModel):
    name: str
    description: Optional[str] = None


class ProjectUpdateRequest(BaseModel):
    name: str
    description: Optional[str] = None


class FileCreateRequest(BaseModel):
    name: str
    parent_id: Optional[str] = None
    content: str = ""


class FolderCreateRequest(BaseModel):
    name: str
    parent_id: Optional[str] = None


class RenameRequest(BaseModel):
    name: str


class ContentUpdateRequest(BaseModel):
    content: str


class MoveRequest(BaseModel):
    target_id: Optional[str] = None  # None = project root
