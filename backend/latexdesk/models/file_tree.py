# latexdesk/models/file_tree.py
from __future__ import annotations
import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

from latexdesk.db.models.project_file_orm import FileKind

logger = logging.getLogger(__name__)


class FileRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    owner_id: str = ""
    name: str
    kind: FileKind = FileKind.FILE
    parent_id: Optional[str] = None
    content: Optional[str] = None
    deleted: bool = False
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None

    @property
    def is_folder(self) -> bool:
        return self.kind == FileKind.FOLDER

    # ---- factory from ORM row ----
    @classmethod
    def from_orm_model(cls, orm_file) -> "FileRecord":
        return cls(
            id=orm_file.id, project_id=orm_file.project_id,
            owner_id=orm_file.owner_id, name=orm_file.name,
            kind=orm_file.kind, parent_id=orm_file.parent_id,
            content=orm_file.content if orm_file.kind == FileKind.FILE else None,
            deleted=bool(orm_file.deleted),
            created_at=orm_file.created_at, modified_at=orm_file.modified_at,
        )


class TreeNode(BaseModel):
    record: FileRecord
    path: str
    children: List["TreeNode"] = Field(default_factory=list)

    def __str__(self): return f"{self.path} ({self.record.kind.value})"

    def walk(self) -> List["TreeNode"]:
        nodes = [self]
        for child in self.children: nodes.extend(child.walk())
        return nodes


TreeNode.model_rebuild()


def sort_key(record: FileRecord) -> Tuple[int, str, str, str]:
    """Folders first, then name (case-insensitive, ties broken by exact name, then id)."""
    return (0 if record.is_folder else 1, record.name.casefold(), record.name, record.id)


def build_file_tree(records: Sequence[FileRecord]) -> List[TreeNode]:
    """
    Build the hierarchical view of a flat record list.

    Records whose parent is missing (or is not a folder) are placed at the root.
    Records stuck in a stored parent cycle are never reachable from a root; the
    lowest-sorting member of each such group is promoted to a root so nothing
    disappears from the view. Input records are never mutated.
    """
    by_id: Dict[str, FileRecord] = {r.id: r for r in records}
    children: Dict[str, List[FileRecord]] = {}
    roots: List[FileRecord] = []

    for record in records:
        parent = by_id.get(record.parent_id) if record.parent_id else None
        if parent is None or not parent.is_folder:
            if record.parent_id:
                logger.warning(f"[build_file_tree] {record.id} has dangling parent {record.parent_id}; placed at root")
            roots.append(record)
        else:
            children.setdefault(parent.id, []).append(record)

    visited: Set[str] = set()

    def _build(record: FileRecord, prefix: str) -> TreeNode:
        visited.add(record.id)
        path = f"{prefix}/{record.name}" if prefix else record.name
        kids = [
            _build(child, path)
            for child in sorted(children.get(record.id, []), key=sort_key)
            if child.id not in visited
        ]
        return TreeNode(record=record, path=path, children=kids)

    tree = [_build(r, "") for r in sorted(roots, key=sort_key) if r.id not in visited]

    leftovers = [r for r in records if r.id not in visited]
    while leftovers:
        first = min(leftovers, key=sort_key)
        logger.warning(f"[build_file_tree] parent cycle through {first.id}; promoted to root")
        tree.append(_build(first, ""))
        leftovers = [r for r in leftovers if r.id not in visited]

    tree.sort(key=lambda n: sort_key(n.record))
    return tree


def walk(nodes: Sequence[TreeNode]) -> List[TreeNode]:
    out: List[TreeNode] = []
    for node in nodes: out.extend(node.walk())
    return out


def file_paths(nodes: Sequence[TreeNode]) -> Dict[str, FileRecord]:
    """Relative path -> file record, for every file in the tree."""
    return {n.path: n.record for n in walk(nodes) if not n.record.is_folder}
