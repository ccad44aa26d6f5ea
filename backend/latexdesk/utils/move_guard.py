# latexdesk/utils/move_guard.py
from typing import Dict, List, Optional, Sequence, Set

from latexdesk.models.file_tree import FileRecord


def _children_index(records: Sequence[FileRecord]) -> Dict[str, List[str]]:
    index: Dict[str, List[str]] = {}
    for r in records:
        if r.parent_id:
            index.setdefault(r.parent_id, []).append(r.id)
    return index


def descendant_ids(records: Sequence[FileRecord], folder_id: str) -> Set[str]:
    """All ids below folder_id (transitive over parent_id). Safe on cyclic data."""
    index = _children_index(records)
    found: Set[str] = set()
    stack = list(index.get(folder_id, []))
    while stack:
        rid = stack.pop()
        if rid in found or rid == folder_id:
            continue
        found.add(rid)
        stack.extend(index.get(rid, []))
    return found


def is_noop_move(records: Sequence[FileRecord], source_id: str, target_id: Optional[str]) -> bool:
    source = next((r for r in records if r.id == source_id), None)
    return source is not None and source.parent_id == target_id


def can_move(records: Sequence[FileRecord], source_id: str, target_id: Optional[str]) -> bool:
    """
    Would re-parenting source_id under target_id (None = project root) keep the
    tree acyclic? Pure predicate; persisting the move is the caller's job.
    """
    if source_id == target_id:
        return False

    by_id = {r.id: r for r in records}
    source = by_id.get(source_id)
    if source is None:
        return False

    # already there, even when the stored parent is dangling
    if source.parent_id == target_id:
        return True

    if target_id is None:
        return True

    target = by_id.get(target_id)
    if target is None or not target.is_folder:
        return False

    if not source.is_folder:
        return True

    return target_id not in descendant_ids(records, source_id)
