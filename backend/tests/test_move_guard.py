from latexdesk.db.models.project_file_orm import FileKind
from latexdesk.models.file_tree import FileRecord
from latexdesk.utils.move_guard import can_move, descendant_ids, is_noop_move


def _rec(id, folder=False, parent=None):
    return FileRecord(
        id=id, project_id="p1", name=id,
        kind=FileKind.FOLDER if folder else FileKind.FILE,
        parent_id=parent,
    )


# A/ -> B/ -> C/ -> deep.tex, plus a loose file and folder at root
RECORDS = [
    _rec("A", folder=True),
    _rec("B", folder=True, parent="A"),
    _rec("C", folder=True, parent="B"),
    _rec("deep.tex", parent="C"),
    _rec("main.tex"),
    _rec("D", folder=True),
]


def test_folder_into_own_child_refused():
    assert can_move(RECORDS, "A", "B") is False


def test_folder_into_deep_descendant_refused():
    assert can_move(RECORDS, "A", "C") is False


def test_folder_into_itself_refused():
    assert can_move(RECORDS, "A", "A") is False


def test_move_to_current_parent_allowed_and_noop():
    assert can_move(RECORDS, "B", "A") is True
    assert is_noop_move(RECORDS, "B", "A") is True


def test_child_folder_out_to_sibling():
    assert can_move(RECORDS, "C", "D") is True
    assert is_noop_move(RECORDS, "C", "D") is False


def test_file_into_any_folder():
    assert can_move(RECORDS, "main.tex", "C") is True


def test_target_must_be_a_folder():
    assert can_move(RECORDS, "D", "main.tex") is False


def test_unknown_ids_refused():
    assert can_move(RECORDS, "nope", "A") is False
    assert can_move(RECORDS, "main.tex", "nope") is False


def test_move_to_root():
    assert can_move(RECORDS, "C", None) is True
    assert is_noop_move(RECORDS, "main.tex", None) is True


def test_every_record_can_stay_where_it_is():
    for r in RECORDS:
        assert can_move(RECORDS, r.id, r.parent_id) is True


def test_descendants_are_transitive():
    assert descendant_ids(RECORDS, "A") == {"B", "C", "deep.tex"}
    assert descendant_ids(RECORDS, "D") == set()


def test_descendants_terminate_on_cyclic_data():
    cyclic = [_rec("x", folder=True, parent="y"), _rec("y", folder=True, parent="x")]
    assert descendant_ids(cyclic, "x") == {"y"}


def test_dangling_parent_can_stay_where_it_is():
    records = [_rec("x", parent="gone"), _rec("F", folder=True)]
    assert can_move(records, "x", "gone") is True
    assert is_noop_move(records, "x", "gone") is True
    assert can_move(records, "x", "F") is True
    assert can_move(records, "x", None) is True
