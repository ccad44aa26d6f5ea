from datetime import date

from latexdesk.renderers.latex_metadata import MetadataMode, extract_metadata, format_today

TODAY = date(2026, 10, 19)


def test_defaults_for_empty_source():
    meta = extract_metadata("")
    assert meta.title == "Untitled Document"
    assert meta.author == ""
    assert meta.date == ""


def test_mock_mode_author_default():
    meta = extract_metadata(r"\title{Paper}", mode=MetadataMode.mock)
    assert meta.title == "Paper"
    assert meta.author == "Unknown Author"


def test_fields_fall_back_independently():
    meta = extract_metadata(r"\author{Ada Lovelace}")
    assert meta.title == "Untitled Document"
    assert meta.author == "Ada Lovelace"
    assert meta.date == ""


def test_first_occurrence_wins():
    meta = extract_metadata(r"\title{First}\title{Second}")
    assert meta.title == "First"


def test_today_inside_date_is_substituted():
    meta = extract_metadata(r"\title{T}\date{\today}", today=TODAY)
    assert meta.date == "October 19, 2026"


def test_explicit_date_kept_verbatim():
    meta = extract_metadata(r"\date{Spring 2024}", today=TODAY)
    assert meta.date == "Spring 2024"


def test_bare_today_without_date_command():
    meta = extract_metadata("Written on \\today.", today=TODAY)
    assert meta.date == "October 19, 2026"


def test_non_string_source_gives_defaults():
    meta = extract_metadata(None)
    assert meta.title == "Untitled Document"


def test_format_today_has_no_zero_padding():
    assert format_today(date(2024, 3, 5)) == "March 5, 2024"
