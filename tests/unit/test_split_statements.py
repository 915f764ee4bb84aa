from __future__ import annotations

from world_api.core.config import get_settings
from world_api.db.session import split_statements


def test_splits_on_statement_terminators() -> None:
    script = "CREATE TABLE a (x TEXT);\nCREATE TABLE b (y TEXT);\n"
    assert split_statements(script) == ["CREATE TABLE a (x TEXT);", "CREATE TABLE b (y TEXT);"]


def test_semicolon_inside_literal_does_not_split() -> None:
    script = "CREATE TABLE a (x TEXT);\nINSERT INTO a VALUES ('one; two');\n"
    statements = split_statements(script)

    assert len(statements) == 2
    assert statements[1].endswith("VALUES ('one; two');")


def test_comment_only_fragments_are_dropped() -> None:
    script = "-- header\nDROP TABLE IF EXISTS a;\n\n-- trailing comment\n"
    assert split_statements(script) == ["-- header\nDROP TABLE IF EXISTS a;"]


def test_statement_without_final_semicolon_is_terminated() -> None:
    assert split_statements("SELECT 1;\nSELECT 2") == ["SELECT 1;", "SELECT 2;"]


def test_empty_script() -> None:
    assert split_statements("") == []
    assert split_statements("\n-- nothing here\n") == []


def test_shipped_scripts_split_cleanly() -> None:
    settings = get_settings()
    with open(settings.schema_file, encoding="utf-8") as f:
        schema = split_statements(f.read())
    with open(settings.data_file, encoding="utf-8") as f:
        data = split_statements(f.read())

    assert len(schema) == 12
    assert len(data) == 4
    assert any("Castilian; official" in statement for statement in data)
