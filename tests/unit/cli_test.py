"""Tests for the command-line interface."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from treesitter_search.cli.app import app
from treesitter_search.core.index import StructuralIndex

if TYPE_CHECKING:
    from conftest import FakeEncoding

runner = CliRunner()


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.js"
    path.write_text("function a() {}\nclass B {\n  m() { return 1; }\n}\n", encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "args",
    [[], ["search"], ["elements"], ["snippet"], ["analyze"], ["serve"]],
    ids=["root", "search", "elements", "snippet", "analyze", "serve"],
)
def test_short_help_flag(args: list[str]) -> None:
    result = runner.invoke(app, [*args, "-h"])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_search_prints_captures(source_file: Path) -> None:
    result = runner.invoke(app, ["search", str(source_file), "(function_declaration name: (identifier) @name)"])

    assert result.exit_code == 0
    assert "name" in result.output
    assert "(1 rows)" in result.output


def test_elements_lists_nested_methods(source_file: Path) -> None:
    result = runner.invoke(app, ["elements", str(source_file), "method_definition"])

    assert result.exit_code == 0
    assert "method_definition" in result.output
    assert "(1 rows)" in result.output


def test_snippet_prints_enclosing_block(source_file: Path) -> None:
    result = runner.invoke(app, ["snippet", str(source_file), "2", "10"])

    assert result.exit_code == 0
    assert "return 1" in result.output


def test_snippet_outside_file_fails(source_file: Path) -> None:
    result = runner.invoke(app, ["snippet", str(source_file), "40", "0"])

    assert result.exit_code == 1
    assert "Could not find a contextual snippet" in result.output


def test_missing_file_reports_error(tmp_path: Path) -> None:
    result = runner.invoke(app, ["elements", str(tmp_path / "missing.py"), "function_definition"])

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_analyze_prints_token_counts(source_file: Path, fake_encoding: FakeEncoding) -> None:
    with patch("treesitter_search.cli.app._get_index", return_value=StructuralIndex(encoding=fake_encoding)):
        result = runner.invoke(app, ["analyze", str(source_file)])

    assert result.exit_code == 0
    assert "original" in result.output
    assert "thin ast" in result.output
