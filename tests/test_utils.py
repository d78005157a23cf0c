"""Tests for appforge.utils."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from appforge.utils import (
    print_error,
    print_file_tree,
    print_summary_table,
    resolve_output_path,
    save_json,
    write_files,
)


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


class TestJson:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_save_writes_pretty_utf8(self, tmp_path: Path):
        target = tmp_path / "nested" / "spec.json"
        await save_json({"appName": "Café"}, target)
        raw = target.read_text(encoding="utf-8")
        assert raw.endswith("}\n")
        assert "Café" in raw
        assert json.loads(raw) == {"appName": "Café"}


# ---------------------------------------------------------------------------
# File output
# ---------------------------------------------------------------------------


class TestResolveOutputPath:
    @pytest.mark.unit
    def test_relative_path(self, tmp_output_dir: Path):
        assert resolve_output_path(tmp_output_dir, "screens/HomeScreen.js") == (
            tmp_output_dir.resolve() / "screens" / "HomeScreen.js"
        )

    @pytest.mark.unit
    def test_absolute_rejected(self, tmp_output_dir: Path):
        with pytest.raises(ValueError, match="absolute"):
            resolve_output_path(tmp_output_dir, "/etc/passwd")

    @pytest.mark.unit
    def test_escape_rejected(self, tmp_output_dir: Path):
        with pytest.raises(ValueError, match="outside"):
            resolve_output_path(tmp_output_dir, "../evil.js")


class TestWriteFiles:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_writes_nested_files(self, tmp_output_dir: Path):
        written = await write_files(
            {"App.js": "app\n", "screens/HomeScreen.js": "home\n"}, tmp_output_dir
        )
        assert [p.name for p in written] == ["App.js", "HomeScreen.js"]
        assert (tmp_output_dir / "screens" / "HomeScreen.js").read_text() == "home\n"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_nothing_written_on_bad_path(self, tmp_output_dir: Path):
        with pytest.raises(ValueError):
            await write_files({"App.js": "app", "../escape.js": "x"}, tmp_output_dir)
        assert not (tmp_output_dir / "App.js").exists()


# ---------------------------------------------------------------------------
# Rich output
# ---------------------------------------------------------------------------


class TestRichOutput:
    @pytest.mark.unit
    def test_file_tree(self, capsys):
        print_file_tree({"App.js": "a\nb", "screens/HomeScreen.js": "x"}, "out")
        captured = capsys.readouterr().out
        assert "screens/" in captured
        assert "HomeScreen.js" in captured
        assert "(2 lines)" in captured

    @pytest.mark.unit
    def test_summary_table(self, capsys):
        print_summary_table({"App": "Coffee Shop App"}, title="Generated project")
        captured = capsys.readouterr().out
        assert "Generated project" in captured
        assert "Coffee Shop App" in captured

    @pytest.mark.unit
    def test_markup_is_escaped(self, capsys):
        print_error("Invalid [bold]spec[/bold]")
        assert "[bold]spec[/bold]" in capsys.readouterr().out
