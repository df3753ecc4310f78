"""Tests for the dura CLI."""

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from dura.cli import JsonLineFormatter, app

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("DURA_CONFIG", raising=False)
    monkeypatch.delenv("DURA_NOTES_DIR", raising=False)
    return tmp_path


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestImportCommand:
    def test_writes_note(self, workdir):
        src = _write(workdir / "trip.md", "# Trip\n\nWe went north.")
        result = runner.invoke(app, ["import", str(src), "-o", str(workdir / "out")])
        assert result.exit_code == 0, result.output
        note = workdir / "out" / "Trip.md"
        assert note.exists()
        assert "We went north." in note.read_text(encoding="utf-8")
        assert (workdir / "out" / "attachments" / "trip.md").exists()

    def test_dry_run(self, workdir):
        src = _write(workdir / "trip.md", "# Trip")
        result = runner.invoke(app, ["import", str(src), "--dry-run", "-o", str(workdir / "out")])
        assert result.exit_code == 0
        assert "dry run" in result.output
        assert not (workdir / "out").exists()

    def test_unsupported_file(self, workdir):
        src = _write(workdir / "data.xyz", "???")
        result = runner.invoke(app, ["import", str(src)])
        assert result.exit_code == 1
        assert "Unsupported file type: xyz" in result.output

    def test_missing_file(self, workdir):
        result = runner.invoke(app, ["import", str(workdir / "gone.txt")])
        assert result.exit_code == 1
        assert "Failed to read file" in result.output

    def test_uses_configured_output_dir(self, workdir):
        _write(workdir / "dura.yaml", "output:\n  base_dir: vault\n")
        src = _write(workdir / "todo.txt", "Groceries\nmilk")
        result = runner.invoke(app, ["import", str(src)])
        assert result.exit_code == 0, result.output
        assert (workdir / "vault" / "Groceries.md").exists()


class TestBlocksAndRender:
    def test_blocks_table(self, workdir):
        src = _write(workdir / "doc.md", "# Title\n\n- a\n- b\n\n```py\nx\n```")
        result = runner.invoke(app, ["blocks", str(src)], env={"COLUMNS": "200"})
        assert result.exit_code == 0, result.output
        assert "Heading 1" in result.output
        assert "Bullet List" in result.output
        assert "language=py" in result.output

    def test_render_to_file(self, workdir):
        src = _write(workdir / "messy.md", "#  Title  \n\n* one\n+ two\n\n3. x\n7. y")
        out = workdir / "clean.md"
        result = runner.invoke(app, ["render", str(src), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert out.read_text(encoding="utf-8") == "# Title\n\n- one\n- two\n\n1. x\n2. y\n"

    def test_render_html(self, workdir):
        src = _write(workdir / "page.html", "<h2>Section</h2><p>Text</p>")
        out = workdir / "page.md"
        result = runner.invoke(app, ["render", str(src), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert out.read_text(encoding="utf-8") == "## Section\n\nText\n"


class TestFormatsCommand:
    def test_lists_formats(self, workdir):
        result = runner.invoke(app, ["formats"], env={"COLUMNS": "200"})
        assert result.exit_code == 0
        assert "com.adobe.pdf" in result.output
        assert ".epub" in result.output


class TestConfigCommands:
    def test_init_creates_file(self, workdir):
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        assert (workdir / "dura.yaml").exists()

    def test_init_refuses_overwrite(self, workdir):
        _write(workdir / "dura.yaml", "log_level: debug\n")
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 1
        assert (workdir / "dura.yaml").read_text() == "log_level: debug\n"

    def test_init_force(self, workdir):
        _write(workdir / "dura.yaml", "log_level: debug\n")
        result = runner.invoke(app, ["config", "init", "--force"])
        assert result.exit_code == 0
        assert "text_layer_threshold" in (workdir / "dura.yaml").read_text()

    def test_show(self, workdir):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "whisper-1" in result.output

    def test_invalid_config_file(self, workdir):
        bad = _write(workdir / "bad.yaml", "log_level: loud\n")
        result = runner.invoke(app, ["--config", str(bad), "config", "show"])
        assert result.exit_code == 1
        assert "Invalid config" in result.output


class TestJsonLogging:
    def test_formatter_emits_json(self):
        record = logging.LogRecord("dura.test", logging.WARNING, __file__, 1, "hi %s", ("there",), None)
        entry = json.loads(JsonLineFormatter().format(record))
        assert entry["level"] == "warning"
        assert entry["logger"] == "dura.test"
        assert entry["message"] == "hi there"
