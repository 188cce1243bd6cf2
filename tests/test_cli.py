"""Tests for the typer CLI."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from cv_builder.cli import app
from cv_builder.config import CONFIG_ENV_VAR

runner = CliRunner()


@pytest.fixture
def cli_config(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "storage:\n"
        f"  db_path: {tmp_path / 'documents.db'}\n"
        "export:\n"
        f"  output_dir: {tmp_path / 'out'}\n"
        "activity:\n"
        f"  db_path: {tmp_path / 'activity.db'}\n"
    )
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))
    return tmp_path


class TestCli:
    def test_templates(self):
        result = runner.invoke(app, ["templates"])
        assert result.exit_code == 0
        assert "dublin-tech" in result.output
        assert "stockholm" in result.output

    def test_show_without_document(self, cli_config):
        result = runner.invoke(app, ["show"])
        assert result.exit_code == 1
        assert "No saved CV" in result.output

    def test_new_then_show(self, cli_config):
        result = runner.invoke(app, ["new", "--name", "Jane Byrne", "--template", "london"])
        assert result.exit_code == 0, result.output
        assert "Saved." in result.output

        result = runner.invoke(app, ["show"])
        assert result.exit_code == 0
        assert "Jane Byrne" in result.output

    def test_new_rejects_unknown_template(self, cli_config):
        result = runner.invoke(app, ["new", "--template", "paris"])
        assert result.exit_code == 1

    def test_toggle_and_sections(self, cli_config):
        runner.invoke(app, ["new", "--name", "Jane Byrne"])
        result = runner.invoke(app, ["toggle", "awards", "--show"])
        assert result.exit_code == 0, result.output
        assert "now visible" in result.output

        result = runner.invoke(app, ["toggle", "personal", "--hide"])
        assert result.exit_code == 1

    def test_export_html(self, cli_config):
        runner.invoke(app, ["new", "--name", "Jane Byrne"])
        result = runner.invoke(app, ["export", "--format", "html", "--output", str(cli_config)])
        assert result.exit_code == 0, result.output
        assert (cli_config / "jane-byrne-cv-dublin.html").exists()

    def test_export_unknown_format(self, cli_config):
        result = runner.invoke(app, ["export", "--format", "odt"])
        assert result.exit_code == 1

    def test_history(self, cli_config):
        runner.invoke(app, ["new", "--name", "Jane Byrne"])
        result = runner.invoke(app, ["history"])
        assert result.exit_code == 0
        assert "save" in result.output

    def test_reset_replaces_saved_cv(self, cli_config):
        runner.invoke(app, ["new", "--name", "Jane Byrne"])
        result = runner.invoke(app, ["reset", "--yes"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["show"])
        assert result.exit_code == 0
        assert "Jane Byrne" not in result.output

    def test_reset_declined(self, cli_config):
        runner.invoke(app, ["new", "--name", "Jane Byrne"])
        result = runner.invoke(app, ["reset"], input="n\n")
        assert result.exit_code == 0
        assert "Jane Byrne" in runner.invoke(app, ["show"]).output

    def test_edit_skills(self, cli_config):
        runner.invoke(app, ["new", "--name", "Jane Byrne"])
        result = runner.invoke(app, ["edit", "skills"], input="Python, SQL\n")
        assert result.exit_code == 0, result.output
        assert "Python, SQL" in runner.invoke(app, ["show"]).output

    def test_edit_negative_index(self, cli_config):
        runner.invoke(app, ["new", "--name", "Jane Byrne"])
        result = runner.invoke(app, ["edit", "experience", "--index=-1"])
        assert result.exit_code == 1
        assert "0 or greater" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_edit_unknown_section(self, cli_config):
        result = runner.invoke(app, ["edit", "hobbies"])
        assert result.exit_code == 1
