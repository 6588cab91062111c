"""Tests for the command-line interface."""

import json
from pathlib import Path

from click.testing import CliRunner

from testthat.cli import main

PASSING = "from testthat import test_that, expect_equal\ntest_that('adds', 'expect_equal(1 + 1, 2)')\n"
FAILING = "from testthat import test_that, expect_equal\ntest_that('adds', 'expect_equal(1 + 1, 3)')\n"


class TestInit:
    """Tests for 'testthat init'."""

    def test_creates_config(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["init"])

            assert result.exit_code == 0
            data = json.loads(Path("testthat.json").read_text())
            assert data["reporter"]["name"] == "summary"

    def test_refuses_to_overwrite(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("testthat.json").write_text("{}")

            result = runner.invoke(main, ["init"])

            assert result.exit_code == 1
            assert "already exists" in result.output
            assert Path("testthat.json").read_text() == "{}"

    def test_force_overwrites(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("testthat.json").write_text("{}")

            result = runner.invoke(main, ["init", "--force"])

            assert result.exit_code == 0
            assert "reporter" in json.loads(Path("testthat.json").read_text())


class TestRun:
    """Tests for 'testthat run'."""

    def test_passing_file(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("test_pass.py").write_text(PASSING)

            result = runner.invoke(main, ["run", "test_pass.py"])

            assert result.exit_code == 0
            assert "DONE" in result.output
            assert "Total Tests" in result.output

    def test_failing_file(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("test_fail.py").write_text(FAILING)

            result = runner.invoke(main, ["run", "test_fail.py"])

            assert result.exit_code == 1
            assert "Failure" in result.output

    def test_reporter_option(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("test_pass.py").write_text(PASSING)

            result = runner.invoke(main, ["run", "--reporter", "minimal", "test_pass.py"])

            assert result.exit_code == 0
            assert "DONE" not in result.output

    def test_config_option(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("test_pass.py").write_text(PASSING)
            Path("custom.json").write_text(json.dumps({"reporter": {"name": "silent"}}))

            result = runner.invoke(main, ["--config", "custom.json", "run", "test_pass.py"])

            assert result.exit_code == 0
            assert "DONE" not in result.output

    def test_missing_config(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("test_pass.py").write_text(PASSING)

            result = runner.invoke(main, ["--config", "missing.json", "run", "test_pass.py"])

            assert result.exit_code == 1
            assert "not found" in result.output

    def test_file_error(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("test_broken.py").write_text("raise RuntimeError('broken file')\n")

            result = runner.invoke(main, ["run", "test_broken.py"])

            assert result.exit_code == 1
            assert "broken file" in result.output
