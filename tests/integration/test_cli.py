"""Integration tests for the convmd command line."""

import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from convmd import __version__
from convmd.cli.main import app

runner = CliRunner()


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    return tmp_path / "logs"


def invoke(input_dir: Path, output_dir: Path, log_dir: Path, *args: str):
    return runner.invoke(
        app,
        [str(input_dir), str(output_dir), *args, "--log-dir", str(log_dir)],
    )


class TestConvert:
    """Tests for a normal conversion run."""

    def test_converts_sample(self, sample_post, input_dir, output_dir, log_dir):
        result = invoke(input_dir, output_dir, log_dir, "default", "jekyll")

        assert result.exit_code == 0, result.output
        post = output_dir / "2021-03-05-hello.md"
        assert post.exists()
        assert "write " in result.output
        assert "2021-03-05-hello.md" in result.output
        assert "Conversion Summary" in result.output

        block = post.read_text(encoding="utf-8").split("---\n")[1]
        assert yaml.safe_load(block)["category"] == ["operatingsystem"]

    def test_aliases(self, sample_post, input_dir, output_dir, log_dir):
        result = invoke(input_dir, output_dir, log_dir, "d", "J")
        assert result.exit_code == 0, result.output
        assert (output_dir / "2021-03-05-hello.md").exists()

    def test_creates_output_dir(self, sample_post, input_dir, tmp_path, log_dir):
        output_dir = tmp_path / "site" / "_posts"
        result = invoke(input_dir, output_dir, log_dir, "d", "j")
        assert result.exit_code == 0, result.output
        assert (output_dir / "2021-03-05-hello.md").exists()

    def test_asset_dir_option(self, sample_post, input_dir, output_dir, log_dir):
        result = invoke(input_dir, output_dir, log_dir, "d", "j", "--asset-dir", "/media")
        assert result.exit_code == 0, result.output
        text = (output_dir / "2021-03-05-hello.md").read_text(encoding="utf-8")
        assert "/media/diagram.png" in text
        assert "/media/photo.jpg" in text

    def test_writes_log_file(self, sample_post, input_dir, output_dir, log_dir):
        invoke(input_dir, output_dir, log_dir, "d", "j")
        logs = list(log_dir.glob("convert_*.log"))
        assert len(logs) == 1
        assert "Starting conversion" in logs[0].read_text(encoding="utf-8")

    def test_json_log_format(
        self, sample_post, input_dir, output_dir, log_dir, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("CONVMD_LOG_FORMAT", "json")

        result = invoke(input_dir, output_dir, log_dir, "d", "j")

        assert result.exit_code == 0, result.output
        (log_file,) = log_dir.glob("convert_*.log")
        lines = log_file.read_text(encoding="utf-8").splitlines()
        events = [json.loads(line) for line in lines]
        assert any(e["event"].startswith("Starting conversion") for e in events)

    def test_empty_input_dir(self, input_dir, output_dir, log_dir):
        result = invoke(input_dir, output_dir, log_dir, "d", "j")
        assert result.exit_code == 0
        assert "No files to process." in result.output


class TestFailures:
    """Tests for exit codes and failure reporting."""

    def test_partial_failure_exit_code(
        self, sample_post, write_draft, input_dir, output_dir, log_dir
    ):
        write_draft("nodate.md", "---\ntitle: No date\n---\nBody\n")

        result = invoke(input_dir, output_dir, log_dir, "d", "j")

        assert result.exit_code == 1
        assert (output_dir / "2021-03-05-hello.md").exists()
        assert len(list(output_dir.iterdir())) == 1
        assert "Failed Files:" in result.output
        assert "nodate.md" in result.output
        assert "No date tag in front matter" in result.output

    def test_unsupported_pair(self, sample_post, input_dir, output_dir, log_dir):
        result = invoke(input_dir, output_dir, log_dir, "jekyll", "default")

        assert result.exit_code == 2
        assert "Unsupported dialect mapping: jekyll -> default" in result.output
        assert list(output_dir.iterdir()) == []

    def test_unknown_dialect(self, sample_post, input_dir, output_dir, log_dir):
        result = invoke(input_dir, output_dir, log_dir, "hugo", "jekyll")
        assert result.exit_code == 2
        assert list(output_dir.iterdir()) == []

    def test_missing_input_dir(self, tmp_path, output_dir, log_dir):
        result = invoke(tmp_path / "nope", output_dir, log_dir, "d", "j")
        assert result.exit_code == 2

    def test_output_path_is_a_file(self, sample_post, input_dir, tmp_path, log_dir):
        target = tmp_path / "posts.txt"
        target.write_text("x")
        result = invoke(input_dir, target, log_dir, "d", "j")
        assert result.exit_code == 2


class TestOptions:
    """Tests for the remaining options."""

    def test_dry_run(self, sample_post, input_dir, tmp_path, log_dir):
        output_dir = tmp_path / "planned"
        result = invoke(input_dir, output_dir, log_dir, "d", "j", "--dry-run")

        assert result.exit_code == 0, result.output
        assert "Conversion Plan" in result.output
        assert "hello.md" in result.output
        assert not output_dir.exists()

    def test_recursive(self, sample_post, input_dir, output_dir, log_dir):
        nested = input_dir / "2022"
        nested.mkdir()
        (nested / "deep.md").write_text(
            "---\ntitle: Deep\ndate: 2022-06-01\n---\nText\n", encoding="utf-8"
        )

        flat = invoke(input_dir, output_dir, log_dir, "d", "j")
        assert not (output_dir / "2022-06-01-deep.md").exists()

        result = invoke(input_dir, output_dir, log_dir, "d", "j", "-r")
        assert flat.exit_code == 0
        assert result.exit_code == 0, result.output
        assert (output_dir / "2022-06-01-deep.md").exists()

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "--dry-run" in result.output
