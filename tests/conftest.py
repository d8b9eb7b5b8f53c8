"""Pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest

from convmd.config.settings import get_settings

SAMPLE_POST = """---
title: Hello World
date: 2021-03-05
tags:
  - Linux
  - shell
---

# Hello

Some text with an image:

![diagram](../images/diagram.png "Diagram")

<img src="../images/photo.jpg" alt="photo">
"""


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep settings independent of the developer's environment and cwd."""
    for name in [n for n in os.environ if n.startswith("CONVMD_")]:
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def input_dir(tmp_path: Path) -> Path:
    """Create an empty input directory."""
    path = tmp_path / "drafts"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Create an output directory."""
    path = tmp_path / "posts"
    path.mkdir()
    return path


@pytest.fixture
def sample_post(input_dir: Path) -> Path:
    """Write a well-formed draft to the input directory."""
    file_path = input_dir / "hello.md"
    file_path.write_text(SAMPLE_POST, encoding="utf-8")
    return file_path


@pytest.fixture
def write_draft(input_dir: Path):
    """Factory writing a draft with the given name and content."""

    def _write(name: str, content: str) -> Path:
        file_path = input_dir / name
        file_path.write_text(content, encoding="utf-8")
        return file_path

    return _write


@pytest.fixture
def sample_text() -> str:
    """Text of a well-formed draft."""
    return SAMPLE_POST
