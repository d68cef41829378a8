"""Shared fixtures for postmeta unit tests."""

import textwrap
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import structlog

EXAMPLE_POST = textwrap.dedent(
    """\
    ---
    title: Example Post
    date: 2020-12-04
    tags: [fsharp, tooling]
    ---
    Hello world.
    """
)

FULL_POST = textwrap.dedent(
    """\
    ---
    title: Fixing code with the editor
    date: 2021-06-15
    author:
      - Jane Doe
      - John Roe
    tags:
      - fsharp
      - tooling
    tocDepth: 3
    hidden: false
    anchorLinks: true
    draft: true
    resources:
      - name: cover
        src: images/cover.png
        title: Cover image
      - name: diagram
        src: images/diagram.svg
        title: Architecture
    ---

    ## Intro

    {{< img cover >}}
    """
)


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Restore the default structlog configuration after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Create an empty content root.

    Args:
        tmp_path: Pytest temporary path fixture

    Returns:
        Path: Path to the content root
    """
    root = tmp_path / "content"
    root.mkdir()
    return root


@pytest.fixture
def write_post(content_dir: Path) -> Callable[[str, str], Path]:
    """Factory writing a file below the content root."""

    def _write(relative: str, text: str) -> Path:
        path = content_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def example_post() -> str:
    return EXAMPLE_POST


@pytest.fixture
def full_post() -> str:
    return FULL_POST
