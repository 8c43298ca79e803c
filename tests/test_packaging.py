"""Tests for project metadata."""

from __future__ import annotations

import tomllib
from pathlib import Path

ROOT = Path(__file__).parent.parent


def test_readme_is_project_readme():
    with open(ROOT / "pyproject.toml", "rb") as f:
        project = tomllib.load(f)["project"]

    assert project["readme"] == "README.md"
    assert (ROOT / project["readme"]).read_text().startswith("# asanakit")
