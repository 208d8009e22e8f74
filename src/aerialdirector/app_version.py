"""Version reported by `/health`, the FastAPI schema and `aerialdirector --version`."""

from __future__ import annotations

from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version as _dist_version
from pathlib import Path

import tomllib


@lru_cache(maxsize=1)
def find_pyproject() -> Path | None:
    """Locate this project's pyproject.toml for source checkouts without dist metadata."""
    for parent in Path(__file__).resolve().parents:
        candidate = parent / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def get_app_version(package_name: str = "aerialdirector") -> str:
    try:
        return _dist_version(package_name)
    except PackageNotFoundError:
        pass

    pyproject = find_pyproject()
    if pyproject is None:
        return "0.0.0"
    try:
        with pyproject.open("rb") as f:
            project = tomllib.load(f).get("project", {})
    except (OSError, tomllib.TOMLDecodeError):
        return "0.0.0"
    return str(project.get("version", "0.0.0"))
