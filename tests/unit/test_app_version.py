"""Unit tests for the app version lookup."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError


def _not_installed(name: str) -> str:
    raise PackageNotFoundError(name)


def test_get_app_version_returns_non_empty_string() -> None:
    from aerialdirector.app_version import get_app_version

    version = get_app_version()
    assert isinstance(version, str)
    assert version


def test_find_pyproject_locates_project_file() -> None:
    from aerialdirector.app_version import find_pyproject

    find_pyproject.cache_clear()
    try:
        pyproject = find_pyproject()
        assert pyproject is not None
        assert 'name = "aerialdirector"' in pyproject.read_text()
    finally:
        find_pyproject.cache_clear()


def test_get_app_version_falls_back_to_pyproject(monkeypatch, tmp_path) -> None:
    from aerialdirector import app_version as mod

    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_bytes(b'[project]\nname = "aerialdirector"\nversion = "4.5.6"\n')
    monkeypatch.setattr(mod, "_dist_version", _not_installed)
    monkeypatch.setattr(mod, "find_pyproject", lambda: pyproject)

    assert mod.get_app_version() == "4.5.6"


def test_get_app_version_defaults_when_pyproject_unreadable(monkeypatch, tmp_path) -> None:
    from aerialdirector import app_version as mod

    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text("not toml = [")
    monkeypatch.setattr(mod, "_dist_version", _not_installed)
    monkeypatch.setattr(mod, "find_pyproject", lambda: pyproject)

    assert mod.get_app_version() == "0.0.0"


def test_get_app_version_defaults_without_pyproject(monkeypatch) -> None:
    from aerialdirector import app_version as mod

    monkeypatch.setattr(mod, "_dist_version", _not_installed)
    monkeypatch.setattr(mod, "find_pyproject", lambda: None)

    assert mod.get_app_version() == "0.0.0"
