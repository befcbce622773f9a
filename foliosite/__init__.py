"""foliosite build package exposing the CLI and pipeline interfaces."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as load_pkg_version
from pathlib import Path
import tomllib

from .builder import build_site, render_site, validate_only
from .config import Config, load_config

__all__ = ["Config", "__version__", "build_site", "load_config", "render_site", "validate_only"]


def _read_local_project_version() -> str:
    """Read the project version from pyproject.toml when the package is uninstalled."""
    pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return "0.0.0"
    return data.get("project", {}).get("version", "0.0.0")


try:
    __version__ = load_pkg_version("foliosite")
except PackageNotFoundError:
    __version__ = _read_local_project_version()
