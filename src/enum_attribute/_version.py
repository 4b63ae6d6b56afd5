"""Version lookup for enum-attribute."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as distribution_version
from pathlib import Path

DISTRIBUTION = "enum-attribute"

# src/enum_attribute/_version.py -> project root
_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _source_tree_version() -> str | None:
    if not _PYPROJECT.is_file():
        return None
    with _PYPROJECT.open("rb") as fh:
        project = tomllib.load(fh).get("project", {})
    if project.get("name") != DISTRIBUTION:
        return None
    return project.get("version")


def get_version() -> str:
    """Prefer the checkout's pyproject.toml, then installed metadata."""
    found = _source_tree_version()
    if found:
        return found
    try:
        return distribution_version(DISTRIBUTION)
    except PackageNotFoundError:
        return "0.0.0"
