"""Configuration loading from pyproject.toml.

Uses tomlkit to read the [tool.release-tagger] table, then validates it
into a TaggerConfig. A missing file or table gives the defaults.
"""

from __future__ import annotations

from pathlib import Path

import tomlkit

from .models import TaggerConfig

TOOL_NAME = "release-tagger"


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a pyproject.toml file."""
    return tomlkit.parse(path.read_text())


def get_tool_table(doc: tomlkit.TOMLDocument) -> dict:
    """Extract [tool.release-tagger] as plain Python values ({} if absent)."""
    table = doc.get("tool", {}).get(TOOL_NAME)
    if table is None:
        return {}
    return table.unwrap()


def load_config(path: Path | None = None) -> TaggerConfig:
    """Read release-tagger settings from a pyproject.toml.

    Args:
        path: pyproject.toml to read. Defaults to the one in the current
              directory.

    Raises:
        pydantic.ValidationError: If the table has unknown keys or values
            of the wrong type.
    """
    path = path or Path.cwd() / "pyproject.toml"
    if not path.exists():
        return TaggerConfig()
    return TaggerConfig.model_validate(get_tool_table(load_pyproject(path)))
