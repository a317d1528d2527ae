"""Configuration manager for RefGraph using a TOML file."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import toml

from . import config
from .models import MAX_DEPTH_LIMIT, RenderOptions

logger = logging.getLogger(__name__)

TREE_SECTION = "tree"

DEFAULT_TREE_CONFIG: Dict[str, Any] = {
    "max_depth": config.DEFAULT_MAX_DEPTH,
    "include_assembly_dependencies": config.DEFAULT_INCLUDE_ASSEMBLY_DEPENDENCIES,
}


def load_full_config() -> Dict[str, Any]:
    """Load the entire TOML config (all sections)."""
    if not config.CONFIG_FILE.exists():
        return {}
    try:
        with open(config.CONFIG_FILE, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config.CONFIG_FILE, exc)
        return {}


def _save_full_config(payload: Dict[str, Any]) -> None:
    """Write entire config dict to TOML file, preserving all sections."""
    config.ensure_base_dirs()
    with open(config.CONFIG_FILE, "w", encoding="utf-8") as f:
        toml.dump(payload, f)


def load_tree_config() -> Dict[str, Any]:
    """Load the ``[tree]`` section merged over the defaults.

    Values of the wrong type are ignored with a warning.
    """
    merged = dict(DEFAULT_TREE_CONFIG)
    section = load_full_config().get(TREE_SECTION, {})
    if not isinstance(section, dict):
        return merged

    max_depth = section.get("max_depth")
    if max_depth is not None:
        if isinstance(max_depth, int) and not isinstance(max_depth, bool) and 0 <= max_depth <= MAX_DEPTH_LIMIT:
            merged["max_depth"] = max_depth
        else:
            logger.warning("Ignoring invalid max_depth %r in config", max_depth)

    include = section.get("include_assembly_dependencies")
    if include is not None:
        if isinstance(include, bool):
            merged["include_assembly_dependencies"] = include
        else:
            logger.warning("Ignoring invalid include_assembly_dependencies %r in config", include)
    return merged


def save_tree_config(
    max_depth: Optional[int] = None,
    include_assembly_dependencies: Optional[bool] = None,
) -> Dict[str, Any]:
    """Persist the given ``[tree]`` values; other sections are preserved.

    Returns:
        The resulting tree configuration.
    """
    if max_depth is not None and not 0 <= max_depth <= MAX_DEPTH_LIMIT:
        raise ValueError(f"max_depth must be between 0 and {MAX_DEPTH_LIMIT}, got {max_depth}")
    payload = load_full_config()
    section = dict(load_tree_config())
    if max_depth is not None:
        section["max_depth"] = max_depth
    if include_assembly_dependencies is not None:
        section["include_assembly_dependencies"] = include_assembly_dependencies
    payload[TREE_SECTION] = section
    _save_full_config(payload)
    return section


def render_options(
    max_depth: Optional[int] = None,
    include_assembly_dependencies: Optional[bool] = None,
) -> RenderOptions:
    """Build :class:`RenderOptions`; explicit arguments override the config file."""
    tree = load_tree_config()
    return RenderOptions(
        max_depth=tree["max_depth"] if max_depth is None else max_depth,
        include_assembly_dependencies=(
            tree["include_assembly_dependencies"]
            if include_assembly_dependencies is None
            else include_assembly_dependencies
        ),
    )
