"""Configuration paths and tree rendering defaults."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("REFGRAPH_HOME", str(Path.home() / ".refgraph"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

DEFAULT_MAX_DEPTH = 3
DEFAULT_INCLUDE_ASSEMBLY_DEPENDENCIES = True


def ensure_base_dirs() -> None:
    """Create the configuration directory if needed."""
    BASE_DIR.mkdir(parents=True, exist_ok=True)
