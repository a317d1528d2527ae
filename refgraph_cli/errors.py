"""Exception hierarchy for RefGraph.

Per-node anomalies (unresolved references, cycles, depth truncation) are
never raised; the renderer annotates or skips them inline. Only problems
with the snapshot as a whole surface as exceptions.
"""

from __future__ import annotations

from typing import List, Sequence


class RefGraphError(Exception):
    """Base class for all RefGraph errors."""


class SnapshotError(RefGraphError):
    """The extracted record snapshot could not be loaded."""


class SnapshotNotFound(SnapshotError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Snapshot not found: {path}")
        self.path = path


class RenderSkipped(RefGraphError):
    """Rendering was skipped; the message explains why."""


class NoEdgesAvailable(RenderSkipped):
    def __init__(self) -> None:
        super().__init__("No references found in snapshot; nothing to render.")


class NoRootsMatched(RenderSkipped):
    MAX_HINTS = 10

    def __init__(self, root_name: str, available: Sequence[str]) -> None:
        self.root_name = root_name
        self.available: List[str] = list(available)[: self.MAX_HINTS]
        super().__init__(f"No solution named '{root_name}' found.")
