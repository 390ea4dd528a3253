"""
Staging Index — Pending additions and removals relative to HEAD

Persisted as .sprig/index.json:
    {"added": {path: blob_id}, "removed": [path, ...]}

Staged bytes go to the blob store immediately; the index only records
ids. A path is never in both sets at once.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Set

import orjson

from .errors import NothingToRemove
from .objects import BlobStore, blob_id_for
from .worktree import WorkingTree, normalize_path

logger = logging.getLogger(__name__)


class StageOutcome(Enum):
    STAGED = "staged"
    UNCHANGED = "unchanged"            # identical to tracked content; pending edits cleared
    ALREADY_STAGED = "already_staged"  # identical to what is already staged


class RemoveOutcome(Enum):
    UNSTAGED = "unstaged"
    STAGED_FOR_REMOVAL = "staged_for_removal"
    ALREADY_REMOVED = "already_removed"


class StagingIndex:
    """Add/remove sets that the next commit folds into its parent's table."""

    def __init__(self, path: Path, blobs: BlobStore):
        self.path = Path(path)
        self.blobs = blobs
        self.added: Dict[str, str] = {}
        self.removed: Set[str] = set()
        self._load()

    def _load(self):
        if not self.path.exists():
            return
        data = orjson.loads(self.path.read_bytes() or b"{}")
        self.added = dict(data.get("added", {}))
        self.removed = set(data.get("removed", []))

    def save(self):
        self.path.write_bytes(orjson.dumps(
            {"added": self.added, "removed": sorted(self.removed)},
            option=orjson.OPT_SORT_KEYS,
        ))

    # =========================================================================
    # Transitions
    # =========================================================================

    def stage_add(self, path: str, content: bytes, tracked: Mapping[str, str]) -> StageOutcome:
        """
        Stage content for path, compared against HEAD's table (tracked).

        Content identical to the tracked version cancels any pending edit
        for path instead of staging it.
        """
        path = normalize_path(path)
        blob_id = blob_id_for(content)

        if tracked.get(path) == blob_id:
            self.added.pop(path, None)
            self.removed.discard(path)
            self.save()
            return StageOutcome.UNCHANGED

        if self.added.get(path) == blob_id:
            return StageOutcome.ALREADY_STAGED

        self.blobs.put(content)
        self.record_add(path, blob_id)
        self.save()
        logger.debug("Staged %s as %s", path, blob_id)
        return StageOutcome.STAGED

    def stage_remove(self, path: str, tracked: Mapping[str, str], worktree: WorkingTree) -> RemoveOutcome:
        path = normalize_path(path)
        is_staged = path in self.added
        is_tracked = path in tracked

        if not is_staged and not is_tracked:
            raise NothingToRemove(path)
        if path in self.removed:
            return RemoveOutcome.ALREADY_REMOVED

        outcome = RemoveOutcome.UNSTAGED
        if is_staged:
            del self.added[path]
        if is_tracked:
            self.removed.add(path)
            worktree.delete(path)
            outcome = RemoveOutcome.STAGED_FOR_REMOVAL

        self.save()
        logger.debug("Remove %s: %s", path, outcome.value)
        return outcome

    def record_add(self, path: str, blob_id: str) -> None:
        """Low-level add of an already stored blob (used by merge)."""
        self.added[path] = blob_id
        self.removed.discard(path)

    def record_remove(self, path: str) -> None:
        self.removed.add(path)
        self.added.pop(path, None)

    # =========================================================================
    # Reads
    # =========================================================================

    def is_empty(self) -> bool:
        return not self.added and not self.removed

    def staged_files(self) -> List[str]:
        return sorted(self.added)

    def removed_files(self) -> List[str]:
        return sorted(self.removed)

    def apply_to(self, files: Mapping[str, str]) -> Dict[str, str]:
        """New file table: files plus staged additions minus staged removals."""
        result = dict(files)
        result.update(self.added)
        for path in self.removed:
            result.pop(path, None)
        return result

    def clear(self) -> None:
        self.added.clear()
        self.removed.clear()
        self.save()
