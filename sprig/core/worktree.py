"""
Working Tree — Reconcile files on disk with commit file tables

Owns the raw I/O primitives (read/write/delete/list) and the
synchronizer operations built on them. Callers must run
guard_overwrite() before materializing a foreign file table so that
untracked work is never silently clobbered.
"""

import logging
from pathlib import Path, PurePosixPath
from typing import Dict, List, Mapping

from .errors import FileMissing, FileNotInCommit, UntrackedConflict
from .objects import BlobStore, Commit, blob_id_for

logger = logging.getLogger(__name__)

SPRIG_DIR_NAME = ".sprig"


def normalize_path(path: str) -> str:
    """Repository-relative POSIX form used as the file-table key."""
    return PurePosixPath(Path(path).as_posix()).as_posix()


class WorkingTree:
    """Files the user edits, rooted at the project directory."""

    def __init__(self, root: Path, blobs: BlobStore):
        self.root = Path(root).resolve()
        self.blobs = blobs

    # =========================================================================
    # Raw I/O
    # =========================================================================

    def _abs(self, path: str) -> Path:
        return self.root / normalize_path(path)

    def exists(self, path: str) -> bool:
        return self._abs(path).is_file()

    def read(self, path: str) -> bytes:
        target = self._abs(path)
        if not target.is_file():
            raise FileMissing(path)
        return target.read_bytes()

    def blob_id(self, path: str) -> str:
        """Content hash of the working copy of path."""
        return blob_id_for(self.read(path))

    def write(self, path: str, content: bytes) -> None:
        target = self._abs(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)

    def delete(self, path: str) -> bool:
        """Remove a file if present. Returns True if something was deleted."""
        target = self._abs(path)
        if not target.is_file():
            return False
        target.unlink()
        self._prune_empty_dirs(target.parent)
        return True

    def _prune_empty_dirs(self, directory: Path) -> None:
        while directory != self.root and self.root in directory.parents:
            try:
                directory.rmdir()
            except OSError:
                return
            directory = directory.parent

    def files(self) -> List[str]:
        """Every regular file under the root, excluding the repository directory."""
        found = []
        for p in self.root.rglob("*"):
            rel = p.relative_to(self.root)
            if rel.parts and rel.parts[0] == SPRIG_DIR_NAME:
                continue
            if p.is_file():
                found.append(rel.as_posix())
        return sorted(found)

    # =========================================================================
    # Synchronization
    # =========================================================================

    def untracked_in_way(self, current: Commit, target_files: Mapping[str, str]) -> List[str]:
        """Working files untracked by current that target_files would overwrite."""
        return [
            path for path in self.files()
            if not current.tracks(path) and path in target_files
        ]

    def guard_overwrite(self, current: Commit, target_files: Mapping[str, str]) -> None:
        blocked = self.untracked_in_way(current, target_files)
        if blocked:
            raise UntrackedConflict(blocked)

    def materialize(self, files: Mapping[str, str]) -> None:
        """Write every (path, blob) pair, overwriting existing files."""
        for path, blob_id in sorted(files.items()):
            self.write(path, self.blobs.get(blob_id))
        logger.debug("Materialized %d files", len(files))

    def prune_stale_tracked(self, current: Commit, target_files: Mapping[str, str]) -> List[str]:
        """Delete files tracked by current but absent from target_files."""
        removed = [
            path for path in sorted(current.files)
            if path not in target_files and self.delete(path)
        ]
        if removed:
            logger.debug("Pruned %d stale tracked files", len(removed))
        return removed

    def restore_single(self, commit: Commit, path: str) -> None:
        path = normalize_path(path)
        blob_id = commit.blob_for(path)
        if blob_id is None:
            raise FileNotInCommit(path)
        self.write(path, self.blobs.get(blob_id))
        logger.debug("Restored %s from %s", path, commit.id)

    def checkout(self, current: Commit, target_files: Dict[str, str]) -> None:
        """Guard, materialize, prune: make the tree match target_files."""
        self.guard_overwrite(current, target_files)
        self.materialize(target_files)
        self.prune_stale_tracked(current, target_files)
