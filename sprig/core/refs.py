"""
Refs — Branch pointers and HEAD

Branches are lightweight mutable pointers to commit ids.
HEAD names exactly one active branch.

Structure:
    .sprig/
    ├── HEAD                 → active branch name
    └── refs/heads/
        ├── main             → tip commit id
        └── feature          → tip commit id

Old tips are discarded, not versioned. Deleting a branch removes the
pointer only; commits it reached stay in the store.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List

from .errors import (
    AlreadyExists, BranchNotFound, CannotDeleteActive, InvalidBranchName, NotInitialized,
)

logger = logging.getLogger(__name__)

# Branch names become file names under refs/heads
_INVALID_NAME = re.compile(r'[\s/\\:]|\.\.')


def is_valid_branch_name(name: str) -> bool:
    return bool(name) and not name.startswith(".") and not _INVALID_NAME.search(name)


def validate_branch_name(name: str) -> None:
    if not is_valid_branch_name(name):
        raise InvalidBranchName(name)


class BranchRegistry:
    """Maps branch names to tip commit ids and tracks the active branch."""

    def __init__(self, sprig_dir: Path):
        self.sprig_dir = Path(sprig_dir)
        self.heads_dir = self.sprig_dir / "refs" / "heads"
        self.head_file = self.sprig_dir / "HEAD"
        self.heads_dir.mkdir(parents=True, exist_ok=True)

    # =========================================================================
    # Reads
    # =========================================================================

    def exists(self, name: str) -> bool:
        # Names that could not have been created never reach the filesystem
        return is_valid_branch_name(name) and (self.heads_dir / name).is_file()

    def tip_of(self, name: str) -> str:
        if not self.exists(name):
            raise BranchNotFound(name)
        return (self.heads_dir / name).read_text().strip()

    def current_branch(self) -> str:
        if not self.head_file.is_file():
            raise NotInitialized()
        return self.head_file.read_text().strip()

    def head_tip(self) -> str:
        """Tip commit id of the active branch."""
        return self.tip_of(self.current_branch())

    def branches(self) -> List[str]:
        return sorted(p.name for p in self.heads_dir.iterdir() if p.is_file())

    def as_dict(self) -> Dict[str, str]:
        return {name: self.tip_of(name) for name in self.branches()}

    # =========================================================================
    # Mutations
    # =========================================================================

    def create_branch(self, name: str, at_commit: str) -> None:
        validate_branch_name(name)
        if self.exists(name):
            raise AlreadyExists(name)
        self._write_ref(name, at_commit)
        logger.debug("Created branch %s at %s", name, at_commit)

    def delete_branch(self, name: str) -> None:
        if not self.exists(name):
            raise BranchNotFound(name)
        if name == self.current_branch():
            raise CannotDeleteActive()
        (self.heads_dir / name).unlink()
        logger.debug("Deleted branch %s", name)

    def move_pointer(self, name: str, to_commit: str) -> None:
        """Unconditionally repoint a branch (commit, merge, reset)."""
        validate_branch_name(name)
        self._write_ref(name, to_commit)
        logger.debug("Moved %s -> %s", name, to_commit)

    def set_head(self, name: str) -> None:
        if not self.exists(name):
            raise BranchNotFound(name)
        self.head_file.write_text(name + "\n")
        logger.debug("HEAD -> %s", name)

    def _write_ref(self, name: str, commit_id: str) -> None:
        (self.heads_dir / name).write_text(commit_id + "\n")
