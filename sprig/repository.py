"""
Repository — Explicit handle over one .sprig directory

Every command of the tool is a method here. The handle owns the stores,
the branch registry, the staging index and the working tree, so several
independent repositories can live side by side (tests do this).

Methods return typed results and raise SprigError subclasses. Nothing
here prints; rendering belongs to sprig.presentation.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .core.errors import (
    AlreadyInitialized, AlreadyOnBranch, EmptyMessage, EmptyStagingArea, InvalidPath,
    NoMatchingCommit, NoSuchBranch, NotInitialized,
)
from .core.history import first_parent_history
from .core.merge import MergeEngine, MergeResult
from .core.objects import BlobStore, Commit, CommitStore, initial_commit
from .core.refs import BranchRegistry, validate_branch_name
from .core.staging import RemoveOutcome, StageOutcome, StagingIndex
from .core.worktree import SPRIG_DIR_NAME, WorkingTree, normalize_path

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"


def find_root(start: Path) -> Optional[Path]:
    """Nearest directory at or above start that holds an initialized .sprig/."""
    start = Path(start).resolve()
    for candidate in (start, *start.parents):
        if (candidate / SPRIG_DIR_NAME / "HEAD").is_file():
            return candidate
    return None


@dataclass
class Modification:
    path: str
    kind: str  # "modified" | "deleted"

    def __str__(self) -> str:
        return f"{self.path} ({self.kind})"


@dataclass
class StatusReport:
    current_branch: str
    branches: List[str] = field(default_factory=list)
    staged: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    modified: List[Modification] = field(default_factory=list)
    untracked: List[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not (self.staged or self.removed or self.modified or self.untracked)


class Repository:
    """A working directory plus its .sprig/ store."""

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        self.sprig_dir = self.root / SPRIG_DIR_NAME
        if not (self.sprig_dir / "HEAD").is_file():
            raise NotInitialized()

        self.blobs = BlobStore(self.sprig_dir / "blobs")
        self.commits = CommitStore(self.sprig_dir / "commits")
        self.refs = BranchRegistry(self.sprig_dir)
        self.worktree = WorkingTree(self.root, self.blobs)
        self.staging = StagingIndex(self.sprig_dir / "index.json", self.blobs)
        self.merger = MergeEngine(self.commits, self.blobs, self.refs, self.staging, self.worktree)

    @classmethod
    def init(cls, root: Path, default_branch: str = DEFAULT_BRANCH) -> 'Repository':
        """Create .sprig/ with the root commit and the default branch."""
        root = Path(root).resolve()
        sprig_dir = root / SPRIG_DIR_NAME
        if (sprig_dir / "HEAD").exists():
            raise AlreadyInitialized()
        validate_branch_name(default_branch)

        # config.yaml may already be there from `sprig config`
        sprig_dir.mkdir(parents=True, exist_ok=True)
        commits = CommitStore(sprig_dir / "commits")
        BlobStore(sprig_dir / "blobs")
        registry = BranchRegistry(sprig_dir)

        root_commit = initial_commit()
        commits.put(root_commit)
        registry.create_branch(default_branch, root_commit.id)
        registry.set_head(default_branch)
        logger.debug("Initialized repository at %s on %s", root, default_branch)
        return cls(root)

    @classmethod
    def discover(cls, start: Path) -> 'Repository':
        """Open the repository at start or the nearest enclosing directory."""
        root = find_root(start)
        if root is None:
            raise NotInitialized()
        return cls(root)

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def current_branch(self) -> str:
        return self.refs.current_branch()

    def head_commit(self) -> Commit:
        return self.commits.get(self.refs.head_tip())

    def resolve(self, prefix: str) -> Commit:
        return self.commits.get(self.commits.resolve_prefix(prefix))

    def _relative(self, path: str) -> str:
        """
        Accept paths relative to the root or absolute paths inside it.

        Raises:
            InvalidPath: outside the root, inside .sprig/, or not UTF-8
        """
        p = Path(path)
        target = p.resolve() if p.is_absolute() else Path(os.path.normpath(self.root / p))
        try:
            relative = target.relative_to(self.root)
        except ValueError:
            raise InvalidPath(path) from None
        if not relative.parts or relative.parts[0] == SPRIG_DIR_NAME:
            raise InvalidPath(path)

        key = normalize_path(str(relative))
        try:
            key.encode("utf-8")
        except UnicodeEncodeError:
            # Undecodable file names cannot be recorded in the index
            raise InvalidPath(path) from None
        return key

    # =========================================================================
    # Staging
    # =========================================================================

    def add(self, path: str) -> StageOutcome:
        path = self._relative(path)
        content = self.worktree.read(path)
        return self.staging.stage_add(path, content, self.head_commit().files)

    def rm(self, path: str) -> RemoveOutcome:
        path = self._relative(path)
        return self.staging.stage_remove(path, self.head_commit().files, self.worktree)

    # =========================================================================
    # Commits
    # =========================================================================

    def commit(self, message: str) -> Commit:
        if not message or not message.strip():
            raise EmptyMessage()
        if self.staging.is_empty():
            raise EmptyStagingArea()

        parent = self.head_commit()
        new_commit = Commit(
            message=message,
            files=self.staging.apply_to(parent.files),
            parent=parent.id,
        )
        self.commits.put(new_commit)
        self.refs.move_pointer(self.current_branch, new_commit.id)
        self.staging.clear()
        logger.debug("Committed %s on %s", new_commit.id, self.current_branch)
        return new_commit

    def restore(self, path: str, commit_prefix: Optional[str] = None) -> Commit:
        """Overwrite one working file with its version from a commit (default HEAD)."""
        source = self.resolve(commit_prefix) if commit_prefix else self.head_commit()
        self.worktree.restore_single(source, self._relative(path))
        return source

    def log(self) -> List[Commit]:
        return list(first_parent_history(self.commits, self.refs.head_tip()))

    def global_log(self) -> List[Commit]:
        """Every stored commit, newest first."""
        return sorted(self.commits.all(), key=lambda c: (c.timestamp, c.id), reverse=True)

    def find_by_message(self, message: str) -> List[str]:
        matches = [c.id for c in self.global_log() if c.message == message]
        if not matches:
            raise NoMatchingCommit()
        return matches

    # =========================================================================
    # Status
    # =========================================================================

    def status(self) -> StatusReport:
        head = self.head_commit()
        added = self.staging.added
        removed = self.staging.removed
        on_disk = set(self.worktree.files())
        report = StatusReport(
            current_branch=self.current_branch,
            branches=self.refs.branches(),
            staged=self.staging.staged_files(),
            removed=self.staging.removed_files(),
        )

        for path in sorted(set(head.files) | set(added)):
            if path in removed:
                continue
            expected = added.get(path, head.blob_for(path))
            if path not in on_disk:
                report.modified.append(Modification(path, "deleted"))
            elif self.worktree.blob_id(path) != expected:
                report.modified.append(Modification(path, "modified"))

        report.untracked = [
            path for path in sorted(on_disk)
            if path not in added and (not head.tracks(path) or path in removed)
        ]
        return report

    # =========================================================================
    # Branches
    # =========================================================================

    def branch(self, name: str) -> str:
        tip = self.refs.head_tip()
        self.refs.create_branch(name, tip)
        return tip

    def rm_branch(self, name: str) -> None:
        self.refs.delete_branch(name)

    def switch(self, name: str) -> Commit:
        if not self.refs.exists(name):
            raise NoSuchBranch(name)
        if name == self.current_branch:
            raise AlreadyOnBranch()

        current = self.head_commit()
        target = self.commits.get(self.refs.tip_of(name))
        self.worktree.checkout(current, target.files)
        self.refs.set_head(name)
        self.staging.clear()
        return target

    def reset(self, commit_prefix: str) -> Commit:
        target = self.resolve(commit_prefix)
        current = self.head_commit()
        self.worktree.checkout(current, target.files)
        self.refs.move_pointer(self.current_branch, target.id)
        self.staging.clear()
        return target

    def merge(self, given_branch: str) -> MergeResult:
        return self.merger.merge(given_branch)
