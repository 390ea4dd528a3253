"""
Merge — Three-way merge of two branch tips

Flow:
    1. Preconditions (clean index, given branch exists, not a self-merge)
    2. Split point via breadth-first search (history.find_split_point)
    3. Fast paths: given already merged, or fast-forward
    4. Untracked-file guard
    5. Per-file classification over split/current/given blob ids
    6. Materialize + stage each decision, then a two-parent merge commit

Conflicts are reported on the result, not raised: the merge commit is
created either way, with conflict markers in the affected files.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import (
    AlreadyAncestor, NoSuchBranch, NotFound, SelfMerge, UncommittedChanges, UntrackedConflict,
)
from .history import find_split_point
from .objects import BlobStore, Commit, CommitStore
from .refs import BranchRegistry
from .staging import StagingIndex
from .worktree import WorkingTree

logger = logging.getLogger(__name__)


class MergeCase(Enum):
    """What happens to one path, given its split/current/given versions."""
    DELETED_UPSTREAM = "deleted_upstream"        # unchanged here, removed in given
    ADDED_UPSTREAM = "added_upstream"            # only given has it
    MODIFIED_UPSTREAM = "modified_upstream"      # unchanged here, edited in given
    SAME = "same"                                # both sides agree (incl. both absent)
    CONFLICT_MODIFIED = "conflict_modified"      # divergent edits
    CONFLICT_ADDED = "conflict_added"            # divergent additions
    CONFLICT_DELETED_LOCALLY = "conflict_deleted_locally"
    CONFLICT_DELETED_UPSTREAM = "conflict_deleted_upstream"
    KEEP_CURRENT = "keep_current"                # only current changed; leave as is

    @property
    def is_conflict(self) -> bool:
        return self.value.startswith("conflict_")


class MergeOutcome(Enum):
    MERGED = "merged"
    FAST_FORWARD = "fast_forward"


def classify(split: Optional[str], current: Optional[str], given: Optional[str]) -> MergeCase:
    """
    Decide one path's fate from its three blob ids (None = absent).

    Rules are checked in order; the first match wins.
    """
    s, c, g = split, current, given

    if s is not None and c == s and g is None:
        return MergeCase.DELETED_UPSTREAM
    if s is None and c is None and g is not None:
        return MergeCase.ADDED_UPSTREAM
    if s is not None and c == s and g is not None and g != s:
        return MergeCase.MODIFIED_UPSTREAM
    if c == g:
        return MergeCase.SAME

    if s is None and c is not None and g is not None:
        return MergeCase.CONFLICT_ADDED
    if s is not None and c is None and g != s:
        return MergeCase.CONFLICT_DELETED_LOCALLY
    if s is not None and c is not None and c != s and g is None:
        return MergeCase.CONFLICT_DELETED_UPSTREAM
    if c != s and g != s:
        return MergeCase.CONFLICT_MODIFIED

    return MergeCase.KEEP_CURRENT


def conflict_content(current: Optional[bytes], given: Optional[bytes]) -> bytes:
    """Conflict markers around both sides; a missing side renders empty."""
    return (
        b"<<<<<<< HEAD\n"
        + (current or b"")
        + b"\n=======\n"
        + (given or b"")
        + b"\n>>>>>>>\n"
    )


@dataclass
class FileMerge:
    path: str
    case: MergeCase
    split: Optional[str] = None
    current: Optional[str] = None
    given: Optional[str] = None


def plan_merge(split: Commit, current: Commit, given: Commit) -> List[FileMerge]:
    """Classify every path in the union of the three file tables."""
    paths = set(split.files) | set(current.files) | set(given.files)
    plan = []
    for path in sorted(paths):
        s, c, g = split.blob_for(path), current.blob_for(path), given.blob_for(path)
        plan.append(FileMerge(path=path, case=classify(s, c, g), split=s, current=c, given=g))
    return plan


@dataclass
class MergeResult:
    outcome: MergeOutcome
    commit_id: str
    current_branch: str
    given_branch: str
    split_point: str
    files: List[FileMerge] = field(default_factory=list)

    @property
    def conflicts(self) -> List[str]:
        return [f.path for f in self.files if f.case.is_conflict]

    @property
    def has_conflict(self) -> bool:
        return bool(self.conflicts)


class MergeEngine:
    """Merges a given branch into the active one."""

    def __init__(
        self,
        commits: CommitStore,
        blobs: BlobStore,
        registry: BranchRegistry,
        staging: StagingIndex,
        worktree: WorkingTree,
    ):
        self.commits = commits
        self.blobs = blobs
        self.registry = registry
        self.staging = staging
        self.worktree = worktree

    def merge(self, given_branch: str) -> MergeResult:
        if not self.staging.is_empty():
            raise UncommittedChanges()
        if not self.registry.exists(given_branch):
            raise NoSuchBranch(given_branch)
        current_branch = self.registry.current_branch()
        if given_branch == current_branch:
            raise SelfMerge()

        current_tip = self.registry.tip_of(current_branch)
        given_tip = self.registry.tip_of(given_branch)
        split_id = find_split_point(self.commits, current_tip, given_tip)
        if split_id is None:
            raise NotFound(f"No common ancestor between {current_branch} and {given_branch}.")
        logger.debug("Split point of %s and %s: %s", current_branch, given_branch, split_id)

        if split_id == given_tip:
            raise AlreadyAncestor()

        current = self.commits.get(current_tip)
        given = self.commits.get(given_tip)

        if split_id == current_tip:
            return self._fast_forward(current_branch, given_branch, current, given)

        split = self.commits.get(split_id)
        self._guard_untracked(split, current, given)

        plan = plan_merge(split, current, given)
        for item in plan:
            self._apply(item)
        self.staging.save()

        merge_commit = Commit(
            message=f"Merged {given_branch} into {current_branch}.",
            files=self.staging.apply_to(current.files),
            parent=current_tip,
            merge_parent=given_tip,
        )
        self.commits.put(merge_commit)
        self.registry.move_pointer(current_branch, merge_commit.id)
        self.staging.clear()

        result = MergeResult(
            outcome=MergeOutcome.MERGED,
            commit_id=merge_commit.id,
            current_branch=current_branch,
            given_branch=given_branch,
            split_point=split_id,
            files=plan,
        )
        if result.has_conflict:
            logger.debug("Merge conflicts in: %s", ", ".join(result.conflicts))
        return result

    def _fast_forward(self, current_branch: str, given_branch: str,
                      current: Commit, given: Commit) -> MergeResult:
        self.worktree.checkout(current, given.files)
        self.registry.move_pointer(current_branch, given.id)
        self.staging.clear()
        logger.debug("Fast-forwarded %s to %s", current_branch, given.id)
        return MergeResult(
            outcome=MergeOutcome.FAST_FORWARD,
            commit_id=given.id,
            current_branch=current_branch,
            given_branch=given_branch,
            split_point=current.id,
        )

    def _guard_untracked(self, split: Commit, current: Commit, given: Commit) -> None:
        """Abort if the merge would create or touch an untracked working file."""
        blocked = [
            path for path in self.worktree.files()
            if not current.tracks(path)
            and (given.tracks(path) or not split.tracks(path))
        ]
        if blocked:
            raise UntrackedConflict(blocked)

    def _apply(self, item: FileMerge) -> None:
        case = item.case
        if case is MergeCase.DELETED_UPSTREAM:
            self.worktree.delete(item.path)
            self.staging.record_remove(item.path)
        elif case in (MergeCase.ADDED_UPSTREAM, MergeCase.MODIFIED_UPSTREAM):
            self.worktree.write(item.path, self.blobs.get(item.given))
            self.staging.record_add(item.path, item.given)
        elif case.is_conflict:
            content = conflict_content(
                self.blobs.get(item.current) if item.current else None,
                self.blobs.get(item.given) if item.given else None,
            )
            blob_id = self.blobs.put(content)
            self.worktree.write(item.path, content)
            self.staging.record_add(item.path, blob_id)
        else:
            return
        logger.debug("%s: %s", item.path, case.value)
