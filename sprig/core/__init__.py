"""
Core — Data layer for Sprig

Contains the foundational structures:
- Objects: content-addressed blobs and immutable commits
- Refs: branch pointers and HEAD
- Staging: pending additions and removals
- Worktree: files on disk and checkout
- History: commit-graph walks and split-point search
- Merge: three-way merge engine
- Errors: failure taxonomy
"""

from .errors import SprigError, NotFound, UntrackedConflict
from .objects import BlobStore, Commit, CommitStore, blob_id_for, initial_commit
from .refs import BranchRegistry, validate_branch_name
from .staging import RemoveOutcome, StageOutcome, StagingIndex
from .worktree import WorkingTree, normalize_path
from .history import ancestors, breadth_first, find_split_point, first_parent_history
from .merge import MergeCase, MergeEngine, MergeOutcome, MergeResult, classify, plan_merge

__all__ = [
    "SprigError", "NotFound", "UntrackedConflict",
    "BlobStore", "Commit", "CommitStore", "blob_id_for", "initial_commit",
    "BranchRegistry", "validate_branch_name",
    "RemoveOutcome", "StageOutcome", "StagingIndex",
    "WorkingTree", "normalize_path",
    "ancestors", "breadth_first", "find_split_point", "first_parent_history",
    "MergeCase", "MergeEngine", "MergeOutcome", "MergeResult", "classify", "plan_merge",
]
