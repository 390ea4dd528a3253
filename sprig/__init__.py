"""
Sprig — Content-addressed version control

Snapshots, branches, three-way merge. One .sprig/ directory per project.

Usage:
    sprig init
    sprig add notes.txt
    sprig commit "Write notes"
    sprig branch feature
    sprig switch feature
    sprig merge main
    sprig log
    sprig status
    sprig config log.level DEBUG
"""

__version__ = "0.1.0"

# Core layer (data)
from .core.errors import SprigError
from .core.objects import BlobStore, Commit, CommitStore
from .core.refs import BranchRegistry
from .core.staging import RemoveOutcome, StageOutcome, StagingIndex
from .core.worktree import WorkingTree
from .core.merge import MergeCase, MergeOutcome, MergeResult

# Repository handle
from .repository import Repository, StatusReport, Modification

# Configuration
from .config import Config, ConfigManager, get_config

__all__ = [
    "__version__",
    "SprigError",
    "BlobStore", "Commit", "CommitStore",
    "BranchRegistry",
    "StageOutcome", "RemoveOutcome", "StagingIndex",
    "WorkingTree",
    "MergeCase", "MergeOutcome", "MergeResult",
    "Repository", "StatusReport", "Modification",
    "Config", "ConfigManager", "get_config",
]
