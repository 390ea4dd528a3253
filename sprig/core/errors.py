"""
Errors — Structured failures raised by the repository core

Every failure is a SprigError subclass with a fixed user-facing message.
The CLI prints the message and exits non-zero; the core never prints.

Informational outcomes (re-adding unchanged content, removing an already
removed file) are NOT errors. They come back as result values.
"""

from typing import Iterable, List, Optional


class SprigError(Exception):
    """Base class for all repository failures."""

    message = "Repository operation failed."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)

    @property
    def kind(self) -> str:
        """Short kind name used by callers that map errors to text."""
        return type(self).__name__


# =============================================================================
# Repository lifecycle
# =============================================================================

class NotInitialized(SprigError):
    message = "Not in an initialized Sprig directory."


class AlreadyInitialized(SprigError):
    message = "A Sprig version-control system already exists in the current directory."


# =============================================================================
# Lookup failures
# =============================================================================

class NotFound(SprigError):
    message = "Object not found."


class BlobNotFound(NotFound):
    message = "No blob with that id exists."

    def __init__(self, blob_id: str):
        self.blob_id = blob_id
        super().__init__(f"No blob with id {blob_id} exists.")


class CommitNotFound(NotFound):
    message = "No commit with that id exists."

    def __init__(self, prefix: str = ""):
        self.prefix = prefix
        super().__init__()


class BranchNotFound(NotFound):
    message = "A branch with that name does not exist."

    def __init__(self, name: str = ""):
        self.name = name
        super().__init__()


class NoSuchBranch(BranchNotFound):
    message = "No such branch exists."


class NoMatchingCommit(NotFound):
    message = "Found no commit with that message."


class Ambiguous(SprigError):
    message = "Commit id prefix is ambiguous."

    def __init__(self, prefix: str, candidates: Iterable[str] = ()):
        self.prefix = prefix
        self.candidates: List[str] = sorted(candidates)
        super().__init__(f"Commit id prefix '{prefix}' matches {len(self.candidates)} commits.")


# =============================================================================
# Branch registry
# =============================================================================

class AlreadyExists(SprigError):
    message = "A branch with that name already exists."

    def __init__(self, name: str = ""):
        self.name = name
        super().__init__()


class InvalidBranchName(SprigError):
    message = "Invalid branch name."

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Invalid branch name: '{name}'.")


class CannotDeleteActive(SprigError):
    message = "Cannot remove the current branch."


class AlreadyOnBranch(SprigError):
    message = "No need to switch to the current branch."


# =============================================================================
# Staging and commit
# =============================================================================

class FileMissing(SprigError):
    message = "File does not exist."

    def __init__(self, path: str = ""):
        self.path = path
        super().__init__()


class InvalidPath(SprigError):
    message = "Path is not a file in the working tree."

    def __init__(self, path: str = ""):
        self.path = path
        super().__init__()


class NothingToRemove(SprigError):
    message = "No reason to remove the file."

    def __init__(self, path: str = ""):
        self.path = path
        super().__init__()


class EmptyStagingArea(SprigError):
    message = "No changes added to the commit."


class EmptyMessage(SprigError):
    message = "Please enter a commit message."


# =============================================================================
# Working tree
# =============================================================================

class FileNotInCommit(SprigError):
    message = "File does not exist in that commit."

    def __init__(self, path: str = ""):
        self.path = path
        super().__init__()


class UntrackedConflict(SprigError):
    message = "There is an untracked file in the way; delete it, or add and commit it first."

    def __init__(self, paths: Iterable[str] = ()):
        self.paths: List[str] = sorted(paths)
        super().__init__()


# =============================================================================
# Merge
# =============================================================================

class UncommittedChanges(SprigError):
    message = "You have uncommitted changes."


class SelfMerge(SprigError):
    message = "Cannot merge a branch with itself."


class AlreadyAncestor(SprigError):
    message = "Given branch is an ancestor of the current branch."


# =============================================================================
# Command line
# =============================================================================

class IncorrectOperands(SprigError):
    message = "Incorrect operands."
