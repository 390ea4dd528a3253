"""
Object Store — Content-addressed blobs and commits

Blobs and commits are immutable. Once written, never modified.
Identity is the SHA-1 of the content, so identical content collapses
to one stored copy and every ancestor's id is baked into its descendants.

Layout:
    .sprig/blobs/<sha1>     raw file bytes
    .sprig/commits/<sha1>   orjson commit record
"""

import hashlib
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import orjson

from .errors import Ambiguous, BlobNotFound, CommitNotFound

logger = logging.getLogger(__name__)

INITIAL_MESSAGE = "initial commit"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc).isoformat()

# Commit ids and their prefixes are lowercase hex; anything else is not a key
_HEX_ID = re.compile(r"[0-9a-f]+")


def blob_id_for(content: bytes) -> str:
    """Content hash used as a blob's identity."""
    return hashlib.sha1(content).hexdigest()


def now_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class BlobStore:
    """Deduplicating store of raw file snapshots keyed by content hash."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.mkdir(parents=True, exist_ok=True)

    def put(self, content: bytes) -> str:
        """Store content if absent. Returns its blob id."""
        blob_id = blob_id_for(content)
        target = self.path / blob_id
        if not target.exists():
            target.write_bytes(content)
            logger.debug("Stored blob %s (%d bytes)", blob_id, len(content))
        return blob_id

    def get(self, blob_id: str) -> bytes:
        target = self.path / blob_id
        if not target.is_file():
            raise BlobNotFound(blob_id)
        return target.read_bytes()

    def contains(self, blob_id: str) -> bool:
        return (self.path / blob_id).is_file()

    def count(self) -> int:
        return sum(1 for p in self.path.iterdir() if p.is_file())


@dataclass
class Commit:
    """
    Snapshot of the whole tracked file table plus history metadata.

    parent and merge_parent are commit ids, resolved through CommitStore.
    merge_parent is set only on merge commits.
    """
    message: str
    files: Dict[str, str] = field(default_factory=dict)
    parent: Optional[str] = None
    merge_parent: Optional[str] = None
    timestamp: str = field(default_factory=now_timestamp)
    id: str = field(default="")

    def __post_init__(self):
        if not self.id:
            self.id = self.compute_id()

    def compute_id(self) -> str:
        rendering = orjson.dumps(
            [
                self.message,
                self.timestamp,
                self.parent or "",
                self.files,
                self.merge_parent or "",
            ],
            option=orjson.OPT_SORT_KEYS,
        )
        return hashlib.sha1(rendering).hexdigest()

    @property
    def is_merge(self) -> bool:
        return self.merge_parent is not None

    @property
    def parents(self) -> Tuple[str, ...]:
        """Parent ids in order: first parent, then merge parent."""
        return tuple(p for p in (self.parent, self.merge_parent) if p)

    def tracks(self, path: str) -> bool:
        return path in self.files

    def blob_for(self, path: str) -> Optional[str]:
        return self.files.get(path)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "message": self.message,
            "timestamp": self.timestamp,
            "parent": self.parent,
            "merge_parent": self.merge_parent,
            "files": self.files,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> 'Commit':
        return cls(
            message=d["message"],
            files=dict(d.get("files", {})),
            parent=d.get("parent"),
            merge_parent=d.get("merge_parent"),
            timestamp=d["timestamp"],
            id=d.get("id", ""),
        )


def initial_commit() -> Commit:
    """Parent-less root commit with an empty file table."""
    return Commit(message=INITIAL_MESSAGE, files={}, timestamp=EPOCH)


class CommitStore:
    """
    Commits keyed by their computed id.

    Records are small, so reads go through an in-memory cache.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.mkdir(parents=True, exist_ok=True)
        self._cache: Dict[str, Commit] = {}

    def put(self, commit: Commit) -> str:
        """Persist a commit. Re-storing an identical commit is a no-op."""
        target = self.path / commit.id
        if not target.exists():
            target.write_bytes(orjson.dumps(commit.to_dict(), option=orjson.OPT_SORT_KEYS))
            logger.debug("Stored commit %s (%d files)", commit.id, len(commit.files))
        self._cache[commit.id] = commit
        return commit.id

    def get(self, commit_id: str) -> Commit:
        if commit_id in self._cache:
            return self._cache[commit_id]
        if not self.contains(commit_id):
            raise CommitNotFound(commit_id)
        target = self.path / commit_id
        commit = Commit.from_dict(orjson.loads(target.read_bytes()))
        self._cache[commit_id] = commit
        return commit

    def contains(self, commit_id: str) -> bool:
        return bool(commit_id and _HEX_ID.fullmatch(commit_id)) and (self.path / commit_id).is_file()

    def ids(self) -> List[str]:
        return sorted(p.name for p in self.path.iterdir() if p.is_file())

    def resolve_prefix(self, prefix: str) -> str:
        """
        Expand an abbreviated commit id.

        Raises:
            CommitNotFound: no stored id starts with prefix
            Ambiguous: more than one stored id starts with prefix
        """
        prefix = prefix.strip().lower()
        if not _HEX_ID.fullmatch(prefix):
            raise CommitNotFound(prefix)
        if self.contains(prefix):
            return prefix

        matches = [cid for cid in self.ids() if cid.startswith(prefix)]
        if not matches:
            raise CommitNotFound(prefix)
        if len(matches) > 1:
            raise Ambiguous(prefix, matches)
        return matches[0]

    def all(self) -> Iterator[Commit]:
        for commit_id in self.ids():
            yield self.get(commit_id)

    def verify_integrity(self) -> bool:
        """Verify every stored record still hashes to its own id."""
        for commit_id in self.ids():
            record = orjson.loads((self.path / commit_id).read_bytes())
            record.pop("id", None)
            if Commit.from_dict(record).id != commit_id:
                return False
        return True
