"""
History — Walks over the commit DAG

Edges point from a commit to its parents (first parent, then merge
parent), resolved by id through the CommitStore. All walks are
iterative so long histories never touch the recursion limit.
"""

from collections import deque
from typing import Iterator, Optional, Set, Tuple

from .objects import Commit, CommitStore


def parents_of(store: CommitStore, commit_id: str) -> Tuple[str, ...]:
    """Parent ids of a commit: none for the root, two for a merge."""
    return store.get(commit_id).parents


def first_parent_history(store: CommitStore, start: str) -> Iterator[Commit]:
    """Commits from start back to the root, following first parents only."""
    commit_id: Optional[str] = start
    while commit_id:
        commit = store.get(commit_id)
        yield commit
        commit_id = commit.parent


def breadth_first(store: CommitStore, start: str) -> Iterator[str]:
    """Ids reachable from start in breadth-first visit order, each once."""
    visited: Set[str] = set()
    queue = deque([start])
    while queue:
        commit_id = queue.popleft()
        if commit_id in visited:
            continue
        visited.add(commit_id)
        yield commit_id
        queue.extend(parents_of(store, commit_id))


def ancestors(store: CommitStore, start: str) -> Set[str]:
    """start plus every commit reachable through parent edges."""
    return set(breadth_first(store, start))


def find_split_point(store: CommitStore, current_tip: str, given_tip: str) -> Optional[str]:
    """
    Common ancestor used as the merge base.

    Collects everything reachable from current_tip, then walks given_tip
    breadth-first and returns the first id already in that set. With
    several merge bases (criss-cross histories) this is the first one by
    visit order, not necessarily the most recent.
    """
    current_side = ancestors(store, current_tip)
    for commit_id in breadth_first(store, given_tip):
        if commit_id in current_side:
            return commit_id
    return None

