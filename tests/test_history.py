"""
Tests for commit-graph walks and split-point discovery

Histories are built directly in a CommitStore with fixed timestamps so
every id is reproducible.
"""

import pytest

from sprig.core.history import (
    ancestors, breadth_first, find_split_point, first_parent_history, parents_of,
)
from sprig.core.objects import Commit, CommitStore, initial_commit

TS = "2024-05-01T12:00:00+00:00"


@pytest.fixture
def store(tmp_path):
    return CommitStore(tmp_path / "commits")


def make(store, message, parent=None, merge_parent=None):
    commit = Commit(message, {}, parent=parent, merge_parent=merge_parent, timestamp=TS)
    store.put(commit)
    return commit.id


@pytest.fixture
def root(store):
    commit = initial_commit()
    store.put(commit)
    return commit.id


class TestLinearHistory:

    def test_first_parent_history(self, store, root):
        a = make(store, "a", root)
        b = make(store, "b", a)
        assert [c.id for c in first_parent_history(store, b)] == [b, a, root]

    def test_first_parent_skips_merge_parent(self, store, root):
        a = make(store, "a", root)
        side = make(store, "side", root)
        m = make(store, "m", a, side)
        assert [c.id for c in first_parent_history(store, m)] == [m, a, root]

    def test_split_point_on_same_line(self, store, root):
        """The older tip is the split point of two commits on one chain."""
        a = make(store, "a", root)
        b = make(store, "b", a)
        assert find_split_point(store, b, a) == a
        assert find_split_point(store, a, b) == a


class TestBranchedHistory:

    def test_parents_of(self, store, root):
        a = make(store, "a", root)
        b = make(store, "b", root)
        m = make(store, "m", a, b)
        assert parents_of(store, m) == (a, b)
        assert parents_of(store, root) == ()

    def test_breadth_first_visits_each_once(self, store, root):
        a = make(store, "a", root)
        b = make(store, "b", root)
        m = make(store, "m", a, b)
        order = list(breadth_first(store, m))
        assert order == [m, a, b, root]

    def test_ancestors_includes_start(self, store, root):
        a = make(store, "a", root)
        assert ancestors(store, a) == {a, root}

    def test_simple_fork(self, store, root):
        base = make(store, "base", root)
        left = make(store, "left", base)
        right = make(store, "right", base)
        assert find_split_point(store, left, right) == base

    def test_fork_after_merge(self, store, root):
        """A previous merge moves the split point forward."""
        base = make(store, "base", root)
        left = make(store, "left", base)
        right = make(store, "right", base)
        merged = make(store, "merged", left, right)
        right2 = make(store, "right2", right)
        assert find_split_point(store, merged, right2) == right

    def test_criss_cross_picks_first_by_visit_order(self, store, root):
        """With two merge bases, BFS order from the given tip decides."""
        a = make(store, "a", root)
        b = make(store, "b", root)
        c = make(store, "c", a, b)
        d = make(store, "d", b, a)
        assert find_split_point(store, c, d) == b
        assert find_split_point(store, d, c) == a

    def test_unrelated_histories(self, store):
        one = make(store, "one")
        two = make(store, "two")
        assert find_split_point(store, one, two) is None
