"""
Tests for the merge engine

Validates:
- Per-file classification rules and their precedence
- Conflict file layout
- Preconditions and fast paths (already merged, fast-forward)
- Untracked-file guard leaves everything untouched
- Merge commits carry both parents and the merged file table
"""

import pytest

from sprig.core.errors import (
    AlreadyAncestor, NoSuchBranch, SelfMerge, UncommittedChanges, UntrackedConflict,
)
from sprig.core.merge import MergeCase, MergeOutcome, classify, conflict_content


class TestClassify:
    """Rules are evaluated in order; first match wins."""

    @pytest.mark.parametrize("split,current,given,expected", [
        ("s", "s", None, MergeCase.DELETED_UPSTREAM),
        (None, None, "g", MergeCase.ADDED_UPSTREAM),
        ("s", "s", "g", MergeCase.MODIFIED_UPSTREAM),
        ("s", "c", "c", MergeCase.SAME),
        ("s", None, None, MergeCase.SAME),
        (None, "x", "x", MergeCase.SAME),
        ("s", "c", "s", MergeCase.KEEP_CURRENT),
        (None, "c", None, MergeCase.KEEP_CURRENT),
        ("s", None, "s", MergeCase.KEEP_CURRENT),
        ("s", "c", "g", MergeCase.CONFLICT_MODIFIED),
        (None, "c", "g", MergeCase.CONFLICT_ADDED),
        ("s", None, "g", MergeCase.CONFLICT_DELETED_LOCALLY),
        ("s", "c", None, MergeCase.CONFLICT_DELETED_UPSTREAM),
    ])
    def test_rules(self, split, current, given, expected):
        assert classify(split, current, given) is expected

    def test_conflict_flag(self):
        assert MergeCase.CONFLICT_ADDED.is_conflict
        assert not MergeCase.KEEP_CURRENT.is_conflict

    def test_conflict_content_layout(self):
        assert conflict_content(b"mine", b"theirs") == (
            b"<<<<<<< HEAD\nmine\n=======\ntheirs\n>>>>>>>\n"
        )

    def test_conflict_content_missing_side(self):
        assert conflict_content(b"mine", None) == b"<<<<<<< HEAD\nmine\n=======\n\n>>>>>>>\n"


class TestMergePreconditions:

    def test_uncommitted_changes(self, sprig_factory):
        repo = sprig_factory.repo
        repo.branch("other")
        sprig_factory.stage({"a.txt": "pending"})
        with pytest.raises(UncommittedChanges):
            repo.merge("other")

    def test_no_such_branch(self, repo):
        with pytest.raises(NoSuchBranch):
            repo.merge("ghost")

    def test_self_merge(self, repo):
        with pytest.raises(SelfMerge):
            repo.merge("main")

    def test_given_is_ancestor(self, sprig_factory):
        repo = sprig_factory.repo
        repo.branch("old")
        sprig_factory.commit("ahead", {"a.txt": "1"})
        tip = repo.refs.head_tip()

        with pytest.raises(AlreadyAncestor):
            repo.merge("old")
        assert repo.refs.head_tip() == tip


class TestFastForward:

    def test_fast_forward_moves_branch_and_tree(self, sprig_factory):
        repo = sprig_factory.repo
        sprig_factory.commit("base", {"a.txt": "a", "old.txt": "old"})
        repo.branch("feature")
        repo.switch("feature")
        feature_tip = sprig_factory.commit("feature work", {"b.txt": "b", "old.txt": None}).id
        repo.switch("main")
        stored = len(repo.commits.ids())

        result = repo.merge("feature")

        assert result.outcome is MergeOutcome.FAST_FORWARD
        assert not result.has_conflict
        assert len(repo.commits.ids()) == stored
        assert repo.refs.tip_of("main") == feature_tip
        assert sprig_factory.read("b.txt") == "b"
        assert not sprig_factory.exists("old.txt")
        assert repo.staging.is_empty()


class TestThreeWayMerge:

    def test_clean_merge_combines_both_sides(self, sprig_factory):
        repo = sprig_factory.repo
        sprig_factory.diverge(
            base={"shared.txt": "base", "doomed.txt": "d", "mine.txt": "m"},
            current={"mine.txt": "m2"},
            given={"shared.txt": "theirs", "doomed.txt": None, "added.txt": "new"},
        )
        current_tip = repo.refs.tip_of("main")
        given_tip = repo.refs.tip_of("other")

        result = repo.merge("other")

        assert result.outcome is MergeOutcome.MERGED
        assert not result.has_conflict
        merge_commit = repo.head_commit()
        assert merge_commit.id == result.commit_id
        assert merge_commit.parents == (current_tip, given_tip)
        assert merge_commit.message == "Merged other into main."
        assert sorted(merge_commit.files) == ["added.txt", "mine.txt", "shared.txt"]

        assert sprig_factory.read("shared.txt") == "theirs"
        assert sprig_factory.read("added.txt") == "new"
        assert sprig_factory.read("mine.txt") == "m2"
        assert not sprig_factory.exists("doomed.txt")
        assert repo.staging.is_empty()

    def test_conflict_writes_markers_and_still_commits(self, sprig_factory):
        repo = sprig_factory.repo
        sprig_factory.diverge(
            base={"a.txt": "base"},
            current={"a.txt": "main"},
            given={"a.txt": "other"},
        )

        result = repo.merge("other")

        assert result.has_conflict
        assert result.conflicts == ["a.txt"]
        assert sprig_factory.read("a.txt") == "<<<<<<< HEAD\nmain\n=======\nother\n>>>>>>>\n"
        head = repo.head_commit()
        assert head.is_merge
        assert repo.blobs.get(head.files["a.txt"]) == sprig_factory.path("a.txt").read_bytes()

    def test_deleted_locally_modified_upstream(self, sprig_factory):
        repo = sprig_factory.repo
        sprig_factory.diverge(
            base={"a.txt": "base"},
            current={"a.txt": None, "keep.txt": "k"},
            given={"a.txt": "changed"},
        )
        result = repo.merge("other")
        assert result.conflicts == ["a.txt"]
        assert sprig_factory.read("a.txt") == "<<<<<<< HEAD\n\n=======\nchanged\n>>>>>>>\n"

    def test_result_files_cover_union(self, sprig_factory):
        repo = sprig_factory.repo
        sprig_factory.diverge(
            base={"a.txt": "a"},
            current={"c.txt": "c"},
            given={"g.txt": "g"},
        )
        result = repo.merge("other")
        cases = {f.path: f.case for f in result.files}
        assert cases == {
            "a.txt": MergeCase.SAME,
            "c.txt": MergeCase.KEEP_CURRENT,
            "g.txt": MergeCase.ADDED_UPSTREAM,
        }

    def test_untracked_file_blocks_merge(self, sprig_factory):
        """Nothing moves when an untracked file is in the way."""
        repo = sprig_factory.repo
        sprig_factory.diverge(
            base={"a.txt": "base"},
            current={"c.txt": "c"},
            given={"new.txt": "theirs"},
        )
        sprig_factory.write("new.txt", "mine")
        tip = repo.refs.head_tip()

        with pytest.raises(UntrackedConflict) as exc_info:
            repo.merge("other")

        assert exc_info.value.paths == ["new.txt"]
        assert repo.refs.head_tip() == tip
        assert sprig_factory.read("new.txt") == "mine"
        assert repo.staging.is_empty()

    def test_untracked_file_new_since_split_blocks_merge(self, sprig_factory):
        """A stray file neither side tracks and the split never had still stops the merge."""
        repo = sprig_factory.repo
        sprig_factory.diverge(
            base={"a.txt": "base"},
            current={"c.txt": "c"},
            given={"g.txt": "g"},
        )
        sprig_factory.write("scratch.txt", "notes")
        tip = repo.refs.head_tip()

        with pytest.raises(UntrackedConflict) as exc_info:
            repo.merge("other")

        assert exc_info.value.paths == ["scratch.txt"]
        assert repo.refs.head_tip() == tip
        assert not sprig_factory.exists("g.txt")
        assert sprig_factory.read("scratch.txt") == "notes"

    def test_added_on_both_sides(self, sprig_factory):
        repo = sprig_factory.repo
        sprig_factory.diverge(
            base={"a.txt": "a"},
            current={"new.txt": "mine"},
            given={"new.txt": "theirs"},
        )

        result = repo.merge("other")

        cases = {f.path: f.case for f in result.files}
        assert cases["new.txt"] is MergeCase.CONFLICT_ADDED
        assert result.conflicts == ["new.txt"]
        assert sprig_factory.read("new.txt") == "<<<<<<< HEAD\nmine\n=======\ntheirs\n>>>>>>>\n"
        assert repo.head_commit().is_merge

    def test_modified_locally_deleted_upstream(self, sprig_factory):
        repo = sprig_factory.repo
        sprig_factory.diverge(
            base={"a.txt": "base", "keep.txt": "k"},
            current={"a.txt": "main"},
            given={"a.txt": None},
        )

        result = repo.merge("other")

        cases = {f.path: f.case for f in result.files}
        assert cases["a.txt"] is MergeCase.CONFLICT_DELETED_UPSTREAM
        assert result.conflicts == ["a.txt"]
        expected = "<<<<<<< HEAD\nmain\n=======\n\n>>>>>>>\n"
        assert sprig_factory.read("a.txt") == expected
        head = repo.head_commit()
        assert repo.blobs.get(head.files["a.txt"]) == expected.encode()

    def test_merge_then_log_shows_merge_parents(self, sprig_factory):
        repo = sprig_factory.repo
        sprig_factory.diverge(base={"a.txt": "a"}, current={"c.txt": "c"}, given={"g.txt": "g"})
        repo.merge("other")
        log = repo.log()
        assert log[0].is_merge
        assert [c.message for c in log] == [
            "Merged other into main.", "current side", "base", "initial commit",
        ]
