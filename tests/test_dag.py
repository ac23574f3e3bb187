"""Tests for DAG utilities -- ancestors, merge base, ordering, verification.

Most tests go through GitTree so the arena is built the normal way; the
verify() tests corrupt an arena by hand to check each invariant.
"""

from __future__ import annotations

import pytest

from gitgud import Commit, CommitNotFoundError, GitTree, TreeIntegrityError
from gitgud.operations.dag import (
    find_merge_base,
    first_parent_chain,
    get_all_ancestors,
    is_ancestor,
    topological_order,
    verify,
)


@pytest.fixture
def merged_tree(forked_tree: GitTree) -> GitTree:
    r"""0 -- 1 ------ 3 -- 4   (branch 0)
              \    /
               2 -'         (branch 1)
    """
    forked_tree.merge(1)
    forked_tree.add_commit()
    return forked_tree


def _arena(*edges: tuple[int, int], branches: dict[int, int] | None = None) -> dict[int, Commit]:
    """Build a raw arena from (parent, child) edges, linking both sides."""
    branches = branches or {}
    ids = sorted({i for e in edges for i in e} or {0})
    commits = {i: Commit(i, branches.get(i, 0)) for i in ids}
    for parent, child in edges:
        commits[child].add_parent(commits[parent])
        commits[parent].add_child(commits[child])
    return commits


class TestAncestors:
    def test_ancestors_include_self(self, linear_tree: GitTree) -> None:
        assert linear_tree.ancestors(2) == {0, 1, 2}

    def test_ancestors_follow_every_parent(self, merged_tree: GitTree) -> None:
        assert merged_tree.ancestors(4) == {0, 1, 2, 3, 4}
        assert merged_tree.ancestors(2) == {0, 1, 2}

    def test_ancestors_stop_at(self, merged_tree: GitTree) -> None:
        commits = {c.commit_id: c for c in merged_tree}
        assert get_all_ancestors(4, commits, stop_at={3}) == {3, 4}

    def test_ancestors_of_missing_commit(self, tree: GitTree) -> None:
        with pytest.raises(CommitNotFoundError):
            tree.ancestors(12)

    def test_is_ancestor(self, merged_tree: GitTree) -> None:
        assert merged_tree.is_ancestor(2, 4)
        assert merged_tree.is_ancestor(4, 4)
        assert not merged_tree.is_ancestor(4, 2)
        assert not merged_tree.is_ancestor(3, 2)

    def test_is_ancestor_missing(self, merged_tree: GitTree) -> None:
        commits = {c.commit_id: c for c in merged_tree}
        with pytest.raises(CommitNotFoundError):
            is_ancestor(commits, 99, 4)


class TestMergeBase:
    def test_merge_base_of_diverged_commits(self, forked_tree: GitTree) -> None:
        assert forked_tree.merge_base(1, 2) == 1

    def test_merge_base_after_merge(self, merged_tree: GitTree) -> None:
        assert merged_tree.merge_base(4, 2) == 2

    def test_merge_base_with_itself(self, linear_tree: GitTree) -> None:
        assert linear_tree.merge_base(3, 3) == 3

    def test_no_common_ancestor(self) -> None:
        commits = _arena((0, 1), (5, 6))
        assert find_merge_base(commits, 1, 6) is None


class TestOrdering:
    def test_first_parent_chain(self, merged_tree: GitTree) -> None:
        commits = {c.commit_id: c for c in merged_tree}
        assert first_parent_chain(4, commits) == [4, 3, 1, 0]
        assert first_parent_chain(2, commits) == [2, 1, 0]

    def test_first_parent_chain_missing(self) -> None:
        with pytest.raises(CommitNotFoundError):
            first_parent_chain(3, _arena((0, 1)))

    def test_topological_order_is_creation_order(self, merged_tree: GitTree) -> None:
        commits = {c.commit_id: c for c in merged_tree}
        assert topological_order(commits) == [0, 1, 2, 3, 4]

    def test_topological_order_parents_first(self) -> None:
        commits = _arena((0, 2), (2, 1), (0, 3), (1, 3))
        order = topological_order(commits)
        for cid, commit in commits.items():
            for parent in commit.parents:
                assert order.index(parent) < order.index(cid)

    def test_cycle_detected(self) -> None:
        commits = _arena((0, 1), (1, 2), (2, 1))
        with pytest.raises(TreeIntegrityError, match="Cycle"):
            topological_order(commits)


class TestVerify:
    def test_valid_graph(self, merged_tree: GitTree) -> None:
        commits = {c.commit_id: c for c in merged_tree}
        verify(commits, {0: 4, 1: 3}, 4)

    def test_two_roots(self) -> None:
        with pytest.raises(TreeIntegrityError, match="one root"):
            verify(_arena((0, 1), (5, 6)), {0: 1}, 1)

    def test_id_mismatch(self) -> None:
        commits = _arena((0, 1))
        commits[1].commit_id = 7
        with pytest.raises(TreeIntegrityError, match="reports id"):
            verify(commits, {0: 1}, 1)

    def test_missing_link_target(self) -> None:
        commits = _arena((0, 1))
        commits[1].get_children().append(9)
        with pytest.raises(TreeIntegrityError, match="missing child"):
            verify(commits, {0: 1}, 1)

    def test_self_link(self) -> None:
        commits = _arena((0, 1))
        commits[1].get_children().append(1)
        with pytest.raises(TreeIntegrityError, match="itself"):
            verify(commits, {0: 1}, 1)

    def test_one_sided_parent_link(self) -> None:
        commits = _arena((0, 1), (1, 2))
        commits[0].get_children().clear()
        with pytest.raises(TreeIntegrityError, match="not reciprocal"):
            verify(commits, {0: 2}, 2)

    def test_cycle(self) -> None:
        commits = _arena((0, 1), (1, 2), (2, 3), (3, 2))
        with pytest.raises(TreeIntegrityError, match="Cycle"):
            verify(commits, {0: 3}, 3)

    def test_dangling_branch_tip(self) -> None:
        with pytest.raises(TreeIntegrityError, match="Branch 4"):
            verify(_arena((0, 1)), {0: 1, 4: 8}, 1)

    def test_dangling_head(self) -> None:
        with pytest.raises(TreeIntegrityError, match="HEAD"):
            verify(_arena((0, 1)), {0: 1}, 8)

    def test_tree_verify_checks_current_branch(self, linear_tree: GitTree) -> None:
        linear_tree._current_branch = 6
        with pytest.raises(TreeIntegrityError, match="Current branch"):
            linear_tree.verify()
