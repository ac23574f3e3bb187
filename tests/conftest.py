"""Shared test fixtures for GitGud.

Provides fresh, linear and forked GitTree fixtures plus small helpers.
"""

import pytest

from gitgud import GitTree, TreeConfig


@pytest.fixture
def tree() -> GitTree:
    """A fresh tree with invariant checking after every mutation."""
    return make_tree()


@pytest.fixture
def linear_tree() -> GitTree:
    """Root plus three linear commits on branch 0 (ids 0..3, head 3)."""
    t = make_tree()
    populate_tree(t, 3)
    return t


@pytest.fixture
def forked_tree() -> GitTree:
    r"""Branch 1 grown from commit 1, with HEAD back on branch 0.

    0 -- 1             (branch 0 tip, head)
          \
           2           (branch 1 tip)
    """
    t = make_tree()
    t.add_commit()
    feature = t.branch()
    t.checkout(feature)
    t.add_commit()
    t.checkout(0)
    return t


# ------------------------------------------------------------------
# Shared test helpers
# ------------------------------------------------------------------

def make_tree(**kwargs) -> GitTree:
    """Create a GitTree that re-verifies itself after every mutation."""
    kwargs.setdefault("verify_invariants", True)
    return GitTree(TreeConfig(**kwargs))


def populate_tree(t: GitTree, n: int = 3) -> list[int]:
    """Add n linear commits at HEAD and return their ids."""
    return [t.add_commit().commit_id for _ in range(n)]


def tree_shape(t: GitTree) -> tuple:
    """Structural fingerprint of a tree, for before/after comparisons."""
    return (
        [(c.commit_id, c.branch_id, list(c.parents), list(c.children)) for c in t],
        {b.branch_id: b.tip_id for b in t.list_branches()},
        t.head,
        t.current_branch,
    )
