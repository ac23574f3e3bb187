"""GitTree -- the public entry point for GitGud.

Owns the commit arena, the branch-head table and HEAD, and mediates
every graph mutation so parent/child links always stay reciprocal.

Not thread-safe.  Callers sharing a tree across threads must serialize
every call with a single lock.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from gitgud.exceptions import (
    BranchNotFoundError,
    CommitNotFoundError,
    DuplicateCommitError,
    LinearityError,
    MergeError,
    NothingToMergeError,
    TreeIntegrityError,
)
from gitgud.ids import IdAllocator
from gitgud.models.commit import Commit, CommitInfo
from gitgud.models.config import TreeConfig
from gitgud.operations import dag

if TYPE_CHECKING:
    from collections.abc import Iterator

    from gitgud.models.branch import BranchInfo

logger = logging.getLogger(__name__)


class GitTree:
    """An in-memory commit DAG organised into integer-numbered branches.

    A new tree holds a single root commit on the root branch, checked out.

    Example::

        tree = GitTree()
        tree.add_commit()                 # commit 1 on branch 0
        feature = tree.branch()           # branch 1 at commit 1
        tree.checkout(feature)
        tree.add_commit()                 # commit 2 on branch 1
        tree.checkout(0)
        tree.merge(feature)               # commit 3, parents [1, 2]
    """

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def __init__(self, config: TreeConfig | None = None) -> None:
        self._config = config or TreeConfig()
        self._ids = IdAllocator(
            first_commit_id=self._config.root_commit_id,
            first_branch_id=self._config.root_branch_id,
        )
        self._commits: dict[int, Commit] = {}
        self._branch_heads: dict[int, int] = {}
        # commit id -> {branch id: tip before that commit was created}
        self._tip_journal: dict[int, dict[int, int]] = {}
        self._head: int = self._config.root_commit_id
        self._current_branch: int = self._config.root_branch_id
        self._init_root()

    def _init_root(self) -> None:
        self._ids.reset()
        branch_id = self._ids.generate_branch_id()
        root = Commit(self._ids.generate_commit_id(), branch_id)
        self._commits = {root.commit_id: root}
        self._branch_heads = {branch_id: root.commit_id}
        self._tip_journal = {}
        self._head = root.commit_id
        self._current_branch = branch_id

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> TreeConfig:
        return self._config

    @property
    def head(self) -> int:
        """Id of the checked-out commit."""
        return self._head

    @property
    def current_branch(self) -> int:
        return self._current_branch

    @property
    def num_commits(self) -> int:
        return len(self._commits)

    @property
    def num_branches(self) -> int:
        return len(self._branch_heads)

    def __len__(self) -> int:
        return len(self._commits)

    def __contains__(self, commit_id: object) -> bool:
        return commit_id in self._commits

    def __iter__(self) -> Iterator[Commit]:
        return iter(list(self._commits.values()))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_head(self) -> Commit:
        return self._commits[self._head]

    def get_current_branch(self) -> int:
        return self._current_branch

    def is_head(self, commit_id: int) -> bool:
        return commit_id == self._head

    def get_commit(self, commit_id: int) -> Commit:
        """Look up a commit by id.

        Raises:
            CommitNotFoundError: If no commit has this id.
        """
        try:
            return self._commits[commit_id]
        except KeyError:
            raise CommitNotFoundError(commit_id) from None

    def get_latest(self, branch_id: int | None = None) -> Commit:
        """Return the head commit, or the tip of ``branch_id`` if given.

        Raises:
            BranchNotFoundError: If ``branch_id`` is not a live branch.
        """
        if branch_id is None:
            return self.get_head()
        if branch_id not in self._branch_heads:
            raise BranchNotFoundError(branch_id)
        return self._commits[self._branch_heads[branch_id]]

    def get_all_branch_ids(self) -> list[int]:
        """Live branch ids, ascending. Never contains repeats."""
        return sorted(set(self._branch_heads))

    def get_all_commit_ids(self) -> list[int]:
        """Every commit id in creation order.

        Raises:
            TreeIntegrityError: If the arena ever holds a repeated id.
        """
        ids = [c.commit_id for c in self._commits.values()]
        if len(set(ids)) != len(ids):
            raise TreeIntegrityError(f"Duplicate commit ids in tree: {ids}")
        return ids

    def get_all_commits(self) -> list[Commit]:
        """Every commit in creation order.

        The list is a copy; the commits themselves must only be mutated
        through the tree.
        """
        return list(self._commits.values())

    def is_valid_commit_id(self, commit_id: int) -> bool:
        return commit_id in self._commits

    def is_valid_branch_id(self, branch_id: int) -> bool:
        return branch_id in self._branch_heads

    def tips_of(self, commit_id: int) -> list[int]:
        """Branch ids whose tip is ``commit_id``."""
        return [b for b, tip in sorted(self._branch_heads.items()) if tip == commit_id]

    def to_info(self, commit_id: int) -> CommitInfo:
        """Snapshot of a commit with its HEAD and branch-tip markers."""
        commit = self.get_commit(commit_id)
        return commit.to_info(
            is_head=self.is_head(commit_id),
            tip_of=self.tips_of(commit_id),
        )

    def list_branches(self) -> list[BranchInfo]:
        """List all branches with the current branch marked."""
        from gitgud.models.branch import BranchInfo

        return [
            BranchInfo(
                branch_id=branch_id,
                tip_id=tip,
                is_current=(branch_id == self._current_branch),
                commit_count=len(dag.first_parent_chain(tip, self._commits)),
            )
            for branch_id, tip in sorted(self._branch_heads.items())
        ]

    def log(self, commit_id: int | None = None) -> list[Commit]:
        """First-parent history from ``commit_id`` (default HEAD) to the root.

        Newest first.
        """
        start = self._head if commit_id is None else commit_id
        return [self._commits[c] for c in dag.first_parent_chain(start, self._commits)]

    def ancestors(self, commit_id: int) -> set[int]:
        """Ids of every commit reachable through parents, itself included."""
        return dag.get_all_ancestors(commit_id, self._commits)

    def is_ancestor(self, ancestor_id: int, commit_id: int) -> bool:
        return dag.is_ancestor(self._commits, ancestor_id, commit_id)

    def merge_base(self, id_a: int, id_b: int) -> int | None:
        return dag.find_merge_base(self._commits, id_a, id_b)

    def verify(self) -> None:
        """Check every graph invariant.

        Raises:
            TreeIntegrityError: On the first violation found.
        """
        dag.verify(self._commits, self._branch_heads, self._head)
        if self._current_branch not in self._branch_heads:
            raise TreeIntegrityError(
                f"Current branch {self._current_branch} is not a live branch"
            )

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------

    def add_commit(
        self,
        parent_id: int | None = None,
        *,
        commit_id: int | None = None,
    ) -> Commit:
        """Create a commit as the only child of HEAD or of ``parent_id``.

        Without ``parent_id`` the commit goes on the current branch and
        HEAD moves to it. With ``parent_id`` it goes on the parent's
        branch, and HEAD only moves if the parent was HEAD.

        A branch tip only advances when the parent was that tip.

        Args:
            parent_id: Commit to grow. Defaults to HEAD.
            commit_id: Explicit id for the new commit. Defaults to the
                next generated id.

        Returns:
            The new Commit.

        Raises:
            CommitNotFoundError: If ``parent_id`` does not exist.
            LinearityError: If the parent already has a child.
            DuplicateCommitError: If ``commit_id`` was already handed out,
                even to a commit that has since been undone.
        """
        if parent_id is None:
            parent = self.get_head()
            branch_id = self._current_branch
        else:
            parent = self.get_commit(parent_id)
            branch_id = parent.branch_id
        moves_head = parent.commit_id == self._head

        if parent.children:
            raise LinearityError(parent.commit_id)
        self._check_new_id(commit_id)

        commit = Commit(self._allocate_commit_id(commit_id), branch_id)
        self._link(parent, commit)
        self._commits[commit.commit_id] = commit
        self._tip_journal[commit.commit_id] = self._advance_tips(
            commit.commit_id, [(branch_id, parent.commit_id)]
        )
        if moves_head:
            self._head = commit.commit_id

        logger.debug(
            "commit %d on branch %d (parent %d, head %d)",
            commit.commit_id, branch_id, parent.commit_id, self._head,
        )
        self._after_mutation()
        return commit

    # ------------------------------------------------------------------
    # Branches and navigation
    # ------------------------------------------------------------------

    def branch(self, *, source: int | None = None) -> int:
        """Create a new branch but don't check it out.

        Args:
            source: Commit the branch starts at. Defaults to HEAD.

        Returns:
            The new branch id.

        Raises:
            CommitNotFoundError: If ``source`` does not exist.
        """
        branch_id = self._ids.generate_branch_id()
        tip = self._head if source is None else source
        if tip not in self._commits:
            self._ids.decrement_branch_id()
            raise CommitNotFoundError(tip)

        self._branch_heads[branch_id] = tip
        logger.debug("branch %d created at commit %d", branch_id, tip)
        self._after_mutation()
        return branch_id

    def checkout(self, branch_id: int) -> Commit:
        """Set HEAD to the tip of ``branch_id`` and make it current.

        Raises:
            BranchNotFoundError: If the branch does not exist.
        """
        if branch_id not in self._branch_heads:
            raise BranchNotFoundError(branch_id)
        self._head = self._branch_heads[branch_id]
        self._current_branch = branch_id
        logger.debug("checkout branch %d (head %d)", branch_id, self._head)
        self._after_mutation()
        return self._commits[self._head]

    def checkout_commit(self, commit_id: int) -> Commit:
        """Set HEAD to a specific commit; its branch becomes current.

        Raises:
            CommitNotFoundError: If the commit does not exist.
        """
        commit = self.get_commit(commit_id)
        self._head = commit.commit_id
        self._current_branch = commit.branch_id
        logger.debug("checkout commit %d (branch %d)", commit_id, commit.branch_id)
        self._after_mutation()
        return commit

    # ------------------------------------------------------------------
    # Merge
    # ------------------------------------------------------------------

    def merge(self, branch_id: int, *, commit_id: int | None = None) -> Commit:
        """Merge the tip of ``branch_id`` into HEAD.

        The merge commit goes on the current branch with parents
        ``[head, tip]`` and becomes HEAD. Both the current branch and
        ``branch_id`` advance to it.

        Raises:
            BranchNotFoundError: If the branch does not exist.
            MergeError: If ``branch_id`` is the current branch.
            NothingToMergeError: If the branch tip is HEAD itself.
            DuplicateCommitError: If ``commit_id`` was already handed out.
        """
        if branch_id not in self._branch_heads:
            raise BranchNotFoundError(branch_id)
        if branch_id == self._current_branch:
            raise MergeError(f"Cannot merge branch {branch_id} into itself")
        other_id = self._branch_heads[branch_id]
        if other_id == self._head:
            raise NothingToMergeError(other_id)
        self._check_new_id(commit_id)

        head_id = self._head
        commit = self._create_merge(
            self._commits[head_id],
            self._commits[other_id],
            self._current_branch,
            commit_id,
            [(self._current_branch, head_id), (branch_id, other_id)],
        )
        self._head = commit.commit_id
        logger.debug(
            "merge branch %d into %d: commit %d (parents %s)",
            branch_id, self._current_branch, commit.commit_id, commit.parents,
        )
        self._after_mutation()
        return commit

    def merge_commits(
        self,
        parent_id: int,
        other_id: int,
        *,
        commit_id: int | None = None,
    ) -> Commit:
        """Create a merge commit on ``parent_id`` merged with ``other_id``.

        The new commit goes on the parent's branch (the current branch if
        the parent is HEAD). HEAD only moves if the parent was HEAD.
        The parent's branch and ``other_id``'s branch advance if their
        tips were the respective parents.

        Raises:
            CommitNotFoundError: If either commit does not exist.
            NothingToMergeError: If both ids are the same commit.
            DuplicateCommitError: If ``commit_id`` was already handed out.
        """
        parent = self.get_commit(parent_id)
        other = self.get_commit(other_id)
        if parent_id == other_id:
            raise NothingToMergeError(parent_id)
        self._check_new_id(commit_id)

        moves_head = parent_id == self._head
        branch_id = self._current_branch if moves_head else parent.branch_id
        commit = self._create_merge(
            parent,
            other,
            branch_id,
            commit_id,
            [(branch_id, parent_id), (other.branch_id, other_id)],
        )
        if moves_head:
            self._head = commit.commit_id
        logger.debug(
            "merge commits %d and %d: commit %d on branch %d (head %d)",
            parent_id, other_id, commit.commit_id, branch_id, self._head,
        )
        self._after_mutation()
        return commit

    def _create_merge(
        self,
        parent: Commit,
        other: Commit,
        branch_id: int,
        commit_id: Optional[int],
        tip_candidates: list[tuple[int, int]],
    ) -> Commit:
        commit = Commit(self._allocate_commit_id(commit_id), branch_id)
        self._link(parent, commit)
        self._link(other, commit)
        self._commits[commit.commit_id] = commit
        self._tip_journal[commit.commit_id] = self._advance_tips(
            commit.commit_id, tip_candidates
        )
        return commit

    # ------------------------------------------------------------------
    # Undo / reset
    # ------------------------------------------------------------------

    def undo(self) -> Commit | None:
        """Remove the most recently created commit.

        Detaches it from its parents, restores any branch tip it advanced,
        and moves HEAD to its first parent if it was HEAD. Branches that
        were created at the removed commit fall back to its first parent.
        Id counters are left alone.

        Returns:
            The removed commit, or None if only the root remains.
        """
        if len(self._commits) <= 1:
            logger.debug("undo: only the root commit remains, nothing to do")
            return None

        last_id = next(reversed(self._commits))
        last = self._commits[last_id]
        # The newest commit cannot have children; anything else is corruption.
        if last.children:
            raise TreeIntegrityError(
                f"Newest commit {last_id} has children {last.children}"
            )
        fallback = last.parents[0]

        for parent_id in list(last.parents):
            self._commits[parent_id].remove_child(last_id)
        del self._commits[last_id]

        for branch_id, previous in self._tip_journal.pop(last_id, {}).items():
            if self._branch_heads.get(branch_id) == last_id:
                self._branch_heads[branch_id] = previous
        for branch_id, tip in self._branch_heads.items():
            if tip == last_id:
                self._branch_heads[branch_id] = fallback
        if self._head == last_id:
            self._head = fallback

        logger.debug("undo: removed commit %d (head %d)", last_id, self._head)
        self._after_mutation()
        return last

    def reset(self) -> None:
        """Discard all history and return to the freshly constructed state."""
        dropped = len(self._commits)
        self._init_root()
        logger.debug("reset: discarded %d commit(s)", dropped)
        self._after_mutation()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_new_id(self, commit_id: int | None) -> None:
        # ids of undone commits stay taken until reset()
        if commit_id is not None and self._ids.was_issued(commit_id):
            raise DuplicateCommitError(commit_id)

    def _allocate_commit_id(self, commit_id: int | None) -> int:
        if commit_id is None:
            return self._ids.generate_commit_id()
        return self._ids.claim_commit_id(commit_id)

    @staticmethod
    def _link(parent: Commit, child: Commit) -> None:
        """Add a parent -> child edge on both endpoints."""
        child.add_parent(parent)
        parent.add_child(child)

    def _advance_tips(
        self, commit_id: int, candidates: list[tuple[int, int]]
    ) -> dict[int, int]:
        """Move each (branch, parent) tip to ``commit_id`` if the branch sits on that parent.

        Returns the previous tips of the branches that moved.
        """
        moved: dict[int, int] = {}
        for branch_id, parent_id in candidates:
            if branch_id in moved:
                continue
            if self._branch_heads.get(branch_id) == parent_id:
                moved[branch_id] = parent_id
                self._branch_heads[branch_id] = commit_id
        return moved

    def _after_mutation(self) -> None:
        if not self._config.verify_invariants:
            return
        try:
            self.verify()
        except TreeIntegrityError:
            logger.warning("Invariant check failed after mutation", exc_info=True)
            raise

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def pprint(self, *, file: Any = None) -> None:
        """Pretty-print the whole tree using rich formatting."""
        from gitgud.formatting import pprint_tree

        pprint_tree(self, file=file)

    def __repr__(self) -> str:
        return (
            f"GitTree(commits={len(self._commits)}, branches={len(self._branch_heads)}, "
            f"head={self._head}, branch={self._current_branch})"
        )
