"""Commit domain model for GitGud.

Commit is the mutable graph node owned by a GitTree. Its parent and child
links are plain commit ids, resolved through the owning tree.
CommitInfo is the read-only snapshot handed to renderers and callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from gitgud.exceptions import LinkNotFoundError, SelfReferenceError


class CommitInfo(BaseModel):
    """SDK-facing commit snapshot.

    Not linked to the tree -- mutating the tree afterwards does not
    update an existing snapshot.
    """

    model_config = {"frozen": True}

    commit_id: int
    branch_id: int
    parents: list[int] = []
    children: list[int] = []
    is_merge: bool = False
    is_new_branch: bool = False
    is_head: bool = False
    tip_of: list[int] = []

    def __str__(self) -> str:
        return f"{self.commit_id} (branch {self.branch_id})"

    def pprint(self, *, file: Any = None) -> None:
        """Pretty-print this snapshot using rich formatting."""
        from gitgud.formatting import pprint_commit_info

        pprint_commit_info(self, file=file)


@dataclass(eq=False)
class Commit:
    """A node of the history DAG.

    Each commit has a unique id within its tree and records the branch it
    was created on. Links are added one side at a time; keeping both sides
    in step is the owning GitTree's job.
    """

    commit_id: int
    branch_id: int
    parents: list[int] = field(default_factory=list, init=False)
    children: list[int] = field(default_factory=list, init=False)
    # Branch of each parent at link time, parallel to ``parents``.
    _parent_branches: list[int] = field(default_factory=list, init=False, repr=False)

    def get_id(self) -> int:
        return self.commit_id

    def get_branch(self) -> int:
        return self.branch_id

    @property
    def num_parents(self) -> int:
        return len(self.parents)

    @property
    def num_children(self) -> int:
        return len(self.children)

    def get_parents(self) -> list[int]:
        """The live parent id list, for traversal by the owning tree."""
        return self.parents

    def get_children(self) -> list[int]:
        """The live child id list, for traversal by the owning tree."""
        return self.children

    def is_merge_commit(self) -> bool:
        return len(self.parents) >= 2

    def is_new_branch(self) -> bool:
        """True if no parent was on this commit's branch.

        The root commit (no parents) is the start of its branch, so it
        counts as a new branch.
        """
        return self.branch_id not in self._parent_branches

    # ------------------------------------------------------------------
    # Link primitives
    # ------------------------------------------------------------------

    def add_parent(self, parent: Commit) -> None:
        """Add ``parent`` as a parent. Does NOT update the parent's children.

        Raises:
            SelfReferenceError: If ``parent`` is this commit.
        """
        if parent is self or parent.commit_id == self.commit_id:
            raise SelfReferenceError(self.commit_id, "parent")
        self.parents.append(parent.commit_id)
        self._parent_branches.append(parent.branch_id)

    def add_child(self, child: Commit) -> None:
        """Add ``child`` as a child. Does NOT update the child's parents.

        Raises:
            SelfReferenceError: If ``child`` is this commit.
        """
        if child is self or child.commit_id == self.commit_id:
            raise SelfReferenceError(self.commit_id, "child")
        self.children.append(child.commit_id)

    def remove_parent(self, commit_id: int) -> None:
        """Remove the first parent link with the given id.

        Raises:
            LinkNotFoundError: If no such parent exists.
        """
        try:
            index = self.parents.index(commit_id)
        except ValueError:
            raise LinkNotFoundError(self.commit_id, commit_id, "parent") from None
        del self.parents[index]
        del self._parent_branches[index]

    def remove_child(self, commit_id: int) -> None:
        """Remove the first child link with the given id.

        Raises:
            LinkNotFoundError: If no such child exists.
        """
        try:
            self.children.remove(commit_id)
        except ValueError:
            raise LinkNotFoundError(self.commit_id, commit_id, "child") from None

    # ------------------------------------------------------------------
    # Snapshots and display
    # ------------------------------------------------------------------

    def to_info(self, *, is_head: bool = False, tip_of: list[int] | None = None) -> CommitInfo:
        return CommitInfo(
            commit_id=self.commit_id,
            branch_id=self.branch_id,
            parents=list(self.parents),
            children=list(self.children),
            is_merge=self.is_merge_commit(),
            is_new_branch=self.is_new_branch(),
            is_head=is_head,
            tip_of=sorted(tip_of or []),
        )

    def pprint(self, *, file: Any = None) -> None:
        """Pretty-print this commit using rich formatting.

        Head and branch-tip markers are only known to the owning tree;
        use ``GitTree.pprint()`` for the full picture.
        """
        self.to_info().pprint(file=file)

    def __repr__(self) -> str:
        return (
            f"Commit(id={self.commit_id}, branch={self.branch_id}, "
            f"parents={self.parents}, children={self.children})"
        )
