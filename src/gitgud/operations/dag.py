"""DAG utilities for GitGud -- ancestor queries, merge base, invariant checks.

These utilities operate on a tree's commit arena (a mapping of commit id
to Commit), following every parent link so merge commits are walked
through both sides.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

from gitgud.exceptions import CommitNotFoundError, TreeIntegrityError

if TYPE_CHECKING:
    from gitgud.models.commit import Commit


def _bfs_walk(
    start: int,
    commits: Mapping[int, Commit],
    *,
    stop_at: set[int] | None = None,
) -> Iterator[int]:
    """BFS walk from a start id, yielding each visited commit id once.

    Args:
        start: Starting commit id.
        commits: The commit arena.
        stop_at: Optional set of known-visited ids. When a commit is in
            this set, it is yielded but its parents are not enqueued.

    Raises:
        CommitNotFoundError: If ``start`` is not in the arena.
    """
    if start not in commits:
        raise CommitNotFoundError(start)
    visited: set[int] = set()
    queue: deque[int] = deque([start])
    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited.add(current)
        yield current
        if stop_at is not None and current in stop_at:
            continue
        commit = commits.get(current)
        if commit is None:
            continue
        for parent_id in commit.parents:
            if parent_id not in visited:
                queue.append(parent_id)


def get_all_ancestors(
    commit_id: int,
    commits: Mapping[int, Commit],
    *,
    stop_at: set[int] | None = None,
) -> set[int]:
    """Get all ancestor ids of a commit (including itself)."""
    return set(_bfs_walk(commit_id, commits, stop_at=stop_at))


def is_ancestor(
    commits: Mapping[int, Commit],
    potential_ancestor: int,
    commit_id: int,
) -> bool:
    """Check if potential_ancestor is reachable from commit_id.

    A commit counts as its own ancestor. Stops as soon as the target is
    found.
    """
    if potential_ancestor not in commits:
        raise CommitNotFoundError(potential_ancestor)
    for c in _bfs_walk(commit_id, commits):
        if c == potential_ancestor:
            return True
    return False


def find_merge_base(
    commits: Mapping[int, Commit],
    id_a: int,
    id_b: int,
) -> int | None:
    """Find the best common ancestor (merge base) of two commits.

    Walks both ancestor chains using BFS and returns the first
    intersection. Returns None if the commits share no ancestor.
    """
    ancestors_a = get_all_ancestors(id_a, commits)

    for c in _bfs_walk(id_b, commits):
        if c in ancestors_a:
            return c

    return None


def first_parent_chain(commit_id: int, commits: Mapping[int, Commit]) -> list[int]:
    """Ids from ``commit_id`` back to the root along first parents (newest first)."""
    if commit_id not in commits:
        raise CommitNotFoundError(commit_id)
    chain: list[int] = []
    current: int | None = commit_id
    while current is not None:
        chain.append(current)
        parents = commits[current].parents
        current = parents[0] if parents else None
    return chain


def topological_order(commits: Mapping[int, Commit]) -> list[int]:
    """Order commit ids so every parent precedes its children.

    Ties are broken by arena order, so a tree built by GitTree comes back
    in creation order.

    Raises:
        TreeIntegrityError: If the parent links form a cycle.
    """
    pending = {cid: len(c.parents) for cid, c in commits.items()}
    ready: deque[int] = deque(cid for cid, n in pending.items() if n == 0)
    order: list[int] = []
    while ready:
        current = ready.popleft()
        order.append(current)
        for child_id in commits[current].children:
            if child_id not in pending:
                continue
            pending[child_id] -= 1
            if pending[child_id] == 0:
                ready.append(child_id)
    if len(order) != len(pending):
        stuck = sorted(set(pending) - set(order))
        raise TreeIntegrityError(f"Cycle detected among commits {stuck}")
    return order


def verify(
    commits: Mapping[int, Commit],
    branch_heads: Mapping[int, int],
    head: int,
) -> None:
    """Check every structural invariant of a commit graph.

    Raises:
        TreeIntegrityError: On the first violation found.
    """
    roots = [cid for cid, c in commits.items() if not c.parents]
    if len(roots) != 1:
        raise TreeIntegrityError(f"Expected exactly one root commit, found {roots}")

    for cid, commit in commits.items():
        if commit.commit_id != cid:
            raise TreeIntegrityError(
                f"Commit stored under id {cid} reports id {commit.commit_id}"
            )
        for relation, links in (("parent", commit.parents), ("child", commit.children)):
            if cid in links:
                raise TreeIntegrityError(f"Commit {cid} lists itself as {relation}")
            for link in links:
                if link not in commits:
                    raise TreeIntegrityError(
                        f"Commit {cid} references missing {relation} {link}"
                    )
        for parent_id in commit.parents:
            if commit.parents.count(parent_id) != commits[parent_id].children.count(cid):
                raise TreeIntegrityError(
                    f"Link {parent_id} -> {cid} is not reciprocal"
                )
        for child_id in commit.children:
            if cid not in commits[child_id].parents:
                raise TreeIntegrityError(f"Link {cid} -> {child_id} is not reciprocal")

    topological_order(commits)

    for branch_id, tip in branch_heads.items():
        if tip not in commits:
            raise TreeIntegrityError(f"Branch {branch_id} points at missing commit {tip}")
    if head not in commits:
        raise TreeIntegrityError(f"HEAD points at missing commit {head}")
