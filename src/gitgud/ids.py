"""Id allocation for GitGud.

Each GitTree owns one IdAllocator, so independent trees in the same
process never share counters.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from gitgud.exceptions import IdAllocationError


@dataclass
class IdAllocator:
    """Monotonic commit and branch id counters.

    ``first_commit_id`` / ``first_branch_id`` are the ids handed out
    first (to the root commit and root branch).
    """

    first_commit_id: int = 0
    first_branch_id: int = 0
    next_commit_id: int = field(init=False)
    next_branch_id: int = field(init=False)
    _issued_commit_ids: set[int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Restore both counters to their initial values and forget issued ids."""
        self.next_commit_id = self.first_commit_id
        self.next_branch_id = self.first_branch_id
        self._issued_commit_ids = set()

    def generate_commit_id(self) -> int:
        commit_id = self.next_commit_id
        self.next_commit_id += 1
        self._issued_commit_ids.add(commit_id)
        return commit_id

    def was_issued(self, commit_id: int) -> bool:
        """True if ``commit_id`` was generated or claimed since the last reset."""
        return commit_id in self._issued_commit_ids

    def claim_commit_id(self, commit_id: int) -> int:
        """Record a caller-supplied commit id.

        Moves the counter past ``commit_id`` so later generated ids cannot
        collide with it. Rejecting ids that were already issued is the
        caller's check (see ``was_issued``).

        Raises:
            IdAllocationError: If ``commit_id`` is negative.
        """
        if commit_id < 0:
            raise IdAllocationError(f"Commit ids must be non-negative, got {commit_id}")
        self.next_commit_id = max(self.next_commit_id, commit_id + 1)
        self._issued_commit_ids.add(commit_id)
        return commit_id

    def generate_branch_id(self) -> int:
        branch_id = self.next_branch_id
        self.next_branch_id += 1
        return branch_id

    def decrement_branch_id(self) -> int:
        """Roll back the most recent branch id allocation.

        Returns:
            The new value of the branch counter (the released id).

        Raises:
            IdAllocationError: If no branch id has been allocated past
                the root branch.
        """
        if self.next_branch_id <= self.first_branch_id + 1:
            raise IdAllocationError("No branch id allocation to roll back")
        self.next_branch_id -= 1
        return self.next_branch_id
