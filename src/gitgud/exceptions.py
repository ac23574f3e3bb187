"""GitGud exception hierarchy.

All GitGud-specific exceptions inherit from GitGudError, which is a
ValueError: every failure the tree reports is an invalid argument from
the caller's point of view.
"""


class GitGudError(ValueError):
    """Base exception for all GitGud errors."""


class SelfReferenceError(GitGudError):
    """Raised when a commit is linked to itself as parent or child."""

    def __init__(self, commit_id: int, relation: str) -> None:
        self.commit_id = commit_id
        self.relation = relation
        super().__init__(f"Commit {commit_id} cannot be its own {relation}")


class CommitNotFoundError(GitGudError):
    """Raised when a commit id lookup fails."""

    def __init__(self, commit_id: int) -> None:
        self.commit_id = commit_id
        super().__init__(f"Commit not found: {commit_id}")


class BranchNotFoundError(GitGudError):
    """Raised when a branch id lookup fails."""

    def __init__(self, branch_id: int) -> None:
        self.branch_id = branch_id
        super().__init__(f"Branch not found: {branch_id}")


class LinearityError(GitGudError):
    """Raised when a single-parent commit targets a commit that already has a child.

    History stays linear unless it is explicitly branched or merged.
    """

    def __init__(self, commit_id: int) -> None:
        self.commit_id = commit_id
        super().__init__(
            f"Commit {commit_id} already has a child. "
            f"Create a branch and check it out, or merge, instead."
        )


class LinkNotFoundError(GitGudError):
    """Raised when removing a parent/child link that does not exist."""

    def __init__(self, commit_id: int, link_id: int, relation: str) -> None:
        self.commit_id = commit_id
        self.link_id = link_id
        self.relation = relation
        super().__init__(f"Commit {commit_id} has no {relation} {link_id}")


class DuplicateCommitError(GitGudError):
    """Raised when an explicit commit id was already handed out by the tree."""

    def __init__(self, commit_id: int) -> None:
        self.commit_id = commit_id
        super().__init__(f"Commit id already used: {commit_id}")


class IdAllocationError(GitGudError):
    """Raised when an id cannot be claimed or released."""


class MergeError(GitGudError):
    """Base exception for all merge errors."""


class NothingToMergeError(MergeError):
    """Raised when both sides of a merge are the same commit."""

    def __init__(self, commit_id: int) -> None:
        self.commit_id = commit_id
        super().__init__(f"Nothing to merge: both sides are commit {commit_id}")


class TreeIntegrityError(GitGudError):
    """Raised when the commit graph violates one of its invariants."""
