"""GitGud: an in-memory model of a version-control history graph.

Commits form a DAG organised into integer-numbered branches; a GitTree
creates, links and navigates them.
"""

from gitgud._version import __version__

# Core entry point
from gitgud.tree import GitTree

# Models
from gitgud.models.branch import BranchInfo
from gitgud.models.commit import Commit, CommitInfo
from gitgud.models.config import TreeConfig

# Id allocation
from gitgud.ids import IdAllocator

# Exceptions
from gitgud.exceptions import (
    BranchNotFoundError,
    CommitNotFoundError,
    DuplicateCommitError,
    GitGudError,
    IdAllocationError,
    LinearityError,
    LinkNotFoundError,
    MergeError,
    NothingToMergeError,
    SelfReferenceError,
    TreeIntegrityError,
)

__all__ = [
    "__version__",
    "GitTree",
    "BranchInfo",
    "Commit",
    "CommitInfo",
    "TreeConfig",
    "IdAllocator",
    "BranchNotFoundError",
    "CommitNotFoundError",
    "DuplicateCommitError",
    "GitGudError",
    "IdAllocationError",
    "LinearityError",
    "LinkNotFoundError",
    "MergeError",
    "NothingToMergeError",
    "SelfReferenceError",
    "TreeIntegrityError",
]
