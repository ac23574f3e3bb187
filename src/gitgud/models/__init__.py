"""Domain models for GitGud."""

from gitgud.models.branch import BranchInfo
from gitgud.models.commit import Commit, CommitInfo
from gitgud.models.config import TreeConfig

__all__ = ["BranchInfo", "Commit", "CommitInfo", "TreeConfig"]
