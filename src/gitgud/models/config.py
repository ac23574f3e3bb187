"""Configuration model for GitGud.

TreeConfig holds per-tree settings.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class TreeConfig(BaseModel):
    """Per-tree configuration."""

    # Re-check every graph invariant after each mutation (slow; for debugging).
    verify_invariants: bool = False
    root_commit_id: int = Field(default=0, ge=0)
    root_branch_id: int = Field(default=0, ge=0)
