"""Branch domain model for GitGud.

BranchInfo is the SDK-facing model returned when listing branches.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class BranchInfo(BaseModel):
    """SDK-facing branch information model.

    Returned by GitTree.list_branches().
    """

    branch_id: int
    tip_id: int
    is_current: bool = False
    commit_count: Optional[int] = None  # First-parent length from the tip
