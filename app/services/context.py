"""
Explicit caller context.

Every planner operation receives the acting user (and optional shared
workspace) as an argument; nothing is looked up from ambient session state.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class PlannerContext:
    user_id: str
    workspace_id: Optional[str] = None


def owned_by(model: Any, ctx: PlannerContext):
    """
    Ownership filter for collaborator records: the workspace when the
    context carries one, the user otherwise.
    """
    if ctx.workspace_id:
        return model.workspace_id == ctx.workspace_id
    return model.user_id == ctx.user_id
