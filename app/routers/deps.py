"""
Request-scoped dependencies shared by the routers.

Identity is passed explicitly by the caller (the auth layer sits in front of
this service):

  X-User-Id       required
  X-Workspace-Id  optional; when present, collaborator reads are scoped to it
"""
from typing import Optional

from fastapi import Header

from app.services.context import PlannerContext


def get_context(
    x_user_id: str = Header(
        ..., min_length=1, max_length=64, description="Caller's user id.",
    ),
    x_workspace_id: Optional[str] = Header(
        default=None, max_length=64, description="Active workspace, if any.",
    ),
) -> PlannerContext:
    return PlannerContext(user_id=x_user_id, workspace_id=x_workspace_id or None)
