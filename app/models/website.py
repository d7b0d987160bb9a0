from datetime import datetime
from sqlalchemy import Integer, String, Text, Boolean, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class WebsiteHomepage(Base):
    """Homepage copy, one block per column. Seven blocks make a finished page."""

    __tablename__ = "website_homepages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    workspace_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    hook_title: Mapped[str | None] = mapped_column(Text, nullable=True)
    hook_subtitle: Mapped[str | None] = mapped_column(Text, nullable=True)
    problem_block: Mapped[str | None] = mapped_column(Text, nullable=True)
    presentation_block: Mapped[str | None] = mapped_column(Text, nullable=True)
    offer_block: Mapped[str | None] = mapped_column(Text, nullable=True)
    benefits_block: Mapped[str | None] = mapped_column(Text, nullable=True)
    cta_primary: Mapped[str | None] = mapped_column(String(256), nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
