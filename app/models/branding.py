"""
Brand-identity records written by the branding workshops.

The planner only reads these tables. Each workshop saves one row per owner
(storytelling and offers may hold several) and fills fields step by step,
so any column may still be empty.
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, Boolean, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class BrandProposition(Base):
    __tablename__ = "brand_propositions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    workspace_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    what_you_do: Mapped[str | None] = mapped_column(Text, nullable=True)
    process: Mapped[str | None] = mapped_column(Text, nullable=True)
    values: Mapped[str | None] = mapped_column(Text, nullable=True)
    for_whom: Mapped[str | None] = mapped_column(Text, nullable=True)
    version_final: Mapped[str | None] = mapped_column(Text, nullable=True)
    version_pitch: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class Persona(Base):
    __tablename__ = "personas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    workspace_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    frustrations: Mapped[str | None] = mapped_column(Text, nullable=True)
    transformation: Mapped[str | None] = mapped_column(Text, nullable=True)
    objections: Mapped[str | None] = mapped_column(Text, nullable=True)
    dream_outcome: Mapped[str | None] = mapped_column(Text, nullable=True)
    actions: Mapped[str | None] = mapped_column(Text, nullable=True)
    current_step: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class Storytelling(Base):
    __tablename__ = "storytelling"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    workspace_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    polished_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    imported_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class BrandProfile(Base):
    """Voice, tone and positioning. `voice_description` doubles as the channel bio."""

    __tablename__ = "brand_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    workspace_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    voice_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    combat_cause: Mapped[str | None] = mapped_column(Text, nullable=True)
    combat_fights: Mapped[str | None] = mapped_column(Text, nullable=True)
    tone_register: Mapped[str | None] = mapped_column(String(64), nullable=True)
    tone_level: Mapped[str | None] = mapped_column(String(64), nullable=True)
    tone_style: Mapped[str | None] = mapped_column(String(64), nullable=True)
    tone_humor: Mapped[str | None] = mapped_column(String(64), nullable=True)
    tone_engagement: Mapped[str | None] = mapped_column(String(64), nullable=True)
    key_expressions: Mapped[str | None] = mapped_column(Text, nullable=True)
    things_to_avoid: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_verbatims: Mapped[str | None] = mapped_column(Text, nullable=True)
    channels: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class BrandStrategy(Base):
    __tablename__ = "brand_strategies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    workspace_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    hidden_facets: Mapped[str | None] = mapped_column(Text, nullable=True)
    facet_1: Mapped[str | None] = mapped_column(Text, nullable=True)
    pillar_major: Mapped[str | None] = mapped_column(Text, nullable=True)
    creative_concept: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class Offer(Base):
    __tablename__ = "offers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    workspace_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    promise: Mapped[str | None] = mapped_column(Text, nullable=True)
    price_text: Mapped[str | None] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class BrandCharter(Base):
    """Visual identity. `mood_keywords` is a JSON-encoded list stored as Text."""

    __tablename__ = "brand_charters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    workspace_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    logo_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    color_primary: Mapped[str | None] = mapped_column(String(16), nullable=True)
    color_secondary: Mapped[str | None] = mapped_column(String(16), nullable=True)
    color_accent: Mapped[str | None] = mapped_column(String(16), nullable=True)
    font_title: Mapped[str | None] = mapped_column(String(64), nullable=True)
    font_body: Mapped[str | None] = mapped_column(String(64), nullable=True)
    mood_keywords: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_style: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
