"""SEO-Boost SQLAlchemy models: websites and their per-site records."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, JSONType, TimestampMixin, utcnow


class BacklinkStatus(str, enum.Enum):
    """Lifecycle of a discovered backlink."""

    ACTIVE = "active"
    LOST = "lost"
    DISAVOWED = "disavowed"
    PENDING = "pending"


class SuggestionStatus(str, enum.Enum):
    """Review state of an on-page optimization suggestion."""

    PENDING = "pending"
    APPLIED = "applied"
    REJECTED = "rejected"


class Impact(str, enum.Enum):
    """Expected impact of an on-page suggestion."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Website(Base, TimestampMixin):
    """A site tracked by a user."""

    __tablename__ = "websites"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    seo_score: Mapped[int | None] = mapped_column(Integer)
    last_analyzed_at: Mapped[datetime | None] = mapped_column(DateTime)


class Keyword(Base, TimestampMixin):
    """A tracked search keyword and its ranking history for a website."""

    __tablename__ = "keywords"

    id: Mapped[int] = mapped_column(primary_key=True)
    website_id: Mapped[int] = mapped_column(
        ForeignKey("websites.id", ondelete="CASCADE"), nullable=False, index=True
    )
    keyword: Mapped[str] = mapped_column(String(255), nullable=False)
    search_volume: Mapped[int | None] = mapped_column(Integer)
    difficulty: Mapped[int | None] = mapped_column(Integer)
    cpc: Mapped[float | None] = mapped_column(Float)
    intent: Mapped[str | None] = mapped_column(String(50))
    current_ranking: Mapped[int | None] = mapped_column(Integer)
    previous_ranking: Mapped[int | None] = mapped_column(Integer)
    target_url: Mapped[str | None] = mapped_column(String(500))


class Backlink(Base):
    """An inbound link pointing at a website."""

    __tablename__ = "backlinks"

    id: Mapped[int] = mapped_column(primary_key=True)
    website_id: Mapped[int] = mapped_column(
        ForeignKey("websites.id", ondelete="CASCADE"), nullable=False, index=True
    )
    source_url: Mapped[str] = mapped_column(String(500), nullable=False)
    target_url: Mapped[str] = mapped_column(String(500), nullable=False)
    anchor_text: Mapped[str | None] = mapped_column(String(500))
    domain_authority: Mapped[int | None] = mapped_column(Integer)
    toxicity_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[BacklinkStatus] = mapped_column(
        Enum(BacklinkStatus), default=BacklinkStatus.ACTIVE, nullable=False
    )
    first_discovered: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    last_checked: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )


class ContentOptimization(Base):
    """A content rewrite targeted at one keyword, with its scores."""

    __tablename__ = "content_optimizations"

    id: Mapped[int] = mapped_column(primary_key=True)
    website_id: Mapped[int] = mapped_column(
        ForeignKey("websites.id", ondelete="CASCADE"), nullable=False, index=True
    )
    page_url: Mapped[str] = mapped_column(String(500), nullable=False)
    target_keyword: Mapped[str] = mapped_column(String(255), nullable=False)
    original_content: Mapped[str] = mapped_column(Text, nullable=False)
    optimized_content: Mapped[str | None] = mapped_column(Text)
    seo_score: Mapped[int | None] = mapped_column(Integer)
    readability_score: Mapped[int | None] = mapped_column(Integer)
    optimization_date: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    optimization_settings: Mapped[dict | None] = mapped_column(JSONType)
    ai_generation_prompt: Mapped[str | None] = mapped_column(Text)


class OnPageOptimization(Base):
    """A suggested change to one element of one page."""

    __tablename__ = "on_page_optimizations"

    id: Mapped[int] = mapped_column(primary_key=True)
    website_id: Mapped[int] = mapped_column(
        ForeignKey("websites.id", ondelete="CASCADE"), nullable=False, index=True
    )
    page_url: Mapped[str] = mapped_column(String(500), nullable=False)
    element_type: Mapped[str] = mapped_column(String(50), nullable=False)
    current_value: Mapped[str | None] = mapped_column(Text)
    suggested_value: Mapped[str] = mapped_column(Text, nullable=False)
    impact: Mapped[Impact] = mapped_column(
        Enum(Impact), default=Impact.MEDIUM, nullable=False
    )
    status: Mapped[SuggestionStatus] = mapped_column(
        Enum(SuggestionStatus), default=SuggestionStatus.PENDING, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    applied_at: Mapped[datetime | None] = mapped_column(DateTime)


class SeoAudit(Base):
    """A point-in-time audit report for a website."""

    __tablename__ = "seo_audits"

    id: Mapped[int] = mapped_column(primary_key=True)
    website_id: Mapped[int] = mapped_column(
        ForeignKey("websites.id", ondelete="CASCADE"), nullable=False, index=True
    )
    audit_date: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    overall_score: Mapped[int] = mapped_column(Integer, nullable=False)
    technical_score: Mapped[int | None] = mapped_column(Integer)
    content_score: Mapped[int | None] = mapped_column(Integer)
    performance_score: Mapped[int | None] = mapped_column(Integer)
    issues: Mapped[list | None] = mapped_column(JSONType)
    recommendations: Mapped[list | None] = mapped_column(JSONType)
