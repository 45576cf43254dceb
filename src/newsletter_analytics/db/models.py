# ABOUTME: SQLAlchemy ORM models for the newsletter fact store.
# ABOUTME: Defines subscribers, content, sources, categories, drafts, sends, clicks, and events.

from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RiskLevel(StrEnum):
    """Subscriber lifecycle tier derived from the engagement score."""

    ACTIVE = "active"
    AT_RISK = "at_risk"
    CHURNED = "churned"
    DORMANT = "dormant"


class ContentStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DISCARDED = "discarded"
    SAVED_FOR_NEXT = "saved-for-next"


class DraftStatus(StrEnum):
    DRAFT = "draft"
    FINALIZED = "finalized"
    SENT = "sent"


class SendStatus(StrEnum):
    SENT = "sent"
    FAILED = "failed"
    BOUNCED = "bounced"


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class Subscriber(Base):
    """A newsletter subscriber with derived engagement fields and audience profile.

    ``engagement_score`` and ``risk_level`` are overwritten by the risk batch job;
    ``last_engaged_at`` is touched by the event tracker.
    """

    __tablename__ = "subscribers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    last_engaged_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    engagement_score: Mapped[int | None] = mapped_column(Integer, default=0)
    risk_level: Mapped[str | None] = mapped_column(String(20), default=RiskLevel.ACTIVE.value)

    country: Mapped[str | None] = mapped_column(String(2))  # ISO code, e.g. "US"
    country_name: Mapped[str | None] = mapped_column(String(200))
    region: Mapped[str | None] = mapped_column(String(200))
    city: Mapped[str | None] = mapped_column(String(200))
    audience: Mapped[str | None] = mapped_column(String(50))
    company_size: Mapped[str | None] = mapped_column(String(50))
    seniority: Mapped[str | None] = mapped_column(String(50))
    registration_source: Mapped[str | None] = mapped_column(String(200))

    sends: Mapped[list["NewsletterSend"]] = relationship(
        "NewsletterSend", back_populates="subscriber", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_subscribers_is_active", is_active),
        Index("ix_subscribers_country", country),
    )

    def __repr__(self) -> str:
        status = self.risk_level or "active"
        if not self.is_active:
            status = "inactive"
        return f"<Subscriber {self.email} ({status})>"


class Category(Base):
    """Topical grouping for content items."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Category {self.name}>"


class Source(Base):
    """A feed or publisher content is aggregated from."""

    __tablename__ = "sources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(500), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(500), unique=True, nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)  # blog, youtube, rss, ...
    url: Mapped[str] = mapped_column(String(2000), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Source {self.id}: {self.name}>"


class NewsletterDraft(Base):
    """A composed newsletter issue. Immutable for analytics once status is 'sent'."""

    __tablename__ = "newsletter_drafts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str | None] = mapped_column(String(500))
    subject: Mapped[str] = mapped_column(String(1000), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=DraftStatus.DRAFT.value, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    __table_args__ = (Index("ix_newsletter_drafts_sent_at_desc", sent_at.desc()),)

    def __repr__(self) -> str:
        return f"<NewsletterDraft {self.id}: {self.subject[:50]}>"


class ContentItem(Base):
    """An article or link, curated and possibly included in a sent newsletter."""

    __tablename__ = "content"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(1000), nullable=False)
    link: Mapped[str] = mapped_column(String(2000), unique=True, nullable=False)
    source_type: Mapped[str] = mapped_column(String(50), nullable=False, default="article")
    status: Mapped[str] = mapped_column(
        String(20), default=ContentStatus.PENDING.value, nullable=False
    )
    published_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    source_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("sources.id"))
    category_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("categories.id"))
    newsletter_draft_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("newsletter_drafts.id")
    )

    source: Mapped[Source | None] = relationship("Source")
    category: Mapped[Category | None] = relationship("Category")

    __table_args__ = (
        Index("ix_content_source_id", source_id),
        Index("ix_content_category_id", category_id),
        Index("ix_content_sent_at", sent_at),
    )

    def __repr__(self) -> str:
        return f"<ContentItem {self.id}: {self.title[:50]}...>"


class NewsletterSend(Base):
    """One delivery attempt of a newsletter draft to a subscriber."""

    __tablename__ = "newsletter_sends"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subscriber_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("subscribers.id", ondelete="CASCADE"), nullable=False
    )
    newsletter_draft_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("newsletter_drafts.id")
    )
    sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    opened_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    content_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bounced: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    spam_complaint: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    device_type: Mapped[str | None] = mapped_column(String(20))
    email_client: Mapped[str | None] = mapped_column(String(50))

    subscriber: Mapped[Subscriber] = relationship("Subscriber", back_populates="sends")

    __table_args__ = (
        Index("ix_newsletter_sends_sent_at", sent_at),
        Index("ix_newsletter_sends_subscriber_id", subscriber_id),
        Index("ix_newsletter_sends_draft_id", newsletter_draft_id),
    )

    def __repr__(self) -> str:
        return f"<NewsletterSend {self.id} draft={self.newsletter_draft_id} ({self.status})>"


class Click(Base):
    """A tracked link click on a content item from a newsletter send."""

    __tablename__ = "click_tracking"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("content.id", ondelete="CASCADE"), nullable=False
    )
    subscriber_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("subscribers.id", ondelete="SET NULL")
    )
    newsletter_send_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("newsletter_sends.id", ondelete="SET NULL")
    )
    clicked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    device_type: Mapped[str | None] = mapped_column(String(20))
    country: Mapped[str | None] = mapped_column(String(2))
    city: Mapped[str | None] = mapped_column(String(200))

    __table_args__ = (
        Index("ix_click_tracking_content_id", content_id),
        Index("ix_click_tracking_subscriber_id", subscriber_id),
        Index("ix_click_tracking_clicked_at", clicked_at),
    )

    def __repr__(self) -> str:
        return f"<Click {self.id} content={self.content_id} subscriber={self.subscriber_id}>"


class SubscriberEvent(Base):
    """Append-only subscriber lifecycle log entry."""

    __tablename__ = "subscriber_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subscriber_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("subscribers.id", ondelete="CASCADE"), nullable=False
    )
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)
    newsletter_send_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("newsletter_sends.id", ondelete="SET NULL")
    )
    # "metadata" is reserved on declarative classes
    event_metadata: Mapped[str | None] = mapped_column("metadata", Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_subscriber_events_subscriber_id", subscriber_id),
        Index("ix_subscriber_events_event_type", event_type),
        Index("ix_subscriber_events_created_at", created_at),
    )

    def __repr__(self) -> str:
        return f"<SubscriberEvent {self.id}: {self.event_type} subscriber={self.subscriber_id}>"
