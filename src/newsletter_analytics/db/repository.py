# ABOUTME: Repository classes for fact store query patterns.
# ABOUTME: Counts, distinct counts, grouped rollups, derived-field updates, and event appends.

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import Row, distinct, func, literal_column, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from newsletter_analytics.db.models import (
    Category,
    Click,
    ContentItem,
    ContentStatus,
    DraftStatus,
    NewsletterDraft,
    NewsletterSend,
    RiskLevel,
    SendStatus,
    Source,
    Subscriber,
    SubscriberEvent,
)

SECONDS_PER_DAY = 86400


class SubscriberRepository:
    """Repository for subscriber reads and derived-field writes."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_active_ids(self) -> Sequence[int]:
        """List IDs of all active subscribers."""
        result = await self.session.execute(
            select(Subscriber.id).where(Subscriber.is_active.is_(True)).order_by(Subscriber.id)
        )
        return result.scalars().all()

    async def count_active(self) -> int:
        """Count active subscribers."""
        result = await self.session.execute(
            select(func.count(Subscriber.id)).where(Subscriber.is_active.is_(True))
        )
        return result.scalar_one()

    async def update_engagement(
        self, subscriber_id: int, score: int, risk_level: RiskLevel, updated_at: datetime
    ) -> None:
        """Overwrite the stored engagement score and risk tier of one subscriber."""
        await self.session.execute(
            update(Subscriber)
            .where(Subscriber.id == subscriber_id)
            .values(engagement_score=score, risk_level=risk_level.value, updated_at=updated_at)
        )

    async def commit(self) -> None:
        """Commit pending writes so batch progress survives a later failure."""
        await self.session.commit()

    async def touch_last_engaged(self, subscriber_id: int, engaged_at: datetime) -> None:
        """Set last_engaged_at without touching any other column."""
        await self.session.execute(
            update(Subscriber)
            .where(Subscriber.id == subscriber_id)
            .values(last_engaged_at=engaged_at)
        )

    async def count_created_between(self, start: datetime, end: datetime) -> int:
        """Count subscribers created in [start, end)."""
        result = await self.session.execute(
            select(func.count(Subscriber.id))
            .where(Subscriber.created_at >= start)
            .where(Subscriber.created_at < end)
        )
        return result.scalar_one()

    async def count_unsubscribed_between(self, start: datetime, end: datetime) -> int:
        """Count inactive subscribers last updated in [start, end).

        Approximates unsubscribes: an inactive subscriber updated for any other
        reason in the same range is counted too.
        """
        result = await self.session.execute(
            select(func.count(Subscriber.id))
            .where(Subscriber.is_active.is_(False))
            .where(Subscriber.updated_at >= start)
            .where(Subscriber.updated_at < end)
        )
        return result.scalar_one()

    async def count_unsubscribed_since(self, since: datetime) -> int:
        """Count inactive subscribers last updated at or after since."""
        result = await self.session.execute(
            select(func.count(Subscriber.id))
            .where(Subscriber.is_active.is_(False))
            .where(Subscriber.updated_at >= since)
        )
        return result.scalar_one()

    async def average_engagement_score(self) -> float | None:
        """Average stored engagement score across active subscribers."""
        result = await self.session.execute(
            select(func.avg(Subscriber.engagement_score)).where(Subscriber.is_active.is_(True))
        )
        return result.scalar_one()

    async def risk_distribution(self) -> Sequence[Row]:
        """Active subscriber counts per stored risk tier."""
        total = func.count(Subscriber.id).label("total")
        result = await self.session.execute(
            select(Subscriber.risk_level, total)
            .where(Subscriber.is_active.is_(True))
            .group_by(Subscriber.risk_level)
            .order_by(total.desc())
        )
        return result.all()

    async def engagement_distribution(self) -> Sequence[Row]:
        """Active subscriber counts per stored engagement score, lowest score first.

        A missing score is grouped with 0. Returns rows with ``score`` and
        ``subscriber_count``.
        """
        score = func.coalesce(Subscriber.engagement_score, literal_column("0")).label("score")
        result = await self.session.execute(
            select(score, func.count(Subscriber.id).label("subscriber_count"))
            .where(Subscriber.is_active.is_(True))
            .group_by(score)
            .order_by(score)
        )
        return result.all()

    async def monthly_cohorts(self, since: datetime) -> Sequence[Row]:
        """Active subscribers created at or after since, grouped by signup month.

        Returns rows with ``month`` (YYYY-MM), ``subscriber_count`` and
        ``avg_engagement``, oldest month first.
        """
        month = func.to_char(Subscriber.created_at, literal_column("'YYYY-MM'")).label("month")
        result = await self.session.execute(
            select(
                month,
                func.count(Subscriber.id).label("subscriber_count"),
                func.avg(Subscriber.engagement_score).label("avg_engagement"),
            )
            .where(Subscriber.is_active.is_(True))
            .where(Subscriber.created_at >= since)
            .group_by(month)
            .order_by(month)
        )
        return result.all()

    async def list_top_engaged(self, limit: int = 20) -> Sequence[Subscriber]:
        """List active subscribers with the highest stored engagement scores."""
        result = await self.session.execute(
            select(Subscriber)
            .where(Subscriber.is_active.is_(True))
            .order_by(Subscriber.engagement_score.desc().nulls_last(), Subscriber.id)
            .limit(limit)
        )
        return result.scalars().all()

    async def list_at_risk(self, limit: int = 20) -> Sequence[Subscriber]:
        """List active at-risk or dormant subscribers, least recently engaged first."""
        result = await self.session.execute(
            select(Subscriber)
            .where(Subscriber.is_active.is_(True))
            .where(Subscriber.risk_level.in_([RiskLevel.AT_RISK.value, RiskLevel.DORMANT.value]))
            .order_by(Subscriber.last_engaged_at.asc(), Subscriber.id)
            .limit(limit)
        )
        return result.scalars().all()

    async def country_counts(self) -> Sequence[Row]:
        """Active subscribers per country; subscribers without a country are skipped."""
        subscriber_count = func.count(Subscriber.id).label("subscriber_count")
        result = await self.session.execute(
            select(Subscriber.country, Subscriber.country_name, subscriber_count)
            .where(Subscriber.is_active.is_(True))
            .where(Subscriber.country.is_not(None))
            .group_by(Subscriber.country, Subscriber.country_name)
            .order_by(subscriber_count.desc())
        )
        return result.all()

    async def top_cities(self, limit: int = 20) -> Sequence[Row]:
        """Cities with the most active subscribers and their average stored score."""
        subscriber_count = func.count(Subscriber.id).label("subscriber_count")
        result = await self.session.execute(
            select(
                Subscriber.city,
                Subscriber.country,
                subscriber_count,
                func.avg(Subscriber.engagement_score).label("avg_engagement"),
            )
            .where(Subscriber.is_active.is_(True))
            .where(Subscriber.city.is_not(None))
            .group_by(Subscriber.city, Subscriber.country)
            .order_by(subscriber_count.desc())
            .limit(limit)
        )
        return result.all()

    async def audience_counts(self) -> Sequence[Row]:
        """Active subscribers per audience segment with average stored score."""
        subscriber_count = func.count(Subscriber.id).label("subscriber_count")
        result = await self.session.execute(
            select(
                Subscriber.audience,
                subscriber_count,
                func.avg(Subscriber.engagement_score).label("avg_engagement"),
            )
            .where(Subscriber.is_active.is_(True))
            .where(Subscriber.audience.is_not(None))
            .group_by(Subscriber.audience)
            .order_by(subscriber_count.desc())
        )
        return result.all()

    async def company_size_counts(self) -> Sequence[Row]:
        """Active subscribers per company size bucket."""
        subscriber_count = func.count(Subscriber.id).label("subscriber_count")
        result = await self.session.execute(
            select(Subscriber.company_size, subscriber_count)
            .where(Subscriber.is_active.is_(True))
            .where(Subscriber.company_size.is_not(None))
            .group_by(Subscriber.company_size)
            .order_by(subscriber_count.desc())
        )
        return result.all()


class NewsletterSendRepository:
    """Repository for newsletter send facts."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def count_opened_for_subscriber(self, subscriber_id: int, since: datetime) -> int:
        """Count opened sends to a subscriber sent at or after since."""
        result = await self.session.execute(
            select(func.count(NewsletterSend.id))
            .where(NewsletterSend.subscriber_id == subscriber_id)
            .where(NewsletterSend.opened_at.is_not(None))
            .where(NewsletterSend.sent_at >= since)
        )
        return result.scalar_one()

    async def delivery_stats(self, since: datetime) -> Row:
        """Total, delivered, bounced, and opened send counts for the window.

        Returns a row with ``total``, ``delivered``, ``bounced``, ``opened``.
        """
        return await self._delivery_stats(NewsletterSend.sent_at >= since)

    async def delivery_stats_between(self, start: datetime, end: datetime) -> Row:
        """Same counts as delivery_stats for sends in [start, end)."""
        return await self._delivery_stats(
            NewsletterSend.sent_at >= start, NewsletterSend.sent_at < end
        )

    async def _delivery_stats(self, *conditions) -> Row:
        result = await self.session.execute(
            select(
                func.count(NewsletterSend.id).label("total"),
                func.count(NewsletterSend.id)
                .filter(NewsletterSend.status == SendStatus.SENT.value)
                .label("delivered"),
                func.count(NewsletterSend.id)
                .filter(NewsletterSend.bounced.is_(True))
                .label("bounced"),
                func.count(NewsletterSend.id)
                .filter(NewsletterSend.opened_at.is_not(None))
                .label("opened"),
            ).where(*conditions)
        )
        return result.one()

    async def count_distinct_openers(self, since: datetime) -> int:
        """Count distinct subscribers with at least one opened send in the window."""
        result = await self.session.execute(
            select(func.count(distinct(NewsletterSend.subscriber_id)))
            .where(NewsletterSend.sent_at >= since)
            .where(NewsletterSend.opened_at.is_not(None))
        )
        return result.scalar_one()

    async def count_for_draft(self, draft_id: int) -> int:
        """Count recipients of a newsletter draft."""
        result = await self.session.execute(
            select(func.count(NewsletterSend.id)).where(
                NewsletterSend.newsletter_draft_id == draft_id
            )
        )
        return result.scalar_one()

    async def count_opened_for_draft(self, draft_id: int) -> int:
        """Count opened sends of a newsletter draft."""
        result = await self.session.execute(
            select(func.count(NewsletterSend.id))
            .where(NewsletterSend.newsletter_draft_id == draft_id)
            .where(NewsletterSend.opened_at.is_not(None))
        )
        return result.scalar_one()

    async def country_stats(self, country: str, since: datetime) -> Row:
        """Total and opened sends to subscribers in a country.

        Returns a row with ``total`` and ``opened``.
        """
        result = await self.session.execute(
            select(
                func.count(NewsletterSend.id).label("total"),
                func.count(NewsletterSend.id)
                .filter(NewsletterSend.opened_at.is_not(None))
                .label("opened"),
            )
            .join(Subscriber, NewsletterSend.subscriber_id == Subscriber.id)
            .where(Subscriber.country == country)
            .where(NewsletterSend.sent_at >= since)
        )
        return result.one()

    async def count_unique_clickers_for_country(self, country: str, since: datetime) -> int:
        """Count distinct subscribers in a country who clicked from a send in the window."""
        result = await self.session.execute(
            select(func.count(distinct(NewsletterSend.subscriber_id)))
            .join(Subscriber, NewsletterSend.subscriber_id == Subscriber.id)
            .join(Click, Click.newsletter_send_id == NewsletterSend.id)
            .where(Subscriber.country == country)
            .where(NewsletterSend.sent_at >= since)
        )
        return result.scalar_one()

    async def count_spam_complaints(self, since: datetime) -> int:
        """Count sends in the window marked as spam."""
        result = await self.session.execute(
            select(func.count(NewsletterSend.id))
            .where(NewsletterSend.sent_at >= since)
            .where(NewsletterSend.spam_complaint.is_(True))
        )
        return result.scalar_one()

    async def bounces_by_status(self, since: datetime) -> Sequence[Row]:
        """Bounced sends in the window grouped by delivery status."""
        total = func.count(NewsletterSend.id).label("total")
        result = await self.session.execute(
            select(NewsletterSend.status, total)
            .where(NewsletterSend.sent_at >= since)
            .where(NewsletterSend.bounced.is_(True))
            .group_by(NewsletterSend.status)
            .order_by(total.desc())
        )
        return result.all()

    async def opened_by_device(self, since: datetime) -> Sequence[Row]:
        """Opened sends in the window grouped by device type."""
        total = func.count(NewsletterSend.id).label("total")
        result = await self.session.execute(
            select(NewsletterSend.device_type, total)
            .where(NewsletterSend.sent_at >= since)
            .where(NewsletterSend.opened_at.is_not(None))
            .group_by(NewsletterSend.device_type)
            .order_by(total.desc())
        )
        return result.all()

    async def opened_by_email_client(self, since: datetime) -> Sequence[Row]:
        """Opened sends in the window grouped by email client."""
        total = func.count(NewsletterSend.id).label("total")
        result = await self.session.execute(
            select(NewsletterSend.email_client, total)
            .where(NewsletterSend.sent_at >= since)
            .where(NewsletterSend.opened_at.is_not(None))
            .group_by(NewsletterSend.email_client)
            .order_by(total.desc())
        )
        return result.all()


class ClickRepository:
    """Repository for click tracking facts."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def count_for_subscriber(self, subscriber_id: int, since: datetime) -> int:
        """Count click events by a subscriber at or after since."""
        result = await self.session.execute(
            select(func.count(Click.id))
            .where(Click.subscriber_id == subscriber_id)
            .where(Click.clicked_at >= since)
        )
        return result.scalar_one()

    async def count_distinct_content_for_subscriber(
        self, subscriber_id: int, since: datetime
    ) -> int:
        """Count distinct content items clicked by a subscriber at or after since."""
        result = await self.session.execute(
            select(func.count(distinct(Click.content_id)))
            .where(Click.subscriber_id == subscriber_id)
            .where(Click.clicked_at >= since)
        )
        return result.scalar_one()

    async def count_unique_clickers(self, since: datetime) -> int:
        """Count distinct subscribers who clicked from a send sent in the window."""
        result = await self.session.execute(
            select(func.count(distinct(Click.subscriber_id)))
            .join(NewsletterSend, Click.newsletter_send_id == NewsletterSend.id)
            .where(NewsletterSend.sent_at >= since)
        )
        return result.scalar_one()

    async def count_unique_clickers_between(self, start: datetime, end: datetime) -> int:
        """Count distinct subscribers who clicked from a send sent in [start, end)."""
        result = await self.session.execute(
            select(func.count(distinct(Click.subscriber_id)))
            .join(NewsletterSend, Click.newsletter_send_id == NewsletterSend.id)
            .where(NewsletterSend.sent_at >= start)
            .where(NewsletterSend.sent_at < end)
        )
        return result.scalar_one()

    async def count_unique_content_clicked(self, since: datetime) -> int:
        """Count distinct content items clicked from sends in the window."""
        result = await self.session.execute(
            select(func.count(distinct(Click.content_id)))
            .join(NewsletterSend, Click.newsletter_send_id == NewsletterSend.id)
            .where(NewsletterSend.sent_at >= since)
        )
        return result.scalar_one()

    async def count_for_sends_since(self, since: datetime) -> int:
        """Count click events from sends in the window."""
        result = await self.session.execute(
            select(func.count(Click.id))
            .join(NewsletterSend, Click.newsletter_send_id == NewsletterSend.id)
            .where(NewsletterSend.sent_at >= since)
        )
        return result.scalar_one()

    async def count_for_draft(self, draft_id: int) -> int:
        """Count click events from all sends of a newsletter draft."""
        result = await self.session.execute(
            select(func.count(Click.id))
            .join(NewsletterSend, Click.newsletter_send_id == NewsletterSend.id)
            .where(NewsletterSend.newsletter_draft_id == draft_id)
        )
        return result.scalar_one()

    async def top_clicked_content(self, since: datetime, limit: int = 20) -> Sequence[Row]:
        """Content items ranked by clicks made at or after since.

        Returns rows with ``content_id``, ``title``, ``link``, ``source_type``,
        ``category_name``, ``click_count``.
        """
        click_count = func.count(Click.id).label("click_count")
        result = await self.session.execute(
            select(
                ContentItem.id.label("content_id"),
                ContentItem.title,
                ContentItem.link,
                ContentItem.source_type,
                Category.name.label("category_name"),
                click_count,
            )
            .select_from(Click)
            .join(ContentItem, Click.content_id == ContentItem.id)
            .outerjoin(Category, ContentItem.category_id == Category.id)
            .where(Click.clicked_at >= since)
            .group_by(
                ContentItem.id,
                ContentItem.title,
                ContentItem.link,
                ContentItem.source_type,
                Category.name,
            )
            .order_by(click_count.desc(), ContentItem.id)
            .limit(limit)
        )
        return result.all()

    async def clicks_by_category(self, since: datetime) -> Sequence[Row]:
        """Clicks made at or after since grouped by content category."""
        click_count = func.count(Click.id).label("click_count")
        result = await self.session.execute(
            select(Category.name.label("category_name"), click_count)
            .select_from(Click)
            .join(ContentItem, Click.content_id == ContentItem.id)
            .outerjoin(Category, ContentItem.category_id == Category.id)
            .where(Click.clicked_at >= since)
            .group_by(Category.name)
            .order_by(click_count.desc())
        )
        return result.all()

    async def clicks_by_source_type(self, since: datetime) -> Sequence[Row]:
        """Clicks made at or after since grouped by content source type."""
        click_count = func.count(Click.id).label("click_count")
        result = await self.session.execute(
            select(ContentItem.source_type, click_count)
            .select_from(Click)
            .join(ContentItem, Click.content_id == ContentItem.id)
            .where(Click.clicked_at >= since)
            .group_by(ContentItem.source_type)
            .order_by(click_count.desc())
        )
        return result.all()

    async def count_since(self, since: datetime) -> int:
        """Count click events made at or after since."""
        result = await self.session.execute(
            select(func.count(Click.id)).where(Click.clicked_at >= since)
        )
        return result.scalar_one()

    async def count_unique_subscribers_since(self, since: datetime) -> int:
        """Count distinct known subscribers who clicked at or after since."""
        result = await self.session.execute(
            select(func.count(distinct(Click.subscriber_id))).where(Click.clicked_at >= since)
        )
        return result.scalar_one()

    async def daily_counts(self, since: datetime) -> Sequence[Row]:
        """Clicks per calendar day at or after since, oldest day first.

        Days without clicks are absent. Returns rows with ``day`` and ``click_count``.
        """
        day = func.date_trunc(literal_column("'day'"), Click.clicked_at).label("day")
        result = await self.session.execute(
            select(day, func.count(Click.id).label("click_count"))
            .where(Click.clicked_at >= since)
            .group_by(day)
            .order_by(day)
        )
        return result.all()

    async def email_click_stats(self, since: datetime) -> Row:
        """Clicks made from newsletter emails at or after since.

        Returns a row with ``total`` and ``unique_clickers``.
        """
        result = await self.session.execute(
            select(
                func.count(Click.id).label("total"),
                func.count(distinct(Click.subscriber_id)).label("unique_clickers"),
            )
            .where(Click.clicked_at >= since)
            .where(Click.newsletter_send_id.is_not(None))
        )
        return result.one()


class ContentRepository:
    """Repository for content item rollups joined with clicks, sources, and categories."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _sent_since(self, since: datetime):
        return (ContentItem.sent_at.is_not(None), ContentItem.sent_at >= since)

    async def count_for_source(self, source_id: int, status: ContentStatus | None = None) -> int:
        """Count content items from a source, optionally with a given status."""
        query = select(func.count(ContentItem.id)).where(ContentItem.source_id == source_id)
        if status:
            query = query.where(ContentItem.status == status.value)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def average_clicks_per_item(
        self, source_id: int, status: ContentStatus = ContentStatus.ACCEPTED
    ) -> float | None:
        """Average click count per content item of a source with the given status.

        Items without clicks count as zero.
        """
        per_item = (
            select(ContentItem.id, func.count(Click.id).label("click_count"))
            .outerjoin(Click, ContentItem.id == Click.content_id)
            .where(ContentItem.source_id == source_id)
            .where(ContentItem.status == status.value)
            .group_by(ContentItem.id)
            .subquery("click_stats")
        )
        result = await self.session.execute(select(func.avg(per_item.c.click_count)))
        return result.scalar_one()

    async def top_sources_by_clicks(self, since: datetime, limit: int = 10) -> Sequence[Row]:
        """Sources of content sent in the window ranked by click count.

        Returns rows with ``source_id``, ``source_name``, ``clicks``, ``articles``.
        """
        clicks = func.count(Click.id).label("clicks")
        result = await self.session.execute(
            select(
                ContentItem.source_id,
                Source.name.label("source_name"),
                clicks,
                func.count(distinct(ContentItem.id)).label("articles"),
            )
            .select_from(ContentItem)
            .outerjoin(Click, ContentItem.id == Click.content_id)
            .outerjoin(Source, ContentItem.source_id == Source.id)
            .where(*self._sent_since(since))
            .group_by(ContentItem.source_id, Source.name)
            .order_by(clicks.desc())
            .limit(limit)
        )
        return result.all()

    async def category_clicks(self, since: datetime) -> Sequence[Row]:
        """Click counts per category for content sent in the window.

        Returns rows with ``category_name`` and ``clicks``.
        """
        clicks = func.count(Click.id).label("clicks")
        result = await self.session.execute(
            select(Category.name.label("category_name"), clicks)
            .select_from(ContentItem)
            .outerjoin(Click, ContentItem.id == Click.content_id)
            .outerjoin(Category, ContentItem.category_id == Category.id)
            .where(*self._sent_since(since))
            .group_by(Category.name)
            .order_by(clicks.desc())
        )
        return result.all()

    async def category_performance(self, since: datetime) -> Sequence[Row]:
        """Per-category sent, clicked, and click totals for content sent in the window.

        Returns rows with ``category_name``, ``articles_sent``, ``total_clicks``,
        ``unique_articles_clicked``.
        """
        total_clicks = func.count(Click.id).label("total_clicks")
        result = await self.session.execute(
            select(
                Category.id.label("category_id"),
                Category.name.label("category_name"),
                func.count(distinct(ContentItem.id)).label("articles_sent"),
                total_clicks,
                func.count(distinct(Click.content_id)).label("unique_articles_clicked"),
            )
            .select_from(ContentItem)
            .outerjoin(Category, ContentItem.category_id == Category.id)
            .outerjoin(Click, ContentItem.id == Click.content_id)
            .where(*self._sent_since(since))
            .group_by(Category.id, Category.name)
            .order_by(total_clicks.desc())
        )
        return result.all()

    async def count_sent_since(self, since: datetime) -> int:
        """Count distinct content items sent in the window."""
        result = await self.session.execute(
            select(func.count(distinct(ContentItem.id))).where(*self._sent_since(since))
        )
        return result.scalar_one()

    async def average_age_at_send_days(self, since: datetime) -> float | None:
        """Average days between publication and send for content sent in the window."""
        age_days = (
            func.extract("epoch", ContentItem.sent_at - ContentItem.published_at) / SECONDS_PER_DAY
        )
        result = await self.session.execute(
            select(func.avg(age_days)).where(*self._sent_since(since))
        )
        return result.scalar_one()


class NewsletterDraftRepository:
    """Repository for newsletter drafts."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_recent_sent(self, limit: int = 10) -> Sequence[NewsletterDraft]:
        """List sent newsletters ordered by send time descending."""
        result = await self.session.execute(
            select(NewsletterDraft)
            .where(NewsletterDraft.status == DraftStatus.SENT.value)
            .order_by(NewsletterDraft.sent_at.desc().nulls_last())
            .limit(limit)
        )
        return result.scalars().all()

    async def count_sent_since(self, since: datetime) -> int:
        """Count newsletters sent at or after since."""
        result = await self.session.execute(
            select(func.count(NewsletterDraft.id))
            .where(NewsletterDraft.status == DraftStatus.SENT.value)
            .where(NewsletterDraft.sent_at >= since)
        )
        return result.scalar_one()


class SubscriberEventRepository:
    """Append-only repository for subscriber lifecycle events."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, event: SubscriberEvent) -> SubscriberEvent:
        """Insert a new event. Existing rows are never modified."""
        self.session.add(event)
        await self.session.flush()
        return event

    async def list_for_subscriber(self, subscriber_id: int) -> Sequence[SubscriberEvent]:
        """List events for a subscriber in insertion order."""
        result = await self.session.execute(
            select(SubscriberEvent)
            .where(SubscriberEvent.subscriber_id == subscriber_id)
            .order_by(SubscriberEvent.id)
        )
        return result.scalars().all()
