"""SEO-Boost data access: websites and their per-site records."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.logging import get_logger
from src.models.base import utcnow
from src.models.seo import (
    Backlink,
    BacklinkStatus,
    ContentOptimization,
    Keyword,
    OnPageOptimization,
    SeoAudit,
    SuggestionStatus,
    Website,
)
from src.storage.base import count_rows, page_offset, validate
from src.storage.errors import NotFoundError
from src.storage.schemas import (
    BacklinkCreate,
    ContentOptimizationCreate,
    KeywordCreate,
    KeywordUpdate,
    OnPageOptimizationCreate,
    SeoAuditCreate,
    WebsiteCreate,
    WebsiteUpdate,
)

logger = get_logger(__name__)

TOXICITY_THRESHOLD = 50


class _SiteStorage:
    """Shared paging and lookups for website-scoped storage classes."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _page(self, stmt: Any, page: int, page_size: int) -> dict[str, Any]:
        total = await count_rows(self.session, stmt)
        result = await self.session.execute(
            stmt.limit(page_size).offset(page_offset(page, page_size))
        )
        return {
            "items": list(result.scalars().all()),
            "total": total,
            "page": page,
            "page_size": page_size,
        }

    async def _website(self, website_id: int) -> Website:
        website = await self.session.get(Website, website_id)
        if website is None:
            raise NotFoundError("Website", website_id)
        return website

    async def _get(self, model: type, entity: str, row_id: int) -> Any:
        row = await self.session.get(model, row_id)
        if row is None:
            raise NotFoundError(entity, row_id)
        return row


class WebsiteStorage(_SiteStorage):
    """CRUD for tracked websites."""

    async def list(
        self,
        page: int = 1,
        page_size: int = 10,
        query: str | None = None,
    ) -> dict[str, Any]:
        stmt = select(Website).order_by(Website.updated_at.desc(), Website.id.desc())
        if query:
            pattern = f"%{query.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Website.name).like(pattern),
                    func.lower(Website.url).like(pattern),
                )
            )
        return await self._page(stmt, page, page_size)

    async def get_by_id(self, website_id: int) -> Website | None:
        return await self.session.get(Website, website_id)

    async def create(self, data: WebsiteCreate | dict[str, Any], user_id: int) -> Website:
        payload = validate(WebsiteCreate, data)
        website = Website(**payload.model_dump(), user_id=user_id)
        self.session.add(website)
        await self.session.flush()
        logger.info("website_created", website_id=website.id)
        return website

    async def update(self, website_id: int, data: WebsiteUpdate | dict[str, Any]) -> Website:
        payload = validate(WebsiteUpdate, data)
        website = await self._website(website_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None and field != "description":
                continue
            setattr(website, field, value)
        await self.session.flush()
        await self.session.refresh(website)
        return website

    async def delete(self, website_id: int) -> Website:
        website = await self._website(website_id)
        await self.session.delete(website)
        await self.session.flush()
        logger.info("website_deleted", website_id=website_id)
        return website


class SeoAuditStorage(_SiteStorage):
    """Audit reports; creating one refreshes the website's score."""

    async def list(self, website_id: int, page: int = 1, page_size: int = 10) -> dict[str, Any]:
        stmt = (
            select(SeoAudit)
            .where(SeoAudit.website_id == website_id)
            .order_by(SeoAudit.audit_date.desc(), SeoAudit.id.desc())
        )
        return await self._page(stmt, page, page_size)

    async def get_by_id(self, audit_id: int) -> SeoAudit | None:
        return await self.session.get(SeoAudit, audit_id)

    async def create(self, data: SeoAuditCreate | dict[str, Any]) -> SeoAudit:
        payload = validate(SeoAuditCreate, data)
        website = await self._website(payload.website_id)

        now = utcnow()
        audit = SeoAudit(**payload.model_dump(), audit_date=now)
        self.session.add(audit)
        website.seo_score = payload.overall_score
        website.last_analyzed_at = now
        await self.session.flush()
        logger.info(
            "seo_audit_created",
            audit_id=audit.id,
            website_id=website.id,
            overall_score=audit.overall_score,
        )
        return audit


class KeywordStorage(_SiteStorage):
    """Tracked keywords per website."""

    async def list(
        self,
        website_id: int,
        page: int = 1,
        page_size: int = 10,
        query: str | None = None,
    ) -> dict[str, Any]:
        stmt = (
            select(Keyword)
            .where(Keyword.website_id == website_id)
            .order_by(Keyword.updated_at.desc(), Keyword.id.desc())
        )
        if query:
            stmt = stmt.where(func.lower(Keyword.keyword).like(f"%{query.strip().lower()}%"))
        return await self._page(stmt, page, page_size)

    async def create(self, data: KeywordCreate | dict[str, Any]) -> Keyword:
        payload = validate(KeywordCreate, data)
        await self._website(payload.website_id)
        keyword = Keyword(**payload.model_dump())
        self.session.add(keyword)
        await self.session.flush()
        return keyword

    async def update(self, keyword_id: int, data: KeywordUpdate | dict[str, Any]) -> Keyword:
        """Partial update; a new ``current_ranking`` shifts the old one to previous."""
        payload = validate(KeywordUpdate, data)
        keyword = await self._get(Keyword, "Keyword", keyword_id)
        updates = payload.model_dump(exclude_unset=True)
        if (
            updates.get("current_ranking") is not None
            and "previous_ranking" not in updates
            and keyword.current_ranking != updates["current_ranking"]
        ):
            keyword.previous_ranking = keyword.current_ranking
        for field, value in updates.items():
            if field == "keyword" and value is None:
                continue
            setattr(keyword, field, value)
        await self.session.flush()
        await self.session.refresh(keyword)
        return keyword

    async def delete(self, keyword_id: int) -> Keyword:
        keyword = await self._get(Keyword, "Keyword", keyword_id)
        await self.session.delete(keyword)
        await self.session.flush()
        return keyword


class ContentOptimizationStorage(_SiteStorage):
    """Stored content rewrites, manual or AI generated."""

    async def list(self, website_id: int, page: int = 1, page_size: int = 10) -> dict[str, Any]:
        stmt = (
            select(ContentOptimization)
            .where(ContentOptimization.website_id == website_id)
            .order_by(
                ContentOptimization.optimization_date.desc(),
                ContentOptimization.id.desc(),
            )
        )
        return await self._page(stmt, page, page_size)

    async def get_by_id(self, optimization_id: int) -> ContentOptimization | None:
        return await self.session.get(ContentOptimization, optimization_id)

    async def create(
        self, data: ContentOptimizationCreate | dict[str, Any]
    ) -> ContentOptimization:
        payload = validate(ContentOptimizationCreate, data)
        await self._website(payload.website_id)
        optimization = ContentOptimization(**payload.model_dump(), optimization_date=utcnow())
        self.session.add(optimization)
        await self.session.flush()
        return optimization


class BacklinkStorage(_SiteStorage):
    """Inbound links and their review status."""

    async def list(
        self,
        website_id: int,
        page: int = 1,
        page_size: int = 10,
        toxic: bool = False,
    ) -> dict[str, Any]:
        stmt = (
            select(Backlink)
            .where(Backlink.website_id == website_id)
            .order_by(Backlink.last_checked.desc(), Backlink.id.desc())
        )
        if toxic:
            stmt = stmt.where(Backlink.toxicity_score > TOXICITY_THRESHOLD)
        return await self._page(stmt, page, page_size)

    async def create(self, data: BacklinkCreate | dict[str, Any]) -> Backlink:
        payload = validate(BacklinkCreate, data)
        await self._website(payload.website_id)
        now = utcnow()
        backlink = Backlink(**payload.model_dump(), first_discovered=now, last_checked=now)
        self.session.add(backlink)
        await self.session.flush()
        return backlink

    async def update_status(self, backlink_id: int, status: BacklinkStatus) -> Backlink:
        backlink = await self._get(Backlink, "Backlink", backlink_id)
        backlink.status = status
        backlink.last_checked = utcnow()
        await self.session.flush()
        logger.info("backlink_status_updated", backlink_id=backlink_id, status=status.value)
        return backlink


class OnPageOptimizationStorage(_SiteStorage):
    """Per-element page suggestions."""

    async def list(
        self,
        website_id: int,
        page: int = 1,
        page_size: int = 10,
        page_url: str | None = None,
    ) -> dict[str, Any]:
        stmt = (
            select(OnPageOptimization)
            .where(OnPageOptimization.website_id == website_id)
            .order_by(OnPageOptimization.created_at.desc(), OnPageOptimization.id.desc())
        )
        if page_url:
            stmt = stmt.where(OnPageOptimization.page_url == page_url)
        return await self._page(stmt, page, page_size)

    async def create(
        self, data: OnPageOptimizationCreate | dict[str, Any]
    ) -> OnPageOptimization:
        payload = validate(OnPageOptimizationCreate, data)
        await self._website(payload.website_id)
        suggestion = OnPageOptimization(**payload.model_dump())
        if suggestion.status == SuggestionStatus.APPLIED:
            suggestion.applied_at = utcnow()
        self.session.add(suggestion)
        await self.session.flush()
        return suggestion

    async def update_status(
        self, suggestion_id: int, status: SuggestionStatus
    ) -> OnPageOptimization:
        """Set the review status; ``applied_at`` is only kept while applied."""
        suggestion = await self._get(
            OnPageOptimization, "On-page optimization", suggestion_id
        )
        suggestion.status = status
        suggestion.applied_at = utcnow() if status == SuggestionStatus.APPLIED else None
        await self.session.flush()
        return suggestion


class SeoDashboard(_SiteStorage):
    """Aggregate counters for the SEO dashboard."""

    async def get_metrics(self) -> dict[str, Any]:
        websites = (
            await self.session.execute(
                select(func.count(Website.id), func.avg(Website.seo_score))
            )
        ).one()
        keywords = (
            await self.session.execute(
                select(
                    func.count(Keyword.id),
                    func.count(Keyword.id).filter(Keyword.current_ranking <= 10),
                )
            )
        ).one()
        backlinks = (
            await self.session.execute(
                select(
                    func.count(Backlink.id),
                    func.count(Backlink.id).filter(
                        Backlink.toxicity_score > TOXICITY_THRESHOLD
                    ),
                )
            )
        ).one()
        content = (
            await self.session.execute(
                select(
                    func.count(ContentOptimization.id),
                    func.avg(ContentOptimization.seo_score),
                    func.avg(ContentOptimization.readability_score),
                )
            )
        ).one()

        return {
            "website_stats": {
                "total_websites": int(websites[0] or 0),
                "avg_score": _rounded(websites[1]),
            },
            "keyword_stats": {
                "total_keywords": int(keywords[0] or 0),
                "top10_keywords": int(keywords[1] or 0),
            },
            "backlink_stats": {
                "total_backlinks": int(backlinks[0] or 0),
                "toxic_backlinks": int(backlinks[1] or 0),
            },
            "content_stats": {
                "total_optimizations": int(content[0] or 0),
                "avg_seo_score": _rounded(content[1]),
                "avg_readability_score": _rounded(content[2]),
            },
        }


def _rounded(value: Any) -> float | None:
    return None if value is None else round(float(value), 1)
