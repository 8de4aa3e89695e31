"""
Daily view counters.

One `Stats` row exists per local calendar day and is created on the first
view of that day. Page counters are bumped with a single
`UPDATE ... SET x = x + 1`, so concurrent requests cannot lose increments.
The per-article map lives in one JSON column and has to be read, changed
and written back; those writes are serialised through an `asyncio.Lock`
held by the aggregator, which covers a single-process deployment.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from inkwell.core.exceptions import InkwellError
from inkwell.db import atomic

from .models import Stats
from .schemas import Page, StatsSchema

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


def local_midnight(now: datetime | None = None) -> int:
    """Epoch seconds of 00:00 local time on the day of `now`.

    Naive datetimes are taken as local time.

    Example:
        >>> local_midnight(datetime(2024, 5, 1, 15, 30)) == int(
        ...     datetime(2024, 5, 1).timestamp())
        True
    """
    now = now or datetime.now().astimezone()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return int(midnight.timestamp())


class StatsAggregator:
    """
    Records page and article views against today's row.

    Args:
        clock: Returns the current time; the day key is derived from it.

    Example:
        >>> stats = StatsAggregator()
        >>> await stats.record_page_view(db, Page.HOME)
        >>> (await stats.get_last_days(db, 1))[0].home_views
        1
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._lock = asyncio.Lock()

    def today(self) -> int:
        return local_midnight(self._clock())

    async def find_or_create_today(self, db: AsyncSession) -> StatsSchema:
        """Today's row, inserted with zero counters on the first call of the day."""
        day = self.today()
        row, created = await Stats.objects.get_or_create(
            db,
            defaults={
                "home_views": 0,
                "about_views": 0,
                "donate_views": 0,
                "article_views": {},
            },
            date=day,
        )
        if created:
            logger.info("Started stats row for %s", day)
        else:
            await db.refresh(row)
        # Close the read transaction so writers can open their own
        await db.commit()
        return StatsSchema.model_validate(row)

    async def record_page_view(self, db: AsyncSession, page: Page) -> None:
        day = (await self.find_or_create_today(db)).date
        column = getattr(Stats, page.column)
        async with atomic(db):
            await Stats.objects.filter(Stats.date == day).update(
                db, **{page.column: column + 1}
            )

    async def record_article_view(self, db: AsyncSession, article_id: int) -> None:
        async with self._lock:
            day = (await self.find_or_create_today(db)).date
            async with atomic(db):
                row = await Stats.objects.filter(Stats.date == day).first(db)
                if row is None:
                    return
                await db.refresh(row, ["article_views"])
                views = dict(row.article_views or {})
                views[article_id] = views.get(article_id, 0) + 1
                await Stats.objects.filter(Stats.id == row.id).update(
                    db, article_views=views
                )

    async def get_last_days(self, db: AsyncSession, n: int) -> list[StatsSchema]:
        """The `n` most recent daily rows, newest first."""
        rows = await (
            Stats.objects.all().order_by(Stats.date.desc()).limit(max(n, 0)).fetch(db)
        )
        return [StatsSchema.model_validate(row) for row in rows]


async def record_page_view_best_effort(
    stats: StatsAggregator, db: AsyncSession, page: Page
) -> None:
    """Count a page view; a failure is logged and the page still renders."""
    try:
        await stats.record_page_view(db, page)
    except (InkwellError, SQLAlchemyError):
        logger.warning("Could not record %s page view", page.value, exc_info=True)


async def record_article_view_best_effort(
    stats: StatsAggregator, db: AsyncSession, article_id: int
) -> None:
    try:
        await stats.record_article_view(db, article_id)
    except (InkwellError, SQLAlchemyError):
        logger.warning("Could not record view of article %s", article_id, exc_info=True)
