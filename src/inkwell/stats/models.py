import json

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from inkwell.db.models import Model


class ArticleViews(TypeDecorator):
    """`{article_id: count}` stored as JSON text.

    JSON object keys are strings, so ids are converted back to ints on load.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):  # noqa: ARG002
        return json.dumps({str(k): int(v) for k, v in (value or {}).items()})

    def process_result_value(self, value, dialect):  # noqa: ARG002
        if not value:
            return {}
        return {int(k): int(v) for k, v in json.loads(value).items()}


def _no_views() -> dict[int, int]:
    return {}


class Stats(Model):
    __tablename__ = "stats"

    # Epoch seconds of local midnight, one row per calendar day
    date: Mapped[int] = mapped_column(Integer, unique=True, index=True)
    home_views: Mapped[int] = mapped_column(Integer, default=0)
    about_views: Mapped[int] = mapped_column(Integer, default=0)
    donate_views: Mapped[int] = mapped_column(Integer, default=0)
    article_views: Mapped[dict[int, int]] = mapped_column(
        ArticleViews, default=_no_views
    )

    def __repr__(self) -> str:
        return f"<Stats(date={self.date}, home_views={self.home_views})>"
