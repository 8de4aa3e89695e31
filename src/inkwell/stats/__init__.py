from .aggregator import (
    StatsAggregator,
    local_midnight,
    record_article_view_best_effort,
    record_page_view_best_effort,
)
from .models import Stats
from .schemas import Page, StatsSchema

__all__ = [
    "Page",
    "Stats",
    "StatsAggregator",
    "StatsSchema",
    "local_midnight",
    "record_article_view_best_effort",
    "record_page_view_best_effort",
]
