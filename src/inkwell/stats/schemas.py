from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Page(str, Enum):
    HOME = "home"
    ABOUT = "about"
    DONATE = "donate"

    @property
    def column(self) -> str:
        return f"{self.value}_views"


class StatsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: int
    home_views: int = 0
    about_views: int = 0
    donate_views: int = 0
    article_views: dict[int, int] = Field(default_factory=dict)

    @property
    def day(self) -> str:
        """The row's calendar day in local time, e.g. `2024-05-01`."""
        return datetime.fromtimestamp(self.date).strftime("%Y-%m-%d")

    @property
    def total_article_views(self) -> int:
        return sum(self.article_views.values())
