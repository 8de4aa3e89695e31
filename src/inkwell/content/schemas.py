import time

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import ParagraphType


def now_timestamp() -> int:
    """Current time as epoch seconds."""
    return int(time.time())


class ParagraphSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    article_id: int
    title: str = ""
    description: str = ""
    paragraph_type: ParagraphType = ParagraphType.MARKDOWN
    position: int = 0
    content: str = ""
    # Derived at read time, never stored
    rendered: str | None = None

    @property
    def html(self) -> str:
        """What a page should show: the rendered markup, else raw content."""
        return self.rendered if self.rendered is not None else self.content


class ArticleSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    title: str = ""
    teaser: str = ""
    cover: str = ""
    alias: str = ""
    tags: str = ""
    created_at: int = Field(default_factory=now_timestamp)
    updated_at: int = Field(default_factory=now_timestamp)
    published: bool = False
    paragraphs: list[ParagraphSchema] | None = None

    @classmethod
    def new(cls, title: str) -> "ArticleSchema":
        """A fresh unpublished article; both timestamps share one instant."""
        now = now_timestamp()
        return cls(title=title, created_at=now, updated_at=now)

    @property
    def key(self) -> str:
        """Path segment used to link to this article."""
        return self.alias or str(self.id)


class ArticleCreateForm(BaseModel):
    title: str


class ArticleForm(BaseModel):
    """Editable article fields, replaced wholesale on update."""

    title: str
    teaser: str = ""
    cover: str = ""
    alias: str = ""
    tags: str = ""
    published: bool = False

    @field_validator("alias")
    @classmethod
    def strip_alias(cls, v: str) -> str:
        return v.strip()


class ParagraphForm(BaseModel):
    article_id: int
    paragraph_type: ParagraphType = ParagraphType.MARKDOWN
    content: str = ""
    position: int = 0
    title: str = ""
    description: str = ""

    @field_validator("paragraph_type", mode="before")
    @classmethod
    def parse_type(cls, v):
        if isinstance(v, str):
            return ParagraphType.parse(v.lower())
        return v


class ParagraphUpdateForm(BaseModel):
    paragraph_type: ParagraphType = ParagraphType.MARKDOWN
    content: str = ""

    @field_validator("paragraph_type", mode="before")
    @classmethod
    def parse_type(cls, v):
        if isinstance(v, str):
            return ParagraphType.parse(v.lower())
        return v
