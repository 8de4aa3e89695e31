from enum import Enum

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from inkwell.db.models import Model


class ParagraphType(str, Enum):
    MARKDOWN = "markdown"
    HTML = "html"

    @classmethod
    def parse(cls, value: str | None) -> "ParagraphType":
        """Map a stored value back to a type; anything unknown is html."""
        if value == cls.MARKDOWN.value:
            return cls.MARKDOWN
        return cls.HTML


class ParagraphTypeColumn(TypeDecorator):
    """Stores `ParagraphType` as its lowercase name."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):  # noqa: ARG002
        if value is None:
            return ParagraphType.HTML.value
        return ParagraphType.parse(getattr(value, "value", value)).value

    def process_result_value(self, value, dialect):  # noqa: ARG002
        return ParagraphType.parse(value)


class Article(Model):
    __tablename__ = "article"

    title: Mapped[str] = mapped_column(String(255), default="")
    teaser: Mapped[str] = mapped_column(Text, default="")
    cover: Mapped[str] = mapped_column(String(512), default="")
    alias: Mapped[str] = mapped_column(String(255), default="", index=True)
    tags: Mapped[str] = mapped_column(String(512), default="")
    # Epoch seconds; updated_at is written only by callers
    created_at: Mapped[int] = mapped_column(Integer, index=True)
    updated_at: Mapped[int] = mapped_column(Integer)
    published: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return f"<Article(id={self.id}, title='{self.title}')>"


class Paragraph(Model):
    __tablename__ = "paragraph"

    # Plain reference: deleting an article leaves its paragraphs in place
    article_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), default="")
    description: Mapped[str] = mapped_column(Text, default="")
    paragraph_type: Mapped[ParagraphType] = mapped_column(
        ParagraphTypeColumn, default=ParagraphType.MARKDOWN
    )
    position: Mapped[int] = mapped_column(Integer, default=0)
    content: Mapped[str] = mapped_column(Text, default="")

    def __repr__(self) -> str:
        return f"<Paragraph(id={self.id}, article_id={self.article_id})>"
