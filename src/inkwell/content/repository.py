from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from inkwell.core.exceptions import ValidationFailure
from inkwell.db.exceptions import DoesNotExistError

from .models import Article, Paragraph
from .render import render
from .schemas import ArticleSchema, ParagraphForm, ParagraphSchema

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

ARTICLE_FIELDS = (
    "title",
    "teaser",
    "cover",
    "alias",
    "tags",
    "created_at",
    "updated_at",
    "published",
)


def _article_schema(row: Article) -> ArticleSchema:
    return ArticleSchema(**{f: getattr(row, f) for f in ARTICLE_FIELDS}, id=row.id)


def _paragraph_schema(row: Paragraph) -> ParagraphSchema:
    schema = ParagraphSchema.model_validate(row)
    schema.rendered = render(schema.content, schema.paragraph_type)
    return schema


class ParagraphRepository:
    """Paragraph storage. Every read runs the render pipeline."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, form: ParagraphForm) -> ParagraphSchema:
        row = await Paragraph.objects.create(self.db, **form.model_dump())
        logger.debug("Created paragraph %s for article %s", row.id, row.article_id)
        return _paragraph_schema(row)

    async def find(self, paragraph_id: int) -> ParagraphSchema:
        row = await Paragraph.objects.get_by_pk(self.db, paragraph_id)
        return _paragraph_schema(row)

    async def find_all(self) -> list[ParagraphSchema]:
        rows = await Paragraph.objects.all().fetch(self.db)
        return [_paragraph_schema(row) for row in rows]

    async def find_by_article_id(self, article_id: int) -> list[ParagraphSchema]:
        """All paragraphs of an article, in storage order.

        Callers that need a strict sequence sort on `position` themselves.
        """
        rows = await Paragraph.objects.filter(
            Paragraph.article_id == article_id
        ).fetch(self.db)
        return [_paragraph_schema(row) for row in rows]

    async def update(self, paragraph: ParagraphSchema) -> ParagraphSchema:
        """Replace content and type; title, description and position stay."""
        if paragraph.id is None:
            msg = "Cannot update a paragraph without an id"
            raise ValidationFailure(msg)
        row = await Paragraph.objects.update(
            self.db,
            paragraph.id,
            content=paragraph.content,
            paragraph_type=paragraph.paragraph_type,
        )
        return _paragraph_schema(row)

    async def delete(self, paragraph_id: int) -> int:
        return await Paragraph.objects.delete_by_pk(self.db, paragraph_id)


class ArticleRepository:
    """
    Article storage bound to one `AsyncSession`.

    Lookups by id or alias attach the article's paragraphs; list queries
    never do. Deleting an article leaves its paragraphs untouched.

    Example:
        >>> repo = ArticleRepository(db)
        >>> article = await repo.create("Hello")
        >>> (await repo.find(article.id)).paragraphs
        []
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.paragraphs = ParagraphRepository(db)

    async def _ensure_alias_free(
        self, alias: str, exclude_id: int | None = None
    ) -> None:
        if not alias:
            return
        qs = Article.objects.filter(Article.alias == alias)
        if exclude_id is not None:
            qs = qs.filter(Article.id != exclude_id)
        if await qs.exists(self.db):
            msg = f"Alias '{alias}' is already in use"
            raise ValidationFailure(msg)

    async def _with_paragraphs(self, row: Article) -> ArticleSchema:
        article = _article_schema(row)
        article.paragraphs = await self.paragraphs.find_by_article_id(row.id)
        return article

    async def create(self, title: str) -> ArticleSchema:
        """Insert an unpublished article with only a title."""
        return await self.insert(ArticleSchema.new(title))

    async def insert(self, article: ArticleSchema) -> ArticleSchema:
        """Persist `article` and return it with the assigned id."""
        await self._ensure_alias_free(article.alias)
        row = await Article.objects.create(
            self.db, **article.model_dump(include=set(ARTICLE_FIELDS))
        )
        logger.info("Created article %s (%r)", row.id, row.title)
        return _article_schema(row)

    async def find(self, article_id: int) -> ArticleSchema:
        row = await Article.objects.get_by_pk(self.db, article_id)
        return await self._with_paragraphs(row)

    async def find_by_alias(self, alias: str) -> ArticleSchema:
        if not alias:
            msg = "Article matching query does not exist"
            raise DoesNotExistError(msg)
        row = await Article.objects.get(self.db, Article.alias == alias)
        return await self._with_paragraphs(row)

    async def find_all(self, *, published_only: bool = False) -> list[ArticleSchema]:
        """Every article, newest first."""
        qs = Article.objects.all()
        if published_only:
            qs = qs.filter(Article.published.is_(True))
        rows: Sequence[Article] = await qs.order_by(
            Article.created_at.desc(), Article.id.desc()
        ).fetch(self.db)
        return [_article_schema(row) for row in rows]

    async def find_paginated(
        self,
        tag: str = "",
        offset: int = 0,
        limit: int = 10,
        *,
        published_only: bool = False,
    ) -> list[ArticleSchema]:
        """A page of articles, newest first.

        Args:
            tag: Substring matched against `tags`; empty matches everything.
            offset: Rows to skip.
            limit: Maximum rows returned.
            published_only: Count and return published rows only.

        Example:
            >>> await repo.find_paginated("rust", 0, 5)
            # SELECT * FROM article WHERE tags LIKE '%rust%'
            #   ORDER BY created_at DESC LIMIT 5 OFFSET 0;
        """
        qs = Article.objects.all()
        if tag:
            qs = qs.filter(Article.tags.contains(tag, autoescape=True))
        if published_only:
            qs = qs.filter(Article.published.is_(True))
        rows = await (
            qs.order_by(Article.created_at.desc(), Article.id.desc())
            .offset(max(offset, 0))
            .limit(max(limit, 0))
            .fetch(self.db)
        )
        return [_article_schema(row) for row in rows]

    async def update(self, article: ArticleSchema) -> ArticleSchema:
        """Replace every stored field of the article with `article`'s values."""
        if article.id is None:
            msg = "Cannot update an article without an id"
            raise ValidationFailure(msg)
        await self._ensure_alias_free(article.alias, exclude_id=article.id)
        row = await Article.objects.update(
            self.db, article.id, **article.model_dump(include=set(ARTICLE_FIELDS))
        )
        logger.info("Updated article %s", row.id)
        return _article_schema(row)

    async def delete(self, article_id: int) -> int:
        """Remove the article row; returns the number of rows deleted."""
        count = await Article.objects.delete_by_pk(self.db, article_id)
        if count:
            logger.info("Deleted article %s", article_id)
        return count
