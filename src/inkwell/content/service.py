"""
Content operations with access control applied.

Each function takes the caller's `Identity` first. Mutations call
`require_admin` before the repository is touched; reads hide unpublished
articles from non-admins, raising `NotFoundError` for single lookups so a
hidden article is indistinguishable from a missing one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from inkwell.authorization import ensure_visible, filter_visible, is_admin, require_admin

from .repository import ArticleRepository, ParagraphRepository
from .schemas import (
    ArticleForm,
    ArticleSchema,
    ParagraphForm,
    ParagraphSchema,
    ParagraphUpdateForm,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from inkwell.authentication import Identity


async def list_articles(db: AsyncSession, identity: Identity) -> list[ArticleSchema]:
    articles = await ArticleRepository(db).find_all()
    return filter_visible(articles, identity)


async def list_articles_paginated(
    db: AsyncSession,
    identity: Identity,
    *,
    offset: int = 0,
    limit: int = 10,
    tag: str = "",
) -> list[ArticleSchema]:
    # Filtered in SQL so offset/limit count visible rows only
    return await ArticleRepository(db).find_paginated(
        tag, offset, limit, published_only=not is_admin(identity)
    )


async def get_article(db: AsyncSession, identity: Identity, key: str | int) -> ArticleSchema:
    """Fetch by numeric id, or by alias when `key` is not all ASCII digits."""
    repo = ArticleRepository(db)
    if isinstance(key, int) or (key.isascii() and key.isdigit()):
        article = await repo.find(int(key))
    else:
        article = await repo.find_by_alias(key)
    return ensure_visible(article, identity)


async def create_article(db: AsyncSession, identity: Identity, title: str) -> ArticleSchema:
    require_admin(identity)
    return await ArticleRepository(db).create(title)


async def update_article(
    db: AsyncSession, identity: Identity, article_id: int, form: ArticleForm
) -> ArticleSchema:
    """Apply `form` over the stored article. Timestamps are left as stored."""
    require_admin(identity)
    repo = ArticleRepository(db)
    current = await repo.find(article_id)
    updated = current.model_copy(update=form.model_dump())
    return await repo.update(updated)


async def delete_article(db: AsyncSession, identity: Identity, article_id: int) -> int:
    require_admin(identity)
    return await ArticleRepository(db).delete(article_id)


async def create_paragraph(
    db: AsyncSession, identity: Identity, form: ParagraphForm
) -> ParagraphSchema:
    require_admin(identity)
    return await ParagraphRepository(db).create(form)


async def get_paragraph(
    db: AsyncSession, identity: Identity, paragraph_id: int
) -> ParagraphSchema:
    require_admin(identity)
    return await ParagraphRepository(db).find(paragraph_id)


async def list_paragraphs(
    db: AsyncSession, identity: Identity, article_id: int | None = None
) -> list[ParagraphSchema]:
    require_admin(identity)
    repo = ParagraphRepository(db)
    if article_id is None:
        return await repo.find_all()
    return await repo.find_by_article_id(article_id)


async def update_paragraph(
    db: AsyncSession, identity: Identity, paragraph_id: int, form: ParagraphUpdateForm
) -> ParagraphSchema:
    require_admin(identity)
    repo = ParagraphRepository(db)
    current = await repo.find(paragraph_id)
    return await repo.update(current.model_copy(update=form.model_dump()))


async def delete_paragraph(db: AsyncSession, identity: Identity, paragraph_id: int) -> int:
    require_admin(identity)
    return await ParagraphRepository(db).delete(paragraph_id)
