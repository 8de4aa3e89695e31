from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.authentication import Identity
from inkwell.authorization import allow_any
from inkwell.content import service
from inkwell.stats import Page, record_article_view_best_effort, record_page_view_best_effort

from ..context import AppContext, get_context, get_db

router = APIRouter(tags=["pages"])

Context = Annotated[AppContext, Depends(get_context)]
Db = Annotated[AsyncSession, Depends(get_db)]
Visitor = Annotated[Identity, Depends(allow_any)]


def _page(ctx: AppContext, request: Request, name: str, **context) -> HTMLResponse:
    return ctx.templates.templates.TemplateResponse(request, name, context)


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, ctx: Context, db: Db, identity: Visitor):
    await record_page_view_best_effort(ctx.stats, db, Page.HOME)
    articles = await service.list_articles(db, identity)
    return _page(ctx, request, "pages/home.html", articles=articles, identity=identity)


@router.get("/about", response_class=HTMLResponse)
async def about(request: Request, ctx: Context, db: Db, identity: Visitor):
    await record_page_view_best_effort(ctx.stats, db, Page.ABOUT)
    return _page(ctx, request, "pages/about.html", identity=identity)


@router.get("/donate", response_class=HTMLResponse)
async def donate(request: Request, ctx: Context, db: Db, identity: Visitor):
    await record_page_view_best_effort(ctx.stats, db, Page.DONATE)
    return _page(ctx, request, "pages/donate.html", identity=identity)


@router.get("/article/{key}", response_class=HTMLResponse)
async def article_detail(
    request: Request, ctx: Context, db: Db, identity: Visitor, key: str
):
    article = await service.get_article(db, identity, key)
    await record_article_view_best_effort(ctx.stats, db, article.id)
    paragraphs = sorted(article.paragraphs or [], key=lambda p: p.position)
    return _page(
        ctx,
        request,
        "pages/article.html",
        article=article,
        paragraphs=paragraphs,
        identity=identity,
    )
