"""
HTTP API under `/api`.

Most responses are HTML fragments meant to be swapped into a page by htmx;
single-resource reads return JSON. Admin-only routes declare
`admin_required`, which rejects other callers with 401 before the route body
runs.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import HTMLResponse, JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.authentication import (
    Identity,
    LoginForm,
    clear_session_cookie,
    set_session_cookie,
)
from inkwell.authorization import admin_required, allow_any
from inkwell.contacts import ContactForm, ContactRepository
from inkwell.content import (
    ArticleForm,
    ParagraphForm,
    ParagraphUpdateForm,
    service,
)
from inkwell.core.schemas import PaginationParams
from inkwell.media import list_files, save_upload

from ..context import AppContext, get_context, get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])

Context = Annotated[AppContext, Depends(get_context)]
Db = Annotated[AsyncSession, Depends(get_db)]
Admin = Annotated[Identity, Depends(admin_required)]
Visitor = Annotated[Identity, Depends(allow_any)]


# --- Authentication ---


@router.post("/login")
async def login(
    ctx: Context,
    user: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> HTMLResponse:
    form = LoginForm(user=user, password=password)
    result = ctx.backend.login(form.user, form.password)
    if not result.success:
        return HTMLResponse("failed to login", status_code=status.HTTP_401_UNAUTHORIZED)
    response = HTMLResponse("success")
    set_session_cookie(
        response, result.extra["session_id"], cookie_name=ctx.backend.cookie_name
    )
    return response


@router.get("/logout")
async def logout(ctx: Context, identity: Admin) -> HTMLResponse:
    ctx.backend.logout(identity)
    response = HTMLResponse("logged out")
    clear_session_cookie(response, cookie_name=ctx.backend.cookie_name)
    return response


# --- Articles ---


def _preview_boxes(ctx: AppContext, articles, identity: Identity) -> HTMLResponse:
    html = ctx.templates.render(
        "components/article_preview_box.html",
        {"articles": articles, "identity": identity},
    )
    return HTMLResponse(html)


@router.get("/article")
async def article_list(ctx: Context, db: Db, identity: Visitor) -> HTMLResponse:
    articles = await service.list_articles(db, identity)
    return _preview_boxes(ctx, articles, identity)


@router.get("/articles/{offset}/{limit}")
async def article_list_paginated(
    ctx: Context, db: Db, identity: Visitor, offset: int, limit: int
) -> HTMLResponse:
    page = PaginationParams(offset=offset, limit=limit)
    articles = await service.list_articles_paginated(
        db, identity, offset=page.offset, limit=page.limit
    )
    return _preview_boxes(ctx, articles, identity)


@router.get("/articles/{offset}/{limit}/{tag}")
async def article_list_paginated_by_tag(
    ctx: Context, db: Db, identity: Visitor, offset: int, limit: int, tag: str
) -> HTMLResponse:
    page = PaginationParams(offset=offset, limit=limit)
    articles = await service.list_articles_paginated(
        db, identity, offset=page.offset, limit=page.limit, tag=tag
    )
    return _preview_boxes(ctx, articles, identity)


@router.post("/article", status_code=status.HTTP_201_CREATED)
async def article_create(
    db: Db, identity: Admin, title: Annotated[str, Form()]
) -> HTMLResponse:
    await service.create_article(db, identity, title)
    return HTMLResponse("created", status_code=status.HTTP_201_CREATED)


@router.get("/article/{key}")
async def article_get(db: Db, identity: Visitor, key: str) -> JSONResponse:
    article = await service.get_article(db, identity, key)
    return JSONResponse(article.model_dump(mode="json"))


@router.put("/article/{article_id}")
async def article_update(
    ctx: Context,
    db: Db,
    identity: Admin,
    article_id: int,
    title: Annotated[str, Form()],
    teaser: Annotated[str, Form()] = "",
    cover: Annotated[str, Form()] = "",
    alias: Annotated[str, Form()] = "",
    tags: Annotated[str, Form()] = "",
    published: Annotated[bool, Form()] = False,
) -> HTMLResponse:
    form = ArticleForm(
        title=title,
        teaser=teaser,
        cover=cover,
        alias=alias,
        tags=tags,
        published=published,
    )
    article = await service.update_article(db, identity, article_id, form)
    html = ctx.templates.render(
        "components/article_header.html", {"article": article, "identity": identity}
    )
    return HTMLResponse(html)


@router.delete("/article/{article_id}")
async def article_delete(db: Db, identity: Admin, article_id: int) -> HTMLResponse:
    await service.delete_article(db, identity, article_id)
    return HTMLResponse("deleted")


# --- Paragraphs ---


@router.post("/paragraph", status_code=status.HTTP_201_CREATED)
async def paragraph_create(
    db: Db,
    identity: Admin,
    article_id: Annotated[int, Form()],
    paragraph_type: Annotated[str, Form()] = "markdown",
    content: Annotated[str, Form()] = "",
    position: Annotated[int, Form()] = 0,
) -> JSONResponse:
    form = ParagraphForm(
        article_id=article_id,
        paragraph_type=paragraph_type,
        content=content,
        position=position,
    )
    paragraph = await service.create_paragraph(db, identity, form)
    return JSONResponse(
        paragraph.model_dump(mode="json"), status_code=status.HTTP_201_CREATED
    )


@router.get("/paragraph/{paragraph_id}")
async def paragraph_get(db: Db, identity: Admin, paragraph_id: int) -> HTMLResponse:
    paragraph = await service.get_paragraph(db, identity, paragraph_id)
    return HTMLResponse(paragraph.html)


@router.get("/paragraph/{paragraph_id}/raw")
async def paragraph_get_raw(db: Db, identity: Admin, paragraph_id: int) -> JSONResponse:
    paragraph = await service.get_paragraph(db, identity, paragraph_id)
    return JSONResponse(paragraph.model_dump(mode="json", exclude={"rendered"}))


@router.put("/paragraph/{paragraph_id}")
async def paragraph_update(
    db: Db,
    identity: Admin,
    paragraph_id: int,
    paragraph_type: Annotated[str, Form()] = "markdown",
    content: Annotated[str, Form()] = "",
) -> HTMLResponse:
    form = ParagraphUpdateForm(paragraph_type=paragraph_type, content=content)
    await service.update_paragraph(db, identity, paragraph_id, form)
    return HTMLResponse("updated")


@router.delete("/paragraph/{paragraph_id}")
async def paragraph_delete(db: Db, identity: Admin, paragraph_id: int) -> HTMLResponse:
    await service.delete_paragraph(db, identity, paragraph_id)
    return HTMLResponse("deleted")


# --- Files ---


@router.get("/files")
async def file_list(ctx: Context, identity: Admin) -> HTMLResponse:  # noqa: ARG001
    media_root = ctx.settings.MEDIA_ROOT.rstrip("/")
    files = [f"{media_root}/{path.as_posix()}" for path in list_files(media_root)]
    html = ctx.templates.render("components/file_list.html", {"files": files})
    return HTMLResponse(html)


@router.post("/files/{article_id}")
async def file_upload(
    ctx: Context,
    identity: Admin,  # noqa: ARG001
    article_id: int,
    files: Annotated[list[UploadFile], File()],
) -> HTMLResponse:
    saved = []
    for upload in files:
        data = await upload.read()
        saved.append(
            save_upload(ctx.settings.MEDIA_ROOT, article_id, upload.filename or "", data)
        )
    logger.info("Uploaded %d file(s) for article %s", len(saved), article_id)
    return HTMLResponse("uploaded")


# --- Stats ---


@router.get("/stats")
async def stats(ctx: Context, db: Db, identity: Admin) -> HTMLResponse:  # noqa: ARG001
    days = await ctx.stats.get_last_days(db, ctx.settings.STATS_DAYS)
    contacts = ContactRepository(db)
    html = ctx.templates.render(
        "components/stats.html",
        {
            "stats": days,
            "message_count": await contacts.count_all(),
            "recent_messages": await contacts.find_recent(
                ctx.settings.CONTACT_PREVIEW_LIMIT
            ),
        },
    )
    return HTMLResponse(html)


# --- Contact ---


@router.post("/contact")
async def contact_create(
    ctx: Context,
    db: Db,
    email: Annotated[str, Form()],
    subject: Annotated[str, Form()] = "",
    message: Annotated[str, Form()] = "",
) -> HTMLResponse:
    form = ContactForm(email=email, subject=subject, message=message)
    await ContactRepository(db).create(form)
    return HTMLResponse(ctx.templates.render("components/success.html"))


@router.get("/contact/{contact_id}")
async def contact_get(
    ctx: Context,
    db: Db,
    identity: Admin,  # noqa: ARG001
    contact_id: int,
) -> HTMLResponse:
    mail = await ContactRepository(db).find(contact_id)
    return HTMLResponse(ctx.templates.render("components/mail.html", {"mail": mail}))
