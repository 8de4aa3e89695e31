from .models import Article, Paragraph, ParagraphType
from .render import render, render_markdown
from .repository import ArticleRepository, ParagraphRepository
from .schemas import (
    ArticleCreateForm,
    ArticleForm,
    ArticleSchema,
    ParagraphForm,
    ParagraphSchema,
    ParagraphUpdateForm,
    now_timestamp,
)

__all__ = [
    "Article",
    "ArticleCreateForm",
    "ArticleForm",
    "ArticleRepository",
    "ArticleSchema",
    "Paragraph",
    "ParagraphForm",
    "ParagraphRepository",
    "ParagraphSchema",
    "ParagraphType",
    "ParagraphUpdateForm",
    "now_timestamp",
    "render",
    "render_markdown",
]
