import pytest

from inkwell.content import (
    ArticleRepository,
    ArticleSchema,
    ParagraphForm,
    ParagraphRepository,
    ParagraphType,
)
from inkwell.content.repository import ARTICLE_FIELDS
from inkwell.core.exceptions import NotFoundError, ValidationFailure

pytestmark = pytest.mark.asyncio


@pytest.fixture
def articles(db_session) -> ArticleRepository:
    return ArticleRepository(db_session)


@pytest.fixture
def paragraphs(db_session) -> ParagraphRepository:
    return ParagraphRepository(db_session)


async def _article(repo: ArticleRepository, title: str, created_at: int, **fields):
    return await repo.insert(
        ArticleSchema(title=title, created_at=created_at, updated_at=created_at, **fields)
    )


class TestArticleRepository:
    async def test_create_defaults(self, articles: ArticleRepository):
        article = await articles.create("Hello")

        assert article.id is not None
        assert article.title == "Hello"
        assert article.published is False
        assert article.teaser == article.cover == article.alias == article.tags == ""
        assert article.created_at == article.updated_at
        assert article.paragraphs is None

    async def test_round_trip_by_id(self, articles: ArticleRepository):
        original = ArticleSchema(
            title="Round trip",
            teaser="tease",
            cover="/static/media/1/c.png",
            alias="round-trip",
            tags="rust,systems",
            created_at=1_700_000_000,
            updated_at=1_700_000_500,
            published=True,
        )
        saved = await articles.insert(original)
        fetched = await articles.find(saved.id)

        assert original.id is None
        assert fetched.id == saved.id
        for field in ARTICLE_FIELDS:
            assert getattr(fetched, field) == getattr(original, field), field
        assert fetched.paragraphs == []

    async def test_find_missing(self, articles: ArticleRepository):
        with pytest.raises(NotFoundError):
            await articles.find(999)

    async def test_find_by_alias(self, articles: ArticleRepository, paragraphs):
        article = await _article(articles, "Aliased", 1, alias="hello-world")
        await paragraphs.create(ParagraphForm(article_id=article.id, content="# Hi"))

        found = await articles.find_by_alias("hello-world")

        assert found.id == article.id
        assert len(found.paragraphs) == 1
        assert "<h1>" in found.paragraphs[0].rendered

    async def test_empty_alias_never_matches(self, articles: ArticleRepository):
        await articles.create("No alias")
        with pytest.raises(NotFoundError):
            await articles.find_by_alias("")

    async def test_duplicate_alias_rejected(self, articles: ArticleRepository):
        await _article(articles, "First", 1, alias="same")
        with pytest.raises(ValidationFailure):
            await _article(articles, "Second", 2, alias="same")

    async def test_empty_aliases_may_repeat(self, articles: ArticleRepository):
        await articles.create("One")
        await articles.create("Two")
        assert len(await articles.find_all()) == 2

    async def test_find_all_newest_first_without_paragraphs(
        self, articles: ArticleRepository, paragraphs
    ):
        old = await _article(articles, "Old", 100)
        new = await _article(articles, "New", 300)
        mid = await _article(articles, "Mid", 200)
        await paragraphs.create(ParagraphForm(article_id=new.id, content="x"))

        listed = await articles.find_all()

        assert [a.id for a in listed] == [new.id, mid.id, old.id]
        assert all(a.paragraphs is None for a in listed)

    async def test_find_all_published_only(self, articles: ArticleRepository):
        await _article(articles, "Live", 1, published=True)
        await _article(articles, "Draft", 2)

        assert [a.title for a in await articles.find_all(published_only=True)] == ["Live"]

    async def test_tag_filter(self, articles: ArticleRepository):
        tagged = await _article(articles, "Tagged", 1, tags="rust,systems")

        assert [a.id for a in await articles.find_paginated("rust", 0, 10)] == [tagged.id]
        assert [a.id for a in await articles.find_paginated("", 0, 10)] == [tagged.id]
        assert await articles.find_paginated("python", 0, 10) == []

    async def test_tag_filter_escapes_wildcards(self, articles: ArticleRepository):
        await _article(articles, "Plain", 1, tags="rust")
        assert await articles.find_paginated("%", 0, 10) == []
        assert await articles.find_paginated("_", 0, 10) == []

    async def test_pagination_window(self, articles: ArticleRepository):
        for i in range(5):
            await _article(articles, f"A{i}", i)

        page = await articles.find_paginated("", 1, 2)

        assert [a.title for a in page] == ["A3", "A2"]

    async def test_pagination_counts_published_only(self, articles: ArticleRepository):
        await _article(articles, "Live old", 1, published=True)
        await _article(articles, "Draft", 2)
        await _article(articles, "Live new", 3, published=True)

        page = await articles.find_paginated("", 0, 2, published_only=True)

        assert [a.title for a in page] == ["Live new", "Live old"]

    async def test_update_replaces_all_fields(self, articles: ArticleRepository):
        article = await _article(articles, "Before", 10)
        changed = article.model_copy(
            update={
                "title": "After",
                "teaser": "t",
                "cover": "c",
                "alias": "after",
                "tags": "x",
                "published": True,
                "updated_at": 20,
            }
        )

        await articles.update(changed)
        fetched = await articles.find(article.id)

        assert fetched.title == "After"
        assert fetched.alias == "after"
        assert fetched.published is True
        assert fetched.created_at == 10
        assert fetched.updated_at == 20

    async def test_update_may_keep_own_alias(self, articles: ArticleRepository):
        article = await _article(articles, "Mine", 1, alias="mine")
        updated = await articles.update(article.model_copy(update={"title": "Still mine"}))
        assert updated.alias == "mine"

    async def test_update_cannot_steal_alias(self, articles: ArticleRepository):
        await _article(articles, "Owner", 1, alias="taken")
        other = await _article(articles, "Other", 2)
        with pytest.raises(ValidationFailure):
            await articles.update(other.model_copy(update={"alias": "taken"}))

    async def test_update_missing(self, articles: ArticleRepository):
        with pytest.raises(NotFoundError):
            await articles.update(ArticleSchema(id=404, title="ghost"))

    async def test_delete_leaves_paragraphs(self, articles: ArticleRepository, paragraphs):
        article = await articles.create("Doomed")
        paragraph = await paragraphs.create(ParagraphForm(article_id=article.id))

        assert await articles.delete(article.id) == 1

        with pytest.raises(NotFoundError):
            await articles.find(article.id)
        orphan = await paragraphs.find(paragraph.id)
        assert orphan.article_id == article.id

    async def test_delete_missing_is_noop(self, articles: ArticleRepository):
        assert await articles.delete(12345) == 0


class TestParagraphRepository:
    async def test_create_defaults(self, articles, paragraphs: ParagraphRepository):
        article = await articles.create("Host")
        paragraph = await paragraphs.create(
            ParagraphForm(article_id=article.id, content="plain", position=3)
        )

        assert paragraph.id is not None
        assert paragraph.title == paragraph.description == ""
        assert paragraph.position == 3
        assert paragraph.paragraph_type is ParagraphType.MARKDOWN

    async def test_markdown_rendered_on_read(self, articles, paragraphs):
        article = await articles.create("Host")
        created = await paragraphs.create(
            ParagraphForm(article_id=article.id, content="# Hi")
        )

        found = await paragraphs.find(created.id)

        assert found.content == "# Hi"
        assert "<h1>" in found.rendered
        assert found.html == found.rendered

    async def test_html_not_rendered(self, articles, paragraphs):
        article = await articles.create("Host")
        created = await paragraphs.create(
            ParagraphForm(
                article_id=article.id, content="# Hi", paragraph_type=ParagraphType.HTML
            )
        )

        found = await paragraphs.find(created.id)

        assert found.rendered is None
        assert found.html == "# Hi"

    async def test_find_by_article_id(self, articles, paragraphs):
        a = await articles.create("A")
        b = await articles.create("B")
        await paragraphs.create(ParagraphForm(article_id=a.id, content="a1"))
        await paragraphs.create(ParagraphForm(article_id=b.id, content="b1"))
        await paragraphs.create(ParagraphForm(article_id=a.id, content="a2"))

        found = await paragraphs.find_by_article_id(a.id)

        assert sorted(p.content for p in found) == ["a1", "a2"]
        assert len(await paragraphs.find_all()) == 3

    async def test_update_changes_content_and_type_only(self, articles, paragraphs):
        article = await articles.create("Host")
        created = await paragraphs.create(
            ParagraphForm(
                article_id=article.id,
                content="old",
                position=4,
                title="keep",
                description="keep too",
            )
        )
        changed = created.model_copy(
            update={
                "content": "<b>new</b>",
                "paragraph_type": ParagraphType.HTML,
                "title": "ignored",
                "position": 99,
            }
        )

        await paragraphs.update(changed)
        found = await paragraphs.find(created.id)

        assert found.content == "<b>new</b>"
        assert found.paragraph_type is ParagraphType.HTML
        assert found.rendered is None
        assert found.title == "keep"
        assert found.description == "keep too"
        assert found.position == 4

    async def test_delete(self, articles, paragraphs):
        article = await articles.create("Host")
        created = await paragraphs.create(ParagraphForm(article_id=article.id))

        assert await paragraphs.delete(created.id) == 1
        with pytest.raises(NotFoundError):
            await paragraphs.find(created.id)
