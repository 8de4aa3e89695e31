import re

import pytest
from fastapi.testclient import TestClient


def _stats_row(client: TestClient) -> str:
    html = client.get("/api/stats").text
    return re.sub(r"\s+", " ", html)


@pytest.mark.parametrize(
    ("path", "row"),
    [
        ("/", "<td>1</td> <td>0</td> <td>0</td> <td>0</td>"),
        ("/about", "<td>0</td> <td>1</td> <td>0</td> <td>0</td>"),
        ("/donate", "<td>0</td> <td>0</td> <td>1</td> <td>0</td>"),
    ],
)
def test_page_records_its_view(admin_client: TestClient, path: str, row: str):
    response = admin_client.get(path)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert row in _stats_row(admin_client)


def test_home_lists_published_articles_only(admin_client: TestClient):
    admin_client.post("/api/article", data={"title": "Draft piece"})
    admin_client.post("/api/article", data={"title": "Public piece"})
    admin_client.put("/api/article/2", data={"title": "Public piece", "published": "true"})

    assert "Draft piece" in admin_client.get("/").text

    admin_client.cookies.clear()
    home = admin_client.get("/").text

    assert "Public piece" in home
    assert "Draft piece" not in home


def test_article_view_is_counted(admin_client: TestClient):
    admin_client.post("/api/article", data={"title": "Counted"})
    admin_client.put("/api/article/1", data={"title": "Counted", "published": "true"})

    admin_client.get("/article/1")
    admin_client.get("/article/1")

    assert "<td>0</td> <td>0</td> <td>0</td> <td>2</td>" in _stats_row(admin_client)


def test_missing_article_page(client: TestClient):
    response = client.get("/article/does-not-exist")
    assert response.status_code == 404


def test_admin_navigation_only_for_admin(admin_client: TestClient):
    assert "/api/logout" in admin_client.get("/about").text

    admin_client.cookies.clear()
    assert "/api/logout" not in admin_client.get("/about").text


def test_lifespan_owns_the_engine(app):
    context = app.state.context
    assert context.engine is None
    assert context.session_factory is None

    with TestClient(app):
        assert context.engine is not None
        assert context.session_factory.kw["bind"] is context.engine

    assert context.engine is None
    assert context.session_factory is None
