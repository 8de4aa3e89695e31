import re
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from inkwell.authentication import UserState


def _create_article(client: TestClient, title: str = "Hello") -> dict:
    response = client.post("/api/article", data={"title": title})
    assert response.status_code == 201
    assert response.text == "created"
    listed = client.get("/api/article")
    ids = re.findall(r'hx-delete="/api/article/(\d+)"', listed.text)
    return client.get(f"/api/article/{max(map(int, ids))}").json()


def _publish(client: TestClient, article_id: int, **fields) -> None:
    data = {"title": "Hello", "published": "true", **fields}
    response = client.put(f"/api/article/{article_id}", data=data)
    assert response.status_code == 200


def _anonymous(client: TestClient) -> str | None:
    """Drop the session cookie and return it for later restoring."""
    token = client.cookies.get("auth")
    client.cookies.clear()
    return token


class TestLogin:
    def test_success_sets_admin_session(self, app: FastAPI, settings, client: TestClient):
        response = client.post(
            "/api/login",
            data={"user": settings.ADMIN_USER, "password": settings.ADMIN_PASSWORD},
        )

        assert response.status_code == 200
        assert response.text == "success"
        session_id = int(response.cookies["auth"])
        session = app.state.context.sessions.lookup(session_id)
        assert session.user_state is UserState.ADMIN

    @pytest.mark.parametrize(
        ("user", "password"),
        [("admin", "wrong"), ("root", "correct horse battery staple"), ("", "")],
    )
    def test_failure(self, app: FastAPI, client: TestClient, user, password):
        response = client.post("/api/login", data={"user": user, "password": password})

        assert response.status_code == 401
        assert response.text == "failed to login"
        assert "auth" not in response.cookies
        assert len(app.state.context.sessions) == 0

    def test_logout_invalidates_session(
        self, app: FastAPI, admin_client: TestClient, admin_session_id: int
    ):
        assert admin_client.get("/api/stats").status_code == 200

        response = admin_client.get("/api/logout")

        assert response.status_code == 200
        assert response.text == "logged out"
        assert admin_session_id not in app.state.context.sessions

        # Replaying the old cookie no longer works
        admin_client.cookies.set("auth", str(admin_session_id))
        assert admin_client.get("/api/stats").status_code == 401

    def test_logout_requires_session(self, client: TestClient):
        assert client.get("/api/logout").status_code == 401

    def test_garbage_cookie_is_anonymous(self, client: TestClient):
        client.cookies.set("auth", "not-a-number")
        assert client.get("/api/stats").status_code == 401
        assert client.get("/api/article").status_code == 200


class TestArticles:
    def test_anonymous_cannot_delete(self, admin_client: TestClient):
        article = _create_article(admin_client)
        token = _anonymous(admin_client)

        response = admin_client.delete(f"/api/article/{article['id']}")
        assert response.status_code == 401

        admin_client.cookies.set("auth", token)
        assert admin_client.get(f"/api/article/{article['id']}").status_code == 200

    def test_anonymous_cannot_create(self, client: TestClient):
        assert client.post("/api/article", data={"title": "x"}).status_code == 401

    def test_draft_hidden_from_visitors(self, admin_client: TestClient):
        article = _create_article(admin_client, "Secret")
        token = _anonymous(admin_client)

        api = admin_client.get(f"/api/article/{article['id']}")
        page = admin_client.get(f"/article/{article['id']}")
        listing = admin_client.get("/api/article")

        assert api.status_code == 404
        assert api.json() == {"detail": "Not Found"}
        assert page.status_code == 404
        assert "Secret" not in listing.text

        admin_client.cookies.set("auth", token)
        assert admin_client.get(f"/api/article/{article['id']}").status_code == 200

    def test_published_article_by_alias(self, admin_client: TestClient):
        article = _create_article(admin_client)
        _publish(admin_client, article["id"], alias="hello-world", tags="rust")
        _anonymous(admin_client)

        fetched = admin_client.get("/api/article/hello-world")

        assert fetched.status_code == 200
        body = fetched.json()
        assert body["id"] == article["id"]
        assert body["published"] is True
        assert body["paragraphs"] == []
        assert admin_client.get("/article/hello-world").status_code == 200

    def test_paginated_listing(self, admin_client: TestClient):
        for title in ("First", "Second", "Third"):
            article = _create_article(admin_client, title)
            _publish(admin_client, article["id"], title=title, tags="news")
        _anonymous(admin_client)

        page = admin_client.get("/api/articles/1/1")
        tagged = admin_client.get("/api/articles/0/10/news")
        untagged = admin_client.get("/api/articles/0/10/sports")

        assert page.status_code == 200
        assert page.text.count("article-preview") == 1
        assert tagged.text.count("article-preview") == 3
        assert "Nothing here yet." in untagged.text

    def test_delete(self, admin_client: TestClient):
        article = _create_article(admin_client)

        response = admin_client.delete(f"/api/article/{article['id']}")

        assert response.status_code == 200
        assert response.text == "deleted"
        assert admin_client.get(f"/api/article/{article['id']}").status_code == 404

    def test_duplicate_alias_is_bad_request(self, admin_client: TestClient):
        first = _create_article(admin_client, "First")
        second = _create_article(admin_client, "Second")
        _publish(admin_client, first["id"], alias="taken")

        response = admin_client.put(
            f"/api/article/{second['id']}", data={"title": "Second", "alias": "taken"}
        )

        assert response.status_code == 400


class TestParagraphs:
    def test_lifecycle(self, admin_client: TestClient):
        article = _create_article(admin_client)

        created = admin_client.post(
            "/api/paragraph",
            data={"article_id": article["id"], "content": "# Title", "position": 2},
        )
        assert created.status_code == 201
        paragraph = created.json()
        assert paragraph["paragraph_type"] == "markdown"
        assert "<h1>" in paragraph["rendered"]

        html = admin_client.get(f"/api/paragraph/{paragraph['id']}")
        assert "<h1>Title</h1>" in html.text

        raw = admin_client.get(f"/api/paragraph/{paragraph['id']}/raw").json()
        assert raw["content"] == "# Title"
        assert "rendered" not in raw

        updated = admin_client.put(
            f"/api/paragraph/{paragraph['id']}",
            data={"paragraph_type": "html", "content": "<em>x</em>"},
        )
        assert updated.text == "updated"
        assert admin_client.get(f"/api/paragraph/{paragraph['id']}").text == "<em>x</em>"

        assert admin_client.delete(f"/api/paragraph/{paragraph['id']}").text == "deleted"
        assert admin_client.get(f"/api/paragraph/{paragraph['id']}").status_code == 404

    def test_article_page_orders_paragraphs(self, admin_client: TestClient):
        article = _create_article(admin_client)
        _publish(admin_client, article["id"])
        for position, text in ((2, "SECOND"), (1, "FIRST")):
            admin_client.post(
                "/api/paragraph",
                data={"article_id": article["id"], "content": text, "position": position},
            )

        page = admin_client.get(f"/article/{article['id']}").text

        assert page.index("FIRST") < page.index("SECOND")

    def test_visitors_cannot_read_paragraph_endpoints(self, client: TestClient):
        assert client.get("/api/paragraph/1").status_code == 401
        assert client.post("/api/paragraph", data={"article_id": 1}).status_code == 401


class TestUnknownKeys:
    @pytest.mark.parametrize("path", ["/article/%C2%B2", "/api/article/%C2%B2"])
    def test_non_ascii_digit_key(self, client: TestClient, path: str):
        assert client.get(path).status_code == 404

    @pytest.mark.parametrize(
        "path",
        [
            "/article/999999999999999999999999999999",
            "/api/article/999999999999999999999999999999",
            "/api/paragraph/999999999999999999999999999999",
            "/api/paragraph/999999999999999999999999999999/raw",
            "/api/contact/999999999999999999999999999999",
        ],
    )
    def test_out_of_range_id(self, admin_client: TestClient, path: str):
        response = admin_client.get(path)
        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}

    def test_delete_out_of_range_id(self, admin_client: TestClient):
        response = admin_client.delete("/api/article/999999999999999999999999999999")
        assert response.status_code == 200
        assert response.text == "deleted"


class TestContact:
    def test_submit_and_read(self, admin_client: TestClient):
        token = _anonymous(admin_client)
        response = admin_client.post(
            "/api/contact",
            data={"email": "reader@example.com", "subject": "Hi", "message": "Great!"},
        )
        assert response.status_code == 200
        assert "message has been sent" in response.text
        assert admin_client.get("/api/contact/1").status_code == 401

        admin_client.cookies.set("auth", token)
        mail = admin_client.get("/api/contact/1")

        assert mail.status_code == 200
        assert "reader@example.com" in mail.text
        assert "Great!" in mail.text

    def test_invalid_email(self, client: TestClient):
        response = client.post(
            "/api/contact", data={"email": "nope", "subject": "Hi", "message": "x"}
        )
        assert response.status_code == 400

    def test_missing_message(self, admin_client: TestClient):
        assert admin_client.get("/api/contact/42").status_code == 404


class TestFiles:
    def test_upload_and_list(self, settings, admin_client: TestClient):
        response = admin_client.post(
            "/api/files/3",
            files=[
                ("files", ("cover.png", b"png-bytes", "image/png")),
                ("files", ("notes.txt", b"text", "text/plain")),
            ],
        )

        assert response.status_code == 200
        assert response.text == "uploaded"
        media = Path(settings.MEDIA_ROOT)
        assert (media / "3" / "cover.png").read_bytes() == b"png-bytes"

        listing = admin_client.get("/api/files")
        assert f'value="/{settings.MEDIA_ROOT}/3/cover.png"' in listing.text
        assert "3/notes.txt" in listing.text

    def test_upload_requires_admin(self, settings, client: TestClient):
        response = client.post(
            "/api/files/3", files=[("files", ("x.png", b"x", "image/png"))]
        )
        assert response.status_code == 401
        assert not Path(settings.MEDIA_ROOT).exists()


class TestStats:
    def test_dashboard_counts_page_views(self, admin_client: TestClient):
        admin_client.get("/")
        admin_client.get("/")
        admin_client.get("/about")

        response = admin_client.get("/api/stats")

        assert response.status_code == 200
        html = re.sub(r"\s+", " ", response.text)
        assert "Last 1 days" in html
        assert "<td>2</td> <td>1</td> <td>0</td> <td>0</td>" in html

    def test_dashboard_requires_admin(self, client: TestClient):
        assert client.get("/api/stats").status_code == 401


class TestRequestId:
    def test_echoes_incoming_id(self, client: TestClient):
        response = client.get("/about", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"

    def test_generates_id(self, client: TestClient):
        response = client.get("/about")
        assert re.fullmatch(r"[0-9a-f]{32}", response.headers["X-Request-ID"])
