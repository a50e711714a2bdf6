"""
Headlines Backend — API Endpoint Tests
=======================================

What:  Full request/response cycle through the FastAPI app (HTTPX ASGITransport),
       backed by SQLite and a mocked scrape target.

What we test:
    ✅ Scrape → list → save → unsave → attach note → resolve note
    ✅ Legacy aliases behave like their canonical routes (and can be disabled)
    ✅ Unknown ids answer `null`
    ✅ Errors are JSON objects; status 200 by default, real codes in strict mode
    ✅ Store failures and unexpected errors never leak internal details
    ✅ Homepage renders stored articles; health and request-id plumbing
"""

from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from headlines.exceptions import StoreError
from headlines.services.article_store import article_store
from headlines.services.note_store import note_store


async def _scrape(client):
    response = await client.get("/scrape")
    assert response.status_code == 200
    return response.json()


class TestScrapeAndList:

    @pytest.mark.asyncio
    async def test_articles_empty(self, test_client):
        response = await test_client.get("/articles")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_scrape_then_list(self, test_client):
        body = await _scrape(test_client)

        assert body["found"] == 2
        assert body["created"] == 2
        assert body["last_listing"]["title"] == "B"

        articles = (await test_client.get("/articles")).json()
        assert sorted(a["title"] for a in articles) == ["A", "B"]
        for article in articles:
            assert article["isSaved"] is False
            assert article["note"] is None
            assert "is_saved" not in article

    @pytest.mark.asyncio
    async def test_scrape_twice_duplicates(self, test_client):
        await _scrape(test_client)
        await _scrape(test_client)

        articles = (await test_client.get("/articles")).json()
        assert len(articles) == 4


class TestSaved:

    @pytest.mark.asyncio
    async def test_save_and_delete(self, test_client):
        article_id = (await _scrape(test_client))["articles"][0]["id"]

        saved = (await test_client.put(f"/saved/{article_id}")).json()
        assert saved["id"] == article_id
        assert saved["isSaved"] is True

        listed = (await test_client.get("/saved")).json()
        assert [a["id"] for a in listed] == [article_id]

        unsaved = (await test_client.put(f"/delete/{article_id}")).json()
        assert unsaved["isSaved"] is False
        assert (await test_client.get("/saved")).json() == []

        # "delete" only unsaves; the article is still there
        assert len((await test_client.get("/articles")).json()) == 2

    @pytest.mark.asyncio
    async def test_unknown_ids_return_null(self, test_client):
        unknown = uuid4()
        for method, path in [
            ("GET", f"/saved/{unknown}"),
            ("PUT", f"/saved/{unknown}"),
            ("PUT", f"/delete/{unknown}"),
        ]:
            response = await test_client.request(method, path)
            assert response.status_code == 200
            assert response.json() is None


class TestNotes:

    @pytest.mark.asyncio
    async def test_attach_note_and_resolve(self, test_client):
        article_id = (await _scrape(test_client))["articles"][0]["id"]

        updated = (await test_client.post(f"/articles/{article_id}", json={"text": "x"})).json()
        assert updated["id"] == article_id
        note_id = updated["note"]
        assert isinstance(note_id, str)

        detail = (await test_client.get(f"/saved/{article_id}")).json()
        assert detail["note"]["id"] == note_id
        assert detail["note"]["text"] == "x"

    @pytest.mark.asyncio
    async def test_attach_note_from_form(self, test_client):
        article_id = (await _scrape(test_client))["articles"][0]["id"]

        response = await test_client.post(
            f"/createNote/{article_id}",
            data={"title": "Read later", "body": "Looks good"},
        )
        assert response.json()["note"] is not None

        detail = (await test_client.get(f"/getNotes/{article_id}")).json()
        assert detail["note"]["title"] == "Read later"
        assert detail["note"]["body"] == "Looks good"

    @pytest.mark.asyncio
    async def test_attach_note_to_unknown_article(self, test_client):
        response = await test_client.post(f"/articles/{uuid4()}", json={"text": "x"})
        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_legacy_alias_matches_canonical(self, test_client):
        article_id = (await _scrape(test_client))["articles"][0]["id"]
        await test_client.post(f"/articles/{article_id}", json={"text": "x"})

        canonical = (await test_client.get(f"/saved/{article_id}")).json()
        alias = (await test_client.get(f"/getNotes/{article_id}")).json()
        assert canonical == alias

    @pytest.mark.asyncio
    async def test_non_object_body_is_rejected(self, test_client):
        article_id = (await _scrape(test_client))["articles"][0]["id"]

        response = await test_client.post(f"/articles/{article_id}", json=["x"])

        assert response.status_code == 200
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["field"] == "body"

    @pytest.mark.asyncio
    async def test_non_standard_json_constants_are_rejected(self, test_client):
        article_id = (await _scrape(test_client))["articles"][0]["id"]

        for token in ("NaN", "Infinity", "-Infinity"):
            response = await test_client.post(
                f"/articles/{article_id}",
                content=f'{{"text": {token}}}',
                headers={"content-type": "application/json"},
            )
            body = response.json()
            assert body["error"] == "validation_error"
            assert body["details"]["field"] == "body"

        detail = (await test_client.get(f"/saved/{article_id}")).json()
        assert detail["note"] is None


class TestErrors:

    @pytest.mark.asyncio
    async def test_malformed_id_returns_error_object(self, test_client):
        response = await test_client.get("/saved/not-a-uuid")

        assert response.status_code == 200
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["errors"][0]["loc"] == ["path", "article_id"]

    @pytest.mark.asyncio
    async def test_fetch_failure_returns_error_object(self, app_factory, failing_transport):
        app = await app_factory(failing_transport())
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/scrape", headers={"X-Request-ID": "req-1"})

        assert response.status_code == 200
        body = response.json()
        assert body["error"] == "fetch_error"
        assert body["details"]["url"] == "https://dev.to"
        assert body["request_id"] == "req-1"

    @pytest.mark.asyncio
    async def test_strict_status_codes(self, app_factory, make_transport):
        app = await app_factory(make_transport(status_code=500), strict_status_codes=True)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            scrape = await client.get("/scrape")
            malformed = await client.get("/saved/not-a-uuid")

        assert scrape.status_code == 502
        assert scrape.json()["details"]["status"] == 500
        assert malformed.status_code == 422

    @pytest.mark.asyncio
    async def test_legacy_routes_can_be_disabled(self, app_factory, page_transport):
        app = await app_factory(page_transport, legacy_routes=False)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get(f"/getNotes/{uuid4()}")

        assert response.status_code == 404


class TestPagesAndHealth:

    @pytest.mark.asyncio
    async def test_homepage_lists_articles(self, test_client):
        await _scrape(test_client)

        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "https://dev.to/alice/a-post" in response.text
        assert "Alice" in response.text

    @pytest.mark.asyncio
    async def test_homepage_empty(self, test_client):
        response = await test_client.get("/")
        assert "No articles yet" in response.text

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        generated = await test_client.get("/articles")
        echoed = await test_client.get("/articles", headers={"X-Request-ID": "abc123"})

        assert len(generated.headers["X-Request-ID"]) == 8
        assert echoed.headers["X-Request-ID"] == "abc123"


class TestStoreFailures:

    @staticmethod
    async def _failing_list(db):
        raise StoreError(context={"error_type": "OperationalError", "table": "articles"})

    @pytest.mark.asyncio
    async def test_store_error_returns_generic_error_object(self, test_client, monkeypatch):
        monkeypatch.setattr(article_store, "list_all", self._failing_list)

        response = await test_client.get("/articles", headers={"X-Request-ID": "req-9"})

        assert response.status_code == 200
        body = response.json()
        assert body["error"] == "store_error"
        assert body["message"] == "A database error occurred. Please try again later."
        assert body["request_id"] == "req-9"
        assert "details" not in body
        assert "OperationalError" not in response.text

    @pytest.mark.asyncio
    async def test_store_error_strict_status(self, app_factory, page_transport, monkeypatch):
        monkeypatch.setattr(article_store, "list_all", self._failing_list)
        app = await app_factory(page_transport, strict_status_codes=True)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/articles")

        assert response.status_code == 500
        assert response.json()["error"] == "store_error"

    @pytest.mark.asyncio
    async def test_note_insert_failure(self, test_client, monkeypatch):
        article_id = (await _scrape(test_client))["articles"][0]["id"]

        async def failing_create(db, fields):
            raise StoreError(message="Could not save the note. Please try again.")

        monkeypatch.setattr(note_store, "create", failing_create)

        response = await test_client.post(f"/articles/{article_id}", json={"text": "x"})

        assert response.status_code == 200
        assert response.json()["error"] == "store_error"

        detail = (await test_client.get(f"/saved/{article_id}")).json()
        assert detail["note"] is None

    @pytest.mark.asyncio
    async def test_unexpected_error_hides_internals(self, app_factory, page_transport, monkeypatch):
        async def broken(db):
            raise RuntimeError("connection string with secrets")

        monkeypatch.setattr(article_store, "list_saved", broken)
        app = await app_factory(page_transport)
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/saved")

        assert response.status_code == 200
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert "secrets" not in response.text
