from __future__ import annotations

from datetime import datetime

from feedhub.core.errors import StoreError


def test_articles_published_newest_first(client, fake_store):
    resp = client.get("/api/articles")
    assert resp.status_code == 200
    data = resp.json()
    assert [a["id"] for a in data] == [102, 100]
    assert all(a["published"] is True for a in data)
    assert data[0]["title"] == "New"
    assert fake_store.select_calls == [("articles", {"published": True}, "created_at", True)]


def test_unpublished_article_never_listed_even_if_newest(client, fake_store):
    fake_store.tables["articles"].append(
        {"id": 103, "title": "Future draft", "published": False, "created_at": "2030-01-01T00:00:00+00:00"}
    )

    data = client.get("/api/articles").json()
    assert 103 not in [a["id"] for a in data]
    stamps = [datetime.fromisoformat(a["created_at"].replace("Z", "+00:00")) for a in data]
    assert stamps == sorted(stamps, reverse=True)


def test_articles_fetch_failure_is_500(client, fake_store):
    fake_store.select_error = StoreError("relation \"articles\" does not exist", collection="articles")

    resp = client.get("/api/articles")
    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Failed to fetch articles"
    assert "does not exist" in body["details"]


def test_created_at_passes_through_unchanged(client):
    data = client.get("/api/articles").json()
    assert [a["created_at"] for a in data] == ["2024-03-01T00:00:00+00:00", "2024-01-01T00:00:00+00:00"]


def test_published_row_without_created_at_is_listed(client, fake_store):
    fake_store.tables["articles"] = [{"id": 200, "title": "Undated", "published": True, "created_at": None}]

    resp = client.get("/api/articles")
    assert resp.status_code == 200
    assert resp.json() == [{"id": 200, "title": "Undated", "published": True, "created_at": None}]


def test_malformed_article_row_is_fetch_error(client, fake_store):
    fake_store.tables["articles"] = [{"title": "No id", "published": True, "created_at": "2024-01-01"}]

    resp = client.get("/api/articles")
    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Failed to fetch articles"
    assert "id" in body["details"]
