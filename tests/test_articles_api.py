import json
from datetime import datetime

import pytest
from sqlalchemy import text


async def _create(http_client, auth_headers, payload):
    response = await http_client.post("/create-article", json=payload, headers=auth_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def _timestamp(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)


@pytest.mark.asyncio
async def test_create_article_returns_stored_shape(http_client, auth_headers, article_payload):
    response = await http_client.post("/create-article", json=article_payload(), headers=auth_headers)

    assert response.status_code == 201
    article = response.json()["data"]
    assert set(article) == {
        "id", "title", "slug", "coverimage", "author", "createdat", "updatedat", "blocks"
    }
    assert article["slug"] == "my-post"
    assert article["coverimage"] == "https://example.com/cover.jpg"
    assert [block["type"] for block in article["blocks"]] == ["heading", "paragraph"]
    assert article["blocks"][1]["data"] == {"text": "Hello **world**"}


@pytest.mark.asyncio
async def test_create_requires_token(http_client, article_payload):
    response = await http_client.post("/create-article", json=article_payload())

    assert response.status_code == 401
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_create_with_invalid_token(http_client, article_payload):
    response = await http_client.post(
        "/create-article",
        json=article_payload(),
        headers={"Authorization": "Bearer not-a-token"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_duplicate_slug_is_rejected(http_client, auth_headers, article_payload):
    await _create(http_client, auth_headers, article_payload())

    response = await http_client.post(
        "/create-article", json=article_payload(title="my post"), headers=auth_headers
    )

    assert response.status_code == 403
    assert "my-post" in response.json()["error"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"title": ""},
        {"coverImage": "   "},
        {"author": ""},
        {"blocks": []},
        {"blocks": "not json"},
        {"blocks": [{"id": "1", "type": "video", "data": {}}]},
        {
            "blocks": [
                {"id": "1", "type": "heading", "data": {"text": "A"}},
                {"id": "1", "type": "paragraph", "data": {"text": "B"}},
            ]
        },
    ],
)
async def test_invalid_article_is_rejected(http_client, auth_headers, article_payload, overrides):
    response = await http_client.post(
        "/create-article", json=article_payload(**overrides), headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()["error"]


@pytest.mark.asyncio
async def test_blocks_sent_as_json_string_are_stored_as_array(http_client, auth_headers, article_payload):
    payload = article_payload()
    payload["blocks"] = json.dumps(payload["blocks"])

    article = await _create(http_client, auth_headers, payload)

    assert isinstance(article["blocks"], list)
    assert article["blocks"][0]["data"] == {"text": "Intro"}


@pytest.mark.asyncio
async def test_explicit_slug_is_kept(http_client, auth_headers, article_payload):
    article = await _create(http_client, auth_headers, article_payload(slug="custom-slug"))

    assert article["slug"] == "custom-slug"


@pytest.mark.asyncio
async def test_get_article_by_slug(http_client, auth_headers, article_payload):
    created = await _create(http_client, auth_headers, article_payload(title="Café Déjà Vu"))

    response = await http_client.get("/get-article-data/cafe-deja-vu")

    assert response.status_code == 200
    assert response.json()["data"]["id"] == created["id"]

    missing = await http_client.get("/get-article-data/nothing-here")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Article not found"}


@pytest.mark.asyncio
async def test_list_articles_newest_first(http_client, auth_headers, article_payload):
    first = await _create(http_client, auth_headers, article_payload(title="First"))
    second = await _create(http_client, auth_headers, article_payload(title="Second"))

    response = await http_client.get("/get-all-articles")

    assert response.status_code == 200
    assert [article["id"] for article in response.json()["data"]] == [second["id"], first["id"]]


@pytest.mark.asyncio
async def test_list_is_empty_without_articles(http_client):
    response = await http_client.get("/get-all-articles")

    assert response.json() == {"data": []}


@pytest.mark.asyncio
async def test_update_keeping_own_slug(http_client, auth_headers, article_payload):
    created = await _create(http_client, auth_headers, article_payload())
    payload = article_payload(author="John")
    payload["blocks"].append({"id": "3", "type": "image", "data": {"url": "https://example.com/a.png"}})

    response = await http_client.put(f"/update-article/{created['id']}", json=payload, headers=auth_headers)

    assert response.status_code == 200
    article = response.json()["data"]
    assert article["id"] == created["id"]
    assert article["slug"] == "my-post"
    assert article["author"] == "John"
    assert len(article["blocks"]) == 3
    assert article["createdat"] == created["createdat"]
    assert _timestamp(article["updatedat"]) > _timestamp(created["updatedat"])


@pytest.mark.asyncio
async def test_update_to_taken_slug_is_rejected(http_client, auth_headers, article_payload):
    await _create(http_client, auth_headers, article_payload(title="First"))
    second = await _create(http_client, auth_headers, article_payload(title="Second"))

    response = await http_client.put(
        f"/update-article/{second['id']}", json=article_payload(title="First"), headers=auth_headers
    )

    assert response.status_code == 403

    unchanged = await http_client.get("/get-article-data/second")
    assert unchanged.status_code == 200


@pytest.mark.asyncio
async def test_update_missing_article(http_client, auth_headers, article_payload):
    response = await http_client.put("/update-article/999", json=article_payload(), headers=auth_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_requires_token(http_client, auth_headers, article_payload):
    created = await _create(http_client, auth_headers, article_payload())

    response = await http_client.put(f"/update-article/{created['id']}", json=article_payload())

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_delete_article(http_client, auth_headers, article_payload):
    created = await _create(http_client, auth_headers, article_payload())

    response = await http_client.delete(f"/delete-article/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["slug"] == "my-post"

    again = await http_client.delete(f"/delete-article/{created['id']}", headers=auth_headers)
    assert again.status_code == 404

    missing = await http_client.get("/get-article-data/my-post")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_slug_is_free_after_delete(http_client, auth_headers, article_payload):
    created = await _create(http_client, auth_headers, article_payload())
    await http_client.delete(f"/delete-article/{created['id']}", headers=auth_headers)

    recreated = await _create(http_client, auth_headers, article_payload())

    assert recreated["slug"] == "my-post"


@pytest.mark.asyncio
async def test_supplied_slug_is_normalized(http_client, auth_headers, article_payload):
    article = await _create(http_client, auth_headers, article_payload(slug="  Not A/Slug  "))

    assert article["slug"] == "not-a/slug"

    response = await http_client.get("/get-article-data/not-a/slug")
    assert response.status_code == 200
    assert response.json()["data"]["id"] == article["id"]


@pytest.mark.asyncio
async def test_corrupted_blocks_do_not_break_listing(http_client, auth_headers, article_payload, session_factory):
    broken = await _create(http_client, auth_headers, article_payload(title="Broken"))
    intact = await _create(http_client, auth_headers, article_payload(title="Intact"))

    async with session_factory() as session:
        await session.execute(
            text("UPDATE articles SET blocks = :blocks WHERE id = :id"),
            {"blocks": '[{"id": "1", "type": "video", "data": {}}]', "id": broken["id"]},
        )
        await session.commit()

    listed = await http_client.get("/get-all-articles")
    assert listed.status_code == 200
    assert [article["id"] for article in listed.json()["data"]] == [intact["id"]]

    single = await http_client.get("/get-article-data/broken")
    assert single.status_code == 500
    assert "video" in single.json()["error"]
