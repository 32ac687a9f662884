"""
Tests for post endpoints.

Run with: pytest tests/test_posts_api.py -v
"""
import pytest

SAMPLE_POST = {
    "title": "My First Post",
    "content": "Hello from the reading club",
}


async def create_post(client, headers, **overrides):
    response = await client.post("/posts", json={**SAMPLE_POST, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["post"]


@pytest.mark.asyncio
async def test_create_post_requires_auth(client):
    response = await client.post("/posts", json=SAMPLE_POST)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_post_rejects_bad_token(client):
    response = await client.post("/posts", json=SAMPLE_POST, headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_post_rejects_blank_content(client, alice):
    response = await client.post("/posts", json={**SAMPLE_POST, "content": "   "}, headers=alice)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_post_assigns_unique_slugs(client, alice, bob):
    first = await create_post(client, alice)
    second = await create_post(client, bob, title="MY FIRST POST")

    assert first["slug"] == "my-first-post"
    assert second["slug"] == "my-first-post-1"
    assert first["author_id"] == "user-alice"
    assert first["likes"] == []


@pytest.mark.asyncio
async def test_get_post_by_slug_and_id(client, alice):
    post = await create_post(client, alice)

    by_slug = await client.get(f"/posts/{post['slug']}")
    by_id = await client.get(f"/posts/{post['_id']}")

    assert by_slug.status_code == 200
    assert by_id.json()["_id"] == by_slug.json()["_id"] == post["_id"]


@pytest.mark.asyncio
async def test_get_missing_post(client):
    response = await client.get("/posts/does-not-exist")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_posts_paginates(client, alice):
    for i in range(3):
        await create_post(client, alice, title=f"Post {i}")
    await create_post(client, alice, title="Secret", privacy="private")

    response = await client.get("/posts", params={"page": 1, "limit": 2})
    data = response.json()

    assert len(data["posts"]) == 2
    assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}


@pytest.mark.asyncio
async def test_page_size_is_capped(client, alice):
    await create_post(client, alice)

    big = (await client.get("/posts", params={"limit": 100})).json()
    tiny = (await client.get("/posts", params={"limit": 0})).json()

    assert big["pagination"]["limit"] == 50
    assert tiny["pagination"]["limit"] == 1


@pytest.mark.asyncio
async def test_update_post_reslugs_on_request(client, alice):
    await create_post(client, alice, title="Taken Title")
    post = await create_post(client, alice, title="Draft")

    kept = await client.put(f"/posts/{post['slug']}", json={"title": "Taken Title"}, headers=alice)
    assert kept.json()["post"]["slug"] == "draft"

    moved = await client.put("/posts/draft", json={"title": "Taken Title", "reslug": True}, headers=alice)
    assert moved.status_code == 200
    assert moved.json()["post"]["slug"] == "taken-title-1"


@pytest.mark.asyncio
async def test_reslug_to_same_title_keeps_slug(client, alice):
    post = await create_post(client, alice)
    response = await client.put(
        f"/posts/{post['slug']}", json={"title": "My First Post", "reslug": True}, headers=alice
    )
    assert response.json()["post"]["slug"] == "my-first-post"


@pytest.mark.asyncio
async def test_only_author_can_edit_or_delete(client, alice, bob):
    post = await create_post(client, alice)

    edit = await client.put(f"/posts/{post['slug']}", json={"content": "hijacked"}, headers=bob)
    delete = await client.delete(f"/posts/{post['slug']}", headers=bob)

    assert edit.status_code == 403
    assert delete.status_code == 403


@pytest.mark.asyncio
async def test_delete_post(client, alice):
    post = await create_post(client, alice)

    response = await client.delete(f"/posts/{post['slug']}", headers=alice)
    assert response.status_code == 200
    assert (await client.get(f"/posts/{post['slug']}")).status_code == 404


@pytest.mark.asyncio
async def test_like_toggles(client, alice, bob):
    post = await create_post(client, alice)
    url = f"/posts/{post['slug']}/like"

    first = (await client.post(url, headers=bob)).json()
    other = (await client.post(url, headers=alice)).json()
    again = (await client.post(url, headers=bob)).json()

    assert first == {"liked": True, "likes_count": 1}
    assert other == {"liked": True, "likes_count": 2}
    assert again == {"liked": False, "likes_count": 1}


@pytest.mark.asyncio
async def test_bookmark_without_profile(client, alice, bob):
    post = await create_post(client, alice)

    response = await client.post(f"/posts/{post['slug']}/bookmark", headers=bob)
    assert response.status_code == 200
    assert response.json() == {"is_bookmarked": True, "saved_posts": [post["_id"]]}

    bookmarks = (await client.get("/users/me/bookmarks", headers=bob)).json()
    assert [p["slug"] for p in bookmarks["saved_posts"]] == ["my-first-post"]


@pytest.mark.asyncio
async def test_bookmark_by_slug_or_id_share_state(client, alice):
    await client.post("/users/me", json={"name": "Alice"}, headers=alice)
    post = await create_post(client, alice)

    saved = (await client.post(f"/posts/{post['slug']}/bookmark", headers=alice)).json()
    removed = (await client.post(f"/posts/{post['_id']}/bookmark", headers=alice)).json()

    assert saved == {"is_bookmarked": True, "saved_posts": [post["_id"]]}
    assert removed == {"is_bookmarked": False, "saved_posts": []}


@pytest.mark.asyncio
async def test_comments(client, alice, bob):
    post = await create_post(client, alice)
    url = f"/posts/{post['slug']}/comments"

    created = await client.post(url, json={"content": "Nice one"}, headers=bob)
    assert created.status_code == 201
    await client.post(url, json={"content": "Thanks"}, headers=alice)

    listing = (await client.get(url)).json()
    assert listing["count"] == 2
    assert listing["total"] == 2
    assert {c["user_id"] for c in listing["comments"]} == {"user-alice", "user-bob"}
