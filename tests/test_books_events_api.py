"""
Tests for the book catalog and event role registration.

Run with: pytest tests/test_books_events_api.py -v
"""
import pytest

SAMPLE_BOOK = {
    "title": "Pather Panchali",
    "author": "Bibhutibhushan",
    "category": ["fiction", "classic"],
}

SAMPLE_EVENT = {
    "title": "Monthly Book Talk",
    "description": "Readers present their favourite books",
    "mode": "online",
    "start_time": "2099-05-01T15:00:00Z",
    "end_time": "2099-05-01T17:00:00Z",
    "meeting_link": "https://meet.example.com/book-talk",
}


async def create_book(client, headers, **overrides):
    response = await client.post("/books", json={**SAMPLE_BOOK, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["book"]


async def create_event(client, headers):
    response = await client.post("/events", json=SAMPLE_EVENT, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["event"]

# ==================== BOOKS ====================

@pytest.mark.asyncio
async def test_create_book_slug_uses_title_and_author(client, alice):
    book = await create_book(client, alice)

    assert book["slug"] == "pather-panchali-bibhutibhushan"
    assert book["added_by"] == "user-alice"


@pytest.mark.asyncio
async def test_existing_book_is_returned(client, alice, bob):
    book = await create_book(client, alice)

    response = await client.post(
        "/books", json={**SAMPLE_BOOK, "title": "pather panchali"}, headers=bob
    )
    assert response.status_code == 200
    assert response.json()["created"] is False
    assert response.json()["book"]["_id"] == book["_id"]


@pytest.mark.asyncio
async def test_same_title_other_author_is_new_book(client, alice):
    await create_book(client, alice, author="Satyajit")
    other = await create_book(client, alice, author="Satyajit Ray")

    assert other["slug"] == "pather-panchali-satyajit-ray"

    data = (await client.get("/books")).json()
    assert data["pagination"]["total"] == 2


@pytest.mark.asyncio
async def test_book_without_author_slug(client, alice):
    book = await create_book(client, alice, title="Aranyak", author=None)
    assert book["slug"] == "aranyak"


@pytest.mark.asyncio
async def test_search_books(client, alice):
    await create_book(client, alice)
    await create_book(client, alice, title="Gitanjali", author="Tagore", category=["poetry"])

    by_author = (await client.get("/books", params={"q": "tag"})).json()
    by_category = (await client.get("/books", params={"category": "classic,drama"})).json()

    assert [b["title"] for b in by_author["books"]] == ["Gitanjali"]
    assert [b["title"] for b in by_category["books"]] == ["Pather Panchali"]


@pytest.mark.asyncio
async def test_book_detail_with_reviews(client, alice, bob):
    book = await create_book(client, alice)

    for headers, rating, title in ((alice, 5, "Loved it"), (bob, 4, "Slow but great")):
        review = {
            "book_title": book["title"],
            "book_id": book["_id"],
            "rating": rating,
            "title": title,
            "content": "...",
        }
        response = await client.post("/reviews", json=review, headers=headers)
        assert response.status_code == 201

    by_slug = (await client.get(f"/books/{book['slug']}")).json()
    by_id = (await client.get(f"/books/{book['_id']}")).json()

    assert by_slug["total_reviews"] == 2
    assert by_slug["average_rating"] == 4.5
    assert by_id["slug"] == by_slug["slug"]


@pytest.mark.asyncio
async def test_book_not_found(client):
    response = await client.get("/books/no-such-book")
    assert response.status_code == 404

# ==================== EVENTS ====================

@pytest.mark.asyncio
async def test_create_event(client, alice):
    event = await create_event(client, alice)

    assert event["slug"] == "monthly-book-talk"
    assert event["status"] == "upcoming"
    assert event["roles"] == {"lecturers": []}

    again = await create_event(client, alice)
    assert again["slug"] == "monthly-book-talk-1"


@pytest.mark.asyncio
async def test_event_must_end_after_start(client, alice):
    payload = {**SAMPLE_EVENT, "end_time": "2099-05-01T14:00:00Z"}
    response = await client.post("/events", json=payload, headers=alice)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_join_as_listener_once(client, alice, bob):
    event = await create_event(client, alice)
    url = f"/events/{event['slug']}/join"

    first = await client.post(url, json={"role": "listener"}, headers=bob)
    second = await client.post(url, json={"role": "listener"}, headers=bob)

    assert first.status_code == 200
    assert first.json()["message"] == "Successfully registered as listener"
    assert second.status_code == 400
    assert second.json()["detail"] == "You are already registered as a listener"


@pytest.mark.asyncio
async def test_single_role_taken(client, alice, bob):
    event = await create_event(client, alice)
    url = f"/events/{event['slug']}/join"

    assert (await client.post(url, json={"role": "host"}, headers=alice)).status_code == 200
    response = await client.post(url, json={"role": "host"}, headers=bob)

    assert response.status_code == 400
    assert response.json()["detail"] == "host role is already taken"

    detail = (await client.get(f"/events/{event['slug']}")).json()
    assert detail["roles"]["host"]["user_id"] == "user-alice"


@pytest.mark.asyncio
async def test_lecturer_needs_topic(client, alice, bob):
    event = await create_event(client, alice)
    response = await client.post(
        f"/events/{event['slug']}/join", json={"role": "lecturer"}, headers=bob
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_lecturer_limit(client, alice, headers_for):
    event = await create_event(client, alice)
    url = f"/events/{event['slug']}/join"
    body = {"role": "lecturer", "topic": "My favourite novel", "duration": 5}

    for n in range(5):
        response = await client.post(url, json=body, headers=headers_for(f"speaker-{n}"))
        assert response.status_code == 200

    repeat = await client.post(url, json=body, headers=headers_for("speaker-0"))
    sixth = await client.post(url, json=body, headers=headers_for("speaker-5"))

    assert repeat.json()["detail"] == "You are already registered as a lecturer"
    assert sixth.status_code == 400
    assert sixth.json()["detail"] == "Maximum 5 lecturers allowed"

    detail = (await client.get(f"/events/{event['slug']}")).json()
    assert len(detail["roles"]["lecturers"]) == 5


@pytest.mark.asyncio
async def test_join_closed_event(client, db, alice, bob):
    event = await create_event(client, alice)
    await db.events.update_one({"slug": event["slug"]}, {"$set": {"status": "cancelled"}})

    response = await client.post(
        f"/events/{event['slug']}/join", json={"role": "listener"}, headers=bob
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Event is closed"
