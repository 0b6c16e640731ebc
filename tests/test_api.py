from conftest import user_header


def _create_spot(client, name="Reading Room"):
    r = client.post("/spots", json={"name": name, "category": "library"}, headers=user_header("owner"))
    assert r.status_code == 201, r.text
    return r.json()["id"]


def test_create_spot_starts_with_empty_aggregates(client):
    spot_id = _create_spot(client)

    r = client.get(f"/spots/{spot_id}")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["average_rating"] == 0.0
    assert body["review_count"] == 0
    assert body["solo_friendly_count"] == 0


def test_review_lifecycle_keeps_spot_aggregate_in_sync(client):
    spot_id = _create_spot(client)

    ids = {}
    for user, rating in [("alice", 3), ("bob", 4), ("carol", 5)]:
        r = client.post(f"/spots/{spot_id}/reviews", json={"rating": rating}, headers=user_header(user))
        assert r.status_code == 201, r.text
        ids[user] = r.json()["id"]

    spot = client.get(f"/spots/{spot_id}").json()
    assert (spot["average_rating"], spot["review_count"]) == (4.0, 3)

    r = client.delete(f"/reviews/{ids['alice']}", headers=user_header("alice"))
    assert r.status_code == 204, r.text
    spot = client.get(f"/spots/{spot_id}").json()
    assert (spot["average_rating"], spot["review_count"]) == (4.5, 2)

    r = client.put(f"/reviews/{ids['bob']}", json={"rating": 1}, headers=user_header("bob"))
    assert r.status_code == 200, r.text
    spot = client.get(f"/spots/{spot_id}").json()
    assert (spot["average_rating"], spot["review_count"]) == (3.0, 2)


def test_listing_includes_statistics_with_full_distribution(client):
    spot_id = _create_spot(client)
    for user, rating in [("alice", 5), ("bob", 5), ("carol", 2)]:
        client.post(f"/spots/{spot_id}/reviews", json={"rating": rating}, headers=user_header(user))

    r = client.get(f"/spots/{spot_id}/reviews", params={"limit": 2, "offset": 0})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["total"] == 3
    assert len(body["items"]) == 2
    stats = body["statistics"]
    assert stats["total_count"] == 3
    assert stats["average_rating"] == 4.0
    assert stats["rating_distribution"] == {"1": 0, "2": 1, "3": 0, "4": 0, "5": 2}


def test_second_review_by_same_user_is_409(client):
    spot_id = _create_spot(client)
    r1 = client.post(f"/spots/{spot_id}/reviews", json={"rating": 4}, headers=user_header("alice"))
    assert r1.status_code == 201

    r2 = client.post(f"/spots/{spot_id}/reviews", json={"rating": 2}, headers=user_header("alice"))
    assert r2.status_code == 409, r2.text

    spot = client.get(f"/spots/{spot_id}").json()
    assert (spot["average_rating"], spot["review_count"]) == (4.0, 1)


def test_only_author_can_change_review(client):
    spot_id = _create_spot(client)
    review_id = client.post(f"/spots/{spot_id}/reviews", json={"rating": 4}, headers=user_header("alice")).json()["id"]

    r = client.delete(f"/reviews/{review_id}", headers=user_header("mallory"))
    assert r.status_code == 403, r.text


def test_unknown_spot_and_review_are_404(client):
    assert client.get("/spots/nope").status_code == 404
    assert client.post("/spots/nope/reviews", json={"rating": 3}, headers=user_header("alice")).status_code == 404
    assert client.get("/reviews/nope").status_code == 404


def test_invalid_rating_is_rejected(client):
    spot_id = _create_spot(client)
    r = client.post(f"/spots/{spot_id}/reviews", json={"rating": 6}, headers=user_header("alice"))
    assert r.status_code == 422

    r = client.put(
        f"/spots/{spot_id}/ratings/me",
        json={"solo_friendly_rating": 4, "categories": ["karaoke"]},
        headers=user_header("alice"),
    )
    assert r.status_code == 400, r.text


def test_mutation_requires_caller_identity(client):
    spot_id = _create_spot(client)
    r = client.post(f"/spots/{spot_id}/reviews", json={"rating": 3})
    assert r.status_code == 401


def test_solo_rating_upsert_and_missing_rating(client):
    spot_id = _create_spot(client)

    r = client.get(f"/spots/{spot_id}/ratings/me", headers=user_header("alice"))
    assert r.status_code == 404

    r = client.put(
        f"/spots/{spot_id}/ratings/me",
        json={"solo_friendly_rating": 2, "categories": ["wifi_available"]},
        headers=user_header("alice"),
    )
    assert r.status_code == 201, r.text

    r = client.put(f"/spots/{spot_id}/ratings/me", json={"solo_friendly_rating": 5}, headers=user_header("alice"))
    assert r.status_code == 200, r.text
    assert r.json()["categories"] == []

    spot = client.get(f"/spots/{spot_id}").json()
    assert (spot["solo_friendly_average"], spot["solo_friendly_count"]) == (5.0, 1)

    r = client.delete(f"/spots/{spot_id}/ratings/me", headers=user_header("alice"))
    assert r.status_code == 204
    spot = client.get(f"/spots/{spot_id}").json()
    assert (spot["solo_friendly_average"], spot["solo_friendly_count"]) == (0.0, 0)


def test_user_reviews_listing(client):
    a = _create_spot(client, "A")
    b = _create_spot(client, "B")
    client.post(f"/spots/{a}/reviews", json={"rating": 5}, headers=user_header("alice"))
    client.post(f"/spots/{b}/reviews", json={"rating": 3}, headers=user_header("alice"))

    body = client.get("/users/alice/reviews").json()
    assert body["total"] == 2
    assert body["statistics"] is None


def test_recompute_endpoint_returns_both_streams(client):
    spot_id = _create_spot(client)
    client.post(f"/spots/{spot_id}/reviews", json={"rating": 4}, headers=user_header("alice"))
    client.put(f"/spots/{spot_id}/ratings/me", json={"solo_friendly_rating": 3}, headers=user_header("alice"))

    r = client.post(f"/spots/{spot_id}/recompute", headers=user_header("ops"))
    assert r.status_code == 200, r.text
    aggregates = {a["stream"]: (a["average"], a["count"]) for a in r.json()["aggregates"]}
    assert aggregates == {"reviews": (4.0, 1), "solo_friendly": (3.0, 1)}
