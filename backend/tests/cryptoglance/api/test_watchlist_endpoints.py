from __future__ import annotations


def _sign_in(harness, user_id: str = "u1") -> None:
    response = harness.client.post("/api/v1/session", json={"user_id": user_id, "email": "alice@example.com"})
    assert response.status_code == 200


def test_watchlist_is_empty_before_sign_in(harness) -> None:
    response = harness.client.get("/api/v1/watchlist")

    assert response.status_code == 200
    assert response.json() == {"user_id": None, "state": "unauthenticated", "items": []}


def test_add_requires_session(harness) -> None:
    response = harness.client.post("/api/v1/watchlist", json={"item_id": "litecoin"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "WATCHLIST_UNAUTHENTICATED"
    assert harness.watchlist.watchlist == ()


def test_sign_in_loads_remote_watchlist(harness) -> None:
    harness.store.items_by_user["u1"] = ["bitcoin", "ethereum"]
    _sign_in(harness)

    listing = harness.client.get("/api/v1/watchlist").json()
    membership = harness.client.get("/api/v1/watchlist/bitcoin").json()
    missing = harness.client.get("/api/v1/watchlist/dogecoin").json()

    assert listing == {"user_id": "u1", "state": "ready", "items": ["bitcoin", "ethereum"]}
    assert membership == {"item_id": "bitcoin", "in_watchlist": True}
    assert missing == {"item_id": "dogecoin", "in_watchlist": False}


def test_add_and_remove_round_trip_through_store(harness) -> None:
    harness.store.items_by_user["u1"] = ["bitcoin", "ethereum"]
    _sign_in(harness)

    added = harness.client.post("/api/v1/watchlist", json={"item_id": "dogecoin"})
    duplicate = harness.client.post("/api/v1/watchlist", json={"item_id": "dogecoin"})
    removed = harness.client.delete("/api/v1/watchlist/ethereum")

    assert added.status_code == 200
    assert added.json() == {
        "success": True,
        "message": "dogecoin added to watchlist successfully.",
        "status": "added",
        "items": ["bitcoin", "ethereum", "dogecoin"],
    }
    assert duplicate.json()["status"] == "already_present"
    assert removed.json()["status"] == "removed"
    assert removed.json()["items"] == ["bitcoin", "dogecoin"]
    assert harness.store.items_by_user["u1"] == ["bitcoin", "dogecoin"]


def test_remove_unknown_item_reports_failure(harness) -> None:
    harness.store.items_by_user["u1"] = ["bitcoin"]
    _sign_in(harness)

    response = harness.client.delete("/api/v1/watchlist/ethereum")

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["message"] == "ethereum not found in watchlist."
    assert response.json()["items"] == ["bitcoin"]


def test_failed_write_is_rolled_back(harness) -> None:
    _sign_in(harness)
    harness.store.fail_writes = True

    response = harness.client.post("/api/v1/watchlist", json={"item_id": "solana"})

    assert response.json()["success"] is False
    assert response.json()["status"] == "failed"
    assert response.json()["items"] == []


def test_add_validates_payload(harness) -> None:
    _sign_in(harness)

    response = harness.client.post("/api/v1/watchlist", json={"item_id": ""})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "REQUEST_VALIDATION_FAILED"


def test_watchlist_markets_returns_followed_coins(harness) -> None:
    harness.store.items_by_user["u1"] = ["dogecoin", "bitcoin"]
    _sign_in(harness)

    response = harness.client.get("/api/v1/watchlist/markets")

    assert response.status_code == 200
    body = response.json()
    assert [coin["id"] for coin in body] == ["dogecoin", "bitcoin"]
    assert all(coin["in_watchlist"] for coin in body)


def test_sign_out_clears_watchlist(harness) -> None:
    harness.store.items_by_user["u1"] = ["bitcoin"]
    _sign_in(harness)

    response = harness.client.delete("/api/v1/session")

    assert response.json() == {"authenticated": False, "user_id": None, "email": None, "display_name": None}
    assert harness.client.get("/api/v1/watchlist").json()["items"] == []
