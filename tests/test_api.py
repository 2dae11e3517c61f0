import logging

from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import func, select

from mergeboard.api.routers import scores as scores_router
from mergeboard.core import database, use_engine
from mergeboard.models import ScoreEntry, User
from mergeboard.services.decency import NICKNAME_REJECTED_MESSAGE


def _counts(session):
    users = session.exec(select(func.count()).select_from(User)).one()
    scores = session.exec(select(func.count()).select_from(ScoreEntry)).one()
    return users, scores


def test_submit_score_returns_placement_and_entry(submit):
    res = submit(
        "Alice",
        1200,
        email="alice@example.com",
        maxTierReached=5,
        piecesMerged=30,
        gameDurationSeconds=240,
    )
    assert res.status_code == 201
    assert res.headers["cache-control"] == "no-store"
    data = res.json()
    assert data["placement"] == 1
    entry = data["entry"]
    assert entry["displayName"] == "Alice"
    assert entry["score"] == 1200
    assert entry["maxTierReached"] == 5
    assert entry["piecesMerged"] == 30
    assert entry["gameDurationSeconds"] == 240
    assert entry["id"] and entry["userId"] and entry["createdAt"]
    assert "email" not in entry


def test_numeric_string_score_is_accepted(submit):
    res = submit("  Alice ", "42")
    assert res.status_code == 201
    assert res.json()["entry"]["score"] == 42
    assert res.json()["entry"]["displayName"] == "Alice"


def test_placements_follow_score_order(submit):
    results = {name: submit(name, score) for name, score in [("Alice", 100), ("Bob", 300), ("Cara", 200)]}
    assert results["Alice"].json()["placement"] == 1
    assert results["Bob"].json()["placement"] == 1
    assert results["Cara"].json()["placement"] == 2
    # a fresh low score lands below all three players
    assert submit("Dana", 50).json()["placement"] == 4


def test_tied_leaders_both_place_first(submit):
    assert submit("Alice", 900).json()["placement"] == 1
    assert submit("Bob", 900).json()["placement"] == 1


def test_same_email_reuses_user_and_takes_latest_name(submit, session):
    first = submit("Al", 100, email="x@y.com").json()
    second = submit("Bo", 200, email=" X@Y.com ").json()
    assert first["entry"]["userId"] == second["entry"]["userId"]
    assert second["entry"]["displayName"] == "Bo"
    assert _counts(session) == (1, 2)


def test_invalid_score_is_rejected_without_writes(submit, session):
    res = submit("Alice", -1, email="new@example.com")
    assert res.status_code == 400
    assert res.json() == {"error": "Score cannot be negative"}
    assert res.headers["cache-control"] == "no-store"
    assert _counts(session) == (0, 0)


def test_offensive_nickname_is_rejected_without_writes(submit, session):
    res = submit("sh1tlord", 10, email="new@example.com")
    assert res.status_code == 400
    assert res.json()["error"] == NICKNAME_REJECTED_MESSAGE
    assert _counts(session) == (0, 0)


def test_malformed_json_is_a_validation_error(client):
    res = client.post(
        "/scores", content="{not json", headers={"Content-Type": "application/json"}
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Request body must be valid JSON"}


def test_non_object_body_is_a_validation_error(client):
    res = client.post("/scores", json=[1, 2, 3])
    assert res.status_code == 400
    assert res.json() == {"error": "Request body must be a JSON object"}


def test_wrong_method_reports_allow_header(client):
    res = client.get("/scores")
    assert res.status_code == 405
    assert res.headers["allow"] == "POST"
    assert res.json() == {"error": "Method not allowed"}

    res = client.post("/leaderboard")
    assert res.status_code == 405
    assert res.headers["allow"] == "GET"

    res = client.put("/users", json={})
    assert res.status_code == 405
    assert res.headers["allow"] == "POST"


def test_unknown_path_keeps_error_shape(client):
    res = client.get("/nope")
    assert res.status_code == 404
    assert "error" in res.json()


def test_unconfigured_store_answers_503(app, monkeypatch):
    monkeypatch.setattr(database, "DATABASE_URL", None)
    use_engine(None)
    client = TestClient(app)

    res = client.post("/scores", json={"nickname": "Alice", "score": 10})
    assert res.status_code == 503
    assert res.json()["error"] == database.MISSING_DATABASE_MESSAGE

    assert client.get("/leaderboard").status_code == 503
    assert client.post("/users", json={"email": "a@b.co"}).status_code == 503
    assert client.get("/ready").status_code == 503
    assert client.get("/health").status_code == 200


def test_validation_runs_before_configuration_check(app, monkeypatch):
    monkeypatch.setattr(database, "DATABASE_URL", None)
    use_engine(None)
    client = TestClient(app)

    res = client.post("/scores", json={"nickname": "Alice", "score": -1})
    assert res.status_code == 400


def test_leaderboard_paging_and_headers(client, submit):
    for index, score in enumerate([10, 80, 30, 80, 60, 20, 90]):
        assert submit(f"Player{index}", score).status_code == 201

    res = client.get("/leaderboard", params={"limit": 5})
    assert res.status_code == 200
    assert res.headers["cache-control"] == "public, max-age=60, s-maxage=60"
    entries = res.json()["entries"]
    assert len(entries) == 5
    scores = [entry["score"] for entry in entries]
    assert scores == sorted(scores, reverse=True)
    assert [entry["rank"] for entry in entries] == [1, 2, 3, 4, 5]
    assert set(entries[0]) == {
        "rank",
        "id",
        "displayName",
        "score",
        "maxTierReached",
        "piecesMerged",
        "gameDurationSeconds",
        "createdAt",
        "userId",
    }


def test_leaderboard_limit_clamping(client, submit):
    for index in range(12):
        submit(f"Player{index}", index * 10)

    assert len(client.get("/leaderboard?limit=0").json()["entries"]) == 1
    assert len(client.get("/leaderboard?limit=abc").json()["entries"]) == 10
    assert len(client.get("/leaderboard").json()["entries"]) == 10
    assert len(client.get("/leaderboard?limit=500").json()["entries"]) == 12


def test_leaderboard_reads_are_repeatable(client, submit):
    for index, score in enumerate([5, 15, 15, 25]):
        submit(f"Player{index}", score)

    first = client.get("/leaderboard").json()
    second = client.get("/leaderboard").json()
    assert first == second


def test_leaderboard_hides_email(client, submit):
    submit("Alice", 100, email="alice@example.com")
    body = client.get("/leaderboard").text
    assert "alice@example.com" not in body


def test_users_endpoint_upserts_contact_info(client, submit):
    res = client.post("/users", json={"email": " Al@Example.com ", "displayName": "Al"})
    assert res.status_code == 200
    assert res.headers["cache-control"] == "no-store"
    user = res.json()
    assert user["email"] == "al@example.com"
    assert user["displayName"] == "Al"

    kept = client.post("/users", json={"email": "al@example.com"}).json()
    assert kept["id"] == user["id"]
    assert kept["displayName"] == "Al"

    renamed = client.post("/users", json={"email": "al@example.com", "displayName": "Bo"}).json()
    assert renamed["displayName"] == "Bo"

    # a later score submission lands on the same user
    entry = submit("Cy", 10, email="AL@example.com").json()["entry"]
    assert entry["userId"] == user["id"]


def test_users_endpoint_validation(client, session):
    assert client.post("/users", json={}).json() == {"error": "Email is required"}
    assert client.post("/users", json={"email": "nope"}).json() == {"error": "Email must be valid"}
    res = client.post("/users", json={"email": "a@b.co", "displayName": "fuuuck"})
    assert res.status_code == 400
    assert res.json()["error"] == NICKNAME_REJECTED_MESSAGE
    assert _counts(session) == (0, 0)


def test_ready_probe(client):
    assert client.get("/ready").json() == {"ok": True}


def test_store_failure_is_logged_once(submit, monkeypatch, caplog):
    def broken_insert(*args, **kwargs):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(scores_router, "record_score", broken_insert)
    with caplog.at_level(logging.ERROR):
        res = submit("Alice", 10)

    assert res.status_code == 500
    assert res.json() == {"error": "Failed to store score"}
    errors = [record for record in caplog.records if record.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert errors[0].exc_info is not None
