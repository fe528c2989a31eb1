"""Интеграционные тесты E2E."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from pr_reviewer.api.dependencies import get_session
from pr_reviewer.core.exceptions import NotFoundException
from pr_reviewer.domain.stats.service import StatsService
from pr_reviewer.domain.teams.service import TeamService
from pr_reviewer.main import app


@pytest.mark.asyncio
async def test_e2e_pr_workflow(client):
    """E2E тест полного цикла работы с PR."""
    team_response = await client.post(
        "/team/add",
        json={
            "team_name": "backend-mck",
            "members": [
                {"user_id": "u1", "username": "Alice", "is_active": True},
                {"user_id": "u2", "username": "Bob", "is_active": True},
                {"user_id": "u3", "username": "Charlie", "is_active": True},
            ],
        },
    )
    assert team_response.status_code == 201
    assert len(team_response.json()["team"]["members"]) == 3

    pr_response = await client.post(
        "/pullRequest/create",
        json={
            "pull_request_id": "pr-1-mck",
            "pull_request_name": "Add feature",
            "author_id": "u1",
        },
    )
    assert pr_response.status_code == 201
    pr_data = pr_response.json()["pr"]
    assert pr_data["status"] == "OPEN"
    assert sorted(pr_data["assigned_reviewers"]) == ["u2", "u3"]
    assert pr_data["mergedAt"] is None

    reviews_response = await client.get("/users/getReview", params={"user_id": "u2"})
    assert reviews_response.status_code == 200
    reviews_data = reviews_response.json()
    assert reviews_data["user_id"] == "u2"
    assert [pr["pull_request_id"] for pr in reviews_data["pull_requests"]] == ["pr-1-mck"]

    # Все коллеги уже ревьюверы, автор не в счёт
    reassign_response = await client.post(
        "/pullRequest/reassign",
        json={"pull_request_id": "pr-1-mck", "old_user_id": "u2"},
    )
    assert reassign_response.status_code == 409
    assert reassign_response.json()["error"]["code"] == "NO_CANDIDATE"

    merge_response = await client.post("/pullRequest/merge", json={"pull_request_id": "pr-1-mck"})
    assert merge_response.status_code == 200
    merge_data = merge_response.json()["pr"]
    assert merge_data["status"] == "MERGED"
    assert merge_data["mergedAt"] is not None

    merge_again = await client.post("/pullRequest/merge", json={"pull_request_id": "pr-1-mck"})
    assert merge_again.status_code == 200
    assert merge_again.json()["pr"]["mergedAt"] == merge_data["mergedAt"]

    reassign_after_merge = await client.post(
        "/pullRequest/reassign",
        json={"pull_request_id": "pr-1-mck", "old_user_id": "u2"},
    )
    assert reassign_after_merge.status_code == 409
    assert reassign_after_merge.json()["error"]["code"] == "PR_MERGED"


@pytest.mark.asyncio
async def test_e2e_reassign(client):
    """E2E тест замены ревьювера."""
    await client.post(
        "/team/add",
        json={
            "team_name": "backend",
            "members": [
                {"user_id": f"u{i}", "username": f"User {i}", "is_active": True}
                for i in range(1, 6)
            ],
        },
    )
    pr = (
        await client.post(
            "/pullRequest/create",
            json={"pull_request_id": "pr-4", "pull_request_name": "t", "author_id": "u1"},
        )
    ).json()["pr"]
    old_reviewer = pr["assigned_reviewers"][0]

    response = await client.post(
        "/pullRequest/reassign",
        json={"pull_request_id": "pr-4", "old_user_id": old_reviewer},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["replaced_by"] not in {old_reviewer, "u1"}
    assert old_reviewer not in data["pr"]["assigned_reviewers"]
    assert data["replaced_by"] in data["pr"]["assigned_reviewers"]
    assert len(set(data["pr"]["assigned_reviewers"])) == 2

    not_assigned = await client.post(
        "/pullRequest/reassign",
        json={"pull_request_id": "pr-4", "old_user_id": old_reviewer},
    )
    assert not_assigned.status_code == 409
    assert not_assigned.json()["error"]["code"] == "NOT_ASSIGNED"


@pytest.mark.asyncio
async def test_e2e_errors(client):
    """E2E тест кодов ошибок."""
    team = {"team_name": "qa", "members": [{"user_id": "q1", "username": "Q", "is_active": True}]}
    assert (await client.post("/team/add", json=team)).status_code == 201

    duplicate = await client.post("/team/add", json=team)
    assert duplicate.status_code == 400
    assert duplicate.json() == {
        "error": {"code": "TEAM_EXISTS", "message": "team_name already exists"}
    }

    missing_team = await client.get("/team/get", params={"team_name": "nope"})
    assert missing_team.status_code == 404
    assert missing_team.json()["error"]["code"] == "NOT_FOUND"

    missing_user = await client.post("/users/setIsActive", json={"user_id": "x", "is_active": True})
    assert missing_user.status_code == 404

    missing_author = await client.post(
        "/pullRequest/create",
        json={"pull_request_id": "pr-1", "pull_request_name": "t", "author_id": "ghost"},
    )
    assert missing_author.status_code == 404

    pr_body = {"pull_request_id": "pr-1", "pull_request_name": "t", "author_id": "q1"}
    created = await client.post("/pullRequest/create", json=pr_body)
    assert created.status_code == 201
    assert created.json()["pr"]["assigned_reviewers"] == []

    pr_exists = await client.post("/pullRequest/create", json=pr_body)
    assert pr_exists.status_code == 409
    assert pr_exists.json()["error"]["code"] == "PR_EXISTS"

    missing_pr = await client.post("/pullRequest/merge", json={"pull_request_id": "nope"})
    assert missing_pr.status_code == 404

    invalid = await client.post("/pullRequest/merge", json={})
    assert invalid.status_code == 422
    assert invalid.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_e2e_users(client):
    """E2E тест пользователей."""
    await client.post(
        "/team/add",
        json={
            "team_name": "ops",
            "members": [
                {"user_id": "o1", "username": "Olga", "is_active": True},
                {"user_id": "o2", "username": "Oleg", "is_active": True},
            ],
        },
    )

    response = await client.post("/users/setIsActive", json={"user_id": "o2", "is_active": False})
    assert response.status_code == 200
    assert response.json() == {
        "user": {"user_id": "o2", "username": "Oleg", "team_name": "ops", "is_active": False}
    }

    team = (await client.get("/team/get", params={"team_name": "ops"})).json()["team"]
    assert next(m for m in team["members"] if m["user_id"] == "o2")["is_active"] is False

    pr = await client.post(
        "/pullRequest/create",
        json={"pull_request_id": "pr-o", "pull_request_name": "t", "author_id": "o1"},
    )
    assert pr.json()["pr"]["assigned_reviewers"] == []

    missing = await client.get("/users/getReview", params={"user_id": "nobody"})
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_e2e_stats(client):
    """E2E тест статистики."""
    await client.post(
        "/team/add",
        json={
            "team_name": "qa",
            "members": [
                {"user_id": "u7", "username": "Grace", "is_active": True},
                {"user_id": "u8", "username": "Henry", "is_active": True},
            ],
        },
    )

    await client.post(
        "/pullRequest/create",
        json={
            "pull_request_id": "pr-3",
            "pull_request_name": "Test PR",
            "author_id": "u7",
        },
    )

    stats_response = await client.get("/stats")
    assert stats_response.status_code == 200
    stats = stats_response.json()

    assert stats["reviewer_stats"] == [
        {"user_id": "u8", "username": "Henry", "assignment_count": 1},
        {"user_id": "u7", "username": "Grace", "assignment_count": 0},
    ]
    assert stats["pr_stats"] == [
        {"status": "MERGED", "count": 0},
        {"status": "OPEN", "count": 1},
    ]


@pytest.mark.asyncio
async def test_health(client):
    """Тест проверки живости."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_openapi_served_from_file(client):
    """Тест: схема API отдаётся из openapi.yml."""
    response = await client.get("/openapi.json")
    assert response.status_code == 200
    assert "/pullRequest/reassign" in response.json()["paths"]


@pytest.mark.asyncio
async def test_internal_error_hides_details(session, monkeypatch):
    """Тест: непредвиденная ошибка отдаётся как INTERNAL_ERROR без подробностей."""

    async def broken_stats(self):
        raise RuntimeError("connection to 10.0.0.5 refused")

    async def override_get_session():
        yield session

    monkeypatch.setattr(StatsService, "get_stats", broken_stats)
    app.dependency_overrides[get_session] = override_get_session
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/stats")
    app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {
        "error": {"code": "INTERNAL_ERROR", "message": "internal server error"}
    }
    assert "10.0.0.5" not in response.text


@pytest.mark.asyncio
async def test_commit_failure_is_internal_error(session, monkeypatch):
    """Тест: сбой фиксации транзакции отдаётся как INTERNAL_ERROR, данные не сохраняются."""

    async def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("could not serialize access"))

    async def override_get_session():
        try:
            yield session
        except BaseException:
            await session.rollback()
            raise

    monkeypatch.setattr(session, "commit", failing_commit)
    app.dependency_overrides[get_session] = override_get_session
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/team/add",
            json={
                "team_name": "x",
                "members": [{"user_id": "x1", "username": "X", "is_active": True}],
            },
        )
    app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {
        "error": {"code": "INTERNAL_ERROR", "message": "internal server error"}
    }

    with pytest.raises(NotFoundException):
        await TeamService(session).get_team("x")
