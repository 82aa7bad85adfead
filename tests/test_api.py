"""Tests for the HTTP API."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from food_system.api.app import create_app
from food_system.containers import AppContainer


@pytest.fixture
def client(container: AppContainer) -> Iterator[TestClient]:
    with TestClient(create_app(container)) as test_client:
        yield test_client


def _start(client: TestClient, **extra: object) -> str:
    response = client.post("/cooking/sessions", json={"recipeId": "r1", **extra})
    assert response.status_code == 201
    return response.json()["sessionId"]


def test_health_sets_request_id(client: TestClient) -> None:
    response = client.get("/health", headers={"X-Request-ID": "req-1"})

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-ID"] == "req-1"


def test_create_and_fetch_recipe(client: TestClient) -> None:
    response = client.post(
        "/recipes",
        json={
            "name": "Pancakes",
            "servings": 3,
            "instructions": [{"step": "Mix batter", "timing": 5}, {"step": "Fry"}],
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["instructions"][1] == {"step": "Fry", "timing": None}
    assert "createdAt" in body

    fetched = client.get(f"/recipes/{body['id']}")
    assert fetched.json()["name"] == "Pancakes"
    listed = client.get("/recipes").json()["recipes"]
    assert {recipe["id"] for recipe in listed} == {body["id"], "r1"}


def test_missing_recipe_uses_error_envelope(client: TestClient) -> None:
    response = client.get("/recipes/nope")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "NOT_FOUND"
    assert body["error"]["type"] == "client_error"
    assert body["error"]["message"] == "Recipe nope not found"
    assert body["error"]["requestId"] == response.headers["X-Request-ID"]


def test_start_session_returns_first_step(client: TestClient) -> None:
    response = client.post(
        "/cooking/sessions", json={"recipeId": "r1", "automationLevel": "assisted"}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "in_progress"
    assert body["currentStep"]["currentStep"] == 0
    assert body["currentStep"]["totalSteps"] == 3
    assert body["currentStep"]["currentInstruction"] is None
    assert body["currentStep"]["nextInstruction"]["step"] == "Step 1"


def test_start_session_accepts_snake_case(client: TestClient) -> None:
    response = client.post("/cooking/sessions", json={"recipe_id": "r1"})

    assert response.status_code == 201


def test_start_session_validation_error(client: TestClient) -> None:
    response = client.post("/cooking/sessions", json={"servings": 0})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "BAD_REQUEST"
    assert {item["field"] for item in error["details"]["errors"]} >= {
        "body.recipeId",
        "body.servings",
    }


def test_advance_until_completion(client: TestClient) -> None:
    session_id = _start(client)

    responses = [
        client.post(f"/cooking/sessions/{session_id}/advance") for _ in range(4)
    ]

    assert [response.status_code for response in responses] == [200] * 4
    assert responses[0].json()["currentStep"]["currentStep"] == 1
    assert responses[0].json()["currentStep"]["currentInstruction"]["step"] == "Step 1"
    assert responses[2].json()["completion"] is None
    final = responses[-1].json()
    assert final["status"] == "completed"
    assert len(final["completion"]["stepTimings"]) == 3

    again = client.post(f"/cooking/sessions/{session_id}/advance")
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "CONFLICT"
    assert "completed" in again.json()["error"]["message"]


def test_pause_resume_and_abort(client: TestClient) -> None:
    session_id = _start(client)

    paused = client.post(f"/cooking/sessions/{session_id}/pause")
    assert paused.json()["status"] == "paused"
    assert client.post(f"/cooking/sessions/{session_id}/advance").status_code == 409
    resumed = client.post(f"/cooking/sessions/{session_id}/resume")
    assert resumed.json()["status"] == "in_progress"

    aborted = client.post(
        f"/cooking/sessions/{session_id}/abort", json={"reason": "Smoke alarm"}
    )
    assert aborted.json()["status"] == "aborted"
    detail = client.get(f"/cooking/sessions/{session_id}").json()
    assert detail["errors"][-1]["message"] == "Smoke alarm"


def test_abort_without_body(client: TestClient) -> None:
    session_id = _start(client)

    response = client.post(f"/cooking/sessions/{session_id}/abort")

    assert response.status_code == 200
    detail = client.get(f"/cooking/sessions/{session_id}").json()
    assert detail["errors"][-1]["message"] == "User cancelled"


def test_session_detail_keeps_last_ten_readings(client: TestClient) -> None:
    session_id = _start(client)
    for value in range(12):
        response = client.post(
            f"/cooking/sessions/{session_id}/sensor",
            json={"sensorType": "temperature", "value": value},
        )
        assert response.status_code == 201

    detail = client.get(f"/cooking/sessions/{session_id}").json()

    assert [reading["value"] for reading in detail["sensorReadings"]] == [
        float(value) for value in range(2, 12)
    ]
    assert detail["recipeName"] == "Tomato soup"


def test_quality_metric_endpoint(client: TestClient) -> None:
    session_id = _start(client)

    response = client.post(
        f"/cooking/sessions/{session_id}/quality",
        json={"name": "texture", "value": "crisp"},
    )

    assert response.status_code == 201
    assert response.json()["kind"] == "texture"
    assert response.json()["value"] == "crisp"


def test_list_sessions(client: TestClient) -> None:
    _start(client)

    sessions = client.get("/cooking/sessions").json()["sessions"]

    assert len(sessions) == 1
    assert sessions[0]["recipeId"] == "r1"


def test_invalid_session_id_is_rejected(client: TestClient) -> None:
    response = client.post("/cooking/sessions/not-a-uuid/advance")

    assert response.status_code == 400


def test_cooking_rate_limit(client: TestClient) -> None:
    for _ in range(3):
        _start(client)

    response = client.post("/cooking/sessions", json={"recipeId": "r1"})

    assert response.status_code == 429
    assert response.json()["error"]["code"] == "TOO_MANY_REQUESTS"
    assert response.headers["Retry-After"] == "300"


def test_consumption_flow(client: TestClient) -> None:
    created = client.post("/consumption/profiles", json={"userId": "u1"})
    assert created.status_code == 201
    assert created.json()["adjustmentSettings"]["consultationRequired"] is True
    duplicate = client.post("/consumption/profiles", json={"userId": "u1"})
    assert duplicate.status_code == 409

    results = [
        client.post(
            "/consumption/records",
            json={
                "userId": "u1",
                "ingredient": "lettuce",
                "portionServed": 100,
                "portionConsumed": 70,
            },
        ).json()
        for _ in range(5)
    ]

    assert results[0]["record"]["wastePercentage"] == pytest.approx(30.0)
    assert results[0]["suggestion"] is None
    assert results[-1]["suggestion"]["suggestedPortion"] == pytest.approx(77.6)

    base = "/consumption/profiles/u1/ingredients/lettuce"
    assert client.get(f"{base}/suggestion").json()["suggestion"] is not None

    refused = client.post(f"{base}/adjust", json={"newPortion": 70})
    assert refused.status_code == 409
    assert refused.json()["error"]["details"]["ingredient"] == "lettuce"
    assert client.get(f"{base}/portion").json()["portion"] != 70

    applied = client.post(
        f"{base}/adjust", json={"newPortion": 70, "userApproved": True}
    )
    assert applied.status_code == 200
    assert applied.json()["oldPortion"] == 80.0
    assert client.get(f"{base}/portion").json()["portion"] == 70

    prediction = client.get(f"{base}/prediction", params={"days": 3}).json()
    assert prediction["daysAhead"] == 3
    assert prediction["sampleCount"] == 5

    profile = client.get("/consumption/profiles/u1").json()
    assert profile["efficiency"]["totalPortionsTracked"] == 5
    assert profile["currentPortions"] == {"lettuce": 70.0}


def test_invalid_consumption_record(client: TestClient) -> None:
    client.post("/consumption/profiles", json={"userId": "u1"})

    response = client.post(
        "/consumption/records",
        json={
            "userId": "u1",
            "ingredient": "tomato",
            "portionServed": 0,
            "portionConsumed": 0,
        },
    )

    assert response.status_code == 400
    assert response.json()["error"]["details"] == {"portion_served": 0.0}


def test_unknown_profile(client: TestClient) -> None:
    response = client.get("/consumption/profiles/ghost")

    assert response.status_code == 404


def test_hardware_polling_feeds_session(client: TestClient) -> None:
    session_id = _start(client)

    started = client.post(
        "/hardware/modules/m1/polling",
        json={"sensorTypes": ["temperature"], "sessionId": session_id},
    )

    assert started.status_code == 200
    assert started.json()["samples"][0]["value"] == 21.5
    readings = client.get("/hardware/modules/m1/readings").json()
    assert readings["polling"] is True
    assert readings["readings"][0]["sensorType"] == "temperature"
    detail = client.get(f"/cooking/sessions/{session_id}").json()
    assert detail["sensorReadings"][0]["value"] == 21.5

    stopped = client.delete("/hardware/modules/m1/polling")
    assert stopped.json()["polling"] is False


def test_hardware_polling_unknown_session(client: TestClient) -> None:
    response = client.post(
        "/hardware/modules/m1/polling",
        json={
            "sensorTypes": ["temperature"],
            "sessionId": "00000000-0000-0000-0000-000000000000",
        },
    )

    assert response.status_code == 404
    assert client.get("/hardware/modules/m1/readings").status_code == 404


def test_actuator_command(client: TestClient) -> None:
    response = client.post(
        "/hardware/modules/m1/actuators/pump",
        json={"command": "on", "params": {"flow": 2}},
    )

    assert response.status_code == 200
    assert response.json()["actuatorId"] == "pump"
    assert response.json()["params"] == {"flow": 2}


def test_unhandled_error_returns_server_envelope(
    container: AppContainer, client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    def explode(limit: int = 50) -> list[object]:
        raise RuntimeError("database exploded")

    monkeypatch.setattr(container.recipe_service, "list_recipes", explode)

    response = client.get("/recipes")

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["type"] == "server_error"
    assert error["message"] == "Internal server error"
    assert "X-Request-ID" in response.headers


def test_unknown_route_uses_envelope(client: TestClient) -> None:
    response = client.get("/nowhere")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_general_rate_limit_headers(client: TestClient) -> None:
    response = client.get("/recipes")

    assert response.headers["X-RateLimit-Limit"] == "1000"
    assert response.headers["X-RateLimit-Remaining"] == "999"
