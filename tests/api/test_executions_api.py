from datetime import datetime
from uuid import uuid4

from unittest.mock import AsyncMock

from simulator.api.deps import get_execution_service


def test_executions_empty(client):
    response = client.get("/api/executions")

    assert response.status_code == 200
    assert response.json() == []


def test_request_creates_execution_history(client, wait_for_idle):
    client.post("/services/rest/orders", json={"item": "fax"})

    executions = wait_for_idle()
    assert len(executions) == 1
    assert executions[0]["scenario_name"] == "CreateOrder"
    assert executions[0]["status"] == "success"

    detail = client.get(f"/api/executions/{executions[0]['id']}").json()
    directions = [m["direction"] for m in detail["messages"]]
    assert sorted(directions) == ["inbound", "outbound"]


def test_filter_by_status(client, wait_for_idle):
    client.post("/services/rest/orders", json={"wrong": "field"})
    client.get("/services/rest/orders/1")
    wait_for_idle()

    failed = client.get("/api/executions", params={"status": "failed"}).json()
    assert [e["scenario_name"] for e in failed] == ["CreateOrder"]
    assert failed[0]["error_message"]
    succeeded = client.get("/api/executions", params={"scenario_name": "GetOrder"}).json()
    assert [e["status"] for e in succeeded] == ["success"]


def test_get_execution_not_found(client):
    execution_id = uuid4()
    mock_service = AsyncMock()
    mock_service.get_execution.side_effect = ValueError(f"Execution {execution_id} does not exist")
    client.app.dependency_overrides[get_execution_service] = lambda: mock_service

    response = client.get(f"/api/executions/{execution_id}")

    assert response.status_code == 404
    assert "does not exist" in response.json()["detail"]


def test_get_execution_unknown_id_with_database(client):
    response = client.get(f"/api/executions/{uuid4()}")

    assert response.status_code == 404


def test_list_executions_with_mocked_service(client):
    now = datetime.now().isoformat()
    mock_service = AsyncMock()
    mock_service.list_executions.return_value = [
        {
            "id": str(uuid4()),
            "scenario_name": "Hello",
            "status": "success",
            "parameters": {},
            "error_message": None,
            "start_date": now,
            "end_date": now,
        }
    ]
    client.app.dependency_overrides[get_execution_service] = lambda: mock_service

    response = client.get("/api/executions", params={"limit": 5, "offset": 10})

    assert response.status_code == 200
    assert response.json()[0]["scenario_name"] == "Hello"
    mock_service.list_executions.assert_awaited_once_with(
        limit=5, offset=10, status=None, scenario_name=None
    )


def test_invalid_limit_is_rejected(client):
    response = client.get("/api/executions", params={"limit": 0})

    assert response.status_code == 422


def test_clear_executions(client, wait_for_idle):
    client.get("/services/rest/orders/1")
    client.get("/services/rest/orders/2")
    wait_for_idle()

    response = client.delete("/api/executions")

    assert response.status_code == 200
    assert response.json() == {"deleted": 2}
    assert client.get("/api/executions").json() == []
