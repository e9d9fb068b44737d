"""Tests for the explorer session routes."""

from contextlib import asynccontextmanager

import pytest
from fastapi.testclient import TestClient

from mead.api.app import create_app
from mead.api.dependencies import AppState, get_app_state
from mead.core.errors import TransportError
from mead.core.health import HealthChecker


@pytest.fixture
def app_state(conditions_source, regions_source) -> AppState:
    state = AppState()
    state.configure(
        {"conditions": conditions_source, "regions": regions_source},
        page_size=2,
        max_sessions=4,
    )
    return state


@pytest.fixture
def client(app_state: AppState):
    app = create_app()

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.health_checker = HealthChecker(version="test")
        yield

    app.router.lifespan_context = test_lifespan
    app.dependency_overrides[get_app_state] = lambda: app_state

    with TestClient(app) as test_client:
        yield test_client


def _open(client: TestClient, kind: str = "conditions", **body) -> dict:
    response = client.post(f"/explorer/{kind}/sessions", json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestOpenSession:
    def test_opens_and_loads(self, client: TestClient) -> None:
        data = _open(client)

        assert data["kind"] == "conditions"
        assert [i["id"] for i in data["listing"]["items"]] == ["asthma", "flu"]
        assert data["pagination"]["total_pages"] == 2
        assert data["pagination"]["page_size"] == 2
        assert data["selection"]["active_id"] == "asthma"
        assert data["selection"]["detail"]["name"] == "Asthma"
        assert data["selection"]["carousel"]["total"] == 3

    def test_initial_search_and_filter(self, client: TestClient) -> None:
        data = _open(client, "regions", search="ly", type="city")

        assert [i["id"] for i in data["listing"]["items"]] == ["lyon"]
        assert data["query"]["type_filter"] == "city"

    def test_custom_page_size(self, client: TestClient) -> None:
        data = _open(client, page_size=10)
        assert data["pagination"]["total_pages"] == 1

    def test_invalid_type_filter(self, client: TestClient) -> None:
        response = client.post("/explorer/conditions/sessions", json={"type": "city"})
        assert response.status_code == 422

    def test_unknown_collection(self, client: TestClient) -> None:
        response = client.post("/explorer/planets/sessions", json={})
        assert response.status_code == 422

    def test_failed_load_still_opens(self, client: TestClient, conditions_source) -> None:
        conditions_source.collection_error = TransportError(502, "Bad Gateway")

        data = _open(client)

        assert data["listing"]["error"] == "HTTP 502: Bad Gateway"
        assert data["listing"]["items"] == []
        assert data["listing"]["empty_message"] is None


class TestSessionRoutes:
    def test_get_session(self, client: TestClient) -> None:
        session_id = _open(client)["session_id"]

        response = client.get(f"/explorer/conditions/sessions/{session_id}")

        assert response.status_code == 200
        assert response.json()["session_id"] == session_id

    def test_session_of_other_collection(self, client: TestClient) -> None:
        session_id = _open(client)["session_id"]
        response = client.get(f"/explorer/regions/sessions/{session_id}")
        assert response.status_code == 404

    def test_unknown_session(self, client: TestClient) -> None:
        response = client.get("/explorer/conditions/sessions/nope")
        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "Session not found"

    def test_query_update(self, client: TestClient) -> None:
        session_id = _open(client)["session_id"]

        response = client.patch(
            f"/explorer/conditions/sessions/{session_id}/query",
            json={"search": "MEAS"},
        )

        data = response.json()
        assert [i["id"] for i in data["listing"]["items"]] == ["measles"]
        assert data["selection"]["active_id"] == "measles"
        assert data["pagination"]["page_number"] == 1

    def test_page_step(self, client: TestClient) -> None:
        session_id = _open(client)["session_id"]
        url = f"/explorer/conditions/sessions/{session_id}/query"

        data = client.patch(url, json={"step": "next"}).json()
        assert data["pagination"]["page_number"] == 2
        assert [i["id"] for i in data["listing"]["items"]] == ["measles"]
        assert data["selection"]["active_id"] == "asthma"

        data = client.patch(url, json={"page": 9}).json()
        assert data["pagination"]["page_number"] == 2

    def test_select(self, client: TestClient) -> None:
        session_id = _open(client)["session_id"]

        response = client.post(
            f"/explorer/conditions/sessions/{session_id}/select", json={"id": "flu"}
        )

        data = response.json()
        assert data["selection"]["active_id"] == "flu"
        assert data["selection"]["phase"] == "ready"
        assert data["selection"]["carousel"]["images"] == ["https://img/f1.jpg"]

    def test_select_outside_results(self, client: TestClient) -> None:
        session_id = _open(client, search="flu")["session_id"]
        response = client.post(
            f"/explorer/conditions/sessions/{session_id}/select", json={"id": "asthma"}
        )
        assert response.status_code == 404

    def test_select_failure(self, client: TestClient, conditions_source) -> None:
        conditions_source.detail_errors["flu"] = TransportError(500, "boom")
        session_id = _open(client)["session_id"]

        data = client.post(
            f"/explorer/conditions/sessions/{session_id}/select", json={"id": "flu"}
        ).json()

        assert data["selection"]["phase"] == "failed"
        assert data["selection"]["error"] == "HTTP 500: boom"
        assert len(data["listing"]["items"]) == 2

    def test_carousel_actions(self, client: TestClient) -> None:
        session_id = _open(client)["session_id"]
        url = f"/explorer/conditions/sessions/{session_id}/carousel"

        carousel = client.post(url, json={"action": "next"}).json()["selection"]["carousel"]
        assert carousel["current_index"] == 1

        carousel = client.post(
            url, json={"action": "image_error", "url": "https://img/a2.jpg"}
        ).json()["selection"]["carousel"]
        assert carousel["images"] == ["https://img/a1.jpg", "https://img/a3.jpg"]
        assert carousel["current_index"] == 0

        carousel = client.post(url, json={"action": "swipe", "displacement": 60}).json()[
            "selection"
        ]["carousel"]
        assert carousel["current_image"] == "https://img/a3.jpg"

        carousel = client.post(url, json={"action": "goto", "index": 0}).json()[
            "selection"
        ]["carousel"]
        assert carousel["current_index"] == 0

    def test_carousel_missing_argument(self, client: TestClient) -> None:
        session_id = _open(client)["session_id"]
        response = client.post(
            f"/explorer/conditions/sessions/{session_id}/carousel",
            json={"action": "goto"},
        )
        assert response.status_code == 422

    def test_layout(self, client: TestClient) -> None:
        session_id = _open(client)["session_id"]

        response = client.post(
            f"/explorer/conditions/sessions/{session_id}/layout",
            json={"container_height": 500, "row_height": 160},
        )

        data = response.json()
        assert data["page_size"] == 3
        assert data["changed"] is True
        assert data["view"]["pagination"]["total_pages"] == 1

    @pytest.mark.parametrize(
        "measurement",
        [
            {"container_height": "Infinity", "row_height": 40},
            {"container_height": 500, "row_height": "NaN"},
        ],
    )
    def test_layout_rejects_non_finite_measurement(
        self, client: TestClient, measurement: dict[str, object]
    ) -> None:
        session_id = _open(client)["session_id"]

        response = client.post(
            f"/explorer/conditions/sessions/{session_id}/layout", json=measurement
        )

        assert response.status_code == 422
        view = client.get(f"/explorer/conditions/sessions/{session_id}").json()
        assert view["pagination"]["page_size"] == 2

    def test_close(self, client: TestClient, app_state: AppState) -> None:
        session_id = _open(client)["session_id"]

        response = client.delete(f"/explorer/conditions/sessions/{session_id}")

        assert response.status_code == 204
        assert session_id not in app_state.sessions
        assert (
            client.get(f"/explorer/conditions/sessions/{session_id}").status_code == 404
        )

    def test_oldest_session_evicted(self, client: TestClient) -> None:
        first = _open(client)["session_id"]
        for _ in range(4):
            _open(client)

        assert client.get(f"/explorer/conditions/sessions/{first}").status_code == 404
