import pytest
from fastapi.testclient import TestClient

from conftest import FakeGeoProvider, FakeReasoningService, make_element, north_of, ORIGIN
from wanderlust.api.routes import (
    get_discovery_engine,
    get_narrative_orchestrator,
    get_wikipedia_service,
)
from wanderlust.main import app
from wanderlust.services.discovery import DiscoveryEngine
from wanderlust.services.narrative import NarrativeOrchestrator
from wanderlust.services.reasoning import ReasoningServiceError


class StubWikipedia:
    async def describe(self, poi):
        return f"{poi.name} has a long history."


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def poi_payload(index, distance):
    return {
        "id": f"node/{index}",
        "name": f"Place {index}",
        "type": "museum",
        "latitude": 51.22,
        "longitude": 4.40,
        "distance": distance,
    }


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers


def test_discover_pois(client):
    batch = [
        make_element(2, **north_of(ORIGIN, 300), name="Vleeshuis", historic="building"),
        make_element(1, **north_of(ORIGIN, 100), name="Het Steen", historic="castle"),
    ]
    engine = DiscoveryEngine(FakeGeoProvider(batch))
    app.dependency_overrides[get_discovery_engine] = lambda: engine

    response = client.post("/api/poi", json={"location": ORIGIN.model_dump()})

    assert response.status_code == 200
    assert [p["name"] for p in response.json()["pois"]] == ["Het Steen", "Vleeshuis"]


def test_discover_rejects_invalid_coordinates(client):
    response = client.post("/api/poi", json={"location": {"latitude": 123.0, "longitude": "east"}})
    assert response.status_code == 422


def test_story_with_reasoning_outage(client):
    reasoning = FakeReasoningService(ReasoningServiceError("down"), ReasoningServiceError("down"))
    app.dependency_overrides[get_narrative_orchestrator] = lambda: NarrativeOrchestrator(reasoning)
    pois = [poi_payload(i, d) for i, d in enumerate([50, 80, 120, 300, 900])]

    response = client.post("/api/story", json={"pois": pois, "messages": []})

    assert response.status_code == 200
    body = response.json()
    assert [p["distance"] for p in body["selected_pois"]] == [50, 80, 120]
    assert body["next_destination"]["distance"] == 50
    assert body["story"]


def test_story_requires_pois(client):
    response = client.post("/api/story", json={"pois": [], "messages": []})
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "NO_POIS"


def test_wikipedia_info(client):
    app.dependency_overrides[get_wikipedia_service] = lambda: StubWikipedia()
    response = client.post("/api/wikipedia", json={"poi": poi_payload(1, 40)})
    assert response.status_code == 200
    assert response.json() == {"wikipedia_info": "Place 1 has a long history."}
