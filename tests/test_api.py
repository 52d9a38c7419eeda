import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from agendador.api import create_app, include_routes
from agendador.container import ExtractionConfig, build_extraction_container
from agendador.extraction import ConfigurationError
from agendador.infrastructure import InMemoryEventController


@pytest.fixture
def config(pattern_dir, pipeline, date_parser) -> ExtractionConfig:
    return ExtractionConfig(
        patterns_path=str(pattern_dir),
        spacy_model="unused",
        event_store=InMemoryEventController(),
        date_parser=date_parser,
        pipeline_factory=lambda: pipeline,
    )


@pytest.fixture
def client(config) -> TestClient:
    return TestClient(create_app(config))


def test_healthcheck_reports_readiness(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "ready": True}


def test_process_returns_selection_and_event(client):
    response = client.post(
        "/process", json={"text": "Board meeting with John on March 3rd at 2pm"}
    )

    assert response.status_code == 200
    payload = response.json()
    assert [span["value"] for span in payload["selection"]] == [
        "board",
        "meeting",
        "john",
        "on march 3rd",
        "at 2pm",
    ]
    assert payload["event"]["title"] == "board meeting with John"
    assert payload["event"]["start"] == "2026-03-03T14:00:00"
    assert payload["event"]["processed"] is False


def test_process_without_event_returns_null_event(client):
    response = client.post("/process", json={"text": "See you on Monday"})

    assert response.status_code == 200
    assert response.json() == {"selection": [], "event": None}


def test_process_rejects_empty_text(client):
    assert client.post("/process", json={"text": ""}).status_code == 422


def test_events_can_be_listed_and_marked_processed(client):
    created = client.post(
        "/process", json={"text": "Board meeting with John on March 3rd at 2pm"}
    ).json()["event"]

    listed = client.get("/events").json()
    assert [event["id"] for event in listed] == [created["id"]]

    marked = client.post(f"/events/{created['id']}/processed")
    assert marked.status_code == 200
    assert marked.json()["processed"] is True
    assert client.get(f"/events/{created['id']}").json()["processed"] is True

    again = client.post(
        "/process", json={"text": "Board meeting with John on March 3rd at 2pm"}
    )
    assert again.json()["event"] is None


def test_unknown_event_returns_404(client):
    assert client.get("/events/missing").status_code == 404
    assert client.post("/events/missing/processed").status_code == 404


def test_process_on_uninitialised_engine_returns_503(config):
    app = FastAPI()
    include_routes(app, build_extraction_container(config))
    client = TestClient(app)

    response = client.post("/process", json={"text": "Board meeting on March 3rd"})

    assert response.status_code == 503
    assert client.get("/healthz").json()["ready"] is False


def test_create_app_fails_on_bad_configuration(config, tmp_path):
    config.patterns_path = str(tmp_path / "missing")

    with pytest.raises(ConfigurationError):
        create_app(config)


def test_events_can_be_filtered_by_date_range(client):
    client.post("/process", json={"text": "Board meeting with John on March 3rd at 2pm"})
    client.post("/process", json={"text": "Board meeting with John on March 4th at 2pm"})

    response = client.get(
        "/events", params={"from": "2026-03-04T00:00:00", "to": "2026-03-05T00:00:00"}
    )

    assert response.status_code == 200
    assert [event["start"] for event in response.json()] == ["2026-03-04T14:00:00"]
    assert len(client.get("/events").json()) == 2


def test_events_reject_inverted_range(client):
    response = client.get(
        "/events", params={"from": "2026-03-05T00:00:00", "to": "2026-03-04T00:00:00"}
    )

    assert response.status_code == 400
