"""Tests pour les endpoints de santé et de métriques de l'application."""

from fastapi.testclient import TestClient

from curate.app.main import app
from curate.core.http_constants import HTTP_OK


def test_health():
    """Teste que l'endpoint de santé retourne un statut OK et le backend de stockage."""
    client = TestClient(app)
    r = client.get("/health")
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["status"] == "ok"
    assert body["storage"] == "sqlite"


def test_metrics_exposes_business_counters():
    client = TestClient(app)
    client.get("/health")
    r = client.get("/metrics")
    assert r.status_code == HTTP_OK
    assert "http_requests_total" in r.text
    assert "content_ingest_results_total" in r.text
    assert 'route="/health"' in r.text


def test_responses_carry_request_id_and_timing():
    client = TestClient(app)
    r = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert r.headers["X-Request-ID"] == "req-123"
    assert int(r.headers["X-Process-Time-ms"]) >= 0
