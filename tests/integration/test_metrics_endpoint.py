"""Integration tests for metrics endpoint."""

from __future__ import annotations

from tests.integration.utils import signup


def test_metrics_endpoint_available(client):
    signup(client)

    response = client.get("/metrics")
    assert response.status_code == 200
    body = response.content.decode()
    assert "famly_http_requests_total" in body
    assert "famly_store_calls_total" in body
