"""
Integration tests for the root and health-check routes.
"""

from datetime import datetime


def test_read_main(client):
    """
    The root route returns the welcome message.
    """
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to the Friends CRM API!"}


def test_health_check(client):
    response = client.get("/health-check")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))
