import pytest

import database.config
from app import create_app
from database.setup import create_tables


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = str(tmp_path / "aquasure_test.db")
    monkeypatch.setattr(database.config, "DB_PATH", path)
    create_tables()
    return path


@pytest.fixture
def app(db_path):
    return create_app({"TESTING": True, "SECRET_KEY": "test"})


@pytest.fixture
def client(app):
    return app.test_client()


def sign_up(client, role="scientist", email=None):
    email = email or f"{role}@example.org"
    response = client.post("/api/auth/signup", json={
        "name": role.title(), "email": email, "password": "secret123", "role": role,
    })
    assert response.status_code == 201, response.get_json()
    return response.get_json()["user"]


@pytest.fixture
def scientist(client):
    return sign_up(client, "scientist")


@pytest.fixture
def project(client, scientist):
    response = client.post("/api/projects", json={
        "name": "Jharia Groundwater",
        "location_district": "Dhanbad",
        "location_city": "Jharia",
        "location_state": "Jharkhand",
    })
    assert response.status_code == 201
    return response.get_json()["project"]


def sample_entry(project_id, **overrides):
    entry = {
        "sample_code": "S001",
        "project_id": project_id,
        "metal": "Lead",
        "concentration": 0.09,
        "latitude": 23.7457,
        "longitude": 86.4152,
        "date_collected": "2024-01-15",
    }
    entry.update(overrides)
    return entry
