import io
import sqlite3

import pytest

import database
from conftest import sample_entry, sign_up
from extensions import socketio


def test_requires_sign_in(client, db_path):
    assert client.get("/api/samples").status_code == 401
    assert client.post("/api/projects", json={"name": "x"}).status_code == 401


def test_signup_signin_and_me(client, db_path):
    sign_up(client, "policy-maker", email="pm@example.org")
    client.post("/api/auth/signout")
    assert client.get("/api/auth/me").status_code == 401

    bad = client.post("/api/auth/signin", json={"email": "pm@example.org", "password": "wrong"})
    assert bad.status_code == 401

    ok = client.post("/api/auth/signin", json={"email": "pm@example.org", "password": "secret123"})
    assert ok.status_code == 200
    me = client.get("/api/auth/me").get_json()
    assert me["role"] == "policy-maker"
    assert me["can_mutate"] is True


def test_signup_rejects_unknown_role_and_duplicate_email(client, db_path):
    response = client.post("/api/auth/signup", json={
        "name": "A", "email": "a@example.org", "password": "secret123", "role": "admin",
    })
    assert response.status_code == 400

    sign_up(client, "scientist", email="dup@example.org")
    response = client.post("/api/auth/signup", json={
        "name": "B", "email": "dup@example.org", "password": "secret123", "role": "scientist",
    })
    assert response.status_code == 400
    assert "already exists" in response.get_json()["message"]
    failures = [log for log in database.get_audit_logs(component="Security") if log["status"] == "Failure"]
    assert len(failures) == 2


def test_signup_rejects_non_string_password(client, db_path):
    response = client.post("/api/auth/signup", json={
        "name": "A", "email": "a@example.org", "password": 12345678, "role": "scientist",
    })
    assert response.status_code == 400


def test_failed_project_insert_releases_the_database(db_path):
    with pytest.raises(sqlite3.IntegrityError):
        database.create_project({"name": None})
    database.add_audit_log(None, "Projects", "Project Created", "Failure", "127.0.0.1")
    assert len(database.get_audit_logs(component="Projects")) == 1


def test_create_sample_computes_hmpi_and_raises_alert(client, project):
    response = client.post("/api/samples", json=sample_entry(project["id"]))
    assert response.status_code == 201
    body = response.get_json()
    sample = body["samples"][0]
    assert sample["hmpi_value"] == 630.0
    assert sample["risk_level"] == "Very High Risk"
    assert len(body["alerts"]) == 1
    alert = body["alerts"][0]
    assert alert["priority"] == "high"
    assert alert["status"] == "active"
    assert alert["risk_level"] == "Very High Risk"
    assert alert["sample_id"] == sample["id"]


def test_safe_sample_raises_no_alert(client, project):
    response = client.post("/api/samples", json=sample_entry(project["id"], concentration=0.0001))
    body = response.get_json()
    assert body["samples"][0]["risk_level"] == "Safe"
    assert body["alerts"] == []


def test_moderate_sample_raises_medium_alert(client, project):
    # Lead: 0.003 / 0.01 * 0.7 * 100 = 21 -> Low; 0.005 -> 35 -> Moderate
    body = client.post("/api/samples", json=sample_entry(project["id"], concentration=0.005)).get_json()
    assert body["samples"][0]["risk_level"] == "Moderate Risk"
    assert body["alerts"][0]["priority"] == "medium"


def test_invalid_sample_is_rejected(client, project):
    response = client.post("/api/samples", json=sample_entry(project["id"], latitude=123))
    assert response.status_code == 400
    assert response.get_json()["errors"][0]["errors"] == ["Invalid latitude"]


def test_bulk_save_is_all_or_nothing(client, project):
    entries = [
        sample_entry(project["id"], sample_code="S1"),
        sample_entry(999, sample_code="S2"),
    ]
    response = client.post("/api/samples/bulk", json=entries)
    assert response.status_code == 400
    assert response.get_json()["errors"][0]["row"] == 2
    assert client.get("/api/samples").get_json() == []


def test_non_finite_concentration_is_rejected(client, project):
    response = client.post("/api/samples", json=sample_entry(project["id"], concentration="1e400"))
    assert response.status_code == 400
    assert response.get_json()["errors"][0]["errors"] == ["Invalid concentration value"]
    assert database.get_samples() == []


def test_fractional_project_id_is_rejected(client, project):
    response = client.post("/api/samples", json=sample_entry(project["id"] + 0.9))
    assert response.status_code == 400
    assert response.get_json()["errors"][0]["errors"] == ["Invalid project ID"]


def test_bulk_store_failure_rolls_back(project, db_path):
    entries = [
        {"sample_code": "S1", "project_id": project["id"], "metal": "Lead", "concentration": 0.09,
         "latitude": 1.0, "longitude": 1.0, "date_collected": "2024-01-01"},
        # NOT NULL violation on the second row
        {"sample_code": None, "project_id": project["id"], "metal": "Lead", "concentration": 0.09,
         "latitude": 1.0, "longitude": 1.0, "date_collected": "2024-01-01"},
    ]
    with pytest.raises(sqlite3.IntegrityError):
        database.create_samples(entries)
    assert database.get_samples() == []
    assert database.get_alerts() == []


def test_bulk_csv_upload(client, project):
    content = (
        "SampleID,ProjectID,District,City,Latitude,Longitude,Metal,Concentration,Ii,Mi,Date\n"
        f"S001,{project['id']},Dhanbad,Jharia,23.7457,86.4152,Lead,0.09,0.01,0.7,2024-01-15\n"
        f"S002,{project['id']},Dhanbad,Jharia,23.7461,86.4160,Arsenic,0.05,,,2024-01-15\n"
    ).encode("utf-8")
    response = client.post(
        "/api/samples/bulk",
        data={"file": (io.BytesIO(content), "samples.csv")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 201
    hmpis = sorted(s["hmpi_value"] for s in response.get_json()["samples"])
    assert hmpis == [250.0, 630.0]


@pytest.mark.parametrize("content", [
    b"",
    b"SampleID,ProjectID,District,City,Latitude,Longitude,Metal,Concentration,Ii,Mi,Date\n\xff\xfe\xfa\n",
])
def test_bulk_upload_rejects_malformed_files(client, project, content):
    response = client.post(
        "/api/samples/bulk",
        data={"file": (io.BytesIO(content), "samples.csv")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid file format. Please use the provided template."
    assert database.get_samples() == []


def test_new_alert_is_broadcast_to_joined_clients(app, client, project):
    sio_client = socketio.test_client(app, flask_test_client=client)
    sio_client.emit("join_alerts")
    sio_client.get_received()

    client.post("/api/samples", json=sample_entry(project["id"]))
    client.post("/api/samples", json=sample_entry(project["id"], sample_code="S002", concentration=0.0001))

    events = [event for event in sio_client.get_received() if event["name"] == "new_alert"]
    assert len(events) == 1
    assert events[0]["args"][0]["priority"] == "high"
    assert events[0]["args"][0]["risk_level"] == "Very High Risk"
    sio_client.disconnect()


def test_researcher_is_read_only(client, project):
    client.post("/api/samples", json=sample_entry(project["id"]))
    alert_id = client.get("/api/alerts").get_json()[0]["id"]
    client.post("/api/auth/signout")

    sign_up(client, "researcher")
    assert client.get("/api/alerts").status_code == 200
    assert client.get("/api/reports/summary").status_code == 200
    assert client.post(f"/api/alerts/{alert_id}/acknowledge").status_code == 403
    assert client.post("/api/samples", json=sample_entry(project["id"])).status_code == 403
    assert client.post("/api/projects", json={"name": "x"}).status_code == 403


def test_alert_lifecycle(client, project):
    client.post("/api/samples", json=sample_entry(project["id"]))
    alert_id = client.get("/api/alerts?filter=active").get_json()[0]["id"]

    response = client.post(f"/api/alerts/{alert_id}/acknowledge")
    assert response.status_code == 200
    alert = response.get_json()["alert"]
    assert alert["status"] == "acknowledged"
    assert alert["acknowledged_by_name"] == "Scientist"

    assert client.post(f"/api/alerts/{alert_id}/acknowledge").status_code == 409
    assert client.post(f"/api/alerts/{alert_id}/resolve").status_code == 200
    assert client.post(f"/api/alerts/{alert_id}/resolve").status_code == 409
    assert client.post(f"/api/alerts/{alert_id}/acknowledge").status_code == 409
    assert client.post("/api/alerts/9999/acknowledge").status_code == 404

    assert client.get("/api/alerts?filter=resolved").get_json()[0]["id"] == alert_id
    assert client.get("/api/alerts?filter=bogus").status_code == 400


def test_acknowledge_all(client, project):
    entries = [sample_entry(project["id"], sample_code=f"S{i}") for i in range(3)]
    client.post("/api/samples/bulk", json=entries)
    response = client.post("/api/alerts/acknowledge-all")
    assert response.get_json()["acknowledged"] == 3
    stats = client.get("/api/alerts/stats").get_json()
    assert stats == {"total": 3, "active": 0, "high": 3, "medium": 0, "low": 0}


def test_projects_listing_with_stats_and_search(client, project):
    client.post("/api/samples", json=sample_entry(project["id"]))
    client.post("/api/samples", json=sample_entry(project["id"], concentration=0))

    projects = client.get("/api/projects?search=jharia").get_json()
    assert len(projects) == 1
    assert projects[0]["stats"] == {
        "sample_count": 2, "alert_count": 1, "avg_hmpi": 315.0, "high_risk_count": 1,
    }
    assert client.get("/api/projects?search=nowhere").get_json() == []
    assert client.get(f"/api/projects/{project['id']}").get_json()["stats"]["sample_count"] == 2
    assert client.get("/api/projects/999").status_code == 404


def test_report_summary_and_exports(client, project):
    client.post("/api/samples", json=sample_entry(project["id"]))
    client.post("/api/samples", json=sample_entry(project["id"], metal="Arsenic", concentration=0.05))

    report = client.get(f"/api/reports/summary?project_id={project['id']}").get_json()
    assert report["summary"]["total_samples"] == 2
    assert report["summary"]["average_hmpi"] == 440.0
    assert report["summary"]["high_risk_count"] == 2
    assert report["compliance"]["WHO"]["Lead"] == {"violations": 1, "total": 1, "rate": 0.0, "limit": 0.01}

    csv_response = client.get("/api/reports/export.csv")
    assert csv_response.mimetype == "text/csv"
    assert csv_response.get_data(as_text=True).splitlines()[0].startswith("Sample ID,Project,Location")

    pdf_response = client.get(f"/api/reports/export.pdf?project_id={project['id']}")
    assert pdf_response.mimetype == "application/pdf"
    assert pdf_response.data.startswith(b"%PDF")

    assert client.get("/api/reports/summary?project_id=999").status_code == 404


def test_mutations_are_audited(client, project):
    client.post("/api/samples", json=sample_entry(project["id"]))
    actions = [log["action"] for log in database.get_audit_logs()]
    assert "Sample Created" in actions
    assert "Project Created" in actions
    assert "Sign Up" in actions


def test_audit_log_filters_by_component_and_action(client, project):
    client.post("/api/samples", json=sample_entry(project["id"]))
    security = database.get_audit_logs(component="Security")
    assert [log["action"] for log in security] == ["Sign Up"]

    created = database.get_audit_logs(component="Samples", action="Sample Created")
    assert len(created) == 1
    assert created[0]["user_name"] == "Scientist"
    assert database.get_audit_logs(action="Bulk Upload") == []
