from datetime import timedelta

from tbs.core.security import utcnow
from tbs.models.project import Project


def test_overview_counts_and_recent_activity(client, db, admin_headers, labourer_headers):
    for ref in ("TBS-001", "TBS-002"):
        client.post("/api/projects", json={"ref": ref, "address": "Somewhere"}, headers=admin_headers)
    project_id = db.query(Project.id).filter(Project.ref == "TBS-001").scalar()
    client.patch(f"/api/projects/{project_id}", json={"status": "active"}, headers=admin_headers)
    client.post("/api/tasks", json={"project_id": project_id, "title": "One"}, headers=admin_headers)
    client.post("/api/tasks", json={"project_id": project_id, "title": "Two", "status": "done"}, headers=admin_headers)
    client.post(
        "/api/contractors",
        json={"company": "Pipe Co", "trade": "Plumbing", "contactName": "Ed", "phone": "1", "email": "ed@pipe.example"},
        headers=admin_headers,
    )

    # An old project falls outside the activity window
    db.add(Project(ref="TBS-OLD", address="Archive", created_at=utcnow() - timedelta(days=30)))
    db.commit()

    response = client.get("/api/metrics/overview", headers=labourer_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["projects"] == {"total": 3, "byStatus": {"active": 1, "planned": 2}}
    assert body["tasks"] == {"total": 2, "byStatus": {"todo": 1, "done": 1}}
    assert body["staff"] == {"total": 4, "byRole": {"admin": 1, "foreman": 2, "labourer": 1}}
    assert body["contractors"] == {"active": 1}

    activity = body["recentActivity"]
    assert [a["description"] for a in activity] == ["New project 'TBS-002' started", "New project 'TBS-001' started"]
    assert all(a["type"] == "project_created" and a["user"] == "System" for a in activity)


def test_recent_activity_is_capped_at_ten(client, admin_headers):
    for i in range(12):
        client.post("/api/projects", json={"ref": f"TBS-{i:03d}", "address": "Somewhere"}, headers=admin_headers)

    body = client.get("/api/metrics/overview", headers=admin_headers).json()
    assert len(body["recentActivity"]) == 10
    assert body["projects"]["total"] == 12


def test_overview_requires_authentication(client):
    assert client.get("/api/metrics/overview").status_code == 401
