from tbs.models.project import Project
from tbs.models.task import Task
from tbs.models.user import User


def _create_project(client, headers, ref="TBS-001", **extra):
    body = {"ref": ref, "address": "12 Harbour Road", "client_name": "Kelly", **extra}
    response = client.post("/api/projects", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["id"]


def _create_task(client, headers, project_id, **extra):
    response = client.post("/api/tasks", json={"project_id": project_id, "title": "Task", **extra}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_fetch_project(client, admin_headers, labourer_headers):
    project_id = _create_project(client, admin_headers, start_date="2026-11-02")

    response = client.get(f"/api/projects/{project_id}", headers=labourer_headers)
    assert response.status_code == 200
    project = response.json()
    assert project["ref"] == "TBS-001"
    assert project["status"] == "planned"
    assert project["start_date"] == "2026-11-02"
    assert project["created_by"] is not None


def test_projects_listed_newest_first(client, admin_headers):
    first = _create_project(client, admin_headers, ref="TBS-001")
    second = _create_project(client, admin_headers, ref="TBS-002")

    ids = [p["id"] for p in client.get("/api/projects", headers=admin_headers).json()]
    assert ids == [second, first]


def test_duplicate_project_ref_is_409(client, admin_headers):
    _create_project(client, admin_headers)
    response = client.post("/api/projects", json={"ref": "TBS-001", "address": "Elsewhere"}, headers=admin_headers)
    assert response.status_code == 409


def test_missing_project_is_404(client, admin_headers):
    response = client.get("/api/projects/4242", headers=admin_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}

    response = client.patch("/api/projects/4242", json={"status": "active"}, headers=admin_headers)
    assert response.status_code == 404


def test_foreman_can_patch_project_status(client, admin_headers, foreman_headers, labourer_headers):
    project_id = _create_project(client, admin_headers)

    response = client.patch(f"/api/projects/{project_id}", json={"status": "active"}, headers=foreman_headers)
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert client.get(f"/api/projects/{project_id}", headers=admin_headers).json()["status"] == "active"

    assert client.patch(f"/api/projects/{project_id}", json={"status": "complete"}, headers=labourer_headers).status_code == 403
    assert client.patch(f"/api/projects/{project_id}", json={"status": "finished"}, headers=admin_headers).status_code == 400
    assert client.patch("/api/projects/4242", json={"notes": "x"}, headers=admin_headers).status_code == 404


def test_task_includes_project_and_assignee_details(client, db, admin_headers):
    project_id = _create_project(client, admin_headers)
    pat = db.query(User).filter(User.email == "pat@tbs.local").one()

    task = _create_task(client, admin_headers, project_id, title="Strip out kitchen", assignee_staff_id=pat.id)

    assert task["status"] == "todo"
    assert task["priority"] == "medium"
    assert task["project_ref"] == "TBS-001"
    assert task["project_address"] == "12 Harbour Road"
    assert task["staff_name"] == "Pat"
    assert task["contractor_company"] is None


def test_task_creation_validates_references(client, admin_headers):
    project_id = _create_project(client, admin_headers)

    response = client.post("/api/tasks", json={"project_id": 999, "title": "Orphan"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Project not found"}

    response = client.post(
        "/api/tasks", json={"project_id": project_id, "title": "X", "assignee_staff_id": 999}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Staff member not found"}

    response = client.post(
        "/api/tasks", json={"project_id": project_id, "title": "X", "assignee_contractor_id": 999}, headers=admin_headers
    )
    assert response.status_code == 400


def test_tasks_ordered_by_priority_then_due_date(client, admin_headers, labourer_headers):
    project_id = _create_project(client, admin_headers)
    _create_task(client, admin_headers, project_id, title="low", priority="low", due_date="2026-11-01")
    _create_task(client, admin_headers, project_id, title="high-undated", priority="high")
    _create_task(client, admin_headers, project_id, title="high-late", priority="high", due_date="2026-12-01")
    _create_task(client, admin_headers, project_id, title="urgent", priority="urgent", due_date="2027-01-01")
    _create_task(client, admin_headers, project_id, title="high-early", priority="high", due_date="2026-11-15")

    titles = [t["title"] for t in client.get("/api/tasks", headers=labourer_headers).json()]
    assert titles == ["urgent", "high-early", "high-late", "high-undated", "low"]


def test_task_filters(client, db, admin_headers):
    first = _create_project(client, admin_headers, ref="TBS-001")
    second = _create_project(client, admin_headers, ref="TBS-002")
    pat = db.query(User).filter(User.email == "pat@tbs.local").one()
    _create_task(client, admin_headers, first, title="a", status="blocked", assignee_staff_id=pat.id)
    _create_task(client, admin_headers, first, title="b")
    _create_task(client, admin_headers, second, title="c", status="blocked")

    def titles(**params):
        response = client.get("/api/tasks", params=params, headers=admin_headers)
        assert response.status_code == 200
        return sorted(t["title"] for t in response.json())

    assert titles(project_id=first) == ["a", "b"]
    assert titles(status="blocked") == ["a", "c"]
    assert titles(assignee_staff_id=pat.id) == ["a"]
    assert client.get("/api/tasks", params={"status": "sleeping"}, headers=admin_headers).status_code == 400

    by_project = client.get(f"/api/tasks/project/{first}", params={"status": "blocked"}, headers=admin_headers)
    assert [t["title"] for t in by_project.json()] == ["a"]


def test_update_task_partially(client, db, admin_headers, foreman_headers, labourer_headers):
    project_id = _create_project(client, admin_headers)
    task = _create_task(client, admin_headers, project_id, title="Fit doors", notes="Oak")

    response = client.put(f"/api/tasks/{task['id']}", json={"status": "in_progress"}, headers=foreman_headers)
    assert response.status_code == 200
    updated = response.json()
    assert updated["status"] == "in_progress"
    assert updated["title"] == "Fit doors"
    assert updated["notes"] == "Oak"
    assert updated["updated_at"] >= task["updated_at"]

    assert client.put(f"/api/tasks/{task['id']}", json={"title": "x"}, headers=labourer_headers).status_code == 403
    assert client.put("/api/tasks/999", json={"title": "x"}, headers=admin_headers).status_code == 404


def test_update_task_can_clear_assignee(client, db, admin_headers):
    project_id = _create_project(client, admin_headers)
    pat = db.query(User).filter(User.email == "pat@tbs.local").one()
    task = _create_task(client, admin_headers, project_id, assignee_staff_id=pat.id)

    response = client.put(f"/api/tasks/{task['id']}", json={"assignee_staff_id": None}, headers=admin_headers)
    assert response.json()["assignee_staff_id"] is None
    assert response.json()["staff_name"] is None


def test_soft_and_hard_task_delete(client, db, admin_headers):
    project_id = _create_project(client, admin_headers)
    task = _create_task(client, admin_headers, project_id)

    response = client.delete(f"/api/tasks/{task['id']}", headers=admin_headers)
    assert response.json() == {"message": "Task marked as completed"}
    assert client.get(f"/api/tasks/{task['id']}", headers=admin_headers).json()["status"] == "done"

    response = client.delete(f"/api/tasks/{task['id']}", params={"soft": "false"}, headers=admin_headers)
    assert response.json() == {"message": "Task deleted successfully"}
    assert client.get(f"/api/tasks/{task['id']}", headers=admin_headers).status_code == 404


def test_deleting_project_rows_cascades_tasks(client, db, admin_headers):
    project_id = _create_project(client, admin_headers)
    _create_task(client, admin_headers, project_id)

    db.delete(db.query(Project).filter(Project.id == project_id).one())
    db.commit()
    assert db.query(Task).count() == 0
