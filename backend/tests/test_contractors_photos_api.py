from tbs.models.photo import Photo
from tbs.models.user import User

CONTRACTOR = {
    "company": "Bright Sparks Ltd",
    "trade": "Electrical",
    "contactName": "Jo Watts",
    "phone": "028 9000 0000",
    "email": "jo@brightsparks.example",
    "rating": 4.5,
    "insuranceExpiry": "2027-03-31",
}


def _project(client, headers, ref="TBS-010"):
    response = client.post("/api/projects", json={"ref": ref, "address": "3 Mill Lane"}, headers=headers)
    return response.json()["id"]


def test_create_contractor_accepts_camel_case(client, admin_headers, labourer_headers):
    response = client.post("/api/contractors", json=CONTRACTOR, headers=admin_headers)

    assert response.status_code == 201
    created = response.json()
    assert created["contact_name"] == "Jo Watts"
    assert created["insurance_expiry"] == "2027-03-31"
    assert created["status"] == "active"

    listed = client.get("/api/contractors", headers=labourer_headers).json()
    assert [c["company"] for c in listed] == ["Bright Sparks Ltd"]


def test_duplicate_contractor_is_400(client, admin_headers):
    client.post("/api/contractors", json=CONTRACTOR, headers=admin_headers)

    response = client.post(
        "/api/contractors",
        json={**CONTRACTOR, "company": "BRIGHT SPARKS LTD", "contactName": "jo watts"},
        headers=admin_headers,
    )
    assert response.status_code == 400

    # Same company, different contact is fine
    other = client.post("/api/contractors", json={**CONTRACTOR, "contactName": "Al Ohm"}, headers=admin_headers)
    assert other.status_code == 201


def test_contractor_validation(client, admin_headers):
    missing = {k: v for k, v in CONTRACTOR.items() if k != "phone"}
    assert client.post("/api/contractors", json=missing, headers=admin_headers).status_code == 400
    assert client.post("/api/contractors", json={**CONTRACTOR, "rating": 6}, headers=admin_headers).status_code == 400


def test_contractor_writes_are_admin_only(client, foreman_headers):
    assert client.post("/api/contractors", json=CONTRACTOR, headers=foreman_headers).status_code == 403


def test_update_and_delete_contractor(client, admin_headers):
    contractor_id = client.post("/api/contractors", json=CONTRACTOR, headers=admin_headers).json()["id"]

    response = client.put(
        f"/api/contractors/{contractor_id}",
        json={"status": "inactive", "insuranceExpiry": "2028-01-01"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "inactive"
    assert response.json()["insurance_expiry"] == "2028-01-01"
    assert response.json()["company"] == "Bright Sparks Ltd"

    response = client.delete(f"/api/contractors/{contractor_id}", headers=admin_headers)
    assert response.json() == {"message": "Contractor deleted successfully"}
    assert client.get(f"/api/contractors/{contractor_id}", headers=admin_headers).status_code == 404
    assert client.delete(f"/api/contractors/{contractor_id}", headers=admin_headers).status_code == 404


def test_foreman_records_photo_as_uploader(client, db, admin_headers, foreman_headers):
    project_id = _project(client, admin_headers)

    response = client.post(
        "/api/photos",
        json={"projectId": project_id, "caption": "Before strip-out", "tag": "before"},
        headers=foreman_headers,
    )

    assert response.status_code == 201
    photo = response.json()
    pat = db.query(User).filter(User.email == "pat@tbs.local").one()
    assert photo["uploaded_by"] == pat.id
    assert photo["project_ref"] == "TBS-010"
    assert photo["tag"] == "before"


def test_photo_defaults_and_unknown_project(client, admin_headers):
    project_id = _project(client, admin_headers)

    response = client.post("/api/photos", json={"projectId": project_id}, headers=admin_headers)
    assert response.json()["tag"] == "during"

    response = client.post("/api/photos", json={"projectId": 999}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Project not found"}


def test_photo_list_filters(client, admin_headers, labourer_headers):
    first = _project(client, admin_headers, "TBS-010")
    second = _project(client, admin_headers, "TBS-011")
    client.post("/api/photos", json={"projectId": first, "tag": "before"}, headers=admin_headers)
    client.post("/api/photos", json={"projectId": first, "tag": "after"}, headers=admin_headers)
    client.post("/api/photos", json={"projectId": second, "tag": "after"}, headers=admin_headers)

    assert len(client.get("/api/photos", headers=labourer_headers).json()) == 3
    assert len(client.get("/api/photos", params={"project_id": first}, headers=labourer_headers).json()) == 2
    assert len(client.get("/api/photos", params={"tag": "after"}, headers=labourer_headers).json()) == 2


def test_update_and_delete_photo(client, db, admin_headers, foreman_headers, labourer_headers):
    project_id = _project(client, admin_headers)
    photo_id = client.post("/api/photos", json={"projectId": project_id}, headers=admin_headers).json()["id"]

    assert client.post("/api/photos", json={"projectId": project_id}, headers=labourer_headers).status_code == 403

    response = client.put(f"/api/photos/{photo_id}", json={"caption": "Skirting fitted", "tag": "after"}, headers=foreman_headers)
    assert response.status_code == 200
    assert response.json()["caption"] == "Skirting fitted"
    assert response.json()["tag"] == "after"

    assert client.delete(f"/api/photos/{photo_id}", headers=foreman_headers).status_code == 403
    assert client.delete(f"/api/photos/{photo_id}", headers=admin_headers).status_code == 200
    assert db.query(Photo).count() == 0
    assert client.get(f"/api/photos/{photo_id}", headers=admin_headers).status_code == 404
