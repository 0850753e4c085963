from tbs.core.security import verify_password
from tbs.models.user import User

from conftest import login

NEW_STAFF = {
    "name": "Sam Joiner",
    "email": "Sam.Joiner@TBS.local",
    "phone": "07700 900123",
    "role": "worker",
    "position": "Joiner",
    "password": "s3cure-pass",
}


def test_users_lists_active_users_by_name(client, db, labourer_headers):
    db.query(User).filter(User.email == "adam@tbs.local").update({User.status: "disabled"})
    db.commit()

    response = client.get("/api/users", headers=labourer_headers)

    assert response.status_code == 200
    names = [u["name"] for u in response.json()]
    assert names == ["Charlie", "Danny Tighe", "Pat"]
    assert all("password_hash" not in u for u in response.json())


def test_users_role_filter(client, admin_headers):
    response = client.get("/api/users", params={"roles": "foreman, labourer"}, headers=admin_headers)
    assert sorted(u["name"] for u in response.json()) == ["Adam", "Charlie", "Pat"]


def test_user_by_id_hides_disabled_users(client, db, admin_headers):
    adam = db.query(User).filter(User.email == "adam@tbs.local").one()
    assert client.get(f"/api/users/{adam.id}", headers=admin_headers).status_code == 200

    adam.status = "disabled"
    db.commit()
    response = client.get(f"/api/users/{adam.id}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_create_staff_normalises_email_and_hashes_password(client, db, container, admin_headers):
    response = client.post("/api/staff", json=NEW_STAFF, headers=admin_headers)

    assert response.status_code == 201
    assert response.json()["email"] == "sam.joiner@tbs.local"
    assert response.json()["status"] == "active"

    stored = db.query(User).filter(User.id == response.json()["id"]).one()
    assert stored.password_hash != NEW_STAFF["password"]
    assert verify_password(NEW_STAFF["password"], stored.password_hash)
    assert stored.password_hash.startswith(f"$2b${container.settings.BCRYPT_ROUNDS:02d}$")

    assert login(client, "sam.joiner@tbs.local", NEW_STAFF["password"]).status_code == 200


def test_create_staff_rejects_duplicate_email_case_insensitively(client, admin_headers):
    response = client.post("/api/staff", json={**NEW_STAFF, "email": "DANNY@tbs.local"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Email already exists"}


def test_create_staff_requires_admin(client, foreman_headers):
    assert client.post("/api/staff", json=NEW_STAFF, headers=foreman_headers).status_code == 403


def test_create_staff_validates_role_and_password(client, admin_headers):
    assert client.post("/api/staff", json={**NEW_STAFF, "role": "owner"}, headers=admin_headers).status_code == 400
    assert client.post("/api/staff", json={**NEW_STAFF, "password": "short"}, headers=admin_headers).status_code == 400


def test_staff_list_includes_disabled_users(client, db, foreman_headers):
    db.query(User).filter(User.email == "adam@tbs.local").update({User.status: "disabled"})
    db.commit()

    response = client.get("/api/staff", headers=foreman_headers)
    assert [u["name"] for u in response.json()] == ["Adam", "Charlie", "Danny Tighe", "Pat"]


def test_update_staff_partially(client, db, admin_headers):
    charlie = db.query(User).filter(User.email == "charlie@tbs.local").one()

    response = client.put(
        f"/api/staff/{charlie.id}",
        json={"position": "Site Labourer", "status": "disabled"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["position"] == "Site Labourer"
    assert response.json()["status"] == "disabled"
    assert response.json()["name"] == "Charlie"
    assert login(client, "charlie@tbs.local").status_code == 401


def test_update_staff_rechecks_email(client, db, admin_headers):
    charlie = db.query(User).filter(User.email == "charlie@tbs.local").one()

    response = client.put(f"/api/staff/{charlie.id}", json={"email": "Pat@tbs.local"}, headers=admin_headers)
    assert response.status_code == 400

    # Own address in another case is not a conflict
    response = client.put(f"/api/staff/{charlie.id}", json={"email": "CHARLIE@tbs.local"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["email"] == "charlie@tbs.local"


def test_update_missing_staff_is_404(client, admin_headers):
    assert client.put("/api/staff/9999", json={"name": "Nobody"}, headers=admin_headers).status_code == 404


def test_delete_staff(client, db, admin_headers):
    charlie = db.query(User).filter(User.email == "charlie@tbs.local").one()

    response = client.delete(f"/api/staff/{charlie.id}", headers=admin_headers)
    assert response.status_code == 200
    assert client.get(f"/api/staff/{charlie.id}", headers=admin_headers).status_code == 404
    assert client.delete(f"/api/staff/{charlie.id}", headers=admin_headers).status_code == 404


def test_admin_accounts_cannot_be_deleted(client, db, admin_headers):
    danny = db.query(User).filter(User.email == "danny@tbs.local").one()

    response = client.delete(f"/api/staff/{danny.id}", headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot delete admin users"}
