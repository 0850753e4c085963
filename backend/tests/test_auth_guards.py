from datetime import timedelta
from types import SimpleNamespace

import pytest

from tbs.api.deps import ensure_role, require_roles
from tbs.core.exceptions import AuthenticationError, AuthorizationError
from tbs.core.security import Identity
from tbs.services.token_service import TokenService, TokenSettings

FOREMAN = Identity(id=2, role="foreman", name="Pat", email="pat@tbs.local")


def test_empty_allow_list_admits_any_role():
    assert ensure_role(FOREMAN, []) is FOREMAN


def test_listed_role_passes():
    assert ensure_role(FOREMAN, ["admin", "foreman"]) is FOREMAN


def test_unlisted_role_is_forbidden():
    with pytest.raises(AuthorizationError) as exc_info:
        ensure_role(FOREMAN, ["admin"])
    assert exc_info.value.status_code == 403


def test_missing_identity_is_unauthorized():
    with pytest.raises(AuthenticationError) as exc_info:
        ensure_role(None, ["admin"])
    assert exc_info.value.status_code == 401


def test_require_roles_rejects_unknown_role_names():
    with pytest.raises(ValueError):
        require_roles("superuser")


def test_identity_from_incomplete_claims_is_invalid():
    with pytest.raises(AuthenticationError):
        Identity.from_claims({"id": 1, "role": "admin"})


def test_missing_header_is_401(client):
    response = client.get("/api/me")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_non_bearer_scheme_is_401(client):
    response = client.get("/api/me", headers={"Authorization": "Basic ZGFubnk6cGFzcw=="})
    assert response.status_code == 401


def test_token_signed_with_wrong_secret_is_401(client):
    forged = TokenService(TokenSettings(
        access_secret="not-the-server-secret-000000000000000",
        refresh_secret="irrelevant-refresh-secret-00000000000",
    )).issue_access_token(SimpleNamespace(id=1, role="admin", name="Danny Tighe", email="danny@tbs.local"))

    response = client.get("/api/me", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid token"}


def test_expired_access_token_is_401(client, container):
    user = SimpleNamespace(id=1, role="admin", name="Danny Tighe", email="danny@tbs.local")
    expired = container.token_service.issue_access_token(user, expires_delta=timedelta(seconds=-1))

    response = client.get("/api/me", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401


def test_refresh_token_cannot_be_used_as_bearer(client, container):
    refresh = container.token_service.issue_refresh_token(1)
    response = client.get("/api/me", headers={"Authorization": f"Bearer {refresh}"})
    assert response.status_code == 401


def test_guard_trusts_token_claims_without_lookup(client, container):
    # A well-signed token for a user id that does not exist still passes the guard
    ghost = SimpleNamespace(id=999, role="admin", name="Ghost", email="ghost@tbs.local")
    token = container.token_service.issue_access_token(ghost)

    response = client.get("/api/projects", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_role_gate_forbids_and_admits(client, labourer_headers, admin_headers):
    body = {"ref": "TBS-100", "address": "1 Quay Street"}

    assert client.post("/api/projects", json=body, headers=labourer_headers).status_code == 403
    assert client.post("/api/projects", json=body, headers=admin_headers).status_code == 201
