from datetime import timedelta
from types import SimpleNamespace

import pytest
from jose import jwt

from tbs.core.exceptions import TokenInvalidError
from tbs.services.token_service import TokenService, TokenSettings

from conftest import ACCESS_SECRET, REFRESH_SECRET

USER = SimpleNamespace(id=7, role="foreman", name="Pat", email="pat@tbs.local")


def _service(**overrides) -> TokenService:
    values = {"access_secret": ACCESS_SECRET, "refresh_secret": REFRESH_SECRET}
    values.update(overrides)
    return TokenService(TokenSettings(**values))


def test_access_token_carries_user_claims():
    service = _service()
    claims = service.verify_access_token(service.issue_access_token(USER))

    assert claims["id"] == 7
    assert claims["role"] == "foreman"
    assert claims["name"] == "Pat"
    assert claims["email"] == "pat@tbs.local"
    assert claims["typ"] == "access"
    assert claims["exp"] - claims["iat"] == 15 * 60


def test_refresh_token_carries_only_id_and_lives_seven_days():
    service = _service()
    claims = service.verify_refresh_token(service.issue_refresh_token(7))

    assert claims["id"] == 7
    assert "role" not in claims
    assert claims["exp"] - claims["iat"] == 7 * 24 * 3600


def test_tokens_minted_in_the_same_second_differ():
    service = _service()
    assert service.issue_refresh_token(7) != service.issue_refresh_token(7)
    assert service.issue_access_token(USER) != service.issue_access_token(USER)


def test_refresh_token_is_not_an_access_token():
    service = _service()
    with pytest.raises(TokenInvalidError):
        service.verify_access_token(service.issue_refresh_token(7))


def test_access_token_is_not_a_refresh_token():
    service = _service()
    with pytest.raises(TokenInvalidError):
        service.verify_refresh_token(service.issue_access_token(USER))


def test_token_signed_with_another_secret_is_rejected():
    other = _service(access_secret="some-other-access-secret-value-000000")
    with pytest.raises(TokenInvalidError):
        _service().verify_access_token(other.issue_access_token(USER))


def test_expired_refresh_token_is_rejected():
    service = _service()
    token = service.issue_refresh_token(7, expires_delta=timedelta(seconds=-5))
    with pytest.raises(TokenInvalidError):
        service.verify_refresh_token(token)


@pytest.mark.parametrize("token", [None, "", "not-a-jwt", "a.b.c"])
def test_malformed_input_is_rejected(token):
    with pytest.raises(TokenInvalidError):
        _service().verify_refresh_token(token)


def test_token_without_type_claim_is_rejected():
    token = jwt.encode({"id": 7}, REFRESH_SECRET, algorithm="HS256")
    with pytest.raises(TokenInvalidError):
        _service().verify_refresh_token(token)


def test_hash_token_is_deterministic_sha256_hex():
    digest = TokenService.hash_token("abc")
    assert digest == TokenService.hash_token("abc")
    assert digest == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    assert TokenService.hash_token("abd") != digest
