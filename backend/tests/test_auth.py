import jwt
import pytest

from redrelief.config import Settings
from redrelief.services import TokenVerificationError, bearer_token, verify_token
from .conftest import JWT_SECRET, make_token


def test_bearer_token_parsing():
    assert bearer_token("Bearer abc.def") == "abc.def"
    assert bearer_token("bearer  abc ") == "abc"
    assert bearer_token("Token abc") is None
    assert bearer_token("Bearer ") is None
    assert bearer_token(None) is None


def test_verify_token_returns_claims(settings):
    claims = verify_token(make_token(role="admin"), settings)
    assert claims["role"] == "admin"
    assert claims["sub"] == "user-1"


def test_verify_token_rejects_bad_signature(settings):
    forged = jwt.encode({"sub": "x", "role": "admin"}, "other-secret", algorithm="HS256")
    with pytest.raises(TokenVerificationError):
        verify_token(forged, settings)


def test_verify_token_checks_audience_when_configured():
    settings = Settings(jwt_secret=JWT_SECRET, jwt_audience="redrelief")
    with pytest.raises(TokenVerificationError):
        verify_token(make_token(aud="someone-else"), settings)
    assert verify_token(make_token(aud="redrelief"), settings)["aud"] == "redrelief"


def test_verification_requires_a_secret():
    with pytest.raises(TokenVerificationError):
        verify_token(make_token(), Settings(jwt_secret=""))


def test_invalid_token_on_public_route_continues_anonymously(client, store):
    r = client.get("/api/search/cities", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 200


def test_invalid_token_on_protected_route_is_forbidden(client):
    r = client.patch(
        "/api/campaigns/C1/status",
        json={"status": "approved"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert r.status_code == 403
    assert r.json() == {"success": False, "error": "Invalid token"}
