"""Tests for API authentication"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from healthwatch.api.auth import AuthResult, Authenticator
from healthwatch.config import SecurityConfig
from healthwatch.exceptions import AuthenticationError


@pytest.fixture
def auth():
    return Authenticator(SecurityConfig(jwt_secret="test-secret", jwt_expiry_minutes=30))


class TestAuthenticator:
    """Test Authenticator class"""

    def test_initialization(self, auth):
        assert auth.secret_key == "test-secret"
        assert auth.algorithm == "HS256"
        assert auth.expiry_minutes == 30
        assert auth.issuer_secret is None

    def test_generate_token(self, auth):
        token = auth.generate_token("user123", role="health_officer")

        payload = jwt.decode(token, "test-secret", algorithms=["HS256"])
        assert payload["sub"] == "user123"
        assert payload["role"] == "health_officer"
        assert payload["exp"] > payload["iat"]

    def test_verify_valid_token(self, auth):
        result = auth.verify_token(auth.generate_token("user123"))

        assert isinstance(result, AuthResult)
        assert result.authenticated
        assert result.user_id == "user123"
        assert result.role == "field_worker"

    def test_verify_expired_token(self, auth):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = jwt.encode(
            {"sub": "user123", "iat": past - timedelta(minutes=5), "exp": past},
            "test-secret",
            algorithm="HS256"
        )

        result = auth.verify_token(token)

        assert not result.authenticated
        assert result.error == "Token has expired"

    def test_verify_wrong_secret(self, auth):
        other = Authenticator(SecurityConfig(jwt_secret="other-secret"))

        result = auth.verify_token(other.generate_token("user123"))

        assert not result.authenticated
        assert result.error.startswith("Invalid token")

    def test_verify_garbage(self, auth):
        assert not auth.verify_token("invalid.token.here").authenticated

    def test_missing_subject(self, auth):
        token = jwt.encode(
            {"role": "admin", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            "test-secret",
            algorithm="HS256"
        )

        result = auth.verify_token(token)

        assert not result.authenticated
        assert result.error == "Invalid token payload"

    def test_revoke_token(self, auth):
        token = auth.generate_token("user123")

        auth.revoke_token(token)

        assert auth.verify_token(token).error == "Token has been revoked"

    def test_custom_expiry(self, auth):
        token = auth.generate_token("user123", expiry_minutes=5)

        payload = jwt.decode(token, "test-secret", algorithms=["HS256"])
        assert payload["exp"] - payload["iat"] == 300


class TestTokenIssuance:
    """Test who may mint tokens"""

    @pytest.fixture
    def guarded(self):
        return Authenticator(SecurityConfig(jwt_secret="test-secret", token_issuer_secret="district-office"))

    def test_open_when_auth_not_required(self, auth):
        auth.authorize_issuance(None, require_auth=False)

    def test_disabled_when_auth_required_without_secret(self, auth):
        with pytest.raises(AuthenticationError):
            auth.authorize_issuance(None, require_auth=True)

    @pytest.mark.parametrize("presented", [None, "", "district", "district-office "])
    def test_wrong_secret_rejected(self, guarded, presented):
        with pytest.raises(AuthenticationError):
            guarded.authorize_issuance(presented, require_auth=False)

    def test_matching_secret_accepted(self, guarded):
        guarded.authorize_issuance("district-office", require_auth=True)
