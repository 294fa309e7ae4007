"""
Unit tests for JWTHandler.
"""

import pytest

from timesheets.config import Settings
from timesheets.domain.models.base import ValidationError
from timesheets.infrastructure.auth.jwt_handler import JWTHandler


@pytest.fixture
def handler():
    return JWTHandler(Settings(jwt_secret_key="unit-test-secret", jwt_algorithm="HS256"))


class TestJWTHandler:
    """Test cases for token validation."""

    def test_user_id_from_token(self, handler):
        """Test the subject claim is the acting user."""
        token = handler.generate_test_token("reviewer-1")

        assert handler.get_user_id(token) == "reviewer-1"
        assert handler.get_user_id(f"Bearer {token}") == "reviewer-1"

    def test_expired_token(self, handler):
        """Test expired tokens are refused."""
        token = handler.generate_test_token("reviewer-1", expires_minutes=-5)

        with pytest.raises(ValidationError, match="expired"):
            handler.verify_token(token)

    def test_foreign_signature(self, handler):
        """Test tokens signed with another secret are refused."""
        other = JWTHandler(Settings(jwt_secret_key="someone-else", jwt_algorithm="HS256"))
        token = other.generate_test_token("reviewer-1")

        with pytest.raises(ValidationError):
            handler.get_user_id(token)
        assert handler.get_token_payload(token) is None

    def test_garbage(self, handler):
        """Test malformed tokens are refused."""
        with pytest.raises(ValidationError):
            handler.verify_token("not-a-token")
