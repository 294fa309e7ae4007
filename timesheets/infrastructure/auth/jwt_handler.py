"""
JWT token handler.
Validates bearer tokens and extracts the acting user.
"""

import jwt
from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone

from timesheets.config import Settings, get_settings
from timesheets.domain.models.base import ValidationError


class JWTHandler:
    """Handles JWT token validation and actor extraction."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.jwt_secret = self.settings.jwt_secret_key
        self.jwt_algorithm = self.settings.jwt_algorithm

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Args:
            token: JWT token string

        Returns:
            Dict containing token payload

        Raises:
            ValidationError: If token is invalid or expired
        """
        if token.startswith('Bearer '):
            token = token[7:]

        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                options={"require": ["sub", "exp"], "verify_aud": False},
            )
        except jwt.ExpiredSignatureError:
            raise ValidationError("Token has expired", "token")
        except jwt.InvalidTokenError as e:
            raise ValidationError(f"Invalid JWT token: {str(e)}", "token")

        if not payload.get('sub'):
            raise ValidationError("Token missing user ID (sub claim)", "token")

        return payload

    def get_user_id(self, token: str) -> str:
        """
        Extract user ID from JWT token.

        Raises:
            ValidationError: If token is invalid
        """
        payload = self.verify_token(token)
        return str(payload['sub'])

    def get_token_payload(self, token: str) -> Optional[Dict[str, Any]]:
        """Token payload if valid, None otherwise."""
        try:
            return self.verify_token(token)
        except ValidationError:
            return None

    def generate_test_token(self, user_id: str, expires_minutes: int = 60) -> str:
        """
        Generate a JWT token for development and testing.
        """
        now = datetime.now(timezone.utc)
        expire = now + timedelta(minutes=expires_minutes)

        payload = {
            "sub": user_id,
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
        }
        return jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)
