"""Stateless signed session tokens (HS256 JWT)."""

import secrets
from datetime import datetime, timedelta
from uuid import UUID

import jwt

from slackboard.core.modules.session.models import AuthToken, SessionClaims
from slackboard.errors import InvalidTokenError, MissingTokenError
from slackboard.utils import now

ALGORITHM = "HS256"


class TokenSigner:
    """Issues and verifies session tokens bound to a user id.

    Verification is a pure function of the signing secret and the token's
    expiry; there is no server-side session state.
    """

    def __init__(self, secret_key: str, ttl: timedelta) -> None:
        self._secret_key = secret_key
        self._ttl = ttl

    def issue(self, user_id: UUID, issued_at: datetime | None = None) -> AuthToken:
        issued_at = issued_at or now()
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self._ttl,
            "jti": secrets.token_urlsafe(16),
        }
        return AuthToken(jwt.encode(payload, self._secret_key, algorithm=ALGORITHM))

    def decode(self, token: str | None) -> SessionClaims:
        """Decode and validate a token.

        Raises:
            MissingTokenError: If no token was supplied
            InvalidTokenError: If the signature, format or expiry check fails
        """
        if not token:
            raise MissingTokenError
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError from e

        try:
            return SessionClaims.model_validate(payload)
        except ValueError as e:
            raise InvalidTokenError from e

    def verify(self, token: str | None) -> UUID:
        """Return the user id embedded in a valid token."""
        return self.decode(token).sub
