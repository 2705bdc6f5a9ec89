"""Google OAuth client: authorization code exchange and ID token verification."""

import asyncio
from typing import Any, Protocol

import httpx
import jwt
import structlog

from slackboard.core.modules.federation.models import FederatedIdentity, ProviderTokens
from slackboard.errors import FederationError

logger = structlog.get_logger(__name__)

GOOGLE_ISSUERS = ["accounts.google.com", "https://accounts.google.com"]


class SigningKeyResolver(Protocol):
    def get_signing_key_from_jwt(self, token: str) -> jwt.PyJWK: ...


class GoogleOAuthClient:
    def __init__(
        self,
        http: httpx.AsyncClient,
        keys: SigningKeyResolver,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        token_url: str,
    ) -> None:
        self._http = http
        self._keys = keys
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._token_url = token_url

    async def exchange_code(self, code: str) -> ProviderTokens:
        """Exchange an authorization code for access and ID tokens."""
        data = {
            "code": code,
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "redirect_uri": self._redirect_uri,
            "grant_type": "authorization_code",
        }
        try:
            response = await self._http.post(self._token_url, data=data)
        except httpx.HTTPError as e:
            logger.warning("google_code_exchange_failed", error=str(e))
            raise FederationError from e

        if response.is_error:
            logger.warning("google_code_exchange_rejected", status_code=response.status_code)
            raise FederationError

        try:
            payload: Any = response.json()
        except ValueError as e:
            logger.warning("google_code_exchange_invalid_body", status_code=response.status_code)
            raise FederationError from e

        if not isinstance(payload, dict):
            logger.warning("google_code_exchange_invalid_body", status_code=response.status_code)
            raise FederationError

        if not payload.get("access_token") or not payload.get("id_token"):
            logger.warning("google_code_exchange_incomplete", fields=sorted(payload))
            raise FederationError
        return ProviderTokens(access_token=payload["access_token"], id_token=payload["id_token"])

    async def verify_identity(self, id_token: str) -> FederatedIdentity:
        """Verify signature, audience and issuer of an ID token.

        Key lookup may hit the network (JWKS fetch), so it runs in a thread.
        """
        try:
            signing_key = await asyncio.to_thread(self._keys.get_signing_key_from_jwt, id_token)
            claims: dict[str, Any] = jwt.decode(
                id_token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self._client_id,
                issuer=GOOGLE_ISSUERS,
                options={"require": ["sub", "aud", "iss", "exp"]},
            )
        except (jwt.PyJWKClientError, jwt.InvalidTokenError) as e:
            logger.warning("google_id_token_rejected", error=str(e))
            raise FederationError from e

        email = claims.get("email")
        if not email or claims.get("email_verified") is not True:
            raise FederationError("Google account email is missing or not verified")

        return FederatedIdentity(name=claims.get("name") or email, email=email, external_id=claims["sub"])
