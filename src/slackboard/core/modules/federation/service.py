import httpx
import jwt

from slackboard.core.core import Service
from slackboard.core.modules.federation.client import GoogleOAuthClient
from slackboard.core.modules.federation.models import FederatedIdentity, ProviderTokens


class FederationService(Service):
    """Owns the Google OAuth client for the application lifetime."""

    _client: GoogleOAuthClient | None = None
    _http: httpx.AsyncClient | None = None

    async def on_start(self) -> None:
        config = self.core.config
        self._http = httpx.AsyncClient(timeout=config.google_timeout_seconds)
        self._client = GoogleOAuthClient(
            http=self._http,
            keys=jwt.PyJWKClient(config.google_jwks_url, timeout=int(config.google_timeout_seconds)),
            client_id=config.google_client_id,
            client_secret=config.google_client_secret,
            redirect_uri=config.google_redirect_uri,
            token_url=config.google_token_url,
        )

    async def on_stop(self) -> None:
        if self._http is not None:
            await self._http.aclose()

    @property
    def client(self) -> GoogleOAuthClient:
        if self._client is None:
            raise RuntimeError("Federation service not started")
        return self._client

    async def exchange_code(self, code: str) -> ProviderTokens:
        return await self.client.exchange_code(code)

    async def verify_identity(self, id_token: str) -> FederatedIdentity:
        return await self.client.verify_identity(id_token)
