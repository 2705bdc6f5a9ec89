from datetime import timedelta
from uuid import UUID

from slackboard.core.core import Service
from slackboard.core.modules.session.models import AuthToken
from slackboard.core.modules.session.tokens import TokenSigner
from slackboard.core.modules.user.models import User
from slackboard.errors import NotFoundError


class SessionService(Service):
    """Service for issuing and checking session tokens."""

    _signer: TokenSigner | None = None

    @property
    def signer(self) -> TokenSigner:
        if self._signer is None:
            config = self.core.config
            self._signer = TokenSigner(config.session_secret_key, timedelta(seconds=config.session_ttl_seconds))
        return self._signer

    def issue_token(self, user_id: UUID) -> AuthToken:
        return self.signer.issue(user_id)

    def verify_token(self, auth_token: str | None) -> UUID:
        return self.signer.verify(auth_token)

    async def get_authenticated_user(self, auth_token: str | None) -> User:
        user_id = self.verify_token(auth_token)
        user = await self.core.services.user.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
