from slackboard.core.core import Service
from slackboard.core.modules.user.models import User


class AccessService(Service):
    async def ensure_authenticated(self, auth_token: str | None) -> User:
        """Ensure the request carries a valid token for an existing user."""
        return await self.core.services.session.get_authenticated_user(auth_token)
