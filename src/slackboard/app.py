from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from slackboard.config import Config
from slackboard.core.core import Core
from slackboard.core.modules.auth.models import AuthResult, FederatedAuthResult
from slackboard.core.modules.session.models import AuthToken
from slackboard.core.modules.slack.models import ConversationTarget, MessageRecord, SlackChannel, SlackMember, SlackProfile
from slackboard.core.modules.user.models import UserView


class App:
    """Facade for all application operations, validates authentication before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Authentication ===
    async def register(self, name: str, email: str, password: str, phone: str | None = None) -> AuthResult:
        """Create a password account and start a session."""
        return await self._core.services.auth.register(name, email, password, phone)

    async def login(self, email: str, password: str) -> AuthResult:
        """Authenticate with email and password."""
        return await self._core.services.auth.login(email, password)

    async def google_login(self, code: str, link_password: str | None = None) -> FederatedAuthResult:
        """Authenticate with a Google authorization code."""
        return await self._core.services.auth.federated_login(code, link_password)

    async def get_current_user(self, auth_token: AuthToken | None) -> UserView:
        """Get current authenticated user profile."""
        return await self._core.services.auth.who_am_i(auth_token)

    # === Slack ===
    async def get_slack_members(self, auth_token: AuthToken | None) -> list[SlackMember]:
        """List workspace members (requires authentication)."""
        await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.slack.list_members()

    async def get_slack_profile(self, auth_token: AuthToken | None) -> SlackProfile:
        """Get the Slack profile of the token owner (requires authentication)."""
        await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.slack.get_own_profile()

    async def get_slack_channels(self, auth_token: AuthToken | None) -> list[SlackChannel]:
        """List workspace channels (requires authentication)."""
        await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.slack.list_channels()

    async def get_slack_activity(self, auth_token: AuthToken | None) -> list[MessageRecord]:
        """Recent messages of every channel, channel by channel (requires authentication)."""
        await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.slack.list_channel_activity()

    async def get_slack_chat(self, auth_token: AuthToken | None, target_id: str, kind: str) -> list[MessageRecord]:
        """Full history of a channel or of the direct messages with a user (requires authentication)."""
        await self._core.services.access.ensure_authenticated(auth_token)
        target = ConversationTarget.parse(target_id, kind)
        return await self._core.services.slack.get_chat_history(target)
