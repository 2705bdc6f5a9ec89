from datetime import UTC, tzinfo
from zoneinfo import ZoneInfo

import httpx
import structlog

from slackboard.core.core import Service
from slackboard.core.modules.slack.activity import aggregate_activity, list_channels
from slackboard.core.modules.slack.client import SlackClient
from slackboard.core.modules.slack.history import fetch_history
from slackboard.core.modules.slack.models import ConversationTarget, MessageRecord, SlackChannel, SlackMember, SlackProfile
from slackboard.core.modules.slack.resolver import resolve_conversation
from slackboard.core.modules.slack.utils import to_member, to_profile

logger = structlog.get_logger(__name__)


class SlackService(Service):
    """Reads members, channels and messages from the configured Slack workspace."""

    _client: SlackClient | None = None
    _http: httpx.AsyncClient | None = None
    _tz: tzinfo = UTC

    async def on_start(self) -> None:
        config = self.core.config
        self._http = httpx.AsyncClient(
            base_url=config.slack_api_url,
            headers={"Authorization": f"Bearer {config.slack_token}"},
            timeout=config.slack_timeout_seconds,
        )
        self._client = SlackClient(self._http, max_retries=config.slack_max_retries)
        self._tz = ZoneInfo(config.display_timezone)
        if not config.slack_token:
            logger.warning("slack_token_missing")

    async def on_stop(self) -> None:
        if self._http is not None:
            await self._http.aclose()

    @property
    def client(self) -> SlackClient:
        if self._client is None:
            raise RuntimeError("Slack service not started")
        return self._client

    async def list_members(self) -> list[SlackMember]:
        response = await self.client.users_list()
        response.raise_for_error()
        return [to_member(raw) for raw in response.get("members", [])]

    async def get_own_profile(self) -> SlackProfile:
        """Profile of the user owning the configured token."""
        identity = await self.client.auth_test()
        identity.raise_for_error()
        response = await self.client.users_info(identity.get("user_id"))
        response.raise_for_error()
        return to_profile(response.get("user", {}))

    async def list_channels(self) -> list[SlackChannel]:
        return await list_channels(self.client)

    async def get_chat_history(self, target: ConversationTarget) -> list[MessageRecord]:
        max_pages = self.core.config.slack_max_history_pages
        conversation_id = await resolve_conversation(self.client, target, max_pages)
        return await fetch_history(self.client, conversation_id, self._tz, max_pages)

    async def list_channel_activity(self) -> list[MessageRecord]:
        return await aggregate_activity(self.client, self._tz, self.core.config.slack_activity_concurrency)
