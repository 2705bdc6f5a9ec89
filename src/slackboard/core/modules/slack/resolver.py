import structlog

from slackboard.core.modules.slack.client import SlackClient
from slackboard.core.modules.slack.models import ConversationTarget, TargetKind
from slackboard.core.modules.slack.pagination import paginate
from slackboard.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


async def resolve_conversation(client: SlackClient, target: ConversationTarget, max_pages: int) -> str:
    """Return the conversation id to read history from.

    Channel targets are used as-is. User targets are resolved to the direct
    message channel shared with that user; if several match, the smallest id
    wins so the result does not depend on listing order.
    """
    if target.kind == TargetKind.CHANNEL:
        return target.id
    if target.kind != TargetKind.USER:
        raise ValidationError("Invalid type. Must be 'channel' or 'user'.")

    matches: list[str] = []
    async for page in paginate(
        lambda cursor: client.users_conversations(target.id, types="im", cursor=cursor), max_pages
    ):
        matches.extend(channel["id"] for channel in page.get("channels", []) if channel.get("user") == target.id)

    if not matches:
        raise NotFoundError("No direct message conversation found with this user.")
    conversation_id = min(matches)
    logger.debug("slack_dm_resolved", user_id=target.id, conversation_id=conversation_id)
    return conversation_id
