from datetime import tzinfo

import structlog

from slackboard.core.modules.slack.client import SlackClient
from slackboard.core.modules.slack.models import MessageRecord
from slackboard.core.modules.slack.pagination import paginate
from slackboard.core.modules.slack.utils import normalize_message

logger = structlog.get_logger(__name__)


async def fetch_history(client: SlackClient, conversation_id: str, tz: tzinfo, max_pages: int) -> list[MessageRecord]:
    """Fetch the full history of a conversation, following cursors to the end.

    Messages keep Slack's delivery order (newest first), page after page.
    """
    messages: list[MessageRecord] = []
    pages = 0
    async for page in paginate(lambda cursor: client.conversations_history(conversation_id, cursor=cursor), max_pages):
        pages += 1
        messages.extend(normalize_message(raw, tz) for raw in page.get("messages", []))

    logger.debug("slack_history_fetched", conversation_id=conversation_id, pages=pages, messages=len(messages))
    return messages
