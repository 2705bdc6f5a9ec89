import asyncio
from datetime import tzinfo

import structlog

from slackboard.core.modules.slack.client import SlackClient
from slackboard.core.modules.slack.models import (
    ChannelFetched,
    ChannelFetchResult,
    ChannelSkipped,
    MessageRecord,
    SlackChannel,
)
from slackboard.core.modules.slack.utils import normalize_message, to_channel
from slackboard.errors import UpstreamError

logger = structlog.get_logger(__name__)


async def list_channels(client: SlackClient) -> list[SlackChannel]:
    response = await client.conversations_list()
    response.raise_for_error()
    return [to_channel(raw) for raw in response.get("channels", [])]


async def fetch_channel_activity(client: SlackClient, channel: SlackChannel, tz: tzinfo) -> ChannelFetchResult:
    """Fetch the first page of a channel's history, never raising for upstream failures."""
    try:
        response = await client.conversations_history(channel.id)
    except UpstreamError as e:
        reason = e.code
    else:
        if response.ok:
            messages = [normalize_message(raw, tz, channel=channel.name) for raw in response.get("messages", [])]
            return ChannelFetched(channel=channel, messages=messages)
        reason = response.error or "unknown_error"

    logger.warning("slack_channel_skipped", channel_id=channel.id, channel=channel.name, reason=reason)
    return ChannelSkipped(channel=channel, reason=reason)


async def collect_channel_activity(client: SlackClient, tz: tzinfo, concurrency: int = 1) -> list[ChannelFetchResult]:
    """Fetch recent activity of every channel, one result per channel in listing order."""
    channels = await list_channels(client)
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def fetch(channel: SlackChannel) -> ChannelFetchResult:
        async with semaphore:
            return await fetch_channel_activity(client, channel, tz)

    return list(await asyncio.gather(*(fetch(channel) for channel in channels)))


def flatten_activity(results: list[ChannelFetchResult]) -> list[MessageRecord]:
    """Concatenate fetched channels' messages; skipped channels contribute nothing."""
    messages: list[MessageRecord] = []
    for result in results:
        if isinstance(result, ChannelFetched):
            messages.extend(result.messages)
    return messages


async def aggregate_activity(client: SlackClient, tz: tzinfo, concurrency: int = 1) -> list[MessageRecord]:
    results = await collect_channel_activity(client, tz, concurrency)
    skipped = sum(isinstance(result, ChannelSkipped) for result in results)
    logger.debug("slack_activity_aggregated", channels=len(results), skipped=skipped)
    return flatten_activity(results)
