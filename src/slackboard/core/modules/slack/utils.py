"""Helpers for normalizing raw Slack payloads."""

from datetime import datetime, tzinfo
from typing import Any

from slackboard.core.modules.slack.models import MessageRecord, SlackChannel, SlackMember, SlackProfile

TIME_FORMAT = "%b %d, %Y, %I:%M:%S %p"


def format_slack_ts(ts: str, tz: tzinfo) -> str:
    """Format a Slack timestamp ("1700000000.000200") as a readable local time.

    Args:
        ts: Slack message timestamp, epoch seconds with a microsecond suffix
        tz: Time zone to render the instant in

    Returns:
        Time string such as "Nov 14, 2023, 10:13:20 PM"
    """
    return datetime.fromtimestamp(float(ts), tz).strftime(TIME_FORMAT)


def normalize_message(raw: dict[str, Any], tz: tzinfo, channel: str | None = None) -> MessageRecord:
    ts = str(raw.get("ts", "0"))
    return MessageRecord(
        channel=channel,
        user=raw.get("user"),
        text=raw.get("text") or "",
        ts=ts,
        time=format_slack_ts(ts, tz),
    )


def to_member(raw: dict[str, Any]) -> SlackMember:
    profile = raw.get("profile") or {}
    return SlackMember(id=raw["id"], name=raw.get("real_name") or raw.get("name", ""), image=profile.get("image_48"))


def to_profile(raw: dict[str, Any]) -> SlackProfile:
    profile = raw.get("profile") or {}
    return SlackProfile(
        id=raw["id"],
        name=raw.get("real_name") or raw.get("name", ""),
        username=raw.get("name", ""),
        image=profile.get("image_192") or profile.get("image_48"),
    )


def to_channel(raw: dict[str, Any]) -> SlackChannel:
    return SlackChannel(id=raw["id"], name=raw.get("name") or raw["id"], is_private=bool(raw.get("is_private")))
