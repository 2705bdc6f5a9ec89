from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from slackboard.errors import UpstreamError, ValidationError


class SlackResponse(BaseModel):
    """Slack Web API response envelope: ok flag, error code and method-specific fields."""

    ok: bool
    error: str | None = None

    model_config = ConfigDict(extra="allow")

    def get(self, key: str, default: Any = None) -> Any:
        return (self.model_extra or {}).get(key, default)

    @property
    def next_cursor(self) -> str | None:
        """Continuation cursor, None once the listing is exhausted."""
        metadata = self.get("response_metadata") or {}
        return metadata.get("next_cursor") or None

    def raise_for_error(self) -> None:
        if not self.ok:
            raise UpstreamError(self.error)


class TargetKind(StrEnum):
    CHANNEL = "channel"
    USER = "user"


class ConversationTarget(BaseModel):
    """Either a channel id or a user id whose direct message channel must be looked up."""

    kind: TargetKind
    id: str

    @classmethod
    def parse(cls, target_id: str, kind: str) -> "ConversationTarget":
        if not target_id or not kind:
            raise ValidationError("Channel or User ID is required")
        try:
            return cls(kind=TargetKind(kind), id=target_id)
        except ValueError as e:
            raise ValidationError("Invalid type. Must be 'channel' or 'user'.") from e


class MessageRecord(BaseModel):
    """Normalized Slack message."""

    channel: str | None = Field(None, description="Channel name, set for channel activity")
    user: str | None = Field(None, description="Author user ID")
    text: str = Field("", description="Message text")
    ts: str = Field(..., description="Raw Slack timestamp (epoch seconds)")
    time: str = Field(..., description="Formatted message time, e.g. 'Oct 19, 2026, 03:04:05 PM'")


class SlackMember(BaseModel):
    id: str
    name: str
    image: str | None = None


class SlackProfile(BaseModel):
    id: str
    name: str
    username: str
    image: str | None = None


class SlackChannel(BaseModel):
    id: str
    name: str
    is_private: bool = False


@dataclass(frozen=True)
class ChannelFetched:
    channel: SlackChannel
    messages: list[MessageRecord] = field(default_factory=list)


@dataclass(frozen=True)
class ChannelSkipped:
    channel: SlackChannel
    reason: str


ChannelFetchResult = ChannelFetched | ChannelSkipped
