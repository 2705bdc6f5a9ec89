from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel

from slackboard.core.modules.slack.models import MessageRecord, SlackChannel, SlackMember, SlackProfile
from slackboard.web.deps import AppDep, AuthTokenDep
from slackboard.web.openapi import ErrorResponse

router = APIRouter(tags=["slack"])

ERROR_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    500: {"model": ErrorResponse, "description": "Slack API call failed"},
}


class MembersResponse(BaseModel):
    success: bool = True
    members: list[SlackMember]


class ProfileResponse(BaseModel):
    success: bool = True
    profile: SlackProfile


class ChannelsResponse(BaseModel):
    success: bool = True
    channels: list[SlackChannel]


class MessagesResponse(BaseModel):
    success: bool = True
    messages: list[MessageRecord]


@router.get(
    "/slack/members",
    summary="List workspace members",
    operation_id="listSlackMembers",
    responses={200: {"description": "Workspace members"}, **ERROR_RESPONSES},
)
async def list_members(app: AppDep, auth_token: AuthTokenDep) -> MembersResponse:
    return MembersResponse(members=await app.get_slack_members(auth_token))


@router.get(
    "/slack/profile",
    summary="Get own Slack profile",
    description="Profile of the Slack user owning the configured API token.",
    operation_id="getSlackProfile",
    responses={200: {"description": "Slack profile"}, **ERROR_RESPONSES},
)
async def get_profile(app: AppDep, auth_token: AuthTokenDep) -> ProfileResponse:
    return ProfileResponse(profile=await app.get_slack_profile(auth_token))


@router.get(
    "/slack/activity",
    summary="Recent channel activity",
    description=(
        "Latest messages of every channel, grouped channel by channel in listing order. "
        "Channels whose history cannot be read are left out."
    ),
    operation_id="listSlackActivity",
    responses={200: {"description": "Messages tagged with their channel name"}, **ERROR_RESPONSES},
)
async def list_activity(app: AppDep, auth_token: AuthTokenDep) -> MessagesResponse:
    return MessagesResponse(messages=await app.get_slack_activity(auth_token))


@router.get(
    "/slack/channels",
    summary="List channels",
    operation_id="listSlackChannels",
    responses={200: {"description": "Workspace channels"}, **ERROR_RESPONSES},
)
async def list_channels(app: AppDep, auth_token: AuthTokenDep) -> ChannelsResponse:
    return ChannelsResponse(channels=await app.get_slack_channels(auth_token))


@router.get(
    "/slack/chat",
    summary="Get chat history",
    description="Full message history of a channel (`type=channel`) or of the direct messages with a user (`type=user`).",
    operation_id="getSlackChat",
    responses={
        200: {"description": "Messages, newest first"},
        400: {"model": ErrorResponse, "description": "Missing id or invalid type"},
        404: {"model": ErrorResponse, "description": "No direct message conversation with this user"},
        **ERROR_RESPONSES,
    },
)
async def get_chat(
    app: AppDep,
    auth_token: AuthTokenDep,
    id: Annotated[str, Query(description="Channel ID or user ID")] = "",
    type: Annotated[str, Query(description="'channel' or 'user'")] = "",
) -> MessagesResponse:
    return MessagesResponse(messages=await app.get_slack_chat(auth_token, id, type))
