"""Thin async client for the Slack Web API."""

from typing import Any

import httpx
import structlog
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from slackboard.core.modules.slack.models import SlackResponse
from slackboard.errors import UpstreamError

logger = structlog.get_logger(__name__)


class RateLimitedError(Exception):
    """Slack answered HTTP 429."""


class SlackClient:
    """Calls Slack methods and returns their response envelope.

    Transport failures and rate limiting are retried with exponential backoff.
    A response with ``ok: false`` is returned as-is; callers decide whether
    it is fatal.
    """

    def __init__(self, http: httpx.AsyncClient, max_retries: int = 3, wait: wait_base | None = None) -> None:
        self._http = http
        self._max_retries = max(1, max_retries)
        self._wait = wait or wait_exponential(multiplier=0.5, max=8)

    async def call(self, method: str, **params: Any) -> SlackResponse:
        query = {key: value for key, value in params.items() if value is not None}
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type((httpx.TransportError, RateLimitedError)),
                stop=stop_after_attempt(self._max_retries),
                wait=self._wait,
                reraise=True,
            ):
                with attempt:
                    response = await self._http.get(method, params=query)
                    if response.status_code == 429:
                        raise RateLimitedError
                    response.raise_for_status()
        except RateLimitedError as e:
            logger.warning("slack_rate_limited", method=method)
            raise UpstreamError("ratelimited") from e
        except httpx.HTTPStatusError as e:
            logger.warning("slack_http_error", method=method, status_code=e.response.status_code)
            raise UpstreamError(f"http_{e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("slack_request_failed", method=method, error=str(e))
            raise UpstreamError("request_failed", f"Slack API request failed: {method}") from e

        # JSONDecodeError and pydantic's ValidationError are both ValueErrors
        try:
            result = SlackResponse.model_validate(response.json())
        except ValueError as e:
            logger.warning("slack_invalid_response", method=method, error=str(e))
            raise UpstreamError("invalid_response", f"Slack API returned an invalid response: {method}") from e

        if not result.ok:
            logger.debug("slack_call_not_ok", method=method, error=result.error)
        return result

    async def users_list(self) -> SlackResponse:
        return await self.call("users.list")

    async def auth_test(self) -> SlackResponse:
        return await self.call("auth.test")

    async def users_info(self, user_id: str) -> SlackResponse:
        return await self.call("users.info", user=user_id)

    async def conversations_list(self) -> SlackResponse:
        return await self.call("conversations.list")

    async def users_conversations(self, user_id: str, types: str = "im", cursor: str | None = None) -> SlackResponse:
        return await self.call("users.conversations", user=user_id, types=types, cursor=cursor)

    async def conversations_history(self, channel_id: str, cursor: str | None = None) -> SlackResponse:
        return await self.call("conversations.history", channel=channel_id, cursor=cursor)
