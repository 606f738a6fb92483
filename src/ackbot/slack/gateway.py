"""Slack Web API capabilities consumed by the acknowledgement engine.

``SlackCapabilities`` is the narrow interface the engine depends on;
``SlackGateway`` implements it on top of slack_sdk's AsyncWebClient. Tests
substitute a fake with the same methods.
"""

import json
import logging
from typing import Any, Protocol

from cachetools import TTLCache
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from ackbot.models.slack import SlackMessage

logger = logging.getLogger(__name__)

_SELF_IDENTITY_TTL = 3600
_SELF_IDENTITY_KEY = "user_id"

# Errors meaning the message can't be read at all; treated as "no message"
_INACCESSIBLE_ERRORS = ("channel_not_found", "not_in_channel", "is_archived", "message_not_found")

# Reaction errors that are routine rather than worth an error log
_BENIGN_REACTION_ERRORS = ("already_reacted", "missing_scope", "no_item_specified", "message_not_found")


class SlackCapabilities(Protocol):
    """Slack operations the acknowledgement engine needs."""

    async def self_identity(self) -> str: ...

    async def get_message(self, channel: str, ts: str) -> SlackMessage | None: ...

    async def list_group_members(self, group_id: str) -> set[str]: ...

    async def add_reaction(self, channel: str, ts: str, emoji: str) -> None: ...

    async def get_permalink(self, channel: str, ts: str) -> str: ...

    async def post_direct_message(self, user_id: str, text: str) -> None: ...

    async def post_debug(self, channel: str, thread_ts: str, text: str, data: Any) -> None: ...


def _error_code(exc: SlackApiError) -> str:
    return exc.response.get("error", "") if exc.response else ""


def _is_retryable(error: BaseException) -> bool:
    """Rate limits and Slack-side 5xx are transient; everything else is not."""
    if not isinstance(error, SlackApiError):
        return False
    if _error_code(error) == "ratelimited":
        return True
    status = getattr(error.response, "status_code", None)
    return isinstance(status, int) and (status == 429 or status >= 500)


_retry_transient = retry(
    retry=retry_if_exception(_is_retryable),
    wait=wait_exponential_jitter(initial=1, max=30, jitter=2),
    stop=stop_after_attempt(4),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)


class SlackGateway:
    """SlackCapabilities backed by an AsyncWebClient."""

    def __init__(self, client: AsyncWebClient) -> None:
        self._client = client
        self._identity_cache: TTLCache = TTLCache(maxsize=1, ttl=_SELF_IDENTITY_TTL)

    async def self_identity(self) -> str:
        """Return the bot's own user id (auth.test), cached for an hour."""
        cached = self._identity_cache.get(_SELF_IDENTITY_KEY)
        if cached is not None:
            return cached
        response = await self._client.auth_test()
        user_id = response["user_id"]
        self._identity_cache[_SELF_IDENTITY_KEY] = user_id
        return user_id

    @_retry_transient
    async def get_message(self, channel: str, ts: str) -> SlackMessage | None:
        """Fetch the newest message at or before ``ts`` in ``channel``.

        Returns None when the channel has no such message or can't be read.
        """
        try:
            response = await self._client.conversations_history(
                channel=channel,
                latest=ts,
                limit=1,
                inclusive=True,
            )
        except SlackApiError as exc:
            code = _error_code(exc)
            if code in _INACCESSIBLE_ERRORS:
                logger.warning("Message %s in %s is not accessible (%s)", ts, channel, code)
                return None
            raise

        messages = response.get("messages") or []
        if not messages:
            return None
        return SlackMessage.from_api(messages[0])

    @_retry_transient
    async def list_group_members(self, group_id: str) -> set[str]:
        response = await self._client.usergroups_users_list(usergroup=group_id)
        return set(response.get("users") or [])

    async def add_reaction(self, channel: str, ts: str, emoji: str) -> None:
        """Add an emoji reaction to a message. Never raises.

        Slack reports duplicates inconsistently, so ``already_reacted`` and
        friends are logged as warnings and anything else as an error.
        """
        try:
            await self._client.reactions_add(channel=channel, name=emoji, timestamp=ts)
        except SlackApiError as exc:
            error_code = _error_code(exc)
            if error_code in _BENIGN_REACTION_ERRORS:
                logger.warning("Reaction '%s' not added (%s): %s", emoji, error_code, ts)
            else:
                logger.error(
                    "Failed to add reaction '%s' to %s: %s",
                    emoji,
                    ts,
                    error_code,
                    exc_info=True,
                )
        except Exception:
            logger.error("Failed to add reaction '%s' to %s", emoji, ts, exc_info=True)

    @_retry_transient
    async def get_permalink(self, channel: str, ts: str) -> str:
        response = await self._client.chat_getPermalink(channel=channel, message_ts=ts)
        return response["permalink"]

    async def post_direct_message(self, user_id: str, text: str) -> None:
        await self._client.chat_postMessage(channel=user_id, text=text)

    async def post_debug(self, channel: str, thread_ts: str, text: str, data: Any) -> None:
        """Echo a trace line and its payload into the message thread."""
        dump = json.dumps(data, indent=2, default=str)
        try:
            await self._client.chat_postMessage(
                channel=channel,
                thread_ts=thread_ts,
                text=text,
                blocks=[
                    {"type": "section", "text": {"type": "mrkdwn", "text": text}},
                    {"type": "section", "text": {"type": "mrkdwn", "text": f"```{dump}```"}},
                ],
            )
        except SlackApiError:
            logger.warning("Failed to post debug trace to %s", channel, exc_info=True)
