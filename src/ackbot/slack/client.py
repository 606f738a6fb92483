"""Shared AsyncWebClient for the bot token.

The acknowledgement engine never talks to this client directly; it goes
through ``SlackGateway``, which wraps it with retries and error triage.
"""

from slack_sdk.web.async_client import AsyncWebClient

from ackbot.config import get_settings

_client: AsyncWebClient | None = None


async def get_slack_client() -> AsyncWebClient:
    """Return the process-wide client, building it from SLACK_BOT_TOKEN on first use."""
    global _client
    if _client is None:
        _client = AsyncWebClient(token=get_settings().slack_bot_token)
    return _client


def reset_client() -> None:
    global _client
    _client = None
