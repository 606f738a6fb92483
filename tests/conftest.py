"""Shared test fixtures."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from slack_sdk.errors import SlackApiError

from ackbot.app import app
from ackbot.models.slack import SlackMessage
from ackbot.store.memory import InMemoryRetryStore
from ackbot.store.queue import RetryQueue

BOT_ID = "U_BOT"
CHANNEL = "C0AFQJHAVS6"
TS = "1234567890.123456"
AUTHOR = "U_AUTHOR"


def slack_api_error(error_code: str) -> SlackApiError:
    """Build a SlackApiError with a mock response carrying the given error code."""
    resp = MagicMock()
    resp.get = MagicMock(
        side_effect=lambda key, default="": error_code if key == "error" else default,
    )
    resp.__getitem__ = MagicMock(
        side_effect=lambda key: error_code if key == "error" else None,
    )
    resp.status_code = 200
    return SlackApiError(message=f"slack error: {error_code}", response=resp)


def build_message(
    ts: str = TS,
    user: str | None = AUTHOR,
    mentions: list[str] | None = None,
    groups: list[str] | None = None,
    reactions: dict[str, list[str]] | None = None,
) -> SlackMessage:
    """Build a SlackMessage with a rich_text block mentioning users and groups."""
    elements: list[dict] = [{"type": "text", "text": "please ack "}]
    elements += [{"type": "user", "user_id": u} for u in mentions or []]
    elements += [{"type": "usergroup", "usergroup_id": g} for g in groups or []]
    raw = {
        "ts": ts,
        "user": user,
        "text": "please ack",
        "blocks": [
            {
                "type": "rich_text",
                "block_id": "b1",
                "elements": [{"type": "rich_text_section", "elements": elements}],
            }
        ],
    }
    if reactions:
        raw["reactions"] = [
            {"name": name, "users": users, "count": len(users)} for name, users in reactions.items()
        ]
    return SlackMessage.from_api(raw)


class FakeSlack:
    """In-memory SlackCapabilities that records every call."""

    def __init__(self, bot_id: str = BOT_ID) -> None:
        self.bot_id = bot_id
        self.messages: dict[tuple[str, str], SlackMessage] = {}
        self.groups: dict[str, set[str]] = {}
        self.failing_groups: set[str] = set()
        self.failing_dms: set[str] = set()
        self.permalink_error: Exception | None = None
        self.reaction_error: Exception | None = None
        self.calls: list[tuple] = []
        self.reactions_added: list[tuple[str, str, str]] = []
        self.dms: list[tuple[str, str]] = []
        self.debug_posts: list[tuple[str, str, str]] = []

    def add_message(self, message: SlackMessage, channel: str = CHANNEL) -> None:
        self.messages[(channel, message.ts)] = message

    async def self_identity(self) -> str:
        self.calls.append(("self_identity",))
        return self.bot_id

    async def get_message(self, channel: str, ts: str) -> SlackMessage | None:
        self.calls.append(("get_message", channel, ts))
        return self.messages.get((channel, ts))

    async def list_group_members(self, group_id: str) -> set[str]:
        self.calls.append(("list_group_members", group_id))
        if group_id in self.failing_groups:
            raise slack_api_error("no_such_subteam")
        return set(self.groups.get(group_id, set()))

    async def add_reaction(self, channel: str, ts: str, emoji: str) -> None:
        self.calls.append(("add_reaction", channel, ts, emoji))
        if self.reaction_error is not None:
            raise self.reaction_error
        self.reactions_added.append((channel, ts, emoji))

    async def get_permalink(self, channel: str, ts: str) -> str:
        self.calls.append(("get_permalink", channel, ts))
        if self.permalink_error is not None:
            raise self.permalink_error
        return f"https://example.slack.com/archives/{channel}/p{ts.replace('.', '')}"

    async def post_direct_message(self, user_id: str, text: str) -> None:
        self.calls.append(("post_direct_message", user_id))
        if user_id in self.failing_dms:
            raise slack_api_error("cannot_dm_bot")
        self.dms.append((user_id, text))

    async def post_debug(self, channel: str, thread_ts: str, text: str, data) -> None:
        self.debug_posts.append((channel, thread_ts, text))

    def called(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a TestClient for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def fake_slack() -> FakeSlack:
    return FakeSlack()


@pytest.fixture
def store() -> InMemoryRetryStore:
    return InMemoryRetryStore()


@pytest.fixture
def queue(store: InMemoryRetryStore) -> RetryQueue:
    return RetryQueue(store)


@pytest.fixture
def make_message():
    """Factory for SlackMessage objects with mentions and reactions."""
    return build_message


@pytest.fixture
def api_error():
    """Factory for SlackApiError instances carrying an error code."""
    return slack_api_error
