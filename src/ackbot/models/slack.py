"""Slack message and reaction models parsed from conversations.history."""

from pydantic import BaseModel

from ackbot.models.blocks import Block, parse_blocks


class Reaction(BaseModel):
    """One emoji reaction and the users who applied it."""

    name: str
    users: list[str] = []
    count: int = 0


class SlackMessage(BaseModel):
    """A channel message with the fields the acknowledgement engine reads."""

    ts: str  # e.g., "1234567890.123456"
    user: str | None = None  # author; None for some bot/system messages
    text: str = ""
    blocks: list[Block] = []
    reactions: list[Reaction] = []

    @classmethod
    def from_api(cls, raw: dict) -> "SlackMessage":
        """Build from a raw message object, tolerating malformed blocks."""
        return cls(
            ts=raw["ts"],
            user=raw.get("user"),
            text=raw.get("text") or "",
            blocks=parse_blocks(raw.get("blocks")),
            reactions=[Reaction(**r) for r in raw.get("reactions") or []],
        )
