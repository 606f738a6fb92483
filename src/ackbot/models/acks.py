"""Acknowledgement-tracking domain models."""

from pydantic import BaseModel, ConfigDict

from ackbot.models.slack import SlackMessage


class MessageRef(BaseModel):
    """Immutable identity of a Slack message. Used as the retry queue key."""

    model_config = ConfigDict(frozen=True)

    channel: str
    timestamp: str

    @property
    def key(self) -> str:
        return f"{self.channel}:{self.timestamp}"

    @classmethod
    def from_key(cls, key: str) -> "MessageRef":
        """Parse a ``channel:timestamp`` queue key.

        Raises:
            ValueError: If the key has no separator or an empty part.
        """
        channel, sep, timestamp = key.partition(":")
        if not sep or not channel or not timestamp:
            raise ValueError(f"Invalid message key: {key!r}")
        return cls(channel=channel, timestamp=timestamp)


class MentionSet(BaseModel):
    """User and user-group ids referenced in a message. Never persisted."""

    user_ids: set[str] = set()
    usergroup_ids: set[str] = set()


class ResolvedMessage(BaseModel):
    """A fetched message with its required and actual reactors."""

    message: SlackMessage
    required_users: set[str]
    reacted_users: set[str]


class CheckResult(BaseModel):
    """Outcome of a single acknowledgement evaluation."""

    ref: MessageRef
    is_complete: bool
    outstanding: list[str] = []  # sorted user ids still expected to react
    reminded: list[str] = []  # user ids a reminder was delivered to


class SweepResult(BaseModel):
    """Summary of one retry-queue sweep, keyed by ``channel:timestamp``."""

    checked: int = 0
    complete: list[str] = []
    incomplete: list[str] = []
    errored: list[str] = []
