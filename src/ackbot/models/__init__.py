"""Data models for Slack payloads and acknowledgement checks."""

from ackbot.models.acks import CheckResult, MentionSet, MessageRef, ResolvedMessage, SweepResult
from ackbot.models.blocks import (
    Block,
    OtherBlock,
    RichTextBlock,
    RichTextSectionBlock,
    TextBlock,
    UserBlock,
    UserGroupBlock,
    parse_blocks,
)
from ackbot.models.slack import Reaction, SlackMessage

__all__ = [
    "Block",
    "CheckResult",
    "MentionSet",
    "MessageRef",
    "OtherBlock",
    "Reaction",
    "ResolvedMessage",
    "RichTextBlock",
    "RichTextSectionBlock",
    "SlackMessage",
    "SweepResult",
    "TextBlock",
    "UserBlock",
    "UserGroupBlock",
    "parse_blocks",
]
