"""Mention extraction from Slack rich-text block trees."""

import logging
from collections.abc import Sequence

from ackbot.models.acks import MentionSet
from ackbot.models.blocks import Block, UserBlock, UserGroupBlock

logger = logging.getLogger(__name__)

MAX_BLOCK_DEPTH = 50


def extract_mentions(blocks: Sequence[Block] | None, max_depth: int = MAX_BLOCK_DEPTH) -> MentionSet:
    """Collect user and user-group ids referenced anywhere in the block forest.

    User and usergroup leaves contribute ids. Any other block is walked
    through its ``elements`` when it has them and skipped otherwise. Nesting
    deeper than ``max_depth`` is not expanded.
    """
    mentions = MentionSet()
    _walk(blocks or [], mentions, 0, max_depth)
    return mentions


def _walk(blocks: Sequence[Block], mentions: MentionSet, depth: int, max_depth: int) -> None:
    if depth >= max_depth:
        logger.debug("Block tree deeper than %d levels, not expanding further", max_depth)
        return

    for block in blocks:
        if isinstance(block, UserBlock):
            mentions.user_ids.add(block.user_id)
        elif isinstance(block, UserGroupBlock):
            mentions.usergroup_ids.add(block.usergroup_id)
        else:
            elements = getattr(block, "elements", None)
            if elements:
                _walk(elements, mentions, depth + 1, max_depth)
