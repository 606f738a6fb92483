"""Fetch a message and resolve who should react versus who did."""

import logging

from ackbot.acks.concurrency import DEFAULT_CONCURRENCY, bounded_gather
from ackbot.acks.mentions import MAX_BLOCK_DEPTH, extract_mentions
from ackbot.models.acks import MessageRef, ResolvedMessage
from ackbot.slack.gateway import SlackCapabilities

logger = logging.getLogger(__name__)


class MessageNotFoundError(LookupError):
    """The tracked message was deleted or can't be read."""

    def __init__(self, ref: MessageRef) -> None:
        super().__init__(f"Message not found: {ref.key}")
        self.ref = ref


async def resolve(
    slack: SlackCapabilities,
    ref: MessageRef,
    concurrency: int = DEFAULT_CONCURRENCY,
    max_depth: int = MAX_BLOCK_DEPTH,
) -> ResolvedMessage:
    """Fetch ``ref`` and compute its required and actual reactors.

    Required users are the direct mentions plus the members of every
    mentioned user group. A group whose expansion fails is logged and
    contributes nobody.

    Raises:
        MessageNotFoundError: If the message is gone. History returns the
            newest message at or before ``ts``, so a different ts means the
            target itself was deleted.
    """
    message = await slack.get_message(ref.channel, ref.timestamp)
    if message is None or message.ts != ref.timestamp:
        raise MessageNotFoundError(ref)

    mentions = extract_mentions(message.blocks, max_depth=max_depth)
    required = set(mentions.user_ids)

    group_ids = sorted(mentions.usergroup_ids)
    members = await bounded_gather(
        group_ids,
        slack.list_group_members,
        concurrency,
        return_exceptions=True,
    )
    for group_id, result in zip(group_ids, members):
        if isinstance(result, BaseException):
            logger.error(
                "Failed to expand user group %s for %s: %s",
                group_id,
                ref.key,
                result,
                exc_info=result,
            )
            continue
        required.update(result)

    reacted: set[str] = set()
    for reaction in message.reactions:
        reacted.update(reaction.users)

    return ResolvedMessage(message=message, required_users=required, reacted_users=reacted)
