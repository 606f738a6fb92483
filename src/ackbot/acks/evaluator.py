"""Acknowledgement evaluation: who still owes a reaction, and nagging them.

One evaluation fetches the message, auto-acknowledges on the bot's behalf
when the bot itself was mentioned, reminds every outstanding user by DM, and
optionally records the message in the retry queue for the next sweep.
"""

import logging
import time
from collections.abc import Callable
from typing import Any

from ackbot.acks.concurrency import DEFAULT_CONCURRENCY, KeyedLock
from ackbot.acks.mentions import MAX_BLOCK_DEPTH
from ackbot.acks.reminders import dispatch_reminders
from ackbot.acks.resolver import MessageNotFoundError, resolve
from ackbot.models.acks import CheckResult, MessageRef
from ackbot.slack.gateway import SlackCapabilities
from ackbot.store.queue import RetryQueue

logger = logging.getLogger(__name__)

DEFAULT_ACK_EMOJI = "thumbsup"


class AckEvaluator:
    """Evaluates acknowledgement checks against injected Slack and queue backends.

    Evaluations of the same message are serialized through a per-key lock, so
    an event-driven check and a sweep never interleave on one message within
    this process.
    """

    def __init__(
        self,
        slack: SlackCapabilities,
        queue: RetryQueue,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
        ack_emoji: str = DEFAULT_ACK_EMOJI,
        max_depth: int = MAX_BLOCK_DEPTH,
        debug_to_slack: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.slack = slack
        self.queue = queue
        self.concurrency = concurrency
        self.ack_emoji = ack_emoji
        self.max_depth = max_depth
        self.debug_to_slack = debug_to_slack
        self.clock = clock
        self._locks = KeyedLock()

    async def evaluate(
        self,
        ref: MessageRef,
        enqueue_on_incomplete: bool,
        send_reminders: bool = True,
    ) -> CheckResult:
        """Check whether everyone mentioned in ``ref`` has reacted.

        Args:
            ref: The message to check.
            enqueue_on_incomplete: Record an incomplete check in the retry
                queue with the current time as its score.
            send_reminders: DM outstanding users. Reaction events pass False
                so a single reaction doesn't re-nag everyone else.

        Returns:
            CheckResult; a missing message counts as complete.
        """
        async with self._locks.hold(ref.key):
            return await self._evaluate(ref, enqueue_on_incomplete, send_reminders)

    async def _evaluate(
        self, ref: MessageRef, enqueue_on_incomplete: bool, send_reminders: bool
    ) -> CheckResult:
        bot_id = await self.slack.self_identity()

        try:
            resolved = await resolve(self.slack, ref, self.concurrency, self.max_depth)
        except MessageNotFoundError:
            logger.info("Message %s is missing, deleted? Treating as complete", ref.key)
            return CheckResult(ref=ref, is_complete=True)

        required = set(resolved.required_users)
        reacted = set(resolved.reacted_users)

        if bot_id in required:
            # react on the bot's behalf; also keeps the bot from DMing itself
            await self._self_ack(ref)
            required.discard(bot_id)
            reacted.add(bot_id)

        outstanding = sorted(required - reacted)
        is_complete = not outstanding

        await self._trace(
            ref,
            "ready to send reminders",
            {
                "required": sorted(required),
                "reacted": sorted(reacted),
                "outstanding": outstanding,
                "bot_id": bot_id,
            },
        )

        reminded: list[str] = []
        if not is_complete and send_reminders:
            permalink = await self._permalink(ref)
            reminded = await dispatch_reminders(
                self.slack,
                outstanding,
                resolved.message.user,
                permalink,
                ref.channel,
                self.concurrency,
            )

        if not is_complete and enqueue_on_incomplete:
            await self.queue.enqueue(ref, self.clock())

        return CheckResult(
            ref=ref,
            is_complete=is_complete,
            outstanding=outstanding,
            reminded=reminded,
        )

    async def _self_ack(self, ref: MessageRef) -> None:
        try:
            await self.slack.add_reaction(ref.channel, ref.timestamp, self.ack_emoji)
        except Exception:
            logger.warning("Failed to self-acknowledge %s", ref.key, exc_info=True)

    async def _permalink(self, ref: MessageRef) -> str | None:
        try:
            return await self.slack.get_permalink(ref.channel, ref.timestamp)
        except Exception:
            logger.warning("Failed to fetch permalink for %s", ref.key, exc_info=True)
            return None

    async def _trace(self, ref: MessageRef, message: str, data: dict[str, Any]) -> None:
        logger.info(message, extra={"message_key": ref.key, **data})
        if self.debug_to_slack:
            await self.slack.post_debug(ref.channel, ref.timestamp, message, data)
