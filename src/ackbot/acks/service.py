"""Lazy wiring of the evaluator and retry queue from application settings."""

from ackbot.acks.evaluator import AckEvaluator
from ackbot.acks.sweep import sweep
from ackbot.config import get_settings
from ackbot.models.acks import MessageRef, SweepResult
from ackbot.slack.client import get_slack_client
from ackbot.slack.gateway import SlackGateway
from ackbot.store.client import get_retry_store
from ackbot.store.queue import RetryQueue

_evaluator: AckEvaluator | None = None


async def get_evaluator() -> AckEvaluator:
    """Return a cached AckEvaluator bound to the Slack client and retry store.

    The evaluator is shared so its per-message locks cover every trigger in
    this process.
    """
    global _evaluator
    if _evaluator is None:
        settings = get_settings()
        client = await get_slack_client()
        _evaluator = AckEvaluator(
            SlackGateway(client),
            RetryQueue(get_retry_store()),
            concurrency=settings.concurrency,
            ack_emoji=settings.ack_emoji,
            max_depth=settings.max_block_depth,
            debug_to_slack=settings.debug_log_to_slack,
        )
    return _evaluator


def reset_evaluator() -> None:
    """Reset the cached evaluator. Used for testing."""
    global _evaluator
    _evaluator = None


async def check_for_reminders(include_all: bool = False) -> SweepResult:
    """Run one sweep over the retry queue using configured frequency and limits."""
    settings = get_settings()
    evaluator = await get_evaluator()
    return await sweep(
        evaluator,
        evaluator.queue,
        settings.reminder_frequency_seconds,
        concurrency=settings.concurrency,
        include_all=include_all,
        reschedule_failed=settings.reschedule_failed_checks,
    )


async def check_message_acks(channel: str, ts: str) -> None:
    """Initial check for a message the bot was mentioned in.

    Reminds outstanding users and queues the message for later sweeps when
    it is still incomplete.
    """
    evaluator = await get_evaluator()
    await evaluator.evaluate(MessageRef(channel=channel, timestamp=ts), enqueue_on_incomplete=True)


async def recheck_tracked_message(channel: str, ts: str) -> None:
    """Re-evaluate a queued message after someone reacted or un-reacted.

    Untracked messages are ignored. No reminders are sent; a check found
    complete is dropped from the queue.
    """
    evaluator = await get_evaluator()
    ref = MessageRef(channel=channel, timestamp=ts)
    if not await evaluator.queue.contains(ref):
        return
    result = await evaluator.evaluate(ref, enqueue_on_incomplete=False, send_reminders=False)
    if result.is_complete:
        await evaluator.queue.remove([ref])
