"""Periodic sweep over the retry queue."""

import logging
import time

from ackbot.acks.concurrency import DEFAULT_CONCURRENCY, bounded_gather
from ackbot.acks.evaluator import AckEvaluator
from ackbot.models.acks import CheckResult, MessageRef, SweepResult
from ackbot.store.queue import RetryQueue

logger = logging.getLogger(__name__)


async def sweep(
    evaluator: AckEvaluator,
    queue: RetryQueue,
    frequency: float,
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
    include_all: bool = False,
    now: float | None = None,
    reschedule_failed: bool = False,
) -> SweepResult:
    """Re-check every due entry and update the queue from the outcomes.

    1. Fetch entries last checked at least ``frequency`` seconds ago.
    2. Evaluate each (reminding outstanding users) without letting the
       evaluator touch the queue.
    3. Remove complete entries; re-score incomplete ones to ``now``.

    An entry whose evaluation raises is logged and left at its old score so
    the next sweep picks it up again. With ``reschedule_failed`` it is
    re-scored to ``now`` instead, which stops a permanently failing entry
    from being retried on every sweep.
    """
    if now is None:
        now = time.time()

    due = await queue.due_entries(now, frequency, include_all=include_all)
    logger.info("Sweep starting", extra={"due": len(due), "include_all": include_all})

    results = await bounded_gather(
        due,
        lambda ref: evaluator.evaluate(ref, enqueue_on_incomplete=False),
        concurrency,
        return_exceptions=True,
    )

    complete: list[MessageRef] = []
    incomplete: list[MessageRef] = []
    errored: list[MessageRef] = []
    for ref, result in zip(due, results):
        if isinstance(result, CheckResult):
            (complete if result.is_complete else incomplete).append(ref)
        else:
            logger.error("Check failed for %s: %s", ref.key, result, exc_info=result)
            errored.append(ref)

    await queue.remove(complete)
    for ref in incomplete:
        await queue.enqueue(ref, now)
    if reschedule_failed:
        for ref in errored:
            await queue.enqueue(ref, now)

    summary = SweepResult(
        checked=len(due),
        complete=[ref.key for ref in complete],
        incomplete=[ref.key for ref in incomplete],
        errored=[ref.key for ref in errored],
    )
    logger.info(
        "Sweep finished",
        extra={
            "checked": summary.checked,
            "complete": len(summary.complete),
            "incomplete": len(summary.incomplete),
            "errored": len(summary.errored),
        },
    )
    return summary
