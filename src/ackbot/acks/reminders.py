"""Direct-message reminders to users who haven't acknowledged a message."""

import logging
from collections.abc import Sequence

from ackbot.acks.concurrency import DEFAULT_CONCURRENCY, bounded_gather
from ackbot.slack.gateway import SlackCapabilities

logger = logging.getLogger(__name__)


def build_reminder_text(requester: str | None, permalink: str | None, channel: str) -> str:
    """Word the reminder DM.

    Falls back to naming the channel when the permalink couldn't be fetched.
    """
    who = f"<@{requester}>" if requester else "Someone"
    where = permalink if permalink else f"(a message in <#{channel}>)"
    return f"{who} requested that you acknowledge this message by reacting to it: {where}"


async def dispatch_reminders(
    slack: SlackCapabilities,
    users: Sequence[str],
    requester: str | None,
    permalink: str | None,
    channel: str,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> list[str]:
    """Send one reminder DM per user.

    A failed send is logged and does not stop the others; that user is simply
    reminded again on the next sweep.

    Returns:
        Users the reminder was delivered to, in input order.
    """
    text = build_reminder_text(requester, permalink, channel)
    results = await bounded_gather(
        users,
        lambda user_id: slack.post_direct_message(user_id, text),
        concurrency,
        return_exceptions=True,
    )

    delivered: list[str] = []
    for user_id, result in zip(users, results):
        if isinstance(result, BaseException):
            logger.warning("Failed to send reminder to %s: %s", user_id, result, exc_info=result)
        else:
            delivered.append(user_id)

    logger.info(
        "Reminders sent",
        extra={"requested": len(users), "delivered": len(delivered), "channel": channel},
    )
    return delivered
