"""Slack event dispatch for acknowledgement tracking."""

import logging
from collections.abc import Awaitable, Callable

from fastapi import BackgroundTasks
from fastapi.responses import JSONResponse

from ackbot.acks.service import check_message_acks, recheck_tracked_message

logger = logging.getLogger(__name__)

_REACTION_EVENTS = ("reaction_added", "reaction_removed")


def handle_slack_event(payload: dict, background_tasks: BackgroundTasks) -> JSONResponse:
    """Dispatch a Slack event based on its type.

    - url_verification: return the challenge token
    - event_callback: process the contained event
    - anything else: acknowledge with 200
    """
    if payload.get("type") == "url_verification":
        return JSONResponse({"challenge": payload["challenge"]})

    if payload.get("type") == "event_callback":
        event = payload.get("event", {})
        handle_event(event, background_tasks)
        return JSONResponse({"ok": True})

    return JSONResponse({"ok": True})


def handle_event(event: dict, background_tasks: BackgroundTasks) -> None:
    """Resolve the tracked message from an event and schedule its check.

    - app_mention: initial check of the mentioning message (queues it if incomplete)
    - reaction_added / reaction_removed on a message: re-check if already tracked
    - anything else: ignored
    """
    event_type = event.get("type")

    if event_type == "app_mention":
        channel, ts = event.get("channel"), event.get("ts")
        if not channel or not ts:
            logger.warning("app_mention without channel/ts, ignoring")
            return
        logger.info(
            "Received event: %s",
            event_type,
            extra={"channel": channel, "ts": ts, "thread_ts": event.get("thread_ts")},
        )
        background_tasks.add_task(_run_safely, check_message_acks, channel, ts)
        return

    if event_type in _REACTION_EVENTS:
        item = event.get("item") or {}
        if item.get("type") != "message":
            return
        channel, ts = item.get("channel"), item.get("ts")
        if not channel or not ts:
            return
        logger.info(
            "Received event: %s",
            event_type,
            extra={"channel": channel, "ts": ts, "reaction": event.get("reaction")},
        )
        background_tasks.add_task(_run_safely, recheck_tracked_message, channel, ts)


async def _run_safely(func: Callable[[str, str], Awaitable[None]], channel: str, ts: str) -> None:
    """Run a background check, logging instead of raising into the ASGI server."""
    try:
        await func(channel, ts)
    except Exception as exc:
        logger.error("Check failed for %s:%s: %s", channel, ts, exc, exc_info=True)
