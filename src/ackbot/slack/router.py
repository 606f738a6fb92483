"""Events API endpoint: app mentions and reaction changes come in here."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse

from ackbot.slack.handlers import handle_slack_event
from ackbot.slack.verification import verify_slack_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["slack"])


@router.post("/slack/events")
async def slack_events(
    request: Request,
    background_tasks: BackgroundTasks,
    payload: dict = Depends(verify_slack_request),
) -> JSONResponse:
    """Accept a signed event and hand it to a background check.

    Slack redelivers when we are slow to answer. The first delivery already
    scheduled a check, so redeliveries are acknowledged without re-running
    it (a second run would DM everyone twice).
    """
    retry_num = request.headers.get("X-Slack-Retry-Num")
    if retry_num:
        logger.info(
            "Ignoring Slack redelivery",
            extra={"retry_num": retry_num, "retry_reason": request.headers.get("X-Slack-Retry-Reason")},
        )
        return JSONResponse({"ok": True})

    return handle_slack_event(payload, background_tasks)
