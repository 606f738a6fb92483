"""Request signing check for the Events API webhook."""

from fastapi import HTTPException, Request
from slack_sdk.signature import SignatureVerifier

from ackbot.config import get_settings


async def verify_slack_request(request: Request) -> dict:
    """FastAPI dependency: reject unsigned or stale event deliveries.

    The HMAC is computed over the raw body, so the body is read as bytes
    before any JSON parsing. SignatureVerifier also refuses timestamps more
    than five minutes old, which blocks replayed mention events.

    Returns:
        The decoded event envelope.

    Raises:
        HTTPException: 403 when the signature doesn't match SLACK_SIGNING_SECRET.
    """
    body = await request.body()
    verifier = SignatureVerifier(signing_secret=get_settings().slack_signing_secret)

    is_valid = verifier.is_valid(
        body=body.decode("utf-8"),
        timestamp=request.headers.get("X-Slack-Request-Timestamp", ""),
        signature=request.headers.get("X-Slack-Signature", ""),
    )
    if not is_valid:
        raise HTTPException(status_code=403, detail="Invalid Slack signature")

    return await request.json()
