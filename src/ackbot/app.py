"""FastAPI application with lifespan, health, and sweep endpoints."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse

from ackbot.acks.service import check_for_reminders
from ackbot.config import get_settings
from ackbot.logging_config import configure_logging
from ackbot.slack.router import router as slack_router

logger = logging.getLogger(__name__)

_INDEX_HTML = """<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <title>Ackbot</title>
</head>
<body>
  <h1>Ackbot</h1>
</body>
</html>
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: configure logging and load config on startup."""
    settings = get_settings()
    configure_logging(settings.log_level)
    app.state.settings = settings
    yield


app = FastAPI(
    title="Ackbot",
    lifespan=lifespan,
)
app.include_router(slack_router)


async def verify_scheduler(request: Request) -> None:
    """Verify the X-Ackbot-Verify header for the sweep endpoint.

    Raises HTTPException 403 if the header is missing, empty, or mismatched.
    """
    settings = get_settings()
    verify = request.headers.get("X-Ackbot-Verify", "")
    if not verify:
        raise HTTPException(status_code=403, detail="Missing verify header")
    if not settings.ackbot_verify or verify != settings.ackbot_verify:
        raise HTTPException(status_code=403, detail="Invalid verify header")


@app.get("/", response_class=HTMLResponse)
async def index():
    return _INDEX_HTML


@app.get("/health")
async def health():
    """Health check endpoint for Cloud Run and local development."""
    return {
        "status": "ok",
        "service": "ackbot",
        "version": "0.1.0",
    }


@app.post("/check")
async def check_endpoint(
    include_all: bool = Query(False, alias="all"),
    _: None = Depends(verify_scheduler),
):
    """Sweep the retry queue and remind anyone still outstanding.

    ``?all=true`` rechecks every queued message regardless of when it was
    last checked (manual debugging).
    """
    try:
        result = await check_for_reminders(include_all=include_all)
    except Exception as exc:
        logger.error("Unexpected error during sweep: %s", exc, exc_info=True)
        return JSONResponse({"msg": "Unexpected error"}, status_code=500)
    return result.model_dump()
