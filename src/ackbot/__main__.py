"""Run the service with uvicorn: ``python -m ackbot``."""

import uvicorn

from ackbot.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("ackbot.app:app", host="0.0.0.0", port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
