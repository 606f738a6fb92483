"""Slack integration: Web API gateway, client, signature verification, and webhook handling."""

from ackbot.slack.client import get_slack_client, reset_client
from ackbot.slack.gateway import SlackCapabilities, SlackGateway

__all__ = [
    "SlackCapabilities",
    "SlackGateway",
    "get_slack_client",
    "reset_client",
]
