"""Ackbot: nag mentioned Slack users until they react to a message."""
