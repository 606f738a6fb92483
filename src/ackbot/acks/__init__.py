"""Acknowledgement tracking: mention extraction, evaluation, reminders, and sweeps."""

from ackbot.acks.concurrency import KeyedLock, bounded_gather
from ackbot.acks.evaluator import AckEvaluator
from ackbot.acks.mentions import extract_mentions
from ackbot.acks.reminders import build_reminder_text, dispatch_reminders
from ackbot.acks.resolver import MessageNotFoundError, resolve
from ackbot.acks.service import (
    check_for_reminders,
    check_message_acks,
    get_evaluator,
    recheck_tracked_message,
    reset_evaluator,
)
from ackbot.acks.sweep import sweep

__all__ = [
    "AckEvaluator",
    "KeyedLock",
    "MessageNotFoundError",
    "bounded_gather",
    "build_reminder_text",
    "check_for_reminders",
    "check_message_acks",
    "dispatch_reminders",
    "extract_mentions",
    "get_evaluator",
    "recheck_tracked_message",
    "reset_evaluator",
    "resolve",
    "sweep",
]
