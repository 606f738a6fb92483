"""Tests for evaluator wiring and the event/sweep entry points."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ackbot.acks import service
from ackbot.acks.evaluator import AckEvaluator
from ackbot.models.acks import CheckResult, MessageRef, SweepResult
from ackbot.slack.gateway import SlackGateway
from ackbot.store.memory import InMemoryRetryStore
from ackbot.store.queue import RetryQueue

CHANNEL = "C0AFQJHAVS6"
TS = "1234567890.123456"
REF = MessageRef(channel=CHANNEL, timestamp=TS)


def _settings() -> MagicMock:
    settings = MagicMock()
    settings.concurrency = 5
    settings.ack_emoji = "eyes"
    settings.max_block_depth = 20
    settings.debug_log_to_slack = False
    settings.reminder_frequency_seconds = 900
    settings.reschedule_failed_checks = True
    return settings


@pytest.fixture(autouse=True)
def _reset_singleton():
    service.reset_evaluator()
    yield
    service.reset_evaluator()


@pytest.fixture
def mock_evaluator():
    evaluator = AsyncMock()
    evaluator.queue = RetryQueue(InMemoryRetryStore())
    with patch("ackbot.acks.service.get_evaluator", new_callable=AsyncMock) as m:
        m.return_value = evaluator
        yield evaluator


@patch("ackbot.acks.service.get_retry_store")
@patch("ackbot.acks.service.get_slack_client", new_callable=AsyncMock)
@patch("ackbot.acks.service.get_settings")
async def test_get_evaluator_wires_settings(mock_settings, mock_client, mock_store):
    """The evaluator is built once from settings, the Slack client, and the store."""
    mock_settings.return_value = _settings()
    mock_store.return_value = InMemoryRetryStore()

    evaluator = await service.get_evaluator()

    assert isinstance(evaluator, AckEvaluator)
    assert isinstance(evaluator.slack, SlackGateway)
    assert evaluator.concurrency == 5
    assert evaluator.ack_emoji == "eyes"
    assert evaluator.max_depth == 20
    assert await service.get_evaluator() is evaluator
    mock_client.assert_awaited_once()


async def test_check_message_acks_enqueues(mock_evaluator):
    """An app mention evaluates with queueing enabled."""
    await service.check_message_acks(CHANNEL, TS)

    mock_evaluator.evaluate.assert_awaited_once_with(REF, enqueue_on_incomplete=True)


async def test_recheck_ignores_untracked(mock_evaluator):
    """Reactions on messages that aren't queued do nothing."""
    await service.recheck_tracked_message(CHANNEL, TS)

    mock_evaluator.evaluate.assert_not_called()


async def test_recheck_removes_completed(mock_evaluator):
    """A tracked message that became complete leaves the queue, without reminders."""
    await mock_evaluator.queue.enqueue(REF, 1.0)
    mock_evaluator.evaluate.return_value = CheckResult(ref=REF, is_complete=True)

    await service.recheck_tracked_message(CHANNEL, TS)

    mock_evaluator.evaluate.assert_awaited_once_with(
        REF, enqueue_on_incomplete=False, send_reminders=False
    )
    assert not await mock_evaluator.queue.contains(REF)


async def test_recheck_keeps_incomplete(mock_evaluator):
    """A tracked message still missing reactions stays queued at its old score."""
    await mock_evaluator.queue.enqueue(REF, 1.0)
    mock_evaluator.evaluate.return_value = CheckResult(ref=REF, is_complete=False, outstanding=["U1"])

    await service.recheck_tracked_message(CHANNEL, TS)

    assert await mock_evaluator.queue.store.score(REF.key) == 1.0


@patch("ackbot.acks.service.sweep", new_callable=AsyncMock)
@patch("ackbot.acks.service.get_settings")
async def test_check_for_reminders_uses_settings(mock_settings, mock_sweep, mock_evaluator):
    """The sweep runs with the configured frequency, concurrency, and failure policy."""
    mock_settings.return_value = _settings()
    mock_sweep.return_value = SweepResult()

    result = await service.check_for_reminders(include_all=True)

    assert result == SweepResult()
    mock_sweep.assert_awaited_once_with(
        mock_evaluator,
        mock_evaluator.queue,
        900,
        concurrency=5,
        include_all=True,
        reschedule_failed=True,
    )
