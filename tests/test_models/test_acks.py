"""Tests for MessageRef and result models."""

import pytest
from pydantic import ValidationError

from ackbot.models.acks import CheckResult, MentionSet, MessageRef, SweepResult


def test_message_ref_key():
    """key joins channel and timestamp with a colon."""
    ref = MessageRef(channel="C1", timestamp="1234567890.123456")
    assert ref.key == "C1:1234567890.123456"


def test_message_ref_from_key_round_trip():
    """from_key parses what key produces."""
    ref = MessageRef(channel="C1", timestamp="1.5")
    assert MessageRef.from_key(ref.key) == ref


@pytest.mark.parametrize("key", ["", "C1", "C1:", ":1.5"])
def test_message_ref_from_key_invalid(key: str):
    """Keys without both parts are rejected."""
    with pytest.raises(ValueError):
        MessageRef.from_key(key)


def test_message_ref_is_frozen_and_hashable():
    """Refs are immutable and usable in sets."""
    ref = MessageRef(channel="C1", timestamp="1.5")
    with pytest.raises(ValidationError):
        ref.channel = "C2"
    assert len({ref, MessageRef(channel="C1", timestamp="1.5")}) == 1


def test_mention_set_defaults_are_independent():
    """Each MentionSet gets its own sets."""
    a = MentionSet()
    b = MentionSet()
    a.user_ids.add("U1")
    assert b.user_ids == set()


def test_check_result_defaults():
    """outstanding and reminded default to empty."""
    result = CheckResult(ref=MessageRef(channel="C1", timestamp="1.5"), is_complete=True)
    assert result.outstanding == []
    assert result.reminded == []


def test_sweep_result_dump():
    """SweepResult serialises to the /check response body."""
    result = SweepResult(checked=2, complete=["C1:1.5"], incomplete=["C1:2.5"])
    assert result.model_dump() == {
        "checked": 2,
        "complete": ["C1:1.5"],
        "incomplete": ["C1:2.5"],
        "errored": [],
    }
