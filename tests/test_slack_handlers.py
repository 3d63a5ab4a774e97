"""Tests for hederabot.slack.handlers: Slack events routed to the agent."""

import pytest

from conftest import FakeSession, RecordingTool
from hederabot.errors import ReasonerUnavailable
from hederabot.slack.handlers import FAILURE_REPLY, UNAVAILABLE_REPLY, SlackHandlers
from hederabot.tools import Capability


class FakeSay:
    def __init__(self):
        self.calls = []

    async def __call__(self, text=None, **kwargs):
        self.calls.append({"text": text, **kwargs})


class FakeAck:
    def __init__(self):
        self.called = False

    async def __call__(self):
        self.called = True


class TestMentions:
    @pytest.mark.asyncio
    async def test_mention_answered_in_thread(self):
        session = FakeSession(reply="Balance: 42 HBAR")
        say = FakeSay()

        await SlackHandlers(session).handle_mention(
            {"text": "<@U123ABC> what's my balance?", "user": "U1", "channel": "C1", "ts": "111.1"},
            say,
        )

        assert session.dispatched == ["what's my balance?"]
        assert say.calls == [{"text": "Balance: 42 HBAR", "thread_ts": "111.1"}]

    @pytest.mark.asyncio
    async def test_empty_mention_gets_greeting(self):
        session = FakeSession()
        say = FakeSay()

        await SlackHandlers(session).handle_mention({"text": "<@U123ABC>", "ts": "1.0"}, say)

        assert session.dispatched == []
        assert "What's my balance?" in say.calls[0]["text"]

    @pytest.mark.asyncio
    async def test_reasoner_failure_reply(self):
        session = FakeSession(error=ReasonerUnavailable("down"))
        say = FakeSay()

        await SlackHandlers(session).handle_mention({"text": "<@U1> hi", "ts": "1.0"}, say)

        assert say.calls[0]["text"] == UNAVAILABLE_REPLY


class TestDirectMessages:
    @pytest.mark.asyncio
    async def test_dm_answered(self):
        session = FakeSession(reply="Hello!")
        say = FakeSay()

        await SlackHandlers(session).handle_message({"channel_type": "im", "text": "Hello", "user": "U1"}, say)

        assert say.calls == [{"text": "Hello!"}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("event", [
        {"channel_type": "channel", "text": "Hello"},
        {"channel_type": "im", "text": "Hello", "bot_id": "B1"},
        {"channel_type": "im", "text": "Hello", "subtype": "message_changed"},
        {"channel_type": "im", "text": "  "},
    ])
    async def test_ignored_events(self, event):
        session = FakeSession()
        say = FakeSay()

        await SlackHandlers(session).handle_message(event, say)

        assert session.dispatched == []
        assert say.calls == []

    @pytest.mark.asyncio
    async def test_unexpected_error_reply(self):
        session = FakeSession(error=RuntimeError("boom"))
        say = FakeSay()

        await SlackHandlers(session).handle_message({"channel_type": "im", "text": "Hello"}, say)

        assert say.calls[0]["text"] == FAILURE_REPLY


class TestCommand:
    @pytest.mark.asyncio
    async def test_help(self):
        ack, say = FakeAck(), FakeSay()
        await SlackHandlers(FakeSession()).handle_command(ack, {"text": "help"}, say)
        assert ack.called
        assert "/hbar status" in say.calls[0]["text"]
        assert "What's my balance?" in say.calls[0]["text"]
        assert "Transfer" not in say.calls[0]["text"]

    @pytest.mark.asyncio
    async def test_help_lists_transfer_only_when_registered(self):
        transfer = Capability(
            "transfer_hbar_tool",
            "Transfer HBAR",
            RecordingTool(),
            example=("Transfer 10 HBAR to 0.0.800", {"transfers": []}),
        )
        ack, say = FakeAck(), FakeSay()

        await SlackHandlers(FakeSession(capabilities=[transfer])).handle_command(ack, {"text": "help"}, say)

        assert "Transfer 10 HBAR to 0.0.800" in say.calls[0]["text"]

    @pytest.mark.asyncio
    async def test_status(self):
        ack, say = FakeAck(), FakeSay()
        await SlackHandlers(FakeSession(account_id="0.0.1001")).handle_command(ack, {"text": "status"}, say)
        text = say.calls[0]["text"]
        assert "test-model" in text
        assert "0.0.1001" in text
        assert "get_hbar_balance_query_tool" in text

    @pytest.mark.asyncio
    async def test_unknown(self):
        ack, say = FakeAck(), FakeSay()
        await SlackHandlers(FakeSession()).handle_command(ack, {"text": "dance"}, say)
        assert "Unknown command" in say.calls[0]["text"]
