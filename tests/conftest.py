"""Shared test fixtures for the Hedera assistant test suite."""

from contextlib import asynccontextmanager
from types import SimpleNamespace

import pytest

from hederabot.agent.core import DispatchResult
from hederabot.tools import Capability, ToolRegistry
from hederabot.utils.config import (
    Config,
    HederaConfig,
    NilaiConfig,
    ServerConfig,
    SlackConfig,
)


class FakeReasoner:
    """Reasoner stand-in that replays scripted replies and records every call."""

    def __init__(self, replies, model="test-model"):
        self.replies = list(replies)
        self.calls = []
        self.model = model
        self.closed = False

    async def complete(self, messages):
        self.calls.append(list(messages))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def aclose(self):
        self.closed = True


class RecordingTool:
    """Tool body that records its parameters and returns (or raises) a fixed value."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def __call__(self, params):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.result


class FakeSession:
    """Just enough of a Session for the front ends."""

    def __init__(self, reply="ok", error=None, account_id="0.0.1001", capabilities=None):
        self.reply = reply
        self.error = error
        self.dispatched = []
        self.closed = False
        if capabilities is None:
            capabilities = [
                Capability(
                    "get_hbar_balance_query_tool",
                    "Check HBAR balance",
                    RecordingTool(),
                    example=("What's my balance?", {}),
                ),
            ]
        self.registry = ToolRegistry(capabilities)
        self.agent = SimpleNamespace(model="test-model")
        self.credentials = SimpleNamespace(account_id=account_id)
        self.config = SimpleNamespace(hedera=SimpleNamespace(network="testnet"))

    async def dispatch(self, text):
        self.dispatched.append(text)
        if self.error is not None:
            raise self.error
        return DispatchResult(content=self.reply)


def make_session_factory(**session_kwargs):
    """Build a create_session replacement; returns (factory, list of opened sessions)."""
    opened = []

    @asynccontextmanager
    async def factory(config, account_id=None, private_key=None, **kwargs):
        session = FakeSession(**session_kwargs)
        opened.append({"account_id": account_id, "private_key": private_key, "session": session})
        try:
            yield session
        finally:
            session.closed = True

    return factory, opened


@pytest.fixture
def config():
    """A complete configuration that never touches the environment."""
    return Config(
        nilai=NilaiConfig(
            api_key="test-key",
            base_url="http://nilai.test/v1",
            model="meta-llama/Llama-3.1-8B-Instruct",
            timeout_seconds=5.0,
        ),
        hedera=HederaConfig(
            account_id="0.0.1001",
            private_key="302e0201",
            network="testnet",
            mirror_node_url="http://mirror.test",
            tool_timeout_seconds=5.0,
        ),
        slack=SlackConfig(bot_token=None, app_token=None, signing_secret=None),
        server=ServerConfig(host="127.0.0.1", port=3000),
    )


@pytest.fixture
def balance_tool():
    return RecordingTool(result={"hbars": "42"})


@pytest.fixture
def registry(balance_tool):
    """Registry with a balance tool and a failing transfer tool."""
    return ToolRegistry([
        Capability(
            name="get_hbar_balance_query_tool",
            description="Check HBAR balance (no parameters needed)",
            execute=balance_tool,
            example=("What's my balance?", {}),
        ),
        Capability(
            name="transfer_hbar_tool",
            description="Transfer HBAR",
            execute=RecordingTool(error=RuntimeError("INSUFFICIENT_PAYER_BALANCE")),
        ),
    ])
