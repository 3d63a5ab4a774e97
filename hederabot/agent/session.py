"""
Sessions
========

A session bundles everything one credential context needs:

- a ReasonerClient (its own HTTP pool)
- a MirrorNodeClient for ledger reads
- a frozen ToolRegistry built for the session's account
- the Agent wired to all of the above

Front ends open one long-lived session for the default credentials
(from .env) and open a fresh, short-lived session whenever a request
brings its own account ID or key. Nothing is shared between sessions,
so one request's credentials can never leak into another's.

Usage:
    async with create_session(config) as session:
        result = await session.agent.dispatch("What's my balance?")

    # Request-scoped credentials
    async with create_session(config, account_id="0.0.5005", private_key=key) as session:
        ...
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

import httpx

from hederabot.agent.core import Agent, DispatchContext, DispatchResult
from hederabot.agent.reasoner import ReasonerClient
from hederabot.tools import ToolRegistry
from hederabot.tools.hedera_tools import (
    HederaToolkit,
    LedgerCredentials,
    MirrorNodeClient,
    TransferSubmitter,
)
from hederabot.utils.config import Config
from hederabot.utils.logger import Logger

logger = Logger("Session")


@dataclass
class Session:
    """
    One credential context and the objects built for it.

    Attributes:
        config: Configuration with the session's credentials applied
        credentials: Ledger account the session acts as
        reasoner: Reasoner client owned by the session
        mirror: Mirror node client owned by the session
        registry: Frozen tool registry
        agent: The dispatch pipeline
    """
    config: Config
    credentials: LedgerCredentials
    reasoner: ReasonerClient
    mirror: MirrorNodeClient
    registry: ToolRegistry
    agent: Agent

    async def dispatch(self, user_text: str) -> DispatchResult:
        """Dispatch with the session's account as context."""
        context = DispatchContext(account_id=self.credentials.account_id)
        return await self.agent.dispatch(user_text, context)

    async def aclose(self) -> None:
        await self.reasoner.aclose()
        await self.mirror.aclose()


def build_session(
    config: Config,
    account_id: str | None = None,
    private_key: str | None = None,
    transfer_submitter: TransferSubmitter | None = None,
    reasoner_http_client: httpx.AsyncClient | None = None,
    mirror_http_client: httpx.AsyncClient | None = None
) -> Session:
    """
    Construct a session without managing its lifetime.

    Args:
        config: Base configuration
        account_id: Overrides HEDERA_ACCOUNT_ID for this session
        private_key: Overrides HEDERA_PRIVATE_KEY for this session
        transfer_submitter: Backend that signs and submits transfers; the
            transfer tool is only registered when one is given
        reasoner_http_client: Optional httpx client for the reasoner
        mirror_http_client: Optional httpx client for the mirror node

    Returns:
        A Session; call aclose() when done (or use create_session)
    """
    scoped = config.with_credentials(account_id, private_key)
    credentials = LedgerCredentials(
        account_id=scoped.hedera.account_id,
        private_key=scoped.hedera.private_key,
    )

    reasoner = ReasonerClient(
        api_key=scoped.nilai.api_key,
        base_url=scoped.nilai.base_url,
        model=scoped.nilai.model,
        timeout=scoped.nilai.timeout_seconds,
        http_client=reasoner_http_client,
    )
    mirror = MirrorNodeClient(
        scoped.hedera.mirror_node_url,
        http_client=mirror_http_client,
        timeout=scoped.hedera.tool_timeout_seconds,
    )

    toolkit = HederaToolkit(mirror, credentials, transfer_submitter)
    registry = ToolRegistry(toolkit.get_tools())

    agent = Agent(
        reasoner,
        registry,
        network=scoped.hedera.network,
        tool_timeout=scoped.hedera.tool_timeout_seconds,
    )

    logger.debug(
        f"Session built for {credentials.account_id or 'no account'}",
        {"tools": registry.list_names(), "model": reasoner.model},
    )

    return Session(
        config=scoped,
        credentials=credentials,
        reasoner=reasoner,
        mirror=mirror,
        registry=registry,
        agent=agent,
    )


@asynccontextmanager
async def create_session(
    config: Config,
    account_id: str | None = None,
    private_key: str | None = None,
    **kwargs
) -> AsyncIterator[Session]:
    """Build a session and close its clients on exit. See build_session for arguments."""
    session = build_session(config, account_id, private_key, **kwargs)
    try:
        yield session
    finally:
        await session.aclose()
