"""
Agent Core
==========

The dispatch pipeline shared by every front end.

One request, at most one tool:

    User Message
         │
         ▼
    DECIDING ── reasoner call #1 ──┐
         │                        │
    JSON tool call?          plain text
         │                        │
         ▼                        ▼
    EXECUTING (ToolExecutor)   DIRECT_ANSWER → return text
         │
         ▼
    FORMATTING ── reasoner call #2
         │
         ▼
    DONE → return text

Nothing loops back. Reasoner failures propagate as ReasonerUnavailable;
tool failures arrive at the formatting stage as "Error: ..." results.
"""

from dataclasses import dataclass
from typing import Any

from hederabot.agent.context import ASSISTANT, PromptBuilder, compose_user_turn, explorer_url_for
from hederabot.agent.decision import ActionIntent, Decision, DirectAnswer, parse_decision
from hederabot.agent.reasoner import ReasonerClient
from hederabot.agent.tools_executor import ToolExecutor
from hederabot.tools import ToolRegistry
from hederabot.utils.logger import Logger

logger = Logger("Agent")


@dataclass(frozen=True)
class DispatchContext:
    """
    Caller-supplied context for one request.

    Attributes:
        account_id: Ledger account the request is about, appended to the user turn
    """
    account_id: str | None = None


@dataclass(frozen=True)
class DispatchResult:
    """The assistant's final reply."""
    content: str
    role: str = ASSISTANT

    def to_dict(self) -> dict:
        return {"content": self.content, "role": self.role}


class Agent:
    """
    Turns a natural-language request into at most one ledger action.

    The agent owns no global state: the reasoner and registry are handed in,
    so tests (and per-request sessions) can supply their own.

    Example:
        agent = Agent(reasoner, registry, network="testnet")

        result = await agent.dispatch(
            "What's my balance?",
            DispatchContext(account_id="0.0.1234"),
        )
        print(result.content)
    """

    def __init__(
        self,
        reasoner: ReasonerClient,
        registry: ToolRegistry,
        network: str = "testnet",
        tool_timeout: float | None = 30.0
    ):
        """
        Args:
            reasoner: Client for the remote model
            registry: Tools for this session (read-only)
            network: Hedera network, selects the explorer for links
            tool_timeout: Seconds a tool may run
        """
        self.reasoner = reasoner
        self.registry = registry
        self.prompts = PromptBuilder(registry, explorer_url_for(network))
        self.tool_executor = ToolExecutor(registry, timeout=tool_timeout)

    @property
    def model(self) -> str:
        return self.reasoner.model

    async def decide(self, user_turn: str) -> Decision:
        """
        Ask the reasoner whether a tool is needed.

        Returns:
            ActionIntent or DirectAnswer (never both, never neither)
        """
        raw = await self.reasoner.complete(self.prompts.decision_messages(user_turn))
        decision = parse_decision(raw)

        if isinstance(decision, ActionIntent):
            logger.info(f"Decision: {decision.action_name}", {"parameters": decision.parameters})
        else:
            logger.info("Decision: direct answer")

        return decision

    async def execute(self, intent: ActionIntent) -> Any:
        """Run the chosen tool; always returns a result, never raises."""
        return await self.tool_executor.execute(intent)

    async def format_result(self, user_turn: str, tool_name: str, result: Any) -> str:
        """
        Ask the reasoner to present a raw tool result to the user.

        The reply is returned as written, plus the explorer link when the
        result holds a transaction ID the reply does not already link.
        """
        text = await self.reasoner.complete(
            self.prompts.format_messages(user_turn, tool_name, result)
        )
        return self.prompts.ensure_explorer_link(text, result)

    async def dispatch(
        self,
        user_text: str,
        context: DispatchContext | None = None
    ) -> DispatchResult:
        """
        Process one request end to end.

        Args:
            user_text: What the user typed
            context: Optional caller context (account ID)

        Returns:
            DispatchResult with the reply text

        Raises:
            ReasonerUnavailable: If either reasoner call fails
        """
        context = context or DispatchContext()
        user_turn = compose_user_turn(user_text, context.account_id)

        logger.info(f"Dispatching: {user_text[:50]}")

        decision = await self.decide(user_turn)
        if isinstance(decision, DirectAnswer):
            return DispatchResult(content=decision.text)

        result = await self.execute(decision)
        content = await self.format_result(user_turn, decision.action_name, result)

        logger.info(f"Generated response ({len(content)} chars)")
        return DispatchResult(content=content)
