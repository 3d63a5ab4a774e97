"""
Agent System
============

The agent turns one user request into at most one ledger action:
1. Decides (via the reasoner) whether a tool is needed
2. Executes that tool
3. Formats the raw result (via the reasoner) into a reply

This module provides:
- Agent: The dispatch pipeline
- ToolExecutor: Runs one tool, absorbing its failures
- ReasonerClient: Transport to the remote model
- create_session: Builds a scoped reasoner + registry + agent
"""

from hederabot.agent.core import Agent, DispatchContext, DispatchResult
from hederabot.agent.decision import ActionIntent, DirectAnswer, parse_decision
from hederabot.agent.reasoner import ReasonerClient
from hederabot.agent.session import Session, build_session, create_session
from hederabot.agent.tools_executor import ToolExecutor

__all__ = [
    "Agent",
    "DispatchContext",
    "DispatchResult",
    "ActionIntent",
    "DirectAnswer",
    "parse_decision",
    "ReasonerClient",
    "Session",
    "build_session",
    "create_session",
    "ToolExecutor",
]
