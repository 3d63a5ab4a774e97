"""
Tool Executor
=============

Runs the single tool chosen by the decision stage.

The executor is where capability failures stop. Whatever happens, it
returns a value:

- Unknown tool name       → "Error: Tool <name> not found"
- Tool raised             → "Error: <exception message>"
- Tool took too long      → "Error: Tool <name> timed out after <n> seconds"
- Tool succeeded          → the tool's own result, untouched

That value goes on to the formatting stage, so the user always gets an
explanation in plain words instead of a stack trace.
"""

import asyncio
from typing import Any

from hederabot.agent.decision import ActionIntent
from hederabot.errors import CapabilityNotFound
from hederabot.tools import Capability, ToolRegistry
from hederabot.utils.logger import Logger

logger = Logger("ToolExecutor")


class ToolExecutor:
    """
    Executes one ActionIntent against a registry.

    Example:
        executor = ToolExecutor(registry, timeout=30)
        result = await executor.execute(
            ActionIntent("get_hbar_balance_query_tool", {})
        )
    """

    def __init__(self, registry: ToolRegistry, timeout: float | None = 30.0):
        """
        Args:
            registry: Tools available to this session
            timeout: Seconds a tool may run; None disables the limit
        """
        self.registry = registry
        self.timeout = timeout

    async def execute(self, intent: ActionIntent) -> Any:
        """
        Resolve and invoke the tool named by the intent.

        The parameters are passed exactly as extracted; any validation is
        the tool's own business.

        Returns:
            The tool result, or an "Error: ..." string
        """
        try:
            tool = self.registry.resolve(intent.action_name)
        except CapabilityNotFound as e:
            logger.warning(str(e), {"available": self.registry.list_names()})
            return f"Error: {e}"

        logger.info(f"Executing tool: {tool.name}")

        try:
            result = await asyncio.wait_for(self._invoke(tool, intent.parameters), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Tool {tool.name} timed out after {self.timeout} seconds")
            return f"Error: Tool {tool.name} timed out after {self.timeout:g} seconds"

        return result

    async def _invoke(self, tool: Capability, parameters: dict[str, Any]) -> Any:
        # Only the wait_for deadline may surface as a timeout in execute()
        try:
            result = await tool.invoke(parameters)
        except Exception as e:
            logger.warning(f"Tool {tool.name} failed: {e}", {"error_type": type(e).__name__})
            return f"Error: {e}"

        logger.debug(f"Tool {tool.name} succeeded")
        return result
