"""
Capability Tools
================

Tools are the actions the assistant can take against the ledger.

The remote model has no native function calling, so tools are never sent
to it as schemas. Instead, their names and one-line descriptions are
written into the decision prompt, and the model answers with a JSON object
naming one of them.

How Tools Work:
1. Agent asks the model which tool (if any) fits the request
2. The executor looks the tool up in the registry by name
3. The tool runs with the parameters the model extracted
4. The raw result is handed back to the model for formatting

This module provides:
- Capability dataclass for defining tools
- ToolRegistry for managing the tools of one session
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from hederabot.errors import CapabilityNotFound
from hederabot.utils.logger import Logger

logger = Logger("Tools")


@dataclass(frozen=True)
class Capability:
    """
    A named action the agent can invoke.

    Attributes:
        name: Unique identifier for the tool (what the model must emit)
        description: One-line summary shown in the decision prompt
        execute: Function taking the parameter dict; may be sync or async
        parameters: JSON Schema for the parameters (advisory, not enforced here)
        example: Optional worked example as (user request, parameters)

    Example:
        async def get_balance(params: dict) -> dict:
            return {"hbars": "42"}

        tool = Capability(
            name="get_hbar_balance_query_tool",
            description="Check HBAR balance (no parameters needed)",
            execute=get_balance,
        )
    """
    name: str
    description: str
    execute: Callable[[dict], Any]
    parameters: dict = field(default_factory=lambda: {"type": "object", "properties": {}})
    example: tuple[str, dict] | None = None

    async def invoke(self, params: dict) -> Any:
        """
        Run the tool, awaiting the result if the tool is async.

        Args:
            params: Parameters exactly as extracted by the decision stage

        Returns:
            Whatever the tool returns
        """
        result = self.execute(params)
        if inspect.isawaitable(result):
            result = await result
        return result


class ToolRegistry:
    """
    The set of tools available to one session.

    A registry is built once, then frozen. Frozen registries are only read,
    so concurrent dispatch calls can share one without locking.

    Example:
        registry = ToolRegistry([balance_tool, transfer_tool])

        tool = registry.resolve("transfer_hbar_tool")
        names = registry.list_names()
    """

    def __init__(self, capabilities: Iterable[Capability] = (), freeze: bool = True):
        """
        Build a registry.

        Args:
            capabilities: Tools to register
            freeze: Freeze the registry once the tools are registered

        Raises:
            ValueError: If two tools share a name
        """
        self._tools: dict[str, Capability] = {}
        self._frozen = False

        for capability in capabilities:
            self.register(capability)

        if freeze:
            self.freeze()

    def register(self, capability: Capability) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If a tool with this name already exists
            RuntimeError: If the registry is frozen
        """
        if self._frozen:
            raise RuntimeError("Cannot register tools on a frozen registry")

        if capability.name in self._tools:
            raise ValueError(f"Tool '{capability.name}' is already registered")

        self._tools[capability.name] = capability
        logger.debug(f"Registered tool: {capability.name}")

    def freeze(self) -> None:
        """Stop accepting registrations."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, name: str) -> Capability:
        """
        Look up a tool by name.

        Raises:
            CapabilityNotFound: If no tool has this name
        """
        tool = self._tools.get(name)
        if tool is None:
            raise CapabilityNotFound(name)
        return tool

    def get_all(self) -> list[Capability]:
        """Get all registered tools."""
        return list(self._tools.values())

    def list_names(self) -> list[str]:
        """Get list of all tool names."""
        return list(self._tools.keys())

    def example_requests(self) -> list[str]:
        """Sample user requests taken from the tools' worked examples."""
        return [tool.example[0] for tool in self._tools.values() if tool.example is not None]

    def describe(self) -> list[str]:
        """One '- name: description' line per tool, for prompts."""
        return [f"- {tool.name}: {tool.description}" for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


__all__ = [
    "Capability",
    "ToolRegistry",
]
