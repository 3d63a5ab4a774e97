"""
Decision Parsing
================

The reasoner has no function calling, so it is asked to answer with
either a JSON object:

    {"toolName": "transfer_hbar_tool", "parameters": {...}}

or plain prose. parse_decision() turns its reply into exactly one of
ActionIntent or DirectAnswer. It never raises: anything that is not a
usable JSON object is a direct answer, returned word for word. No
attempt is made to dig JSON out of surrounding prose.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class ActionIntent:
    """
    The one tool the reasoner chose, with its parameters.

    Attributes:
        action_name: Registered tool name
        parameters: Parameters exactly as the reasoner wrote them
    """
    action_name: str
    parameters: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DirectAnswer:
    """A reply that needs no tool; shown to the user unchanged."""
    text: str


Decision = Union[ActionIntent, DirectAnswer]


def parse_decision(raw: str) -> Decision:
    """
    Classify a decision-stage reply.

    Args:
        raw: Reply text from the reasoner

    Returns:
        ActionIntent when the trimmed reply is a JSON object with a non-empty
        string "toolName" (and "parameters" absent, null, or an object);
        otherwise DirectAnswer(raw)
    """
    try:
        parsed = json.loads(raw.strip())
    except ValueError:
        return DirectAnswer(raw)

    if not isinstance(parsed, dict):
        return DirectAnswer(raw)

    tool_name = parsed.get("toolName")
    if not isinstance(tool_name, str) or not tool_name:
        return DirectAnswer(raw)

    parameters = parsed.get("parameters")
    if parameters is None:
        parameters = {}
    elif not isinstance(parameters, dict):
        return DirectAnswer(raw)

    return ActionIntent(action_name=tool_name, parameters=parameters)
