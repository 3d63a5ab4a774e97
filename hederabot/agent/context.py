"""
Prompt Context
==============

Builds the two conversations the agent sends to the reasoner:

1. Decision: which tool (if any) answers the user's request?
2. Formatting: turn the raw tool result into a reply for the user.

Both are a system message followed by a single user message. Order
matters: the reasoner reads the system rules first.

This module also knows how to spot a Hedera transaction ID in a tool
result and build the explorer link for it, so the final reply always
carries the link even when the model forgets to add one.
"""

import json
import re
from dataclasses import dataclass
from typing import Any

from hederabot.tools import ToolRegistry
from hederabot.utils.logger import Logger

logger = Logger("Context")

SYSTEM = "system"
USER = "user"
ASSISTANT = "assistant"

EXPLORER_URLS = {
    "mainnet": "https://hederaexplorer.io/search-details/transaction/",
    "testnet": "https://testnet.hederaexplorer.io/search-details/transaction/",
    "previewnet": "https://previewnet.hederaexplorer.io/search-details/transaction/",
}

# 0.0.1234@1700000000.123456789 (SDK form) or 0.0.1234-1700000000-123456789 (mirror node form)
TRANSACTION_ID_PATTERN = re.compile(r"\b\d+\.\d+\.\d+(?:@\d+\.\d+|-\d+-\d+)\b")


@dataclass(frozen=True)
class Message:
    """
    One role-tagged chat message.

    Attributes:
        role: "system", "user" or "assistant"
        content: The message text
    """
    role: str
    content: str

    def to_dict(self) -> dict:
        """Format for the chat completions API."""
        return {"role": self.role, "content": self.content}


def compose_user_turn(user_text: str, account_id: str | None = None) -> str:
    """
    Append caller context to the user's text.

    Example:
        compose_user_turn("What's my balance?", "0.0.1234")
        # "What's my balance?\\n\\nAccount ID: 0.0.1234"
    """
    if not account_id:
        return user_text
    return f"{user_text}\n\nAccount ID: {account_id}"


def explorer_url_for(network: str) -> str:
    """Base URL of the transaction explorer for a network (testnet if unknown)."""
    return EXPLORER_URLS.get(network, EXPLORER_URLS["testnet"])


def serialize_result(result: Any) -> str:
    """Serialize a raw tool result the way it is shown to the reasoner."""
    return json.dumps(result, default=str)


def find_transaction_id(result: Any) -> str | None:
    """
    Find the first Hedera transaction ID in a tool result.

    Args:
        result: Raw tool result (string, dict, list...)

    Returns:
        The transaction ID as written in the result, or None
    """
    text = result if isinstance(result, str) else serialize_result(result)
    match = TRANSACTION_ID_PATTERN.search(text)
    return match.group(0) if match else None


def explorer_line(transaction_id: str, explorer_url: str) -> str:
    return f"Explorer: {explorer_url}{transaction_id}"


class PromptBuilder:
    """
    Builds decision and formatting conversations for one registry.

    Example:
        prompts = PromptBuilder(registry, explorer_url_for("testnet"))

        messages = prompts.decision_messages("What's my balance?")
        raw = await reasoner.complete(messages)
    """

    DECISION_SYSTEM_PROMPT = """You are a Hedera blockchain assistant. Analyze the user's request and determine:

1. If a tool is needed, respond with JSON: {{"toolName": "tool_name", "parameters": {{...}}}}
2. If no tool is needed, respond with your answer directly

Available tools:
{tools}

Examples:
{examples}

Return ONLY JSON for tool calls, or plain text for general responses."""

    FORMAT_SYSTEM_PROMPT = """You are a Hedera blockchain assistant. Format the tool result into a clear, human-readable response.

For balance results: Show the balance clearly
For transfer results: Show transaction ID and status
For errors: Explain what went wrong

If a transaction ID is present, append an explorer link on a new line using this format:
Explorer: {explorer_url}<TRANSACTION_ID>

Be concise and helpful."""

    FORMAT_USER_PROMPT = """User asked: "{user_input}"
Tool used: {tool_name}
Tool result: {tool_result}

Please format this into a clear response for the user."""

    GREETING_EXAMPLE = (
        '- "Hello" → "Hello! I can help you check HBAR balances and send transfers."'
    )

    def __init__(self, registry: ToolRegistry, explorer_url: str = EXPLORER_URLS["testnet"]):
        self.registry = registry
        self.explorer_url = explorer_url

    def _examples(self) -> str:
        lines = []
        for tool in self.registry.get_all():
            if tool.example is None:
                continue
            request, params = tool.example
            call = json.dumps({"toolName": tool.name, "parameters": params})
            lines.append(f'- "{request}" → {call}')
        lines.append(self.GREETING_EXAMPLE)
        return "\n".join(lines)

    def decision_system_prompt(self) -> str:
        tools = "\n".join(self.registry.describe()) or "- (no tools available)"
        return self.DECISION_SYSTEM_PROMPT.format(tools=tools, examples=self._examples())

    def decision_messages(self, user_turn: str) -> list[Message]:
        """System rules listing the tools, then the user's request."""
        return [
            Message(SYSTEM, self.decision_system_prompt()),
            Message(USER, user_turn),
        ]

    def format_messages(self, user_turn: str, tool_name: str, result: Any) -> list[Message]:
        """System presentation rules, then the request, tool name and raw result."""
        system = self.FORMAT_SYSTEM_PROMPT.format(explorer_url=self.explorer_url)
        user = self.FORMAT_USER_PROMPT.format(
            user_input=user_turn,
            tool_name=tool_name,
            tool_result=serialize_result(result),
        )
        return [Message(SYSTEM, system), Message(USER, user)]

    def ensure_explorer_link(self, text: str, result: Any) -> str:
        """
        Append the explorer line for a transaction in the result, if missing.

        Text without a transaction in the result, or that already carries
        the exact line, is returned untouched.
        """
        transaction_id = find_transaction_id(result)
        if transaction_id is None:
            return text

        line = explorer_line(transaction_id, self.explorer_url)
        if line in text:
            return text

        logger.debug(f"Appending explorer link for {transaction_id}")
        return f"{text.rstrip()}\n{line}"
