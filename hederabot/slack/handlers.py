"""
Slack Event Handlers
====================

Routes Slack events to the agent.

Event Types:
- app_mention: Someone mentions the bot in a channel (reply in thread)
- message.im: Direct messages to the bot
- /hbar: Slash command with help and status

Every Slack user talks to the same default session, i.e. the ledger
account from HEDERA_ACCOUNT_ID.
"""

import re
from typing import TYPE_CHECKING

from slack_bolt.async_app import AsyncApp

from hederabot.errors import ReasonerUnavailable
from hederabot.tools import ToolRegistry
from hederabot.utils.logger import Logger

if TYPE_CHECKING:
    from hederabot.agent.session import Session

logger = Logger("Handlers")

MENTION_PATTERN = re.compile(r"<@[A-Z0-9]+>")

FAILURE_REPLY = "Sorry, I encountered an error processing your request."
UNAVAILABLE_REPLY = "Sorry, the assistant model is unavailable right now. Please try again later."

HELP_TEXT = """*Hedera Assistant*

*Commands:*
- `/hbar help` - Show this help message
- `/hbar status` - Check bot status
"""


def help_text(registry: ToolRegistry) -> str:
    """Help message whose examples cover only the tools this session has."""
    examples = "\n".join(f"- \"{request}\"" for request in registry.example_requests())
    return f"{HELP_TEXT}\n*Examples:*\n{examples}\n"


class SlackHandlers:
    """
    Slack event handlers bound to one session.

    Example:
        handlers = SlackHandlers(session)
        await handlers.handle_message(event, say)
    """

    def __init__(self, session: "Session"):
        self.session = session

    async def _reply(self, text: str) -> str:
        try:
            result = await self.session.dispatch(text)
            return result.content
        except ReasonerUnavailable as e:
            logger.error("Reasoner unavailable", e)
            return UNAVAILABLE_REPLY
        except Exception as e:
            logger.error("Error dispatching Slack message", e)
            return FAILURE_REPLY

    async def handle_mention(self, event: dict, say) -> None:
        """Answer an @mention in the thread it came from."""
        text = MENTION_PATTERN.sub("", event.get("text", "")).strip()
        thread_ts = event.get("thread_ts") or event.get("ts")

        if not text:
            examples = ", ".join(self.session.registry.example_requests())
            await say(
                text=f"Hi! Ask me about your Hedera account, for example: {examples}",
                thread_ts=thread_ts
            )
            return

        logger.info(f"Mention from {event.get('user')} in {event.get('channel')}: {text[:50]}")
        await say(text=await self._reply(text), thread_ts=thread_ts)

    async def handle_message(self, event: dict, say) -> None:
        """Answer direct messages; ignore channel chatter, bots and edits."""
        if event.get("channel_type") != "im":
            return
        if event.get("bot_id") or event.get("subtype"):
            return

        text = event.get("text", "").strip()
        if not text:
            return

        logger.info(f"DM from {event.get('user')}: {text[:50]}")
        await say(text=await self._reply(text))

    async def handle_command(self, ack, command: dict, say) -> None:
        """Handle /hbar help and /hbar status."""
        await ack()

        text = command.get("text", "").strip().lower()

        if text == "help" or not text:
            await say(text=help_text(self.session.registry))
        elif text == "status":
            registry = self.session.registry
            await say(text=(
                "*Bot Status*\n"
                f"- Model: {self.session.agent.model}\n"
                f"- Network: {self.session.config.hedera.network}\n"
                f"- Account: {self.session.credentials.account_id or 'not configured'}\n"
                f"- Tools: {', '.join(registry.list_names())}"
            ))
        else:
            await say(text=f"Unknown command: `{text}`. Try `/hbar help`")


def register_handlers(app: AsyncApp, session: "Session") -> SlackHandlers:
    """
    Register all event handlers with the Slack app.

    Args:
        app: The Bolt app instance
        session: Session whose agent answers messages
    """
    handlers = SlackHandlers(session)

    async def on_mention(event, say):
        await handlers.handle_mention(event, say)

    async def on_message(event, say):
        await handlers.handle_message(event, say)

    async def on_command(ack, command, say):
        await handlers.handle_command(ack, command, say)

    app.event("app_mention")(on_mention)
    app.event("message")(on_message)
    app.command("/hbar")(on_command)

    logger.info("Registered Slack event handlers")
    return handlers
