"""
Slack Bolt App
==============

Creates the Slack Bolt application and its Socket Mode handler.

Socket Mode needs no public URL, so the bot can run next to the CLI on a
laptop. The Slack front end is optional: it is only started by
`hederabot slack` and only then are the SLACK_* variables required.
"""

from slack_bolt.async_app import AsyncApp
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler

from hederabot.utils.config import SlackConfig
from hederabot.utils.logger import Logger

logger = Logger("SlackApp")


def _require_slack(slack: SlackConfig) -> None:
    if not slack.configured:
        raise ValueError(
            "Slack is not configured. Set SLACK_BOT_TOKEN, SLACK_APP_TOKEN "
            "and SLACK_SIGNING_SECRET in your .env file."
        )


def create_slack_app(slack: SlackConfig) -> AsyncApp:
    """
    Create the Bolt app.

    Raises:
        ValueError: If the Slack tokens are missing
    """
    _require_slack(slack)

    app = AsyncApp(
        token=slack.bot_token,
        signing_secret=slack.signing_secret,
    )

    logger.info("Slack Bolt app created")
    return app


async def create_socket_handler(app: AsyncApp, slack: SlackConfig) -> AsyncSocketModeHandler:
    """Create a Socket Mode handler for the app."""
    _require_slack(slack)

    handler = AsyncSocketModeHandler(app=app, app_token=slack.app_token)

    logger.info("Socket Mode handler created")
    return handler
