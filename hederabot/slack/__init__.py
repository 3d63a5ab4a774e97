"""
Slack Integration
=================

Optional Slack front end:
- Bolt app and Socket Mode handler
- Event handlers that forward messages to the agent
"""

from hederabot.slack.app import create_slack_app, create_socket_handler
from hederabot.slack.handlers import SlackHandlers, register_handlers

__all__ = ["create_slack_app", "create_socket_handler", "SlackHandlers", "register_handlers"]
