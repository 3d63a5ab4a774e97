"""
Hedera Assistant - Main Entry Point
===================================

Command line front ends for the agent:

    hederabot                      interactive chat (same as `hederabot chat`)
    hederabot ask What's my balance?
    hederabot serve                HTTP API on HOST:PORT
    hederabot slack                Slack bot over Socket Mode

Or without installing:
    python -m hederabot.main ask "Show details for 0.0.1234"

All of them load configuration from the environment (.env), open one
session for HEDERA_ACCOUNT_ID and send every message through the same
dispatch pipeline.
"""

import argparse
import asyncio
import sys
from typing import Callable

from hederabot.agent.session import create_session
from hederabot.errors import HederaBotError
from hederabot.utils.config import Config, get_config
from hederabot.utils.logger import Logger

main_logger = Logger("Main")

EXIT_WORDS = {"exit", "quit"}
SEPARATOR = "─" * 50


async def ask_once(
    config: Config,
    text: str,
    session_factory: Callable = create_session
) -> int:
    """
    Answer a single question and print the reply.

    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    try:
        async with session_factory(config) as session:
            result = await session.dispatch(text)
    except HederaBotError as e:
        main_logger.error("Request failed", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(result.content)
    return 0


async def chat_loop(
    config: Config,
    session_factory: Callable = create_session,
    input_func: Callable[[str], str] = input
) -> None:
    """
    Interactive prompt. Type "exit" to quit; blank lines are ignored.

    A failed request prints an error and the prompt continues.
    """
    async with session_factory(config) as session:
        print("🤖 Hedera Blockchain Assistant")
        for request in session.registry.example_requests():
            print(f"💡 Try: {request}")
        print('📝 Type "exit" to quit\n')

        while True:
            try:
                user_input = await asyncio.to_thread(input_func, "You: ")
            except EOFError:
                break

            if user_input.strip().lower() in EXIT_WORDS:
                print("👋 Goodbye!")
                break

            if not user_input.strip():
                continue

            try:
                result = await session.dispatch(user_input)
                print(f"🤖 Assistant: {result.content}")
            except HederaBotError as e:
                main_logger.error("Request failed", e)
                print(f"❌ Error: {e}")

            print(f"\n{SEPARATOR}\n")


async def run_slack(config: Config) -> None:
    """Run the Slack front end until interrupted."""
    from hederabot.slack import create_slack_app, create_socket_handler, register_handlers

    app = create_slack_app(config.slack)

    async with create_session(config) as session:
        register_handlers(app, session)
        handler = await create_socket_handler(app, config.slack)

        main_logger.info("Hedera Assistant is running on Slack! Press Ctrl+C to stop.")
        try:
            await handler.start_async()
        finally:
            await handler.close_async()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hederabot",
        description="Natural-language assistant for the Hedera ledger",
    )
    commands = parser.add_subparsers(dest="command")

    commands.add_parser("chat", help="Interactive chat (default)")

    ask = commands.add_parser("ask", help="Answer one question and exit")
    ask.add_argument("text", nargs="+", help="The question")

    commands.add_parser("serve", help="Run the HTTP API")
    commands.add_parser("slack", help="Run the Slack bot")

    return parser


def run(argv: list[str] | None = None) -> int:
    """
    Synchronous entry point for the `hederabot` command.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    try:
        config = get_config()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == "ask":
            return asyncio.run(ask_once(config, " ".join(args.text).strip()))

        if args.command == "serve":
            from hederabot.web import serve
            serve(config)
            return 0

        if args.command == "slack":
            asyncio.run(run_slack(config))
            return 0

        asyncio.run(chat_loop(config))
        return 0

    except KeyboardInterrupt:
        return 0
    except ValueError as e:
        main_logger.error("Failed to start", e)
        return 1


if __name__ == "__main__":
    sys.exit(run())
