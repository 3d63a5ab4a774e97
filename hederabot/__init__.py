"""
Hedera Assistant
================

A natural-language assistant for the Hedera ledger, driven by a remote
model (nilAI) that has no native function calling.

This package provides:
- Agent: decide → execute one tool → format, in a single pipeline
- Ledger tools for balances, account details and HBAR transfers
- Front ends: CLI, HTTP API and Slack bot
"""

__version__ = "1.0.0"
