"""
Error Types
===========

Every fault the bot can raise, in one place.

Only reasoner failures are fatal to a dispatch call. Capability failures
are turned into result strings by the ToolExecutor so the user still gets
a plain-language explanation.

Hierarchy:
    HederaBotError
    ├── ReasonerUnavailable      (fatal, propagates to the caller)
    │   └── ReasonerTimeout
    └── CapabilityFault          (absorbed by the executor)
        ├── CapabilityNotFound
        └── LedgerError
"""

from typing import Any


class HederaBotError(Exception):
    """Base class for all bot errors."""


class ReasonerUnavailable(HederaBotError):
    """
    The remote reasoner could not produce a completion.

    Attributes:
        status_code: HTTP status returned upstream, if any
        payload: The upstream error body, if any
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        payload: Any = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class ReasonerTimeout(ReasonerUnavailable):
    """The reasoner did not answer within the configured timeout."""


class CapabilityFault(HederaBotError):
    """A capability failed while being resolved or invoked."""


class CapabilityNotFound(CapabilityFault):
    """No capability is registered under the requested action name."""

    def __init__(self, action_name: str):
        super().__init__(f"Tool {action_name} not found")
        self.action_name = action_name


class LedgerError(CapabilityFault):
    """The ledger (mirror node or transfer backend) rejected a request."""
