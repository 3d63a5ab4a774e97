"""
Hedera Ledger Tools
===================

Tools for reading and moving HBAR on the Hedera network.

These tools allow the agent to:
- Check the HBAR balance of an account
- Look up account details
- Transfer HBAR (when a transfer backend is supplied)

Hedera API Notes:
- Reads go to the public mirror node REST API with httpx
- Balances come back in tinybars (1 HBAR = 100,000,000 tinybars)
- Signing and submitting transactions belongs to the ledger client, so
  transfers are delegated to an injected TransferSubmitter

Each tool raises LedgerError on bad input or upstream failure; the
ToolExecutor turns that into an "Error: ..." result.
"""

import re
from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any, Awaitable, Callable

import httpx

from hederabot.errors import LedgerError
from hederabot.tools import Capability
from hederabot.utils.logger import Logger

logger = Logger("HederaTools")

TINYBARS_PER_HBAR = Decimal(100_000_000)
SMALLEST_HBAR = Decimal("0.00000001")

ACCOUNT_ID_PATTERN = re.compile(r"^\d+\.\d+\.\d+$")


@dataclass(frozen=True)
class LedgerCredentials:
    """
    The operator account a session acts as.

    Attributes:
        account_id: 0.0.xxxx operator account
        private_key: Key used by the transfer backend (never logged)
    """
    account_id: str | None
    private_key: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class HbarTransfer:
    """One recipient line of a transfer."""
    account_id: str
    amount: Decimal  # HBAR


# Signs and submits a transfer, returning e.g. {"status": "SUCCESS", "transactionId": "..."}
TransferSubmitter = Callable[[LedgerCredentials, list[HbarTransfer], "str | None"], Awaitable[Any]]


def tinybars_to_hbar(tinybars: int) -> str:
    """Render a tinybar amount as a plain HBAR decimal string."""
    return format(Decimal(tinybars) / TINYBARS_PER_HBAR, "f")


def _validate_account_id(account_id: Any) -> str:
    if not isinstance(account_id, str) or not ACCOUNT_ID_PATTERN.match(account_id.strip()):
        raise LedgerError(f"Invalid account ID: {account_id!r} (expected shard.realm.num, e.g. 0.0.1234)")
    return account_id.strip()


class MirrorNodeClient:
    """
    Read-only client for the Hedera mirror node REST API.

    Example:
        mirror = MirrorNodeClient("https://testnet.mirrornode.hedera.com")
        account = await mirror.get_account("0.0.1234")
        await mirror.aclose()
    """

    def __init__(
        self,
        base_url: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(timeout=timeout)

    async def _get(self, endpoint: str) -> dict:
        url = f"{self.base_url}{endpoint}"

        try:
            response = await self.client.get(url, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            raise LedgerError(f"Mirror node request failed: {e}") from e

        if response.status_code == 404:
            raise LedgerError(f"Not found on the mirror node: {endpoint}")

        if response.status_code >= 400:
            logger.error(f"Mirror node error: {response.status_code} - {response.text}")
            raise LedgerError(f"Mirror node returned HTTP {response.status_code}")

        return response.json()

    async def get_account(self, account_id: str) -> dict:
        """Fetch the /api/v1/accounts/{id} record."""
        return await self._get(f"/api/v1/accounts/{account_id}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()


class HederaToolkit:
    """
    Builds the ledger tools for one set of credentials.

    Example:
        toolkit = HederaToolkit(mirror, LedgerCredentials("0.0.1234", key))
        registry = ToolRegistry(toolkit.get_tools())
    """

    def __init__(
        self,
        mirror: MirrorNodeClient,
        credentials: LedgerCredentials,
        transfer_submitter: TransferSubmitter | None = None
    ):
        self.mirror = mirror
        self.credentials = credentials
        self.transfer_submitter = transfer_submitter

    def _target_account(self, params: dict) -> str:
        account_id = params.get("accountId") or self.credentials.account_id
        if not account_id:
            raise LedgerError("No account ID given and no default account is configured")
        return _validate_account_id(account_id)

    # ==========================================================================
    # Tool: HBAR Balance
    # ==========================================================================

    async def get_hbar_balance(self, params: dict) -> dict:
        """Current HBAR balance of the given (or operator) account."""
        account_id = self._target_account(params)
        account = await self.mirror.get_account(account_id)

        tinybars = (account.get("balance") or {}).get("balance")
        if tinybars is None:
            raise LedgerError(f"Mirror node returned no balance for {account_id}")

        return {"accountId": account_id, "hbars": tinybars_to_hbar(tinybars)}

    # ==========================================================================
    # Tool: Account Details
    # ==========================================================================

    async def get_account(self, params: dict) -> dict:
        """Account details: balance, EVM address, memo, key type."""
        account_id = self._target_account(params)
        account = await self.mirror.get_account(account_id)

        balance = account.get("balance") or {}
        key = account.get("key") or {}

        return {
            "accountId": account.get("account", account_id),
            "hbars": tinybars_to_hbar(balance.get("balance") or 0),
            "evmAddress": account.get("evm_address"),
            "memo": account.get("memo", ""),
            "deleted": bool(account.get("deleted", False)),
            "keyType": key.get("_type"),
            "balanceTimestamp": balance.get("timestamp"),
        }

    # ==========================================================================
    # Tool: Transfer HBAR
    # ==========================================================================

    def _parse_transfers(self, params: dict) -> list[HbarTransfer]:
        transfers = params.get("transfers")
        if not isinstance(transfers, list) or not transfers:
            raise LedgerError('Transfers are required: [{"accountId": "0.0.1234", "amount": 10}]')

        parsed = []
        for line in transfers:
            if not isinstance(line, dict):
                raise LedgerError(f"Invalid transfer entry: {line!r}")

            account_id = _validate_account_id(line.get("accountId"))
            amount = line.get("amount")
            if isinstance(amount, bool) or not isinstance(amount, (int, float, str)):
                raise LedgerError(f"Invalid amount for {account_id}: {amount!r}")

            try:
                value = Decimal(str(amount))
                if not value.is_finite() or value <= 0:
                    raise LedgerError(f"Amount for {account_id} must be positive, got {amount}")
                if value != value.quantize(SMALLEST_HBAR, rounding=ROUND_DOWN):
                    raise LedgerError(f"Amount for {account_id} has more than 8 decimal places")
            except InvalidOperation:
                raise LedgerError(f"Invalid amount for {account_id}: {amount!r}")

            parsed.append(HbarTransfer(account_id=account_id, amount=value))

        return parsed

    async def transfer_hbar(self, params: dict) -> Any:
        """Validate the transfer lines, then hand them to the transfer backend."""
        if self.transfer_submitter is None:
            raise LedgerError("Transfers are not enabled for this session")
        if not self.credentials.account_id:
            raise LedgerError("No operator account is configured to send from")

        transfers = self._parse_transfers(params)
        memo = params.get("transactionMemo")

        total = sum((t.amount for t in transfers), Decimal(0))
        logger.info(f"Submitting transfer of {total} HBAR to {len(transfers)} account(s)")

        return await self.transfer_submitter(self.credentials, transfers, memo)

    def get_tools(self) -> list[Capability]:
        """The tools for this session; the transfer tool only with a backend."""
        tools = [
            Capability(
                name="get_hbar_balance_query_tool",
                description="Check HBAR balance (no parameters needed)",
                execute=self.get_hbar_balance,
                parameters={
                    "type": "object",
                    "properties": {"accountId": {"type": "string"}},
                },
                example=("What's my balance?", {}),
            ),
            Capability(
                name="get_account_query_tool",
                description='Get account details (optional parameters: {"accountId": "0.0.xxxx"})',
                execute=self.get_account,
                parameters={
                    "type": "object",
                    "properties": {"accountId": {"type": "string"}},
                },
                example=("Show details for 0.0.1234", {"accountId": "0.0.1234"}),
            ),
        ]

        if self.transfer_submitter is not None:
            tools.append(Capability(
                name="transfer_hbar_tool",
                description=(
                    'Transfer HBAR (requires parameters: '
                    '{"transfers": [{"accountId": "0.0.1234", "amount": 10}]})'
                ),
                execute=self.transfer_hbar,
                parameters={
                    "type": "object",
                    "properties": {
                        "transfers": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "accountId": {"type": "string"},
                                    "amount": {"type": "number"},
                                },
                                "required": ["accountId", "amount"],
                            },
                        },
                        "transactionMemo": {"type": "string"},
                    },
                    "required": ["transfers"],
                },
                example=(
                    "Transfer 10 HBAR to 0.0.800",
                    {"transfers": [{"accountId": "0.0.800", "amount": 10}]},
                ),
            ))

        return tools
