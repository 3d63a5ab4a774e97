"""
Configuration Management
========================

All environment variables are read and validated here, once.

The dispatch pipeline itself never reads the environment: front ends call
get_config() and pass the pieces they need into create_session(). That
keeps the pipeline testable with hand-built configs.

Usage:
    from hederabot.utils.config import get_config

    config = get_config()
    print(config.nilai.model)
    print(config.hedera.network)
"""

import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv

DEFAULT_MODEL = "meta-llama/Llama-3.1-8B-Instruct"

# Public mirror nodes, keyed by network name
MIRROR_NODES = {
    "mainnet": "https://mainnet-public.mirrornode.hedera.com",
    "testnet": "https://testnet.mirrornode.hedera.com",
    "previewnet": "https://previewnet.mirrornode.hedera.com",
}


def _required(name: str) -> str:
    """
    Get a required environment variable.

    Raises:
        ValueError: If the variable is not set
    """
    value = os.getenv(name)
    if not value:
        raise ValueError(
            f"Missing required environment variable: {name}\n"
            f"Please ensure {name} is set in your .env file."
        )
    return value


def _optional(name: str, default: str) -> str:
    return os.getenv(name) or default


def _optional_int(name: str, default: int) -> int:
    """Get an integer variable, falling back to the default when unset or invalid."""
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        print(f"Warning: {name} is not a valid integer, using default: {default}")
        return default


def _optional_float(name: str, default: float) -> float:
    """Get a float variable, falling back to the default when unset or invalid."""
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        print(f"Warning: {name} is not a valid number, using default: {default}")
        return default


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class NilaiConfig:
    """Remote reasoner (nilAI, OpenAI-compatible) configuration."""
    api_key: str
    base_url: str          # e.g. https://nilai-xxxx.nillion.network/v1
    model: str
    timeout_seconds: float


@dataclass(frozen=True)
class HederaConfig:
    """Ledger configuration. Credentials are session defaults, overridable per request."""
    account_id: str | None    # 0.0.xxxx operator account
    private_key: str | None   # Passed to the transfer backend, never logged
    network: str              # mainnet | testnet | previewnet
    mirror_node_url: str
    tool_timeout_seconds: float


@dataclass(frozen=True)
class SlackConfig:
    """Slack tokens (only needed for the Slack front end)."""
    bot_token: str | None
    app_token: str | None
    signing_secret: str | None

    @property
    def configured(self) -> bool:
        return bool(self.bot_token and self.app_token and self.signing_secret)


@dataclass(frozen=True)
class ServerConfig:
    """HTTP front end configuration."""
    host: str
    port: int


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

        config = get_config()
        config.nilai.base_url
        config.hedera.account_id
    """
    nilai: NilaiConfig
    hedera: HederaConfig
    slack: SlackConfig
    server: ServerConfig

    def with_credentials(
        self,
        account_id: str | None = None,
        private_key: str | None = None
    ) -> "Config":
        """Copy of this config with request-scoped ledger credentials applied."""
        hedera = replace(
            self.hedera,
            account_id=account_id or self.hedera.account_id,
            private_key=private_key or self.hedera.private_key,
        )
        return replace(self, hedera=hedera)


def load_config() -> Config:
    """
    Load and validate all configuration from environment.

    Raises:
        ValueError: If required configuration is missing or the network is unknown
    """
    load_dotenv()

    network = _optional("HEDERA_NETWORK", "testnet").lower()
    if network not in MIRROR_NODES:
        raise ValueError(
            f"Unknown HEDERA_NETWORK '{network}'. "
            f"Expected one of: {', '.join(MIRROR_NODES)}"
        )

    return Config(
        nilai=NilaiConfig(
            api_key=_required("NILAI_API_KEY"),
            base_url=_required("NILAI_BASE_URL").rstrip("/"),
            model=_optional("NILAI_MODEL", DEFAULT_MODEL),
            timeout_seconds=_optional_float("NILAI_TIMEOUT_SECONDS", 60.0),
        ),
        hedera=HederaConfig(
            account_id=os.getenv("HEDERA_ACCOUNT_ID"),
            private_key=os.getenv("HEDERA_PRIVATE_KEY"),
            network=network,
            mirror_node_url=_optional("HEDERA_MIRROR_NODE_URL", MIRROR_NODES[network]).rstrip("/"),
            tool_timeout_seconds=_optional_float("TOOL_TIMEOUT_SECONDS", 30.0),
        ),
        slack=SlackConfig(
            bot_token=os.getenv("SLACK_BOT_TOKEN"),
            app_token=os.getenv("SLACK_APP_TOKEN"),
            signing_secret=os.getenv("SLACK_SIGNING_SECRET"),
        ),
        server=ServerConfig(
            host=_optional("HOST", "127.0.0.1"),
            port=_optional_int("PORT", 3000),
        ),
    )


# ==============================================================================
# Singleton
# ==============================================================================

_config_instance: Config | None = None


def get_config() -> Config:
    """Get the configuration, loading it on first access."""
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration (used by tests)."""
    global _config_instance
    _config_instance = None
