"""
Utilities Module
================

Common utilities shared across the application:
- logger: Context-tagged logging with levels
- config: Centralized configuration management
"""

from hederabot.utils.logger import Logger
from hederabot.utils.config import get_config, Config

__all__ = ["Logger", "get_config", "Config"]
