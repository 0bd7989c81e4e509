# =============================================================================
# core/config.py  —  Environment-driven settings
# =============================================================================
#
# Every setting is an environment variable, read at CALL time (not import
# time), so tests and long-running hosts can flip them without reloading.
# The entry point (main.py) loads a .env file with python-dotenv first.
#
#   TOOLFORM_ENV=production   → validator becomes a no-op (default: development)
#   TOOLFORM_STRICT=true      → collectors raise on schema issues by default
#   TOOLFORM_LOG_LEVEL=DEBUG  → log level used by the demo tool server
# =============================================================================

import os

# Prefix stamped on every validator message and development warning.
LOG_PREFIX = "[toolform]"


def is_production() -> bool:
    """True when TOOLFORM_ENV says we are running a production build."""
    return os.environ.get("TOOLFORM_ENV", "development").lower() == "production"


def strict_by_default() -> bool:
    """Default `strict` flag for collectors that don't pass one explicitly."""
    return os.environ.get("TOOLFORM_STRICT", "false").lower() == "true"


def log_level() -> str:
    return os.environ.get("TOOLFORM_LOG_LEVEL", "INFO").upper()
