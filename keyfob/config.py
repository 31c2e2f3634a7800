"""
config.py - Constants, logging setup and account-file loading for keyfob.

Accounts are fixed at startup: one JSON file, read once, never written.

    {
      "strict": false,
      "accounts": [
        {"label": "Google", "secret": "JBSWY3DPEHPK3PXP"},
        {"label": "GitHub", "secret": "GEZDGNBVGY3TQOJQ"}
      ]
    }
"""

import json
import logging
import os

from keyfob import base32

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6           # display text is always exactly 6 digits
DEFAULT_TIME_STEP = 30       # TOTP period (seconds)
MAX_KEY_BYTES = 64           # decode buffer capacity (one SHA-1 block)
CLOCK_VALID_AFTER = 1_000_000_000   # 2001-09-09; anything earlier = never synced
DEBOUNCE_MS = 50             # Channel A settle window
DISPLAY_INTERVAL_MS = 250    # display recompute cadence
TICK_MS = 10                 # control loop poll period
SYNC_TIMEOUT_S = 10          # bounded wait for a trustworthy clock
ACCOUNTS_FILE = "accounts.json"
ACCOUNTS_ENV = "KEYFOB_ACCOUNTS"

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Startup configuration is missing or unusable."""


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )


def accounts_path(path: str = None) -> str:
    """Resolve the accounts file: explicit path, then $KEYFOB_ACCOUNTS, then default."""
    if path:
        return path
    return os.environ.get(ACCOUNTS_ENV, ACCOUNTS_FILE)


def load_account_entries(path: str = None) -> list:
    """
    Read the accounts file and return a list of (label, secret) pairs.

    Raises:
        ConfigError: file missing, not JSON, wrong shape, or empty list.
    """
    path = accounts_path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Accounts file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Accounts file is not valid JSON: {path}") from e

    if not isinstance(data, dict) or not isinstance(data.get("accounts"), list):
        raise ConfigError(f"{path}: expected an object with an 'accounts' list")

    strict = bool(data.get("strict", False))
    entries = []
    for i, item in enumerate(data["accounts"]):
        if not isinstance(item, dict):
            raise ConfigError(f"{path}: account #{i} is not an object")
        label = item.get("label")
        secret = item.get("secret")
        if not label or not secret:
            raise ConfigError(f"{path}: account #{i} needs both 'label' and 'secret'")
        if strict:
            try:
                base32.decode_strict(secret)
            except ValueError as e:
                raise ConfigError(f"{path}: account '{label}' has an invalid secret") from e
        entries.append((str(label), str(secret)))

    if not entries:
        raise ConfigError(f"{path}: no accounts configured")

    logger.info("Loaded %d account(s) from %s", len(entries), path)
    return entries
