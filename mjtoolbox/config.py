"""
Project-wide configuration and defaults.

This module defines the settings shared by the CLI, the prompt session
and the translation backends. A few of them can be overridden through
environment variables so the CLI can be pointed at another provider
without touching code.

Module Contents:
    APP_NAME: Application name for display purposes
    CONFIG_DIR: Per-user directory holding stored credentials
    KEYS_FILE: JSON fallback store used when no OS keychain is available
    DEFAULT_BACKEND: Translation backend used when none is requested
    DEFAULT_SOURCE_LANG: Source language passed to providers ("auto" detects)
    DEFAULT_TARGET_LANG: Language descriptions are translated into
    REQUEST_TIMEOUT: Seconds to wait on a provider before giving up

Environment overrides:
    MJTOOLBOX_BACKEND, MJTOOLBOX_TARGET_LANG, MJTOOLBOX_TIMEOUT

Example:
    >>> from mjtoolbox.config import DEFAULT_BACKEND, DEFAULT_TARGET_LANG
    >>> print(f"Translating with {DEFAULT_BACKEND} into {DEFAULT_TARGET_LANG}")
"""

import os
from pathlib import Path

# Application name for display and identification
APP_NAME = "MJ-Toolbox"

# Per-user configuration directory (credentials fallback lives here)
CONFIG_DIR = Path.home() / ".mjtoolbox"

# JSON key store used when keyring is unavailable
KEYS_FILE = CONFIG_DIR / "keys.json"

# Translation defaults
DEFAULT_BACKEND = os.getenv("MJTOOLBOX_BACKEND", "google")
DEFAULT_SOURCE_LANG = "auto"
DEFAULT_TARGET_LANG = os.getenv("MJTOOLBOX_TARGET_LANG", "zh")

# HTTP timeout for translation providers, in seconds
REQUEST_TIMEOUT = float(os.getenv("MJTOOLBOX_TIMEOUT", "15"))
