"""
Credential management for translation providers.

Provides storage and retrieval of provider credentials using:
1. Environment variables (preferred for CI/production)
2. OS keychain via keyring (secure local storage)
3. Local config file (fallback)

Usage:
    from mjtoolbox.keys import KeyManager

    km = KeyManager()
    km.set_key("baidu-appid", "2022...")
    km.set_key("baidu-secret", "RvqQ...")
    appid = km.get_key("baidu-appid")
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import keyring
from keyring.backends.fail import Keyring as FailKeyring
from keyring.errors import KeyringError

from mjtoolbox.config import KEYS_FILE

logger = logging.getLogger(__name__)


# Supported credentials and their env var names
SERVICES = {
    "baidu-appid": "BAIDU_APP_ID",
    "baidu-secret": "BAIDU_SECRET_KEY",
}


@dataclass
class KeyInfo:
    """Information about a stored credential."""
    service: str
    is_set: bool
    source: str  # 'env', 'keyring', 'config', 'none'
    masked_value: str


class KeyManager:
    """Manage provider credentials.

    Priority order for key retrieval:
    1. Environment variable
    2. OS keychain (via keyring)
    3. Local config file (~/.mjtoolbox/keys.json)
    """

    SERVICE_NAME = "MJ-Toolbox"

    def __init__(self, config_file: Path | None = None, use_keyring: bool = True):
        self.config_file = Path(config_file) if config_file else KEYS_FILE
        self._keyring_available = use_keyring and self._check_keyring()

    @staticmethod
    def _check_keyring() -> bool:
        """Check if a usable keyring backend is installed."""
        try:
            backend = keyring.get_keyring()
        except KeyringError:
            return False
        return not isinstance(backend, FailKeyring)

    def _env_var(self, service: str) -> str:
        return SERVICES.get(service, service.upper().replace("-", "_"))

    def _read_config(self) -> dict:
        if not self.config_file.exists():
            return {}
        try:
            return json.loads(self.config_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable key file {self.config_file}: {e}")
            return {}

    def _write_config(self, config: dict) -> None:
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(json.dumps(config, indent=2), encoding="utf-8")
        self.config_file.chmod(0o600)

    def _lookup(self, service: str) -> tuple[Optional[str], str]:
        """Return (value, source) for the first store that has the key."""
        if env_val := os.getenv(self._env_var(service)):
            return env_val, "env"

        if self._keyring_available:
            try:
                if key := keyring.get_password(self.SERVICE_NAME, service):
                    return key, "keyring"
            except KeyringError as e:
                logger.debug(f"Keyring lookup failed for {service}: {e}")

        if key := self._read_config().get(service):
            return key, "config"

        return None, "none"

    def get_key(self, service: str) -> Optional[str]:
        """Get the credential for a service.

        Args:
            service: Service name (baidu-appid, baidu-secret)

        Returns:
            Credential string or None if not found
        """
        value, _ = self._lookup(service.lower())
        return value

    def set_key(self, service: str, key: str, use_keyring: bool = True) -> str:
        """Store a credential.

        Returns:
            Storage location used ('keyring' or 'config')
        """
        service = service.lower()

        if use_keyring and self._keyring_available:
            try:
                keyring.set_password(self.SERVICE_NAME, service, key)
                return "keyring"
            except KeyringError as e:
                logger.warning(f"Keyring unavailable, falling back to {self.config_file}: {e}")

        config = self._read_config()
        config[service] = key
        self._write_config(config)
        return "config"

    def delete_key(self, service: str) -> bool:
        """Delete a stored credential from every store that holds it."""
        service = service.lower()
        deleted = False

        if self._keyring_available:
            try:
                keyring.delete_password(self.SERVICE_NAME, service)
                deleted = True
            except KeyringError:
                pass  # not stored there

        config = self._read_config()
        if service in config:
            del config[service]
            self._write_config(config)
            deleted = True

        return deleted

    def get_key_info(self, service: str) -> KeyInfo:
        service = service.lower()
        value, source = self._lookup(service)
        return KeyInfo(
            service=service,
            is_set=value is not None,
            source=source,
            masked_value=mask_key(value) if value else "",
        )

    def list_keys(self) -> list[KeyInfo]:
        """List all known services and their key status."""
        return [self.get_key_info(service) for service in SERVICES]


def mask_key(key: str) -> str:
    """Mask a key for display (show first 4 and last 4 chars)."""
    if len(key) <= 12:
        return "*" * len(key)
    return f"{key[:4]}...{key[-4:]}"

