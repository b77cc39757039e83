from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Protocol

try:
    import tomllib
except ImportError:  # python < 3.11
    import tomli as tomllib

from npl_deploy.config import CREDENTIALS_FILE_ENV_VAR, PASSWORD_ENV_VAR

log = logging.getLogger(__name__)


class SecretStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def store(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


def get_credentials_path() -> Path:
    credentials_file = os.getenv(CREDENTIALS_FILE_ENV_VAR)
    if credentials_file:
        return Path(credentials_file).expanduser()

    config_home = os.getenv("XDG_CONFIG_HOME")
    base_dir = (
        Path(config_home).expanduser() if config_home else Path.home() / ".config"
    )
    return base_dir / "npl-deploy" / "credentials.toml"


class FileSecretStore:
    """Secrets kept in a user-only TOML file under a [passwords] table."""

    def __init__(self, path: Optional[Path] = None):
        self.path = path or get_credentials_path()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}

        with self.path.open("rb") as handle:
            data = tomllib.load(handle)

        passwords = data.get("passwords", {})
        return {k: v for k, v in passwords.items() if isinstance(v, str)}

    def _write(self, passwords: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # JSON string escapes are valid TOML basic string escapes
        lines = ["[passwords]"]
        lines += [
            f"{json.dumps(key, ensure_ascii=False)} = {json.dumps(value, ensure_ascii=False)}"
            for key, value in sorted(passwords.items())
        ]
        self.path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            pass

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def store(self, key: str, value: str) -> None:
        passwords = self._read()
        passwords[key] = value
        self._write(passwords)

    def delete(self, key: str) -> None:
        passwords = self._read()
        if passwords.pop(key, None) is not None:
            self._write(passwords)


class CredentialManager:
    """Passwords keyed by base URL and username.

    The NPL_DEPLOY_PASSWORD environment variable takes precedence over the
    store so non-interactive runs need no stored secret.
    """

    def __init__(self, store: Optional[SecretStore] = None):
        self.store = store if store is not None else FileSecretStore()

    @staticmethod
    def credential_key(base_url: str, username: str) -> str:
        return f"{base_url}|{username}"

    def get_password(self, base_url: str, username: str) -> Optional[str]:
        password = os.getenv(PASSWORD_ENV_VAR)
        if password and password.strip():
            return password

        try:
            stored = self.store.get(self.credential_key(base_url, username))
        except (OSError, ValueError) as e:
            log.error(f"Failed to retrieve password: {e}")
            return None

        if isinstance(stored, str) and stored:
            return stored
        return None

    def store_password(self, base_url: str, username: str, password: str) -> None:
        try:
            self.store.store(self.credential_key(base_url, username), password)
        except (OSError, ValueError) as e:
            log.error(f"Failed to store password: {e}")
            raise

    def delete_password(self, base_url: str, username: str) -> None:
        try:
            self.store.delete(self.credential_key(base_url, username))
        except (OSError, ValueError) as e:
            log.error(f"Failed to delete password: {e}")
            raise
