"""Load deployment settings from a ``.env`` file."""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional
from urllib.parse import urlsplit

from dotenv import dotenv_values

from .errors import ConfigError

DEFAULT_KEYSTORE_PATH = Path(
    "./UTC--2025-01-14T11-02-41.636529300Z--0d518a4c445bbfad90c8382a051a91087d930253"
)
DEFAULT_RPC_TIMEOUT = 30.0
DEFAULT_RECEIPT_TIMEOUT = 120.0

URL_KEYS = ("DEPLOY_URL", "URL")
PASSWORD_KEYS = ("PASS_WALLET_OWNER", "PASSWORD")
# only HTTPProvider is wired up; websocket and IPC endpoints are not supported
SUPPORTED_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class DeployConfig:
    """Settings resolved once at startup and handed to the procedure."""

    rpc_url: str
    password: str = field(repr=False)
    keystore_path: Path = DEFAULT_KEYSTORE_PATH
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT

    def with_overrides(self, **changes: object) -> "DeployConfig":
        """Return a copy with every non-``None`` override applied."""

        return replace(self, **{key: value for key, value in changes.items() if value is not None})


def _first(values: Mapping[str, Optional[str]], keys: tuple[str, ...]) -> Optional[str]:
    for key in keys:
        value = values.get(key)
        if value:
            return value
    return None


def _parse_timeout(raw: Optional[str], name: str, default: float) -> float:
    if raw in (None, ""):
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def load_config(
    env_file: str | os.PathLike[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> DeployConfig:
    """Read the deployment configuration.

    Args:
        env_file: Path to the dotenv file. Defaults to ``.env`` in the current
            working directory.
        environ: Process environment whose values take precedence over the
            file. Defaults to :data:`os.environ`.

    Raises:
        ConfigError: If the file is missing, or the node URL or wallet
            password is absent or empty.
    """

    env_path = Path(env_file) if env_file is not None else Path.cwd() / ".env"
    if not env_path.is_file():
        raise ConfigError(f"env file not found at {env_path}")

    try:
        values: dict[str, Optional[str]] = dict(dotenv_values(env_path))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"cannot read env file {env_path}: {exc}") from exc

    if environ is None:
        environ = os.environ
    for key in URL_KEYS + PASSWORD_KEYS + ("KEYSTORE_PATH", "RPC_TIMEOUT", "RECEIPT_TIMEOUT"):
        if environ.get(key):
            values[key] = environ[key]

    rpc_url = _first(values, URL_KEYS)
    if not rpc_url or not rpc_url.strip():
        raise ConfigError(f"DEPLOY_URL is not set in {env_path}")
    scheme = urlsplit(rpc_url.strip()).scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        raise ConfigError(f"DEPLOY_URL must be an http(s) JSON-RPC endpoint, got scheme {scheme or 'none'!r}")

    password = _first(values, PASSWORD_KEYS)
    if not password:
        raise ConfigError(f"PASS_WALLET_OWNER is not set in {env_path}")

    keystore = values.get("KEYSTORE_PATH")
    return DeployConfig(
        rpc_url=rpc_url.strip(),
        password=password,
        keystore_path=Path(keystore) if keystore else DEFAULT_KEYSTORE_PATH,
        rpc_timeout=_parse_timeout(values.get("RPC_TIMEOUT"), "RPC_TIMEOUT", DEFAULT_RPC_TIMEOUT),
        receipt_timeout=_parse_timeout(
            values.get("RECEIPT_TIMEOUT"), "RECEIPT_TIMEOUT", DEFAULT_RECEIPT_TIMEOUT
        ),
    )


__all__ = [
    "DEFAULT_KEYSTORE_PATH",
    "DEFAULT_RECEIPT_TIMEOUT",
    "DEFAULT_RPC_TIMEOUT",
    "DeployConfig",
    "load_config",
]
