"""Decrypt the deployer keystore into an in-memory signing identity."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, TYPE_CHECKING

from eth_account import Account
from eth_utils import to_checksum_address

from .errors import KeystoreError

if TYPE_CHECKING:  # pragma: no cover - typing only
    from eth_account.signers.local import LocalAccount

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SigningIdentity:
    """Private key material and the address derived from it.

    The key lives only in process memory and is kept out of ``repr`` so it
    cannot leak through logging.
    """

    address: str
    private_key: bytes = field(repr=False)

    @property
    def account(self) -> "LocalAccount":
        return Account.from_key(self.private_key)


def _read_keystore(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise KeystoreError(f"keystore file not found: {path}") from exc
    except OSError as exc:
        raise KeystoreError(f"cannot read keystore file {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise KeystoreError(f"keystore file {path} is not valid JSON") from exc

    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise KeystoreError(f"keystore file {path} is not valid JSON") from exc
    if not isinstance(payload, Mapping) or not isinstance(payload.get("crypto", payload.get("Crypto")), Mapping):
        raise KeystoreError(f"keystore file {path} has no crypto section")
    return payload


def load_identity(keystore_path: str | os.PathLike[str], password: str) -> SigningIdentity:
    """Decrypt ``keystore_path`` with ``password``.

    Raises:
        KeystoreError: If the file is missing or unreadable, is not a keystore,
            or the password does not match.
    """

    path = Path(keystore_path)
    payload = _read_keystore(path)

    try:
        private_key = bytes(Account.decrypt(payload, password))
    except ValueError as exc:
        # eth-account reports a wrong password as "MAC mismatch"
        raise KeystoreError(f"failed to decrypt wallet, wrong password ({exc})") from exc
    except (TypeError, KeyError, NotImplementedError) as exc:
        raise KeystoreError(f"unsupported or corrupt keystore {path}: {exc}") from exc

    address = to_checksum_address(Account.from_key(private_key).address)
    _LOGGER.info("Unlocked wallet %s", address)
    return SigningIdentity(address=address, private_key=private_key)


__all__ = ["SigningIdentity", "load_identity"]
