"""Shared fixtures: a throwaway keystore and a clean deployment environment."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from eth_account import Account

from contract_deployer.identity import SigningIdentity

TEST_PRIVATE_KEY = "0x" + "4c" * 32
TEST_PASSWORD = "correct horse battery staple"

_ENV_KEYS = (
    "DEPLOY_URL",
    "URL",
    "PASS_WALLET_OWNER",
    "PASSWORD",
    "KEYSTORE_PATH",
    "RPC_TIMEOUT",
    "RECEIPT_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's shell configuration out of the tests."""

    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def expected_address() -> str:
    return Account.from_key(TEST_PRIVATE_KEY).address


@pytest.fixture()
def keystore_file(tmp_path: Path) -> Path:
    # a single PBKDF2 round keeps decryption fast
    keyfile = Account.encrypt(TEST_PRIVATE_KEY, TEST_PASSWORD, kdf="pbkdf2", iterations=1)
    path = tmp_path / "UTC--test-keystore"
    path.write_text(json.dumps(keyfile), encoding="utf-8")
    return path


@pytest.fixture()
def identity(expected_address: str) -> SigningIdentity:
    return SigningIdentity(address=expected_address, private_key=bytes.fromhex(TEST_PRIVATE_KEY[2:]))


@pytest.fixture()
def env_file(tmp_path: Path, keystore_file: Path) -> Path:
    path = tmp_path / ".env"
    path.write_text(
        "\n".join(
            [
                "DEPLOY_URL=http://127.0.0.1:8545",
                f"PASS_WALLET_OWNER={TEST_PASSWORD}",
                f"KEYSTORE_PATH={keystore_file}",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def wallet_password() -> str:
    return TEST_PASSWORD
