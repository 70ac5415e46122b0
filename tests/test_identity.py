"""Tests for keystore decryption."""
from __future__ import annotations

from pathlib import Path

import pytest

from contract_deployer.errors import KeystoreError
from contract_deployer.identity import load_identity


def test_correct_password_yields_address_and_key(keystore_file: Path, wallet_password: str, expected_address: str) -> None:
    identity = load_identity(keystore_file, wallet_password)

    assert identity.address == expected_address
    assert identity.private_key == bytes.fromhex("4c" * 32)
    assert identity.account.address == expected_address


def test_private_key_is_not_in_repr(keystore_file: Path, wallet_password: str) -> None:
    identity = load_identity(keystore_file, wallet_password)

    assert "4c4c4c" not in repr(identity)
    assert identity.address in repr(identity)


def test_wrong_password_raises_password_mismatch(keystore_file: Path) -> None:
    with pytest.raises(KeystoreError, match="wrong password") as excinfo:
        load_identity(keystore_file, "not the password")

    assert excinfo.value.phase == "wallet"
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_missing_keystore_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(KeystoreError, match="not found") as excinfo:
        load_identity(tmp_path / "missing.json", "pw")

    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_non_json_keystore_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "garbage"
    path.write_text("definitely not json", encoding="utf-8")

    with pytest.raises(KeystoreError, match="not valid JSON"):
        load_identity(path, "pw")


def test_json_without_crypto_section_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "empty.json"
    path.write_text('{"address": "0d518a4c445bbfad90c8382a051a91087d930253"}', encoding="utf-8")

    with pytest.raises(KeystoreError, match="crypto"):
        load_identity(path, "pw")


def test_binary_keystore_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "binary"
    path.write_bytes(b"\xff\xfe\x00garbage")

    with pytest.raises(KeystoreError, match="not valid JSON") as excinfo:
        load_identity(path, "pw")

    assert excinfo.value.phase == "wallet"
