"""Sign, broadcast and confirm a contract-creation transaction."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import requests
from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception

from .config import DEFAULT_RECEIPT_TIMEOUT
from .errors import (
    ArtifactError,
    DeploymentRevertedError,
    InsufficientFundsError,
    ReceiptTimeoutError,
    SubmissionError,
)
from .params import TransactOpts

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractArtifact:
    """Compiled contract ABI and creation bytecode."""

    abi: List[Dict[str, Any]]
    bytecode: str


@dataclass(frozen=True)
class DeploymentResult:
    """Outcome of a mined contract-creation transaction."""

    tx_hash: str
    contract_address: Optional[str]
    block_number: Optional[int]
    gas_used: Optional[int]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "tx_hash": self.tx_hash,
            "contract_address": self.contract_address,
            "block_number": self.block_number,
            "gas_used": self.gas_used,
        }


def _extract_bytecode(payload: Dict[str, Any]) -> Optional[str]:
    bytecode = payload.get("bytecode", payload.get("bin"))
    # foundry nests the hex under "object"
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object")
    if not isinstance(bytecode, str):
        return None
    bytecode = bytecode.strip()
    if bytecode.startswith(("0x", "0X")):
        bytecode = bytecode[2:]
    return bytecode or None


def load_artifact(path: str | os.PathLike[str]) -> ContractArtifact:
    """Load a compiled artifact holding ``abi`` and ``bytecode`` (or ``bin``).

    Hardhat, Foundry and ``solc --combined-json`` style files all work as long
    as both keys sit at the top level.
    """

    artifact_path = Path(path)
    try:
        payload = json.loads(artifact_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ArtifactError(f"artifact not found: {artifact_path}") from exc
    except (OSError, ValueError) as exc:
        raise ArtifactError(f"cannot read artifact {artifact_path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ArtifactError(f"artifact {artifact_path} must be a JSON object")

    abi = payload.get("abi")
    if isinstance(abi, str):
        try:
            abi = json.loads(abi)
        except ValueError as exc:
            raise ArtifactError(f"artifact {artifact_path} has an invalid abi string") from exc
    if not isinstance(abi, list):
        raise ArtifactError(f"artifact {artifact_path} is missing an abi list")

    bytecode = _extract_bytecode(payload)
    if bytecode is None:
        raise ArtifactError(f"artifact {artifact_path} is missing bytecode")
    try:
        bytes.fromhex(bytecode)
    except ValueError as exc:
        raise ArtifactError(f"artifact {artifact_path} bytecode is not valid hex") from exc

    return ContractArtifact(abi=abi, bytecode="0x" + bytecode)


def build_deploy_transaction(
    w3: Any,
    opts: TransactOpts,
    artifact: ContractArtifact,
    constructor_args: Sequence[Any] = (),
) -> Dict[str, Any]:
    contract = w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
    try:
        transaction = dict(contract.constructor(*constructor_args).build_transaction(opts.as_tx_fields()))
    except (TypeError, ValueError, Web3Exception) as exc:
        raise SubmissionError(f"failed to build deployment transaction: {exc}") from exc
    transaction["gas"] = opts.gas_limit
    return transaction


def deploy_contract(
    w3: Any,
    opts: TransactOpts,
    artifact: ContractArtifact,
    constructor_args: Sequence[Any] = (),
    *,
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
) -> DeploymentResult:
    """Deploy ``artifact`` from the account bound to ``opts`` and wait for inclusion.

    Raises:
        InsufficientFundsError: The node rejected the transaction for lack of funds.
        SubmissionError: Any other broadcast failure.
        ReceiptTimeoutError: No receipt within ``receipt_timeout`` seconds.
        DeploymentRevertedError: The creation transaction was mined but reverted.
    """

    transaction = build_deploy_transaction(w3, opts, artifact, constructor_args)
    signed = opts.sign(transaction)

    try:
        raw_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
    except (ValueError, Web3Exception, requests.RequestException) as exc:
        if "insufficient funds" in str(exc).lower():
            raise InsufficientFundsError(f"insufficient funds for deployment from {opts.address}") from exc
        raise SubmissionError(f"failed to broadcast deployment: {exc}") from exc

    tx_hash = Web3.to_hex(raw_hash)
    _LOGGER.info("Deployment transaction sent: %s (nonce %d)", tx_hash, opts.nonce)

    try:
        receipt = w3.eth.wait_for_transaction_receipt(raw_hash, timeout=receipt_timeout)
    except TimeExhausted as exc:
        raise ReceiptTimeoutError(
            f"transaction {tx_hash} not mined within {receipt_timeout:g}s", tx_hash=tx_hash
        ) from exc
    except (Web3Exception, requests.RequestException, ValueError) as exc:
        raise SubmissionError(
            f"lost contact waiting for {tx_hash}: {exc}", tx_hash=tx_hash
        ) from exc

    if receipt["status"] == 0:
        raise DeploymentRevertedError(f"deployment transaction {tx_hash} reverted", tx_hash=tx_hash)

    result = DeploymentResult(
        tx_hash=tx_hash,
        contract_address=receipt.get("contractAddress"),
        block_number=receipt.get("blockNumber"),
        gas_used=receipt.get("gasUsed"),
    )
    _LOGGER.info("Contract deployed at %s in block %s", result.contract_address, result.block_number)
    return result


__all__ = [
    "ContractArtifact",
    "DeploymentResult",
    "build_deploy_transaction",
    "deploy_contract",
    "load_artifact",
]
