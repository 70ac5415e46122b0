"""Resolve chain ID, nonce and fee parameters into a signing context."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Protocol, Tuple

from eth_account import Account

from .errors import ParameterError
from .identity import SigningIdentity

_LOGGER = logging.getLogger(__name__)

# Fixed fee policy. These are not derived from live base fee data.
BASE_FEE = 20_000_000
TIP_CAP = 1_000_000_000
GAS_LIMIT = 5_000_000


class ChainQueries(Protocol):
    def chain_id(self) -> int: ...

    def pending_nonce(self, address: str) -> int: ...


@dataclass(frozen=True)
class TransactOpts:
    """Everything needed to sign a transaction from the deployer account."""

    address: str
    chain_id: int
    nonce: int
    gas_limit: int
    gas_fee_cap: int
    gas_tip_cap: int
    identity: SigningIdentity = field(repr=False, compare=False)

    def as_tx_fields(self) -> Dict[str, Any]:
        """Return the EIP-1559 fields in the shape web3 expects."""

        return {
            "from": self.address,
            "chainId": self.chain_id,
            "nonce": self.nonce,
            "gas": self.gas_limit,
            "maxFeePerGas": self.gas_fee_cap,
            "maxPriorityFeePerGas": self.gas_tip_cap,
        }

    def sign(self, transaction: Mapping[str, Any]) -> Any:
        """Sign ``transaction`` with the bound key after checking it targets our chain."""

        if int(transaction.get("chainId", self.chain_id)) != self.chain_id:
            raise ValueError("transaction chainId does not match the signing context")
        payload = {key: value for key, value in transaction.items() if key != "from"}
        return Account.sign_transaction(payload, self.identity.private_key)


def gas_fee_params() -> Tuple[int, int]:
    """Return ``(fee_cap, tip_cap)`` in wei."""

    return BASE_FEE + TIP_CAP, TIP_CAP


def resolve_transact_opts(identity: SigningIdentity, node: ChainQueries) -> TransactOpts:
    """Query the node and assemble a :class:`TransactOpts` for ``identity``.

    Query failures raise rather than falling back to zero values, so a run
    never signs with an unknown chain ID or a stale nonce.
    """

    try:
        chain_id = int(node.chain_id())
    except Exception as exc:
        raise ParameterError(f"failed to query chain id: {exc}", phase="chain id") from exc
    if chain_id <= 0:
        raise ParameterError(f"node reported invalid chain id {chain_id}", phase="chain id")

    try:
        nonce = int(node.pending_nonce(identity.address))
    except Exception as exc:
        raise ParameterError(f"failed to query pending nonce: {exc}", phase="nonce") from exc
    if nonce < 0:
        raise ParameterError(f"node reported negative nonce {nonce}", phase="nonce")

    fee_cap, tip_cap = gas_fee_params()
    _LOGGER.info("Resolved chain id %d, nonce %d for %s", chain_id, nonce, identity.address)
    return TransactOpts(
        address=identity.address,
        chain_id=chain_id,
        nonce=nonce,
        gas_limit=GAS_LIMIT,
        gas_fee_cap=fee_cap,
        gas_tip_cap=tip_cap,
        identity=identity,
    )


__all__ = [
    "BASE_FEE",
    "GAS_LIMIT",
    "TIP_CAP",
    "TransactOpts",
    "gas_fee_params",
    "resolve_transact_opts",
]
