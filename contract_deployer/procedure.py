"""The linear deployment procedure: wallet, connection, parameters, submission."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, ContextManager, Dict, Optional, Sequence, Tuple

from .config import DeployConfig
from .deployment import ContractArtifact, DeploymentResult, deploy_contract
from .identity import SigningIdentity, load_identity
from .node import NodeClient, connect
from .params import TransactOpts, resolve_transact_opts

_LOGGER = logging.getLogger(__name__)

Connector = Callable[..., ContextManager[NodeClient]]


@dataclass(frozen=True)
class DeploymentReport:
    opts: TransactOpts
    result: Optional[DeploymentResult] = None

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "address": self.opts.address,
            "chain_id": self.opts.chain_id,
            "nonce": self.opts.nonce,
            "gas_limit": self.opts.gas_limit,
            "gas_fee_cap": self.opts.gas_fee_cap,
            "gas_tip_cap": self.opts.gas_tip_cap,
            "deployment": None,
        }
        if self.result is not None:
            payload["deployment"] = self.result.as_dict()
        return payload


def prepare_deployment(
    config: DeployConfig, *, connector: Connector = connect
) -> Tuple[SigningIdentity, TransactOpts]:
    """Unlock the wallet and resolve a signing context against the node.

    The node connection is released before returning.
    """

    identity = load_identity(config.keystore_path, config.password)
    with connector(config.rpc_url, timeout=config.rpc_timeout) as node:
        opts = resolve_transact_opts(identity, node)
    return identity, opts


def run_deployment(
    config: DeployConfig,
    artifact: Optional[ContractArtifact] = None,
    constructor_args: Sequence[Any] = (),
    *,
    connector: Connector = connect,
) -> DeploymentReport:
    """Run the full procedure, submitting ``artifact`` when one is given.

    Without an artifact only the signing context is prepared, which is useful
    as a dry run against a new node or wallet.
    """

    identity = load_identity(config.keystore_path, config.password)
    with connector(config.rpc_url, timeout=config.rpc_timeout) as node:
        opts = resolve_transact_opts(identity, node)
        if artifact is None:
            _LOGGER.info("No artifact given; skipping submission")
            return DeploymentReport(opts=opts)
        result = deploy_contract(
            node.w3,
            opts,
            artifact,
            constructor_args,
            receipt_timeout=config.receipt_timeout,
        )
    return DeploymentReport(opts=opts, result=result)


__all__ = ["DeploymentReport", "prepare_deployment", "run_deployment"]
