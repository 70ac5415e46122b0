"""Deploy a contract from an encrypted keystore wallet."""
from __future__ import annotations

from .config import DeployConfig, load_config
from .deployment import ContractArtifact, DeploymentResult, deploy_contract, load_artifact
from .errors import (
    ArtifactError,
    ConfigError,
    DeployError,
    DeploymentRevertedError,
    InsufficientFundsError,
    KeystoreError,
    NodeConnectionError,
    ParameterError,
    ReceiptTimeoutError,
    SubmissionError,
)
from .identity import SigningIdentity, load_identity
from .node import NodeClient, connect
from .params import BASE_FEE, GAS_LIMIT, TIP_CAP, TransactOpts, gas_fee_params, resolve_transact_opts
from .procedure import DeploymentReport, prepare_deployment, run_deployment

__all__ = [
    "ArtifactError",
    "BASE_FEE",
    "ConfigError",
    "ContractArtifact",
    "DeployConfig",
    "DeployError",
    "DeploymentReport",
    "DeploymentResult",
    "DeploymentRevertedError",
    "GAS_LIMIT",
    "InsufficientFundsError",
    "KeystoreError",
    "NodeClient",
    "NodeConnectionError",
    "ParameterError",
    "ReceiptTimeoutError",
    "SigningIdentity",
    "SubmissionError",
    "TIP_CAP",
    "TransactOpts",
    "connect",
    "deploy_contract",
    "gas_fee_params",
    "load_artifact",
    "load_config",
    "load_identity",
    "prepare_deployment",
    "resolve_transact_opts",
    "run_deployment",
]
