"""Exception hierarchy for the deployment procedure.

Every failure is fatal. The ``phase`` attribute names the step that failed so
the command-line driver can report a single ``Error in <phase>: ...`` line.
"""
from __future__ import annotations

from typing import Optional


class DeployError(Exception):
    """Base class for all deployment failures."""

    phase = "deploy"

    def __init__(self, message: str, *, phase: Optional[str] = None) -> None:
        super().__init__(message)
        if phase is not None:
            self.phase = phase


class ConfigError(DeployError):
    phase = "config"


class KeystoreError(DeployError):
    phase = "wallet"


class NodeConnectionError(DeployError):
    phase = "connect"


class ParameterError(DeployError):
    phase = "parameters"


class ArtifactError(DeployError):
    phase = "artifact"


class SubmissionError(DeployError):
    phase = "deploy"

    def __init__(self, message: str, *, tx_hash: Optional[str] = None) -> None:
        super().__init__(message)
        self.tx_hash = tx_hash


class InsufficientFundsError(SubmissionError):
    pass


class ReceiptTimeoutError(SubmissionError):
    pass


class DeploymentRevertedError(SubmissionError):
    pass


__all__ = [
    "ArtifactError",
    "ConfigError",
    "DeployError",
    "DeploymentRevertedError",
    "InsufficientFundsError",
    "KeystoreError",
    "NodeConnectionError",
    "ParameterError",
    "ReceiptTimeoutError",
    "SubmissionError",
]
