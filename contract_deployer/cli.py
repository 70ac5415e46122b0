"""Command-line entry point for deploying a contract from an encrypted keystore."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence

from .config import load_config
from .deployment import load_artifact
from .errors import DeployError
from .procedure import DeploymentReport, run_deployment


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Unlock the deployer keystore, resolve gas and nonce, and deploy a contract.",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help=(
            "Path to the dotenv file holding DEPLOY_URL (an http or https JSON-RPC endpoint) "
            "and PASS_WALLET_OWNER (default: ./.env)."
        ),
    )
    parser.add_argument("--keystore", default=None, help="Override the keystore file path.")
    parser.add_argument(
        "--artifact",
        default=None,
        help="Compiled contract JSON with abi and bytecode. Omit to only prepare the signing context.",
    )
    parser.add_argument(
        "--constructor-args",
        default="[]",
        help="Constructor arguments as a JSON list (default: []).",
    )
    parser.add_argument("--rpc-timeout", type=float, default=None, help="Seconds to wait on each RPC call.")
    parser.add_argument(
        "--receipt-timeout",
        type=float,
        default=None,
        help="Seconds to wait for the deployment receipt.",
    )
    parser.add_argument("--json", action="store_true", help="Emit the report as JSON.")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging verbosity (DEBUG, INFO, WARNING)",
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(message)s",
    )


def _parse_constructor_args(parser: argparse.ArgumentParser, raw: str) -> List[Any]:
    try:
        values = json.loads(raw)
    except ValueError as error:
        parser.error(f"Invalid --constructor-args value: {error}")
    if not isinstance(values, list):
        parser.error("--constructor-args must be a JSON list")
    return values


def _print_report(report: DeploymentReport) -> None:
    opts = report.opts
    print(f"Deployer:  {opts.address}")
    print(f"Chain ID:  {opts.chain_id}")
    print(f"Nonce:     {opts.nonce}")
    print(f"Gas limit: {opts.gas_limit}")
    print(f"Fee cap:   {opts.gas_fee_cap} wei (tip {opts.gas_tip_cap} wei)")
    if report.result is None:
        print("No artifact supplied; nothing was broadcast.")
        return
    print(f"Tx hash:   {report.result.tx_hash}")
    print(f"Contract:  {report.result.contract_address}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    constructor_args = _parse_constructor_args(parser, args.constructor_args)
    for flag, value in (("--rpc-timeout", args.rpc_timeout), ("--receipt-timeout", args.receipt_timeout)):
        if value is not None and value <= 0:
            parser.error(f"{flag} must be positive")

    try:
        config = load_config(args.env_file).with_overrides(
            keystore_path=Path(args.keystore) if args.keystore else None,
            rpc_timeout=args.rpc_timeout,
            receipt_timeout=args.receipt_timeout,
        )
        artifact = load_artifact(args.artifact) if args.artifact else None
        report = run_deployment(config, artifact, constructor_args)
    except DeployError as error:
        logging.error("Error in %s: %s", error.phase, error)
        return 1

    if args.json:
        json.dump(report.as_dict(), sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        _print_report(report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
