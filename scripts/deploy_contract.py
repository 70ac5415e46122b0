#!/usr/bin/env python3
"""Deploy a contract using the keystore and node configured in ``.env``."""
from __future__ import annotations

from contract_deployer.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
