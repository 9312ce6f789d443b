"""
zkship - Config Module

Network endpoints, account ids and gas limits.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .errors import InvalidConfigError

MAX_GAS = 300_000_000_000_000
DEFAULT_NETWORK = "testnet"
DEFAULT_PROVER_URL = "http://127.0.0.1:3000"
DEFAULT_ACCOUNT_ID = "dev-1649632081005-14076690372915"
DEFAULT_SEAL_PATH = "seal.bin"
CREDENTIALS_DIR = ".near-credentials"
DEFAULT_TIMEOUT = 30


def default_credentials_path() -> Path:
    return Path.home() / CREDENTIALS_DIR


@dataclass
class NearConfig:
    """Connection settings for a NEAR network."""
    network_id: str
    key_store: Path
    node_url: str
    wallet_url: str
    helper_url: str
    explorer_url: str
    timeout: int = DEFAULT_TIMEOUT

    @classmethod
    def for_network(
        cls,
        network_id: str = DEFAULT_NETWORK,
        key_store: Optional[Path] = None,
        node_url: Optional[str] = None,
    ) -> 'NearConfig':
        """
        Build the standard endpoint set for a network.

        Args:
            network_id: Network name, e.g. ``testnet`` or ``mainnet``
            key_store: Credentials directory (defaults to ~/.near-credentials)
            node_url: Override for the RPC endpoint

        Returns:
            NearConfig instance
        """
        return cls(
            network_id=network_id,
            key_store=Path(key_store) if key_store else default_credentials_path(),
            node_url=node_url or f"https://rpc.{network_id}.near.org",
            wallet_url=f"https://wallet.{network_id}.near.org",
            helper_url=f"https://helper.{network_id}.near.org",
            explorer_url=f"https://explorer.{network_id}.near.org",
        )


@dataclass
class Settings:
    """Everything a single run needs."""
    near: NearConfig = field(default_factory=NearConfig.for_network)
    account_id: str = DEFAULT_ACCOUNT_ID
    contract_id: Optional[str] = None
    prover_url: str = DEFAULT_PROVER_URL
    gas: int = MAX_GAS
    prover_timeout: Optional[float] = None

    def __post_init__(self):
        if not self.account_id:
            raise InvalidConfigError("account id must not be empty")
        if self.contract_id is None:
            self.contract_id = self.account_id
        if self.gas <= 0 or self.gas > MAX_GAS:
            raise InvalidConfigError(
                f"gas must be between 1 and {MAX_GAS}, got {self.gas}"
            )
        self.prover_url = self.prover_url.rstrip('/')
        if self.prover_timeout is not None and self.prover_timeout <= 0:
            raise InvalidConfigError(
                f"prover timeout must be positive, got {self.prover_timeout}"
            )

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides
    ) -> 'Settings':
        """
        Read settings from ``ZKSHIP_*`` environment variables.

        Keyword overrides that are not None take precedence over the
        environment.
        """
        env = os.environ if environ is None else environ

        def pick(key: str, env_name: str, default=None):
            value = overrides.get(key)
            if value is not None:
                return value
            return env.get(env_name, default)

        credentials = pick('credentials_dir', 'ZKSHIP_CREDENTIALS_DIR')
        near = NearConfig.for_network(
            network_id=pick('network_id', 'ZKSHIP_NETWORK', DEFAULT_NETWORK),
            key_store=Path(credentials) if credentials else None,
            node_url=pick('node_url', 'ZKSHIP_NODE_URL'),
        )

        gas = pick('gas', 'ZKSHIP_GAS', MAX_GAS)
        try:
            gas = int(gas)
        except (TypeError, ValueError):
            raise InvalidConfigError(f"gas must be an integer, got {gas!r}")

        prover_timeout = pick('prover_timeout', 'ZKSHIP_PROVER_TIMEOUT')
        if prover_timeout is not None:
            try:
                prover_timeout = float(prover_timeout)
            except (TypeError, ValueError):
                raise InvalidConfigError(
                    f"prover timeout must be a number, got {prover_timeout!r}"
                )

        return cls(
            near=near,
            account_id=pick('account_id', 'ZKSHIP_ACCOUNT_ID', DEFAULT_ACCOUNT_ID),
            contract_id=pick('contract_id', 'ZKSHIP_CONTRACT_ID'),
            prover_url=pick('prover_url', 'ZKSHIP_PROVER_URL', DEFAULT_PROVER_URL),
            gas=gas,
            prover_timeout=prover_timeout,
        )
