"""Persistent configuration for contract naming runs."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from contract_naming.chains import Chain, get_chain
from contract_naming.network import RetryConfig, TimeoutConfig

logger = logging.getLogger(__name__)

CONFIG_VERSION = 1


@dataclass
class ChainSwitchConfig:
    settle_delay: float = 3.0
    poll_interval: float = 1.0
    max_attempts: int = 10


@dataclass
class NamingConfig:
    storage_dir: Path = field(default_factory=lambda: resolve_storage_dir())
    default_parent: str = ""
    rpc_urls: dict[int, str] = field(default_factory=dict)
    contracts: dict[int, dict[str, str]] = field(default_factory=dict)
    timeout_config: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry_config: RetryConfig = field(default_factory=RetryConfig)
    chain_switch: ChainSwitchConfig = field(default_factory=ChainSwitchConfig)
    always_revoke_operator_access: bool = True

    @property
    def config_file(self) -> Path:
        return self.storage_dir / "config.json"

    @property
    def queue_dir(self) -> Path:
        return self.storage_dir / "queue"

    def chain(self, chain_id: int) -> Chain:
        """Return the registry chain with this config's overrides applied."""
        base = get_chain(chain_id)
        overrides = self.contracts.get(chain_id, {})
        return Chain(
            chain_id=base.chain_id,
            name=base.name,
            family=base.family,
            is_testnet=base.is_testnet,
            rpc_url=self.rpc_urls.get(chain_id, base.rpc_url),
            contracts=base.contracts.merged(overrides),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": CONFIG_VERSION,
            "default_parent": self.default_parent,
            "rpc_urls": {str(k): v for k, v in self.rpc_urls.items()},
            "contracts": {str(k): v for k, v in self.contracts.items()},
            "timeout": {
                "connect_timeout": self.timeout_config.connect_timeout,
                "read_timeout": self.timeout_config.read_timeout,
                "operation_timeout": self.timeout_config.operation_timeout,
            },
            "retry": {
                "max_retries": self.retry_config.max_retries,
                "base_delay": self.retry_config.base_delay,
                "max_delay": self.retry_config.max_delay,
            },
            "chain_switch": {
                "settle_delay": self.chain_switch.settle_delay,
                "poll_interval": self.chain_switch.poll_interval,
                "max_attempts": self.chain_switch.max_attempts,
            },
            "always_revoke_operator_access": self.always_revoke_operator_access,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], storage_dir: Path) -> "NamingConfig":
        timeout_cfg = data.get("timeout", {})
        retry_cfg = data.get("retry", {})
        switch_cfg = data.get("chain_switch", {})
        return cls(
            storage_dir=storage_dir,
            default_parent=data.get("default_parent", ""),
            rpc_urls={int(k): v for k, v in data.get("rpc_urls", {}).items()},
            contracts={int(k): dict(v) for k, v in data.get("contracts", {}).items()},
            timeout_config=TimeoutConfig(
                connect_timeout=timeout_cfg.get("connect_timeout", 5.0),
                read_timeout=timeout_cfg.get("read_timeout", 15.0),
                operation_timeout=timeout_cfg.get("operation_timeout", 30.0),
            ),
            retry_config=RetryConfig(
                max_retries=retry_cfg.get("max_retries", 3),
                base_delay=retry_cfg.get("base_delay", 1.0),
                max_delay=retry_cfg.get("max_delay", 30.0),
            ),
            chain_switch=ChainSwitchConfig(
                settle_delay=switch_cfg.get("settle_delay", 3.0),
                poll_interval=switch_cfg.get("poll_interval", 1.0),
                max_attempts=switch_cfg.get("max_attempts", 10),
            ),
            always_revoke_operator_access=data.get(
                "always_revoke_operator_access", True
            ),
        )

    @classmethod
    def load(cls, storage_dir: str | Path | None = None) -> "NamingConfig":
        directory = resolve_storage_dir(storage_dir)
        config_file = directory / "config.json"
        if not config_file.exists():
            return cls(storage_dir=directory)

        try:
            with open(config_file, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to read config %s, using defaults: %s", config_file, e)
            return cls(storage_dir=directory)

        if data.get("version", 0) > CONFIG_VERSION:
            logger.warning("Config version %s is newer than supported", data.get("version"))
        return cls.from_dict(data, directory)

    def save(self) -> None:
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info("Saved config to %s", self.config_file)


def resolve_storage_dir(storage_dir: str | Path | None = None) -> Path:
    if storage_dir:
        return Path(storage_dir).expanduser()

    env_dir = os.getenv("CONTRACT_NAMING_DIR")
    if env_dir:
        return Path(env_dir).expanduser()

    return Path.home() / ".config" / "contract-naming"
