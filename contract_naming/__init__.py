"""Contract naming - name smart contracts in one guided run.

This package is organized into feature-based modules:
- features.batching: Request validation, hierarchical batching and CSV import
- features.ownership: Read-only ownership probes per network
- features.planning: Network adapters and step planning
- features.execution: Step executor, network switching and the steps screen
- shared: Shared utilities (logging, protocols, transaction queue)
"""

from contract_naming.config import ChainSwitchConfig, NamingConfig
from contract_naming.network import (
    NetworkError,
    NetworkErrorType,
    RetryConfig,
    RpcClient,
    TimeoutConfig,
)
from contract_naming.validation import AddressValidator, NameValidator, ValidationResult

__version__ = "0.1.0"
__all__ = [
    "AddressValidator",
    "ChainSwitchConfig",
    "NameValidator",
    "NamingConfig",
    "NetworkError",
    "NetworkErrorType",
    "RetryConfig",
    "RpcClient",
    "TimeoutConfig",
    "ValidationResult",
]
