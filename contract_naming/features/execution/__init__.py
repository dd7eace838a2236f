"""Execution feature for contract naming.

This module provides:
- The step executor state machine and its terminal results
- Wallet network switching with bounded polling
- A deferred signer that queues calls for a multisig wallet
- The modal screen that presents a run
"""

from contract_naming.features.execution.chain_switch import (
    ChainSwitchCoordinator,
    ChainSwitchTimeoutError,
)
from contract_naming.features.execution.screen import SetNameStepsScreen
from contract_naming.features.execution.service import (
    INCOMPLETE,
    SAFE_WALLET_TX,
    ExecutionResult,
    ResultKind,
    RunPhase,
    RunState,
    Step,
    StepExecutor,
    StepStatus,
    UserRejectedError,
    is_user_rejection,
)
from contract_naming.features.execution.signers import DeferredBatchSigner

__all__ = [
    "INCOMPLETE",
    "SAFE_WALLET_TX",
    "ChainSwitchCoordinator",
    "ChainSwitchTimeoutError",
    "DeferredBatchSigner",
    "ExecutionResult",
    "ResultKind",
    "RunPhase",
    "RunState",
    "SetNameStepsScreen",
    "Step",
    "StepExecutor",
    "StepStatus",
    "UserRejectedError",
    "is_user_rejection",
]
