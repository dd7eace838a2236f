"""Shared utilities for contract naming."""

from contract_naming.shared.logging import (
    ContextAdapter,
    LoggingConfig,
    LogLevel,
    format_error_for_user,
    get_logger,
    get_user_friendly_error,
    sanitize_dict,
    sanitize_message,
    setup_logging,
)
from contract_naming.shared.protocols import SignerProtocol, StateReaderProtocol
from contract_naming.shared.transaction_queue import QueuedCall, TransactionQueue

__all__ = [
    "ContextAdapter",
    "LoggingConfig",
    "LogLevel",
    "QueuedCall",
    "SignerProtocol",
    "StateReaderProtocol",
    "TransactionQueue",
    "format_error_for_user",
    "get_logger",
    "get_user_friendly_error",
    "sanitize_dict",
    "sanitize_message",
    "setup_logging",
]
