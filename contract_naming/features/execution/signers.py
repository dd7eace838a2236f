"""Signers that hand calls to a multisig queue instead of broadcasting them."""

from __future__ import annotations

import logging
from typing import Any

from contract_naming.features.execution.service import SAFE_WALLET_TX
from contract_naming.features.planning.adapters import ContractCall
from contract_naming.shared.transaction_queue import QueuedCall, TransactionQueue

logger = logging.getLogger(__name__)


class DeferredBatchSigner:
    """Queues every call for later joint execution by a Safe-style wallet.

    Submissions return the ``"safe wallet"`` sentinel; nothing is awaited.
    Network switches only move the signer's notion of the active chain, since
    the queued calls carry their own chain id.
    """

    def __init__(self, address: str, chain_id: int, queue: TransactionQueue):
        self.address = address
        self.queue = queue
        self._active_chain_id = chain_id

    @property
    def is_batched(self) -> bool:
        return True

    async def submit_transaction(self, call: ContractCall) -> str:
        self.queue.add(
            QueuedCall(
                chain_id=call.chain_id,
                to=call.to,
                function=call.function,
                args=list(call.args),
                value=call.value,
                description=call.description,
            )
        )
        return SAFE_WALLET_TX

    async def await_confirmation(self, tx_hash: str) -> Any:
        return None

    async def get_active_network(self) -> int:
        return self._active_chain_id

    async def request_network_switch(self, chain_id: int) -> None:
        logger.debug("Deferred signer now targeting chain %d", chain_id)
        self._active_chain_id = chain_id

    async def queue_calls(self, calls: list[ContractCall]) -> int:
        """Replace whatever a previous run left in the queue with ``calls``."""
        if not self.queue.is_empty():
            stale = self.queue.clear()
            logger.warning("Discarded %d calls left over from a previous run", stale)
        for call in calls:
            await self.submit_transaction(call)
        logger.info("Queued %d calls for joint execution", self.queue.count())
        return self.queue.count()
