"""Wallet network switching with bounded confirmation polling."""

from __future__ import annotations

import asyncio
import logging

from contract_naming.chains import get_chain_name
from contract_naming.config import ChainSwitchConfig
from contract_naming.shared.protocols import SignerProtocol

logger = logging.getLogger(__name__)


class ChainSwitchTimeoutError(TimeoutError):
    def __init__(self, chain_id: int):
        self.chain_id = chain_id
        super().__init__(
            f"Chain switch timeout - chain did not change to {get_chain_name(chain_id)}"
        )


class ChainSwitchCoordinator:
    def __init__(
        self,
        signer: SignerProtocol,
        config: ChainSwitchConfig | None = None,
    ):
        self.signer = signer
        self.config = config or ChainSwitchConfig()

    async def ensure_chain(self, chain_id: int) -> None:
        """Make ``chain_id`` the wallet's active network.

        Returns at once when it already is. Otherwise asks for the switch,
        waits for the wallet to settle and polls until the active network
        matches, raising `ChainSwitchTimeoutError` when polls run out.
        """
        if await self.signer.get_active_network() == chain_id:
            return

        logger.info("Requesting network switch to %s", get_chain_name(chain_id))
        await self.signer.request_network_switch(chain_id)
        await asyncio.sleep(self.config.settle_delay)

        for attempt in range(self.config.max_attempts):
            if await self.signer.get_active_network() == chain_id:
                logger.info(
                    "Switched to %s after %d polls", get_chain_name(chain_id), attempt + 1
                )
                return
            await asyncio.sleep(self.config.poll_interval)

        raise ChainSwitchTimeoutError(chain_id)
