"""Boundaries between the naming core and the wallet / chain collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from contract_naming.features.planning.adapters import ContractCall
    from contract_naming.reader import ContractQuery


class SignerProtocol(Protocol):
    """Wallet used to submit writes and to drive the active network."""

    address: str

    @property
    def is_batched(self) -> bool: ...

    async def submit_transaction(self, call: ContractCall) -> str: ...

    async def await_confirmation(self, tx_hash: str) -> Any: ...

    async def get_active_network(self) -> int: ...

    async def request_network_switch(self, chain_id: int) -> None: ...


class StateReaderProtocol(Protocol):
    async def read_contract_state(
        self, chain_id: int, address: str, query: ContractQuery
    ) -> Any: ...

    async def get_balance(self, chain_id: int, address: str) -> int: ...
