"""Read-only chain queries over JSON-RPC."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from contract_naming.abi import (
    decode_address,
    decode_bool,
    decode_bytes,
    decode_uint,
    encode_static_args,
    function_selector,
    to_hex,
)
from contract_naming.config import NamingConfig
from contract_naming.network import RpcClient

logger = logging.getLogger(__name__)

RETURN_DECODERS = {
    "address": decode_address,
    "bool": decode_bool,
    "bytes": decode_bytes,
    "uint256": decode_uint,
}


@dataclass(frozen=True)
class ContractQuery:
    """A static view call such as ``owner()`` or ``isApprovedForAll(address,address)``."""

    signature: str
    args: tuple = ()
    returns: str = "address"
    arg_types: tuple[str, ...] = field(init=False)

    def __post_init__(self):
        inner = self.signature[self.signature.index("(") + 1 : -1]
        types = tuple(t.strip() for t in inner.split(",") if t.strip())
        object.__setattr__(self, "arg_types", types)
        if self.returns not in RETURN_DECODERS:
            raise ValueError(f"Unsupported return type: {self.returns}")

    def encode(self) -> str:
        return to_hex(
            function_selector(self.signature) + encode_static_args(self.arg_types, self.args)
        )

    def decode(self, data: str) -> Any:
        return RETURN_DECODERS[self.returns](data)


class JsonRpcStateReader:
    """State reader backed by one `RpcClient` per chain.

    Blocking HTTP calls are pushed to a worker thread so probes on several
    chains can be awaited together.
    """

    def __init__(self, config: NamingConfig, clients: dict[int, RpcClient] | None = None):
        self.config = config
        self._clients: dict[int, RpcClient] = dict(clients or {})

    def client_for(self, chain_id: int) -> RpcClient:
        client = self._clients.get(chain_id)
        if client is None:
            chain = self.config.chain(chain_id)
            client = RpcClient(
                chain.rpc_url,
                timeout_config=self.config.timeout_config,
                retry_config=self.config.retry_config,
            )
            self._clients[chain_id] = client
        return client

    async def read_contract_state(
        self, chain_id: int, address: str, query: ContractQuery
    ) -> Any:
        client = self.client_for(chain_id)
        params = [{"to": address, "data": query.encode()}, "latest"]
        result = await asyncio.to_thread(
            client.call, "eth_call", params, f"Read {query.signature}"
        )
        if not result or result == "0x":
            raise ValueError(f"Empty result for {query.signature} at {address}")
        return query.decode(result)

    async def get_balance(self, chain_id: int, address: str) -> int:
        client = self.client_for(chain_id)
        result = await asyncio.to_thread(
            client.call, "eth_getBalance", [address, "latest"], "Fetch balance"
        )
        return int(result, 16)
