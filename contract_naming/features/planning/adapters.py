"""Per network family call builders for naming writes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from contract_naming.abi import namehash, to_hex
from contract_naming.chains import Chain, NetworkFamily, get_chain_name
from contract_naming.features.batching.models import Batch

ETHEREUM_COIN_TYPE = 60


class PlanningError(Exception):
    pass


class UnsupportedOperationError(PlanningError):
    pass


@dataclass(frozen=True)
class ContractCall:
    chain_id: int
    to: str
    function: str
    args: tuple[Any, ...] = ()
    value: int = 0
    description: str = ""

    @property
    def name(self) -> str:
        return self.function.split("(", 1)[0]

    def describe(self) -> str:
        rendered = ", ".join(_render(a) for a in self.args)
        line = f"[{get_chain_name(self.chain_id)}] {self.to}.{self.name}({rendered})"
        if self.value:
            line += f" value={self.value}"
        return line

    def with_value(self, value: int) -> "ContractCall":
        return ContractCall(
            self.chain_id, self.to, self.function, self.args, value, self.description
        )


def _render(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_render(v) for v in value) + "]"
    if isinstance(value, str) and not value.startswith("0x"):
        return f'"{value}"'
    return str(value)


class NetworkAdapter(Protocol):
    chain: Chain

    def build_operator_approval_call(
        self, operator: str, approved: bool, wrapped: bool
    ) -> ContractCall: ...

    def build_subname_call(
        self, batch: Batch, coin_types: list[int], value: int = 0
    ) -> ContractCall: ...

    def build_forward_resolution_call(
        self, full_name: str, address: str, coin_type: int
    ) -> ContractCall: ...

    def build_reverse_resolution_call(
        self, address: str, full_name: str, wallet: str
    ) -> ContractCall: ...


class EnsL1Adapter:
    """ENS on Ethereum: registry / NameWrapper approvals, public resolver records."""

    def __init__(self, chain: Chain):
        self.chain = chain

    def _require(self, field_name: str) -> str:
        value = getattr(self.chain.contracts, field_name)
        if not value:
            raise PlanningError(
                f"No {field_name.replace('_', ' ')} configured for {self.chain.name}"
            )
        return value

    def approval_target(self, wrapped: bool) -> str:
        return self._require("name_wrapper" if wrapped else "ens_registry")

    def build_operator_approval_call(
        self, operator: str, approved: bool, wrapped: bool
    ) -> ContractCall:
        action = "Grant" if approved else "Revoke"
        return ContractCall(
            chain_id=self.chain.chain_id,
            to=self.approval_target(wrapped),
            function="setApprovalForAll(address,bool)",
            args=(operator, approved),
            description=f"{action} operator access",
        )

    def build_subname_call(
        self, batch: Batch, coin_types: list[int], value: int = 0
    ) -> ContractCall:
        naming_contract = self._require("naming_contract")
        description = f'Create {len(batch)} subnames under "{batch.immediate_parent}"'
        if coin_types == [ETHEREUM_COIN_TYPE]:
            return ContractCall(
                chain_id=self.chain.chain_id,
                to=naming_contract,
                function="setNameBatch(address[],string[],string)",
                args=(batch.addresses, batch.labels, batch.immediate_parent),
                value=value,
                description=description,
            )
        return ContractCall(
            chain_id=self.chain.chain_id,
            to=naming_contract,
            function="setNameBatch(address[],string[],string,uint256[])",
            args=(batch.addresses, batch.labels, batch.immediate_parent, list(coin_types)),
            value=value,
            description=description,
        )

    def build_forward_resolution_call(
        self, full_name: str, address: str, coin_type: int
    ) -> ContractCall:
        return ContractCall(
            chain_id=self.chain.chain_id,
            to=self._require("public_resolver"),
            function="setAddr(bytes32,uint256,bytes)",
            args=(to_hex(namehash(full_name)), coin_type, address.lower()),
            description=f"Set forward resolution of {full_name} (coin type {coin_type})",
        )

    def build_reverse_resolution_call(
        self, address: str, full_name: str, wallet: str
    ) -> ContractCall:
        return ContractCall(
            chain_id=self.chain.chain_id,
            to=self._require("reverse_registrar"),
            function="setNameForAddr(address,address,address,string)",
            args=(address, wallet, self._require("public_resolver"), full_name),
            description=f"Set reverse resolution of {address} to {full_name}",
        )


class BaseAdapter(EnsL1Adapter):
    """Basenames: same call shapes as ENS, but names are never wrapped."""

    def approval_target(self, wrapped: bool) -> str:
        return self._require("ens_registry")


class L2ReverseAdapter:
    """Secondary networks only hold reverse records."""

    def __init__(self, chain: Chain):
        self.chain = chain

    def _unsupported(self, operation: str) -> UnsupportedOperationError:
        return UnsupportedOperationError(f"{operation} is not supported on {self.chain.name}")

    def build_operator_approval_call(
        self, operator: str, approved: bool, wrapped: bool
    ) -> ContractCall:
        raise self._unsupported("Operator approval")

    def build_subname_call(
        self, batch: Batch, coin_types: list[int], value: int = 0
    ) -> ContractCall:
        raise self._unsupported("Subname creation")

    def build_forward_resolution_call(
        self, full_name: str, address: str, coin_type: int
    ) -> ContractCall:
        raise self._unsupported("Forward resolution")

    def build_reverse_resolution_call(
        self, address: str, full_name: str, wallet: str
    ) -> ContractCall:
        registrar = self.chain.contracts.l2_reverse_registrar
        if not registrar:
            raise PlanningError(f"No L2 reverse registrar configured for {self.chain.name}")
        return ContractCall(
            chain_id=self.chain.chain_id,
            to=registrar,
            function="setNameForAddr(address,string)",
            args=(address, full_name),
            description=f"Set {self.chain.name} reverse resolution of {address} to {full_name}",
        )


def adapter_for(chain: Chain, secondary: bool = False) -> NetworkAdapter:
    if secondary:
        return L2ReverseAdapter(chain)
    if chain.family == NetworkFamily.BASE:
        return BaseAdapter(chain)
    if chain.family == NetworkFamily.ETHEREUM:
        return EnsL1Adapter(chain)
    raise UnsupportedOperationError(f"{chain.name} cannot be used as the primary naming network")
