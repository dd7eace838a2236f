"""Ownership probes for target contracts on primary and secondary networks."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

from contract_naming.abi import ZERO_ADDRESS, namehash, reverse_node
from contract_naming.chains import NetworkFamily
from contract_naming.config import NamingConfig
from contract_naming.reader import ContractQuery
from contract_naming.shared.protocols import StateReaderProtocol

logger = logging.getLogger(__name__)

OWNER_QUERY = ContractQuery("owner()", returns="address")


class OwnershipStatus(Enum):
    OWNED = "owned"
    NOT_OWNED = "not_owned"
    NOT_OWNABLE = "not_ownable"


@dataclass(frozen=True)
class ContractOwnership:
    """Probe outcome for one contract on one network. ``None`` means not probed."""

    chain_id: int
    address: str
    ownable: bool | None = None
    owned: bool | None = None
    owner: str | None = None
    reverse_claimable: bool | None = None

    @property
    def status(self) -> OwnershipStatus | None:
        if self.ownable is None:
            return None
        if not self.ownable:
            return OwnershipStatus.NOT_OWNABLE
        return OwnershipStatus.OWNED if self.owned else OwnershipStatus.NOT_OWNED

    @property
    def can_set_reverse(self) -> bool:
        return bool(self.owned) or bool(self.reverse_claimable)


@dataclass
class ProbeReport:
    primary: dict[str, ContractOwnership] = field(default_factory=dict)
    secondary: dict[int, dict[str, ContractOwnership]] = field(default_factory=dict)
    parent_wrapped: bool = False

    def primary_for(self, address: str) -> ContractOwnership | None:
        return self.primary.get(address.lower())

    def secondary_for(self, chain_id: int, address: str) -> ContractOwnership | None:
        return self.secondary.get(chain_id, {}).get(address.lower())


def _same_address(a: str | None, b: str | None) -> bool:
    return bool(a) and bool(b) and a.lower() == b.lower()


class OwnershipProbe:
    def __init__(self, reader: StateReaderProtocol, config: NamingConfig):
        self.reader = reader
        self.config = config

    async def probe_network(
        self, chain_id: int, address: str, wallet: str
    ) -> ContractOwnership:
        try:
            owner = await self.reader.read_contract_state(chain_id, address, OWNER_QUERY)
        except Exception as e:
            logger.debug("owner() failed for %s on chain %d: %s", address, chain_id, e)
            return ContractOwnership(chain_id, address, ownable=False, owned=False)

        return ContractOwnership(
            chain_id,
            address,
            ownable=True,
            owned=_same_address(owner, wallet),
            owner=owner,
        )

    async def is_reverse_claimable(self, chain_id: int, address: str, wallet: str) -> bool:
        registry = self.config.chain(chain_id).contracts.ens_registry
        if not registry:
            return False
        query = ContractQuery("owner(bytes32)", (reverse_node(address),), "address")
        try:
            reverse_owner = await self.reader.read_contract_state(chain_id, registry, query)
        except Exception as e:
            logger.debug("Reverse node lookup failed for %s: %s", address, e)
            return False
        return _same_address(reverse_owner, wallet)

    async def probe_primary(
        self, chain_id: int, address: str, wallet: str
    ) -> ContractOwnership:
        result = await self.probe_network(chain_id, address, wallet)
        if result.owned:
            return result
        claimable = await self.is_reverse_claimable(chain_id, address, wallet)
        return ContractOwnership(
            chain_id,
            address,
            ownable=result.ownable,
            owned=result.owned,
            owner=result.owner,
            reverse_claimable=claimable,
        )

    async def probe_all(
        self,
        addresses: list[str],
        wallet: str,
        primary_chain_id: int,
        secondary_chain_ids: list[int],
    ) -> ProbeReport:
        """Probe every address on the primary and on each secondary network.

        Primary probes run as their own task; secondary probes are gathered
        across every (network, address) pair and joined together.
        """
        unique = list(dict.fromkeys(a for a in addresses if a.lower() != ZERO_ADDRESS))

        async def primary_probes() -> list[ContractOwnership]:
            return list(
                await asyncio.gather(
                    *(self.probe_primary(primary_chain_id, a, wallet) for a in unique)
                )
            )

        primary_task = asyncio.ensure_future(primary_probes())
        pairs = [(chain_id, a) for chain_id in secondary_chain_ids for a in unique]
        secondary_results = await asyncio.gather(
            *(self.probe_network(chain_id, a, wallet) for chain_id, a in pairs)
        )
        primary_results = await primary_task

        report = ProbeReport()
        for ownership in primary_results:
            report.primary[ownership.address.lower()] = ownership
        for chain_id in secondary_chain_ids:
            report.secondary.setdefault(chain_id, {})
        for (chain_id, a), ownership in zip(pairs, secondary_results):
            report.secondary[chain_id][a.lower()] = ownership

        logger.info(
            "Probed %d contracts on chain %d and %d secondary networks",
            len(unique),
            primary_chain_id,
            len(secondary_chain_ids),
        )
        return report

    async def probe_balances(
        self, wallet: str, chain_ids: list[int]
    ) -> dict[int, int | None]:
        async def balance(chain_id: int) -> int | None:
            try:
                return await self.reader.get_balance(chain_id, wallet)
            except Exception as e:
                logger.warning("Balance check failed on chain %d: %s", chain_id, e)
                return None

        results = await asyncio.gather(*(balance(c) for c in chain_ids))
        return dict(zip(chain_ids, results))

    async def is_parent_wrapped(self, chain_id: int, parent: str) -> bool:
        chain = self.config.chain(chain_id)
        registry = chain.contracts.ens_registry
        wrapper = chain.contracts.name_wrapper
        if chain.family == NetworkFamily.BASE or not registry or not wrapper:
            return False
        query = ContractQuery("owner(bytes32)", (namehash(parent),), "address")
        try:
            owner = await self.reader.read_contract_state(chain_id, registry, query)
        except Exception as e:
            logger.debug("Registry owner lookup failed for %s: %s", parent, e)
            return False
        return _same_address(owner, wrapper)

    async def check_operator_access(
        self, chain_id: int, wallet: str, parent: str, operator: str
    ) -> bool:
        """Whether ``operator`` may manage ``wallet``'s names under ``parent``.

        Wrapped parents are checked on the NameWrapper, everything else on the
        registry. A failed read counts as no access.
        """
        chain = self.config.chain(chain_id)
        wrapped = await self.is_parent_wrapped(chain_id, parent)
        target = chain.contracts.name_wrapper if wrapped else chain.contracts.ens_registry
        if not target:
            return False
        query = ContractQuery(
            "isApprovedForAll(address,address)", (wallet, operator), "bool"
        )
        try:
            return bool(await self.reader.read_contract_state(chain_id, target, query))
        except Exception as e:
            logger.warning("Operator access check failed on chain %d: %s", chain_id, e)
            return False
