"""Step planning for batch and single-contract naming runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from contract_naming.abi import namehash
from contract_naming.chains import coin_type_for_chain, get_chain_name, secondary_chain_id
from contract_naming.config import NamingConfig
from contract_naming.features.batching.models import Batch, NamingRequest
from contract_naming.features.batching.service import NameGraphBuilder, count_entries
from contract_naming.features.batching.validators import (
    NamingValidationError,
    validate_requests,
)
from contract_naming.features.execution.chain_switch import ChainSwitchCoordinator
from contract_naming.features.execution.service import Step
from contract_naming.features.ownership.service import OwnershipProbe, ProbeReport
from contract_naming.features.planning.adapters import (
    ETHEREUM_COIN_TYPE,
    ContractCall,
    PlanningError,
    adapter_for,
)
from contract_naming.reader import ContractQuery
from contract_naming.shared.protocols import SignerProtocol, StateReaderProtocol
from contract_naming.validation import AddressValidator, NameValidator

logger = logging.getLogger(__name__)

PRICING_QUERY = ContractQuery("pricing()", returns="uint256")


@dataclass(frozen=True)
class PlanningOptions:
    skip_primary_naming: bool = False
    secondary_networks: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExecutionContext:
    """Everything a run is planned against, fixed for the run's lifetime."""

    wallet: str
    primary_chain_id: int
    root_parent: str
    options: PlanningOptions = field(default_factory=PlanningOptions)

    @property
    def skip_primary_naming(self) -> bool:
        return self.options.skip_primary_naming

    @property
    def secondary_chain_ids(self) -> list[int]:
        ids = [
            secondary_chain_id(name, self.primary_chain_id)
            for name in self.options.secondary_networks
        ]
        return list(dict.fromkeys(ids))

    @property
    def coin_types(self) -> list[int]:
        types = [] if self.skip_primary_naming else [ETHEREUM_COIN_TYPE]
        types.extend(coin_type_for_chain(c) for c in self.secondary_chain_ids)
        return list(dict.fromkeys(types))


@dataclass
class NamingPlan:
    steps: list[Step]
    calls: list[ContractCall]
    title: str
    subtitle: str = ""
    batches: list[Batch] = field(default_factory=list)

    def preview(self) -> str:
        return "\n".join(f"{i + 1}. {call.describe()}" for i, call in enumerate(self.calls))


def level_suffix(level: int) -> str:
    return f"{level + 2}LD"


def _plural(count: int, word: str, plural: str | None = None) -> str:
    return f"{count} {word if count == 1 else (plural or word + 's')}"


class StepPlanner:
    def __init__(
        self,
        context: ExecutionContext,
        config: NamingConfig,
        signer: SignerProtocol,
        reader: StateReaderProtocol,
        coordinator: ChainSwitchCoordinator | None = None,
    ):
        self.context = context
        self.config = config
        self.signer = signer
        self.reader = reader
        self.coordinator = coordinator or ChainSwitchCoordinator(signer, config.chain_switch)
        self.primary = config.chain(context.primary_chain_id)
        self.adapter = adapter_for(self.primary)

    def _submit_action(self, call: ContractCall):
        async def action() -> str | None:
            await self.coordinator.ensure_chain(call.chain_id)
            return await self.signer.submit_transaction(call)

        return action

    def _batch_action(self, call: ContractCall):
        async def action() -> str | None:
            await self.coordinator.ensure_chain(call.chain_id)
            price = await self.reader.read_contract_state(call.chain_id, call.to, PRICING_QUERY)
            return await self.signer.submit_transaction(call.with_value(int(price)))

        return action

    def _forward_action(self, call: ContractCall, full_name: str, address: str, coin_type: int):
        async def action() -> str | None:
            if await self._forward_already_set(call.to, full_name, address, coin_type):
                logger.info(
                    "%s already resolves to %s for coin type %d", full_name, address, coin_type
                )
                return None
            await self.coordinator.ensure_chain(call.chain_id)
            return await self.signer.submit_transaction(call)

        return action

    async def _forward_already_set(
        self, resolver: str, full_name: str, address: str, coin_type: int
    ) -> bool:
        query = ContractQuery("addr(bytes32,uint256)", (namehash(full_name), coin_type), "bytes")
        try:
            current = await self.reader.read_contract_state(
                self.context.primary_chain_id, resolver, query
            )
        except Exception as e:
            logger.debug("Current address lookup failed for %s: %s", full_name, e)
            return False
        return current.hex() == address.lower().removeprefix("0x")

    def _reverse_steps(
        self, targets: list[tuple[str, str]], report: ProbeReport
    ) -> tuple[list[Step], list[ContractCall]]:
        steps: list[Step] = []
        calls: list[ContractCall] = []

        if not self.context.skip_primary_naming:
            for address, full_name in targets:
                ownership = report.primary_for(address)
                if ownership is None or not ownership.can_set_reverse:
                    continue
                call = self.adapter.build_reverse_resolution_call(
                    address, full_name, self.context.wallet
                )
                calls.append(call)
                steps.append(
                    Step(
                        title=f"Set reverse record for {full_name.split('.', 1)[0]}",
                        chain_id=self.primary.chain_id,
                        action=self._submit_action(call),
                    )
                )

        for chain_id in self.context.secondary_chain_ids:
            chain = self.config.chain(chain_id)
            adapter = adapter_for(chain, secondary=True)
            first = True
            for address, full_name in targets:
                ownership = report.secondary_for(chain_id, address)
                if ownership is None or not ownership.owned:
                    continue
                call = adapter.build_reverse_resolution_call(
                    address, full_name, self.context.wallet
                )
                label = full_name.split(".", 1)[0]
                prefix = f"Switch to {chain.name} and set" if first else "Set"
                calls.append(call)
                steps.append(
                    Step(
                        title=f"{prefix} reverse record for {label}",
                        chain_id=chain_id,
                        action=self._submit_action(call),
                    )
                )
                first = False

        return steps, calls

    def plan(
        self, batches: list[Batch], report: ProbeReport, has_operator_access: bool
    ) -> NamingPlan:
        """Build the ordered steps for a batch run.

        Order: grant operator access (when not held), one subname step per
        batch, primary reverse records, secondary reverse records per
        network, then revoke operator access back on the primary network.
        """
        steps: list[Step] = []
        calls: list[ContractCall] = []
        operator = self.primary.contracts.naming_contract
        if not operator:
            raise PlanningError(f"No naming contract configured for {self.primary.name}")

        if not has_operator_access:
            call = self.adapter.build_operator_approval_call(operator, True, report.parent_wrapped)
            calls.append(call)
            steps.append(
                Step(
                    title="Grant operator access",
                    chain_id=self.primary.chain_id,
                    action=self._submit_action(call),
                )
            )

        coin_types = self.context.coin_types
        for batch in batches:
            call = self.adapter.build_subname_call(batch, coin_types)
            real = len(batch.real_entries)
            calls.append(call)
            steps.append(
                Step(
                    title=(
                        f'Creating {_plural(len(batch), "subdomain")} '
                        f'under "{batch.immediate_parent}" '
                        f"({_plural(real, 'contract')}) [{level_suffix(batch.level)}]"
                    ),
                    chain_id=self.primary.chain_id,
                    action=self._batch_action(call),
                )
            )

        targets = [
            (entry.address, entry.full_name)
            for batch in batches
            for entry in batch.real_entries
        ]
        reverse_steps, reverse_calls = self._reverse_steps(targets, report)
        steps.extend(reverse_steps)
        calls.extend(reverse_calls)

        if not has_operator_access or self.config.always_revoke_operator_access:
            call = self.adapter.build_operator_approval_call(operator, False, report.parent_wrapped)
            calls.append(call)
            steps.append(
                Step(
                    title="Revoke operator access",
                    chain_id=self.primary.chain_id,
                    action=self._submit_action(call),
                )
            )

        real, placeholders = count_entries(batches)
        title = (
            f"Naming {_plural(real + placeholders, 'entry', 'entries')} "
            f"in {_plural(len(batches), 'batch', 'batches')}"
        )
        subtitle = f"{_plural(real, 'contract')} + {_plural(placeholders, 'subdomain')}"
        logger.info("Planned %d steps: %s (%s)", len(steps), title, subtitle)
        return NamingPlan(steps=steps, calls=calls, title=title, subtitle=subtitle, batches=batches)

    def plan_existing_name(
        self, address: str, full_name: str, report: ProbeReport
    ) -> NamingPlan:
        """Name one contract with a name that is already registered."""
        steps: list[Step] = []
        calls: list[ContractCall] = []

        for coin_type in self.context.coin_types:
            call = self.adapter.build_forward_resolution_call(full_name, address, coin_type)
            network = (
                self.primary.name
                if coin_type == ETHEREUM_COIN_TYPE
                else _network_for_coin_type(self.context, coin_type)
            )
            calls.append(call)
            steps.append(
                Step(
                    title=f"Set forward resolution on {network}",
                    chain_id=self.primary.chain_id,
                    action=self._forward_action(call, full_name, address, coin_type),
                )
            )

        reverse_steps, reverse_calls = self._reverse_steps([(address, full_name)], report)
        steps.extend(reverse_steps)
        calls.extend(reverse_calls)

        title = f"Naming {address}"
        logger.info("Planned %d steps for %s -> %s", len(steps), address, full_name)
        return NamingPlan(steps=steps, calls=calls, title=title, subtitle=full_name)


def _network_for_coin_type(context: ExecutionContext, coin_type: int) -> str:
    for chain_id in context.secondary_chain_ids:
        if coin_type_for_chain(chain_id) == coin_type:
            return get_chain_name(chain_id)
    return f"coin type {coin_type}"


class BatchNamingService:
    """Validates, probes and plans naming runs against live chain state."""

    def __init__(
        self,
        config: NamingConfig,
        signer: SignerProtocol,
        reader: StateReaderProtocol,
        probe: OwnershipProbe | None = None,
    ):
        self.config = config
        self.signer = signer
        self.reader = reader
        self.probe = probe or OwnershipProbe(reader, config)

    async def _check_secondary_balances(self, context: ExecutionContext) -> None:
        chain_ids = context.secondary_chain_ids
        if not chain_ids:
            return
        balances = await self.probe.probe_balances(context.wallet, chain_ids)
        empty = [get_chain_name(c) for c, balance in balances.items() if balance == 0]
        if empty:
            raise PlanningError(
                f"Zero balance on {', '.join(empty)}. Fund the wallet before naming there."
            )

    def planner(self, context: ExecutionContext) -> StepPlanner:
        return StepPlanner(context, self.config, self.signer, self.reader)

    async def prepare(
        self,
        requests: list[NamingRequest],
        root_parent: str,
        primary_chain_id: int,
        options: PlanningOptions | None = None,
    ) -> NamingPlan:
        context = ExecutionContext(
            wallet=self.signer.address,
            primary_chain_id=primary_chain_id,
            root_parent=root_parent.strip().lower(),
            options=options or PlanningOptions(),
        )
        normalized = validate_requests(requests, context.root_parent)
        batches = NameGraphBuilder(context.root_parent).build(normalized)

        await self._check_secondary_balances(context)

        planner = self.planner(context)
        operator = planner.primary.contracts.naming_contract
        if not operator:
            raise PlanningError(f"No naming contract configured for {planner.primary.name}")

        has_access = await self.probe.check_operator_access(
            primary_chain_id, context.wallet, context.root_parent, operator
        )
        report = await self.probe.probe_all(
            [entry.address for batch in batches for entry in batch.real_entries],
            context.wallet,
            primary_chain_id,
            context.secondary_chain_ids,
        )
        report.parent_wrapped = await self.probe.is_parent_wrapped(
            primary_chain_id, context.root_parent
        )
        return planner.plan(batches, report, has_access)

    async def prepare_existing_name(
        self,
        address: str,
        full_name: str,
        primary_chain_id: int,
        options: PlanningOptions | None = None,
    ) -> NamingPlan:
        address_result = AddressValidator.validate(address)
        if not address_result.is_valid:
            raise NamingValidationError(address_result.error_message or "Invalid address")
        name_result = NameValidator.validate_name(full_name)
        if not name_result.is_valid:
            raise NamingValidationError(name_result.error_message or "Invalid name")
        full_name = name_result.normalized_value

        context = ExecutionContext(
            wallet=self.signer.address,
            primary_chain_id=primary_chain_id,
            root_parent=full_name.split(".", 1)[1] if "." in full_name else full_name,
            options=options or PlanningOptions(),
        )
        await self._check_secondary_balances(context)
        report = await self.probe.probe_all(
            [address], context.wallet, primary_chain_id, context.secondary_chain_ids
        )
        return self.planner(context).plan_existing_name(address, full_name, report)

    async def priced_calls(self, plan: NamingPlan) -> list[ContractCall]:
        """The plan's calls with the current naming price attached to subname calls."""
        prices: dict[tuple[int, str], int] = {}
        priced: list[ContractCall] = []
        for call in plan.calls:
            if call.name != "setNameBatch":
                priced.append(call)
                continue
            key = (call.chain_id, call.to)
            if key not in prices:
                prices[key] = int(
                    await self.reader.read_contract_state(call.chain_id, call.to, PRICING_QUERY)
                )
            priced.append(call.with_value(prices[key]))
        return priced
