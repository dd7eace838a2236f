"""Tests for per network family call builders."""

from __future__ import annotations

import pytest

from contract_naming.abi import ZERO_ADDRESS, namehash, to_hex
from contract_naming.chains import ChainId, coin_type_for_chain
from contract_naming.config import NamingConfig
from contract_naming.features.batching import build
from contract_naming.features.batching.models import NamingRequest
from contract_naming.features.planning import (
    BaseAdapter,
    ContractCall,
    EnsL1Adapter,
    L2ReverseAdapter,
    PlanningError,
    UnsupportedOperationError,
    adapter_for,
)

WALLET = "0x1111111111111111111111111111111111111111"
NAMING_CONTRACT = "0x2222222222222222222222222222222222222222"
OPERATOR = NAMING_CONTRACT
CONTRACT_A = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"


@pytest.fixture
def sepolia(naming_config):
    return naming_config.chain(ChainId.SEPOLIA)


@pytest.fixture
def batch():
    return build(
        [NamingRequest(CONTRACT_A, "app"), NamingRequest(ZERO_ADDRESS, "team")], "x.eth"
    )[0]


@pytest.mark.unit
class TestEnsL1Adapter:
    def test_approval_targets_registry_or_wrapper(self, sepolia):
        adapter = EnsL1Adapter(sepolia)

        grant = adapter.build_operator_approval_call(OPERATOR, True, wrapped=False)
        assert grant.to == sepolia.contracts.ens_registry
        assert grant.function == "setApprovalForAll(address,bool)"
        assert grant.args == (OPERATOR, True)

        revoke = adapter.build_operator_approval_call(OPERATOR, False, wrapped=True)
        assert revoke.to == sepolia.contracts.name_wrapper
        assert revoke.args == (OPERATOR, False)
        assert revoke.description == "Revoke operator access"

    def test_subname_call_ethereum_only(self, sepolia, batch):
        call = EnsL1Adapter(sepolia).build_subname_call(batch, [60])
        assert call.to == NAMING_CONTRACT
        assert call.function == "setNameBatch(address[],string[],string)"
        assert call.args == ([CONTRACT_A, ZERO_ADDRESS], ["app", "team"], "x.eth")

    def test_subname_call_with_coin_types(self, sepolia, batch):
        optimism = coin_type_for_chain(ChainId.OPTIMISM_SEPOLIA)
        call = EnsL1Adapter(sepolia).build_subname_call(batch, [60, optimism], value=5)
        assert call.function == "setNameBatch(address[],string[],string,uint256[])"
        assert call.args[3] == [60, optimism]
        assert call.value == 5

    def test_forward_resolution_call(self, sepolia):
        call = EnsL1Adapter(sepolia).build_forward_resolution_call(
            "app.x.eth", CONTRACT_A.upper().replace("0X", "0x"), 60
        )
        assert call.to == sepolia.contracts.public_resolver
        assert call.function == "setAddr(bytes32,uint256,bytes)"
        assert call.args == (to_hex(namehash("app.x.eth")), 60, CONTRACT_A)

    def test_reverse_resolution_call(self, sepolia):
        call = EnsL1Adapter(sepolia).build_reverse_resolution_call(CONTRACT_A, "app.x.eth", WALLET)
        assert call.to == sepolia.contracts.reverse_registrar
        assert call.function == "setNameForAddr(address,address,address,string)"
        assert call.args == (CONTRACT_A, WALLET, sepolia.contracts.public_resolver, "app.x.eth")

    def test_missing_naming_contract(self, batch, tmp_path):
        chain = NamingConfig(storage_dir=tmp_path).chain(ChainId.MAINNET)
        with pytest.raises(PlanningError, match="naming contract"):
            EnsL1Adapter(chain).build_subname_call(batch, [60])


@pytest.mark.unit
class TestBaseAdapter:
    def test_approval_always_on_registry(self, naming_config):
        chain = naming_config.chain(ChainId.BASE_SEPOLIA)
        call = BaseAdapter(chain).build_operator_approval_call(OPERATOR, True, wrapped=True)
        assert call.to == chain.contracts.ens_registry


@pytest.mark.unit
class TestL2ReverseAdapter:
    def test_reverse_call_shape(self, naming_config):
        chain = naming_config.chain(ChainId.OPTIMISM_SEPOLIA)
        call = L2ReverseAdapter(chain).build_reverse_resolution_call(
            CONTRACT_A, "app.x.eth", WALLET
        )
        assert call.chain_id == ChainId.OPTIMISM_SEPOLIA
        assert call.to == chain.contracts.l2_reverse_registrar
        assert call.function == "setNameForAddr(address,string)"
        assert call.args == (CONTRACT_A, "app.x.eth")

    def test_other_operations_unsupported(self, naming_config, batch):
        adapter = L2ReverseAdapter(naming_config.chain(ChainId.OPTIMISM_SEPOLIA))
        with pytest.raises(UnsupportedOperationError):
            adapter.build_subname_call(batch, [60])
        with pytest.raises(UnsupportedOperationError):
            adapter.build_operator_approval_call(OPERATOR, True, False)
        with pytest.raises(UnsupportedOperationError):
            adapter.build_forward_resolution_call("app.x.eth", CONTRACT_A, 60)

    def test_missing_registrar(self, naming_config):
        adapter = L2ReverseAdapter(naming_config.chain(ChainId.OPTIMISM))
        with pytest.raises(PlanningError, match="L2 reverse registrar"):
            adapter.build_reverse_resolution_call(CONTRACT_A, "app.x.eth", WALLET)


@pytest.mark.unit
class TestAdapterFor:
    def test_family_dispatch(self, naming_config):
        assert type(adapter_for(naming_config.chain(ChainId.SEPOLIA))) is EnsL1Adapter
        assert type(adapter_for(naming_config.chain(ChainId.BASE_SEPOLIA))) is BaseAdapter
        assert isinstance(
            adapter_for(naming_config.chain(ChainId.BASE_SEPOLIA), secondary=True),
            L2ReverseAdapter,
        )

    def test_l2_cannot_be_primary(self, naming_config):
        with pytest.raises(UnsupportedOperationError):
            adapter_for(naming_config.chain(ChainId.ARBITRUM_SEPOLIA))


@pytest.mark.unit
class TestContractCall:
    def test_describe(self):
        call = ContractCall(
            ChainId.SEPOLIA,
            NAMING_CONTRACT,
            "setNameBatch(address[],string[],string)",
            ([CONTRACT_A], ["app"], "x.eth"),
            value=10,
        )
        assert call.name == "setNameBatch"
        assert call.describe() == (
            f'[Sepolia] {NAMING_CONTRACT}.setNameBatch([{CONTRACT_A}], ["app"], "x.eth") value=10'
        )

    def test_with_value_keeps_fields(self):
        call = ContractCall(ChainId.SEPOLIA, NAMING_CONTRACT, "pricing()", description="d")
        priced = call.with_value(7)
        assert priced.value == 7
        assert priced.description == "d"
        assert call.value == 0
