import tempfile
from pathlib import Path

import pytest

from contract_naming.chains import ChainId
from contract_naming.config import ChainSwitchConfig, NamingConfig

WALLET = "0x1111111111111111111111111111111111111111"
NAMING_CONTRACT = "0x2222222222222222222222222222222222222222"
L2_REVERSE_REGISTRAR = "0x3333333333333333333333333333333333333333"
CONTRACT_A = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
CONTRACT_B = "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"
CONTRACT_C = "0xcccccccccccccccccccccccccccccccccccccccc"


class FakeReader:
    """In-memory read boundary keyed by (chain, contract, signature).

    Unknown reads raise like a reverted call. Values may be exceptions or
    callables taking the query arguments.
    """

    def __init__(self):
        self.responses = {}
        self.balances = {}
        self.calls = []

    def set(self, chain_id, address, signature, value):
        self.responses[(chain_id, address.lower(), signature)] = value

    async def read_contract_state(self, chain_id, address, query):
        self.calls.append((chain_id, address.lower(), query.signature, query.args))
        key = (chain_id, address.lower(), query.signature)
        if key not in self.responses:
            raise ValueError("execution reverted")
        value = self.responses[key]
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return value(*query.args)
        return value

    async def get_balance(self, chain_id, address):
        value = self.balances.get(chain_id, 10**18)
        if isinstance(value, Exception):
            raise value
        return value


class FakeSigner:
    def __init__(self, address=WALLET, chain_id=ChainId.SEPOLIA, batched=False):
        self.address = address
        self.active_chain_id = chain_id
        self.batched = batched
        self.follow_switch = True
        self.submitted = []
        self.confirmed = []
        self.switch_requests = []
        self.network_polls = 0

    @property
    def is_batched(self):
        return self.batched

    async def submit_transaction(self, call):
        self.submitted.append(call)
        return "0x" + f"{len(self.submitted):064x}"

    async def await_confirmation(self, tx_hash):
        self.confirmed.append(tx_hash)
        return {"transactionHash": tx_hash, "status": 1}

    async def get_active_network(self):
        self.network_polls += 1
        return self.active_chain_id

    async def request_network_switch(self, chain_id):
        self.switch_requests.append(chain_id)
        if self.follow_switch:
            self.active_chain_id = chain_id


@pytest.fixture
def fake_reader():
    return FakeReader()


@pytest.fixture
def fake_signer():
    return FakeSigner()


@pytest.fixture
def naming_config(tmp_path):
    return NamingConfig(
        storage_dir=tmp_path,
        contracts={
            ChainId.SEPOLIA: {"naming_contract": NAMING_CONTRACT},
            ChainId.MAINNET: {"naming_contract": NAMING_CONTRACT},
            ChainId.OPTIMISM_SEPOLIA: {"l2_reverse_registrar": L2_REVERSE_REGISTRAR},
            ChainId.ARBITRUM_SEPOLIA: {"l2_reverse_registrar": L2_REVERSE_REGISTRAR},
            ChainId.BASE_SEPOLIA: {
                "naming_contract": NAMING_CONTRACT,
                "ens_registry": "0x4444444444444444444444444444444444444444",
                "public_resolver": "0x5555555555555555555555555555555555555555",
                "reverse_registrar": "0x6666666666666666666666666666666666666666",
                "l2_reverse_registrar": L2_REVERSE_REGISTRAR,
            },
        },
        chain_switch=ChainSwitchConfig(settle_delay=0, poll_interval=0, max_attempts=3),
    )


@pytest.fixture(autouse=True)
def isolate_naming_storage(monkeypatch, request):
    """Run tests with isolated config and log storage unless talking to live RPCs."""
    if request.node.get_closest_marker("integration"):
        yield
        return

    with tempfile.TemporaryDirectory(prefix="contract-naming-test-") as tmp_dir:
        monkeypatch.setenv("CONTRACT_NAMING_DIR", str(Path(tmp_dir)))
        yield
