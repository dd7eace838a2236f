from unittest.mock import Mock

import pytest

from contract_naming.abi import namehash
from contract_naming.chains import ChainId
from contract_naming.reader import ContractQuery, JsonRpcStateReader

CONTRACT = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
WALLET = "0x1111111111111111111111111111111111111111"


@pytest.mark.unit
class TestContractQuery:
    def test_no_args(self):
        query = ContractQuery("owner()")
        assert query.arg_types == ()
        assert query.encode() == "0x8da5cb5b"

    def test_encode_args(self):
        query = ContractQuery(
            "isApprovedForAll(address,address)", (WALLET, CONTRACT), "bool"
        )
        encoded = query.encode()
        assert encoded.startswith("0xe985e9c5")
        assert len(encoded) == 2 + 8 + 128
        assert encoded.endswith("aa" * 20)

    def test_bytes32_arg(self):
        query = ContractQuery("owner(bytes32)", (namehash("eth"),))
        assert query.encode().endswith(namehash("eth").hex())

    def test_decode(self):
        query = ContractQuery("pricing()", returns="uint256")
        assert query.decode("0x" + "00" * 31 + "64") == 100

    def test_unsupported_return(self):
        with pytest.raises(ValueError):
            ContractQuery("name()", returns="string")


@pytest.mark.unit
class TestJsonRpcStateReader:
    @pytest.mark.asyncio
    async def test_read_contract_state(self, naming_config):
        client = Mock()
        client.call.return_value = "0x" + "00" * 12 + "11" * 20
        reader = JsonRpcStateReader(naming_config, clients={ChainId.SEPOLIA: client})

        owner = await reader.read_contract_state(ChainId.SEPOLIA, CONTRACT, ContractQuery("owner()"))

        assert owner == WALLET
        method, params, context = client.call.call_args.args
        assert method == "eth_call"
        assert params == [{"to": CONTRACT, "data": "0x8da5cb5b"}, "latest"]
        assert context == "Read owner()"

    @pytest.mark.asyncio
    async def test_empty_result_raises(self, naming_config):
        client = Mock()
        client.call.return_value = "0x"
        reader = JsonRpcStateReader(naming_config, clients={ChainId.SEPOLIA: client})

        with pytest.raises(ValueError, match="Empty result"):
            await reader.read_contract_state(ChainId.SEPOLIA, CONTRACT, ContractQuery("owner()"))

    @pytest.mark.asyncio
    async def test_get_balance(self, naming_config):
        client = Mock()
        client.call.return_value = "0xde0b6b3a7640000"
        reader = JsonRpcStateReader(naming_config, clients={ChainId.OPTIMISM_SEPOLIA: client})

        assert await reader.get_balance(ChainId.OPTIMISM_SEPOLIA, WALLET) == 10**18

    def test_client_uses_configured_rpc(self, naming_config):
        naming_config.rpc_urls[ChainId.BASE_SEPOLIA] = "http://base.local"
        reader = JsonRpcStateReader(naming_config)
        client = reader.client_for(ChainId.BASE_SEPOLIA)
        assert client.rpc_url == "http://base.local"
        assert reader.client_for(ChainId.BASE_SEPOLIA) is client
