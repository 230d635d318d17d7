from types import SimpleNamespace

import pytest

from conftest import FACTORY_ADDRESS
from deployhub.services import chain_reader
from deployhub.services.chain_reader import ChainReadError, ChainReader


class _FakeFunctions:
    def symbols(self):
        return SimpleNamespace(call=lambda: ["AAA", "BBB"])

    def getDiamondAddress(self, symbol):
        def call():
            if symbol == "ZZZ":
                raise ValueError("execution reverted")
            return "0x" + "1" * 40
        return SimpleNamespace(call=call)


@pytest.fixture()
def fake_contract(monkeypatch):
    contract = SimpleNamespace(address=FACTORY_ADDRESS, functions=_FakeFunctions())
    monkeypatch.setattr(chain_reader, "_load_contract", lambda address, abi, rpc_url: contract)
    return contract


def test_symbols_and_diamond_address(fake_contract):
    reader = ChainReader()
    assert reader.get_contract_symbols(FACTORY_ADDRESS, [], "http://rpc") == {"symbols": ["AAA", "BBB"]}
    assert reader.get_diamond_address(FACTORY_ADDRESS, [], "http://rpc", "AAA") == {"diamond_address": "0x" + "1" * 40}


def test_failed_call_is_wrapped(fake_contract):
    with pytest.raises(ChainReadError, match="getDiamondAddress"):
        ChainReader().get_diamond_address(FACTORY_ADDRESS, [], "http://rpc", "ZZZ")


def test_missing_function_in_abi():
    contract = SimpleNamespace(address=FACTORY_ADDRESS, functions=SimpleNamespace())
    with pytest.raises(ChainReadError, match="not in the ABI"):
        chain_reader._call(contract, "symbols")


def test_rpc_url_is_required():
    with pytest.raises(ChainReadError):
        chain_reader._load_contract("0x" + "1" * 40, [], "")


def test_invalid_address_is_a_read_error(app):
    with pytest.raises(ChainReadError, match="Invalid contract"):
        chain_reader._load_contract("not-an-address", [], "http://localhost:8545")
