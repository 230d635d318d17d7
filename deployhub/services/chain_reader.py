# deployhub/services/chain_reader.py
import json
import logging
from functools import lru_cache
from typing import Any, Dict, List, Union

from flask import current_app, has_app_context
from web3 import Web3

logger = logging.getLogger(__name__)

ABIType = Union[List[dict], str]

# DiamondFactory read methods
SYMBOLS_FN = "symbols"
DIAMOND_ADDRESS_FN = "getDiamondAddress"


class ChainReadError(RuntimeError):
    """A read-only contract call could not be completed."""


def normalize_address(address: str) -> str:
    """Checksum form of an address; every stored address goes through here (raises on invalid)."""
    if not address or not Web3.is_address(address):
        raise ValueError(f"Empty or invalid address {address!r}")
    return Web3.to_checksum_address(address)


def _timeout() -> int:
    if has_app_context():
        return int(current_app.config.get("RPC_TIMEOUT", 10))
    return 10


@lru_cache(maxsize=32)
def _make_w3(rpc_url: str, timeout: int) -> Web3:
    return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))


def _load_contract(address: str, abi: ABIType, rpc_url: str):
    if not rpc_url:
        raise ChainReadError("No RPC URL given")
    if isinstance(abi, str):
        abi = json.loads(abi)
    try:
        w3 = _make_w3(rpc_url, _timeout())
        return w3.eth.contract(address=normalize_address(address), abi=abi)
    except (ValueError, TypeError) as e:
        raise ChainReadError(f"Invalid contract {address}: {e}") from e


def _call(contract, fn_name: str, *args):
    if not hasattr(contract.functions, fn_name):
        raise ChainReadError(f"Function '{fn_name}' is not in the ABI of {contract.address}")
    try:
        return getattr(contract.functions, fn_name)(*args).call()
    except Exception as e:
        raise ChainReadError(f"{fn_name} call on {contract.address} failed: {e}") from e


class ChainReader:
    """Read-only calls against a DiamondFactory."""

    def get_contract_symbols(self, address: str, abi: ABIType, rpc_url: str) -> Dict[str, Any]:
        contract = _load_contract(address, abi, rpc_url)
        symbols = _call(contract, SYMBOLS_FN)
        return {"symbols": [str(s) for s in (symbols or [])]}

    def get_diamond_address(self, address: str, abi: ABIType, rpc_url: str, symbol: str) -> Dict[str, Any]:
        contract = _load_contract(address, abi, rpc_url)
        diamond_address = _call(contract, DIAMOND_ADDRESS_FN, symbol)
        return {"diamond_address": diamond_address}


default_chain_reader = ChainReader()
