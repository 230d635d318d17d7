import json
import os
import pytest

from deployhub import create_app
from deployhub.models import db as _db, Organization
from deployhub.services.schema_service import event_metadata

@pytest.fixture(scope="session")
def app():
    os.environ["FLASK_ENV"] = "testing"
    app = create_app("testing")
    with app.app_context():
        _db.create_all()
        yield app
        _db.drop_all()

@pytest.fixture(autouse=True)
def clean_db(app):
    yield
    _db.session.rollback()
    _db.session.remove()
    event_metadata.drop_all(bind=_db.engine)
    _db.drop_all()
    _db.create_all()

@pytest.fixture()
def client(app):
    return app.test_client()

@pytest.fixture()
def organization(app):
    org = Organization(name="Acme")
    _db.session.add(org)
    _db.session.commit()
    return org


class FakeChainReader:
    """Stands in for the web3 reader: symbols -> addresses, with optional failures."""

    def __init__(self, addresses=None, fail_symbols=(), fail_listing=False):
        self.addresses = dict(addresses or {})
        self.fail_symbols = set(fail_symbols)
        self.fail_listing = fail_listing
        self.calls = []

    def get_contract_symbols(self, address, abi, rpc_url):
        self.calls.append(("symbols", address, rpc_url))
        if self.fail_listing:
            raise RuntimeError("rpc down")
        return {"symbols": list(self.addresses)}

    def get_diamond_address(self, address, abi, rpc_url, symbol):
        self.calls.append(("diamond", address, symbol))
        if symbol in self.fail_symbols:
            raise RuntimeError(f"cannot resolve {symbol}")
        return {"diamond_address": self.addresses[symbol]}


@pytest.fixture()
def fake_reader():
    return FakeChainReader


TOKEN_ABI = [
    {"type": "constructor", "inputs": []},
    {"type": "function", "name": "transfer", "inputs": [], "outputs": [], "stateMutability": "nonpayable"},
    {"type": "event", "name": "Transfer", "inputs": []},
]

FACTORY_ABI = [
    {"type": "function", "name": "symbols", "inputs": [], "outputs": [{"type": "string[]"}], "stateMutability": "view"},
    {"type": "function", "name": "getDiamondAddress", "inputs": [{"type": "string"}],
     "outputs": [{"type": "address"}], "stateMutability": "view"},
    {"type": "event", "name": "DiamondCreated", "inputs": []},
]


def write_network(root, network, chain_id, artifacts):
    """Lay out deployments/<network>/.chainId and one JSON file per artifact."""
    d = root / network
    d.mkdir(parents=True, exist_ok=True)
    if chain_id is not None:
        (d / ".chainId").write_text(str(chain_id), encoding="utf-8")
    for file_name, body in artifacts.items():
        content = body if isinstance(body, str) else json.dumps(body)
        (d / file_name).write_text(content, encoding="utf-8")
    return d


@pytest.fixture()
def deployments_dir(tmp_path):
    root = tmp_path / "deployments"
    root.mkdir()
    return root


def addr(n):
    """Digits-only address, so its checksum form is the same string."""
    return "0x" + format(n, "040d")


TOKEN_ADDRESS = "0x" + "1" * 40
FACTORY_ADDRESS = "0x" + "2" * 40
