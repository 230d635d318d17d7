from deployhub.services.rpc_service import DEFAULT_RPC_URL, provider_rpc_url, resolve_rpc_url

ARTIFACTS_WITH_URL = [{"artifact": {"contractName": "Token", "rpcUrl": "http://foo"}}]
ARTIFACTS_WITHOUT_URL = [{"artifact": {"contractName": "Token"}}]


def test_provider_url_when_network_known_and_key_set(app, monkeypatch):
    monkeypatch.setitem(app.config, "ALCHEMY_API_KEY", "k3y")

    url = resolve_rpc_url("mainnet", ARTIFACTS_WITH_URL, "http://installer")

    assert url == "https://eth-mainnet.g.alchemy.com/v2/k3y"


def test_unknown_network_uses_installer_fallback(app, monkeypatch):
    monkeypatch.setitem(app.config, "ALCHEMY_API_KEY", "k3y")

    assert resolve_rpc_url("my-devnet", ARTIFACTS_WITH_URL, "http://installer") == "http://installer"


def test_fallback_from_config(app, monkeypatch):
    monkeypatch.setitem(app.config, "FALLBACK_RPC_URL", "http://configured")

    assert resolve_rpc_url("mainnet", ARTIFACTS_WITH_URL) == "http://configured"


def test_no_key_no_fallback_uses_artifact_url(app):
    assert resolve_rpc_url("mainnet", ARTIFACTS_WITH_URL) == "http://foo"


def test_nothing_available_uses_local_node(app):
    assert resolve_rpc_url("mainnet", ARTIFACTS_WITHOUT_URL) == DEFAULT_RPC_URL == "http://localhost:8545"


def test_provider_table():
    assert provider_rpc_url("Base-Sepolia", "k") == "https://base-sepolia.g.alchemy.com/v2/k"
    assert provider_rpc_url("mainnet", None) is None
    assert provider_rpc_url("hardhat", "k") is None
