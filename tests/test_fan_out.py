import threading

from flask import g

from conftest import addr
from deployhub.services import network_importer

IDS = {"blockchain": 1, "project": 1, "deployment": 1}


def _records(*names):
    return [
        {"name": n, "network_name": "mainnet", "address": addr(i), "artifact": {"contractName": n}}
        for i, n in enumerate(names, start=1)
    ]


def _stub_import(monkeypatch, fail_name, gate=None):
    seen = []

    def fake_import(record, blockchain, project, deployment, rpc_url, chain_reader=None):
        name = record["artifact"]["contractName"]
        seen.append((name, threading.get_ident()))
        if gate is not None:
            # anything left in g came from another artifact sharing the context
            seen.append(("leftover", g.get("artifact_name")))
            g.artifact_name = name
            if name in ("A", "B"):
                # A and B only get past here together, i.e. side by side
                gate.wait()
        if name == fail_name:
            raise RuntimeError(f"{name} exploded")

    monkeypatch.setattr(network_importer, "_load_parents", lambda ids: (None, None, None))
    monkeypatch.setattr(network_importer, "import_deployment_artifact", fake_import)
    return seen


def test_pool_isolates_failures_and_keeps_order(app, monkeypatch):
    monkeypatch.setitem(app.config, "IMPORT_MAX_WORKERS", 4)
    monkeypatch.setattr(network_importer, "parallel_imports_supported", lambda: True)
    seen = _stub_import(monkeypatch, fail_name="B", gate=threading.Barrier(2, timeout=5))

    outcomes = network_importer.fan_out(_records("A", "B", "C", "D"), IDS, "http://rpc")

    assert [o["name"] for o in outcomes] == ["A", "B", "C", "D"]
    assert [o["ok"] for o in outcomes] == [True, False, True, True]
    assert outcomes[1] == {"name": "B", "address": addr(2), "ok": False, "error": "B exploded"}

    runs = [entry for entry in seen if entry[0] != "leftover"]
    leftovers = [value for key, value in seen if key == "leftover"]
    assert sorted(name for name, _ in runs) == ["A", "B", "C", "D"]
    assert all(thread != threading.get_ident() for _, thread in runs)
    # each artifact got a fresh app context
    assert leftovers == [None, None, None, None]
    assert "artifact_name" not in g


def test_sqlite_runs_inline_even_with_workers_configured(app, monkeypatch):
    monkeypatch.setitem(app.config, "IMPORT_MAX_WORKERS", 4)
    seen = _stub_import(monkeypatch, fail_name="B")

    outcomes = network_importer.fan_out(_records("A", "B", "C"), IDS, "http://rpc")

    assert network_importer.parallel_imports_supported() is False
    assert [(o["name"], o["ok"]) for o in outcomes] == [("A", True), ("B", False), ("C", True)]
    assert [name for name, _ in seen] == ["A", "B", "C"]
    assert {thread for _, thread in seen} == {threading.get_ident()}
