from types import SimpleNamespace

from conftest import FACTORY_ABI, FACTORY_ADDRESS, TOKEN_ABI, TOKEN_ADDRESS, FakeChainReader, addr, write_network
from deployhub.models import db, DiamondFactory, ImportJob, Organization
from deployhub.services.sync_service import import_hardhat_deployments_for_organization

def _import_sample(organization, deployments_dir):
    write_network(deployments_dir, "ethereum-sepolia", 11155111, {
        "Token.json": {"contractName": "Token", "address": TOKEN_ADDRESS, "abi": TOKEN_ABI},
        "DiamondFactory.json": {"contractName": "DiamondFactory", "address": FACTORY_ADDRESS, "abi": FACTORY_ABI},
    })
    import_hardhat_deployments_for_organization(
        organization.id, str(deployments_dir), chain_reader=FakeChainReader({"AAA": addr(1), "BBB": addr(2)}),
    )

def test_import_requires_organization_id(client):
    r = client.post("/api/deploy/import", json={})
    assert r.status_code == 400
    assert r.get_json()["ok"] is False

def test_import_unknown_organization(client):
    r = client.post("/api/deploy/import", json={"organization_id": 999})
    assert r.status_code == 404

def test_import_queues_a_job(client, organization, monkeypatch):
    calls = []

    def fake_delay(*args):
        calls.append(args)
        return SimpleNamespace(id="task-123")

    monkeypatch.setattr("deployhub.tasks.deploy_tasks.import_organization.delay", fake_delay)

    r = client.post("/api/deploy/import", json={
        "organization_id": organization.id,
        "folder": "some/deployments",
        "fallback_rpc_url": "https://rpc.example",
    })

    assert r.status_code == 202
    body = r.get_json()
    assert body["task_id"] == "task-123"
    job = db.session.get(ImportJob, body["job_id"])
    assert (job.kind, job.status, job.task_id) == ("import", "queued", "task-123")
    assert calls == [(job.id, organization.id, "some/deployments", "https://rpc.example")]

def test_job_status(client):
    job = ImportJob(kind="import", status="done", params={}, result={"ok": True})
    db.session.add(job)
    db.session.commit()

    r = client.get(f"/api/deploy/jobs/{job.id}")
    assert r.status_code == 200
    body = r.get_json()
    assert body["status"] == "done"
    assert body["result"] == {"ok": True}

    assert client.get("/api/deploy/jobs/9999").status_code == 404

def test_schema_inline(client):
    r = client.post("/api/deploy/schema")
    assert r.status_code == 200
    body = r.get_json()
    assert body["ok"] is True
    assert "Blockchain" in body["existing"]

def test_schema_async(client, monkeypatch):
    monkeypatch.setattr(
        "deployhub.tasks.deploy_tasks.create_schema_task.delay",
        lambda job_id: SimpleNamespace(id="task-schema"),
    )
    r = client.post("/api/deploy/schema?async=true")
    assert r.status_code == 202
    assert r.get_json()["task_id"] == "task-schema"

def test_delete_collections_needs_confirmation(client, organization, deployments_dir):
    _import_sample(organization, deployments_dir)
    assert client.delete("/api/deploy/collections").status_code == 400
    assert DiamondFactory.query.count() == 1

    r = client.delete("/api/deploy/collections?confirm=true")
    assert r.status_code == 200
    deleted = r.get_json()["deleted"]
    assert deleted["DiamondFactory"] == 1
    assert "Organization" not in deleted
    assert Organization.query.count() == 1


def test_listings(client, organization, deployments_dir):
    _import_sample(organization, deployments_dir)

    chains = client.get("/api/deploy/blockchains").get_json()["items"]
    assert [c["network_id"] for c in chains] == [11155111]

    contracts = client.get("/api/deploy/contracts?network_id=11155111").get_json()["items"]
    assert sorted(c["name"] for c in contracts) == ["DiamondFactory", "Token"]
    assert client.get("/api/deploy/contracts?network_id=5").status_code == 404

    factory = DiamondFactory.query.one()
    r = client.get(f"/api/deploy/factories/{factory.id}/diamonds")
    assert r.status_code == 200
    assert sorted(d["symbol"] for d in r.get_json()["items"]) == ["AAA", "BBB"]
    assert client.get("/api/deploy/factories/9999/diamonds").status_code == 404
