# deployhub/routes/deploy_routes.py
from flask import Blueprint, current_app, jsonify, request

from deployhub.models import db, ImportJob
from deployhub.services.record_service import get_record_by_id, get_records

bp = Blueprint("deploy", __name__)  # prefix set on registration in deployhub/__init__.py


# --- Local helpers ---

def _as_bool(v) -> bool:
    return str(v).lower() in ("1", "true", "yes", "on")

def _iso(dt):
    return dt.replace(microsecond=0).isoformat() + "Z" if dt else None

def _job_json(job: ImportJob):
    return {
        "job_id": job.id,
        "task_id": job.task_id,
        "kind": job.kind,
        "status": job.status,
        "params": job.params,
        "result": job.result,
        "created_at": _iso(job.created_at),
        "updated_at": _iso(job.updated_at),
    }


@bp.post("/import")
def start_import():
    """
    Import hardhat deployments for an organization
    ---
    tags:
      - Deploy
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - organization_id
          properties:
            organization_id:
              type: integer
              example: 1
            folder:
              type: string
              description: Deployments folder; defaults to DEPLOYMENTS_DIR.
              example: "deployments"
            fallback_rpc_url:
              type: string
              example: "https://rpc.sepolia.org"
    responses:
      202:
        description: Accepted (job queued)
      400:
        description: Missing fields
      404:
        description: Organization not found
      501:
        description: Task unavailable
    """
    data = request.get_json(silent=True) or {}
    organization_id = data.get("organization_id")
    folder = (data.get("folder") or current_app.config.get("DEPLOYMENTS_DIR") or "").strip()
    fallback_rpc_url = (data.get("fallback_rpc_url") or "").strip() or None

    if organization_id in (None, ""):
        return jsonify({"ok": False, "error": "Missing 'organization_id'"}), 400
    if get_record_by_id("Organization", organization_id) is None:
        return jsonify({"ok": False, "error": f"Organization {organization_id} not found"}), 404

    try:
        from deployhub.tasks.deploy_tasks import import_organization
    except Exception:
        return jsonify({"ok": False, "error": "Task 'deploy.import_organization' unavailable"}), 501

    job = ImportJob(
        kind="import",
        status="queued",
        params={"organization_id": organization_id, "folder": folder, "fallback_rpc_url": fallback_rpc_url},
    )
    db.session.add(job)
    db.session.commit()

    async_res = import_organization.delay(job.id, organization_id, folder, fallback_rpc_url)
    job.task_id = async_res.id
    db.session.commit()

    return jsonify({"ok": True, "job_id": job.id, "task_id": async_res.id, "status": "queued"}), 202


@bp.get("/jobs/<int:job_id>")
def job_status(job_id: int):
    """
    Import job status
    ---
    tags:
      - Deploy
    parameters:
      - in: path
        name: job_id
        required: true
        type: integer
    responses:
      200: {description: OK}
      404: {description: Not found}
    """
    job = db.session.get(ImportJob, job_id)
    if not job:
        return jsonify({"ok": False, "error": "job not found"}), 404
    return jsonify({"ok": True, **_job_json(job)}), 200


@bp.post("/schema")
def schema():
    """
    Ensure every collection exists
    ---
    tags:
      - Deploy
    parameters:
      - in: query
        name: async
        required: false
        type: boolean
        description: Queue the check on Celery instead of running it inline.
    responses:
      200: {description: Schema checked}
      202: {description: Queued}
    """
    if _as_bool(request.args.get("async", False)):
        from deployhub.tasks.deploy_tasks import create_schema_task

        job = ImportJob(kind="schema", status="queued", params={})
        db.session.add(job)
        db.session.commit()
        async_res = create_schema_task.delay(job.id)
        job.task_id = async_res.id
        db.session.commit()
        return jsonify({"ok": True, "job_id": job.id, "task_id": async_res.id, "status": "queued"}), 202

    from deployhub.services.schema_service import create_schema
    result = create_schema()
    return jsonify({"ok": not result["failed"], **result}), 200


@bp.delete("/collections")
def delete_collections():
    """
    Delete every imported record; organizations are kept (destructive)
    ---
    tags:
      - Deploy
    parameters:
      - in: query
        name: confirm
        required: true
        type: boolean
    responses:
      200: {description: Deleted}
      400: {description: Confirmation missing}
    """
    if not _as_bool(request.args.get("confirm", False)):
        return jsonify({"ok": False, "error": "Pass confirm=true to delete all collections"}), 400

    from deployhub.services.schema_service import delete_all_collections
    return jsonify({"ok": True, **delete_all_collections()}), 200


@bp.get("/blockchains")
def list_blockchains():
    """
    Imported networks
    ---
    tags:
      - Deploy
    responses:
      200: {description: OK}
    """
    items = [b.to_dict() for b in get_records("Blockchain")]
    return jsonify({"ok": True, "items": items}), 200


@bp.get("/contracts")
def list_contracts():
    """
    Smart contracts, optionally for one chain id
    ---
    tags:
      - Deploy
    parameters:
      - in: query
        name: network_id
        required: false
        type: integer
        example: 11155111
    responses:
      200: {description: OK}
      404: {description: Unknown network}
    """
    network_id = request.args.get("network_id", type=int)
    if network_id is None:
        contracts = get_records("SmartContract")
    else:
        chains = get_records("Blockchain", ["network_id"], [network_id])
        if not chains:
            return jsonify({"ok": False, "error": f"network {network_id} not imported"}), 404
        contracts = get_records("SmartContract", ["network"], [chains[0]])
    return jsonify({"ok": True, "items": [c.to_dict() for c in contracts]}), 200


@bp.get("/factories/<int:factory_id>/diamonds")
def list_diamonds(factory_id: int):
    """
    Diamonds discovered from one DiamondFactory
    ---
    tags:
      - Deploy
    parameters:
      - in: path
        name: factory_id
        required: true
        type: integer
    responses:
      200: {description: OK}
      404: {description: Not found}
    """
    factory = get_record_by_id("DiamondFactory", factory_id)
    if factory is None:
        return jsonify({"ok": False, "error": "factory not found"}), 404
    diamonds = get_records("Diamond", ["diamond_factory"], [factory])
    return jsonify({
        "ok": True,
        "factory": factory.to_dict(),
        "items": [d.to_dict() for d in diamonds],
    }), 200
