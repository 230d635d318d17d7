# deployhub/tasks/deploy_tasks.py
import logging
from datetime import datetime
from typing import Optional

from celery import shared_task

from deployhub.models import db, ImportJob
from deployhub.services.schema_service import create_schema
from deployhub.services.sync_service import import_hardhat_deployments_for_organization

logger = logging.getLogger(__name__)


def _set_status(job: ImportJob, status: str, result=None):
    job.status = status
    if result is not None:
        job.result = result
    job.updated_at = datetime.utcnow()
    db.session.commit()


@shared_task(name="deploy.import_organization")
def import_organization(
    job_id: int,
    organization_id,
    deployments_folder_path: Optional[str] = None,
    fallback_rpc_url: Optional[str] = None,
):
    job = db.session.get(ImportJob, job_id)
    if not job:
        return {"error": f"ImportJob id {job_id} not found"}

    _set_status(job, "running")
    try:
        summary = import_hardhat_deployments_for_organization(
            organization_id, deployments_folder_path, fallback_rpc_url,
        )
    except Exception as e:
        db.session.rollback()
        logger.exception("Import job %s failed", job_id, extra={"job_id": job_id, "organization_id": organization_id})
        _set_status(job, "error", {"error": str(e)})
        raise

    _set_status(job, "done" if summary["ok"] else "error", summary)
    return summary


@shared_task(name="deploy.create_schema")
def create_schema_task(job_id: Optional[int] = None):
    job = db.session.get(ImportJob, job_id) if job_id else None
    if job:
        _set_status(job, "running")
    try:
        result = create_schema()
    except Exception as e:
        db.session.rollback()
        if job:
            _set_status(job, "error", {"error": str(e)})
        raise
    if job:
        _set_status(job, "done", result)
    return result
