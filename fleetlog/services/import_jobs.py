from __future__ import annotations

from datetime import date, datetime

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from fleetlog.models.enums import ImportKind, ImportStatus
from fleetlog.models.imports import ImportJob
from fleetlog.services.audit import audit_log
from fleetlog.services.history_import import ImportSummary, run_import

log = structlog.get_logger(__name__)

def create_job(session: Session, *, kind: ImportKind, filename: str, actor: str, s3_key: str = "") -> ImportJob:
    job = ImportJob(kind=ImportKind(kind).value, status=ImportStatus.pending.value, filename=filename or "", s3_key=s3_key)
    session.add(job)
    session.flush()
    audit_log(session, actor=actor, action=f"{job.kind}_import_created", entity_type="import_job", entity_id=str(job.id), payload={"filename": job.filename, "s3_key": s3_key})
    return job

def get_job(session: Session, job_id: int) -> ImportJob | None:
    return session.execute(select(ImportJob).where(ImportJob.id == job_id)).scalar_one_or_none()

def recent_jobs(session: Session, limit: int = 10) -> list[ImportJob]:
    return list(session.execute(select(ImportJob).order_by(ImportJob.id.desc()).limit(limit)).scalars())

def execute_job(session: Session, job: ImportJob, data: bytes, *, actor: str, cutoff: date | None = None) -> ImportSummary | None:
    """Run the importer for ``job`` and record the outcome on it.

    Returns None when the import failed; ``job.error`` then holds the reason.
    """
    job.status = ImportStatus.processing.value
    session.flush()
    try:
        with session.begin_nested():
            summary = run_import(session, ImportKind(job.kind), data, cutoff=cutoff, import_job_id=job.id)
    except Exception as e:
        log.exception("import_failed", job_id=job.id, kind=job.kind)
        job.status = ImportStatus.failed.value
        job.error = str(e) or type(e).__name__
        job.processed_at = datetime.now().astimezone()
        audit_log(session, actor=actor, action=f"{job.kind}_import_failed", entity_type="import_job", entity_id=str(job.id), payload={"error": job.error})
        return None

    job.status = ImportStatus.done.value
    job.summary = summary.as_dict()
    job.processed_at = datetime.now().astimezone()
    audit_log(session, actor=actor, action=f"{job.kind}_import_done", entity_type="import_job", entity_id=str(job.id), payload=job.summary)
    return summary

def job_as_dict(job: ImportJob) -> dict:
    return {
        "id": job.id,
        "kind": job.kind,
        "status": job.status,
        "filename": job.filename,
        "summary": job.summary or {},
        "error": job.error or "",
        "created_at": job.created_at.isoformat() if job.created_at else None,
        "processed_at": job.processed_at.isoformat() if job.processed_at else None,
    }
