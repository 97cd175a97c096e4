from __future__ import annotations

import structlog
from fastapi import FastAPI, File, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse

from fleetlog.core.config import settings
from fleetlog.core.logging import configure_logging
from fleetlog.db.session import session_scope
from fleetlog.models.enums import ImportKind, ImportStatus
from fleetlog.schemas.imports import ImportJobOut, ImportJobQueued, ImportResult, Ok
from fleetlog.services.import_jobs import create_job, execute_job, get_job, job_as_dict, recent_jobs
from fleetlog.services.s3 import import_object_key, put_bytes
from apps.worker.celery_app import celery

configure_logging(settings.log_level)
log = structlog.get_logger(__name__)

app = FastAPI(title=settings.app_name)

def _failure(message: str, status_code: int, job_id: int | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ImportResult(success=False, message=message, job_id=job_id).model_dump(),
    )

@app.get("/health", response_model=Ok)
def health() -> Ok:
    return Ok(ok=True)

@app.get("/imports/jobs", response_model=list[ImportJobOut])
def list_import_jobs():
    with session_scope() as session:
        return [ImportJobOut(**job_as_dict(j)) for j in recent_jobs(session)]

@app.get("/imports/jobs/{job_id}", response_model=ImportJobOut)
def import_job_status(job_id: int):
    with session_scope() as session:
        job = get_job(session, job_id)
        if job is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Import job not found")
        return ImportJobOut(**job_as_dict(job))

@app.post("/imports/{kind}", response_model=ImportResult)
def import_workbook(kind: ImportKind, file: UploadFile | None = File(None)):
    data = file.file.read() if file is not None else b""
    if not data:
        return _failure("No file uploaded.", status.HTTP_400_BAD_REQUEST)

    try:
        with session_scope() as session:
            job = create_job(session, kind=kind, filename=file.filename, actor="api")
            summary = execute_job(session, job, data, actor="api")
            job_id, error = job.id, job.error
    except Exception as e:
        log.exception("import_request_failed", kind=kind.value, filename=file.filename)
        return _failure(f"Import failed: {e}", status.HTTP_500_INTERNAL_SERVER_ERROR)

    if summary is None:
        return _failure(f"Import failed: {error}", status.HTTP_500_INTERNAL_SERVER_ERROR, job_id=job_id)
    return ImportResult(success=True, message=summary.message, job_id=job_id, summary=summary.as_dict())

@app.post("/imports/{kind}/jobs", response_model=ImportJobQueued, status_code=status.HTTP_202_ACCEPTED)
def enqueue_import(kind: ImportKind, file: UploadFile | None = File(None)):
    data = file.file.read() if file is not None else b""
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")

    key = import_object_key(kind.value, file.filename)
    put_bytes(key, data)
    with session_scope() as session:
        job = create_job(session, kind=kind, filename=file.filename, actor="api", s3_key=key)
        job_id = job.id

    celery.send_task("apps.worker.tasks.process_import_job", args=[job_id])
    log.info("import_queued", job_id=job_id, kind=kind.value, s3_key=key)
    return ImportJobQueued(job_id=job_id, status=ImportStatus.pending.value)
