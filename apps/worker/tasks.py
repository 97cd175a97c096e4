from __future__ import annotations

from datetime import datetime

import httpx
import structlog
from celery import shared_task

from fleetlog.core.config import settings
from fleetlog.db.session import session_scope
from fleetlog.models.enums import ImportStatus
from fleetlog.services.audit import audit_log
from fleetlog.services.import_jobs import execute_job, get_job
from fleetlog.services.s3 import get_bytes

log = structlog.get_logger(__name__)

def tg_send_message(chat_id: int, text: str) -> None:
    if not settings.telegram_bot_token:
        return
    url = f"https://api.telegram.org/bot{settings.telegram_bot_token}/sendMessage"
    try:
        with httpx.Client(timeout=10) as client:
            client.post(url, json={"chat_id": chat_id, "text": text})
    except httpx.HTTPError as e:
        log.warning("telegram_notify_failed", error=str(e))

def _notify(text: str) -> None:
    if settings.telegram_default_chat_id:
        tg_send_message(int(settings.telegram_default_chat_id), text)

@shared_task(name="apps.worker.tasks.process_import_job")
def process_import_job(import_job_id: int) -> dict:
    with session_scope() as session:
        job = get_job(session, import_job_id)
        if job is None:
            log.warning("import_job_missing", job_id=import_job_id)
            return {"ok": False, "error": "Import job not found"}
        if job.status != ImportStatus.pending.value:
            return {"ok": False, "error": f"Import job already {job.status}"}

        try:
            data = get_bytes(job.s3_key)
        except Exception as e:
            log.exception("import_download_failed", job_id=job.id, s3_key=job.s3_key)
            job.status = ImportStatus.failed.value
            job.error = f"Cannot download workbook: {e}"
            job.processed_at = datetime.now().astimezone()
            audit_log(session, actor="worker", action=f"{job.kind}_import_failed", entity_type="import_job", entity_id=str(job.id), payload={"error": job.error})
            summary = None
        else:
            summary = execute_job(session, job, data, actor="worker")
        job_id, kind, error = job.id, job.kind, job.error

    if summary is None:
        _notify(f"❌ Import #{job_id} ({kind}) failed.\nError: {error}")
        return {"ok": False, "error": error}
    _notify(f"✅ Import #{job_id} ({kind}) finished.\n{summary.message}")
    return {"ok": True, **summary.as_dict()}
