#!/usr/bin/env python
from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

from fleetlog.core.config import settings
from fleetlog.core.logging import configure_logging
from fleetlog.db.session import session_scope
from fleetlog.models.enums import ImportKind
from fleetlog.services.import_jobs import create_job, execute_job

def main():
    p = argparse.ArgumentParser(description="Import a trip or service history workbook (one sheet per truck).")
    p.add_argument("path", type=Path, help="XLSX workbook")
    p.add_argument("--kind", type=str, default=ImportKind.trips.value, choices=[k.value for k in ImportKind], help="What the workbook holds")
    p.add_argument("--cutoff", type=date.fromisoformat, default=None, help="Earliest date to import, YYYY-MM-DD (default: IMPORT_START_DATE)")
    args = p.parse_args()

    configure_logging(settings.log_level)
    data = args.path.read_bytes()

    with session_scope() as session:
        job = create_job(session, kind=ImportKind(args.kind), filename=args.path.name, actor="cli")
        summary = execute_job(session, job, data, actor="cli", cutoff=args.cutoff)
        job_id, error = job.id, job.error

    if summary is None:
        print(f"Import failed: {error} (job id={job_id})")
        sys.exit(1)
    print(f"{summary.message} (job id={job_id})")

if __name__ == "__main__":
    main()
