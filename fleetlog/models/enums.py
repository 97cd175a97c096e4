from __future__ import annotations
from enum import Enum

class ImportKind(str, Enum):
    trips = "trips"
    services = "services"

class ImportStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    done = "done"
    failed = "failed"
