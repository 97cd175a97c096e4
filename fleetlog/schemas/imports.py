from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field

class Ok(BaseModel):
    ok: bool = True

class ImportResult(BaseModel):
    success: bool
    message: str
    job_id: int | None = None
    summary: dict = Field(default_factory=dict)

class ImportJobOut(BaseModel):
    id: int
    kind: str
    status: str
    filename: str = ""
    summary: dict = Field(default_factory=dict)
    error: str = ""
    created_at: datetime | None = None
    processed_at: datetime | None = None

class ImportJobQueued(BaseModel):
    job_id: int
    status: str
