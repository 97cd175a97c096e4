from __future__ import annotations

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from fleetlog.db.base import Base, JsonDict

class ImportJob(Base):
    __tablename__ = "import_jobs"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    kind: Mapped[str] = mapped_column(String(50), nullable=False)  # trips|services
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="pending")
    filename: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    s3_key: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    summary: Mapped[dict] = mapped_column(JsonDict, nullable=False, default=dict)
    error: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    processed_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)
