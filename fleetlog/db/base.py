from __future__ import annotations

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

# JSONB on postgres, plain JSON elsewhere (sqlite in tests)
JsonDict = JSON().with_variant(JSONB(), "postgresql")

class Base(DeclarativeBase):
    pass
