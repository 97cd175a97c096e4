from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fleetlog.db.base import Base

class Truck(Base):
    __tablename__ = "trucks"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    license_plate: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    make: Mapped[str | None] = mapped_column(String(100), nullable=True)
    model: Mapped[str | None] = mapped_column(String(100), nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # km for road vehicles, hours for forklifts
    service_interval_km: Mapped[float | None] = mapped_column(Numeric(12, 2), nullable=True)
    next_service_km: Mapped[float | None] = mapped_column(Numeric(12, 2), nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    trips = relationship("TruckTrip", back_populates="truck", cascade="all, delete-orphan")
    services = relationship("Service", back_populates="truck", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Truck id={self.id} plate={self.license_plate}>"

class TruckTrip(Base):
    __tablename__ = "truck_trips"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    truck_id: Mapped[int] = mapped_column(Integer, ForeignKey("trucks.id", ondelete="CASCADE"), nullable=False)
    trip_date: Mapped[Date] = mapped_column(Date, nullable=False)
    opening_km: Mapped[float | None] = mapped_column(Numeric(12, 2), nullable=True)
    total_km: Mapped[float] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    liters_filled: Mapped[float | None] = mapped_column(Numeric(12, 2), nullable=True)
    worker_name: Mapped[str] = mapped_column(String(255), nullable=False, default="N/A")
    is_hours_based: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    import_job_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("import_jobs.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    truck = relationship("Truck", back_populates="trips")

class Service(Base):
    __tablename__ = "services"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    truck_id: Mapped[int] = mapped_column(Integer, ForeignKey("trucks.id", ondelete="CASCADE"), nullable=False)
    service_date: Mapped[Date] = mapped_column(Date, nullable=False)
    odo_reading: Mapped[float | None] = mapped_column(Numeric(12, 2), nullable=True)
    supplier: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    comments: Mapped[str] = mapped_column(Text, nullable=False, default="")
    expense_amount: Mapped[float] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    oil_filter: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    diesel_filter: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    air_filter: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tires: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    brakes: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    import_job_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("import_jobs.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    truck = relationship("Truck", back_populates="services")

Index("ix_truck_trips_truck_date", TruckTrip.truck_id, TruckTrip.trip_date)
Index("ix_services_truck_date", Service.truck_id, Service.service_date)
