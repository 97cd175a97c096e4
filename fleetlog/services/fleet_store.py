from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from fleetlog.importers.dedup import service_key, trip_key
from fleetlog.importers.services_importer import ServiceRecord
from fleetlog.importers.trips_importer import TripRecord
from fleetlog.models.fleet import Service, Truck, TruckTrip

class FleetStore:
    """Storage operations the importers need, on top of one SQLAlchemy session."""

    def __init__(self, session: Session, *, import_job_id: int | None = None):
        self.session = session
        self.import_job_id = import_job_id

    def find_truck(self, license_plate: str) -> int | None:
        return self.session.execute(
            select(Truck.id).where(Truck.license_plate == license_plate.strip())
        ).scalar_one_or_none()

    def upsert_truck(self, license_plate: str) -> int:
        plate = license_plate.strip()
        truck_id = self.find_truck(plate)
        if truck_id is not None:
            return truck_id
        truck = Truck(license_plate=plate)
        self.session.add(truck)
        self.session.flush()
        return truck.id

    def trip_keys(self, truck_id: int) -> set[tuple]:
        rows = self.session.execute(
            select(TruckTrip.trip_date, TruckTrip.opening_km).where(TruckTrip.truck_id == truck_id)
        ).all()
        return {trip_key(d, km) for d, km in rows}

    def service_keys(self, truck_id: int) -> set[tuple]:
        rows = self.session.execute(
            select(Service.service_date, Service.odo_reading, Service.expense_amount).where(Service.truck_id == truck_id)
        ).all()
        return {service_key(d, odo, amount) for d, odo, amount in rows}

    def insert_trips(self, truck_id: int, records: list[TripRecord]) -> int:
        self.session.add_all([
            TruckTrip(
                truck_id=truck_id,
                trip_date=r.trip_date,
                opening_km=r.opening_km,
                total_km=r.total_km,
                liters_filled=r.liters_filled,
                worker_name=r.worker_name,
                is_hours_based=r.is_hours_based,
                import_job_id=self.import_job_id,
            )
            for r in records
        ])
        self.session.flush()
        return len(records)

    def insert_services(self, truck_id: int, records: list[ServiceRecord]) -> int:
        self.session.add_all([
            Service(
                truck_id=truck_id,
                service_date=r.service_date,
                odo_reading=r.odo_reading,
                supplier=r.supplier,
                comments=r.comments,
                expense_amount=r.expense_amount,
                oil_filter=r.oil_filter,
                diesel_filter=r.diesel_filter,
                air_filter=r.air_filter,
                tires=r.tires,
                brakes=r.brakes,
                import_job_id=self.import_job_id,
            )
            for r in records
        ])
        self.session.flush()
        return len(records)

    def update_truck_service_info(self, truck_id: int, *, service_interval_km: float | None = None, next_service_km: float | None = None) -> bool:
        if service_interval_km is None and next_service_km is None:
            return False
        truck = self.session.get(Truck, truck_id)
        if truck is None:
            return False
        if service_interval_km is not None:
            truck.service_interval_km = service_interval_km
        if next_service_km is not None:
            truck.next_service_km = next_service_km
        self.session.flush()
        return True
