#!/usr/bin/env python
from __future__ import annotations

import argparse
from fleetlog.db.session import session_scope
from fleetlog.models.fleet import Truck
from fleetlog.services.audit import audit_log

def main():
    p = argparse.ArgumentParser(description="Create or update a truck by license plate.")
    p.add_argument("--plate", type=str, required=True, help="License plate (matches the workbook sheet name)")
    p.add_argument("--make", type=str, default=None)
    p.add_argument("--model", type=str, default=None)
    p.add_argument("--year", type=int, default=None)
    p.add_argument("--service-interval", type=float, default=None, help="Service interval in km (hours for forklifts)")
    args = p.parse_args()

    plate = args.plate.strip()
    fields = {"make": args.make, "model": args.model, "year": args.year, "service_interval_km": args.service_interval}
    fields = {k: v for k, v in fields.items() if v is not None}

    with session_scope() as session:
        truck = session.query(Truck).filter(Truck.license_plate == plate).one_or_none()
        if truck is None:
            truck = Truck(license_plate=plate, **fields)
            session.add(truck)
            session.flush()
            audit_log(session, actor="cli", action="truck_create", entity_type="truck", entity_id=str(truck.id), payload={"plate": plate, **fields})
            print(f"Created truck id={truck.id} plate={truck.license_plate}")
        else:
            for k, v in fields.items():
                setattr(truck, k, v)
            audit_log(session, actor="cli", action="truck_update", entity_type="truck", entity_id=str(truck.id), payload={"plate": plate, **fields})
            print(f"Updated truck id={truck.id} plate={truck.license_plate}")

if __name__ == "__main__":
    main()
