from fleetlog.models.enums import ImportKind, ImportStatus

from fleetlog.models.audit import AuditLog
from fleetlog.models.imports import ImportJob
from fleetlog.models.fleet import Truck, TruckTrip, Service
