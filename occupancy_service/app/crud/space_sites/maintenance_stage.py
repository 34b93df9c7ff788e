# crud/space_sites/maintenance_stage.py
from datetime import datetime
from typing import Optional

from shared.helpers.date_helper import as_naive_utc, utc_now

from ...core.exceptions import StateError
from ...models.space_sites.space_inspections import InspectionStatus, SpaceInspection
from ...models.space_sites.space_maintenances import MaintenanceStatus, SpaceMaintenance
from ...models.space_sites.space_settlements import SpaceSettlement
from ...schemas.space_sites.space_occupancy_schemas import MaintenanceComplete, MaintenanceRequest


def create(
    maintenance: SpaceMaintenance,
    inspection: SpaceInspection,
    params: MaintenanceRequest,
    settlement: Optional[SpaceSettlement] = None,
    now: Optional[datetime] = None
) -> SpaceMaintenance:
    """Fill a new maintenance record for a completed inspection.

    Works for inspections that found damage and, as an operator override,
    for clean inspections whose settlement is still open. Passing
    ``maintenance_required=False`` records a waiver and closes it at once.
    """
    if inspection.status != InspectionStatus.completed:
        raise StateError("Inspection must be completed before maintenance")
    if inspection.maintenance is not None:
        raise StateError("Maintenance has already been created for this inspection")
    if settlement is not None and settlement.settled:
        raise StateError("Settlement is already completed")

    maintenance.maintenance_required = params.maintenance_required
    maintenance.notes = params.notes

    if params.maintenance_required:
        maintenance.status = MaintenanceStatus.required_open
        maintenance.completed = False
    else:
        maintenance.status = MaintenanceStatus.completed
        maintenance.completed = True
        maintenance.completed_at = as_naive_utc(now or utc_now())
    return maintenance


def complete(
    maintenance: Optional[SpaceMaintenance],
    params: MaintenanceComplete,
    now: Optional[datetime] = None
) -> SpaceMaintenance:
    if maintenance is None:
        raise StateError("Maintenance has not been created")
    if maintenance.completed:
        raise StateError("Maintenance has already been completed")

    maintenance.completed = True
    maintenance.status = MaintenanceStatus.completed
    maintenance.completed_at = as_naive_utc(params.completed_at or now or utc_now())
    maintenance.completed_by = params.completed_by
    return maintenance
