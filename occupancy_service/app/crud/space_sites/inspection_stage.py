# crud/space_sites/inspection_stage.py
from datetime import datetime
from typing import List, Optional

from shared.helpers.date_helper import as_naive_utc, utc_now

from ...core.exceptions import StateError, ValidationError
from ...models.space_sites.space_inspections import InspectionStatus, SpaceInspection
from ...schemas.space_sites.space_occupancy_schemas import (
    InspectionComplete, InspectionItemCreate, InspectionRequest
)

CONDITION_FIELDS = (
    "walls_condition",
    "flooring_condition",
    "electrical_condition",
    "plumbing_condition",
)


def _ensure_open(inspection: SpaceInspection):
    if inspection.status == InspectionStatus.completed:
        raise StateError("Inspection has already been completed")


def request(
    inspection: SpaceInspection,
    params: InspectionRequest,
    now: Optional[datetime] = None
) -> SpaceInspection:
    """Schedule (or reschedule) the requested inspection."""
    _ensure_open(inspection)

    if params.scheduled_date is None:
        raise ValidationError("Scheduled date is required")

    scheduled = as_naive_utc(params.scheduled_date)
    today = as_naive_utc(now or utc_now()).date()
    # same-day scheduling is allowed
    if scheduled.date() < today:
        raise ValidationError("Scheduled date cannot be in the past")

    inspection.scheduled_date = scheduled
    inspection.inspected_by_user_id = params.inspected_by_user_id
    return inspection


def complete(
    inspection: SpaceInspection,
    params: InspectionComplete,
    now: Optional[datetime] = None
) -> bool:
    """Record the inspection outcome.

    Returns whether maintenance is required. The answer is stored on the
    inspection and never re-derived afterwards.
    """
    _ensure_open(inspection)

    for field in CONDITION_FIELDS:
        setattr(inspection, field, getattr(params, field))

    inspection.damage_found = params.damage_found
    inspection.damage_notes = params.damage_notes
    inspection.inspection_date = as_naive_utc(
        params.inspection_date or now or utc_now())
    inspection.maintenance_required = bool(
        params.damage_found or params.force_maintenance)
    inspection.status = InspectionStatus.completed
    return inspection.maintenance_required


def check_items(inspection: SpaceInspection, items: List[InspectionItemCreate]):
    """Checklist items can only be recorded while the inspection is open."""
    _ensure_open(inspection)
    if not items:
        raise ValidationError("At least one inspection item is required")
    for item in items:
        if not item.item_name or not item.item_name.strip():
            raise ValidationError("Inspection item name is required")
