# crud/space_sites/occupancy_store.py
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from shared.helpers.date_helper import utc_now

from ...core.exceptions import ConflictError
from ...models.space_sites.space_inspections import SpaceInspection
from ...models.space_sites.space_occupancies import (
    NON_TERMINAL_STATUSES, OccupancyStatus, SpaceOccupancy
)
from ...models.space_sites.space_occupancy_events import OccupancyEventType, SpaceOccupancyEvent
from ...models.space_sites.space_occupancy_history import SpaceOccupancyHistory
from ...schemas.space_sites.space_occupancy_schemas import (
    HandoverOut, InspectionOut, MaintenanceOut, OccupancyRecordOut, SettlementOut
)

logger = logging.getLogger(__name__)


def get_current_record(db: Session, space_id: UUID) -> Optional[SpaceOccupancy]:
    """The open (non-vacant) occupancy of a space, if any."""
    return (
        db.query(SpaceOccupancy)
        .filter(
            SpaceOccupancy.space_id == space_id,
            SpaceOccupancy.status.in_(NON_TERMINAL_STATUSES)
        )
        .first()
    )


def get_record(db: Session, occupancy_id: UUID) -> Optional[SpaceOccupancy]:
    return db.query(SpaceOccupancy).filter(SpaceOccupancy.id == occupancy_id).first()


def get_current(db: Session, space_id: UUID) -> OccupancyRecordOut:
    occ = get_current_record(db, space_id)
    if occ:
        return to_record_out(occ)

    # vacant: keep the identity of the most recent occupant for display
    last = (
        db.query(SpaceOccupancy)
        .filter(
            SpaceOccupancy.space_id == space_id,
            SpaceOccupancy.status == OccupancyStatus.vacant
        )
        .order_by(SpaceOccupancy.closed_at.desc())
        .first()
    )
    return OccupancyRecordOut(
        space_id=space_id,
        status=OccupancyStatus.vacant,
        occupant_type=last.occupant_type if last else None,
        occupant_name=last.occupant_name if last else None,
        move_in_date=last.move_in_date if last else None,
        move_out_date=last.move_out_date if last else None,
        reference_no=last.reference_no if last else None,
    )


def get_history(db: Session, space_id: UUID) -> List[SpaceOccupancyHistory]:
    """Closed cycles, most recent first. Each call runs a fresh query."""
    return (
        db.query(SpaceOccupancyHistory)
        .filter(SpaceOccupancyHistory.space_id == space_id)
        .order_by(SpaceOccupancyHistory.closed_at.desc(), SpaceOccupancyHistory.created_at.desc())
        .all()
    )


def to_record_out(occ: SpaceOccupancy) -> OccupancyRecordOut:
    handover = occ.handover
    inspection = handover.inspection if handover else None
    maintenance = inspection.maintenance if inspection else None
    settlement = occ.settlement

    return OccupancyRecordOut(
        id=occ.id,
        space_id=occ.space_id,
        status=occ.status,
        occupant_type=occ.occupant_type,
        occupant_name=occ.occupant_name,
        occupant_user_id=occ.occupant_user_id,
        lease_id=occ.lease_id,
        reference_no=occ.reference_no,
        move_in_date=occ.move_in_date,
        move_out_date=occ.move_out_date,
        time_slot=occ.time_slot,
        version=occ.version,
        handover=HandoverOut.model_validate(handover) if handover else None,
        inspection=InspectionOut.model_validate(
            inspection) if inspection else None,
        maintenance=MaintenanceOut.model_validate(
            maintenance) if maintenance else None,
        settlement=SettlementOut.model_validate(
            settlement) if settlement else None,
    )


def transition(
    db: Session,
    occ: SpaceOccupancy,
    expected_status: OccupancyStatus,
    next_status: OccupancyStatus,
    event_type: OccupancyEventType,
    patch: Optional[Dict[str, Any]] = None,
    notes: Optional[str] = None
) -> SpaceOccupancy:
    """Compare-and-swap the occupancy status and append one timeline event.

    The row is only updated while it still holds ``expected_status``. When
    another writer got there first nothing is changed and ConflictError is
    raised. Nothing is committed here; the caller owns the unit of work.
    """
    values = dict(patch or {})
    values["status"] = next_status
    values["version"] = SpaceOccupancy.version + 1

    result = db.execute(
        update(SpaceOccupancy)
        .where(
            SpaceOccupancy.id == occ.id,
            SpaceOccupancy.status == expected_status
        )
        .values(**values)
        .execution_options(synchronize_session=False)
    )

    if result.rowcount != 1:
        logger.warning(
            "Occupancy %s transition %s -> %s rejected, status changed concurrently",
            occ.id, expected_status.value, next_status.value)
        raise ConflictError(
            "Occupancy was changed by another request. Reload and try again")

    db.refresh(occ)

    append_event(
        db,
        space_id=occ.space_id,
        event_type=event_type,
        occupancy=occ,
        notes=notes
    )

    logger.info("Occupancy %s moved %s -> %s",
                occ.id, expected_status.value, next_status.value)
    return occ


def append_event(
    db: Session,
    space_id: UUID,
    event_type: OccupancyEventType,
    occupancy: Optional[SpaceOccupancy] = None,
    notes: Optional[str] = None
) -> SpaceOccupancyEvent:
    last_sequence = (
        db.query(func.max(SpaceOccupancyEvent.sequence_no))
        .filter(SpaceOccupancyEvent.space_id == space_id)
        .scalar()
    )

    event = SpaceOccupancyEvent(
        space_id=space_id,
        occupancy_id=occupancy.id if occupancy else None,
        sequence_no=(last_sequence or 0) + 1,
        event_type=event_type,
        occupant_type=occupancy.occupant_type if occupancy else None,
        occupant_name=occupancy.occupant_name if occupancy else None,
        event_date=utc_now(),
        notes=notes
    )
    db.add(event)
    db.flush()
    return event


def get_timeline(db: Session, space_id: UUID) -> List[SpaceOccupancyEvent]:
    return (
        db.query(SpaceOccupancyEvent)
        .filter(SpaceOccupancyEvent.space_id == space_id)
        .order_by(SpaceOccupancyEvent.sequence_no.asc())
        .all()
    )


def get_inspection(db: Session, inspection_id: UUID) -> Optional[SpaceInspection]:
    return db.query(SpaceInspection).filter(SpaceInspection.id == inspection_id).first()
