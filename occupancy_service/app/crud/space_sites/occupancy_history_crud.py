# crud/space_sites/occupancy_history_crud.py
import logging
from typing import Iterable, List
from uuid import UUID

from sqlalchemy.orm import Session

from shared.helpers.date_helper import utc_now

from ...models.space_sites.space_occupancies import SpaceOccupancy
from ...models.space_sites.space_occupancy_events import OccupancyEventType, SpaceOccupancyEvent
from ...models.space_sites.space_occupancy_history import SpaceOccupancyHistory
from ...schemas.space_sites.space_occupancy_schemas import (
    OccupancyCycleSummary, OccupancyHistoryItem, TimelineEventOut
)
from . import occupancy_store as store

logger = logging.getLogger(__name__)


def _dump(model) -> dict | None:
    return model.model_dump(mode="json") if model is not None else None


def record_closed_cycle(db: Session, occ: SpaceOccupancy) -> SpaceOccupancyHistory:
    """Append the finalized snapshot of a cycle that has just closed.

    Runs inside the closing unit of work so the history row and the vacant
    status are committed together.
    """
    record = store.to_record_out(occ)
    stages = {
        "handover": _dump(record.handover),
        "inspection": _dump(record.inspection),
        "settlement": _dump(record.settlement),
    }
    # a skipped maintenance stage leaves no entry at all
    if record.maintenance is not None:
        stages["maintenance"] = _dump(record.maintenance)

    entry = SpaceOccupancyHistory(
        occupancy_id=occ.id,
        space_id=occ.space_id,
        occupant_type=occ.occupant_type,
        occupant_name=occ.occupant_name,
        reference_no=occ.reference_no,
        move_in_date=occ.move_in_date,
        move_out_date=occ.move_out_date,
        final_amount=record.settlement.final_amount if record.settlement else None,
        stages=stages,
        closed_at=occ.closed_at or utc_now(),
    )
    db.add(entry)
    db.flush()

    logger.info("Occupancy %s closed and archived for space %s",
                occ.id, occ.space_id)
    return entry


def get_occupancy_history(db: Session, space_id: UUID) -> List[OccupancyHistoryItem]:
    history = []
    for entry in store.get_history(db, space_id):
        stages = entry.stages or {}
        history.append(OccupancyHistoryItem(
            occupancy_id=entry.occupancy_id,
            space_id=entry.space_id,
            occupant_name=entry.occupant_name,
            occupant_type=entry.occupant_type.value,
            reference_no=entry.reference_no,
            move_in_date=entry.move_in_date,
            move_out_date=entry.move_out_date,
            final_amount=entry.final_amount,
            closed_at=entry.closed_at,
            handover=stages.get("handover"),
            inspection=stages.get("inspection"),
            maintenance=stages.get("maintenance"),
            settlement=stages.get("settlement"),
        ))
    return history


def to_timeline_event(e: SpaceOccupancyEvent) -> TimelineEventOut:
    return TimelineEventOut(
        sequence_no=e.sequence_no,
        event=e.event_type.value,
        occupancy_id=e.occupancy_id,
        occupant_type=e.occupant_type.value if e.occupant_type else None,
        occupant_name=e.occupant_name,
        date=e.event_date,
        notes=e.notes,
    )


def get_occupancy_timeline(db: Session, space_id: UUID) -> List[TimelineEventOut]:
    return [to_timeline_event(e) for e in store.get_timeline(db, space_id)]


def project_timeline(events: Iterable[TimelineEventOut]) -> List[OccupancyCycleSummary]:
    """Fold timeline events into one summary per occupancy cycle, oldest first."""
    cycles: dict = {}
    for e in sorted(events, key=lambda ev: ev.sequence_no):
        cycle = cycles.get(e.occupancy_id)
        if cycle is None:
            cycle = OccupancyCycleSummary(
                occupancy_id=e.occupancy_id,
                occupant_name=e.occupant_name,
                occupant_type=e.occupant_type,
                opened_at=e.date,
            )
            cycles[e.occupancy_id] = cycle

        cycle.events.append(e.event)
        if e.event == OccupancyEventType.moved_out.value:
            cycle.closed = True
            cycle.closed_at = e.date

    return list(cycles.values())
