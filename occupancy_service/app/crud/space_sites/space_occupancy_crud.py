# crud/space_sites/space_occupancy_crud.py
"""Occupancy lifecycle orchestration.

Each public function is one caller action. It loads the occupancy, lets the
stage module validate and mutate its own record, creates the next stage
record, persists the status change through the store's compare-and-swap
transition and commits everything as one unit of work. The refreshed record
is returned together with its evaluated workflow.
"""
import logging
from contextlib import contextmanager
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shared.helpers.date_helper import utc_now
from shared.helpers.user_helper import get_user_name

from ...core.exceptions import (
    ConflictError, LifecycleError, NotFoundError, PersistenceError, StateError
)
from ...models.space_sites.space_handover import HandoverStatus, SpaceHandover
from ...models.space_sites.space_inspections import InspectionStatus, SpaceInspection, SpaceInspectionItem
from ...models.space_sites.space_maintenances import SpaceMaintenance
from ...models.space_sites.space_occupancies import OccupancyStatus, SpaceOccupancy
from ...models.space_sites.space_occupancy_events import OccupancyEventType
from ...models.space_sites.space_settlements import SpaceSettlement
from ...models.space_sites.spaces import Space
from ...schemas.space_sites.space_occupancy_schemas import (
    CurrentOccupancyOut, HandoverUpdateSchema, InspectionComplete, InspectionItemCreate,
    InspectionOut, InspectionRequest, MaintenanceComplete, MaintenanceRequest, MoveInRequest,
    SettlementComplete, SettlementRequest, SpaceMoveOutRequest
)
from ..system import notifications_crud
from ..system.notifications_crud import Notifier, send_advisory
from . import handover_stage, inspection_stage, maintenance_stage, settlement_stage
from . import occupancy_history_crud as history_crud
from . import occupancy_store as store
from .occupancy_workflow import evaluate

logger = logging.getLogger(__name__)


@contextmanager
def _unit_of_work(db: Session):
    try:
        yield
        db.commit()
    except LifecycleError:
        db.rollback()
        raise
    except IntegrityError as e:
        # unique guards (open cycle per space, event sequence) lost a race
        db.rollback()
        logger.warning("Occupancy write lost a concurrent race: %s", e.orig)
        raise ConflictError(
            "Occupancy was changed by another request. Reload and try again") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Occupancy transaction failed")
        raise PersistenceError(f"Could not save occupancy change: {e}") from e


def _expect_status(occ: SpaceOccupancy, *allowed: OccupancyStatus):
    if occ.status not in allowed:
        expected = ", ".join(s.value for s in allowed)
        raise StateError(
            f"Occupancy is {occ.status.value}; this action needs {expected}")


def _load_occupancy(db: Session, occupancy_id: UUID) -> SpaceOccupancy:
    occ = store.get_record(db, occupancy_id)
    if not occ:
        raise NotFoundError("Occupancy not found")
    return occ


def _load_inspection(db: Session, inspection_id: UUID) -> SpaceInspection:
    inspection = store.get_inspection(db, inspection_id)
    if not inspection:
        raise NotFoundError("Inspection not found")
    return inspection


def _inspection_out(inspection: SpaceInspection, auth_db: Optional[Session]) -> InspectionOut:
    out = InspectionOut.model_validate(inspection)
    out.inspector_name = get_user_name(auth_db, inspection.inspected_by_user_id)
    return out


def get_current_occupancy(
    db: Session,
    space_id: UUID,
    auth_db: Optional[Session] = None
) -> CurrentOccupancyOut:
    record = store.get_current(db, space_id)
    if record.inspection and auth_db is not None:
        record.inspection.inspector_name = get_user_name(
            auth_db, record.inspection.inspected_by_user_id)
    return CurrentOccupancyOut(current=record, workflow=evaluate(record))


def _open_settlement(db: Session, occ: SpaceOccupancy) -> SpaceSettlement:
    if occ.settlement is not None:
        return occ.settlement

    inspection = occ.handover.inspection if occ.handover else None
    maintenance = inspection.maintenance if inspection else None
    settlement_stage.check_can_open(inspection, maintenance)

    settlement = SpaceSettlement(settled=False)
    occ.settlement = settlement
    db.add(settlement)
    store.append_event(db, occ.space_id,
                       OccupancyEventType.settlement_pending, occupancy=occ)
    return settlement


# ---------------------------------------------------------------- move in/out

def move_in(db: Session, params: MoveInRequest) -> CurrentOccupancyOut:
    with _unit_of_work(db):
        space = db.query(Space).filter(Space.id == params.space_id).first()
        if not space:
            raise NotFoundError("Space not found")

        if store.get_current_record(db, params.space_id):
            raise StateError("Space is already occupied")

        occ = SpaceOccupancy(
            space_id=params.space_id,
            occupant_type=params.occupant_type,
            occupant_name=params.occupant_name,
            occupant_user_id=params.occupant_user_id,
            lease_id=params.lease_id,
            reference_no=params.reference_no,
            move_in_date=params.move_in_date,
            heavy_items=params.heavy_items,
            elevator_required=params.elevator_required,
            parking_required=params.parking_required,
            time_slot=params.time_slot,
            status=OccupancyStatus.occupied,
            version=1
        )
        db.add(occ)
        db.flush()

        space.status = "occupied"
        store.append_event(db, params.space_id,
                           OccupancyEventType.moved_in, occupancy=occ)

    logger.info("Space %s occupied by %s %s", params.space_id,
                params.occupant_type.value, params.occupant_name)
    return get_current_occupancy(db, params.space_id)


def request_move_out(db: Session, params: SpaceMoveOutRequest) -> CurrentOccupancyOut:
    with _unit_of_work(db):
        occ = store.get_current_record(db, params.space_id)
        if not occ:
            raise StateError("Space already vacant")
        _expect_status(occ, OccupancyStatus.occupied)

        patch = {"move_out_date": params.move_out_date or utc_now().date()}
        if params.time_slot:
            patch["time_slot"] = params.time_slot

        store.transition(
            db, occ,
            OccupancyStatus.occupied,
            OccupancyStatus.move_out_scheduled,
            OccupancyEventType.moved_out_requested,
            patch=patch,
            notes=params.reason
        )

        handover = SpaceHandover(status=HandoverStatus.not_started)
        occ.handover = handover
        db.add(handover)

    return get_current_occupancy(db, params.space_id)


# ---------------------------------------------------------------- handover

def _open_handover(occ: SpaceOccupancy) -> SpaceHandover:
    if occ.handover is None:
        raise StateError("Move-out has not been requested for this occupancy")
    return occ.handover


def update_handover(db: Session, occupancy_id: UUID, params: HandoverUpdateSchema) -> CurrentOccupancyOut:
    with _unit_of_work(db):
        occ = _load_occupancy(db, occupancy_id)
        handover = _open_handover(occ)
        handover_stage.update(handover, params)
        space_id = occ.space_id

    return get_current_occupancy(db, space_id)


def complete_handover(db: Session, occupancy_id: UUID, params: HandoverUpdateSchema) -> CurrentOccupancyOut:
    with _unit_of_work(db):
        occ = _load_occupancy(db, occupancy_id)
        handover = _open_handover(occ)
        handover_stage.complete(handover, params)
        _expect_status(occ, OccupancyStatus.move_out_scheduled)

        store.transition(
            db, occ,
            OccupancyStatus.move_out_scheduled,
            OccupancyStatus.handover_awaited,
            OccupancyEventType.handover_completed,
            notes=f"Handed over to {handover.handover_to_person}"
        )

        # inspection opens in its requested state, to be scheduled or completed
        inspection = SpaceInspection(status=InspectionStatus.requested)
        handover.inspection = inspection
        db.add(inspection)
        space_id = occ.space_id

    return get_current_occupancy(db, space_id)


# ---------------------------------------------------------------- inspection

def get_inspection(db: Session, inspection_id: UUID, auth_db: Optional[Session] = None) -> InspectionOut:
    return _inspection_out(_load_inspection(db, inspection_id), auth_db)


def request_inspection(
    db: Session,
    params: InspectionRequest,
    notifier: Optional[Notifier] = None,
    auth_db: Optional[Session] = None
) -> CurrentOccupancyOut:
    with _unit_of_work(db):
        handover = db.query(SpaceHandover).filter(
            SpaceHandover.id == params.handover_id).first()
        if not handover:
            raise NotFoundError("Handover not found")
        if handover.inspection is None:
            raise StateError("Handover must be completed before inspection")

        occ = handover.occupancy
        inspection = handover.inspection
        inspection_stage.request(inspection, params)

        store.append_event(
            db, occ.space_id,
            OccupancyEventType.inspection_requested,
            occupancy=occ,
            notes=f"Scheduled for {inspection.scheduled_date:%Y-%m-%d %H:%M}"
        )
        space_id = occ.space_id
        payload = {
            "user_id": inspection.inspected_by_user_id,
            "inspection_id": inspection.id,
            "message": f"Inspection for {occ.occupant_name} scheduled on {inspection.scheduled_date:%Y-%m-%d %H:%M}",
        }

    send_advisory(notifier or notifications_crud.default_notifier,
                  db, "inspection_scheduled", payload)
    return get_current_occupancy(db, space_id, auth_db)


def complete_inspection(
    db: Session,
    inspection_id: UUID,
    params: InspectionComplete,
    notifier: Optional[Notifier] = None
) -> CurrentOccupancyOut:
    with _unit_of_work(db):
        inspection = _load_inspection(db, inspection_id)
        occ = inspection.handover.occupancy
        maintenance_required = inspection_stage.complete(inspection, params)
        _expect_status(occ, OccupancyStatus.handover_awaited)

        if maintenance_required:
            # status stays handover_awaited until maintenance completes
            store.append_event(
                db, occ.space_id,
                OccupancyEventType.inspection_completed,
                occupancy=occ,
                notes="Maintenance required"
            )
        else:
            store.transition(
                db, occ,
                OccupancyStatus.handover_awaited,
                OccupancyStatus.recently_vacated,
                OccupancyEventType.inspection_completed,
                notes="No damage found"
            )
            _open_settlement(db, occ)

        space_id = occ.space_id
        payload = {
            "inspection_id": inspection.id,
            "message": f"Maintenance required after inspection for {occ.occupant_name}",
        }

    if maintenance_required:
        send_advisory(notifier or notifications_crud.default_notifier,
                      db, "maintenance_required", payload)
    return get_current_occupancy(db, space_id)


def add_inspection_items(
    db: Session,
    inspection_id: UUID,
    items: List[InspectionItemCreate],
    auth_db: Optional[Session] = None
) -> InspectionOut:
    with _unit_of_work(db):
        inspection = _load_inspection(db, inspection_id)
        inspection_stage.check_items(inspection, items)

        for item in items:
            db.add(SpaceInspectionItem(
                inspection_id=inspection.id,
                item_name=item.item_name.strip(),
                condition=item.condition,
                remarks=item.remarks
            ))

    db.refresh(inspection)
    return _inspection_out(inspection, auth_db)


# ---------------------------------------------------------------- maintenance

def create_maintenance(db: Session, params: MaintenanceRequest) -> CurrentOccupancyOut:
    with _unit_of_work(db):
        inspection = _load_inspection(db, params.inspection_id)
        occ = inspection.handover.occupancy
        _expect_status(occ, OccupancyStatus.handover_awaited,
                       OccupancyStatus.recently_vacated)

        maintenance = SpaceMaintenance()
        maintenance_stage.create(
            maintenance, inspection, params, settlement=occ.settlement)
        inspection.maintenance = maintenance
        db.add(maintenance)

        store.append_event(
            db, occ.space_id,
            OccupancyEventType.maintenance_requested,
            occupancy=occ,
            notes=params.notes
        )

        # a waived maintenance closes straight away
        if maintenance.completed:
            _after_maintenance(db, occ)
        space_id = occ.space_id

    return get_current_occupancy(db, space_id)


def _after_maintenance(db: Session, occ: SpaceOccupancy):
    if occ.status == OccupancyStatus.handover_awaited:
        store.transition(
            db, occ,
            OccupancyStatus.handover_awaited,
            OccupancyStatus.recently_vacated,
            OccupancyEventType.maintenance_completed
        )
        _open_settlement(db, occ)
    else:
        # operator override raised after the cycle had already moved on
        store.append_event(db, occ.space_id,
                           OccupancyEventType.maintenance_completed, occupancy=occ)


def complete_maintenance(
    db: Session,
    maintenance_id: UUID,
    params: MaintenanceComplete
) -> CurrentOccupancyOut:
    with _unit_of_work(db):
        maintenance = db.query(SpaceMaintenance).filter(
            SpaceMaintenance.id == maintenance_id).first()
        maintenance_stage.complete(maintenance, params)

        occ = maintenance.inspection.handover.occupancy
        _expect_status(occ, OccupancyStatus.handover_awaited,
                       OccupancyStatus.recently_vacated)
        _after_maintenance(db, occ)
        space_id = occ.space_id

    return get_current_occupancy(db, space_id)


# ---------------------------------------------------------------- settlement

def create_settlement(db: Session, params: SettlementRequest) -> CurrentOccupancyOut:
    with _unit_of_work(db):
        occ = _load_occupancy(db, params.occupancy_id)
        _expect_status(occ, OccupancyStatus.handover_awaited,
                       OccupancyStatus.recently_vacated)
        _open_settlement(db, occ)
        _expect_status(occ, OccupancyStatus.recently_vacated)
        space_id = occ.space_id

    return get_current_occupancy(db, space_id)


def complete_settlement(
    db: Session,
    settlement_id: UUID,
    params: SettlementComplete
) -> CurrentOccupancyOut:
    with _unit_of_work(db):
        settlement = db.query(SpaceSettlement).filter(
            SpaceSettlement.id == settlement_id).first()
        if not settlement:
            raise NotFoundError("Settlement not found")

        occ = settlement.occupancy
        inspection = occ.handover.inspection if occ.handover else None
        maintenance = inspection.maintenance if inspection else None

        settlement_stage.complete(settlement, params, inspection, maintenance)
        _expect_status(occ, OccupancyStatus.recently_vacated)

        store.transition(
            db, occ,
            OccupancyStatus.recently_vacated,
            OccupancyStatus.vacant,
            OccupancyEventType.moved_out,
            patch={"closed_at": utc_now()},
            notes=f"Final settlement {settlement.final_amount}"
        )

        db.query(Space).filter(Space.id == occ.space_id).update({
            "status": "available"
        })
        history_crud.record_closed_cycle(db, occ)
        space_id = occ.space_id

    return get_current_occupancy(db, space_id)
