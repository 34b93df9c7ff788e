# app/router/space_sites/space_occupancy_router.py
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from ...schemas.space_sites.space_occupancy_schemas import (
    HandoverUpdateSchema, InspectionComplete, InspectionItemCreate, InspectionRequest,
    MaintenanceComplete, MaintenanceRequest, MoveInRequest, SettlementComplete,
    SettlementRequest, SpaceMoveOutRequest
)
from shared.core.database import get_auth_db, get_facility_db as get_db
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.space_sites import space_occupancy_crud as crud
from ...crud.space_sites import occupancy_history_crud as history_crud

router = APIRouter(prefix="/api/spaces", tags=["Space Occupancy"])


@router.get("/{space_id:uuid}/occupancy")
def current_occupancy(
    space_id: UUID,
    db: Session = Depends(get_db),
    auth_db: Session = Depends(get_auth_db)
):
    return success_response(data=crud.get_current_occupancy(db, space_id, auth_db))


@router.get("/{space_id:uuid}/occupancy/history")
def occupancy_history(space_id: UUID, db: Session = Depends(get_db)):
    return success_response(data=history_crud.get_occupancy_history(db, space_id))


@router.post("/{space_id:uuid}/occupancy/timeline")
def occupancy_timeline(space_id: UUID, db: Session = Depends(get_db)):
    return success_response(data=history_crud.get_occupancy_timeline(db, space_id))


@router.get("/{space_id:uuid}/occupancy/cycles")
def occupancy_cycles(space_id: UUID, db: Session = Depends(get_db)):
    events = history_crud.get_occupancy_timeline(db, space_id)
    return success_response(data=history_crud.project_timeline(events))


@router.post("/move-in-request")
def move_in_request(payload: MoveInRequest, db: Session = Depends(get_db)):
    return success_response(
        data=crud.move_in(db, payload),
        message="Space occupied",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL
    )


@router.post("/move-out-request")
def move_out_request(params: SpaceMoveOutRequest, db: Session = Depends(get_db)):
    return success_response(
        data=crud.request_move_out(db, params),
        message="Move out scheduled",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL
    )


@router.post("/handover/{occupancy_id:uuid}/update-handover")
def update_handover(
    occupancy_id: UUID,
    params: HandoverUpdateSchema,
    db: Session = Depends(get_db)
):
    return success_response(
        data=crud.update_handover(db, occupancy_id, params),
        message="Handover saved",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL
    )


@router.put("/handover/{occupancy_id:uuid}/complete")
def complete_handover(
    occupancy_id: UUID,
    params: Optional[HandoverUpdateSchema] = Body(default=None),
    db: Session = Depends(get_db)
):
    return success_response(
        data=crud.complete_handover(db, occupancy_id, params or HandoverUpdateSchema()),
        message="Handover completed",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL
    )


@router.get("/inspection/{inspection_id:uuid}")
def get_inspection(
    inspection_id: UUID,
    db: Session = Depends(get_db),
    auth_db: Session = Depends(get_auth_db)
):
    return success_response(data=crud.get_inspection(db, inspection_id, auth_db))


@router.post("/inspection/request")
def request_inspection(
    params: InspectionRequest,
    db: Session = Depends(get_db),
    auth_db: Session = Depends(get_auth_db)
):
    return success_response(
        data=crud.request_inspection(db, params, auth_db=auth_db),
        message="Inspection scheduled",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL
    )


@router.post("/inspection/{inspection_id:uuid}/complete")
def complete_inspection(
    inspection_id: UUID,
    params: InspectionComplete,
    db: Session = Depends(get_db)
):
    return success_response(
        data=crud.complete_inspection(db, inspection_id, params),
        message="Inspection completed",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL
    )


@router.post("/inspection/{inspection_id:uuid}/items")
def add_inspection_items(
    inspection_id: UUID,
    items: List[InspectionItemCreate],
    db: Session = Depends(get_db),
    auth_db: Session = Depends(get_auth_db)
):
    return success_response(
        data=crud.add_inspection_items(db, inspection_id, items, auth_db=auth_db),
        message="Inspection items added",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL
    )


@router.post("/maintenance/create")
def create_maintenance(params: MaintenanceRequest, db: Session = Depends(get_db)):
    return success_response(
        data=crud.create_maintenance(db, params),
        message="Maintenance created",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL
    )


@router.post("/maintenance/{maintenance_id:uuid}/complete")
def complete_maintenance(
    maintenance_id: UUID,
    params: MaintenanceComplete,
    db: Session = Depends(get_db)
):
    return success_response(
        data=crud.complete_maintenance(db, maintenance_id, params),
        message="Maintenance completed",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL
    )


@router.post("/settlement/create")
def create_settlement(params: SettlementRequest, db: Session = Depends(get_db)):
    return success_response(
        data=crud.create_settlement(db, params),
        message="Settlement opened",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL
    )


@router.post("/settlement/{settlement_id:uuid}/complete")
def complete_settlement(
    settlement_id: UUID,
    params: SettlementComplete,
    db: Session = Depends(get_db)
):
    return success_response(
        data=crud.complete_settlement(db, settlement_id, params),
        message="Occupancy closed",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL
    )
