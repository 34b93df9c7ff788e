# schemas/space_occupancy_schemas.py
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional, Union

from occupancy_service.app.models.space_sites.space_handover import HandoverStatus
from occupancy_service.app.models.space_sites.space_inspections import InspectionStatus
from occupancy_service.app.models.space_sites.space_maintenances import MaintenanceStatus
from occupancy_service.app.models.space_sites.space_occupancies import OccupancyStatus, OccupantType


class MoveInRequest(BaseModel):
    space_id: UUID
    occupant_type: OccupantType
    occupant_name: str
    occupant_user_id: Optional[UUID] = None
    lease_id: Optional[UUID] = None
    reference_no: Optional[str] = None
    move_in_date: date
    heavy_items: bool = False
    elevator_required: bool = False
    parking_required: bool = False
    time_slot: Optional[str] = None  # e.g., "09:00-11:00"

    @field_validator("occupant_name")
    @classmethod
    def occupant_name_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("occupant_name is required")
        return v.strip()


class SpaceMoveOutRequest(BaseModel):
    space_id: UUID
    move_out_date: Optional[date] = None
    time_slot: Optional[str] = None
    reason: Optional[str] = None


class HandoverUpdateSchema(BaseModel):
    handover_date: Optional[datetime] = None
    handover_to_person: Optional[str] = None
    handover_to_contact: Optional[str] = None
    remarks: Optional[str] = None

    # Keys and Accessories
    keys_returned: Optional[bool] = None
    number_of_keys: Optional[int] = Field(default=None, ge=0)
    accessories_returned: Optional[bool] = None
    number_of_accessories: Optional[int] = Field(default=None, ge=0)
    access_card_returned: Optional[bool] = None
    number_of_access_cards: Optional[int] = Field(default=None, ge=0)
    parking_card_returned: Optional[bool] = None
    number_of_parking_cards: Optional[int] = Field(default=None, ge=0)


class InspectionRequest(BaseModel):
    handover_id: UUID
    inspected_by_user_id: Optional[UUID] = None
    scheduled_date: Optional[datetime] = None


class InspectionItemCreate(BaseModel):
    item_name: str
    condition: Optional[str] = None
    remarks: Optional[str] = None


class InspectionComplete(BaseModel):
    damage_found: bool = False
    inspection_date: Optional[datetime] = None
    damage_notes: Optional[str] = None
    walls_condition: Optional[str] = None
    flooring_condition: Optional[str] = None
    electrical_condition: Optional[str] = None
    plumbing_condition: Optional[str] = None
    # operator override: require maintenance even without damage
    force_maintenance: bool = False


class MaintenanceRequest(BaseModel):
    inspection_id: UUID
    maintenance_required: bool = True
    notes: Optional[str] = None


class MaintenanceComplete(BaseModel):
    completed_at: Optional[datetime] = None
    completed_by: Optional[UUID] = None


class SettlementRequest(BaseModel):
    occupancy_id: UUID


class SettlementComplete(BaseModel):
    # left loose on purpose; the settlement stage coerces and rejects bad amounts
    damage_charges: Union[Decimal, str, None] = Decimal("0")
    pending_dues: Union[Decimal, str, None] = Decimal("0")
    settled_by: Optional[UUID] = None


class HandoverOut(BaseModel):
    id: UUID
    occupancy_id: UUID
    status: HandoverStatus
    handover_date: Optional[datetime] = None
    handover_to_person: Optional[str] = None
    handover_to_contact: Optional[str] = None
    remarks: Optional[str] = None
    keys_returned: bool = False
    number_of_keys: int = 0
    accessories_returned: bool = False
    number_of_accessories: int = 0
    access_card_returned: bool = False
    number_of_access_cards: int = 0
    parking_card_returned: bool = False
    number_of_parking_cards: int = 0
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InspectionItemOut(BaseModel):
    id: UUID
    item_name: str
    condition: Optional[str] = None
    remarks: Optional[str] = None

    class Config:
        from_attributes = True


class InspectionOut(BaseModel):
    id: UUID
    handover_id: UUID
    status: InspectionStatus
    scheduled_date: Optional[datetime] = None
    inspected_by_user_id: Optional[UUID] = None
    inspector_name: Optional[str] = None
    inspection_date: Optional[datetime] = None
    damage_found: bool = False
    damage_notes: Optional[str] = None
    walls_condition: Optional[str] = None
    flooring_condition: Optional[str] = None
    electrical_condition: Optional[str] = None
    plumbing_condition: Optional[str] = None
    maintenance_required: Optional[bool] = None
    items: List[InspectionItemOut] = []

    class Config:
        from_attributes = True


class MaintenanceOut(BaseModel):
    id: UUID
    inspection_id: UUID
    status: MaintenanceStatus
    maintenance_required: bool = True
    notes: Optional[str] = None
    completed: bool = False
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SettlementOut(BaseModel):
    id: UUID
    occupancy_id: UUID
    damage_charges: Optional[Decimal] = None
    pending_dues: Optional[Decimal] = None
    final_amount: Optional[Decimal] = None
    settled: bool = False
    settled_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OccupancyRecordOut(BaseModel):
    id: Optional[UUID] = None  # None for a space that was never occupied
    space_id: UUID
    status: OccupancyStatus
    occupant_type: Optional[OccupantType] = None
    occupant_name: Optional[str] = None
    occupant_user_id: Optional[UUID] = None
    lease_id: Optional[UUID] = None
    reference_no: Optional[str] = None
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None
    time_slot: Optional[str] = None
    version: int = 0

    handover: Optional[HandoverOut] = None
    inspection: Optional[InspectionOut] = None
    maintenance: Optional[MaintenanceOut] = None
    settlement: Optional[SettlementOut] = None


class WorkflowStepOut(BaseModel):
    id: str
    title: str
    completed: bool
    enabled: bool
    visible: bool = True


class WorkflowOut(BaseModel):
    steps: List[WorkflowStepOut]
    current_step_index: int
    active_stage: Optional[str] = None
    permitted_actions: List[str] = []
    progress: int = 0


class CurrentOccupancyOut(BaseModel):
    current: OccupancyRecordOut
    workflow: WorkflowOut


class TimelineEventOut(BaseModel):
    sequence_no: int
    event: str
    occupancy_id: Optional[UUID] = None
    occupant_type: Optional[str] = None
    occupant_name: Optional[str] = None
    date: Optional[datetime] = None
    notes: Optional[str] = None


class OccupancyCycleSummary(BaseModel):
    occupancy_id: Optional[UUID] = None
    occupant_name: Optional[str] = None
    occupant_type: Optional[str] = None
    events: List[str] = []
    opened_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    closed: bool = False


class OccupancyHistoryItem(BaseModel):
    occupancy_id: UUID
    space_id: UUID
    occupant_name: str
    occupant_type: str
    reference_no: Optional[str] = None

    move_in_date: date
    move_out_date: Optional[date] = None
    status: str = OccupancyStatus.vacant.value
    final_amount: Optional[Decimal] = None
    closed_at: datetime

    handover: Optional[Dict[str, Any]] = None
    inspection: Optional[Dict[str, Any]] = None
    maintenance: Optional[Dict[str, Any]] = None
    settlement: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True
