# models/space_occupancy_events.py
import uuid
from enum import Enum as PyEnum
from sqlalchemy import (
    Column, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from occupancy_service.app.models.space_sites.space_occupancies import OccupantType
from shared.core.database import Base


class OccupancyEventType(str, PyEnum):
    moved_in = "moved_in"
    moved_out_requested = "moved_out_requested"
    handover_completed = "handover_completed"
    inspection_requested = "inspection_requested"
    inspection_completed = "inspection_completed"
    maintenance_requested = "maintenance_requested"
    maintenance_completed = "maintenance_completed"
    settlement_pending = "settlement_pending"
    moved_out = "moved_out"


class SpaceOccupancyEvent(Base):
    """Append-only timeline entry. Rows are never updated or deleted."""
    __tablename__ = "space_occupancy_events"
    __table_args__ = (
        UniqueConstraint("space_id", "sequence_no",
                         name="uq_space_occupancy_events_sequence"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    space_id = Column(UUID(as_uuid=True), ForeignKey(
        "spaces.id"), nullable=False, index=True)
    occupancy_id = Column(UUID(as_uuid=True), ForeignKey(
        "space_occupancies.id"), nullable=True)
    sequence_no = Column(Integer, nullable=False)

    occupant_type = Column(Enum(OccupantType), nullable=True)
    occupant_name = Column(String(200), nullable=True)

    event_type = Column(Enum(OccupancyEventType), nullable=False)

    event_date = Column(DateTime(timezone=True), server_default=func.now())
    notes = Column(Text, nullable=True)
