# models/space_occupancies.py
import uuid
from enum import Enum as PyEnum
from sqlalchemy import (
    Boolean, Column, Date, DateTime, Enum, ForeignKey, Index, Integer, String, text
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from shared.core.database import Base


class OccupantType(str, PyEnum):
    tenant = "tenant"
    owner = "owner"


class OccupancyStatus(str, PyEnum):
    vacant = "vacant"
    occupied = "occupied"
    move_out_scheduled = "move_out_scheduled"
    handover_awaited = "handover_awaited"
    recently_vacated = "recently_vacated"


# statuses in which a handover may exist
EXIT_STATUSES = (
    OccupancyStatus.move_out_scheduled,
    OccupancyStatus.handover_awaited,
    OccupancyStatus.recently_vacated,
)

NON_TERMINAL_STATUSES = (OccupancyStatus.occupied,) + EXIT_STATUSES


class SpaceOccupancy(Base):
    __tablename__ = "space_occupancies"
    __table_args__ = (
        # one open cycle per space
        Index(
            "uq_space_occupancies_open_cycle",
            "space_id",
            unique=True,
            postgresql_where=text("status <> 'vacant'"),
            sqlite_where=text("status <> 'vacant'"),
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    space_id = Column(UUID(as_uuid=True), ForeignKey(
        "spaces.id"), nullable=False, index=True)

    occupant_type = Column(Enum(OccupantType), nullable=False)
    occupant_name = Column(String(200), nullable=False)
    occupant_user_id = Column(UUID(as_uuid=True), nullable=True)
    lease_id = Column(UUID(as_uuid=True), nullable=True)
    reference_no = Column(String(64), nullable=True)

    move_in_date = Column(Date, nullable=False)
    move_out_date = Column(Date, nullable=True)

    heavy_items = Column(Boolean, default=False)
    elevator_required = Column(Boolean, default=False)
    parking_required = Column(Boolean, default=False)
    time_slot = Column(String(50), nullable=True)  # e.g., "09:00-11:00"

    status = Column(
        Enum(OccupancyStatus, name="occupancy_status_enum"),
        default=OccupancyStatus.occupied,
        nullable=False
    )
    # bumped by every compare-and-swap transition
    version = Column(Integer, nullable=False, default=1)

    closed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    handover = relationship(
        "SpaceHandover", back_populates="occupancy", uselist=False)
    settlement = relationship(
        "SpaceSettlement", back_populates="occupancy", uselist=False)
