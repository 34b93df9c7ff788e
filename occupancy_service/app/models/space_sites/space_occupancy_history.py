import uuid
from sqlalchemy import JSON, Column, Date, DateTime, Enum, ForeignKey, Numeric, String, func
from sqlalchemy.dialects.postgresql import UUID

from occupancy_service.app.models.space_sites.space_occupancies import OccupantType
from shared.core.database import Base


class SpaceOccupancyHistory(Base):
    """Finalized snapshot of one closed occupancy cycle."""
    __tablename__ = "space_occupancy_history"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    occupancy_id = Column(UUID(as_uuid=True), ForeignKey(
        "space_occupancies.id"), nullable=False, unique=True)
    space_id = Column(UUID(as_uuid=True), ForeignKey(
        "spaces.id"), nullable=False, index=True)

    occupant_type = Column(Enum(OccupantType), nullable=False)
    occupant_name = Column(String(200), nullable=False)
    reference_no = Column(String(64), nullable=True)
    move_in_date = Column(Date, nullable=False)
    move_out_date = Column(Date, nullable=True)

    final_amount = Column(Numeric(10, 2))

    # handover / inspection / maintenance / settlement as they were at close
    stages = Column(JSON, nullable=False)

    closed_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
