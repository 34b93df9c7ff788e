import uuid
from sqlalchemy import Boolean, Column, Numeric, ForeignKey, DateTime, func
from sqlalchemy.dialects.postgresql import UUID

from sqlalchemy.orm import relationship
from shared.core.database import Base


class SpaceSettlement(Base):
    __tablename__ = "space_settlements"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    occupancy_id = Column(
        UUID(as_uuid=True),
        ForeignKey("space_occupancies.id"),
        nullable=False,
        unique=True
    )

    damage_charges = Column(Numeric(10, 2), default=0)
    pending_dues = Column(Numeric(10, 2), default=0)

    final_amount = Column(Numeric(10, 2))

    settled = Column(Boolean, default=False)

    settled_by = Column(UUID(as_uuid=True))
    settled_at = Column(DateTime)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    occupancy = relationship("SpaceOccupancy", back_populates="settlement")
