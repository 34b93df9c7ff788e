import uuid
from sqlalchemy import Boolean, Column, String, ForeignKey, DateTime, func, Enum
from sqlalchemy.dialects.postgresql import UUID

from sqlalchemy.orm import relationship
from shared.core.database import Base
from enum import Enum as PyEnum


class MaintenanceStatus(str, PyEnum):
    required_open = "required_open"
    completed = "completed"


class SpaceMaintenance(Base):
    __tablename__ = "space_maintenances"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    inspection_id = Column(
        UUID(as_uuid=True),
        ForeignKey("space_inspections.id"),
        nullable=False,
        unique=True
    )

    maintenance_required = Column(Boolean, default=True)

    notes = Column(String(500))

    status = Column(Enum(MaintenanceStatus),
                    default=MaintenanceStatus.required_open, nullable=False)
    completed = Column(Boolean, default=False)

    completed_by = Column(UUID(as_uuid=True))
    completed_at = Column(DateTime)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    inspection = relationship("SpaceInspection", back_populates="maintenance")
