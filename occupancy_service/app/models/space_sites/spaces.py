from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy import Column, String, DateTime, func
import uuid

from shared.core.database import Base


class Space(Base):
    __tablename__ = "spaces"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code = Column(String(64), nullable=False)
    name = Column(String(128))
    # available | occupied
    status = Column(String(24), default="available")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
