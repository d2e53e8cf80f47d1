import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Float

from ..database import Base


class DentalCode(Base):
    __tablename__ = "dental_codes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    code = Column(String(50), unique=True, index=True, nullable=False)
    description = Column(String(500), nullable=False, default="")
    category = Column(String(100), nullable=True)
    points = Column(Float, nullable=True)
    rate = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
