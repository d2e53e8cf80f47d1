import json
import uuid
from datetime import datetime, date
from enum import Enum
from typing import List
from sqlalchemy import Column, Integer, String, DateTime, Date, Text, ForeignKey, Index
from sqlalchemy.orm import relationship

from ..database import Base


class ProcedureStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class BridgeRole(str, Enum):
    ABUTMENT = "abutment"
    PONTIC = "pontic"


class DentalProcedure(Base):
    __tablename__ = "dental_procedures"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id = Column(String(100), nullable=False, index=True)
    code_id = Column(String(36), ForeignKey("dental_codes.id"), nullable=False)
    tooth_number = Column(Integer, nullable=True)

    notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=ProcedureStatus.PENDING.value)
    date = Column(Date, nullable=False, default=date.today)

    sub_surfaces_json = Column(Text, nullable=False, default="[]")
    filling_material = Column(String(20), nullable=True)

    bridge_id = Column(String(100), nullable=True, index=True)
    bridge_role = Column(String(20), nullable=True)

    idempotency_key = Column(String(64), nullable=True, unique=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    code = relationship("DentalCode")

    __table_args__ = (
        Index("idx_dental_procedures_patient_tooth", "patient_id", "tooth_number"),
    )

    @property
    def sub_surfaces(self) -> List[str]:
        if not self.sub_surfaces_json:
            return []
        return json.loads(self.sub_surfaces_json)

    @sub_surfaces.setter
    def sub_surfaces(self, value: List[str]) -> None:
        self.sub_surfaces_json = json.dumps(list(value or []))
