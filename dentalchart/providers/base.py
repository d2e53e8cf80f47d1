from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date as date_type
from datetime import datetime
from typing import List, Optional

from ..models.procedure import BridgeRole, ProcedureStatus


@dataclass(frozen=True)
class DentalCodeRef:
    id: str
    code: str
    description: str = ""
    category: Optional[str] = None
    points: Optional[float] = None
    rate: Optional[float] = None


@dataclass
class ProcedureDraft:
    patient_id: str
    code: str
    tooth_number: Optional[int] = None
    sub_surfaces: List[str] = field(default_factory=list)
    notes: Optional[str] = None
    filling_material: Optional[str] = None
    status: ProcedureStatus = ProcedureStatus.PENDING
    date: date_type = field(default_factory=date_type.today)
    bridge_id: Optional[str] = None
    bridge_role: Optional[BridgeRole] = None
    idempotency_key: Optional[str] = None
    code_id: Optional[str] = None


@dataclass
class Procedure:
    id: str
    patient_id: str
    code: str
    code_id: str
    tooth_number: Optional[int] = None
    sub_surfaces: List[str] = field(default_factory=list)
    notes: Optional[str] = None
    filling_material: Optional[str] = None
    status: ProcedureStatus = ProcedureStatus.PENDING
    date: date_type = field(default_factory=date_type.today)
    bridge_id: Optional[str] = None
    bridge_role: Optional[BridgeRole] = None
    idempotency_key: Optional[str] = None
    created_at: Optional[datetime] = None


class ProcedureStoreBase(ABC):
    """Create, list and delete procedure records for a patient.

    ``create`` must return the existing record when a draft carries an
    idempotency key that was already stored.
    """

    @abstractmethod
    def create(self, draft: ProcedureDraft) -> Procedure:
        pass

    @abstractmethod
    def list(self, patient_id: str) -> List[Procedure]:
        pass

    @abstractmethod
    def delete(self, procedure_id: str) -> bool:
        pass

    @abstractmethod
    def get(self, procedure_id: str) -> Optional[Procedure]:
        pass


class CodeCatalogBase(ABC):
    @abstractmethod
    def search(self, query: str, limit: int = 50) -> List[DentalCodeRef]:
        pass

    @abstractmethod
    def exact(self, code: str) -> Optional[DentalCodeRef]:
        pass
