import uuid
from datetime import date

import pytest
from dentalchart.models.procedure import ProcedureStatus
from dentalchart.providers.base import Procedure
from dentalchart.providers.memory import InMemoryCodeCatalog, InMemoryProcedureStore
from dentalchart.services.reconciler import reconcile


@pytest.fixture
def make_procedure():
    def _make(code, tooth=None, sub_surfaces=None, status=ProcedureStatus.PENDING,
              day=date(2024, 5, 1), patient_id="patient-1", **kwargs):
        return Procedure(
            id=kwargs.pop("id", str(uuid.uuid4())),
            patient_id=patient_id,
            code=code,
            code_id=code,
            tooth_number=tooth,
            sub_surfaces=list(sub_surfaces or []),
            status=status,
            date=day,
            **kwargs,
        )
    return _make


@pytest.fixture
def chart_with_missing(make_procedure):
    def _chart(*teeth):
        return reconcile([make_procedure("DISABLED", tooth=t) for t in teeth])
    return _chart


@pytest.fixture
def store():
    return InMemoryProcedureStore()


@pytest.fixture
def catalog():
    return InMemoryCodeCatalog.seeded()
