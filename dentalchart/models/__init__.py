from .dental_code import DentalCode
from .procedure import DentalProcedure, ProcedureStatus, BridgeRole

__all__ = [
    "DentalCode",
    "DentalProcedure",
    "ProcedureStatus",
    "BridgeRole",
]
