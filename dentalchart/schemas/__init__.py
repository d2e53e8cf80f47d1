from .chart import (
    BridgeSpanResponse,
    ChartResponse,
    ToothResponse,
    ToothStateResponse,
    WholeToothResponse,
)
from .notation import (
    DentalCodeResponse,
    FillingNotationResponse,
    NotationParseRequest,
    NotationParseResponse,
)
from .procedure import (
    BridgeCreateResponse,
    BridgeRequest,
    NotationProcedureRequest,
    ProcedureBatchResponse,
    ProcedureResponse,
    ToolRequest,
)

__all__ = [
    "BridgeSpanResponse",
    "ChartResponse",
    "ToothResponse",
    "ToothStateResponse",
    "WholeToothResponse",
    "DentalCodeResponse",
    "FillingNotationResponse",
    "NotationParseRequest",
    "NotationParseResponse",
    "BridgeCreateResponse",
    "BridgeRequest",
    "NotationProcedureRequest",
    "ProcedureBatchResponse",
    "ProcedureResponse",
    "ToolRequest",
]
