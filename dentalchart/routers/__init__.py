from .chart import router as chart_router
from .codes import router as codes_router
from .procedures import router as procedures_router
from .teeth import router as teeth_router

__all__ = [
    "chart_router",
    "codes_router",
    "procedures_router",
    "teeth_router",
]
