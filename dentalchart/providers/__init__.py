from .base import CodeCatalogBase, DentalCodeRef, Procedure, ProcedureDraft, ProcedureStoreBase
from .memory import InMemoryCodeCatalog, InMemoryProcedureStore
from .sql import SqlCodeCatalog, SqlProcedureStore

__all__ = [
    "CodeCatalogBase",
    "DentalCodeRef",
    "Procedure",
    "ProcedureDraft",
    "ProcedureStoreBase",
    "InMemoryCodeCatalog",
    "InMemoryProcedureStore",
    "SqlCodeCatalog",
    "SqlProcedureStore",
]
