from typing import Optional


class ChartError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidToothError(ChartError):
    def __init__(self, tooth, message: Optional[str] = None):
        self.tooth = tooth
        super().__init__(message or f"Invalid FDI tooth number: {tooth!r}")


class UnknownSurfaceError(ChartError):
    def __init__(self, surface, message: Optional[str] = None):
        self.surface = surface
        super().__init__(message or f"Unknown surface: {surface!r}")


class ZoneTableError(ChartError):
    pass


class CodeNotFoundError(ChartError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Could not find code {code}")


class ProcedureStoreError(ChartError):
    pass


class DuplicateOperationError(ChartError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Operation already pending or committed: {key}")


class InvalidNotationError(ChartError):
    def __init__(self, text: str, message: Optional[str] = None):
        self.text = text
        super().__init__(message or f"Not a filling notation: {text!r}")


class UnknownZoneError(ChartError):
    def __init__(self, tooth: int, zones):
        self.tooth = tooth
        self.zones = list(zones)
        super().__init__(f"Tooth {tooth} has no zone(s): {', '.join(self.zones)}")
