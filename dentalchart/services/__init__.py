from .bridges import BridgeGesture, BridgeSpan, analyze_bridge, assemble_bridge, reconstruct_bridges
from .gestures import DragGesture
from .idempotency import PendingOperations, make_idempotency_key
from .procedures import (
    CrownBridgeOptions,
    ExtractionOptions,
    FillingOptions,
    ProcedurePlanner,
    ScalingOptions,
    Tool,
)
from .reconciler import ChartState, ProcedureTag, ToothState, format_tag, parse_tag, reconcile

__all__ = [
    "BridgeGesture",
    "BridgeSpan",
    "analyze_bridge",
    "assemble_bridge",
    "reconstruct_bridges",
    "DragGesture",
    "PendingOperations",
    "make_idempotency_key",
    "CrownBridgeOptions",
    "ExtractionOptions",
    "FillingOptions",
    "ProcedurePlanner",
    "ScalingOptions",
    "Tool",
    "ChartState",
    "ProcedureTag",
    "ToothState",
    "format_tag",
    "parse_tag",
    "reconcile",
]
