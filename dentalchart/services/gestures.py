"""Pointer-drag batching for zone tools (filling, sealing, scaling...).

A gesture collects distinct ``(tooth, zone)`` touches between pointer-down
and pointer-up. Nothing is written while it runs; ``end`` hands the whole
batch to the caller, ``cancel`` throws it away.
"""
import logging
from typing import Dict, List, Optional, Set, Tuple

from ..state_machine import GestureEvent, GestureState, next_state
from ..teeth import classify
from ..zones import Zone

logger = logging.getLogger(__name__)


class DragGesture:
    def __init__(self, tool: str):
        self.tool = tool
        self.state = GestureState.IDLE
        self._seen: Set[Tuple[int, Zone]] = set()
        self._by_tooth: Dict[int, List[Zone]] = {}

    @property
    def is_tracking(self) -> bool:
        return self.state == GestureState.TRACKING

    def begin(self) -> None:
        self.state = next_state(self.state, GestureEvent.BEGIN)
        self._seen.clear()
        self._by_tooth.clear()

    def touch(self, tooth: int, zone: Optional[Zone] = None) -> bool:
        """Record a touch. Returns False when the pair was already touched."""
        self.state = next_state(self.state, GestureEvent.TOUCH)
        classify(tooth)
        key = (tooth, zone or "")
        if key in self._seen:
            return False
        self._seen.add(key)
        zones = self._by_tooth.setdefault(tooth, [])
        if zone:
            zones.append(zone)
        return True

    def end(self) -> Dict[int, List[Zone]]:
        self.state = next_state(self.state, GestureEvent.END)
        batch = {tooth: list(zones) for tooth, zones in self._by_tooth.items()}
        self._seen.clear()
        self._by_tooth.clear()
        logger.info(f"{self.tool} gesture ended with {len(batch)} teeth")
        return batch

    def cancel(self) -> None:
        self.state = next_state(self.state, GestureEvent.CANCEL)
        discarded = len(self._seen)
        self._seen.clear()
        self._by_tooth.clear()
        if discarded:
            logger.info(f"{self.tool} gesture cancelled, discarded {discarded} touches")
