import asyncio
import logging

from enclosure_bridge.services.types import PSUState

log = logging.getLogger("enclosure_bridge.psu_state")


class PSUStateTracker:
    """
    Single owner of the last PSU state sent to a backend.
    The value is what was requested, not what the hardware reports.
    """

    def __init__(self, initial: PSUState = PSUState.ON):
        self._state = initial
        self._lock = asyncio.Lock()

    @property
    def current(self) -> PSUState:
        return self._state

    async def set(self, state: PSUState) -> None:
        async with self._lock:
            if state is not self._state:
                log.debug("PSU state %s -> %s", self._state.value, state.value)
            self._state = state

    async def toggle(self) -> PSUState:
        """Record and return the opposite state in one critical section."""
        async with self._lock:
            target = self._state.opposite()
            log.debug("PSU state %s -> %s", self._state.value, target.value)
            self._state = target
            return target
