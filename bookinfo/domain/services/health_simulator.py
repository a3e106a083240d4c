# bookinfo/domain/services/health_simulator.py
from __future__ import annotations
import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HealthSnapshot:
    healthy: bool
    unavailable: bool


class ServiceHealthState:
    """
    Synthetic health flags of the ratings service.
    Only the simulator's timers write; request handlers read. Both flags are
    read and written under one lock, so a reader never sees half of a combined toggle.
    Initial state: available and healthy.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._healthy = True
        self._unavailable = False

    @property
    def healthy(self) -> bool:
        with self._lock:
            return self._healthy

    @property
    def unavailable(self) -> bool:
        with self._lock:
            return self._unavailable

    def snapshot(self) -> HealthSnapshot:
        with self._lock:
            return HealthSnapshot(healthy=self._healthy, unavailable=self._unavailable)

    def toggle_availability(self) -> HealthSnapshot:
        with self._lock:
            self._unavailable = not self._unavailable
            return HealthSnapshot(healthy=self._healthy, unavailable=self._unavailable)

    def toggle_health(self) -> HealthSnapshot:
        """Unhealthy and unavailable flip together."""
        with self._lock:
            self._healthy = not self._healthy
            self._unavailable = not self._unavailable
            return HealthSnapshot(healthy=self._healthy, unavailable=self._unavailable)


class HealthSimulator:
    """
    Owns the toggle timers. Each enabled timer is an asyncio task that sleeps
    for its interval, then toggles, for as long as the service runs.
    Transitions depend on elapsed time only, never on traffic or errors.
    """

    def __init__(
        self,
        state: ServiceHealthState,
        *,
        unavailable_interval_s: float = 60.0,
        unhealthy_interval_s: float = 15 * 60.0,
        toggle_availability: bool = False,
        toggle_health: bool = False,
    ):
        self.state = state
        self.unavailable_interval_s = unavailable_interval_s
        self.unhealthy_interval_s = unhealthy_interval_s
        self.toggle_availability = toggle_availability
        self.toggle_health = toggle_health
        self._tasks: List[asyncio.Task] = []

    @property
    def enabled(self) -> bool:
        return self.toggle_availability or self.toggle_health

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    async def _loop(self, name: str, interval_s: float, toggle: Callable[[], HealthSnapshot]) -> None:
        while True:
            await asyncio.sleep(interval_s)
            snap = toggle()
            logger.warning("health simulator %s toggled: healthy=%s unavailable=%s", name, snap.healthy, snap.unavailable)

    def start(self) -> None:
        if self.running:
            return
        if self.toggle_availability:
            self._tasks.append(asyncio.create_task(
                self._loop("availability", self.unavailable_interval_s, self.state.toggle_availability),
                name="ratings-availability-toggle",
            ))
        if self.toggle_health:
            self._tasks.append(asyncio.create_task(
                self._loop("health", self.unhealthy_interval_s, self.state.toggle_health),
                name="ratings-health-toggle",
            ))
        if self._tasks:
            logger.info(
                "health simulator started availability=%s(%ss) health=%s(%ss)",
                self.toggle_availability, self.unavailable_interval_s,
                self.toggle_health, self.unhealthy_interval_s,
            )

    async def stop(self, timeout_s: Optional[float] = 1.0) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.wait(tasks, timeout=timeout_s)
            logger.info("health simulator stopped")
