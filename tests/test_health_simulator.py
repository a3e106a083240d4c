# tests/test_health_simulator.py
import asyncio

import pytest

from bookinfo.domain.services.health_simulator import HealthSimulator, ServiceHealthState


def test_initial_state_is_available_and_healthy():
    snap = ServiceHealthState().snapshot()
    assert snap.healthy is True
    assert snap.unavailable is False


def test_availability_toggle_leaves_health_alone():
    state = ServiceHealthState()
    assert state.toggle_availability().unavailable is True
    assert state.healthy is True
    assert state.toggle_availability().unavailable is False


def test_health_toggle_flips_both_flags():
    state = ServiceHealthState()
    snap = state.toggle_health()
    assert (snap.healthy, snap.unavailable) == (False, True)
    snap = state.toggle_health()
    assert (snap.healthy, snap.unavailable) == (True, False)


def test_simulator_disabled_without_flags():
    sim = HealthSimulator(ServiceHealthState())
    assert sim.enabled is False


class CountingState(ServiceHealthState):
    def __init__(self):
        super().__init__()
        self.availability_toggles = 0
        self.health_toggles = 0

    def toggle_availability(self):
        self.availability_toggles += 1
        return super().toggle_availability()

    def toggle_health(self):
        self.health_toggles += 1
        return super().toggle_health()


async def _wait_for(predicate, timeout_s=2.0):
    deadline = asyncio.get_running_loop().time() + timeout_s
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.005)


@pytest.mark.anyio
async def test_simulator_toggles_on_its_interval_and_stops():
    state = CountingState()
    sim = HealthSimulator(state, unavailable_interval_s=0.01, toggle_availability=True)

    sim.start()
    assert sim.running
    await _wait_for(lambda: state.availability_toggles >= 2)
    await sim.stop()

    assert not sim.running
    assert state.health_toggles == 0
    seen = state.availability_toggles
    await asyncio.sleep(0.05)
    assert state.availability_toggles == seen


@pytest.mark.anyio
async def test_simulator_waits_a_full_interval_before_first_toggle():
    state = CountingState()
    sim = HealthSimulator(
        state,
        unavailable_interval_s=3600,
        unhealthy_interval_s=3600,
        toggle_availability=True,
        toggle_health=True,
    )
    sim.start()
    await asyncio.sleep(0.02)

    assert state.snapshot().healthy is True
    assert state.snapshot().unavailable is False
    assert state.availability_toggles == state.health_toggles == 0
    await sim.stop()
    assert not sim.running


@pytest.mark.anyio
async def test_start_is_idempotent():
    sim = HealthSimulator(ServiceHealthState(), unhealthy_interval_s=3600, toggle_health=True)
    sim.start()
    sim.start()
    assert len(sim._tasks) == 1
    await sim.stop()
