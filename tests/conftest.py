from __future__ import annotations

import pytest

from roadwar.events import CombatLog
from roadwar.game.vehicle import Vehicle
from tests.helpers import make_vehicle


@pytest.fixture(autouse=True)
def combat_log() -> CombatLog:
    """A fresh combat log for every test."""
    return CombatLog()


@pytest.fixture
def attacker() -> Vehicle:
    return make_vehicle("Interceptor")


@pytest.fixture
def defender() -> Vehicle:
    return make_vehicle("Hauler", chassis_ac=12, mobility=3)
