from __future__ import annotations

from roadwar.game.components import (
    WeaponProfile,
    make_chassis,
    make_drive,
    make_power_core,
    make_weapon,
)
from roadwar.game.enums import DamageType
from roadwar.game.vehicle import Stage, Vehicle


class FixedRandom:
    """Stand-in for ``random.randint`` that returns scripted values in order."""

    def __init__(self, values: list[int]) -> None:
        self.values = values
        self.index = 0

    def __call__(self, _a: int, _b: int) -> int:
        val = self.values[self.index]
        self.index += 1
        return val

    @property
    def calls(self) -> int:
        return self.index


def make_vehicle(
    name: str = "Interceptor",
    *,
    chassis_health: int = 40,
    chassis_ac: int = 14,
    mobility: int = 0,
    weapon: WeaponProfile | None = None,
    with_drive: bool = True,
) -> Vehicle:
    """A vehicle with chassis, power core, drive and a 1d8+2 gun."""
    optional = []
    if with_drive:
        optional.append(make_drive(f"{name} Drive"))
    profile = (
        weapon
        if weapon is not None
        else WeaponProfile(
            damage_dice=1,
            damage_die_size=8,
            damage_bonus=2,
            damage_type=DamageType.PIERCING,
            attack_bonus=3,
        )
    )
    optional.append(make_weapon(f"{name} Gun", profile=profile))
    return Vehicle(
        name=name,
        chassis=make_chassis(
            f"{name} Chassis", chassis_health, chassis_ac, mobility=mobility
        ),
        power_core=make_power_core(f"{name} Core"),
        optional_components=optional,
    )


def weapon_of(vehicle: Vehicle):
    return vehicle.get_weapon_components()[0]


def make_stage(*vehicles: Vehicle, lane_count: int = 3) -> Stage:
    stage = Stage("Dust Flats", lane_count=lane_count)
    for lane, vehicle in enumerate(vehicles):
        stage.add_vehicle(vehicle, lane % lane_count)
    return stage
