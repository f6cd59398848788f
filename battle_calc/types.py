"""Shared lightweight dataclasses used across the combat engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional


def _flag(data: Dict[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"{key} must be true or false, got {value!r}")


@dataclass(frozen=True)
class DiceSpec:
    """A special ability's dice: ``count`` dice hitting on ``hit_on`` or more."""

    hit_on: int
    count: int = 1

    def __post_init__(self) -> None:
        if not 0 <= self.hit_on <= 10:
            raise ValueError(f"dice hit_on must be in 0..10, got {self.hit_on}")
        if self.count < 0:
            raise ValueError(f"dice count must be non-negative, got {self.count}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["DiceSpec"]:
        if not data:
            return None
        return cls(hit_on=int(data["hit_on"]), count=int(data.get("count", 1)))


@dataclass(frozen=True)
class FleetUnit:
    """Combat statistics of one unit archetype.

    ``combat_value`` is the minimum d10 roll that scores a hit; zero marks a
    support unit that never rolls in combat rounds.  ``cost`` only breaks
    ties when hits are assigned.  ``bombardment`` is carried for callers but
    is not resolved by the space-combat loop.
    """

    name: str
    combat_value: int
    num_dice: int = 1
    sustain_damage: bool = False
    anti_fighter_barrage: Optional[DiceSpec] = None
    space_cannon: Optional[DiceSpec] = None
    bombardment: Optional[DiceSpec] = None
    is_fighter: bool = False
    cost: int = 1

    def __post_init__(self) -> None:
        if not 0 <= self.combat_value <= 10:
            raise ValueError(f"{self.name}: combat value must be in 0..10, got {self.combat_value}")
        if self.num_dice < 0:
            raise ValueError(f"{self.name}: num_dice must be non-negative, got {self.num_dice}")
        if self.cost < 0:
            raise ValueError(f"{self.name}: cost must be non-negative, got {self.cost}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FleetUnit":
        return cls(
            name=str(data["name"]),
            combat_value=int(data["combat_value"]),
            num_dice=int(data.get("num_dice", 1)),
            sustain_damage=_flag(data, "sustain_damage"),
            anti_fighter_barrage=DiceSpec.from_dict(data.get("anti_fighter_barrage")),
            space_cannon=DiceSpec.from_dict(data.get("space_cannon")),
            bombardment=DiceSpec.from_dict(data.get("bombardment")),
            is_fighter=_flag(data, "is_fighter"),
            cost=int(data.get("cost", 1)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Ability(Enum):
    """Pre-combat abilities that roll their own dice."""

    ANTI_FIGHTER_BARRAGE = "anti_fighter_barrage"
    SPACE_CANNON = "space_cannon"


def ability_spec(unit: Any, ability: Ability) -> Optional[DiceSpec]:
    """Return the dice a unit rolls for ``ability``, or ``None``."""

    if ability is Ability.ANTI_FIGHTER_BARRAGE:
        return unit.anti_fighter_barrage
    if ability is Ability.SPACE_CANNON:
        return unit.space_cannon
    raise ValueError(f"Unknown ability {ability!r}")


@dataclass(frozen=True)
class CombatResult:
    """Aggregate outcome of a batch of simulated battles."""

    attacker_win_rate: float
    defender_win_rate: float
    draw_rate: float
    avg_attacker_survivors: float
    avg_defender_survivors: float
    iterations: int = 0
    seed: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["Ability", "CombatResult", "DiceSpec", "FleetUnit", "ability_spec"]
