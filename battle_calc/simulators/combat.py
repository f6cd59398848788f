"""Combat resolution for fleet battles.

One battle runs anti-fighter barrage, then space-cannon defense, drops the
units that cannot fight, and finally repeats simultaneous combat rounds until
a side is wiped out.  :class:`BattleResolver` drives a single battle while
:class:`CombatEngine` repeats it many times on one shared dice stream and
reduces the outcomes into rates and averages.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from ..rng import SeededRNG, fresh_seed
from ..types import Ability, CombatResult, DiceSpec, FleetUnit, ability_spec

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 10_000

# =============================
# Battle-local state
# =============================


@dataclass
class ActiveUnit:
    """Mutable per-battle copy of a :class:`FleetUnit`."""

    name: str
    combat_value: int
    num_dice: int
    sustain_damage: bool
    anti_fighter_barrage: Optional[DiceSpec]
    space_cannon: Optional[DiceSpec]
    is_fighter: bool
    cost: int
    is_damaged: bool = False

    @classmethod
    def from_unit(cls, unit: FleetUnit) -> "ActiveUnit":
        return cls(
            name=unit.name,
            combat_value=unit.combat_value,
            num_dice=unit.num_dice,
            sustain_damage=unit.sustain_damage,
            anti_fighter_barrage=unit.anti_fighter_barrage,
            space_cannon=unit.space_cannon,
            is_fighter=unit.is_fighter,
            cost=unit.cost,
        )

    @property
    def can_sustain_hit(self) -> bool:
        return self.sustain_damage and not self.is_damaged

    @property
    def participates_in_combat(self) -> bool:
        return self.combat_value > 0


# =============================
# Hit resolution
# =============================


def roll_ability(units: Sequence[ActiveUnit], ability: Ability, rng: SeededRNG) -> int:
    """Roll ``ability`` for every unit that has it and count the hits."""

    hits = 0
    for unit in units:
        spec = ability_spec(unit, ability)
        if spec is None:
            continue
        for _ in range(spec.count):
            if rng.roll_d10() >= spec.hit_on:
                hits += 1
    return hits


def roll_combat(units: Sequence[ActiveUnit], rng: SeededRNG) -> int:
    """Roll standard combat dice for every fighting unit and count the hits."""

    hits = 0
    for unit in units:
        if not unit.participates_in_combat:
            continue
        for _ in range(unit.num_dice):
            if rng.roll_d10() >= unit.combat_value:
                hits += 1
    return hits


def apply_hits(hits: int, units: List[ActiveUnit]) -> None:
    """Assign ``hits`` to ``units`` in place.

    Sustain damage is spent on the most expensive units first.  Remaining
    hits then remove the cheapest unit, preferring an already damaged one
    when costs are equal.
    """

    remaining = hits
    sustain_indices = sorted(
        (i for i, unit in enumerate(units) if unit.can_sustain_hit),
        key=lambda i: -units[i].cost,
    )
    for idx in sustain_indices:
        if remaining <= 0:
            break
        units[idx].is_damaged = True
        remaining -= 1

    while remaining > 0 and units:
        idx = min(
            range(len(units)),
            key=lambda i: (units[i].cost, not units[i].is_damaged),
        )
        del units[idx]
        remaining -= 1


def apply_fighter_hits(hits: int, units: List[ActiveUnit]) -> None:
    """Remove up to ``hits`` fighters; other units are untouched."""

    remaining = hits
    while remaining > 0:
        idx = next((i for i, unit in enumerate(units) if unit.is_fighter), None)
        if idx is None:
            break
        del units[idx]
        remaining -= 1


# =============================
# Core battle driver
# =============================


@dataclass
class BattleOutcome:
    attacker_survivors: int
    defender_survivors: int
    rounds: int = 0
    trace: Optional[Dict[str, Any]] = None


class BattleResolver:
    def __init__(
        self,
        attacker: Sequence[FleetUnit],
        defender: Sequence[FleetUnit],
        rng: SeededRNG,
        debug: bool = False,
    ):
        self.rng = rng
        self.attacker = [ActiveUnit.from_unit(u) for u in attacker]
        self.defender = [ActiveUnit.from_unit(u) for u in defender]
        self.rounds = 0
        self.trace: Optional[Dict[str, Any]] = (
            {"afb": {}, "space_cannon": {}, "combat_rounds": []} if debug else None
        )

    # ----- Public API -----

    def resolve(self) -> BattleOutcome:
        self._anti_fighter_barrage()
        self._space_cannon_defense()
        self._remove_non_combatants()
        self._combat_rounds()
        return BattleOutcome(
            attacker_survivors=len(self.attacker),
            defender_survivors=len(self.defender),
            rounds=self.rounds,
            trace=self.trace,
        )

    # ----- Pre-combat phases -----

    def _anti_fighter_barrage(self) -> None:
        # both sides fire from their pre-phase rosters
        hits_on_defender = roll_ability(self.attacker, Ability.ANTI_FIGHTER_BARRAGE, self.rng)
        hits_on_attacker = roll_ability(self.defender, Ability.ANTI_FIGHTER_BARRAGE, self.rng)
        apply_fighter_hits(hits_on_attacker, self.attacker)
        apply_fighter_hits(hits_on_defender, self.defender)
        if self.trace is not None:
            self.trace["afb"] = {
                "attacker_hits": hits_on_defender,
                "defender_hits": hits_on_attacker,
            }

    def _space_cannon_defense(self) -> None:
        hits = roll_ability(self.defender, Ability.SPACE_CANNON, self.rng)
        apply_hits(hits, self.attacker)
        if self.trace is not None:
            self.trace["space_cannon"] = {"defender_hits": hits}

    def _remove_non_combatants(self) -> None:
        self.attacker = [u for u in self.attacker if u.participates_in_combat]
        self.defender = [u for u in self.defender if u.participates_in_combat]

    # ----- Combat rounds -----

    def _combat_rounds(self) -> None:
        while self.attacker and self.defender:
            if not self._can_roll():
                logger.debug("No dice left on either side; stopping after %d rounds", self.rounds)
                break
            att_hits = roll_combat(self.attacker, self.rng)
            def_hits = roll_combat(self.defender, self.rng)
            apply_hits(def_hits, self.attacker)
            apply_hits(att_hits, self.defender)
            self.rounds += 1
            if self.trace is not None:
                self.trace["combat_rounds"].append(
                    {
                        "round": self.rounds,
                        "attacker_hits": att_hits,
                        "defender_hits": def_hits,
                        "attacker_left": len(self.attacker),
                        "defender_left": len(self.defender),
                    }
                )

    def _can_roll(self) -> bool:
        return any(u.num_dice > 0 for u in self.attacker + self.defender)


def run_battle(
    attacker: Sequence[FleetUnit], defender: Sequence[FleetUnit], rng: SeededRNG
) -> Tuple[int, int]:
    outcome = BattleResolver(attacker, defender, rng).resolve()
    return outcome.attacker_survivors, outcome.defender_survivors


# =============================
# Monte Carlo aggregation
# =============================


@dataclass
class _Tally:
    attacker_wins: int = 0
    defender_wins: int = 0
    draws: int = 0
    attacker_survivors: int = 0
    defender_survivors: int = 0

    def add(self, attacker_left: int, defender_left: int) -> None:
        self.attacker_survivors += attacker_left
        self.defender_survivors += defender_left
        if attacker_left > 0 and defender_left == 0:
            self.attacker_wins += 1
        elif defender_left > 0 and attacker_left == 0:
            self.defender_wins += 1
        else:
            self.draws += 1


class CombatEngine:
    """Monte Carlo estimator of battle outcomes."""

    def simulate(
        self,
        attacker: Sequence[FleetUnit],
        defender: Sequence[FleetUnit],
        iterations: int = DEFAULT_ITERATIONS,
        seed: Optional[int] = None,
    ) -> CombatResult:
        if iterations < 1:
            raise ValueError(f"iterations must be at least 1, got {iterations}")

        if not attacker and not defender:
            return CombatResult(0.0, 0.0, 1.0, 0.0, 0.0)
        if not attacker:
            return CombatResult(0.0, 1.0, 0.0, 0.0, float(len(defender)))
        if not defender:
            return CombatResult(1.0, 0.0, 0.0, float(len(attacker)), 0.0)

        if seed is None:
            seed = fresh_seed()
        rng = SeededRNG(seed)
        logger.debug(
            "Simulating %d vs %d units, %d iterations, seed=%d",
            len(attacker), len(defender), iterations, rng.seed,
        )

        attacker = tuple(attacker)
        defender = tuple(defender)
        tally = _Tally()
        for _ in range(iterations):
            tally.add(*run_battle(attacker, defender, rng))

        n = float(iterations)
        result = CombatResult(
            attacker_win_rate=tally.attacker_wins / n,
            defender_win_rate=tally.defender_wins / n,
            draw_rate=tally.draws / n,
            avg_attacker_survivors=tally.attacker_survivors / n,
            avg_defender_survivors=tally.defender_survivors / n,
            iterations=iterations,
            seed=rng.seed,
        )
        logger.debug("Result: %s", result)
        return result


def simulate(
    attacker: Sequence[FleetUnit],
    defender: Sequence[FleetUnit],
    iterations: int = DEFAULT_ITERATIONS,
    seed: Optional[int] = None,
) -> CombatResult:
    return CombatEngine().simulate(attacker, defender, iterations=iterations, seed=seed)


__all__ = [
    "ActiveUnit",
    "BattleOutcome",
    "BattleResolver",
    "CombatEngine",
    "DEFAULT_ITERATIONS",
    "apply_fighter_hits",
    "apply_hits",
    "roll_ability",
    "roll_combat",
    "run_battle",
    "simulate",
]
