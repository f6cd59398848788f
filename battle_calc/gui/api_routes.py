"""API routes for the battle calculator."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from battle_calc.simulators.combat import DEFAULT_ITERATIONS, CombatEngine
from battle_calc.types import FleetUnit
from battle_calc.units import all_units, build_roster, summarize_roster

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_ITERATIONS = 1_000_000

# Request/Response models
class DiceSpecModel(BaseModel):
    hit_on: int = Field(ge=0, le=10)
    count: int = Field(default=1, ge=0)

class UnitModel(BaseModel):
    name: str
    combat_value: int = Field(ge=0, le=10)
    num_dice: int = Field(default=1, ge=0)
    sustain_damage: bool = False
    anti_fighter_barrage: Optional[DiceSpecModel] = None
    space_cannon: Optional[DiceSpecModel] = None
    bombardment: Optional[DiceSpecModel] = None
    is_fighter: bool = False
    cost: int = Field(default=1, ge=0)
    count: int = Field(default=1, ge=0)

class SideModel(BaseModel):
    units: Dict[str, int] = Field(default_factory=dict)
    custom: List[UnitModel] = Field(default_factory=list)

class SimulateRequest(BaseModel):
    attacker: SideModel = Field(default_factory=SideModel)
    defender: SideModel = Field(default_factory=SideModel)
    iterations: int = Field(default=DEFAULT_ITERATIONS, ge=1, le=MAX_ITERATIONS)
    seed: Optional[int] = None


def _side_roster(side: SideModel) -> List[FleetUnit]:
    roster = build_roster(side.units)
    for unit in side.custom:
        data = unit.model_dump(exclude={"count"})
        roster.extend(build_roster([(FleetUnit.from_dict(data), unit.count)]))
    return roster

# ============================================================================
# Units
# ============================================================================

@router.get("/units")
async def list_units() -> Dict[str, Dict[str, Any]]:
    """List the standard unit archetypes."""
    return {unit_id: unit.to_dict() for unit_id, unit in all_units().items()}

# ============================================================================
# Simulation
# ============================================================================

@router.post("/simulate")
def simulate(request: SimulateRequest) -> Dict[str, Any]:
    """Run a Monte Carlo simulation for the posted fleets."""
    try:
        attacker = _side_roster(request.attacker)
        defender = _side_roster(request.defender)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]) if e.args else str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(
        "Simulate request: %d vs %d units, %d iterations",
        len(attacker), len(defender), request.iterations,
    )
    result = CombatEngine().simulate(
        attacker, defender, iterations=request.iterations, seed=request.seed
    )
    return {
        "attacker": summarize_roster(attacker),
        "defender": summarize_roster(defender),
        "result": result.to_dict(),
    }
