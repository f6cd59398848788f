"""Battle Calc: Monte Carlo odds for fleet battles between two rosters."""

from importlib import import_module
from typing import Any

__version__ = "0.1.0"
__all__ = [
    "simulate",
    "CombatEngine",
    "CombatResult",
    "FleetUnit",
    "DiceSpec",
    "Ability",
    "SeededRNG",
    "get_unit",
    "all_units",
    "build_roster",
    "parse_roster",
    "get_registry",
    "__version__",
]

_EXPORTS = {
    "simulate": ("simulators.combat", "simulate"),
    "CombatEngine": ("simulators.combat", "CombatEngine"),
    "CombatResult": ("types", "CombatResult"),
    "FleetUnit": ("types", "FleetUnit"),
    "DiceSpec": ("types", "DiceSpec"),
    "Ability": ("types", "Ability"),
    "SeededRNG": ("rng", "SeededRNG"),
    "get_unit": ("units", "get_unit"),
    "all_units": ("units", "all_units"),
    "build_roster": ("units", "build_roster"),
    "parse_roster": ("units", "parse_roster"),
    "get_registry": ("units", "get_registry"),
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module_name, attr_name = _EXPORTS[name]
        module = import_module(f".{module_name}", __name__)
        attr = getattr(module, attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> list[str]:
    return sorted(set(list(globals().keys()) + list(__all__)))
