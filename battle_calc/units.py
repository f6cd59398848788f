"""Standard unit archetypes and roster helpers."""
from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .types import FleetUnit


def _unit_count(key: Any, raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise ValueError(f"Unit count for {key!r} must be an integer, got {raw!r}")
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Unit count for {key!r} must be an integer, got {raw!r}") from exc


def normalize_unit_id(unit_id: str) -> str:
    return unit_id.strip().lower().replace("-", "_").replace(" ", "_")


class UnitRegistry:
    """Singleton-style registry that loads JSON data on demand."""

    def __init__(self, path: Optional[str] = None) -> None:
        self._path = path or os.path.join(os.path.dirname(__file__), "data", "units.json")
        self._data: Dict[str, FleetUnit] = {}
        self._meta: Dict[str, Any] = {}
        self._loaded = False

    def load(self) -> None:
        if self._loaded:
            return
        with open(self._path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
        self._meta = payload.get("_meta", {})
        for unit_id, block in payload.items():
            if unit_id.startswith("_"):
                continue
            self._data[unit_id] = FleetUnit.from_dict(block)
        self._loaded = True

    @property
    def meta(self) -> Dict[str, Any]:
        self.load()
        return self._meta

    def get(self, unit_id: str) -> FleetUnit:
        self.load()
        try:
            return self._data[normalize_unit_id(unit_id)]
        except KeyError as exc:
            available = ", ".join(self._data)
            raise KeyError(f"Unknown unit '{unit_id}'. Available: {available}") from exc

    def all_units(self) -> Dict[str, FleetUnit]:
        self.load()
        return dict(self._data)


_registry: Optional[UnitRegistry] = None


def get_registry(path: Optional[str] = None) -> UnitRegistry:
    global _registry
    if _registry is None or path is not None:
        _registry = UnitRegistry(path=path)
    return _registry


def get_unit(unit_id: str) -> FleetUnit:
    return get_registry().get(unit_id)


def all_units() -> Dict[str, FleetUnit]:
    return get_registry().all_units()


# ============================================================================
# Rosters
# ============================================================================

RosterEntry = Union[str, FleetUnit]


def build_roster(
    counts: Union[Mapping[str, int], Iterable[Tuple[RosterEntry, int]]],
    registry: Optional[UnitRegistry] = None,
) -> List[FleetUnit]:
    """Expand ``{unit_id: count}`` into a roster, keeping the given order.

    Keys may also be :class:`FleetUnit` instances for custom archetypes.
    """

    reg = registry or get_registry()
    items = counts.items() if isinstance(counts, Mapping) else counts
    roster: List[FleetUnit] = []
    for key, count in items:
        count = _unit_count(key, count)
        if count < 0:
            raise ValueError(f"Unit count for {key!r} must be non-negative, got {count}")
        unit = key if isinstance(key, FleetUnit) else reg.get(key)
        roster.extend([unit] * count)
    return roster


def parse_roster(text: str, registry: Optional[UnitRegistry] = None) -> List[FleetUnit]:
    """Parse ``"dreadnought=2, fighter:3, cruiser"`` into a roster."""

    pairs: List[Tuple[str, int]] = []
    for chunk in (text or "").split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        for sep in ("=", ":"):
            if sep in chunk:
                name, _, raw = chunk.partition(sep)
                try:
                    count = int(raw.strip())
                except ValueError as exc:
                    raise ValueError(f"Bad unit count in {chunk!r}") from exc
                break
        else:
            name, count = chunk, 1
        pairs.append((name.strip(), count))
    return build_roster(pairs, registry=registry)


def roster_from_config(block: Any, registry: Optional[UnitRegistry] = None) -> List[FleetUnit]:
    """Build a roster from a config section.

    Accepts a roster string, a ``{unit_id: count}`` mapping, or a list whose
    items are unit ids or inline unit definitions (optionally with a
    ``count`` key).
    """

    if block is None:
        return []
    if isinstance(block, str):
        return parse_roster(block, registry=registry)
    if isinstance(block, Mapping):
        return build_roster({str(k): _unit_count(k, v) for k, v in block.items()}, registry=registry)
    if not isinstance(block, (list, tuple)):
        raise ValueError(f"Roster must be a string, mapping or list, got {block!r}")
    roster: List[FleetUnit] = []
    for item in block:
        if isinstance(item, str):
            roster.extend(parse_roster(item, registry=registry))
        elif isinstance(item, Mapping):
            data = dict(item)
            count = _unit_count(data.get("name"), data.pop("count", 1))
            roster.extend(build_roster([(FleetUnit.from_dict(data), count)], registry=registry))
        else:
            raise ValueError(f"Unsupported roster entry: {item!r}")
    return roster


def summarize_roster(roster: Iterable[FleetUnit]) -> Dict[str, int]:
    out: Dict[str, int] = {}
    for unit in roster:
        out[unit.name] = out.get(unit.name, 0) + 1
    return out


__all__ = [
    "UnitRegistry",
    "all_units",
    "build_roster",
    "get_registry",
    "get_unit",
    "normalize_unit_id",
    "parse_roster",
    "roster_from_config",
    "summarize_roster",
]
