from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional
import os

import yaml

from .simulators.combat import DEFAULT_ITERATIONS

ENV_PREFIX = "BATTLE_CALC__"

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _load_one(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    # YAML is a superset of JSON, so one parser covers both
    d = yaml.safe_load(text)
    if d is None:
        return {}
    if not isinstance(d, dict):
        raise ValueError(f"Config file {path} must contain a mapping at top level")
    return d

def load_configs(paths: Iterable[str] | None) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {}
    for p in (paths or []):
        cfg = _deep_merge(cfg, _load_one(p))
    return cfg

def env_overrides(prefix: str = ENV_PREFIX) -> Dict[str, Any]:
    # Nested via double underscores: BATTLE_CALC__SIMULATION__ITERATIONS=5000
    out: Dict[str, Any] = {}
    for k, v in os.environ.items():
        if not k.startswith(prefix):
            continue
        parts = k[len(prefix):].split("__")
        cur = out
        for i, part in enumerate(parts):
            key = part.lower()
            if i == len(parts) - 1:
                cur[key] = _coerce(v)
            else:
                cur = cur.setdefault(key, {})
    return out

def _coerce(s: str) -> Any:
    t = s.strip().lower()
    if t in ("true", "false"):
        return t == "true"
    try:
        if "." in t:
            return float(t)
        return int(t)
    except ValueError:
        return s

def apply_cli_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    return _deep_merge(base, overrides or {})


@dataclass
class SimulationSettings:
    iterations: int = DEFAULT_ITERATIONS
    seed: Optional[int] = None


def settings_from_config(cfg: Dict[str, Any]) -> SimulationSettings:
    sim = cfg.get("simulation", {}) or {}
    seed = sim.get("seed")
    return SimulationSettings(
        iterations=int(sim.get("iterations", DEFAULT_ITERATIONS)),
        seed=None if seed is None else int(seed),
    )

__all__ = [
    "ENV_PREFIX",
    "SimulationSettings",
    "load_configs",
    "env_overrides",
    "apply_cli_overrides",
    "settings_from_config",
    "_deep_merge",
]
