from __future__ import annotations
import argparse, sys, json, logging
from typing import Any, Dict, List

from .config import (
    ENV_PREFIX,
    load_configs,
    env_overrides,
    apply_cli_overrides,
    settings_from_config,
)
from .reports.result_report import build_result_report
from .simulators.combat import CombatEngine
from .types import FleetUnit
from .units import all_units, roster_from_config

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="python -m battle_calc.cli",
        description="Fleet battle odds calculator"
    )
    p.add_argument("--log-level", type=str, default="WARNING",
                   help="Logging level (DEBUG, INFO, WARNING, ...)")
    sub = p.add_subparsers(dest="cmd")

    # simulate
    sm = sub.add_parser("simulate", help="Run a Monte Carlo battle simulation")
    sm.add_argument("--attacker", type=str, default=None,
                    help="Attacker roster, e.g. 'dreadnought=2,fighter=3'")
    sm.add_argument("--defender", type=str, default=None,
                    help="Defender roster, e.g. 'cruiser=2,pds'")
    sm.add_argument("--iterations", type=int, default=None)
    sm.add_argument("--seed", type=int, default=None)
    sm.add_argument("--config", type=str, action="append", default=[], help="YAML/JSON config files (merged)")
    sm.add_argument("--env-prefix", type=str, default=ENV_PREFIX, help="Env prefix for overrides")
    sm.add_argument("--report", type=str, default=None, help="Path to save report (.json or .md)")
    sm.add_argument("--json", action="store_true", help="Print the result as JSON")

    # units
    sub.add_parser("units", help="List the standard unit archetypes")

    args = p.parse_args(argv)
    if getattr(args, "cmd", None) is None:
        p.print_help()
        sys.exit(2)
    return args


def _layered_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Config files, then environment, then explicit flags."""
    cfg = load_configs(args.config)
    cfg = apply_cli_overrides(cfg, env_overrides(args.env_prefix))
    flags: Dict[str, Any] = {}
    if args.attacker is not None:
        flags["attacker"] = args.attacker
    if args.defender is not None:
        flags["defender"] = args.defender
    sim: Dict[str, Any] = {}
    if args.iterations is not None:
        sim["iterations"] = args.iterations
    if args.seed is not None:
        sim["seed"] = args.seed
    if sim:
        flags["simulation"] = sim
    return apply_cli_overrides(cfg, flags)


def _simulate(args: argparse.Namespace) -> Dict[str, Any]:
    cfg = _layered_config(args)
    settings = settings_from_config(cfg)
    attacker = roster_from_config(cfg.get("attacker"))
    defender = roster_from_config(cfg.get("defender"))
    logger.info("Attacker %d units, defender %d units", len(attacker), len(defender))
    result = CombatEngine().simulate(
        attacker, defender, iterations=settings.iterations, seed=settings.seed
    )
    report = build_result_report(attacker, defender, result)
    return {"result": result, "report": report}


def _format_unit(unit_id: str, unit: FleetUnit) -> str:
    extras: List[str] = []
    if unit.sustain_damage:
        extras.append("sustain")
    if unit.is_fighter:
        extras.append("fighter")
    for label, spec in (
        ("afb", unit.anti_fighter_barrage),
        ("space cannon", unit.space_cannon),
        ("bombard", unit.bombardment),
    ):
        if spec is not None:
            extras.append(f"{label} {spec.hit_on}x{spec.count}")
    combat = f"{unit.combat_value}x{unit.num_dice}" if unit.combat_value else "-"
    tail = f"  [{', '.join(extras)}]" if extras else ""
    return f"{unit_id:<12} {unit.name:<12} combat={combat:<5} cost={unit.cost}{tail}"


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "units":
        for unit_id, unit in all_units().items():
            print(_format_unit(unit_id, unit))
        return 0

    if args.cmd == "simulate":
        try:
            res = _simulate(args)
        except (KeyError, ValueError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        report = res["report"]
        if args.report:
            if args.report.endswith(".json"):
                with open(args.report, "w", encoding="utf-8") as f:
                    f.write(report.to_json())
            elif args.report.endswith(".md"):
                with open(args.report, "w", encoding="utf-8") as f:
                    f.write(report.to_markdown())
            else:
                print("Report path must end with .json or .md", file=sys.stderr)
                return 2
        if args.json:
            print(json.dumps(res["result"].to_dict(), indent=2))
        else:
            print(report.to_markdown())
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
