from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, Optional
from datetime import datetime, timezone
import json

from ..types import CombatResult, FleetUnit
from ..units import summarize_roster

def _pct(value: float) -> str:
    return f"{value * 100:.1f}%"

def _roster_line(counts: Dict[str, int]) -> str:
    if not counts:
        return "(empty)"
    return ", ".join(f"{n}x {name}" for name, n in counts.items())

@dataclass
class ResultReport:
    timestamp: str
    attacker: Dict[str, int]
    defender: Dict[str, int]
    iterations: int
    seed: Optional[int]
    result: Dict[str, Any]

    def to_json(self) -> str:
        d = asdict(self)
        return json.dumps(d, indent=2, sort_keys=False)

    def to_markdown(self) -> str:
        r = self.result
        lines = []
        lines.append("# Battle Simulation Report")
        lines.append(f"- **Timestamp:** {self.timestamp}")
        seed = "n/a" if self.seed is None else str(self.seed)
        lines.append(f"- **Iterations:** {self.iterations}  |  **Seed:** {seed}")
        lines.append("\n## Fleets")
        lines.append(f"- Attacker: {_roster_line(self.attacker)}")
        lines.append(f"- Defender: {_roster_line(self.defender)}")
        lines.append("\n## Outcome")
        lines.append(f"- Attacker wins: {_pct(r['attacker_win_rate'])}")
        lines.append(f"- Draw: {_pct(r['draw_rate'])}")
        lines.append(f"- Defender wins: {_pct(r['defender_win_rate'])}")
        lines.append(f"- Avg attacker survivors: {r['avg_attacker_survivors']:.2f}")
        lines.append(f"- Avg defender survivors: {r['avg_defender_survivors']:.2f}")
        return "\n".join(lines)

def build_result_report(
    attacker: Iterable[FleetUnit],
    defender: Iterable[FleetUnit],
    result: CombatResult,
) -> ResultReport:
    timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
    return ResultReport(
        timestamp=timestamp,
        attacker=summarize_roster(attacker),
        defender=summarize_roster(defender),
        iterations=int(result.iterations),
        seed=result.seed,
        result=result.to_dict(),
    )

__all__ = ["ResultReport", "build_result_report"]
