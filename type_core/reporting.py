# type_core/reporting.py
from __future__ import annotations
import json
from dataclasses import asdict, is_dataclass
from typing import Any, List

from .question_bank import DICHOTOMIES
from .types import Result

# -------- utils: make any object JSON-safe ----------
def to_basic(x: Any) -> Any:
    if x is None or isinstance(x, (bool, int, float, str)):
        return x
    if isinstance(x, dict):
        return {str(k): to_basic(v) for k, v in x.items()}
    if isinstance(x, (list, tuple, set)):
        return [to_basic(v) for v in x]
    if is_dataclass(x) and not isinstance(x, type):
        return to_basic(asdict(x))
    if hasattr(x, "__dict__"):
        return to_basic(vars(x))
    return str(x)


def result_to_dict(result: Result, include_trace: bool = False) -> dict:
    """Public result shape: type, stack, score, rationale and the score table."""
    data = {
        "finalType": result.final_type,
        "dominant": result.dominant,
        "auxiliary": result.auxiliary,
        "tertiary": result.tertiary,
        "inferior": result.inferior,
        "score": result.score,
        "rationale": result.rationale,
        "allTypeScores": dict(result.type_scores),
        "dichotomies": {},
        "attitudeStrengths": dict(result.attitude_strengths),
    }
    for name, res in result.dichotomies.items():
        entry = to_basic(res)
        if not include_trace:
            entry.pop("trace", None)
        data["dichotomies"][name] = entry
    return to_basic(data)


def to_json_text(result: Result, include_trace: bool = False) -> str:
    return json.dumps(result_to_dict(result, include_trace=include_trace), ensure_ascii=False, indent=2)


# -------- terminal summary ----------
def render_text(result: Result) -> str:
    lines: List[str] = [f"Best fit: {result.final_type} (score {result.score:.2f})"]
    lines.append(
        "Stack: "
        f"dominant {result.dominant} | auxiliary {result.auxiliary} | "
        f"tertiary {result.tertiary} | inferior {result.inferior}"
    )
    for name, spec in DICHOTOMIES.items():
        res = result.dichotomies.get(name)
        if res is None:
            continue
        lines.append(
            f"  {spec.label}: theta={res.theta:+.2f} PCI={res.pci:2d} {res.pcc:<10} -> {res.preferred_pole}"
        )
    strengths = ", ".join(f"{fn}={val:g}" for fn, val in result.attitude_strengths.items())
    lines.append(f"Function strengths: {strengths}")
    lines.append("")
    lines.append(result.rationale)
    return "\n".join(lines)
