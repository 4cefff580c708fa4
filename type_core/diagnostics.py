"""Helpers to export the per-type score table and estimator traces in JSON/CSV formats."""
from __future__ import annotations

from typing import Any, Dict, List
import csv
import io

from .types import Result

_TYPE_FIELDS: tuple[str, ...] = (
    "rank",
    "type",
    "dominant",
    "auxiliary",
    "tertiary",
    "inferior",
    "dichotomy_term",
    "function_term",
    "total",
)

_DICHOTOMY_FIELDS: tuple[str, ...] = (
    "dichotomy",
    "theta",
    "se",
    "pci",
    "pcc",
    "weight",
    "preferred_pole",
    "n_items",
    "iterations",
    "converged",
)

_TRACE_FIELDS: tuple[str, ...] = (
    "dichotomy",
    "iteration",
    "theta_before",
    "theta_after",
    "first",
    "second",
)


def _ranks(result: Result) -> Dict[str, int]:
    # Stable sort keeps canonical order among equal totals, so rank 1 is the winner.
    ordered = sorted(result.breakdown, key=lambda e: -e.total)
    return {entry.type: pos for pos, entry in enumerate(ordered, start=1)}


def type_rows(result: Result) -> List[Dict[str, Any]]:
    ranks = _ranks(result)
    rows: List[Dict[str, Any]] = []
    for entry in result.breakdown:
        dom, aux, ter, inf = entry.stack
        rows.append(
            {
                "rank": ranks[entry.type],
                "type": entry.type,
                "dominant": dom,
                "auxiliary": aux,
                "tertiary": ter,
                "inferior": inf,
                "dichotomy_term": float(entry.dichotomy_term),
                "function_term": float(entry.function_term),
                "total": float(entry.total),
            }
        )
    return rows


def dichotomy_rows(result: Result) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for name, res in result.dichotomies.items():
        rows.append(
            {
                "dichotomy": name,
                "theta": float(res.theta),
                "se": None if res.se is None else float(res.se),
                "pci": int(res.pci),
                "pcc": res.pcc,
                "weight": float(res.weight),
                "preferred_pole": res.preferred_pole,
                "n_items": int(res.n_items),
                "iterations": int(res.iterations),
                "converged": bool(res.converged),
            }
        )
    return rows


def trace_rows(result: Result) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for name, res in result.dichotomies.items():
        for step in res.trace:
            row: Dict[str, Any] = {"dichotomy": name}
            for key in _TRACE_FIELDS[1:]:
                val = step.get(key)
                if key == "iteration":
                    row[key] = int(val or 0)
                else:
                    try:
                        row[key] = float(val)  # type: ignore[arg-type]
                    except (TypeError, ValueError):
                        row[key] = 0.0
            rows.append(row)
    return rows


def to_json(result: Result) -> Dict[str, Any]:
    """Return a JSON-safe diagnostics payload for one scored submission."""

    return {
        "final_type": result.final_type,
        "score": float(result.score),
        "types": type_rows(result),
        "dichotomies": dichotomy_rows(result),
        "attitude_strengths": {k: float(v) for k, v in result.attitude_strengths.items()},
        "trace": trace_rows(result),
    }


def _csv(rows: List[Dict[str, Any]], fields: tuple[str, ...]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=fields)
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buf.getvalue()


def to_csv(result: Result) -> str:
    """Render the per-type score table as CSV with a fixed header."""

    return _csv(type_rows(result), _TYPE_FIELDS)


def dichotomies_to_csv(result: Result) -> str:
    return _csv(dichotomy_rows(result), _DICHOTOMY_FIELDS)


def trace_to_csv(result: Result) -> str:
    return _csv(trace_rows(result), _TRACE_FIELDS)


__all__ = ["to_json", "to_csv", "dichotomies_to_csv", "trace_to_csv", "type_rows"]
