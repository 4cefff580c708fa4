# type_core/clarity.py
from __future__ import annotations
import math
from typing import Callable, Dict, Optional

from . import config

ClarityWeight = Callable[[int], float]


def pci_from_theta(theta: float) -> int:
    """Preference Clarity Index in 1..30; half-up rounding of |θ|/3·30."""
    if theta == 0:
        return config.PCI_MIN
    raw = math.floor(abs(float(theta)) / config.THETA_MAX * config.PCI_MAX + 0.5)
    return int(min(config.PCI_MAX, max(config.PCI_MIN, raw)))


def pcc_category(pci: int) -> str:
    p = int(pci)
    for threshold, label in config.PCC_THRESHOLDS:
        if p >= threshold: return label
    return config.PCC_FLOOR


def log_clarity_weight(pci: int) -> float:
    # f(pci) = 2.15·ln(pci) + 1, so pci=1 -> 1.0 and pci=30 -> ~8.3
    if pci <= 0:
        return 1.0
    return config.CLARITY_LOG_SCALE * math.log(pci) + config.CLARITY_LOG_OFFSET


def step_clarity_weight(pci: int) -> float:
    return float(config.CLARITY_STEP_WEIGHTS.get(pcc_category(pci), 1.0))


CLARITY_WEIGHT_POLICIES: Dict[str, ClarityWeight] = {
    "log": log_clarity_weight,
    "step": step_clarity_weight,
}


def get_clarity_weight(name: Optional[str] = None) -> ClarityWeight:
    key = (name or config.CLARITY_WEIGHT_POLICY or "log").strip().lower()
    try:
        return CLARITY_WEIGHT_POLICIES[key]
    except KeyError:
        raise ValueError(
            f"unknown clarity weight policy {key!r}; expected one of {sorted(CLARITY_WEIGHT_POLICIES)}"
        ) from None
