"""Two-parameter logistic (2PL) utilities used by the scoring engine.

This module provides the logistic response probability, Fisher information
and the Newton-Raphson maximum-likelihood estimator for a person's latent
trait on one dichotomy.  The estimator works on already-resolved
``(a, b, u)`` triples so it can be reused from the engine, the audit tool
and the smoke run without knowing anything about question metadata.
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from . import config
from .types import ThetaEstimate

__all__ = [
    "sigma",
    "p_2pl",
    "item_info",
    "se_from_info",
    "estimate_theta",
]

log = logging.getLogger(__name__)

_EPS = 1e-6

Response = Tuple[float, float, int]


def sigma(x: float) -> float:
    """Return the logistic function ``σ(x) = 1 / (1 + e^{−x})``.

    The implementation guards against overflow for large negative inputs by
    handling the positive and negative halves of the real line separately.
    """

    if x >= 0:
        z = math.exp(-x)
        return 1.0 / (1.0 + z)
    z = math.exp(x)
    return z / (1.0 + z)


def p_2pl(theta: float, a: float, b: float) -> float:
    """Probability of the positive-pole response (``u = 1``).

    Parameters
    ----------
    theta: float
        Current latent trait estimate.
    a: float
        Item discrimination.
    b: float
        Item location.

    Returns
    -------
    float
        ``σ(a · (theta − b))``
    """

    return sigma(a * (theta - b))


def item_info(theta: float, a: float, b: float) -> float:
    """Fisher information contributed by a single 2PL item."""

    p = p_2pl(theta, a, b)
    info = (a * a) * p * (1.0 - p)
    return max(info, 0.0)


def se_from_info(info_total: float) -> float:
    """Convert accumulated Fisher information into a standard error."""

    return 1.0 / math.sqrt(max(info_total, _EPS))


def _clamp(theta: float) -> float:
    return max(config.THETA_MIN, min(config.THETA_MAX, theta))


def _emit_trace(**values: object) -> None:
    if not config.DEBUG_TRACE:
        return
    ordered = []
    for key in config.TRACE_FIELDS:
        if key in values:
            ordered.append(f"{key}={values[key]}")
    if ordered:
        log.info("trace %s", " ".join(ordered))


def estimate_theta(responses: Sequence[Response], label: Optional[str] = None) -> ThetaEstimate:
    """Newton-Raphson MLE of theta under the 2PL model.

    Starts at ``theta = 0`` and runs at most ``NR_MAX_ITER`` updates.  Each
    update is clamped to ``[THETA_MIN, THETA_MAX]``; iteration stops when the
    clamped step moves theta by less than ``NR_TOL`` or when the second
    derivative is flatter than ``NR_FLAT_EPS`` (treated as converged).
    With no responses the neutral estimate ``0.0`` is returned.
    """

    if not responses:
        return ThetaEstimate(theta=0.0, se=None, n_items=0, iterations=0, converged=True)

    theta = 0.0
    converged = False
    iterations = 0
    trace: List[dict] = []
    for iteration in range(1, config.NR_MAX_ITER + 1):
        first = 0.0
        second = 0.0
        for a, b, u in responses:
            p = p_2pl(theta, a, b)
            first += a * (u - p)
            second += -a * a * (1.0 - p) * p

        if abs(second) < config.NR_FLAT_EPS:
            converged = True
            break

        iterations = iteration
        updated = _clamp(theta - first / second)
        trace.append(
            {
                "iteration": iteration,
                "theta_before": theta,
                "theta_after": updated,
                "first": first,
                "second": second,
            }
        )
        _emit_trace(
            dichotomy=label or "-",
            iteration=iteration,
            theta_before=f"{theta:.5f}",
            theta_after=f"{updated:.5f}",
            first=f"{first:.5f}",
            second=f"{second:.5f}",
        )
        if abs(updated - theta) < config.NR_TOL:
            theta = updated
            converged = True
            break
        theta = updated

    info_total = sum(item_info(theta, a, b) for a, b, _u in responses)
    return ThetaEstimate(
        theta=theta,
        se=se_from_info(info_total),
        n_items=len(responses),
        iterations=iterations,
        converged=converged,
        trace=trace,
    )
