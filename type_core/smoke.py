from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional, Tuple

from . import config
from .diagnostics import type_rows
from .engine import HolisticScorer
from .irt import p_2pl
from .question_bank import DICHOTOMIES, load_item_parameters, load_questions
from .types import ForcedChoiceQuestion, LikertQuestion


def _maybe_enable_trace() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    if config.DEBUG_TRACE:
        logging.getLogger("type_core.irt").setLevel(logging.INFO)


def _simulate_forced_choice(
    rng: random.Random,
    fc_questions: List[ForcedChoiceQuestion],
    true_theta: Dict[str, float],
) -> Dict[int, str]:
    answers: Dict[int, str] = {}
    params_by_number = {p.number: p for p in load_item_parameters().values()}
    for q in fc_questions:
        params = params_by_number.get(q.number)
        if params is None or params.dichotomy not in true_theta:
            continue
        p = p_2pl(true_theta[params.dichotomy], params.a, params.b)
        want = 1 if rng.random() < p else 0
        for key, opt in sorted(q.options.items()):
            if opt.score_key == want:
                answers[q.number] = key
                break
    return answers


def _simulate_likert(
    rng: random.Random,
    likert_questions: List[LikertQuestion],
    favoured: Tuple[str, ...],
) -> Dict[str, int]:
    answers: Dict[str, int] = {}
    for q in likert_questions:
        if q.construct1.pole in favoured:
            answers[q.id] = rng.choice((1, 1, 2, 3))
        elif q.construct2.pole in favoured:
            answers[q.id] = rng.choice((5, 5, 4, 3))
        else:
            answers[q.id] = rng.randint(2, 4)
    return answers


def run_smoke_session(seed: Optional[int] = None) -> str:
    _maybe_enable_trace()

    rng = random.Random(config.DEBUG_SEED if seed is None else seed)
    fc_questions, likert_questions = load_questions()
    true_theta = {name: rng.uniform(-2.0, 2.0) for name in DICHOTOMIES}
    favoured = ("Ni", "Te")
    logging.info("Starting synthetic respondent seed=%s true_theta=%s", seed, true_theta)

    fc_answers = _simulate_forced_choice(rng, fc_questions, true_theta)
    likert_answers = _simulate_likert(rng, likert_questions, favoured)

    scorer = HolisticScorer()
    result = scorer.score(fc_answers, likert_answers, fc_questions, likert_questions)

    for name, res in result.dichotomies.items():
        logging.info(
            "Dichotomy %s: theta=%.3f (true %.3f) se=%s pci=%d pcc=%s iters=%d",
            name,
            res.theta,
            true_theta[name],
            "-" if res.se is None else f"{res.se:.3f}",
            res.pci,
            res.pcc,
            res.iterations,
        )
    logging.info("Strengths: %s", result.attitude_strengths)
    for row in sorted(type_rows(result), key=lambda r: r["rank"])[:3]:
        logging.info("  #%d %s total=%.2f", row["rank"], row["type"], row["total"])
    logging.info("Result: %s", result.rationale)
    return result.final_type


if __name__ == "__main__":  # pragma: no cover
    run_smoke_session()
