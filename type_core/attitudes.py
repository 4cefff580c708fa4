from __future__ import annotations
from typing import Dict, Iterable, Mapping, Optional

from . import config
from .question_bank import FUNCTIONS
from .types import LikertQuestion, ScoringError


def _likert(qid: str, raw: object) -> Optional[int]:
    """1..5 from an int or numeric string; None when unanswered."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise ScoringError(f"Likert question {qid!r}: answer {raw!r} is not a 1-5 value")
    try:
        v = int(str(raw).strip()) if isinstance(raw, str) else int(raw)
    except (TypeError, ValueError):
        raise ScoringError(f"Likert question {qid!r}: answer {raw!r} is not a 1-5 value") from None
    if isinstance(raw, float) and raw != v:
        raise ScoringError(f"Likert question {qid!r}: answer {raw!r} is not a 1-5 value")
    if v not in config.LIKERT_WEIGHTS:
        raise ScoringError(f"Likert question {qid!r}: answer {v} outside 1-5")
    return v


def empty_strengths() -> Dict[str, float]:
    return {fn: 0.0 for fn in FUNCTIONS}


def aggregate_attitudes(
    likert_answers: Mapping[str, object],
    likert_questions: Iterable[LikertQuestion],
) -> Dict[str, float]:
    """Fold Likert answers into per-function strengths.

    1/2 credit construct1's pole with +2/+1, 4/5 credit construct2's pole with
    +1/+2, 3 is neutral.  Unanswered questions and answers to ids that are not
    in ``likert_questions`` add nothing, so every value stays >= 0.
    """
    strengths = empty_strengths()
    for q in likert_questions:
        value = _likert(q.id, likert_answers.get(q.id))
        if value is None:
            continue
        for construct in (q.construct1, q.construct2):
            if construct.pole not in strengths:
                raise ScoringError(f"Likert question {q.id!r}: unknown function pole {construct.pole!r}")
        weight = config.LIKERT_WEIGHTS[value]
        if weight > 0:
            strengths[q.construct1.pole] += weight
        elif weight < 0:
            strengths[q.construct2.pole] += abs(weight)
    return strengths
