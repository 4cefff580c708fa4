# type_core/engine.py
from __future__ import annotations
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
import logging

from . import config
from .attitudes import aggregate_attitudes
from .clarity import ClarityWeight, get_clarity_weight, pcc_category, pci_from_theta
from .irt import estimate_theta
from .question_bank import (
    DICHOTOMIES,
    TYPE_FUNCTION_STACKS,
    group_by_dichotomy,
    load_item_parameters,
)
from .types import (
    DichotomyResult,
    ForcedChoiceQuestion,
    ItemParams,
    LikertQuestion,
    Result,
    ScoringError,
    ThetaEstimate,
    TypeScore,
)

__all__ = ["HolisticScorer", "ScoringError", "build_rationale", "score_assessment"]

log = logging.getLogger(__name__)


def _normalize_fc_answers(answers: Mapping[object, object]) -> Dict[int, str]:
    out: Dict[int, str] = {}
    for key, choice in answers.items():
        if not choice:
            continue
        try:
            number = int(key)  # type: ignore[arg-type]
        except (TypeError, ValueError, OverflowError):
            raise ScoringError(f"forced-choice answer key {key!r} is not a question number") from None
        if isinstance(key, float) and number != key:
            raise ScoringError(f"forced-choice answer key {key!r} is not a question number")
        out[number] = str(choice)
    return out


def _preferred_pole(name: str, theta: float) -> str:
    spec = DICHOTOMIES[name]
    if theta > 0:
        return spec.positive
    if theta < 0:
        return spec.negative
    return spec.tie_breaker


def build_rationale(dichotomies: Mapping[str, DichotomyResult], final_type: str, score: float) -> str:
    """One-sentence explanation: per-axis theta/PCC, then the winner and its score."""

    parts = []
    for name, spec in DICHOTOMIES.items():
        res = dichotomies[name]
        parts.append(f"{spec.label}={res.theta:.2f} ({res.pcc})")
    text = f"""
        Core IRT theta (preference clarity): {', '.join(parts)}.
        Holistic stack scoring compared all {len(TYPE_FUNCTION_STACKS)} function stacks against
        the combined evidence and selected {final_type} as the best overall fit
        with a final fit score of {score:.2f}.
    """
    return " ".join(text.split())


class HolisticScorer:
    """Best-fit type selection over the 16 function stacks.

    The item-parameter table, the stack table and the scoring policy are
    injected once and never mutated, so a single scorer can be shared across
    threads.  All working state is created per :meth:`score` call.
    """

    def __init__(
        self,
        item_params: Optional[Mapping[int, ItemParams]] = None,
        stacks: Optional[Mapping[str, Tuple[str, str, str, str]]] = None,
        *,
        clarity_weight: Union[str, ClarityWeight, None] = None,
        position_weights: Optional[Sequence[float]] = None,
        attitude_weight: Optional[float] = None,
        type_order: Optional[Sequence[str]] = None,
    ) -> None:
        self.item_params = item_params if item_params is not None else load_item_parameters()
        self.stacks = stacks if stacks is not None else TYPE_FUNCTION_STACKS
        self.type_order = tuple(type_order) if type_order is not None else tuple(sorted(self.stacks))
        if not self.stacks:
            raise ValueError("no function stacks to score")
        if sorted(self.type_order) != sorted(self.stacks):
            raise ValueError("type_order must list every stack label exactly once")

        if callable(clarity_weight):
            self.clarity_weight: Callable[[int], float] = clarity_weight
        else:
            self.clarity_weight = get_clarity_weight(clarity_weight)

        weights = tuple(float(w) for w in (position_weights or config.STACK_POSITION_WEIGHTS))
        if len(weights) != 4:
            raise ValueError(f"need four stack position weights, got {len(weights)}")
        if any(later > earlier for earlier, later in zip(weights, weights[1:])):
            raise ValueError(f"stack position weights must be non-increasing, got {weights}")
        self.position_weights = weights
        self.attitude_weight = float(
            config.ATTITUDE_SCORE_WEIGHT if attitude_weight is None else attitude_weight
        )
        self._groups = group_by_dichotomy(self.item_params)

    # ---- dichotomies ----
    def _responses(
        self,
        dichotomy: str,
        answers: Mapping[int, str],
        by_number: Mapping[int, ForcedChoiceQuestion],
    ) -> List[Tuple[float, float, int]]:
        out: List[Tuple[float, float, int]] = []
        for idx in self._groups.get(dichotomy, ()):
            params = self.item_params[idx]
            choice = answers.get(params.number)
            if not choice:
                continue
            question = by_number.get(params.number)
            if question is None:
                raise ScoringError(
                    f"question {params.number} ({dichotomy}) was answered but has no question metadata"
                )
            option = question.options.get(choice)
            if option is None:
                raise ScoringError(
                    f"question {params.number}: answer {choice!r} is not one of {sorted(question.options)}"
                )
            if option.score_key not in (0, 1):
                raise ScoringError(
                    f"question {params.number}: option {choice!r} has scoreKey {option.score_key!r}, expected 0 or 1"
                )
            out.append((params.a, params.b, option.score_key))
        return out

    def estimate(
        self,
        dichotomy: str,
        fc_answers: Mapping[object, object],
        fc_questions: Iterable[ForcedChoiceQuestion],
    ) -> ThetaEstimate:
        if dichotomy not in DICHOTOMIES:
            raise ValueError(f"unknown dichotomy {dichotomy!r}")
        by_number: Dict[int, ForcedChoiceQuestion] = {}
        for q in fc_questions:
            by_number.setdefault(q.number, q)
        responses = self._responses(dichotomy, _normalize_fc_answers(fc_answers), by_number)
        return estimate_theta(responses, label=dichotomy)

    def classify(self, dichotomy: str, est: ThetaEstimate) -> DichotomyResult:
        pci = pci_from_theta(est.theta)
        return DichotomyResult(
            dichotomy=dichotomy,
            theta=est.theta,
            pci=pci,
            pcc=pcc_category(pci),
            weight=float(self.clarity_weight(pci)),
            preferred_pole=_preferred_pole(dichotomy, est.theta),
            se=est.se,
            n_items=est.n_items,
            iterations=est.iterations,
            converged=est.converged,
            trace=list(est.trace),
        )

    # ---- holistic scoring ----
    def score_type(
        self,
        type_label: str,
        dichotomies: Mapping[str, DichotomyResult],
        strengths: Mapping[str, float],
    ) -> TypeScore:
        stack = tuple(self.stacks[type_label])
        dich_term = 0.0
        for name, spec in DICHOTOMIES.items():
            res = dichotomies[name]
            oriented = res.theta if type_label[spec.position] == spec.positive else -res.theta
            dich_term += oriented * res.weight
        fn_term = sum(strengths.get(fn, 0.0) * w for fn, w in zip(stack, self.position_weights))
        fn_term *= self.attitude_weight
        return TypeScore(
            type=type_label,
            stack=stack,  # type: ignore[arg-type]
            dichotomy_term=dich_term,
            function_term=fn_term,
            total=dich_term + fn_term,
        )

    def score_types(
        self,
        dichotomies: Mapping[str, DichotomyResult],
        strengths: Mapping[str, float],
    ) -> List[TypeScore]:
        return [self.score_type(t, dichotomies, strengths) for t in self.type_order]

    def score(
        self,
        fc_answers: Mapping[object, object],
        likert_answers: Mapping[str, object],
        fc_questions: Sequence[ForcedChoiceQuestion],
        likert_questions: Sequence[LikertQuestion],
    ) -> Result:
        dichotomies: Dict[str, DichotomyResult] = {}
        for name in DICHOTOMIES:
            res = self.classify(name, self.estimate(name, fc_answers, fc_questions))
            log.debug(
                "dichotomy %s theta=%.4f pci=%d pcc=%s items=%d iters=%d",
                name, res.theta, res.pci, res.pcc, res.n_items, res.iterations,
            )
            dichotomies[name] = res

        strengths = aggregate_attitudes(likert_answers, likert_questions)

        breakdown = self.score_types(dichotomies, strengths)
        best = breakdown[0]
        for entry in breakdown[1:]:
            if entry.total > best.total:
                best = entry

        dom, aux, ter, inf = best.stack
        log.debug("best fit %s score=%.4f", best.type, best.total)
        return Result(
            final_type=best.type,
            dominant=dom,
            auxiliary=aux,
            tertiary=ter,
            inferior=inf,
            score=best.total,
            rationale=build_rationale(dichotomies, best.type, best.total),
            type_scores={e.type: e.total for e in breakdown},
            breakdown=breakdown,
            dichotomies=dichotomies,
            attitude_strengths=strengths,
        )


def score_assessment(
    fc_answers: Mapping[object, object],
    likert_answers: Mapping[str, object],
    fc_questions: Sequence[ForcedChoiceQuestion],
    likert_questions: Sequence[LikertQuestion],
    **scorer_kwargs: object,
) -> Result:
    """Score one completed submission with a freshly built :class:`HolisticScorer`."""

    scorer = HolisticScorer(**scorer_kwargs)  # type: ignore[arg-type]
    return scorer.score(fc_answers, likert_answers, fc_questions, likert_questions)
