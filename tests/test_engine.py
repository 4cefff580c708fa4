from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from type_core import config
from type_core.engine import HolisticScorer, ScoringError, score_assessment
from type_core.question_bank import CANONICAL_TYPE_ORDER, DICHOTOMIES, TYPE_FUNCTION_STACKS
from type_core.types import ChoiceOption, ForcedChoiceQuestion
from tests.conftest import answer_toward, build_synthetic_bank


def test_empty_submission_ties_and_takes_first_canonical_type(synthetic_bank):
    params, fc, likert = synthetic_bank
    result = HolisticScorer(params).score({}, {}, fc, likert)

    for name in DICHOTOMIES:
        res = result.dichotomies[name]
        assert res.theta == 0.0
        assert res.pci == 1
        assert res.pcc == "Slight"
        assert res.n_items == 0
        assert res.preferred_pole == DICHOTOMIES[name].tie_breaker
    assert all(v == 0.0 for v in result.attitude_strengths.values())
    assert list(result.type_scores) == list(CANONICAL_TYPE_ORDER)
    assert all(v == 0.0 for v in result.type_scores.values())

    # all 16 tie at 0: the first label in canonical (lexicographic) order wins
    assert CANONICAL_TYPE_ORDER[0] == "ENFJ"
    assert result.final_type == "ENFJ"
    assert result.stack == TYPE_FUNCTION_STACKS["ENFJ"]
    assert result.score == 0.0
    assert "E/I=0.00 (Slight)" in result.rationale
    assert "ENFJ" in result.rationale


def test_custom_order_changes_tie_winner(synthetic_bank):
    params, fc, likert = synthetic_bank
    order = list(reversed(CANONICAL_TYPE_ORDER))
    result = HolisticScorer(params, type_order=order).score({}, {}, fc, likert)
    assert result.final_type == order[0]


def test_returned_score_is_max_of_table(bundled_bank):
    params, fc, likert = bundled_bank
    fc_answers = {q.number: ("A" if q.number % 3 else "B") for q in fc}
    likert_answers = {q.id: (i % 5) + 1 for i, q in enumerate(likert)}
    scorer = HolisticScorer(params)
    result = scorer.score(fc_answers, likert_answers, fc, likert)

    table = scorer.score_types(result.dichotomies, result.attitude_strengths)
    assert len(table) == 16
    assert result.score == max(entry.total for entry in table)
    assert result.score == max(result.type_scores.values())
    assert result.type_scores[result.final_type] == result.score


def test_extraverted_judging_scenario(bundled_bank):
    params, fc, likert = bundled_bank
    fc_answers = answer_toward(fc, 1)  # E, S and T on every item
    likert_answers = {}
    for q in likert:
        if q.construct1.pole == "Te":
            likert_answers[q.id] = 1
        elif q.construct2.pole == "Te":
            likert_answers[q.id] = 5
        else:
            likert_answers[q.id] = 3

    result = score_assessment(fc_answers, likert_answers, fc, likert, item_params=params)

    for name in DICHOTOMIES:
        assert result.dichotomies[name].theta == config.THETA_MAX
        assert result.dichotomies[name].pcc == "Very Clear"
    strongest = max(result.attitude_strengths, key=result.attitude_strengths.get)
    assert strongest == "Te"
    assert result.final_type == "ESTJ"
    assert result.final_type.startswith("E")
    assert result.dominant == strongest


def test_function_term_decides_judging_vs_perceiving():
    params, fc, likert = build_synthetic_bank()
    fc_answers = answer_toward(fc, 1)
    scorer = HolisticScorer(params)

    se_first = {q.id: 1 for q in likert if q.construct1.pole == "Se"}
    se_first.update({q.id: 5 for q in likert if q.construct2.pole == "Se"})
    assert scorer.score(fc_answers, se_first, fc, likert).final_type == "ESTP"

    te_first = {q.id: 1 for q in likert if q.construct1.pole == "Te"}
    te_first.update({q.id: 5 for q in likert if q.construct2.pole == "Te"})
    assert scorer.score(fc_answers, te_first, fc, likert).final_type == "ESTJ"


def test_introverted_pole_wins_with_negative_answers(synthetic_bank):
    params, fc, likert = synthetic_bank
    result = HolisticScorer(params).score(answer_toward(fc, 0), {}, fc, likert)
    assert all(result.dichotomies[n].theta == config.THETA_MIN for n in DICHOTOMIES)
    assert result.final_type[:3] == "INF"
    assert [result.dichotomies[n].preferred_pole for n in DICHOTOMIES] == ["I", "N", "F"]


def test_identical_input_gives_identical_result(bundled_bank):
    params, fc, likert = bundled_bank
    fc_answers = {q.number: ("B" if q.number % 4 == 0 else "A") for q in fc}
    likert_answers = {q.id: 2 for q in likert[::2]}
    scorer = HolisticScorer(params)
    first = scorer.score(fc_answers, likert_answers, fc, likert)
    second = scorer.score(fc_answers, likert_answers, fc, likert)
    assert first == second
    assert first.rationale == second.rationale
    for name in DICHOTOMIES:
        assert first.dichotomies[name].theta.hex() == second.dichotomies[name].theta.hex()


def test_shared_scorer_is_safe_across_threads(bundled_bank):
    params, fc, likert = bundled_bank
    scorer = HolisticScorer(params)
    fc_answers = answer_toward(fc, 1)
    expected = scorer.score(fc_answers, {}, fc, likert)
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: scorer.score(fc_answers, {}, fc, likert), range(8)))
    assert all(r == expected for r in results)


def test_rationale_is_single_normalized_sentence(synthetic_bank):
    params, fc, likert = synthetic_bank
    result = HolisticScorer(params).score(answer_toward(fc, 1), {"syn01": 1}, fc, likert)
    text = result.rationale
    assert "\n" not in text
    assert "  " not in text
    assert text == text.strip()
    assert f"{result.score:.2f}" in text
    for name, spec in DICHOTOMIES.items():
        res = result.dichotomies[name]
        assert f"{spec.label}={res.theta:.2f} ({res.pcc})" in text


def test_string_question_numbers_match_int_keys(synthetic_bank):
    params, fc, likert = synthetic_bank
    as_int = answer_toward(fc, 1)
    as_str = {str(k): v for k, v in as_int.items()}
    scorer = HolisticScorer(params)
    assert scorer.score(as_int, {}, fc, likert) == scorer.score(as_str, {}, fc, likert)


def test_fractional_question_number_fails_fast(synthetic_bank):
    params, fc, likert = synthetic_bank
    with pytest.raises(ScoringError, match="1.5"):
        HolisticScorer(params).score({1.5: "A"}, {}, fc, likert)
    integral = HolisticScorer(params).score({1.0: "A"}, {}, fc, likert)
    assert integral == HolisticScorer(params).score({1: "A"}, {}, fc, likert)


def test_answers_outside_parameter_table_are_ignored(synthetic_bank):
    params, fc, likert = synthetic_bank
    result = HolisticScorer(params).score({999: "A"}, {}, fc, likert)
    assert all(result.dichotomies[n].n_items == 0 for n in DICHOTOMIES)


def test_unknown_choice_fails_fast(synthetic_bank):
    params, fc, likert = synthetic_bank
    with pytest.raises(ScoringError, match="question 1"):
        HolisticScorer(params).score({1: "C"}, {}, fc, likert)


def test_missing_question_metadata_fails_fast(synthetic_bank):
    params, fc, likert = synthetic_bank
    without_first = [q for q in fc if q.number != 1]
    with pytest.raises(ScoringError, match="question 1"):
        HolisticScorer(params).score({1: "A"}, {}, without_first, likert)


def test_bad_score_key_fails_fast(synthetic_bank):
    params, fc, likert = synthetic_bank
    broken = ForcedChoiceQuestion(
        number=1,
        options={
            "A": ChoiceOption(key="A", text="x", score_key=2),
            "B": ChoiceOption(key="B", text="y", score_key=0),
        },
    )
    with pytest.raises(ScoringError, match="scoreKey"):
        HolisticScorer(params).score({1: "A"}, {}, [broken] + fc[1:], likert)


def test_injected_clarity_weight_is_used(synthetic_bank):
    params, fc, likert = synthetic_bank
    result = HolisticScorer(params, clarity_weight=lambda pci: 1.0).score(answer_toward(fc, 1), {}, fc, likert)
    assert all(result.dichotomies[n].weight == 1.0 for n in DICHOTOMIES)
    assert result.final_type.startswith("EST")
    assert result.score == pytest.approx(3 * config.THETA_MAX)


def test_policy_validation(synthetic_bank):
    params, _fc, _likert = synthetic_bank
    with pytest.raises(ValueError, match="non-increasing"):
        HolisticScorer(params, position_weights=(1, 3, 1, 0.5))
    with pytest.raises(ValueError, match="four"):
        HolisticScorer(params, position_weights=(5, 3, 1))
    with pytest.raises(ValueError, match="type_order"):
        HolisticScorer(params, type_order=CANONICAL_TYPE_ORDER[:-1])


def test_position_weights_from_config(monkeypatch, synthetic_bank):
    params, fc, likert = synthetic_bank
    monkeypatch.setattr(config, "STACK_POSITION_WEIGHTS", (4.0, 3.0, 1.5, 1.0))
    scorer = HolisticScorer(params)
    assert scorer.position_weights == (4.0, 3.0, 1.5, 1.0)
    result = scorer.score({}, {"syn01": 1}, fc, likert)  # Ti += 2
    assert result.type_scores["INTP"] == pytest.approx(8.0)
    assert result.type_scores["ENFJ"] == pytest.approx(2.0)
