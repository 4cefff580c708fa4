from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from . import config
from .question_bank import DICHOTOMIES, FUNCTIONS, load_item_parameters, load_questions
from .types import ForcedChoiceQuestion, ItemParams, LikertQuestion

_A_EPS = 1e-9


def _blank_dichotomy() -> dict[str, object]:
    return {"items": 0, "with_question": 0, "a_min": None, "a_max": None}


def audit_item_bank(
    item_params: Mapping[int, ItemParams],
    fc_questions: Iterable[ForcedChoiceQuestion],
    likert_questions: Iterable[LikertQuestion] = (),
) -> dict[str, object]:
    by_number = {q.number: q for q in fc_questions}
    coverage: dict[str, dict[str, object]] = {name: _blank_dichotomy() for name in DICHOTOMIES}
    warnings: list[str] = []

    for idx in sorted(item_params):
        params = item_params[idx]
        if params.dichotomy not in DICHOTOMIES:
            warnings.append(f"item {idx} (question {params.number}) has unscored dichotomy {params.dichotomy!r}")
            continue
        data = coverage[params.dichotomy]
        data["items"] += 1  # type: ignore[operator]
        a_min = data["a_min"]
        a_max = data["a_max"]
        data["a_min"] = params.a if a_min is None else min(a_min, params.a)  # type: ignore[type-var]
        data["a_max"] = params.a if a_max is None else max(a_max, params.a)  # type: ignore[type-var]

        if abs(params.a) < _A_EPS:
            warnings.append(f"item {idx} (question {params.number}) has zero discrimination")

        question = by_number.get(params.number)
        if question is None:
            warnings.append(f"item {idx} has no question {params.number}")
            continue
        data["with_question"] += 1  # type: ignore[operator]
        codes = sorted(opt.score_key for opt in question.options.values())
        if codes != [0, 1]:
            warnings.append(f"question {params.number} options map to codes {codes}, expected [0, 1]")

    indexed = {p.number for p in item_params.values()}
    for number in sorted(by_number):
        if number not in indexed:
            warnings.append(f"question {number} has no item parameters")

    for name, data in coverage.items():
        if int(data["items"]) < config.ITEM_MIN_PER_DICHOTOMY:  # type: ignore[arg-type]
            warnings.append(f"{name} has {data['items']} items (<{config.ITEM_MIN_PER_DICHOTOMY})")

    offered = {fn: 0 for fn in FUNCTIONS}
    for q in likert_questions:
        for construct in (q.construct1, q.construct2):
            if construct.pole in offered:
                offered[construct.pole] += 1
    for fn, count in offered.items():
        if count == 0:
            warnings.append(f"function {fn} is never offered by a Likert question")

    return {"coverage": coverage, "likert_offered": offered, "warnings": warnings}


def write_summary(summary: dict[str, object], path: Path) -> str:
    text = json.dumps(summary, indent=2, sort_keys=True)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")
    return text


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Audit the item-parameter table against the question set.")
    parser.add_argument("--items", help="item parameter JSON (defaults to the bundled table)")
    parser.add_argument("--questions", help="questions JSON (defaults to the bundled set)")
    parser.add_argument("--out", help="write the summary JSON here")
    args = parser.parse_args(list(argv) if argv is not None else None)

    item_params = load_item_parameters(args.items)
    fc_questions, likert_questions = load_questions(args.questions)
    summary = audit_item_bank(item_params, fc_questions, likert_questions)

    for name, data in summary["coverage"].items():  # type: ignore[union-attr]
        print(f"{name}: items={data['items']} with_question={data['with_question']} "
              f"a=[{data['a_min']}, {data['a_max']}]")
    offered = summary["likert_offered"]
    print("Likert coverage: " + ", ".join(f"{fn}={n}" for fn, n in offered.items()))  # type: ignore[union-attr]

    warnings = summary["warnings"]
    if warnings:
        print("\nWarnings:")
        for w in warnings:  # type: ignore[union-attr]
            print(f"  - {w}")
    else:
        print("\nOK: no warnings")

    if args.out:
        write_summary(summary, Path(args.out))
    return 2 if warnings else 0


if __name__ == "__main__":
    raise SystemExit(main())
