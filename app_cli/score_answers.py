from __future__ import annotations
import argparse, json, logging, sys
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from type_core.diagnostics import to_csv
from type_core.engine import HolisticScorer, ScoringError
from type_core.question_bank import load_item_parameters, load_questions
from type_core.reporting import render_text, to_json_text
from type_core.schemas import AnswersDoc


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Score a completed type assessment from an answers JSON file.")
    p.add_argument("answers", help='JSON: {"forcedChoice": {"1": "A", ...}, "likert": {"att01": 2, ...}}')
    p.add_argument("--questions", help="questions JSON (defaults to the bundled set)")
    p.add_argument("--items", help="item parameter JSON (defaults to the bundled table)")
    p.add_argument("--policy", choices=["log", "step"], help="clarity weight curve")
    p.add_argument("--json", action="store_true", help="print the full result as JSON")
    p.add_argument("--trace", action="store_true", help="include estimator iterations in --json output")
    p.add_argument("--diagnostics-csv", metavar="PATH", help="write the per-type score table as CSV")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )
    try:
        raw = json.loads(Path(args.answers).read_text(encoding="utf-8"))
        answers = AnswersDoc.model_validate(raw)
        fc_questions, likert_questions = load_questions(args.questions)
        scorer = HolisticScorer(load_item_parameters(args.items), clarity_weight=args.policy)
        result = scorer.score(answers.forced_choice, answers.likert, fc_questions, likert_questions)
    except (OSError, json.JSONDecodeError, ValidationError, ScoringError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.diagnostics_csv:
        out = Path(args.diagnostics_csv)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(to_csv(result), encoding="utf-8")

    print(to_json_text(result, include_trace=args.trace) if args.json else render_text(result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
