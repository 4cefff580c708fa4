from __future__ import annotations

import pytest

from type_core.question_bank import DICHOTOMIES, load_item_parameters, load_questions
from type_core.types import (
    ChoiceOption,
    Construct,
    ForcedChoiceQuestion,
    ItemParams,
    LikertQuestion,
)

_LIKERT_PAIRS: tuple[tuple[str, str], ...] = (
    ("Ti", "Te"),
    ("Fi", "Fe"),
    ("Si", "Se"),
    ("Ni", "Ne"),
    ("Ti", "Fe"),
    ("Te", "Fi"),
    ("Ni", "Se"),
    ("Ne", "Si"),
)


def build_synthetic_bank(
    *,
    per_dichotomy: int = 4,
    a: float = 1.0,
    include_likert: bool = True,
) -> tuple[dict[int, ItemParams], list[ForcedChoiceQuestion], list[LikertQuestion]]:
    """Create a deterministic synthetic bank for tests.

    Items cycle E-I, S-N, T-F.  Option ``A`` is always the positive pole
    (``scoreKey`` 1), option ``B`` the negative pole.
    """

    params: dict[int, ItemParams] = {}
    fc: list[ForcedChoiceQuestion] = []
    names = list(DICHOTOMIES)
    for idx in range(per_dichotomy * len(names)):
        spec = DICHOTOMIES[names[idx % len(names)]]
        b = ((idx % 5) - 2) * 0.2
        params[idx] = ItemParams(index=idx, dichotomy=spec.name, a=a, b=b)
        fc.append(
            ForcedChoiceQuestion(
                number=idx + 1,
                text=f"{spec.name} item #{idx + 1}",
                options={
                    "A": ChoiceOption(key="A", text=spec.positive, score_key=1, pole=spec.positive),
                    "B": ChoiceOption(key="B", text=spec.negative, score_key=0, pole=spec.negative),
                },
            )
        )

    likert: list[LikertQuestion] = []
    if include_likert:
        for n, (left, right) in enumerate(_LIKERT_PAIRS, start=1):
            likert.append(
                LikertQuestion(
                    id=f"syn{n:02d}",
                    text=f"{left} or {right}?",
                    construct1=Construct(pole=left),
                    construct2=Construct(pole=right),
                )
            )
    return params, fc, likert


def answer_toward(fc: list[ForcedChoiceQuestion], code: int) -> dict[int, str]:
    """Pick, for every question, the option whose response code is ``code``."""

    out: dict[int, str] = {}
    for q in fc:
        for key, opt in sorted(q.options.items()):
            if opt.score_key == code:
                out[q.number] = key
                break
    return out


@pytest.fixture
def synthetic_bank():
    return build_synthetic_bank()


@pytest.fixture
def bundled_bank():
    fc, likert = load_questions()
    return load_item_parameters(), fc, likert
