from __future__ import annotations
import json, importlib.resources as ir
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from . import config
from .schemas import FUNCTION_LABELS, ItemParamsDoc, QuestionsDoc
from .types import DichotomySpec, ForcedChoiceQuestion, ItemParams, LikertQuestion

FUNCTIONS: Tuple[str, ...] = FUNCTION_LABELS

# J-P is not estimated; it falls out of the stack comparison.
DICHOTOMIES: Mapping[str, DichotomySpec] = MappingProxyType({
    "E-I": DichotomySpec(name="E-I", positive="E", negative="I", tie_breaker="I", position=0),
    "S-N": DichotomySpec(name="S-N", positive="S", negative="N", tie_breaker="N", position=1),
    "T-F": DichotomySpec(name="T-F", positive="T", negative="F", tie_breaker="F", position=2),
})

TYPE_FUNCTION_STACKS: Mapping[str, Tuple[str, str, str, str]] = MappingProxyType({
    "INTP": ("Ti", "Ne", "Si", "Fe"), "ENTP": ("Ne", "Ti", "Fe", "Si"),
    "ISTP": ("Ti", "Se", "Ni", "Fe"), "ESTP": ("Se", "Ti", "Fe", "Ni"),
    "INFJ": ("Ni", "Fe", "Ti", "Se"), "ENFJ": ("Fe", "Ni", "Se", "Ti"),
    "INTJ": ("Ni", "Te", "Fi", "Se"), "ENTJ": ("Te", "Ni", "Se", "Fi"),
    "ISFP": ("Fi", "Se", "Ni", "Te"), "ESFP": ("Se", "Fi", "Te", "Ni"),
    "INFP": ("Fi", "Ne", "Si", "Te"), "ENFP": ("Ne", "Fi", "Te", "Si"),
    "ISTJ": ("Si", "Te", "Fi", "Ne"), "ESTJ": ("Te", "Si", "Ne", "Fi"),
    "ISFJ": ("Si", "Fe", "Ti", "Ne"), "ESFJ": ("Fe", "Si", "Ne", "Ti"),
})

# Iteration order of the holistic scorer; exact ties go to the first label.
CANONICAL_TYPE_ORDER: Tuple[str, ...] = tuple(sorted(TYPE_FUNCTION_STACKS))


def _read_text(override: Optional[str], name: str) -> str:
    if override:
        return Path(override).read_text(encoding="utf-8")
    return ir.files(__package__).joinpath(f"data/{name}").read_text(encoding="utf-8")


def parse_item_parameters(raw: object) -> Mapping[int, ItemParams]:
    return MappingProxyType(ItemParamsDoc.model_validate(raw).to_params())


def parse_questions(raw: object) -> Tuple[List[ForcedChoiceQuestion], List[LikertQuestion]]:
    doc = QuestionsDoc.model_validate(raw)
    return [q.to_question() for q in doc.forced_choice], [q.to_question() for q in doc.likert]


@lru_cache(maxsize=None)
def _load_item_parameters_cached(path: Optional[str]) -> Mapping[int, ItemParams]:
    return parse_item_parameters(json.loads(_read_text(path, "item_parameters.json")))


def load_item_parameters(path: Optional[str] = None) -> Mapping[int, ItemParams]:
    """Read-only item index -> parameters table, parsed once per path."""
    return _load_item_parameters_cached(path or config.ITEM_PARAMETERS_PATH)


def load_questions(path: Optional[str] = None) -> Tuple[List[ForcedChoiceQuestion], List[LikertQuestion]]:
    return parse_questions(json.loads(_read_text(path or config.QUESTIONS_PATH, "questions.json")))


def group_by_dichotomy(item_params: Mapping[int, ItemParams]) -> Mapping[str, Tuple[int, ...]]:
    """Item indices per configured dichotomy, ascending; other dichotomies are dropped."""
    groups: dict[str, list[int]] = {name: [] for name in DICHOTOMIES}
    for idx in sorted(item_params):
        name = item_params[idx].dichotomy
        if name in groups:
            groups[name].append(idx)
    return MappingProxyType({name: tuple(idxs) for name, idxs in groups.items()})
