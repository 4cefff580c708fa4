"""Pydantic documents for the data files and answer submissions.

These models validate the JSON handed over by the data-loading layer and
convert it into the frozen dataclasses from :mod:`type_core.types` that the
engine works with.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, RootModel, field_validator

from .types import ChoiceOption, Construct, ForcedChoiceQuestion, ItemParams, LikertQuestion

FUNCTION_LABELS: tuple[str, ...] = ("Ti", "Te", "Fi", "Fe", "Si", "Se", "Ni", "Ne")


class OptionDoc(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    score_key: int = Field(alias="scoreKey")
    pole: Optional[str] = None


class ForcedChoiceDoc(BaseModel):
    number: int = Field(ge=1)
    text: Optional[str] = None
    options: Dict[str, OptionDoc]

    @field_validator("options")
    @classmethod
    def _two_options(cls, v: Dict[str, OptionDoc]) -> Dict[str, OptionDoc]:
        if len(v) != 2:
            raise ValueError(f"forced-choice question needs exactly two options, got {sorted(v)}")
        return v

    def to_question(self) -> ForcedChoiceQuestion:
        opts = {
            key: ChoiceOption(key=key, text=o.text, score_key=o.score_key, pole=o.pole)
            for key, o in self.options.items()
        }
        return ForcedChoiceQuestion(number=self.number, options=opts, text=self.text)


class ConstructDoc(BaseModel):
    pole: str
    description: str = ""

    @field_validator("pole")
    @classmethod
    def _known_function(cls, v: str) -> str:
        if v not in FUNCTION_LABELS:
            raise ValueError(f"unknown function pole {v!r}")
        return v


class LikertDoc(BaseModel):
    id: str
    text: str = ""
    construct1: ConstructDoc
    construct2: ConstructDoc

    def to_question(self) -> LikertQuestion:
        return LikertQuestion(
            id=self.id,
            text=self.text,
            construct1=Construct(pole=self.construct1.pole, description=self.construct1.description),
            construct2=Construct(pole=self.construct2.pole, description=self.construct2.description),
        )


class QuestionsDoc(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    forced_choice: List[ForcedChoiceDoc] = Field(
        default_factory=list,
        validation_alias=AliasChoices("forcedChoiceQuestions", "mbtiQuestions", "forced_choice"),
    )
    likert: List[LikertDoc] = Field(
        default_factory=list,
        validation_alias=AliasChoices("likertQuestions", "attitudeQuestions", "likert"),
    )


class ItemParamValues(BaseModel):
    a: float
    b: float


class ItemParamDoc(BaseModel):
    dichotomy: str
    params: ItemParamValues


class ItemParamsDoc(RootModel[Dict[int, ItemParamDoc]]):
    """Item index (0-based, question number minus one) -> parameters."""

    def to_params(self) -> Dict[int, ItemParams]:
        out: Dict[int, ItemParams] = {}
        for idx in sorted(self.root):
            if idx < 0:
                raise ValueError(f"item index must be >= 0, got {idx}")
            doc = self.root[idx]
            out[idx] = ItemParams(index=idx, dichotomy=doc.dichotomy, a=doc.params.a, b=doc.params.b)
        return out


class AnswersDoc(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    forced_choice: Dict[int, Optional[str]] = Field(default_factory=dict, alias="forcedChoice")
    likert: Dict[str, Optional[int]] = Field(default_factory=dict)
