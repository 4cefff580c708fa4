from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple
class ScoringError(ValueError):
    """Answer or question data that breaks the scoring contract."""
@dataclass(frozen=True)
class DichotomySpec:
    name: str; positive: str; negative: str; tie_breaker: str
    position: int  # letter index inside a 4-letter type label
    @property
    def label(self) -> str:
        return self.name.replace("-", "/")
@dataclass(frozen=True)
class ItemParams:
    index: int; dichotomy: str; a: float; b: float
    @property
    def number(self) -> int:
        return self.index + 1
@dataclass(frozen=True)
class ChoiceOption:
    key: str; text: str; score_key: int
    pole: Optional[str] = None
@dataclass(frozen=True)
class ForcedChoiceQuestion:
    number: int
    options: Mapping[str, ChoiceOption]
    text: Optional[str] = None
@dataclass(frozen=True)
class Construct:
    pole: str; description: str = ""
@dataclass(frozen=True)
class LikertQuestion:
    id: str; text: str; construct1: Construct; construct2: Construct
@dataclass
class ThetaEstimate:
    theta: float
    se: Optional[float] = None
    n_items: int = 0
    iterations: int = 0
    converged: bool = True
    trace: List[Dict[str, float]] = field(default_factory=list)
@dataclass
class DichotomyResult:
    dichotomy: str
    theta: float
    pci: int
    pcc: str
    weight: float
    preferred_pole: str
    se: Optional[float] = None
    n_items: int = 0
    iterations: int = 0
    converged: bool = True
    trace: List[Dict[str, float]] = field(default_factory=list)
@dataclass
class TypeScore:
    type: str
    stack: Tuple[str, str, str, str]
    dichotomy_term: float
    function_term: float
    total: float
@dataclass
class Result:
    final_type: str
    dominant: str
    auxiliary: str
    tertiary: str
    inferior: str
    score: float
    rationale: str
    type_scores: Dict[str, float] = field(default_factory=dict)
    breakdown: List[TypeScore] = field(default_factory=list)
    dichotomies: Dict[str, DichotomyResult] = field(default_factory=dict)
    attitude_strengths: Dict[str, float] = field(default_factory=dict)
    @property
    def stack(self) -> Tuple[str, str, str, str]:
        return (self.dominant, self.auxiliary, self.tertiary, self.inferior)
