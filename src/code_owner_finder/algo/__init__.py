"""Knowledge model: line weights, oblivion, knowledge states and finders."""

from .adder import LineKnowledgeAdder
from .calculator import KnowledgeStateCalculator
from .finders import (
    CodeOwnerFinder,
    CodeOwnerResult,
    DeveloperIndependentCodeOwnerFinder,
    KnowledgeStateCodeOwnerFinder,
    SummarizedCodeOwnerFinder,
)
from .oblivion import ConstantOblivionFunction, ExponentialOblivionFunction, OblivionFunction
from .state import KnowledgeState, LineWithKnowledge
from .weights import LengthLineWeightCalculator, LineWeightCalculator, WordLineWeightCalculator

__all__ = [
    "CodeOwnerFinder",
    "CodeOwnerResult",
    "ConstantOblivionFunction",
    "DeveloperIndependentCodeOwnerFinder",
    "ExponentialOblivionFunction",
    "KnowledgeState",
    "KnowledgeStateCalculator",
    "KnowledgeStateCodeOwnerFinder",
    "LengthLineWeightCalculator",
    "LineKnowledgeAdder",
    "LineWeightCalculator",
    "LineWithKnowledge",
    "OblivionFunction",
    "SummarizedCodeOwnerFinder",
    "WordLineWeightCalculator",
]
