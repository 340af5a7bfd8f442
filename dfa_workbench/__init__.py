from .automata import (
    DFA,
    AutomatonDefinition,
    AutomatonError,
    AutomatonValidationError,
    EvaluationResult,
    EvaluationStep,
    MalformedDefinitionError,
    Transition,
)
from .cli import run
from .session import Session

__all__ = [
    "DFA",
    "AutomatonDefinition",
    "AutomatonError",
    "AutomatonValidationError",
    "EvaluationResult",
    "EvaluationStep",
    "MalformedDefinitionError",
    "Session",
    "Transition",
    "run",
]
