from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple, Union

from . import serialization
from .analysis import describe
from .automata import (
    DEFAULT_GENERATE_LIMIT,
    DEFAULT_MAX_DEPTH,
    DFA,
    AutomatonDefinition,
    AutomatonValidationError,
    EvaluationResult,
    InputSymbols,
    MalformedDefinitionError,
    Transition,
)

logger = logging.getLogger(__name__)

DefinitionLike = Union[AutomatonDefinition, Mapping[str, Any]]


def validate_definition(definition: AutomatonDefinition) -> None:
    """Raise :class:`AutomatonValidationError` for the first broken rule.

    Rules are checked in a fixed order so that the same definition always
    reports the same problem.
    """
    if not definition.states:
        raise AutomatonValidationError("At least one state must be defined.")
    if not definition.alphabet:
        raise AutomatonValidationError("At least one alphabet symbol must be defined.")
    if not definition.initial_state:
        raise AutomatonValidationError("An initial state must be selected.")
    if not definition.final_states:
        raise AutomatonValidationError("At least one final state must be defined.")
    if not definition.transitions:
        raise AutomatonValidationError("At least one transition must be defined.")

    states = set(definition.states)
    alphabet = set(definition.alphabet)
    for state in definition.final_states:
        if state not in states:
            raise AutomatonValidationError(f"Final state '{state}' is not in the set of states.")

    for transition in definition.transitions:
        if transition.source not in states:
            raise AutomatonValidationError(f"Source state '{transition.source}' is not valid.")
        if transition.target not in states:
            raise AutomatonValidationError(f"Target state '{transition.target}' is not valid.")
        if transition.symbol not in alphabet:
            raise AutomatonValidationError(f"Symbol '{transition.symbol}' is not valid.")

    if definition.initial_state not in states:
        raise AutomatonValidationError(
            f"Initial state '{definition.initial_state}' is not in the set of states."
        )

    seen: Set[Tuple[str, str]] = set()
    for transition in definition.transitions:
        if transition.key() in seen:
            raise AutomatonValidationError(_duplicate_message(transition))
        seen.add(transition.key())

    for kind, labels in (("State", definition.states), ("Symbol", definition.alphabet)):
        if len(set(labels)) != len(labels):
            repeated = sorted({label for label in labels if labels.count(label) > 1})
            raise AutomatonValidationError(
                f"{kind} names must be unique; repeated: {', '.join(repeated)}."
            )


def _duplicate_message(transition: Transition) -> str:
    return (
        f"A transition from {transition.source} with symbol "
        f"'{transition.symbol}' already exists."
    )


class Session:
    """Editing session around at most one built :class:`DFA`.

    Holds the pending transition list the caller edits before building.
    Every failed operation leaves both the list and the current automaton
    exactly as they were.
    """

    def __init__(self) -> None:
        self._transitions: List[Transition] = []
        self.automaton: Optional[DFA] = None

    @property
    def has_model(self) -> bool:
        return self.automaton is not None

    @property
    def transitions(self) -> Tuple[Transition, ...]:
        return tuple(self._transitions)

    # ---------------------------------------------------------------
    def add_transition(self, transition: Transition) -> None:
        if not (transition.source and transition.symbol and transition.target):
            raise AutomatonValidationError("All transition fields are required.")
        for existing in self._transitions:
            if existing.key() == transition.key():
                logger.warning("Rejected duplicate transition %s", transition)
                raise AutomatonValidationError(_duplicate_message(transition))
        self._transitions.append(transition)
        logger.debug("Added transition %s", transition)

    def remove_transition(self, index: int) -> None:
        if 0 <= index < len(self._transitions):
            removed = self._transitions.pop(index)
            logger.debug("Removed transition %s", removed)

    def clear_transitions(self) -> None:
        self._transitions.clear()

    def reset(self) -> None:
        self._transitions = []
        self.automaton = None

    # ---------------------------------------------------------------
    def build(self, definition: AutomatonDefinition) -> DFA:
        try:
            validate_definition(definition)
        except AutomatonValidationError as exc:
            logger.warning("Build rejected: %s", exc)
            raise
        automaton = DFA.from_definition(definition)
        self.automaton = automaton
        self._transitions = list(definition.transitions)
        logger.info(
            "Built DFA with %d states, %d symbols and %d transitions",
            len(automaton.states),
            len(automaton.alphabet),
            automaton.transition_count,
        )
        return automaton

    def build_pending(
        self,
        states: List[str],
        alphabet: List[str],
        initial_state: str,
        final_states: List[str],
    ) -> DFA:
        """Build from the given sets plus the pending transition list."""
        return self.build(
            AutomatonDefinition(
                states=tuple(states),
                alphabet=tuple(alphabet),
                initial_state=initial_state,
                final_states=tuple(final_states),
                transitions=tuple(self._transitions),
            )
        )

    def load(self, definition: DefinitionLike) -> DFA:
        if isinstance(definition, AutomatonDefinition):
            # the tuple fields cannot be None once constructed
            if definition.initial_state is None:
                raise MalformedDefinitionError(
                    "Invalid definition: missing required fields initialState."
                )
            parsed = definition
        else:
            try:
                parsed = serialization.definition_from_payload(definition)
            except MalformedDefinitionError as exc:
                logger.warning("Load rejected: %s", exc)
                raise
        return self.build(parsed)

    def load_text(self, text: str) -> DFA:
        return self.load(serialization.decode(text))

    # ---------------------------------------------------------------
    def evaluate(self, input_symbols: InputSymbols) -> Optional[EvaluationResult]:
        if self.automaton is None:
            return None
        return self.automaton.evaluate(input_symbols)

    def generate(
        self,
        limit: int = DEFAULT_GENERATE_LIMIT,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> List[str]:
        if self.automaton is None:
            return []
        return self.automaton.generate_strings(limit, max_depth=max_depth)

    def definition(self) -> Optional[AutomatonDefinition]:
        if self.automaton is None:
            return None
        return self.automaton.to_definition()

    def serialize(self) -> Optional[str]:
        definition = self.definition()
        if definition is None:
            return None
        return serialization.dumps(definition)

    def summary(self) -> Optional[Dict[str, Any]]:
        if self.automaton is None:
            return None
        summary = describe(self.automaton)
        summary["pending_transitions"] = len(self._transitions)
        return summary
