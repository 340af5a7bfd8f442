from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple, Union

DEFAULT_GENERATE_LIMIT = 10
DEFAULT_MAX_DEPTH = 20

InputSymbols = Union[str, Sequence[str]]
TransitionTable = Dict[str, Dict[str, str]]


class AutomatonError(Exception):
    """Base meltdown for automata drama."""


class AutomatonValidationError(AutomatonError):
    """Definition is cursed: unknown states, missing pieces, duplicate moves."""


class MalformedDefinitionError(AutomatonError):
    """Payload is not even shaped like a definition."""


@dataclass(frozen=True)
class Transition:
    source: str
    symbol: str
    target: str

    def key(self) -> Tuple[str, str]:
        return (self.source, self.symbol)

    def __str__(self) -> str:
        return f"d({self.source}, {self.symbol}) = {self.target}"


@dataclass(frozen=True)
class AutomatonDefinition:
    states: Tuple[str, ...]
    alphabet: Tuple[str, ...]
    initial_state: str
    final_states: Tuple[str, ...]
    transitions: Tuple[Transition, ...] = ()

    def __post_init__(self) -> None:
        # frozen, so tuples have to be pushed through object.__setattr__
        object.__setattr__(self, "states", tuple(self.states))
        object.__setattr__(self, "alphabet", tuple(self.alphabet))
        object.__setattr__(self, "final_states", tuple(self.final_states))
        object.__setattr__(self, "transitions", tuple(self.transitions))


@dataclass(frozen=True)
class EvaluationStep:
    step: int
    state: str
    symbol: str
    message: str
    next_state: Optional[str] = None


@dataclass(frozen=True)
class EvaluationResult:
    accepted: bool
    steps: Tuple[EvaluationStep, ...] = field(default_factory=tuple)
    final_state: Optional[str] = None
    error: Optional[str] = None

    def path(self) -> List[Tuple[str, str, str]]:
        """Moves actually taken, as ``(state, symbol, next_state)`` triples."""
        return [
            (step.state, step.symbol, step.next_state)
            for step in self.steps
            if step.symbol and step.next_state is not None
        ]


class DFA:
    """Validated deterministic automaton.

    The constructor trusts its input: :class:`dfa_workbench.session.Session`
    is the validator. It only builds the lookup table, and when two
    transitions share ``(source, symbol)`` the later one wins.
    """

    __slots__ = (
        "_states",
        "_alphabet",
        "_initial_state",
        "_final_states",
        "_transitions",
        "_table",
        "_alphabet_set",
        "_sorted_alphabet",
    )

    def __init__(
        self,
        states: Sequence[str],
        alphabet: Sequence[str],
        initial_state: str,
        final_states: Iterable[str],
        transitions: Iterable[Transition],
    ) -> None:
        self._states = tuple(states)
        self._alphabet = tuple(alphabet)
        self._initial_state = initial_state
        self._final_states = tuple(final_states)
        self._transitions = tuple(transitions)
        self._table = self._build_table(self._transitions)
        self._alphabet_set = frozenset(self._alphabet)
        self._sorted_alphabet = tuple(sorted(self._alphabet_set))

    @classmethod
    def from_definition(cls, definition: AutomatonDefinition) -> "DFA":
        return cls(
            definition.states,
            definition.alphabet,
            definition.initial_state,
            definition.final_states,
            definition.transitions,
        )

    @staticmethod
    def _build_table(transitions: Sequence[Transition]) -> TransitionTable:
        table: TransitionTable = {}
        for transition in transitions:
            table.setdefault(transition.source, {})[transition.symbol] = transition.target
        return table

    # ---------------------------------------------------------------
    @property
    def states(self) -> Tuple[str, ...]:
        return self._states

    @property
    def alphabet(self) -> Tuple[str, ...]:
        return self._alphabet

    @property
    def initial_state(self) -> str:
        return self._initial_state

    @property
    def final_states(self) -> Tuple[str, ...]:
        return self._final_states

    @property
    def transitions(self) -> Tuple[Transition, ...]:
        return self._transitions

    @property
    def table(self) -> TransitionTable:
        return {state: dict(row) for state, row in self._table.items()}

    @property
    def transition_count(self) -> int:
        return sum(len(row) for row in self._table.values())

    def is_final(self, state: str) -> bool:
        return state in self._final_states

    def transition_from(self, state: str, symbol: str) -> Optional[str]:
        return self._table.get(state, {}).get(symbol)

    def to_definition(self) -> AutomatonDefinition:
        return AutomatonDefinition(
            states=self._states,
            alphabet=self._alphabet,
            initial_state=self._initial_state,
            final_states=self._final_states,
            transitions=self._transitions,
        )

    # ---------------------------------------------------------------
    def accepts(self, input_symbols: InputSymbols) -> bool:
        return self.evaluate(input_symbols).accepted

    def evaluate(self, input_symbols: InputSymbols) -> EvaluationResult:
        """Run the input through the automaton, recording every step.

        A string is split into single characters; any other sequence is
        taken as a list of symbol tokens. Unknown symbols and missing
        transitions stop the run and are reported in ``error``.
        """
        tokens = list(input_symbols)
        current = self._initial_state
        steps: List[EvaluationStep] = [
            EvaluationStep(step=0, state=current, symbol="", message=f"Initial state: {current}")
        ]

        for position, symbol in enumerate(tokens, start=1):
            if symbol not in self._alphabet_set:
                return EvaluationResult(
                    accepted=False,
                    steps=tuple(steps),
                    error=f"Symbol '{symbol}' is not part of the alphabet",
                )

            next_state = self.transition_from(current, symbol)
            if next_state is None:
                message = f"No transition from {current} with symbol '{symbol}'"
                steps.append(EvaluationStep(step=position, state=current, symbol=symbol, message=message))
                return EvaluationResult(accepted=False, steps=tuple(steps), error=message)

            steps.append(
                EvaluationStep(
                    step=position,
                    state=current,
                    symbol=symbol,
                    next_state=next_state,
                    message=f"From state ({current}) with symbol '{symbol}' move to state ({next_state})",
                )
            )
            current = next_state

        steps.append(
            EvaluationStep(
                step=len(tokens) + 1,
                state=current,
                symbol="",
                message=f"Finished. Final state is ({current})",
            )
        )
        return EvaluationResult(
            accepted=self.is_final(current),
            steps=tuple(steps),
            final_state=current,
        )

    def generate_strings(
        self,
        limit: int = DEFAULT_GENERATE_LIMIT,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> List[str]:
        """Return up to ``limit`` accepted strings, shortest first.

        Breadth-first over ``(string, state)`` pairs one depth level at a
        time. The frontier is expanded in place instead of restarting from
        the initial state whenever it runs dry; a deterministic automaton
        reaches each string through exactly one state, so no visited set is
        needed. Pairs whose state cannot reach a final state are never
        queued. Strings never exceed ``max_depth`` symbols.
        """
        if limit < 1:
            raise ValueError("limit must be a positive integer.")

        live = self.live_states()
        if self._initial_state not in live:
            return []

        results: List[str] = []
        frontier: Deque[Tuple[str, str]] = deque([("", self._initial_state)])
        depth = 0
        while frontier and depth <= max_depth:
            accepted_here = sorted(text for text, state in frontier if self.is_final(state))
            results.extend(accepted_here[: limit - len(results)])
            if len(results) >= limit or depth == max_depth:
                break

            next_frontier: Deque[Tuple[str, str]] = deque()
            for text, state in frontier:
                row = self._table.get(state, {})
                for symbol in self._sorted_alphabet:
                    target = row.get(symbol)
                    if target is not None and target in live:
                        next_frontier.append((text + symbol, target))
            frontier = next_frontier
            depth += 1

        return sorted(results, key=lambda text: (len(text), text))

    def reachable_states(self) -> FrozenSet[str]:
        seen = {self._initial_state}
        queue: Deque[str] = deque([self._initial_state])
        while queue:
            state = queue.popleft()
            for target in self._table.get(state, {}).values():
                if target not in seen:
                    seen.add(target)
                    queue.append(target)
        return frozenset(seen)

    def live_states(self) -> FrozenSet[str]:
        """States from which some final state can still be reached."""
        reverse: Dict[str, Set[str]] = {}
        for source, row in self._table.items():
            for target in row.values():
                reverse.setdefault(target, set()).add(source)

        alive: Set[str] = set(self._final_states)
        queue: Deque[str] = deque(alive)
        while queue:
            state = queue.popleft()
            for source in reverse.get(state, ()):
                if source not in alive:
                    alive.add(source)
                    queue.append(source)
        return frozenset(alive)

    def __repr__(self) -> str:
        return (
            f"DFA(states={list(self._states)!r}, alphabet={list(self._alphabet)!r}, "
            f"initial_state={self._initial_state!r}, final_states={list(self._final_states)!r}, "
            f"transitions={self.transition_count})"
        )
