from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from .automata import DFA


@dataclass(frozen=True)
class TestCase:
    tokens: Tuple[str, ...]
    expected: bool
    label: str = ""

    __test__ = False

    @staticmethod
    def from_raw(raw_tokens: Iterable[str] | str, expected: bool, label: str = "") -> "TestCase":
        return TestCase(tokens=tuple(raw_tokens), expected=expected, label=label)


@dataclass(frozen=True)
class TestResult:
    case: TestCase
    actual: bool
    error: str | None = None

    __test__ = False

    @property
    def passed(self) -> bool:
        return self.actual == self.case.expected


def run_test_cases(automaton: DFA, test_cases: Sequence[TestCase]) -> List[TestResult]:
    results: List[TestResult] = []
    for case in test_cases:
        outcome = automaton.evaluate(case.tokens)
        results.append(TestResult(case=case, actual=outcome.accepted, error=outcome.error))
    return results


def summarize_results(results: Sequence[TestResult]) -> dict[str, int]:
    summary = {"total": len(results), "passed": 0, "failed": 0}
    for result in results:
        if result.passed:
            summary["passed"] += 1
        else:
            summary["failed"] += 1
    return summary


def set_notation(items: Iterable[str]) -> str:
    return "{" + ", ".join(items) + "}"


def describe(automaton: DFA) -> Dict[str, Any]:
    """Plain summary of a built automaton, as shown by the info view."""
    return {
        "states": list(automaton.states),
        "alphabet": list(automaton.alphabet),
        "initial_state": automaton.initial_state,
        "final_states": list(automaton.final_states),
        "transition_count": automaton.transition_count,
        "states_text": set_notation(automaton.states),
        "alphabet_text": set_notation(automaton.alphabet),
        "final_states_text": set_notation(automaton.final_states),
    }


def analyze_graph(automaton: DFA) -> Dict[str, object]:
    states = list(automaton.states)
    state_set = set(states)
    table = automaton.table

    reachable = set(automaton.reachable_states())

    missing: List[Tuple[str, str]] = []
    for state in states:
        row = table.get(state, {})
        for symbol in automaton.alphabet:
            if symbol not in row:
                missing.append((state, symbol))

    alive = set(automaton.live_states())

    report: Dict[str, object] = {
        "state_count": len(states),
        "reachable_count": len(reachable & state_set),
        "unreachable": sorted(state_set - reachable),
        "dead_states": sorted(state_set - alive),
        "missing_symbols": missing,
        "transition_count": automaton.transition_count,
        "is_total": not missing,
        "language_empty": not (reachable & set(automaton.final_states)),
    }
    return report
