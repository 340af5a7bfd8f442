from __future__ import annotations

from dfa_workbench.analysis import (
    TestCase,
    analyze_graph,
    describe,
    run_test_cases,
    summarize_results,
)
from dfa_workbench.automata import DFA, Transition

from .conftest import make_definition


def test_describe_lists_fields(ends_in_one) -> None:
    info = describe(DFA.from_definition(ends_in_one))
    assert info["initial_state"] == "q0"
    assert info["final_states_text"] == "{q1}"
    assert info["alphabet_text"] == "{0, 1}"
    assert info["transition_count"] == 4


def test_analyze_total_automaton(ends_in_one) -> None:
    report = analyze_graph(DFA.from_definition(ends_in_one))
    assert report["is_total"] is True
    assert report["unreachable"] == []
    assert report["dead_states"] == []
    assert report["language_empty"] is False


def test_analyze_partial_automaton() -> None:
    dfa = DFA.from_definition(
        make_definition(
            states=("q0", "q1", "q2", "trap"),
            final_states=("q1",),
            transitions=(
                Transition("q0", "1", "q1"),
                Transition("q0", "0", "trap"),
                Transition("q2", "1", "q1"),
            ),
        )
    )
    report = analyze_graph(dfa)
    assert report["reachable_count"] == 3
    assert report["unreachable"] == ["q2"]
    assert report["dead_states"] == ["trap"]
    assert ("q1", "0") in report["missing_symbols"]
    assert report["is_total"] is False


def test_analyze_empty_language(unreachable_final) -> None:
    report = analyze_graph(DFA.from_definition(unreachable_final))
    assert report["language_empty"] is True
    assert report["dead_states"] == ["q0"]


def test_run_test_cases(ends_in_one) -> None:
    dfa = DFA.from_definition(ends_in_one)
    cases = [
        TestCase.from_raw("01", True, "ends in 1"),
        TestCase.from_raw("10", True, "wrong expectation"),
        TestCase.from_raw("1a", False, "bad symbol"),
    ]
    results = run_test_cases(dfa, cases)
    assert [result.passed for result in results] == [True, False, True]
    assert results[2].error == "Symbol 'a' is not part of the alphabet"
    assert summarize_results(results) == {"total": 3, "passed": 2, "failed": 1}
