from __future__ import annotations

from dfa_workbench.automata import DFA, Transition
from dfa_workbench.graphviz import automaton_to_dot, write_dot

from .conftest import make_definition


def _shared_edge_dfa() -> DFA:
    return DFA.from_definition(
        make_definition(
            alphabet=("a", "b"),
            transitions=(
                Transition("q0", "a", "q1"),
                Transition("q0", "b", "q1"),
                Transition("q1", "a", "q1"),
            ),
        )
    )


def test_dot_marks_start_and_final_states(ends_in_one) -> None:
    dot = automaton_to_dot(DFA.from_definition(ends_in_one))
    assert dot.startswith('digraph "DFA" {')
    assert '__start__ -> "q0";' in dot
    assert '"q1" [shape=doublecircle];' in dot
    assert '"q0" [shape=circle];' in dot
    assert '"q0" -> "q0" [label="0"];' in dot
    assert "red" not in dot


def test_dot_groups_symbols_on_shared_edge() -> None:
    dot = automaton_to_dot(_shared_edge_dfa())
    assert '"q0" -> "q1" [label="a, b"];' in dot


def test_dot_highlights_only_symbols_consumed() -> None:
    dfa = _shared_edge_dfa()
    dot = automaton_to_dot(dfa, dfa.evaluate("aa"))
    assert '"q0" -> "q1" [label="b"];' in dot
    assert '"q0" -> "q1" [label="a", color="red", fontcolor="red", penwidth=2];' in dot
    assert '"q1" -> "q1" [label="a", color="red", fontcolor="red", penwidth=2];' in dot
    assert '"q1" [shape=doublecircle, style=bold];' in dot


def test_dot_escapes_quotes_in_labels() -> None:
    dfa = DFA(['say "hi"', "q1"], ['"'], 'say "hi"', ["q1"], [Transition('say "hi"', '"', "q1")])
    dot = automaton_to_dot(dfa)
    assert '"say \\"hi\\"" -> "q1" [label="\\""];' in dot


def test_dot_skips_shadowed_duplicate() -> None:
    dfa = DFA(["q0", "q1"], ["a"], "q0", ["q1"], [Transition("q0", "a", "q0"), Transition("q0", "a", "q1")])
    dot = automaton_to_dot(dfa)
    assert '"q0" -> "q1" [label="a"];' in dot
    assert '"q0" -> "q0"' not in dot


def test_write_dot(tmp_path, ends_in_one) -> None:
    target = tmp_path / "dfa.dot"
    write_dot(DFA.from_definition(ends_in_one), str(target))
    assert target.read_text(encoding="utf-8").rstrip().endswith("}")
