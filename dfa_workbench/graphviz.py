from __future__ import annotations

from typing import Dict, List, Optional, Set, Tuple

from .automata import DFA, EvaluationResult

Edge = Tuple[str, str, bool]


def _quote(label: str) -> str:
    return '"' + label.replace("\\", "\\\\").replace('"', '\\"') + '"'


def automaton_to_dot(
    automaton: DFA,
    evaluation: Optional[EvaluationResult] = None,
    *,
    graph_name: str = "DFA",
) -> str:
    """Render the automaton as Graphviz DOT.

    Symbols sharing a source and target are drawn as one edge. When an
    evaluation is given, the symbols it actually consumed are split onto
    their own red edge so only the moves taken light up.
    """
    taken: Set[Tuple[str, str]] = set()
    if evaluation is not None:
        taken = {(state, symbol) for state, symbol, _target in evaluation.path()}

    lines: List[str] = [f"digraph {_quote(graph_name)} {{", "  rankdir=LR;", "  __start__ [shape=point];"]
    lines.append(f"  __start__ -> {_quote(automaton.initial_state)};")
    for state in automaton.states:
        shape = "doublecircle" if automaton.is_final(state) else "circle"
        if evaluation is not None and state == evaluation.final_state:
            lines.append(f"  {_quote(state)} [shape={shape}, style=bold];")
        else:
            lines.append(f"  {_quote(state)} [shape={shape}];")

    grouped: Dict[Edge, List[str]] = {}
    for transition in automaton.transitions:
        if automaton.transition_from(transition.source, transition.symbol) != transition.target:
            continue  # shadowed by a later duplicate
        highlighted = (transition.source, transition.symbol) in taken
        grouped.setdefault((transition.source, transition.target, highlighted), []).append(
            transition.symbol
        )

    for (source, target, highlighted), symbols in sorted(grouped.items()):
        attributes = f"label={_quote(', '.join(sorted(set(symbols))))}"
        if highlighted:
            attributes += ', color="red", fontcolor="red", penwidth=2'
        lines.append(f"  {_quote(source)} -> {_quote(target)} [{attributes}];")

    lines.append("}")
    return "\n".join(lines)


def write_dot(
    automaton: DFA,
    path: str,
    evaluation: Optional[EvaluationResult] = None,
) -> str:
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(automaton_to_dot(automaton, evaluation) + "\n")
    return path
