from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from . import serialization
from .analysis import TestCase, analyze_graph, describe, run_test_cases, summarize_results
from .automata import (
    DEFAULT_MAX_DEPTH,
    AutomatonError,
    AutomatonValidationError,
    EvaluationResult,
    MalformedDefinitionError,
    Transition,
)
from .graphviz import write_dot
from .session import Session

logger = logging.getLogger(__name__)

TOKEN_SPLIT_RE = re.compile(r"[\s,]+")
EMPTY_INPUT_LABEL = "<empty>"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build a DFA, evaluate strings step by step and sample its language."
    )
    parser.add_argument("--config", help="Path to a JSON file that defines the automaton.")
    parser.add_argument(
        "--evaluate",
        action="append",
        default=[],
        metavar="STRING",
        help="Evaluate a string and print every step. May be repeated.",
    )
    parser.add_argument(
        "--generate",
        type=int,
        metavar="N",
        help="Print up to N accepted strings, shortest first.",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="Longest string length explored by --generate.",
    )
    parser.add_argument(
        "--save",
        nargs="?",
        const="",
        metavar="PATH",
        help="Write the automaton definition to a JSON file (default: dfa-<date>.json).",
    )
    parser.add_argument(
        "--dot",
        help="Write a Graphviz DOT file; the first evaluated string's path is highlighted.",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print the automaton summary and graph analysis.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT, force=True)


def run(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.verbose)
    session = Session()
    interactive = not args.config
    try:
        if interactive:
            _build_interactively(session)
            test_cases: List[TestCase] = []
        else:
            test_cases = load_config(session, Path(args.config))
        _run_requested(session, args, test_cases)
        if interactive:
            _evaluation_loop(session)
    except KeyboardInterrupt:
        print("\nAborted by user.", file=sys.stderr)
        return 130
    except (AutomatonError, OSError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def load_config(session: Session, path: Path) -> List[TestCase]:
    payload = serialization.read_payload(path)
    automaton = session.load(payload)
    if isinstance(payload, dict):
        return load_test_cases_from_payload(payload.get("test_cases"), automaton.alphabet)
    return []


def _run_requested(session: Session, args: argparse.Namespace, test_cases: Sequence[TestCase]) -> None:
    if args.summary:
        display_summary(session)
    if test_cases:
        _run_tests(session, test_cases)

    first_result: Optional[EvaluationResult] = None
    for raw in args.evaluate:
        result = evaluate_and_print(session, raw)
        if first_result is None:
            first_result = result

    if args.generate is not None:
        strings = session.generate(args.generate, max_depth=args.max_depth)
        print(f"\nAccepted strings (up to {args.generate}):")
        if not strings:
            print("  <none>")
        for index, text in enumerate(strings, start=1):
            print(f"  {index}. {text or EMPTY_INPUT_LABEL}")

    if args.save is not None:
        definition = session.definition()
        if definition is not None:
            target = args.save or serialization.default_filename()
            path = serialization.write_definition(definition, target)
            print(f"\nDefinition written to {path}")

    if args.dot and session.automaton is not None:
        path = write_dot(session.automaton, args.dot, first_result)
        print(f"\nDOT file written to {Path(path).resolve()}")


def evaluate_and_print(session: Session, raw: str) -> Optional[EvaluationResult]:
    if session.automaton is None:
        print("No automaton has been built yet.")
        return None
    result = session.evaluate(split_input(raw, session.automaton.alphabet))
    print(f"\nEvaluating {raw!r}" if raw else f"\nEvaluating {EMPTY_INPUT_LABEL}")
    for step in result.steps:
        print(f"  [{step.step}] {step.message}")
    if result.accepted:
        print(f"  Result: ACCEPTED (final state {result.final_state})")
    elif result.error:
        print(f"  Result: REJECTED ({result.error})")
    else:
        print(f"  Result: REJECTED (final state {result.final_state} is not accepting)")
    return result


def display_summary(session: Session) -> None:
    automaton = session.automaton
    if automaton is None:
        print("No automaton defined.")
        return
    info = describe(automaton)
    print("\nAutomaton Summary")
    print(f"  States: {info['states_text']}")
    print(f"  Alphabet: {info['alphabet_text']}")
    print(f"  Initial state: {info['initial_state']}")
    print(f"  Final states: {info['final_states_text']}")
    print(f"  Transitions: {info['transition_count']}")
    print("  Transition function:")
    for state in automaton.states:
        parts = []
        for symbol in automaton.alphabet:
            target = automaton.transition_from(state, symbol)
            parts.append(f"{symbol}->{target if target is not None else '-'}")
        print(f"    {state}: {', '.join(parts)}")

    report = analyze_graph(automaton)
    print("  Analysis:")
    print(f"    Reachable states: {report['reachable_count']} of {report['state_count']}")
    if report["unreachable"]:
        print(f"    Unreachable: {', '.join(report['unreachable'])}")
    if report["dead_states"]:
        print(f"    Dead states: {', '.join(report['dead_states'])}")
    print(f"    Total transition function: {'yes' if report['is_total'] else 'no'}")
    if report["language_empty"]:
        print("    Language is empty.")


def _run_tests(session: Session, test_cases: Sequence[TestCase]) -> None:
    if session.automaton is None:
        return
    print("\nRunning test cases...")
    results = run_test_cases(session.automaton, test_cases)
    summary = summarize_results(results)
    print(f"  Passed {summary['passed']} of {summary['total']} test cases.")
    for result in results:
        tokens_text = " ".join(result.case.tokens) if result.case.tokens else EMPTY_INPUT_LABEL
        expected_text = "accept" if result.case.expected else "reject"
        actual_text = "accept" if result.actual else "reject"
        status = "PASS" if result.passed else "FAIL"
        label_prefix = f"{result.case.label}: " if result.case.label else ""
        print(
            f"    [{status}] {label_prefix}{tokens_text} -> expected {expected_text}, got {actual_text}"
        )


# ---------------------------------------------------------------
def _build_interactively(session: Session) -> None:
    print("Interactive DFA builder")
    states = _prompt_symbol_list("Enter state names (separate with spaces or commas): ")
    alphabet = _prompt_symbol_list("Enter alphabet symbols (separate with spaces or commas): ")
    initial_state = _prompt_choice("Enter the initial state: ", states)
    final_states = _prompt_subset("Enter final states: ", states)

    print("\nEnter transitions as 'from symbol to', one per line (blank line to finish).")
    while True:
        _collect_transitions(session, states, alphabet)
        try:
            session.build_pending(states, alphabet, initial_state, final_states)
            print("DFA built successfully.")
            return
        except AutomatonValidationError as exc:
            print(f"  {exc}")


def _collect_transitions(session: Session, states: Sequence[str], alphabet: Sequence[str]) -> None:
    state_set = set(states)
    symbol_set = set(alphabet)
    while True:
        raw = _safe_input(f"  transition #{len(session.transitions) + 1}: ").strip()
        if not raw:
            return
        parts = _split_tokens(raw)
        if len(parts) != 3:
            print("    Please provide exactly: from symbol to.")
            continue
        source, symbol, target = parts
        unknown = [name for name in (source, target) if name not in state_set]
        if unknown:
            print(f"    Unknown states: {', '.join(unknown)}.")
            continue
        if symbol not in symbol_set:
            print(f"    Unknown symbol '{symbol}'.")
            continue
        try:
            session.add_transition(Transition(source=source, symbol=symbol, target=target))
        except AutomatonValidationError as exc:
            print(f"    {exc}")


def _evaluation_loop(session: Session) -> None:
    print("\nEnter strings to evaluate (blank line to quit).")
    while True:
        raw = _safe_input("> ")
        if not raw.strip():
            return
        evaluate_and_print(session, raw.strip())


def split_input(raw: str, alphabet: Sequence[str]) -> List[str]:
    """Split user input into symbols without checking them.

    Separators split tokens; otherwise single-character alphabets read the
    text character by character and longer symbols take it as one token.
    """
    if not raw:
        return []
    if TOKEN_SPLIT_RE.search(raw):
        return [token for token in TOKEN_SPLIT_RE.split(raw) if token]
    if all(len(symbol) == 1 for symbol in alphabet):
        return list(raw)
    return [raw]


def _prompt_symbol_list(prompt_text: str) -> List[str]:
    while True:
        tokens = _split_tokens(_safe_input(prompt_text).strip())
        if tokens:
            return list(dict.fromkeys(tokens))
        print("  Please provide at least one value.")


def _split_tokens(text: str) -> List[str]:
    if not text:
        return []
    return [token for token in TOKEN_SPLIT_RE.split(text) if token]


def _prompt_choice(prompt_text: str, options: Sequence[str]) -> str:
    options_set = set(options)
    while True:
        raw = _safe_input(prompt_text).strip()
        if raw in options_set:
            return raw
        print(f"  Value must be one of: {', '.join(options)}.")


def _prompt_subset(prompt_text: str, options: Sequence[str]) -> List[str]:
    options_set = set(options)
    while True:
        values = _split_tokens(_safe_input(prompt_text).strip())
        if not values:
            print("  Please provide at least one value.")
            continue
        invalid = [value for value in values if value not in options_set]
        if invalid:
            print(f"  Unknown states: {', '.join(invalid)}.")
            continue
        return values


def _safe_input(prompt_text: str) -> str:
    try:
        return input(prompt_text)
    except EOFError as exc:
        raise KeyboardInterrupt from exc


# ---------------------------------------------------------------
def load_test_cases_from_payload(data: Any, alphabet: Sequence[str]) -> List[TestCase]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise MalformedDefinitionError("Test cases must be provided as a list.")
    cases: List[TestCase] = []
    for index, entry in enumerate(data, start=1):
        if not isinstance(entry, dict):
            raise MalformedDefinitionError(
                "Each test case must be an object with 'input' and 'expected'."
            )
        tokens = _normalize_test_case_tokens(entry.get("input", ""), alphabet)
        expected = bool(entry.get("expected", False))
        label = entry.get("label") or f"case {index}"
        cases.append(TestCase(tokens=tokens, expected=expected, label=label))
    return cases


def _normalize_test_case_tokens(raw_tokens: Any, alphabet: Sequence[str]) -> Tuple[str, ...]:
    if isinstance(raw_tokens, str):
        return tuple(split_input(raw_tokens.strip(), alphabet))
    if isinstance(raw_tokens, list):
        if not all(isinstance(token, str) for token in raw_tokens):
            raise MalformedDefinitionError("Test case symbols must be strings.")
        return tuple(token.strip() for token in raw_tokens)
    raise MalformedDefinitionError("Test case 'input' must be a string or a list of strings.")
