from __future__ import annotations

import pytest

from dfa_workbench.automata import AutomatonDefinition, Transition
from dfa_workbench.session import Session


def make_definition(**overrides) -> AutomatonDefinition:
    fields = {
        "states": ("q0", "q1"),
        "alphabet": ("0", "1"),
        "initial_state": "q0",
        "final_states": ("q1",),
        "transitions": (
            Transition("q0", "0", "q0"),
            Transition("q0", "1", "q1"),
            Transition("q1", "0", "q0"),
            Transition("q1", "1", "q1"),
        ),
    }
    fields.update(overrides)
    return AutomatonDefinition(**fields)


@pytest.fixture
def ends_in_one() -> AutomatonDefinition:
    """Binary strings ending in 1."""
    return make_definition()


@pytest.fixture
def unreachable_final() -> AutomatonDefinition:
    return make_definition(
        transitions=(
            Transition("q0", "0", "q0"),
            Transition("q0", "1", "q0"),
        )
    )


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def built_session(session: Session, ends_in_one: AutomatonDefinition) -> Session:
    session.build(ends_in_one)
    return session
