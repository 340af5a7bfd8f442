from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .automata import AutomatonDefinition, MalformedDefinitionError, Transition

REQUIRED_FIELDS = ("states", "alphabet", "initialState", "finalStates", "transitions")
TRANSITION_FIELDS = ("from", "symbol", "to")


def definition_to_payload(definition: AutomatonDefinition) -> Dict[str, Any]:
    return {
        "states": list(definition.states),
        "alphabet": list(definition.alphabet),
        "initialState": definition.initial_state,
        "finalStates": list(definition.final_states),
        "transitions": [
            {"from": t.source, "symbol": t.symbol, "to": t.target}
            for t in definition.transitions
        ],
    }


def missing_fields(payload: Mapping[str, Any]) -> List[str]:
    return [key for key in REQUIRED_FIELDS if payload.get(key) is None]


def definition_from_payload(payload: Any) -> AutomatonDefinition:
    """Turn a decoded JSON object into an unvalidated definition.

    Only the shape is checked here; whether the states and symbols make
    sense together is decided by ``Session.build``.
    """
    if not isinstance(payload, Mapping):
        raise MalformedDefinitionError("Definition payload must be a JSON object.")
    missing = missing_fields(payload)
    if missing:
        raise MalformedDefinitionError(
            f"Invalid definition: missing required fields {', '.join(missing)}."
        )

    return AutomatonDefinition(
        states=_require_string_list(payload, "states"),
        alphabet=_require_string_list(payload, "alphabet"),
        initial_state=_require_string(payload, "initialState"),
        final_states=_require_string_list(payload, "finalStates"),
        transitions=_require_transitions(payload["transitions"]),
    )


def dumps(definition: AutomatonDefinition) -> str:
    return json.dumps(definition_to_payload(definition), indent=2, ensure_ascii=False)


def decode(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedDefinitionError(f"Could not parse definition JSON: {exc}") from exc


def loads(text: str) -> AutomatonDefinition:
    return definition_from_payload(decode(text))


def read_payload(path: Path | str) -> Any:
    path = Path(path)
    if path.suffix.lower() != ".json":
        raise MalformedDefinitionError(f"Expected a .json file, got '{path.name}'.")
    with open(path, "r", encoding="utf-8") as handle:
        return decode(handle.read())


def read_definition(path: Path | str) -> AutomatonDefinition:
    return definition_from_payload(read_payload(path))


def write_definition(definition: AutomatonDefinition, path: Path | str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(dumps(definition) + "\n")
    return path.resolve()


def default_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"dfa-{today.isoformat()}.json"


def _require_string_list(payload: Mapping[str, Any], key: str) -> List[str]:
    value = payload.get(key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise MalformedDefinitionError(f"Field '{key}' must be a list of strings.")
    return [item.strip() for item in value]


def _require_string(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise MalformedDefinitionError(f"Field '{key}' must be a string.")
    return value.strip()


def _require_transitions(value: Any) -> List[Transition]:
    if not isinstance(value, list):
        raise MalformedDefinitionError("Field 'transitions' must be a list of objects.")
    transitions: List[Transition] = []
    for index, entry in enumerate(value):
        if not isinstance(entry, Mapping):
            raise MalformedDefinitionError(f"Transition #{index} must be an object.")
        absent = [key for key in TRANSITION_FIELDS if not isinstance(entry.get(key), str)]
        if absent:
            raise MalformedDefinitionError(
                f"Transition #{index} needs string fields {', '.join(absent)}."
            )
        transitions.append(
            Transition(
                source=entry["from"].strip(),
                symbol=entry["symbol"].strip(),
                target=entry["to"].strip(),
            )
        )
    return transitions
