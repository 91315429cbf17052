"""Render a component's state map as data, getter and function groups."""

import re
from enum import Enum
from typing import Callable, Optional

from crosswire.compiler.ast_nodes import Component, StateType, StateValue

ValueMapper = Callable[[str, StateType], str]

_GETTER_HEAD = re.compile(r"^(?:get\s+)([a-zA-Z_$][\w$]*)\s*\(([^)]*)\)\s*")


class StateFormat(str, Enum):
    OBJECT = "object"
    VARIABLES = "variables"


def _identity(code: str, kind: StateType) -> str:
    return code


def _member_string(
    key: str,
    value: StateValue,
    data: bool,
    functions: bool,
    getters: bool,
    format: StateFormat,
    key_prefix: str,
    value_mapper: ValueMapper,
) -> Optional[str]:
    delimiter = ": " if format == StateFormat.OBJECT else " = "

    if value.type == StateType.FUNCTION:
        if not functions:
            return None
        return f"{key_prefix}{key}{delimiter}{value_mapper(value.code, value.type)}"
    if value.type == StateType.METHOD:
        if not functions:
            return None
        return f"{key_prefix}{value_mapper(value.code, value.type)}"
    if value.type == StateType.GETTER:
        if not getters:
            return None
        return f"{key_prefix}{value_mapper(value.code, value.type)}"
    if not data:
        return None
    return f"{key_prefix}{key}{delimiter}{value_mapper(value.code, value.type)}"


def get_state_object_string(
    component: Component,
    data: bool = True,
    functions: bool = True,
    getters: bool = True,
    format: StateFormat = StateFormat.OBJECT,
    key_prefix: str = "",
    value_mapper: ValueMapper = _identity,
) -> str:
    """Render the selected state groups.

    ``object`` yields a single object literal, ``variables`` one declaration
    per line.
    """
    members = [
        _member_string(key, value, data, functions, getters, format, key_prefix, value_mapper)
        for key, value in component.state.items()
    ]
    rendered = [m for m in members if m is not None]

    if format == StateFormat.OBJECT:
        return "{" + ", ".join(rendered) + "}"
    return "\n".join(rendered)


def getter_to_assignment(code: str) -> str:
    """``get full() { ... }`` -> ``full = () => { ... }``."""
    match = _GETTER_HEAD.match(code.strip())
    if not match:
        return code
    name, params = match.group(1), match.group(2)
    return f"{name} = ({params}) => {code.strip()[match.end():]}"
