"""Tree passes run on the private copy of a component.

``use_bind_value``, ``getters_to_functions`` and ``strip_meta_properties``
mutate the tree in place; ``get_refs``, ``get_props`` and
``get_for_arguments`` are read-only projections.
"""

import re
from typing import Any, Iterator, List

from crosswire.compiler.ast_nodes import Component, Node, StateType
from crosswire.compiler.preprocessor import call_getters, find_props_refs
from crosswire.compiler.traverse import iter_nodes


def _normalize_str(code: str) -> str:
    code = code.strip().replace("\n", "").replace("\r", "")
    code = re.sub(r"^\{", "", code)
    code = re.sub(r"\}$", "", code)
    code = re.sub(r";$", "", code)
    return re.sub(r"\s+", "", code)


def use_bind_value(component: Component) -> None:
    """Detect two-way ``value``/``onChange`` pairs.

    Replace
        <input value={state.name} onChange={event => state.name = event.target.value}>
    with both bindings pointing at the bare field.
    """
    for node in iter_nodes(component):
        value = node.bindings.get("value")
        on_change = node.bindings.get("onChange")
        if value is None or on_change is None:
            continue

        arguments = on_change.arguments if on_change.arguments is not None else ["event"]
        if not arguments:
            continue
        expected = f"{_normalize_str(value.code)}={arguments[0]}.target.value"
        if _normalize_str(on_change.code) == expected:
            value.code = value.code.replace("state.", "", 1)
            on_change.code = on_change.code.replace("state.", "", 1)


def getters_to_functions(component: Component) -> None:
    """Turn binding reads of getters into calls: ``state.full`` -> ``state.full()``."""
    getter_keys = [
        key for key, value in component.state.items() if value.type == StateType.GETTER
    ]
    if not getter_keys:
        return

    for node in iter_nodes(component):
        for binding in node.bindings.values():
            binding.code = call_getters(binding.code, getter_keys)


def strip_meta_properties(component: Component) -> None:
    for node in iter_nodes(component):
        for key in [k for k in node.properties if k.startswith("$")]:
            del node.properties[key]


def get_refs(component: Component) -> List[str]:
    refs = {}
    for node in iter_nodes(component):
        ref = node.bindings.get("ref")
        if ref is not None and ref.code:
            refs[ref.code] = None
    return list(refs)


def _strings(value: Any) -> Iterator[str]:
    if isinstance(value, str):
        yield value
    elif hasattr(value, "__dataclass_fields__"):
        for name in value.__dataclass_fields__:
            yield from _strings(getattr(value, name))
    elif isinstance(value, dict):
        for item in value.values():
            yield from _strings(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _strings(item)


def get_props(component: Component) -> List[str]:
    """Declared props, then defaulted props, then every ``props.x`` read."""
    props = dict.fromkeys(component.props)
    props.update(dict.fromkeys(component.default_props))
    for text in _strings([component.children, component.state, component.hooks, component.context]):
        for name in find_props_refs(text):
            props[name] = None
    return list(props)


def get_for_arguments(node: Node, exclude_collection_name: bool = False) -> List[str]:
    names = [
        node.scope.for_name or "_",
        node.scope.index_name,
        None if exclude_collection_name else node.scope.collection_name,
    ]
    return [name for name in names if name]
