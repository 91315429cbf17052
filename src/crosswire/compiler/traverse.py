"""Depth-first walk over the canonical tree and anything that contains nodes."""

import dataclasses
from typing import Any, Callable, Iterator, Set

from crosswire.compiler.ast_nodes import Node


def is_node(value: Any) -> bool:
    return isinstance(value, Node)


def iter_nodes(value: Any) -> Iterator[Node]:
    """Yield every Node reachable from ``value``, parent before children.

    Containers (dataclasses, dicts, lists, tuples) are searched too, so
    nodes tucked inside ``meta`` or other non-node holders are found. Nodes
    may be mutated in place while iterating; stop iterating to terminate
    early.

    Example:
        for node in iter_nodes(component):
            node.properties.pop("$name", None)
    """
    seen: Set[int] = set()
    stack = [value]
    while stack:
        current = stack.pop()
        if isinstance(current, (str, bytes, int, float, bool)) or current is None:
            continue
        if id(current) in seen:
            continue
        seen.add(id(current))

        if is_node(current):
            yield current

        # Children are pushed reversed so the walk stays in document order
        stack.extend(reversed(list(_contained(current))))


def _contained(value: Any) -> Iterator[Any]:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        for f in dataclasses.fields(value):
            yield getattr(value, f.name)
    elif isinstance(value, dict):
        yield from value.values()
    elif isinstance(value, (list, tuple)):
        yield from value


def has(value: Any, test: Callable[[Node], bool]) -> bool:
    """Test if anything in ``value`` contains a node matching ``test``.

    e.g.
        has_spread = has(component, lambda node: "_spread" in node.bindings)
    """
    return any(test(node) for node in iter_nodes(value))
