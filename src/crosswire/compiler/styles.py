"""Collect per-node ``css`` bindings into a stylesheet."""

import json
import logging
import re
from typing import Any, Dict, List

from crosswire.compiler.ast_nodes import Component, Node
from crosswire.compiler.traverse import iter_nodes

log = logging.getLogger(__name__)


def dash_case(name: str) -> str:
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", name)
    return re.sub(r"[\s_]+", "-", name).lower()


def _declarations(style: Dict[str, Any], indent: str) -> List[str]:
    return [
        f"{indent}{key if key.startswith('--') else dash_case(key)}: {value};"
        for key, value in style.items()
        if not isinstance(value, dict)
    ]


def _rules(selector: str, style: Dict[str, Any], indent: str = "") -> List[str]:
    lines = []
    declarations = _declarations(style, indent + "  ")
    if declarations:
        lines.append(f"{indent}{selector} {{")
        lines.extend(declarations)
        lines.append(f"{indent}}}")

    for key, value in style.items():
        if not isinstance(value, dict):
            continue
        if key.startswith("@"):
            lines.append(f"{indent}{key} {{")
            lines.extend(_rules(selector, value, indent + "  "))
            lines.append(f"{indent}}}")
        elif key.startswith("&"):
            lines.extend(_rules(selector + key[1:], value, indent))
        elif key.startswith(":"):
            lines.extend(_rules(selector + key, value, indent))
        else:
            lines.extend(_rules(f"{selector} {key}", value, indent))
    return lines


def _add_class(node: Node, class_name: str) -> None:
    binding = node.bindings.get("class")
    if binding is not None:
        binding.code = f"'{class_name} ' + ({binding.code})"
        return
    existing = node.properties.get("class")
    node.properties["class"] = f"{existing} {class_name}" if existing else class_name


def collect_css(component: Component) -> str:
    """Move every ``css`` style map into a generated class and return the CSS.

    Nodes gain a class named after the component and tag; consumed ``css``
    bindings are removed from the tree.
    """
    prefix = dash_case(component.name)
    used: Dict[str, int] = {}
    blocks = []

    for node in iter_nodes(component):
        binding = node.bindings.get("css")
        if binding is None or not binding.code.strip():
            continue
        try:
            style = json.loads(binding.code)
        except json.JSONDecodeError:
            log.warning("Could not parse css binding on <%s>: %r", node.name, binding.code)
            continue
        if not isinstance(style, dict) or not style:
            continue

        base = f"{prefix}-{dash_case(node.name)}"
        count = used.get(base, 0)
        used[base] = count + 1
        class_name = base if count == 0 else f"{base}-{count}"

        _add_class(node, class_name)
        del node.bindings["css"]
        blocks.append("\n".join(_rules(f".{class_name}", style)))

    if component.style and component.style.strip():
        blocks.append(component.style.strip())

    return "\n\n".join(block for block in blocks if block)
