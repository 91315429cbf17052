"""Template markup code generation."""

import dataclasses
import logging
import re
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional

from crosswire.compiler.ast_nodes import Binding, Component, Node, NodeKind
from crosswire.compiler.codegen.dialect import LWC, Dialect
from crosswire.compiler.exceptions import MalformedNodeError
from crosswire.compiler.options import CompilerOptions
from crosswire.compiler.passes import get_for_arguments
from crosswire.compiler.preprocessor import (
    check_expression,
    is_children,
    is_slot_property,
    is_valid_attribute_name,
    strip_slot_prefix,
    strip_state_and_props_refs,
    update_state_setters,
)

log = logging.getLogger(__name__)

BlockCompiler = Callable[["TemplateCodegen", Node, CompilerOptions, Component], str]
BindingMapper = Callable[[Dialect, str, str], Optional[str]]

_REF_PROP = re.compile(r"(.+)?props\.(.+)( |\)|;|\()?$", re.MULTILINE)


def _strip(code: Optional[str]) -> str:
    return strip_state_and_props_refs(code)


def _map_ref(dialect: Dialect, raw: str, value: str) -> Optional[str]:
    match = _REF_PROP.search(raw)
    if match and match.group(2):
        return dialect.dom_ref(match.group(2))
    return dialect.dom_ref(value)


def _map_inner_html(dialect: Dialect, raw: str, value: str) -> Optional[str]:
    # Rendered as the element's content, never as an attribute
    return None


BINDING_MAPPERS: Mapping[str, BindingMapper] = MappingProxyType(
    {
        "ref": _map_ref,
        "innerHTML": _map_inner_html,
    }
)


def _compile_fragment(
    codegen: "TemplateCodegen", node: Node, options: CompilerOptions, component: Component
) -> str:
    inner_html = node.bindings.get("innerHTML")
    if inner_html is not None and inner_html.code:
        return codegen.dialect.raw_html(_strip(inner_html.code))
    if node.children:
        return codegen.compile_children(node.children, options, component, "\n")
    return ""


def _compile_for(
    codegen: "TemplateCodegen", node: Node, options: CompilerOptions, component: Component
) -> str:
    dialect = codegen.dialect
    each = node.bindings.get("each")
    if each is None or not each.code.strip():
        raise MalformedNodeError(node.name, "requires an 'each' binding")
    if not node.children:
        raise MalformedNodeError(node.name, "has no loop template child")

    template = node.children[0]
    if "key" in template.properties and "key" in template.bindings:
        raise MalformedNodeError(
            template.name, "has both a static property and a binding for key"
        )

    key: Optional[str] = None
    key_binding = template.bindings.get("key")
    if template.properties.get("key"):
        key = f'"{template.properties["key"]}"'
    elif key_binding is not None and key_binding.code:
        key = dialect.interpolate(_strip(key_binding.code))

    if key is not None:
        # The key belongs to the loop directive, not to the repeated element
        template = dataclasses.replace(
            template,
            properties={k: v for k, v in template.properties.items() if k != "key"},
            bindings={k: v for k, v in template.bindings.items() if k != "key"},
        )

    arguments = get_for_arguments(node, exclude_collection_name=True)
    body = codegen.compile_children([template, *node.children[1:]], options, component, "\n")
    return "\n".join(
        [dialect.repeat_open(_strip(each.code), arguments, key), body, dialect.repeat_close()]
    )


def _compile_show(
    codegen: "TemplateCodegen", node: Node, options: CompilerOptions, component: Component
) -> str:
    dialect = codegen.dialect
    when = node.bindings.get("when")
    if when is None or not when.code.strip():
        raise MalformedNodeError(node.name, "requires a 'when' binding")

    parts = [
        dialect.conditional_open(_strip(when.code)),
        codegen.compile_children(node.children, options, component, "\n"),
        dialect.conditional_close(),
    ]

    # Targets without an else construct get a second, always-true branch
    else_node = node.meta.get("else")
    if isinstance(else_node, Node):
        parts.extend(
            [
                dialect.conditional_open("true"),
                codegen.compile_node(else_node, options, component),
                dialect.conditional_close(),
            ]
        )
    return "\n".join(parts)


def _compile_slot(
    codegen: "TemplateCodegen", node: Node, options: CompilerOptions, component: Component
) -> str:
    dialect = codegen.dialect
    name = node.bindings.get("name")
    if name is None:
        key = next(iter(node.bindings), None)
        if key is None:
            return dialect.unnamed_slot
        return dialect.adhoc_slot(key, _strip(node.bindings[key].code))

    slot_name = strip_slot_prefix(_strip(name.code)).lower()
    return dialect.named_slot(
        slot_name, codegen.compile_children(node.children, options, component, "\n")
    )


CONTROL_COMPILERS: Mapping[NodeKind, BlockCompiler] = MappingProxyType(
    {
        NodeKind.FRAGMENT: _compile_fragment,
        NodeKind.FOR: _compile_for,
        NodeKind.SHOW: _compile_show,
        NodeKind.SLOT: _compile_slot,
    }
)


class TemplateCodegen:
    """Generates target markup from the canonical node tree.

    Compilation never mutates the nodes it is given.
    """

    def __init__(self, dialect: Dialect = LWC) -> None:
        self.dialect = dialect

    def compile_children(
        self,
        nodes: List[Node],
        options: CompilerOptions,
        component: Component,
        separator: str = "",
    ) -> str:
        return separator.join(self.compile_node(n, options, component) for n in nodes)

    def compile_node(self, node: Node, options: CompilerOptions, component: Component) -> str:
        kind = NodeKind.of(node)
        if kind is not NodeKind.GENERIC:
            return CONTROL_COMPILERS[kind](self, node, options, component)

        if is_children(node):
            return self.dialect.children_placeholder

        text = node.properties.get("_text")
        if text:
            return text

        text_binding = node.bindings.get("_text")
        if text_binding is not None and text_binding.code:
            stripped = _strip(text_binding.code)
            if is_slot_property(stripped):
                return self.dialect.named_slot_ref(strip_slot_prefix(stripped).lower())
            return self.dialect.interpolate(stripped)

        return self._compile_element(node, options, component)

    def _compile_element(self, node: Node, options: CompilerOptions, component: Component) -> str:
        dialect = self.dialect
        tag = node.name

        conflicts = sorted(set(node.properties) & set(node.bindings))
        if conflicts:
            raise MalformedNodeError(
                tag, f"has both a static property and a binding for {', '.join(conflicts)}"
            )

        attrs: List[str] = []
        handled = {"_spread", "_text"}

        spread = node.bindings.get("_spread")
        if spread is not None and spread.code:
            attrs.append(dialect.spread(_strip(spread.code)))

        is_component = tag[:1].isupper()
        style = node.bindings.get("style")
        if style is not None and style.code and not is_component:
            attrs.append(f"{dialect.style_directive}={{{_strip(style.code)}}}")
            handled.add("style")

        for key, value in node.properties.items():
            attrs.append(f'{key}="{value}"')

        for key, binding in node.bindings.items():
            if key in handled:
                continue
            if key == "css" and binding.code.strip() == "{}":
                continue
            attr = self._compile_binding(node, key, binding)
            if attr:
                attrs.append(attr)

        open_tag = f"<{tag} {' '.join(attrs)}" if attrs else f"<{tag}"

        # innerHTML wins over both children and self-closing
        inner_html = node.bindings.get("innerHTML")
        if inner_html is not None and inner_html.code:
            return f"{open_tag}>{dialect.raw_html(_strip(inner_html.code))}</{tag}>"

        if tag in dialect.self_closing_tags:
            return f"{open_tag} />"

        children = self.compile_children(node.children, options, component)
        return f"{open_tag}>{children}</{tag}>"

    def _compile_binding(self, node: Node, key: str, binding: Binding) -> Optional[str]:
        dialect = self.dialect
        raw = check_expression(binding.code)
        value = _strip(raw)

        if key.startswith("on"):
            arguments = binding.arguments if binding.arguments is not None else ["event"]
            body = _strip(update_state_setters(raw, dialect))
            return dialect.event_handler(key, arguments, body)
        if key.startswith("slot"):
            # <Component slotProjected={<AnotherComponent />} />
            return f"{key}={dialect.interpolate(value)}"
        if key == "class":
            return dialect.dynamic_class(value)

        mapper = BINDING_MAPPERS.get(key)
        if mapper is not None:
            return mapper(dialect, raw, value)

        if is_valid_attribute_name(key):
            return f"{key}={dialect.interpolate(value)}"

        log.debug("Dropping binding %r on <%s>: not a valid attribute name", key, node.name)
        return None
