"""Text-level rewrites over binding and state expressions.

Rewrites work on expression text and skip string literals. Everything that
rewrites code goes through this module. Parse checks use tree-sitter's
JavaScript grammar.

Nested member chains like ``a.state.b`` are left untouched; other unusual
shapes may not be handled.
"""

import logging
import re
import textwrap
from functools import lru_cache
from typing import Callable, Iterable, List, Optional, TYPE_CHECKING

import tree_sitter_javascript
from tree_sitter import Language, Parser

from crosswire.compiler.ast_nodes import Node

if TYPE_CHECKING:
    from crosswire.compiler.codegen.dialect import Dialect

log = logging.getLogger(__name__)

SLOT_PREFIX = "slot"

# Group sections shorter than this are treated as having no real content
MIN_SECTION_LENGTH = 4

# Strings (template, double, single quoted) are matched first and kept as-is
_STRINGS = r"(`(?:\\.|[^\\`])*`|\"(?:\\.|[^\\\"\n])*\"|'(?:\\.|[^\\'\n])*')"

_QUALIFIER_PATTERN = re.compile(_STRINGS + r"|(?<![\w$.])(?:state|props)\.(?=[A-Za-z_$])")
_THIS_PATTERN = re.compile(_STRINGS + r"|(?<![\w$.])this\.([A-Za-z_$][\w$]*)")
_SETTER_PATTERN = re.compile(
    _STRINGS + r"|(?<![\w$.])state\.([A-Za-z_$][\w$]*)\s*=(?![=>])\s*"
)
_ATTRIBUTE_NAME = re.compile(r"^[a-zA-Z_$:][a-zA-Z0-9_$:\-.]*$")

_PROPS_REFERENCE = re.compile(_STRINGS + r"|(?<![\w$.])props\s*\.\s*([a-zA-Z0-9_$]+)")


def _replace_outside_strings(
    pattern: "re.Pattern[str]", code: str, replace: Callable[["re.Match[str]"], str]
) -> str:
    def replacer(match: "re.Match[str]") -> str:
        # Group 1 is always a string literal; leave it unchanged
        if match.group(1):
            return match.group(1)
        return replace(match)

    return pattern.sub(replacer, code)


def strip_state_and_props_refs(code: Optional[str]) -> str:
    """Remove the ``state.``/``props.`` qualifiers from an expression.

    Example:
        state.count + props.step  ->  count + step
    """
    if not code:
        return ""
    return _replace_outside_strings(_QUALIFIER_PATTERN, code, lambda m: "")


def strip_this_refs(code: str) -> str:
    """Removes all ``this.`` references."""
    return _replace_outside_strings(_THIS_PATTERN, code, lambda m: m.group(2))


def update_state_setters(code: str, dialect: "Dialect") -> str:
    """Rewrite ``state.x = value`` assignments into the target's setter form."""
    return _replace_outside_strings(
        _SETTER_PATTERN, code, lambda m: dialect.state_setter.format(name=m.group(2))
    )


def is_slot_property(key: str) -> bool:
    return key.startswith(SLOT_PREFIX)


def strip_slot_prefix(key: str) -> str:
    return key[len(SLOT_PREFIX) :] if is_slot_property(key) else key


def is_children(node: Node) -> bool:
    binding = node.bindings.get("_text")
    if binding is None:
        return False
    return binding.code.strip() in ("props.children", "children")


def is_valid_attribute_name(key: str) -> bool:
    return bool(key) and _ATTRIBUTE_NAME.match(key) is not None


@lru_cache(maxsize=None)
def _js_parser() -> Parser:
    return Parser(Language(tree_sitter_javascript.language()))


def _parses(source: str) -> bool:
    tree = _js_parser().parse(source.encode("utf-8"))
    return not tree.root_node.has_error


def is_parseable_expression(code: str) -> bool:
    """True when ``code`` parses as an expression or as statements.

    Handler bodies may be statement lists, so both forms are accepted.
    """
    return _parses(f"({code}\n);") or _parses(code)


def check_expression(code: str) -> str:
    """Pass ``code`` through, warning when it does not parse."""
    if not is_parseable_expression(code):
        log.warning("Could not parse binding expression, passing it through: %r", code)
    return code


def check_class_body(code: str, class_name: str) -> str:
    """Pass a generated class body through, warning when it does not parse."""
    if code.strip() and not _parses(f"class _ {{\n{code}\n}}"):
        log.warning("Could not parse generated script for %s, passing it through", class_name)
    return code


def call_getters(code: str, getter_names: Iterable[str]) -> str:
    """Turn getter reads into calls: ``state.full`` -> ``state.full()``."""
    names = list(getter_names)
    if not names:
        return code
    pattern = re.compile(
        _STRINGS
        + r"|(?<![\w$.])state\.("
        + "|".join(re.escape(name) for name in names)
        + r")\b(?!\s*\()"
    )
    return _replace_outside_strings(pattern, code, lambda m: f"state.{m.group(2)}()")


def find_props_refs(code: str) -> List[str]:
    """Names read as ``props.x`` outside string literals, in order."""
    return [m.group(2) for m in _PROPS_REFERENCE.finditer(code) if m.group(2)]


def normalize_code(code: str) -> str:
    """Tidy generated script text into a stable canonical shape."""
    code = code.replace("\r\n", "\n")
    code = textwrap.dedent(code)
    lines = [line.rstrip() for line in code.split("\n")]

    out = []
    for line in lines:
        if not line and out and not out[-1]:
            continue
        out.append(line)

    code = "\n".join(out).strip()
    return re.sub(r";{2,}$", ";", code, flags=re.MULTILINE)


def is_empty_section(text: str) -> bool:
    return len(text) < MIN_SECTION_LENGTH
