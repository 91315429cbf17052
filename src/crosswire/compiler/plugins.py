"""Ordered pre/post hooks around tree mutation and code formatting."""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from crosswire.compiler.ast_nodes import Component, StateType

log = logging.getLogger(__name__)

JsonHook = Callable[[Component], Optional[Component]]
CodeHook = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class Plugin:
    """A set of optional hooks.

    Each hook receives the current value and returns its replacement;
    returning ``None`` keeps the current value (for hooks that mutate the
    component in place).
    """

    name: str = "plugin"
    json_pre: Optional[JsonHook] = None
    json_post: Optional[JsonHook] = None
    code_pre: Optional[CodeHook] = None
    code_post: Optional[CodeHook] = None


def _run(value, plugins: Sequence[Plugin], attr: str):
    for plugin in plugins:
        hook = getattr(plugin, attr)
        if hook is None:
            continue
        log.debug("Running %s hook of plugin %s", attr, plugin.name)
        result = hook(value)
        if result is not None:
            value = result
    return value


def run_pre_json_plugins(json: Component, plugins: Sequence[Plugin]) -> Component:
    return _run(json, plugins, "json_pre")


def run_post_json_plugins(json: Component, plugins: Sequence[Plugin]) -> Component:
    return _run(json, plugins, "json_post")


def run_pre_code_plugins(code: str, plugins: Sequence[Plugin]) -> str:
    return _run(code, plugins, "code_pre")


def run_post_code_plugins(code: str, plugins: Sequence[Plugin]) -> str:
    return _run(code, plugins, "code_post")


_FUNCTION_KEYWORD = re.compile(r"^(\s*)(async\s+)?function\s*(\*?)\s*(?=[A-Za-z_$])")


def _methods_to_class_form(json: Component) -> None:
    for value in json.state.values():
        if value.type == StateType.METHOD:
            value.code = _FUNCTION_KEYWORD.sub(
                lambda m: f"{m.group(1)}{m.group(2) or ''}{m.group(3)}", value.code
            )


# Methods end up in a class body, where the ``function`` keyword is a syntax error
CLASS_METHOD_PLUGIN = Plugin(name="class-methods", json_pre=_methods_to_class_form)
