"""Target syntax tables consumed by the target-agnostic compiler."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, List, Optional

SELF_CLOSING_TAGS: FrozenSet[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)


@dataclass(frozen=True)
class Dialect(ABC):
    """Concrete syntax of one target framework."""

    name: str
    formatter_parser: str
    template_name: str
    children_placeholder: str = "<slot></slot>"
    unnamed_slot: str = "<slot></slot>"
    style_directive: str = "use:styling"
    state_setter: str = "this.{name} = "
    getter_prefix: str = ""
    self_closing_tags: FrozenSet[str] = SELF_CLOSING_TAGS

    def interpolate(self, expr: str) -> str:
        return f"{{{expr}}}"

    def named_slot_ref(self, name: str) -> str:
        return f'<slot name="{name}"></slot>'

    def named_slot(self, name: str, content: str) -> str:
        return f'<slot name="{name}">{content}</slot>'

    def adhoc_slot(self, key: str, content: str) -> str:
        return f'<span slot="{key}">{content}</span>'

    def spread(self, expr: str) -> str:
        return f"{{...{expr}}}"

    def event_handler(self, key: str, arguments: List[str], body: str) -> str:
        return f"{key}={{({', '.join(arguments)}) => {body}}}"

    def dynamic_class(self, expr: str) -> str:
        return f"class={{{expr}}}"

    def dom_ref(self, name: str) -> str:
        return f'ref="{name}"'

    @abstractmethod
    def raw_html(self, expr: str) -> str:
        ...

    @abstractmethod
    def repeat_open(self, each: str, arguments: List[str], key: Optional[str]) -> str:
        ...

    def repeat_close(self) -> str:
        return "</template>"

    @abstractmethod
    def conditional_open(self, condition: str) -> str:
        ...

    def conditional_close(self) -> str:
        return "</template>"


@dataclass(frozen=True)
class LWCDialect(Dialect):
    """Lightning Web Components."""

    name: str = "lwc"
    formatter_parser: str = "lwc"
    template_name: str = "lwc.html.jinja"
    getter_prefix: str = "@track "

    def dom_ref(self, name: str) -> str:
        return f'lwc:ref="{name}"'

    def raw_html(self, expr: str) -> str:
        return (
            f"<lightning-formatted-rich-text value={{{expr}}}>"
            "</lightning-formatted-rich-text>"
        )

    def repeat_open(self, each: str, arguments: List[str], key: Optional[str]) -> str:
        parts = [f"for:each={{{each}}}"]
        if arguments:
            parts.append(f'for:item="{arguments[0]}"')
        if len(arguments) > 1:
            parts.append(f'for:index="{arguments[1]}"')
        if key:
            parts.append(f"key={key}")
        return f"<template {' '.join(parts)}>"

    def conditional_open(self, condition: str) -> str:
        return f"<template if:true={{{condition}}}>"


LWC = LWCDialect()
