"""Canonical component tree: nodes, bindings, state and hooks."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class Binding:
    """Expression-backed attribute or text value."""

    code: str
    arguments: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Binding":
        arguments = data.get("arguments")
        return cls(
            code=str(data.get("code", "")),
            arguments=list(arguments) if arguments is not None else None,
        )


@dataclass
class ForScope:
    """Loop variable names carried by a For node."""

    for_name: Optional[str] = None
    index_name: Optional[str] = None
    collection_name: Optional[str] = None


@dataclass
class Node:
    name: str
    properties: Dict[str, str] = field(default_factory=dict)
    bindings: Dict[str, Binding] = field(default_factory=dict)
    children: List["Node"] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)
    scope: ForScope = field(default_factory=ForScope)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Node":
        """Build a node from the parser's JSON form."""
        bindings = {}
        for key, value in (data.get("bindings") or {}).items():
            if value is None:
                continue
            if isinstance(value, str):
                bindings[key] = Binding(code=value)
            else:
                bindings[key] = Binding.from_dict(value)

        meta: Dict[str, Any] = {}
        for key, value in (data.get("meta") or {}).items():
            meta[key] = cls.from_dict(value) if _looks_like_node(value) else value

        scope = data.get("scope") or {}
        return cls(
            name=str(data.get("name", "div")),
            properties={k: str(v) for k, v in (data.get("properties") or {}).items()},
            bindings=bindings,
            children=[cls.from_dict(c) for c in data.get("children") or []],
            meta=meta,
            scope=ForScope(
                for_name=scope.get("forName"),
                index_name=scope.get("indexName"),
                collection_name=scope.get("collectionName"),
            ),
        )


def _looks_like_node(value: Any) -> bool:
    return isinstance(value, dict) and "name" in value and (
        "children" in value or "bindings" in value or "properties" in value
    )


class NodeKind(Enum):
    """Closed set of node shapes the template compiler dispatches on."""

    FRAGMENT = "Fragment"
    FOR = "For"
    SHOW = "Show"
    SLOT = "Slot"
    GENERIC = "Generic"

    @classmethod
    def of(cls, node: Node) -> "NodeKind":
        for kind in (cls.FRAGMENT, cls.FOR, cls.SHOW, cls.SLOT):
            if node.name == kind.value:
                return kind
        return cls.GENERIC


class StateType(str, Enum):
    PROPERTY = "property"
    FUNCTION = "function"
    METHOD = "method"
    GETTER = "getter"


@dataclass
class StateValue:
    code: str
    type: StateType = StateType.PROPERTY

    @classmethod
    def from_dict(cls, data: Any) -> "StateValue":
        if not isinstance(data, Mapping):
            # Bare literal values are data fields
            return cls(code=str(data))
        return cls(
            code=str(data.get("code", "")),
            type=StateType(data.get("type", StateType.PROPERTY.value)),
        )


@dataclass
class Hook:
    code: str
    deps: Optional[str] = None


@dataclass
class Hooks:
    on_init: Optional[Hook] = None
    on_mount: Optional[Hook] = None
    on_update: List[Hook] = field(default_factory=list)
    on_unmount: Optional[Hook] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Hooks":
        def single(key: str) -> Optional[Hook]:
            value = data.get(key)
            if not value or not value.get("code"):
                return None
            return Hook(code=value["code"], deps=value.get("deps"))

        on_update = data.get("onUpdate") or []
        if isinstance(on_update, Mapping):
            on_update = [on_update]

        return cls(
            on_init=single("onInit"),
            on_mount=single("onMount"),
            on_update=[Hook(code=h["code"], deps=h.get("deps")) for h in on_update],
            on_unmount=single("onUnMount") or single("onUnmount"),
        )


@dataclass
class ContextGet:
    name: str
    path: str = ""


@dataclass
class ContextSet:
    name: str
    value: Any = None
    ref: Optional[str] = None


@dataclass
class Context:
    get: Dict[str, ContextGet] = field(default_factory=dict)
    set: Dict[str, ContextSet] = field(default_factory=dict)


@dataclass
class Component:
    """Root of the canonical tree.

    ``props`` holds declared props (name -> free-form type info) and
    ``default_props`` the literal defaults; a prop can be declared without a
    default.
    """

    name: str = "MyComponent"
    children: List[Node] = field(default_factory=list)
    state: Dict[str, StateValue] = field(default_factory=dict)
    props: Dict[str, Any] = field(default_factory=dict)
    default_props: Dict[str, Any] = field(default_factory=dict)
    hooks: Hooks = field(default_factory=Hooks)
    context: Context = field(default_factory=Context)
    style: Optional[str] = None
    types: List[str] = field(default_factory=list)
    props_type_ref: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Component":
        context = data.get("context") or {}
        return cls(
            name=str(data.get("name") or "MyComponent"),
            children=[Node.from_dict(c) for c in data.get("children") or []],
            state={
                key: StateValue.from_dict(value)
                for key, value in (data.get("state") or {}).items()
                if value is not None
            },
            props=dict(data.get("props") or {}),
            default_props=dict(data.get("defaultProps") or {}),
            hooks=Hooks.from_dict(data.get("hooks") or {}),
            context=Context(
                get={
                    key: ContextGet(name=v["name"], path=v.get("path", ""))
                    for key, v in (context.get("get") or {}).items()
                },
                set={
                    key: ContextSet(name=v["name"], value=v.get("value"), ref=v.get("ref"))
                    for key, v in (context.get("set") or {}).items()
                },
            ),
            style=data.get("style"),
            types=list(data.get("types") or []),
            props_type_ref=data.get("propsTypeRef"),
        )
