from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("crosswire")
except PackageNotFoundError:
    __version__ = "unknown"

from crosswire.compiler.ast_nodes import Binding, Component, Node, NodeKind
from crosswire.compiler.codegen.generator import CodeGenerator, compile_component
from crosswire.compiler.exceptions import (
    CompilerConfigError,
    CompilerError,
    FormatterError,
    MalformedNodeError,
)
from crosswire.compiler.options import CompilerOptions, StateStyle
from crosswire.compiler.plugins import Plugin

__all__ = [
    "Binding",
    "Component",
    "Node",
    "NodeKind",
    "CodeGenerator",
    "compile_component",
    "CompilerOptions",
    "StateStyle",
    "Plugin",
    "CompilerError",
    "CompilerConfigError",
    "FormatterError",
    "MalformedNodeError",
]
