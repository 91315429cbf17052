"""Compiler configuration."""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Mapping, Union

from crosswire.compiler.exceptions import CompilerConfigError
from crosswire.compiler.plugins import Plugin


class StateStyle(str, Enum):
    PROXIES = "proxies"
    VARIABLES = "variables"


@dataclass
class CompilerOptions:
    state_type: StateStyle = StateStyle.VARIABLES
    typescript: bool = False
    prettier: bool = True
    plugins: List[Plugin] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CompilerOptions":
        """Build options from a config mapping (camelCase or snake_case keys)."""
        known = {"stateType", "state_type", "typescript", "prettier", "plugins"}
        unknown = set(data) - known
        if unknown:
            raise CompilerConfigError(f"Unknown compiler options: {', '.join(sorted(unknown))}")

        raw_state = data.get("stateType", data.get("state_type", StateStyle.VARIABLES.value))
        try:
            state_type = StateStyle(raw_state)
        except ValueError:
            raise CompilerConfigError(
                f"Invalid stateType {raw_state!r}, expected 'proxies' or 'variables'"
            )

        plugins = list(data.get("plugins") or [])
        if not all(isinstance(p, Plugin) for p in plugins):
            raise CompilerConfigError("plugins must be Plugin instances")

        return cls(
            state_type=state_type,
            typescript=bool(data.get("typescript", False)),
            prettier=bool(data.get("prettier", True)),
            plugins=plugins,
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "CompilerOptions":
        path = Path(path)
        try:
            data = json.loads(path.read_text("utf-8"))
        except json.JSONDecodeError as e:
            raise CompilerConfigError(f"Invalid config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise CompilerConfigError(f"Config file {path} must contain a JSON object")
        return cls.from_mapping(data)
