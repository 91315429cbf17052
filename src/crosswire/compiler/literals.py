"""Render Python values as JavaScript literal source."""

import json
import math
import re
from typing import Any

_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")


def _quote(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f"'{escaped}'"


def to_js_literal(value: Any) -> str:
    """JSON5-style literal: single-quoted strings and bare identifier keys.

    Example:
        {"label": "Hi", "max-size": 3}  ->  {label: 'Hi', 'max-size': 3}
    """
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return json.dumps(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, dict):
        items = []
        for key, item in value.items():
            key = str(key)
            rendered_key = key if _IDENTIFIER.match(key) else _quote(key)
            items.append(f"{rendered_key}: {to_js_literal(item)}")
        return "{" + ", ".join(items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(to_js_literal(item) for item in value) + "]"
    raise TypeError(f"Cannot render {type(value).__name__} as a JavaScript literal")
