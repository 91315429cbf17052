"""Build a directory of canonical component files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from crosswire.compiler.ast_nodes import Component
from crosswire.compiler.codegen.dialect import LWC, Dialect
from crosswire.compiler.codegen.generator import CodeGenerator
from crosswire.compiler.exceptions import CompilerError
from crosswire.compiler.options import CompilerOptions

log = logging.getLogger(__name__)


@dataclass
class BuildSummary:
    components: int
    failed: int
    out_dir: Path
    errors: Dict[str, str] = field(default_factory=dict)


def load_component(path: Path) -> Component:
    """Read a component from the parser's JSON output."""
    try:
        data = json.loads(path.read_text("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CompilerError(f"{path}: invalid component JSON: {e}") from e
    if not isinstance(data, dict):
        raise CompilerError(f"{path}: component JSON must be an object")
    data.setdefault("name", path.stem)

    try:
        return Component.from_dict(data)
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise CompilerError(f"{path}: malformed component: {e!r}") from e


def build_project(
    source_dir: Path,
    out_dir: Path,
    options: Optional[CompilerOptions] = None,
    dialect: Dialect = LWC,
) -> BuildSummary:
    """Compile every ``*.json`` component under ``source_dir`` into ``out_dir``.

    A component that fails to compile is logged and skipped; the others are
    still written.
    """
    source_dir = source_dir.resolve()
    out_dir = out_dir.resolve()
    out_dir.mkdir(parents=True, exist_ok=True)

    codegen = CodeGenerator(dialect)
    entries: Dict[str, str] = {}
    errors: Dict[str, str] = {}

    sources: List[Path] = sorted(source_dir.rglob("*.json"))
    for source in sources:
        if source.parent == out_dir or out_dir in source.parents:
            continue
        relative = source.relative_to(source_dir)
        try:
            code = codegen.generate(load_component(source), options)
        except CompilerError as e:
            log.error(f"Failed to compile {relative}: {e}")
            errors[str(relative)] = str(e)
            continue

        target = out_dir / relative.with_suffix(".html")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(code, encoding="utf-8")
        entries[str(relative)] = str(target.relative_to(out_dir))
        log.info(f"Compiled {relative} -> {target.relative_to(out_dir)}")

    manifest = {
        "version": 1,
        "target": dialect.name,
        "source_dir": str(source_dir),
        "entries": entries,
    }
    (out_dir / "manifest.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")

    return BuildSummary(
        components=len(entries),
        failed=len(errors),
        out_dir=out_dir,
        errors=errors,
    )
