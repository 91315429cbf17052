"""Main CLI entry point."""

import logging
import os
import sys
from pathlib import Path
from typing import Any, List, Optional, Tuple

import rich_click as click
from rich.console import Console
from rich.logging import RichHandler

from crosswire import __version__
from crosswire.compiler.build import build_project, load_component
from crosswire.compiler.codegen.generator import compile_component
from crosswire.compiler.exceptions import CompilerError
from crosswire.compiler.options import CompilerOptions, StateStyle
from crosswire.compiler.plugins import Plugin

console = Console(stderr=True)

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_HELPTEXT_FIRST = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running 'crosswire --help' for more information."
click.rich_click.STYLE_HEADER_TEXT = "bold cyan"
click.rich_click.STYLE_OPTION = "cyan"
click.rich_click.STYLE_SWITCH = "cyan"
click.rich_click.STYLE_METAVAR = "dim white"
click.rich_click.STYLE_USAGE_COMMAND = "cyan"

click.rich_click.COMMAND_GROUPS = {
    "crosswire": [
        {
            "name": "Commands",
            "commands": ["compile", "build", "watch"],
        }
    ]
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def import_plugin(plugin_str: str) -> Plugin:
    """Import a plugin from string (e.g. 'my_plugins:strip_comments')."""
    if ":" not in plugin_str:
        raise click.BadParameter("Plugin must be in format 'module:attr'", param_hint="--plugin")

    module_name, attr = plugin_str.split(":", 1)

    # Add current directory to path so we can import local modules
    sys.path.insert(0, os.getcwd())

    try:
        import importlib

        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(
            f"Could not import module '{module_name}': {e}", param_hint="--plugin"
        )

    try:
        plugin = getattr(module, attr)
    except AttributeError:
        raise click.BadParameter(
            f"Attribute '{attr}' not found in module '{module_name}'",
            param_hint="--plugin",
        )

    if not isinstance(plugin, Plugin):
        raise click.BadParameter(f"'{plugin_str}' is not a Plugin", param_hint="--plugin")
    return plugin


def _resolve_options(
    config: Optional[str],
    state_type: Optional[str],
    typescript: Optional[bool],
    no_prettier: bool,
    plugins: Tuple[str, ...],
) -> CompilerOptions:
    try:
        options = CompilerOptions.from_file(config) if config else CompilerOptions()
    except CompilerError as e:
        raise click.BadParameter(str(e), param_hint="--config")

    # Command line flags override the config file
    if state_type:
        options.state_type = StateStyle(state_type)
    if typescript is not None:
        options.typescript = typescript
    if no_prettier:
        options.prettier = False
    loaded: List[Plugin] = [import_plugin(p) for p in plugins]
    options.plugins = [*options.plugins, *loaded]
    return options


def _compiler_options(func: Any) -> Any:
    decorators = [
        click.option("--config", default=None, help="JSON file with compiler options."),
        click.option(
            "--state-type",
            type=click.Choice([s.value for s in StateStyle]),
            default=None,
            help="Render data fields as one reactive object or as separate fields.",
        ),
        click.option(
            "--typescript/--no-typescript",
            default=None,
            help="Emit typed prop declarations and a types section.",
        ),
        click.option("--no-prettier", is_flag=True, help="Skip the prettier formatting pass."),
        click.option(
            "--plugin",
            "plugins",
            multiple=True,
            help="Plugin to run, as 'module:attr'. May be repeated.",
        ),
        click.option("--verbose", "-v", is_flag=True, help="Enable debug logging."),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


@click.group(
    help=f"""
[bold white on cyan] crosswire [/] [bold cyan]v{__version__}[/] Compile canonical components to target frameworks.

Run [bold cyan]crosswire compile COMPONENT[/] to compile one component.
Run [bold cyan]crosswire build SRC[/] to compile a directory.
"""
)
@click.version_option(__version__)
def cli() -> None:
    pass


@cli.command(name="compile")
@click.argument("component", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--out", "-o", default=None, type=click.Path(path_type=Path), help="Output file.")
@_compiler_options
def compile_command(
    component: Path,
    out: Optional[Path],
    config: Optional[str],
    state_type: Optional[str],
    typescript: Optional[bool],
    no_prettier: bool,
    plugins: Tuple[str, ...],
    verbose: bool,
) -> None:
    """Compile a single component JSON file."""
    _configure_logging(verbose)
    options = _resolve_options(config, state_type, typescript, no_prettier, plugins)

    try:
        code = compile_component(load_component(component), options)
    except CompilerError as e:
        console.print(f"[bold red]✗[/] {e}")
        raise SystemExit(1)

    if out is None:
        click.echo(code, nl=False)
        return

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(code, encoding="utf-8")
    console.print(f"✅ Wrote [cyan]{out}[/]")


def _run_build(source: Path, out_dir: Path, options: CompilerOptions) -> int:
    summary = build_project(source, out_dir, options)
    console.print(
        "✅ Build complete "
        f"(components={summary.components}, failed={summary.failed}, out={summary.out_dir})"
    )
    return summary.failed


@cli.command()
@click.argument("source", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--out-dir", default="build", type=click.Path(path_type=Path), help="Output directory.")
@_compiler_options
def build(
    source: Path,
    out_dir: Path,
    config: Optional[str],
    state_type: Optional[str],
    typescript: Optional[bool],
    no_prettier: bool,
    plugins: Tuple[str, ...],
    verbose: bool,
) -> None:
    """Compile every component in a directory."""
    _configure_logging(verbose)
    options = _resolve_options(config, state_type, typescript, no_prettier, plugins)

    console.print(f"🔨 Building [cyan]{source}[/]...")
    if _run_build(source, out_dir, options):
        raise SystemExit(1)


@cli.command()
@click.argument("source", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--out-dir", default="build", type=click.Path(path_type=Path), help="Output directory.")
@_compiler_options
def watch(
    source: Path,
    out_dir: Path,
    config: Optional[str],
    state_type: Optional[str],
    typescript: Optional[bool],
    no_prettier: bool,
    plugins: Tuple[str, ...],
    verbose: bool,
) -> None:
    """Rebuild a directory whenever a component changes."""
    from watchfiles import watch as watch_files

    _configure_logging(verbose)
    options = _resolve_options(config, state_type, typescript, no_prettier, plugins)

    _run_build(source, out_dir, options)
    console.print(f"👀 Watching [cyan]{source}[/] for changes...")

    resolved_out = out_dir.resolve()
    for changes in watch_files(source):
        changed = [Path(path) for _, path in changes]
        if all(resolved_out in p.resolve().parents for p in changed):
            continue
        if not any(p.suffix == ".json" for p in changed):
            continue
        console.print(f"🔄 {len(changed)} file(s) changed, rebuilding")
        _run_build(source, out_dir, options)


if __name__ == "__main__":
    cli()
