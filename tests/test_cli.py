import json

import pytest
import rich_click as click
from click.testing import CliRunner

from crosswire.cli.main import cli, import_plugin
from crosswire.compiler.plugins import CLASS_METHOD_PLUGIN

COMPONENT = {
    "name": "Counter",
    "state": {"count": {"code": "0", "type": "property"}},
    "children": [
        {
            "name": "button",
            "bindings": {"onClick": {"code": "state.count = state.count + 1", "arguments": []}},
            "children": [{"name": "div", "bindings": {"_text": {"code": "state.count"}}}],
        }
    ],
}


@pytest.fixture
def component_file(tmp_path):
    path = tmp_path / "Counter.json"
    path.write_text(json.dumps(COMPONENT))
    return path


def test_compile_to_stdout(component_file):
    result = CliRunner().invoke(cli, ["compile", str(component_file), "--no-prettier"])
    assert result.exit_code == 0, result.output
    assert "<button onClick={() => this.count = count + 1}>{count}</button>" in result.output
    assert "export default class Counter extends LightningElement" in result.output


def test_compile_to_file_with_config(component_file, tmp_path):
    config = tmp_path / "crosswire.json"
    config.write_text(json.dumps({"stateType": "proxies", "prettier": False}))
    out = tmp_path / "out" / "counter.html"

    result = CliRunner().invoke(
        cli, ["compile", str(component_file), "--config", str(config), "-o", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert "state = onChange({count: 0}" in out.read_text()


def test_compile_malformed_component(tmp_path):
    path = tmp_path / "Broken.json"
    path.write_text(json.dumps({"children": [{"name": "Show", "children": []}]}))
    result = CliRunner().invoke(cli, ["compile", str(path), "--no-prettier"])
    assert result.exit_code == 1


def test_invalid_config(component_file, tmp_path):
    config = tmp_path / "crosswire.json"
    config.write_text(json.dumps({"stateType": "signals"}))
    result = CliRunner().invoke(cli, ["compile", str(component_file), "--config", str(config)])
    assert result.exit_code == 2


def test_build_command(component_file, tmp_path):
    out_dir = tmp_path / "dist"
    result = CliRunner().invoke(
        cli, ["build", str(tmp_path), "--out-dir", str(out_dir), "--no-prettier"]
    )
    assert result.exit_code == 0, result.output
    assert (out_dir / "Counter.html").exists()
    assert (out_dir / "manifest.json").exists()


def test_import_plugin():
    assert import_plugin("crosswire.compiler.plugins:CLASS_METHOD_PLUGIN") is CLASS_METHOD_PLUGIN


@pytest.mark.parametrize(
    "plugin_ref",
    [
        "no_colon",
        "crosswire_missing_module:thing",
        "crosswire.compiler.plugins:missing",
        "crosswire.compiler.plugins:run_pre_code_plugins",
    ],
)
def test_import_plugin_errors(plugin_ref):
    with pytest.raises(click.BadParameter):
        import_plugin(plugin_ref)
