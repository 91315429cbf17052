from crosswire.compiler.ast_nodes import Component, StateType, StateValue
from crosswire.compiler.plugins import (
    CLASS_METHOD_PLUGIN,
    Plugin,
    run_post_code_plugins,
    run_pre_code_plugins,
    run_pre_json_plugins,
)


def test_code_plugins_run_in_order():
    plugins = [
        Plugin(name="a", code_pre=lambda code: code + "A"),
        Plugin(name="b", code_pre=lambda code: code + "B"),
    ]
    assert run_pre_code_plugins("x", plugins) == "xAB"


def test_plugin_returning_none_keeps_value():
    seen = []
    plugins = [Plugin(code_post=seen.append), Plugin(code_post=str.upper)]
    assert run_post_code_plugins("x", plugins) == "X"
    assert seen == ["x"]


def test_plugins_without_hook_are_skipped():
    assert run_pre_code_plugins("x", [Plugin(name="empty")]) == "x"


def test_json_plugin_can_replace_component():
    replacement = Component(name="Other")
    plugins = [Plugin(json_pre=lambda json: replacement)]
    assert run_pre_json_plugins(Component(), plugins) is replacement


def test_class_method_plugin():
    component = Component(
        state={
            "go": StateValue("function go() { run(); }", StateType.METHOD),
            "load": StateValue("async function load() {}", StateType.METHOD),
            "gen": StateValue("function* items() {}", StateType.METHOD),
            "plain": StateValue("stop() {}", StateType.METHOD),
            "name": StateValue("'function x() {}'"),
        }
    )
    run_pre_json_plugins(component, [CLASS_METHOD_PLUGIN])
    assert component.state["go"].code == "go() { run(); }"
    assert component.state["load"].code == "async load() {}"
    assert component.state["gen"].code == "*items() {}"
    assert component.state["plain"].code == "stop() {}"
    assert component.state["name"].code == "'function x() {}'"
