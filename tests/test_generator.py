import copy
import unittest
from unittest.mock import patch

from crosswire.compiler.ast_nodes import (
    Binding,
    Component,
    Context,
    ContextGet,
    ContextSet,
    ForScope,
    Hook,
    Hooks,
    Node,
    StateType,
    StateValue,
)
from crosswire.compiler.codegen.generator import CodeGenerator, compile_component
from crosswire.compiler.exceptions import FormatterError, MalformedNodeError
from crosswire.compiler.options import CompilerOptions, StateStyle
from crosswire.compiler.plugins import Plugin
from crosswire.compiler.preprocessor import is_empty_section


def text(value: str) -> Node:
    return Node("div", properties={"_text": value})


class TestCodeGenerator(unittest.TestCase):
    def setUp(self) -> None:
        self.generator = CodeGenerator()
        self.options = CompilerOptions(prettier=False)

    def compile(self, component: Component, **kwargs) -> str:
        options = CompilerOptions(prettier=False, **kwargs)
        return compile_component(component, options)

    def test_hello_with_prop(self) -> None:
        component = Component(props={"name": {}}, children=[text("Hello")])

        sections = self.generator.generate_sections(component, self.options)
        self.assertEqual(sections.markup, "Hello")
        self.assertEqual(sections.script, "@api name;")

        output = self.compile(component)
        self.assertEqual(
            output,
            "<template>\n"
            "Hello\n"
            "</template>\n"
            "\n"
            "<script>\n"
            "import { LightningElement, api } from 'lwc';\n"
            "\n"
            "export default class MyComponent extends LightningElement {\n"
            "  @api name;\n"
            "}\n"
            "</script>\n",
        )

    def test_static_tree_has_empty_script(self) -> None:
        component = Component(children=[Node("div", children=[Node("span", children=[text("x")])])])
        sections = self.generator.generate_sections(component, self.options)
        self.assertTrue(is_empty_section(sections.script))
        self.assertEqual(sections.lwc_imports, ["LightningElement"])
        self.assertEqual(sections.markup, "<div><span>x</span></div>")

    def test_for_key_emitted_once(self) -> None:
        loop = Node(
            "For",
            bindings={"each": Binding("state.items")},
            scope=ForScope(for_name="item"),
            children=[
                Node(
                    "li",
                    bindings={"key": Binding("item.id")},
                    children=[Node("span", bindings={"_text": Binding("item.label")})],
                )
            ],
        )
        component = Component(state={"items": StateValue("[]")}, children=[Node("ul", children=[loop])])
        output = self.compile(component)
        self.assertEqual(output.count("item.id"), 1)
        self.assertIn("key={item.id}>", output)
        self.assertIn("items = []", output)

    def test_show_with_else_emits_two_conditionals(self) -> None:
        show = Node(
            "Show",
            bindings={"when": Binding("state.loggedIn")},
            children=[text("Welcome")],
            meta={"else": text("Please log in")},
        )
        output = self.compile(Component(children=[show]))
        self.assertEqual(output.count("<template if:true="), 2)
        self.assertIn("<template if:true={loggedIn}>", output)
        self.assertIn("<template if:true={true}>\nPlease log in\n</template>", output)

    def test_compilation_is_deterministic_and_pure(self) -> None:
        component = Component(
            props={"label": {}},
            state={
                "count": StateValue("0"),
                "go": StateValue("function go() { this.count = 1; }", StateType.METHOD),
            },
            children=[
                Node(
                    "input",
                    bindings={
                        "value": Binding("state.count"),
                        "onChange": Binding("state.count = event.target.value", ["event"]),
                        "css": Binding('{"color": "red"}'),
                    },
                )
            ],
        )
        before = copy.deepcopy(component)
        first = self.compile(component)
        second = self.compile(component)
        self.assertEqual(first, second)
        self.assertEqual(component, before)

    def test_inner_html_drops_children(self) -> None:
        node = Node(
            "div",
            bindings={"innerHTML": Binding("props.content")},
            children=[text("fallback")],
        )
        output = self.compile(Component(children=[node]))
        self.assertIn("<lightning-formatted-rich-text value={content}>", output)
        self.assertNotIn("fallback", output)
        self.assertIn("@api content;", output)

    def test_click_handler(self) -> None:
        button = Node(
            "button",
            bindings={"onClick": Binding("state.count = event.target.value", ["event"])},
            children=[text("Go")],
        )
        output = self.compile(Component(state={"count": StateValue("0")}, children=[button]))
        self.assertIn("onClick={(event) => this.count = event.target.value}", output)
        self.assertIn("  count = 0\n", output)

    def test_proxy_state(self) -> None:
        component = Component(state={"count": StateValue("0"), "name": StateValue("'a'")})
        output = self.compile(component, state_type=StateStyle.PROXIES)
        self.assertIn("import onChange from 'on-change';", output)
        self.assertIn(
            "state = onChange({count: 0, name: 'a'}, () => (this.state = this.state));", output
        )

    def test_getters_become_tracked_fields(self) -> None:
        component = Component(
            state={
                "count": StateValue("1"),
                "double": StateValue("get double() { return state.count * 2; }", StateType.GETTER),
            },
            children=[Node("p", bindings={"_text": Binding("state.double")})],
        )
        sections = self.generator.generate_sections(component, self.options)
        self.assertEqual(sections.markup, "{double()}")
        self.assertIn("@track double = () => { return count * 2; }", sections.script)
        self.assertEqual(sections.lwc_imports, ["LightningElement", "track"])

    def test_methods_lose_function_keyword(self) -> None:
        component = Component(
            state={"go": StateValue("function go() { this.count = 1; }", StateType.METHOD)}
        )
        sections = self.generator.generate_sections(component, self.options)
        self.assertEqual(sections.script, "go() { count = 1; }")
        # The caller's tree keeps its own text
        self.assertEqual(component.state["go"].code, "function go() { this.count = 1; }")

    def test_default_props(self) -> None:
        component = Component(
            props={"size": {}},
            default_props={"size": 3, "tags": ["a"]},
        )
        script = self.generator.generate_sections(component, self.options).script
        self.assertEqual(script, "@api size = 3;\n@api tags = ['a'];")

    def test_slot_props_are_not_declared(self) -> None:
        component = Component(
            props={"slotHeader": {}, "children": {}, "title": {}},
            children=[Node("div", bindings={"_text": Binding("props.slotHeader")})],
        )
        script = self.generator.generate_sections(component, self.options).script
        self.assertEqual(script, "@api title;")

    def test_refs_are_declared(self) -> None:
        component = Component(children=[Node("input", bindings={"ref": Binding("inputRef")})])
        sections = self.generator.generate_sections(component, self.options)
        self.assertEqual(sections.markup, '<input lwc:ref="inputRef" />')
        self.assertEqual(sections.script, "inputRef;")

    def test_lifecycle_hooks(self) -> None:
        component = Component(
            state={"ready": StateValue("false"), "count": StateValue("0")},
            hooks=Hooks(
                on_init=Hook("console.log('init')"),
                on_mount=Hook("state.ready = true"),
                on_update=[Hook("track(state.count)", deps="[state.count]"), Hook("log()")],
                on_unmount=Hook("cleanup()"),
            ),
        )
        script = self.generator.generate_sections(component, self.options).script
        self.assertIn("constructor() {\n  super();\n  console.log('init')\n}", script)
        self.assertIn("connectedCallback() {\n  ready = true\n}", script)
        self.assertIn("const deps0 = JSON.stringify([count]);", script)
        self.assertIn("if (this._onUpdateDeps0 !== deps0) {", script)
        self.assertIn("this._onUpdateDeps0 = deps0;", script)
        self.assertIn("  log()", script)
        self.assertIn("disconnectedCallback() {\n  cleanup()\n}", script)
        self.assertLess(script.index("connectedCallback"), script.index("renderedCallback"))

    def test_context(self) -> None:
        component = Component(
            context=Context(
                get={"theme": ContextGet("ThemeContext")},
                set={"ThemeContext": ContextSet("ThemeContext", value="state.theme")},
            ),
        )
        script = self.generator.generate_sections(component, self.options).script
        self.assertIn("theme = getContext(ThemeContext);", script)
        self.assertIn("connectedCallback() {\n  setContext(ThemeContext, theme);\n}", script)

    def test_typescript(self) -> None:
        component = Component(
            props={"name": {}},
            default_props={"name": "Bob"},
            props_type_ref="Props | undefined",
            types=["type Props = { name: string }"],
        )
        output = self.compile(component, typescript=True)
        self.assertIn('<script lang="ts">\ntype Props = { name: string }\n</script>', output)
        self.assertIn("@api name: Props['name'] = 'Bob';", output)
        self.assertEqual(output.count('<script lang="ts">'), 2)

    def test_styles_section(self) -> None:
        node = Node("div", bindings={"css": Binding('{"color": "red"}')})
        output = self.compile(Component(children=[node]))
        self.assertIn('<div class="my-component-div"></div>', output)
        self.assertTrue(
            output.endswith("<style>\n.my-component-div {\n  color: red;\n}\n</style>\n")
        )

    def test_malformed_node_raises(self) -> None:
        with self.assertRaises(MalformedNodeError):
            self.compile(Component(children=[Node("For", children=[text("x")])]))


class TestGeneratePipeline(unittest.TestCase):
    def test_formatter_failure_falls_back(self) -> None:
        component = Component(children=[text("Hello")])
        expected = compile_component(component, CompilerOptions(prettier=False))

        with patch(
            "crosswire.compiler.codegen.generator.format_code",
            side_effect=FormatterError("prettier not found on PATH"),
        ):
            with self.assertLogs("crosswire.compiler.codegen.generator", level="WARNING") as logs:
                output = compile_component(component, CompilerOptions(prettier=True))

        self.assertEqual(output, expected)
        self.assertIn("Could not prettify", logs.output[0])

    def test_plugin_order_around_formatting(self) -> None:
        seen = []
        plugin = Plugin(
            name="recorder",
            code_pre=lambda code: seen.append(("pre", code)),
            code_post=lambda code: code + "<!-- done -->",
        )
        with patch(
            "crosswire.compiler.codegen.generator.format_code", return_value="FORMATTED"
        ) as fmt:
            output = compile_component(
                Component(children=[text("Hi")]), CompilerOptions(plugins=[plugin])
            )

        self.assertEqual(output, "FORMATTED<!-- done -->")
        self.assertEqual(seen[0][0], "pre")
        self.assertIn("<template>\nHi\n</template>", seen[0][1])
        self.assertEqual(fmt.call_args.kwargs["parser"], "lwc")

    def test_json_plugins_see_private_copy(self) -> None:
        def rename(json: Component) -> None:
            json.name = "Renamed"

        component = Component(children=[text("Hi")])
        output = compile_component(
            component, CompilerOptions(prettier=False, plugins=[Plugin(json_post=rename)])
        )
        self.assertIn("export default class Renamed extends LightningElement", output)
        self.assertEqual(component.name, "MyComponent")
