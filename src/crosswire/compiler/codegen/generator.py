"""Main code generator orchestrator."""

import copy
import logging
import textwrap
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from jinja2 import Environment, PackageLoader

from crosswire.compiler.ast_nodes import Component
from crosswire.compiler.codegen.dialect import LWC, Dialect
from crosswire.compiler.codegen.template import TemplateCodegen
from crosswire.compiler.exceptions import FormatterError
from crosswire.compiler.formatting import format_code
from crosswire.compiler.literals import to_js_literal
from crosswire.compiler.options import CompilerOptions, StateStyle
from crosswire.compiler.passes import (
    get_props,
    get_refs,
    getters_to_functions,
    strip_meta_properties,
    use_bind_value,
)
from crosswire.compiler.plugins import (
    CLASS_METHOD_PLUGIN,
    Plugin,
    run_post_code_plugins,
    run_post_json_plugins,
    run_pre_code_plugins,
    run_pre_json_plugins,
)
from crosswire.compiler.preprocessor import (
    check_class_body,
    is_empty_section,
    is_slot_property,
    normalize_code,
    strip_state_and_props_refs,
    strip_this_refs,
)
from crosswire.compiler.state import StateFormat, get_state_object_string, getter_to_assignment
from crosswire.compiler.styles import collect_css

log = logging.getLogger(__name__)


@dataclass
class CompiledSections:
    """Pieces the final document is rendered from."""

    class_name: str
    markup: str
    script: str
    types: str = ""
    css: str = ""
    lwc_imports: List[str] = field(default_factory=list)
    extra_imports: List[str] = field(default_factory=list)


def _transform_hook_code(code: str) -> str:
    return normalize_code(strip_state_and_props_refs(code))


def _block(head: str, body: str) -> str:
    return f"{head} {{\n{textwrap.indent(body, '  ')}\n}}"


class CodeGenerator:
    """Compiles a canonical component into a single target document."""

    def __init__(self, dialect: Dialect = LWC) -> None:
        self.dialect = dialect
        self.template_codegen = TemplateCodegen(dialect)
        self._env = Environment(
            loader=PackageLoader("crosswire", "templates"),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def generate(self, component: Component, options: Optional[CompilerOptions] = None) -> str:
        """Generate the complete document text."""
        options = options or CompilerOptions()
        plugins = [CLASS_METHOD_PLUGIN, *options.plugins]
        log.debug("Compiling %s for %s", component.name, self.dialect.name)

        sections = self.generate_sections(component, options, plugins)
        code = self.render(sections, options)

        code = run_pre_code_plugins(code, plugins)
        if options.prettier:
            try:
                code = format_code(code, parser=self.dialect.formatter_parser)
            except FormatterError as e:
                log.warning("Could not prettify %s: %s", component.name, e)
        return run_post_code_plugins(code, plugins)

    def generate_sections(
        self,
        component: Component,
        options: CompilerOptions,
        plugins: Optional[Sequence[Plugin]] = None,
    ) -> CompiledSections:
        if plugins is None:
            plugins = [CLASS_METHOD_PLUGIN, *options.plugins]

        # Make a copy we can safely mutate
        json = copy.deepcopy(component)
        json = run_pre_json_plugins(json, plugins)

        refs = get_refs(json)
        use_bind_value(json)
        getters_to_functions(json)

        json = run_post_json_plugins(json, plugins)
        css = collect_css(json)
        strip_meta_properties(json)

        data_string = normalize_code(
            get_state_object_string(
                json,
                data=True,
                functions=False,
                getters=False,
                format=(
                    StateFormat.OBJECT
                    if options.state_type == StateStyle.PROXIES
                    else StateFormat.VARIABLES
                ),
                value_mapper=lambda code, kind: strip_state_and_props_refs(code),
            )
        )
        getter_string = normalize_code(
            get_state_object_string(
                json,
                data=False,
                functions=False,
                getters=True,
                format=StateFormat.VARIABLES,
                key_prefix=self.dialect.getter_prefix,
                value_mapper=lambda code, kind: strip_this_refs(
                    strip_state_and_props_refs(getter_to_assignment(code))
                ),
            )
        )
        functions_string = normalize_code(
            get_state_object_string(
                json,
                data=False,
                functions=True,
                getters=False,
                format=StateFormat.VARIABLES,
                value_mapper=lambda code, kind: strip_this_refs(strip_state_and_props_refs(code)),
            )
        )

        props = [p for p in get_props(json) if not is_slot_property(p) and p != "children"]

        markup = self.template_codegen.compile_children(json.children, options, json, "\n")

        blocks = [
            "\n".join(self._prop_declaration(json, options, name) for name in props),
            "\n".join(
                f"{key} = getContext({getter.name});" for key, getter in json.context.get.items()
            ),
            "" if is_empty_section(functions_string) else functions_string,
            "" if is_empty_section(getter_string) else getter_string,
            "\n".join(f"{strip_state_and_props_refs(ref)};" for ref in refs),
            self._data_declaration(data_string, options),
            *self._lifecycle_blocks(json),
        ]

        lwc_imports = ["LightningElement"]
        if props:
            lwc_imports.append("api")
        if not is_empty_section(getter_string):
            lwc_imports.append("track")

        extra_imports = []
        if options.state_type == StateStyle.PROXIES and not is_empty_section(data_string):
            extra_imports.append("import onChange from 'on-change';")

        script = check_class_body("\n\n".join(b for b in blocks if b.strip()), json.name)

        return CompiledSections(
            class_name=json.name,
            markup=markup,
            script=script,
            types="\n\n".join(json.types) if options.typescript and json.types else "",
            css=css,
            lwc_imports=lwc_imports,
            extra_imports=extra_imports,
        )

    def render(self, sections: CompiledSections, options: CompilerOptions) -> str:
        template = self._env.get_template(self.dialect.template_name)
        return template.render(
            markup=sections.markup,
            types=sections.types,
            script_lang=' lang="ts"' if options.typescript else "",
            lwc_imports=sections.lwc_imports,
            extra_imports=sections.extra_imports,
            class_name=sections.class_name,
            script=sections.script,
            css=sections.css.strip(),
        )

    def _prop_declaration(self, json: Component, options: CompilerOptions, name: str) -> str:
        declaration = f"@api {name}"
        if options.typescript and json.props_type_ref and json.props_type_ref != "any":
            declaration += f": {json.props_type_ref.split(' |')[0]}['{name}']"
        if name in json.default_props:
            declaration += f" = {to_js_literal(json.default_props[name])}"
        return declaration + ";"

    def _data_declaration(self, data_string: str, options: CompilerOptions) -> str:
        if is_empty_section(data_string):
            return ""
        if options.state_type == StateStyle.PROXIES:
            return f"state = onChange({data_string}, () => (this.state = this.state));"
        return data_string

    def _lifecycle_blocks(self, json: Component) -> List[str]:
        hooks = json.hooks
        blocks = []

        if hooks.on_init:
            body = "super();\n" + _transform_hook_code(hooks.on_init.code)
            blocks.append(_block("constructor()", body.strip()))

        mount = [
            f"setContext({setter.name}, {self._context_value(setter.ref, setter.value)});"
            for setter in json.context.set.values()
        ]
        if hooks.on_mount:
            mount.append(_transform_hook_code(hooks.on_mount.code))
        if mount:
            blocks.append(_block("connectedCallback()", "\n".join(mount)))

        if hooks.on_update:
            updates = []
            for index, hook in enumerate(hooks.on_update):
                code = _transform_hook_code(hook.code)
                if not hook.deps:
                    updates.append(code)
                    continue
                snapshot = f"deps{index}"
                field_name = f"this._onUpdateDeps{index}"
                updates.append(
                    f"const {snapshot} = JSON.stringify({strip_state_and_props_refs(hook.deps)});\n"
                    + _block(
                        f"if ({field_name} !== {snapshot})",
                        f"{field_name} = {snapshot};\n{code}",
                    )
                )
            blocks.append(_block("renderedCallback()", "\n".join(updates)))

        if hooks.on_unmount:
            blocks.append(
                _block("disconnectedCallback()", _transform_hook_code(hooks.on_unmount.code))
            )
        return blocks

    def _context_value(self, ref: Optional[str], value: Any) -> str:
        if ref:
            return strip_state_and_props_refs(ref)
        if value is None:
            return "undefined"
        if isinstance(value, str):
            return strip_state_and_props_refs(value)
        return to_js_literal(value)


def compile_component(
    component: Component,
    options: Optional[CompilerOptions] = None,
    dialect: Dialect = LWC,
) -> str:
    """Compile ``component`` for ``dialect`` and return the document text."""
    return CodeGenerator(dialect).generate(component, options)
