"""
Aurelia component generator.

Turns one component IR into a TypeScript module holding an Aurelia custom
element: a class decorated with ``@inlineView`` whose view is rendered by
:mod:`polyview.codegen.aurelia.blocks`.

Pipeline:
    1. merge options, deep-copy and validate the IR
    2. pre-IR plugins
    3. collect props, refs, context injectables and outputs; relocate refs
    4. post-IR plugins, ending with the built-in code processor
    5. resolve declared imports through the import channel
    6. render the view, then classify imports against it
    7. assemble the module through the component template
    8. pre-code plugins, formatter, post-code plugins
"""

from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Union

from polyview.config import DEFAULT_OPTIONS, CompileOptions, merge_options
from polyview.ir.plugins import PipelineStage
from polyview.ir.queries import (
    collect_dom_refs,
    collect_props,
    components_used,
    custom_imports,
    local_export_vars,
)
from polyview.ir.spec import Component
from polyview.ir.validation import validate_component

from ..context import ContextBridge, build_context_bridge
from ..formatting import TYPESCRIPT_PARSER, try_format
from ..identifiers import (
    receptor_for,
    relocate_identifiers,
    rewrite_code,
    strip_state_and_props,
)
from ..imports import (
    assemble_template_imports,
    classify_imports,
    ordered_code_imports,
    parse_import_channel,
    render_pre_component,
    structured_import_mapper,
)
from ..processing import CodeType, code_processor_plugin
from ..refs import map_refs, value_refs
from ..state import state_class_members
from ..text import encode_quotes, indent, is_slot_property, kebab_case
from .blocks import render_children
from .constants import (
    AGGREGATOR_CLASS,
    AGGREGATOR_MODULE,
    DEFAULT_SLOT_RECEPTOR,
    PROPERTY_OBSERVER,
    RUNTIME_MODULE,
    RuntimeFeature,
    template_import_keyword,
    wraps_view_in_template,
)
from .context import BlockContext, CallLocation
from .templates import component_template

logger = logging.getLogger(__name__)

INSTANCE_PREFIX = "this."
CHILDREN_PROP = "children"
ANY_TYPE = "any"
ROOT_SEPARATOR = "\n  "

_OUTPUT_PROP = re.compile(r"^on[A-Z]")


@dataclass
class _Members:
    """Names collected from the IR before rendering."""
    context_vars: List[str] = field(default_factory=list)
    state_vars: List[str] = field(default_factory=list)
    output_vars: List[str] = field(default_factory=list)
    dom_refs: List[str] = field(default_factory=list)
    props: List[str] = field(default_factory=list)

    def code_mapper(self, replace_with: Union[str, Callable[[str], str]] = INSTANCE_PREFIX) -> Callable[[str], str]:
        """Rewriter relocating member references onto the instance."""

        def mapper(code: str) -> str:
            return rewrite_code(
                code,
                context_vars=self.context_vars,
                output_vars=self.output_vars,
                dom_refs=self.dom_refs,
                state_vars=self.state_vars,
                replace_with=replace_with,
                instance_prefix=INSTANCE_PREFIX,
            )

        return mapper


class AureliaGenerator:
    """
    Compile component IR into an Aurelia custom element module.

    Args:
        options: Fully merged compile options
    """

    def __init__(self, options: CompileOptions = DEFAULT_OPTIONS):
        self.options = options

    # ------------------------------------------------------------------
    # entry point
    # ------------------------------------------------------------------

    def generate(self, source: Component) -> str:
        options = self.options
        if options.suppressed:
            logger.debug("Generation suppressed for component %s", source.name)
            return ""

        validate_component(source)
        component = copy.deepcopy(source)
        logger.debug("Generating Aurelia v%s component %s", options.target_version.value, component.name)

        component = options.plugins.run_ir_stage(PipelineStage.PRE_IR, component)

        members = self._collect_members(component)
        injectables = self._injectables(component, members.context_vars)
        outputs = self._outputs(component, members.output_vars)
        js_refs = value_refs(component, members.dom_refs)
        map_refs(component, members.dom_refs, INSTANCE_PREFIX)

        plugins = options.plugins.add(code_processor_plugin(self._code_processor(component, members)))
        component = plugins.run_ir_stage(PipelineStage.POST_IR, component)

        channel = parse_import_channel(
            render_pre_component(
                component,
                components_used=components_used(component),
                import_mapper=options.import_mapper or structured_import_mapper,
                preserve_imports=options.preserve_imports,
                preserve_file_extensions=options.preserve_file_extensions,
            )
        )
        extra_fields = list(dict.fromkeys(custom_imports(component) + local_export_vars(component)))

        template_body, spreads = self._render_template_body(component)
        classification = classify_imports(channel.records, template_body, extra_fields)
        view = self._assemble_view(
            assemble_template_imports(
                classification.custom_elements,
                template_import_keyword(options.target_version),
            ),
            template_body,
        )

        bridge = build_context_bridge(component, self._context_value_processor())
        bindable_props = self._bindable_props(members.props, spreads)

        source_code = component_template().render(
            aggregator_import=bridge.needs_aggregator_import,
            aggregator_class=AGGREGATOR_CLASS,
            aggregator_module=AGGREGATOR_MODULE,
            runtime_features=self._runtime_features(component, bridge, bindable_props),
            runtime_module=RUNTIME_MODULE,
            code_imports=ordered_code_imports(channel, classification),
            local_exports=channel.local_exports,
            types=list(component.types),
            default_props=[f"{name}: {code}" for name, code in component.default_props.items()],
            autoinject=bridge.has_writes,
            element_name=self.element_name(component),
            view=view,
            name=component.name,
            members=self._class_members(
                component,
                members,
                bindable_props=bindable_props,
                assigned_imports=classification.class_fields,
                outputs=outputs,
                js_refs=js_refs,
                injectables=injectables,
                bridge=bridge,
            ),
        )

        source_code = plugins.run_code_stage(PipelineStage.PRE_CODE, source_code)
        if options.format:
            source_code = try_format(source_code, TYPESCRIPT_PARSER, options.formatter)
        return plugins.run_code_stage(PipelineStage.POST_CODE, source_code)

    # ------------------------------------------------------------------
    # IR facts
    # ------------------------------------------------------------------

    def _collect_members(self, component: Component) -> _Members:
        props = [prop for prop in collect_props(component) if prop != CHILDREN_PROP]
        output_vars: List[str] = []
        if self.options.experimental.outputs is not None:
            output_vars = [prop for prop in props if _OUTPUT_PROP.match(prop)]
        return _Members(
            context_vars=list(component.context.get),
            state_vars=list(component.state),
            output_vars=output_vars,
            dom_refs=collect_dom_refs(component),
            props=[prop for prop in props if prop not in output_vars],
        )

    def _injectables(self, component: Component, context_vars: List[str]) -> List[str]:
        experimental = self.options.experimental
        result = []
        for name in context_vars:
            type_name = component.context.get[name].name
            if experimental.injectables is not None:
                result.append(experimental.injectables(name, type_name))
            elif experimental.inject:
                result.append(f"@Inject(forwardRef(() => {type_name})) public {name}: {type_name}")
            else:
                result.append(f"public {name}: {type_name}")
        return result

    def _outputs(self, component: Component, output_vars: List[str]) -> List[str]:
        make_output = self.options.experimental.outputs
        if make_output is None:
            return []
        return [make_output(component, name) for name in output_vars]

    def _code_processor(self, component: Component, members: _Members):
        hooks_mapper = members.code_mapper(INSTANCE_PREFIX)
        callable_names = component.callable_state_names()

        def process_hooks(code: str) -> str:
            return relocate_identifiers(hooks_mapper(code), callable_names, INSTANCE_PREFIX)

        def process_bindings(code: str) -> str:
            code = rewrite_code(code, output_vars=members.output_vars)
            return encode_quotes(code)

        def process_deps(code: str) -> str:
            return strip_state_and_props(code)

        def identity(code: str) -> str:
            return code

        processors = {
            CodeType.HOOKS: process_hooks,
            CodeType.BINDINGS: process_bindings,
            CodeType.HOOKS_DEPS: process_deps,
            CodeType.STATE: identity,
            CodeType.PROPERTIES: identity,
        }
        return lambda code_type: processors[code_type]

    @staticmethod
    def _context_value_processor() -> Callable[[str], str]:
        replace = receptor_for(INSTANCE_PREFIX, DEFAULT_SLOT_RECEPTOR)
        return lambda code: strip_state_and_props(code, replace)

    # ------------------------------------------------------------------
    # view
    # ------------------------------------------------------------------

    def _render_template_body(self, component: Component):
        context = BlockContext(
            call_location=CallLocation.TEMPLATE_ROOT,
            callable_names=tuple(component.callable_state_names()),
        )
        result = render_children(component.children, context, separator=ROOT_SEPARATOR)
        text = result.text
        if component.hooks.on_update:
            text += "${" + PROPERTY_OBSERVER + "}"
        if component.css:
            text += f"\n\n<style>{component.css}</style>"
        return text, list(result.spreads)

    def _assemble_view(self, template_imports: str, template_body: str) -> str:
        content = ""
        if template_imports:
            content += f"\n{template_imports}\n"
        content += f"\n{template_body}"

        view = indent(content, 2)
        if wraps_view_in_template(self.options.target_version):
            view = f"<template>{view}</template>"
        return escape_template_literal(indent(view, 6))

    @staticmethod
    def element_name(component: Component) -> str:
        aurelia_meta = component.meta.get("aurelia") or {}
        return aurelia_meta.get("element_name") or kebab_case(component.name)

    # ------------------------------------------------------------------
    # module body
    # ------------------------------------------------------------------

    @staticmethod
    def _bindable_props(props: List[str], spreads: List[str]) -> List[str]:
        return [
            prop
            for prop in dict.fromkeys(props + spreads)
            if not is_slot_property(prop) and prop != CHILDREN_PROP
        ]

    @staticmethod
    def _runtime_features(component: Component, bridge: ContextBridge, bindable_props: List[str]) -> List[str]:
        features = {RuntimeFeature.INLINE_VIEW, RuntimeFeature.CUSTOM_ELEMENT}
        if bindable_props:
            features.add(RuntimeFeature.BINDABLE)
        if bridge.has_writes:
            features.add(RuntimeFeature.AUTOINJECT)
        if component.hooks.on_update:
            features.add(RuntimeFeature.COMPUTED_FROM)
        return sorted(feature.value for feature in features)

    def _class_members(
        self,
        component: Component,
        members: _Members,
        *,
        bindable_props: List[str],
        assigned_imports: List[str],
        outputs: List[str],
        js_refs: List[str],
        injectables: List[str],
        bridge: ContextBridge,
    ) -> List[str]:
        state_mapper = members.code_mapper(INSTANCE_PREFIX)
        sections = [
            "\n".join(self._prop_declaration(component, prop) for prop in bindable_props),
            "\n".join(f"{name} = {name};" for name in assigned_imports),
            "\n".join(f"{output};" for output in outputs),
            "\n".join(f"{name}: HTMLElement;" for name in members.dom_refs),
            "\n".join(self._value_ref_declaration(component, name, state_mapper) for name in js_refs),
            state_class_members(component, state_mapper),
            self._constructor(component, injectables, bridge),
            self._attached(component, bridge),
            self._property_observer(component),
            self._detached(component),
            bridge.read_method(),
            bridge.write_method(),
        ]
        return [section for section in sections if section]

    @staticmethod
    def _prop_declaration(component: Component, prop: str) -> str:
        type_ref = component.props_type_ref
        if type_ref and type_ref != ANY_TYPE:
            if "|" in type_ref or "&" in type_ref:
                type_ref = f"({type_ref})"
            prop_type = f'{type_ref}["{prop}"]'
        else:
            prop_type = ANY_TYPE
        declaration = f"@bindable() {prop}: {prop_type}"
        if prop in component.default_props:
            declaration += f' = defaultProps["{prop}"]'
        return declaration + ";"

    @staticmethod
    def _value_ref_declaration(component: Component, name: str, mapper: Callable[[str], str]) -> str:
        spec = component.refs[name]
        declaration = f"private _{name}"
        if spec.type_parameter:
            declaration += f": {spec.type_parameter}"
        if spec.argument:
            declaration += f" = {mapper(spec.argument)}"
        return declaration + ";"

    @staticmethod
    def _constructor(component: Component, injectables: List[str], bridge: ContextBridge) -> str:
        on_init = component.hooks.on_init
        if not (injectables or on_init or bridge.has_writes):
            return ""
        parameters = list(injectables)
        if bridge.has_writes:
            parameters.insert(0, f"private eventAggregator: {AGGREGATOR_CLASS}")
        signature = "constructor()" if not parameters else "constructor(\n" + indent_block(",\n".join(parameters)) + "\n)"
        if on_init is None:
            return f"{signature} {{}}"
        return f"{signature} {{\n{indent_block(on_init.code)}\n}}"

    @staticmethod
    def _attached(component: Component, bridge: ContextBridge) -> str:
        on_mount = component.hooks.on_mount
        if not (on_mount or bridge.has_reads or bridge.has_writes):
            return ""
        body = "\n".join(part for part in (on_mount.code if on_mount else "", bridge.mount_calls()) if part)
        return f"attached() {{\n{indent_block(body)}\n}}"

    @staticmethod
    def _property_observer(component: Component) -> str:
        updates = component.hooks.on_update
        if not updates:
            return ""
        deps = [dep for update in updates for dep in update.deps]
        observed = ", ".join(f'"{dep}"' for dep in dict.fromkeys(deps))
        body = "\n".join(update.code for update in updates) + "\nreturn;"
        return f"@computedFrom({observed})\nget {PROPERTY_OBSERVER}() {{\n{indent_block(body)}\n}}"

    @staticmethod
    def _detached(component: Component) -> str:
        on_unmount = component.hooks.on_unmount
        if on_unmount is None:
            return ""
        return f"detached() {{\n{indent_block(on_unmount.code)}\n}}"


def indent_block(text: str, spaces: int = 2) -> str:
    """Indent every non-empty line of ``text``."""
    pad = " " * spaces
    return "\n".join(pad + line if line.strip() else line for line in text.split("\n"))


def escape_template_literal(text: str) -> str:
    """Escape text for embedding in a JavaScript template literal."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def component_to_aurelia(
    user_options: Union[CompileOptions, Mapping[str, Any], None] = None,
) -> Callable[[Component], str]:
    """
    Build a generator function for the given options.

    Options are merged onto :data:`~polyview.config.DEFAULT_OPTIONS` once;
    the returned callable can be reused for any number of components.
    """
    generator = AureliaGenerator(merge_options(DEFAULT_OPTIONS, user_options))
    return generator.generate


def compile_component(
    component: Component,
    options: Union[CompileOptions, Mapping[str, Any], None] = None,
) -> str:
    """Compile a single component to an Aurelia module."""
    return component_to_aurelia(options)(component)


__all__ = [
    "AureliaGenerator",
    "component_to_aurelia",
    "compile_component",
    "escape_template_literal",
]
