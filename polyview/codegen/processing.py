"""Category-aware rewriting of every code snippet carried by a component."""

from __future__ import annotations

from enum import Enum
from typing import Callable

from polyview.ir.plugins import Plugin
from polyview.ir.queries import iter_nodes
from polyview.ir.spec import Component


class CodeType(str, Enum):
    """Where a snippet lives, which decides how a target rewrites it."""
    HOOKS = "hooks"
    HOOKS_DEPS = "hooks-deps"
    BINDINGS = "bindings"
    STATE = "state"
    PROPERTIES = "properties"


CodeProcessor = Callable[[CodeType], Callable[[str], str]]


def process_component_code(component: Component, processor: CodeProcessor) -> Component:
    """Apply ``processor(code_type)`` to every snippet of ``component`` in place."""
    process_hooks = processor(CodeType.HOOKS)
    process_deps = processor(CodeType.HOOKS_DEPS)
    process_bindings = processor(CodeType.BINDINGS)
    process_state = processor(CodeType.STATE)
    process_properties = processor(CodeType.PROPERTIES)

    hooks = component.hooks
    for hook in (hooks.on_init, hooks.on_mount, hooks.on_unmount):
        if hook is not None:
            hook.code = process_hooks(hook.code)
    for update in hooks.on_update:
        update.code = process_hooks(update.code)
        update.deps = [process_deps(dep) for dep in update.deps]

    for value in component.state.values():
        value.code = process_state(value.code)

    for node in iter_nodes(component.children):
        for binding in node.bindings.values():
            binding.code = process_bindings(binding.code)
        for key, value in list(node.properties.items()):
            node.properties[key] = process_properties(value)
    return component


def code_processor_plugin(processor: CodeProcessor) -> Plugin:
    """Wrap a processor as a post-IR plugin."""
    return Plugin(
        name="code-processor",
        post_ir=lambda component: process_component_code(component, processor),
    )


__all__ = ["CodeType", "CodeProcessor", "process_component_code", "code_processor_plugin"]
