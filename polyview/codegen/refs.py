"""Ref relocation: element-backed refs versus plain value refs."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List

from polyview.ir.queries import iter_nodes
from polyview.ir.spec import Component

from .identifiers import replace_identifiers


def ref_field_names(component: Component, dom_refs: Iterable[str]) -> Dict[str, str]:
    """Map each ref to its storage field: DOM refs keep their name, value refs get ``_``."""
    dom = set(dom_refs)
    names: Dict[str, str] = {}
    for name in list(component.refs) + [ref for ref in dom if ref not in component.refs]:
        names[name] = name if name in dom else f"_{name}"
    return names


def value_refs(component: Component, dom_refs: Iterable[str]) -> List[str]:
    dom = set(dom_refs)
    return [name for name in component.refs if name not in dom]


def relocate_refs(code: str, fields: Dict[str, str], prefix: str = "") -> str:
    """Rewrite ``ref`` and ``ref.current`` reads to ``prefix + field``."""
    if not code:
        return code
    for name, field_name in fields.items():
        code = re.sub(r"(?<![\w$.])" + re.escape(name) + r"\.current(?![\w$])", name, code)
        code = replace_identifiers(code, [name], lambda _name, target=field_name: f"{prefix}{target}")
    return code


def map_refs(component: Component, dom_refs: Iterable[str], prefix: str = "this.") -> Component:
    """
    Relocate ref usage throughout ``component`` in place.

    Lifecycle, state and ref-initializer code receives ``prefix``; template
    bindings address the field directly. ``ref`` bindings keep the bare name
    because they declare the capture slot rather than read it.
    """
    fields = ref_field_names(component, dom_refs)
    if not fields:
        return component

    hooks = component.hooks
    for hook in (hooks.on_init, hooks.on_mount, hooks.on_unmount):
        if hook is not None:
            hook.code = relocate_refs(hook.code, fields, prefix)
    for update in hooks.on_update:
        update.code = relocate_refs(update.code, fields, prefix)
    for value in component.state.values():
        value.code = relocate_refs(value.code, fields, prefix)
    for ref in component.refs.values():
        if ref.argument:
            ref.argument = relocate_refs(ref.argument, fields, prefix)
    for node in iter_nodes(component.children):
        for key, binding in node.bindings.items():
            if key == "ref":
                continue
            binding.code = relocate_refs(binding.code, fields)
    return component


__all__ = ["ref_field_names", "value_refs", "relocate_refs", "map_refs"]
