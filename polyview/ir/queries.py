"""
Read-only queries over component IR.

These helpers collect facts the generators need before rendering: which
props are referenced, which refs are attached to elements, which child
components and imported identifiers the tree uses.
"""

from __future__ import annotations

import re
from typing import Dict, Iterator, List

from .spec import BUILT_IN_NODE_NAMES, Component, Node

_PROPS_ACCESS = re.compile(r"(?<![\w$.])props\.([A-Za-z_$][\w$]*)")


def iter_nodes(nodes: List[Node]) -> Iterator[Node]:
    """Depth-first walk over nodes, including ``Show`` else branches."""
    for node in nodes:
        yield node
        else_branch = node.else_branch
        if else_branch is not None:
            yield from iter_nodes([else_branch])
        yield from iter_nodes(node.children)


def iter_component_code(component: Component) -> Iterator[str]:
    """Yield every code snippet attached to the component."""
    for node in iter_nodes(component.children):
        for binding in node.bindings.values():
            yield binding.code
    for value in component.state.values():
        yield value.code
    hooks = component.hooks
    for hook in (hooks.on_init, hooks.on_mount, hooks.on_unmount):
        if hook is not None:
            yield hook.code
    for update in hooks.on_update:
        yield update.code
    for ref in component.refs.values():
        if ref.argument:
            yield ref.argument
    for entry in component.context.set:
        if entry.ref:
            yield entry.ref
        for value in (entry.value or {}).values():
            yield value.code


def collect_props(component: Component) -> List[str]:
    """Declared props followed by any further ``props.x`` references found in code."""
    found: Dict[str, None] = dict.fromkeys(component.props)
    for code in iter_component_code(component):
        for match in _PROPS_ACCESS.finditer(code):
            found.setdefault(match.group(1), None)
    return list(found)


def collect_dom_refs(component: Component) -> List[str]:
    """Ref names bound to elements through a ``ref`` binding, in tree order."""
    refs: Dict[str, None] = {}
    for node in iter_nodes(component.children):
        binding = node.bindings.get("ref")
        if binding is not None and binding.code.strip():
            refs.setdefault(binding.code.strip(), None)
    return list(refs)


def is_upper_case(text: str) -> bool:
    return bool(text) and text.upper() == text and text.lower() != text


def components_used(component: Component) -> List[str]:
    """Upper-case (component) tag names used in the tree, excluding built-ins."""
    used: Dict[str, None] = {}
    for node in iter_nodes(component.children):
        name = node.name
        if name and is_upper_case(name[0]) and name not in BUILT_IN_NODE_NAMES:
            used.setdefault(name, None)
    return list(used)


def custom_imports(component: Component) -> List[str]:
    """
    Imported local names referenced from binding code.

    Names only used as component tags are excluded; they become custom
    elements rather than instance fields.
    """
    binding_code = [
        binding.code
        for node in iter_nodes(component.children)
        for binding in node.bindings.values()
    ]
    tags = set(components_used(component))
    result: List[str] = []
    for declared in component.imports:
        for local in declared.imports:
            if local in tags or local in result:
                continue
            pattern = re.compile(r"(?<![\w$.])" + re.escape(local) + r"(?![\w$])")
            if any(pattern.search(code) for code in binding_code):
                result.append(local)
    return result


def local_export_vars(component: Component) -> List[str]:
    return [name for name, export in component.exports.items() if export.used_in_local]


__all__ = [
    "iter_nodes",
    "iter_component_code",
    "collect_props",
    "collect_dom_refs",
    "is_upper_case",
    "components_used",
    "custom_imports",
    "local_export_vars",
]
