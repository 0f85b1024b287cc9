"""Fail-fast structural checks on component IR."""

from __future__ import annotations

from typing import List

from polyview.errors import MalformedIRError

from .spec import Component, Node, TEXT_KEY


def validate_node(node: Node, path: str = "") -> None:
    """Validate one node subtree, raising on the first malformed node."""
    location = f"{path}/{node.name}" if path else (node.name or "<root>")
    if not isinstance(node.name, str) or not node.name.strip():
        raise MalformedIRError(
            f"Node at '{path or '<root>'}' has no name",
            hint="Every node needs a tag, component or control-flow name",
        )
    if node.is_for():
        each = node.bindings.get("each")
        if each is None or not each.code.strip():
            raise MalformedIRError(
                f"For node at '{location}' has no iterable binding",
                hint="Add an 'each' binding with the collection expression",
            )
    for key, binding in node.bindings.items():
        if binding is None or not isinstance(binding.code, str):
            raise MalformedIRError(f"Binding '{key}' on '{location}' has no code")
    if TEXT_KEY in node.properties and not isinstance(node.properties[TEXT_KEY], str):
        raise MalformedIRError(f"Literal text on '{location}' must be a string")
    else_branch = node.meta.get("else")
    if else_branch is not None:
        if not isinstance(else_branch, Node):
            raise MalformedIRError(f"Else branch of '{location}' is not a node")
        validate_node(else_branch, f"{location}:else")
    for child in node.children:
        validate_node(child, location)


def validate_component(component: Component) -> None:
    """
    Validate a component before compilation.

    Raises:
        MalformedIRError: If a required field is missing anywhere in the IR
    """
    if not isinstance(component.name, str) or not component.name.strip():
        raise MalformedIRError("Component has no name")
    for child in component.children:
        validate_node(child, component.name)

    missing: List[str] = [
        f"context read '{key}'" for key, entry in component.context.get.items() if not entry.name
    ]
    missing.extend(
        f"context write #{index}" for index, entry in enumerate(component.context.set) if not entry.name
    )
    missing.extend(
        f"import #{index}" for index, entry in enumerate(component.imports) if not entry.path
    )
    if missing:
        raise MalformedIRError(
            f"Component '{component.name}' is missing names for: {', '.join(missing)}"
        )


__all__ = ["validate_component", "validate_node"]
