"""
Binding classifier for Aurelia elements.

Each binding key on an element maps to exactly one emission rule. Rules are
checked in priority order and the first match wins; anything without a
dedicated rule falls through to a plain bound attribute.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from polyview.ir.spec import Binding, BindingType, INTERNAL_KEY_PREFIX, Node, TEXT_KEY

from ..identifiers import rename_event_argument
from ..text import (
    VALID_HTML_TAGS,
    encode_quotes,
    indent,
    is_slot_property,
    remove_surrounding_block,
    strip_slot_prefix,
)
from .constants import (
    BINDINGS_MAPPER,
    DEFAULT_EVENT_ARGUMENT,
    EVENT_TOKEN,
    INDEX_TOKEN,
    NON_DELEGATED_INPUT_TYPES,
    SPREAD_ATTRIBUTE,
)
from .context import BlockContext

EVENT_PREFIX = "on"
_MEMBER_PREFIX = re.compile(r"^(?:props|state)\.")
_TAG_CLOSE = re.compile(r"/?>")


class BindingRule(str, Enum):
    SPREAD = "spread"
    INTERNAL = "internal"
    EVENT = "event"
    CLASS = "class"
    REF = "ref"
    SLOT = "slot"
    MAPPED = "mapped"
    ATTRIBUTE = "attribute"


def classify_binding(key: str, binding: Binding) -> BindingRule:
    """Pick the emission rule for one binding."""
    if binding.type is BindingType.SPREAD:
        return BindingRule.SPREAD
    if key.startswith(INTERNAL_KEY_PREFIX) or key == TEXT_KEY:
        return BindingRule.INTERNAL
    if key.startswith(EVENT_PREFIX):
        return BindingRule.EVENT
    if key == "class":
        return BindingRule.CLASS
    if key == "ref":
        return BindingRule.REF
    if is_slot_property(key):
        return BindingRule.SLOT
    if key in BINDINGS_MAPPER:
        return BindingRule.MAPPED
    return BindingRule.ATTRIBUTE


@dataclass(frozen=True)
class AttributeResult:
    """Attributes for the opening tag plus work deferred to the element body."""
    text: str = ""
    deferred_slots: Tuple[str, ...] = ()
    spreads: Tuple[str, ...] = ()


def event_name(key: str, node: Node) -> str:
    name = key[2:]
    name = name[:1].lower() + name[1:]
    if name == "change" and node.name == "input":
        return "input"
    return name


def suppresses_event_delegation(node: Node) -> bool:
    """Literal radio and checkbox inputs keep their events undelegated."""
    return node.properties.get("type") in NON_DELEGATED_INPUT_TYPES


def _bare(code: str) -> str:
    return _MEMBER_PREFIX.sub("", code.strip())


def _render_spread(key: str, node: Node, spreads: List[str]) -> Tuple[str, Tuple[str, ...]]:
    target = _bare(key)
    for position, spread in enumerate(spreads):
        if not spread or spread != target:
            continue
        suffix = "" if len(spreads) == 1 else str(position)
        return f' {SPREAD_ATTRIBUTE}{suffix}.bind="{encode_quotes(spread)}"', (spread,)
    return "", ()


def _render_event(key: str, binding: Binding, node: Node, context: BlockContext) -> str:
    if suppresses_event_delegation(node):
        return ""
    argument = (binding.arguments or [DEFAULT_EVENT_ARGUMENT])[0]
    value = remove_surrounding_block(rename_event_argument(binding.code, argument, EVENT_TOKEN))
    if value.strip() in context.callable_names:
        value = f"{value.strip()}()"
    return f' {event_name(key, node)}.delegate="{indent(value, 2)}"'


def _render_attribute(key: str, binding: Binding, node: Node, context: BlockContext) -> str:
    code = binding.code
    is_element = node.name in VALID_HTML_TAGS or "-" in key
    if is_element and "checked" in node.bindings:
        return f' {key}.bind="{encode_quotes(binding.raw_code or code)}"'
    if code.strip() in context.index_names:
        return f' {key}.bind="{INDEX_TOKEN}"'
    return f' {key}.bind="{indent(code, 2)}"'


def render_bindings(node: Node, context: BlockContext) -> AttributeResult:
    """
    Render every binding of ``node`` as opening-tag attributes.

    Returns:
        The attribute text, slotted markup to place inside the element, and
        the spread sources that were emitted
    """
    spreads = [_bare(binding.code) for binding in node.bindings.values() if binding.type is BindingType.SPREAD]
    parts: List[str] = []
    deferred: List[str] = []
    collected: List[str] = []

    for key, binding in node.bindings.items():
        rule = classify_binding(key, binding)
        if rule is BindingRule.SPREAD:
            text, found = _render_spread(key, node, spreads)
            parts.append(text)
            collected.extend(found)
        elif rule is BindingRule.INTERNAL:
            continue
        elif rule is BindingRule.EVENT:
            parts.append(_render_event(key, binding, node, context))
        elif rule is BindingRule.CLASS:
            parts.append(f' class="${{{binding.code}}}"')
        elif rule is BindingRule.REF:
            parts.append(f' ref="{binding.code.strip()}"')
        elif rule is BindingRule.SLOT:
            attribute = strip_slot_prefix(key).lower()
            deferred.append(_TAG_CLOSE.sub(lambda match: f" {attribute}{match.group(0)}", binding.code, count=1))
        elif rule is BindingRule.MAPPED:
            parts.append(f' {BINDINGS_MAPPER[key]}.bind="{indent(binding.code, 2)}"')
        else:
            parts.append(_render_attribute(key, binding, node, context))

    return AttributeResult(text="".join(parts), deferred_slots=tuple(deferred), spreads=tuple(collected))


def render_properties(node: Node) -> str:
    """Literal attributes, skipping text and internal keys."""
    return "".join(
        f' {key}="{value}"'
        for key, value in node.properties.items()
        if key != TEXT_KEY and not key.startswith(INTERNAL_KEY_PREFIX)
    )


__all__ = [
    "BindingRule",
    "AttributeResult",
    "classify_binding",
    "event_name",
    "suppresses_event_delegation",
    "render_bindings",
    "render_properties",
]
