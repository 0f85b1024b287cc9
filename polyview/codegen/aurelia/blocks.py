"""
Node walker rendering IR subtrees as Aurelia view markup.

Rendering is a pure recursive function. Everything that varies with the
position in the tree (call site, loop indexes in scope) travels down in an
immutable :class:`BlockContext`; spread sources discovered in a subtree
travel back up in the :class:`BlockResult`.
"""

from __future__ import annotations

from typing import List, Optional

from polyview.errors import MalformedIRError
from polyview.ir.spec import BuiltInNode, Node, TEXT_KEY

from ..text import SELF_CLOSING_TAGS, VALID_HTML_TAGS, is_slot_property, kebab_case, slot_selector
from .bindings import render_bindings, render_properties
from .constants import INDEX_TOKEN, TEMPLATE_TAG
from .context import BlockContext, BlockResult, CallLocation


def render_children(
    nodes: List[Node],
    context: BlockContext,
    separator: str = "\n",
) -> BlockResult:
    """Render sibling nodes in order and merge their spreads."""
    results = [render_block_result(child, context) for child in nodes]
    return BlockResult(
        text=separator.join(result.text for result in results),
        spreads=BlockResult.merge_spreads(*(result.spreads for result in results)),
    )


def _render_fragment(node: Node, context: BlockContext) -> BlockResult:
    return render_children(node.children, context.at(CallLocation.FRAGMENT))


def _render_slot(node: Node, context: BlockContext) -> BlockResult:
    name_binding = node.bindings.get("name")
    name_code = name_binding.code if name_binding else node.properties.get("name", "")
    attributes = f' name="{slot_selector(name_code)}"' if name_code else ""
    nested = [binding.code for key, binding in node.bindings.items() if key != "name" and binding.code]
    children = render_children(node.children, context.at(CallLocation.SLOT))
    body = "\n".join(nested + ([children.text] if children.text else []))
    return BlockResult(text=f"<slot{attributes}>{body}</slot>", spreads=children.spreads)


def _render_text(node: Node, context: BlockContext) -> Optional[BlockResult]:
    if TEXT_KEY in node.properties:
        return BlockResult(text=node.properties[TEXT_KEY])
    binding = node.bindings.get(TEXT_KEY)
    if binding is None or not binding.code:
        return None
    code = binding.code.strip()
    member = code[len("props."):] if code.startswith("props.") else code
    if is_slot_property(member):
        return BlockResult(text=f'<slot select="[{slot_selector(member)}]"></slot>')
    if code in context.index_names:
        return BlockResult(text="${" + INDEX_TOKEN + "}")
    return BlockResult(text="${" + binding.code + "}")


def _render_for(node: Node, context: BlockContext) -> BlockResult:
    each = node.bindings.get("each")
    if each is None or not each.code.strip():
        raise MalformedIRError("For node has no iterable binding", hint="Add an 'each' binding")
    inner = context.at(CallLocation.FOR)
    if node.scope.index_name:
        inner = inner.with_index(node.scope.index_name)
    children = render_children(node.children, inner)
    opening = f'<{TEMPLATE_TAG} repeat.for="{node.scope.for_name} of {each.code}">'
    return BlockResult(text=f"{opening}{children.text}</{TEMPLATE_TAG}>", spreads=children.spreads)


def _render_show(node: Node, context: BlockContext) -> BlockResult:
    when = node.bindings.get("when")
    condition = when.code if when is not None else "undefined"
    children = render_children(node.children, context.at(CallLocation.SHOW))
    text = f'<{TEMPLATE_TAG} if.bind="{condition}">{children.text}</{TEMPLATE_TAG}>'
    spreads = children.spreads
    else_branch = node.else_branch
    if else_branch is not None:
        negative = render_block_result(else_branch, context.at(CallLocation.ELSE))
        text += f"\n<{TEMPLATE_TAG} else>\n{negative.text}\n</{TEMPLATE_TAG}>"
        spreads = BlockResult.merge_spreads(spreads, negative.spreads)
    return BlockResult(text=text, spreads=spreads)


def element_selector(name: str) -> str:
    """HTML tags keep their name, component tags become kebab-case."""
    stripped = name.strip()
    if stripped in VALID_HTML_TAGS or "-" in stripped:
        return stripped
    return kebab_case(stripped)


def _render_element(node: Node, context: BlockContext) -> BlockResult:
    selector = element_selector(node.name)
    attributes = render_bindings(node, context)
    opening = f"<{selector}{render_properties(node)}{attributes.text}"
    if node.name in SELF_CLOSING_TAGS:
        return BlockResult(text=f"{opening} />", spreads=attributes.spreads)

    children = render_children(node.children, context.at(CallLocation.CHILDREN))
    text = f"{opening}>{''.join(attributes.deferred_slots)}{children.text}\n</{selector}>"
    return BlockResult(text=text, spreads=BlockResult.merge_spreads(attributes.spreads, children.spreads))


def render_block_result(node: Node, context: Optional[BlockContext] = None) -> BlockResult:
    """
    Render ``node`` and its subtree.

    Args:
        node: Subtree root
        context: Rendering context; a fresh start context when omitted

    Returns:
        Rendered markup and the spread sources found in the subtree
    """
    context = context or BlockContext()
    if node.name == BuiltInNode.FRAGMENT.value:
        return _render_fragment(node, context)
    if node.name == BuiltInNode.SLOT.value:
        return _render_slot(node, context)
    if node.is_children_placeholder():
        return BlockResult(text="<slot></slot>")
    text = _render_text(node, context)
    if text is not None:
        return text
    if node.is_for():
        return _render_for(node, context)
    if node.is_show():
        return _render_show(node, context)
    return _render_element(node, context)


def render_block(node: Node, context: Optional[BlockContext] = None) -> str:
    """Template-only entry point: render one subtree to view markup."""
    return render_block_result(node, context).text


__all__ = ["render_block", "render_block_result", "render_children", "element_selector"]
