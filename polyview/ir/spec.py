"""
Framework-agnostic component IR for Polyview.

This module defines the intermediate representation (IR) that upstream
parsers produce and every target backend consumes. All types here are plain
dataclasses with no target-specific behavior.

Design Principles:
------------------
1. **Target Agnostic**: Nothing here knows about Aurelia, Angular, etc.
2. **Serializable**: Every type round-trips through JSON-compatible dicts
3. **Ordered**: Node children, imports and context writes keep source order
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# =============================================================================
# Enumerations
# =============================================================================

class BindingType(str, Enum):
    """How a binding contributes to its element."""
    NORMAL = "normal"
    SPREAD = "spread"


class StateValueType(str, Enum):
    """Kinds of state entries a component may declare."""
    DATA = "data"
    FUNCTION = "function"
    METHOD = "method"
    GETTER = "getter"


class BuiltInNode(str, Enum):
    """Reserved control-flow node names."""
    FOR = "For"
    SHOW = "Show"
    FRAGMENT = "Fragment"
    SLOT = "Slot"


BUILT_IN_NODE_NAMES = frozenset(item.value for item in BuiltInNode)

# Sentinel keys for literal text (properties) and interpolated text (bindings)
TEXT_KEY = "_text"

# Keys with this prefix are parser bookkeeping and never emitted
INTERNAL_KEY_PREFIX = "$"

ELSE_META_KEY = "else"


# =============================================================================
# Node tree
# =============================================================================

@dataclass
class Binding:
    """A dynamic attribute or text value on a node."""
    code: str
    raw_code: Optional[str] = None
    type: BindingType = BindingType.NORMAL
    arguments: Optional[List[str]] = None  # callback parameter names for events

    def __post_init__(self) -> None:
        if self.raw_code is None:
            self.raw_code = self.code
        self.type = BindingType(self.type)


@dataclass
class ForScope:
    """Loop variables introduced by a ``For`` node."""
    for_name: Optional[str] = None
    index_name: Optional[str] = None
    collection_name: Optional[str] = None


@dataclass
class Node:
    """
    One element, control-flow construct, or text unit.

    ``properties`` hold literal attribute strings, ``bindings`` hold code.
    ``meta`` carries auxiliary data such as the ``else`` branch of a ``Show``.
    """
    name: str
    properties: Dict[str, str] = field(default_factory=dict)
    bindings: Dict[str, Binding] = field(default_factory=dict)
    children: List[Node] = field(default_factory=list)
    scope: ForScope = field(default_factory=ForScope)
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def else_branch(self) -> Optional[Node]:
        candidate = self.meta.get(ELSE_META_KEY)
        return candidate if isinstance(candidate, Node) else None

    def is_for(self) -> bool:
        return self.name == BuiltInNode.FOR.value

    def is_show(self) -> bool:
        return self.name == BuiltInNode.SHOW.value

    def is_children_placeholder(self) -> bool:
        """True for ``{props.children}`` text nodes."""
        text = self.bindings.get(TEXT_KEY)
        if text is None:
            return False
        return text.code.strip() in {"props.children", "children"}


# =============================================================================
# Component
# =============================================================================

@dataclass
class StateValue:
    """A state entry carrying its source code text."""
    code: str
    type: StateValueType = StateValueType.DATA

    def __post_init__(self) -> None:
        self.type = StateValueType(self.type)

    @property
    def is_callable(self) -> bool:
        return self.type in (StateValueType.FUNCTION, StateValueType.METHOD)


@dataclass
class Hook:
    """Lifecycle hook body."""
    code: str


@dataclass
class UpdateHook:
    """An ``onUpdate`` hook body with its declared dependency names."""
    code: str
    deps: List[str] = field(default_factory=list)


@dataclass
class Hooks:
    on_init: Optional[Hook] = None
    on_mount: Optional[Hook] = None
    on_update: List[UpdateHook] = field(default_factory=list)
    on_unmount: Optional[Hook] = None


@dataclass
class RefSpec:
    """A declared ref with optional initial value and type annotation."""
    argument: Optional[str] = None
    type_parameter: Optional[str] = None


@dataclass
class ContextGet:
    """A context read: ``name`` is the context identifier carrying the channel key."""
    name: str
    path: Optional[str] = None


@dataclass
class ContextSet:
    """A context write publishing either a literal value or a reference."""
    name: str
    value: Optional[Dict[str, StateValue]] = None
    ref: Optional[str] = None
    path: Optional[str] = None


@dataclass
class ContextSpec:
    get: Dict[str, ContextGet] = field(default_factory=dict)
    set: List[ContextSet] = field(default_factory=list)


@dataclass
class DeclaredImport:
    """
    An import declared by the component source.

    ``imports`` maps the local name to ``"default"``, ``"*"`` (star) or the
    exported name (named import).
    """
    path: str
    imports: Dict[str, str] = field(default_factory=dict)

    def default_names(self) -> List[str]:
        return [local for local, kind in self.imports.items() if kind == "default"]


@dataclass
class LocalExport:
    """Module-level code exported alongside the component."""
    code: str
    used_in_local: bool = False
    is_function: bool = False


@dataclass
class Component:
    """A complete component IR as produced by an upstream parser."""
    name: str
    children: List[Node] = field(default_factory=list)
    state: Dict[str, StateValue] = field(default_factory=dict)
    props: List[str] = field(default_factory=list)
    props_type_ref: Optional[str] = None
    default_props: Dict[str, str] = field(default_factory=dict)
    refs: Dict[str, RefSpec] = field(default_factory=dict)
    hooks: Hooks = field(default_factory=Hooks)
    context: ContextSpec = field(default_factory=ContextSpec)
    imports: List[DeclaredImport] = field(default_factory=list)
    exports: Dict[str, LocalExport] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)
    types: List[str] = field(default_factory=list)
    css: Optional[str] = None

    def callable_state_names(self) -> List[str]:
        """Names of state entries eligible for bare-name-to-call rewriting."""
        return [name for name, value in self.state.items() if value.is_callable]


__all__ = [
    "BindingType",
    "StateValueType",
    "BuiltInNode",
    "BUILT_IN_NODE_NAMES",
    "TEXT_KEY",
    "INTERNAL_KEY_PREFIX",
    "ELSE_META_KEY",
    "Binding",
    "ForScope",
    "Node",
    "StateValue",
    "Hook",
    "UpdateHook",
    "Hooks",
    "RefSpec",
    "ContextGet",
    "ContextSet",
    "ContextSpec",
    "DeclaredImport",
    "LocalExport",
    "Component",
]
