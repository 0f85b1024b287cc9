"""
Component intermediate representation (IR) for Polyview.

The IR is produced once per compile request by an upstream parser and is
consumed by every target backend.
"""

from .plugins import Plugin, PluginSet, PipelineStage
from .serialization import component_from_dict, component_to_dict, read_component, write_component
from .spec import (
    Binding,
    BindingType,
    BuiltInNode,
    Component,
    ContextGet,
    ContextSet,
    ContextSpec,
    DeclaredImport,
    ForScope,
    Hook,
    Hooks,
    LocalExport,
    Node,
    RefSpec,
    StateValue,
    StateValueType,
    UpdateHook,
)
from .validation import validate_component, validate_node

__all__ = [
    "Binding",
    "BindingType",
    "BuiltInNode",
    "Component",
    "ContextGet",
    "ContextSet",
    "ContextSpec",
    "DeclaredImport",
    "ForScope",
    "Hook",
    "Hooks",
    "LocalExport",
    "Node",
    "RefSpec",
    "StateValue",
    "StateValueType",
    "UpdateHook",
    "Plugin",
    "PluginSet",
    "PipelineStage",
    "component_from_dict",
    "component_to_dict",
    "read_component",
    "write_component",
    "validate_component",
    "validate_node",
]
