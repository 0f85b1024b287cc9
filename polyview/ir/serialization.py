"""
IR serialization - JSON import/export for component IR.

Upstream parsers emit components as JSON with camelCase keys. These helpers
convert that shape into the dataclasses in :mod:`polyview.ir.spec` and back.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from polyview.errors import SerializationError

from .spec import (
    Binding,
    BindingType,
    Component,
    ContextGet,
    ContextSet,
    ContextSpec,
    DeclaredImport,
    ELSE_META_KEY,
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


# =============================================================================
# Decoding
# =============================================================================

def _hook(data: Optional[Dict[str, Any]]) -> Optional[Hook]:
    if not data or not data.get("code"):
        return None
    return Hook(code=data["code"])


def _state_value(data: Dict[str, Any]) -> StateValue:
    try:
        kind = StateValueType(data.get("type", "data"))
    except ValueError as exc:
        raise SerializationError(f"Unknown state value type: {data.get('type')!r}") from exc
    return StateValue(code=str(data.get("code", "")), type=kind)


def _binding(data: Dict[str, Any]) -> Binding:
    try:
        kind = BindingType(data.get("type", "normal"))
    except ValueError as exc:
        raise SerializationError(f"Unknown binding type: {data.get('type')!r}") from exc
    return Binding(
        code=str(data.get("code", "")),
        raw_code=data.get("rawCode"),
        type=kind,
        arguments=data.get("arguments"),
    )


def node_from_dict(data: Dict[str, Any]) -> Node:
    """Build a :class:`Node` from its JSON-compatible form."""
    if not isinstance(data, dict):
        raise SerializationError(f"Expected a node object, got {type(data).__name__}")
    scope = data.get("scope") or {}
    meta = dict(data.get("meta") or {})
    if isinstance(meta.get(ELSE_META_KEY), dict):
        meta[ELSE_META_KEY] = node_from_dict(meta[ELSE_META_KEY])
    return Node(
        name=data.get("name", ""),
        properties={key: str(value) for key, value in (data.get("properties") or {}).items()},
        bindings={
            key: _binding(value)
            for key, value in (data.get("bindings") or {}).items()
            if value is not None
        },
        children=[node_from_dict(child) for child in data.get("children") or []],
        scope=ForScope(
            for_name=scope.get("forName"),
            index_name=scope.get("indexName"),
            collection_name=scope.get("collectionName"),
        ),
        meta=meta,
    )


def component_from_dict(data: Dict[str, Any]) -> Component:
    """
    Build a :class:`Component` from its JSON-compatible form.

    Args:
        data: JSON-deserialized dictionary

    Returns:
        Component instance

    Raises:
        SerializationError: If a field has an unexpected shape
    """
    if not isinstance(data, dict):
        raise SerializationError(f"Expected a component object, got {type(data).__name__}")

    hooks_data = data.get("hooks") or {}
    on_update = hooks_data.get("onUpdate") or []
    if isinstance(on_update, dict):
        on_update = [on_update]
    hooks = Hooks(
        on_init=_hook(hooks_data.get("onInit")),
        on_mount=_hook(hooks_data.get("onMount")),
        on_update=[
            UpdateHook(code=item.get("code", ""), deps=list(item.get("deps") or []))
            for item in on_update
        ],
        on_unmount=_hook(hooks_data.get("onUnMount") or hooks_data.get("onUnmount")),
    )

    context_data = data.get("context") or {}
    raw_set = context_data.get("set") or []
    if isinstance(raw_set, dict):
        raw_set = list(raw_set.values())
    context = ContextSpec(
        get={
            key: ContextGet(name=value.get("name", ""), path=value.get("path"))
            for key, value in (context_data.get("get") or {}).items()
        },
        set=[
            ContextSet(
                name=item.get("name", ""),
                value=(
                    {key: _state_value(value) for key, value in item["value"].items()}
                    if item.get("value")
                    else None
                ),
                ref=item.get("ref"),
                path=item.get("path"),
            )
            for item in raw_set
        ],
    )

    props = data.get("props") or []
    if isinstance(props, dict):
        props = list(props)
    default_props = {
        key: (value.get("code") if isinstance(value, dict) else str(value))
        for key, value in (data.get("defaultProps") or {}).items()
    }
    props_type_ref = data.get("propsTypeRef")
    if props_type_ref == "any":
        props_type_ref = None

    return Component(
        name=data.get("name", ""),
        children=[node_from_dict(child) for child in data.get("children") or []],
        state={key: _state_value(value) for key, value in (data.get("state") or {}).items()},
        props=list(props),
        props_type_ref=props_type_ref,
        default_props=default_props,
        refs={
            key: RefSpec(argument=value.get("argument"), type_parameter=value.get("typeParameter"))
            for key, value in (data.get("refs") or {}).items()
        },
        hooks=hooks,
        context=context,
        imports=[
            DeclaredImport(path=item.get("path", ""), imports=dict(item.get("imports") or {}))
            for item in data.get("imports") or []
        ],
        exports={
            key: LocalExport(
                code=value.get("code", ""),
                used_in_local=bool(value.get("usedInLocal")),
                is_function=bool(value.get("isFunction")),
            )
            for key, value in (data.get("exports") or {}).items()
        },
        meta=dict(data.get("meta") or {}),
        types=list(data.get("types") or []),
        css=data.get("css"),
    )


# =============================================================================
# Encoding
# =============================================================================

def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def node_to_dict(node: Node) -> Dict[str, Any]:
    meta = dict(node.meta)
    if isinstance(meta.get(ELSE_META_KEY), Node):
        meta[ELSE_META_KEY] = node_to_dict(meta[ELSE_META_KEY])
    return {
        "name": node.name,
        "properties": dict(node.properties),
        "bindings": {
            key: _drop_none(
                {
                    "code": binding.code,
                    "rawCode": binding.raw_code if binding.raw_code != binding.code else None,
                    "type": binding.type.value,
                    "arguments": binding.arguments,
                }
            )
            for key, binding in node.bindings.items()
        },
        "children": [node_to_dict(child) for child in node.children],
        "scope": _drop_none(
            {
                "forName": node.scope.for_name,
                "indexName": node.scope.index_name,
                "collectionName": node.scope.collection_name,
            }
        ),
        "meta": meta,
    }


def component_to_dict(component: Component) -> Dict[str, Any]:
    """Serialize a component to its JSON-compatible form."""
    hooks = component.hooks
    return {
        "name": component.name,
        "children": [node_to_dict(child) for child in component.children],
        "state": {
            key: {"code": value.code, "type": value.type.value}
            for key, value in component.state.items()
        },
        "props": list(component.props),
        "propsTypeRef": component.props_type_ref,
        "defaultProps": {key: {"code": code} for key, code in component.default_props.items()},
        "refs": {
            key: _drop_none({"argument": ref.argument, "typeParameter": ref.type_parameter})
            for key, ref in component.refs.items()
        },
        "hooks": _drop_none(
            {
                "onInit": {"code": hooks.on_init.code} if hooks.on_init else None,
                "onMount": {"code": hooks.on_mount.code} if hooks.on_mount else None,
                "onUpdate": [{"code": item.code, "deps": list(item.deps)} for item in hooks.on_update],
                "onUnMount": {"code": hooks.on_unmount.code} if hooks.on_unmount else None,
            }
        ),
        "context": {
            "get": {
                key: _drop_none({"name": entry.name, "path": entry.path})
                for key, entry in component.context.get.items()
            },
            "set": [
                _drop_none(
                    {
                        "name": entry.name,
                        "value": (
                            {key: {"code": v.code, "type": v.type.value} for key, v in entry.value.items()}
                            if entry.value
                            else None
                        ),
                        "ref": entry.ref,
                        "path": entry.path,
                    }
                )
                for entry in component.context.set
            ],
        },
        "imports": [{"path": item.path, "imports": dict(item.imports)} for item in component.imports],
        "exports": {
            key: {"code": value.code, "usedInLocal": value.used_in_local, "isFunction": value.is_function}
            for key, value in component.exports.items()
        },
        "meta": dict(component.meta),
        "types": list(component.types),
        "css": component.css,
    }


def read_component(path: Union[str, Path]) -> Component:
    """
    Read a component from a JSON file.

    Args:
        path: Input file path

    Returns:
        Component instance
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise SerializationError(f"{path} is not valid JSON: {exc}") from exc
    return component_from_dict(data)


def write_component(component: Component, path: Union[str, Path]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(component_to_dict(component), f, indent=2)


__all__ = [
    "node_from_dict",
    "node_to_dict",
    "component_from_dict",
    "component_to_dict",
    "read_component",
    "write_component",
]
