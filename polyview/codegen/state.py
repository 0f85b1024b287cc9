"""Rendering of component state as class members or object literals."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from polyview.ir.spec import Component, StateValue, StateValueType

ValueMapper = Callable[[str], str]


def _identity(code: str) -> str:
    return code


def _class_member(name: str, value: StateValue, mapper: ValueMapper) -> str:
    code = mapper(value.code)
    if value.type in (StateValueType.METHOD, StateValueType.GETTER):
        # methods and getters carry their own signature
        return code
    return f"{name} = {code};"


def state_class_members(
    component: Component,
    value_mapper: Optional[ValueMapper] = None,
) -> str:
    """Render the state block as class fields, methods and getters."""
    mapper = value_mapper or _identity
    return "\n".join(
        _class_member(name, value, mapper) for name, value in component.state.items()
    )


def _literal_member(name: str, value: StateValue, mapper: ValueMapper) -> str:
    code = mapper(value.code)
    if value.type in (StateValueType.METHOD, StateValueType.GETTER):
        return code
    return f"{name}: {code}"


def stringify_context_value(
    value: Dict[str, StateValue],
    value_mapper: Optional[ValueMapper] = None,
) -> str:
    """Render a literal context value as a static object literal."""
    mapper = value_mapper or _identity
    members: List[str] = [_literal_member(name, item, mapper) for name, item in value.items()]
    if not members:
        return "{}"
    return "{\n" + ",\n".join(members) + "\n}"


__all__ = ["state_class_members", "stringify_context_value"]
