"""Shared IR builders for Polyview tests."""

from typing import Dict, List, Optional

import pytest

from polyview.ir.spec import (
    Binding,
    BindingType,
    Component,
    ForScope,
    Node,
    StateValue,
    StateValueType,
    TEXT_KEY,
)


class IRBuilder:
    """Small factory for hand-written component IR."""

    @staticmethod
    def text(value: str) -> Node:
        return Node(name="div", properties={TEXT_KEY: value})

    @staticmethod
    def interp(code: str) -> Node:
        return Node(name="div", bindings={TEXT_KEY: Binding(code=code)})

    @staticmethod
    def element(
        name: str,
        *children: Node,
        properties: Optional[Dict[str, str]] = None,
        bindings: Optional[Dict[str, str]] = None,
    ) -> Node:
        return Node(
            name=name,
            properties=dict(properties or {}),
            bindings={key: Binding(code=code) for key, code in (bindings or {}).items()},
            children=list(children),
        )

    @staticmethod
    def event(code: str, argument: str = "event") -> Binding:
        return Binding(code=code, arguments=[argument])

    @staticmethod
    def spread(code: str) -> Binding:
        return Binding(code=code, type=BindingType.SPREAD)

    @staticmethod
    def for_each(each: str, *children: Node, item: str = "item", index: Optional[str] = None) -> Node:
        return Node(
            name="For",
            bindings={"each": Binding(code=each)},
            scope=ForScope(for_name=item, index_name=index),
            children=list(children),
        )

    @staticmethod
    def show(when: str, *children: Node, otherwise: Optional[Node] = None) -> Node:
        meta = {"else": otherwise} if otherwise is not None else {}
        return Node(name="Show", bindings={"when": Binding(code=when)}, children=list(children), meta=meta)

    @staticmethod
    def state(**values: str) -> Dict[str, StateValue]:
        return {name: StateValue(code=code) for name, code in values.items()}

    @staticmethod
    def method(code: str) -> StateValue:
        return StateValue(code=code, type=StateValueType.METHOD)

    @staticmethod
    def component(name: str = "MyComponent", children: Optional[List[Node]] = None, **kwargs) -> Component:
        return Component(name=name, children=list(children or []), **kwargs)


@pytest.fixture
def ir():
    """IR factory helpers."""
    return IRBuilder()


@pytest.fixture
def raw_options():
    """Compile options that skip formatting so output can be matched exactly."""
    return {"format": False}
