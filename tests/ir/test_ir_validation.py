"""
Tests for fail-fast IR validation.
"""

import pytest

from polyview.errors import MalformedIRError
from polyview.ir.spec import Binding, ContextGet, ContextSpec, DeclaredImport, Node
from polyview.ir.validation import validate_component, validate_node


def test_valid_component_passes(ir):
    """A well-formed tree validates silently."""
    component = ir.component(
        children=[ir.for_each("state.items", ir.interp("item")), ir.show("x", otherwise=ir.text("no"))]
    )
    validate_component(component)


def test_component_without_name(ir):
    """An empty component name is malformed."""
    with pytest.raises(MalformedIRError) as excinfo:
        validate_component(ir.component(name=" "))
    assert excinfo.value.code == "IR001"


def test_node_without_name(ir):
    """Nested nodes must be named; the error reports the parent path."""
    tree = ir.element("div", Node(name=""))
    with pytest.raises(MalformedIRError, match="div"):
        validate_node(tree)


def test_for_without_iterable():
    """A For node needs an ``each`` binding."""
    with pytest.raises(MalformedIRError) as excinfo:
        validate_node(Node(name="For", bindings={"each": Binding(code="  ")}))
    assert excinfo.value.hint


def test_else_branch_must_be_node(ir):
    """A non-node else branch is rejected."""
    with pytest.raises(MalformedIRError, match="Else branch"):
        validate_node(Node(name="Show", meta={"else": {"name": "div"}}))


def test_missing_context_and_import_names(ir):
    """Context entries and imports need identifying names."""
    component = ir.component(
        context=ContextSpec(get={"theme": ContextGet(name="")}),
        imports=[DeclaredImport(path="")],
    )
    with pytest.raises(MalformedIRError) as excinfo:
        validate_component(component)
    message = str(excinfo.value)
    assert "context read 'theme'" in message
    assert "import #0" in message


def test_error_format_includes_code_and_hint():
    """format() renders message, code and hint on one line."""
    error = MalformedIRError("Broken", hint="Fix it")
    assert error.format() == "Broken (IR001) Hint: Fix it"
