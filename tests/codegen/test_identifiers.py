"""
Tests for the identifier rewriter.
"""

from polyview.codegen.identifiers import (
    receptor_for,
    relocate_identifiers,
    rename_event_argument,
    replace_identifiers,
    rewrite_code,
    strip_state_and_props,
)


# =============================================================================
# STATE / PROPS STRIPPING
# =============================================================================


def test_strip_state_and_props_to_bare_names():
    """``state.x`` and ``props.x`` become ``x`` by default."""
    assert strip_state_and_props("state.count + props.step") == "count + step"


def test_strip_state_and_props_with_prefix():
    """A string replacement is used as a prefix."""
    assert strip_state_and_props("state.count++", "this.") == "this.count++"


def test_strip_state_and_props_leaves_strings_and_members():
    """String literals and deeper member chains keep their text."""
    code = "log('state.count', other.state.count, state.count)"
    assert strip_state_and_props(code, "this.") == "log('state.count', other.state.count, this.count)"


def test_receptor_routes_children_to_slot():
    """``props.children`` goes to the default-slot receptor."""
    replace = receptor_for("this.", "$$slots.default")
    assert strip_state_and_props("props.children || props.label", replace) == "$$slots.default || this.label"


# =============================================================================
# RELOCATION
# =============================================================================


def test_relocate_skips_longer_identifiers_and_members():
    """Only whole, free identifiers are relocated."""
    code = "count + counter + obj.count + count_2"
    assert relocate_identifiers(code, ["count"]) == "this.count + counter + obj.count + count_2"


def test_relocate_skips_declarations_and_object_keys():
    """Declared names and object-literal keys are not references."""
    code = "const name = 1; const o = { name: name }"
    assert relocate_identifiers(code, ["name"]) == "const name = 1; const o = { name: this.name }"


def test_relocate_skips_method_definition_head():
    """A snippet that defines a method keeps its own name."""
    code = "greet() { return greet2() }"
    assert relocate_identifiers(code, ["greet"]) == code
    assert relocate_identifiers("greet();", ["greet"]) == "this.greet();"


def test_relocate_skips_getter_names():
    """``get name()`` declares an accessor."""
    code = "get fullName() { return fullName }"
    assert relocate_identifiers(code, ["fullName"]) == "get fullName() { return this.fullName }"


def test_replace_identifiers_with_callable():
    """Replacement is computed per name."""
    code = replace_identifiers("a + b", ["a", "b"], lambda name: name.upper())
    assert code == "A + B"


def test_rewrite_code_relocates_members_then_strips_prefixes():
    """Context, output, ref and state names move onto the instance."""
    code = "theme.color; onSave(); inputRef.focus(); state.name; props.title"
    result = rewrite_code(
        code,
        context_vars=["theme"],
        output_vars=["onSave"],
        dom_refs=["inputRef"],
        state_vars=["name"],
        replace_with="this.",
    )
    assert result == "this.theme.color; this.onSave(); this.inputRef.focus(); this.name; this.title"


def test_rewrite_code_without_prefix_strips_only():
    """Without replace_with, state/props access is reduced to bare names."""
    assert rewrite_code("state.a + props.b") == "a + b"


# =============================================================================
# EVENT ARGUMENTS
# =============================================================================


def test_rename_event_argument_is_boundary_aware():
    """The event parameter is renamed without touching longer identifiers."""
    code = "state.value = event.target.value; eventCount++; (event)"
    assert rename_event_argument(code, "event", "$event") == (
        "state.value = $event.target.value; eventCount++; ($event)"
    )


def test_rename_event_argument_skips_strings():
    """Occurrences inside string literals are untouched."""
    assert rename_event_argument("log('e', e)", "e", "$event") == "log('e', $event)"
