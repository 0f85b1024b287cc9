"""
Tests for compile option merging and the best-effort formatter.
"""

import logging

import pytest

from polyview.codegen.formatting import beautify, try_format
from polyview.config import (
    DEFAULT_OPTIONS,
    CompileOptions,
    ExperimentalOptions,
    TargetVersion,
    merge_options,
)
from polyview.errors import ConfigurationError
from polyview.ir.plugins import PluginSet


# =============================================================================
# OPTIONS
# =============================================================================


def test_defaults():
    """Default options target Aurelia v1 with formatting on."""
    assert DEFAULT_OPTIONS.target_version is TargetVersion.V1
    assert DEFAULT_OPTIONS.preserve_imports is True
    assert DEFAULT_OPTIONS.preserve_file_extensions is False
    assert DEFAULT_OPTIONS.format is True
    assert DEFAULT_OPTIONS.suppressed is False


def test_merge_mapping_returns_new_options():
    """Merging never mutates the default snapshot."""
    merged = merge_options(DEFAULT_OPTIONS, {"target_version": "2", "format": False})
    assert merged.target_version is TargetVersion.V2
    assert merged.format is False
    assert DEFAULT_OPTIONS.target_version is TargetVersion.V1
    assert DEFAULT_OPTIONS.format is True


def test_merge_accepts_none_and_options_objects():
    """None keeps the base; an options object replaces it."""
    custom = CompileOptions(format=False)
    assert merge_options(DEFAULT_OPTIONS, None) is DEFAULT_OPTIONS
    assert merge_options(DEFAULT_OPTIONS, custom) is custom


def test_merge_converts_nested_mappings():
    """Experimental and plugin mappings become their typed counterparts."""
    upper = str.upper
    merged = merge_options(
        DEFAULT_OPTIONS,
        {"experimental": {"inject": True}, "plugins": {"post_code": [upper]}},
    )
    assert merged.experimental == ExperimentalOptions(inject=True)
    assert merged.plugins == PluginSet(post_code=(upper,))


def test_unknown_option_is_rejected():
    """Unknown keys raise ConfigurationError with a hint."""
    with pytest.raises(ConfigurationError) as excinfo:
        merge_options(DEFAULT_OPTIONS, {"prettier": False})
    assert "prettier" in str(excinfo.value)
    assert excinfo.value.code == "CFG001"

    with pytest.raises(ConfigurationError):
        merge_options(DEFAULT_OPTIONS, {"plugins": {"pre_json": []}})
    with pytest.raises(ConfigurationError):
        merge_options(DEFAULT_OPTIONS, {"experimental": {"standalone": True}})


def test_unknown_target_version():
    """Target versions are an exhaustive enumeration."""
    assert TargetVersion.parse(1) is TargetVersion.V1
    with pytest.raises(ConfigurationError):
        TargetVersion.parse("3")


# =============================================================================
# FORMATTING
# =============================================================================


def test_beautify_indents_class_body():
    """The default formatter re-indents TypeScript source."""
    formatted = beautify("export class A {\nfoo() {\nreturn 1;\n}\n}")
    assert "  foo() {" in formatted
    assert "    return 1;" in formatted


def test_beautify_rejects_unknown_parser():
    """Only the TypeScript parser is registered."""
    with pytest.raises(ValueError):
        beautify("a", "scss")


def test_try_format_falls_back_on_failure(caplog):
    """A failing formatter yields the input and a warning."""
    def broken(source, parser):
        raise SyntaxError("unexpected token")

    with caplog.at_level(logging.WARNING, logger="polyview.codegen.formatting"):
        result = try_format("const a = ;", formatter=broken)

    assert result == "const a = ;"
    assert "unexpected token" in caplog.text


def test_try_format_ignores_non_text_result():
    """A formatter returning a non-string keeps the input."""
    assert try_format("x", formatter=lambda source, parser: None) == "x"


def test_try_format_uses_custom_formatter():
    """A custom formatter receives the parser name."""
    calls = []

    def formatter(source, parser):
        calls.append(parser)
        return source.strip()

    assert try_format("  x  ", formatter=formatter) == "x"
    assert calls == ["typescript"]
