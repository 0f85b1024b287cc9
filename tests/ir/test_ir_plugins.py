"""
Tests for pipeline stages and plugin sets.
"""

import pytest

from polyview.ir.plugins import PipelineStage, Plugin, PluginSet


def test_plugin_set_appends_transforms_per_stage():
    """Adding plugins keeps per-stage order and skips missing stages."""
    first = Plugin(name="first", pre_code=lambda code: code + "1")
    second = Plugin(name="second", pre_code=lambda code: code + "2", post_code=str.upper)

    plugins = PluginSet.from_plugins([first, second])

    assert len(plugins.pre_code) == 2
    assert len(plugins.post_code) == 1
    assert plugins.pre_ir == ()
    assert plugins.run_code_stage(PipelineStage.PRE_CODE, "x") == "x12"
    assert plugins.run_code_stage(PipelineStage.POST_CODE, "x") == "X"


def test_add_returns_new_set():
    """PluginSet is immutable; add() leaves the original untouched."""
    base = PluginSet()
    extended = base.add(Plugin(post_ir=lambda component: component))
    assert base.post_ir == ()
    assert len(extended.post_ir) == 1


def test_ir_stage_runs_in_order(ir):
    """IR transforms receive the previous transform's result."""
    def rename(component):
        component.name = component.name + "A"
        return component

    def rename_again(component):
        component.name = component.name + "B"
        return component

    plugins = PluginSet(pre_ir=(rename, rename_again))
    result = plugins.run_ir_stage(PipelineStage.PRE_IR, ir.component("X"))
    assert result.name == "XAB"


def test_empty_stage_is_noop(ir):
    """An absent transform list leaves the input unchanged."""
    component = ir.component()
    assert PluginSet().run_ir_stage(PipelineStage.POST_IR, component) is component
    assert PluginSet().run_code_stage(PipelineStage.POST_CODE, "code") == "code"


def test_stage_kind_is_enforced(ir):
    """Code stages cannot run IR and vice versa."""
    with pytest.raises(ValueError):
        PluginSet().run_ir_stage(PipelineStage.PRE_CODE, ir.component())
    with pytest.raises(ValueError):
        PluginSet().run_code_stage(PipelineStage.PRE_IR, "code")


def test_plugin_exceptions_propagate():
    """A failing transform aborts the stage with its own exception."""
    def boom(code):
        raise RuntimeError("plugin failed")

    with pytest.raises(RuntimeError, match="plugin failed"):
        PluginSet(post_code=(boom,)).run_code_stage(PipelineStage.POST_CODE, "x")
