"""
Plugin stages for the compile pipeline.

A compile call exposes four fixed extension points. The two IR stages take
and return a :class:`~polyview.ir.spec.Component`; the two code stages take
and return the generated source string.

Key Components:
    - PipelineStage: the four extension points, in execution order
    - Plugin: a bundle of optional transforms, one per stage
    - PluginSet: ordered transforms per stage with stage-typed runners
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional, Tuple

from .spec import Component

logger = logging.getLogger(__name__)

IRTransform = Callable[[Component], Component]
CodeTransform = Callable[[str], str]


class PipelineStage(str, Enum):
    """Extension points in execution order."""
    PRE_IR = "pre_ir"
    POST_IR = "post_ir"
    PRE_CODE = "pre_code"
    POST_CODE = "post_code"


@dataclass(frozen=True)
class Plugin:
    """
    A named bundle of transforms.

    Any subset of the four stages may be provided; missing stages are
    skipped when the plugin is added to a :class:`PluginSet`.
    """

    name: str = "plugin"
    pre_ir: Optional[IRTransform] = None
    post_ir: Optional[IRTransform] = None
    pre_code: Optional[CodeTransform] = None
    post_code: Optional[CodeTransform] = None


@dataclass(frozen=True)
class PluginSet:
    """Ordered transforms per pipeline stage."""

    pre_ir: Tuple[IRTransform, ...] = field(default_factory=tuple)
    post_ir: Tuple[IRTransform, ...] = field(default_factory=tuple)
    pre_code: Tuple[CodeTransform, ...] = field(default_factory=tuple)
    post_code: Tuple[CodeTransform, ...] = field(default_factory=tuple)

    @classmethod
    def from_plugins(cls, plugins: Iterable[Plugin]) -> "PluginSet":
        result = cls()
        for plugin in plugins:
            result = result.add(plugin)
        return result

    def add(self, plugin: Plugin) -> "PluginSet":
        """Return a new set with the plugin's transforms appended to each stage."""
        return PluginSet(
            pre_ir=self.pre_ir + ((plugin.pre_ir,) if plugin.pre_ir else ()),
            post_ir=self.post_ir + ((plugin.post_ir,) if plugin.post_ir else ()),
            pre_code=self.pre_code + ((plugin.pre_code,) if plugin.pre_code else ()),
            post_code=self.post_code + ((plugin.post_code,) if plugin.post_code else ()),
        )

    def transforms_for(self, stage: PipelineStage) -> Tuple[Callable, ...]:
        if stage is PipelineStage.PRE_IR:
            return self.pre_ir
        if stage is PipelineStage.POST_IR:
            return self.post_ir
        if stage is PipelineStage.PRE_CODE:
            return self.pre_code
        if stage is PipelineStage.POST_CODE:
            return self.post_code
        raise ValueError(f"Unknown pipeline stage: {stage!r}")

    def run_ir_stage(self, stage: PipelineStage, component: Component) -> Component:
        """
        Run the IR transforms of ``stage`` in order.

        Transform exceptions propagate unchanged.
        """
        if stage not in (PipelineStage.PRE_IR, PipelineStage.POST_IR):
            raise ValueError(f"{stage.value} is not an IR stage")
        transforms = self.transforms_for(stage)
        logger.debug("Running %d %s transform(s)", len(transforms), stage.value)
        for transform in transforms:
            component = transform(component)
        return component

    def run_code_stage(self, stage: PipelineStage, code: str) -> str:
        """Run the code transforms of ``stage`` in order."""
        if stage not in (PipelineStage.PRE_CODE, PipelineStage.POST_CODE):
            raise ValueError(f"{stage.value} is not a code stage")
        transforms = self.transforms_for(stage)
        logger.debug("Running %d %s transform(s)", len(transforms), stage.value)
        for transform in transforms:
            code = transform(code)
        return code


__all__ = [
    "IRTransform",
    "CodeTransform",
    "PipelineStage",
    "Plugin",
    "PluginSet",
]
