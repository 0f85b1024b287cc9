"""Aurelia backend: view markup walker plus the component module generator."""

from .blocks import render_block, render_block_result
from .generator import AureliaGenerator, compile_component, component_to_aurelia

__all__ = [
    "AureliaGenerator",
    "compile_component",
    "component_to_aurelia",
    "render_block",
    "render_block_result",
]
