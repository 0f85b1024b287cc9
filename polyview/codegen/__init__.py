"""Code generation package: shared infrastructure plus one subpackage per target."""

from .aurelia import compile_component, component_to_aurelia, render_block

__all__ = ["compile_component", "component_to_aurelia", "render_block"]
