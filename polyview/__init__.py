"""
Polyview - component IR to framework source compiler.

Polyview consumes a framework-agnostic component intermediate representation
and emits equivalent source code for a target UI framework. The current
backend targets Aurelia (v1 and v2).
"""

__version__ = "0.1.0"

from .codegen import compile_component, component_to_aurelia, render_block
from .config import CompileOptions, DEFAULT_OPTIONS, ExperimentalOptions, TargetVersion, merge_options
from .errors import (
    ConfigurationError,
    ImportChannelError,
    MalformedIRError,
    PolyviewError,
    SerializationError,
)

__all__ = [
    "__version__",
    "compile_component",
    "component_to_aurelia",
    "render_block",
    "CompileOptions",
    "DEFAULT_OPTIONS",
    "ExperimentalOptions",
    "TargetVersion",
    "merge_options",
    "PolyviewError",
    "MalformedIRError",
    "ConfigurationError",
    "ImportChannelError",
    "SerializationError",
]
