"""
Context bridge.

Cross-component context reads and writes are lowered onto an event
aggregator: reads subscribe to a channel keyed by the context's key and
store each payload on a local field, writes publish to that channel.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from polyview.ir.spec import Component

from .state import stringify_context_value

GET_CONTEXT_METHOD = "getContext"
SET_CONTEXT_METHOD = "setContext"
AGGREGATOR_FIELD = "eventAggregator"
UNDEFINED_TOKEN = "undefined"


def _identity(code: str) -> str:
    return code


def context_read_code(component: Component) -> str:
    """Subscription statements, one per context read."""
    statements = []
    for local_name, entry in component.context.get.items():
        statements.append(
            f"this.{AGGREGATOR_FIELD}.subscribe({entry.name}.key, (payload) => {{\n"
            f"  this.{local_name} = payload;\n"
            f"}});"
        )
    return "\n".join(statements)


def context_write_code(
    component: Component,
    process_code: Optional[Callable[[str], str]] = None,
) -> str:
    """
    Publish statements, one per context write.

    The published value is the staticized literal value when present, else
    the reference expression, else ``undefined``. Every write publishes on
    ``Context.key``, the channel reads subscribe to.
    """
    process = process_code or _identity
    statements = []
    for entry in component.context.set:
        if entry.value:
            value = process(stringify_context_value(entry.value))
        elif entry.ref:
            value = process(entry.ref)
        else:
            value = UNDEFINED_TOKEN
        statements.append(f"this.{AGGREGATOR_FIELD}.publish({entry.name}.key, {value});")
    return "\n".join(statements)


@dataclass(frozen=True)
class ContextBridge:
    """Generated context plumbing for one component."""

    read_code: str = ""
    write_code: str = ""

    @property
    def has_reads(self) -> bool:
        return bool(self.read_code)

    @property
    def has_writes(self) -> bool:
        return bool(self.write_code)

    @property
    def needs_aggregator_import(self) -> bool:
        return self.has_writes

    def read_method(self) -> str:
        if not self.has_reads:
            return ""
        return f"{GET_CONTEXT_METHOD}() {{\n{self.read_code}\n}}"

    def write_method(self) -> str:
        if not self.has_writes:
            return ""
        return f"{SET_CONTEXT_METHOD}() {{\n{self.write_code}\n}}"

    def mount_calls(self) -> str:
        """Calls placed in the mount lifecycle method, reads first."""
        calls = []
        if self.has_reads:
            calls.append(f"this.{GET_CONTEXT_METHOD}();")
        if self.has_writes:
            calls.append(f"this.{SET_CONTEXT_METHOD}();")
        return "\n".join(calls)


def build_context_bridge(
    component: Component,
    process_code: Optional[Callable[[str], str]] = None,
) -> ContextBridge:
    return ContextBridge(
        read_code=context_read_code(component),
        write_code=context_write_code(component, process_code),
    )


__all__ = [
    "GET_CONTEXT_METHOD",
    "SET_CONTEXT_METHOD",
    "AGGREGATOR_FIELD",
    "UNDEFINED_TOKEN",
    "ContextBridge",
    "context_read_code",
    "context_write_code",
    "build_context_bridge",
]
