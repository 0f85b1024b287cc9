"""Values threaded through template rendering."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple


class CallLocation(str, Enum):
    """Where in the recursion a node is being rendered."""
    START = "start"
    TEMPLATE_ROOT = "template-root"
    FOR = "for"
    SHOW = "show"
    ELSE = "else"
    FRAGMENT = "fragment"
    SLOT = "slot"
    CHILDREN = "children"


@dataclass(frozen=True)
class BlockContext:
    """
    Immutable rendering context passed down the node tree.

    Attributes:
        call_location: Call site of the current node
        index_names: Loop index variables in scope, replaced by the index token
        callable_names: ``function``/``method`` state names, called when used as handlers
    """
    call_location: CallLocation = CallLocation.START
    index_names: Tuple[str, ...] = ()
    callable_names: Tuple[str, ...] = ()

    def at(self, location: CallLocation) -> "BlockContext":
        return dataclasses.replace(self, call_location=location)

    def with_index(self, name: str) -> "BlockContext":
        if not name or name in self.index_names:
            return self
        return dataclasses.replace(self, index_names=self.index_names + (name,))


@dataclass(frozen=True)
class BlockResult:
    """Rendered text plus the spread sources discovered in the subtree."""
    text: str
    spreads: Tuple[str, ...] = ()

    @staticmethod
    def merge_spreads(*groups: Iterable[str]) -> Tuple[str, ...]:
        merged = []
        for group in groups:
            for spread in group:
                if spread not in merged:
                    merged.append(spread)
        return tuple(merged)


__all__ = ["CallLocation", "BlockContext", "BlockResult"]
