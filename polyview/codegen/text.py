"""Shared text helpers for template and code generation."""

from __future__ import annotations

import re

SLOT_PREFIX = "slot"

_WORDS = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z0-9]+|[A-Z]+[0-9]*|[0-9]+")
_SLOT_KEY = re.compile(r"^slot[A-Z0-9_-]")

VALID_HTML_TAGS = frozenset(
    """
    a abbr address area article aside audio b base bdi bdo blockquote body br
    button canvas caption cite code col colgroup data datalist dd del details
    dfn dialog div dl dt em embed fieldset figcaption figure footer form h1 h2
    h3 h4 h5 h6 head header hgroup hr html i iframe img input ins kbd label
    legend li link main map mark menu meta meter nav noscript object ol
    optgroup option output p param picture pre progress q rp rt ruby s samp
    script section select slot small source span strong style sub summary sup
    table tbody td template textarea tfoot th thead time title tr track u ul
    var video wbr svg path circle rect line polyline polygon g defs use text
    """.split()
)

SELF_CLOSING_TAGS = frozenset(
    "area base br col embed hr img input link meta param source track wbr".split()
)


def kebab_case(value: str) -> str:
    """``MyButton`` -> ``my-button``; digits stay attached (``h1`` -> ``h1``)."""
    return "-".join(word.lower() for word in _WORDS.findall(value))


def is_slot_property(key: str) -> bool:
    return bool(_SLOT_KEY.match(key))


def strip_slot_prefix(key: str) -> str:
    return key[len(SLOT_PREFIX):] if is_slot_property(key) else key


def slot_selector(key: str) -> str:
    return kebab_case(strip_slot_prefix(key))


def indent(text: str, spaces: int = 2) -> str:
    """Indent every line after the first by ``spaces``."""
    pad = " " * spaces
    return re.sub(r"\n([^\n])", lambda match: "\n" + pad + match.group(1), text)


def remove_surrounding_block(code: str) -> str:
    """Strip one layer of wrapping ``{ ... }`` from a statement block."""
    stripped = code.strip()
    if stripped.startswith("{") and stripped.endswith("}"):
        return stripped[1:-1].strip()
    return code


def encode_quotes(value: str) -> str:
    return value.replace('"', "&quot;")


__all__ = [
    "SLOT_PREFIX",
    "VALID_HTML_TAGS",
    "SELF_CLOSING_TAGS",
    "kebab_case",
    "is_slot_property",
    "strip_slot_prefix",
    "slot_selector",
    "indent",
    "remove_surrounding_block",
    "encode_quotes",
]
