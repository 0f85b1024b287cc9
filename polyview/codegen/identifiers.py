"""
Identifier rewriting for generated code.

Component code arrives written against ``state.x`` / ``props.x`` and bare
context, ref and method names. Class-based targets need those references
relocated onto the owning instance (``this.x``), while templates need them
stripped to the bare field name. Everything here is a pure text transform
that leaves string literals untouched.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Iterator, Optional, Tuple, Union

ReplaceWith = Union[str, Callable[[str], str]]

_STATE_OR_PROPS = re.compile(r"(?<![\w$.])(state|props)\.([A-Za-z_$][\w$]*)")
_DECLARATION_TAIL = re.compile(r"\b(?:const|let|var|function|class|get|set|async)\s+$")
_METHOD_HEAD = re.compile(r"\s*\([^()]*\)\s*(?::[^{;]+)?\{")
_OBJECT_KEY_HEAD = re.compile(r"\s*:(?!:)")
_OBJECT_KEY_TAIL = re.compile(r"[{,]\s*$")

CHILDREN_NAME = "children"


def _segments(code: str) -> Iterator[Tuple[bool, str]]:
    """Split code into ``(is_string_literal, text)`` runs for ' and " literals."""
    start = 0
    index = 0
    length = len(code)
    while index < length:
        char = code[index]
        if char in ("'", '"'):
            if index > start:
                yield False, code[start:index]
            end = index + 1
            while end < length and code[end] != char:
                if code[end] == "\\":
                    end += 1
                elif code[end] == "\n":
                    break
                end += 1
            end = min(end + 1, length)
            yield True, code[index:end]
            start = index = end
            continue
        index += 1
    if start < length:
        yield False, code[start:]


def _sub_outside_strings(code: str, pattern: "re.Pattern[str]", repl: Callable) -> str:
    return "".join(
        text if is_string else pattern.sub(lambda match: repl(match, text), text)
        for is_string, text in _segments(code)
    )


def identifier_pattern(name: str) -> "re.Pattern[str]":
    """Match ``name`` as a whole identifier that is not a member access."""
    return re.compile(r"(?<![\w$.])" + re.escape(name) + r"(?![\w$])")


def _is_binding_position(text: str, start: int, end: int) -> bool:
    before = text[:start]
    if _DECLARATION_TAIL.search(before):
        return True
    if not before.strip() and _METHOD_HEAD.match(text, end):
        return True
    return bool(_OBJECT_KEY_HEAD.match(text, end) and _OBJECT_KEY_TAIL.search(before))


def strip_state_and_props(code: str, replace_with: ReplaceWith = "") -> str:
    """
    Replace ``state.x`` and ``props.x`` references.

    Args:
        code: Source snippet
        replace_with: Prefix placed before the bare name, or a callable
            receiving the bare name and returning its replacement

    Returns:
        Rewritten snippet
    """
    if not code:
        return code

    def repl(match: "re.Match[str]", _text: str) -> str:
        name = match.group(2)
        if callable(replace_with):
            return replace_with(name)
        return f"{replace_with}{name}"

    return _sub_outside_strings(code, _STATE_OR_PROPS, repl)


def replace_identifiers(code: str, names: Iterable[str], to: Callable[[str], str]) -> str:
    """Rewrite standalone occurrences of each name with ``to(name)``."""
    for name in names:
        if not name:
            continue
        pattern = identifier_pattern(name)
        code = _sub_outside_strings(
            code,
            pattern,
            lambda match, text, name=name: (
                match.group(0)
                if _is_binding_position(text, match.start(), match.end())
                else to(name)
            ),
        )
    return code


def relocate_identifiers(code: str, names: Iterable[str], prefix: str = "this.") -> str:
    """Prefix free references to ``names`` with the instance receptor."""
    return replace_identifiers(code, names, lambda name: f"{prefix}{name}")


def rewrite_code(
    code: str,
    *,
    context_vars: Iterable[str] = (),
    output_vars: Iterable[str] = (),
    dom_refs: Iterable[str] = (),
    state_vars: Iterable[str] = (),
    replace_with: Optional[ReplaceWith] = None,
    instance_prefix: str = "this.",
) -> str:
    """
    Relocate every reference a snippet makes to component members.

    Context, output, DOM ref and state names are moved onto the instance
    first; ``state.x``/``props.x`` are then rewritten with ``replace_with``
    (stripped to the bare name when it is None).
    """
    if not code:
        return code
    names = list(dict.fromkeys([*context_vars, *output_vars, *dom_refs, *state_vars]))
    code = relocate_identifiers(code, names, instance_prefix)
    return strip_state_and_props(code, replace_with if replace_with is not None else "")


def receptor_for(prefix: str, children_receptor: str) -> Callable[[str], str]:
    """A ``replace_with`` callable routing ``children`` to an alternate receptor."""

    def replace(name: str) -> str:
        return children_receptor if name == CHILDREN_NAME else f"{prefix}{name}"

    return replace


def rename_event_argument(code: str, argument: str, token: str) -> str:
    """Rename a callback's event parameter without touching longer identifiers."""
    pattern = identifier_pattern(argument)
    return _sub_outside_strings(code, pattern, lambda match, _text: token)


__all__ = [
    "CHILDREN_NAME",
    "identifier_pattern",
    "strip_state_and_props",
    "replace_identifiers",
    "relocate_identifiers",
    "rewrite_code",
    "receptor_for",
    "rename_event_argument",
]
