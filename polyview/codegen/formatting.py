"""
Best-effort source formatting.

Formatting is an opaque service: generation must never fail because the
formatter rejected its input. Any formatter exception is logged and the
unformatted source is returned unchanged.
"""

from __future__ import annotations

import logging
from typing import Optional

import jsbeautifier

from polyview.config import Formatter

logger = logging.getLogger(__name__)

TYPESCRIPT_PARSER = "typescript"


def _beautifier_options():
    options = jsbeautifier.default_options()
    options.indent_size = 2
    options.preserve_newlines = True
    options.max_preserve_newlines = 2
    options.end_with_newline = False
    return options


def beautify(source: str, parser: str = TYPESCRIPT_PARSER) -> str:
    """Default formatter backed by ``jsbeautifier``."""
    if parser != TYPESCRIPT_PARSER:
        raise ValueError(f"No formatter registered for parser '{parser}'")
    return jsbeautifier.beautify(source, _beautifier_options())


def try_format(source: str, parser: str = TYPESCRIPT_PARSER, formatter: Optional[Formatter] = None) -> str:
    """
    Format ``source``, falling back to the input on any formatter failure.

    Args:
        source: Unformatted source
        parser: Parser name handed to the formatter
        formatter: Override for the default formatter

    Returns:
        Formatted source, or ``source`` unchanged if formatting failed
    """
    format_fn = formatter or beautify
    try:
        formatted = format_fn(source, parser)
    except Exception as exc:
        logger.warning("Could not format generated %s source: %s", parser, exc)
        return source
    if not isinstance(formatted, str):
        logger.warning("Formatter returned %s instead of text; keeping unformatted source", type(formatted).__name__)
        return source
    return formatted


__all__ = ["TYPESCRIPT_PARSER", "beautify", "try_format"]
