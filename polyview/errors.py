"""Unified error model for Polyview."""

from __future__ import annotations

from typing import Optional


class PolyviewError(Exception):
    """Base class for all compiler errors surfaced to callers."""

    code: Optional[str] = None
    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if hint is not None:
            self.hint = hint

    def format(self) -> str:
        components = [self.message]
        if self.code:
            components[-1] = f"{components[-1]} ({self.code})"
        if self.hint:
            components.append(f"Hint: {self.hint}")
        return " ".join(part for part in components if part)


class MalformedIRError(PolyviewError):
    """Raised when a component or node is missing a required field."""

    code = "IR001"


class ConfigurationError(PolyviewError):
    """Raised when compile options cannot be merged or resolved."""

    code = "CFG001"


class ImportChannelError(PolyviewError):
    """Raised when a structured import record on the import channel cannot be decoded."""

    code = "IMP001"


class SerializationError(PolyviewError):
    """Raised when serialized IR cannot be converted into dataclasses."""

    code = "SER001"


__all__ = [
    "PolyviewError",
    "MalformedIRError",
    "ConfigurationError",
    "ImportChannelError",
    "SerializationError",
]
