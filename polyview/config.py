"""Compile options for Polyview generators."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Union

from .errors import ConfigurationError
from .ir.plugins import PluginSet
from .ir.spec import Component, DeclaredImport


class TargetVersion(str, Enum):
    """Target framework generations a backend can emit."""
    V1 = "1"
    V2 = "2"

    @classmethod
    def parse(cls, value: Union[str, int, "TargetVersion"]) -> "TargetVersion":
        if isinstance(value, TargetVersion):
            return value
        try:
            return cls(str(value))
        except ValueError as exc:
            choices = ", ".join(item.value for item in cls)
            raise ConfigurationError(
                f"Unknown target version: {value!r}",
                hint=f"Choose one of: {choices}",
            ) from exc


# (component, declared import, default import statement, components used, path) -> text
ImportMapper = Callable[[Component, DeclaredImport, str, List[str], str], str]

# (source, parser name) -> formatted source
Formatter = Callable[[str, str], str]


@dataclass(frozen=True)
class ExperimentalOptions:
    """Overrides for dependency-injection and event-output code shapes."""

    injectables: Optional[Callable[[str, str], str]] = None
    inject: bool = False
    outputs: Optional[Callable[[Component, str], str]] = None


@dataclass(frozen=True)
class CompileOptions:
    """
    Options recognized by a compile call.

    Instances are immutable; use :func:`merge_options` to derive a new set.
    Without an ``import_mapper`` generators emit one structured import
    record per declared import.
    ``suppressed`` is an explicit reentrancy switch for callers that invoke a
    generator while building diagnostics and need an empty result.
    """

    target_version: TargetVersion = TargetVersion.V1
    preserve_imports: bool = True
    preserve_file_extensions: bool = False
    import_mapper: Optional[ImportMapper] = None
    experimental: ExperimentalOptions = field(default_factory=ExperimentalOptions)
    plugins: PluginSet = field(default_factory=PluginSet)
    format: bool = True
    formatter: Optional[Formatter] = None
    suppressed: bool = False


DEFAULT_OPTIONS = CompileOptions()

_FIELD_NAMES = frozenset(item.name for item in dataclasses.fields(CompileOptions))


def merge_options(
    base: CompileOptions = DEFAULT_OPTIONS,
    overrides: Union[CompileOptions, Mapping[str, Any], None] = None,
) -> CompileOptions:
    """
    Merge per-call overrides onto ``base`` without mutating either.

    Args:
        base: Options to start from (usually :data:`DEFAULT_OPTIONS`)
        overrides: Another options object, a mapping of field names, or None

    Returns:
        A new :class:`CompileOptions`

    Raises:
        ConfigurationError: If a mapping names an unknown option
    """
    if overrides is None:
        return base
    if isinstance(overrides, CompileOptions):
        return overrides
    unknown = sorted(set(overrides) - _FIELD_NAMES)
    if unknown:
        raise ConfigurationError(
            f"Unknown compile option(s): {', '.join(unknown)}",
            hint=f"Recognized options: {', '.join(sorted(_FIELD_NAMES))}",
        )
    values = dict(overrides)
    if "target_version" in values:
        values["target_version"] = TargetVersion.parse(values["target_version"])
    if isinstance(values.get("experimental"), Mapping):
        experimental = values["experimental"]
        _check_keys("experimental", experimental, ExperimentalOptions)
        values["experimental"] = dataclasses.replace(base.experimental, **experimental)
    if isinstance(values.get("plugins"), Mapping):
        plugins = values["plugins"]
        _check_keys("plugin stage", plugins, PluginSet)
        values["plugins"] = PluginSet(
            **{stage: tuple(transforms or ()) for stage, transforms in plugins.items()}
        )
    return dataclasses.replace(base, **values)


def _check_keys(kind: str, values: Mapping[str, Any], cls: type) -> None:
    known = {item.name for item in dataclasses.fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown {kind} option(s): {', '.join(unknown)}",
            hint=f"Recognized options: {', '.join(sorted(known))}",
        )


__all__ = [
    "TargetVersion",
    "ImportMapper",
    "Formatter",
    "ExperimentalOptions",
    "CompileOptions",
    "DEFAULT_OPTIONS",
    "merge_options",
]
