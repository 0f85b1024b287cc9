"""Aurelia keywords and per-version template conventions."""

from __future__ import annotations

from enum import Enum
from typing import Dict

from polyview.config import TargetVersion

RUNTIME_MODULE = "aurelia-framework"
AGGREGATOR_MODULE = "aurelia-event-aggregator"
AGGREGATOR_CLASS = "EventAggregator"

TEMPLATE_TAG = "template"
INDEX_TOKEN = "$index"
EVENT_TOKEN = "$event"
DEFAULT_SLOT_RECEPTOR = "$$slots.default"
PROPERTY_OBSERVER = "propertyObserver"
SPREAD_ATTRIBUTE = "spreadProps"
DEFAULT_EVENT_ARGUMENT = "event"

# Bindings emitted under a reserved target name rather than their key
BINDINGS_MAPPER: Dict[str, str] = {
    "innerHTML": "innerHTML",
    "style": "style",
}

# Element types whose event bindings are not delegated
NON_DELEGATED_INPUT_TYPES = frozenset({"radio", "checkbox"})


class RuntimeFeature(str, Enum):
    """Decorators imported from the runtime module."""
    AUTOINJECT = "autoinject"
    BINDABLE = "bindable"
    COMPUTED_FROM = "computedFrom"
    CUSTOM_ELEMENT = "customElement"
    INLINE_VIEW = "inlineView"


_TEMPLATE_IMPORT_KEYWORDS: Dict[TargetVersion, str] = {
    TargetVersion.V1: "require",
    TargetVersion.V2: "import",
}

_WRAPS_VIEW_IN_TEMPLATE: Dict[TargetVersion, bool] = {
    TargetVersion.V1: True,
    TargetVersion.V2: False,
}


def _lookup(table: Dict[TargetVersion, object], version: TargetVersion):
    try:
        return table[version]
    except KeyError:
        raise ValueError(f"Unhandled Aurelia target version: {version!r}") from None


def template_import_keyword(version: TargetVersion) -> str:
    return _lookup(_TEMPLATE_IMPORT_KEYWORDS, version)


def wraps_view_in_template(version: TargetVersion) -> bool:
    return _lookup(_WRAPS_VIEW_IN_TEMPLATE, version)


__all__ = [
    "RUNTIME_MODULE",
    "AGGREGATOR_MODULE",
    "AGGREGATOR_CLASS",
    "TEMPLATE_TAG",
    "INDEX_TOKEN",
    "EVENT_TOKEN",
    "DEFAULT_SLOT_RECEPTOR",
    "PROPERTY_OBSERVER",
    "SPREAD_ATTRIBUTE",
    "DEFAULT_EVENT_ARGUMENT",
    "BINDINGS_MAPPER",
    "NON_DELEGATED_INPUT_TYPES",
    "RuntimeFeature",
    "template_import_keyword",
    "wraps_view_in_template",
]
