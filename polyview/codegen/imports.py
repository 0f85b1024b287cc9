"""
Import resolution and the import channel protocol.

Each declared import is passed through a caller-supplied mapper whose
boundary is string-typed. Mappers that need structured metadata return a
JSON-encoded :class:`ImportRecord` followed by :data:`IMPORT_RECORD_MARKER`;
mappers that only need flat markup return plain text. After the template is
rendered, structured records are classified as template-level (custom
element) imports or code-level imports, and named bindings referenced by the
template are re-exposed as instance fields.

Key Components:
    - render_pre_component: run the mapper over every declared import
    - parse_import_channel: split the concatenated mapper output
    - classify_imports: usage-based classification against the template
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from polyview.config import ImportMapper
from polyview.errors import ImportChannelError
from polyview.ir.spec import Component, DeclaredImport

from .text import kebab_case

logger = logging.getLogger(__name__)

IMPORT_RECORD_MARKER = "/*__polyview_import_record__*/"

# Upstream component sources carry this infix (``./button.lite.tsx``)
COMPONENT_SOURCE_INFIX = ".lite"

_COMPONENT_SUFFIX = re.compile(r"\.lite(\.[A-Za-z]+)?$")


# =============================================================================
# Import records
# =============================================================================

@dataclass
class ImportRecord:
    """
    Structured description of one resolved import.

    Attributes:
        name: Canonical (component) name, e.g. ``MyButton``
        path: Source path used for template-level imports
        template: Template-level markup; generated from ``path`` when empty
        js_path: Code-level import statement
        imports: Local name -> imported kind for each bound name
    """
    name: str
    path: str = ""
    template: str = ""
    js_path: str = ""
    imports: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "template": self.template,
            "jsPath": self.js_path,
            "imports": dict(self.imports),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImportRecord":
        if not isinstance(data, dict) or not data.get("name"):
            raise ImportChannelError(
                f"Import record has no name: {data!r}",
                hint="Structured import records need at least a 'name' field",
            )
        return cls(
            name=str(data["name"]),
            path=str(data.get("path", "")),
            template=str(data.get("template", "")),
            js_path=str(data.get("jsPath", "")),
            imports=dict(data.get("imports") or {}),
        )


def encode_import_record(record: ImportRecord) -> str:
    """Encode a record for the import channel."""
    return json.dumps(record.to_dict()) + IMPORT_RECORD_MARKER


# =============================================================================
# Rendering declared imports
# =============================================================================

def is_component_source(path: str) -> bool:
    return COMPONENT_SOURCE_INFIX in path


def transform_import_path(path: str, preserve_file_extensions: bool = False) -> str:
    """Drop the ``.lite.*`` suffix of component sources unless extensions are preserved."""
    if preserve_file_extensions or not is_component_source(path):
        return path
    return _COMPONENT_SUFFIX.sub("", path)


def render_import_statement(declared: DeclaredImport, path: Optional[str] = None) -> str:
    """Render a declared import as an ES module import statement."""
    target = path if path is not None else declared.path
    default_names = [local for local, kind in declared.imports.items() if kind == "default"]
    star_names = [local for local, kind in declared.imports.items() if kind == "*"]
    named = [
        kind if kind == local else f"{kind} as {local}"
        for local, kind in declared.imports.items()
        if kind not in ("default", "*")
    ]
    clauses: List[str] = []
    if default_names:
        clauses.append(default_names[0])
    if star_names:
        clauses.append(f"* as {star_names[0]}")
    if named:
        clauses.append("{ " + ", ".join(named) + " }")
    if not clauses:
        return f"import '{target}';"
    return f"import {', '.join(clauses)} from '{target}';"


def render_exports(component: Component) -> str:
    """Render local exports that are not already provided by an import."""
    imported = {local for declared in component.imports for local in declared.imports}
    return "\n".join(
        export.code for name, export in component.exports.items() if name not in imported
    )


def render_pre_component(
    component: Component,
    *,
    components_used: Iterable[str] = (),
    import_mapper: Optional[ImportMapper] = None,
    preserve_imports: bool = True,
    preserve_file_extensions: bool = False,
) -> str:
    """
    Run every declared import through the mapper and append local exports.

    The local exports are rendered last so they always form the trailing
    segment of the import channel.
    """
    used = list(components_used)
    pieces: List[str] = []
    for declared in component.imports:
        if not preserve_imports and is_component_source(declared.path):
            continue
        path = transform_import_path(declared.path, preserve_file_extensions)
        statement = render_import_statement(declared, path)
        if import_mapper is not None:
            pieces.append(import_mapper(component, declared, statement, used, path))
        else:
            pieces.append(statement)
    exports = render_exports(component)
    return "\n".join(pieces + ([exports] if exports else []))


def structured_import_mapper(
    component: Component,
    declared: DeclaredImport,
    statement: str,
    components_used: List[str],
    path: str,
) -> str:
    """
    Import mapper emitting a structured record for every import.

    The canonical name is the first default binding (falling back to the
    first bound name, then the path stem).
    """
    names = declared.default_names() or list(declared.imports)
    name = names[0] if names else re.sub(r"\W+", "_", path.rsplit("/", 1)[-1]) or "module"
    return encode_import_record(
        ImportRecord(name=name, path=path, js_path=statement, imports=dict(declared.imports))
    )


# =============================================================================
# Parsing the channel
# =============================================================================

ChannelEntry = Union[str, ImportRecord]


@dataclass
class ImportChannel:
    """
    Decoded import channel output.

    ``entries`` holds flat code and records interleaved in channel order;
    ``records`` and ``raw_code`` are the same items split by kind.
    """
    entries: List[ChannelEntry] = field(default_factory=list)
    local_exports: str = ""

    @property
    def records(self) -> List[ImportRecord]:
        return [entry for entry in self.entries if isinstance(entry, ImportRecord)]

    @property
    def raw_code(self) -> List[str]:
        return [entry for entry in self.entries if isinstance(entry, str)]


def _record_start(segment: str, decoder: json.JSONDecoder) -> Tuple[int, Any]:
    """
    Locate the record closing ``segment``.

    A record always ends at the marker, so the candidate is the last brace
    opening a line whose JSON value runs to the end of the segment. Flat
    markup before it may contain braces of its own.
    """
    starts = [
        index
        for index, char in enumerate(segment)
        if char == "{" and (index == 0 or segment[index - 1] == "\n")
    ]
    error: Optional[json.JSONDecodeError] = None
    for start in reversed(starts):
        try:
            data, end = decoder.raw_decode(segment, start)
        except json.JSONDecodeError as exc:
            error = error or exc
            continue
        if end == len(segment):
            return start, data
    if error is not None:
        raise ImportChannelError(f"Import record is not valid JSON: {error}") from error
    raise ImportChannelError(f"Import channel segment is not a record: {segment!r}")


def parse_import_channel(text: str) -> ImportChannel:
    """
    Split concatenated mapper output into records and the trailing payload.

    Raises:
        ImportChannelError: If a structured segment is not valid JSON
    """
    segments = text.split(IMPORT_RECORD_MARKER)
    trailing = segments.pop()
    channel = ImportChannel(local_exports=trailing.strip())
    decoder = json.JSONDecoder()
    for segment in segments:
        stripped = segment.strip()
        if not stripped:
            continue
        start, data = _record_start(stripped, decoder)
        flat = stripped[:start].strip()
        if flat:
            channel.entries.append(flat)
        channel.entries.append(ImportRecord.from_dict(data))
    return channel


# =============================================================================
# Classification
# =============================================================================

@dataclass
class ImportClassification:
    custom_elements: List[ImportRecord] = field(default_factory=list)
    code_imports: List[ImportRecord] = field(default_factory=list)
    class_fields: List[str] = field(default_factory=list)


def closing_tag(name: str) -> str:
    return f"</{kebab_case(name)}>"


def classify_imports(
    records: Iterable[ImportRecord],
    template: str,
    extra_class_fields: Iterable[str] = (),
) -> ImportClassification:
    """
    Classify records by how the rendered template uses them.

    Usage detection is a plain substring search over the template text.
    """
    result = ImportClassification()
    records = list(records)
    for record in records:
        if closing_tag(record.name) in template:
            result.custom_elements.append(record)
        else:
            result.code_imports.append(record)

    excluded = set()
    for record in result.custom_elements:
        excluded.add(record.name)
        excluded.update(record.imports)

    fields: Dict[str, None] = {}
    for record in result.code_imports:
        for local in record.imports:
            if local in template:
                fields.setdefault(local, None)
    for name in extra_class_fields:
        fields.setdefault(name, None)
    result.class_fields = [name for name in fields if name not in excluded]

    logger.debug(
        "Classified imports: %d custom element(s), %d code import(s), %d class field(s)",
        len(result.custom_elements),
        len(result.code_imports),
        len(result.class_fields),
    )
    return result


def ordered_code_imports(channel: ImportChannel, classification: ImportClassification) -> List[str]:
    """Flat code and code-level record statements, in channel order."""
    statements: List[str] = []
    for entry in channel.entries:
        if isinstance(entry, str):
            statements.append(entry)
        elif entry.js_path and any(entry is record for record in classification.code_imports):
            statements.append(entry.js_path)
    return statements


def assemble_template_imports(custom_elements: Iterable[ImportRecord], keyword: str) -> str:
    """Template-level import tags for custom elements."""
    return "\n".join(
        record.template or f'<{keyword} from="{record.path}"></{keyword}>'
        for record in custom_elements
    )


__all__ = [
    "IMPORT_RECORD_MARKER",
    "ImportRecord",
    "ChannelEntry",
    "ImportChannel",
    "ImportClassification",
    "encode_import_record",
    "is_component_source",
    "transform_import_path",
    "render_import_statement",
    "render_exports",
    "render_pre_component",
    "structured_import_mapper",
    "parse_import_channel",
    "closing_tag",
    "classify_imports",
    "ordered_code_imports",
    "assemble_template_imports",
]
