"""
Tests for import rendering, the import channel and import classification.
"""

import json

import pytest

from polyview.codegen.imports import (
    IMPORT_RECORD_MARKER,
    ImportRecord,
    assemble_template_imports,
    classify_imports,
    encode_import_record,
    ordered_code_imports,
    parse_import_channel,
    render_import_statement,
    render_pre_component,
    structured_import_mapper,
    transform_import_path,
)
from polyview.errors import ImportChannelError
from polyview.ir.spec import DeclaredImport, LocalExport


# =============================================================================
# RENDERING
# =============================================================================


def test_render_import_statement_shapes():
    """Default, star and named bindings render as one ES import."""
    declared = DeclaredImport(
        path="./lib",
        imports={"Lib": "default", "helpers": "*", "format": "format", "fmt": "formatDate"},
    )
    assert render_import_statement(declared) == (
        "import Lib, * as helpers, { format, formatDate as fmt } from './lib';"
    )
    assert render_import_statement(DeclaredImport(path="./side-effect.css")) == "import './side-effect.css';"


def test_transform_import_path_strips_component_suffix():
    """Component sources lose their ``.lite`` suffix unless extensions are preserved."""
    assert transform_import_path("./button.lite.tsx") == "./button"
    assert transform_import_path("./button.lite") == "./button"
    assert transform_import_path("./button.lite.tsx", preserve_file_extensions=True) == "./button.lite.tsx"
    assert transform_import_path("./utils.ts") == "./utils.ts"


def test_render_pre_component_without_mapper(ir):
    """Without a mapper, plain statements are joined and exports come last."""
    component = ir.component(
        imports=[DeclaredImport(path="./utils", imports={"helper": "helper"})],
        exports={"LIMIT": LocalExport(code="export const LIMIT = 3;")},
    )
    assert render_pre_component(component) == (
        "import { helper } from './utils';\nexport const LIMIT = 3;"
    )


def test_render_pre_component_can_drop_component_imports(ir):
    """preserve_imports=False drops imports of component sources."""
    component = ir.component(
        imports=[
            DeclaredImport(path="./button.lite", imports={"Button": "default"}),
            DeclaredImport(path="./utils", imports={"helper": "helper"}),
        ]
    )
    text = render_pre_component(component, preserve_imports=False)
    assert "./button" not in text
    assert "./utils" in text


def test_mapper_receives_arguments(ir):
    """The mapper sees the component, import, statement, components used and path."""
    seen = []

    def mapper(component, declared, statement, used, path):
        seen.append((component.name, declared.path, statement, used, path))
        return ""

    component = ir.component(imports=[DeclaredImport(path="./x.lite.tsx", imports={"X": "default"})])
    render_pre_component(component, components_used=["X"], import_mapper=mapper)
    assert seen == [("MyComponent", "./x.lite.tsx", "import X from './x';", ["X"], "./x")]


# =============================================================================
# CHANNEL
# =============================================================================


def test_parse_channel_separates_records_and_trailing_payload():
    """Structured records decode in order; the trailing segment is the exports payload."""
    text = "\n".join(
        [
            encode_import_record(ImportRecord(name="A", path="./a")),
            encode_import_record(ImportRecord(name="B", path="./b", imports={"B": "default"})),
            "export const LIMIT = 3;",
        ]
    )
    channel = parse_import_channel(text)
    assert [record.name for record in channel.records] == ["A", "B"]
    assert channel.records[1].imports == {"B": "default"}
    assert channel.local_exports == "export const LIMIT = 3;"
    assert channel.raw_code == []


def test_parse_channel_keeps_flat_markup_beside_records():
    """Flat mapper output in a record segment is kept as raw code."""
    record = json.dumps({"name": "A", "jsPath": "import A from './a';"})
    text = "import 'polyfill';\n" + record + IMPORT_RECORD_MARKER
    channel = parse_import_channel(text)
    assert channel.raw_code == ["import 'polyfill';"]
    assert channel.records[0].js_path == "import A from './a';"
    assert channel.local_exports == ""


def test_parse_channel_flat_named_import_before_record():
    """Braces in flat markup do not hide the record that follows it."""
    record = ImportRecord(name="b", path="./b", js_path="import { b } from './b';", imports={"b": "b"})
    text = "\n".join(
        [
            "import { a } from './a';",
            encode_import_record(record),
            "import { c } from './c';",
        ]
    )
    channel = parse_import_channel(text)
    assert channel.entries == ["import { a } from './a';", record]
    assert channel.local_exports == "import { c } from './c';"


def test_ordered_code_imports_keep_channel_order():
    """Flat statements and code-level records interleave as declared."""
    first = ImportRecord(name="A", js_path="import { a } from './a';", imports={"a": "a"})
    element = ImportRecord(name="Card", path="./card", js_path="import Card from './card';")
    last = ImportRecord(name="C", js_path="import { c } from './c';", imports={"c": "c"})
    text = "\n".join(
        [
            encode_import_record(first),
            "import 'polyfill';\n" + encode_import_record(element),
            encode_import_record(last),
        ]
    )
    channel = parse_import_channel(text)
    classification = classify_imports(channel.records, "<card>\n</card>")
    assert ordered_code_imports(channel, classification) == [
        "import { a } from './a';",
        "import 'polyfill';",
        "import { c } from './c';",
    ]


def test_parse_channel_without_marker_is_all_payload():
    """Plain output with no marker is treated as the trailing payload."""
    channel = parse_import_channel("import x from 'x';")
    assert channel.records == []
    assert channel.local_exports == "import x from 'x';"


def test_parse_channel_rejects_invalid_record():
    """A marked segment that is not JSON raises ImportChannelError."""
    with pytest.raises(ImportChannelError):
        parse_import_channel("{broken" + IMPORT_RECORD_MARKER)
    with pytest.raises(ImportChannelError):
        parse_import_channel(json.dumps({"path": "./nameless"}) + IMPORT_RECORD_MARKER)


def test_structured_mapper_names_record_after_default_import(ir):
    """The structured mapper encodes a record named after the default binding."""
    component = ir.component()
    declared = DeclaredImport(path="./button.lite", imports={"MyButton": "default"})
    text = structured_import_mapper(component, declared, "import MyButton from './button';", [], "./button")
    record = parse_import_channel(text).records[0]
    assert record.name == "MyButton"
    assert record.path == "./button"
    assert record.js_path == "import MyButton from './button';"


# =============================================================================
# CLASSIFICATION
# =============================================================================


def test_classify_custom_element_by_closing_tag():
    """A record whose closing tag is in the template is a custom element."""
    records = [
        ImportRecord(name="MyButton", path="./button", imports={"MyButton": "default"}),
        ImportRecord(name="helpers", path="./helpers", imports={"format": "format", "parse": "parse"}),
    ]
    template = '<my-button label.bind="format(x)"></my-button>'

    result = classify_imports(records, template)

    assert [record.name for record in result.custom_elements] == ["MyButton"]
    assert [record.name for record in result.code_imports] == ["helpers"]
    assert result.class_fields == ["format"]


def test_custom_element_names_never_become_class_fields():
    """Names bound by custom-element imports are excluded even when requested."""
    records = [ImportRecord(name="MyButton", path="./button", imports={"MyButton": "default"})]
    result = classify_imports(records, "<my-button></my-button>", extra_class_fields=["MyButton", "LIMIT"])
    assert result.class_fields == ["LIMIT"]


def test_assemble_template_imports_uses_keyword_or_record_markup():
    """Template markup defaults to a keyword tag over the record path."""
    records = [
        ImportRecord(name="A", path="./a"),
        ImportRecord(name="B", path="./b", template='<require from="./b.html"></require>'),
    ]
    assert assemble_template_imports(records, "import") == (
        '<import from="./a"></import>\n<require from="./b.html"></require>'
    )
