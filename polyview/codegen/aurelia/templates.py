"""Jinja2 template assembling an Aurelia component module."""

from __future__ import annotations

from functools import lru_cache

from jinja2 import BaseLoader, Environment, Template

COMPONENT_TEMPLATE = """\
{% if aggregator_import %}
import { {{ aggregator_class }} } from "{{ aggregator_module }}";
{% endif %}
import { {{ runtime_features|join(", ") }} } from "{{ runtime_module }}";

{% if code_imports %}
{{ code_imports|join("\\n") }}

{% endif %}
{% if local_exports %}
{{ local_exports }}

{% endif %}
{% if types %}
{{ types|join("\\n") }}

{% endif %}
{% if default_props %}
const defaultProps = { {{ default_props|join(", ") }} };

{% endif %}
{% if autoinject %}
@autoinject
{% endif %}
@customElement("{{ element_name }}")
@inlineView(`
{{ view }}
`)
export class {{ name }} {
{% for member in members %}
{{ member|indent(2, true) }}
{% if not loop.last %}

{% endif %}
{% endfor %}
}
"""


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=BaseLoader(),
        autoescape=False,  # generating code, not HTML
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


@lru_cache(maxsize=1)
def component_template() -> Template:
    return _environment().from_string(COMPONENT_TEMPLATE)


__all__ = ["COMPONENT_TEMPLATE", "component_template"]
