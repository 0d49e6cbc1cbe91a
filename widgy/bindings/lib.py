"""Binding placeholder extraction and substitution.

Text content may contain ``{{source.field}}`` placeholders. Extraction
reports which placeholders a string (or a whole tree) uses so callers can
fetch only the data they need; substitution replaces placeholders from a
flat ``"source.field" -> value`` map in a single pass.
"""

import re
from collections.abc import Iterator

from widgy.schema import DataSource, GaugeNode, TextNode, WidgetConfig, WidgetNode, iter_nodes

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\.(\w+)\}\}")

# Source prefix of any dotted key, including multi-segment fields
SOURCE_PREFIX_PATTERN = re.compile(r"\{\{(\w+)\.[\w.]+\}\}")

_KNOWN_SOURCES = {s.value: s for s in DataSource}


def extract_placeholders(text: str) -> list[tuple[str, str]]:
    """Return ``(source, field)`` pairs in order of appearance.

    Duplicates are kept.

    Example:
        >>> extract_placeholders("{{weather.temperature}} / {{battery.level}}")
        [('weather', 'temperature'), ('battery', 'level')]
    """
    return [(m.group(1), m.group(2)) for m in PLACEHOLDER_PATTERN.finditer(text)]


def compile_bindings(values: dict[str, str]) -> re.Pattern[str] | None:
    """Compile one alternation matching every ``{{key}}`` in `values`.

    Returns None for an empty map. Callers resolving many strings against
    the same map pass the result to `resolve_text`.
    """
    if not values:
        return None
    # Longest keys first so a key that prefixes another never shadows it
    keys = sorted(values, key=len, reverse=True)
    return re.compile("|".join(re.escape("{{" + key + "}}") for key in keys))


def resolve_text(
    text: str,
    values: dict[str, str],
    pattern: re.Pattern[str] | None = None,
) -> str:
    """Replace each ``{{key}}`` whose key is in `values`.

    Unmapped placeholders stay as literal text. Substituted values are not
    scanned again, so a value that itself looks like a placeholder is left
    alone. `pattern` is a precompiled `compile_bindings(values)`.
    """
    if not values or "{{" not in text:
        return text
    pattern = pattern or compile_bindings(values)
    return pattern.sub(lambda m: values.get(m.group(0)[2:-2], m.group(0)), text)


def _bindable_texts(node: WidgetNode) -> Iterator[str]:
    for n in iter_nodes(node):
        if isinstance(n, TextNode):
            yield n.properties.content
        elif isinstance(n, GaugeNode) and n.properties.current_value_label:
            yield n.properties.current_value_label


def collect_placeholders(node: WidgetNode) -> list[tuple[str, str]]:
    """Placeholders used anywhere in a tree.

    Scans Text content and Gauge current-value labels.
    """
    found: list[tuple[str, str]] = []
    for text in _bindable_texts(node):
        found.extend(extract_placeholders(text))
    return found


def placeholder_sources(text: str) -> list[str]:
    """Source names of every placeholder in `text`, multi-segment keys included."""
    return [m.group(1) for m in SOURCE_PREFIX_PATTERN.finditer(text)]


def required_sources(config: WidgetConfig) -> set[DataSource]:
    """Data sources a config needs resolved before rendering.

    Combines inline placeholders with explicit data bindings. Unknown source
    names are ignored. `DataSource.DATE_TIME` is always included.
    """
    sources = {DataSource.DATE_TIME}
    for text in _bindable_texts(config.root):
        for source in placeholder_sources(text):
            if source in _KNOWN_SOURCES:
                sources.add(_KNOWN_SOURCES[source])
    for binding in (config.data_bindings or {}).values():
        sources.add(binding.source)
    return sources


__all__ = [
    "PLACEHOLDER_PATTERN",
    "SOURCE_PREFIX_PATTERN",
    "extract_placeholders",
    "compile_bindings",
    "resolve_text",
    "collect_placeholders",
    "placeholder_sources",
    "required_sources",
]
