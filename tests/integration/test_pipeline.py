"""End-to-end tests: decode, validate, resolve, render, format and store."""

import json

import pytest

from widgy.output import format_visual_tree, generate_output
from widgy.providers import DataProviderRegistry, DataResolver, StaticProvider
from widgy.render import VisualKind, render_config
from widgy.schema import DataSource, decode_config, dumps_config, parse_widget_config
from widgy.storage import FileConfigStore
from widgy.validation import validate

GENERATED_TEXT = """Here is your widget:
```json
{
  "name": "Step Counter",
  "family": "systemSmall",
  "schema_version": "0.9",
  "root": {
    "type": "Padding",
    "properties": {
      "value": 12,
      "child": {
        "type": "VStack",
        "properties": {
          "alignment": "leading",
          "spacing": 6,
          "children": [
            {"type": "SFSymbol", "properties": {"system_name": "figure.walk", "color": "green"}},
            {"type": "Text", "properties": {"text": "{{health.steps}} steps", "color": "#34C759"}},
            {"type": "Gauge", "properties": {"value": "0.43", "style": "linear"}}
          ]
        }
      }
    }
  }
}
```
"""


def _registry() -> DataProviderRegistry:
    return DataProviderRegistry([StaticProvider(DataSource.HEALTH, {"health.steps": "4,321"})])


@pytest.mark.integration
@pytest.mark.asyncio
async def test_generated_text_to_visual_tree():
    config = parse_widget_config(GENERATED_TEXT)
    result = validate(config)
    assert result.is_valid
    assert result.warnings == []

    context = await DataResolver(_registry()).make_context(config)
    visual = render_config(config, context)

    assert visual.kind == VisualKind.VSTACK
    assert visual.modifier_names == ["padding"]
    assert [child.kind for child in visual.children] == [
        VisualKind.SYMBOL,
        VisualKind.TEXT,
        VisualKind.GAUGE,
    ]
    assert visual.children[1].params["text"] == "4,321 steps"
    assert visual.children[2].params["value"] == 0.43

    text = generate_output(config, visual, result).to_text()
    assert "Padding [12]" in text
    assert "text [text='4,321 steps']" in text


@pytest.mark.integration
@pytest.mark.asyncio
async def test_invalid_config_renders_error_summary():
    raw = json.dumps(
        {
            "name": "Broken",
            "root": {
                "type": "VStack",
                "children": [
                    {"type": "Text", "properties": {"text": "  "}},
                    {"type": "Gauge", "properties": {"value": -1}},
                ],
            },
        }
    )
    config = decode_config(raw)
    result = validate(config)
    assert len(result.errors) == 2

    context = await DataResolver(_registry()).make_context(config)
    visual = render_config(config, context, show_errors=True)
    tree = format_visual_tree(visual)
    assert "exclamationmark.triangle" in tree
    assert "Text node has empty content" in tree


@pytest.mark.integration
def test_store_then_reload_renders_identically(tmp_path):
    config = parse_widget_config(GENERATED_TEXT)
    store = FileConfigStore(tmp_path)
    store.save(config)

    reloaded = store.load(config.id)
    assert reloaded == config
    assert dumps_config(reloaded) == dumps_config(config)
    assert format_visual_tree(render_config(reloaded)) == format_visual_tree(render_config(config))
