"""Unit tests for the style value model."""

import pytest
from pydantic import ValidationError

from .lib import (
    BackgroundType,
    BackgroundValue,
    BorderDescriptor,
    ColorType,
    ColorValue,
    FontDescriptor,
    FontStyle,
    GradientDescriptor,
    GradientType,
    NodeStyle,
    SemanticColor,
    SystemColor,
)


class TestColorValue:
    """Tests for color shorthand and object decoding."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw,expected_type,expected_value",
        [
            ("#FF0000", ColorType.HEX, "#FF0000"),
            ("red", ColorType.SYSTEM, "red"),
            ("clear", ColorType.SYSTEM, "clear"),
            ("secondaryLabel", ColorType.SEMANTIC, "secondaryLabel"),
            ("accent", ColorType.SEMANTIC, "accent"),
            ("FF0000", ColorType.HEX, "FF0000"),
            ("chartreuse", ColorType.HEX, "chartreuse"),
        ],
    )
    def test_string_shorthand(self, raw, expected_type, expected_value):
        """Bare strings resolve hex > system > semantic > hex."""
        color = ColorValue.model_validate(raw)
        assert color.type == expected_type
        assert color.value == expected_value

    @pytest.mark.unit
    def test_object_form(self):
        """Canonical object form decodes as-is."""
        color = ColorValue.model_validate({"type": "system", "value": "mint"})
        assert color.system_color == SystemColor.MINT
        assert color.semantic_color is None

    @pytest.mark.unit
    def test_unknown_system_name_becomes_blue(self):
        color = ColorValue.model_validate({"type": "system", "value": "magenta"})
        assert color == ColorValue.from_system(SystemColor.BLUE)

    @pytest.mark.unit
    def test_unknown_semantic_role_becomes_primary(self):
        color = ColorValue.model_validate({"type": "semantic", "value": "danger"})
        assert color == ColorValue.from_semantic(SemanticColor.PRIMARY)

    @pytest.mark.unit
    def test_unknown_type_treated_as_hex(self):
        color = ColorValue.model_validate({"type": "rgb", "value": "#00FF00"})
        assert color == ColorValue.from_hex("#00FF00")

    @pytest.mark.unit
    def test_object_without_value_fails(self):
        with pytest.raises(ValidationError):
            ColorValue.model_validate({"type": "hex"})

    @pytest.mark.unit
    def test_serializes_canonical_object(self):
        """Shorthand input is written back as an object."""
        color = ColorValue.model_validate("orange")
        assert color.model_dump(mode="json") == {"type": "system", "value": "orange"}


class TestBackgroundValue:
    """Tests for background decoding."""

    @pytest.mark.unit
    def test_bare_string_is_hex_color(self):
        background = BackgroundValue.model_validate("red")
        assert background.type == BackgroundType.COLOR
        # Bare background strings are always hex, never named colors
        assert background.color == ColorValue.from_hex("red")

    @pytest.mark.unit
    def test_color_object(self):
        background = BackgroundValue.model_validate(
            {"type": "color", "color": "systemBackground"}
        )
        assert background.color.semantic_color == SemanticColor.SYSTEM_BACKGROUND

    @pytest.mark.unit
    def test_gradient_object(self):
        background = BackgroundValue.model_validate(
            {
                "type": "gradient",
                "gradient": {
                    "type": "radial",
                    "colors": ["#000000", "blue"],
                    "start_point": {"x": 0, "y": 0},
                },
            }
        )
        assert background.type == BackgroundType.GRADIENT
        assert background.gradient.type == GradientType.RADIAL
        assert len(background.gradient.colors) == 2
        assert background.gradient.end_point is None

    @pytest.mark.unit
    def test_unknown_type_is_clear(self):
        background = BackgroundValue.model_validate({"type": "pattern"})
        assert background.color == ColorValue.from_system(SystemColor.CLEAR)

    @pytest.mark.unit
    def test_missing_payload_fails(self):
        with pytest.raises(ValidationError):
            BackgroundValue.model_validate({"type": "gradient"})

    @pytest.mark.unit
    def test_gradient_requires_a_color(self):
        with pytest.raises(ValidationError):
            GradientDescriptor.model_validate({"colors": []})


class TestNodeStyle:
    """Tests for the style bag."""

    @pytest.mark.unit
    def test_full_style(self):
        style = NodeStyle.model_validate(
            {
                "background": "#1C1C1E",
                "corner_radius": 12,
                "opacity": 0.9,
                "shadow": {"radius": 4, "y": 2},
                "border": {"color": "separator"},
                "glass_effect": True,
            }
        )
        assert style.corner_radius == 12.0
        assert style.shadow.color is None
        assert style.border.width == 1.0
        assert style.glass_effect is True

    @pytest.mark.unit
    def test_border_requires_color(self):
        with pytest.raises(ValidationError):
            BorderDescriptor.model_validate({"width": 2})

    @pytest.mark.unit
    def test_font_rejects_unknown_style(self):
        with pytest.raises(ValidationError):
            FontDescriptor.model_validate({"style": "huge"})

    @pytest.mark.unit
    def test_font_style_names(self):
        font = FontDescriptor.model_validate({"style": "largeTitle", "weight": "ultraLight"})
        assert font.style == FontStyle.LARGE_TITLE
        assert font.weight.value == "ultraLight"
