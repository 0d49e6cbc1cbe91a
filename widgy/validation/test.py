"""Unit tests for validation module."""

import pytest

from widgy.schema import (
    DividerNode,
    GaugeNode,
    GaugeProperties,
    HStackNode,
    SFSymbolNode,
    SFSymbolProperties,
    StackProperties,
    TextNode,
    TextProperties,
    VStackNode,
    ZStackNode,
)
from widgy.style import ColorValue

from . import (
    MAX_NODE_COUNT,
    ValidationError,
    ValidationErrorType,
    is_valid,
    is_valid_hex,
    measure_tree,
    validate,
)


def _text(content: str = "hello", **kwargs) -> TextNode:
    return TextNode(properties=TextProperties(content=content, **kwargs))


def _vstack(*children) -> VStackNode:
    return VStackNode(properties=StackProperties(children=list(children)))


class TestLimits:
    """Tests for depth and node-count ceilings."""

    @pytest.mark.unit
    def test_depth_five_passes(self, make_config, nested_padding):
        config = make_config(nested_padding(4))
        assert measure_tree(config.root) == (5, 5)
        assert validate(config).is_valid

    @pytest.mark.unit
    def test_depth_six_fails(self, make_config, nested_padding):
        result = validate(make_config(nested_padding(5)))
        assert not result.is_valid
        assert [e.error_type for e in result.errors] == [ValidationErrorType.NESTING_TOO_DEEP]
        assert result.errors[0].message == "Nesting depth 6 exceeds maximum of 5"

    @pytest.mark.unit
    def test_six_paddings_fail(self, make_config, nested_padding):
        result = validate(make_config(nested_padding(6)))
        assert result.errors[0].error_type == ValidationErrorType.NESTING_TOO_DEEP

    @pytest.mark.unit
    def test_node_count_at_limit_passes(self, make_config):
        root = _vstack(*[_text(str(i)) for i in range(MAX_NODE_COUNT - 1)])
        assert validate(make_config(root)).is_valid

    @pytest.mark.unit
    def test_node_count_over_limit_fails(self, make_config):
        root = _vstack(*[_text(str(i)) for i in range(MAX_NODE_COUNT)])
        result = validate(make_config(root))
        assert not result.is_valid
        assert result.errors[0].error_type == ValidationErrorType.TOO_MANY_NODES
        assert result.errors[0].message == "Node count 51 exceeds maximum of 50"


class TestNodeRules:
    """Tests for per-node checks."""

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [0.0, 0.5, 1.0])
    def test_gauge_in_range(self, make_config, value):
        node = GaugeNode(properties=GaugeProperties(value=value))
        assert validate(make_config(node)).is_valid

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [1.5, -0.1])
    def test_gauge_out_of_range(self, make_config, value):
        node = GaugeNode(properties=GaugeProperties(value=value))
        result = validate(make_config(node))
        assert not result.is_valid
        assert result.errors[0].error_type == ValidationErrorType.INVALID_GAUGE_VALUE
        assert result.errors[0].message == f"Gauge value {value} must be between 0.0 and 1.0"

    @pytest.mark.unit
    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    def test_empty_text_fails(self, make_config, content):
        result = validate(make_config(_text(content)))
        assert result.errors[0].error_type == ValidationErrorType.EMPTY_TEXT_CONTENT

    @pytest.mark.unit
    def test_placeholder_only_text_passes(self, make_config):
        assert validate(make_config(_text("{{battery.level}}"))).is_valid

    @pytest.mark.unit
    def test_nested_nodes_are_checked(self, make_config):
        root = _vstack(_text("ok"), HStackNode(properties=StackProperties(children=[_text("")])))
        result = validate(make_config(root))
        assert not result.is_valid
        assert result.errors[0].path == "root.children[1].children[0]"

    @pytest.mark.unit
    def test_wrapper_child_path(self, make_config):
        from widgy.schema import PaddingNode, PaddingProperties

        root = PaddingNode(properties=PaddingProperties(child=_text("")))
        result = validate(make_config(root))
        assert result.errors[0].path == "root.child"

    @pytest.mark.unit
    def test_text_hex_color_checked(self, make_config):
        result = validate(make_config(_text("x", color=ColorValue.from_hex("#12345"))))
        assert result.errors[0].error_type == ValidationErrorType.INVALID_HEX_COLOR
        assert result.errors[0].message == "Invalid hex color: #12345"

    @pytest.mark.unit
    def test_named_colors_not_hex_checked(self, make_config):
        assert validate(make_config(_text("x", color=ColorValue.model_validate("red")))).is_valid

    @pytest.mark.unit
    def test_other_nodes_have_no_rules(self, make_config):
        root = _vstack(DividerNode(), _text("x"))
        assert validate(make_config(root)).is_valid


class TestWarnings:
    """Tests for non-blocking findings."""

    @pytest.mark.unit
    def test_empty_vstack_is_warning(self, make_config):
        result = validate(make_config(_vstack()))
        assert result.is_valid
        assert len(result.warnings) == 1
        assert result.warnings[0].error_type == ValidationErrorType.EMPTY_STACK_CHILDREN
        assert result.warnings[0].message.startswith("Stack has no children")

    @pytest.mark.unit
    def test_empty_zstack_is_warning(self, make_config):
        result = validate(make_config(ZStackNode()))
        assert result.is_valid
        assert result.warning_messages[0].startswith("ZStack has no children")

    @pytest.mark.unit
    def test_empty_symbol_name_is_warning(self, make_config):
        node = SFSymbolNode(properties=SFSymbolProperties(system_name=""))
        result = validate(make_config(node))
        assert result.is_valid
        assert result.warning_messages == ["SF Symbol has empty system name"]

    @pytest.mark.unit
    def test_schema_version_mismatch_is_warning(self, make_config):
        result = validate(make_config(_text("x"), schema_version="0.9"))
        assert result.is_valid
        assert result.warning_messages == ["Schema version 0.9 differs from current 1.0"]

    @pytest.mark.unit
    def test_errors_and_warnings_are_independent(self, make_config):
        root = _vstack(ZStackNode(), _text(""))
        result = validate(make_config(root, schema_version="2.0"))
        assert not result.is_valid
        assert len(result.errors) == 1
        assert len(result.warnings) == 2


class TestHexValidation:
    """Tests for hex color strings."""

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["#FF0000", "#F00", "#FF00", "#FF0000AA", "abc", "#aBcDeF"])
    def test_valid(self, value):
        assert is_valid_hex(value)

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["#ZZZZZZ", "#12345", "", "#", "#FF00000", "##FFF"])
    def test_invalid(self, value):
        assert not is_valid_hex(value)


class TestSamples:
    """Every sample config passes validation."""

    @pytest.mark.unit
    def test_samples_valid(self, sample_configs):
        for config in sample_configs:
            result = validate(config)
            assert result.is_valid, f"{config.name}: {result.error_messages}"
            assert result.warnings == []

    @pytest.mark.unit
    def test_validate_does_not_mutate(self, simple_clock):
        before = simple_clock.model_copy(deep=True)
        validate(simple_clock)
        assert simple_clock == before


class TestIsValid:
    """Tests for is_valid convenience function."""

    @pytest.mark.unit
    def test_valid_returns_true(self, make_config):
        assert is_valid(make_config(_text("x"))) is True

    @pytest.mark.unit
    def test_invalid_returns_false(self, make_config):
        assert is_valid(make_config(_text(""))) is False


class TestValidationError:
    """Tests for ValidationError dataclass."""

    @pytest.mark.unit
    def test_error_attributes(self):
        error = ValidationError(
            error_type=ValidationErrorType.EMPTY_ROOT,
            message="Test error",
        )
        assert error.path == "root"
        assert str(error) == "Test error"
