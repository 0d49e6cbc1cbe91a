"""Widget tree schema.

Defines the recursive `WidgetNode` union (twelve node variants, each a
``{"type": ..., "properties": {...}}`` object), the per-variant property
models, and the `WidgetConfig` envelope.

Decoding is permissive: property models accept the alternate key spellings
that generators commonly emit and drop optional values that fail to parse
instead of rejecting the whole node. Encoding always writes the canonical
snake_case key set, so re-encoding a decoded tree normalizes it.
"""

import math
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Iterator, Literal, Union
from uuid import UUID, uuid4

from pydantic import (
    Base64Bytes,
    BaseModel,
    BeforeValidator,
    Field,
    PlainSerializer,
    TypeAdapter,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    model_validator,
)

from widgy.style import ColorValue, FontDescriptor, FontWeight, NodeStyle

CURRENT_SCHEMA_VERSION = "1.0"

DEFAULT_SYMBOL_NAME = "questionmark"
DEFAULT_GAUGE_VALUE = 0.5

_DECIMAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


# =============================================================================
# Tolerant decoding helpers
# =============================================================================


def _drop_invalid(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        return None


# Optional fields annotated with this decode to None instead of failing
Lenient = WrapValidator(_drop_invalid)

_MISSING = object()


def _is_valid(adapter: TypeAdapter, value: Any) -> bool:
    try:
        adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def _first_valid(data: dict, keys: tuple[str, ...], adapter: TypeAdapter) -> Any:
    """Return the first value under `keys` that `adapter` accepts, else _MISSING."""
    for key in keys:
        if key in data and data[key] is not None and _is_valid(adapter, data[key]):
            return data[key]
    return _MISSING


def _merge_glass_effect(data: dict) -> dict:
    """Fold a top-level ``glass_effect`` flag into the style bag."""
    glass = data.pop("glass_effect", None)
    if not isinstance(glass, bool):
        return data
    raw_style = data.get("style")
    style = NodeStyle()
    if isinstance(raw_style, NodeStyle):
        style = raw_style
    elif raw_style is not None:
        try:
            style = NodeStyle.model_validate(raw_style)
        except ValidationError:
            pass
    data["style"] = style.model_copy(update={"glass_effect": glass})
    return data


def _parse_dimension(value: Any) -> Any:
    if value == "infinity":
        return math.inf
    return value


def _serialize_dimension(value: float) -> float | str:
    return "infinity" if value == math.inf else value


# A number or the literal "infinity" for unbounded extent
FlexibleDimension = Annotated[
    float,
    BeforeValidator(_parse_dimension),
    PlainSerializer(_serialize_dimension, when_used="json"),
]

_STRING = TypeAdapter(str)
_FLOAT = TypeAdapter(float)
_COLOR = TypeAdapter(ColorValue)
_FONT = TypeAdapter(FontDescriptor)
_FONT_WEIGHT = TypeAdapter(FontWeight)


# =============================================================================
# Enumerations
# =============================================================================


class NodeType(str, Enum):
    """Discriminator values for widget nodes."""

    VSTACK = "VStack"
    HSTACK = "HStack"
    ZSTACK = "ZStack"
    TEXT = "Text"
    SF_SYMBOL = "SFSymbol"
    IMAGE = "Image"
    SPACER = "Spacer"
    DIVIDER = "Divider"
    GAUGE = "Gauge"
    FRAME = "Frame"
    PADDING = "Padding"
    CONTAINER_RELATIVE_SHAPE = "ContainerRelativeShape"


class StackAlignment(str, Enum):
    """Cross-axis alignment for linear stacks.

    Vertical stacks use leading/center/trailing; horizontal stacks use
    top/center/bottom and the text baselines.
    """

    LEADING = "leading"
    CENTER = "center"
    TRAILING = "trailing"
    TOP = "top"
    BOTTOM = "bottom"
    FIRST_TEXT_BASELINE = "firstTextBaseline"
    LAST_TEXT_BASELINE = "lastTextBaseline"


class ZStackAlignment(str, Enum):
    """Two-dimensional alignment used by overlays and frames."""

    CENTER = "center"
    LEADING = "leading"
    TRAILING = "trailing"
    TOP = "top"
    BOTTOM = "bottom"
    TOP_LEADING = "topLeading"
    TOP_TRAILING = "topTrailing"
    BOTTOM_LEADING = "bottomLeading"
    BOTTOM_TRAILING = "bottomTrailing"


class TextAlignment(str, Enum):
    LEADING = "leading"
    CENTER = "center"
    TRAILING = "trailing"


class SymbolRenderingMode(str, Enum):
    MONOCHROME = "monochrome"
    MULTICOLOR = "multicolor"
    HIERARCHICAL = "hierarchical"
    PALETTE = "palette"


class ImageSourceType(str, Enum):
    ASSET = "asset"
    REMOTE = "remote"
    DATA = "data"


class ImageContentMode(str, Enum):
    FIT = "fit"
    FILL = "fill"


class GaugeStyle(str, Enum):
    AUTOMATIC = "automatic"
    LINEAR = "linear"
    CIRCULAR = "circular"
    ACCESSORY_CIRCULAR = "accessoryCircular"
    ACCESSORY_LINEAR = "accessoryLinear"


class PaddingEdges(str, Enum):
    ALL = "all"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    TOP = "top"
    BOTTOM = "bottom"
    LEADING = "leading"
    TRAILING = "trailing"


_GAUGE_STYLE = TypeAdapter(GaugeStyle)


# =============================================================================
# Node properties
# =============================================================================


class StackProperties(BaseModel):
    """Properties shared by VStack and HStack."""

    children: list["WidgetNode"] = Field(default_factory=list)
    alignment: Annotated[StackAlignment | None, Lenient] = None
    spacing: Annotated[float | None, Lenient] = None
    style: Annotated[NodeStyle | None, Lenient] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return _merge_glass_effect(dict(data))


class ZStackProperties(BaseModel):
    children: list["WidgetNode"] = Field(default_factory=list)
    alignment: Annotated[ZStackAlignment | None, Lenient] = None
    style: Annotated[NodeStyle | None, Lenient] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return _merge_glass_effect(dict(data))


class TextProperties(BaseModel):
    """Text content, possibly containing ``{{source.field}}`` placeholders.

    Reads ``content`` first, then ``text``; defaults to an empty string.
    """

    content: str = ""
    font: Annotated[FontDescriptor | None, Lenient] = None
    color: Annotated[ColorValue | None, Lenient] = None
    alignment: Annotated[TextAlignment | None, Lenient] = None
    line_limit: Annotated[int | None, Lenient] = None
    minimum_scale_factor: Annotated[float | None, Lenient] = None
    style: Annotated[NodeStyle | None, Lenient] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        content = _first_valid(data, ("content", "text"), _STRING)
        data["content"] = "" if content is _MISSING else content
        data.pop("text", None)
        return data


class SFSymbolProperties(BaseModel):
    """SF Symbol icon.

    The symbol name is read from ``system_name``, ``symbol``, ``name`` or
    ``icon`` in that order. Size and weight fall back to a nested ``font``
    object when not given directly.
    """

    system_name: str = DEFAULT_SYMBOL_NAME
    color: Annotated[ColorValue | None, Lenient] = None
    font_size: Annotated[float | None, Lenient] = None
    font_weight: Annotated[FontWeight | None, Lenient] = None
    rendering_mode: Annotated[SymbolRenderingMode | None, Lenient] = None
    style: Annotated[NodeStyle | None, Lenient] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        name = _first_valid(data, ("system_name", "symbol", "name", "icon"), _STRING)
        data["system_name"] = DEFAULT_SYMBOL_NAME if name is _MISSING else name

        font = data.pop("font", None)
        if font is not None and _is_valid(_FONT, font):
            font = _FONT.validate_python(font)
            if _first_valid(data, ("font_size",), _FLOAT) is _MISSING:
                data["font_size"] = font.size
            if _first_valid(data, ("font_weight",), _FONT_WEIGHT) is _MISSING:
                data["font_weight"] = font.weight
        return data


class ImageSource(BaseModel):
    """Where image bytes come from. Unknown source types read as assets."""

    type: ImageSourceType
    value: str

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("type"), str):
            if data["type"] not in {t.value for t in ImageSourceType}:
                return {**data, "type": ImageSourceType.ASSET.value}
        return data


class ImageProperties(BaseModel):
    source: ImageSource
    content_mode: Annotated[ImageContentMode | None, Lenient] = None
    corner_radius: Annotated[float | None, Lenient] = None
    style: Annotated[NodeStyle | None, Lenient] = None


class SpacerProperties(BaseModel):
    min_length: Annotated[float | None, Lenient] = None


class DividerProperties(BaseModel):
    color: Annotated[ColorValue | None, Lenient] = None
    thickness: Annotated[float | None, Lenient] = None
    style: Annotated[NodeStyle | None, Lenient] = None


class GaugeProperties(BaseModel):
    """Gauge with a value expected in [min_value, max_value].

    ``value`` accepts a number or a numeric string; anything else decodes to
    0.5. The gauge style may be spelled ``gauge_style`` or, as a plain
    string, ``style``. The tint may be spelled ``tint`` or ``color``. An
    object under ``style`` is the regular style bag.
    """

    value: float = DEFAULT_GAUGE_VALUE
    min_value: Annotated[float | None, Lenient] = None
    max_value: Annotated[float | None, Lenient] = None
    label: Annotated[str | None, Lenient] = None
    current_value_label: Annotated[str | None, Lenient] = None
    gauge_style: Annotated[GaugeStyle | None, Lenient] = None
    tint: Annotated[ColorValue | None, Lenient] = None
    style: Annotated[NodeStyle | None, Lenient] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        data["value"] = _parse_gauge_value(data.get("value"))

        raw_style = data.get("style")
        if isinstance(raw_style, str):
            del data["style"]
            alt = {"gauge_style": data.get("gauge_style"), "style": raw_style}
        else:
            alt = {"gauge_style": data.get("gauge_style")}
        gauge_style = _first_valid(alt, ("gauge_style", "style"), _GAUGE_STYLE)
        data["gauge_style"] = None if gauge_style is _MISSING else gauge_style

        tint = _first_valid(data, ("tint", "color"), _COLOR)
        data["tint"] = None if tint is _MISSING else tint
        data.pop("color", None)
        return data


def _parse_gauge_value(value: Any) -> float:
    if isinstance(value, bool):
        return DEFAULT_GAUGE_VALUE
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str) and _DECIMAL.fullmatch(value):
        return float(value)
    return DEFAULT_GAUGE_VALUE


class FrameProperties(BaseModel):
    """Sizing wrapper around a single child.

    Dimensions accept a number or ``"infinity"``.
    """

    child: "WidgetNode"
    width: Annotated[FlexibleDimension | None, Lenient] = None
    height: Annotated[FlexibleDimension | None, Lenient] = None
    min_width: Annotated[FlexibleDimension | None, Lenient] = None
    max_width: Annotated[FlexibleDimension | None, Lenient] = None
    min_height: Annotated[FlexibleDimension | None, Lenient] = None
    max_height: Annotated[FlexibleDimension | None, Lenient] = None
    alignment: Annotated[ZStackAlignment | None, Lenient] = None
    style: Annotated[NodeStyle | None, Lenient] = None


class PaddingProperties(BaseModel):
    """Padding wrapper; ``value`` defaults to 16 when rendered."""

    child: "WidgetNode"
    edges: Annotated[PaddingEdges | None, Lenient] = None
    value: Annotated[float | None, Lenient] = None
    style: Annotated[NodeStyle | None, Lenient] = None


class ContainerRelativeShapeProperties(BaseModel):
    """Background fill shaped like the widget container.

    The fill color may be spelled ``fill``, ``fill_color``,
    ``background_color`` or ``color``.
    """

    fill: Annotated[ColorValue | None, Lenient] = None
    style: Annotated[NodeStyle | None, Lenient] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        fill = _first_valid(data, ("fill", "fill_color", "background_color", "color"), _COLOR)
        data["fill"] = None if fill is _MISSING else fill
        return _merge_glass_effect(data)


# =============================================================================
# Nodes
# =============================================================================


class _ContainerNode(BaseModel):
    """Base for stack nodes, which may carry children at the node level."""

    @model_validator(mode="before")
    @classmethod
    def _hoist_children(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        hoisted = data.pop("children", None)
        properties = data.get("properties")
        if isinstance(properties, BaseModel):
            return data
        if not isinstance(properties, dict):
            properties = {}
        if not properties.get("children") and hoisted:
            properties = {**properties, "children": hoisted}
        data["properties"] = properties
        return data


class VStackNode(_ContainerNode):
    type: Literal["VStack"] = "VStack"
    properties: StackProperties = Field(default_factory=StackProperties)

    @property
    def children(self) -> list["WidgetNode"]:
        return self.properties.children


class HStackNode(_ContainerNode):
    type: Literal["HStack"] = "HStack"
    properties: StackProperties = Field(default_factory=StackProperties)

    @property
    def children(self) -> list["WidgetNode"]:
        return self.properties.children


class ZStackNode(_ContainerNode):
    type: Literal["ZStack"] = "ZStack"
    properties: ZStackProperties = Field(default_factory=ZStackProperties)

    @property
    def children(self) -> list["WidgetNode"]:
        return self.properties.children


class TextNode(BaseModel):
    type: Literal["Text"] = "Text"
    properties: TextProperties

    @property
    def children(self) -> list["WidgetNode"]:
        return []


class SFSymbolNode(BaseModel):
    type: Literal["SFSymbol"] = "SFSymbol"
    properties: SFSymbolProperties

    @property
    def children(self) -> list["WidgetNode"]:
        return []


class ImageNode(BaseModel):
    type: Literal["Image"] = "Image"
    properties: ImageProperties

    @property
    def children(self) -> list["WidgetNode"]:
        return []


class SpacerNode(BaseModel):
    type: Literal["Spacer"] = "Spacer"
    properties: SpacerProperties | None = None

    @property
    def children(self) -> list["WidgetNode"]:
        return []


class DividerNode(BaseModel):
    type: Literal["Divider"] = "Divider"
    properties: DividerProperties | None = None

    @property
    def children(self) -> list["WidgetNode"]:
        return []


class GaugeNode(BaseModel):
    type: Literal["Gauge"] = "Gauge"
    properties: GaugeProperties

    @property
    def children(self) -> list["WidgetNode"]:
        return []


class FrameNode(BaseModel):
    type: Literal["Frame"] = "Frame"
    properties: FrameProperties

    @property
    def children(self) -> list["WidgetNode"]:
        return [self.properties.child]


class PaddingNode(BaseModel):
    type: Literal["Padding"] = "Padding"
    properties: PaddingProperties

    @property
    def children(self) -> list["WidgetNode"]:
        return [self.properties.child]


class ContainerRelativeShapeNode(BaseModel):
    type: Literal["ContainerRelativeShape"] = "ContainerRelativeShape"
    properties: ContainerRelativeShapeProperties | None = None

    @property
    def children(self) -> list["WidgetNode"]:
        return []


WidgetNode = Annotated[
    Union[
        VStackNode,
        HStackNode,
        ZStackNode,
        TextNode,
        SFSymbolNode,
        ImageNode,
        SpacerNode,
        DividerNode,
        GaugeNode,
        FrameNode,
        PaddingNode,
        ContainerRelativeShapeNode,
    ],
    Field(discriminator="type"),
]

StackProperties.model_rebuild()
ZStackProperties.model_rebuild()
FrameProperties.model_rebuild()
PaddingProperties.model_rebuild()
VStackNode.model_rebuild()
HStackNode.model_rebuild()
ZStackNode.model_rebuild()
FrameNode.model_rebuild()
PaddingNode.model_rebuild()


# =============================================================================
# Tree helpers
# =============================================================================


def node_children(node: WidgetNode) -> list[WidgetNode]:
    """Stacks return their children, Frame/Padding their single child."""
    return node.children


def iter_nodes(node: WidgetNode) -> Iterator[WidgetNode]:
    """Yield `node` and all of its descendants, depth-first pre-order."""
    yield node
    for child in node.children:
        yield from iter_nodes(child)


def count_nodes(node: WidgetNode) -> int:
    return sum(1 for _ in iter_nodes(node))


# =============================================================================
# Config envelope
# =============================================================================


class WidgetFamily(str, Enum):
    """Target size/shape classes a widget can be rendered for."""

    SYSTEM_SMALL = "systemSmall"
    SYSTEM_MEDIUM = "systemMedium"
    SYSTEM_LARGE = "systemLarge"
    ACCESSORY_CIRCULAR = "accessoryCircular"
    ACCESSORY_RECTANGULAR = "accessoryRectangular"
    ACCESSORY_INLINE = "accessoryInline"


class DataSource(str, Enum):
    """External data domains that placeholders can reference."""

    WEATHER = "weather"
    CALENDAR = "calendar"
    HEALTH = "health"
    BATTERY = "battery"
    DATE_TIME = "date_time"
    LOCATION = "location"
    DEVICE = "device"
    CONTACTS = "contacts"
    MUSIC = "music"
    REMINDERS = "reminders"


class DataBinding(BaseModel):
    """Explicit binding equivalent to an inline ``{{source.field}}``.

    ``fallback`` is used by the render-context builder when no provider
    supplies the key. ``format`` is carried for hosts that apply it.
    """

    source: DataSource
    field: str
    format: str | None = None
    fallback: str | None = None

    @property
    def key(self) -> str:
        return f"{self.source.value}.{self.field}"


class WidgetMetadata(BaseModel):
    created_at: datetime | None = None
    updated_at: datetime | None = None
    conversation_id: UUID | None = None
    tags: list[str] | None = None
    thumbnail_data: Base64Bytes | None = None


class WidgetConfig(BaseModel):
    """Root of a widget definition.

    ``id`` is assigned once and never changes; edits bump
    ``metadata.updated_at`` through `touch`.
    """

    id: UUID = Field(default_factory=uuid4)
    schema_version: str = CURRENT_SCHEMA_VERSION
    name: str
    description: str | None = None
    family: WidgetFamily = WidgetFamily.SYSTEM_SMALL
    root: WidgetNode
    metadata: WidgetMetadata | None = None
    data_bindings: dict[str, DataBinding] | None = None


def migrate(config: WidgetConfig) -> WidgetConfig:
    """Bring `config` up to CURRENT_SCHEMA_VERSION.

    Every known version shares the current layout, so this only rewrites the
    version string. Version-specific upgrade steps belong here.
    """
    if config.schema_version == CURRENT_SCHEMA_VERSION:
        return config
    return config.model_copy(update={"schema_version": CURRENT_SCHEMA_VERSION})


def touch(config: WidgetConfig, now: datetime | None = None) -> WidgetConfig:
    """Return `config` with ``metadata.updated_at`` set to `now`."""
    now = now or datetime.now(timezone.utc)
    metadata = config.metadata or WidgetMetadata(created_at=now)
    metadata = metadata.model_copy(update={"updated_at": now})
    return config.model_copy(update={"metadata": metadata})


__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "DEFAULT_SYMBOL_NAME",
    "DEFAULT_GAUGE_VALUE",
    "FlexibleDimension",
    # Enums
    "NodeType",
    "StackAlignment",
    "ZStackAlignment",
    "TextAlignment",
    "SymbolRenderingMode",
    "ImageSourceType",
    "ImageContentMode",
    "GaugeStyle",
    "PaddingEdges",
    "WidgetFamily",
    "DataSource",
    # Properties
    "StackProperties",
    "ZStackProperties",
    "TextProperties",
    "SFSymbolProperties",
    "ImageSource",
    "ImageProperties",
    "SpacerProperties",
    "DividerProperties",
    "GaugeProperties",
    "FrameProperties",
    "PaddingProperties",
    "ContainerRelativeShapeProperties",
    # Nodes
    "VStackNode",
    "HStackNode",
    "ZStackNode",
    "TextNode",
    "SFSymbolNode",
    "ImageNode",
    "SpacerNode",
    "DividerNode",
    "GaugeNode",
    "FrameNode",
    "PaddingNode",
    "ContainerRelativeShapeNode",
    "WidgetNode",
    # Config
    "DataBinding",
    "WidgetMetadata",
    "WidgetConfig",
    # Functions
    "node_children",
    "iter_nodes",
    "count_nodes",
    "migrate",
    "touch",
]
