"""Widget tree schema: node models, config envelope and JSON codec.

Example:
    >>> from widgy.schema import decode_config, encode_config
    >>> config = decode_config(raw_json)
    >>> encode_config(config)["root"]["type"]
    'VStack'
"""

from .codec import (
    DecodeError,
    decode_config,
    decode_node,
    dumps_config,
    encode_config,
    encode_node,
    extract_json,
    parse_widget_config,
)
from .lib import (
    CURRENT_SCHEMA_VERSION,
    DEFAULT_GAUGE_VALUE,
    DEFAULT_SYMBOL_NAME,
    ContainerRelativeShapeNode,
    ContainerRelativeShapeProperties,
    DataBinding,
    DataSource,
    DividerNode,
    DividerProperties,
    FlexibleDimension,
    FrameNode,
    FrameProperties,
    GaugeNode,
    GaugeProperties,
    GaugeStyle,
    HStackNode,
    ImageContentMode,
    ImageNode,
    ImageProperties,
    ImageSource,
    ImageSourceType,
    NodeType,
    PaddingEdges,
    PaddingNode,
    PaddingProperties,
    SFSymbolNode,
    SFSymbolProperties,
    SpacerNode,
    SpacerProperties,
    StackAlignment,
    StackProperties,
    SymbolRenderingMode,
    TextAlignment,
    TextNode,
    TextProperties,
    VStackNode,
    WidgetConfig,
    WidgetFamily,
    WidgetMetadata,
    WidgetNode,
    ZStackAlignment,
    ZStackNode,
    ZStackProperties,
    count_nodes,
    iter_nodes,
    migrate,
    node_children,
    touch,
)

__all__ = [
    # Constants
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
    # Tree helpers
    "node_children",
    "iter_nodes",
    "count_nodes",
    "migrate",
    "touch",
    # Codec
    "DecodeError",
    "decode_node",
    "decode_config",
    "encode_node",
    "encode_config",
    "dumps_config",
    "extract_json",
    "parse_widget_config",
]
