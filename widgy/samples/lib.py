"""Sample widget configs used by the CLI, previews and tests."""

from widgy.schema import (
    GaugeNode,
    GaugeProperties,
    GaugeStyle,
    HStackNode,
    SFSymbolNode,
    SFSymbolProperties,
    SpacerNode,
    StackAlignment,
    StackProperties,
    SymbolRenderingMode,
    TextAlignment,
    TextNode,
    TextProperties,
    VStackNode,
    WidgetConfig,
    WidgetFamily,
)
from widgy.style import (
    ColorValue,
    FontDescriptor,
    FontDesign,
    FontStyle,
    FontWeight,
    NodeStyle,
    SemanticColor,
    SystemColor,
)

_PRIMARY = ColorValue.from_semantic(SemanticColor.PRIMARY)
_SECONDARY_LABEL = ColorValue.from_semantic(SemanticColor.SECONDARY_LABEL)

SIMPLE_CLOCK = WidgetConfig(
    name="Simple Clock",
    description="A clean time display widget",
    family=WidgetFamily.SYSTEM_SMALL,
    root=VStackNode(
        properties=StackProperties(
            children=[
                TextNode(
                    properties=TextProperties(
                        content="{{date_time.time}}",
                        font=FontDescriptor(
                            style=FontStyle.LARGE_TITLE,
                            weight=FontWeight.BOLD,
                            design=FontDesign.ROUNDED,
                        ),
                        color=_PRIMARY,
                        alignment=TextAlignment.CENTER,
                    )
                ),
                TextNode(
                    properties=TextProperties(
                        content="{{date_time.date}}",
                        font=FontDescriptor(style=FontStyle.CAPTION, weight=FontWeight.MEDIUM),
                        color=_SECONDARY_LABEL,
                        alignment=TextAlignment.CENTER,
                    )
                ),
            ],
            alignment=StackAlignment.CENTER,
            spacing=4,
        )
    ),
)

WEATHER_WIDGET = WidgetConfig(
    name="Weather Overview",
    description="Current temperature and conditions",
    family=WidgetFamily.SYSTEM_SMALL,
    root=VStackNode(
        properties=StackProperties(
            children=[
                HStackNode(
                    properties=StackProperties(
                        children=[
                            SFSymbolNode(
                                properties=SFSymbolProperties(
                                    system_name="sun.max.fill",
                                    color=ColorValue.from_system(SystemColor.YELLOW),
                                    font_size=32,
                                    rendering_mode=SymbolRenderingMode.MULTICOLOR,
                                )
                            ),
                            SpacerNode(),
                        ]
                    )
                ),
                SpacerNode(),
                TextNode(
                    properties=TextProperties(
                        content="{{weather.temperature}}",
                        font=FontDescriptor(style=FontStyle.LARGE_TITLE, weight=FontWeight.BOLD),
                        color=_PRIMARY,
                    )
                ),
                TextNode(
                    properties=TextProperties(
                        content="{{weather.condition}}",
                        font=FontDescriptor(style=FontStyle.SUBHEADLINE),
                        color=_SECONDARY_LABEL,
                    )
                ),
            ],
            alignment=StackAlignment.LEADING,
            spacing=4,
            style=NodeStyle(glass_effect=True),
        )
    ),
)

BATTERY_WIDGET = WidgetConfig(
    name="Battery Level",
    description="Battery percentage with gauge",
    family=WidgetFamily.SYSTEM_SMALL,
    root=VStackNode(
        properties=StackProperties(
            children=[
                HStackNode(
                    properties=StackProperties(
                        children=[
                            SFSymbolNode(
                                properties=SFSymbolProperties(
                                    system_name="battery.75percent",
                                    color=ColorValue.from_system(SystemColor.GREEN),
                                    font_size=20,
                                )
                            ),
                            TextNode(
                                properties=TextProperties(
                                    content="Battery",
                                    font=FontDescriptor(
                                        style=FontStyle.HEADLINE, weight=FontWeight.SEMIBOLD
                                    ),
                                    color=_PRIMARY,
                                )
                            ),
                        ],
                        spacing=6,
                    )
                ),
                SpacerNode(),
                GaugeNode(
                    properties=GaugeProperties(
                        value=0.75,
                        label="Battery",
                        current_value_label="75%",
                        gauge_style=GaugeStyle.LINEAR,
                        tint=ColorValue.from_system(SystemColor.GREEN),
                    )
                ),
                TextNode(
                    properties=TextProperties(
                        content="{{battery.level}}",
                        font=FontDescriptor(style=FontStyle.TITLE, weight=FontWeight.BOLD),
                        color=_PRIMARY,
                        alignment=TextAlignment.CENTER,
                    )
                ),
            ],
            alignment=StackAlignment.LEADING,
            spacing=8,
        )
    ),
)

SAMPLES: dict[str, WidgetConfig] = {
    "simple_clock": SIMPLE_CLOCK,
    "weather": WEATHER_WIDGET,
    "battery": BATTERY_WIDGET,
}

ALL_SAMPLES: list[WidgetConfig] = list(SAMPLES.values())


def get_sample(name: str) -> WidgetConfig:
    """Look up a sample by name.

    Raises:
        KeyError: If no sample has that name.
    """
    try:
        return SAMPLES[name]
    except KeyError:
        raise KeyError(f"Unknown sample '{name}'. Available: {', '.join(SAMPLES)}") from None


__all__ = [
    "SIMPLE_CLOCK",
    "WEATHER_WIDGET",
    "BATTERY_WIDGET",
    "SAMPLES",
    "ALL_SAMPLES",
    "get_sample",
]
