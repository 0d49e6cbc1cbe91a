"""Color, background and font resolution.

Turns the declarative style values of the schema into concrete paint and
font descriptions that a host toolkit can draw directly.
"""

import re
from dataclasses import dataclass

from widgy.style import (
    BackgroundType,
    BackgroundValue,
    ColorType,
    ColorValue,
    FontDescriptor,
    FontDesign,
    FontStyle,
    FontWeight,
    GradientDescriptor,
    GradientType,
    SemanticColor,
    SystemColor,
)

_LEADING_HEX = re.compile(r"[0-9A-Fa-f]+")


@dataclass(frozen=True)
class RGBA:
    """A fixed color with components in the 0.0-1.0 range."""

    red: float
    green: float
    blue: float
    alpha: float = 1.0

    def to_hex(self) -> str:
        """Format as ``#RRGGBB``, or ``#RRGGBBAA`` when not fully opaque."""
        parts = [self.red, self.green, self.blue]
        if self.alpha < 1.0:
            parts.append(self.alpha)
        return "#" + "".join(f"{round(p * 255):02X}" for p in parts)

    def with_alpha(self, alpha: float) -> "RGBA":
        return RGBA(self.red, self.green, self.blue, alpha)


@dataclass(frozen=True)
class DynamicColor:
    """A color role the host resolves for the current appearance.

    Attributes:
        role: Host role token, e.g. ``secondaryLabel`` or ``accentColor``.
    """

    role: str


Paint = RGBA | DynamicColor

CLEAR = RGBA(0.0, 0.0, 0.0, 0.0)
BLACK = RGBA(0.0, 0.0, 0.0)
WHITE = RGBA(1.0, 1.0, 1.0)

SYSTEM_COLORS: dict[SystemColor, RGBA] = {
    SystemColor.RED: RGBA(1.0, 0.231, 0.188),
    SystemColor.ORANGE: RGBA(1.0, 0.584, 0.0),
    SystemColor.YELLOW: RGBA(1.0, 0.8, 0.0),
    SystemColor.GREEN: RGBA(0.204, 0.78, 0.349),
    SystemColor.MINT: RGBA(0.0, 0.78, 0.745),
    SystemColor.TEAL: RGBA(0.188, 0.69, 0.78),
    SystemColor.CYAN: RGBA(0.196, 0.678, 0.902),
    SystemColor.BLUE: RGBA(0.0, 0.478, 1.0),
    SystemColor.INDIGO: RGBA(0.345, 0.337, 0.839),
    SystemColor.PURPLE: RGBA(0.686, 0.322, 0.871),
    SystemColor.PINK: RGBA(1.0, 0.176, 0.333),
    SystemColor.BROWN: RGBA(0.635, 0.518, 0.369),
    SystemColor.WHITE: WHITE,
    SystemColor.BLACK: BLACK,
    SystemColor.GRAY: RGBA(0.557, 0.557, 0.576),
    SystemColor.CLEAR: CLEAR,
}

# Role tokens as the host names them; only the accent role differs.
SEMANTIC_ROLES: dict[SemanticColor, str] = {c: c.value for c in SemanticColor}
SEMANTIC_ROLES[SemanticColor.ACCENT] = "accentColor"


def color_from_hex(value: str) -> RGBA:
    """Parse a hex color string.

    Every ``#`` and surrounding whitespace is stripped first. The number is
    read from the leading hex digits; the digit count of the cleaned string
    selects the layout (RGB, RGBA, RRGGBB or RRGGBBAA). Any other length
    yields clear.
    """
    cleaned = value.strip().replace("#", "")
    match = _LEADING_HEX.match(cleaned)
    rgb = int(match.group(0), 16) if match else 0

    length = len(cleaned)
    if length == 3:
        return RGBA(((rgb >> 8) & 0xF) / 15, ((rgb >> 4) & 0xF) / 15, (rgb & 0xF) / 15)
    if length == 4:
        return RGBA(
            ((rgb >> 12) & 0xF) / 15,
            ((rgb >> 8) & 0xF) / 15,
            ((rgb >> 4) & 0xF) / 15,
            (rgb & 0xF) / 15,
        )
    if length == 6:
        return RGBA(((rgb >> 16) & 0xFF) / 255, ((rgb >> 8) & 0xFF) / 255, (rgb & 0xFF) / 255)
    if length == 8:
        return RGBA(
            ((rgb >> 24) & 0xFF) / 255,
            ((rgb >> 16) & 0xFF) / 255,
            ((rgb >> 8) & 0xFF) / 255,
            (rgb & 0xFF) / 255,
        )
    return CLEAR


def resolve_color(color: ColorValue) -> Paint:
    """Resolve a schema color to a paint."""
    if color.type == ColorType.HEX:
        return color_from_hex(color.value)
    if color.type == ColorType.SYSTEM:
        return SYSTEM_COLORS[color.system_color]
    return resolve_semantic(color.semantic_color)


def resolve_semantic(color: SemanticColor) -> DynamicColor:
    return DynamicColor(SEMANTIC_ROLES[color])


@dataclass(frozen=True)
class Gradient:
    """A resolved gradient fill.

    Linear gradients use `start` and `end`. Radial and angular gradients
    are centered on `start`; radial ones also carry their radii.
    """

    type: GradientType
    colors: tuple[Paint, ...]
    start: tuple[float, float]
    end: tuple[float, float] | None = None
    start_radius: float | None = None
    end_radius: float | None = None


DEFAULT_GRADIENT_START = (0.5, 0.0)
DEFAULT_GRADIENT_END = (0.5, 1.0)
RADIAL_END_RADIUS = 200.0


def resolve_gradient(descriptor: GradientDescriptor) -> Gradient:
    colors = tuple(resolve_color(c) for c in descriptor.colors)
    start = (
        (descriptor.start_point.x, descriptor.start_point.y)
        if descriptor.start_point
        else DEFAULT_GRADIENT_START
    )
    end = (
        (descriptor.end_point.x, descriptor.end_point.y)
        if descriptor.end_point
        else DEFAULT_GRADIENT_END
    )

    if descriptor.type == GradientType.RADIAL:
        return Gradient(descriptor.type, colors, start, start_radius=0.0, end_radius=RADIAL_END_RADIUS)
    if descriptor.type == GradientType.ANGULAR:
        return Gradient(descriptor.type, colors, start)
    return Gradient(descriptor.type, colors, start, end)


def resolve_background(background: BackgroundValue) -> Paint | Gradient:
    """Resolve a background to either a solid paint or a gradient."""
    if background.type == BackgroundType.GRADIENT and background.gradient is not None:
        return resolve_gradient(background.gradient)
    if background.color is not None:
        return resolve_color(background.color)
    return CLEAR


@dataclass(frozen=True)
class ResolvedFont:
    """A concrete font request.

    Exactly one of `text_style` and `size` is set: a named text style scales
    with the user's text size, an explicit size does not.
    """

    text_style: FontStyle | None = None
    size: float | None = None
    weight: FontWeight | None = None
    design: FontDesign | None = None


DEFAULT_SYMBOL_SIZE = 17.0


def resolve_font(font: FontDescriptor | None) -> ResolvedFont | None:
    """Resolve a font descriptor; a named style takes precedence over a size."""
    if font is None:
        return None
    if font.style is not None:
        return ResolvedFont(text_style=font.style, weight=font.weight, design=font.design)
    if font.size is not None:
        return ResolvedFont(size=font.size, weight=font.weight, design=font.design)
    return ResolvedFont(text_style=FontStyle.BODY, weight=font.weight, design=font.design)


def symbol_font(size: float | None, weight: FontWeight | None) -> ResolvedFont:
    return ResolvedFont(
        size=size if size is not None else DEFAULT_SYMBOL_SIZE,
        weight=weight or FontWeight.REGULAR,
    )


__all__ = [
    "RGBA",
    "DynamicColor",
    "Paint",
    "CLEAR",
    "BLACK",
    "WHITE",
    "SYSTEM_COLORS",
    "SEMANTIC_ROLES",
    "color_from_hex",
    "resolve_color",
    "resolve_semantic",
    "Gradient",
    "DEFAULT_GRADIENT_START",
    "DEFAULT_GRADIENT_END",
    "RADIAL_END_RADIUS",
    "resolve_gradient",
    "resolve_background",
    "ResolvedFont",
    "DEFAULT_SYMBOL_SIZE",
    "resolve_font",
    "symbol_font",
]
