"""Style value model shared by every widget node.

Colors, backgrounds, gradients, fonts, shadows and borders, plus the
`NodeStyle` bag that any node may carry. Colors and backgrounds accept
shorthand spellings on input and always serialize to their canonical
object form.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class SystemColor(str, Enum):
    """Named platform colors."""

    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    MINT = "mint"
    TEAL = "teal"
    CYAN = "cyan"
    BLUE = "blue"
    INDIGO = "indigo"
    PURPLE = "purple"
    PINK = "pink"
    BROWN = "brown"
    WHITE = "white"
    BLACK = "black"
    GRAY = "gray"
    CLEAR = "clear"


class SemanticColor(str, Enum):
    """Semantic color roles resolved by the host appearance."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    LABEL = "label"
    SECONDARY_LABEL = "secondaryLabel"
    TERTIARY_LABEL = "tertiaryLabel"
    SYSTEM_BACKGROUND = "systemBackground"
    SECONDARY_SYSTEM_BACKGROUND = "secondarySystemBackground"
    SEPARATOR = "separator"
    ACCENT = "accent"


class ColorType(str, Enum):
    """Discriminator for ColorValue."""

    HEX = "hex"
    SYSTEM = "system"
    SEMANTIC = "semantic"


_SYSTEM_VALUES = {c.value for c in SystemColor}
_SEMANTIC_VALUES = {c.value for c in SemanticColor}


class ColorValue(BaseModel):
    """A color given as hex, a named system color, or a semantic role.

    Accepted input shapes:
        "#FF0000"                         -> hex
        "red"                             -> system
        "secondaryLabel"                  -> semantic
        "FF0000"                          -> hex (anything unrecognized)
        {"type": "system", "value": "x"}  -> system, unknown names become blue
        {"type": "semantic", ...}         -> semantic, unknown roles become primary
        {"type": "other", "value": "x"}   -> hex

    Always serialized as ``{"type": ..., "value": ...}``.
    """

    type: ColorType = Field(..., description="Color kind: hex, system or semantic")
    value: str = Field(..., description="Hex string, system color name or role")

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if isinstance(data, str):
            if data.startswith("#"):
                return {"type": "hex", "value": data}
            if data in _SYSTEM_VALUES:
                return {"type": "system", "value": data}
            if data in _SEMANTIC_VALUES:
                return {"type": "semantic", "value": data}
            return {"type": "hex", "value": data}

        if not isinstance(data, dict):
            return data
        kind, value = data.get("type"), data.get("value")
        if not isinstance(kind, str) or not isinstance(value, str):
            # Let field validation report the missing or mistyped keys
            return data

        if kind == "system":
            return {"type": "system", "value": value if value in _SYSTEM_VALUES else "blue"}
        if kind == "semantic":
            return {
                "type": "semantic",
                "value": value if value in _SEMANTIC_VALUES else "primary",
            }
        return {"type": "hex", "value": value}

    @classmethod
    def from_hex(cls, value: str) -> "ColorValue":
        return cls(type=ColorType.HEX, value=value)

    @classmethod
    def from_system(cls, color: SystemColor) -> "ColorValue":
        return cls(type=ColorType.SYSTEM, value=SystemColor(color).value)

    @classmethod
    def from_semantic(cls, color: SemanticColor) -> "ColorValue":
        return cls(type=ColorType.SEMANTIC, value=SemanticColor(color).value)

    @property
    def system_color(self) -> SystemColor | None:
        """The named color, for system values."""
        return SystemColor(self.value) if self.type == ColorType.SYSTEM else None

    @property
    def semantic_color(self) -> SemanticColor | None:
        """The role, for semantic values."""
        return SemanticColor(self.value) if self.type == ColorType.SEMANTIC else None


class GradientType(str, Enum):
    LINEAR = "linear"
    RADIAL = "radial"
    ANGULAR = "angular"


class GradientPoint(BaseModel):
    """A point in the unit square; (0, 0) is top-leading."""

    x: float
    y: float


class GradientDescriptor(BaseModel):
    """Gradient fill with one or more color stops."""

    type: GradientType = Field(default=GradientType.LINEAR)
    colors: list[ColorValue] = Field(..., min_length=1)
    start_point: GradientPoint | None = Field(
        default=None,
        description="Defaults to top-center when rendered",
    )
    end_point: GradientPoint | None = Field(
        default=None,
        description="Defaults to bottom-center when rendered",
    )


class BackgroundType(str, Enum):
    COLOR = "color"
    GRADIENT = "gradient"


class BackgroundValue(BaseModel):
    """Solid color or gradient background.

    A bare string is read as a hex color. An object with an unknown ``type``
    decodes to a clear color.
    """

    type: BackgroundType
    color: ColorValue | None = None
    gradient: GradientDescriptor | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"type": "color", "color": {"type": "hex", "value": data}}
        if isinstance(data, dict) and isinstance(data.get("type"), str):
            if data["type"] not in ("color", "gradient"):
                return {"type": "color", "color": {"type": "system", "value": "clear"}}
        return data

    @model_validator(mode="after")
    def _require_payload(self) -> "BackgroundValue":
        if self.type == BackgroundType.COLOR and self.color is None:
            raise ValueError("color background requires a 'color' value")
        if self.type == BackgroundType.GRADIENT and self.gradient is None:
            raise ValueError("gradient background requires a 'gradient' value")
        return self

    @classmethod
    def solid(cls, color: ColorValue) -> "BackgroundValue":
        return cls(type=BackgroundType.COLOR, color=color)

    @classmethod
    def from_gradient(cls, gradient: GradientDescriptor) -> "BackgroundValue":
        return cls(type=BackgroundType.GRADIENT, gradient=gradient)


class FontStyle(str, Enum):
    """Named text styles."""

    LARGE_TITLE = "largeTitle"
    TITLE = "title"
    TITLE2 = "title2"
    TITLE3 = "title3"
    HEADLINE = "headline"
    SUBHEADLINE = "subheadline"
    BODY = "body"
    CALLOUT = "callout"
    FOOTNOTE = "footnote"
    CAPTION = "caption"
    CAPTION2 = "caption2"


class FontWeight(str, Enum):
    ULTRA_LIGHT = "ultraLight"
    THIN = "thin"
    LIGHT = "light"
    REGULAR = "regular"
    MEDIUM = "medium"
    SEMIBOLD = "semibold"
    BOLD = "bold"
    HEAVY = "heavy"
    BLACK = "black"


class FontDesign(str, Enum):
    DEFAULT = "default"
    ROUNDED = "rounded"
    SERIF = "serif"
    MONOSPACED = "monospaced"


class FontDescriptor(BaseModel):
    """Font request: a named style or an explicit size, plus weight/design."""

    style: FontStyle | None = None
    size: float | None = None
    weight: FontWeight | None = None
    design: FontDesign | None = None


class ShadowDescriptor(BaseModel):
    color: ColorValue | None = None
    radius: float
    x: float | None = None
    y: float | None = None


class BorderDescriptor(BaseModel):
    color: ColorValue
    width: float = 1.0


class NodeStyle(BaseModel):
    """Cross-cutting decoration attachable to any node."""

    background: BackgroundValue | None = None
    corner_radius: float | None = None
    opacity: float | None = None
    shadow: ShadowDescriptor | None = None
    border: BorderDescriptor | None = None
    glass_effect: bool | None = None


__all__ = [
    "SystemColor",
    "SemanticColor",
    "ColorType",
    "ColorValue",
    "GradientType",
    "GradientPoint",
    "GradientDescriptor",
    "BackgroundType",
    "BackgroundValue",
    "FontStyle",
    "FontWeight",
    "FontDesign",
    "FontDescriptor",
    "ShadowDescriptor",
    "BorderDescriptor",
    "NodeStyle",
]
