"""Style value model: colors, backgrounds, fonts and the NodeStyle bag."""

from .lib import (
    BackgroundType,
    BackgroundValue,
    BorderDescriptor,
    ColorType,
    ColorValue,
    FontDescriptor,
    FontDesign,
    FontStyle,
    FontWeight,
    GradientDescriptor,
    GradientPoint,
    GradientType,
    NodeStyle,
    SemanticColor,
    ShadowDescriptor,
    SystemColor,
)

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
