"""Output generation module for widget visualization.

Provides human-readable text representations of widget trees, rendered
visual trees and validation findings.
"""

from widgy.output.lib import (
    WidgetOutput,
    format_validation,
    format_visual_tree,
    format_widget_tree,
    generate_output,
)

__all__ = [
    "format_widget_tree",
    "format_visual_tree",
    "format_validation",
    "generate_output",
    "WidgetOutput",
]
