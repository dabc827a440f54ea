"""
ui/
---
Presentation layer.

    from ui import render_rods, render_tree
    from ui import playback_controls, disk_selector, …
"""

from ui.canvas import render_rods, render_tree, layout_tree, CanvasConfig

from ui.controls import (
    disk_selector,
    playback_controls,
    call_stack_panel,
    pseudocode_viewer,
    explanation_panel,
    analytics_panel,
)

__all__ = [
    "render_rods",
    "render_tree",
    "layout_tree",
    "CanvasConfig",
    "disk_selector",
    "playback_controls",
    "call_stack_panel",
    "pseudocode_viewer",
    "explanation_panel",
    "analytics_panel",
]
