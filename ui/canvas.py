"""
canvas.py — SVG Renderers
==========================
Pure rendering functions:

    render_rods(step, num_disks)                      → SVG of the three rods
    render_tree(tree, cursor, active_node_id, phase)  → SVG of the recursion tree

Design decisions:
  - NO mutation.  Every function is stateless; the caller passes in the
    Step / CallTree / cursor and gets back a string.
  - Disk colour is a lookup by disk number; tree-node colour is a lookup by
    algorithms.call_tree.node_status().
  - Tree layout is computed from the tree alone (leaves get evenly spaced
    slots in call order, parents sit centred over their children), so the
    layout never jumps while scrubbing, only visibility changes.
"""

from typing import Dict, List, Optional, Tuple

from hanoi import PEGS
from algorithms import Step, Phase, CallNode, CallTree, node_status
from algorithms import call_tree as ct


# ---------------------------------------------------------------------------
# Visual Config — color palette, dimensions, fonts
# ---------------------------------------------------------------------------
class CanvasConfig:
    # rods canvas
    width:  int = 900
    height: int = 340
    bg:     str = "#0d1117"

    rod_color:        str = "#484f58"
    rod_width:        int = 10
    base_color:       str = "#30363d"
    label_color:      str = "#e6edf3"
    label_size:       int = 18
    disk_height:      int = 24
    disk_gap:         int = 2
    disk_min_pct:     float = 0.20    # smallest disk, fraction of the slot width
    disk_max_pct:     float = 1.00
    disk_label_color: str = "#ffffff"
    moved_stroke:     str = "#e6edf3"

    disk_colors: List[str] = [
        "#ef4444",   # red
        "#f97316",   # orange
        "#eab308",   # yellow
        "#22c55e",   # green
        "#3b82f6",   # blue
        "#6366f1",   # indigo
        "#a855f7",   # purple
        "#ec4899",   # pink
        "#f87171",
        "#fb923c",
    ]

    # recursion tree
    tree_margin:      int = 50
    tree_h_spacing:   int = 96
    tree_v_spacing:   int = 90
    tree_node_radius: int = 34
    tree_edge_color:  str = "#484f58"
    tree_label_size:  int = 11
    tree_active_stroke: str = "#f97316"

    # status → (fill, text)
    tree_colors: Dict[str, Tuple[str, str]] = {
        ct.LIVE:           ("#1c2128", "#e6edf3"),
        ct.ENTERING:       ("#06b6d4", "#0d1117"),   # cyan
        ct.RECURSING:      ("#f59e0b", "#0d1117"),   # amber
        ct.PREPARING_MOVE: ("#6366f1", "#ffffff"),   # indigo
        ct.MOVING:         ("#10b981", "#0d1117"),   # emerald
        ct.RETURNING:      ("#f43f5e", "#ffffff"),   # rose
        ct.RETURNED:       ("#30363d", "#7d8590"),   # faded grey
    }


CONFIG = CanvasConfig()


# ---------------------------------------------------------------------------
# Rods
# ---------------------------------------------------------------------------
def render_rods(
    step: Step,
    num_disks: int,
    move_count: int = 0,
    config: CanvasConfig = CONFIG,
) -> str:
    """
    Returns an SVG string of the three rods for `step`.

    Args:
        step       : Step (or the navigator's not-started pseudo-step).
        num_disks  : Used to scale disk widths.
        move_count : Shown in the top-right "Disk Moves" badge.
    """
    w, h = config.width, config.height
    slot = w / len(PEGS)
    base_y = h - 50
    top_y = 40

    parts = [
        f'<svg width="{w}" height="{h}" viewBox="0 0 {w} {h}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">',
        f'<rect width="{w}" height="{h}" fill="{config.bg}"/>',
        f'<text x="{w - 16}" y="24" text-anchor="end" font-size="14" '
        f'font-family="\'DM Sans\', sans-serif" fill="{config.label_color}">Disk Moves: {move_count}</text>',
        f'<rect x="20" y="{base_y}" width="{w - 40}" height="8" rx="4" fill="{config.base_color}"/>',
    ]

    moved_disk = step.move.disk if step.move else None

    for i, peg in enumerate(PEGS):
        cx = slot * i + slot / 2
        parts.append(
            f'<rect x="{cx - config.rod_width / 2}" y="{top_y}" width="{config.rod_width}" '
            f'height="{base_y - top_y}" rx="4" fill="{config.rod_color}"/>'
        )
        parts.append(
            f'<text x="{cx}" y="{base_y + 34}" text-anchor="middle" font-size="{config.label_size}" '
            f'font-family="\'DM Sans\', sans-serif" font-weight="700" fill="{config.label_color}">{peg}</text>'
        )
        for level, disk in enumerate(step.rods.get(peg, ())):
            parts.append(_render_disk(disk, level, cx, base_y, slot * 0.8, num_disks, disk == moved_disk, config))

    parts.append("</svg>")
    return "\n".join(parts)


def disk_width_fraction(disk: int, num_disks: int, config: CanvasConfig = CONFIG) -> float:
    """Linear from disk_min_pct (disk 1) to disk_max_pct (disk N)."""
    if num_disks <= 1:
        return config.disk_max_pct
    span = config.disk_max_pct - config.disk_min_pct
    return config.disk_min_pct + span / (num_disks - 1) * (disk - 1)


def _render_disk(
    disk: int,
    level: int,
    cx: float,
    base_y: float,
    slot_width: float,
    num_disks: int,
    moved: bool,
    config: CanvasConfig,
) -> str:
    dw = slot_width * disk_width_fraction(disk, num_disks, config)
    dh = config.disk_height
    x = cx - dw / 2
    y = base_y - (level + 1) * (dh + config.disk_gap)
    fill = config.disk_colors[(disk - 1) % len(config.disk_colors)]
    stroke = f' stroke="{config.moved_stroke}" stroke-width="3"' if moved else ""
    return (
        f'<g class="disk" data-disk="{disk}">'
        f'<rect x="{x}" y="{y}" width="{dw}" height="{dh}" rx="6" fill="{fill}"{stroke}/>'
        f'<text x="{cx}" y="{y + dh / 2 + 5}" text-anchor="middle" font-size="13" font-weight="700" '
        f'font-family="\'DM Sans\', sans-serif" fill="{config.disk_label_color}">{disk}</text>'
        f'</g>'
    )


# ---------------------------------------------------------------------------
# Recursion Tree
# ---------------------------------------------------------------------------
def layout_tree(tree: CallTree) -> Dict[str, Tuple[float, int]]:
    """{node_id: (slot_x, depth)}; slot_x counts leaf slots left → right."""
    positions: Dict[str, Tuple[float, int]] = {}
    next_leaf = 0

    def place(node: CallNode) -> float:
        nonlocal next_leaf
        if node.is_leaf:
            x = float(next_leaf)
            next_leaf += 1
        else:
            xs = [place(child) for child in tree.children(node.id)]
            x = sum(xs) / len(xs)
        positions[node.id] = (x, node.depth)
        return x

    for root in tree.roots():
        place(root)
    return positions


def render_tree(
    tree: CallTree,
    cursor: int,
    active_node_id: Optional[str] = None,
    phase: Phase = Phase.NOT_STARTED,
    config: CanvasConfig = CONFIG,
) -> str:
    """Returns an SVG string of every call node visible at `cursor`."""
    if not len(tree) or cursor < 0:
        return (
            '<p class="placeholder tree-placeholder">'
            'Recursion tree will appear here as the algorithm runs.</p>'
        )

    positions = layout_tree(tree)
    max_slot = max(x for x, _ in positions.values())
    m = config.tree_margin
    w = int(2 * m + max_slot * config.tree_h_spacing)
    h = int(2 * m + tree.max_depth() * config.tree_v_spacing)

    def xy(node_id: str) -> Tuple[float, float]:
        slot_x, depth = positions[node_id]
        return m + slot_x * config.tree_h_spacing, m + depth * config.tree_v_spacing

    parts = [
        f'<svg width="{w}" height="{h}" viewBox="0 0 {w} {h}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">'
    ]

    visible = tree.visible_at(cursor)

    # -- edges first so nodes sit on top --
    for node in visible:
        if node.parent_id is not None:
            (x1, y1), (x2, y2) = xy(node.parent_id), xy(node.id)
            parts.append(
                f'<line x1="{x1}" y1="{y1}" x2="{x2}" y2="{y2}" '
                f'stroke="{config.tree_edge_color}" stroke-width="2"/>'
            )

    for node in visible:
        status = node_status(node, cursor, active_node_id, phase)
        parts.append(_render_tree_node(node, status, node.id == active_node_id, *xy(node.id), config))

    parts.append("</svg>")
    return "\n".join(parts)


def _render_tree_node(
    node: CallNode,
    status: str,
    is_active: bool,
    cx: float,
    cy: float,
    config: CanvasConfig,
) -> str:
    fill, text = config.tree_colors.get(status, config.tree_colors[ct.LIVE])
    stroke = config.tree_active_stroke if is_active else config.tree_edge_color
    stroke_width = 3 if is_active else 1.5
    check = (
        f'<text x="{cx}" y="{cy + 18}" text-anchor="middle" font-size="12" fill="{text}">✓</text>'
        if status == ct.RETURNED else ""
    )
    return (
        f'<g class="tree-node {status}" data-id="{node.id}">'
        f'<title>Node ID: {node.id}, N: {node.count}, {node.source}->{node.target} via {node.aux}</title>'
        f'<circle cx="{cx}" cy="{cy}" r="{config.tree_node_radius}" fill="{fill}" '
        f'stroke="{stroke}" stroke-width="{stroke_width}"/>'
        f'<text x="{cx}" y="{cy + 4}" text-anchor="middle" font-size="{config.tree_label_size}" '
        f'font-family="\'JetBrains Mono\', monospace" font-weight="600" fill="{text}">{node.label}</text>'
        f'{check}'
        f'</g>'
    )
