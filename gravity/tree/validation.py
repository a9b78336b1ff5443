"""Document validation — check a tree before laying it out."""

from __future__ import annotations

import math

from shapely.geometry import box as shapely_box

from .models import ElementTree


def validate_tree(tree: ElementTree, root: int, flag: str = "gravity") -> list[str]:
    """Validate the subtree at *root*. Returns error messages (empty = valid)."""
    errors: list[str] = []

    def _label(handle: int) -> str:
        name = tree.get(handle).name
        return f"'{name}'" if name else f"#{handle}"

    # ── Names must be unique (they are the human-facing ids) ──
    seen: dict[str, int] = {}
    for h in tree.walk(root):
        name = tree.get(h).name
        if not name:
            continue
        if name in seen:
            errors.append(f"Duplicate element name '{name}'")
        seen[name] = h

    # ── Box sanity ──
    for h in tree.walk(root):
        el = tree.get(h)
        if el.box is None:
            if el.rendered:
                errors.append(f"Element {_label(h)}: rendered but has no box")
            continue
        for dim in ("top", "left", "width", "height"):
            value = getattr(el.box, dim)
            if not math.isfinite(value):
                errors.append(f"Element {_label(h)}: box.{dim} is not finite")
        if el.box.width < 0 or el.box.height < 0:
            errors.append(f"Element {_label(h)}: box has negative size")

    # ── Flagged children ──
    for h in tree.find(root, flag):
        el = tree.get(h)
        if h == root or el.parent is None:
            errors.append(f"Element {_label(h)}: flagged for layout but has no parent")
            continue
        parent = tree.get(el.parent)
        if el.box is None or parent.box is None:
            continue
        if el.box.height == 0 and el.box.width == 0:
            continue
        outer = shapely_box(parent.box.left, parent.box.top,
                            parent.box.left + parent.box.width,
                            parent.box.top + parent.box.height)
        inner = shapely_box(el.box.left, el.box.top,
                            el.box.left + el.box.width,
                            el.box.top + el.box.height)
        if not outer.covers(inner):
            errors.append(
                f"Element {_label(h)}: box extends outside its parent "
                f"{_label(el.parent)}"
            )

    return errors
