"""Geometry reader — read-only snapshots of rendered element geometry."""

from __future__ import annotations

import math
from dataclasses import dataclass

from shapely.geometry import Point as ShapelyPoint, box as shapely_box

from gravity.config import GravitationPoint, Length, parse_length
from gravity.tree.models import ElementTree

from .models import ElementNotRenderedError, InvalidGeometryError, Margins


@dataclass(frozen=True)
class Geometry:
    """Snapshot of one element at read time."""

    outer_width: float
    outer_height: float
    offset_top: float
    offset_left: float
    margin_top: float
    margin_right: float
    margin_bottom: float
    margin_left: float
    text_align: str

    @property
    def margins(self) -> Margins:
        return Margins(self.margin_top, self.margin_right,
                       self.margin_bottom, self.margin_left)


@dataclass(frozen=True)
class ResolvedNode:
    """A gravitation point resolved to absolute page coordinates."""
    name: str
    top: float
    left: float


def measure(tree: ElementTree, handle: int) -> Geometry:
    """Read the current geometry and layout-relevant style of an element.

    Raises
    ------
    ElementNotRenderedError
        The handle is unknown, the element (or an ancestor) is detached
        or hidden, or the element has no box.
    InvalidGeometryError
        A box dimension is negative or not finite.
    """
    if not tree.contains(handle):
        raise ElementNotRenderedError(handle, "unknown handle")
    el = tree.get(handle)
    if not tree.is_attached(handle):
        raise ElementNotRenderedError(handle, "detached from the document")
    if not el.rendered or any(not tree.get(a).rendered for a in tree.ancestors(handle)):
        raise ElementNotRenderedError(handle, "hidden")
    if el.box is None:
        raise ElementNotRenderedError(handle, "no layout box")

    box = el.box
    for name, value in (("width", box.width), ("height", box.height)):
        if not math.isfinite(value) or value < 0:
            raise InvalidGeometryError(name, value)
    for name, value in (("top", box.top), ("left", box.left)):
        if not math.isfinite(value):
            raise InvalidGeometryError(name, value)

    style = el.style
    return Geometry(
        outer_width=box.width,
        outer_height=box.height,
        offset_top=box.top,
        offset_left=box.left,
        margin_top=style.margin_top,
        margin_right=style.margin_right,
        margin_bottom=style.margin_bottom,
        margin_left=style.margin_left,
        text_align=style.text_align,
    )


def resolve_length(value: Length, extent: float) -> float:
    """Resolve ``"50%"`` (of *extent*), ``"12px"`` or a number to pixels."""
    number, unit = parse_length(value)
    if unit == "%":
        return number / 100.0 * extent
    return number


def resolve_gravitation(
    tree: ElementTree,
    root: int,
    points: tuple[GravitationPoint, ...] | list[GravitationPoint],
) -> list[ResolvedNode]:
    """Resolve gravitation points against the root's box.

    Percentages are relative to the root's outer size and offset by the
    root's page position, as an absolutely positioned marker inside the
    root would be.
    """
    g = measure(tree, root)
    return [
        ResolvedNode(
            name=p.name,
            top=g.offset_top + resolve_length(p.top, g.outer_height),
            left=g.offset_left + resolve_length(p.left, g.outer_width),
        )
        for p in points
    ]


def element_box(g: Geometry):
    """Shapely rectangle for a geometry snapshot (x = left, y = top)."""
    return shapely_box(g.offset_left, g.offset_top,
                       g.offset_left + g.outer_width,
                       g.offset_top + g.outer_height)


def contains_point(g: Geometry, top: float, left: float) -> bool:
    """True if the page point lies inside or on the boundary of the element."""
    return element_box(g).covers(ShapelyPoint(left, top))
