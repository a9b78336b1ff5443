"""Main layout engine — single-pass gravity layout per group.

For each group the engine sums the children's force-scaled boxes,
compares the centre of that content block with the attractor, and
derives:

  - top padding for the parent that moves the block toward the attractor
    without pushing it past the container's free space,
  - per-child margins, with top/bottom margins clamped for children whose
    force margins would overflow the container,
  - text alignment for children that have none of their own.

A group's styles are written only after its whole computation succeeds,
so a failing group keeps the styles it had before the pass.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from gravity.config import Configuration, DEFAULT_CONFIG
from gravity.tree.models import ElementTree

from .discovery import FLAG_CLASS, Group, discover_groups
from .forces import force, side_margins
from .geometry import ResolvedNode, contains_point, measure, resolve_gravitation
from .models import (
    ChildMetrics, GroupLayout, GroupMetrics, LayoutResult, LayoutStep, Margins, Point,
    ElementNotRenderedError, GroupLayoutError, InvalidGeometryError, LayoutInProgressError,
)
from .styles import StyleJournal, apply_style, authored_value, restore_styles

log = logging.getLogger(__name__)

START = "start"     # unset / inherited text-align


# ── Policies ───────────────────────────────────────────────────────


def vertical_padding(
    content_height: float,
    container_height: float,
    delta_top: float,
    container_top: float,
) -> float:
    """Top padding for the parent.  First matching rule wins.

    1. Content already fills the container: no room to push, 0.
    2. The attractor is far enough below: apply the full delta, minus
       the container's page offset.
    3. Otherwise clamp to the container's free space.

    The result is negative when the attractor lies above the content;
    such a value is never written, so the parent keeps its padding.
    """
    if content_height >= container_height:
        return 0.0
    if content_height <= container_height - delta_top:
        return delta_top - container_top
    return container_height - content_height


def text_alignment(center_left: float, gravity_left: float) -> str:
    """Horizontal alignment of a child relative to the attractor.

    Left of half the attractor offset aligns left; otherwise the child
    centres when the attractor lies left of 1.5× the child's centre, and
    aligns right when it does not.
    """
    if center_left < gravity_left / 2:
        return "left"
    if gravity_left < (center_left * 3) / 2:
        return "center"
    return "right"


# ── Per-group computation ──────────────────────────────────────────


def layout_group(
    tree: ElementTree,
    group: Group,
    attractor: ResolvedNode,
    config: Configuration = DEFAULT_CONFIG,
    journal: StyleJournal | None = None,
) -> GroupLayout:
    """Compute the layout of one group without writing anything.

    Authored margins and alignment are resolved through *journal* and
    the journals of every other root, so values a previous pass wrote
    are never mistaken for authored ones.

    Raises
    ------
    GroupLayoutError
        If any measurement fails; carries the parent and the step.
    """
    step = LayoutStep.MEASURE_CONTAINER
    try:
        # ── 1. Container and attractor ─────────────────────────────
        container = measure(tree, group.parent)
        if container.outer_width <= 0 or container.outer_height <= 0:
            raise GroupLayoutError(
                group.parent, step,
                f"container has zero size "
                f"({container.outer_width:g}×{container.outer_height:g})",
            )
        a_width = container.outer_width
        a_height = container.outer_height
        offset = Point(container.offset_top, container.offset_left)
        gravity = Point(attractor.top, attractor.left)

        # ── 2. Children: force, centre, margins; accumulate ────────
        step = LayoutStep.MEASURE_CHILDREN
        children: list[ChildMetrics] = []
        authored_align: dict[int, str] = {}
        g_width = 0.0
        g_height = 0.0
        for handle in group.children:
            g = measure(tree, handle)
            f = force(g.outer_height, config.k)
            authored = Margins(
                top=authored_value(tree, handle, "margin_top", g.margin_top, journal),
                right=authored_value(tree, handle, "margin_right", g.margin_right, journal),
                bottom=authored_value(tree, handle, "margin_bottom", g.margin_bottom, journal),
                left=authored_value(tree, handle, "margin_left", g.margin_left, journal),
            )
            m = side_margins(authored, config.density, f)
            child = ChildMetrics(
                handle=handle,
                width=g.outer_width,
                height=g.outer_height,
                force=f,
                center=Point(
                    top=g.offset_top + g.outer_height / 2,
                    left=g.offset_left + g.outer_width / 2,
                ),
                margin=m,
            )
            children.append(child)
            authored_align[handle] = authored_value(
                tree, handle, "text_align", g.text_align, journal)
            g_width += m.left + child.width + m.right
            g_height += m.top + child.height + m.bottom
            log.debug("  #%d: %.1f×%.1f force=%.2f margin=(%.1f, %.1f, %.1f, %.1f)",
                      handle, child.width, child.height, f,
                      m.top, m.right, m.bottom, m.left)

        # ── 3–5. Content centre, delta, padding ────────────────────
        step = LayoutStep.PADDING
        center = Point(
            top=offset.top + g_height / 2,
            left=offset.left + g_width / 2,
        )
        delta = Point(
            top=gravity.top - center.top,
            left=gravity.left - center.left,
        )
        padding_top = vertical_padding(g_height, a_height, delta.top, offset.top)

        # ── 6. Overflow guard (fresh read of each child) ───────────
        step = LayoutStep.OVERFLOW_GUARD
        for child in children:
            guard = measure(tree, child.handle).outer_height * config.k
            if child.height + guard * 2 > a_height:
                fit = (a_height - child.height) / 2
                child.margin = replace(child.margin, top=fit, bottom=fit)
                child.clamped = True

        # ── 7. Text alignment (never overrides an authored value) ──
        step = LayoutStep.ALIGNMENT
        for child in children:
            if authored_align[child.handle] == START:
                child.text_align = text_alignment(child.center.left, gravity.left)

    except (ElementNotRenderedError, InvalidGeometryError) as e:
        raise GroupLayoutError(group.parent, step, str(e)) from e

    return GroupLayout(
        group=group,
        metrics=GroupMetrics(
            container_width=a_width,
            container_height=a_height,
            content_width=g_width,
            content_height=g_height,
            container_offset=offset,
            attractor_offset=gravity,
            content_center=center,
            delta=delta,
            padding_top=padding_top,
        ),
        children=children,
    )


def _write_group(tree: ElementTree, plan: GroupLayout, journal: StyleJournal) -> None:
    """Step 8: write padding, margins and alignment back."""
    if plan.metrics.padding_top >= 0:
        apply_style(tree, plan.group.parent, journal=journal,
                    padding_top=plan.metrics.padding_top)
    else:
        log.debug("Group #%d: negative padding %.1f not written",
                  plan.group.parent, plan.metrics.padding_top)
    for child in plan.children:
        props: dict[str, float | str] = {
            "margin_top": child.margin.top,
            "margin_right": child.margin.right,
            "margin_bottom": child.margin.bottom,
            "margin_left": child.margin.left,
        }
        if child.text_align is not None:
            props["text_align"] = child.text_align
        apply_style(tree, child.handle, journal=journal, **props)


# ── Main entry points ──────────────────────────────────────────────


def layout(
    tree: ElementTree,
    root: int,
    config: Configuration = DEFAULT_CONFIG,
    *,
    flag: str = FLAG_CLASS,
    on_complete: Callable[[LayoutResult], None] | None = None,
) -> LayoutResult:
    """Run one layout pass over every group below *root*.

    Groups are processed in discovery order and fail independently:
    a failing group is reported in ``result.errors`` and left untouched
    while the others are laid out.

    Parameters
    ----------
    tree : ElementTree
        The document; styles are written in place.
    root : int
        Handle of the layout root.  Gravitation points resolve against
        its box.
    config : Configuration
        Force constants and gravitation points.
    on_complete : callable, optional
        Called with the result before the pass is released.

    Raises
    ------
    LayoutInProgressError
        If a pass is already running on *root*.
    """
    if root in tree.busy:
        raise LayoutInProgressError(root)
    tree.busy.add(root)
    try:
        result = _run_pass(tree, root, config, flag)
        if on_complete is not None:
            on_complete(result)
    finally:
        tree.busy.discard(root)
    return result


def _run_pass(
    tree: ElementTree, root: int, config: Configuration, flag: str,
) -> LayoutResult:
    result = LayoutResult(root=root)
    groups = discover_groups(tree, root, flag)
    if not groups:
        log.info("No '%s' elements below #%d, nothing to lay out", flag, root)
        return result

    try:
        nodes = resolve_gravitation(tree, root, config.gravitation)
        root_geometry = measure(tree, root)
    except (ElementNotRenderedError, InvalidGeometryError) as e:
        log.warning("Cannot resolve gravitation on root #%d: %s", root, e)
        result.errors = [
            GroupLayoutError(g.parent, LayoutStep.MEASURE_ATTRACTOR, str(e))
            for g in groups
        ]
        return result

    attractor = nodes[0]
    result.attractor = attractor
    if not contains_point(root_geometry, attractor.top, attractor.left):
        log.warning("Attractor '%s' at (%.1f, %.1f) lies outside root #%d",
                    attractor.name, attractor.top, attractor.left, root)

    journal = tree.journals.setdefault(root, StyleJournal())
    for group in groups:
        try:
            plan = layout_group(tree, group, attractor, config, journal)
        except GroupLayoutError as e:
            log.warning("Skipped group #%d: %s", group.parent, e)
            result.errors.append(e)
            continue
        _write_group(tree, plan, journal)
        result.groups.append(plan)
        log.info("Laid out group #%d: %d children, content %.1f×%.1f, padding-top %.1f",
                 group.parent, len(plan.children),
                 plan.metrics.content_width, plan.metrics.content_height,
                 plan.metrics.padding_top)

    return result


def teardown(tree: ElementTree, root: int) -> int:
    """Reverse every style write made by layout passes on *root*.

    Returns the number of properties restored (0 if *root* was never
    laid out).
    """
    if root in tree.busy:
        raise LayoutInProgressError(root)
    journal = tree.journals.pop(root, None)
    if journal is None:
        return 0
    restored = restore_styles(tree, journal)
    log.info("Tore down root #%d: restored %d style properties", root, restored)
    return restored
