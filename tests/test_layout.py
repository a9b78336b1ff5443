"""Tests for the gravity layout engine.

Uses the page fixture as the primary test case:
  - 800×600 root, attractor at (300, 400)
  - hero: two children, full-delta padding
  - sidebar: one child whose force margins overflow (clamped)
  - footer: attractor above the content, negative padding left unwritten

Validates:
  - Padding policy (all three branches; negative results never written)
  - Overflow clamp of top/bottom margins
  - Alignment thresholds and the authored-alignment guard
  - Per-group failure isolation with untouched styles
  - Idempotent repeated passes, host edits between passes, nested roots
    and teardown
"""

from __future__ import annotations

import unittest
from dataclasses import replace

from gravity.config import Configuration, GravitationPoint
from gravity.layout import (
    GroupLayoutError, LayoutInProgressError, LayoutStep, ResolvedNode, apply_style,
    discover_groups, layout, layout_group, teardown, text_alignment, vertical_padding,
)
from gravity.tree import Box, ElementTree, Style
from tests.page_fixture import make_page


def _styles(tree: ElementTree, root: int) -> dict[int, Style]:
    return {h: replace(tree.get(h).style) for h in tree.walk(root)}


class TestPolicies(unittest.TestCase):
    """Unit tests for the padding and alignment policies."""

    def test_padding_zero_when_content_fills(self):
        for delta in (-500.0, 0.0, 250.0):
            self.assertEqual(vertical_padding(100, 100, delta, 0), 0)
            self.assertEqual(vertical_padding(140, 100, delta, 30), 0)

    def test_padding_full_delta(self):
        # 50 <= 200 - 100 -> delta - container top
        self.assertAlmostEqual(vertical_padding(50, 200, 100, 20), 80)

    def test_padding_clamped_to_slack(self):
        # 50 > 200 - 180 -> container slack
        self.assertAlmostEqual(vertical_padding(50, 200, 180, 0), 150)

    def test_padding_negative_when_attractor_above(self):
        self.assertAlmostEqual(vertical_padding(50, 200, 10, 30), -20)
        self.assertAlmostEqual(vertical_padding(50, 200, -40, 0), -40)

    def test_alignment_thresholds(self):
        # G = 100: left below 50, center where 100 < 1.5c, right otherwise
        self.assertEqual(text_alignment(40, 100), "left")
        self.assertEqual(text_alignment(49.9, 100), "left")
        self.assertEqual(text_alignment(50, 100), "right")
        self.assertEqual(text_alignment(60, 100), "right")
        self.assertEqual(text_alignment(70, 100), "center")
        self.assertEqual(text_alignment(80, 100), "center")


class TestPageLayout(unittest.TestCase):
    """Integration test using the page fixture."""

    def setUp(self):
        self.tree, self.root = make_page()
        self.h = {self.tree.get(x).name: x for x in self.tree.walk(self.root)}

    def style(self, name: str) -> Style:
        return self.tree.get(self.h[name]).style

    def test_layout_succeeds(self):
        result = layout(self.tree, self.root)
        self.assertTrue(result.ok)
        self.assertEqual(len(result.groups), 3)
        self.assertEqual(result.attractor.name, "g1")
        self.assertAlmostEqual(result.attractor.top, 300)
        self.assertAlmostEqual(result.attractor.left, 400)

    def test_hero_metrics(self):
        result = layout(self.tree, self.root)
        m = result.groups[0].metrics
        self.assertEqual((m.container_width, m.container_height), (800, 600))
        self.assertAlmostEqual(m.content_width, 661.8)
        self.assertAlmostEqual(m.content_height, 121.8)
        self.assertAlmostEqual(m.content_center.top, 60.9)
        self.assertAlmostEqual(m.content_center.left, 330.9)
        self.assertAlmostEqual(m.delta.top, 239.1)
        self.assertAlmostEqual(m.delta.left, 69.1)
        self.assertAlmostEqual(m.padding_top, 239.1)

    def test_hero_styles_written(self):
        layout(self.tree, self.root)
        self.assertAlmostEqual(self.style("hero").padding_top, 239.1)

        title = self.style("title")
        for side in ("margin_top", "margin_right", "margin_bottom", "margin_left"):
            self.assertAlmostEqual(getattr(title, side), 24.72)
        self.assertAlmostEqual(self.style("lead").margin_top, 6.18)

    def test_child_force_and_center(self):
        result = layout(self.tree, self.root)
        title = result.groups[0].children[0]
        self.assertAlmostEqual(title.force, 24.72)
        self.assertAlmostEqual(title.center.top, 30)
        self.assertAlmostEqual(title.center.left, 200)

    def test_alignment_only_for_start(self):
        layout(self.tree, self.root)
        # title centre 200: not < 200, and 400 < 300 is false -> right
        self.assertEqual(self.style("title").text_align, "right")
        # lead has an authored alignment that must survive
        self.assertEqual(self.style("lead").text_align, "justify")
        self.assertEqual(self.style("badge").text_align, "center")
        self.assertEqual(self.style("note").text_align, "left")
        self.assertEqual(self.style("link").text_align, "center")

    def test_overflow_clamp(self):
        """badge: 80 + 2·(80·0.618) > 100 -> top/bottom = (100 - 80) / 2."""
        result = layout(self.tree, self.root)
        badge = result.groups[1].children[0]
        self.assertTrue(badge.clamped)
        self.assertEqual(badge.margin.top, 10)
        self.assertEqual(badge.margin.bottom, 10)
        self.assertEqual(self.style("badge").margin_top, 10)
        self.assertEqual(self.style("badge").margin_bottom, 10)
        # slack-clamped padding: 80 > 100 - 160
        self.assertAlmostEqual(self.style("sidebar").padding_top, 20)

    def test_clamp_not_triggered_for_small_children(self):
        result = layout(self.tree, self.root)
        for child in result.groups[0].children + result.groups[2].children:
            self.assertFalse(child.clamped)

    def test_negative_padding_not_written(self):
        self.style("footer").padding_top = 12
        result = layout(self.tree, self.root)
        footer = result.groups[2].metrics
        self.assertLess(footer.delta.top, 0)
        self.assertAlmostEqual(footer.padding_top, -732.36)
        # the authored padding survives
        self.assertEqual(self.style("footer").padding_top, 12)
        self.assertAlmostEqual(self.style("note").margin_top, 12.36)

    def test_padding_zero_when_content_overflows(self):
        tree = ElementTree()
        root = tree.create("root", Box(0, 0, 400, 400))
        box = tree.create("box", Box(300, 0, 400, 100), parent=root)
        tree.create("tall", Box(305, 10, 100, 90), parent=box, classes=["gravity"],
                    style=Style(margin_top=10, margin_bottom=10))
        result = layout(tree, root)
        self.assertTrue(result.ok)
        m = result.groups[0].metrics
        self.assertGreaterEqual(m.content_height, m.container_height)
        self.assertEqual(tree.get(box).style.padding_top, 0)

    def test_idempotent(self):
        layout(self.tree, self.root)
        first = _styles(self.tree, self.root)
        layout(self.tree, self.root)
        self.assertEqual(_styles(self.tree, self.root), first)

    def test_teardown_restores_styles(self):
        before = _styles(self.tree, self.root)
        layout(self.tree, self.root)
        layout(self.tree, self.root)
        restored = teardown(self.tree, self.root)
        self.assertGreater(restored, 0)
        self.assertEqual(_styles(self.tree, self.root), before)
        self.assertNotIn(self.root, self.tree.journals)
        # a second teardown has nothing left to undo
        self.assertEqual(teardown(self.tree, self.root), 0)

    def test_host_edit_between_passes_is_authored(self):
        title = self.h["title"]
        layout(self.tree, self.root)
        apply_style(self.tree, title, margin_top=20, text_align="justify")

        layout(self.tree, self.root)
        # (20 / 10) · 24.72
        self.assertAlmostEqual(self.style("title").margin_top, 49.44)
        self.assertAlmostEqual(self.style("title").margin_left, 24.72)
        self.assertEqual(self.style("title").text_align, "justify")
        layout(self.tree, self.root)
        self.assertAlmostEqual(self.style("title").margin_top, 49.44)

        teardown(self.tree, self.root)
        self.assertEqual(self.style("title").margin_top, 20)
        self.assertEqual(self.style("title").margin_left, 10)
        self.assertEqual(self.style("title").text_align, "justify")

    def test_nested_root_reads_authored_values(self):
        for order in ("outer-first", "inner-first"):
            with self.subTest(teardown=order):
                tree, root = make_page()
                h = {tree.get(x).name: x for x in tree.walk(root)}
                before = _styles(tree, root)

                layout(tree, root)
                layout(tree, h["hero"])
                self.assertAlmostEqual(tree.get(h["title"]).style.margin_top, 24.72)
                self.assertAlmostEqual(tree.get(h["hero"]).style.padding_top, 239.1)

                roots = [root, h["hero"]]
                if order == "inner-first":
                    roots.reverse()
                for r in roots:
                    teardown(tree, r)
                self.assertEqual(_styles(tree, root), before)

    def test_layout_group_does_not_write(self):
        before = _styles(self.tree, self.root)
        group = discover_groups(self.tree, self.root)[0]
        plan = layout_group(self.tree, group, ResolvedNode("g", 300, 400))
        self.assertAlmostEqual(plan.metrics.padding_top, 239.1)
        self.assertEqual(_styles(self.tree, self.root), before)

    def test_custom_configuration(self):
        config = Configuration(
            gravitation=(GravitationPoint("top", "0%", "0%"),),
            k=1.0,
            density=10,
        )
        result = layout(self.tree, self.root, config)
        self.assertEqual(result.attractor.name, "top")
        title = result.groups[0].children[0]
        self.assertAlmostEqual(title.force, 40)
        self.assertAlmostEqual(title.margin.left, 40)
        # attractor above every group -> no padding written anywhere
        for g in result.groups:
            self.assertLess(g.metrics.padding_top, 0)
            self.assertEqual(self.tree.get(g.group.parent).style.padding_top, 0)

    def test_only_first_gravitation_point_attracts(self):
        config = Configuration(gravitation=(
            GravitationPoint("main", "50%", "50%"),
            GravitationPoint("other", "0%", "0%"),
        ))
        result = layout(self.tree, self.root, config)
        self.assertEqual(result.attractor.name, "main")
        self.assertAlmostEqual(result.groups[0].metrics.padding_top, 239.1)


class TestFailureIsolation(unittest.TestCase):

    def setUp(self):
        self.tree, self.root = make_page()
        self.h = {self.tree.get(x).name: x for x in self.tree.walk(self.root)}

    def test_failing_group_is_isolated(self):
        """A measurement failure in group 2 leaves groups 1 and 3 laid out."""
        self.tree.get(self.h["badge"]).rendered = False
        before = _styles(self.tree, self.root)

        result = layout(self.tree, self.root)

        self.assertFalse(result.ok)
        self.assertEqual(len(result.errors), 1)
        err = result.errors[0]
        self.assertIsInstance(err, GroupLayoutError)
        self.assertEqual(err.parent, self.h["sidebar"])
        self.assertEqual(err.step, LayoutStep.MEASURE_CHILDREN)

        self.assertEqual(
            [g.group.parent for g in result.groups],
            [self.h["hero"], self.h["footer"]],
        )
        for name in ("sidebar", "badge"):
            self.assertEqual(self.tree.get(self.h[name]).style, before[self.h[name]])
        self.assertAlmostEqual(self.tree.get(self.h["hero"]).style.padding_top, 239.1)
        self.assertEqual(self.tree.get(self.h["note"]).style.text_align, "left")

    def test_zero_size_container(self):
        self.tree.get(self.h["footer"]).box = Box(500, 0, 800, 0)
        result = layout(self.tree, self.root)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].parent, self.h["footer"])
        self.assertEqual(result.errors[0].step, LayoutStep.MEASURE_CONTAINER)
        self.assertEqual(len(result.groups), 2)

    def test_detached_container(self):
        self.tree.detach(self.h["hero"])
        result = layout(self.tree, self.root)
        # detached subtrees are no longer discovered
        self.assertTrue(result.ok)
        self.assertEqual(len(result.groups), 2)

    def test_invalid_authored_margin(self):
        self.tree.get(self.h["note"]).style.margin_left = -3
        result = layout(self.tree, self.root)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].parent, self.h["footer"])
        self.assertIn("margin", result.errors[0].reason)

    def test_unresolvable_attractor_fails_every_group(self):
        self.tree.get(self.root).box = None
        result = layout(self.tree, self.root)
        self.assertEqual(len(result.errors), 3)
        self.assertTrue(all(e.step == LayoutStep.MEASURE_ATTRACTOR for e in result.errors))
        self.assertEqual(result.groups, [])


class TestPassLifecycle(unittest.TestCase):

    def test_on_complete_receives_result(self):
        tree, root = make_page()
        seen = []
        result = layout(tree, root, on_complete=seen.append)
        self.assertEqual(seen, [result])

    def test_reentrant_pass_rejected(self):
        tree, root = make_page()

        def _again(_result):
            layout(tree, root)

        with self.assertRaises(LayoutInProgressError):
            layout(tree, root, on_complete=_again)
        self.assertNotIn(root, tree.busy)
        # the root is usable again afterwards
        self.assertTrue(layout(tree, root).ok)

    def test_empty_document(self):
        tree = ElementTree()
        root = tree.create("root", Box(0, 0, 100, 100))
        result = layout(tree, root)
        self.assertTrue(result.ok)
        self.assertEqual(result.groups, [])
        self.assertIsNone(result.attractor)


if __name__ == "__main__":
    unittest.main()
